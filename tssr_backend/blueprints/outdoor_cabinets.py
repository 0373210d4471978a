"""Outdoor cabinets: count plus one nested entry per cabinet."""
from typing import List
from flask import Blueprint
from tssr_shared.schemas import Cabinet
from tssr_shared.validation import Validator
from ..base.form_service import FormService, register_form_routes
from ..models import OutdoorCabinets, OutdoorCabinetsImages
from ..services.derived_counts import get_cabinet_count
from ..services.image_service import ImageService, indexed_field_pattern
from ..utils import api_response, handles_service_errors

bp = Blueprint('outdoor_cabinets', __name__, url_prefix='/api')

MAX_CABINETS = 10

CABINET_IMAGE_CATEGORIES = [
    'front', 'back', 'left_side', 'right_side', 'inside',
    'nameplate', 'blvd', 'llvd', 'pdu',
]

cabinet_images = ImageService(
    OutdoorCabinetsImages, 'outdoor_cabinets',
    field_pattern=indexed_field_pattern('cabinet'),
    categories=CABINET_IMAGE_CATEGORIES,
    max_index=get_cabinet_count,
)


def fit_cabinets(session_id, values, record):
    """Keep ``cabinets`` and ``number_of_cabinets`` consistent.

    An explicit count wins and extra cabinets are cut. Without one, a longer
    cabinets list raises the stored count.
    """
    if 'cabinets' not in values:
        return values
    cabinets = values['cabinets']
    if 'number_of_cabinets' in values:
        count = values['number_of_cabinets']
    else:
        current = record.number_of_cabinets if record is not None else 1
        count = max(current, len(cabinets))
        Validator.validate_numeric_range(count, 'number_of_cabinets', 1, MAX_CABINETS, integer=True)
        values['number_of_cabinets'] = count
    values['cabinets'] = [dict(cabinet, id=n) for n, cabinet in enumerate(cabinets[:count], start=1)]
    return values


def retire_images(session_id, record):
    cabinet_images.deactivate_indices_above(session_id, record.number_of_cabinets)


def pad_cabinets(data, session_id):
    """One cabinet per counted slot, each carrying its active images."""
    count = data['number_of_cabinets'] or 1
    stored = data['cabinets'] or []
    images = cabinet_images.images_by_index(session_id) if data['has_data'] else {}
    cabinets = []
    for n in range(1, count + 1):
        cabinet = dict(stored[n - 1]) if n <= len(stored) else Cabinet().model_dump(mode='json')
        cabinet['id'] = n
        cabinet['images'] = images.get(n, [])
        cabinets.append(cabinet)
    data['cabinets'] = cabinets
    return data


outdoor_cabinets_service = FormService(
    model=OutdoorCabinets,
    label='Outdoor cabinets',
    numeric_ranges={'number_of_cabinets': (1, MAX_CABINETS)},
    json_schemas={'cabinets': List[Cabinet]},
    image_service=cabinet_images,
    pre_save_hook=fit_cabinets,
    post_save_hook=retire_images,
    serialize_hook=pad_cabinets,
)

register_form_routes(bp, outdoor_cabinets_service, 'outdoor-cabinets', envelope=True)


def number(value):
    return value if isinstance(value, (int, float)) and not isinstance(value, bool) else 0


@bp.route('/outdoor-cabinets/<session_id>/summary', methods=['GET'])
@handles_service_errors(envelope=True)
def get_cabinet_summary(session_id):
    """Per-cabinet overview and totals used by the report pages."""
    data = outdoor_cabinets_service.get(session_id)
    cabinets = data['cabinets']

    summary = []
    for cabinet in cabinets:
        summary.append({
            'id': cabinet['id'],
            'type': cabinet.get('type', []),
            'vendor': cabinet.get('vendor', ''),
            'model': cabinet.get('model', ''),
            'has_ac_power': bool(cabinet.get('acPowerFeed')),
            'has_blvd': cabinet.get('blvd') == 'Yes',
            'has_llvd': cabinet.get('llvd') == 'Yes',
            'has_pdu': cabinet.get('pdu') == 'Yes',
            'free_u_spaces': cabinet.get('freeU'),
        })

    return api_response({
        'session_id': data['session_id'],
        'total_cabinets': data['number_of_cabinets'],
        'has_data': data['has_data'],
        'cabinet_summary': summary,
        'vendors': sorted({c['vendor'] for c in cabinets if c.get('vendor')}),
        'types': sorted({t for c in cabinets for t in c.get('type', [])}),
        'total_free_u': sum(number(c.get('freeU')) for c in cabinets),
        'total_blvd_free_cbs': sum(number(c.get('blvdFreeCBs')) for c in cabinets),
        'total_llvd_free_cbs': sum(number(c.get('llvdFreeCBs')) for c in cabinets),
        'total_pdu_free_cbs': sum(number(c.get('pduFreeCBs')) for c in cabinets),
    }, envelope=True)
