"""External DC distribution: separate DC PDUs feeding the radio equipment."""
from typing import List
from flask import Blueprint
from tssr_shared.schemas import DcPdu
from ..base.form_service import FormService, register_form_routes
from ..models import ExternalDCDistribution, ExternalDCDistributionImages
from ..services.derived_counts import get_cabinet_count
from ..services.image_service import ImageService, indexed_field_pattern

bp = Blueprint('external_dc_distribution', __name__, url_prefix='/api')

MAX_PDUS = 10

PDU_IMAGE_CATEGORIES = ['pdu_photo', 'pdu_fuses', 'pdu_free_cbs', 'dc_cable_route']


def pdu_count(session_id):
    record = ExternalDCDistribution.query.filter_by(session_id=session_id).first()
    return (record.pdu_count or 0) if record is not None else 0


pdu_images = ImageService(
    ExternalDCDistributionImages, 'external_dc_distribution',
    field_pattern=indexed_field_pattern('pdu'),
    categories=PDU_IMAGE_CATEGORIES,
    max_index=pdu_count,
)


def fit_pdus(session_id, values, record):
    """Keep ``dc_pdus`` in line with the answer and the PDU count.

    Without a separate PDU the list and count are cleared. Otherwise the
    list is cut to ``pdu_count``.
    """
    answer = values.get('has_separate_dc_pdu', record.has_separate_dc_pdu if record is not None else None)
    if answer == 'No':
        values['pdu_count'] = 0
        values['dc_pdus'] = []
        return values
    if 'dc_pdus' in values:
        pdus = [{k: v for k, v in pdu.items() if k != 'images'} for pdu in values['dc_pdus']]
    else:
        pdus = (record.dc_pdus or []) if record is not None else []
    if 'pdu_count' in values:
        count = values['pdu_count']
    else:
        count = record.pdu_count if record is not None else None
    if count is not None:
        pdus = pdus[:count]
    values['dc_pdus'] = pdus
    return values


def retire_images(session_id, record):
    pdu_images.deactivate_indices_above(session_id, record.pdu_count or 0)


def present_pdus(data, session_id):
    data['number_of_cabinets'] = get_cabinet_count(session_id)
    images = pdu_images.images_by_index(session_id) if data['has_data'] else {}
    data['dc_pdus'] = [
        {**pdu, 'images': images.get(n, [])} for n, pdu in enumerate(data['dc_pdus'] or [], start=1)
    ]
    return data


external_dc_service = FormService(
    model=ExternalDCDistribution,
    label='External DC distribution',
    numeric_ranges={'pdu_count': (0, MAX_PDUS)},
    json_schemas={'dc_pdus': List[DcPdu]},
    image_service=pdu_images,
    pre_save_hook=fit_pdus,
    post_save_hook=retire_images,
    serialize_hook=present_pdus,
)

register_form_routes(bp, external_dc_service, 'external-dc-distribution', envelope=True)
