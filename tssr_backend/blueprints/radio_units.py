"""Existing radio units on site."""
from typing import List
from flask import Blueprint
from tssr_shared.schemas import RadioUnit
from ..base.form_service import FormService, register_form_routes
from ..models import RadioUnits, RadioUnitImages
from ..services.derived_counts import get_cabinet_count, get_radio_unit_count
from ..services.image_service import ImageService, indexed_field_pattern

bp = Blueprint('radio_units', __name__, url_prefix='/api')

MAX_RADIO_UNITS = 20

RADIO_UNIT_IMAGE_CATEGORIES = ['front', 'back', 'label', 'ports', 'installation']

radio_unit_images = ImageService(
    RadioUnitImages, 'radio_units',
    field_pattern=indexed_field_pattern('radio_unit'),
    categories=RADIO_UNIT_IMAGE_CATEGORIES,
    max_index=get_radio_unit_count,
)


def number_radio_units(session_id, values, record):
    """Cut the list to ``radio_unit_count`` and number entries by position."""
    if 'radio_units' not in values:
        return values
    if 'radio_unit_count' in values:
        count = values['radio_unit_count']
    else:
        count = record.radio_unit_count if record is not None else 1
    values['radio_units'] = [
        {**{k: v for k, v in unit.items() if k != 'images'}, 'radio_unit_number': n}
        for n, unit in enumerate(values['radio_units'][:count], start=1)
    ]
    return values


def retire_images(session_id, record):
    radio_unit_images.deactivate_indices_above(session_id, record.radio_unit_count)


def pad_radio_units(data, session_id):
    count = data['radio_unit_count'] or 1
    stored = data['radio_units'] or []
    images = radio_unit_images.images_by_index(session_id) if data['has_data'] else {}
    units = []
    for n in range(1, count + 1):
        unit = dict(stored[n - 1]) if n <= len(stored) else RadioUnit().model_dump(mode='json')
        unit['radio_unit_number'] = n
        unit['images'] = images.get(n, [])
        units.append(unit)
    data['radio_units'] = units
    return data


radio_units_service = FormService(
    model=RadioUnits,
    label='Radio units',
    numeric_ranges={'radio_unit_count': (1, MAX_RADIO_UNITS)},
    json_schemas={'radio_units': List[RadioUnit]},
    derived_counts={'number_of_cabinets': get_cabinet_count},
    image_service=radio_unit_images,
    pre_save_hook=number_radio_units,
    post_save_hook=retire_images,
    serialize_hook=pad_radio_units,
)

register_form_routes(bp, radio_units_service, 'radio-units', envelope=True)
