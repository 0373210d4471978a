"""New radio units, one entry per planned radio unit."""
from functools import partial
from flask import Blueprint
from tssr_shared.enums import Technology
from ..base.indexed_service import IndexedFormService, register_indexed_routes
from ..models import NewRadioUnits, NewRadioUnitsImages
from ..services.derived_counts import get_planned_count
from ..services.image_service import ImageService, indexed_field_pattern

bp = Blueprint('new_radio_units', __name__, url_prefix='/api')

NEW_RADIO_UNIT_IMAGE_CATEGORIES = [
    'proposed_location',
    'proposed_location_optional',
    'side_arm',
    'earth_bus_bar',
    'dc_power_source',
]

planned_radio_units = partial(get_planned_count, column='new_radio_units_planned')

new_radio_units_images = ImageService(
    NewRadioUnitsImages, 'new_radio_units',
    field_pattern=indexed_field_pattern('new_radio_unit'),
    categories=NEW_RADIO_UNIT_IMAGE_CATEGORIES,
    max_index=planned_radio_units,
)


def attach_images(data, session_id):
    data['images'] = new_radio_units_images.list_active(session_id, data['radio_unit_index'])
    return data


new_radio_units_service = IndexedFormService(
    model=NewRadioUnits,
    label='New radio unit',
    index_field='radio_unit_index',
    items_key='radio_units',
    planned_field='new_radio_units_planned',
    planned_count=planned_radio_units,
    multi_choices={'connected_antenna_technology': [t.value for t in Technology]},
    image_service=new_radio_units_images,
    serialize_hook=attach_images,
)

register_indexed_routes(bp, new_radio_units_service, 'new-radio-units')
