"""New antennas, one entry per planned antenna."""
from functools import partial
from flask import Blueprint
from tssr_shared.enums import Technology
from ..base.indexed_service import IndexedFormService, register_indexed_routes
from ..models import NewAntennas, NewAntennasImages
from ..services.derived_counts import get_planned_count
from ..services.image_service import ImageService, indexed_field_pattern

bp = Blueprint('new_antennas', __name__, url_prefix='/api')

NEW_ANTENNA_IMAGE_CATEGORIES = [
    'proposed_location',
    'proposed_location_optional',
    'side_arm',
    'earth_bus_bar',
]

planned_antennas = partial(get_planned_count, column='new_antennas_planned')

new_antennas_images = ImageService(
    NewAntennasImages, 'new_antennas',
    field_pattern=indexed_field_pattern('new_antenna'),
    categories=NEW_ANTENNA_IMAGE_CATEGORIES,
    max_index=planned_antennas,
)


def attach_images(data, session_id):
    data['images'] = new_antennas_images.list_active(session_id, data['antenna_index'])
    return data


new_antennas_service = IndexedFormService(
    model=NewAntennas,
    label='New antenna',
    index_field='antenna_index',
    items_key='antennas',
    planned_field='new_antennas_planned',
    planned_count=planned_antennas,
    multi_choices={'antenna_technology': [t.value for t in Technology]},
    image_service=new_antennas_images,
    serialize_hook=attach_images,
)

register_indexed_routes(bp, new_antennas_service, 'new-antennas')
