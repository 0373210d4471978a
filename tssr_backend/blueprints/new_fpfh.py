"""New FPFHs, one entry per FPFH planned in the radio installations."""
from functools import partial
from flask import Blueprint
from ..base.indexed_service import IndexedFormService, register_indexed_routes
from ..models import NewFPFHs, NewFPFHsImages
from ..services.derived_counts import get_planned_count
from ..services.image_service import ImageService, indexed_field_pattern

bp = Blueprint('new_fpfh', __name__, url_prefix='/api')

NEW_FPFH_IMAGE_CATEGORIES = [
    'proposed_location',
    'proposed_location_optional',
    'dc_power_source',
    'earth_bus_bar',
]

planned_fpfhs = partial(get_planned_count, column='new_fpfh_installed')

new_fpfh_images = ImageService(
    NewFPFHsImages, 'new_fpfhs',
    field_pattern=indexed_field_pattern('new_fpfh'),
    categories=NEW_FPFH_IMAGE_CATEGORIES,
    max_index=planned_fpfhs,
)


def attach_images(data, session_id):
    data['images'] = new_fpfh_images.list_active(session_id, data['fpfh_index'])
    return data


new_fpfh_service = IndexedFormService(
    model=NewFPFHs,
    label='New FPFH',
    index_field='fpfh_index',
    items_key='fpfhs',
    planned_field='new_fpfh_installed',
    planned_count=planned_fpfhs,
    image_service=new_fpfh_images,
    serialize_hook=attach_images,
)

register_indexed_routes(bp, new_fpfh_service, 'new-fpfh')
