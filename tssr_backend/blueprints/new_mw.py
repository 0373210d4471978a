"""New microwave links, one free-form entry per link."""
from flask import Blueprint
from tssr_shared.schemas import FormDocument
from ..base.indexed_service import IndexedFormService, register_indexed_routes
from ..models import NewMW, NewMWImages
from ..services.image_service import ImageService, indexed_field_pattern

bp = Blueprint('new_mw', __name__, url_prefix='/api')

new_mw_images = ImageService(
    NewMWImages, 'new_mw',
    field_pattern=indexed_field_pattern('new_mw'),
)


def attach_images(data, session_id):
    data['images'] = new_mw_images.list_active(session_id, data['mw_index'])
    return data


new_mw_service = IndexedFormService(
    model=NewMW,
    label='New MW link',
    index_field='mw_index',
    items_key='links',
    json_schemas={'fields': FormDocument},
    image_service=new_mw_images,
    serialize_hook=attach_images,
)

register_indexed_routes(bp, new_mw_service, 'new-mw')
