"""New GPS antenna."""
from flask import Blueprint
from ..base.form_service import FormService, register_form_routes
from ..models import NewGPS, NewGPSImages
from ..services.image_service import ImageService

bp = Blueprint('new_gps', __name__, url_prefix='/api')

NEW_GPS_IMAGE_CATEGORIES = ['proposed_location', 'cable_route']

new_gps_images = ImageService(NewGPSImages, 'new_gps', categories=NEW_GPS_IMAGE_CATEGORIES)


def attach_images(data, session_id):
    data['images'] = new_gps_images.list_active(session_id) if data['has_data'] else []
    return data


new_gps_service = FormService(
    model=NewGPS,
    label='New GPS',
    image_service=new_gps_images,
    serialize_hook=attach_images,
)

register_form_routes(bp, new_gps_service, 'new-gps')
