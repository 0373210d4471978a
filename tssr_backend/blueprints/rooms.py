"""Equipment room forms: room info and room preparation."""
from flask import Blueprint
from ..base.form_service import FormService, register_form_routes
from ..models import RoomInfo, RoomInfoImages, RoomPreparation, RoomPreparationImages
from ..services.image_service import ImageService

bp = Blueprint('rooms', __name__, url_prefix='/api')

ROOM_INFO_IMAGE_CATEGORIES = [
    'room_photo_1', 'room_photo_2', 'room_photo_3', 'room_photo_4', 'room_sketch',
]

ROOM_PREPARATION_IMAGE_CATEGORIES = [
    'ac_unit', 'cable_tray', 'feeder_window', 'bus_bar', 'rack_free_positions',
]

room_info_images = ImageService(RoomInfoImages, 'room_info', categories=ROOM_INFO_IMAGE_CATEGORIES)
room_preparation_images = ImageService(
    RoomPreparationImages, 'room_preparation', categories=ROOM_PREPARATION_IMAGE_CATEGORIES
)


def attach_room_info_images(data, session_id):
    data['images'] = room_info_images.list_active(session_id) if data['has_data'] else []
    return data


def attach_room_preparation_images(data, session_id):
    data['images'] = room_preparation_images.list_active(session_id) if data['has_data'] else []
    return data


room_info_service = FormService(
    model=RoomInfo,
    label='Room info',
    multi_choices={'hardware': None},
    image_service=room_info_images,
    serialize_hook=attach_room_info_images,
)

room_preparation_service = FormService(
    model=RoomPreparation,
    label='Room preparation',
    image_service=room_preparation_images,
    serialize_hook=attach_room_preparation_images,
)

register_form_routes(bp, room_info_service, 'room-info')
register_form_routes(bp, room_preparation_service, 'room-preparation')
