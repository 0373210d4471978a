"""Outdoor general layout: equipment area, cable trays and earth bus bar."""
from flask import Blueprint
from tssr_shared.schemas import FormDocument
from ..base.form_service import FormService, register_form_routes
from ..models import OutdoorGeneralLayout, OutdoorGeneralLayoutImages
from ..services.image_service import ImageService

bp = Blueprint('outdoor_general_layout', __name__, url_prefix='/api')

LAYOUT_IMAGE_CATEGORIES = [
    'site_layout', 'equipment_area', 'cable_tray', 'earth_bus_bar', 'site_sketch',
]

layout_images = ImageService(
    OutdoorGeneralLayoutImages, 'outdoor_general_layout',
    categories=LAYOUT_IMAGE_CATEGORIES,
)


def attach_images(data, session_id):
    data['images'] = layout_images.list_active(session_id) if data['has_data'] else []
    return data


outdoor_general_layout_service = FormService(
    model=OutdoorGeneralLayout,
    label='Outdoor general layout',
    numeric_ranges={'free_positions_available': (0, 5)},
    json_schemas={
        'cable_tray_config': FormDocument,
        'earth_bus_bar_config': FormDocument,
    },
    image_service=layout_images,
    serialize_hook=attach_images,
)

register_form_routes(bp, outdoor_general_layout_service, 'outdoor-general-layout', envelope=True)
