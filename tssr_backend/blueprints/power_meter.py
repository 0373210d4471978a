"""Power meter: meter details, feeding cable, main CB and electrical readings."""
from flask import Blueprint
from tssr_shared.schemas import PowerCableConfig, MainCBConfig, ElectricalMeasurements
from ..base.form_service import FormService, register_form_routes
from ..models import PowerMeter, PowerMeterImages
from ..services.image_service import ImageService

bp = Blueprint('power_meter', __name__, url_prefix='/api')

POWER_METER_IMAGE_CATEGORIES = [
    'meter_photo', 'meter_reading_photo', 'power_cable_photo', 'main_cb_photo',
]

power_meter_images = ImageService(
    PowerMeterImages, 'power_meter',
    categories=POWER_METER_IMAGE_CATEGORIES,
)


def attach_images(data, session_id):
    data['images'] = power_meter_images.list_active(session_id) if data['has_data'] else []
    return data


power_meter_service = FormService(
    model=PowerMeter,
    label='Power meter',
    json_schemas={
        'power_cable_config': PowerCableConfig,
        'main_cb_config': MainCBConfig,
        'electrical_measurements': ElectricalMeasurements,
    },
    image_service=power_meter_images,
    serialize_hook=attach_images,
)

register_form_routes(bp, power_meter_service, 'power-meter', envelope=True)
