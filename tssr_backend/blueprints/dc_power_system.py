"""DC power system: rectifiers and batteries."""
from flask import Blueprint
from tssr_shared.schemas import DcPowerData
from ..base.form_service import FormService, register_form_routes
from ..models import DCPowerSystem, DCPowerSystemImages
from ..services.derived_counts import get_cabinet_count, get_dc_power_counts, cabinet_options
from ..services.image_service import ImageService
from ..utils import api_response, handles_service_errors

bp = Blueprint('dc_power_system', __name__, url_prefix='/api')

DC_POWER_IMAGE_CATEGORIES = [
    'overall_rectifier_cabinet_photo',
    'free_slots_rectifier_modules',
    'rectifier_cb_photos',
    'rectifier_free_cb_photo',
    'rect_load_current_reading_photo',
    'existing_site_temperature_photo',
    'rectifier_picture',
    'rectifier_manufactory_specification_picture',
    'battery_model_photo',
    'battery_cb_photo',
    'rectifier_main_ac_cb_photo',
    'pdu_photos',
    'pdu_free_cb',
    'blvd_in_dc_power_rack',
]


def dc_power_categories(session_id):
    """Fixed categories plus one photo per rectifier module and battery string."""
    rectifiers, batteries = get_dc_power_counts(session_id)
    categories = list(DC_POWER_IMAGE_CATEGORIES)
    categories.extend(f'rectifier_module_photo_{n}' for n in range(1, rectifiers + 1))
    categories.extend(f'battery_string_photo_{n}' for n in range(1, batteries + 1))
    return categories


dc_power_images = ImageService(
    DCPowerSystemImages, 'dc_power_system',
    categories=dc_power_categories,
)


def retire_images(session_id, record):
    dc_power_images.deactivate_disallowed_categories(session_id)


def attach_images(data, session_id):
    data['images'] = dc_power_images.list_active(session_id) if data['has_data'] else []
    data['image_categories'] = dc_power_categories(session_id)
    return data


dc_power_service = FormService(
    model=DCPowerSystem,
    label='DC power system',
    json_schemas={'dc_power_data': DcPowerData},
    derived_counts={'number_of_cabinets': get_cabinet_count},
    image_service=dc_power_images,
    post_save_hook=retire_images,
    serialize_hook=attach_images,
)

register_form_routes(bp, dc_power_service, 'dc-power-system', envelope=True)


@bp.route('/dc-power-system/<session_id>/cabinet-options', methods=['GET'])
@handles_service_errors(envelope=True)
def get_cabinet_options(session_id):
    data = dc_power_service.get(session_id)
    return api_response({
        'session_id': data['session_id'],
        'number_of_cabinets': data['number_of_cabinets'],
        'options': cabinet_options(data['session_id']),
    }, envelope=True)
