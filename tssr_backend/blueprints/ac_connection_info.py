"""AC connection info: power sources and generator / solar configuration."""
from flask import Blueprint
from pydantic import ValidationError as PydanticValidationError
from tssr_shared.errors import ValidationError
from tssr_shared.schemas import AcConnectionData
from ..base.form_service import FormService, register_form_routes, pydantic_error_message
from ..models import AcConnectionInfo, AcConnectionImages
from ..services.derived_counts import get_generator_count
from ..services.image_service import ImageService

bp = Blueprint('ac_connection_info', __name__, url_prefix='/api')

AC_FIELDS = ('power_sources', 'diesel_config', 'solar_config')


def ac_image_categories(session_id):
    """Generator photos follow the configured diesel generator count."""
    categories = ['generator_photo']
    for n in range(1, get_generator_count(session_id) + 1):
        categories.extend([f'generator_photo_1_{n}', f'generator_photo_2_{n}'])
    categories.extend(['fuel_tank_photo', 'transformer_photo', 'power_meter_photo', 'ac_panel_photo'])
    return categories


ac_connection_images = ImageService(
    AcConnectionImages, 'ac_connection',
    categories=ac_image_categories,
)


def validate_power_config(session_id, data, record):
    """Validate the sent fields together with the stored ones.

    Generator and solar settings only make sense against the selected power
    sources, so a PATCH of one field is checked against the others.
    """
    merged = {field: getattr(record, field) if record is not None else None for field in AC_FIELDS}
    merged.update({field: data[field] for field in AC_FIELDS if field in data})
    try:
        validated = AcConnectionData.model_validate(merged)
    except PydanticValidationError as e:
        raise ValidationError(pydantic_error_message(e))
    return validated.model_dump(mode='json')


def retire_images(session_id, record):
    ac_connection_images.deactivate_disallowed_categories(session_id)


def present_configs(data, session_id):
    for field in ('diesel_config', 'solar_config'):
        if not data[field]:
            data[field] = None
    data['images'] = ac_connection_images.list_active(session_id) if data['has_data'] else []
    data['image_categories'] = ac_image_categories(session_id)
    return data


ac_connection_service = FormService(
    model=AcConnectionInfo,
    label='AC connection info',
    image_service=ac_connection_images,
    pre_validate_hook=validate_power_config,
    post_save_hook=retire_images,
    serialize_hook=present_configs,
)

register_form_routes(bp, ac_connection_service, 'ac-connection-info', envelope=True)
