"""Existing antenna configuration."""
from typing import List
from flask import Blueprint
from tssr_shared.errors import ValidationError
from tssr_shared.schemas import AntennaEntry
from ..base.form_service import FormService, register_form_routes
from ..models import AntennaConfiguration, AntennaConfigurationImages
from ..services.derived_counts import get_cabinet_count, get_antenna_count
from ..services.image_service import ImageService, indexed_field_pattern

bp = Blueprint('antenna_configuration', __name__, url_prefix='/api')

ANTENNA_IMAGE_CATEGORIES = [
    'photo', 'azimuth_view', 'label', 'mechanical_tilt', 'ret_connector', 'side_arm',
]

antenna_images = ImageService(
    AntennaConfigurationImages, 'antenna_configuration',
    field_pattern=indexed_field_pattern('antenna'),
    categories=ANTENNA_IMAGE_CATEGORIES,
    max_index=get_antenna_count,
)


class AntennaConfigurationService(FormService):
    """A full save must always carry the antennas list."""

    def get_or_create(self, session_id, update_data=None, version=None):
        if update_data is not None and 'antennas' not in update_data:
            raise ValidationError("antennas array is required")
        return super().get_or_create(session_id, update_data, version)


def number_antennas(session_id, values, record):
    """Antennas are numbered by position; the count follows the list."""
    if 'antennas' in values:
        # images are attached on read and never stored
        values['antennas'] = [
            {**{k: v for k, v in antenna.items() if k != 'images'}, 'antenna_number': n}
            for n, antenna in enumerate(values['antennas'], start=1)
        ]
        antennas = values['antennas']
    else:
        antennas = (record.antennas if record is not None else None) or []
    values['antenna_count'] = len(antennas)
    return values


def retire_images(session_id, record):
    antenna_images.deactivate_indices_above(session_id, record.antenna_count)


def attach_images(data, session_id):
    images = antenna_images.images_by_index(session_id) if data['has_data'] else {}
    data['antennas'] = [
        dict(antenna, images=images.get(antenna.get('antenna_number'), []))
        for antenna in data['antennas']
    ]
    return data


antenna_configuration_service = AntennaConfigurationService(
    model=AntennaConfiguration,
    label='Antenna configuration',
    json_schemas={'antennas': List[AntennaEntry]},
    derived_counts={'number_of_cabinets': get_cabinet_count},
    image_service=antenna_images,
    pre_save_hook=number_antennas,
    post_save_hook=retire_images,
    serialize_hook=attach_images,
)

register_form_routes(bp, antenna_configuration_service, 'antenna-configuration', envelope=True)
