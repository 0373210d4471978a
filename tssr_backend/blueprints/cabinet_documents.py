"""Room, transmission and MW forms kept as free documents next to the cabinet count.

Each module stores one JSON object per session and reports the live outdoor
cabinet count. The layout of the object is owned by the client.
"""
from flask import Blueprint
from tssr_shared.schemas import FormDocument
from ..base.form_service import FormService, register_form_routes
from ..models import (
    MWAntennas, MWAntennasImages, AntennaStructure, AntennaStructureImages, TransmissionMW,
    TransmissionMWImages, RoomDCPowerSystem, RoomDCPowerSystemImages, RanRoom, RanRoomImages
)
from ..services.derived_counts import get_cabinet_count, cabinet_options
from ..services.image_service import ImageService
from ..utils import api_response, handles_service_errors

bp = Blueprint('cabinet_documents', __name__, url_prefix='/api')


def document_service(model, image_model, label, data_field):
    images = ImageService(image_model, model.__tablename__)

    def attach_images(data, session_id):
        data['images'] = images.list_active(session_id) if data['has_data'] else []
        return data

    return FormService(
        model=model,
        label=label,
        json_schemas={data_field: FormDocument},
        derived_counts={'number_of_cabinets': get_cabinet_count},
        image_service=images,
        serialize_hook=attach_images,
    )


def register_cabinet_options(service, resource):
    """GET /api/{resource}/<session_id>/cabinet-options"""

    @bp.route(f'/{resource}/<session_id>/cabinet-options', methods=['GET'],
              endpoint=f"{resource.replace('-', '_')}_cabinet_options")
    @handles_service_errors(envelope=True)
    def get_cabinet_options(session_id):
        data = service.get(session_id)
        return api_response({
            'session_id': data['session_id'],
            'number_of_cabinets': data['number_of_cabinets'],
            'options': cabinet_options(data['session_id']),
        }, envelope=True)


mw_antennas_service = document_service(MWAntennas, MWAntennasImages, 'MW antennas', 'mw_antennas_data')
antenna_structure_service = document_service(
    AntennaStructure, AntennaStructureImages, 'Antenna structure', 'antenna_structure_data'
)
transmission_mw_service = document_service(
    TransmissionMW, TransmissionMWImages, 'Transmission MW', 'transmission_data'
)
room_dc_power_service = document_service(
    RoomDCPowerSystem, RoomDCPowerSystemImages, 'Room DC power system', 'room_dc_power_data'
)
ran_room_service = document_service(RanRoom, RanRoomImages, 'RAN room', 'ran_room_data')

DOCUMENT_MODULES = [
    ('mw-antennas', mw_antennas_service),
    ('antenna-structure', antenna_structure_service),
    ('transmission-mw', transmission_mw_service),
    ('room-dc-power-system', room_dc_power_service),
    ('ran-room', ran_room_service),
]

for resource, service in DOCUMENT_MODULES:
    register_form_routes(bp, service, resource, envelope=True)
    register_cabinet_options(service, resource)
