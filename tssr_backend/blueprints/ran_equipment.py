"""RAN equipment: existing and planned base band installation."""
from flask import Blueprint
from tssr_shared.enums import RanVendor
from tssr_shared.schemas import RanEquipmentData
from ..base.form_service import FormService, register_form_routes
from ..models import RanEquipment, RanEquipmentImages
from ..services.derived_counts import get_cabinet_count, cabinet_options
from ..services.image_service import ImageService
from ..utils import api_response, handles_service_errors

bp = Blueprint('ran_equipment', __name__, url_prefix='/api')

RAN_EQUIPMENT_IMAGE_CATEGORIES = [
    'base_band_front', 'base_band_label', 'transmission_cable', 'cabinet_overview',
]

ran_equipment_images = ImageService(
    RanEquipmentImages, 'ran_equipment',
    categories=RAN_EQUIPMENT_IMAGE_CATEGORIES,
)


def attach_images(data, session_id):
    data['images'] = ran_equipment_images.list_active(session_id) if data['has_data'] else []
    return data


ran_equipment_service = FormService(
    model=RanEquipment,
    label='RAN equipment',
    json_schemas={'ran_equipment': RanEquipmentData},
    derived_counts={'number_of_cabinets': get_cabinet_count},
    image_service=ran_equipment_images,
    serialize_hook=attach_images,
)

register_form_routes(bp, ran_equipment_service, 'ran-equipment', envelope=True)


@bp.route('/ran-equipment/<session_id>/cabinet-options', methods=['GET'])
@handles_service_errors(envelope=True)
def get_cabinet_options(session_id):
    data = ran_equipment_service.get(session_id)
    return api_response({
        'session_id': data['session_id'],
        'number_of_cabinets': data['number_of_cabinets'],
        'options': cabinet_options(data['session_id']),
    }, envelope=True)


@bp.route('/ran-equipment/<session_id>/summary', methods=['GET'])
@handles_service_errors(envelope=True)
def get_ran_summary(session_id):
    data = ran_equipment_service.get(session_id)
    ran = data['ran_equipment']
    bts_table = ran.get('bts_table', [])
    return api_response({
        'session_id': data['session_id'],
        'has_data': data['has_data'],
        'number_of_cabinets': data['number_of_cabinets'],
        'existing_vendor': ran.get('existing_vendor', ''),
        'existing_location': ran.get('existing_location', ''),
        'how_many_base_band_onsite': ran.get('how_many_base_band_onsite', 0),
        'bts_count': len(bts_table),
        'technologies': sorted({t for bts in bts_table for t in bts.get('base_band_technology', [])}),
        'image_count': len(data['images']),
    }, envelope=True)


@bp.route('/ran-equipment/options/vendors', methods=['GET'])
@handles_service_errors(envelope=True)
def get_vendor_options():
    return api_response([vendor.value for vendor in RanVendor], envelope=True)
