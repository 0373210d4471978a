"""AC panel: panel layout, feeding cable, main CB and free breaker positions."""
from typing import List
from flask import Blueprint
from tssr_shared.schemas import FormDocument, PowerCableConfig, MainCBConfig
from ..base.form_service import FormService, register_form_routes
from ..models import AcPanel, AcPanelImages
from ..services.image_service import ImageService

bp = Blueprint('ac_panel', __name__, url_prefix='/api')

AC_PANEL_IMAGE_CATEGORIES = [
    'ac_panel_photo', 'ac_panel_cbs_photo', 'power_cable_photo', 'main_cb_photo', 'free_cb_photo',
]

ac_panel_images = ImageService(
    AcPanelImages, 'ac_panel',
    categories=AC_PANEL_IMAGE_CATEGORIES,
)


def clear_free_cbs(session_id, values, record):
    """Breaker details only apply while the panel has free CBs."""
    if values.get('has_free_cbs') == 'No':
        values['cb_fuse_data'] = []
        values['free_cb_spaces'] = None
    return values


def attach_images(data, session_id):
    data['images'] = ac_panel_images.list_active(session_id) if data['has_data'] else []
    return data


ac_panel_service = FormService(
    model=AcPanel,
    label='AC panel',
    numeric_ranges={'free_cb_spaces': (1, 5)},
    json_schemas={
        'ac_panel_config': FormDocument,
        'ac_equipment': List[FormDocument],
        'power_cable_config': PowerCableConfig,
        'main_cb_config': MainCBConfig,
        'cb_fuse_data': List[FormDocument],
    },
    image_service=ac_panel_images,
    pre_save_hook=clear_free_cbs,
    serialize_hook=attach_images,
)

register_form_routes(bp, ac_panel_service, 'ac-panel', envelope=True)
