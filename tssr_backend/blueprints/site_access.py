"""Site access form."""
from flask import Blueprint
from ..base.form_service import FormService, register_form_routes
from ..models import SiteAccess

bp = Blueprint('site_access', __name__, url_prefix='/api')

# Multi-select answers are stored as free string lists
MULTI_VALUE_FIELDS = (
    'available_access_time',
    'keys_type',
    'preferred_time_slot_crane_access',
    'material_accessibility_to_site',
)

site_access_service = FormService(
    model=SiteAccess,
    label='Site access',
    multi_choices={field: None for field in MULTI_VALUE_FIELDS},
    blank_number=0,
)

register_form_routes(bp, site_access_service, 'site-access')
