"""Health & safety checklists: site access and BTS access."""
from flask import Blueprint
from ..base.form_service import FormService, register_form_routes
from ..models import HealthSafetySiteAccess, HealthSafetyBTSAccess

bp = Blueprint('health_safety', __name__, url_prefix='/api')

site_access_service = FormService(
    model=HealthSafetySiteAccess,
    label='Health & safety site access',
)

bts_access_service = FormService(
    model=HealthSafetyBTSAccess,
    label='Health & safety BTS access',
)

register_form_routes(bp, site_access_service, 'health-safety-site-access')
register_form_routes(bp, bts_access_service, 'health-safety-bts-access')
