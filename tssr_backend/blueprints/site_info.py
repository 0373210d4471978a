"""Site location, site visit info and site area info forms."""
from datetime import date
from flask import Blueprint
from tssr_shared.errors import ValidationError
from ..base.form_service import FormService, register_form_routes
from ..models import SiteLocation, SiteVisitInfo, SiteAreaInfo

bp = Blueprint('site_info', __name__, url_prefix='/api')

SITE_AREA_MULTI_FIELDS = (
    'other_telecom_operator_exist_onsite',
    'planned_scope',
    'location_of_existing_telecom_racks_cabinets',
    'location_of_planned_new_telecom_racks_cabinets',
    'existing_technology',
)


def check_survey_date(session_id, data, record):
    """``survey_date`` is an ISO date (YYYY-MM-DD) or blank."""
    value = data.get('survey_date')
    if value in (None, ''):
        if 'survey_date' in data:
            data = {**data, 'survey_date': ''}
        return data
    try:
        parsed = date.fromisoformat(str(value)[:10])
    except ValueError:
        raise ValidationError("survey_date must be a date in YYYY-MM-DD format")
    return {**data, 'survey_date': parsed.isoformat()}


site_location_service = FormService(
    model=SiteLocation,
    label='Site location',
    numeric_ranges={
        'longitude': (-180, 180),
        'latitude': (-90, 90),
        'site_elevation': (None, None),
    },
)

site_visit_info_service = FormService(
    model=SiteVisitInfo,
    label='Site visit info',
    pre_validate_hook=check_survey_date,
)

site_area_info_service = FormService(
    model=SiteAreaInfo,
    label='Site area info',
    multi_choices={field: None for field in SITE_AREA_MULTI_FIELDS},
)

register_form_routes(bp, site_location_service, 'site-location')
register_form_routes(bp, site_visit_info_service, 'site-visit-info')
register_form_routes(bp, site_area_info_service, 'site-area-info')
