"""Planned counts for new radio installations.

These counts size the new antennas and new radio units modules.
"""
from flask import Blueprint
from ..base.form_service import FormService, register_form_routes
from ..models import NewRadioInstallations
from ..services.derived_counts import PLANNED_COLUMNS

bp = Blueprint('new_radio_installations', __name__, url_prefix='/api')

new_radio_installations_service = FormService(
    model=NewRadioInstallations,
    label='New radio installations',
    numeric_ranges={column: (1, 20) for column in PLANNED_COLUMNS},
)

register_form_routes(bp, new_radio_installations_service, 'new-radio-installations')
