"""Spreadsheet export endpoint and the report layout of each module."""
import logging
from flask import Blueprint, send_file
from tssr_shared.schemas import Cabinet, BtsEntry, AntennaEntry, Generator, SolarConfig, RadioUnit, DcPdu
from ..services.export_service import (
    build_workbook, form_layout, schema_fields, label_for, Section, XLSX_MIMETYPE
)
from ..utils import handles_service_errors
from .surveys import get_survey_or_404, serialize_survey
from .site_info import site_location_service, site_visit_info_service, site_area_info_service
from .health_safety import site_access_service as hs_site_access_service, bts_access_service
from .site_access import site_access_service
from .outdoor_cabinets import outdoor_cabinets_service, MAX_CABINETS
from .outdoor_general_layout import outdoor_general_layout_service
from .ran_equipment import ran_equipment_service
from .dc_power_system import dc_power_service
from .external_dc_distribution import external_dc_service, MAX_PDUS
from .antenna_configuration import antenna_configuration_service
from .ac_connection_info import ac_connection_service
from .power_meter import power_meter_service
from .ac_panel import ac_panel_service
from .radio_units import radio_units_service, MAX_RADIO_UNITS
from .rooms import room_info_service, room_preparation_service
from .cabinet_documents import (
    mw_antennas_service, antenna_structure_service, transmission_mw_service, room_dc_power_service,
    ran_room_service
)
from .new_radio_installations import new_radio_installations_service
from .new_antennas import new_antennas_service
from .new_radio_units import new_radio_units_service
from .new_fpfh import new_fpfh_service
from .new_gps import new_gps_service
from .new_mw import new_mw_service

logger = logging.getLogger('export')
bp = Blueprint('export', __name__, url_prefix='/api')

# Slots written for lists the forms do not cap themselves
MAX_ANTENNAS = 15
MAX_BTS = 10
MAX_ENTRIES = 20
MAX_GENERATORS = 2

IMAGES_ROW = [(label_for('images'), 'images')]

SITE_LOCATION_LAYOUT = [('Site ID', 'site_id')] + form_layout(site_location_service)

SITE_ACCESS_LAYOUT = [
    ('Site Access Permission Required', 'site_access_permission_required'),
    ('Contact Person Name', 'contact_person_name'),
    ('Contact Tel Number', 'contact_tel_number'),
    ('Available Access Time', 'available_access_time'),
    ('Type of Gated Fence', 'type_of_gated_fence'),
    ('Keys Type', 'keys_type'),
    ('Stair Lift Height', 'stair_lift_height'),
    ('Stair Lift Width', 'stair_lift_width'),
    ('Stair Lift Depth', 'stair_lift_depth'),
    ('Preferred Time Slot Crane Access', 'preferred_time_slot_crane_access'),
    ('Access to Site by Road', 'access_to_site_by_road'),
    ('Keys Required', 'keys_required'),
    ('Material Accessibility to Site', 'material_accessibility_to_site'),
    ('Contact Person Name for Site Key', 'contact_person_name_for_site_key'),
    ('Contact Tel Number for Site Key', 'contact_tel_number_for_site_key'),
]
SITE_ACCESS_LAYOUT += form_layout(site_access_service, skip={key for _, key in SITE_ACCESS_LAYOUT})

OUTDOOR_CABINETS_LAYOUT = form_layout(outdoor_cabinets_service, expand={
    'cabinets': [Section('Cabinet', 'cabinets', schema_fields(Cabinet) + IMAGES_ROW, MAX_CABINETS)],
})

RAN_EQUIPMENT_LAYOUT = form_layout(ran_equipment_service, expand={
    'ran_equipment.bts_table': [Section('BTS', 'ran_equipment.bts_table', schema_fields(BtsEntry), MAX_BTS)],
})

EXTERNAL_DC_LAYOUT = form_layout(external_dc_service, expand={
    'dc_pdus': [Section('PDU', 'dc_pdus', schema_fields(DcPdu) + IMAGES_ROW, MAX_PDUS)],
})

ANTENNA_CONFIGURATION_LAYOUT = form_layout(antenna_configuration_service, expand={
    'antennas': [Section('Antenna', 'antennas', schema_fields(AntennaEntry) + IMAGES_ROW, MAX_ANTENNAS)],
})

AC_CONNECTION_LAYOUT = form_layout(ac_connection_service, expand={
    'diesel_config': [
        ('Generator Count', 'diesel_config.count'),
        Section('Generator', 'diesel_config.generators', schema_fields(Generator), MAX_GENERATORS),
    ],
    'solar_config': schema_fields(SolarConfig, 'solar_config.'),
})

RADIO_UNITS_LAYOUT = form_layout(radio_units_service, expand={
    'radio_units': [Section('Radio Unit', 'radio_units', schema_fields(RadioUnit) + IMAGES_ROW, MAX_RADIO_UNITS)],
})


def indexed_layout(service, title):
    """One block per index, entry N always in block N."""
    layout = []
    if service.planned_field:
        layout.append((label_for(service.planned_field), service.planned_field))
    fields = form_layout(service) + IMAGES_ROW
    layout.append(Section(title, service.items_key, fields, MAX_ENTRIES, index_key=service.index_field))
    return layout


# Sheet order of the report
FORM_SHEETS = [
    ('Site Location', site_location_service, SITE_LOCATION_LAYOUT),
    ('Site Access', site_access_service, SITE_ACCESS_LAYOUT),
    ('Site Area Info', site_area_info_service, form_layout(site_area_info_service)),
    ('Site Visit Info', site_visit_info_service, form_layout(site_visit_info_service)),
    ('H&S Site Access', hs_site_access_service, form_layout(hs_site_access_service)),
    ('H&S BTS Access', bts_access_service, form_layout(bts_access_service)),
    ('Outdoor Cabinets', outdoor_cabinets_service, OUTDOOR_CABINETS_LAYOUT),
    ('Outdoor General Layout', outdoor_general_layout_service, form_layout(outdoor_general_layout_service)),
    ('RAN Equipment', ran_equipment_service, RAN_EQUIPMENT_LAYOUT),
    ('DC Power System', dc_power_service, form_layout(dc_power_service)),
    ('External DC Distribution', external_dc_service, EXTERNAL_DC_LAYOUT),
    ('Antenna Configuration', antenna_configuration_service, ANTENNA_CONFIGURATION_LAYOUT),
    ('AC Connection', ac_connection_service, AC_CONNECTION_LAYOUT),
    ('Power Meter', power_meter_service, form_layout(power_meter_service)),
    ('AC Panel', ac_panel_service, form_layout(ac_panel_service)),
    ('Radio Units', radio_units_service, RADIO_UNITS_LAYOUT),
    ('Room Info', room_info_service, form_layout(room_info_service)),
    ('Room Preparation', room_preparation_service, form_layout(room_preparation_service)),
    ('Room DC Power System', room_dc_power_service, form_layout(room_dc_power_service)),
    ('RAN Room', ran_room_service, form_layout(ran_room_service)),
    ('MW Antennas', mw_antennas_service, form_layout(mw_antennas_service)),
    ('Antenna Structure', antenna_structure_service, form_layout(antenna_structure_service)),
    ('Transmission MW', transmission_mw_service, form_layout(transmission_mw_service)),
    ('New Radio Installations', new_radio_installations_service, form_layout(new_radio_installations_service)),
    ('New GPS', new_gps_service, form_layout(new_gps_service)),
]

INDEXED_SHEETS = [
    ('New Antennas', new_antennas_service, indexed_layout(new_antennas_service, 'New Antenna')),
    ('New Radio Units', new_radio_units_service, indexed_layout(new_radio_units_service, 'New Radio Unit')),
    ('New FPFHs', new_fpfh_service, indexed_layout(new_fpfh_service, 'New FPFH')),
    ('New MW', new_mw_service, indexed_layout(new_mw_service, 'New MW Link')),
]


def collect_sheets(survey):
    session_id = survey['session_id']
    sheets = []
    for title, service, layout in FORM_SHEETS:
        data = service.get(session_id)
        if service is site_location_service:
            data['site_id'] = survey['site_id']
        sheets.append((title, layout, data))
    for title, service, layout in INDEXED_SHEETS:
        sheets.append((title, layout, service.list(session_id)))
    return sheets


@bp.route('/export/<session_id>', methods=['GET'])
@handles_service_errors()
def export_survey(session_id):
    """Download every module of a survey as an .xlsx workbook."""
    survey = serialize_survey(get_survey_or_404(session_id))
    output = build_workbook(survey, collect_sheets(survey))
    logger.info("Exported survey", extra={'session_id': survey['session_id']})
    return send_file(
        output,
        mimetype=XLSX_MIMETYPE,
        as_attachment=True,
        download_name=f"site-export-{survey['session_id']}.xlsx",
    )
