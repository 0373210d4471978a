"""Counts other modules read from their source tables on every write.

Cached copies of these counts are never trusted: callers re-read them here
each time, and a missing source row counts as 1.
"""
from sqlalchemy import select
from ..models import (
    db, OutdoorCabinets, NewRadioInstallations, AcConnectionInfo, DCPowerSystem, AntennaConfiguration, RadioUnits
)

PLANNED_COLUMNS = (
    'new_sectors_planned', 'new_radio_units_planned', 'existing_radio_units_swapped',
    'new_antennas_planned', 'existing_antennas_swapped', 'new_fpfh_installed',
)


def get_cabinet_count(session_id):
    """Number of outdoor cabinets recorded for the session, default 1."""
    count = db.session.execute(
        select(OutdoorCabinets.number_of_cabinets).where(OutdoorCabinets.session_id == session_id)
    ).scalar()
    return count or 1


def get_planned_count(session_id, column):
    """A planned count from new radio installations, default 1."""
    if column not in PLANNED_COLUMNS:
        raise ValueError(f"Unknown planned count column: {column}")
    count = db.session.execute(
        select(getattr(NewRadioInstallations, column)).where(NewRadioInstallations.session_id == session_id)
    ).scalar()
    return count or 1


def get_generator_count(session_id):
    """Diesel generators configured for the session, 0 when diesel is not selected."""
    config = db.session.execute(
        select(AcConnectionInfo.diesel_config).where(AcConnectionInfo.session_id == session_id)
    ).scalar()
    if not config:
        return 0
    return int(config.get('count') or 0)


def get_dc_power_counts(session_id):
    """Rectifier modules and battery strings recorded for the session."""
    data = db.session.execute(
        select(DCPowerSystem.dc_power_data).where(DCPowerSystem.session_id == session_id)
    ).scalar() or {}
    rectifiers = (data.get('dc_rectifiers') or {}).get('how_many_existing_dc_rectifier_modules') or 0
    batteries = (data.get('batteries') or {}).get('how_many_existing_battery_string') or 0
    return int(rectifiers), int(batteries)


def get_antenna_count(session_id):
    """Existing antennas recorded in the antenna configuration, 0 when absent."""
    count = db.session.execute(
        select(AntennaConfiguration.antenna_count).where(AntennaConfiguration.session_id == session_id)
    ).scalar()
    return count or 0


def get_radio_unit_count(session_id):
    count = db.session.execute(
        select(RadioUnits.radio_unit_count).where(RadioUnits.session_id == session_id)
    ).scalar()
    return count or 1


def cabinet_options(session_id):
    """Location choices offered for equipment placed in or next to a cabinet."""
    count = get_cabinet_count(session_id)
    return [f'Existing cabinet #{n}' for n in range(1, count + 1)] + ['New Nokia cabinet', 'Other']
