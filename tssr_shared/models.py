from datetime import datetime
from zoneinfo import ZoneInfo
from sqlalchemy import (
    Column, Integer, String, Float, Boolean, Text, DateTime, ForeignKey, Index, Table,
    UniqueConstraint, CheckConstraint, Enum, JSON, text
)
from sqlalchemy.orm import declarative_base, declared_attr
from tssr_shared.enums import (
    TSSRStatus, YesNoNA, YesNo, SECTOR_NUMBERS, NEW_OR_SWAP, TOWER_LEGS, TOWER_LEG_SECTIONS,
    NEW_ANTENNA_SIDE_ARM_TYPES, NEW_RADIO_UNIT_SIDE_ARM_TYPES, CONNECTED_TO_ANTENNA,
    RADIO_UNIT_LOCATIONS, RADIO_UNIT_DC_POWER_SOURCES, FPFH_INSTALLATION_TYPES, FPFH_LOCATIONS,
    FPFH_DC_POWER_SOURCES, DC_DISTRIBUTIONS, GPS_ANTENNA_LOCATIONS, AC_POWER_SOURCE_TYPES, SUNSHADE_ANSWERS
)

Base = declarative_base()

# Global timezone configuration
# Change this variable to use a different timezone if needed
APP_TIMEZONE = ZoneInfo('UTC')


def now():
    """Return current datetime in application timezone (timezone-aware).

    Note: When stored in SQLite, timezone info is stripped (SQLite limitation).
    """
    return datetime.now(APP_TIMEZONE)


def choice_column(values, **kwargs):
    """String column restricted to ``values`` at the ORM layer.

    Accepts either a list of strings or a str Enum class. The allowed values
    stay readable from ``column.type.enums`` so the service layer can reuse them.
    """
    if isinstance(values, type):
        values = [member.value for member in values]
    return Column(Enum(*values, native_enum=False, validate_strings=True, length=64), nullable=True, **kwargs)


class BaseModelMixin:
    """Mixin providing common timestamp fields."""

    created_at = Column(DateTime, default=now)
    updated_at = Column(DateTime, default=now, onupdate=now)


class FormMixin(BaseModelMixin):
    """Fields shared by every session-scoped form row.

    ``version`` starts at 1 and is bumped by the service layer on every write
    that changes a stored value.
    """

    id = Column(Integer, primary_key=True, nullable=False)
    version = Column(Integer, nullable=False, default=1, server_default="1")


class ImageMixin(BaseModelMixin):
    """Columns shared by every ``<module>_images`` table.

    ``record_index`` is the entity the image belongs to (cabinet, antenna or
    radio unit number) and is 0 for singleton modules. Only one active row
    exists per (session_id, record_index, image_category).
    """

    id = Column(Integer, primary_key=True, nullable=False)
    session_id = Column(String(255), nullable=False, index=True)
    record_index = Column(Integer, nullable=False, default=0, server_default="0")
    image_category = Column(String(100), nullable=False)
    original_filename = Column(String(255), server_default="")
    stored_filename = Column(String(255), nullable=False)
    file_path = Column(String(500), nullable=False)
    file_url = Column(String(500), nullable=False)
    file_size = Column(Integer, server_default="0")
    mime_type = Column(String(100), server_default="")
    content_hash = Column(String(64), index=True)
    description = Column(Text, server_default="")
    image_metadata = Column('metadata', JSON, default=dict)
    is_active = Column(Boolean, nullable=False, default=True, server_default=text('1'))

    @declared_attr
    def __table_args__(cls):
        return (
            Index(f'idx_{cls.__tablename__}_lookup', 'session_id', 'record_index', 'image_category', 'is_active'),
            CheckConstraint('content_hash IS NULL OR length(content_hash) = 64', name=f'chk_{cls.__tablename__}_hash_length'),
        )


# Survey
class Survey(Base, BaseModelMixin):
    __tablename__ = 'survey'
    id = Column(Integer, primary_key=True, nullable=False)
    session_id = Column(String(255), nullable=False, unique=True)
    site_id = Column(String(50), server_default="")
    country = Column(String(255), server_default="")
    ct = Column(String(255), server_default="")
    project = Column(String(255), server_default="")
    company = Column(String(255), server_default="")
    tssr_status = Column(
        Enum(TSSRStatus, values_callable=lambda e: [m.value for m in e], native_enum=False, validate_strings=True),
        default=TSSRStatus.CREATED, nullable=False, server_default=text("'created'")
    )


def survey_session_fk():
    """session_id column that is removed together with its survey."""
    return Column(String(255), ForeignKey('survey.session_id', ondelete='CASCADE'), nullable=False, unique=True)


# Reference hierarchy: MU >-< Country -< CT -< Project -< Company
mu_countries = Table(
    'mu_countries', Base.metadata,
    Column('mu_id', Integer, ForeignKey('mus.id', ondelete='CASCADE'), primary_key=True),
    Column('country_id', Integer, ForeignKey('countries.id', ondelete='CASCADE'), primary_key=True),
)


class MU(Base, BaseModelMixin):
    __tablename__ = 'mus'
    id = Column(Integer, primary_key=True, nullable=False)
    name = Column(String(255), nullable=False, unique=True)
    code = Column(String(50), nullable=False, unique=True)


class Country(Base, BaseModelMixin):
    __tablename__ = 'countries'
    id = Column(Integer, primary_key=True, nullable=False)
    name = Column(String(255), nullable=False, unique=True)
    code = Column(String(50), nullable=False, unique=True)


class CT(Base, BaseModelMixin):
    __tablename__ = 'cts'
    id = Column(Integer, primary_key=True, nullable=False)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False)
    country_id = Column(Integer, ForeignKey('countries.id', ondelete='CASCADE'), nullable=False, index=True)

    __table_args__ = (UniqueConstraint('country_id', 'code', name='uq_cts_country_code'),)


class Project(Base, BaseModelMixin):
    __tablename__ = 'projects'
    id = Column(Integer, primary_key=True, nullable=False)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False)
    ct_id = Column(Integer, ForeignKey('cts.id', ondelete='CASCADE'), nullable=False, index=True)

    __table_args__ = (UniqueConstraint('ct_id', 'code', name='uq_projects_ct_code'),)


class Company(Base, BaseModelMixin):
    __tablename__ = 'companies'
    id = Column(Integer, primary_key=True, nullable=False)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False)
    project_id = Column(Integer, ForeignKey('projects.id', ondelete='CASCADE'), nullable=False, index=True)

    __table_args__ = (UniqueConstraint('project_id', 'code', name='uq_companies_project_code'),)


# Health & safety checklists
class HealthSafetySiteAccess(Base, FormMixin):
    __tablename__ = 'health_safety_site_access'
    session_id = survey_session_fk()
    access_road_safe_condition = choice_column(YesNoNA)
    site_access_safe_secure = choice_column(YesNoNA)
    safe_usage_access_ensured = choice_column(YesNoNA)
    site_safe_environmental_influence = choice_column(YesNoNA)
    permanent_fence_correctly_installed = choice_column(YesNoNA)
    access_egress_equipment_safe = choice_column(YesNoNA)
    designated_walkway_routes_tripping = choice_column(YesNoNA)
    designated_walkway_routes_radiation = choice_column(YesNoNA)
    emergency_exits_clearly_visible = choice_column(YesNoNA)
    vehicles_good_condition_nsn_rules = choice_column(YesNoNA)
    rubbish_unused_material_removed = choice_column(YesNoNA)
    safe_manual_handling_practices = choice_column(YesNoNA)
    ladder_length_adequate = choice_column(YesNoNA)
    special_permits_required = choice_column(YesNoNA)
    ladders_good_condition = choice_column(YesNoNA)


class HealthSafetyBTSAccess(Base, FormMixin):
    __tablename__ = 'health_safety_bts_access'
    session_id = survey_session_fk()
    safety_climbing_system_correctly_installed = choice_column(YesNoNA)
    walking_path_situated_safety_specifications = choice_column(YesNoNA)
    mw_antennas_height_exclusion_zone = choice_column(YesNoNA)
    non_authorized_access_antennas_prevented = choice_column(YesNoNA)
    bts_pole_access_lighting_sufficient = choice_column(YesNoNA)
    safe_access_bts_poles_granted = choice_column(YesNoNA)
    pathway_blocks_walking_grids_installed = choice_column(YesNoNA)


class SiteAccess(Base, FormMixin):
    __tablename__ = 'site_access'
    session_id = survey_session_fk()
    site_access_permission_required = choice_column(YesNo)
    contact_person_name = Column(String(255), server_default="")
    contact_tel_number = Column(String(50), server_default="")
    available_access_time = Column(JSON, default=list)
    type_of_gated_fence = Column(String(255), server_default="")
    keys_type = Column(JSON, default=list)
    stair_lift_height = Column(Float, nullable=False, default=0, server_default="0")
    stair_lift_width = Column(Float, nullable=False, default=0, server_default="0")
    stair_lift_depth = Column(Float, nullable=False, default=0, server_default="0")
    preferred_time_slot_crane_access = Column(JSON, default=list)
    access_to_site_by_road = Column(String(255), server_default="")
    keys_required = choice_column(YesNo)
    material_accessibility_to_site = Column(JSON, default=list)
    contact_person_name_for_site_key = Column(String(255), server_default="")
    contact_tel_number_for_site_key = Column(String(50), server_default="")
    environment_cultural_problems = choice_column(YesNo)
    environment_cultural_problems_details = Column(Text, server_default="")
    aviation_problems = choice_column(YesNo)
    aviation_problems_details = Column(Text, server_default="")
    military_problems = choice_column(YesNo)
    military_problems_details = Column(Text, server_default="")
    why_crane_needed = Column(Text, server_default="")
    need_crane_permission = choice_column(YesNo)


# Equipment forms. session_id carries no storage constraint on these tables,
# so their rows outlive a deleted survey until check-referential-integrity --fix.
class OutdoorCabinets(Base, FormMixin):
    __tablename__ = 'outdoor_cabinets'
    session_id = Column(String(255), nullable=False, unique=True)
    number_of_cabinets = Column(Integer, nullable=False, default=1, server_default="1")
    cabinets = Column(JSON, default=list)

    __table_args__ = (
        CheckConstraint('number_of_cabinets >= 1 AND number_of_cabinets <= 10', name='chk_outdoor_cabinets_count'),
    )


class RanEquipment(Base, FormMixin):
    __tablename__ = 'ran_equipment'
    session_id = Column(String(255), nullable=False, unique=True)
    number_of_cabinets = Column(Integer, nullable=False, default=1, server_default="1")
    ran_equipment = Column(JSON, default=dict)


class DCPowerSystem(Base, FormMixin):
    __tablename__ = 'dc_power_system'
    session_id = Column(String(255), nullable=False, unique=True)
    number_of_cabinets = Column(Integer, nullable=False, default=1, server_default="1")
    dc_power_data = Column(JSON, default=dict)


class AntennaConfiguration(Base, FormMixin):
    __tablename__ = 'antenna_configuration'
    session_id = Column(String(255), nullable=False, unique=True)
    number_of_cabinets = Column(Integer, nullable=False, default=1, server_default="1")
    antenna_count = Column(Integer, nullable=False, default=0, server_default="0")
    antennas = Column(JSON, default=list)


class AcConnectionInfo(Base, FormMixin):
    __tablename__ = 'ac_connection_info'
    session_id = survey_session_fk()
    power_sources = Column(JSON, default=list)
    diesel_config = Column(JSON, nullable=True)
    solar_config = Column(JSON, nullable=True)


class NewRadioInstallations(Base, FormMixin):
    __tablename__ = 'new_radio_installations'
    session_id = Column(String(255), nullable=False, unique=True)
    new_sectors_planned = Column(Integer, nullable=False, default=1, server_default="1")
    new_radio_units_planned = Column(Integer, nullable=False, default=1, server_default="1")
    existing_radio_units_swapped = Column(Integer, nullable=False, default=1, server_default="1")
    new_antennas_planned = Column(Integer, nullable=False, default=1, server_default="1")
    existing_antennas_swapped = Column(Integer, nullable=False, default=1, server_default="1")
    new_fpfh_installed = Column(Integer, nullable=False, default=1, server_default="1")


class NewAntennas(Base, FormMixin):
    __tablename__ = 'new_antennas'
    session_id = Column(String(255), nullable=False, index=True)
    antenna_index = Column(Integer, nullable=False)
    sector_number = choice_column(SECTOR_NUMBERS)
    new_or_swap = choice_column(NEW_OR_SWAP)
    antenna_technology = Column(JSON, default=list)
    azimuth_angle_shift = Column(Float)
    base_height_from_tower = Column(Float)
    tower_leg_location = choice_column(TOWER_LEGS)
    tower_leg_section = choice_column(TOWER_LEG_SECTIONS)
    angular_l1_dimension = Column(Float)
    angular_l2_dimension = Column(Float)
    tubular_cross_section = Column(Float)
    side_arm_type = choice_column(NEW_ANTENNA_SIDE_ARM_TYPES)
    side_arm_length = Column(Float)
    side_arm_cross_section = Column(Float)
    side_arm_offset = Column(Float)
    earth_bus_bar_exists = choice_column(YesNo)
    earth_cable_length = Column(Float)

    __table_args__ = (
        UniqueConstraint('session_id', 'antenna_index', name='uq_new_antennas_session_index'),
        CheckConstraint('antenna_index >= 1', name='chk_new_antennas_index'),
    )


class NewRadioUnits(Base, FormMixin):
    __tablename__ = 'new_radio_units'
    session_id = Column(String(255), nullable=False, index=True)
    radio_unit_index = Column(Integer, nullable=False)
    new_radio_unit_sector = choice_column(SECTOR_NUMBERS)
    connected_to_antenna = choice_column(CONNECTED_TO_ANTENNA)
    connected_antenna_technology = Column(JSON, default=list)
    new_radio_unit_model = Column(String(255), server_default="")
    radio_unit_location = choice_column(RADIO_UNIT_LOCATIONS)
    feeder_length_to_antenna = Column(Float)
    tower_leg_section = choice_column(TOWER_LEG_SECTIONS)
    angular_l1_dimension = Column(Float)
    angular_l2_dimension = Column(Float)
    tubular_cross_section = Column(Float)
    side_arm_type = choice_column(NEW_RADIO_UNIT_SIDE_ARM_TYPES)
    side_arm_length = Column(Float)
    side_arm_cross_section = Column(Float)
    side_arm_offset = Column(Float)
    dc_power_source = choice_column(RADIO_UNIT_DC_POWER_SOURCES)
    dc_power_cable_length = Column(Float)
    fiber_cable_length = Column(Float)
    jumper_length = Column(Float)
    earth_bus_bar_exists = choice_column(YesNo)
    earth_cable_length = Column(Float)

    __table_args__ = (
        UniqueConstraint('session_id', 'radio_unit_index', name='uq_new_radio_units_session_index'),
        CheckConstraint('radio_unit_index >= 1', name='chk_new_radio_units_index'),
    )


class RadioUnits(Base, FormMixin):
    __tablename__ = 'radio_units'
    session_id = Column(String(255), nullable=False, unique=True)
    number_of_cabinets = Column(Integer, nullable=False, default=1, server_default="1")
    radio_unit_count = Column(Integer, nullable=False, default=1, server_default="1")
    radio_units = Column(JSON, default=list)

    __table_args__ = (
        CheckConstraint('radio_unit_count >= 1 AND radio_unit_count <= 20', name='chk_radio_units_count'),
    )


class NewFPFHs(Base, FormMixin):
    __tablename__ = 'new_fpfhs'
    session_id = Column(String(255), nullable=False, index=True)
    fpfh_index = Column(Integer, nullable=False)
    fpfh_installation_type = choice_column(FPFH_INSTALLATION_TYPES)
    fpfh_location = choice_column(FPFH_LOCATIONS)
    fpfh_base_height = Column(Float)
    fpfh_tower_leg = choice_column(TOWER_LEGS)
    fpfh_dc_power_source = choice_column(FPFH_DC_POWER_SOURCES)
    dc_distribution_source = choice_column(DC_DISTRIBUTIONS)
    ethernet_cable_length = Column(Float)
    dc_power_cable_length = Column(Float)
    earth_bus_bar_exists = choice_column(YesNo)
    earth_cable_length = Column(Float)

    __table_args__ = (
        UniqueConstraint('session_id', 'fpfh_index', name='uq_new_fpfhs_session_index'),
        CheckConstraint('fpfh_index >= 1', name='chk_new_fpfhs_index'),
    )


class NewMW(Base, FormMixin):
    """One planned microwave link, its answers kept as a free document."""
    __tablename__ = 'new_mw'
    session_id = Column(String(255), nullable=False, index=True)
    mw_index = Column(Integer, nullable=False)
    fields = Column(JSON, default=dict)

    __table_args__ = (
        UniqueConstraint('session_id', 'mw_index', name='uq_new_mw_session_index'),
        CheckConstraint('mw_index >= 1', name='chk_new_mw_index'),
    )


class NewGPS(Base, FormMixin):
    __tablename__ = 'new_gps'
    session_id = Column(String(255), nullable=False, unique=True)
    gps_antenna_location = choice_column(GPS_ANTENNA_LOCATIONS)
    gps_antenna_height = Column(Float)
    gps_cable_length = Column(Float)


# Cabinet-scoped documents: a free JSON object per session next to the
# outdoor cabinet count they refer to.
class MWAntennas(Base, FormMixin):
    __tablename__ = 'mw_antennas'
    session_id = Column(String(255), nullable=False, unique=True)
    number_of_cabinets = Column(Integer, nullable=False, default=1, server_default="1")
    mw_antennas_data = Column(JSON, default=dict)


class AntennaStructure(Base, FormMixin):
    __tablename__ = 'antenna_structure'
    session_id = Column(String(255), nullable=False, unique=True)
    number_of_cabinets = Column(Integer, nullable=False, default=1, server_default="1")
    antenna_structure_data = Column(JSON, default=dict)


class TransmissionMW(Base, FormMixin):
    __tablename__ = 'transmission_mw'
    session_id = Column(String(255), nullable=False, unique=True)
    number_of_cabinets = Column(Integer, nullable=False, default=1, server_default="1")
    transmission_data = Column(JSON, default=dict)


class RoomDCPowerSystem(Base, FormMixin):
    __tablename__ = 'room_dc_power_system'
    session_id = Column(String(255), nullable=False, unique=True)
    number_of_cabinets = Column(Integer, nullable=False, default=1, server_default="1")
    room_dc_power_data = Column(JSON, default=dict)


class RanRoom(Base, FormMixin):
    __tablename__ = 'ran_room'
    session_id = Column(String(255), nullable=False, unique=True)
    number_of_cabinets = Column(Integer, nullable=False, default=1, server_default="1")
    ran_room_data = Column(JSON, default=dict)


# Site and room forms, removed together with their survey
class SiteLocation(Base, FormMixin):
    __tablename__ = 'site_location'
    session_id = survey_session_fk()
    sitename = Column(String(255), server_default="")
    region = Column(String(255), server_default="")
    city = Column(String(255), server_default="")
    longitude = Column(Float)
    latitude = Column(Float)
    site_elevation = Column(Float)
    address = Column(String(255), server_default="")


class SiteVisitInfo(Base, FormMixin):
    __tablename__ = 'site_visit_info'
    session_id = survey_session_fk()
    # ISO date, checked by the service
    survey_date = Column(String(10), server_default="")
    surveyor_name = Column(String(255), server_default="")
    subcontractor_company = Column(String(255), server_default="")
    surveyor_phone = Column(String(255), server_default="")
    nokia_representative_name = Column(String(255), server_default="")
    nokia_representative_title = Column(String(255), server_default="")
    customer_representative_name = Column(String(255), server_default="")
    customer_representative_title = Column(String(255), server_default="")


class SiteAreaInfo(Base, FormMixin):
    __tablename__ = 'site_area_info'
    session_id = survey_session_fk()
    site_located_at = Column(String(255), server_default="")
    site_ownership = Column(String(255), server_default="")
    shared_site = Column(String(255), server_default="")
    other_telecom_operator_exist_onsite = Column(JSON, default=list)
    ac_power_sharing = Column(String(255), server_default="")
    dc_power_sharing = Column(String(255), server_default="")
    site_topology = Column(String(255), server_default="")
    site_type = Column(String(255), server_default="")
    planned_scope = Column(JSON, default=list)
    location_of_existing_telecom_racks_cabinets = Column(JSON, default=list)
    location_of_planned_new_telecom_racks_cabinets = Column(JSON, default=list)
    existing_technology = Column(JSON, default=list)


class ExternalDCDistribution(Base, FormMixin):
    __tablename__ = 'external_dc_distribution'
    session_id = survey_session_fk()
    has_separate_dc_pdu = choice_column(YesNo)
    pdu_count = Column(Integer)
    dc_pdus = Column(JSON, default=list)


class PowerMeter(Base, FormMixin):
    __tablename__ = 'power_meter'
    session_id = survey_session_fk()
    serial_number = Column(String(100), server_default="")
    meter_reading = Column(Float)
    power_meter_capacity = Column(Float)
    ac_power_source_type = choice_column(AC_POWER_SOURCE_TYPES)
    power_cable_config = Column(JSON, default=dict)
    main_cb_config = Column(JSON, default=dict)
    electrical_measurements = Column(JSON, default=dict)


class AcPanel(Base, FormMixin):
    __tablename__ = 'ac_panel'
    session_id = survey_session_fk()
    ac_panel_config = Column(JSON, default=dict)
    ac_equipment = Column(JSON, default=list)
    power_cable_config = Column(JSON, default=dict)
    main_cb_config = Column(JSON, default=dict)
    has_free_cbs = choice_column(YesNo)
    cb_fuse_data = Column(JSON, default=list)
    free_cb_spaces = Column(Integer)


class RoomInfo(Base, FormMixin):
    __tablename__ = 'room_info'
    session_id = survey_session_fk()
    height = Column(Float)
    width = Column(Float)
    depth = Column(Float)
    hardware = Column(JSON, default=list)
    sketch_available = choice_column(YesNo)


class RoomPreparation(Base, FormMixin):
    __tablename__ = 'room_preparation'
    session_id = survey_session_fk()
    ac_type = Column(String(255), server_default="")
    ac_count = Column(Integer)
    ac_capacity = Column(Float)
    ac_status = Column(String(255), server_default="")
    cable_tray_height = Column(Float)
    cable_tray_width = Column(Float)
    existing_cable_tray_space = Column(String(255), server_default="")
    available_space_in_feeder_window = Column(String(255), server_default="")
    feeder_free_holes = Column(Integer)
    feeder_windows = Column(Integer)
    bus_bar_free_holes = Column(Integer)
    rack_free_positions = Column(Integer)


class OutdoorGeneralLayout(Base, FormMixin):
    __tablename__ = 'outdoor_general_layout'
    session_id = survey_session_fk()
    equipment_area_sunshade = choice_column(SUNSHADE_ANSWERS)
    free_positions_available = Column(Integer)
    cable_tray_config = Column(JSON, default=dict)
    cable_tray_space_available = choice_column(YesNo)
    earth_bus_bar_config = Column(JSON, default=dict)
    has_site_sketch = choice_column(YesNo)


# Image tables
class OutdoorCabinetsImages(Base, ImageMixin):
    __tablename__ = 'outdoor_cabinets_images'


class RanEquipmentImages(Base, ImageMixin):
    __tablename__ = 'ran_equipment_images'


class DCPowerSystemImages(Base, ImageMixin):
    __tablename__ = 'dc_power_system_images'


class AntennaConfigurationImages(Base, ImageMixin):
    __tablename__ = 'antenna_configuration_images'


class AcConnectionImages(Base, ImageMixin):
    __tablename__ = 'ac_connection_images'


class NewAntennasImages(Base, ImageMixin):
    __tablename__ = 'new_antennas_images'


class NewRadioUnitsImages(Base, ImageMixin):
    __tablename__ = 'new_radio_units_images'


class RadioUnitImages(Base, ImageMixin):
    __tablename__ = 'radio_unit_images'


class NewFPFHsImages(Base, ImageMixin):
    __tablename__ = 'new_fpfhs_images'


class NewMWImages(Base, ImageMixin):
    __tablename__ = 'new_mw_images'


class NewGPSImages(Base, ImageMixin):
    __tablename__ = 'new_gps_images'


class MWAntennasImages(Base, ImageMixin):
    __tablename__ = 'mw_antennas_images'


class AntennaStructureImages(Base, ImageMixin):
    __tablename__ = 'antenna_structure_images'


class TransmissionMWImages(Base, ImageMixin):
    __tablename__ = 'transmission_mw_images'


class RoomDCPowerSystemImages(Base, ImageMixin):
    __tablename__ = 'room_dc_power_system_images'


class RanRoomImages(Base, ImageMixin):
    __tablename__ = 'ran_room_images'


class ExternalDCDistributionImages(Base, ImageMixin):
    __tablename__ = 'external_dc_distribution_images'


class PowerMeterImages(Base, ImageMixin):
    __tablename__ = 'power_meter_images'


class AcPanelImages(Base, ImageMixin):
    __tablename__ = 'ac_panel_images'


class RoomInfoImages(Base, ImageMixin):
    __tablename__ = 'room_info_images'


class RoomPreparationImages(Base, ImageMixin):
    __tablename__ = 'room_preparation_images'


class OutdoorGeneralLayoutImages(Base, ImageMixin):
    __tablename__ = 'outdoor_general_layout_images'


# Tables whose rows are removed by ON DELETE CASCADE when a survey goes away
CASCADE_TABLES = [
    HealthSafetySiteAccess, HealthSafetyBTSAccess, SiteAccess, AcConnectionInfo,
    SiteLocation, SiteVisitInfo, SiteAreaInfo, ExternalDCDistribution, PowerMeter, AcPanel,
    RoomInfo, RoomPreparation, OutdoorGeneralLayout,
]

# Tables keyed by session_id without a storage-level reference to survey
UNCONSTRAINED_TABLES = [
    OutdoorCabinets, RanEquipment, DCPowerSystem, AntennaConfiguration, NewRadioInstallations,
    NewAntennas, NewRadioUnits, RadioUnits, NewFPFHs, NewMW, NewGPS,
    MWAntennas, AntennaStructure, TransmissionMW, RoomDCPowerSystem, RanRoom,
    OutdoorCabinetsImages, RanEquipmentImages, DCPowerSystemImages, AntennaConfigurationImages,
    AcConnectionImages, NewAntennasImages, NewRadioUnitsImages, RadioUnitImages,
    NewFPFHsImages, NewMWImages, NewGPSImages, MWAntennasImages, AntennaStructureImages,
    TransmissionMWImages, RoomDCPowerSystemImages, RanRoomImages, ExternalDCDistributionImages,
    PowerMeterImages, AcPanelImages, RoomInfoImages, RoomPreparationImages, OutdoorGeneralLayoutImages,
]
