"""Pydantic schemas for the nested JSON form data.

Several form modules keep a JSON column holding an array or object of
sub-entries (cabinets, RAN equipment, DC power data, antennas, radio units,
AC power configuration). Those payloads are validated here, at the service
boundary, so storage stays schema-agnostic and the rules can be tested
without a database.
"""
import math
from typing import Annotated, Optional, List, Union
from pydantic import BaseModel, Field, BeforeValidator, field_validator, model_validator, ConfigDict
from tssr_shared.enums import (
    RanVendor, BatteryVendor, PowerSource, GeneratorStatus, RadioAction,
    Technology, Band, YesNo, SECTOR_NUMBERS, BASE_BANDS, DC_DISTRIBUTIONS, DC_PDU_MODELS, DC_PDU_LOCATIONS,
    AC_POWER_SOURCE_TYPES
)

# Bumped whenever a stored JSON layout changes shape
SCHEMA_VERSION = 1


def blank_to_none(value):
    """Treat empty form inputs as missing numbers."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return value


def blank_to_zero(value):
    return 0 if blank_to_none(value) is None else value


def none_to_blank(value):
    return '' if value is None else value


def string_list(values):
    if values is None or values == '':
        return []
    if not isinstance(values, list):
        raise ValueError("must be a list")
    return [str(v) for v in values if v not in (None, '')]


def count_or_blank(value):
    """Free-CB style counts: blank stays blank, otherwise a non-negative whole number."""
    if blank_to_none(value) is None:
        return ''
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError("must be a non-negative number")
    if not math.isfinite(number) or number < 0:
        raise ValueError("must be a non-negative number")
    return int(number) if number == int(number) else number


def choice_or_blank(value, choices):
    """Allow an empty answer, otherwise require one of ``choices``."""
    if value is None or value == '':
        return ''
    if value not in choices:
        raise ValueError(f"must be one of: {', '.join(choices)}")
    return value


def subset_of(values, choices):
    if values is None:
        return []
    if not isinstance(values, list):
        raise ValueError("must be a list")
    for value in values:
        if value not in choices:
            raise ValueError(f"invalid value '{value}', allowed values: {', '.join(choices)}")
    return list(dict.fromkeys(values))


BlankStr = Annotated[str, BeforeValidator(none_to_blank)]
OptionalNumber = Annotated[Optional[float], BeforeValidator(blank_to_none)]
OptionalInt = Annotated[Optional[int], BeforeValidator(blank_to_none)]
ZeroNumber = Annotated[float, BeforeValidator(blank_to_zero)]
ZeroInt = Annotated[int, BeforeValidator(blank_to_zero)]
StringList = Annotated[List[str], BeforeValidator(string_list)]
CountOrBlank = Annotated[Union[int, float, str], BeforeValidator(count_or_blank)]
TechnologyList = Annotated[
    List[str], BeforeValidator(lambda v: subset_of(v, [t.value for t in Technology]))
]


class FormData(BaseModel):
    """Base for nested form values: unknown keys are dropped, blanks tolerated."""
    model_config = ConfigDict(extra='ignore', allow_inf_nan=False)


# Outdoor cabinets
class CBRating(FormData):
    id: Optional[Union[int, str]] = None
    rating: OptionalNumber = Field(default=None, ge=0)
    connected_load: BlankStr = ''

    def is_empty(self):
        return self.rating is None and not self.connected_load


def clean_cb_ratings(entries):
    """Drop rows where neither rating nor connected load was filled in."""
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ValueError("must be a list")
    cleaned = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValueError("entries must be objects")
        if blank_to_none(entry.get('rating')) is None and not entry.get('connected_load'):
            continue
        cleaned.append(entry)
    return cleaned


CBRatingList = Annotated[List[CBRating], BeforeValidator(clean_cb_ratings)]


class Cabinet(FormData):
    id: Optional[int] = None
    type: StringList = Field(default_factory=list)
    vendor: BlankStr = ''
    model: BlankStr = ''
    antiTheft: BlankStr = ''
    coolingType: BlankStr = ''
    coolingCapacity: OptionalNumber = Field(default=None, ge=0)
    compartments: Annotated[Union[int, str], BeforeValidator(none_to_blank)] = ''
    hardware: StringList = Field(default_factory=list)
    acPowerFeed: BlankStr = ''
    cbNumber: Annotated[Union[int, str], BeforeValidator(none_to_blank)] = ''
    powerCableLength: OptionalNumber = Field(default=None, ge=0)
    powerCableCrossSection: OptionalNumber = Field(default=None, ge=0)
    blvd: BlankStr = ''
    blvdFreeCBs: CountOrBlank = ''
    blvdCBsRatings: CBRatingList = Field(default_factory=list)
    llvd: BlankStr = ''
    llvdFreeCBs: CountOrBlank = ''
    llvdCBsRatings: CBRatingList = Field(default_factory=list)
    pdu: BlankStr = ''
    pduFreeCBs: CountOrBlank = ''
    pduCBsRatings: CBRatingList = Field(default_factory=list)
    internalLayout: BlankStr = ''
    freeU: OptionalNumber = Field(default=None, ge=0)


# RAN equipment
class BtsEntry(FormData):
    base_band_technology: TechnologyList = Field(default_factory=list)
    existing_base_band_located_in_cabinet: BlankStr = ''
    base_band_vendor: BlankStr = ''
    base_band_model: BlankStr = ''
    base_band_status: BlankStr = ''
    transmission_cable_type: BlankStr = ''
    length_of_transmission_cable: ZeroNumber = Field(default=0, ge=0)
    backhauling_destination: BlankStr = ''


class RanEquipmentData(FormData):
    existing_location: BlankStr = ''
    existing_vendor: str = ''
    existing_type_model: StringList = Field(default_factory=list)
    new_installation_location: StringList = Field(default_factory=list)
    length_of_transmission_cable: ZeroNumber = Field(default=0, ge=0)
    how_many_base_band_onsite: ZeroInt = Field(default=0, ge=0, le=10)
    bts_table: List[BtsEntry] = Field(default_factory=list)

    @field_validator('existing_vendor', mode='before')
    @classmethod
    def validate_vendor(cls, v):
        return choice_or_blank(v, [vendor.value for vendor in RanVendor])


# DC power system
class DcRectifiers(FormData):
    existing_dc_rectifiers_location: BlankStr = ''
    existing_dc_rectifiers_vendor: str = ''
    existing_dc_rectifiers_model: BlankStr = ''
    how_many_existing_dc_rectifier_modules: ZeroInt = Field(default=0, ge=0, le=20)
    rectifier_module_capacity: ZeroNumber = Field(default=0, ge=0)
    total_capacity_existing_dc_power_system: ZeroNumber = Field(default=0, ge=0)
    how_many_free_slot_available_rectifier: ZeroInt = Field(default=0, ge=0, le=10)

    @field_validator('existing_dc_rectifiers_vendor', mode='before')
    @classmethod
    def validate_vendor(cls, v):
        return choice_or_blank(v, [vendor.value for vendor in RanVendor])


class Batteries(FormData):
    existing_batteries_strings_location: StringList = Field(default_factory=list)
    existing_batteries_vendor: str = ''
    existing_batteries_type: BlankStr = ''
    how_many_existing_battery_string: ZeroInt = Field(default=0, ge=0, le=10)
    total_battery_capacity: ZeroNumber = Field(default=0, ge=0)
    how_many_free_slot_available_battery: ZeroInt = Field(default=0, ge=0, le=10)
    new_battery_string_installation_location: StringList = Field(default_factory=list)

    @field_validator('existing_batteries_vendor', mode='before')
    @classmethod
    def validate_vendor(cls, v):
        return choice_or_blank(v, [vendor.value for vendor in BatteryVendor])


class DcPowerData(FormData):
    dc_rectifiers: DcRectifiers = Field(default_factory=DcRectifiers)
    batteries: Batteries = Field(default_factory=Batteries)

    @field_validator('dc_rectifiers', 'batteries', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return {} if v is None else v


# Antenna configuration
class AntennaEntry(BaseModel):
    """One existing antenna. Fields beyond the checked ones are kept as sent."""
    model_config = ConfigDict(extra='allow', allow_inf_nan=False)

    antenna_number: Optional[int] = None
    sector_number: str = ''
    technology: TechnologyList = Field(default_factory=list)
    azimuth_angle: OptionalNumber = Field(default=None, ge=0, le=360)
    base_height: OptionalNumber = Field(default=None, ge=0)
    mechanical_tilt: OptionalNumber = None
    electrical_tilt: OptionalNumber = None

    @field_validator('sector_number', mode='before')
    @classmethod
    def validate_sector(cls, v):
        return choice_or_blank(None if v is None else str(v), SECTOR_NUMBERS)


# AC connection info
class Generator(BaseModel):
    capacity: float = Field(..., gt=0)
    status: GeneratorStatus

    model_config = ConfigDict(use_enum_values=True, allow_inf_nan=False)


class DieselConfig(BaseModel):
    count: int = Field(..., ge=1, le=2)
    generators: List[Generator] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_generators(self):
        if len(self.generators) < self.count:
            raise ValueError(f"Generator {len(self.generators) + 1} configuration is required")
        self.generators = self.generators[:self.count]
        return self


class SolarConfig(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    capacity: float = Field(..., gt=0)
    type: str = 'standard'


class AcConnectionData(BaseModel):
    power_sources: List[str] = Field(default_factory=list)
    diesel_config: Optional[DieselConfig] = None
    solar_config: Optional[SolarConfig] = None

    @field_validator('power_sources', mode='before')
    @classmethod
    def validate_sources(cls, v):
        return subset_of(v, [source.value for source in PowerSource])

    @model_validator(mode='after')
    def drop_unselected(self):
        # Configs only apply to the selected sources
        if PowerSource.DIESEL_GENERATOR.value not in self.power_sources:
            self.diesel_config = None
        if PowerSource.SOLAR_CELL.value not in self.power_sources:
            self.solar_config = None
        return self


# Radio units
class PortConnection(FormData):
    sector: OptionalInt = Field(default=None, ge=1, le=5)
    antenna: OptionalInt = Field(default=None, ge=1, le=15)
    jumper_length: OptionalNumber = Field(default=None, ge=0)


class RadioUnit(BaseModel):
    """One existing radio unit. Unchecked fields are kept as sent."""
    model_config = ConfigDict(extra='allow', allow_inf_nan=False)

    radio_unit_number: Optional[int] = None
    band: List[str] = Field(default_factory=list)
    connectedToBaseBand: List[str] = Field(default_factory=list)
    actionPlanned: str = ''
    technologies: TechnologyList = Field(default_factory=list)
    nokia_port_connectivity: List[PortConnection] = Field(default_factory=list)
    earth_bus_bar_exists: str = ''

    @field_validator('band', mode='before')
    @classmethod
    def validate_band(cls, v):
        return subset_of(v, [band.value for band in Band])

    @field_validator('connectedToBaseBand', mode='before')
    @classmethod
    def validate_base_band(cls, v):
        return subset_of(v, BASE_BANDS)

    @field_validator('actionPlanned', mode='before')
    @classmethod
    def validate_action(cls, v):
        return choice_or_blank(v, [action.value for action in RadioAction])

    @field_validator('earth_bus_bar_exists', mode='before')
    @classmethod
    def validate_earth_bar(cls, v):
        return choice_or_blank(v, [answer.value for answer in YesNo])


# Free-form documents
def all_finite(value):
    """True unless ``value`` holds an infinite or NaN float at any depth."""
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, dict):
        return all(all_finite(v) for v in value.values())
    if isinstance(value, list):
        return all(all_finite(v) for v in value)
    return True


class FormDocument(BaseModel):
    """A JSON object whose keys are kept as sent."""
    model_config = ConfigDict(extra='allow', allow_inf_nan=False)

    @model_validator(mode='after')
    def check_numbers(self):
        if not all_finite(self.model_extra or {}):
            raise ValueError("numbers must be finite")
        return self


# External DC distribution
class DcPdu(BaseModel):
    """One external DC PDU. Unchecked fields are kept as sent."""
    model_config = ConfigDict(extra='allow', allow_inf_nan=False)

    is_shared_panel: str = ''
    dc_distribution_model: str = ''
    dc_distribution_location: str = ''
    pdu_height_from_base: OptionalNumber = Field(default=None, ge=0)
    dc_feed_cabinet: BlankStr = ''
    dc_feed_distribution_type: str = ''
    dc_cable_length: OptionalNumber = Field(default=None, ge=0)
    dc_cable_cross_section: OptionalNumber = Field(default=None, ge=0)
    has_free_cbs_fuses: str = ''

    @field_validator('is_shared_panel', 'has_free_cbs_fuses', mode='before')
    @classmethod
    def validate_yes_no(cls, v):
        return choice_or_blank(v, [answer.value for answer in YesNo])

    @field_validator('dc_distribution_model', mode='before')
    @classmethod
    def validate_model(cls, v):
        return choice_or_blank(v, DC_PDU_MODELS)

    @field_validator('dc_distribution_location', mode='before')
    @classmethod
    def validate_location(cls, v):
        return choice_or_blank(v, DC_PDU_LOCATIONS)

    @field_validator('dc_feed_distribution_type', mode='before')
    @classmethod
    def validate_distribution(cls, v):
        return choice_or_blank(v, DC_DISTRIBUTIONS)


# Power meter and AC panel
class PowerCableConfig(BaseModel):
    model_config = ConfigDict(extra='allow', allow_inf_nan=False)

    length: OptionalNumber = Field(default=None, ge=0)
    cross_section: OptionalNumber = Field(default=None, ge=0)


class MainCBConfig(BaseModel):
    model_config = ConfigDict(extra='allow', allow_inf_nan=False)

    rating: OptionalNumber = Field(default=None, ge=0)
    type: str = ''

    @field_validator('type', mode='before')
    @classmethod
    def validate_type(cls, v):
        return choice_or_blank(v, AC_POWER_SOURCE_TYPES)


class ElectricalMeasurements(BaseModel):
    """Voltages and currents read at the meter. Unknown readings are rejected."""
    model_config = ConfigDict(extra='forbid', allow_inf_nan=False)

    existing_phase_1_voltage: OptionalNumber = None
    existing_phase_2_voltage: OptionalNumber = None
    existing_phase_3_voltage: OptionalNumber = None
    existing_phase_1_current: OptionalNumber = None
    existing_phase_2_current: OptionalNumber = None
    existing_phase_3_current: OptionalNumber = None
    sharing_phase_1_current: OptionalNumber = None
    sharing_phase_2_current: OptionalNumber = None
    sharing_phase_3_current: OptionalNumber = None
    phase_to_phase_l1_l2: OptionalNumber = None
    phase_to_phase_l1_l3: OptionalNumber = None
    phase_to_phase_l2_l3: OptionalNumber = None
    earthing_to_neutral_voltage: OptionalNumber = None
