import enum


class TSSRStatus(str, enum.Enum):
    """Survey report status values.

    Used in Survey model to track the report lifecycle.
    """
    CREATED = "created"
    SUBMITTED = "submitted"
    REVIEW = "review"
    DONE = "done"


class ErrorType(str, enum.Enum):
    """Error kinds reported by the API."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FOREIGN_KEY_ERROR = "FOREIGN_KEY_ERROR"
    DUPLICATE_ERROR = "DUPLICATE_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class YesNoNA(str, enum.Enum):
    """Checklist answers used by the health & safety forms."""
    YES = "Yes"
    NO = "No"
    NOT_APPLICABLE = "Not applicable"


class YesNo(str, enum.Enum):
    YES = "Yes"
    NO = "No"


class Technology(str, enum.Enum):
    """Radio access technologies."""
    GSM = "2G"
    UMTS = "3G"
    LTE = "4G"
    NR = "5G"


class Band(str, enum.Enum):
    """Frequency bands in MHz supported by radio units."""
    B700 = "700"
    B900 = "900"
    B1800 = "1800"
    B2100 = "2100"
    B2300 = "2300"
    B2600 = "2600"
    B3500 = "3500"


class RanVendor(str, enum.Enum):
    NOKIA = "Nokia"
    ERICSSON = "Ericsson"
    HUAWEI = "Huawei"
    ZTE = "ZTE"
    OTHER = "Other"


class BatteryVendor(str, enum.Enum):
    ELORE = "Elore"
    ENERSYS = "Enersys"
    LEOCH = "Leoch battery"
    NARADA = "Narada"
    POLARIUM = "Polarium"
    SHOTO = "Shoto"
    OTHER = "Other"


class PowerSource(str, enum.Enum):
    """AC power source kinds available on site."""
    COMMERCIAL_POWER = "commercial_power"
    DIESEL_GENERATOR = "diesel_generator"
    SOLAR_CELL = "solar_cell"
    OTHER = "other"


class GeneratorStatus(str, enum.Enum):
    ACTIVE = "active"
    STANDBY = "standby"
    FAULTY = "faulty"
    NOT_WORKING = "not_working"


class RadioAction(str, enum.Enum):
    """Planned action for an existing radio unit."""
    SWAP = "Swap"
    DISMANTLE = "Dismantle"
    NO_ACTION = "No action"


SECTOR_NUMBERS = ['1', '2', '3', '4', '5', '6']
NEW_OR_SWAP = ['New', 'Swap']
TOWER_LEGS = ['A', 'B', 'C', 'D']
TOWER_LEG_SECTIONS = ['Angular', 'Tubular']
NEW_ANTENNA_SIDE_ARM_TYPES = [
    'Use existing empty side arm',
    'Use swapped antenna side arm',
    'New side arm need to be supplied',
]
NEW_RADIO_UNIT_SIDE_ARM_TYPES = [
    'Use existing empty side arm',
    'Use existing antenna side arm',
    'New side arm need to be supplied',
]
CONNECTED_TO_ANTENNA = ['New', 'Existing']
RADIO_UNIT_LOCATIONS = ['Tower leg A', 'Tower leg B', 'Tower leg C', 'Tower leg D', 'On the ground']
RADIO_UNIT_DC_POWER_SOURCES = [
    'Direct from rectifier distribution',
    'New FPFH',
    'Existing FPFH',
    'Existing DC PDU (not FPFH)',
]
BASE_BANDS = [f'Base band {n}' for n in range(1, 8)]
FPFH_INSTALLATION_TYPES = ['Stacked with other Nokia modules', 'Standalone', 'Other']
FPFH_LOCATIONS = ['On ground', 'On tower']
FPFH_DC_POWER_SOURCES = [
    'from new DC rectifier cabinet',
    'from the existing rectifier cabinet',
    'Existing external DC PDU #1',
    'Existing external DC PDU #2',
    'Existing external DC PDU #n',
]
DC_DISTRIBUTIONS = ['BLVD', 'LLVD', 'PDU']
GPS_ANTENNA_LOCATIONS = ['On tower', 'On building']
AC_POWER_SOURCE_TYPES = ['three_phase', 'single_phase']
SUNSHADE_ANSWERS = ['yes', 'no', 'partially']
DC_PDU_MODELS = ['Nokia FPFH', 'Nokia FPFD', 'DC panel', 'Other']
DC_PDU_LOCATIONS = ['On ground level', 'On tower']
