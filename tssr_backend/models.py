import logging
import sqlite3
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine
from tssr_shared.models import (
    Base, Survey, MU, Country, CT, Project, Company, mu_countries,
    HealthSafetySiteAccess, HealthSafetyBTSAccess, SiteAccess,
    OutdoorCabinets, RanEquipment, DCPowerSystem, AntennaConfiguration, AcConnectionInfo,
    NewRadioInstallations, NewAntennas, NewRadioUnits, RadioUnits, NewFPFHs, NewMW, NewGPS,
    MWAntennas, AntennaStructure, TransmissionMW, RoomDCPowerSystem, RanRoom,
    SiteLocation, SiteVisitInfo, SiteAreaInfo, ExternalDCDistribution, PowerMeter, AcPanel,
    RoomInfo, RoomPreparation, OutdoorGeneralLayout,
    OutdoorCabinetsImages, RanEquipmentImages, DCPowerSystemImages, AntennaConfigurationImages,
    AcConnectionImages, NewAntennasImages, NewRadioUnitsImages, RadioUnitImages,
    NewFPFHsImages, NewMWImages, NewGPSImages, MWAntennasImages, AntennaStructureImages,
    TransmissionMWImages, RoomDCPowerSystemImages, RanRoomImages, ExternalDCDistributionImages,
    PowerMeterImages, AcPanelImages, RoomInfoImages, RoomPreparationImages, OutdoorGeneralLayoutImages,
    CASCADE_TABLES, UNCONSTRAINED_TABLES
)

logger = logging.getLogger(__name__)
db = SQLAlchemy(model_class=Base)


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on foreign key enforcement so ON DELETE CASCADE applies."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
