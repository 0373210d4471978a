"""Flask application factory for the TSSR site survey backend."""
from flask import Flask, send_from_directory
import os
import logging
from pathlib import Path
from tssr_shared.errors import ServiceError
from .config import Settings
from .models import db
from .blueprints import (
    surveys, hierarchy, health_safety, site_access, site_info, outdoor_cabinets, ran_equipment, dc_power_system,
    antenna_configuration, ac_connection_info, radio_units, new_radio_installations, new_antennas,
    new_radio_units, new_fpfh, new_gps, new_mw, cabinet_documents, external_dc_distribution, power_meter,
    ac_panel, rooms, outdoor_general_layout, export
)
from .cli import (
    init_db_command, seed_hierarchy_command, check_referential_integrity_command, check_image_integrity_command
)
from .logging_config import setup_logging
from .utils import service_error_response

logger = logging.getLogger(__name__)

BLUEPRINTS = [
    surveys, hierarchy, health_safety, site_access, site_info, outdoor_cabinets, ran_equipment, dc_power_system,
    antenna_configuration, ac_connection_info, radio_units, new_radio_installations, new_antennas,
    new_radio_units, new_fpfh, new_gps, new_mw, cabinet_documents, external_dc_distribution, power_meter,
    ac_panel, rooms, outdoor_general_layout, export,
]


def create_app(test_config=None):
    """Flask application factory for the TSSR backend.

    Creates and configures a Flask application instance with:
    - Settings from ``TSSR_*`` environment variables or ``.env``
    - SQLAlchemy database integration
    - Blueprint registration for API endpoints
    - Upload serving and CLI command registration

    Args:
        test_config (dict, optional): Configuration overrides for testing

    Returns:
        Flask: Configured Flask application instance
    """
    settings = Settings()
    setup_logging(settings)
    logger.info("Starting Flask application initialization")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(settings.flask_config())

    if test_config is None:
        # Load the instance config, if it exists, when not testing
        if app.config.from_pyfile('config.py', silent=True):
            logger.info("Loaded configuration from instance/config.py")
        else:
            logger.debug("No instance config file found, using settings")
    else:
        app.config.from_mapping(test_config)
        logger.info("Loaded test configuration")

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['UPLOAD_FOLDER'] = os.path.abspath(app.config['UPLOAD_FOLDER'])
    Path(app.config['UPLOAD_FOLDER']).mkdir(parents=True, exist_ok=True)
    logger.info(f"Using database URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
    logger.debug(f"Storing uploads under: {app.config['UPLOAD_FOLDER']}")

    db.init_app(app)

    for module in BLUEPRINTS:
        app.register_blueprint(module.bp)
    logger.info(f"Registered {len(BLUEPRINTS)} API blueprints")

    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        db.session.rollback()
        return service_error_response(error)

    @app.route('/uploads/<path:filename>')
    def uploaded_file(filename):
        return send_from_directory(app.config['UPLOAD_FOLDER'], filename)

    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_hierarchy_command)
    app.cli.add_command(check_referential_integrity_command)
    app.cli.add_command(check_image_integrity_command)
    logger.info("CLI commands registered: init-db, seed-hierarchy, check-referential-integrity, check-image-integrity")

    logger.info("Flask application initialization completed successfully")
    return app
