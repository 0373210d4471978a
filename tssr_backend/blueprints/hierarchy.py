"""MU / Country / CT / Project / Company reference data endpoints."""
from flask import Blueprint, jsonify
from ..services import hierarchy_service
from ..utils import api_response, get_json_data, handles_service_errors

bp = Blueprint('hierarchy', __name__, url_prefix='/api/hierarchy')


@bp.route('/mus', methods=['GET'])
@handles_service_errors()
def get_mus():
    return jsonify(hierarchy_service.list_mus())


@bp.route('/mus', methods=['POST'])
@handles_service_errors()
def create_mu():
    mu = hierarchy_service.create_mu(get_json_data())
    return api_response(mu, 'MU created successfully', 201)


@bp.route('/countries', methods=['GET'])
@handles_service_errors()
def get_all_countries():
    return jsonify(hierarchy_service.list_countries())


@bp.route('/countries/<int:mu_id>', methods=['GET'])
@handles_service_errors()
def get_countries(mu_id):
    """Countries linked to one MU."""
    return jsonify(hierarchy_service.list_countries(mu_id))


@bp.route('/countries', methods=['POST'])
@handles_service_errors()
def create_country():
    country, created = hierarchy_service.create_country(get_json_data())
    message = 'Country created successfully' if created else 'Existing country linked to MU'
    return api_response(country, message, 201)


@bp.route('/cts', methods=['GET'])
@handles_service_errors()
def get_all_cts():
    return jsonify(hierarchy_service.list_children('cts'))


@bp.route('/cts/<int:country_id>', methods=['GET'])
@handles_service_errors()
def get_cts(country_id):
    return jsonify(hierarchy_service.list_children('cts', country_id))


@bp.route('/cts', methods=['POST'])
@handles_service_errors()
def create_ct():
    return api_response(hierarchy_service.create_child('cts', get_json_data()), 'CT created successfully', 201)


@bp.route('/projects', methods=['GET'])
@handles_service_errors()
def get_all_projects():
    return jsonify(hierarchy_service.list_children('projects'))


@bp.route('/projects/<int:ct_id>', methods=['GET'])
@handles_service_errors()
def get_projects(ct_id):
    return jsonify(hierarchy_service.list_children('projects', ct_id))


@bp.route('/projects', methods=['POST'])
@handles_service_errors()
def create_project():
    project = hierarchy_service.create_child('projects', get_json_data())
    return api_response(project, 'Project created successfully', 201)


@bp.route('/companies', methods=['GET'])
@handles_service_errors()
def get_all_companies():
    return jsonify(hierarchy_service.list_children('companies'))


@bp.route('/companies/<int:project_id>', methods=['GET'])
@handles_service_errors()
def get_companies(project_id):
    return jsonify(hierarchy_service.list_children('companies', project_id))


@bp.route('/companies', methods=['POST'])
@handles_service_errors()
def create_company():
    company = hierarchy_service.create_child('companies', get_json_data())
    return api_response(company, 'Company created successfully', 201)


@bp.route('/path/<int:mu_id>/<int:country_id>/<int:ct_id>/<int:project_id>', methods=['GET'])
@handles_service_errors()
def get_path(mu_id, country_id, ct_id, project_id):
    """Full path from MU down to a project, with the project's companies."""
    return jsonify(hierarchy_service.get_path(mu_id, country_id, ct_id, project_id))
