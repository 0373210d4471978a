"""Surveys blueprint for Flask API."""
import logging
from flask import Blueprint, request, jsonify
from tssr_shared.enums import TSSRStatus
from tssr_shared.errors import DuplicateError, NotFoundError
from tssr_shared.validation import Validator
from ..models import db, Survey
from ..utils import api_response, get_json_data, handles_service_errors, cascade_delete_survey

logger = logging.getLogger('surveys')
bp = Blueprint('surveys', __name__, url_prefix='/api')


def serialize_survey(survey):
    return {
        'id': survey.id,
        'session_id': survey.session_id,
        'site_id': survey.site_id or '',
        'country': survey.country or '',
        'ct': survey.ct or '',
        'project': survey.project or '',
        'company': survey.company or '',
        'tssr_status': getattr(survey.tssr_status, 'value', survey.tssr_status),
        'created_at': survey.created_at.isoformat() if survey.created_at else None,
        'updated_at': survey.updated_at.isoformat() if survey.updated_at else None,
    }


def get_survey_or_404(session_id):
    session_id = Validator.validate_session_id(session_id)
    survey = Survey.query.filter_by(session_id=session_id).first()
    if survey is None:
        raise NotFoundError(f"Survey with session_id '{session_id}' not found")
    return survey


@bp.route('/surveys', methods=['GET'])
@handles_service_errors()
def get_surveys():
    """Get paginated list of surveys."""
    page = request.args.get('page', 1, type=int)
    per_page = min(request.args.get('per_page', 50, type=int), 100)

    query = Survey.query
    status = request.args.get('tssr_status')
    if status:
        Validator.validate_choice(status, 'tssr_status', [s.value for s in TSSRStatus])
        query = query.filter_by(tssr_status=status)

    pagination = query.order_by(Survey.created_at.desc(), Survey.id.desc()).paginate(
        page=page, per_page=per_page, error_out=False
    )
    return jsonify({
        'surveys': [serialize_survey(survey) for survey in pagination.items],
        'pagination': {
            'page': pagination.page,
            'per_page': pagination.per_page,
            'total': pagination.total,
            'pages': pagination.pages,
            'has_next': pagination.has_next,
            'has_prev': pagination.has_prev
        }
    })


@bp.route('/surveys/<session_id>', methods=['GET'])
@handles_service_errors()
def get_survey(session_id):
    """Get single survey by session id."""
    return api_response(serialize_survey(get_survey_or_404(session_id)))


@bp.route('/surveys', methods=['POST'])
@handles_service_errors()
def create_survey():
    """Create a new survey."""
    validated = Validator.validate_survey_data(get_json_data())
    if Survey.query.filter_by(session_id=validated['session_id']).first():
        raise DuplicateError(f"Survey with session_id '{validated['session_id']}' already exists")

    survey = Survey(**validated)
    db.session.add(survey)
    db.session.commit()

    logger.info(f"Created survey: {survey.id} - {survey.session_id}")
    return api_response(serialize_survey(survey), 'Survey created successfully', 201)


@bp.route('/surveys/<session_id>', methods=['PUT'])
@handles_service_errors()
def update_survey(session_id):
    """Update survey status or metadata. session_id itself cannot change."""
    survey = get_survey_or_404(session_id)
    data = get_json_data()
    data.pop('session_id', None)
    validated = Validator.validate_survey_data(data, partial=True)

    for key, value in validated.items():
        setattr(survey, key, value)
    db.session.commit()

    logger.info(f"Updated survey: {survey.session_id}")
    return api_response(serialize_survey(survey), 'Survey updated successfully')


@bp.route('/surveys/<session_id>', methods=['DELETE'])
@handles_service_errors()
def delete_survey(session_id):
    """Delete a survey. Cascaded and orphaned rows are reported in the summary."""
    session_id = get_survey_or_404(session_id).session_id
    summary = cascade_delete_survey(session_id)
    db.session.commit()

    logger.info(f"Deleted survey: {session_id}", extra={'session_id': session_id})
    return jsonify({
        'message': 'Survey deleted successfully',
        'summary': summary
    })
