"""Backend utility functions for the TSSR site survey service."""
import logging
from functools import wraps
from flask import jsonify, request
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from tssr_shared.enums import ErrorType
from tssr_shared.errors import (
    ServiceError, ValidationError, ForeignKeyError, DuplicateError, survey_not_found_message
)
from .models import db, Survey, CASCADE_TABLES, UNCONSTRAINED_TABLES


logger = logging.getLogger(__name__)


def api_response(data=None, message=None, status_code=200, envelope=False):
    """Build a success response in either the envelope or the legacy shape.

    Envelope modules answer ``{success: true, data, [message]}``. Legacy
    modules answer the bare object, or ``{message, data}`` when a message is
    given.
    """
    if envelope:
        body = {'success': True, 'data': data}
        if message:
            body['message'] = message
    elif message:
        body = {'message': message, 'data': data}
    else:
        body = data
    return jsonify(body), status_code


def api_error(message, status_code=400, error_type=ErrorType.VALIDATION_ERROR, envelope=False,
              log_level='warning', details=None):
    """
    Standardized API error response with consistent logging.

    Args:
        message (str): Error message for the client
        status_code (int): HTTP status code
        error_type (ErrorType): Taxonomy entry reported to the client
        envelope (bool): Use the ``{success, error: {type, message}}`` shape
        log_level (str): Logging level ('debug', 'info', 'warning', 'error', 'critical')
        details (dict, optional): Additional details for logging

    Returns:
        Flask response: JSON error response
    """
    log_func = getattr(logger, log_level, logger.warning)
    if details:
        log_func(f"API Error ({status_code}): {message} - Details: {details}")
    else:
        log_func(f"API Error ({status_code}): {message}")

    error_type = getattr(error_type, 'value', error_type)
    if envelope:
        return jsonify({'success': False, 'error': {'type': error_type, 'message': message}}), status_code
    return jsonify({'error': message, 'type': error_type}), status_code


def service_error_response(error, envelope=False):
    """Render a ServiceError with its own status code and error type."""
    log_level = 'error' if error.status_code >= 500 else 'warning'
    return api_error(error.message, error.status_code, error.error_type, envelope, log_level)


def handle_api_exception(e, operation="operation", envelope=False):
    """
    Handle unexpected exceptions in API endpoints with consistent logging and responses.

    Args:
        e (Exception): The exception that occurred
        operation (str): Description of the operation being performed
        envelope (bool): Response shape of the calling module

    Returns:
        Flask response: JSON error response
    """
    logger.error(f"Exception during {operation}: {str(e)}", exc_info=True)
    return api_error(f"Failed to {operation}", 500, ErrorType.INTERNAL_ERROR, envelope, 'error')


def translate_integrity_error(e):
    """Map a storage constraint violation onto the error taxonomy."""
    text = str(getattr(e, 'orig', e)).lower()
    if 'unique' in text or 'duplicate' in text:
        return DuplicateError('A record with the same key already exists')
    if 'foreign key' in text:
        return ForeignKeyError('Referenced record does not exist')
    return ValidationError(f"Constraint violation: {getattr(e, 'orig', e)}")


def handles_service_errors(envelope=False):
    """Decorator turning service exceptions into the module's error shape.

    ServiceError subclasses keep their status code. IntegrityError is
    translated. Anything else rolls back and answers 500.
    """
    def decorator(func):
        operation = func.__name__.replace('_', ' ')

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ServiceError as e:
                db.session.rollback()
                return service_error_response(e, envelope)
            except IntegrityError as e:
                db.session.rollback()
                return service_error_response(translate_integrity_error(e), envelope)
            except Exception as e:
                db.session.rollback()
                return handle_api_exception(e, operation, envelope)

        return wrapper
    return decorator


def get_json_data():
    """Get and validate the JSON object body of the current request.

    Raises:
        ValidationError: If JSON is invalid or not an object
    """
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError('Request body must contain valid JSON')
    if not isinstance(data, dict):
        raise ValidationError('Request data must be a JSON object')
    return data


def survey_exists(session_id):
    return db.session.execute(
        select(Survey.id).where(Survey.session_id == session_id)
    ).first() is not None


def require_survey(session_id):
    """Raise ForeignKeyError unless a survey row exists for ``session_id``."""
    if not survey_exists(session_id):
        raise ForeignKeyError(survey_not_found_message(session_id))


def get_orphaned_records(table_name=None):
    """
    Find rows whose session_id no longer matches a survey.

    Only tables without a storage-level reference to ``survey`` can hold
    orphans; cascaded tables are cleaned by the database.

    Args:
        table_name (str, optional): Restrict the check to one table.

    Returns:
        dict: Table names mapped to lists of orphaned row ids
    """
    orphaned = {}
    known_sessions = select(Survey.session_id)

    for model in UNCONSTRAINED_TABLES:
        if table_name is not None and model.__tablename__ != table_name:
            continue
        query = select(model.id).where(model.session_id.not_in(known_sessions))
        if hasattr(model, 'is_active'):
            # Deactivated images are history, not orphans
            query = query.where(model.is_active.is_(True))
        ids = db.session.execute(query.order_by(model.id)).scalars().all()
        if ids:
            orphaned[model.__tablename__] = list(ids)

    return orphaned


def cascade_delete_survey(session_id):
    """
    Delete a survey and report what happened to its dependent rows.

    Rows in tables declared with ON DELETE CASCADE are removed by the
    database. Rows in the other tables are left in place and reported as
    orphaned.

    Args:
        session_id (str): Session of the survey to delete

    Returns:
        dict: ``{'survey': 0|1, 'cascaded': {...}, 'orphaned': {...}}``
    """
    summary = {'survey': 0, 'cascaded': {}, 'orphaned': {}}

    survey = Survey.query.filter_by(session_id=session_id).first()
    if not survey:
        return summary

    for model in CASCADE_TABLES:
        count = model.query.filter_by(session_id=session_id).count()
        if count:
            summary['cascaded'][model.__tablename__] = count

    for model in UNCONSTRAINED_TABLES:
        query = model.query.filter_by(session_id=session_id)
        if hasattr(model, 'is_active'):
            query = query.filter_by(is_active=True)
        count = query.count()
        if count:
            summary['orphaned'][model.__tablename__] = count

    db.session.delete(survey)
    summary['survey'] = 1

    logger.info(f"Cascading delete completed for survey {session_id}: {summary}")
    return summary
