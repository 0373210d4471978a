"""Tests for backend utility functions."""
from sqlalchemy.exc import IntegrityError
from tssr_shared.errors import DuplicateError, ForeignKeyError, ValidationError
from tssr_backend.models import db, Survey, NewAntennas
from tssr_backend.utils import api_response, api_error, translate_integrity_error, get_orphaned_records


def integrity_error(text):
    return IntegrityError('INSERT ...', {}, Exception(text))


def test_api_response_shapes(app):
    with app.test_request_context():
        response, status = api_response({'a': 1})
        assert (response.get_json(), status) == ({'a': 1}, 200)

        response, status = api_response({'a': 1}, 'Saved', 201)
        assert (response.get_json(), status) == ({'message': 'Saved', 'data': {'a': 1}}, 201)

        response, _ = api_response({'a': 1}, envelope=True)
        assert response.get_json() == {'success': True, 'data': {'a': 1}}


def test_api_error_shapes(app):
    with app.test_request_context():
        response, status = api_error('Bad input')
        assert status == 400
        assert response.get_json() == {'error': 'Bad input', 'type': 'VALIDATION_ERROR'}

        response, status = api_error('Gone', 404, 'NOT_FOUND', envelope=True)
        assert status == 404
        assert response.get_json() == {'success': False, 'error': {'type': 'NOT_FOUND', 'message': 'Gone'}}


def test_translate_integrity_error():
    assert isinstance(translate_integrity_error(integrity_error('UNIQUE constraint failed: mu.code')), DuplicateError)
    assert isinstance(translate_integrity_error(integrity_error('FOREIGN KEY constraint failed')), ForeignKeyError)
    assert isinstance(translate_integrity_error(integrity_error('CHECK constraint failed')), ValidationError)


def test_get_orphaned_records(app):
    with app.app_context():
        db.session.add(Survey(session_id='S1'))
        db.session.add(NewAntennas(session_id='S1', antenna_index=1, version=1))
        db.session.add(NewAntennas(session_id='GONE', antenna_index=1, version=1))
        db.session.commit()

        orphaned = get_orphaned_records()
        assert list(orphaned) == ['new_antennas']
        assert len(orphaned['new_antennas']) == 1
        assert get_orphaned_records('ran_equipment') == {}
