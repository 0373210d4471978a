"""Tests for the surveys API and survey deletion semantics."""
import json
from tssr_backend.models import db, OutdoorCabinets, HealthSafetySiteAccess, AcConnectionInfo, SiteLocation, NewFPFHs


class TestSurveyAPI:
    """Survey CRUD endpoints."""

    def test_create_survey(self, client):
        response = client.post('/api/surveys', json={
            'session_id': 'S1', 'site_id': 'SITE-001', 'country': 'Kenya'
        })
        assert response.status_code == 201
        body = json.loads(response.data)
        assert body['message'] == 'Survey created successfully'
        assert body['data']['session_id'] == 'S1'
        assert body['data']['tssr_status'] == 'created'
        assert body['data']['country'] == 'Kenya'

    def test_create_duplicate_survey(self, client, survey):
        response = client.post('/api/surveys', json={'session_id': 'S1'})
        assert response.status_code == 409
        body = response.get_json()
        assert body['type'] == 'DUPLICATE_ERROR'
        assert 'already exists' in body['error']

    def test_create_survey_requires_session_id(self, client):
        response = client.post('/api/surveys', json={'site_id': 'X'})
        assert response.status_code == 400
        assert response.get_json()['type'] == 'VALIDATION_ERROR'

    def test_create_survey_rejects_non_json(self, client):
        response = client.post('/api/surveys', data='not json', content_type='text/plain')
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Request body must contain valid JSON'

    def test_list_surveys_paginated(self, client):
        for n in range(3):
            client.post('/api/surveys', json={'session_id': f'S{n}'})

        response = client.get('/api/surveys?per_page=2')
        assert response.status_code == 200
        body = response.get_json()
        assert len(body['surveys']) == 2
        assert body['pagination']['total'] == 3
        assert body['pagination']['has_next'] is True

    def test_list_surveys_by_status(self, client, survey):
        client.post('/api/surveys', json={'session_id': 'S2', 'tssr_status': 'done'})

        body = client.get('/api/surveys?tssr_status=done').get_json()
        assert [s['session_id'] for s in body['surveys']] == ['S2']

        response = client.get('/api/surveys?tssr_status=unknown')
        assert response.status_code == 400

    def test_get_survey(self, client, survey):
        response = client.get('/api/surveys/S1')
        assert response.status_code == 200
        assert response.get_json()['site_id'] == 'SITE-001'

    def test_get_missing_survey(self, client):
        response = client.get('/api/surveys/NOPE')
        assert response.status_code == 404
        assert response.get_json()['type'] == 'NOT_FOUND'

    def test_update_survey_status(self, client, survey):
        response = client.put('/api/surveys/S1', json={'tssr_status': 'review', 'session_id': 'OTHER'})
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['tssr_status'] == 'review'
        assert data['session_id'] == 'S1'

    def test_update_survey_invalid_status(self, client, survey):
        response = client.put('/api/surveys/S1', json={'tssr_status': 'archived'})
        assert response.status_code == 400
        assert 'tssr_status must be one of' in response.get_json()['error']
        assert client.get('/api/surveys/S1').get_json()['tssr_status'] == 'created'


class TestSurveyDeletion:
    """Cascaded and orphaned rows when a survey goes away."""

    def test_delete_missing_survey(self, client):
        assert client.delete('/api/surveys/NOPE').status_code == 404

    def test_delete_cascades_and_reports_orphans(self, client, app, survey):
        client.put('/api/health-safety-site-access/S1', json={'access_road_safe_condition': 'Yes'})
        client.put('/api/ac-connection-info/S1', json={'power_sources': ['commercial_power']})
        client.put('/api/outdoor-cabinets/S1', json={'number_of_cabinets': 2})

        response = client.delete('/api/surveys/S1')
        assert response.status_code == 200
        summary = response.get_json()['summary']
        assert summary['survey'] == 1
        assert summary['cascaded'] == {'health_safety_site_access': 1, 'ac_connection_info': 1}
        assert summary['orphaned'] == {'outdoor_cabinets': 1}

        with app.app_context():
            assert HealthSafetySiteAccess.query.filter_by(session_id='S1').count() == 0
            assert AcConnectionInfo.query.filter_by(session_id='S1').count() == 0
            # No storage constraint on this table, the row outlives its survey
            assert db.session.query(OutdoorCabinets).filter_by(session_id='S1').count() == 1

        assert client.get('/api/surveys/S1').status_code == 404

    def test_delete_removes_site_forms(self, client, app, survey):
        client.put('/api/site-location/S1', json={'sitename': 'Hilltop'})
        client.put('/api/power-meter/S1', json={'serial_number': 'PM-1'})
        client.put('/api/new-fpfh/S1/1', json={'fpfh_location': 'On ground'})

        summary = client.delete('/api/surveys/S1').get_json()['summary']
        assert summary['cascaded'] == {'site_location': 1, 'power_meter': 1}
        assert summary['orphaned'] == {'new_fpfhs': 1}
        with app.app_context():
            assert SiteLocation.query.filter_by(session_id='S1').count() == 0
            assert db.session.query(NewFPFHs).filter_by(session_id='S1').count() == 1
