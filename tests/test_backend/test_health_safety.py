"""Tests for the health & safety checklists and the generic form behaviour they exercise."""
from tssr_backend.models import db, HealthSafetySiteAccess

SITE_ACCESS_URL = '/api/health-safety-site-access/S1'
BTS_ACCESS_URL = '/api/health-safety-bts-access/S1'


class TestHealthSafetySiteAccess:

    def test_put_without_survey(self, client):
        response = client.put(SITE_ACCESS_URL, json={'access_road_safe_condition': 'Yes'})
        assert response.status_code == 400
        body = response.get_json()
        assert body['error'] == "Survey with session_id 'S1' not found. Please create a survey first."
        assert body['type'] == 'FOREIGN_KEY_ERROR'

    def test_put_after_survey_created(self, client, survey):
        response = client.put(SITE_ACCESS_URL, json={'access_road_safe_condition': 'Yes'})
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['access_road_safe_condition'] == 'Yes'
        assert data['ladders_good_condition'] == ''
        assert data['special_permits_required'] == ''
        assert data['has_data'] is True
        assert data['version'] == 1

    def test_get_default_shape(self, client, survey):
        response = client.get(SITE_ACCESS_URL)
        assert response.status_code == 200
        data = response.get_json()
        assert data['has_data'] is False
        assert data['id'] is None
        assert data['version'] == 0
        fields = [k for k in data if k not in ('id', 'session_id', 'version', 'created_at', 'updated_at', 'has_data')]
        assert len(fields) == 15
        assert all(data[field] == '' for field in fields)

    def test_get_never_creates_row(self, client, app, survey):
        client.get(SITE_ACCESS_URL)
        with app.app_context():
            assert db.session.query(HealthSafetySiteAccess).count() == 0

    def test_enum_rejection_is_not_persisted(self, client, survey):
        response = client.put(SITE_ACCESS_URL, json={'access_road_safe_condition': 'Maybe'})
        assert response.status_code == 400
        body = response.get_json()
        assert body['type'] == 'VALIDATION_ERROR'
        assert 'Yes, No, Not applicable' in body['error']

        assert client.get(SITE_ACCESS_URL).get_json()['has_data'] is False

    def test_put_is_idempotent(self, client, app, survey):
        payload = {'access_road_safe_condition': 'Yes', 'ladders_good_condition': 'Not applicable'}
        first = client.put(SITE_ACCESS_URL, json=payload).get_json()['data']
        second = client.put(SITE_ACCESS_URL, json=payload).get_json()['data']
        assert first == second
        assert second['version'] == 1
        with app.app_context():
            assert db.session.query(HealthSafetySiteAccess).count() == 1

    def test_empty_string_clears_answer(self, client, survey):
        client.put(SITE_ACCESS_URL, json={'access_road_safe_condition': 'No'})
        data = client.put(SITE_ACCESS_URL, json={'access_road_safe_condition': ''}).get_json()['data']
        assert data['access_road_safe_condition'] == ''
        assert data['version'] == 2

    def test_stale_version_is_rejected(self, client, survey):
        client.put(SITE_ACCESS_URL, json={'access_road_safe_condition': 'Yes'})

        response = client.put(SITE_ACCESS_URL, json={'access_road_safe_condition': 'No', 'version': 5})
        assert response.status_code == 409
        assert response.get_json()['type'] == 'CONFLICT'
        assert client.get(SITE_ACCESS_URL).get_json()['access_road_safe_condition'] == 'Yes'

        response = client.put(SITE_ACCESS_URL, json={'access_road_safe_condition': 'No', 'version': 1})
        assert response.status_code == 200
        assert response.get_json()['data']['version'] == 2

    def test_patch_requires_existing_row(self, client, survey):
        response = client.patch(SITE_ACCESS_URL, json={'access_road_safe_condition': 'Yes'})
        assert response.status_code == 404
        assert response.get_json()['type'] == 'NOT_FOUND'

    def test_patch_updates_only_sent_fields(self, client, survey):
        client.put(SITE_ACCESS_URL, json={'access_road_safe_condition': 'Yes', 'ladders_good_condition': 'No'})
        data = client.patch(SITE_ACCESS_URL, json={'ladders_good_condition': 'Yes'}).get_json()['data']
        assert data['access_road_safe_condition'] == 'Yes'
        assert data['ladders_good_condition'] == 'Yes'

    def test_delete(self, client, survey):
        assert client.delete(SITE_ACCESS_URL).status_code == 404
        client.put(SITE_ACCESS_URL, json={'access_road_safe_condition': 'Yes'})
        response = client.delete(SITE_ACCESS_URL)
        assert response.status_code == 200
        assert response.get_json()['data']['deleted'] == 1
        assert client.get(SITE_ACCESS_URL).get_json()['has_data'] is False


class TestHealthSafetyBTSAccess:

    def test_default_shape_has_seven_answers(self, client, survey):
        data = client.get(BTS_ACCESS_URL).get_json()
        assert data['has_data'] is False
        assert data['safe_access_bts_poles_granted'] == ''
        answers = [k for k in data if k not in ('id', 'session_id', 'version', 'created_at', 'updated_at', 'has_data')]
        assert len(answers) == 7

    def test_unknown_fields_are_ignored(self, client, survey):
        response = client.put(BTS_ACCESS_URL, json={
            'safe_access_bts_poles_granted': 'Yes', 'not_a_field': 'x'
        })
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['safe_access_bts_poles_granted'] == 'Yes'
        assert 'not_a_field' not in data
