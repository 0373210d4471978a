"""Tests for new FPFHs, sized by the planned FPFH count."""
import pytest
from tssr_backend.models import db, NewFPFHs

URL = '/api/new-fpfh/S1'
INSTALLATIONS_URL = '/api/new-radio-installations/S1'


def test_empty_list_reports_planned_count(client, survey):
    data = client.get(URL).get_json()
    assert data == {
        'session_id': 'S1',
        'new_fpfh_installed': 1,
        'fpfhs': [],
        'total_fpfhs': 0,
    }

    client.put(INSTALLATIONS_URL, json={'new_fpfh_installed': 3})
    assert client.get(URL).get_json()['new_fpfh_installed'] == 3


def test_put_one_creates_then_updates(client, app, survey):
    response = client.put(f'{URL}/1', json={
        'fpfh_installation_type': 'Standalone',
        'fpfh_location': 'On tower',
        'fpfh_base_height': '12.5',
        'fpfh_tower_leg': 'A',
        'fpfh_dc_power_source': 'from new DC rectifier cabinet',
        'dc_distribution_source': 'BLVD',
        'earth_bus_bar_exists': 'Yes',
    })
    assert response.status_code == 201
    data = response.get_json()['data']
    assert data['fpfh_index'] == 1
    assert data['fpfh_base_height'] == 12.5
    assert data['dc_distribution_source'] == 'BLVD'

    response = client.put(f'{URL}/1', json={'fpfh_location': 'On ground'})
    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['fpfh_location'] == 'On ground'
    assert data['fpfh_installation_type'] == 'Standalone'

    with app.app_context():
        assert db.session.query(NewFPFHs).filter_by(session_id='S1').count() == 1


@pytest.mark.parametrize('payload, field', [
    ({'fpfh_location': 'In the sky'}, 'fpfh_location'),
    ({'dc_distribution_source': 'BI VD'}, 'dc_distribution_source'),
    ({'fpfh_base_height': -2}, 'fpfh_base_height'),
    ({'ethernet_cable_length': 'inf'}, 'ethernet_cable_length'),
])
def test_invalid_entry(client, survey, payload, field):
    response = client.put(f'{URL}/1', json=payload)
    assert response.status_code == 400
    assert response.get_json()['error'].startswith(field)


def test_index_must_be_positive(client, survey):
    response = client.put(f'{URL}/0', json={'fpfh_location': 'On ground'})
    assert response.status_code == 400
    assert response.get_json()['error'] == 'fpfh_index must be a positive integer'


def test_bulk_put_keeps_given_indices(client, survey):
    response = client.put(URL, json={'fpfhs': [
        {'fpfh_location': 'On ground'},
        {'fpfh_index': 4, 'fpfh_location': 'On tower'},
    ]})
    assert response.status_code == 200
    listing = client.get(URL).get_json()
    assert [f['fpfh_index'] for f in listing['fpfhs']] == [1, 4]
    assert listing['total_fpfhs'] == 2


def test_images_limited_to_planned_count(client, survey, make_image):
    client.put(INSTALLATIONS_URL, json={'new_fpfh_installed': 2})
    response = client.post(f'{URL}/images', data={
        'new_fpfh_2_earth_bus_bar': (make_image(), 'bar.png', 'image/png'),
        'new_fpfh_3_earth_bus_bar': (make_image('blue'), 'bar3.png', 'image/png'),
        'new_fpfh_1_roof': (make_image('green'), 'roof.png', 'image/png'),
    }, content_type='multipart/form-data')
    body = response.get_json()
    assert body['uploaded'] == 1
    assert body['failed'] == 2

    client.put(f'{URL}/2', json={'fpfh_location': 'On ground'})
    entry = client.get(f'{URL}/2').get_json()
    assert entry['images'][0]['image_category'] == 'earth_bus_bar'
    assert entry['images'][0]['record_index'] == 2


def test_entry_without_survey(client):
    response = client.put(f'{URL}/1', json={'fpfh_location': 'On ground'})
    assert response.status_code == 400
    assert response.get_json()['type'] == 'FOREIGN_KEY_ERROR'
