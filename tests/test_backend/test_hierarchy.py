"""Tests for the MU / Country / CT / Project / Company reference data."""
import json
import pytest
from tssr_backend.cli import DEFAULT_SEED_FILE
from tssr_backend.models import MU, Country, Company

URL = '/api/hierarchy'


def create(client, level, payload):
    response = client.post(f'{URL}/{level}', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']


@pytest.fixture
def path(client):
    """One full MU > Country > CT > Project > Company chain."""
    mu = create(client, 'mus', {'name': 'CEWA'})
    country = create(client, 'countries', {'name': 'Kenya', 'mu_id': mu['id']})
    ct = create(client, 'cts', {'name': 'Northern region', 'country_id': country['id']})
    project = create(client, 'projects', {'name': 'Rollout', 'ct_id': ct['id']})
    company = create(client, 'companies', {'name': 'Company A', 'project_id': project['id']})
    return {'mu': mu, 'country': country, 'ct': ct, 'project': project, 'company': company}


class TestMus:

    def test_create_and_list(self, client):
        mu = create(client, 'mus', {'name': 'Middle East', 'code': 'ME'})
        assert mu['code'] == 'ME'
        create(client, 'mus', {'name': 'cewa'})

        mus = client.get(f'{URL}/mus').get_json()
        assert [m['name'] for m in mus] == ['Middle East', 'cewa']
        assert mus[1]['code'] == 'CEWA'

    def test_duplicate(self, client):
        create(client, 'mus', {'name': 'CEWA'})
        response = client.post(f'{URL}/mus', json={'name': 'CEWA'})
        assert response.status_code == 409
        assert response.get_json()['type'] == 'DUPLICATE_ERROR'

    @pytest.mark.parametrize('payload, message', [
        ({}, 'MU name is required'),
        ({'name': '   '}, 'MU name is required'),
        ({'name': 'CEWA', 'code': 'C<E>'}, 'MU code contains invalid characters'),
    ])
    def test_invalid(self, client, payload, message):
        response = client.post(f'{URL}/mus', json=payload)
        assert response.status_code == 400
        assert response.get_json()['error'] == message


class TestCountries:

    def test_create_then_link_to_second_mu(self, client, app):
        cewa = create(client, 'mus', {'name': 'CEWA'})
        me = create(client, 'mus', {'name': 'ME'})

        response = client.post(f'{URL}/countries', json={'name': 'Kenya', 'mu_id': cewa['id']})
        assert response.get_json()['message'] == 'Country created successfully'
        assert response.get_json()['data']['code'] == 'KE'

        response = client.post(f'{URL}/countries', json={'name': 'Kenya', 'mu_id': me['id']})
        assert response.status_code == 201
        assert response.get_json()['message'] == 'Existing country linked to MU'

        with app.app_context():
            assert Country.query.count() == 1
        assert [c['name'] for c in client.get(f"{URL}/countries/{me['id']}").get_json()] == ['Kenya']
        assert len(client.get(f'{URL}/countries').get_json()) == 1

    def test_already_linked(self, client):
        mu = create(client, 'mus', {'name': 'CEWA'})
        create(client, 'countries', {'name': 'Kenya', 'mu_id': mu['id']})
        response = client.post(f'{URL}/countries', json={'name': 'Kenya', 'mu_id': mu['id']})
        assert response.status_code == 409
        assert response.get_json()['error'] == 'Country already exists for this MU'

    def test_unknown_mu(self, client):
        response = client.post(f'{URL}/countries', json={'name': 'Kenya', 'mu_id': 99})
        assert response.status_code == 400
        assert response.get_json() == {'error': 'MU with id 99 not found', 'type': 'FOREIGN_KEY_ERROR'}

    def test_missing_mu_id(self, client):
        response = client.post(f'{URL}/countries', json={'name': 'Kenya'})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Country name and mu_id are required'

    def test_unlinked_mu_lists_nothing(self, client):
        mu = create(client, 'mus', {'name': 'CEWA'})
        assert client.get(f"{URL}/countries/{mu['id']}").get_json() == []


class TestChildLevels:

    def test_default_codes(self, path):
        assert path['ct']['code'] == 'NORTHE_CT'
        assert path['project']['code'] == 'ROLLOU_PROJ'
        assert path['company']['code'] == 'COMPAN_COMP'
        assert path['company']['project_id'] == path['project']['id']

    def test_listing_by_parent(self, client, path):
        cts = client.get(f"{URL}/cts/{path['country']['id']}").get_json()
        assert [ct['name'] for ct in cts] == ['Northern region']
        assert client.get(f"{URL}/projects/{path['ct']['id']}").get_json()[0]['name'] == 'Rollout'
        assert client.get(f"{URL}/companies/{path['project']['id']}").get_json()[0]['name'] == 'Company A'
        assert client.get(f'{URL}/cts/999').get_json() == []

    def test_listing_all(self, client, path):
        create(client, 'cts', {'name': 'Coast', 'country_id': path['country']['id']})
        cts = client.get(f'{URL}/cts').get_json()
        assert [ct['name'] for ct in cts] == ['Coast', 'Northern region']
        assert cts[0]['country_id'] == path['country']['id']

        projects = client.get(f'{URL}/projects').get_json()
        assert [p['name'] for p in projects] == ['Rollout']
        companies = client.get(f'{URL}/companies').get_json()
        assert companies[0]['project_id'] == path['project']['id']

    def test_listing_all_empty(self, client):
        for level in ('cts', 'projects', 'companies'):
            response = client.get(f'{URL}/{level}')
            assert response.status_code == 200
            assert response.get_json() == []

    def test_duplicate_within_parent(self, client, path):
        response = client.post(f'{URL}/cts', json={'name': 'Northern region', 'country_id': path['country']['id']})
        assert response.status_code == 409
        assert response.get_json()['error'] == 'CT already exists for this Country'

    def test_same_name_under_other_parent(self, client, path):
        other = create(client, 'cts', {'name': 'Southern region', 'country_id': path['country']['id']})
        project = create(client, 'projects', {'name': 'Rollout', 'ct_id': other['id']})
        assert project['code'] == 'ROLLOU_PROJ'

    def test_unknown_parent(self, client):
        response = client.post(f'{URL}/projects', json={'name': 'Rollout', 'ct_id': 42})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'CT with id 42 not found'

    def test_invalid_parent_id(self, client):
        response = client.post(f'{URL}/companies', json={'name': 'Company A', 'project_id': 'abc'})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'project_id must be a positive integer'


class TestPath:

    def test_full_path(self, client, path):
        ids = [path[level]['id'] for level in ('mu', 'country', 'ct', 'project')]
        data = client.get(f"{URL}/path/{'/'.join(map(str, ids))}").get_json()
        assert data['name'] == 'CEWA'
        country = data['countries'][0]
        assert country['name'] == 'Kenya'
        project = country['cts'][0]['projects'][0]
        assert project['name'] == 'Rollout'
        assert [c['name'] for c in project['companies']] == ['Company A']

    def test_broken_path(self, client, path):
        other_mu = create(client, 'mus', {'name': 'ME'})
        ids = [other_mu['id'], path['country']['id'], path['ct']['id'], path['project']['id']]
        response = client.get(f"{URL}/path/{'/'.join(map(str, ids))}")
        assert response.status_code == 404
        assert response.get_json()['error'] == 'Hierarchy path not found'

        assert client.get(f'{URL}/path/1/1/1/99').status_code == 404


class TestSeedCommand:

    def test_seed_is_idempotent(self, runner, app):
        with open(DEFAULT_SEED_FILE, encoding='utf-8') as f:
            rows = json.load(f)

        result = runner.invoke(args=['seed-hierarchy'])
        assert result.exit_code == 0, result.output
        assert f'Processed {len(rows)} rows:' in result.output

        with app.app_context():
            mus = MU.query.count()
            countries = Country.query.count()
            companies = Company.query.count()
        assert mus == len({row['mu'] for row in rows})
        assert countries == len({row['country'] for row in rows})
        assert f'mus: {mus} created' in result.output

        result = runner.invoke(args=['seed-hierarchy'])
        assert result.exit_code == 0
        for level in ('mus', 'countries', 'links', 'cts', 'projects', 'companies'):
            assert f'{level}: 0 created' in result.output
        with app.app_context():
            assert Company.query.count() == companies

    def test_seed_from_file(self, runner, app, tmp_path):
        seed = tmp_path / 'seed.json'
        seed.write_text(json.dumps([
            {'mu': 'CEWA', 'country': 'Zambia', 'ct': 'Airtel ZM', 'project': 'Swap', 'company': 'Company A'},
            {'mu': 'CEWA', 'country': 'Zanzibar', 'ct': 'Airtel ZM', 'project': 'Swap', 'company': 'Company A'},
            {'mu': 'ME', 'country': 'Zambia'},
        ]))
        result = runner.invoke(args=['seed-hierarchy', '--file', str(seed)])
        assert result.exit_code == 0, result.output
        assert 'links: 3 created' in result.output
        assert 'cts: 2 created' in result.output

        with app.app_context():
            codes = sorted(country.code for country in Country.query.all())
        assert codes == ['ZA', 'ZA_2']

    def test_seed_rejects_bad_rows(self, runner, tmp_path):
        seed = tmp_path / 'seed.json'
        seed.write_text(json.dumps([{'country': 'Kenya'}]))
        result = runner.invoke(args=['seed-hierarchy', '--file', str(seed)])
        assert result.exit_code != 0
        assert "Seed row is missing 'mu'" in result.output

    def test_seed_rejects_non_list(self, runner, tmp_path):
        seed = tmp_path / 'seed.json'
        seed.write_text(json.dumps({'mu': 'CEWA'}))
        result = runner.invoke(args=['seed-hierarchy', '--file', str(seed)])
        assert result.exit_code != 0
        assert 'Seed file must contain a JSON array of rows' in result.output
