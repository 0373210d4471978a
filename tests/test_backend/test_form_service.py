"""Unit tests for the generic form service building blocks."""
from typing import List
import pytest
from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from tssr_shared.errors import ValidationError, ConflictError
from tssr_shared.schemas import Cabinet
from tssr_backend.base.form_service import FieldSpec, build_field_specs, pydantic_error_message, split_version
from tssr_backend.models import SiteAccess, NewRadioInstallations, OutdoorCabinets


def test_pydantic_error_message_paths():
    with pytest.raises(PydanticValidationError) as excinfo:
        TypeAdapter(List[Cabinet]).validate_python([{'freeU': -2}])
    message = pydantic_error_message(excinfo.value, 'cabinets')
    assert message.startswith('cabinets.0.freeU: ')


def test_split_version():
    data = {'a': 1, 'version': 3}
    assert split_version(data) == ({'a': 1}, 3)
    assert split_version({'a': 1}) == ({'a': 1}, None)


class TestFieldSpec:

    def test_choice(self):
        spec = FieldSpec('sector', 'choice', choices=['1', '2'])
        assert spec.clean(2) == '2'
        assert spec.clean('') is None
        assert spec.blank() == ''
        with pytest.raises(ValidationError, match='sector must be one of: 1, 2'):
            spec.clean('3')

    def test_number(self):
        spec = FieldSpec('length', 'number', min_val=0)
        assert spec.clean('4.5') == 4.5
        assert spec.clean('  ') is None
        assert spec.blank() == ''
        with pytest.raises(ValidationError, match='length must be at least 0'):
            spec.clean(-1)

    def test_number_not_nullable_uses_default(self):
        spec = FieldSpec('count', 'number', min_val=1, max_val=20, integer=True, nullable=False, default=1)
        assert spec.clean('') == 1
        assert spec.blank() == 1

    def test_multi_free_values(self):
        spec = FieldSpec('notes', 'multi')
        assert spec.clean(['a', '', None, 'b']) == ['a', 'b']
        assert spec.clean('') == []
        with pytest.raises(ValidationError, match='notes must be a list'):
            spec.clean('a')

    def test_json_with_schema(self):
        spec = FieldSpec('cabinets', 'json', schema=List[Cabinet])
        assert spec.clean([{'vendor': 'Nokia'}])[0]['vendor'] == 'Nokia'
        assert spec.blank() == []
        with pytest.raises(ValidationError, match='cabinets.0.freeU'):
            spec.clean([{'freeU': 'lots'}])

    def test_json_without_schema(self):
        spec = FieldSpec('extra', 'json')
        assert spec.clean({'a': 1}) == {'a': 1}
        with pytest.raises(ValidationError, match='extra must be an object or a list'):
            spec.clean('text')

    def test_string(self):
        spec = FieldSpec('name', 'string', max_length=5)
        assert spec.clean(None) == ''
        assert spec.clean(42) == '42'
        assert spec.clean(' <em>x</em> ') == '<em>x</em>'
        with pytest.raises(ValidationError, match='name must be no more than 5 characters'):
            spec.clean('too long')

    def test_present_enum_value(self):
        class Answer:
            value = 'Yes'
        spec = FieldSpec('answer', 'choice', choices=['Yes'])
        assert spec.present(Answer()) == 'Yes'
        assert spec.present(None) == ''


def test_build_field_specs_from_columns():
    specs = build_field_specs(SiteAccess, multi_choices={'site_access_type': None})
    assert 'id' not in specs and 'session_id' not in specs and 'version' not in specs
    assert all(spec.kind in ('choice', 'multi', 'number', 'json', 'string') for spec in specs.values())

    planned = build_field_specs(NewRadioInstallations, numeric_ranges={'new_sectors_planned': (1, 20)})
    spec = planned['new_sectors_planned']
    assert (spec.kind, spec.min_val, spec.max_val, spec.integer) == ('number', 1, 20, True)
    assert spec.blank() == 1


def test_build_field_specs_excludes():
    specs = build_field_specs(OutdoorCabinets, exclude=('number_of_cabinets',))
    assert 'number_of_cabinets' not in specs


def test_stale_version_conflicts(client, survey):
    url = '/api/new-radio-installations/S1'
    first = client.put(url, json={'new_sectors_planned': 2}).get_json()['data']
    assert first['version'] == 1

    unchanged = client.put(url, json={'new_sectors_planned': 2, 'version': 1}).get_json()['data']
    assert unchanged['version'] == 1

    response = client.put(url, json={'new_sectors_planned': 3, 'version': 0})
    assert response.status_code == 409
    assert response.get_json()['type'] == ConflictError.error_type.value

    response = client.put(url, json={'new_sectors_planned': 3, 'version': 'x'})
    assert response.status_code == 400
