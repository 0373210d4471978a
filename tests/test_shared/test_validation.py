"""Tests for shared validation utilities."""
import pytest
from tssr_shared.validation import Validator
from tssr_shared.errors import ValidationError


class TestValidator:
    """Test validation utilities."""

    def test_validate_required(self):
        assert Validator.validate_required("test", "test_field") == "test"
        assert Validator.validate_required(0, "test_field") == 0

        for value in ("", "   ", None):
            with pytest.raises(ValidationError, match="test_field is required"):
                Validator.validate_required(value, "test_field")

    def test_validate_string_length(self):
        assert Validator.validate_string_length("  test  ", "field", 1, 10) == "test"

        with pytest.raises(ValidationError, match="field must be at least 5 characters"):
            Validator.validate_string_length("test", "field", 5, 10)
        with pytest.raises(ValidationError, match="field must be no more than 3 characters"):
            Validator.validate_string_length("testing", "field", 1, 3)
        with pytest.raises(ValidationError, match="field must be a string"):
            Validator.validate_string_length(12, "field")

    def test_validate_numeric_range_success(self):
        assert Validator.validate_numeric_range(5, "count", 0, 10) == 5
        assert Validator.validate_numeric_range("2.5", "length", 0) == 2.5
        assert Validator.validate_numeric_range("3", "count", integer=True) == 3
        assert isinstance(Validator.validate_numeric_range(4.0, "count", integer=True), int)

    @pytest.mark.parametrize('value, kwargs, message', [
        ("abc", {}, "count must be a valid number"),
        (True, {}, "count must be a valid number"),
        ([1], {}, "count must be a valid number"),
        ("nan", {}, "count must be a valid number"),
        ("1e400", {'integer': True}, "count must be a valid number"),
        (float("inf"), {}, "count must be a valid number"),
        (10 ** 400, {}, "count must be a valid number"),
        (2.5, {'integer': True}, "count must be a whole number"),
        (-1, {'min_val': 0}, "count must be at least 0"),
        (21, {'max_val': 20}, "count must be no more than 20"),
    ])
    def test_validate_numeric_range_failure(self, value, kwargs, message):
        with pytest.raises(ValidationError, match=message):
            Validator.validate_numeric_range(value, "count", **kwargs)

    def test_validate_choice(self):
        assert Validator.validate_choice("Yes", "answer", ["Yes", "No"]) == "Yes"
        with pytest.raises(ValidationError, match="answer must be one of: Yes, No"):
            Validator.validate_choice("Maybe", "answer", ["Yes", "No"])

    def test_validate_choices(self):
        assert Validator.validate_choices(["4G", "2G", "4G"], "tech", ["2G", "4G"]) == ["4G", "2G"]
        assert Validator.validate_choices(None, "tech", ["2G"]) == []

        with pytest.raises(ValidationError, match="tech contains invalid value '6G'"):
            Validator.validate_choices(["6G"], "tech", ["2G", "4G"])
        with pytest.raises(ValidationError, match="tech must be a list"):
            Validator.validate_choices("2G", "tech", ["2G"])

    def test_validate_session_id(self):
        assert Validator.validate_session_id("  S1 ") == "S1"

        for value in ("", "   ", None, 12):
            with pytest.raises(ValidationError, match="Invalid session ID format"):
                Validator.validate_session_id(value)
        with pytest.raises(ValidationError, match="no more than 255 characters"):
            Validator.validate_session_id("x" * 256)

    @pytest.mark.parametrize('value', [0, -1, "abc", None, True, 1.5, float("inf")])
    def test_validate_index_failure(self, value):
        with pytest.raises(ValidationError, match="antenna_index must be a positive integer"):
            Validator.validate_index(value, "antenna_index")

    def test_validate_index_success(self):
        assert Validator.validate_index("3", "antenna_index") == 3
        assert Validator.validate_index(2.0, "antenna_index") == 2

    def test_sanitize_html(self):
        assert Validator.sanitize_html("Plain text") == "Plain text"
        assert Validator.sanitize_html("") == ""

        cleaned = Validator.sanitize_html("<script>alert('x')</script><strong>Bold</strong>")
        assert "<script>" not in cleaned
        assert "<strong>Bold</strong>" in cleaned

        cleaned = Validator.sanitize_html('<p onclick="steal()">Text</p>')
        assert cleaned == "<p>Text</p>"

    def test_validate_survey_data(self):
        data = {
            'session_id': 'S1',
            'site_id': 1234,
            'country': 'Kenya',
            'tssr_status': 'submitted',
            'unknown': 'ignored',
        }
        validated = Validator.validate_survey_data(data)
        assert validated == {'session_id': 'S1', 'site_id': '1234', 'country': 'Kenya', 'tssr_status': 'submitted'}

        with pytest.raises(ValidationError, match="tssr_status must be one of"):
            Validator.validate_survey_data({'session_id': 'S1', 'tssr_status': 'archived'})
        with pytest.raises(ValidationError, match="Site ID must be no more than 50 characters"):
            Validator.validate_survey_data({'session_id': 'S1', 'site_id': 'x' * 51})

    def test_validate_survey_data_partial(self):
        assert Validator.validate_survey_data({'project': 'Rollout'}, partial=True) == {'project': 'Rollout'}
        with pytest.raises(ValidationError, match="Invalid session ID format"):
            Validator.validate_survey_data({'project': 'Rollout'})

    def test_validate_hierarchy_data(self):
        validated = Validator.validate_hierarchy_data({'name': ' Kenya ', 'code': 'KE', 'mu_id': '2'}, 'Country', 'mu_id')
        assert validated == {'name': 'Kenya', 'code': 'KE', 'mu_id': 2}

        with pytest.raises(ValidationError, match="CT name is required"):
            Validator.validate_hierarchy_data({'country_id': 1}, 'CT', 'country_id')
        with pytest.raises(ValidationError, match="CT name and country_id are required"):
            Validator.validate_hierarchy_data({'name': 'North'}, 'CT', 'country_id')
        with pytest.raises(ValidationError, match="MU code contains invalid characters"):
            Validator.validate_hierarchy_data({'name': 'CEWA', 'code': 'CE/WA'}, 'MU')
