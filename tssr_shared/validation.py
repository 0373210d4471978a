"""Input validation utilities."""
import math
import re
import bleach
from tssr_shared.enums import TSSRStatus
from tssr_shared.errors import ValidationError


class Validator:
    """Input validation utilities."""

    SESSION_ID_MAX_LENGTH = 255
    CODE_PATTERN = re.compile(r'^[A-Za-z0-9_\- ,&.]+$')

    @staticmethod
    def validate_required(value, field_name):
        """Validate that a required field is not empty."""
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{field_name} is required")
        return value

    @staticmethod
    def validate_string_length(value, field_name, min_length=0, max_length=None):
        """Validate string length constraints."""
        if not isinstance(value, str):
            raise ValidationError(f"{field_name} must be a string")

        if len(value) < min_length:
            raise ValidationError(f"{field_name} must be at least {min_length} characters")

        if max_length and len(value) > max_length:
            raise ValidationError(f"{field_name} must be no more than {max_length} characters")

        return value.strip()

    @staticmethod
    def validate_numeric_range(value, field_name, min_val=None, max_val=None, integer=False):
        """Validate numeric value within range.

        Numeric strings are converted. With ``integer=True`` the value must have
        no fractional part and is returned as an int.
        """
        if isinstance(value, bool):
            raise ValidationError(f"{field_name} must be a valid number")
        try:
            num_val = float(value) if isinstance(value, str) else value
            if not isinstance(num_val, (int, float)):
                raise TypeError(field_name)
            finite = math.isfinite(num_val)
        except (ValueError, TypeError, OverflowError):
            raise ValidationError(f"{field_name} must be a valid number")

        if not finite:
            raise ValidationError(f"{field_name} must be a valid number")

        if integer:
            if num_val != int(num_val):
                raise ValidationError(f"{field_name} must be a whole number")
            num_val = int(num_val)

        if min_val is not None and num_val < min_val:
            raise ValidationError(f"{field_name} must be at least {min_val}")

        if max_val is not None and num_val > max_val:
            raise ValidationError(f"{field_name} must be no more than {max_val}")

        return num_val

    @staticmethod
    def validate_choice(value, field_name, valid_choices):
        """Validate that value is in list of valid choices."""
        if value not in valid_choices:
            raise ValidationError(f"{field_name} must be one of: {', '.join(str(c) for c in valid_choices)}")
        return value

    @staticmethod
    def validate_choices(values, field_name, valid_choices):
        """Validate a multi-select answer against the allowed values.

        Duplicates are dropped, first occurrence wins.
        """
        if values is None:
            return []
        if not isinstance(values, list):
            raise ValidationError(f"{field_name} must be a list")
        result = []
        for value in values:
            if value not in valid_choices:
                raise ValidationError(
                    f"{field_name} contains invalid value '{value}'. "
                    f"Allowed values: {', '.join(str(c) for c in valid_choices)}"
                )
            if value not in result:
                result.append(value)
        return result

    @staticmethod
    def validate_session_id(session_id):
        """Validate the session identifier used as partition key."""
        if not isinstance(session_id, str) or not session_id.strip():
            raise ValidationError("Invalid session ID format")
        session_id = session_id.strip()
        if len(session_id) > Validator.SESSION_ID_MAX_LENGTH:
            raise ValidationError(
                f"session_id must be no more than {Validator.SESSION_ID_MAX_LENGTH} characters"
            )
        return session_id

    @staticmethod
    def validate_index(value, field_name):
        """Validate a 1-based entity index taken from the URL or a payload."""
        try:
            index = int(value)
        except (ValueError, TypeError, OverflowError):
            raise ValidationError(f"{field_name} must be a positive integer")
        if isinstance(value, bool) or index < 1 or (isinstance(value, float) and value != index):
            raise ValidationError(f"{field_name} must be a positive integer")
        return index

    @staticmethod
    def sanitize_html(text):
        """Secure HTML sanitization using bleach library.

        Plain text without markup characters is returned untouched.
        """
        if not text:
            return text

        if '<' not in text and '>' not in text and '&' not in text:
            return text

        # Allow only safe tags and attributes, no CSS or JavaScript
        allowed_tags = ['p', 'br', 'strong', 'em', 'u', 'ul', 'ol', 'li', 'blockquote']
        allowed_attributes = {}

        return bleach.clean(text, tags=allowed_tags, attributes=allowed_attributes, strip=True)

    @staticmethod
    def validate_survey_data(data, partial=False):
        """Validate survey data.

        With ``partial=True`` only the keys present are checked and
        ``session_id`` may be omitted.
        """
        validated = {}

        if not partial or 'session_id' in data:
            validated['session_id'] = Validator.validate_session_id(data.get('session_id'))

        if 'site_id' in data and data['site_id'] is not None:
            validated['site_id'] = Validator.validate_string_length(
                str(data['site_id']), 'Site ID', 0, 50
            )

        for field in ('country', 'ct', 'project', 'company'):
            if field in data and data[field] is not None:
                validated[field] = Validator.sanitize_html(
                    Validator.validate_string_length(data[field], field, 0, 255)
                )

        if 'tssr_status' in data:
            validated['tssr_status'] = Validator.validate_choice(
                data['tssr_status'], 'tssr_status', [status.value for status in TSSRStatus]
            )

        return validated

    @staticmethod
    def validate_hierarchy_data(data, level_name, parent_field=None):
        """Validate a reference-data entry (MU, country, CT, project or company)."""
        validated = {}

        name = data.get('name')
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(f"{level_name} name is required")
        validated['name'] = Validator.validate_string_length(name, f"{level_name} name", 1, 255)

        code = data.get('code')
        if code:
            code = Validator.validate_string_length(code, f"{level_name} code", 1, 50)
            if not Validator.CODE_PATTERN.match(code):
                raise ValidationError(f"{level_name} code contains invalid characters")
            validated['code'] = code

        if parent_field:
            parent_id = data.get(parent_field)
            if parent_id in (None, ''):
                raise ValidationError(f"{level_name} name and {parent_field} are required")
            validated[parent_field] = Validator.validate_index(parent_id, parent_field)

        return validated
