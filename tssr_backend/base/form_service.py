"""Generic session-scoped form service that removes per-module CRUD boilerplate."""
import logging
from typing import Optional, Callable, Any, Dict
from flask import jsonify, request
from pydantic import BaseModel, TypeAdapter, ValidationError as PydanticValidationError
from sqlalchemy import Integer, Float, Numeric, JSON, Enum
from tssr_shared.errors import ValidationError, NotFoundError, ConflictError
from tssr_shared.validation import Validator
from ..models import db
from ..utils import api_response, get_json_data, handles_service_errors, require_survey

# Columns the service manages itself
SYSTEM_COLUMNS = {'id', 'session_id', 'version', 'created_at', 'updated_at'}


def pydantic_error_message(e, prefix=None):
    """Flatten a Pydantic ValidationError into ``field.path: msg; ...``."""
    errors = []
    for error in e.errors():
        loc = [prefix] if prefix else []
        loc.extend(str(x) for x in error['loc'])
        field = '.'.join(loc)
        msg = error['msg'].removeprefix('Value error, ')
        errors.append(f"{field}: {msg}" if field else msg)
    return '; '.join(errors)


class FieldSpec:
    """Validation and presentation rules for one form column.

    ``kind`` is one of ``choice``, ``multi``, ``number``, ``json`` or ``string``.
    """

    def __init__(self, name, kind, choices=None, min_val=None, max_val=None, integer=False,
                 nullable=True, default=None, max_length=None, schema=None, blank=''):
        self.name = name
        self.kind = kind
        self.choices = choices
        self.min_val = min_val
        self.max_val = max_val
        self.integer = integer
        self.nullable = nullable
        self.default = default
        self.max_length = max_length
        self.schema = schema
        self.adapter = TypeAdapter(schema) if schema is not None else None
        self.blank_value = blank

    def clean(self, value):
        """Validate and coerce an incoming value into its stored form."""
        if self.kind == 'choice':
            if value is None or value == '':
                return None
            if isinstance(value, int) and not isinstance(value, bool):
                value = str(value)
            return Validator.validate_choice(value, self.name, self.choices)

        if self.kind == 'number':
            if value is None or (isinstance(value, str) and not value.strip()):
                return None if self.nullable else self.default
            return Validator.validate_numeric_range(
                value, self.name, self.min_val, self.max_val, integer=self.integer
            )

        if self.kind == 'multi':
            if self.choices is not None:
                return Validator.validate_choices(value, self.name, self.choices)
            if value is None or value == '':
                return []
            if not isinstance(value, list):
                raise ValidationError(f"{self.name} must be a list")
            return [Validator.sanitize_html(str(v)) for v in value if v not in (None, '')]

        if self.kind == 'json':
            if self.adapter is None:
                if value is not None and not isinstance(value, (dict, list)):
                    raise ValidationError(f"{self.name} must be an object or a list")
                return value
            try:
                validated = self.adapter.validate_python(value)
            except PydanticValidationError as e:
                raise ValidationError(pydantic_error_message(e, self.name))
            return self.adapter.dump_python(validated, mode='json')

        # Free text
        if value is None:
            return ''
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        value = Validator.validate_string_length(value, self.name, 0, self.max_length)
        return Validator.sanitize_html(value)

    def blank(self):
        """Value reported when nothing is stored."""
        if self.kind == 'choice':
            return ''
        if self.kind == 'multi':
            return []
        if self.kind == 'number':
            return self.default if self.default is not None else self.blank_value
        if self.kind == 'json':
            if isinstance(self.schema, type) and issubclass(self.schema, BaseModel):
                return self.schema().model_dump(mode='json')
            return [] if self.default is None else self.default
        return ''

    def present(self, value):
        if value is None:
            return self.blank()
        return getattr(value, 'value', value)


def build_field_specs(model, exclude=(), numeric_ranges=None, multi_choices=None, json_schemas=None,
                      blank_number=''):
    """Derive FieldSpecs from the model's columns.

    Enum columns give their allowed values, Integer and Float columns become
    numbers (non-negative unless ``numeric_ranges`` says otherwise), JSON
    columns are either multi-choice arrays or schema-validated documents.
    """
    numeric_ranges = numeric_ranges or {}
    multi_choices = multi_choices or {}
    json_schemas = json_schemas or {}
    specs = {}

    for column in model.__table__.columns:
        name = column.key
        if name in SYSTEM_COLUMNS or name in exclude:
            continue
        col_type = column.type
        default = None
        if column.default is not None and column.default.is_scalar:
            default = column.default.arg

        if isinstance(col_type, Enum):
            spec = FieldSpec(name, 'choice', choices=list(col_type.enums))
        elif isinstance(col_type, (Integer, Float, Numeric)):
            min_val, max_val = numeric_ranges.get(name, (0, None))
            spec = FieldSpec(
                name, 'number', min_val=min_val, max_val=max_val,
                integer=isinstance(col_type, Integer), nullable=column.nullable,
                default=default, blank=blank_number
            )
        elif isinstance(col_type, JSON):
            if name in json_schemas:
                spec = FieldSpec(name, 'json', schema=json_schemas[name])
            elif name in multi_choices:
                spec = FieldSpec(name, 'multi', choices=multi_choices[name])
            else:
                spec = FieldSpec(name, 'json')
        else:
            spec = FieldSpec(name, 'string', max_length=getattr(col_type, 'length', None))
        specs[name] = spec

    return specs


class FormService:
    """Get-or-create service for a form stored once per session.

    Usage:
        service = FormService(
            model=HealthSafetySiteAccess,
            label='Health & safety site access',
        )

    Reads never create rows: a missing row is answered with the default
    shape. Writes check the parent survey, validate every sent field, and
    bump ``version`` only when a stored value changes.
    """

    def __init__(
        self,
        model: type,
        label: str,
        numeric_ranges: Optional[Dict[str, tuple]] = None,
        multi_choices: Optional[Dict[str, Optional[list]]] = None,
        json_schemas: Optional[Dict[str, Any]] = None,
        derived_counts: Optional[Dict[str, Callable[[str], int]]] = None,
        image_service: Any = None,
        blank_number: Any = '',
        exclude: tuple = (),
        logger_name: Optional[str] = None,
        pre_validate_hook: Optional[Callable[[str, Dict, Any], Dict]] = None,
        pre_save_hook: Optional[Callable[[str, Dict, Any], Dict]] = None,
        post_save_hook: Optional[Callable[[str, Any], None]] = None,
        serialize_hook: Optional[Callable[[Dict, str], Dict]] = None,
    ):
        """Initialize the form service.

        Args:
            model: SQLAlchemy model class keyed by ``session_id``
            label: Human readable name used in messages
            numeric_ranges: ``{column: (min, max)}`` overrides, default ``(0, None)``
            multi_choices: ``{json_column: allowed values or None}`` for array answers
            json_schemas: ``{json_column: Pydantic type}`` for nested documents
            derived_counts: ``{column: func(session_id)}`` re-read on every write and read
            image_service: Optional ImageService for the module's uploads
            blank_number: Reported for empty nullable numeric columns
            exclude: Columns the generic validation must not touch
            pre_validate_hook: ``(session_id, data, record) -> data`` before field validation
            pre_save_hook: ``(session_id, values, record) -> values`` after validation
            post_save_hook: ``(session_id, record)`` after the row is flushed
            serialize_hook: ``(data, session_id) -> data`` for row and default shapes
        """
        self.model = model
        self.label = label
        self.derived_counts = derived_counts or {}
        self.image_service = image_service
        self.pre_validate_hook = pre_validate_hook
        self.pre_save_hook = pre_save_hook
        self.post_save_hook = post_save_hook
        self.serialize_hook = serialize_hook
        self.fields = build_field_specs(
            model, exclude=tuple(exclude) + tuple(self.key_columns()) + tuple(self.derived_counts),
            numeric_ranges=numeric_ranges, multi_choices=multi_choices,
            json_schemas=json_schemas, blank_number=blank_number
        )
        self.logger = logging.getLogger(logger_name or model.__tablename__)

    def key_columns(self):
        return []

    def key_values(self, index=None):
        return {}

    def find(self, session_id, index=None):
        return self.model.query.filter_by(session_id=session_id).first()

    def describe(self, session_id, index=None):
        return f"{self.label} for session '{session_id}'"

    # Reading

    def serialize(self, record):
        data = {'id': record.id, 'session_id': record.session_id}
        for column in self.key_columns():
            data[column] = getattr(record, column)
        for name, spec in self.fields.items():
            data[name] = spec.present(getattr(record, name))
        for name, func in self.derived_counts.items():
            data[name] = func(record.session_id)
        data['version'] = record.version
        data['created_at'] = record.created_at.isoformat() if record.created_at else None
        data['updated_at'] = record.updated_at.isoformat() if record.updated_at else None
        data['has_data'] = True
        if self.serialize_hook:
            data = self.serialize_hook(data, record.session_id)
        return data

    def default_shape(self, session_id, index=None):
        """Every field present with its empty value, nothing stored."""
        data = {'id': None, 'session_id': session_id}
        data.update(self.key_values(index))
        for name, spec in self.fields.items():
            data[name] = spec.blank()
        for name, func in self.derived_counts.items():
            data[name] = func(session_id)
        data['version'] = 0
        data['created_at'] = None
        data['updated_at'] = None
        data['has_data'] = False
        if self.serialize_hook:
            data = self.serialize_hook(data, session_id)
        return data

    def get(self, session_id, index=None):
        session_id = Validator.validate_session_id(session_id)
        record = self.find(session_id, index)
        if record is None:
            return self.default_shape(session_id, index)
        return self.serialize(record)

    # Writing

    def validate(self, data):
        """Validate every known field in ``data``. Unknown keys are ignored."""
        values = {}
        for name, value in data.items():
            spec = self.fields.get(name)
            if spec is not None:
                values[name] = spec.clean(value)
        return values

    def check_version(self, record, version, session_id, index=None):
        if version is None:
            return
        if isinstance(version, bool):
            raise ValidationError("version must be an integer")
        try:
            version = int(version)
        except (TypeError, ValueError):
            raise ValidationError("version must be an integer")
        current = record.version if record is not None else 0
        if version != current:
            raise ConflictError(
                f"{self.describe(session_id, index)} was modified by another request "
                f"(current version {current}, submitted {version})"
            )

    def write(self, session_id, data, version=None, index=None, create=True):
        """Validate ``data`` and upsert the row.

        Returns:
            tuple: (serialized row, created flag)

        Raises:
            ValidationError, ForeignKeyError, NotFoundError, ConflictError
        """
        session_id = Validator.validate_session_id(session_id)
        require_survey(session_id)

        record = self.find(session_id, index)
        if record is None and not create:
            raise NotFoundError(f"{self.describe(session_id, index)} not found")
        self.check_version(record, version, session_id, index)

        if self.pre_validate_hook:
            data = self.pre_validate_hook(session_id, data, record)
        values = self.validate(data)
        for name, func in self.derived_counts.items():
            values[name] = func(session_id)
        if self.pre_save_hook:
            values = self.pre_save_hook(session_id, values, record)

        created = record is None
        changed = created
        if created:
            record = self.model(session_id=session_id, version=1, **self.key_values(index), **values)
            db.session.add(record)
        else:
            for name, value in values.items():
                if getattr(record, name) != value:
                    setattr(record, name, value)
                    changed = True
            if changed:
                record.version = (record.version or 1) + 1

        db.session.flush()
        if self.post_save_hook:
            self.post_save_hook(session_id, record)
        db.session.commit()

        if changed:
            self.logger.info(f"Saved {self.describe(session_id, index)} (version {record.version})",
                             extra={'session_id': session_id})
        else:
            self.logger.debug(f"No changes for {self.describe(session_id, index)}")
        return self.serialize(record), created

    def get_or_create(self, session_id, update_data=None, version=None):
        """Read the form, or upsert it when ``update_data`` is given."""
        if update_data is None:
            return self.get(session_id)
        data, _ = self.write(session_id, update_data, version)
        return data

    def patch(self, session_id, data, version=None):
        """Update only the sent fields of an existing row."""
        result, _ = self.write(session_id, data, version, create=False)
        return result

    def delete(self, session_id):
        session_id = Validator.validate_session_id(session_id)
        record = self.find(session_id)
        if record is None:
            raise NotFoundError(f"{self.describe(session_id)} not found")
        db.session.delete(record)
        images = 0
        if self.image_service:
            images = self.image_service.delete_all_by_session(session_id)
        db.session.commit()
        self.logger.info(f"Deleted {self.describe(session_id)} and deactivated {images} images",
                         extra={'session_id': session_id})
        return {'session_id': session_id, 'deleted': 1, 'images_deactivated': images}


def split_version(data):
    """Pop the optional optimistic-lock ``version`` from a request body."""
    return data, data.pop('version', None)


def register_image_routes(bp, image_service, resource, envelope=False):
    """Register upload, listing and delete routes for a module's images.

    This function registers:
        POST /api/{resource}/<session_id>/images - Multipart upload, per-file results
        GET /api/{resource}/<session_id>/images - Active images, optional ?index=
        DELETE /api/{resource}/<session_id>/images/<image_id> - Soft delete one image
    """
    prefix = resource.replace('-', '_')

    @bp.route(f'/{resource}/<session_id>/images', methods=['POST'], endpoint=f'{prefix}_upload_images')
    @handles_service_errors(envelope)
    def upload_images(session_id):
        session_id = Validator.validate_session_id(session_id)
        require_survey(session_id)
        files = list(request.files.items(multi=True))
        if not files:
            raise ValidationError('No files uploaded')

        results = image_service.upload_batch(session_id, files, description=request.form.get('description'))
        uploaded = sum(1 for result in results if result['success'])
        body = {
            'session_id': session_id,
            'uploaded': uploaded,
            'failed': len(results) - uploaded,
            'results': results,
        }
        status_code = 200 if uploaded else 400
        if envelope:
            return jsonify({'success': uploaded > 0, 'data': body}), status_code
        return jsonify(body), status_code

    @bp.route(f'/{resource}/<session_id>/images', methods=['GET'], endpoint=f'{prefix}_list_images')
    @handles_service_errors(envelope)
    def list_images(session_id):
        session_id = Validator.validate_session_id(session_id)
        index = request.args.get('index', type=int)
        images = image_service.list_active(session_id, index)
        return api_response({'session_id': session_id, 'images': images}, envelope=envelope)

    @bp.route(f'/{resource}/<session_id>/images/<int:image_id>', methods=['DELETE'],
              endpoint=f'{prefix}_delete_image')
    @handles_service_errors(envelope)
    def delete_image(session_id, image_id):
        session_id = Validator.validate_session_id(session_id)
        image_service.delete_by_id(session_id, image_id)
        db.session.commit()
        return api_response({'id': image_id}, 'Image deleted successfully', envelope=envelope)


def register_form_routes(bp, service, resource, envelope=False):
    """Register the standard form routes for a blueprint.

    Args:
        bp: Flask Blueprint instance (url_prefix ``/api``)
        service: FormService instance
        resource: URL segment, e.g. ``health-safety-site-access``
        envelope: Answer in the ``{success, data}`` shape

    This function registers:
        GET /api/{resource}/<session_id> - Stored form or default shape
        PUT /api/{resource}/<session_id> - Upsert sent fields
        PATCH /api/{resource}/<session_id> - Update sent fields, 404 if absent
        DELETE /api/{resource}/<session_id> - Delete form, 404 if absent
    """
    prefix = resource.replace('-', '_')

    @bp.route(f'/{resource}/<session_id>', methods=['GET'], endpoint=f'{prefix}_get')
    @handles_service_errors(envelope)
    def get_form(session_id):
        return api_response(service.get_or_create(session_id), envelope=envelope)

    @bp.route(f'/{resource}/<session_id>', methods=['PUT'], endpoint=f'{prefix}_put')
    @handles_service_errors(envelope)
    def put_form(session_id):
        data, version = split_version(get_json_data())
        result = service.get_or_create(session_id, data, version)
        return api_response(result, f'{service.label} saved successfully', envelope=envelope)

    @bp.route(f'/{resource}/<session_id>', methods=['PATCH'], endpoint=f'{prefix}_patch')
    @handles_service_errors(envelope)
    def patch_form(session_id):
        data, version = split_version(get_json_data())
        result = service.patch(session_id, data, version)
        return api_response(result, f'{service.label} updated successfully', envelope=envelope)

    @bp.route(f'/{resource}/<session_id>', methods=['DELETE'], endpoint=f'{prefix}_delete')
    @handles_service_errors(envelope)
    def delete_form(session_id):
        summary = service.delete(session_id)
        return api_response(summary, f'{service.label} deleted successfully', envelope=envelope)

    if service.image_service is not None:
        register_image_routes(bp, service.image_service, resource, envelope)
