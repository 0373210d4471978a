"""Form service for modules stored as several numbered entries per session."""
from tssr_shared.errors import ServiceError, ValidationError, NotFoundError
from tssr_shared.validation import Validator
from ..models import db
from ..utils import api_response, get_json_data, handles_service_errors, require_survey
from .form_service import FormService, split_version, register_image_routes


class IndexedFormService(FormService):
    """FormService keyed by ``(session_id, <index column>)``.

    Indexes are 1-based integers. The planned number of entries comes from
    another table through ``planned_count`` and is only reported, never
    enforced on writes.
    """

    def __init__(self, model, label, index_field, items_key, planned_field=None, planned_count=None,
                 **kwargs):
        self.index_field = index_field
        self.items_key = items_key
        self.planned_field = planned_field
        self.planned_count = planned_count
        super().__init__(model, label, **kwargs)

    def key_columns(self):
        return [self.index_field]

    def key_values(self, index=None):
        return {self.index_field: index}

    def find(self, session_id, index=None):
        index = Validator.validate_index(index, self.index_field)
        return self.model.query.filter_by(session_id=session_id, **{self.index_field: index}).first()

    def describe(self, session_id, index=None):
        if index is None:
            return f"{self.label} for session '{session_id}'"
        return f"{self.label} {index} for session '{session_id}'"

    def default_shape(self, session_id, index=None):
        return super().default_shape(session_id, Validator.validate_index(index, self.index_field))

    def list(self, session_id):
        """All stored entries in index order plus the planned count."""
        session_id = Validator.validate_session_id(session_id)
        records = self.model.query.filter_by(session_id=session_id).order_by(
            getattr(self.model, self.index_field)
        ).all()
        result = {'session_id': session_id}
        if self.planned_field:
            result[self.planned_field] = self.planned_count(session_id)
        result[self.items_key] = [self.serialize(record) for record in records]
        result[f'total_{self.items_key}'] = len(records)
        return result

    def write(self, session_id, data, version=None, index=None, create=True):
        index = Validator.validate_index(index, self.index_field)
        return super().write(session_id, data, version, index=index, create=create)

    def get_one(self, session_id, index):
        return self.get(session_id, index)

    def put_one(self, session_id, index, data, version=None):
        """Upsert one entry. Returns (data, created)."""
        return self.write(session_id, data, version, index=index)

    def patch_one(self, session_id, index, data, version=None):
        result, _ = self.write(session_id, data, version, index=index, create=False)
        return result

    def delete_one(self, session_id, index):
        session_id = Validator.validate_session_id(session_id)
        index = Validator.validate_index(index, self.index_field)
        record = self.find(session_id, index)
        if record is None:
            raise NotFoundError(f"{self.describe(session_id, index)} not found")
        db.session.delete(record)
        images = 0
        if self.image_service:
            images = self.image_service.delete_by_session_and_index(session_id, index)
        db.session.commit()
        self.logger.info(f"Deleted {self.describe(session_id, index)} and deactivated {images} images")
        return {'session_id': session_id, self.index_field: index, 'images_deactivated': images}

    def delete_all(self, session_id):
        session_id = Validator.validate_session_id(session_id)
        deleted = self.model.query.filter_by(session_id=session_id).delete(synchronize_session=False)
        images = 0
        if self.image_service:
            images = self.image_service.delete_all_by_session(session_id)
        db.session.commit()
        self.logger.info(f"Deleted {deleted} entries of {self.describe(session_id)}")
        return {'session_id': session_id, 'deleted_count': deleted, 'images_deactivated': images}

    def bulk_put(self, session_id, items):
        """Upsert a list of entries, reporting success or failure per entry.

        An entry without its index column takes its 1-based position.
        """
        session_id = Validator.validate_session_id(session_id)
        if not isinstance(items, list):
            raise ValidationError(f"Request body must contain an {self.items_key} array")
        require_survey(session_id)

        results = []
        for position, item in enumerate(items, start=1):
            if not isinstance(item, dict):
                results.append({
                    self.index_field: position, 'status': 'error',
                    'error': 'Each entry must be a JSON object',
                })
                continue
            item = dict(item)
            index = item.pop(self.index_field, None)
            if index is None:
                index = position
            version = item.pop('version', None)
            try:
                data, _ = self.write(session_id, item, version, index=index)
                results.append({self.index_field: index, 'status': 'success', 'data': data})
            except ServiceError as e:
                db.session.rollback()
                self.logger.warning(f"Bulk save failed for {self.describe(session_id, index)}: {e.message}")
                results.append({
                    self.index_field: index, 'status': 'error',
                    'error': e.message, 'type': e.error_type.value,
                })
        return results


def register_indexed_routes(bp, service, resource, envelope=False):
    """Register routes for a repeated-entry module.

    This function registers:
        GET /api/{resource}/<session_id> - All entries plus planned count
        PUT /api/{resource}/<session_id> - Bulk upsert ``{<items_key>: [...]}``
        DELETE /api/{resource}/<session_id> - Delete every entry
        GET /api/{resource}/<session_id>/<index> - Entry or default shape
        POST|PUT /api/{resource}/<session_id>/<index> - Upsert one entry
        PATCH /api/{resource}/<session_id>/<index> - Update one entry, 404 if absent
        DELETE /api/{resource}/<session_id>/<index> - Delete one entry, 404 if absent
    """
    prefix = resource.replace('-', '_')
    label = service.label

    @bp.route(f'/{resource}/<session_id>', methods=['GET'], endpoint=f'{prefix}_list')
    @handles_service_errors(envelope)
    def list_entries(session_id):
        return api_response(service.list(session_id), envelope=envelope)

    @bp.route(f'/{resource}/<session_id>', methods=['PUT'], endpoint=f'{prefix}_bulk_put')
    @handles_service_errors(envelope)
    def bulk_put(session_id):
        data = get_json_data()
        items = data.get(service.items_key, [])
        results = service.bulk_put(session_id, items)
        body = {
            'message': f"Processed {len(results)} {service.items_key} for session {session_id}",
            'results': results,
        }
        return api_response(body, envelope=envelope)

    @bp.route(f'/{resource}/<session_id>', methods=['DELETE'], endpoint=f'{prefix}_delete_all')
    @handles_service_errors(envelope)
    def delete_all(session_id):
        summary = service.delete_all(session_id)
        return api_response(summary, f"All {service.items_key} for session {session_id} deleted successfully",
                            envelope=envelope)

    @bp.route(f'/{resource}/<session_id>/<int:index>', methods=['GET'], endpoint=f'{prefix}_get_one')
    @handles_service_errors(envelope)
    def get_entry(session_id, index):
        return api_response(service.get_one(session_id, index), envelope=envelope)

    @bp.route(f'/{resource}/<session_id>/<int:index>', methods=['POST', 'PUT'], endpoint=f'{prefix}_put_one')
    @handles_service_errors(envelope)
    def put_entry(session_id, index):
        data, version = split_version(get_json_data())
        data.pop(service.index_field, None)
        result, created = service.put_one(session_id, index, data, version)
        if created:
            return api_response(result, f'{label} {index} created successfully', 201, envelope)
        return api_response(result, f'{label} {index} updated successfully', envelope=envelope)

    @bp.route(f'/{resource}/<session_id>/<int:index>', methods=['PATCH'], endpoint=f'{prefix}_patch_one')
    @handles_service_errors(envelope)
    def patch_entry(session_id, index):
        data, version = split_version(get_json_data())
        data.pop(service.index_field, None)
        result = service.patch_one(session_id, index, data, version)
        return api_response(result, f'{label} {index} updated successfully', envelope=envelope)

    @bp.route(f'/{resource}/<session_id>/<int:index>', methods=['DELETE'], endpoint=f'{prefix}_delete_one')
    @handles_service_errors(envelope)
    def delete_entry(session_id, index):
        summary = service.delete_one(session_id, index)
        return api_response(summary, f'{label} {index} deleted successfully', envelope=envelope)

    if service.image_service is not None:
        register_image_routes(bp, service.image_service, resource, envelope)
