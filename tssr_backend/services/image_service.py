"""Per-module image storage with one active image per (session, index, category)."""
import hashlib
import logging
import mimetypes
import os
import re
import secrets
import time
from flask import current_app
from werkzeug.utils import secure_filename
from tssr_shared.errors import ServiceError, ValidationError, NotFoundError
from tssr_shared.utils import CONTENT_HASH_ALGO, CorruptedImageError, verify_image
from ..models import db

ALLOWED_MIME_TYPES = {
    'image/jpeg', 'image/jpg', 'image/png', 'image/gif', 'image/webp', 'image/bmp'
}
DEFAULT_MAX_IMAGE_SIZE = 10 * 1024 * 1024

# Field name is the category itself for single-record modules
CATEGORY_FIELD_PATTERN = r'^(?P<category>[a-z0-9_]+)$'


def indexed_field_pattern(prefix):
    """Field names like ``<prefix>_<n>_<category>``."""
    return rf'^{re.escape(prefix)}_(?P<index>\d+)_(?P<category>[a-z0-9_]+)$'


class ImageService:
    """Stores uploads for one ``<module>_images`` table.

    Usage:
        service = ImageService(
            OutdoorCabinetsImages, 'outdoor_cabinets',
            field_pattern=indexed_field_pattern('cabinet'),
            categories=CABINET_IMAGE_CATEGORIES,
            max_index=get_cabinet_count,
        )

    Files with identical content share one stored file; a file is unlinked
    only when no active row of the table still points at its hash.
    """

    def __init__(self, model, directory, field_pattern=CATEGORY_FIELD_PATTERN, categories=None,
                 max_index=None):
        """
        Args:
            model: Image model class built on ImageMixin
            directory: Sub-directory of UPLOAD_FOLDER, also the stored filename prefix
            field_pattern: Regex with a ``category`` group and optionally an ``index`` group
            categories: Allowed categories, or ``func(session_id)`` returning them
            max_index: ``func(session_id)`` giving the highest valid index
        """
        self.model = model
        self.directory = directory
        self.field_pattern = re.compile(field_pattern)
        self.categories = categories
        self.max_index = max_index
        self.logger = logging.getLogger(model.__tablename__)

    @property
    def upload_root(self):
        return current_app.config['UPLOAD_FOLDER']

    def absolute_path(self, file_path):
        return os.path.join(self.upload_root, file_path)

    def serialize(self, image):
        return {
            'id': image.id,
            'session_id': image.session_id,
            'record_index': image.record_index,
            'image_category': image.image_category,
            'original_filename': image.original_filename,
            'stored_filename': image.stored_filename,
            'file_path': image.file_path,
            'file_url': image.file_url,
            'file_size': image.file_size,
            'mime_type': image.mime_type,
            'content_hash': image.content_hash,
            'description': image.description or '',
            'metadata': image.image_metadata or {},
            'created_at': image.created_at.isoformat() if image.created_at else None,
            'updated_at': image.updated_at.isoformat() if image.updated_at else None,
        }

    # Files

    def save_file(self, file):
        """Validate an uploaded file and store it on disk.

        The stream is hashed while it is written. When an active row already
        holds the same content, the new copy is dropped and the existing file
        is reused.

        Returns:
            dict: Column values describing the stored file

        Raises:
            ValidationError: Wrong MIME type, empty, too large or not an image
        """
        mime_type = (file.mimetype or '').lower()
        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                f"Invalid file type '{mime_type or 'unknown'}'. "
                f"Allowed types: {', '.join(sorted(ALLOWED_MIME_TYPES))}"
            )

        max_size = current_app.config.get('MAX_IMAGE_SIZE', DEFAULT_MAX_IMAGE_SIZE)
        original_filename = file.filename or ''
        extension = os.path.splitext(secure_filename(original_filename))[1].lower()
        if not extension:
            extension = mimetypes.guess_extension(mime_type) or ''

        stored_filename = f"{self.directory}_{int(time.time() * 1000)}_{secrets.token_hex(8)}{extension}"
        target_dir = os.path.join(self.upload_root, self.directory)
        os.makedirs(target_dir, exist_ok=True)
        path = os.path.join(target_dir, stored_filename)

        hasher = hashlib.new(CONTENT_HASH_ALGO)
        size = 0
        try:
            with open(path, 'wb') as out:
                while chunk := file.stream.read(8192):
                    size += len(chunk)
                    if size > max_size:
                        raise ValidationError(
                            f"File too large. Maximum size is {max_size // (1024 * 1024)}MB"
                        )
                    hasher.update(chunk)
                    out.write(chunk)
            if size == 0:
                raise ValidationError("Uploaded file is empty")
            verify_image(image_path=path)
        except CorruptedImageError as e:
            self.remove_file(path)
            raise ValidationError(f"Invalid image file: {e}")
        except ValidationError:
            self.remove_file(path)
            raise

        content_hash = hasher.hexdigest()
        relative_path = f"{self.directory}/{stored_filename}"

        duplicate = self.model.query.filter_by(content_hash=content_hash, is_active=True).first()
        if duplicate and os.path.exists(self.absolute_path(duplicate.file_path)):
            self.remove_file(path)
            self.logger.debug(f"Reusing stored file {duplicate.stored_filename} for identical upload")
            stored_filename = duplicate.stored_filename
            relative_path = duplicate.file_path

        return {
            'original_filename': original_filename,
            'stored_filename': stored_filename,
            'file_path': relative_path,
            'file_url': f"/uploads/{relative_path}",
            'file_size': size,
            'mime_type': mime_type,
            'content_hash': content_hash,
        }

    def remove_file(self, path):
        """Best-effort unlink. Failures are logged, never raised."""
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as e:
            self.logger.warning(f"Could not delete file {path}: {e}")

    def release_file(self, file_path, content_hash):
        """Unlink a stored file unless an active row still references it."""
        still_used = self.model.query.filter(
            self.model.is_active.is_(True),
            (self.model.content_hash == content_hash) | (self.model.file_path == file_path)
        ).first()
        if still_used is None:
            self.remove_file(self.absolute_path(file_path))

    # Rows

    def find_active(self, session_id, record_index, image_category):
        return self.model.query.filter_by(
            session_id=session_id, record_index=record_index,
            image_category=image_category, is_active=True
        ).first()

    def replace_image(self, file, session_id, image_category, record_index=0, description=None,
                      metadata=None):
        """Store ``file`` as the active image for its key.

        An existing active row is updated in place so its id stays stable,
        and its old file is released.
        """
        saved = self.save_file(file)
        existing = self.find_active(session_id, record_index, image_category)

        if existing:
            old_path, old_hash = existing.file_path, existing.content_hash
            for key, value in saved.items():
                setattr(existing, key, value)
            existing.description = description or ''
            existing.image_metadata = metadata or {}
            db.session.flush()
            if old_path != existing.file_path:
                self.release_file(old_path, old_hash)
            image = existing
            self.logger.info(f"Replaced image {image.id} ({image_category}) for session {session_id}")
        else:
            image = self.model(
                session_id=session_id,
                record_index=record_index,
                image_category=image_category,
                description=description or '',
                image_metadata=metadata or {},
                **saved
            )
            db.session.add(image)
            db.session.flush()
            self.logger.info(f"Stored image {image.id} ({image_category}) for session {session_id}")

        db.session.commit()
        return image

    def parse_field_name(self, session_id, field_name):
        """Extract ``(record_index, category)`` from a multipart field name.

        Raises:
            ValidationError: Unknown field name, index out of range or category not allowed
        """
        match = self.field_pattern.match(field_name or '')
        if not match:
            raise ValidationError(f"Unrecognized image field '{field_name}'")

        record_index = 0
        if 'index' in self.field_pattern.groupindex:
            record_index = int(match.group('index'))
            if record_index < 1:
                raise ValidationError(f"Image index in '{field_name}' must be a positive integer")
            if self.max_index is not None:
                limit = self.max_index(session_id)
                if record_index > limit:
                    raise ValidationError(
                        f"Image index {record_index} in '{field_name}' exceeds configured count {limit}"
                    )

        category = match.group('category')
        allowed = self.allowed_categories(session_id)
        if allowed is not None and category not in allowed:
            raise ValidationError(f"Invalid image category '{category}' in '{field_name}'")
        return record_index, category

    def allowed_categories(self, session_id):
        if callable(self.categories):
            return set(self.categories(session_id))
        if self.categories is None:
            return None
        return set(self.categories)

    def upload_batch(self, session_id, files, description=None):
        """Store several uploads, reporting each file on its own.

        Args:
            files: ``(field_name, FileStorage)`` pairs

        Returns:
            list: ``{field, success, data | error}`` per file
        """
        results = []
        for field_name, file in files:
            try:
                record_index, category = self.parse_field_name(session_id, field_name)
                image = self.replace_image(file, session_id, category, record_index, description)
                results.append({'field': field_name, 'success': True, 'data': self.serialize(image)})
            except ServiceError as e:
                db.session.rollback()
                self.logger.warning(f"Image upload rejected for field '{field_name}': {e.message}")
                results.append({'field': field_name, 'success': False, 'error': e.to_dict()})
            except OSError as e:
                db.session.rollback()
                self.logger.error(f"Failed to store image for field '{field_name}': {e}", exc_info=True)
                results.append({
                    'field': field_name, 'success': False,
                    'error': {'type': 'INTERNAL_ERROR', 'message': 'Failed to store file'},
                })
        return results

    def list_active(self, session_id, record_index=None):
        query = self.model.query.filter_by(session_id=session_id, is_active=True)
        if record_index is not None:
            query = query.filter_by(record_index=record_index)
        images = query.order_by(self.model.record_index, self.model.image_category).all()
        return [self.serialize(image) for image in images]

    def images_by_index(self, session_id):
        """Active images grouped by record index."""
        grouped = {}
        for image in self.list_active(session_id):
            grouped.setdefault(image['record_index'], []).append(image)
        return grouped

    def deactivate(self, images):
        """Soft-delete rows and release their files. Returns the row count."""
        released = []
        for image in images:
            image.is_active = False
            released.append((image.file_path, image.content_hash))
        db.session.flush()
        for file_path, content_hash in released:
            self.release_file(file_path, content_hash)
        return len(released)

    def deactivate_indices_above(self, session_id, count):
        """Deactivate images whose record index no longer exists after a shrink."""
        images = self.model.query.filter(
            self.model.session_id == session_id,
            self.model.is_active.is_(True),
            self.model.record_index > count
        ).all()
        deactivated = self.deactivate(images)
        if deactivated:
            self.logger.info(f"Deactivated {deactivated} images above index {count} for session {session_id}")
        return deactivated

    def deactivate_disallowed_categories(self, session_id):
        """Deactivate images whose category is no longer offered, e.g. after a generator is removed."""
        allowed = self.allowed_categories(session_id)
        if allowed is None:
            return 0
        images = self.model.query.filter(
            self.model.session_id == session_id,
            self.model.is_active.is_(True),
            self.model.image_category.not_in(allowed)
        ).all()
        deactivated = self.deactivate(images)
        if deactivated:
            self.logger.info(f"Deactivated {deactivated} images with retired categories for session {session_id}")
        return deactivated

    def delete_by_session_and_index(self, session_id, record_index):
        images = self.model.query.filter_by(
            session_id=session_id, record_index=record_index, is_active=True
        ).all()
        return self.deactivate(images)

    def delete_all_by_session(self, session_id):
        images = self.model.query.filter_by(session_id=session_id, is_active=True).all()
        return self.deactivate(images)

    def delete_by_id(self, session_id, image_id):
        image = self.model.query.filter_by(id=image_id, session_id=session_id, is_active=True).first()
        if image is None:
            raise NotFoundError(f"Image {image_id} not found for session '{session_id}'")
        return self.deactivate([image])
