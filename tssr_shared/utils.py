"""Shared utility functions for the site survey backend."""

import hashlib
import logging
from functools import wraps
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class CorruptedImageError(Exception):
    """Raised when image data is corrupted and cannot be processed."""
    pass


def handle_image_errors(func):
    """Decorator to handle image processing errors consistently.

    Converts Pillow decoding failures into CorruptedImageError and logs the
    source of the bad data. The decorated function should accept ``image_path``
    as a keyword argument for the log message.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        image_path = kwargs.get('image_path')

        def log_and_raise(msg, exc):
            logger.error(f"{msg} - file '{image_path}': {exc}")
            raise CorruptedImageError(f"{msg}: {exc}") from exc

        try:
            return func(*args, **kwargs)
        except UnidentifiedImageError as e:
            log_and_raise("Corrupted or unsupported image format", e)
        except OSError as e:
            log_and_raise("Corrupted image file", e)
        except (ValueError, SyntaxError) as e:
            # Pillow raises SyntaxError for some broken PNG chunks
            log_and_raise("Error processing image", e)

    return wrapper


# Content hash algorithm constant - always SHA256
CONTENT_HASH_ALGO = 'sha256'


def compute_file_hash(data_or_path):
    """Compute the SHA-256 content hash of an uploaded file.

    Accepts raw bytes, a file path, or a file-like object. File paths and
    streams are read in 8KB chunks.

    Returns:
        str: 64 character hex digest

    Raises:
        TypeError: If input type is invalid
        FileNotFoundError: If a path is given and the file does not exist
    """
    hasher = hashlib.new(CONTENT_HASH_ALGO)

    if isinstance(data_or_path, str):
        try:
            with open(data_or_path, 'rb') as f:
                while chunk := f.read(8192):
                    hasher.update(chunk)
        except FileNotFoundError:
            logger.error(f"File not found while hashing: {data_or_path}")
            raise
    elif isinstance(data_or_path, bytes):
        hasher.update(data_or_path)
    elif hasattr(data_or_path, 'read'):
        while chunk := data_or_path.read(8192):
            hasher.update(chunk)
    else:
        raise TypeError(f"compute_file_hash expected bytes, str (path), or file-like object, got {type(data_or_path).__name__}")

    return hasher.hexdigest()


@handle_image_errors
def verify_image(image_path=None):
    """Check that the file at ``image_path`` decodes as an image.

    Returns:
        str: The Pillow format name, e.g. 'PNG' or 'JPEG'

    Raises:
        CorruptedImageError: If Pillow cannot identify or verify the file
    """
    with Image.open(image_path) as img:
        img.verify()
        return img.format
