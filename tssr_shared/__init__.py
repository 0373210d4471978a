"""Shared package for the TSSR site survey backend.

This package holds the storage-agnostic pieces used by the Flask API, the CLI
and the tests:

- Enums (enums.py) - Allowed values for survey status and form choice fields
- Errors (errors.py) - Error taxonomy mapped onto HTTP status codes
- Validation utilities (validation.py, schemas.py) - Field validation and nested form schemas
- Database models (models.py) - SQLAlchemy declarative models for every form module
- Utility functions (utils.py) - Content hashing and image verification
"""
