"""Pytest configuration and fixtures for TSSR backend tests."""
import pytest
import tempfile
import os
from io import BytesIO
from PIL import Image
from tssr_backend.app import create_app
from tssr_backend.models import db


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Create and configure a test app instance."""
    monkeypatch.setenv('TSSR_LOG_DIR', str(tmp_path / 'logs'))
    db_fd, db_path = tempfile.mkstemp()

    test_config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f'sqlite:///{db_path}',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
    }

    app = create_app(test_config)

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()
    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def survey(client):
    """Survey with session S1."""
    response = client.post('/api/surveys', json={'session_id': 'S1', 'site_id': 'SITE-001'})
    assert response.status_code == 201
    return response.get_json()['data']


@pytest.fixture
def make_image():
    """Build an in-memory image file for multipart uploads."""
    def _make(color='red', fmt='PNG', size=(8, 8)):
        buffer = BytesIO()
        Image.new('RGB', size, color).save(buffer, format=fmt)
        buffer.seek(0)
        return buffer
    return _make
