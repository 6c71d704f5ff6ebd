"""
Shared pytest fixtures for Weywallet tests.
"""

import pytest
import os
import sys

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import Config  # noqa: E402
from identifiers import generate_token  # noqa: E402


class TestConfig(Config):
    """Test configuration backed by a private in-memory SQLite database."""
    __test__ = False

    SECRET_KEY = 'test-secret-key-for-testing-only'
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def app():
    """Create application for testing."""
    from app import create_app
    application = create_app(config_class=TestConfig)
    yield application


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def storage(app):
    """Stores of the test application, with an application context pushed."""
    with app.app_context():
        yield app.storage


def register(client, name='Test User', target='2000000', credential=None):
    """Register through the API and return the user summary."""
    response = client.post('/api/auth/register', json={
        'fullName': name,
        'monthlyTarget': target,
        'privateKey': credential or generate_token(),
    })
    assert response.status_code == 200, response.get_json()
    return response.get_json()['user']


@pytest.fixture
def user(client):
    return register(client, name='Alice')


@pytest.fixture
def other_user(client):
    return register(client, name='Bob')
