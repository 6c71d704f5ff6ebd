"""
Test suite for authentication routes and the user directory.
Tests cover registration, login, handle allocation and credential uniqueness.
"""

import pytest
import os
import sys
from decimal import Decimal

# Ensure the project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from errors import CredentialInUse, InvalidCredential  # noqa: E402
from identifiers import HANDLE_ALPHABET  # noqa: E402
from storage.users import UserDirectory  # noqa: E402
from tests.conftest import register  # noqa: E402

CREDENTIAL = 'SK-abcdefghijklmnopqrstuvwxyz012345'


class TestRegister:
    """Test user registration."""

    def test_register_returns_summary(self, client):
        """Registration should return id, name, handle and target."""
        response = client.post('/api/auth/register', json={
            'fullName': 'Alice',
            'monthlyTarget': 2000000,
            'privateKey': CREDENTIAL,
        })
        assert response.status_code == 200
        user = response.get_json()['user']
        assert user['fullName'] == 'Alice'
        assert Decimal(user['monthlyTarget']) == Decimal('2000000')
        assert len(user['weyId']) == 8
        assert user['id']

    def test_register_duplicate_credential(self, client):
        """A credential can only be used once."""
        register(client, credential=CREDENTIAL)
        response = client.post('/api/auth/register', json={
            'fullName': 'Mallory',
            'monthlyTarget': '10',
            'privateKey': CREDENTIAL,
        })
        assert response.status_code == 400
        assert 'already in use' in response.get_json()['message']

    def test_register_short_credential_rejected(self, client):
        response = client.post('/api/auth/register', json={
            'fullName': 'Alice',
            'monthlyTarget': '10',
            'privateKey': 'too-short',
        })
        assert response.status_code == 400
        assert 'privateKey' in response.get_json()['errors']

    @pytest.mark.parametrize('payload,field', [
        ({'monthlyTarget': '10', 'privateKey': CREDENTIAL}, 'fullName'),
        ({'fullName': 'A', 'privateKey': CREDENTIAL}, 'monthlyTarget'),
        ({'fullName': 'A', 'monthlyTarget': '-1', 'privateKey': CREDENTIAL}, 'monthlyTarget'),
        ({'fullName': 'A', 'monthlyTarget': 'lots', 'privateKey': CREDENTIAL}, 'monthlyTarget'),
        ({'fullName': 'A' * 101, 'monthlyTarget': '10', 'privateKey': CREDENTIAL}, 'fullName'),
    ])
    def test_register_invalid_fields(self, client, payload, field):
        """Invalid input is a 400 with field-level detail."""
        response = client.post('/api/auth/register', json=payload)
        assert response.status_code == 400
        assert field in response.get_json()['errors']

    def test_register_non_json_body(self, client):
        response = client.post('/api/auth/register', data='fullName=A')
        assert response.status_code == 400

    def test_handles_and_credentials_unique(self, client):
        """No two registered users share a handle."""
        users = [register(client, name=f'User {i}') for i in range(25)]
        handles = [u['weyId'] for u in users]
        assert len(set(handles)) == len(handles)
        for handle in handles:
            assert len(handle) == 8
            assert set(handle) <= set(HANDLE_ALPHABET)


class TestLogin:
    """Test user login."""

    def test_login_valid_credential(self, client):
        created = register(client, name='Alice', credential=CREDENTIAL)
        response = client.post('/api/auth/login', json={'privateKey': CREDENTIAL})
        assert response.status_code == 200
        assert response.get_json()['user'] == created

    def test_login_unknown_credential(self, client):
        response = client.post('/api/auth/login', json={'privateKey': CREDENTIAL})
        assert response.status_code == 401
        assert response.get_json()['message']

    def test_login_missing_credential(self, client):
        response = client.post('/api/auth/login', json={})
        assert response.status_code == 400

    def test_login_is_exact_match(self, client):
        register(client, credential=CREDENTIAL)
        response = client.post('/api/auth/login', json={'privateKey': CREDENTIAL.lower()})
        assert response.status_code == 401


class TestCredentialEndpoint:
    """Test server-side credential generation."""

    def test_generates_fresh_credential(self, client):
        first = client.get('/api/auth/credential').get_json()['privateKey']
        second = client.get('/api/auth/credential').get_json()['privateKey']
        assert first.startswith('SK-') and len(first) == 35
        assert first != second

    def test_generated_credential_registers(self, client):
        key = client.get('/api/auth/credential').get_json()['privateKey']
        register(client, credential=key)
        assert client.post('/api/auth/login', json={'privateKey': key}).status_code == 200


class TestUserDirectory:
    """Test the user directory directly."""

    def test_register_and_lookups(self, storage):
        user = storage.users.register('Alice', Decimal('100'), CREDENTIAL)
        assert storage.users.get_by_id(user.id).id == user.id
        assert storage.users.get_by_handle(user.wey_id).id == user.id
        assert storage.users.authenticate(CREDENTIAL).id == user.id
        assert user.created_at is not None

    def test_missing_lookups_return_none(self, storage):
        assert storage.users.get_by_id('nope') is None
        assert storage.users.get_by_handle('ZZZZZZZZ') is None

    def test_authenticate_unknown(self, storage):
        with pytest.raises(InvalidCredential):
            storage.users.authenticate(CREDENTIAL)

    def test_duplicate_credential_raises(self, storage):
        storage.users.register('Alice', Decimal('1'), CREDENTIAL)
        with pytest.raises(CredentialInUse):
            storage.users.register('Bob', Decimal('1'), CREDENTIAL)

    def test_handle_collision_regenerates(self, app):
        """A colliding handle is regenerated until an unused one turns up."""
        handles = iter(['AAAAAAAA', 'AAAAAAAA', 'AAAAAAAA', 'BBBBBBBB'])
        from models import db
        with app.app_context():
            directory = UserDirectory(db, handle_factory=lambda: next(handles))
            first = directory.register('Alice', Decimal('1'), CREDENTIAL)
            second = directory.register('Bob', Decimal('1'), CREDENTIAL + 'x')
            assert first.wey_id == 'AAAAAAAA'
            assert second.wey_id == 'BBBBBBBB'
