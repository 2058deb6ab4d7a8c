"""pytest configuration and fixtures."""

import time

import jwt
import pytest

from app import create_app
from models import db, User, DatingProfile, Wallet

JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"
JWT_AUDIENCE = "authenticated"


@pytest.fixture
def app():
    """App on in-memory SQLite with caching disabled."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SUPABASE_JWT_SECRET': JWT_SECRET,
        'SUPABASE_JWT_AUDIENCE': JWT_AUDIENCE,
        'REDIS_URL': '',
        'WALLET_API_URL': 'https://wallet.test/v3/',
        'WALLET_CLIENT_KEY': 'test-key',
        'WALLET_CLIENT_PASS': 'test-pass',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_token(user_id, expires_in=3600, secret=JWT_SECRET, **claims):
    payload = {
        'sub': user_id,
        'aud': JWT_AUDIENCE,
        'exp': int(time.time()) + expires_in,
        'email': f"{user_id}@student.test",
        'user_metadata': {'full_name': f"Student {user_id}"},
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm='HS256')


@pytest.fixture
def auth_headers():
    """Build Authorization headers for a user id."""
    def _headers(user_id, **token_args):
        return {'Authorization': f"Bearer {make_token(user_id, **token_args)}"}
    return _headers


@pytest.fixture
def make_student(app):
    """Create a user with a wallet and, optionally, a dating profile."""
    def _make(user_id, balance_cents=0, dating=True, **profile_fields):
        user = User(id=user_id, full_name=f"Student {user_id}", email=f"{user_id}@student.test")
        db.session.add(user)
        db.session.flush()
        db.session.add(Wallet(user_id=user_id, balance_cents=balance_cents))
        if dating:
            fields = {
                'display_name': f"Name {user_id}",
                'age': 21,
                'looking_for': 'friendship',
            }
            fields.update(profile_fields)
            db.session.add(DatingProfile(user_id=user_id, **fields))
        db.session.commit()
        return user
    return _make
