"""Pytest configuration and shared fixtures."""

import pytest

from kontrolle.common.settings import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Re-read KONTROLLE_* settings in every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_config():
    """Sample authorization configuration dictionary."""
    return {
        "roles": ["admin", "editor", "viewer"],
        "permissions": {
            "users": {
                "manage": {"action": ["create", "read", "update"]},
                "licence": {"action": "view", "version": "1.2"},
            },
            "reports": {
                "export": {"actions": ["read", "download"]},
            },
        },
        "features": {
            "billing": {
                "invoices": {"access": ["read", "update"], "version": "2.0"},
                "refunds": {"access": "all"},
            },
        },
        "role_features": {
            "admin": {"users": ["manage", "licence"], "billing": ["refunds"]},
            "viewer": {"users": ["licence"]},
        },
    }


@pytest.fixture
def user():
    """Subject used by rule evaluation tests."""
    return {"id": 1, "permissions": ["update", "delete"], "is_admin": False}


@pytest.fixture
def certificate():
    """Resource owned by the sample user."""
    return {"id": 1, "owner_id": 1}
