"""
Global pytest configuration and fixtures.
"""

import pytest

from ssofed.auth.config import SsoProviderConfigModel, resolve_provider_config
from ssofed.config import MappingConfigSource


def _source(**settings) -> MappingConfigSource:
    return MappingConfigSource({"services": {"sso": settings}})


@pytest.fixture
def make_source():
    """Factory for a MappingConfigSource with settings under ``services.sso``."""
    return _source


@pytest.fixture
def base_settings() -> dict:
    return {
        "url": "https://sso.example.com",
        "client_id": "cid",
        "client_secret": "secret",
        "redirect": "https://app.example.com/auth/sso/callback",
    }


@pytest.fixture
def sso_config(base_settings) -> SsoProviderConfigModel:
    return resolve_provider_config(_source(**base_settings))
