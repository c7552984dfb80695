"""Availability gate: should the host offer SSO sign-in at all?

Pure reads over the configuration source. An incomplete configuration is
reported here (``missing_settings``), never raised mid-flow.
"""

from __future__ import annotations

from ssofed.config.source import ConfigSource

from .config import DEFAULT_PREFIX

REQUIRED_SETTINGS = ("url", "client_id", "client_secret", "redirect")


def missing_settings(source: ConfigSource, prefix: str = DEFAULT_PREFIX) -> list[str]:
    """Names of required settings that are absent or empty."""
    missing = []
    for key in REQUIRED_SETTINGS:
        value = source.get(f"{prefix}.{key}")
        if not value or (isinstance(value, str) and not value.strip()):
            missing.append(key)
    return missing


def is_enabled(source: ConfigSource, prefix: str = DEFAULT_PREFIX) -> bool:
    return not missing_settings(source, prefix)


def is_forced(source: ConfigSource, prefix: str = DEFAULT_PREFIX) -> bool:
    """True only when enabled and ``forced`` is exactly boolean true."""
    return is_enabled(source, prefix) and source.get(f"{prefix}.forced") is True
