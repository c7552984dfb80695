"""Configuration sources for ssofed."""

from .loader import load_config_source
from .source import ConfigSource, MappingConfigSource

__all__ = ["ConfigSource", "MappingConfigSource", "load_config_source"]
