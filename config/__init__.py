"""
Config module - Defaults and the resolved per-run configuration.
"""

from .settings import DEFAULT_SETTINGS, DEFAULT_SEED_NAMESPACE, SCHEME_DEFAULT_PORTS
from .export_config import ConfigError, ExportConfig, load_config, resolve_scheme_and_port

__all__ = [
    'DEFAULT_SETTINGS',
    'DEFAULT_SEED_NAMESPACE',
    'SCHEME_DEFAULT_PORTS',
    'ConfigError',
    'ExportConfig',
    'load_config',
    'resolve_scheme_and_port',
]
