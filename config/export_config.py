"""
Export Config — The immutable configuration object for one dump run.

load_config() resolves every setting once at startup (CLI overrides on top of
.env / environment on top of DEFAULT_SETTINGS) and returns a frozen
ExportConfig. The orchestrator hands the same object to the client and every
exporter; nothing reads os.environ after this point.
"""

import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from .settings import DEFAULT_SETTINGS, SCHEME_DEFAULT_PORTS


class ConfigError(ValueError):
    """Raised by load_config when environment values cannot be parsed."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


@dataclass(frozen=True)
class ExportConfig:
    host: str
    scheme: str = "http"
    port: int = 5988
    username: str = ""
    password: str = ""
    namespace: str = ""
    class_name: str = ""
    only_class_names: bool = False
    output_dir: str = ""
    request_timeout: float = 30
    discovery_timeout: float = 30
    discovery_call_timeout: float = 10
    verify_ssl: bool = False
    trace: bool = False
    debug: bool = False

    @property
    def url(self) -> str:
        """Server URL, without credentials. The CIM-XML endpoint is always /cimom."""
        return f"{self.scheme}://{self.host}:{self.port}"

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when valid)."""
        errors = []
        if not self.host:
            errors.append("WBEM_HOST is required")
        if self.scheme not in SCHEME_DEFAULT_PORTS:
            errors.append(f"WBEM_SCHEME must be http or https, got '{self.scheme}'")
        if not 0 < self.port < 65536:
            errors.append(f"WBEM_PORT must be between 1 and 65535, got {self.port}")
        if self.class_name and not self.namespace:
            errors.append("WBEM_CLASS requires WBEM_NAMESPACE")
        if self.request_timeout <= 0:
            errors.append("REQUEST_TIMEOUT must be positive")
        return errors

    def to_summary(self) -> Dict[str, Any]:
        """Config as a dict with the password removed, for run metadata."""
        summary = asdict(self)
        summary.pop("password")
        summary["url"] = self.url
        return summary


def resolve_scheme_and_port(scheme: str, port: int) -> Tuple[str, int]:
    """Fill in whichever of scheme/port is missing from the other.

    An unset (0) port takes the scheme's default; an unset scheme is picked
    from the port (5989 -> https, anything else -> http).
    """
    scheme = (scheme or "").lower()
    if not port:
        if not scheme:
            scheme = "http"
        return scheme, SCHEME_DEFAULT_PORTS.get(scheme, 0)
    if not scheme:
        scheme = "https" if port == SCHEME_DEFAULT_PORTS["https"] else "http"
    return scheme, port


def _env_str(key: str) -> str:
    return os.getenv(key, str(DEFAULT_SETTINGS[key]))


def _env_bool(key: str) -> bool:
    return _env_str(key).lower() == "true"


def _env_number(key: str, convert, errors: List[str]):
    """Parse a numeric setting; an empty value falls back to the default."""
    value = _env_str(key).strip()
    if not value:
        return convert(DEFAULT_SETTINGS[key])
    try:
        return convert(value)
    except ValueError:
        errors.append(f"{key} must be a number, got '{value}'")
        return convert(DEFAULT_SETTINGS[key])


def load_config(env_file: str = "./.env", overrides: Optional[Dict[str, Any]] = None) -> ExportConfig:
    """Build the ExportConfig for this run.

    Args:
        env_file: Path to a .env file. If the file exists, it is loaded via
                  python-dotenv. Otherwise, falls back to system environment.
        overrides: ExportConfig field values from the command line. Entries
                   whose value is None are ignored.

    Returns:
        A frozen ExportConfig with scheme, port and output_dir resolved.

    Raises:
        ConfigError: A numeric setting in the environment cannot be parsed.
    """
    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path)
        print(f"Loaded configuration from: {env_file}")
    else:
        print(f"Warning: {env_file} not found, using defaults/environment")

    errors: List[str] = []
    values: Dict[str, Any] = {
        "scheme": _env_str("WBEM_SCHEME"),
        "host": _env_str("WBEM_HOST"),
        "port": _env_number("WBEM_PORT", int, errors),
        "username": _env_str("WBEM_USERNAME"),
        "password": _env_str("WBEM_PASSWORD"),
        "namespace": _env_str("WBEM_NAMESPACE"),
        "class_name": _env_str("WBEM_CLASS"),
        "only_class_names": _env_bool("ONLY_CLASS_NAMES"),
        "output_dir": _env_str("OUTPUT_DIR"),
        "request_timeout": _env_number("REQUEST_TIMEOUT", float, errors),
        "discovery_timeout": _env_number("DISCOVERY_TIMEOUT", float, errors),
        "discovery_call_timeout": _env_number("DISCOVERY_CALL_TIMEOUT", float, errors),
        "verify_ssl": _env_bool("VERIFY_SSL"),
        "trace": _env_bool("TRACE"),
        "debug": _env_bool("DEBUG"),
    }

    if errors:
        raise ConfigError(errors)

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    values["scheme"], values["port"] = resolve_scheme_and_port(values["scheme"], int(values["port"] or 0))

    if not values["output_dir"]:
        values["output_dir"] = os.path.join(".", values["host"])

    return ExportConfig(**values)
