"""Tests for config.export_config (ExportConfig and load_config)."""

import os
from unittest.mock import patch

import pytest

from config import DEFAULT_SETTINGS, ConfigError, ExportConfig, load_config, resolve_scheme_and_port


@pytest.mark.parametrize(
    "scheme, port, expected",
    [
        ("", 0, ("http", 5988)),
        ("http", 0, ("http", 5988)),
        ("https", 0, ("https", 5989)),
        ("", 5988, ("http", 5988)),
        ("", 5989, ("https", 5989)),
        ("", 8080, ("http", 8080)),
        ("https", 8443, ("https", 8443)),
        ("HTTPS", 0, ("https", 5989)),
    ],
)
def test_resolve_scheme_and_port(scheme, port, expected):
    assert resolve_scheme_and_port(scheme, port) == expected


def test_load_config_defaults():
    with patch.dict(os.environ, {"WBEM_HOST": "10.0.0.5"}, clear=True):
        config = load_config(env_file="/nonexistent/.env")

    assert config.host == "10.0.0.5"
    assert config.scheme == "http"
    assert config.port == 5988
    assert config.output_dir == os.path.join(".", "10.0.0.5")
    assert config.url == "http://10.0.0.5:5988"
    assert config.only_class_names is False
    assert config.request_timeout == 30


def test_load_config_from_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "WBEM_HOST=cimom.example.com\n"
        "WBEM_PORT=5989\n"
        "WBEM_NAMESPACE=root/interop\n"
        "OUTPUT_DIR=/tmp/dump\n"
        "DEBUG=true\n"
    )
    with patch.dict(os.environ, {}, clear=True):
        config = load_config(env_file=str(env_file))

    assert config.scheme == "https"
    assert config.port == 5989
    assert config.namespace == "root/interop"
    assert config.output_dir == "/tmp/dump"
    assert config.debug is True


def test_cli_overrides_environment():
    env = {"WBEM_HOST": "env-host", "WBEM_NAMESPACE": "root/env"}
    with patch.dict(os.environ, env, clear=True):
        config = load_config(
            env_file="/nonexistent/.env",
            overrides={"host": "cli-host", "namespace": None, "port": 5989, "debug": True},
        )

    assert config.host == "cli-host"
    assert config.namespace == "root/env"
    assert config.scheme == "https"
    assert config.debug is True
    assert config.output_dir == os.path.join(".", "cli-host")


def test_config_is_immutable():
    config = ExportConfig(host="h")
    with pytest.raises(Exception):
        config.host = "other"


def test_validate_reports_problems():
    config = ExportConfig(host="", scheme="ftp", port=0, class_name="CIM_A")
    errors = config.validate()
    assert "WBEM_HOST is required" in errors
    assert "WBEM_CLASS requires WBEM_NAMESPACE" in errors
    assert any("WBEM_SCHEME" in e for e in errors)
    assert any("WBEM_PORT" in e for e in errors)


def test_url_has_scheme_host_and_port():
    assert ExportConfig(host="h", scheme="https", port=5989).url == "https://h:5989"


def test_unparseable_numbers_reported_by_key():
    env = {"WBEM_HOST": "h", "WBEM_PORT": "abc", "REQUEST_TIMEOUT": "soon"}
    with patch.dict(os.environ, env, clear=True):
        with pytest.raises(ConfigError) as exc_info:
            load_config(env_file="/nonexistent/.env")

    assert exc_info.value.errors == [
        "WBEM_PORT must be a number, got 'abc'",
        "REQUEST_TIMEOUT must be a number, got 'soon'",
    ]


def test_empty_numbers_fall_back_to_defaults():
    env = {"WBEM_HOST": "h", "WBEM_PORT": "", "REQUEST_TIMEOUT": ""}
    with patch.dict(os.environ, env, clear=True):
        config = load_config(env_file="/nonexistent/.env")

    assert config.port == 5988
    assert config.request_timeout == DEFAULT_SETTINGS["REQUEST_TIMEOUT"]
