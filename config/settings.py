"""
Settings — Default configuration values for the WBEM dump tool.

This module provides the DEFAULT_SETTINGS dict used as fallback values when
environment variables are not set. The actual configuration is loaded from
.env at runtime; these defaults make the tool usable against a stock
OpenPegasus/SFCB installation out of the box.

Configuration precedence (highest to lowest):
  1. CLI flags (--host, --namespace, --debug, ...)
  2. Environment variables (from .env file)
  3. DEFAULT_SETTINGS (this file)

Settings reference:
  WBEM_SCHEME             "http" or "https"; empty = pick from port
  WBEM_PORT               0 = pick from scheme (http 5988, https 5989)
  WBEM_NAMESPACE          Dump a single namespace (empty = discover all)
  WBEM_CLASS              Dump a single class (requires WBEM_NAMESPACE)
  ONLY_CLASS_NAMES        Print class names only, write nothing
  OUTPUT_DIR              Output root (empty = ./<host>)
  REQUEST_TIMEOUT         Seconds allowed for each CIM operation
  DISCOVERY_TIMEOUT       Seconds allowed for the whole namespace discovery
  DISCOVERY_CALL_TIMEOUT  Seconds allowed for each discovery call
  VERIFY_SSL              Verify the server certificate for https
  TRACE                   Write every request/response to <output>/trace
  DEBUG                   Verbose console output
"""

DEFAULT_SETTINGS = {
    "WBEM_SCHEME": "",
    "WBEM_HOST": "",
    "WBEM_PORT": 0,
    "WBEM_USERNAME": "root",
    "WBEM_PASSWORD": "",
    "WBEM_NAMESPACE": "",
    "WBEM_CLASS": "",
    "ONLY_CLASS_NAMES": False,
    "OUTPUT_DIR": "",
    "REQUEST_TIMEOUT": 30,
    "DISCOVERY_TIMEOUT": 30,
    "DISCOVERY_CALL_TIMEOUT": 10,
    "VERIFY_SSL": False,
    "TRACE": False,
    "DEBUG": False,
}

DEFAULT_SEED_NAMESPACE = "root/cimv2"

# Scheme <-> port defaults for CIM-XML over HTTP(S).
SCHEME_DEFAULT_PORTS = {
    "http": 5988,
    "https": 5989,
}
