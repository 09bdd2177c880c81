#!/usr/bin/env python3
"""
WBEM Dump — Entry Point.

This is the main script that users run to dump the CIM schema and instances
of a WBEM server (OpenPegasus, SFCB, vendor CIMOMs) to a local directory. It
reads configuration from a .env file, applies CLI overrides, and walks every
namespace, class and instance the server exposes.

The dump (managed by DumpOrchestrator) proceeds as:
  1. Resolve target namespaces (explicit, or discovered from root/cimv2)
  2. Per namespace: qualifier types, class definitions, instances
  3. Save run metadata as dump_results.json

Usage:
    python run.py --host 192.168.1.157 --port 5988 --username root --password rootpwd
    python run.py --namespace root/cimv2            # One namespace
    python run.py --namespace root/cimv2 --class CIM_ComputerSystem
    python run.py --onlyclass                       # List class names only
    python run.py --debug --trace                   # Verbose output + wire trace
    python run.py --version                         # Show version
    python run.py --env /path                       # Use alternate .env file
"""

import sys
import argparse
from pathlib import Path

from config import ConfigError, load_config
from core import DumpOrchestrator

# Read version from the repo-root VERSION file (e.g., "0.1.0").
VERSION_FILE = Path(__file__).resolve().parent / "VERSION"
VERSION = VERSION_FILE.read_text().strip() if VERSION_FILE.exists() else "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="WBEM Dump - Export namespaces, classes and instances from a CIM-XML server",
        epilog="Example: run.py --host 192.168.1.157 --port 5988 --username root --password rootpwd",
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument(
        "--scheme",
        choices=["http", "https"],
        help="URL scheme; picked from the port when omitted (5988 = http, 5989 = https)",
    )
    parser.add_argument("--host", help="IP address or hostname of the WBEM server")
    parser.add_argument(
        "--port",
        type=int,
        help="CIM-XML port; 0 or omitted picks from the scheme (http = 5988, https = 5989)",
    )
    parser.add_argument("--namespace", help="Dump only this namespace (default: discover all)")
    parser.add_argument("--class", dest="class_name", help="Dump only this class (requires --namespace)")
    parser.add_argument(
        "--onlyclass", action="store_true", default=None, help="List class names only, write nothing"
    )
    parser.add_argument("--username", help="Username")
    parser.add_argument("--password", help="Password")
    parser.add_argument("--output", "-o", help="Output directory (default: ./<host>)")
    parser.add_argument("--timeout", type=float, help="Per-operation timeout in seconds")
    parser.add_argument("--verify-ssl", action="store_true", default=None, help="Verify the server certificate")
    parser.add_argument("--trace", action="store_true", default=None, help="Write every request/response to <output>/trace")
    parser.add_argument("--debug", action="store_true", default=None, help="Enable debug output")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")
    return parser


def _overrides(args) -> dict:
    """ExportConfig overrides from CLI flags (None = not given)."""
    return {
        "scheme": args.scheme,
        "host": args.host,
        "port": args.port,
        "namespace": args.namespace,
        "class_name": args.class_name,
        "only_class_names": args.onlyclass,
        "username": args.username,
        "password": args.password,
        "output_dir": args.output,
        "request_timeout": args.timeout,
        "verify_ssl": args.verify_ssl,
        "trace": args.trace,
        "debug": args.debug,
    }


def main(argv=None):
    """Parse CLI arguments and run the dump."""
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"wbem-dump {VERSION}")
        sys.exit(0)

    try:
        config = load_config(env_file=args.env, overrides=_overrides(args))
    except ConfigError as e:
        print("\nConfiguration Errors:")
        for err in e.errors:
            print(f"  - {err}")
        sys.exit(1)

    orchestrator = DumpOrchestrator(config)

    # Print header
    print(f"\n{'='*60}")
    print(f"WBEM DUMP v{VERSION}")
    print("="*60)
    print(f"Server: {config.url}")
    print(f"Namespace: {config.namespace or '(discover)'}")
    if config.class_name:
        print(f"Class: {config.class_name}")
    print(f"Output: {config.output_dir}")

    # Validate required configuration before proceeding
    if not orchestrator.validate_config():
        sys.exit(1)

    results = orchestrator.run()

    orchestrator.print_summary(results)

    # Exit with error code if no namespace was dumped or a fatal error occurred
    if not results.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
