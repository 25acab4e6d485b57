"""
tracechain.cli - Command-line interface for running one tier.

Usage:
    tracechain [--role ROLE] [--host HOST] [--port PORT] [--log-level LEVEL] [--no-otlp]

Examples:
    tracechain
    SERVICE_NAME=service-b tracechain
    tracechain --role service-c --console-spans
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from typing import List, Mapping, Optional

import uvicorn

from tracechain import __version__
from tracechain.app import create_app
from tracechain.config import SERVICE_C, SERVICE_VERSION, ServiceConfig
from tracechain.integrations import instrument_all, setup_tracing
from tracechain.logs import configure_logging

logger = logging.getLogger(__name__)


def parse_args(args: List[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        args: List of arguments (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="tracechain",
        description="Run one tier of the traced A -> B -> C call chain",
        epilog="Environment variables supply defaults for every option.",
    )

    parser.add_argument(
        "-r", "--role",
        type=str,
        default=None,
        help="Role to run: service-a, service-b or service-c (default: $SERVICE_NAME)",
    )

    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Interface to bind (default: 0.0.0.0)",
    )

    parser.add_argument(
        "-p", "--port",
        type=int,
        default=None,
        help="Override the port selected by the role",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Root log level (default: $LOG_LEVEL or INFO)",
    )

    parser.add_argument(
        "--no-otlp",
        action="store_true",
        help="Do not export spans to the OTLP collector",
    )

    parser.add_argument(
        "--console-spans",
        action="store_true",
        help="Print finished spans to stdout",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(args)


def resolve_config(
    parsed_args: argparse.Namespace,
    environ: Optional[Mapping[str, str]] = None,
) -> ServiceConfig:
    """Merge command-line overrides onto the environment configuration.

    Args:
        parsed_args: Parsed command-line arguments
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Resolved ServiceConfig
    """
    config = ServiceConfig.from_env(os.environ if environ is None else environ)
    overrides = {}
    if parsed_args.role:
        overrides["role"] = parsed_args.role
    if parsed_args.log_level:
        overrides["log_level"] = parsed_args.log_level.upper()
    if parsed_args.console_spans:
        overrides["console_spans"] = True
    return dataclasses.replace(config, **overrides) if overrides else config


def main(args: List[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parsed_args = parse_args(args)
    config = resolve_config(parsed_args)

    try:
        configure_logging(config.service_name, config.log_level)
    except ValueError as e:
        print(f"Error: Invalid log level: {e}", file=sys.stderr)
        return 2

    if not config.is_known_role:
        logger.warning("Unknown role %r, binding the %s port", config.role, SERVICE_C)

    provider = setup_tracing(
        service_name=config.otel_service_name,
        service_version=SERVICE_VERSION,
        otlp_endpoint=None if parsed_args.no_otlp else config.otlp_endpoint,
        console_output=config.console_spans,
    )
    instrument_all()

    app = create_app(config, tracer_provider=provider, instrument=True)
    port = parsed_args.port or config.port

    server_config = uvicorn.Config(
        app, host=parsed_args.host, port=port, log_config=None
    )
    server = uvicorn.Server(server_config)
    # bind_socket exits the process when the address is unavailable
    sock = server_config.bind_socket()
    logger.info("%s started on port %d", config.role, port)
    server.run(sockets=[sock])
    return 0


if __name__ == "__main__":
    sys.exit(main())
