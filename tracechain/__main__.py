"""
tracechain.__main__ - Entry point for running tracechain as a module.

Usage:
    python -m tracechain [options]

This module enables running a tier using:
    SERVICE_NAME=service-b python -m tracechain
"""

import sys

from tracechain.cli import main

if __name__ == "__main__":
    sys.exit(main())
