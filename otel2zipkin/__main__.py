"""
otel2zipkin.__main__ - Entry point for running otel2zipkin as a module.

Usage:
    python -m otel2zipkin <input_file> [options]

This module enables running otel2zipkin using:
    python -m otel2zipkin trace.json
"""

import sys

from otel2zipkin.cli import main

if __name__ == "__main__":
    sys.exit(main())
