#!/usr/bin/env python3
"""Headless episode format detector.

Usage:
    python cli.py detect <url>               # Classify a remote audio URL
    python cli.py import-feed                # Import the configured JSON feed
    python cli.py serve --port 8000          # Run the HTTP API
"""

import sys
import os

sys.path.insert(0, os.path.dirname(__file__))

from core.cli_runtime import run_cli


def main():
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
