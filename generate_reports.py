#!/usr/bin/env python3
"""Clinic financial reports.

Entry point script wrapping the package CLI for convenient execution
from a source checkout.

Usage:
    python generate_reports.py --data-dir ./export --range year --year 2025

For full documentation and options:
    python generate_reports.py --help
"""

import sys
from pathlib import Path

# Add src to path for development installs
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from clinic_reports.cli import main

if __name__ == "__main__":
    sys.exit(main())
