#!/usr/bin/env python3
"""
lattice CLI entry point.

Runs the CLI from a source checkout without installing it. Installed
copies expose the same application as the ``lattice`` command.

Usage:
    python cli.py --help
    python cli.py app start my-app -i docker:///org/app -c /app/run
    python cli.py logs tail my-app
"""

import sys
from pathlib import Path

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from lattice.cli.app import app

if __name__ == "__main__":
    app()
