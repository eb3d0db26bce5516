"""
CLI Commands.

Organized by domain/feature area.
"""

from lattice.cli.commands.apps import app as apps_app
from lattice.cli.commands.logs import app as logs_app

__all__ = [
    "apps_app",
    "logs_app",
]
