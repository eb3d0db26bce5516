"""
lattice.

Command-line client for long-running processes (LRPs) on a Diego receptor.

- app_runner/: Application lifecycle (start, scale, remove, status)
- cli/: Typer command surface and Rich output
- core/: Configuration, logging, exceptions
- logs/: Live log streaming and rendering
- receptor/: HTTP client and wire models for the receptor API
"""

__version__ = "0.1.0"
