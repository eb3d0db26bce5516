"""Application lifecycle against the receptor's desired/actual state."""

from lattice.app_runner.app_runner import AppRunner

__all__ = ["AppRunner"]
