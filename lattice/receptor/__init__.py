"""
Receptor API access.

Wire models and an async HTTP client for desired/actual LRP state.
"""

from lattice.receptor.client import HTTPReceptorClient, ReceptorClient

__all__ = [
    "HTTPReceptorClient",
    "ReceptorClient",
]
