"""
CLI Dependencies.

Builds the receptor client, app runner and log reader from configuration.
The receptor client is a module-level singleton so one command reuses one
connection pool; commands close it when they finish.
"""

from lattice.app_runner import AppRunner
from lattice.core.config import (
    get_app_config,
    get_loggregator_settings,
    get_receptor_settings,
    get_settings,
)
from lattice.logs.reader import HTTPLogReader
from lattice.receptor.client import HTTPReceptorClient

_client: HTTPReceptorClient | None = None


def get_receptor_client() -> HTTPReceptorClient:
    """Get or create the receptor client singleton."""
    global _client
    if _client is None:
        base_url, timeout = get_receptor_settings()
        _client = HTTPReceptorClient(base_url, timeout=timeout, auth=get_settings().receptor_auth)
    return _client


async def close_receptor_client() -> None:
    """Close the receptor client."""
    global _client
    if _client:
        await _client.close()
        _client = None


def get_app_runner() -> AppRunner:
    """App runner bound to the configured receptor and system domain."""
    return AppRunner(get_receptor_client(), get_app_config().application.system_domain)


def get_log_reader() -> HTTPLogReader:
    """Log reader for the configured log endpoint."""
    base_url, connect_timeout = get_loggregator_settings()
    return HTTPLogReader(base_url, connect_timeout=connect_timeout, auth=get_settings().receptor_auth)
