"""
Unit Test Fixtures.

Fixtures for unit tests - the receptor and the log stream are faked.
Unit tests should be fast and isolated, never touching the network.
"""

import asyncio
import time
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from lattice.logs.models import LogMessage
from lattice.receptor.client import HTTPReceptorClient
from lattice.receptor.models import (
    ActualLRPResponse,
    ActualLRPState,
    DesiredLRPResponse,
)


# =============================================================================
# Receptor Fixtures
# =============================================================================


@pytest.fixture
def fake_receptor_client() -> AsyncMock:
    """
    Receptor client whose every API call is an AsyncMock.

    Defaults to an empty receptor: no desired and no actual LRPs.

    Usage:
        def test_scale(fake_receptor_client, make_desired_lrp):
            fake_receptor_client.desired_lrps.return_value = [make_desired_lrp("app")]
    """
    client = AsyncMock(spec=HTTPReceptorClient)
    client.desired_lrps.return_value = []
    client.actual_lrps_by_process_guid.return_value = []
    client.create_desired_lrp.return_value = None
    client.update_desired_lrp.return_value = None
    client.delete_desired_lrp.return_value = None
    return client


def desired_lrp(process_guid: str, instances: int = 1) -> DesiredLRPResponse:
    """Desired LRP as the receptor would list it."""
    return DesiredLRPResponse(process_guid=process_guid, instances=instances)


def actual_lrp(process_guid: str, state: ActualLRPState, index: int = 0) -> ActualLRPResponse:
    """Actual LRP instance as the receptor would list it."""
    return ActualLRPResponse(process_guid=process_guid, index=index, state=state)


@pytest.fixture
def make_desired_lrp():
    """Factory for desired LRPs as the receptor lists them."""
    return desired_lrp


@pytest.fixture
def make_actual_lrp():
    """Factory for actual LRP instances as the receptor lists them."""
    return actual_lrp


# =============================================================================
# Log Stream Fixtures
# =============================================================================


def log_message(
    text: str,
    source_type: str = "APP",
    source_instance: str = "0",
    timestamp: int | None = None,
) -> LogMessage:
    """Log message stamped now unless a nanosecond timestamp is given."""
    return LogMessage(
        message=text.encode(),
        timestamp=time.time_ns() if timestamp is None else timestamp,
        source_type=source_type,
        source_instance=source_instance,
    )


@pytest.fixture
def make_log_message():
    """Factory for log messages."""
    return log_message


class FakeLogReader:
    """
    Scripted log stream.

    Replays queued messages and errors through the callbacks in the order
    they were added, then reports the app guid it was asked for on
    ``app_guids`` and returns, as if the server closed the stream.
    """

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []
        self.app_guids: asyncio.Queue[str] | None = None
        self.calls: list[str] = []

    def add_log(self, message: LogMessage) -> None:
        self.events.append(("message", message))

    def add_error(self, error: Exception) -> None:
        self.events.append(("error", error))

    async def tail_logs(self, app_guid, on_message, on_error) -> None:
        self.calls.append(app_guid)
        for kind, event in self.events:
            if kind == "message":
                on_message(event)
            else:
                on_error(event)
        if self.app_guids is not None:
            await self.app_guids.put(app_guid)


@pytest.fixture
def fake_log_reader() -> FakeLogReader:
    """Empty scripted log stream."""
    return FakeLogReader()


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.logger", mock_logger):
                # Test code that logs
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    return logger
