"""
Log Reader.

Subscribes to an app's live log stream and hands every message and every
stream error to a pair of callbacks, in the order the transport delivers
them. ``tail_logs`` returns once the server closes the stream or the
connection fails. Cancelling the calling task also ends it.

HTTPLogReader consumes newline-delimited JSON from the log endpoint:

    GET {base_url}/tail/?app=<app_guid>

    {"log_message": {"message": "...", "timestamp": 1420070400000000000, ...}}
    {"error": "upstream went away"}

Errors inside the stream are reported and the stream keeps going. A bad
status or a broken connection is reported and ends the subscription.
"""

from collections.abc import Callable
from typing import Protocol

import httpx
from pydantic import ValidationError

from lattice.core.exceptions import LogStreamError
from lattice.core.logging import get_logger, log_with_source
from lattice.logs.models import LogEnvelope, LogMessage

logger = get_logger(__name__)

MessageCallback = Callable[[LogMessage], None]
ErrorCallback = Callable[[Exception], None]


class LogReader(Protocol):
    async def tail_logs(
        self,
        app_guid: str,
        on_message: MessageCallback,
        on_error: ErrorCallback,
    ) -> None: ...


class HTTPLogReader:
    """
    Streams an app's logs over HTTP.

    Usage:
        reader = HTTPLogReader("http://doppler.example.com")
        await reader.tail_logs("my-app", print, print)
    """

    def __init__(
        self,
        base_url: str,
        connect_timeout: float = 10.0,
        auth: tuple[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._timeout = httpx.Timeout(connect_timeout, read=None)
        self._auth = auth
        self._transport = transport

    async def tail_logs(
        self,
        app_guid: str,
        on_message: MessageCallback,
        on_error: ErrorCallback,
    ) -> None:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._timeout,
            auth=self._auth,
            transport=self._transport,
        ) as client:
            try:
                async with client.stream("GET", "/tail/", params={"app": app_guid}) as response:
                    if response.status_code != 200:
                        await response.aread()
                        on_error(LogStreamError(
                            f"Log stream for {app_guid} rejected with {response.status_code}: "
                            f"{response.text.strip() or response.reason_phrase}"
                        ))
                        return

                    log_with_source(logger, "logs", "info", "Log stream opened", app_guid=app_guid)

                    async for line in response.aiter_lines():
                        if line.strip():
                            self._dispatch(line, on_message, on_error)

            except httpx.HTTPError as e:
                log_with_source(
                    logger, "logs", "error", "Log stream failed", app_guid=app_guid, error=str(e),
                )
                on_error(e)
                return

        log_with_source(logger, "logs", "info", "Log stream closed", app_guid=app_guid)

    @staticmethod
    def _dispatch(line: str, on_message: MessageCallback, on_error: ErrorCallback) -> None:
        try:
            envelope = LogEnvelope.model_validate_json(line)
        except ValidationError as e:
            on_error(LogStreamError(f"Malformed log envelope: {e.errors()[0]['msg']}"))
            return

        if envelope.error is not None:
            on_error(LogStreamError(envelope.error))
        elif envelope.log_message is not None:
            on_message(envelope.log_message)
        else:
            on_error(LogStreamError(f"Unrecognized log envelope: {line.strip()}"))
