"""
Logs Tailer.

Renders a live log subscription to a Rich console:

    19 Oct 14:05 [APP|0] Listening on :8080
    upstream went away

Messages and errors are written as they arrive, in delivery order. The
subscription runs on its own asyncio task so the caller keeps control
while logs stream.
"""

import asyncio

from rich.console import Console
from rich.text import Text

from lattice.core.logging import get_logger, log_with_source
from lattice.logs.models import LogMessage
from lattice.logs.reader import LogReader

logger = get_logger(__name__)

TIMESTAMP_FORMAT = "%d %b %H:%M"


def format_log_message(message: LogMessage) -> Text:
    """Format as ``<timestamp> [<source type>|<source instance>] <message>``."""
    return Text.assemble(
        (message.time.strftime(TIMESTAMP_FORMAT), "cyan"),
        " [",
        (message.source_type, "yellow"),
        "|",
        (message.source_instance, "yellow"),
        "] ",
        message.text,
    )


class LogsTailer:
    """
    Writes every message and error of an app's log stream to a console.

    Callbacks run on the event loop, one subscription at a time, so the
    console is the only serialization point.
    """

    def __init__(self, log_reader: LogReader, console: Console) -> None:
        self._log_reader = log_reader
        self._console = console

    def output_log_message(self, message: LogMessage) -> None:
        self._console.print(format_log_message(message), soft_wrap=True, highlight=False)

    def output_error(self, error: Exception) -> None:
        self._console.print(Text(str(error)), soft_wrap=True, highlight=False)

    def start(self, app_guid: str) -> asyncio.Task[None]:
        """Start tailing on a new task. Cancel the task to stop."""
        return asyncio.create_task(self.tail(app_guid), name=f"tail-logs-{app_guid}")

    async def tail(self, app_guid: str) -> None:
        """Tail until the stream ends."""
        log_with_source(logger, "logs", "debug", "Tailing logs", app_guid=app_guid)
        await self._log_reader.tail_logs(app_guid, self.output_log_message, self.output_error)
