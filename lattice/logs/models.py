"""
Log Stream Models.

One LogMessage per line an app instance (or a platform component acting on
its behalf) wrote. The stream delivers newline-delimited LogEnvelopes, each
carrying either a message or a stream-level error.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MessageType(str, Enum):
    OUT = "OUT"
    ERR = "ERR"


class LogMessage(BaseModel):
    """A single log line. Timestamp is int64 nanoseconds since the Unix epoch."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    message: bytes
    message_type: MessageType = MessageType.OUT
    timestamp: int = Field(ge=-(2**63), le=2**63 - 1)
    app_id: str = ""
    source_type: str = ""
    source_instance: str = ""

    @property
    def time(self) -> datetime:
        """Timestamp as a local datetime."""
        return datetime.fromtimestamp(self.timestamp / 1_000_000_000)

    @property
    def text(self) -> str:
        return self.message.decode("utf-8", errors="replace")


class LogEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    log_message: LogMessage | None = None
    error: str | None = None
