"""Live log streaming for apps."""

from lattice.logs.reader import HTTPLogReader, LogReader
from lattice.logs.tailer import LogsTailer

__all__ = [
    "HTTPLogReader",
    "LogReader",
    "LogsTailer",
]
