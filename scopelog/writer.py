"""Byte sinks for encoded records and a file-like adapter over a logger."""

import io
import sys
import threading
from typing import IO, TYPE_CHECKING, Any, Optional

from reactivex import Subject

from .scope import Scope

if TYPE_CHECKING:
    from .logger import Logger


class SyncWriter:
    """
    Serializes writes to a byte stream so records never interleave.

    The lock is held only around the write itself. Write errors (``OSError``,
    or ``ValueError`` from a closed stream) are dropped: logging must not break
    the caller.

    Parameters
    - stream: Binary stream. Defaults to the process stdout buffer.
    - flush: Flush after every record.
    """

    def __init__(self, stream: Optional[IO[bytes]] = None, *, flush: bool = True):
        self.stream = stream if stream is not None else sys.stdout.buffer
        self._flush = flush
        self._lock = threading.Lock()

    def write(self, data: bytes) -> None:
        try:
            with self._lock:
                self.stream.write(data)
                if self._flush and hasattr(self.stream, "flush"):
                    self.stream.flush()
        except (OSError, ValueError):
            pass


class SubjectWriter:
    """
    Sink that pushes every encoded record into a reactivex ``Subject``.

    Subscribers see one ``bytes`` item per record, on the logging thread. The
    subject never completes. No lock is held while subscribers run, so a
    subscriber may log through the same logger; exceptions raised by a
    subscriber propagate out of the log call.

    Example:
        >>> sink = SubjectWriter()
        >>> sink.records.subscribe(print)
        >>> log = Logger(sink)
    """

    def __init__(self, subject: Optional[Subject] = None):
        self.records: Subject = subject if subject is not None else Subject()

    def write(self, data: bytes) -> None:
        self.records.on_next(data)


class LogWriter(io.TextIOBase):
    """
    File-like object that logs each chunk written to it at info level.

    Surrounding whitespace is stripped and whitespace-only chunks are
    dropped, so ``print(..., file=writer)`` yields one record per call.
    """

    def __init__(self, logger: "Logger", scope: Scope):
        super().__init__()
        self._logger = logger
        self._scope = scope

    def writable(self) -> bool:
        return True

    def write(self, data: Any) -> int:
        text = data.decode("utf-8", errors="replace") if isinstance(data, (bytes, bytearray)) else str(data)
        msg = text.strip()
        if msg:
            self._logger.info(self._scope, msg)
        return len(data)
