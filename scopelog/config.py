"""Logger construction helpers.

Provides :func:`configure_logger` (build a logger for explicit injection) and
:func:`get_default_logger` (lazy process-wide instance for the application's
composition root).
"""

from typing import IO, Any, Mapping

from .encoding import LOG_FORMAT, get_encoder
from .fields import DEFAULT_STACK_FIELD
from .logger import Logger
from .writer import SyncWriter


def configure_logger(
    *,
    stream: IO[bytes] | None = None,
    format: LOG_FORMAT = "json",
    fields: Mapping[str, Any] | None = None,
    debug: bool = False,
    stack_field: str = DEFAULT_STACK_FIELD,
) -> Logger:
    """
    Build a :class:`Logger`. Nothing global is touched; pass the result to
    the components that log.

    Args:
        stream: Binary stream for records. Defaults to stdout.
        format: "json" for newline-delimited JSON, "text" for ``key=value`` lines.
        fields: Base fields added to every record.
        debug: Enable debug-level output by default.
        stack_field: Key under which error stacks are written.

    Returns:
        Configured :class:`Logger`.

    Example:
        >>> import sys
        >>> log = configure_logger(stream=sys.stderr.buffer, fields={"svc": "billing"})
    """
    return Logger(
        SyncWriter(stream),
        fields=fields,
        debug=debug,
        stack_field=stack_field,
        encoder=get_encoder(format),
    )


# =============================================================================
# Default Logger
# =============================================================================


_default_logger: Logger | None = None


def get_default_logger(**kwargs: Any) -> Logger:
    """Get or create the process-wide logger.

    The first call builds it with :func:`configure_logger` and ``kwargs``;
    later calls return the same instance and ignore ``kwargs``. Only the
    application entry point should call this; library code takes a logger
    as a parameter.
    """
    global _default_logger

    if _default_logger is None:
        _default_logger = configure_logger(**kwargs)
    return _default_logger
