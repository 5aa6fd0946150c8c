"""Convenience exports for the :mod:`scopelog` package."""

from .config import configure_logger, get_default_logger  # noqa: F401
from .encoding import (  # noqa: F401
    ENCODE_ERROR_MSG,
    LOG_FORMAT,
    Encoder,
    JSONEncoder,
    TextEncoder,
    encode_with_fallback,
)
from .fields import Field, error_field, field, stash, time_field  # noqa: F401
from .logger import Logger  # noqa: F401
from .mechanism import EncodeError, FatalEncodeError, ScopeLogException  # noqa: F401
from .opt import log_each, log_errors, log_redirect_to  # noqa: F401
from .pool import Pool  # noqa: F401
from .resolver import resolve  # noqa: F401
from .scope import ChainNode, Scope  # noqa: F401
from .stack import Describable, Stacker, StackError, render_stack  # noqa: F401
from .writer import LogWriter, SubjectWriter, SyncWriter  # noqa: F401

__all__ = [
    "ScopeLogException",
    "EncodeError",
    "FatalEncodeError",

    "Field",
    "field",
    "error_field",
    "time_field",
    "stash",
    "Scope",
    "ChainNode",
    "resolve",
    "Pool",

    "Describable",
    "Stacker",
    "StackError",
    "render_stack",

    "LOG_FORMAT",
    "ENCODE_ERROR_MSG",
    "Encoder",
    "JSONEncoder",
    "TextEncoder",
    "encode_with_fallback",

    "SyncWriter",
    "SubjectWriter",
    "LogWriter",
    "Logger",
    "configure_logger",
    "get_default_logger",

    # rx
    "log_each",
    "log_errors",
    "log_redirect_to",
]
