"""Rx operators that log stream items and errors through a :class:`Logger`."""

from typing import Any, Callable, Optional

from reactivex import Observable

from .fields import Field, error_field, field
from .logger import Logger
from .scope import Scope


def log_each(
    logger: Logger,
    scope: Optional[Scope] = None,
    msg: str = "item",
    key: str = "item",
    to_value: Callable[[Any], Any] | None = None,
):
    """
    Log every item at info level under ``key``, then forward it unchanged.

    ``to_value`` maps the item to the logged value, e.g. to keep large
    payloads out of the log.
    """

    def _log_each(source):
        def subscribe(observer, scheduler=None):
            def on_next(value: Any) -> None:
                logged = to_value(value) if to_value is not None else value
                logger.info(scope, msg, field(key, logged))
                observer.on_next(value)

            return source.subscribe(
                on_next=on_next,
                on_error=observer.on_error,
                on_completed=observer.on_completed,
                scheduler=scheduler,
            )

        return Observable(subscribe)

    return _log_each


def log_errors(logger: Logger, scope: Optional[Scope] = None, msg: str = "stream error"):
    """
    Log an ``on_error`` at error level with the error attached, then forward
    the error downstream.
    """

    def _log_errors(source):
        def subscribe(observer, scheduler=None):
            def on_error(error: Exception) -> None:
                logger.error(scope, msg, error_field(error))
                observer.on_error(error)

            return source.subscribe(
                on_next=observer.on_next,
                on_error=on_error,
                on_completed=observer.on_completed,
                scheduler=scheduler,
            )

        return Observable(subscribe)

    return _log_errors


def log_redirect_to(
    logger: Logger,
    cond: Callable[[Any], bool],
    scope: Optional[Scope] = None,
    to_fields: Callable[[Any], tuple[str, tuple[Field, ...]]] | None = None,
):
    """
    Log the items matching ``cond`` instead of forwarding them; forward the
    rest.

    ``to_fields`` turns a matching item into ``(msg, fields)``. By default the
    item's ``str()`` is the message.
    """

    def _log_redirect_to(source):
        def subscribe(observer, scheduler=None):
            def on_next(value: Any) -> None:
                if cond(value):
                    if to_fields is not None:
                        msg, fields = to_fields(value)
                    else:
                        msg, fields = str(value), ()
                    logger.info(scope, msg, *fields)
                else:
                    observer.on_next(value)

            return source.subscribe(
                on_next=on_next,
                on_error=observer.on_error,
                on_completed=observer.on_completed,
                scheduler=scheduler,
            )

        return Observable(subscribe)

    return _log_redirect_to
