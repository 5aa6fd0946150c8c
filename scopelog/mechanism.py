"""Core error types for :mod:`scopelog`."""


class ScopeLogException(Exception):
    """Base class for all scopelog exceptions. Wraps the underlying failure."""

    def __init__(self, exception: Exception, message: str = ""):
        super().__init__(message or str(exception))
        self.exception = exception


class EncodeError(ScopeLogException):
    """The encoder could not represent a value of the record."""

    def __init__(self, exception: Exception, encoder: str = ""):
        super().__init__(exception, f"{encoder or 'encoder'} cannot encode record: {exception}")
        self.encoder = encoder


class FatalEncodeError(ScopeLogException):
    """
    Even the substitute record could not be encoded. The encoder is broken for
    plain strings, so there is nothing left to log with.
    """

    def __init__(self, exception: Exception, encoder: str = ""):
        super().__init__(exception, f"{encoder or 'encoder'} cannot encode the substitute record: {exception}")
        self.encoder = encoder
