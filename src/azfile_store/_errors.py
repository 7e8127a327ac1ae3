"""Normalized error hierarchy for azfile_store."""

from __future__ import annotations

from typing import Optional


class StoreError(Exception):
    """Base class for all azfile_store errors.

    :param message: Human-readable error description.
    :param op: The storage operation that failed, if any.
    :param path: The caller-visible path involved in the error, if any.
    :param backend: The service name involved, if any.
    """

    def __init__(
        self,
        message: str = "",
        *,
        op: Optional[str] = None,
        path: Optional[str] = None,
        backend: Optional[str] = None,
    ) -> None:
        self.op = op
        self.path = path
        self.backend = backend
        super().__init__(message)

    def _context(self) -> list[str]:
        parts = []
        if self.op is not None:
            parts.append(f"op={self.op!r}")
        if self.path is not None:
            parts.append(f"path={self.path!r}")
        if self.backend is not None:
            parts.append(f"backend={self.backend!r}")
        return parts

    def __str__(self) -> str:
        parts = [super().__str__(), *self._context()]
        return " | ".join(parts) if len(parts) > 1 else parts[0]

    def __repr__(self) -> str:
        cls = type(self).__name__
        args = [repr(self.args[0] if self.args else ""), *self._context()]
        return f"{cls}({', '.join(args)})"


class NotFound(StoreError):
    """Raised when a file or directory does not exist."""


class PermissionDenied(StoreError):
    """Raised when access is denied by the storage service."""


class Unexpected(StoreError):
    """Raised for any other service or transport failure.

    The original exception is always available as ``__cause__``.
    """


class Unsupported(StoreError):
    """Raised when a request needs something this storage handle cannot do."""


class CapabilityNotSupported(Unsupported):
    """Raised when an operation requires a feature the handle was not configured with.

    :param capability: The name of the missing feature.
    """

    def __init__(self, message: str = "", *, capability: str = "", **kwargs: Optional[str]) -> None:
        self.capability = capability
        super().__init__(message, **kwargs)

    def _context(self) -> list[str]:
        parts = super()._context()
        if self.capability:
            parts.append(f"capability={self.capability!r}")
        return parts


class PairUnsupported(Unsupported):
    """Raised when an option is not accepted by an operation.

    :param pair: The option name.
    :param value: The value that was supplied.
    """

    def __init__(self, message: str = "", *, pair: str = "", value: object = None, **kwargs: Optional[str]) -> None:
        self.pair = pair
        self.value = value
        super().__init__(message or f"Option '{pair}' is not supported", **kwargs)

    def _context(self) -> list[str]:
        return [*super()._context(), f"pair={self.pair!r}"]


class ListModeInvalid(Unsupported):
    """Raised when a listing mode is not recognized by the listing engine.

    :param actual: The mode that was requested.
    """

    def __init__(self, message: str = "", *, actual: object = None, **kwargs: Optional[str]) -> None:
        self.actual = actual
        super().__init__(message or f"Invalid list mode: {actual!r}", **kwargs)


class PairRequired(StoreError):
    """Raised when a required option is missing.

    :param pair: The missing option name.
    """

    def __init__(self, message: str = "", *, pair: str = "", **kwargs: Optional[str]) -> None:
        self.pair = pair
        super().__init__(message or f"Option '{pair}' is required", **kwargs)


class InvalidPair(StoreError):
    """Raised when an option value is malformed.

    :param pair: The option name.
    :param value: The rejected value.
    """

    def __init__(self, message: str = "", *, pair: str = "", value: object = None, **kwargs: Optional[str]) -> None:
        self.pair = pair
        self.value = value
        super().__init__(message or f"Invalid value for option '{pair}': {value!r}", **kwargs)


class InitError(StoreError):
    """Raised when a storage handle cannot be constructed.

    The failing step's error is available as ``err`` and ``__cause__``.

    :param pairs: The options supplied to the constructor, secrets redacted.
    """

    def __init__(
        self,
        message: str = "",
        *,
        err: Optional[StoreError] = None,
        pairs: Optional[dict[str, object]] = None,
        **kwargs: Optional[str],
    ) -> None:
        self.err = err
        self.pairs = pairs or {}
        super().__init__(message or f"Cannot initialize storage: {err}", **kwargs)

    def _context(self) -> list[str]:
        return [*super()._context(), f"pairs={self.pairs!r}"]
