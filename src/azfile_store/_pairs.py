"""Per-operation option validation.

Every public ``Storage`` operation takes keyword options ("pairs"). Each
operation accepts a fixed set of pair names; anything else is rejected with
``PairUnsupported`` before the service is contacted. Handle-level defaults are
merged underneath the caller's pairs.
"""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING

from azfile_store._errors import InvalidPair, ListModeInvalid, PairUnsupported
from azfile_store._models import ListMode, ObjectMode

if TYPE_CHECKING:
    from collections.abc import Mapping

    from azfile_store._types import IoCallback

OPERATION_PAIRS: dict[str, frozenset[str]] = {
    "create": frozenset({"object_mode"}),
    "delete": frozenset({"object_mode", "timeout"}),
    "stat": frozenset({"object_mode", "timeout"}),
    "list": frozenset({"list_mode", "timeout"}),
    "read": frozenset({"offset", "size", "io_callback", "timeout"}),
    "write": frozenset({"io_callback", "timeout"}),
    "metadata": frozenset(),
}


@dataclasses.dataclass(frozen=True)
class OperationPairs:
    """Validated options for a single operation call. ``None`` means not given."""

    object_mode: ObjectMode | None = None
    list_mode: ListMode | None = None
    offset: int | None = None
    size: int | None = None
    io_callback: IoCallback | None = None
    timeout: float | None = None

    @property
    def is_dir(self) -> bool:
        """``True`` when the caller asked for directory semantics."""
        return self.object_mode is ObjectMode.DIR

    def sdk_kwargs(self) -> dict[str, object]:
        """Keyword arguments forwarded to every SDK request."""
        if self.timeout is None:
            return {}
        return {"timeout": self.timeout}


def parse_pairs(
    op: str,
    pairs: Mapping[str, object],
    defaults: Mapping[str, object] | None = None,
    *,
    path: str | None = None,
) -> OperationPairs:
    """Validate *pairs* for operation *op*.

    :param op: Operation name, a key of ``OPERATION_PAIRS``.
    :param pairs: Caller-supplied options.
    :param defaults: Handle-level defaults for this operation.
    :param path: Caller path, used for error context.
    :raises PairUnsupported: If a pair is not accepted by *op*.
    :raises ListModeInvalid: If ``list_mode`` names an unknown mode.
    :raises InvalidPair: If a value has the wrong type or range.
    """
    allowed = OPERATION_PAIRS[op]
    merged = {**(defaults or {}), **pairs}
    for name, value in merged.items():
        if name not in allowed:
            raise PairUnsupported(pair=name, value=value, op=op, path=path, backend="azfile")

    values: dict[str, object] = {}
    if "object_mode" in merged:
        values["object_mode"] = _object_mode(merged["object_mode"], op=op, path=path)
    if "list_mode" in merged:
        values["list_mode"] = _list_mode(merged["list_mode"], op=op, path=path)
    for name in ("offset", "size"):
        if name in merged:
            value = merged[name]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidPair(pair=name, value=value, op=op, path=path)
            values[name] = value
    if "io_callback" in merged:
        if not callable(merged["io_callback"]):
            raise InvalidPair(pair="io_callback", value=merged["io_callback"], op=op, path=path)
        values["io_callback"] = merged["io_callback"]
    if "timeout" in merged:
        timeout = merged["timeout"]
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise InvalidPair(pair="timeout", value=timeout, op=op, path=path)
        values["timeout"] = timeout
    return OperationPairs(**values)  # type: ignore[arg-type]


def _object_mode(value: object, *, op: str, path: str | None) -> ObjectMode:
    if isinstance(value, str):
        try:
            value = ObjectMode[value.upper()]
        except KeyError:
            raise InvalidPair(pair="object_mode", value=value, op=op, path=path) from None
    if value not in (ObjectMode.DIR, ObjectMode.READ):
        raise InvalidPair(pair="object_mode", value=value, op=op, path=path)
    return value  # type: ignore[return-value]


def _list_mode(value: object, *, op: str, path: str | None) -> ListMode:
    if isinstance(value, ListMode):
        return value
    try:
        return ListMode(value)
    except ValueError:
        raise ListModeInvalid(actual=value, op=op, path=path, backend="azfile") from None
