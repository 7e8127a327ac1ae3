"""Maps caller paths to share-absolute paths and back."""

from __future__ import annotations

from typing import Final


def normalize_work_dir(work_dir: str) -> str:
    """Return *work_dir* with exactly one leading and one trailing separator.

    Example: ``"ws"`` and ``"/ws/"`` both become ``"/ws/"``; ``""`` becomes ``"/"``.
    """
    stripped = work_dir.replace("\\", "/").strip("/")
    if not stripped:
        return "/"
    return f"/{stripped}/"


class PathTranslator:
    """Pure path arithmetic relative to a work directory.

    The share-absolute form drops the work directory's leading separator, so
    ``/ws/`` plus ``a.txt`` gives ``ws/a.txt``.

    :param work_dir: The root directory all caller paths resolve under.
    """

    __slots__ = ("_prefix", "_work_dir")
    _work_dir: Final[str]  # type: ignore[misc]
    _prefix: Final[str]  # type: ignore[misc]

    def __init__(self, work_dir: str = "/") -> None:
        object.__setattr__(self, "_work_dir", work_dir)
        object.__setattr__(self, "_prefix", work_dir[1:] if work_dir.startswith("/") else work_dir)

    @property
    def work_dir(self) -> str:
        return self._work_dir

    @property
    def prefix(self) -> str:
        """The work directory without its leading separator."""
        return self._prefix

    def to_absolute(self, path: str) -> str:
        return self._prefix + path

    def to_relative(self, path: str) -> str:
        if self._prefix and path.startswith(self._prefix):
            return path[len(self._prefix) :]
        return path

    def __repr__(self) -> str:
        return f"PathTranslator({self._work_dir!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PathTranslator):
            return self._work_dir == other._work_dir
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._work_dir)

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"PathTranslator is immutable: cannot set '{name}'")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"PathTranslator is immutable: cannot delete '{name}'")


def split_prefix(prefix: str) -> tuple[str, str | None]:
    """Split an absolute listing prefix into ``(directory, name_prefix)``.

    Azure Files lists one directory at a time and filters children by a name
    prefix, so ``ws/logs/2024-`` lists ``ws/logs`` filtered by ``2024-``.
    A prefix ending in ``/`` lists that directory unfiltered.
    """
    directory, sep, name = prefix.rpartition("/")
    if not sep:
        return "", name or None
    return directory, name or None
