"""Object model, modes, and storage metadata."""

from __future__ import annotations

import dataclasses
import enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import datetime


class ObjectMode(enum.Flag):
    """What an object is. Exactly one of ``DIR`` or ``READ`` is set on every ``Object``."""

    DIR = enum.auto()
    READ = enum.auto()


class ListMode(enum.Enum):
    """How ``Storage.list`` walks the share.

    Only ``DIR`` and ``PREFIX`` are served by Azure Files; ``PART`` and
    ``BLOCK`` exist for multipart and block-blob services and are rejected.
    """

    DIR = "dir"
    PREFIX = "prefix"
    PART = "part"
    BLOCK = "block"


_CONTENT_FIELDS = ("content_length", "content_type", "content_md5")


@dataclasses.dataclass(frozen=True, eq=False)
class Object:
    """Snapshot of a file or directory in the share.

    :param id: Share-absolute path, used for service calls.
    :param path: Caller-visible path (``id`` without the work directory).
    :param mode: ``ObjectMode.DIR`` or ``ObjectMode.READ``.
    :param done: ``True`` when metadata is fully populated.
    :param content_length: Size in bytes, ``None`` if unknown.
    :param last_modified: Last modification time, if known.
    :param etag: Entity tag, if known.
    :param content_type: MIME type, if known.
    :param content_md5: Base64 MD5 digest, if known.
    :param server_encrypted: Server-side encryption flag, if known.
    :raises ValueError: If ``mode`` is not exactly one of DIR/READ, or a
        directory carries content metadata.
    """

    id: str
    path: str
    mode: ObjectMode
    done: bool = True
    content_length: int | None = None
    last_modified: datetime | None = None
    etag: str | None = None
    content_type: str | None = None
    content_md5: str | None = None
    server_encrypted: bool | None = None

    def __post_init__(self) -> None:
        if self.mode not in (ObjectMode.DIR, ObjectMode.READ):
            raise ValueError(f"Object mode must be exactly one of DIR or READ, got {self.mode!r}")
        if self.mode is ObjectMode.DIR:
            for name in _CONTENT_FIELDS:
                if getattr(self, name) is not None:
                    raise ValueError(f"Directory object cannot carry {name}")

    @property
    def is_dir(self) -> bool:
        return self.mode is ObjectMode.DIR

    @property
    def name(self) -> str:
        """Final component of ``path``."""
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Object):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)


@dataclasses.dataclass(frozen=True)
class StorageMeta:
    """Static metadata about a storage handle.

    :param work_dir: The configured work directory.
    :param name: The share name, when known.
    """

    work_dir: str
    name: str = ""
