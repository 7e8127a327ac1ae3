"""Stream adapters for progress reporting and fixed-size uploads."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, BinaryIO

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from azfile_store._types import IoCallback, WritableContent


class CallbackReader(io.RawIOBase):
    """Reader that reports the length of every successful read to *callback*.

    :param raw: The wrapped binary stream.
    :param callback: Called with the number of bytes returned by each read.
    """

    def __init__(self, raw: BinaryIO, callback: IoCallback) -> None:
        self._raw = raw
        self._callback = callback

    def readable(self) -> bool:
        return True

    def readinto(self, b: bytearray | memoryview) -> int:  # type: ignore[override]
        data = self._raw.read(len(b))
        n = len(data)
        b[:n] = data
        if n:
            self._callback(n)
        return n


class SizedReader(io.RawIOBase):
    """Reader exposing exactly *size* bytes of *raw*, starting at its current position.

    Reports its length through ``len()`` so HTTP transports can send a fixed
    ``Content-Length``. Seeking is supported when the wrapped stream is seekable.
    Closing the adapter leaves *raw* open.

    :param raw: The wrapped binary stream.
    :param size: Number of bytes to expose.
    """

    def __init__(self, raw: BinaryIO, size: int) -> None:
        self._raw = raw
        self._size = size
        self._pos = 0
        self._start = raw.tell() if _seekable(raw) else None

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return self._start is not None

    def readinto(self, b: bytearray | memoryview) -> int:  # type: ignore[override]
        remaining = self._size - self._pos
        if remaining <= 0:
            return 0
        data = self._raw.read(min(len(b), remaining))
        n = len(data)
        b[:n] = data
        self._pos += n
        return n

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if self._start is None:
            raise io.UnsupportedOperation("seek")
        if whence == io.SEEK_SET:
            target = offset
        elif whence == io.SEEK_CUR:
            target = self._pos + offset
        elif whence == io.SEEK_END:
            target = self._size + offset
        else:
            raise ValueError(f"Invalid whence: {whence}")
        target = max(0, min(target, self._size))
        self._raw.seek(self._start + target)
        self._pos = target
        return target

    def tell(self) -> int:
        return self._pos

    def __len__(self) -> int:
        return self._size


def _seekable(raw: BinaryIO) -> bool:
    try:
        return bool(raw.seekable())
    except (AttributeError, OSError):
        return False


def as_stream(content: WritableContent) -> BinaryIO:
    """Return *content* as a binary stream."""
    if isinstance(content, (bytes, bytearray, memoryview)):
        return io.BytesIO(content)
    return content


def iter_chunks(chunks: Iterable[bytes], callback: IoCallback | None = None) -> Iterator[bytes]:
    """Yield *chunks*, reporting each chunk length to *callback* when given."""
    for chunk in chunks:
        if callback is not None and chunk:
            callback(len(chunk))
        yield chunk
