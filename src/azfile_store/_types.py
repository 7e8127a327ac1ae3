"""Type aliases used throughout azfile_store."""

from __future__ import annotations

from collections.abc import Callable
from typing import BinaryIO

WritableContent = BinaryIO | bytes
IoCallback = Callable[[int], None]
