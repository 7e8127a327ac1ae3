"""Lazy, page-driven iteration over listing results."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from azfile_store._models import Object


@dataclasses.dataclass
class ObjectPage:
    """One page of listing results plus the cursor that produced it.

    :param status: Cursor owned by the iterator and handed to every page fetch.
    :param data: Objects fetched for the current page.
    """

    status: Any
    data: list[Object] = dataclasses.field(default_factory=list)


class ObjectIterator:
    """Iterate objects one at a time, fetching a page only when the previous one is drained.

    *next_page* fills ``page.data`` and returns ``True`` when the listing is
    complete. Objects of the final page are still yielded before
    ``StopIteration``. If *next_page* raises, the error propagates from
    ``__next__`` and the iterator is finished, like a generator that raised.

    Not safe for concurrent use.

    :param next_page: Page fetch strategy.
    :param status: Initial cursor for *next_page*.
    """

    def __init__(self, next_page: Callable[[ObjectPage], bool], status: Any) -> None:
        self._next_page = next_page
        self._page = ObjectPage(status=status)
        self._index = 0
        self._done = False

    @property
    def status(self) -> Any:
        """The cursor of this listing."""
        return self._page.status

    def __iter__(self) -> ObjectIterator:
        return self

    def __next__(self) -> Object:
        while self._index >= len(self._page.data):
            if self._done:
                raise StopIteration
            self._page.data = []
            self._index = 0
            try:
                self._done = self._next_page(self._page)
            except BaseException:
                self._page.data = []
                self._done = True
                raise
        obj = self._page.data[self._index]
        self._index += 1
        return obj

    def __repr__(self) -> str:
        return f"ObjectIterator(status={self._page.status!r}, done={self._done})"
