"""
Reusable in-memory pager for ordered id lists.
"""
from typing import Iterator, List, Sequence

from firerepo.errors import InvalidArgumentError


class Pager:
    """
    Pages through a fixed sequence of ints in chunks of page_size.

    The pager keeps a cursor (current_page) that only moves forward on
    next() and returns to 0 on reset(). Once the source is exhausted next()
    keeps returning an empty list. Not safe to drive from several threads.
    """

    def __init__(self, items: Sequence[int], page_size: int):
        """
        Args:
            items: Source sequence, never modified by the pager
            page_size: Number of items per page (>= 1)

        Raises:
            InvalidArgumentError: If items is None or page_size is not positive
        """
        if items is None:
            raise InvalidArgumentError("empty list")
        if page_size < 1:
            raise InvalidArgumentError("page size must be a positive number")

        self._items = items
        self._page_size = page_size
        self._page = 0

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def current_page(self) -> int:
        return self._page

    @property
    def total_pages(self) -> int:
        """Number of non-empty pages next() produces in one traversal."""
        if not self._items:
            return 0
        return (len(self._items) + self._page_size - 1) // self._page_size

    def get_page_size(self) -> int:
        return self._page_size

    def get_current_page(self) -> int:
        return self._page

    def reset(self) -> None:
        """Move the cursor back to the first page."""
        self._page = 0

    def next(self) -> List[int]:
        """
        Return the next page.

        Returns:
            List of at most page_size items, empty once the source is exhausted
        """
        start = self._page * self._page_size
        stop = start + self._page_size
        self._page += 1

        # Whole source fits on the first page
        if self._page == 1 and self._page_size >= len(self._items):
            return list(self._items)

        if start >= len(self._items):
            return []

        if stop > len(self._items):
            stop = len(self._items)

        return list(self._items[start:stop])

    def pages(self) -> Iterator[List[int]]:
        """Reset the cursor and yield every non-empty page in order."""
        self.reset()
        while True:
            page = self.next()
            if not page:
                return
            yield page
