"""\
Simple paginator for sequences of items.

"""

import collections.abc

import zope.interface

import kt.hal.interfaces


@zope.interface.implementer(kt.hal.interfaces.IPaginator)
class Paginator:
    """Split a sequence into pages of *page_size* items.

    The sequence is only sliced when a page is requested, so sequences
    that load their content lazily on slicing are supported.  A
    *page_size* of 0 places all items on a single page.

    An empty sequence has no pages, but page 1 can still be requested
    and produces no items.

    """

    def __init__(self, items, page_size: int = 10):
        if isinstance(page_size, bool) or not isinstance(page_size, int):
            raise kt.hal.interfaces.InvalidArgumentError(
                f'page size must be an integer; received {page_size!r}')
        if page_size < 0:
            raise kt.hal.interfaces.InvalidArgumentError(
                f'page size must not be negative; received {page_size}')
        if not isinstance(items, collections.abc.Sequence):
            items = tuple(items)
        self._items = items
        self.page_size = page_size

    @property
    def total_items(self) -> int:
        return len(self._items)

    @property
    def page_count(self) -> int:
        total = self.total_items
        if not total:
            return 0
        if not self.page_size:
            return 1
        return -(-total // self.page_size)

    def items(self, page: int):
        count = self.page_count
        if isinstance(page, bool) or not isinstance(page, int):
            raise kt.hal.interfaces.InvalidArgumentError(
                f'page must be an integer; received {page!r}')
        if page < 1 or page > max(count, 1):
            raise kt.hal.interfaces.PageOutOfRange(page, count)
        if not self.page_size:
            return list(self._items)
        start = (page - 1) * self.page_size
        return list(self._items[start:start + self.page_size])
