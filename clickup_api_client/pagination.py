"""Uniform page shape for list endpoints.

ClickUp paginates two ways: some endpoints report a total count, others only
say whether this is the last page. Both normalize into ``Page``. Unknown
totals are ``None``, never guessed.
"""

from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Generic, Iterable, TypeVar

T = TypeVar("T")


def _total_pages(total_count: int, page_size: int) -> int:
    return -(-total_count // page_size)


def _has_next_page(page: int, page_size: int, total_count: int) -> bool:
    return (page + 1) * page_size < total_count


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results (zero-based ``page`` index)."""

    items: tuple[T, ...]
    page: int
    page_size: int
    has_next_page: bool
    total_count: int | None = None
    total_pages: int | None = None

    def __post_init__(self):
        if self.page < 0:
            raise ValueError(f"page must be >= 0, got {self.page}")
        if self.page_size < 0:
            raise ValueError(f"page_size must be >= 0, got {self.page_size}")
        if self.total_count is not None and self.total_count < 0:
            raise ValueError(f"total_count must be >= 0, got {self.total_count}")
        if self.total_count is not None and self.page_size > 0:
            self._check_totals()
        object.__setattr__(self, "items", tuple(self.items))

    def _check_totals(self) -> None:
        total_pages = _total_pages(self.total_count, self.page_size)
        has_next_page = _has_next_page(self.page, self.page_size, self.total_count)
        if self.total_pages is None:
            object.__setattr__(self, "total_pages", total_pages)
        elif self.total_pages != total_pages:
            raise ValueError(
                f"total_pages={self.total_pages} contradicts total_count={self.total_count}, page_size={self.page_size}"
            )
        if self.has_next_page != has_next_page:
            raise ValueError(
                f"has_next_page={self.has_next_page} contradicts total_count={self.total_count} "
                f"at page {self.page} of size {self.page_size}"
            )

    @property
    def has_previous_page(self) -> bool:
        return self.page > 0

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @classmethod
    def from_total_count(cls, items: Iterable[T], page: int, page_size: int, total_count: int) -> "Page[T]":
        """Offset pagination: totals and next-page are computed from the count."""
        if page_size > 0:
            total_pages = _total_pages(total_count, page_size)
            has_next_page = _has_next_page(page, page_size, total_count)
        else:
            total_pages = None
            has_next_page = False
        return cls(
            items=tuple(items),
            page=page,
            page_size=page_size,
            has_next_page=has_next_page,
            total_count=total_count,
            total_pages=total_pages,
        )

    @classmethod
    def from_next_page_flag(
        cls,
        items: Iterable[T],
        page: int,
        has_next_page: bool,
        page_size: int | None = None,
        total_pages: int | None = None,
    ) -> "Page[T]":
        """Cursor or "last_page" pagination: the caller says whether more exist.

        ``page_size`` defaults to the number of items received. A non-empty
        last page means the total page count is ``page + 1``; an empty one
        says nothing about where the data ended.
        """
        items = tuple(items)
        if total_pages is None and not has_next_page and items:
            total_pages = page + 1
        return cls(
            items=items,
            page=page,
            page_size=len(items) if page_size is None else page_size,
            has_next_page=has_next_page,
            total_count=None,
            total_pages=total_pages,
        )

    @classmethod
    def empty(cls, page: int = 0, page_size: int = 0) -> "Page[T]":
        return cls(items=(), page=page, page_size=page_size, has_next_page=False)


async def iterate_pages(
    fetch_page: Callable[[int], Awaitable[Page[T]]],
    start_page: int = 0,
) -> AsyncIterator[T]:
    """Yield every item across pages until one is empty or reports no next page."""
    page_index = start_page
    while True:
        page = await fetch_page(page_index)
        if not page.items:
            return
        for item in page.items:
            yield item
        if not page.has_next_page:
            return
        page_index += 1
