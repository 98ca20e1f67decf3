"""Unit tests for the page shape."""

import asyncio
import math

import pytest

from .pagination import Page, iterate_pages


def describe_Page():
    def describe_from_total_count():
        @pytest.mark.parametrize(
            "page,page_size,total_count",
            [(0, 10, 0), (0, 10, 5), (0, 10, 10), (0, 10, 11), (1, 10, 25), (2, 10, 25), (4, 3, 14)],
        )
        def it_computes_totals_and_next_page(page, page_size, total_count):
            result = Page.from_total_count(range(3), page, page_size, total_count)

            assert result.total_pages == math.ceil(total_count / page_size)
            assert result.has_next_page == ((page + 1) * page_size < total_count)
            assert result.has_previous_page == (page > 0)
            assert result.total_count == total_count

        def it_fills_total_pages_from_count():
            result = Page(items=(), page=0, page_size=10, has_next_page=True, total_count=25)
            assert result.total_pages == 3

        def it_rejects_next_page_flag_contradicting_count():
            with pytest.raises(ValueError):
                Page(items=(), page=0, page_size=10, has_next_page=True, total_count=0)

        def it_rejects_total_pages_contradicting_count():
            with pytest.raises(ValueError):
                Page(items=(), page=0, page_size=10, has_next_page=False, total_count=0, total_pages=7)

        def it_leaves_totals_unknown_for_zero_page_size():
            result = Page.from_total_count([], 0, 0, 10)
            assert result.total_pages is None
            assert result.has_next_page is False

    def describe_from_next_page_flag():
        def it_keeps_supplied_next_page_flag():
            result = Page.from_next_page_flag(["a", "b"], 3, has_next_page=True)

            assert result.has_next_page is True
            assert result.has_previous_page is True
            assert result.total_count is None
            assert result.total_pages is None
            assert result.page_size == 2

        def it_knows_total_pages_on_last_page():
            result = Page.from_next_page_flag(["a"], 2, has_next_page=False, page_size=100)
            assert result.total_pages == 3
            assert result.total_count is None

        def it_leaves_total_pages_unknown_for_empty_last_page():
            result = Page.from_next_page_flag([], 3, has_next_page=False, page_size=100)
            assert result.total_pages is None

        def it_accepts_total_pages_from_caller():
            result = Page.from_next_page_flag(["a"], 0, has_next_page=True, total_pages=7)
            assert result.total_pages == 7

    def describe_empty():
        def it_has_no_items_and_no_next_page():
            result = Page.empty()
            assert len(result) == 0
            assert result.has_next_page is False
            assert result.has_previous_page is False

        def it_keeps_page_index():
            assert Page.empty(page=2).has_previous_page is True

    def it_rejects_negative_page():
        with pytest.raises(ValueError):
            Page(items=(), page=-1, page_size=10, has_next_page=False)

    def it_is_immutable():
        page = Page.from_next_page_flag([1, 2], 0, has_next_page=False)
        with pytest.raises(AttributeError):
            page.page = 1
        assert isinstance(page.items, tuple)

    def it_iterates_items():
        assert list(Page.from_next_page_flag([1, 2, 3], 0, has_next_page=False)) == [1, 2, 3]


def describe_iterate_pages():
    def _collect(fetch, start_page=0):
        async def run():
            return [item async for item in iterate_pages(fetch, start_page)]

        return asyncio.run(run())

    def it_walks_pages_until_last():
        requested = []
        pages = {0: ([1, 2], True), 1: ([3, 4], True), 2: ([5], False)}

        async def fetch(index):
            requested.append(index)
            items, has_next = pages[index]
            return Page.from_next_page_flag(items, index, has_next_page=has_next)

        assert _collect(fetch) == [1, 2, 3, 4, 5]
        assert requested == [0, 1, 2]

    def it_stops_on_empty_page():
        requested = []

        async def fetch(index):
            requested.append(index)
            if index == 0:
                return Page.from_next_page_flag([1], 0, has_next_page=True)
            return Page.empty(index)

        assert _collect(fetch) == [1]
        assert requested == [0, 1]

    def it_starts_from_given_page():
        requested = []

        async def fetch(index):
            requested.append(index)
            return Page.from_next_page_flag(["x"], index, has_next_page=False)

        assert _collect(fetch, start_page=4) == ["x"]
        assert requested == [4]
