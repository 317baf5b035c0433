# app/features/press/service.py
"""
Reading-mode pagination.

The cover and the back page are shown alone; everything in between is read
as two-page spreads starting at index 1. Navigation works on the index of
the left-hand page:

    n = 6   cover(0) -> spread(1,2) -> spread(3,4) -> back(5)
    n = 5   cover(0) -> spread(1,2) -> spread(3,end) -> back(4)
    n = 2   cover(0) -> back(1)
"""
from __future__ import annotations

from typing import List

from app.features.press.schemas import SpreadLayout, SpreadView
from app.schemas import Page


def _check(n: int) -> None:
    if n < 1:
        raise ValueError("pagination needs at least one page")


def clamp_index(i: int, n: int) -> int:
    _check(n)
    return min(max(i, 0), n - 1)


def last_spread_start(n: int) -> int:
    """Left index of the final spread, i.e. where prev() from the back lands."""
    story_pages = n - 2
    start = n - 3 if story_pages % 2 == 0 else n - 2
    return max(1, start)


def next_index(i: int, n: int) -> int:
    i = clamp_index(i, n)
    if i == n - 1:
        return i
    if i == 0:
        return 1
    # never step past the back page, and never strand a lone trailing page
    return min(i + 2, n - 1)


def prev_index(i: int, n: int) -> int:
    i = clamp_index(i, n)
    if i == 0:
        return 0
    if i == n - 1:
        if n <= 2:
            return 0
        return last_spread_start(n)
    if i == 1:
        return 0
    return max(1, i - 2)


def spread_at(i: int, n: int) -> SpreadLayout:
    i = clamp_index(i, n)
    if i == 0:
        return SpreadLayout(kind="cover", index=0, left=0)
    if i == n - 1:
        return SpreadLayout(kind="back", index=i, left=i)
    right = i + 1 if i + 1 < n - 1 else None
    return SpreadLayout(kind="spread", index=i, left=i, right=right)


class PaginationController:
    def __init__(self, page_count: int = 1, index: int = 0):
        self.page_count = max(page_count, 1)
        self.index = clamp_index(index, self.page_count)

    @property
    def is_cover(self) -> bool:
        return self.index == 0

    @property
    def is_back(self) -> bool:
        return self.index == self.page_count - 1

    @property
    def is_spread(self) -> bool:
        return not self.is_cover and not self.is_back

    def resize(self, page_count: int) -> None:
        self.page_count = max(page_count, 1)
        self.index = clamp_index(self.index, self.page_count)

    def next(self) -> int:
        self.index = next_index(self.index, self.page_count)
        return self.index

    def prev(self) -> int:
        self.index = prev_index(self.index, self.page_count)
        return self.index

    def goto(self, index: int) -> int:
        self.index = clamp_index(index, self.page_count)
        return self.index

    def layout(self) -> SpreadLayout:
        return spread_at(self.index, self.page_count)

    def view(self, pages: List[Page]) -> SpreadView:
        if not pages:
            raise ValueError("the book has no pages to read")
        self.resize(len(pages))
        layout = self.layout()
        return SpreadView(
            layout=layout,
            page_count=len(pages),
            left=pages[layout.left],
            right=pages[layout.right] if layout.right is not None else None,
            right_placeholder=layout.kind == "spread" and layout.right is None,
            can_prev=not self.is_cover,
            can_next=not self.is_back,
        )
