from __future__ import annotations

from dataclasses import dataclass
from typing import Union

ELLIPSIS = "…"
DEFAULT_WINDOW_SIZE = 5

PageButton = Union[int, str]


@dataclass(frozen=True)
class PageWindow:
    current_page: int
    total_pages: int
    pages: tuple[int, ...]
    show_first: bool
    leading_ellipsis: bool
    trailing_ellipsis: bool
    show_last: bool
    prev_disabled: bool
    next_disabled: bool

    @property
    def buttons(self) -> list[PageButton]:
        """Page numbers in display order with ``ELLIPSIS`` markers."""
        items: list[PageButton] = []
        if self.show_first:
            items.append(1)
        if self.leading_ellipsis:
            items.append(ELLIPSIS)
        items.extend(self.pages)
        if self.trailing_ellipsis:
            items.append(ELLIPSIS)
        if self.show_last:
            items.append(self.total_pages)
        return items


def paginate(current_page: int, total_pages: int, window_size: int = DEFAULT_WINDOW_SIZE) -> PageWindow:
    """Compute the page buttons to display around ``current_page``.

    A listing with zero or one page shows no page buttons at all. The window
    is centred on the current page and slides left when it reaches the last
    page; the first and last pages are always reachable, with an ellipsis
    wherever pages are skipped.
    """
    if current_page < 1:
        raise ValueError(f"current_page must be >= 1, got {current_page}")
    if total_pages < 0:
        raise ValueError(f"total_pages must be >= 0, got {total_pages}")
    if window_size < 1 or window_size % 2 == 0:
        raise ValueError(f"window_size must be an odd number >= 1, got {window_size}")

    prev_disabled = current_page <= 1
    next_disabled = current_page >= total_pages
    if total_pages <= 1:
        return PageWindow(
            current_page=current_page,
            total_pages=total_pages,
            pages=(),
            show_first=False,
            leading_ellipsis=False,
            trailing_ellipsis=False,
            show_last=False,
            prev_disabled=prev_disabled,
            next_disabled=next_disabled,
        )

    start = max(1, current_page - window_size // 2)
    end = min(total_pages, start + window_size - 1)
    if end - start + 1 < window_size:
        start = max(1, end - window_size + 1)

    return PageWindow(
        current_page=current_page,
        total_pages=total_pages,
        pages=tuple(range(start, end + 1)),
        show_first=start > 1,
        leading_ellipsis=start > 2,
        trailing_ellipsis=end < total_pages - 1,
        show_last=end < total_pages,
        prev_disabled=prev_disabled,
        next_disabled=next_disabled,
    )


@dataclass
class PaginationState:
    page: int = 1
    page_size: int = 10
    total_pages: int | None = None

    def window(self, window_size: int = DEFAULT_WINDOW_SIZE) -> PageWindow:
        return paginate(self.page, self.total_pages or 0, window_size)


def next_page(state: PaginationState, has_next: bool | None = None) -> PaginationState:
    if has_next is False:
        return state
    if state.total_pages is not None and state.page >= state.total_pages:
        return state
    state.page += 1
    return state


def prev_page(state: PaginationState) -> PaginationState:
    state.page = max(1, state.page - 1)
    return state


def goto_page(state: PaginationState, page: int) -> PaginationState:
    upper = state.total_pages if state.total_pages else None
    state.page = max(1, min(page, upper) if upper else page)
    return state
