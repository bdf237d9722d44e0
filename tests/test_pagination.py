from __future__ import annotations

import pytest

from storefront_sdk.pagination import ELLIPSIS, PaginationState, goto_page, next_page, paginate, prev_page


@pytest.mark.parametrize(
    ("current", "total", "window", "buttons"),
    [
        (1, 0, 5, []),
        (1, 1, 5, []),
        (1, 2, 5, [1, 2]),
        (1, 5, 5, [1, 2, 3, 4, 5]),
        (1, 20, 5, [1, 2, 3, 4, 5, ELLIPSIS, 20]),
        (3, 20, 5, [1, 2, 3, 4, 5, ELLIPSIS, 20]),
        (4, 20, 5, [1, 2, 3, 4, 5, 6, ELLIPSIS, 20]),
        (7, 20, 5, [1, ELLIPSIS, 5, 6, 7, 8, 9, ELLIPSIS, 20]),
        (18, 20, 5, [1, ELLIPSIS, 16, 17, 18, 19, 20]),
        (20, 20, 5, [1, ELLIPSIS, 16, 17, 18, 19, 20]),
        (10, 20, 1, [1, ELLIPSIS, 10, ELLIPSIS, 20]),
        (2, 20, 3, [1, 2, 3, ELLIPSIS, 20]),
    ],
)
def test_paginate_buttons(current: int, total: int, window: int, buttons: list) -> None:
    assert paginate(current, total, window).buttons == buttons


def test_paginate_window_flags() -> None:
    window = paginate(7, 20, 5)
    assert window.pages == (5, 6, 7, 8, 9)
    assert window.show_first and window.leading_ellipsis
    assert window.show_last and window.trailing_ellipsis
    assert not window.prev_disabled
    assert not window.next_disabled


def test_paginate_edges_disable_navigation() -> None:
    assert paginate(1, 20).prev_disabled is True
    assert paginate(20, 20).next_disabled is True
    single = paginate(1, 1)
    assert single.prev_disabled and single.next_disabled


@pytest.mark.parametrize(
    ("current", "total", "window"),
    [(0, 10, 5), (1, -1, 5), (1, 10, 4), (1, 10, 0)],
)
def test_paginate_rejects_invalid_arguments(current: int, total: int, window: int) -> None:
    with pytest.raises(ValueError):
        paginate(current, total, window)


def test_pagination_state_moves_within_bounds() -> None:
    state = PaginationState(page=1, page_size=10, total_pages=3)

    next_page(state)
    next_page(state)
    next_page(state)
    assert state.page == 3

    prev_page(state)
    assert state.page == 2

    goto_page(state, 99)
    assert state.page == 3
    goto_page(state, -4)
    assert state.page == 1
    assert state.window().buttons == [1, 2, 3]


def test_next_page_respects_has_next_without_total() -> None:
    state = PaginationState()
    next_page(state, has_next=True)
    next_page(state, has_next=False)
    assert state.page == 2
