import pytest

from logic.pagination import DEFAULT_PAGE_SIZE, PAGE_SIZES, PageWindow, validate_window


def test_default_page_size_is_offered():
    assert DEFAULT_PAGE_SIZE in PAGE_SIZES


@pytest.mark.parametrize(
    "skip, take, total, has_previous, has_next",
    [
        (0, 50, 0, False, False),
        (0, 50, 50, False, False),
        (0, 50, 51, False, True),
        (50, 50, 51, True, False),
        (50, 50, 50, True, False),
        (20, 20, 100, True, True),
    ],
)
def test_navigation_flags(skip, take, total, has_previous, has_next):
    window = PageWindow(skip, take, total)
    assert window.has_previous is has_previous
    assert window.has_next is has_next


def test_previous_skip_never_negative():
    assert PageWindow(10, 50, 100).previous_skip() == 0
    assert PageWindow(100, 50, 200).previous_skip() == 50


def test_next_skip_advances_by_take():
    assert PageWindow(0, 20, 100).next_skip() == 20


def test_label():
    assert PageWindow(0, 50, 0).label() == "Showing 0-0 of 0"
    assert PageWindow(50, 50, 73).label() == "Showing 51-73 of 73"


@pytest.mark.parametrize("skip, take", [(-1, 50), (0, 0), (0, -5)])
def test_validate_window_rejects_bad_values(skip, take):
    with pytest.raises(ValueError):
        validate_window(skip, take)
