"""Offset pagination rules for the record table."""
from __future__ import annotations

from dataclasses import dataclass

PAGE_SIZES = (20, 50, 100, 200)
DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True)
class PageWindow:
    skip: int
    take: int
    total: int

    @property
    def has_previous(self) -> bool:
        return self.skip > 0

    @property
    def has_next(self) -> bool:
        return self.skip + self.take < self.total

    def previous_skip(self) -> int:
        return max(0, self.skip - self.take)

    def next_skip(self) -> int:
        return self.skip + self.take

    @property
    def first_row(self) -> int:
        return 0 if self.total == 0 else self.skip + 1

    @property
    def last_row(self) -> int:
        return min(self.skip + self.take, self.total)

    def label(self) -> str:
        return f"Showing {self.first_row}-{self.last_row} of {self.total}"


def validate_window(skip: int, take: int) -> None:
    if skip < 0:
        raise ValueError(f"skip must be >= 0, got {skip}")
    if take <= 0:
        raise ValueError(f"take must be > 0, got {take}")


__all__ = ["DEFAULT_PAGE_SIZE", "PAGE_SIZES", "PageWindow", "validate_window"]
