from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE

T = TypeVar("T")


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


@dataclass(frozen=True)
class PageRequest:
    """1-based page number and page size."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "PageRequest":
        return cls(
            page=_positive_int(args.get("page"), DEFAULT_PAGE),
            limit=_positive_int(args.get("limit"), DEFAULT_PAGE_SIZE),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    page: int
    limit: int

    @classmethod
    def empty(cls, request: PageRequest) -> "Page[T]":
        return cls(items=[], total=0, page=request.page, limit=request.limit)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self, serialize: Callable[[T], dict]) -> dict:
        return {
            "items": [serialize(item) for item in self.items],
            "total": self.total,
            "page": self.page,
            "totalPages": self.total_pages,
        }
