# path: feedback_portal/core/utils/pagination.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def parse_positive_int(v: Any, fallback: int) -> int:
    """Мусор/ноль/отрицательное -> fallback; дробное округляем вниз."""
    if v is None or isinstance(v, bool):
        return fallback
    try:
        n = float(str(v).strip())
    except ValueError:
        return fallback
    if n != n or n in (float("inf"), float("-inf")) or n <= 0:
        return fallback
    return max(1, int(n))


def build_page_params(*, page: Any = None, limit: Any = None) -> PageParams:
    size = min(parse_positive_int(limit, DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)
    return PageParams(page=parse_positive_int(page, 1), limit=size)


def page_count(total: int, limit: int) -> int:
    if limit <= 0:
        return 0
    return (total + limit - 1) // limit
