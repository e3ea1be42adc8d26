# path: feedback_portal/core/utils/__init__.py
from __future__ import annotations

from .pagination import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    PageParams,
    build_page_params,
    page_count,
    parse_positive_int,
)

__all__ = (
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "PageParams",
    "build_page_params",
    "page_count",
    "parse_positive_int",
)
