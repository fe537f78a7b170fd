# services/pagination.py
from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Any, Iterable, Optional

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0
PAGE_LIMIT_MAX = int(os.getenv("PAGE_LIMIT_MAX", "100"))


@dataclass(frozen=True)
class Page:
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET


@dataclass(frozen=True)
class Filter:
    """Exact-match predicate on a single column."""
    column: str
    value: Any


def _to_int(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        return None


def parse_page(limit: Any = None, offset: Any = None, max_limit: int = PAGE_LIMIT_MAX) -> Page:
    """
    Normalize raw query values. Missing, non-numeric or non-positive limits
    fall back to 10; missing, non-numeric or negative offsets fall back to 0.
    Limits above `max_limit` are clamped.
    """
    lim = _to_int(limit)
    if not lim or lim < 0:
        lim = DEFAULT_LIMIT
    lim = min(lim, max_limit)

    off = _to_int(offset)
    if off is None or off < 0:
        off = DEFAULT_OFFSET
    return Page(limit=lim, offset=off)


def by_fk(column: str, value: Any) -> Filter:
    return Filter(column, _to_int(value))


def by_enum(column: str, value: Any, allowed: Iterable[str]) -> Filter:
    allowed = tuple(allowed)
    if value not in allowed:
        raise ValueError(f"Invalid {column}: {value!r} (expected one of {', '.join(allowed)})")
    return Filter(column, value)


def apply(query, model, flt: Optional[Filter], page: Optional[Page]):
    """Filter, order newest first and bound a query."""
    if flt is not None:
        query = query.filter(getattr(model, flt.column) == flt.value)
    page = page or Page()
    return (
        query.order_by(model.created_at.desc(), model.id.desc())
        .limit(max(0, min(page.limit, PAGE_LIMIT_MAX)))
        .offset(max(0, page.offset))
    )
