"""
Query options shared by every list and read endpoint.

Options come from the query string::

    ?limit=10&skip=0            page window (or ``page=2`` instead of ``skip``)
    ?sort=-updatedAt,name       ``-`` prefix sorts descending
    ?select=name,phone          fields to return; the id is always returned
    ?q=bedford                  free-text search on searchable fields
    ?filter[type]=Agency        equality filter, repeatable per field
"""

import math
import re
from typing import Dict, List, Optional, Tuple

from fastapi import Query, Request

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_SORT = "-updatedAt"

_FILTER_PATTERN = re.compile(r"^filter\[(?P<field>[A-Za-z_][A-Za-z0-9_]*)\]$")


def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [v.strip() for v in value.split(",") if v.strip()]


class QueryOptions:
    def __init__(
        self,
        limit: int = DEFAULT_LIMIT,
        skip: int = 0,
        page: Optional[int] = None,
        sort: Optional[str] = None,
        select: Optional[str] = None,
        q: Optional[str] = None,
        filters: Optional[Dict[str, str]] = None,
    ):
        self.limit = limit
        self.skip = (page - 1) * limit if page else skip
        self.sort = _split(sort or DEFAULT_SORT)
        self.select = _split(select)
        self.q = q.strip() if q and q.strip() else None
        self.filters = dict(filters or {})

    @property
    def page(self) -> int:
        return self.skip // self.limit + 1

    def pages(self, total: int) -> int:
        return math.ceil(total / self.limit) if total else 0

    def sort_fields(self) -> List[Tuple[str, bool]]:
        """(field, descending) pairs in request order."""
        return [(s[1:], True) if s.startswith("-") else (s.lstrip("+"), False) for s in self.sort]

    def with_filters(self, **filters: str) -> "QueryOptions":
        self.filters.update(filters)
        return self


def get_query_options(
    request: Request,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    skip: int = Query(0, ge=0),
    page: Optional[int] = Query(None, ge=1),
    sort: Optional[str] = None,
    select: Optional[str] = None,
    q: Optional[str] = None,
) -> QueryOptions:
    filters = {}
    for key, value in request.query_params.multi_items():
        match = _FILTER_PATTERN.match(key)
        if match:
            filters[match.group("field")] = value
    return QueryOptions(limit=limit, skip=skip, page=page, sort=sort, select=select, q=q, filters=filters)
