from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from fastapi import HTTPException, Query, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Query as OrmQuery

from app.config import get_settings
from app.schemas import ListMeta

SORT_DIRECTIONS = ("ASC", "DESC")


@dataclass(frozen=True)
class ListParams:
    page: int
    per_page: int
    order_by: Optional[str]
    order_direction: Optional[str]
    filter: str


def list_params(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    order_by: Optional[str] = Query(None),
    order_direction: Optional[str] = Query(None),
    filter: str = Query(""),
) -> ListParams:
    """Common query parameters accepted by every list endpoint."""

    settings = get_settings()
    if per_page is None:
        per_page = settings.default_per_page
    if per_page > settings.max_per_page:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"per_page may not be greater than {settings.max_per_page}.",
        )

    direction = None
    if order_direction:
        direction = order_direction.strip().upper()
        if direction not in SORT_DIRECTIONS:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="order_direction must be ASC or DESC.",
            )

    return ListParams(
        page=page,
        per_page=per_page,
        order_by=order_by.strip() if order_by else None,
        order_direction=direction,
        filter=filter,
    )


def paginate(
    query: OrmQuery,
    params: ListParams,
    *,
    sortable: Mapping[str, Any],
    default_sort: str,
    searchable: Sequence[Any] = (),
    default_direction: str = "ASC",
    tiebreaker: Any = None,
) -> tuple[list[Any], ListMeta]:
    """Apply free-text filter, sort and page window to ``query``.

    ``sortable`` maps public sort keys to columns; any other ``order_by`` is
    rejected with a 422 so callers cannot sort on arbitrary columns.
    """

    sort_by = params.order_by or default_sort
    column = sortable.get(sort_by)
    if column is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Cannot sort by '{sort_by}'. Allowed values: {', '.join(sorted(sortable))}.",
        )
    sort_order = params.order_direction or default_direction

    term = params.filter.strip().lower()
    if term and searchable:
        query = query.filter(
            or_(*(func.lower(field).contains(term, autoescape=True) for field in searchable))
        )

    total = query.count()

    ordering = [column.desc() if sort_order == "DESC" else column.asc()]
    if tiebreaker is not None:
        ordering.append(tiebreaker.asc())

    offset = (params.page - 1) * params.per_page
    items = query.order_by(*ordering).offset(offset).limit(params.per_page).all()

    meta = ListMeta(
        total=total,
        count=len(items),
        per_page=params.per_page,
        current_page=params.page,
        total_pages=max(1, math.ceil(total / params.per_page)),
        filter=params.filter,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return items, meta
