"""Query objects for listing orders: filters, sorting and pagination.

Kept in the domain layer so every OrderRepository implementation applies
exactly the same matching and paging rules.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Generic, TypeVar

from orderflow.domain.exceptions import InvalidRequestError
from orderflow.domain.model.order import Order, OrderStatus

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

T = TypeVar("T")


class SortField(Enum):
    PLACED_AT = "placed_at"
    UPDATED_AT = "updated_at"
    TOTAL = "total"
    EXTERNAL_REF = "external_ref"
    ID = "id"


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class OrderFilter:
    """Criteria for ``OrderRepository.find_with_filters``.

    Without ``sort_by`` orders come newest first.  With ``sort_by`` the
    direction defaults to ascending.
    """

    status: OrderStatus | None = None
    customer_id: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    search: str | None = None
    sort_by: SortField | None = None
    sort_order: SortOrder | None = None
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        # Naive datetimes are taken as UTC, like every stored timestamp.
        for name in ("start_date", "end_date"):
            value = getattr(self, name)
            if value is not None and value.tzinfo is None:
                object.__setattr__(self, name, value.replace(tzinfo=timezone.utc))
        if self.page < 1:
            raise InvalidRequestError("Page must be 1 or greater")
        if not 1 <= self.limit <= MAX_PAGE_SIZE:
            raise InvalidRequestError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise InvalidRequestError("Start date must not be after end date")
        if (
            self.min_amount is not None
            and self.max_amount is not None
            and self.min_amount > self.max_amount
        ):
            raise InvalidRequestError("Minimum amount must not exceed maximum amount")

    # --- Matching -------------------------------------------------------------

    def matches(self, order: Order) -> bool:
        if self.status is not None and order.status != self.status:
            return False
        if self.customer_id is not None and order.customer_id != self.customer_id:
            return False
        if self.start_date is not None and order.placed_at < self.start_date:
            return False
        if self.end_date is not None and order.placed_at > self.end_date:
            return False
        total = order.total.amount
        if self.min_amount is not None and total < self.min_amount:
            return False
        if self.max_amount is not None and total > self.max_amount:
            return False
        if self.search and self.search.strip().lower() not in order.external_ref.lower():
            return False
        return True

    def apply(self, orders: Sequence[Order]) -> Page[Order]:
        """Filter, sort and paginate an in-memory collection."""
        matched = [order for order in orders if self.matches(order)]
        field = self.sort_by or SortField.PLACED_AT
        if self.sort_order is not None:
            descending = self.sort_order == SortOrder.DESC
        else:
            descending = self.sort_by is None
        matched.sort(key=lambda order: _sort_key(order, field), reverse=descending)
        return Page.slice(matched, self.page, self.limit)


def _sort_key(order: Order, field: SortField):
    if field == SortField.TOTAL:
        return (order.total.amount, order.id or 0)
    if field == SortField.UPDATED_AT:
        return (order.updated_at, order.id or 0)
    if field == SortField.EXTERNAL_REF:
        return (order.external_ref, order.id or 0)
    if field == SortField.ID:
        return (order.id or 0,)
    return (order.placed_at, order.id or 0)


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    limit: int
    total_items: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @staticmethod
    def slice(items: Sequence[T], page: int, limit: int) -> Page[T]:
        start = (page - 1) * limit
        return Page(
            items=list(items[start:start + limit]),
            page=page,
            limit=limit,
            total_items=len(items),
        )
