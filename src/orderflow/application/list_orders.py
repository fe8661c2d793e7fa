"""Application services: order listing queries."""

from __future__ import annotations

from orderflow.application.dto import OrderDTO, PageDTO, to_order_dto, to_page_dto
from orderflow.domain.repository.order_query import OrderFilter
from orderflow.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:
    """Filtered, sorted and paginated listing across all customers."""

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, filters: OrderFilter | None = None) -> PageDTO:
        page = self._order_repo.find_with_filters(filters or OrderFilter())
        return to_page_dto(page)


class CustomerOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, customer_id: str) -> list[OrderDTO]:
        return [to_order_dto(o) for o in self._order_repo.find_by_customer(customer_id)]
