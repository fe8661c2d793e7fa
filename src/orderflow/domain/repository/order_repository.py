"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from orderflow.domain.model.order import Order, OrderStatus
from orderflow.domain.repository.order_query import OrderFilter, Page


class OrderRepository(ABC):

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Unit of work: every call made inside commits together or not at all.

        Transactions nest; the outermost one decides the outcome.
        """

    @abstractmethod
    def last_id(self) -> int:
        """Return the highest order ID in use, or 0 when there are none."""

    @abstractmethod
    def add(self, order: Order) -> Order:
        """Persist a new order, assigning IDs to it and to its items."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def find_by_customer(self, customer_id: str) -> list[Order]:
        """Return a customer's orders, newest first."""

    @abstractmethod
    def find_with_filters(self, filters: OrderFilter) -> Page[Order]:
        """Return one page of the orders matching ``filters``."""

    @abstractmethod
    def update_status(
        self, order_id: int, status: OrderStatus, note: str | None = None
    ) -> Order:
        """Atomically change the status and append the history entry.

        Raises EntityNotFoundError if the order does not exist.
        """
