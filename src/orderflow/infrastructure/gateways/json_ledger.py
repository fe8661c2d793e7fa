"""A StockLedger persisted in a JSON document.

Both stock gateways keep their levels and reservations this way; each
``edit()`` block loads the ledger, lets the caller mutate it and writes
it back only if the block completes.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from orderflow.domain.model.inventory import (
    Reservation,
    ReservationStatus,
    StockLedger,
    StockLevel,
)
from orderflow.infrastructure.persistence.json_document import JsonDocument


def _empty() -> dict:
    return {"stock": [], "reservations": []}


class JsonLedgerStore:

    def __init__(self, file_path: Path) -> None:
        self._document = JsonDocument(file_path, _empty)

    def load(self) -> StockLedger:
        return self._to_domain(self._document.read())

    @contextmanager
    def edit(self) -> Iterator[StockLedger]:
        with self._document.transaction() as data:
            ledger = self._to_domain(data)
            yield ledger
            data.update(self._to_raw(ledger))

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _to_domain(raw: dict) -> StockLedger:
        return StockLedger(
            levels=[
                StockLevel(
                    item_id=s["item_id"],
                    on_hand=s["on_hand"],
                    reserved=s.get("reserved", 0),
                    location_id=s.get("location_id"),
                )
                for s in raw["stock"]
            ],
            reservations=[
                Reservation(
                    order_id=r["order_id"],
                    item_id=r["item_id"],
                    quantity=r["quantity"],
                    location_id=r.get("location_id"),
                    status=ReservationStatus(r["status"]),
                )
                for r in raw["reservations"]
            ],
        )

    @staticmethod
    def _to_raw(ledger: StockLedger) -> dict:
        return {
            "stock": [
                {
                    "item_id": lvl.item_id,
                    "location_id": lvl.location_id,
                    "on_hand": lvl.on_hand,
                    "reserved": lvl.reserved,
                }
                for lvl in ledger.levels
            ],
            "reservations": [
                {
                    "order_id": res.order_id,
                    "item_id": res.item_id,
                    "location_id": res.location_id,
                    "quantity": res.quantity,
                    "status": res.status.value,
                }
                for res in ledger.reservations
            ],
        }
