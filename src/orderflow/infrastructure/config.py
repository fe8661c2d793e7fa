"""Runtime settings, read from the environment.

    ORDERFLOW_DATA_DIR   directory holding the JSON data files
                         (default: <repo root>/data)
    ORDERFLOW_LOG_LEVEL  DEBUG, INFO, WARNING, ... (default: WARNING)
    ORDERFLOW_LOG_JSON   "1"/"true" to emit JSON log lines
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "WARNING"
    log_json: bool = False

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        data_dir = env.get("ORDERFLOW_DATA_DIR")
        return Settings(
            data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
            log_level=env.get("ORDERFLOW_LOG_LEVEL", "WARNING").upper(),
            log_json=env.get("ORDERFLOW_LOG_JSON", "").strip().lower() in _TRUTHY,
        )

    # --- Data files -----------------------------------------------------------

    @property
    def orders_file(self) -> Path:
        return self.data_dir / "orders.json"

    @property
    def catalog_file(self) -> Path:
        return self.data_dir / "catalog.json"

    @property
    def sellers_file(self) -> Path:
        return self.data_dir / "sellers.json"

    @property
    def inventory_file(self) -> Path:
        return self.data_dir / "inventory.json"

    @property
    def bundle_stock_file(self) -> Path:
        return self.data_dir / "bundle_stock.json"
