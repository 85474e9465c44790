"""
File-backed stores: orders in a JSON document, requirements in YAML.
"""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from ordersession.core.models import Order, Requirements
from ordersession.observability.logger import get_logger

logger = get_logger(__name__)


class JsonFileOrderStore:
    """
    OrderStore persisting orders keyed by order_id in one JSON file.

    File format: {"orders": {"<order_id>": {...order...}}}. Writes go to a
    temporary file that replaces the original.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid order store JSON: {self.path}") from e

        orders = raw.get("orders", {})
        if not isinstance(orders, dict):
            raise ValueError(f"'orders' must be a mapping of order id to order: {self.path}")
        return orders

    def _write(self, orders: dict[str, dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(f"{self.path.suffix}.tmp")
        temp_path.write_text(
            json.dumps({"orders": orders}, sort_keys=True, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        temp_path.replace(self.path)

    def find(self, order_id: str) -> Order | None:
        data = self._read().get(order_id)
        if data is None:
            return None
        return Order.model_validate(data)

    def update(self, order: Order) -> bool:
        orders = self._read()
        if order.order_id not in orders:
            logger.warning("Update for unknown order", extra={"order_id": order.order_id})
            return False

        orders[order.order_id] = order.model_dump(mode="json")
        try:
            self._write(orders)
        except OSError as e:
            logger.error(f"Failed to write order store: {e}", extra={"order_id": order.order_id})
            return False
        return True

    def add(self, order: Order) -> None:
        orders = self._read()
        orders[order.order_id] = order.model_dump(mode="json")
        self._write(orders)


class YamlRequirementsProvider:
    """
    RequirementsProvider reading a YAML list of requirement sets.

    Expected format:
    ```yaml
    requirements:
      - invitation_id: INV-2001
        components:
          - name: education
            min: 1
            max: 3
    ```
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        if not self.path.exists():
            raise FileNotFoundError(f"Requirements file not found: {path}")

    def find_requirements(self, invitation_id: str) -> Requirements | None:
        with open(self.path) as f:
            config = yaml.safe_load(f) or {}

        for entry in config.get("requirements", []):
            if entry.get("invitation_id") != invitation_id:
                continue
            try:
                return Requirements(**entry)
            except ValidationError as e:
                raise ValueError(f"Invalid requirements for invitation '{invitation_id}': {e}") from e
        return None
