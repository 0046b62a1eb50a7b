import json
import logging
import os
import threading
from typing import Any, Dict, List

from copisteria.models.order import Order

logger = logging.getLogger(__name__)


class JsonFileOrderStore:
    """All orders kept as one JSON array on local disk.

    Each append reads the whole file and rewrites it, so appends are
    serialized with a lock. Only safe within a single process.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()
        self._ensure_file()

    def _ensure_file(self) -> None:
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        if not os.path.exists(self.path):
            with open(self.path, "w", encoding="utf-8") as f:
                f.write("[]")

    def _read(self) -> List[Dict[str, Any]]:
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)

    def append(self, order: Order) -> str:
        record = order.to_public()
        with self._lock:
            orders = self._read()
            orders.append(record)
            tmp_path = self.path + ".tmp"
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(orders, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        logger.debug("Stored order id=%s in %s (%d total)", order.id, self.path, len(orders))
        return order.id

    def list_orders(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self._read()
