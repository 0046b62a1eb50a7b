import logging
import os
from functools import lru_cache
from typing import Any, Dict, List, Protocol

from sqlmodel import SQLModel, select

from copisteria import config
from copisteria.db.session import get_engine, get_session
from copisteria.models.order import Order

logger = logging.getLogger(__name__)


class OrderStore(Protocol):
    """Where submitted orders go. Implementations must serialize their own writes."""

    def append(self, order: Order) -> str:
        ...

    def list_orders(self) -> List[Dict[str, Any]]:
        ...


class SQLOrderStore:
    """Orders persisted as rows of the ``orders`` table."""

    def __init__(self, url: str = config.DATABASE_URL):
        self.url = url

    def create_tables(self) -> None:
        if self.url.startswith("sqlite:///"):
            db_dir = os.path.dirname(os.path.abspath(self.url[len("sqlite:///"):]))
            os.makedirs(db_dir, exist_ok=True)
        SQLModel.metadata.create_all(get_engine(self.url))

    def append(self, order: Order) -> str:
        session = get_session(self.url)
        try:
            session.add(order)
            session.commit()
            session.refresh(order)
            logger.debug("Stored order id=%s in %s", order.id, self.url)
            return order.id
        finally:
            session.close()

    def list_orders(self) -> List[Dict[str, Any]]:
        session = get_session(self.url)
        try:
            rows = session.exec(select(Order).order_by(Order.created_at, Order.id)).all()
            return [o.to_public() for o in rows]
        finally:
            session.close()


@lru_cache(maxsize=None)
def get_order_store() -> OrderStore:
    """FastAPI dependency returning the configured store (one per process)."""
    if config.ORDER_STORE == "json":
        from copisteria.db.json_store import JsonFileOrderStore

        store = JsonFileOrderStore(config.ORDERS_FILE)
    elif config.ORDER_STORE == "sql":
        store = SQLOrderStore(config.DATABASE_URL)
    else:
        raise ValueError(f"Unknown ORDER_STORE: {config.ORDER_STORE!r}")
    logger.info("Using %s order store", type(store).__name__)
    return store
