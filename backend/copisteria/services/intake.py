import logging
from typing import Any, Dict, Optional

from copisteria.db.store import OrderStore
from copisteria.models.options import OrderOptions
from copisteria.models.order import CustomerInfo, Order, StoredFile
from copisteria.services.pricing import calculate_price

logger = logging.getLogger(__name__)


def submit_order(
    store: OrderStore,
    options: OrderOptions,
    customer: CustomerInfo,
    file: Optional[StoredFile] = None,
) -> Order:
    """Price ``options``, stamp the total on a new order and persist it."""
    total = calculate_price(options)
    order = Order.build(options, customer, total, file)
    store.append(order)
    logger.info("Order received id=%s total=%.2f file=%s", order.id, total, file.filename if file else None)
    return order


def notification_payload(order: Order) -> Dict[str, Any]:
    return {
        "id": order.id,
        "total": order.total,
        "email": order.customer_email,
        "delivery": order.delivery,
        "status": order.status,
    }
