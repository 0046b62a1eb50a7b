import logging
import time
from typing import Any, Dict, Optional

import requests

from copisteria import config

logger = logging.getLogger(__name__)


class OrderNotifier:
    """Posts accepted orders to a staff webhook. No-op without a URL."""

    def __init__(self, webhook_url: Optional[str] = None, max_retries: Optional[int] = None, backoff: float = 0.5):
        self.webhook = config.ORDER_WEBHOOK_URL if webhook_url is None else webhook_url
        self.max_retries = max(1, config.ORDER_WEBHOOK_RETRIES if max_retries is None else max_retries)
        self.backoff = backoff
        logger.debug("OrderNotifier initialized with webhook=%s max_retries=%s", self.webhook, self.max_retries)

    @property
    def enabled(self) -> bool:
        return bool(self.webhook)

    def notify(self, payload: Dict[str, Any]) -> bool:
        if not self.enabled:
            return False

        headers = {"Content-Type": "application/json"}
        # lets the receiver drop duplicates when a retry follows a slow success
        if "id" in payload:
            headers["Idempotency-Key"] = f"order-{payload['id']}"

        for attempt in range(1, self.max_retries + 1):
            try:
                resp = requests.post(self.webhook, json=payload, timeout=5, headers=headers)
                resp.raise_for_status()
                logger.info("Notified order webhook status=%s order=%s", resp.status_code, payload.get("id"))
                return True
            except requests.RequestException as e:
                logger.warning("Attempt %s: failed to notify order webhook: %s", attempt, e)
            if attempt < self.max_retries:
                time.sleep(self.backoff * attempt)
        logger.error("Giving up notifying order %s after %s attempts", payload.get("id"), self.max_retries)
        return False


def get_notifier() -> OrderNotifier:
    return OrderNotifier()
