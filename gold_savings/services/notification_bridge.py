"""
Notification bridge: turns push events into price re-polls.

Events are {title, body} mappings. Any event whose title
contains "Price Update" fires the callback. Delivery is at
most once and may repeat or arrive out of order; re-polling
prices is idempotent, so neither matters.
"""

import logging
from typing import Any, Callable, Mapping

log = logging.getLogger("gold_savings.notifications")

PRICE_UPDATE_MARKER = "Price Update"


def is_price_update(notification: Mapping[str, Any]) -> bool:
    title = notification.get("title")
    return isinstance(title, str) and PRICE_UPDATE_MARKER in title


class PriceUpdateBridge:

    def __init__(self, on_price_update: Callable[[], Any]):
        self.on_price_update = on_price_update

    def handle(self, notification: Mapping[str, Any]) -> bool:
        """Run the callback for price-update events. Returns True if it ran."""
        if not is_price_update(notification):
            return False

        log.info("price_update_received title=%s", notification.get("title"))
        try:
            self.on_price_update()
        except Exception:
            log.exception("price_update_callback_failed")
            raise
        return True
