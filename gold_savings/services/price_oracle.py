"""
Price oracle adapters.

Both adapters answer get_current_prices() with a PriceSnapshot,
None when the feed has simply not published anything yet, or
PriceUnavailableError when the source cannot be read. Neither
caches; callers re-poll when told prices changed.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation

import requests
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from gold_savings.config import Settings
from gold_savings.errors import PriceUnavailableError
from gold_savings.models.price import PriceRecord
from gold_savings.schemas.price import PriceSnapshot

log = logging.getLogger("gold_savings.prices")


def _positive_price(value: object, field: str) -> Decimal:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise PriceUnavailableError(f"{field} is not a number: {value!r}") from e
    if not price.is_finite() or price <= 0:
        raise PriceUnavailableError(f"{field} must be > 0. Received: {value!r}")
    return price


class StoredPriceOracle:
    """Reads the current price record from the database."""

    def __init__(self, db: Session):
        self.db = db

    def get_current_prices(self) -> PriceSnapshot | None:
        try:
            record = self.db.execute(
                select(PriceRecord)
                .order_by(PriceRecord.updated_at.desc(), PriceRecord.id.desc())
                .limit(1)
            ).scalar_one_or_none()
        except OperationalError as e:
            log.warning("price_store_failed error=%s", e)
            raise PriceUnavailableError("Price store unreachable") from e

        if record is None:
            return None

        return PriceSnapshot(
            gold_price=_positive_price(record.gold_price, "gold_price"),
            silver_price=_positive_price(record.silver_price, "silver_price"),
            as_of=record.updated_at,
        )


class HttpPriceOracle:
    """
    Reads the price record from a JSON endpoint.

    Expected body: {"goldPrice": 6000, "silverPrice": 75,
    "updatedAt": "2024-01-01T10:00:00"}. An empty body or a 204
    means no prices have been published yet.
    """

    def __init__(self, url: str, timeout: float = 10):
        self.url = url
        self.timeout = timeout

    def _fetch_json(self, url: str) -> dict | None:
        r = requests.get(url, timeout=self.timeout)
        r.raise_for_status()
        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    def get_current_prices(self) -> PriceSnapshot | None:
        try:
            data = self._fetch_json(self.url)
        except (requests.RequestException, ValueError) as e:
            log.warning("price_feed_failed url=%s error=%s", self.url, e)
            raise PriceUnavailableError(f"Price feed unreachable: {e}") from e

        if not data:
            return None
        if not isinstance(data, dict):
            raise PriceUnavailableError(f"Price feed returned {type(data).__name__}")

        as_of_raw = data.get("updatedAt")
        try:
            as_of = (
                datetime.fromisoformat(as_of_raw) if as_of_raw
                else datetime.utcnow()
            )
        except (TypeError, ValueError) as e:
            raise PriceUnavailableError(f"Bad updatedAt: {as_of_raw!r}") from e

        return PriceSnapshot(
            gold_price=_positive_price(data.get("goldPrice"), "goldPrice"),
            silver_price=_positive_price(data.get("silverPrice"), "silverPrice"),
            as_of=as_of,
        )


def build_price_oracle(
    settings: Settings, db: Session
) -> StoredPriceOracle | HttpPriceOracle:
    """Pick the adapter named by PRICE_SOURCE."""
    if settings.PRICE_SOURCE == "http":
        if not settings.PRICE_FEED_URL:
            raise PriceUnavailableError("PRICE_FEED_URL is not configured")
        return HttpPriceOracle(
            settings.PRICE_FEED_URL, timeout=settings.PRICE_FEED_TIMEOUT
        )
    if settings.PRICE_SOURCE == "database":
        return StoredPriceOracle(db)
    raise ValueError(f"Unknown PRICE_SOURCE '{settings.PRICE_SOURCE}'")
