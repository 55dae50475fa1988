"""Business logic services."""

from gold_savings.services.account_directory import AccountDirectory
from gold_savings.services.ledger_engine import LedgerEngine
from gold_savings.services.notification_bridge import PriceUpdateBridge
from gold_savings.services.price_oracle import (
    HttpPriceOracle,
    StoredPriceOracle,
    build_price_oracle,
)
from gold_savings.services.session_manager import (
    SessionCache,
    SessionManager,
    SessionState,
)

__all__ = [
    "AccountDirectory",
    "LedgerEngine",
    "PriceUpdateBridge",
    "HttpPriceOracle",
    "StoredPriceOracle",
    "build_price_oracle",
    "SessionCache",
    "SessionManager",
    "SessionState",
]
