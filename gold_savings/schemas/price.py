"""
Price snapshot schema.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class PriceSnapshot(BaseModel):
    """Current price per gram. Never persisted by the core."""
    gold_price: Decimal
    silver_price: Decimal
    as_of: datetime

    model_config = {"from_attributes": True, "frozen": True}
