"""
Pydantic schemas for purchases.

A purchase is two calls: quote (pure arithmetic) then
commit. The quote travels back to the server unchanged, and
its signature lets the server check that the price the member
confirmed is one it actually quoted.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


# --- Request Schemas ---

class QuoteRequest(BaseModel):
    # Left as a string so "abc" or "NaN" reaches the engine and is
    # rejected there with the same error every caller sees
    cash_amount: str | Decimal


class Quote(BaseModel):
    """An unposted purchase. Carries the price it was computed at."""
    grams: Decimal = Field(gt=0)
    cash_amount: Decimal = Field(gt=0)
    price_per_gram: Decimal = Field(gt=0)
    snapshot_time: datetime
    signature: str = ""

    model_config = {"frozen": True}


class PurchaseRequest(BaseModel):
    account_id: int
    quote: Quote


# --- Response Schemas ---

class TransactionResponse(BaseModel):
    id: int
    user_id: int
    bookid: str
    user_name: str
    grams_purchased: Decimal
    price_per_gram: Decimal
    total_amount: Decimal
    transaction_date: datetime

    model_config = {"from_attributes": True}
