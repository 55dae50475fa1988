"""
Pydantic schemas for member accounts and sessions.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from gold_savings.models.account import MAX_MONTHS_PAID


class AccountCreate(BaseModel):
    """
    Request to register a member.

    Emptiness of name, bookid and phone is checked by the
    AccountDirectory so the rule holds for every caller,
    not just HTTP clients.
    """
    name: str = Field(max_length=100)
    bookid: str = Field(max_length=64)
    phone: str = Field(max_length=32)
    email: str | None = Field(default=None, max_length=255)
    is_admin: bool = False


class AccountResponse(BaseModel):
    """
    Account as seen by callers.

    Also the shape persisted in the local session cache.
    """
    id: int
    bookid: str
    name: str
    phone: str
    email: str | None
    is_admin: bool
    is_active: bool
    total_grams: Decimal
    total_amount_spent: Decimal
    months_paid: int
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountStatusUpdate(BaseModel):
    is_active: bool


class MonthsPaidUpdate(BaseModel):
    months_paid: int = Field(ge=0, le=MAX_MONTHS_PAID)


class LoginRequest(BaseModel):
    bookid: str = Field(min_length=1, max_length=64)
