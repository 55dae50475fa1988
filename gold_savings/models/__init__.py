"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from gold_savings.models.base import Base
from gold_savings.models.account import Account, MAX_MONTHS_PAID
from gold_savings.models.transaction import Transaction
from gold_savings.models.price import PriceRecord

__all__ = [
    "Base",
    "Account",
    "MAX_MONTHS_PAID",
    "Transaction",
    "PriceRecord",
]
