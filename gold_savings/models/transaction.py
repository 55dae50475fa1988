"""
Purchase transaction model.

One row per committed gold purchase. Rows are immutable and
append-only. user_id is intentionally not a foreign key:
deleting an account leaves its purchase history in place,
and the bookid/user_name columns keep a snapshot of who
bought it.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, DateTime, Integer, Numeric, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from gold_savings.models.base import Base


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint(
            "grams_purchased > 0", name="ck_transactions_grams_purchased"
        ),
        CheckConstraint(
            "price_per_gram > 0", name="ck_transactions_price_per_gram"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    bookid: Mapped[str] = mapped_column(String(64), nullable=False)
    user_name: Mapped[str] = mapped_column(String(100), nullable=False)
    grams_purchased: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    price_per_gram: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    transaction_date: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.bookid} "
            f"{self.grams_purchased}g @ {self.price_per_gram}>"
        )
