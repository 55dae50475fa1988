"""
Member account model.

Holds the member's identity and the running aggregates of
their purchases. The aggregates are only ever changed with
an atomic SQL increment (see AccountDirectory), never by
assigning a value read earlier.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, DateTime, Integer, Numeric, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from gold_savings.models.base import Base


MAX_MONTHS_PAID = 11


class Account(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("total_grams >= 0", name="ck_users_total_grams"),
        CheckConstraint(
            "total_amount_spent >= 0", name="ck_users_total_amount_spent"
        ),
        CheckConstraint(
            f"months_paid >= 0 AND months_paid <= {MAX_MONTHS_PAID}",
            name="ck_users_months_paid",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    # Case-sensitive lookup key members sign in with
    bookid: Mapped[str] = mapped_column(
        String(64), unique=True, nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, default=None
    )
    is_admin: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    total_grams: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    total_amount_spent: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )
    months_paid: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    def __repr__(self) -> str:
        return f"<Account {self.bookid} ({self.name})>"
