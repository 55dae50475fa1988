"""
Price feed record.

Written by the external feed, only read here. The row with
the latest updated_at is the current price.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from gold_savings.models.base import Base


class PriceRecord(Base):
    __tablename__ = "prices"

    id: Mapped[int] = mapped_column(primary_key=True)
    gold_price: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    silver_price: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, index=True
    )

    def __repr__(self) -> str:
        return f"<PriceRecord gold={self.gold_price} silver={self.silver_price}>"
