"""
賣出紀錄模型

賣出只扣減投資的目前價值，不刪除投資；
本身的持有比例僅描述賣出所得如何分配。
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Integer, Date, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from joint_portfolio.database import Base


class Sale(Base):
    __tablename__ = "sales"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    investment_id: Mapped[str] = mapped_column(
        String(36), nullable=False, index=True,
    )
    investment_name: Mapped[str] = mapped_column(String(200), nullable=False)
    sale_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False,
        comment="賣出的價值部分",
    )
    sale_price: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False,
        comment="賣出總所得",
    )
    alle_percentage: Mapped[int] = mapped_column(Integer, nullable=False)
    ali_percentage: Mapped[int] = mapped_column(Integer, nullable=False)
    sale_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    created_by: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Sale {self.investment_name} {self.sale_amount}>"
