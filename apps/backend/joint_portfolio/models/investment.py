"""
投資部位模型

每筆投資由兩位參與者依固定比例共同持有，
alle_percentage + ali_percentage 永遠等於 100。
"""

import enum
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Integer, Date, DateTime, Numeric, Enum
from sqlalchemy.orm import Mapped, mapped_column

from joint_portfolio.database import Base


class InvestmentType(str, enum.Enum):
    """投資類型列舉"""
    ETF = "ETF"
    STOCK = "Stock"    # 股票
    BOND = "Bond"      # 債券
    FUND = "Fund"      # 基金
    CRYPTO = "Crypto"  # 加密貨幣
    OTHER = "Other"    # 其他


class Investment(Base):
    __tablename__ = "investments"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    symbol: Mapped[str | None] = mapped_column(
        String(20), nullable=True,
        comment="標的代碼，如 VWCE, AAPL",
    )
    type: Mapped[InvestmentType] = mapped_column(
        Enum(InvestmentType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    initial_value: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False,
        comment="投入金額",
    )
    current_value: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False,
        comment="目前價值，賣出時扣減",
    )
    alle_percentage: Mapped[int] = mapped_column(Integer, nullable=False)
    ali_percentage: Mapped[int] = mapped_column(Integer, nullable=False)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)
    created_by: Mapped[str] = mapped_column(
        String(100), nullable=False,
        comment="建立者 username",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Investment {self.name} value={self.current_value}>"
