"""
交易稽核紀錄模型

每一次新增、修改、刪除投資或賣出都會自動產生一筆紀錄。
只新增不修改；investment_id 為軟參照，投資刪除後仍保留。
"""

import enum
import uuid
import datetime as dt
from decimal import Decimal

from sqlalchemy import String, Date, DateTime, Numeric, Enum
from sqlalchemy.orm import Mapped, mapped_column

from joint_portfolio.database import Base


class TransactionAction(str, enum.Enum):
    """交易動作列舉"""
    PURCHASE = "Purchase"  # 買入
    SALE = "Sale"          # 賣出
    EDIT = "Edit"          # 修改
    DELETION = "Deletion"  # 刪除


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    action: Mapped[TransactionAction] = mapped_column(
        Enum(TransactionAction, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    # 不設外鍵：投資刪除後紀錄仍需可讀
    investment_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True,
    )
    investment_name: Mapped[str] = mapped_column(
        String(200), nullable=False,
        comment="投資名稱快照",
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2), nullable=False,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(
        String(100), nullable=False,
        comment="操作者 username",
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: dt.datetime.now(dt.timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Transaction {self.action.value} {self.investment_name} {self.amount}>"
