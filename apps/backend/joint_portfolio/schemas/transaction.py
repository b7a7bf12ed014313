"""
交易稽核紀錄 Schema

紀錄由服務層自動產生，不接受使用者直接建立。
"""

from datetime import date, datetime

from joint_portfolio.models.transaction import TransactionAction
from joint_portfolio.schemas.common import CamelModel, Money


class Transaction(CamelModel):
    """交易紀錄實體"""
    id: str
    action: TransactionAction
    investment_id: str | None = None
    investment_name: str
    amount: Money
    date: date
    user_id: str
    created_at: datetime | None = None


class TransactionCreate(CamelModel):
    """服務層內部使用的交易紀錄建立資料"""
    action: TransactionAction
    investment_id: str | None = None
    investment_name: str
    amount: Money
    date: date
    user_id: str
