"""
賣出相關 Schema

定義新增賣出請求與賣出實體。
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, Field

from joint_portfolio.schemas.common import (
    CamelModel, Money, MoneyInput, Percentage, to_cents,
)


class Sale(CamelModel):
    """賣出紀錄實體"""
    id: str
    investment_id: str
    investment_name: str
    sale_amount: Money
    sale_price: Money
    alle_percentage: int
    ali_percentage: int
    sale_date: date
    created_by: str
    created_at: datetime | None = None


class SaleCreate(CamelModel):
    """
    新增賣出請求

    投資名稱由服務層從投資快照，不接受用戶端指定（多餘欄位一律忽略）。
    """
    investment_id: str = Field(min_length=1)
    sale_amount: Annotated[
        Decimal,
        Field(gt=0, max_digits=12, decimal_places=2),
        AfterValidator(to_cents),
    ]
    sale_price: MoneyInput
    alle_percentage: Percentage
    ali_percentage: Percentage
    sale_date: date
    created_by: str | None = Field(default=None, min_length=1, max_length=100)


class SaleRecord(CamelModel):
    """寫入儲存層的賣出資料"""
    investment_id: str
    investment_name: str
    sale_amount: Money
    sale_price: Money
    alle_percentage: int
    ali_percentage: int
    sale_date: date
    created_by: str
