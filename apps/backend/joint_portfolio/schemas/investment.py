"""
投資相關 Schema

定義新增、修改、刪除投資的請求模型與投資實體。
"""

from datetime import date, datetime

from pydantic import Field, model_validator
from pydantic.alias_generators import to_camel

from joint_portfolio.models.investment import InvestmentType
from joint_portfolio.schemas.common import CamelModel, Money, MoneyInput, Percentage


class Investment(CamelModel):
    """投資實體"""
    id: str
    name: str
    symbol: str | None = None
    type: InvestmentType
    initial_value: Money
    current_value: Money
    alle_percentage: int
    ali_percentage: int
    purchase_date: date
    created_by: str
    created_at: datetime | None = None


class InvestmentCreate(CamelModel):
    """新增投資請求；created_by 省略時由目前登入者補上"""
    name: str = Field(min_length=1, max_length=200)
    symbol: str | None = Field(default=None, max_length=20)
    type: InvestmentType
    initial_value: MoneyInput
    current_value: MoneyInput
    alle_percentage: Percentage
    ali_percentage: Percentage
    purchase_date: date
    created_by: str | None = Field(default=None, min_length=1, max_length=100)


# 可明確設為 null 的修改欄位
NULLABLE_UPDATE_FIELDS = {"symbol", "updated_by"}


class InvestmentUpdate(CamelModel):
    """修改投資請求（部分欄位）；id、建立者與建立時間不可修改"""
    name: str | None = Field(default=None, min_length=1, max_length=200)
    symbol: str | None = Field(default=None, max_length=20)
    type: InvestmentType | None = None
    initial_value: MoneyInput | None = None
    current_value: MoneyInput | None = None
    alle_percentage: Percentage | None = None
    ali_percentage: Percentage | None = None
    purchase_date: date | None = None
    updated_by: str | None = Field(default=None, min_length=1, max_length=100)

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "InvestmentUpdate":
        """省略欄位代表不修改；必填欄位明確傳入 null 視為格式錯誤"""
        nulls = sorted(
            to_camel(name)
            for name in self.model_fields_set - NULLABLE_UPDATE_FIELDS
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict:
        """回傳實際提供的投資欄位（排除操作者）"""
        return self.model_dump(exclude_unset=True, exclude={"updated_by"})


class InvestmentDelete(CamelModel):
    """刪除投資請求"""
    deleted_by: str | None = Field(default=None, min_length=1, max_length=100)
