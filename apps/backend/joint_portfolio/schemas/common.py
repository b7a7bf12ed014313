"""
共用 Schema 定義

包含 camelCase 基礎模型、金額型別、錯誤回應格式等通用結構。
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, Field
from pydantic.alias_generators import to_camel

CENT = Decimal("0.01")


def to_cents(value: Decimal) -> Decimal:
    """統一金額精度為小數兩位"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


# 儲存於實體上的金額（固定兩位小數，JSON 以字串輸出）
Money = Annotated[Decimal, AfterValidator(to_cents)]

# 請求輸入金額：非負且最多兩位小數
MoneyInput = Annotated[
    Decimal,
    Field(ge=0, max_digits=12, decimal_places=2),
    AfterValidator(to_cents),
]

# 整數百分點，不支援小數百分比
Percentage = Annotated[int, Field(ge=0, le=100)]


class CamelModel(BaseModel):
    """對外 JSON 使用 camelCase，內部屬性維持 snake_case"""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class ErrorResponse(BaseModel):
    """錯誤回應格式"""
    message: str
    errors: list[dict[str, Any]] | None = None


class MessageResponse(BaseModel):
    """單純訊息回應"""
    message: str
