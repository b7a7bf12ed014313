"""
投資服務層（領域規則）

處理新增、修改、刪除投資與賣出的一致性規則：
- 兩位參與者的持有比例必須剛好加總為 100
- 賣出金額不得超過投資目前價值
- 目前價值只能透過賣出減少，修改只能調高
- 每一次異動都自動產生一筆交易稽核紀錄

每個操作都在 Repository.atomic() 內完成，
避免出現「有賣出紀錄但價值未扣減」之類的半套狀態。
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal

from joint_portfolio.errors import InvalidSaleError, NotFoundError, ValidationError
from joint_portfolio.models.transaction import TransactionAction
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.investment import (
    Investment, InvestmentCreate, InvestmentUpdate,
)
from joint_portfolio.schemas.sale import Sale, SaleCreate, SaleRecord
from joint_portfolio.schemas.transaction import TransactionCreate

logger = logging.getLogger(__name__)

PERCENTAGE_TOTAL = 100


def today() -> date:
    """交易紀錄使用的「今天」（UTC 日期）"""
    return datetime.now(timezone.utc).date()


def validate_percentages(alle_percentage: int, ali_percentage: int) -> None:
    """持有比例必須以整數百分點剛好加總為 100"""
    if alle_percentage + ali_percentage != PERCENTAGE_TOTAL:
        raise ValidationError(
            "Percentages must sum to exactly 100%",
            errors=[{
                "loc": ["body", "allePercentage"],
                "msg": (
                    f"allePercentage ({alle_percentage}) + aliPercentage "
                    f"({ali_percentage}) = {alle_percentage + ali_percentage}, "
                    "expected 100"
                ),
                "type": "percentage_sum",
            }],
        )


def validate_value_change(current: Decimal, new: Decimal | None) -> None:
    """修改只能調高目前價值；價值減少必須透過賣出紀錄"""
    if new is not None and new < current:
        raise ValidationError(
            "currentValue can only decrease through a recorded sale",
            errors=[{
                "loc": ["body", "currentValue"],
                "msg": f"currentValue ({new}) is below the stored value ({current})",
                "type": "value_decrease",
            }],
        )


class InvestmentService:
    """投資與賣出業務邏輯"""

    def __init__(self, repo: Repository):
        self.repo = repo

    async def create_investment(
        self, data: InvestmentCreate, actor: str | None = None
    ) -> Investment:
        """
        新增投資並產生買入紀錄

        流程：
        1. 驗證持有比例
        2. 建立 Investment（created_by 未提供時使用操作者）
        3. 產生 Purchase 交易紀錄：金額為投入金額、日期為買入日
        """
        validate_percentages(data.alle_percentage, data.ali_percentage)

        created_by = data.created_by or actor
        if not created_by:
            raise ValidationError("createdBy is required")
        data = data.model_copy(update={"created_by": created_by})

        async with self.repo.atomic():
            investment = await self.repo.create_investment(data)
            await self.repo.create_transaction(
                TransactionCreate(
                    action=TransactionAction.PURCHASE,
                    investment_id=investment.id,
                    investment_name=investment.name,
                    amount=investment.initial_value,
                    date=investment.purchase_date,
                    user_id=investment.created_by,
                )
            )

        logger.info(
            "已新增投資 %s (%s) 比例 %d/%d",
            investment.name, investment.initial_value,
            investment.alle_percentage, investment.ali_percentage,
        )
        return investment

    async def update_investment(
        self, investment_id: str, data: InvestmentUpdate, actor: str | None = None
    ) -> Investment:
        """
        修改投資並產生修改紀錄

        只提供其中一個比例欄位時，以儲存中的另一個比例驗證合併後的結果，
        確保任何部分更新都不會破壞 100% 的約束。
        """
        changes = data.changes()

        async with self.repo.atomic():
            existing = await self.repo.get_investment(investment_id)
            if existing is None:
                raise NotFoundError("Investment not found")

            validate_percentages(
                changes.get("alle_percentage", existing.alle_percentage),
                changes.get("ali_percentage", existing.ali_percentage),
            )
            validate_value_change(existing.current_value, changes.get("current_value"))

            updated = await self.repo.update_investment(investment_id, changes)
            await self.repo.create_transaction(
                TransactionCreate(
                    action=TransactionAction.EDIT,
                    investment_id=updated.id,
                    investment_name=updated.name,
                    amount=updated.current_value,
                    date=today(),
                    user_id=data.updated_by or actor or updated.created_by,
                )
            )

        logger.info("已修改投資 %s 欄位 %s", updated.name, sorted(changes))
        return updated

    async def delete_investment(
        self, investment_id: str, actor: str | None = None
    ) -> Investment:
        """刪除投資並產生刪除紀錄；回傳刪除前的快照"""
        async with self.repo.atomic():
            investment = await self.repo.get_investment(investment_id)
            if investment is None:
                raise NotFoundError("Investment not found")

            if not await self.repo.delete_investment(investment_id):
                raise NotFoundError("Investment not found")

            await self.repo.create_transaction(
                TransactionCreate(
                    action=TransactionAction.DELETION,
                    investment_id=investment_id,
                    investment_name=investment.name,
                    amount=Decimal("0"),
                    date=today(),
                    user_id=actor or investment.created_by,
                )
            )

        logger.info("已刪除投資 %s", investment.name)
        return investment

    async def create_sale(self, data: SaleCreate, actor: str | None = None) -> Sale:
        """
        新增賣出紀錄

        流程：
        1. 驗證所得分配比例
        2. 確認投資存在，且賣出金額不超過目前價值
        3. 建立 Sale、扣減投資目前價值、產生 Sale 交易紀錄（同一工作單元）

        賣出不會改變投資本身的持有比例。
        """
        validate_percentages(data.alle_percentage, data.ali_percentage)

        created_by = data.created_by or actor
        if not created_by:
            raise ValidationError("createdBy is required")

        async with self.repo.atomic():
            investment = await self.repo.get_investment(data.investment_id)
            if investment is None:
                raise NotFoundError("Investment not found")

            if data.sale_amount > investment.current_value:
                logger.warning(
                    "賣出金額 %s 超過 %s 目前價值 %s",
                    data.sale_amount, investment.name, investment.current_value,
                )
                raise InvalidSaleError(
                    f"Sale amount ({data.sale_amount}) exceeds the investment's "
                    f"current value ({investment.current_value})"
                )

            sale = await self.repo.create_sale(
                SaleRecord(
                    investment_id=investment.id,
                    investment_name=investment.name,
                    sale_amount=data.sale_amount,
                    sale_price=data.sale_price,
                    alle_percentage=data.alle_percentage,
                    ali_percentage=data.ali_percentage,
                    sale_date=data.sale_date,
                    created_by=created_by,
                )
            )
            await self.repo.update_investment(
                investment.id,
                {"current_value": investment.current_value - data.sale_amount},
            )
            await self.repo.create_transaction(
                TransactionCreate(
                    action=TransactionAction.SALE,
                    investment_id=investment.id,
                    investment_name=investment.name,
                    amount=sale.sale_amount,
                    date=sale.sale_date,
                    user_id=sale.created_by,
                )
            )

        logger.info(
            "已賣出 %s 金額 %s（所得 %s）",
            investment.name, sale.sale_amount, sale.sale_price,
        )
        return sale
