"""
記憶體儲存後端

以 dict 保存四種實體，適合測試與單機展示；重啟即清空。
atomic() 以快照還原方式達成全有或全無。
"""

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from joint_portfolio.errors import NotFoundError, ValidationError
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.investment import Investment, InvestmentCreate
from joint_portfolio.schemas.sale import Sale, SaleRecord
from joint_portfolio.schemas.transaction import Transaction, TransactionCreate
from joint_portfolio.schemas.user import User, UserCreate


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryRepository(Repository):
    """記憶體儲存實作"""

    def __init__(self):
        self._users: dict[str, User] = {}
        self._investments: dict[str, Investment] = {}
        self._transactions: dict[str, Transaction] = {}
        self._sales: dict[str, Sale] = {}

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        # 實體皆為不可變使用（寫入時整筆替換），淺層複製 dict 即可還原
        snapshot = (
            dict(self._users),
            dict(self._investments),
            dict(self._transactions),
            dict(self._sales),
        )
        try:
            yield
        except BaseException:
            (
                self._users,
                self._investments,
                self._transactions,
                self._sales,
            ) = snapshot
            raise

    async def is_empty(self) -> bool:
        return not self._users

    # === 用戶 ===

    async def create_user(self, data: UserCreate) -> User:
        if await self.get_user_by_username(data.username) is not None:
            raise ValidationError(f"Username '{data.username}' already exists")
        user = User(id=_new_id(), **data.model_dump())
        self._users[user.id] = user
        return user.model_copy()

    async def get_user(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    async def get_user_by_username(self, username: str) -> User | None:
        for user in self._users.values():
            if user.username == username:
                return user.model_copy()
        return None

    async def list_users(self) -> list[User]:
        return [u.model_copy() for u in self._users.values()]

    # === 投資 ===

    async def get_investment(self, investment_id: str) -> Investment | None:
        investment = self._investments.get(investment_id)
        return investment.model_copy() if investment else None

    async def list_investments(self) -> list[Investment]:
        return [i.model_copy() for i in self._investments.values()]

    async def create_investment(self, data: InvestmentCreate) -> Investment:
        investment = Investment(
            id=_new_id(),
            created_at=_now(),
            **data.model_dump(),
        )
        self._investments[investment.id] = investment
        return investment.model_copy()

    async def update_investment(
        self, investment_id: str, changes: dict[str, Any]
    ) -> Investment:
        existing = self._investments.get(investment_id)
        if existing is None:
            raise NotFoundError("Investment not found")

        # 重新驗證以套用金額精度等型別規則
        merged = existing.model_dump()
        merged.update(changes)
        try:
            updated = Investment.model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError(
                "Invalid data", errors=e.errors(include_url=False)
            ) from e
        self._investments[investment_id] = updated
        return updated.model_copy()

    async def delete_investment(self, investment_id: str) -> bool:
        return self._investments.pop(investment_id, None) is not None

    # === 交易紀錄 ===

    async def get_transaction(self, transaction_id: str) -> Transaction | None:
        tx = self._transactions.get(transaction_id)
        return tx.model_copy() if tx else None

    async def list_transactions(self) -> list[Transaction]:
        # sorted() 為穩定排序，同日紀錄維持寫入順序
        return [
            tx.model_copy()
            for tx in sorted(
                self._transactions.values(), key=lambda t: t.date, reverse=True
            )
        ]

    async def create_transaction(self, data: TransactionCreate) -> Transaction:
        tx = Transaction(id=_new_id(), created_at=_now(), **data.model_dump())
        self._transactions[tx.id] = tx
        return tx.model_copy()

    # === 賣出 ===

    async def get_sale(self, sale_id: str) -> Sale | None:
        sale = self._sales.get(sale_id)
        return sale.model_copy() if sale else None

    async def list_sales(self) -> list[Sale]:
        return [
            s.model_copy()
            for s in sorted(
                self._sales.values(), key=lambda s: s.sale_date, reverse=True
            )
        ]

    async def create_sale(self, data: SaleRecord) -> Sale:
        sale = Sale(id=_new_id(), created_at=_now(), **data.model_dump())
        self._sales[sale.id] = sale
        return sale.model_copy()
