"""
SQLAlchemy 儲存後端

使用 SQLAlchemy 2.0 async session；開發與測試使用 SQLite，
生產環境使用 PostgreSQL。atomic() 區塊內共用同一個 session，
最外層結束時一次提交或回滾。
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from joint_portfolio.database import create_session_factory, init_db
from joint_portfolio.errors import NotFoundError, ValidationError
from joint_portfolio.models.investment import Investment as InvestmentModel
from joint_portfolio.models.sale import Sale as SaleModel
from joint_portfolio.models.transaction import Transaction as TransactionModel
from joint_portfolio.models.user import User as UserModel
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.investment import Investment, InvestmentCreate
from joint_portfolio.schemas.sale import Sale, SaleRecord
from joint_portfolio.schemas.transaction import Transaction, TransactionCreate
from joint_portfolio.schemas.user import User, UserCreate

logger = logging.getLogger(__name__)


class SqlRepository(Repository):
    """SQLAlchemy 儲存實作"""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._session_factory = create_session_factory(engine)
        self._current: ContextVar[AsyncSession | None] = ContextVar(
            f"sql_repository_session_{id(self)}", default=None
        )

    async def init_schema(self) -> None:
        """建立資料表（若不存在）"""
        await init_db(self.engine)

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        if self._current.get() is not None:
            # 巢狀呼叫沿用外層 session，由外層提交
            yield
            return

        async with self._session_factory() as session:
            token = self._current.set(session)
            try:
                yield
                await session.commit()
            except BaseException:
                await session.rollback()
                raise
            finally:
                self._current.reset(token)

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """取得目前工作單元的 session；不在工作單元內時自行開啟並提交"""
        session = self._current.get()
        if session is not None:
            yield session
            return

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    async def is_empty(self) -> bool:
        async with self._session() as session:
            result = await session.execute(
                select(func.count()).select_from(UserModel)
            )
            return (result.scalar() or 0) == 0

    # === 用戶 ===

    async def create_user(self, data: UserCreate) -> User:
        async with self._session() as session:
            stmt = select(UserModel).where(UserModel.username == data.username)
            if (await session.execute(stmt)).scalar_one_or_none() is not None:
                raise ValidationError(f"Username '{data.username}' already exists")

            user = UserModel(**data.model_dump())
            session.add(user)
            try:
                await session.flush()
            except IntegrityError as e:
                logger.warning("建立用戶失敗 %s: %s", data.username, e)
                raise ValidationError(
                    f"Username '{data.username}' already exists"
                ) from e
            return User.model_validate(user)

    async def get_user(self, user_id: str) -> User | None:
        async with self._session() as session:
            user = await session.get(UserModel, user_id)
            return User.model_validate(user) if user else None

    async def get_user_by_username(self, username: str) -> User | None:
        async with self._session() as session:
            stmt = select(UserModel).where(UserModel.username == username)
            user = (await session.execute(stmt)).scalar_one_or_none()
            return User.model_validate(user) if user else None

    async def list_users(self) -> list[User]:
        async with self._session() as session:
            result = await session.execute(select(UserModel))
            return [User.model_validate(u) for u in result.scalars().all()]

    # === 投資 ===

    async def get_investment(self, investment_id: str) -> Investment | None:
        async with self._session() as session:
            investment = await session.get(InvestmentModel, investment_id)
            return Investment.model_validate(investment) if investment else None

    async def list_investments(self) -> list[Investment]:
        async with self._session() as session:
            stmt = select(InvestmentModel).order_by(InvestmentModel.created_at.asc())
            result = await session.execute(stmt)
            return [Investment.model_validate(i) for i in result.scalars().all()]

    async def create_investment(self, data: InvestmentCreate) -> Investment:
        async with self._session() as session:
            investment = InvestmentModel(**data.model_dump())
            session.add(investment)
            await session.flush()
            await session.refresh(investment)
            return Investment.model_validate(investment)

    async def update_investment(
        self, investment_id: str, changes: dict[str, Any]
    ) -> Investment:
        async with self._session() as session:
            investment = await session.get(InvestmentModel, investment_id)
            if investment is None:
                raise NotFoundError("Investment not found")

            for key, value in changes.items():
                setattr(investment, key, value)

            try:
                await session.flush()
            except IntegrityError as e:
                logger.warning("修改投資失敗 %s: %s", investment_id, e)
                raise ValidationError("Invalid data") from e
            await session.refresh(investment)
            return Investment.model_validate(investment)

    async def delete_investment(self, investment_id: str) -> bool:
        async with self._session() as session:
            investment = await session.get(InvestmentModel, investment_id)
            if investment is None:
                return False
            await session.delete(investment)
            await session.flush()
            return True

    # === 交易紀錄 ===

    async def get_transaction(self, transaction_id: str) -> Transaction | None:
        async with self._session() as session:
            tx = await session.get(TransactionModel, transaction_id)
            return Transaction.model_validate(tx) if tx else None

    async def list_transactions(self) -> list[Transaction]:
        async with self._session() as session:
            stmt = select(TransactionModel).order_by(
                TransactionModel.date.desc(), TransactionModel.created_at.asc()
            )
            result = await session.execute(stmt)
            return [Transaction.model_validate(t) for t in result.scalars().all()]

    async def create_transaction(self, data: TransactionCreate) -> Transaction:
        async with self._session() as session:
            tx = TransactionModel(**data.model_dump())
            session.add(tx)
            await session.flush()
            await session.refresh(tx)
            return Transaction.model_validate(tx)

    # === 賣出 ===

    async def get_sale(self, sale_id: str) -> Sale | None:
        async with self._session() as session:
            sale = await session.get(SaleModel, sale_id)
            return Sale.model_validate(sale) if sale else None

    async def list_sales(self) -> list[Sale]:
        async with self._session() as session:
            stmt = select(SaleModel).order_by(
                SaleModel.sale_date.desc(), SaleModel.created_at.asc()
            )
            result = await session.execute(stmt)
            return [Sale.model_validate(s) for s in result.scalars().all()]

    async def create_sale(self, data: SaleRecord) -> Sale:
        async with self._session() as session:
            sale = SaleModel(**data.model_dump())
            session.add(sale)
            await session.flush()
            await session.refresh(sale)
            return Sale.model_validate(sale)
