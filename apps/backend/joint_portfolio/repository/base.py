"""
儲存層抽象基礎類別

定義所有儲存後端（記憶體、SQLAlchemy）必須實作的介面。
所有方法回傳 Pydantic 實體的複本，呼叫端修改不會影響已儲存的資料。
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any

from joint_portfolio.schemas.investment import Investment, InvestmentCreate
from joint_portfolio.schemas.sale import Sale, SaleRecord
from joint_portfolio.schemas.transaction import Transaction, TransactionCreate
from joint_portfolio.schemas.user import User, UserCreate


class Repository(ABC):
    """
    儲存層抽象類別

    負責識別碼產生（UUID4）、建立時間戳記與排序規則；
    不負責任何領域規則（比例驗證、交易紀錄產生）。
    """

    # === 工作單元 ===

    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """
        開啟工作單元。

        區塊內所有寫入一起生效；區塊拋出例外時全部復原。
        可巢狀使用，僅最外層負責提交。
        """
        ...

    @abstractmethod
    async def is_empty(self) -> bool:
        """尚未建立任何用戶時回傳 True（用於決定是否寫入預設資料）"""
        ...

    # === 用戶 ===

    @abstractmethod
    async def create_user(self, data: UserCreate) -> User:
        """
        建立用戶。

        Raises:
            ValidationError: username 已存在
        """
        ...

    @abstractmethod
    async def get_user(self, user_id: str) -> User | None:
        ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> User | None:
        ...

    @abstractmethod
    async def list_users(self) -> list[User]:
        ...

    # === 投資 ===

    @abstractmethod
    async def get_investment(self, investment_id: str) -> Investment | None:
        ...

    @abstractmethod
    async def list_investments(self) -> list[Investment]:
        """依建立順序回傳所有投資"""
        ...

    @abstractmethod
    async def create_investment(self, data: InvestmentCreate) -> Investment:
        """data.created_by 必須已填入"""
        ...

    @abstractmethod
    async def update_investment(
        self, investment_id: str, changes: dict[str, Any]
    ) -> Investment:
        """
        將 changes 合併至既有投資。

        Raises:
            NotFoundError: 投資不存在
        """
        ...

    @abstractmethod
    async def delete_investment(self, investment_id: str) -> bool:
        """刪除投資，回傳刪除前是否存在"""
        ...

    # === 交易紀錄（只新增） ===

    @abstractmethod
    async def get_transaction(self, transaction_id: str) -> Transaction | None:
        ...

    @abstractmethod
    async def list_transactions(self) -> list[Transaction]:
        """依交易日期由新到舊排序，同日紀錄維持寫入順序"""
        ...

    @abstractmethod
    async def create_transaction(self, data: TransactionCreate) -> Transaction:
        ...

    # === 賣出 ===

    @abstractmethod
    async def get_sale(self, sale_id: str) -> Sale | None:
        ...

    @abstractmethod
    async def list_sales(self) -> list[Sale]:
        """依賣出日期由新到舊排序，同日紀錄維持寫入順序"""
        ...

    @abstractmethod
    async def create_sale(self, data: SaleRecord) -> Sale:
        ...

    async def close(self) -> None:
        """釋放連線等資源"""
        return None
