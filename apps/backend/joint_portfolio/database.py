"""
JointPortfolio 資料庫連線模組

支援 SQLAlchemy 2.0 async engine。
開發模式使用 SQLite，生產環境使用 PostgreSQL。
引擎由應用程式工廠建立並注入 SqlRepository，不再使用全域單例。
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from joint_portfolio.config import Settings


class Base(DeclarativeBase):
    """所有 ORM Model 的基礎類別"""
    pass


def normalize_database_url(url: str) -> str:
    """自動轉換資料庫 URL 為非同步驅動程式"""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    return url


def create_engine(settings: Settings) -> AsyncEngine:
    """根據資料庫類型調整引擎參數並建立引擎"""
    engine_kwargs: dict = {
        "echo": settings.debug and settings.is_development,
    }

    if settings.use_sqlite:
        # SQLite 需要特殊的 connect_args，允許跨執行緒存取
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        # PostgreSQL 連線池設定
        engine_kwargs.update({
            "pool_size": 10,
            "max_overflow": 5,
            "pool_pre_ping": True,
        })

    return create_async_engine(
        normalize_database_url(settings.database_url), **engine_kwargs
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """初始化資料庫（自動建立所有表）"""
    # 匯入以註冊所有 ORM Model 至 metadata
    import joint_portfolio.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
