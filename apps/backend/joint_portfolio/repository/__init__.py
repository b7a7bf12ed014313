"""儲存層：抽象介面與記憶體、SQLAlchemy 兩種實作"""

from joint_portfolio.repository.base import Repository
from joint_portfolio.repository.memory import MemoryRepository
from joint_portfolio.repository.sql import SqlRepository

__all__ = ["Repository", "MemoryRepository", "SqlRepository"]
