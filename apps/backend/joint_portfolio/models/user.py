"""
用戶資料模型

系統只有兩位參與者：管理員（可讀寫）與檢視者（唯讀）。
用戶於初始化時建立，之後不再修改。
"""

import enum
import uuid

from sqlalchemy import String, Enum
from sqlalchemy.orm import Mapped, mapped_column

from joint_portfolio.database import Base


class Role(str, enum.Enum):
    """角色列舉"""
    ADMIN = "admin"    # 管理員
    VIEWER = "viewer"  # 檢視者


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    username: Mapped[str] = mapped_column(
        String(100), unique=True, index=True, nullable=False
    )
    display_name: Mapped[str] = mapped_column(
        String(100), nullable=False
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    hashed_password: Mapped[str | None] = mapped_column(
        String(255), nullable=True,
        comment="僅需要密碼的角色才有值",
    )

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role.value})>"
