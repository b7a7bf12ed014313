"""
用戶相關 Schema

定義登入請求、用戶資料與登入回應模型。
"""

from pydantic import BaseModel, Field

from joint_portfolio.models.user import Role
from joint_portfolio.schemas.common import CamelModel


class User(CamelModel):
    """用戶實體（含密碼雜湊，僅供服務層使用）"""
    id: str
    username: str
    display_name: str
    role: Role
    hashed_password: str | None = None


class UserCreate(CamelModel):
    """建立用戶（密碼已雜湊）"""
    username: str = Field(min_length=1, max_length=100)
    display_name: str = Field(min_length=1, max_length=100)
    role: Role
    hashed_password: str | None = None


class UserLogin(BaseModel):
    """登入請求；檢視者不需要密碼"""
    username: str = Field(min_length=1)
    password: str | None = None


class UserResponse(CamelModel):
    """用戶資料回應（不含密碼）"""
    id: str
    username: str
    display_name: str
    role: Role


class LoginResponse(UserResponse):
    """登入回應：用戶資料與 JWT Token"""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
