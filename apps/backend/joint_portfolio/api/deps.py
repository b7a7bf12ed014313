"""
API 依賴注入

儲存層與設定由應用程式工廠放在 app.state，
路由透過這裡的依賴取得，不使用全域單例。
"""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from joint_portfolio.config import Settings
from joint_portfolio.errors import UnauthorizedError
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.user import User
from joint_portfolio.services.access import decode_access_token, ensure_can_write

security = HTTPBearer(auto_error=False)


def get_repository(request: Request) -> Repository:
    """取得注入的儲存層實例"""
    return request.app.state.repository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    repo: Repository = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> User:
    """取得當前已認證的用戶"""
    if not credentials:
        raise UnauthorizedError("Missing authentication token")

    user_id = decode_access_token(credentials.credentials, settings)
    user = await repo.get_user(user_id)
    if user is None:
        raise UnauthorizedError("User no longer exists")
    return user


async def require_writer(user: User = Depends(get_current_user)) -> User:
    """限制具寫入權限的角色"""
    ensure_can_write(user)
    return user
