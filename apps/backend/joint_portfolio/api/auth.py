"""
認證 API 路由

以 username 登入（管理員需密碼），回傳用戶資料與 JWT Token。
"""

import logging

from fastapi import APIRouter, Depends

from joint_portfolio.api.deps import get_app_settings, get_current_user, get_repository
from joint_portfolio.config import Settings
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.user import LoginResponse, User, UserLogin, UserResponse
from joint_portfolio.services.access import authenticate, create_access_token

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["認證"])


@router.post("/login", response_model=LoginResponse)
async def login(
    data: UserLogin,
    repo: Repository = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
):
    """用戶登入"""
    user = await authenticate(repo, data.username, data.password)
    logger.info("用戶 %s 已登入", user.username)

    return LoginResponse(
        **UserResponse.model_validate(user).model_dump(),
        access_token=create_access_token(user, settings),
        expires_in=settings.jwt_expire_minutes * 60,
    )


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    """取得目前登入的用戶"""
    return UserResponse.model_validate(user)
