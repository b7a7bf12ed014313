"""
用戶 API 路由
"""

from fastapi import APIRouter, Depends

from joint_portfolio.api.deps import get_repository
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.user import UserResponse

router = APIRouter(prefix="/users", tags=["用戶"])


@router.get("", response_model=list[UserResponse])
async def list_users(repo: Repository = Depends(get_repository)):
    """取得所有用戶（不含密碼）"""
    users = await repo.list_users()
    return [UserResponse.model_validate(u) for u in users]
