"""
交易稽核紀錄 API 路由

紀錄只讀；由投資與賣出操作自動產生。
"""

from fastapi import APIRouter, Depends

from joint_portfolio.api.deps import get_repository
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.transaction import Transaction

router = APIRouter(prefix="/transactions", tags=["交易紀錄"])


@router.get("", response_model=list[Transaction])
async def list_transactions(repo: Repository = Depends(get_repository)):
    """取得所有交易紀錄（依日期由新到舊）"""
    return await repo.list_transactions()
