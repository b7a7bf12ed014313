"""
投資 API 路由

投資 CRUD；寫入操作限管理員，並自動產生交易稽核紀錄。
"""

import logging

from fastapi import APIRouter, Body, Depends, status

from joint_portfolio.api.deps import get_repository, require_writer
from joint_portfolio.errors import NotFoundError
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.common import MessageResponse
from joint_portfolio.schemas.investment import (
    Investment, InvestmentCreate, InvestmentDelete, InvestmentUpdate,
)
from joint_portfolio.schemas.user import User
from joint_portfolio.services.investment_service import InvestmentService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/investments", tags=["投資"])


@router.get("", response_model=list[Investment])
async def list_investments(repo: Repository = Depends(get_repository)):
    """取得所有投資"""
    return await repo.list_investments()


@router.get("/{investment_id}", response_model=Investment)
async def get_investment(
    investment_id: str,
    repo: Repository = Depends(get_repository),
):
    """取得單一投資"""
    investment = await repo.get_investment(investment_id)
    if investment is None:
        raise NotFoundError("Investment not found")
    return investment


@router.post("", response_model=Investment, status_code=status.HTTP_201_CREATED)
async def create_investment(
    data: InvestmentCreate,
    user: User = Depends(require_writer),
    repo: Repository = Depends(get_repository),
):
    """
    新增投資

    持有比例必須加總為 100，成功後自動產生 Purchase 交易紀錄。
    """
    service = InvestmentService(repo)
    return await service.create_investment(data, actor=user.username)


@router.put("/{investment_id}", response_model=Investment)
async def update_investment(
    investment_id: str,
    data: InvestmentUpdate,
    user: User = Depends(require_writer),
    repo: Repository = Depends(get_repository),
):
    """修改投資（部分欄位），成功後自動產生 Edit 交易紀錄"""
    service = InvestmentService(repo)
    return await service.update_investment(investment_id, data, actor=user.username)


@router.delete("/{investment_id}", response_model=MessageResponse)
async def delete_investment(
    investment_id: str,
    data: InvestmentDelete | None = Body(default=None),
    user: User = Depends(require_writer),
    repo: Repository = Depends(get_repository),
):
    """刪除投資，成功後自動產生 Deletion 交易紀錄"""
    actor = (data.deleted_by if data else None) or user.username
    service = InvestmentService(repo)
    investment = await service.delete_investment(investment_id, actor=actor)
    return MessageResponse(message=f"Investment '{investment.name}' deleted")
