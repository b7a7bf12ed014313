"""
賣出 API 路由

新增賣出會扣減投資目前價值並產生 Sale 交易紀錄。
"""

from fastapi import APIRouter, Depends, status

from joint_portfolio.api.deps import get_repository, require_writer
from joint_portfolio.errors import NotFoundError
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.sale import Sale, SaleCreate
from joint_portfolio.schemas.user import User
from joint_portfolio.services.investment_service import InvestmentService

router = APIRouter(prefix="/sales", tags=["賣出"])


@router.get("", response_model=list[Sale])
async def list_sales(repo: Repository = Depends(get_repository)):
    """取得所有賣出紀錄（依賣出日期由新到舊）"""
    return await repo.list_sales()


@router.get("/{sale_id}", response_model=Sale)
async def get_sale(sale_id: str, repo: Repository = Depends(get_repository)):
    """取得單一賣出紀錄"""
    sale = await repo.get_sale(sale_id)
    if sale is None:
        raise NotFoundError("Sale not found")
    return sale


@router.post("", response_model=Sale, status_code=status.HTTP_201_CREATED)
async def create_sale(
    data: SaleCreate,
    user: User = Depends(require_writer),
    repo: Repository = Depends(get_repository),
):
    """
    新增賣出

    賣出金額不得超過投資目前價值；所得分配比例必須加總為 100。
    """
    service = InvestmentService(repo)
    return await service.create_sale(data, actor=user.username)
