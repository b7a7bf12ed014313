"""
投資總覽 API 路由

儀表板使用的總值、損益與參與者持有價值。
"""

from fastapi import APIRouter, Depends

from joint_portfolio.api.deps import get_app_settings, get_repository
from joint_portfolio.config import Settings
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.summary import PortfolioSummary
from joint_portfolio.services.summary_service import SummaryService

router = APIRouter(prefix="/summary", tags=["總覽"])


@router.get("", response_model=PortfolioSummary)
async def get_summary(
    repo: Repository = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
):
    """計算投資組合總覽"""
    return await SummaryService(repo, settings).get_summary()
