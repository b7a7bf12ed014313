"""
預設資料寫入

資料庫為空時建立兩位參與者與三筆範例投資，
範例投資透過 InvestmentService 建立，因此會一併產生買入紀錄。
"""

import logging
from datetime import date
from decimal import Decimal

from joint_portfolio.config import Settings
from joint_portfolio.models.investment import InvestmentType
from joint_portfolio.models.user import Role
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.investment import InvestmentCreate
from joint_portfolio.services.access import register_user
from joint_portfolio.services.investment_service import InvestmentService

logger = logging.getLogger(__name__)

# 預設範例投資
SAMPLE_INVESTMENTS = [
    {
        "name": "Vanguard FTSE All-World",
        "symbol": "VWCE",
        "type": InvestmentType.ETF,
        "initial_value": Decimal("8000.00"),
        "current_value": Decimal("9200.00"),
        "alle_percentage": 75,
        "ali_percentage": 25,
        "purchase_date": date(2023, 6, 15),
    },
    {
        "name": "Apple Inc.",
        "symbol": "AAPL",
        "type": InvestmentType.STOCK,
        "initial_value": Decimal("5000.00"),
        "current_value": Decimal("5800.00"),
        "alle_percentage": 80,
        "ali_percentage": 20,
        "purchase_date": date(2023, 8, 20),
    },
    {
        "name": "iShares Core MSCI World",
        "symbol": "IWDA",
        "type": InvestmentType.ETF,
        "initial_value": Decimal("7000.00"),
        "current_value": Decimal("7589.34"),
        "alle_percentage": 70,
        "ali_percentage": 30,
        "purchase_date": date(2023, 9, 10),
    },
]


async def seed_default_data(repo: Repository, settings: Settings) -> bool:
    """
    寫入預設用戶與範例投資（若尚無任何用戶）

    Returns:
        是否有寫入資料
    """
    if not await repo.is_empty():
        users = await repo.list_users()
        logger.info("用戶已存在 (%d 筆)，略過預設資料", len(users))
        return False

    async with repo.atomic():
        await register_user(
            repo,
            username=settings.admin_username,
            display_name=settings.admin_display_name,
            role=Role.ADMIN,
            password=settings.admin_password,
        )
        await register_user(
            repo,
            username=settings.viewer_username,
            display_name=settings.viewer_display_name,
            role=Role.VIEWER,
        )

        service = InvestmentService(repo)
        for inv_data in SAMPLE_INVESTMENTS:
            await service.create_investment(
                InvestmentCreate(**inv_data, created_by=settings.admin_username)
            )

    logger.info("✅ 預設資料已寫入 (2 位用戶, %d 筆投資)", len(SAMPLE_INVESTMENTS))
    return True
