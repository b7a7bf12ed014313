"""
投資總覽服務

計算儀表板所需的總值、損益與兩位參與者各自持有的價值。
各參與者的價值以每筆投資的持有比例加權計算。
"""

from decimal import Decimal, ROUND_HALF_UP

from joint_portfolio.config import Settings
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.investment import Investment
from joint_portfolio.schemas.summary import ParticipantShare, PortfolioSummary

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def _pct(part: Decimal, total: Decimal) -> Decimal:
    """百分比，總數為 0 時回傳 0"""
    if total <= 0:
        return Decimal("0.00")
    return (part / total * HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)


def _share(
    username: str,
    investments: list[Investment],
    percentage_of,
    total_current: Decimal,
) -> ParticipantShare:
    current = sum(
        (inv.current_value * percentage_of(inv) / HUNDRED for inv in investments),
        Decimal("0"),
    ).quantize(CENT, rounding=ROUND_HALF_UP)
    initial = sum(
        (inv.initial_value * percentage_of(inv) / HUNDRED for inv in investments),
        Decimal("0"),
    ).quantize(CENT, rounding=ROUND_HALF_UP)
    return ParticipantShare(
        username=username,
        current_value=current,
        initial_value=initial,
        gain=current - initial,
        percentage_of_total=_pct(current, total_current),
    )


class SummaryService:
    """投資總覽業務邏輯"""

    def __init__(self, repo: Repository, settings: Settings):
        self.repo = repo
        self.settings = settings

    async def get_summary(self) -> PortfolioSummary:
        """
        計算投資組合總覽

        邏輯：
        1. 加總所有投資的投入金額與目前價值
        2. 依每筆投資的持有比例拆分兩位參與者的價值
        3. 加總所有賣出所得
        """
        investments = await self.repo.list_investments()
        sales = await self.repo.list_sales()

        total_initial = sum((i.initial_value for i in investments), Decimal("0"))
        total_current = sum((i.current_value for i in investments), Decimal("0"))
        total_gain = total_current - total_initial

        return PortfolioSummary(
            investment_count=len(investments),
            total_initial=total_initial,
            total_current=total_current,
            total_gain=total_gain,
            gain_percentage=_pct(total_gain, total_initial),
            total_sales=sum((s.sale_price for s in sales), Decimal("0")),
            alle=_share(
                self.settings.admin_username,
                investments,
                lambda inv: inv.alle_percentage,
                total_current,
            ),
            ali=_share(
                self.settings.viewer_username,
                investments,
                lambda inv: inv.ali_percentage,
                total_current,
            ),
        )
