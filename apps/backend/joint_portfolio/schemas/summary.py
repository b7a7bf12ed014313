"""
投資總覽 Schema

儀表板用的總值、損益與兩位參與者各自的持有價值。
"""

from decimal import Decimal

from joint_portfolio.schemas.common import CamelModel


class ParticipantShare(CamelModel):
    """單一參與者的持有摘要"""
    username: str
    current_value: Decimal
    initial_value: Decimal
    gain: Decimal
    percentage_of_total: Decimal


class PortfolioSummary(CamelModel):
    """投資組合總覽"""
    investment_count: int
    total_initial: Decimal
    total_current: Decimal
    total_gain: Decimal
    gain_percentage: Decimal
    total_sales: Decimal
    alle: ParticipantShare
    ali: ParticipantShare
