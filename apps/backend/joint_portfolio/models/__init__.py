"""JointPortfolio ORM Models 套件"""

from joint_portfolio.models.user import User, Role
from joint_portfolio.models.investment import Investment, InvestmentType
from joint_portfolio.models.transaction import Transaction, TransactionAction
from joint_portfolio.models.sale import Sale

__all__ = [
    "User",
    "Role",
    "Investment",
    "InvestmentType",
    "Transaction",
    "TransactionAction",
    "Sale",
]
