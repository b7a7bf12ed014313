"""JointPortfolio：兩人共同持有的投資紀錄 API"""

__version__ = "0.1.0"
