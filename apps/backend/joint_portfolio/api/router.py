"""
API 路由集中註冊
"""

from fastapi import APIRouter

from joint_portfolio.api.auth import router as auth_router
from joint_portfolio.api.users import router as users_router
from joint_portfolio.api.investments import router as investments_router
from joint_portfolio.api.transactions import router as transactions_router
from joint_portfolio.api.sales import router as sales_router
from joint_portfolio.api.summary import router as summary_router

api_router = APIRouter(prefix="/api")
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(investments_router)
api_router.include_router(transactions_router)
api_router.include_router(sales_router)
api_router.include_router(summary_router)
