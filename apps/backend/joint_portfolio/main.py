"""
JointPortfolio FastAPI 應用程式入口

包含 CORS 設定、全域錯誤處理中介軟體、領域例外對應、
啟動事件（初始化資料庫與預設資料）。
儲存層由 create_app() 建立或注入，測試可傳入獨立的 MemoryRepository。
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from joint_portfolio.api.router import api_router
from joint_portfolio.config import Settings, get_settings
from joint_portfolio.database import create_engine
from joint_portfolio.errors import DomainError
from joint_portfolio.repository import MemoryRepository, Repository, SqlRepository
from joint_portfolio.schemas.common import ErrorResponse
from joint_portfolio.services.seed import seed_default_data

# 設定日誌
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_repository(settings: Settings) -> Repository:
    """依設定建立儲存後端"""
    if settings.storage_backend == "memory":
        return MemoryRepository()
    return SqlRepository(create_engine(settings))


def _error_response(status_code: int, message: str, errors=None) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        errors=jsonable_encoder(errors) if errors is not None else None,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
    )


def create_app(
    settings: Settings | None = None,
    repository: Repository | None = None,
) -> FastAPI:
    """
    建立 FastAPI 應用

    Args:
        settings: 應用程式設定，省略時讀取環境變數
        repository: 儲存層實例，省略時依 settings.storage_backend 建立
    """
    settings = settings or get_settings()
    if repository is None:
        repository = build_repository(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """應用程式生命週期管理"""
        # === 啟動時 ===
        logger.info("🚀 JointPortfolio API 啟動中...")
        logger.info("環境: %s, 儲存後端: %s", settings.app_env, type(repository).__name__)

        if isinstance(repository, SqlRepository):
            await repository.init_schema()
            logger.info("✅ 資料庫初始化完成")

        if settings.seed_default_data:
            await seed_default_data(repository, settings)

        yield

        # === 關閉時 ===
        logger.info("JointPortfolio API 關閉中...")
        await repository.close()
        logger.info("👋 JointPortfolio API 已關閉")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="兩人共同持有的投資紀錄 API",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository

    # === CORS 中介軟體 ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === 全域錯誤處理 ===

    @app.middleware("http")
    async def error_handling_middleware(request: Request, call_next):
        """
        全域錯誤處理與請求日誌中介軟體

        - 記錄每個請求的處理時間
        - 捕獲未預期的例外並回傳統一格式，不洩漏內部細節
        """
        start_time = time.time()

        try:
            response = await call_next(request)

            process_time = time.time() - start_time
            logger.info(
                "%s %s - %d (%.3fs)",
                request.method,
                request.url.path,
                response.status_code,
                process_time,
            )

            response.headers["X-Process-Time"] = f"{process_time:.3f}"
            return response

        except Exception:
            process_time = time.time() - start_time
            logger.exception(
                "%s %s - 500 (%.3fs)",
                request.method,
                request.url.path,
                process_time,
            )
            return _error_response(500, "Internal Server Error")

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        """領域例外對應 HTTP 狀態碼"""
        if exc.status_code >= 500:
            logger.error("%s %s - %s", request.method, request.url.path, exc.message)
        return _error_response(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """請求格式錯誤一律回傳 400 與逐項錯誤"""
        return _error_response(400, "Invalid data", exc.errors())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    # === 註冊路由 ===
    app.include_router(api_router)

    # === 健康檢查 ===

    @app.get("/health", tags=["系統"])
    async def health_check():
        """API 健康檢查"""
        return {
            "status": "healthy",
            "version": settings.app_version,
            "environment": settings.app_env,
        }

    return app


app = create_app()
