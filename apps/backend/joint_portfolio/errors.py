"""
領域例外定義

服務層與儲存層只拋出這些例外，由 main.py 註冊的處理器統一轉為
HTTP 狀態碼與 {message, errors?} 回應格式。
"""

from typing import Any


class DomainError(Exception):
    """所有領域錯誤的基礎類別"""
    status_code: int = 500

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(DomainError):
    """輸入格式錯誤或違反約束（如持有比例加總不為 100）"""
    status_code = 400


class InvalidSaleError(DomainError):
    """賣出金額超過投資目前價值"""
    status_code = 400


class UnauthorizedError(DomainError):
    """帳號或密碼錯誤、缺少或無效的 Token"""
    status_code = 401


class ForbiddenError(DomainError):
    """角色沒有寫入權限"""
    status_code = 403


class NotFoundError(DomainError):
    """參照的用戶、投資或賣出紀錄不存在"""
    status_code = 404
