"""
存取控制服務

以角色政策表決定「是否需要密碼」與「是否可寫入」，
新增角色只需加入一筆政策，不需要新增條件分支。
領域規則層不做任何權限檢查，由 API 依賴注入在呼叫前把關。
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from joint_portfolio.config import Settings
from joint_portfolio.errors import ForbiddenError, UnauthorizedError, ValidationError
from joint_portfolio.models.user import Role
from joint_portfolio.repository.base import Repository
from joint_portfolio.schemas.user import User, UserCreate

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


@dataclass(frozen=True)
class RolePolicy:
    """角色政策"""
    requires_password: bool
    can_write: bool


ROLE_POLICIES: dict[Role, RolePolicy] = {
    Role.ADMIN: RolePolicy(requires_password=True, can_write=True),
    Role.VIEWER: RolePolicy(requires_password=False, can_write=False),
}


def policy_for(role: Role) -> RolePolicy:
    return ROLE_POLICIES[role]


async def register_user(
    repo: Repository,
    username: str,
    display_name: str,
    role: Role,
    password: str | None = None,
) -> User:
    """
    建立用戶

    需要密碼的角色必須提供密碼；不需要密碼的角色不得設定密碼。
    """
    policy = policy_for(role)
    if policy.requires_password and not password:
        raise ValidationError(f"Role '{role.value}' requires a password")
    if not policy.requires_password and password:
        raise ValidationError(f"Role '{role.value}' does not use a password")

    user = await repo.create_user(
        UserCreate(
            username=username,
            display_name=display_name,
            role=role,
            hashed_password=pwd_context.hash(password) if password else None,
        )
    )
    logger.info("已建立用戶 %s (%s)", user.username, user.role.value)
    return user


async def authenticate(
    repo: Repository, username: str, password: str | None = None
) -> User:
    """
    以 username 登入；需要密碼的角色另外比對密碼

    Raises:
        UnauthorizedError: 用戶不存在、缺少密碼或密碼錯誤
    """
    user = await repo.get_user_by_username(username)
    if user is None:
        logger.warning("登入失敗：用戶 %s 不存在", username)
        raise UnauthorizedError("Invalid credentials")

    if policy_for(user.role).requires_password:
        if not password or not user.hashed_password:
            logger.warning("登入失敗：用戶 %s 未提供密碼", username)
            raise UnauthorizedError("Invalid credentials")
        if not pwd_context.verify(password, user.hashed_password):
            logger.warning("登入失敗：用戶 %s 密碼錯誤", username)
            raise UnauthorizedError("Invalid credentials")

    return user


def ensure_can_write(user: User) -> None:
    """唯讀角色嘗試寫入時拋出 ForbiddenError"""
    if not policy_for(user.role).can_write:
        raise ForbiddenError("Read-only profile: operation not allowed")


# === JWT Token ===

def create_access_token(user: User, settings: Settings) -> str:
    """產生 JWT Token"""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user.id,
        "role": user.role.value,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
        "iat": now,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> str:
    """
    驗證 JWT Token，回傳 user_id

    Raises:
        UnauthorizedError: Token 無效或已過期
    """
    try:
        payload = jwt.decode(
            token, settings.secret_key, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError as e:
        raise UnauthorizedError("Token expired") from e
    except jwt.PyJWTError as e:
        raise UnauthorizedError("Invalid token") from e

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError("Invalid token")
    return user_id
