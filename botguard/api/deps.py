from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from botguard.core.config import get_settings
from botguard.core.db import get_session
from botguard.core.exceptions import (
    ForbiddenException,
    TokenException,
    TokenExpired,
    UnauthorizedException,
)
from botguard.core.security import decode_token
from botguard.logging.setup import get_logger
from botguard.models.user import User
from botguard.repositories.user_repo import UserRepository

settings = get_settings()
logger = get_logger("botguard.auth_deps")
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login", auto_error=False
)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_session),
) -> User:
    """
    Xác thực người dùng hiện tại từ JWT token.

    Raises:
        UnauthorizedException: Thiếu token, token không hợp lệ hoặc user không tồn tại
    """
    if not token:
        raise UnauthorizedException()

    try:
        payload = decode_token(token)
        user_id = int(payload.get("sub"))
    except TokenExpired:
        raise UnauthorizedException(detail="Token expired", code="token_expired")
    except (TokenException, TypeError, ValueError):
        raise UnauthorizedException(detail="Invalid token", code="invalid_token")

    user = await UserRepository(db).get_by_id(user_id)
    if not user or not user.is_active:
        raise UnauthorizedException(detail="User not found or inactive")
    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        logger.warning(f"User id={current_user.id} tried to access an admin endpoint")
        raise ForbiddenException(detail="Admin privileges required")
    return current_user
