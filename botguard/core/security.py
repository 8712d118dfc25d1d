"""
Module bảo mật - Hash mật khẩu và JWT access token
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from passlib.context import CryptContext

from botguard.core.config import get_settings
from botguard.core.exceptions import InvalidToken, TokenExpired

settings = get_settings()
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Tạo hash cho mật khẩu người dùng.

    Args:
        password: Mật khẩu gốc

    Returns:
        Chuỗi hash
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Kiểm tra mật khẩu có đúng với hash không.

    Args:
        plain_password: Mật khẩu gốc
        hashed_password: Hash đã lưu

    Returns:
        True nếu mật khẩu đúng, False ngược lại
    """
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    subject: Union[str, int], expires_delta: Optional[timedelta] = None
) -> str:
    """
    Tạo JWT access token.

    Args:
        subject: Subject của token (user id)
        expires_delta: Thời gian hết hạn, mặc định lấy từ cấu hình

    Returns:
        JWT token dạng chuỗi
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"exp": now + expires_delta, "iat": now, "sub": str(subject)}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Giải mã JWT token.

    Raises:
        InvalidToken: Khi token không hợp lệ
        TokenExpired: Khi token đã hết hạn
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpired()
    except InvalidTokenError:
        raise InvalidToken()
