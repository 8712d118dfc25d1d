"""
Core module - Chứa các thành phần cốt lõi của ứng dụng

Module này bao gồm:
- Config: Cấu hình ứng dụng
- Exceptions: Các exception tùy chỉnh
- DB: Engine và session SQLAlchemy
- Seed: Dữ liệu khởi tạo
"""

from botguard.core.config import get_settings, Settings
from botguard.core.exceptions import (
    APIException,
    BadRequestException,
    UnauthorizedException,
    ForbiddenException,
    ConflictException,
    ServiceUnavailableException,
    CaptchaVerificationFailed,
    CaptchaUnavailable,
    TokenException,
    InvalidToken,
    TokenExpired,
)

__all__ = [
    "get_settings",
    "Settings",
    "APIException",
    "BadRequestException",
    "UnauthorizedException",
    "ForbiddenException",
    "ConflictException",
    "ServiceUnavailableException",
    "CaptchaVerificationFailed",
    "CaptchaUnavailable",
    "TokenException",
    "InvalidToken",
    "TokenExpired",
]
