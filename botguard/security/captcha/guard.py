"""
Dependency kiểm tra captcha cho các endpoint đăng nhập / đăng ký.

Chỉ kiểm tra khi captcha được bật trong settings. Token được đọc từ trường
`captchaToken` trong body (JSON hoặc form).
"""

import json
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from botguard.core.config import get_settings
from botguard.core.db import get_session
from botguard.core.exceptions import (
    APIException,
    CaptchaUnavailable,
    CaptchaVerificationFailed,
)
from botguard.logging.setup import get_logger
from botguard.services.captcha_service import CaptchaService

settings = get_settings()
logger = get_logger(__name__)

CAPTCHA_TOKEN_FIELD = "captchaToken"


def get_client_ip(request: Request) -> Optional[str]:
    """IP đầu tiên trong X-Forwarded-For, nếu không có thì lấy địa chỉ socket."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    if request.client:
        return request.client.host
    return None


async def extract_captcha_token(request: Request) -> Optional[str]:
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(
        ("application/x-www-form-urlencoded", "multipart/form-data")
    ):
        form = await request.form()
        token = form.get(CAPTCHA_TOKEN_FIELD)
        return token if isinstance(token, str) else None

    body = await request.body()
    if not body:
        return None
    try:
        payload = json.loads(body)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None

    token = payload.get(CAPTCHA_TOKEN_FIELD)
    return token if isinstance(token, str) else None


async def verify_captcha(
    request: Request, db: AsyncSession = Depends(get_session)
) -> None:
    """
    Chặn request khi token captcha không hợp lệ.

    Raises:
        CaptchaVerificationFailed: Nhà cung cấp từ chối token (403)
        CaptchaUnavailable: Lỗi không mong muốn khi CAPTCHA_FAIL_OPEN=False (503)
    """
    try:
        service = CaptchaService(db)
        captcha = await service.get_captcha_settings()

        if not captcha.enabled:
            return

        if not captcha.secret_key:
            logger.warning("Captcha đã bật nhưng chưa cấu hình secret key")
            return

        token = await extract_captcha_token(request)
        remote_ip = get_client_ip(request)

        result = await service.verify_captcha_token(token, remote_ip)

        if not result.success:
            logger.warning(
                f"Xác thực captcha thất bại cho {request.method} {request.url.path} "
                f"từ {remote_ip}: {result.error_codes}"
            )
            raise CaptchaVerificationFailed(error_codes=result.error_codes)

    except APIException:
        raise
    except Exception as e:
        logger.error(f"Lỗi trong kiểm tra captcha: {type(e).__name__}: {e}", exc_info=e)
        if not settings.CAPTCHA_FAIL_OPEN:
            raise CaptchaUnavailable()
        # Fail open: không chặn người dùng khi hệ thống captcha gặp lỗi
