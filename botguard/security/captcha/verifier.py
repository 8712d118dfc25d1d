"""
Xác thực CAPTCHA - Gọi API siteverify của Cloudflare Turnstile và Google reCAPTCHA v3.

Các hàm ở đây không bao giờ raise: mọi lỗi mạng, timeout, HTTP status lỗi hoặc
body không đọc được đều trả về VerificationResult thất bại với mã
VERIFICATION_ERROR.
"""

from typing import Any, Dict, Optional

import aiohttp

from botguard.core.config import get_settings
from botguard.logging.setup import get_logger
from botguard.schemas.captcha import VerificationResult

settings = get_settings()
logger = get_logger(__name__)

VERIFICATION_ERROR = "VERIFICATION_ERROR"
ACTION_MISMATCH = "action-mismatch"
LOW_SCORE = "low-score"


def _build_payload(token: str, secret_key: str, remote_ip: Optional[str]) -> Dict[str, str]:
    data = {"secret": secret_key, "response": token}
    if remote_ip:
        data["remoteip"] = remote_ip
    return data


def _error_codes(result: Dict[str, Any]) -> list:
    codes = result.get("error-codes") or []
    if isinstance(codes, str):
        return [codes]
    return [str(code) for code in codes]


async def post_siteverify(url: str, data: Dict[str, str]) -> Dict[str, Any]:
    """
    Gửi form-urlencoded tới endpoint siteverify và trả về JSON body.

    Raises:
        aiohttp.ClientError, asyncio.TimeoutError, ValueError khi gọi thất bại
    """
    timeout = aiohttp.ClientTimeout(total=settings.CAPTCHA_VERIFY_TIMEOUT)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        async with session.post(url, data=data) as response:
            response.raise_for_status()
            result = await response.json(content_type=None)

    if not isinstance(result, dict):
        raise ValueError(f"Unexpected siteverify response: {result!r}")
    return result


async def verify_turnstile_token(
    token: str, secret_key: str, remote_ip: Optional[str] = None
) -> VerificationResult:
    """
    Xác thực token Cloudflare Turnstile.

    Args:
        token: Token do widget sinh ra
        secret_key: Secret key của site
        remote_ip: Địa chỉ IP người dùng (nếu có)

    Returns:
        VerificationResult, success chỉ khi API trả về `success: true`
    """
    try:
        result = await post_siteverify(
            settings.TURNSTILE_VERIFY_URL, _build_payload(token, secret_key, remote_ip)
        )
    except Exception as e:
        logger.error(f"Lỗi khi gọi API Turnstile: {type(e).__name__}: {e}")
        return VerificationResult(success=False, error_codes=[VERIFICATION_ERROR])

    error_codes = _error_codes(result)
    success = result.get("success") is True
    if not success:
        logger.warning(f"Turnstile xác thực thất bại: {error_codes}")

    return VerificationResult(success=success, error_codes=error_codes)


async def verify_recaptcha_token(
    token: str, secret_key: str, remote_ip: Optional[str] = None
) -> VerificationResult:
    """
    Xác thực token Google reCAPTCHA v3.

    reCAPTCHA v3 trả về score từ 0.0 đến 1.0; token được coi là của người thật
    khi không có score hoặc score >= RECAPTCHA_MIN_SCORE.

    Args:
        token: reCAPTCHA token
        secret_key: Secret key của site
        remote_ip: Địa chỉ IP người dùng (nếu có)

    Returns:
        VerificationResult
    """
    try:
        result = await post_siteverify(
            settings.RECAPTCHA_VERIFY_URL, _build_payload(token, secret_key, remote_ip)
        )
    except Exception as e:
        logger.error(f"Lỗi khi gọi API reCAPTCHA: {type(e).__name__}: {e}")
        return VerificationResult(success=False, error_codes=[VERIFICATION_ERROR])

    error_codes = _error_codes(result)

    if result.get("success") is not True:
        logger.warning(f"reCAPTCHA xác thực thất bại: {error_codes}")
        return VerificationResult(success=False, error_codes=error_codes)

    score = result.get("score")
    if score is not None:
        try:
            score = float(score)
        except (TypeError, ValueError):
            logger.warning(f"reCAPTCHA trả về score không hợp lệ: {score!r}")
            return VerificationResult(
                success=False, error_codes=error_codes + [VERIFICATION_ERROR]
            )
        if score < settings.RECAPTCHA_MIN_SCORE:
            logger.warning(
                f"reCAPTCHA v3 score quá thấp: {score} < {settings.RECAPTCHA_MIN_SCORE}"
            )
            return VerificationResult(success=False, error_codes=error_codes + [LOW_SCORE])

    expected_action = settings.RECAPTCHA_EXPECTED_ACTION
    action = result.get("action")
    if expected_action and action is not None and action != expected_action:
        logger.warning(f"reCAPTCHA action không khớp: {action} != {expected_action}")
        return VerificationResult(
            success=False, error_codes=error_codes + [ACTION_MISMATCH]
        )

    return VerificationResult(success=True, error_codes=error_codes)
