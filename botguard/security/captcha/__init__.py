"""
Module bảo mật CAPTCHA - Xác minh token Cloudflare Turnstile / Google reCAPTCHA v3.

Module này cung cấp:
- verifier: gọi API siteverify của từng nhà cung cấp
- guard: dependency FastAPI chặn request có token không hợp lệ
  (import trực tiếp từ botguard.security.captcha.guard)
"""

from botguard.security.captcha.verifier import (
    verify_turnstile_token,
    verify_recaptcha_token,
)

__all__ = [
    "verify_turnstile_token",
    "verify_recaptcha_token",
]
