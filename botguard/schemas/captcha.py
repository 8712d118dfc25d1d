from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field


class CaptchaType(str, Enum):
    TURNSTILE = "turnstile"
    RECAPTCHA = "recaptcha"


# Các key captcha trong bảng settings
CAPTCHA_ENABLED_KEY = "captchaEnabled"
CAPTCHA_TYPE_KEY = "captchaType"
LEGACY_SITE_KEY = "captchaSiteKey"
LEGACY_SECRET_KEY = "captchaSecretKey"
TURNSTILE_SITE_KEY = "turnstileSiteKey"
TURNSTILE_SECRET_KEY = "turnstileSecretKey"
RECAPTCHA_SITE_KEY = "recaptchaSiteKey"
RECAPTCHA_SECRET_KEY = "recaptchaSecretKey"

CAPTCHA_SETTING_KEYS = [
    CAPTCHA_ENABLED_KEY,
    CAPTCHA_TYPE_KEY,
    LEGACY_SITE_KEY,
    LEGACY_SECRET_KEY,
    TURNSTILE_SITE_KEY,
    TURNSTILE_SECRET_KEY,
    RECAPTCHA_SITE_KEY,
    RECAPTCHA_SECRET_KEY,
]

# Key riêng theo nhà cung cấp: (site key, secret key)
PROVIDER_KEYS = {
    CaptchaType.TURNSTILE: (TURNSTILE_SITE_KEY, TURNSTILE_SECRET_KEY),
    CaptchaType.RECAPTCHA: (RECAPTCHA_SITE_KEY, RECAPTCHA_SECRET_KEY),
}


class CaptchaSettings(BaseModel):
    """Cấu hình captcha đã được resolve, dùng nội bộ ở server."""

    enabled: bool = False
    type: CaptchaType = CaptchaType.TURNSTILE
    site_key: str = ""
    secret_key: str = ""


class PublicCaptchaSettings(BaseModel):
    """Cấu hình captcha trả về cho widget ở frontend (không có secret key)."""

    enabled: bool
    type: CaptchaType
    site_key: str = Field("", alias="siteKey")
    script_url: Optional[str] = Field(None, alias="scriptUrl")

    class Config:
        populate_by_name = True


class VerificationResult(BaseModel):
    success: bool
    error_codes: List[str] = Field(default_factory=list)


class CaptchaForm(BaseModel):
    """Toàn bộ credentials của cả hai nhà cung cấp, cho trang quản trị."""

    enabled: bool = False
    type: CaptchaType = CaptchaType.TURNSTILE
    turnstile_site_key: str = Field("", alias="turnstileSiteKey")
    turnstile_secret_key: str = Field("", alias="turnstileSecretKey")
    recaptcha_site_key: str = Field("", alias="recaptchaSiteKey")
    recaptcha_secret_key: str = Field("", alias="recaptchaSecretKey")

    class Config:
        populate_by_name = True

    @property
    def is_turnstile_configured(self) -> bool:
        return bool(self.turnstile_site_key and self.turnstile_secret_key)

    @property
    def is_recaptcha_configured(self) -> bool:
        return bool(self.recaptcha_site_key and self.recaptcha_secret_key)
