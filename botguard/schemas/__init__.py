from botguard.schemas.captcha import (
    CaptchaType,
    CaptchaSettings,
    PublicCaptchaSettings,
    VerificationResult,
    CaptchaForm,
)
from botguard.schemas.setting import SettingInfo, SettingUpdate
from botguard.schemas.auth import (
    UserResponse,
    SignupRequest,
    LoginRequest,
    TokenResponse,
)

__all__ = [
    "CaptchaType",
    "CaptchaSettings",
    "PublicCaptchaSettings",
    "VerificationResult",
    "CaptchaForm",
    "SettingInfo",
    "SettingUpdate",
    "UserResponse",
    "SignupRequest",
    "LoginRequest",
    "TokenResponse",
]
