"""
Services Package

Business logic: cấu hình và xác thực captcha, settings, đăng nhập / đăng ký.
"""

from botguard.services.captcha_service import CaptchaService, widget_script_url
from botguard.services.setting_service import SettingService
from botguard.services.auth_service import AuthService

__all__ = [
    "CaptchaService",
    "widget_script_url",
    "SettingService",
    "AuthService",
]
