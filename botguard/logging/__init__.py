"""
Module logging - Cung cấp hệ thống ghi log cho ứng dụng.

Module này bao gồm:
- Formatters: Định dạng log messages (JSON, màu sắc)
- Filters: Che thông tin nhạy cảm (secret key, captcha token, mật khẩu), lọc sự kiện bảo mật
- Setup: Thiết lập logging cho ứng dụng
"""

from botguard.logging.setup import get_logger, setup_logging, RotatingSecureFileHandler
from botguard.logging.formatters import JSONFormatter, ColorizedFormatter
from botguard.logging.filters import SensitiveDataFilter, SecurityAuditFilter

__all__ = [
    "get_logger",
    "setup_logging",
    "RotatingSecureFileHandler",
    "JSONFormatter",
    "ColorizedFormatter",
    "SensitiveDataFilter",
    "SecurityAuditFilter",
]
