import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Dict, Any, Optional

from botguard.core.config import get_settings
from botguard.logging.formatters import JSONFormatter, ColorizedFormatter
from botguard.logging.filters import SensitiveDataFilter, SecurityAuditFilter

__all__ = ["get_logger", "setup_logging", "RotatingSecureFileHandler"]

settings = get_settings()


class RotatingSecureFileHandler(logging.handlers.RotatingFileHandler):
    """
    Rotating file handler tạo file log với quyền hạn giới hạn.
    """

    def __init__(
        self,
        filename,
        mode="a",
        maxBytes=0,
        backupCount=0,
        encoding=None,
        delay=False,
        permissions=0o600,  # Chỉ owner đọc/ghi
    ):
        self.permissions = permissions
        log_dir = os.path.dirname(str(filename))
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        super().__init__(filename, mode, maxBytes, backupCount, encoding, delay)

    def _open(self):
        stream = super()._open()
        if self.permissions and os.name != "nt":
            os.chmod(self.baseFilename, self.permissions)
        return stream


def _build_formatter() -> logging.Formatter:
    if settings.LOG_FORMAT == "json":
        return JSONFormatter()
    return ColorizedFormatter()


def get_logger(name: str, extra: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Lấy logger với cấu hình thích hợp.

    Logger con không tự gắn handler mà đẩy log lên root logger (được cấu hình
    bởi `setup_logging`); khi root chưa có handler nào thì gắn một console
    handler riêng để log không bị mất.

    Args:
        name: Tên logger
        extra: Thông tin bổ sung cho tất cả log message

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(log_level)

    if not logger.handlers and not logging.getLogger().handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(_build_formatter())
        console_handler.addFilter(SensitiveDataFilter())
        logger.addHandler(console_handler)
        logger.propagate = False

    if extra:
        return logging.LoggerAdapter(logger, extra)

    return logger


def setup_logging() -> None:
    """
    Thiết lập logging cho ứng dụng: console handler trên root logger, và
    trong production thêm file `security.log` cho các sự kiện bảo mật.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    sensitive_filter = SensitiveDataFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(_build_formatter())
    console_handler.setLevel(log_level)
    console_handler.addFilter(sensitive_filter)
    root_logger.addHandler(console_handler)

    # Logger riêng đã gắn handler trước khi root được cấu hình thì chuyển về root
    for logger_name in list(logging.root.manager.loggerDict):
        if not logger_name.startswith("botguard"):
            continue
        existing = logging.getLogger(logger_name)
        for handler in list(existing.handlers):
            existing.removeHandler(handler)
        existing.propagate = True

    logging.getLogger("uvicorn.access").setLevel(log_level)
    logging.getLogger("uvicorn.error").setLevel(log_level)

    if settings.is_production:
        log_dir = Path(settings.LOG_DIR)
        security_handler = RotatingSecureFileHandler(
            log_dir / "security.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
        )
        security_handler.setFormatter(JSONFormatter())
        security_handler.addFilter(sensitive_filter)
        security_handler.addFilter(SecurityAuditFilter())
        security_handler.setLevel(logging.INFO)
        root_logger.addHandler(security_handler)
