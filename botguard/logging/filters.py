import logging
import re
from typing import List, Optional


class SensitiveDataFilter(logging.Filter):
    """
    Filter để che giấu thông tin nhạy cảm trong log messages.

    Nhận diện các dạng `field=value`, `field: value`, `"field": "value"` và
    `'field': 'value'`, trong đó tên field chứa một trong các từ khóa nhạy cảm
    (ví dụ `secret` khớp cả `secret_key` và `turnstileSecretKey`).
    """

    def __init__(
        self,
        name: str = "",
        sensitive_fields: Optional[List[str]] = None,
        replacement: str = "***REDACTED***",
    ):
        super().__init__(name)
        self.sensitive_fields = sensitive_fields or [
            "password",
            "secret",
            "token",
            "authorization",
        ]
        self.replacement = replacement
        words = "|".join(re.escape(field) for field in self.sensitive_fields)
        name_part = rf"[\w-]*(?:{words})[\w-]*"
        self._patterns = [
            re.compile(rf"""(["']{name_part}["']\s*:\s*)(["'])(.*?)\2""", re.I),
            re.compile(rf"""(\b{name_part}\s*[=:]\s*)([^\s,;'"]+)""", re.I),
        ]

    def mask(self, message: str) -> str:
        quoted, plain = self._patterns
        message = quoted.sub(
            lambda m: f"{m.group(1)}{m.group(2)}{self.replacement}{m.group(2)}",
            message,
        )
        return plain.sub(lambda m: f"{m.group(1)}{self.replacement}", message)

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Filter log record, masking sensitive data.

        Args:
            record: Log record to filter

        Returns:
            True to include the record in log output
        """
        if not hasattr(record, "original_msg"):
            record.original_msg = record.msg

        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            message = str(record.msg)

        record.msg = self.mask(message)
        record.args = ()
        return True


class SecurityAuditFilter(logging.Filter):
    """
    Filter để chỉ giữ lại các sự kiện bảo mật quan trọng.
    """

    def __init__(
        self, name: str = "", security_levels: Optional[List[str]] = None
    ):
        super().__init__(name)
        self.security_levels = set(security_levels or ["WARNING", "ERROR", "CRITICAL"])

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("botguard.security"):
            return True

        msg = record.getMessage().lower()
        security_keywords = ["login", "signup", "captcha", "token", "unauthorized", "forbidden"]
        if any(keyword in msg for keyword in security_keywords):
            return True

        return record.levelname in self.security_levels
