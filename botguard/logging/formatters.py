import json
import logging
import datetime
from typing import Optional, List

# Thuộc tính chuẩn của LogRecord, không đưa vào phần "extra" khi format JSON
_RESERVED_ATTRS = set(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime", "original_msg"}


class JSONFormatter(logging.Formatter):
    """
    Format log messages as JSON for machine readability.
    Hữu ích cho việc phân tích log bằng các công cụ như ELK stack.
    """

    def __init__(
        self,
        fields_to_hide: Optional[List[str]] = None,
        time_format: str = "%Y-%m-%d %H:%M:%S",
    ):
        super().__init__()
        self.fields_to_hide = fields_to_hide or ["password", "token", "secret"]
        self.time_format = time_format

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record thành JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string
        """
        log_data = {
            "timestamp": datetime.datetime.fromtimestamp(record.created).strftime(
                self.time_format
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Extra attributes passed through `extra=`
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key.startswith("_") or key in log_data:
                continue
            if any(field in key.lower() for field in self.fields_to_hide):
                log_data[key] = "***REDACTED***"
                continue
            try:
                json.dumps({key: value})
                log_data[key] = value
            except (TypeError, OverflowError):
                log_data[key] = str(value)

        return json.dumps(log_data)


class ColorizedFormatter(logging.Formatter):
    """
    Format log messages with colors for better readability in console.
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[41m",  # Red background
        "RESET": "\033[0m",
    }

    def __init__(self, fmt: str = None, time_format: str = "%Y-%m-%d %H:%M:%S"):
        if not fmt:
            fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        super().__init__(fmt=fmt, datefmt=time_format)

    def format(self, record: logging.LogRecord) -> str:
        log_message = super().format(record)
        level_name = record.levelname

        if level_name in self.COLORS:
            return f"{self.COLORS[level_name]}{log_message}{self.COLORS['RESET']}"
        return log_message
