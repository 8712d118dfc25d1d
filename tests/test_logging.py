import json
import logging

from botguard.logging.filters import SensitiveDataFilter
from botguard.logging.formatters import JSONFormatter


def _record(msg, *args, **extra):
    record = logging.LogRecord(
        name="botguard.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_masks_key_value_pairs():
    record = _record("verify secret=abc123 token: xyz remoteip=203.0.113.9")

    assert SensitiveDataFilter().filter(record) is True
    assert "abc123" not in record.msg
    assert "xyz" not in record.msg
    assert "remoteip=203.0.113.9" in record.msg


def test_masks_json_fields():
    payload = json.dumps({"turnstileSecretKey": "ts-secret", "siteKey": "ts-site"})
    record = _record("saving %s", payload)

    SensitiveDataFilter().filter(record)

    assert "ts-secret" not in record.getMessage()
    assert "ts-site" in record.getMessage()
    assert record.args == ()


def test_custom_fields():
    masked = SensitiveDataFilter(sensitive_fields=["pin"]).mask("pin=1234 password=x")

    assert "1234" not in masked
    assert "password=x" in masked


def test_json_formatter_includes_extra_and_redacts():
    record = _record("login failed", path="/api/v1/auth/login", password="hunter2")

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "login failed"
    assert data["path"] == "/api/v1/auth/login"
    assert data["password"] != "hunter2"
