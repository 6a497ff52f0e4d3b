import io
import json
import logging

from secret_mcp.config import SecretConfig, default_config
from secret_mcp.logging_setup import JsonFormatter, configure_logging


def test_logging_level_config():
    level = getattr(logging, default_config.log_level.upper(), logging.INFO)
    assert level in (
        logging.DEBUG,
        logging.INFO,
        logging.WARNING,
        logging.ERROR,
        logging.CRITICAL,
    )


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("secret_mcp.test", logging.WARNING, __file__, 1, "tool failed", None, None)
    record.tool = "query_token_balance"
    record.auth = "permit"
    payload = json.loads(JsonFormatter().format(record))
    assert payload["message"] == "tool failed"
    assert payload["tool"] == "query_token_balance"
    assert payload["auth"] == "permit"
    assert "request_id" not in payload


def test_configure_logging_plain_stream():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    stream = io.StringIO()
    try:
        configure_logging(SecretConfig(log_format="plain", log_level="debug"), stream=stream)
        logging.getLogger("secret_mcp.test").debug("hello")
        assert "DEBUG secret_mcp.test: hello" in stream.getvalue()
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
