"""Process-wide logging setup shared by the HTTP and stdio entry points."""

from __future__ import annotations

import json
import logging
from typing import IO, Optional

from secret_mcp.config import SecretConfig, default_config

EXTRA_FIELDS = ("tool", "request_id", "error", "auth", "query_type")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(config: SecretConfig = default_config, *, stream: Optional[IO[str]] = None) -> None:
    """Install a root handler; logs go to stderr unless ``stream`` is given."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    handler = logging.StreamHandler(stream)
    if config.log_format.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=level, handlers=[handler], force=True)
