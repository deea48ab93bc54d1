from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from core.config_service import AppSettings

HIDDEN = "[HIDDEN]"
SENSITIVE_FIELDS = frozenset({"value", "password"})

LOGGER_NAME = "navguard"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logger(settings: Optional[AppSettings] = None, *, name: str = LOGGER_NAME) -> logging.Logger:
    """Configure the navigation logger from ``app`` settings.

    An empty ``log_path`` keeps output on the console only.
    """

    settings = settings or AppSettings()
    logger = logging.getLogger(name)
    logger.setLevel(settings.log_level.upper())
    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        if settings.log_path:
            log_path = Path(settings.log_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
        for handler in handlers:
            handler.setFormatter(formatter)
            logger.addHandler(handler)
    return logger


def redact_parameters(parameters: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: HIDDEN if key in SENSITIVE_FIELDS else value for key, value in parameters.items()}


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ActionLogRecord:
    action: str
    parameters: Dict[str, Any]
    succeeded: bool
    session_actions_used: int
    timestamp: str = field(default_factory=utc_timestamp)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def log_action_record(logger: logging.Logger, record: ActionLogRecord) -> None:
    logger.info(
        "[NAVIGATION] %s: %s",
        record.action,
        {
            "params": record.parameters,
            "result": "success" if record.succeeded else "failed",
            "timestamp": record.timestamp,
            "sessionCount": record.session_actions_used,
        },
    )
