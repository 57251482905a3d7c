"""Structured JSON logger for attach and link operations."""

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from cdelink.constants import ERROR_TRUNCATION_CHARS
from cdelink.logging_config import LOG_DATEFMT, LOG_FORMAT

__all__ = ["OperationLogger", "LOG_FORMAT", "LOG_DATEFMT"]


class OperationLogger:
    """One JSON line per store-mutating operation."""

    def __init__(self, log_dir: Path, level: str = "INFO") -> None:
        self._log_dir = log_dir
        self._log_dir.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger("cdelink.operations")
        self._logger.setLevel(getattr(logging, level.upper()))

        if not self._logger.handlers:
            handler = logging.FileHandler(log_dir / "operations.log")
            handler.setFormatter(logging.Formatter("%(message)s"))
            self._logger.addHandler(handler)

    def log_attach(
        self,
        project_id: str,
        requested: int,
        inserted: int,
        skipped: int,
        outcome: str,
        duration_ms: float,
    ) -> None:
        self._logger.info(
            json.dumps({
                "type": "attach",
                "timestamp": datetime.now(UTC).isoformat(),
                "project_id": project_id,
                "requested": requested,
                "inserted": inserted,
                "skipped": skipped,
                "outcome": outcome,
                "duration_ms": duration_ms,
            })
        )

    def log_link(
        self,
        action: str,
        entity_kind: str,
        entity_id: str,
        evidence_id: str,
        outcome: str,
    ) -> None:
        self._logger.info(
            json.dumps({
                "type": "link",
                "timestamp": datetime.now(UTC).isoformat(),
                "action": action,
                "entity_kind": entity_kind,
                "entity_id": entity_id,
                "evidence_id": evidence_id,
                "outcome": outcome,
            })
        )

    def log_error(
        self,
        component: str,
        error: str,
    ) -> None:
        self._logger.error(
            json.dumps({
                "type": "error",
                "timestamp": datetime.now(UTC).isoformat(),
                "component": component,
                "error": error[:ERROR_TRUNCATION_CHARS],
            })
        )
