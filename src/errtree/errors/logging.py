from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import TraceConfig

LOGGER_NAME = "errtree"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class JsonlEventLogger:
    """
    Writes reporting-path events as JSON lines.

    Each line is a dict that includes at least:
    - time_utc
    - run_id
    - event
    - level
    - exc_type, exc_msg (optional)
    - report_path (optional)

    Usage example
    -------------
        ev = JsonlEventLogger(path=Path("logs/events_abc.jsonl"), run_id="abc")
        ev.write(event="failure_reported", level="ERROR", exc=exc, report_path=path)
    """
    path: Path
    run_id: str

    def write(
        self,
        *,
        event: str,
        level: str,
        exc: Optional[BaseException] = None,
        report_path: Optional[Path] = None,
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "time_utc": _utc_now_iso(),
            "run_id": self.run_id,
            "event": event,
            "level": level,
        }
        if message:
            payload["message"] = message
        if exc is not None:
            payload["exc_type"] = type(exc).__name__
            payload["exc_msg"] = str(exc)
        if report_path is not None:
            payload["report_path"] = str(report_path)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")


class _RunContextFilter(logging.Filter):
    def __init__(self, *, run_id: str) -> None:
        super().__init__()
        self._run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        if not hasattr(record, "run_id"):
            setattr(record, "run_id", self._run_id)
        return True


def configure_logging(*, cfg: TraceConfig) -> tuple[logging.Logger, Optional[JsonlEventLogger]]:
    """
    Configure console + optional file logging for the "errtree" logger.

    Returns
    -------
    logger
        The configured "errtree" logger.
    event_logger
        JsonlEventLogger if cfg.write_jsonl and cfg.log_dir are set, else None.

    Usage example
    -------------
        logger, event_logger = configure_logging(cfg=TraceConfig.from_env())
        sink = ReportSink.from_config(cfg, logger=logger, event_logger=event_logger)
    """
    run_id = cfg.resolved_run_id()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.filters.clear()
    logger.propagate = False

    # Handler-level: records propagated from child loggers skip logger filters
    run_filter = _RunContextFilter(run_id=run_id)

    console_handler = RichHandler(console=Console(stderr=True), show_path=False)
    console_handler.addFilter(run_filter)
    console_handler.setLevel(cfg.console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    event_logger = None
    if cfg.log_dir is not None:
        cfg.log_dir.mkdir(parents=True, exist_ok=True)

        # File handler (always plain)
        file_handler = logging.FileHandler(cfg.log_dir / f"run_{run_id}.log", encoding="utf-8")
        file_handler.setLevel(cfg.file_level)
        file_handler.addFilter(run_filter)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)sZ | run=%(run_id)s | %(levelname)s | %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )
        logger.addHandler(file_handler)

        if cfg.write_jsonl:
            event_logger = JsonlEventLogger(path=cfg.log_dir / f"events_{run_id}.jsonl", run_id=run_id)

    logger.debug("Logging configured (run_id=%s, log_dir=%s)", run_id, cfg.log_dir)
    return logger, event_logger
