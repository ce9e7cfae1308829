from __future__ import annotations

import json
import logging
from pathlib import Path

from errtree.errors.config import TraceConfig
from errtree.errors.logging import JsonlEventLogger, configure_logging


def test_jsonl_event_logger_writes_valid_lines(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "events_abc.jsonl"
    ev = JsonlEventLogger(path=path, run_id="abc")

    ev.write(event="failure_reported", level="ERROR", exc=ValueError("nope"), report_path=Path("/tmp/r.txt"))
    ev.write(event="note", level="INFO", message="hello")

    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2

    a = json.loads(lines[0])
    assert a["run_id"] == "abc"
    assert a["event"] == "failure_reported"
    assert a["level"] == "ERROR"
    assert a["exc_type"] == "ValueError"
    assert a["exc_msg"] == "nope"
    assert a["report_path"] == str(Path("/tmp/r.txt"))
    assert "time_utc" in a

    b = json.loads(lines[1])
    assert b["message"] == "hello"
    assert "exc_type" not in b


def test_configure_logging_without_log_dir_is_console_only() -> None:
    cfg = TraceConfig(run_id="testrun", console_level=logging.CRITICAL)

    logger, event_logger = configure_logging(cfg=cfg)

    assert logger.name == "errtree"
    assert event_logger is None
    assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)


def test_configure_logging_creates_log_file_and_writes(tmp_path: Path) -> None:
    cfg = TraceConfig(
        log_dir=tmp_path / "logs",
        run_id="testrun",
        console_level=logging.CRITICAL,  # keep test output quiet
        file_level=logging.DEBUG,
    )

    logger, _ = configure_logging(cfg=cfg)
    logger.info("hello world")

    log_path = cfg.log_dir / "run_testrun.log"  # type: ignore[operator]
    text = log_path.read_text(encoding="utf-8")
    assert "hello world" in text
    assert "run=testrun" in text


def test_child_logger_records_reach_file_with_run_id(tmp_path: Path) -> None:
    cfg = TraceConfig(log_dir=tmp_path, run_id="testrun", console_level=logging.CRITICAL)
    configure_logging(cfg=cfg)

    logging.getLogger("errtree.child").warning("from child")

    text = (tmp_path / "run_testrun.log").read_text(encoding="utf-8")
    assert "run=testrun | WARNING | from child" in text


def test_configure_logging_returns_event_logger_when_enabled(tmp_path: Path) -> None:
    cfg = TraceConfig(
        log_dir=tmp_path / "logs",
        run_id="testrun",
        write_jsonl=True,
        console_level=logging.CRITICAL,
    )
    _, event_logger = configure_logging(cfg=cfg)
    assert event_logger is not None
    assert event_logger.path == tmp_path / "logs" / "events_testrun.jsonl"
    assert event_logger.run_id == "testrun"
