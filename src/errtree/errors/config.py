from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional
import logging
import os
import uuid

import yaml


class ConfigError(ValueError):
    """Raised when runtime configuration is missing or invalid."""


def _parse_level(raw: str, fallback: int) -> int:
    raw = raw.strip()
    if not raw:
        return fallback
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else fallback


def _parse_bool(raw: str) -> bool:
    return raw.strip() not in ("0", "false", "False", "")


@dataclass(frozen=True)
class TraceConfig:
    """
    Configuration for failure reporting + logging behavior.

    Parameters
    ----------
    report_dir
        Directory for persisted full-detail reports. None means the system temp dir.
    persist_full_detail
        If False, the sink writes only the trace and no pointer line.
    log_dir
        If set, a plain log file is written to <log_dir>/run_<run_id>.log.
    run_id
        Unique identifier for the run. If "auto", a UUID4 is generated.
    console_level
        Logging level for console output.
    file_level
        Logging level for file output.
    write_jsonl
        If True (and log_dir is set), writes JSONL events to <log_dir>/events_<run_id>.jsonl.
    env_prefix
        Prefix for environment-variable overrides.

    Usage example
    -------------
        cfg = TraceConfig(report_dir=Path("reports"))
    """

    report_dir: Optional[Path] = None
    persist_full_detail: bool = True
    log_dir: Optional[Path] = None
    run_id: str = "auto"

    console_level: int = 30  # logging.WARNING
    file_level: int = 10  # logging.DEBUG

    write_jsonl: bool = False

    env_prefix: str = field(default="ERRTREE_", repr=False)

    def resolved_run_id(self) -> str:
        """Return a non-auto run id."""
        if self.run_id != "auto":
            return self.run_id
        return uuid.uuid4().hex[:10]

    @classmethod
    def from_env(cls, *, default: Optional["TraceConfig"] = None) -> "TraceConfig":
        """
        Create config from environment variables.

        Supported variables (prefix controlled by env_prefix on `default`):
        - <PFX>REPORT_DIR: path
        - <PFX>PERSIST: "1"/"0"
        - <PFX>LOG_DIR: path
        - <PFX>LOG_LEVEL: level name or number
        - <PFX>WRITE_JSONL: "1"/"0"

        Invalid values fall back to `default`.

        Usage example
        -------------
            cfg = TraceConfig.from_env(default=TraceConfig(env_prefix="MYAPP_"))
        """
        base = default if default is not None else cls()
        pfx = base.env_prefix

        report_dir = base.report_dir
        report_dir_raw = os.getenv(f"{pfx}REPORT_DIR", "").strip()
        if report_dir_raw:
            report_dir = Path(report_dir_raw)

        log_dir = base.log_dir
        log_dir_raw = os.getenv(f"{pfx}LOG_DIR", "").strip()
        if log_dir_raw:
            log_dir = Path(log_dir_raw)

        persist_raw = os.getenv(f"{pfx}PERSIST")
        persist = base.persist_full_detail if persist_raw is None else _parse_bool(persist_raw)

        jsonl_raw = os.getenv(f"{pfx}WRITE_JSONL")
        write_jsonl = base.write_jsonl if jsonl_raw is None else _parse_bool(jsonl_raw)

        console_level = _parse_level(os.getenv(f"{pfx}LOG_LEVEL", ""), base.console_level)

        return replace(
            base,
            report_dir=report_dir,
            persist_full_detail=persist,
            log_dir=log_dir,
            console_level=console_level,
            write_jsonl=write_jsonl,
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, default: Optional["TraceConfig"] = None) -> "TraceConfig":
        """Create config from a mapping of field names, e.g. a parsed YAML document."""
        base = default if default is not None else cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

        changes: dict[str, Any] = {}
        for key, value in data.items():
            if key in ("report_dir", "log_dir"):
                changes[key] = None if value is None else Path(str(value))
            elif key in ("console_level", "file_level"):
                changes[key] = _parse_level(str(value), getattr(base, key))
            elif key in ("persist_full_detail", "write_jsonl"):
                changes[key] = value if isinstance(value, bool) else _parse_bool(str(value))
            else:
                changes[key] = str(value)
        return replace(base, **changes)

    @classmethod
    def from_yaml(cls, path: Path, *, default: Optional["TraceConfig"] = None) -> "TraceConfig":
        """
        Load config from a YAML file whose top level is a mapping of field names.

        Usage example
        -------------
            cfg = TraceConfig.from_yaml(Path("errtree.yaml"))
        """
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file must contain a YAML mapping: {path}")
        return cls.from_mapping(data, default=default)
