from __future__ import annotations

import functools
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from errtree.trace.prefixer import TextWriter
from errtree.trace.render import write_error

from .config import TraceConfig
from .logging import LOGGER_NAME, JsonlEventLogger
from .persist import format_full_detail, write_to_named_temp_file

Persist = Callable[[Union[str, bytes]], Path]

_logger = logging.getLogger(LOGGER_NAME)


@dataclass
class ReportSink:
    """
    Writes the concise trace of a failure and persists its full detail.

    Output on ``stream``::

        <trace>

        See the full error report:
        less <path>

    If persisting fails, the persistence failure's own trace replaces the
    pointer lines; it is logged and never raised. Errors writing to ``stream``
    propagate: there is no channel left to report them through.

    Usage example
    -------------
        sink = ReportSink(stream=sys.stderr)
        try:
            run()
        except Exception as exc:
            sink.report(exc)
    """

    stream: Optional[TextWriter] = None
    persist: Optional[Persist] = write_to_named_temp_file
    logger: logging.Logger = field(default=_logger)
    event_logger: Optional[JsonlEventLogger] = None

    @classmethod
    def from_config(
        cls,
        cfg: TraceConfig,
        *,
        stream: Optional[TextWriter] = None,
        logger: Optional[logging.Logger] = None,
        event_logger: Optional[JsonlEventLogger] = None,
    ) -> "ReportSink":
        """Build a sink honoring ``report_dir`` and ``persist_full_detail``."""
        persist: Optional[Persist] = None
        if cfg.persist_full_detail:
            persist = functools.partial(write_to_named_temp_file, directory=cfg.report_dir)
        return cls(
            stream=stream,
            persist=persist,
            logger=logger if logger is not None else _logger,
            event_logger=event_logger,
        )

    def _stream(self) -> TextWriter:
        # sys.stderr is looked up per call; it may be replaced after construction
        return self.stream if self.stream is not None else sys.stderr

    def report(self, error: BaseException) -> Optional[Path]:
        """
        Report ``error``; return the location of the full detail, if persisted.
        """
        stream = self._stream()
        write_error(error, stream)

        path: Optional[Path] = None
        if self.persist is not None:
            stream.write("\n")
            try:
                path = self.persist(format_full_detail(error))
            except Exception as persist_error:
                self.logger.warning("Could not persist the full error report: %s", persist_error)
                write_error(persist_error, stream)
            else:
                self.logger.debug("Full error report written to %s", path)
                stream.write(f"See the full error report:\nless {path}\n")
        stream.flush()

        if self.event_logger is not None:
            self.event_logger.write(event="failure_reported", level="ERROR", exc=error, report_path=path)
        return path


def writeln_error_to_writer_and_file(
    error: BaseException,
    writer: TextWriter,
    *,
    persist: Optional[Persist] = write_to_named_temp_file,
) -> Optional[Path]:
    """Function form of ``ReportSink(stream=writer, persist=persist).report(error)``."""
    return ReportSink(stream=writer, persist=persist).report(error)


def eprintln_error(error: BaseException, *, sink: Optional[ReportSink] = None) -> None:
    """
    Report ``error`` on stderr. Never raises.

    A failing stderr is logged as an error and otherwise ignored.
    """
    sink = sink if sink is not None else ReportSink()
    try:
        sink.report(error)
    except OSError as exc:
        sink.logger.error("failed to write to stderr: %r", exc)
