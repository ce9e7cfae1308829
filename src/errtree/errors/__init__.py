"""
errors subpackage: reporting failures to humans and to the process exit code.

Key primitives
--------------
- TraceConfig: report/log locations and levels, from env or YAML
- configure_logging(): rich console logging, optional file + JSONL event log
- ErrVec / ItemError: aggregate and per-item failures that render as bulleted blocks
- ReportSink: trace to stderr + full detail persisted to a temp file
- exit_result() and friends: results to ExitCode, reporting the first failure
"""

from .config import ConfigError, TraceConfig
from .logging import configure_logging, JsonlEventLogger
from .types import ErrVec, ItemError, get_root_error, partition_results
from .persist import PersistError, format_full_detail, write_to_named_temp_file
from .sink import ReportSink, eprintln_error, writeln_error_to_writer_and_file
from .outcome import (
    ExitCode,
    exit_call,
    exit_iterator_of_results_print_first,
    exit_result,
    exit_stream_of_results_print_first,
)

__all__ = [
    "ConfigError",
    "TraceConfig",
    "JsonlEventLogger",
    "configure_logging",
    "ErrVec",
    "ItemError",
    "get_root_error",
    "partition_results",
    "PersistError",
    "format_full_detail",
    "write_to_named_temp_file",
    "ReportSink",
    "eprintln_error",
    "writeln_error_to_writer_and_file",
    "ExitCode",
    "exit_call",
    "exit_iterator_of_results_print_first",
    "exit_result",
    "exit_stream_of_results_print_first",
]
