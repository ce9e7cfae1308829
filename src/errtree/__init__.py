"""errtree - indented diagnostic traces for chained and aggregated failures."""

from errtree.version import __version__
from errtree.trace import Aggregate, Chain, Prefixer, build_tree, render_error, write_error, write_tree
from errtree.errors import ErrVec, ExitCode, ItemError, ReportSink, eprintln_error, exit_result

__all__ = [
    "__version__",
    "Aggregate",
    "Chain",
    "Prefixer",
    "build_tree",
    "render_error",
    "write_error",
    "write_tree",
    "ErrVec",
    "ExitCode",
    "ItemError",
    "ReportSink",
    "eprintln_error",
    "exit_result",
]
