"""`errtree demo` command implementation."""

from __future__ import annotations

import argparse

from errtree.errors import ErrVec, ExitCode, ReportSink, TraceConfig, configure_logging, exit_result


class DemoError(Exception):
    """A failure with a fixed message, optionally caused by another failure."""

    def __init__(self, message: str, source: BaseException | None = None) -> None:
        super().__init__(message)
        self.__cause__ = source


def build_sample_error(*, flat: bool = False) -> BaseException:
    """
    Build the sample failure shown by `errtree demo`.

    The default is a chain ending in an aggregate of two row failures; with
    ``flat=True`` it is a plain three-link chain.
    """
    if flat:
        return DemoError(
            "failed to run CLI command",
            DemoError("failed to load config", FileNotFoundError("config.yaml not found")),
        )

    rows = ErrVec(
        [
            DemoError(
                "failed to send an i18n request for row 'Foo'",
                DemoError("failed to construct a JSON schema", DemoError("input must be an object")),
            ),
            DemoError(
                "failed to send an i18n request for row 'Bar'",
                DemoError("failed to send a request", OSError("address 239.143.73.1 is not available")),
            ),
        ],
        message="failed to update 2 rows",
    )
    return DemoError(
        "failed to run CLI command",
        DemoError("failed to run i18n update command", rows),
    )


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the `demo` command."""
    parser = subparsers.add_parser("demo", help="Report a sample failure and exit with its code.")
    parser.add_argument("--flat", action="store_true", help="Use a plain causal chain (no aggregate).")
    parser.add_argument("--no-persist", action="store_true", help="Skip writing the full error report file.")
    parser.set_defaults(command="demo")


def run(args: argparse.Namespace) -> ExitCode:
    """Execute the `demo` command."""
    cfg = TraceConfig.from_env()
    if args.no_persist:
        cfg = TraceConfig.from_mapping({"persist_full_detail": False}, default=cfg)
    logger, event_logger = configure_logging(cfg=cfg)
    sink = ReportSink.from_config(cfg, logger=logger, event_logger=event_logger)
    return exit_result(build_sample_error(flat=args.flat), sink=sink)
