"""
Outcome mapping: computation results to process exit codes.

A *result* is any value. A ``BaseException`` instance is a failure; anything
else is a success. Failures are reported through a ``ReportSink`` (stderr by
default) before ``ExitCode.FAILURE`` is returned; reporting never raises.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, AsyncIterable, Callable, Iterable, Optional

from .sink import ReportSink, eprintln_error


class ExitCode(IntEnum):
    """Process exit signal."""
    SUCCESS = 0
    FAILURE = 1


def _fail(error: BaseException, sink: Optional[ReportSink]) -> ExitCode:
    eprintln_error(error, sink=sink)
    return ExitCode.FAILURE


def exit_result(result: Any, *, sink: Optional[ReportSink] = None) -> ExitCode:
    """
    Map a single result to an exit code.

    An ``ExitCode`` result is returned unchanged.

    Usage example
    -------------
        sys.exit(exit_result(load_or_error(path)))
    """
    if isinstance(result, BaseException):
        return _fail(result, sink)
    if isinstance(result, ExitCode):
        return result
    return ExitCode.SUCCESS


def exit_call(fn: Callable[..., Any], *args: Any, sink: Optional[ReportSink] = None, **kwargs: Any) -> ExitCode:
    """
    Run ``fn`` and map its outcome to an exit code.

    An ``Exception`` raised by ``fn`` is the failing result. ``KeyboardInterrupt``
    and ``SystemExit`` are not failures to report and propagate.

    Usage example
    -------------
        if __name__ == "__main__":
            sys.exit(exit_call(main))
    """
    try:
        result = fn(*args, **kwargs)
    except Exception as exc:
        return _fail(exc, sink)
    return exit_result(result, sink=sink)


def exit_iterator_of_results_print_first(
    results: Iterable[Any],
    *,
    sink: Optional[ReportSink] = None,
) -> ExitCode:
    """
    Report the first failing result and return FAILURE; SUCCESS if there is none.

    Iteration stops at the first failure; later results are never pulled.
    """
    for result in results:
        if isinstance(result, BaseException):
            return _fail(result, sink)
    return ExitCode.SUCCESS


async def exit_stream_of_results_print_first(
    results: AsyncIterable[Any],
    *,
    sink: Optional[ReportSink] = None,
) -> ExitCode:
    """
    Async form of ``exit_iterator_of_results_print_first``.

    Suspends only while awaiting the next result. If cancelled before a failure
    is observed, nothing has been written.
    """
    async for result in results:
        if isinstance(result, BaseException):
            return _fail(result, sink)
    return ExitCode.SUCCESS
