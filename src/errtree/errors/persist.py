"""Persisting the full detail of a failure to durable storage."""

from __future__ import annotations

import os
import tempfile
import traceback as _traceback
from pathlib import Path
from typing import Optional, Union

from rich.pretty import pretty_repr

from errtree.trace.tree import error_cause, error_children


class PersistError(OSError):
    """Base class for failures while persisting a report file."""


class CreateTempFileFailed(PersistError):
    def __str__(self) -> str:
        return "failed to create a temporary file"


class WriteFailed(PersistError):
    def __str__(self) -> str:
        return "failed to write to a temporary file"


class KeepFailed(PersistError):
    def __str__(self) -> str:
        return "failed to persist the temporary file"


def write_to_named_temp_file(
    data: Union[str, bytes],
    *,
    directory: Optional[Path] = None,
    prefix: str = "errtree-",
    suffix: str = ".txt",
) -> Path:
    """
    Write ``data`` to a named temporary file that is kept on disk.

    Returns
    -------
    path
        Location of the persisted file.

    Raises
    ------
    PersistError
        ``CreateTempFileFailed``, ``WriteFailed`` or ``KeepFailed``, chained to
        the underlying ``OSError``.
    """
    payload = data.encode("utf-8") if isinstance(data, str) else data

    try:
        if directory is not None:
            directory.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
    except OSError as exc:
        raise CreateTempFileFailed() from exc

    try:
        with os.fdopen(fd, "wb") as f:
            try:
                f.write(payload)
                f.flush()
            except OSError as exc:
                raise WriteFailed() from exc
            try:
                os.fsync(f.fileno())
            except OSError as exc:
                raise KeepFailed() from exc
    except PersistError:
        # A partly written report is not kept
        try:
            os.unlink(name)
        except OSError:
            pass
        raise
    return Path(name)


def _attributes(error: BaseException) -> dict[str, object]:
    attrs = {k: v for k, v in vars(error).items() if not k.startswith("_")}
    attrs["args"] = error.args
    return attrs


def format_full_detail(error: BaseException) -> str:
    """
    Return an unabridged dump of ``error``.

    Two sections: the complete Python traceback (chained causes and exception
    groups included), then the type and instance attributes of every failure in
    the tree, indented by depth.
    """
    lines: list[str] = ["Traceback", "=========", ""]
    lines.append("".join(_traceback.format_exception(type(error), error, error.__traceback__)).rstrip("\n"))
    lines.extend(["", "Failures", "========", ""])

    seen: set[int] = set()
    stack: list[tuple[BaseException, int]] = [(error, 0)]
    while stack:
        current, depth = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        indent = "    " * depth
        lines.append(f"{indent}{type(current).__module__}.{type(current).__qualname__}")
        for line in pretty_repr(_attributes(current)).splitlines():
            lines.append(f"{indent}  {line}")

        children = error_children(current)
        if children is not None:
            stack.extend((child, depth + 1) for child in reversed(children))
            continue
        cause = error_cause(current)
        if cause is not None:
            stack.append((cause, depth + 1))

    return "\n".join(lines) + "\n"
