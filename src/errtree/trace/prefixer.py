"""Streaming line-prefixing writer."""

from __future__ import annotations

from types import TracebackType
from typing import Optional, Protocol, Type


class TextWriter(Protocol):
    """Anything with text ``write`` and ``flush`` (files, ``io.StringIO``, ``Prefixer``)."""

    def write(self, text: str, /) -> int: ...

    def flush(self) -> None: ...


class Prefixer:
    """
    A text writer adapter that prefixes each written line.

    ``first_line_prefix`` is inserted before the first content ever written,
    ``next_line_prefix`` before the first content following each ``"\\n"``.
    Prefixes are inserted lazily, so the output does not depend on how the
    caller chunks its writes.

    Parameters
    ----------
    first_line_prefix
        Prefix for the very first line.
    next_line_prefix
        Prefix for subsequent lines.
    writer
        The wrapped writer. May itself be a ``Prefixer``; indentation then adds up.

    Usage example
    -------------
        with Prefixer("  * ", "    ", sys.stderr) as out:
            out.write("first\\nsecond")
    """

    def __init__(self, first_line_prefix: str, next_line_prefix: str, writer: TextWriter) -> None:
        self.first_line_prefix = first_line_prefix
        self.next_line_prefix = next_line_prefix
        self.writer = writer
        self.is_first_line = True
        self.needs_prefix = True

    def __repr__(self) -> str:
        return (
            f"Prefixer(first_line_prefix={self.first_line_prefix!r}, "
            f"next_line_prefix={self.next_line_prefix!r}, "
            f"is_first_line={self.is_first_line}, needs_prefix={self.needs_prefix})"
        )

    def write(self, text: str) -> int:
        if not text:
            return 0

        start = 0
        while start < len(text):
            if self.needs_prefix:
                prefix = self.first_line_prefix if self.is_first_line else self.next_line_prefix
                self.writer.write(prefix)
                self.is_first_line = False
                self.needs_prefix = False

            newline = text.find("\n", start)
            if newline == -1:
                self.writer.write(text[start:])
                start = len(text)
            else:
                end = newline + 1
                self.writer.write(text[start:end])
                start = end
                self.needs_prefix = True

        return len(text)

    def flush(self) -> None:
        self.writer.flush()

    def __enter__(self) -> "Prefixer":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.flush()
