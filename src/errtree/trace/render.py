"""Recursive error-tree renderer."""

from __future__ import annotations

import io

from errtree.trace.prefixer import Prefixer, TextWriter
from errtree.trace.tree import Aggregate, Chain, ErrorTreeNode, build_tree

BULLET_PREFIX = "  * "
CONTINUATION_PREFIX = "    "


def error_prefixer(writer: TextWriter) -> Prefixer:
    """Return the prefixer used for one child of an aggregate."""
    return Prefixer(BULLET_PREFIX, CONTINUATION_PREFIX, writer)


def write_tree(node: ErrorTreeNode, writer: TextWriter) -> None:
    """
    Write ``node`` as an indented trace to ``writer``, without a trailing newline.

    - a chain renders as consecutive lines, one per link, outermost first
    - each aggregate child renders as a bulleted block, continuation lines
      indented under the bullet

    Errors raised by ``writer`` propagate as-is; output already written stays.
    """
    writer.write(node.message)
    if isinstance(node, Aggregate):
        for child in node.children:
            writer.write("\n")
            with error_prefixer(writer) as prefixer:
                write_tree(child, prefixer)
    elif isinstance(node, Chain) and node.cause is not None:
        writer.write("\n")
        write_tree(node.cause, writer)


def write_error(error: BaseException, writer: TextWriter) -> None:
    """Write the trace of ``error`` followed by a newline."""
    write_tree(build_tree(error), writer)
    writer.write("\n")


def render_error(error: BaseException) -> str:
    """
    Return the trace of ``error`` as a string.

    Usage example
    -------------
        >>> try:
        ...     try:
        ...         raise KeyError("x")
        ...     except KeyError as exc:
        ...         raise RuntimeError("lookup failed") from exc
        ... except RuntimeError as exc:
        ...     print(render_error(exc))
        lookup failed
        'x'
    """
    buffer = io.StringIO()
    write_tree(build_tree(error), buffer)
    return buffer.getvalue()
