"""
Error-tree model.

A failure renders either as a *chain link* (a message plus at most one cause)
or as an *aggregate* (a message plus an ordered, non-empty list of independent
child failures). ``build_tree`` converts a live exception into this shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union


@dataclass(frozen=True)
class Chain:
    """A single failure with at most one underlying cause."""

    message: str
    cause: Optional["ErrorTreeNode"] = None


@dataclass(frozen=True)
class Aggregate:
    """
    Several independent failures collected together.

    ``children`` keeps collection order: first encountered, first rendered.
    """

    message: str
    children: tuple["ErrorTreeNode", ...]

    def __post_init__(self) -> None:
        children = tuple(self.children)
        if not children:
            raise ValueError(f"Aggregate '{self.message}' must have at least one child.")
        object.__setattr__(self, "children", children)

    @classmethod
    def unchecked(cls, message: str, children: Sequence["ErrorTreeNode"]) -> "Aggregate":
        """Build an aggregate without the non-empty check (for foreign empty collections)."""
        node = object.__new__(cls)
        object.__setattr__(node, "message", message)
        object.__setattr__(node, "children", tuple(children))
        return node


ErrorTreeNode = Union[Chain, Aggregate]


def error_message(error: BaseException) -> str:
    """Return the display message of a failure, falling back to its class name."""
    try:
        message = str(error)
    except Exception:
        return f"{type(error).__name__}: <exception str() failed>"
    return message if message else type(error).__name__


def error_children(error: BaseException) -> Optional[Sequence[BaseException]]:
    """
    Return the child failures if ``error`` declares itself an aggregate, else None.

    Two capabilities are recognized:
    - an ``error_children()`` method (see ``errtree.errors.types.ErrVec``)
    - an ``exceptions`` tuple, the shape of the built-in exception groups
    """
    method = getattr(error, "error_children", None)
    if callable(method):
        return list(method())
    exceptions: Any = getattr(error, "exceptions", None)
    if isinstance(exceptions, tuple):
        return list(exceptions)
    return None


def error_cause(error: BaseException) -> Optional[BaseException]:
    """Return the single underlying cause using Python's chaining rules."""
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


def build_tree(error: BaseException) -> ErrorTreeNode:
    """
    Convert a live failure into an ``ErrorTreeNode``.

    Never raises for exception input. A failure already visited on the current
    path is not descended into again, so a self-referential cause ends the
    chain instead of recursing forever.

    Usage example
    -------------
        try:
            load()
        except Exception as exc:
            node = build_tree(exc)
    """
    return _build(error, frozenset())


def _build(error: BaseException, seen: frozenset[int]) -> ErrorTreeNode:
    seen = seen | {id(error)}
    message = error_message(error)

    children = error_children(error)
    if children is not None:
        nodes = [_build(child, seen) for child in children if id(child) not in seen]
        return Aggregate.unchecked(message, nodes)

    cause = error_cause(error)
    if cause is None or id(cause) in seen:
        return Chain(message)
    return Chain(message, _build(cause, seen))
