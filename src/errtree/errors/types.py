from __future__ import annotations

from typing import Any, Generic, Iterable, Iterator, Optional, Sequence, TypeVar, Union, overload

from errtree.trace.tree import error_cause

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


class ErrVec(Exception, Generic[E]):
    """
    An owned, ordered, non-empty collection of independent failures.

    Renders as an aggregate: its message, then one bulleted block per error.

    Usage example
    -------------
        errors = [exc for exc in map(check_row, rows) if exc is not None]
        if errors:
            raise ErrVec(errors)
    """

    def __init__(self, errors: Iterable[E], message: Optional[str] = None) -> None:
        inner = list(errors)
        if not inner:
            raise ValueError("ErrVec requires at least one error.")
        super().__init__(*inner)
        self.inner: list[E] = inner
        self.message = message

    def __str__(self) -> str:
        if self.message is not None:
            return self.message
        return f"encountered {len(self.inner)} errors"

    def __repr__(self) -> str:
        return f"ErrVec({self.inner!r}, message={self.message!r})"

    def error_children(self) -> Sequence[E]:
        return self.inner

    def __len__(self) -> int:
        return len(self.inner)

    def __iter__(self) -> Iterator[E]:
        return iter(self.inner)

    @overload
    def __getitem__(self, index: int) -> E: ...

    @overload
    def __getitem__(self, index: slice) -> list[E]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[E, list[E]]:
        return self.inner[index]


class ItemError(Exception):
    """A failure tied to the input item that caused it. The cause is ``source``."""

    def __init__(self, item: Any, source: BaseException) -> None:
        super().__init__(item, source)
        self.item = item
        self.source = source
        self.__cause__ = source

    def __str__(self) -> str:
        return f"failed to process item {self.item!r}"


def partition_results(results: Iterable[Union[T, BaseException]]) -> Union[list[T], ErrVec[BaseException]]:
    """
    Collect successes unless at least one failure is encountered.

    Once a failure appears, the successes collected so far are dropped and later
    successes are ignored; every failure is kept, in order.
    """
    oks: list[T] = []
    errors: list[BaseException] = []
    for result in results:
        if isinstance(result, BaseException):
            if not errors:
                oks = []
            errors.append(result)
        elif not errors:
            oks.append(result)
    if errors:
        return ErrVec(errors)
    return oks


def get_root_error(error: BaseException) -> BaseException:
    """Return the deepest cause in the chain of ``error`` (the root cause)."""
    seen = {id(error)}
    current = error
    while True:
        cause = error_cause(current)
        if cause is None or id(cause) in seen:
            return current
        seen.add(id(cause))
        current = cause
