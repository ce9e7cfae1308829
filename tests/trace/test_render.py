from __future__ import annotations

import io

import pytest

from errtree.errors.types import ErrVec
from errtree.trace.prefixer import Prefixer
from errtree.trace.render import (
    BULLET_PREFIX,
    CONTINUATION_PREFIX,
    error_prefixer,
    render_error,
    write_error,
    write_tree,
)
from errtree.trace.tree import Aggregate, Chain, ErrorTreeNode


def _render(node: ErrorTreeNode) -> str:
    out = io.StringIO()
    write_tree(node, out)
    return out.getvalue()


def _leaf_chain(*messages: str) -> Chain:
    node: Chain | None = None
    for message in reversed(messages):
        node = Chain(message, node)
    assert node is not None
    return node


def _strip_prefix(line: str) -> str:
    for prefix in (BULLET_PREFIX, CONTINUATION_PREFIX):
        if line.startswith(prefix):
            return line[len(prefix):]
    raise AssertionError(f"line is not prefixed: {line!r}")


def test_chain_renders_one_line_per_link() -> None:
    assert _render(_leaf_chain("A", "B", "C")) == "A\nB\nC"


def test_aggregate_renders_bulleted_children() -> None:
    node = Aggregate("encountered 2 errors", (Chain("X"), Chain("Y")))
    assert _render(node) == "encountered 2 errors\n  * X\n  * Y"


def test_aggregate_child_chain_is_continuation_indented() -> None:
    node = Aggregate("encountered 2 errors", (_leaf_chain("X", "X2"), Chain("Y")))
    assert _render(node) == "encountered 2 errors\n  * X\n    X2\n  * Y"


def test_nested_aggregate_renders_two_layers() -> None:
    inner = Aggregate("inner", (Chain("a"), _leaf_chain("b", "b2")))
    node = Aggregate("outer", (inner, Chain("c")))

    assert _render(node) == (
        "outer\n"
        "  * inner\n"
        "      * a\n"
        "      * b\n"
        "        b2\n"
        "  * c"
    )


def test_chain_into_aggregate_into_chain() -> None:
    node = Chain("top", Chain("middle", Aggregate("rows failed", (_leaf_chain("row 1", "cause 1"),))))

    assert _render(node) == "top\nmiddle\nrows failed\n  * row 1\n    cause 1"


def test_multiline_message_is_indented_under_bullet() -> None:
    node = Aggregate("agg", (Chain("line one\nline two"),))
    assert _render(node) == "agg\n  * line one\n    line two"


def test_zero_child_aggregate_renders_message_only() -> None:
    node = Aggregate.unchecked("nothing collected", [])
    assert _render(node) == "nothing collected"


@pytest.mark.parametrize("depth", [1, 2, 3, 10, 100])
def test_chain_of_depth_n_has_n_unprefixed_lines(depth: int) -> None:
    messages = [f"link {i}" for i in range(depth)]
    lines = _render(_leaf_chain(*messages)).split("\n")

    assert lines == messages
    assert not any(line.startswith((" ", "*")) for line in lines)


@pytest.mark.parametrize("k", [1, 2, 7])
def test_aggregate_of_k_children_has_k_bullets_in_order(k: int) -> None:
    children = tuple(_leaf_chain(f"child {i}", f"cause {i}") for i in range(k))
    lines = _render(Aggregate("header", children)).split("\n")

    bullets = [line for line in lines if line.startswith(BULLET_PREFIX)]
    assert bullets == [f"{BULLET_PREFIX}child {i}" for i in range(k)]
    continuations = [line for line in lines[1:] if not line.startswith(BULLET_PREFIX)]
    assert continuations == [f"{CONTINUATION_PREFIX}cause {i}" for i in range(k)]


def test_nesting_is_additive() -> None:
    inner = Aggregate("inner", (_leaf_chain("a", "a2"), Chain("b")))
    single = _render(inner)
    nested = _render(Aggregate("outer", (inner,)))

    # Drop the outer header and one layer of prefix: the inner rendering remains
    nested_lines = nested.split("\n")
    assert nested_lines[0] == "outer"
    assert "\n".join(_strip_prefix(line) for line in nested_lines[1:]) == single


def test_nesting_is_additive_without_inner_layer() -> None:
    inner = Aggregate("inner", (_leaf_chain("a", "a2"), Chain("b")))
    nested = _render(Aggregate("outer", (inner, Chain("c"))))
    outer_only = _render(Aggregate("outer", (Chain("inner\na\na2\nb"), Chain("c"))))

    # Keep the outer prefix, drop the inner bullet or continuation after it
    lines = nested.split("\n")
    stripped = [lines[0]]
    for line in lines[1:]:
        outer, rest = line[:len(BULLET_PREFIX)], line[len(BULLET_PREFIX):]
        if rest.startswith((BULLET_PREFIX, CONTINUATION_PREFIX)):
            rest = _strip_prefix(rest)
        stripped.append(outer + rest)
    assert "\n".join(stripped) == outer_only


def test_rendering_does_not_mutate_tree() -> None:
    node = Aggregate("agg", (_leaf_chain("x", "y"), Chain("z")))
    before = repr(node)
    _render(node)
    _render(node)
    assert repr(node) == before


def test_outer_prefixer_wraps_whole_trace() -> None:
    node = Aggregate("agg", (_leaf_chain("x", "y"),))
    out = io.StringIO()
    write_tree(node, Prefixer("| ", "| ", out))
    assert out.getvalue() == "| agg\n|   * x\n|     y"


def test_error_prefixer_uses_bullet_and_continuation() -> None:
    p = error_prefixer(io.StringIO())
    assert p.first_line_prefix == "  * "
    assert p.next_line_prefix == "    "


def test_write_error_appends_newline() -> None:
    out = io.StringIO()
    write_error(ErrVec([ValueError("X"), ValueError("Y")]), out)
    assert out.getvalue() == "encountered 2 errors\n  * X\n  * Y\n"


def test_render_error_from_live_exceptions() -> None:
    try:
        try:
            raise ValueError("bad value")
        except ValueError as exc:
            raise RuntimeError("parse failed") from exc
    except RuntimeError as exc:
        text = render_error(exc)

    assert text == "parse failed\nbad value"


def test_writer_error_aborts_rendering() -> None:
    class _Broken:
        def __init__(self) -> None:
            self.calls = 0

        def write(self, text: str) -> int:
            self.calls += 1
            if self.calls > 1:
                raise BrokenPipeError("closed")
            return len(text)

        def flush(self) -> None:
            pass

    writer = _Broken()
    with pytest.raises(BrokenPipeError):
        write_tree(_leaf_chain("A", "B"), writer)
    assert writer.calls == 2
