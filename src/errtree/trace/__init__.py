"""Error-tree rendering engine: tree model, renderer and line-prefixing writer."""

from .prefixer import Prefixer
from .tree import Aggregate, Chain, ErrorTreeNode, build_tree
from .render import error_prefixer, render_error, write_error, write_tree

__all__ = [
    "Prefixer",
    "Aggregate",
    "Chain",
    "ErrorTreeNode",
    "build_tree",
    "error_prefixer",
    "render_error",
    "write_error",
    "write_tree",
]
