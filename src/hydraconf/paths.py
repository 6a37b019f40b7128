"""
Dot-path codec.

A dot path addresses one slot of a nested config: segments are map keys or,
inside array-shaped containers, base-10 indices ('ui.theme', 'servers.0.port').
"""
from typing import Any, List, Tuple

from hydraconf.errors import MalformedPathError
from hydraconf.schema import LeafNode, build_schema

SEPARATOR = '.'


def split_path(path: str) -> Tuple[str, str]:
    """Split a dot path into its first segment and the remaining path.

    >>> split_path('a.b.c')
    ('a', 'b.c')
    >>> split_path('a')
    ('a', '')

    Raises:
        MalformedPathError: if the first segment is empty.
    """
    if not isinstance(path, str):
        raise MalformedPathError(f"Dot path must be a string, got {type(path).__name__}")
    head, _, rest = path.partition(SEPARATOR)
    if not head:
        raise MalformedPathError(f"Malformed dot path: {path!r}")
    return head, rest


def join_path(prefix: str, segment: Any) -> str:
    """Append a segment to a path prefix; the empty prefix is the root."""
    segment = str(segment)
    return f'{prefix}{SEPARATOR}{segment}' if prefix else segment


def enumerate_leaves(tree: Any) -> List[Tuple[str, LeafNode]]:
    """(path, leaf) pairs of a default tree, in enumeration order."""
    leaves: List[Tuple[str, LeafNode]] = []

    def walk(node, prefix: str) -> None:
        if isinstance(node, LeafNode):
            leaves.append((prefix, node))
            return
        for segment, child in node.entries():
            walk(child, join_path(prefix, segment))

    walk(build_schema(tree), '')
    return leaves


def enumerate_leaf_paths(tree: Any) -> List[str]:
    """Every leaf path of a default tree, in a single pass.

    Mappings are walked in insertion order, sequences by increasing index.
    Accepts a raw default tree or an already-built schema node.
    """
    return [path for path, _ in enumerate_leaves(tree)]
