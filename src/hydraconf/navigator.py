"""
Shape navigator: read and write nested slots addressed by dot paths.

Works on the plain dict/list structure of a live config. Writes consult a
shape oracle (the default tree, raw or as a schema node) to decide whether a
missing intermediate container is created as a list or a dict.
"""
from collections.abc import Mapping, MutableMapping
from typing import Any

from hydraconf.errors import MalformedPathError, PathNotFoundError, ShapeMismatchError
from hydraconf.paths import split_path
from hydraconf.schema import ArrayNode, LeafNode, MapNode, build_schema, is_primitive


def _parse_index(segment: str, path: str) -> int:
    if not segment.isdigit():
        raise MalformedPathError(f"Segment {segment!r} of {path!r} is not an array index")
    return int(segment)


def deep_get(container: Any, path: str) -> Any:
    """Resolve a dot path against a nested dict/list structure.

    Raises:
        MalformedPathError: empty segment, or non-integer segment for an array.
        PathNotFoundError: the path descends through a primitive, or a key /
            index along the way is absent.
    """
    head, rest = split_path(path)

    if isinstance(container, (list, tuple)):
        index = _parse_index(head, path)
        if index >= len(container):
            raise PathNotFoundError(f"Index {index} out of range at {path!r}")
        value = container[index]
    elif isinstance(container, Mapping):
        if head not in container:
            raise PathNotFoundError(f"No member {head!r} at {path!r}")
        value = container[head]
    else:
        raise PathNotFoundError(f"Cannot descend into {type(container).__name__} at {path!r}")

    if not rest:
        return value
    if value is None or is_primitive(value):
        raise PathNotFoundError(f"{head!r} holds a primitive, cannot resolve {rest!r}")
    return deep_get(value, rest)


def deep_set(container: Any, path: str, value: Any, shape_oracle: Any) -> None:
    """Write value at path, creating missing intermediate containers.

    Args:
        container: Mutable dict or list to write into
        path: Dot path relative to container
        value: Value stored at the final segment
        shape_oracle: Default tree (or schema node) congruent with container

    Raises:
        ShapeMismatchError: container and oracle disagree on array vs. map, or
            the oracle has no container where more path remains.
        MalformedPathError: unparseable path.
    """
    oracle = build_schema(shape_oracle)
    head, rest = split_path(path)

    if isinstance(container, list):
        if not isinstance(oracle, ArrayNode):
            raise ShapeMismatchError(f"Container is an array but the default at {head!r} is not")
        key = _parse_index(head, path)
        # Pad so that leaves arriving out of order can still be placed
        while len(container) <= key:
            container.append(None)
        current = container[key]
    elif isinstance(container, MutableMapping):
        if not isinstance(oracle, MapNode):
            raise ShapeMismatchError(f"Container is a map but the default at {head!r} is not")
        key = head
        current = container.get(key)
    else:
        raise ShapeMismatchError(f"Cannot write {path!r} into {type(container).__name__}")

    if not rest:
        container[key] = value
        return

    child_oracle = oracle.child(head)
    if child_oracle is None or isinstance(child_oracle, LeafNode):
        raise ShapeMismatchError(f"Default tree has no container at {head!r} (remaining path {rest!r})")

    if current is None:
        current = [] if isinstance(child_oracle, ArrayNode) else {}
        container[key] = current
    deep_set(current, rest, value, child_oracle)
