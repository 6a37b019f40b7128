"""
Tagged representation of a default configuration tree.

The caller's default tree (nested dicts/lists with primitive leaves) is
converted once into LeafNode / ArrayNode / MapNode instances, so the rest of
the package never has to ask "is this a list?" of raw data again.
"""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

from hydraconf.errors import InvalidLeafTypeError

# Primitive kinds, named after what a store-side reader would call them
KIND_STRING = 'string'
KIND_NUMBER = 'number'
KIND_BOOLEAN = 'boolean'
KIND_ARRAY = 'array'
KIND_OBJECT = 'object'

PRIMITIVE_KINDS = frozenset({KIND_STRING, KIND_NUMBER, KIND_BOOLEAN})


def value_kind(value: Any) -> Optional[str]:
    """Classify a runtime value, or None if it has no kind in the config model.

    bool is checked before int: True is never a number here.
    """
    if isinstance(value, bool):
        return KIND_BOOLEAN
    if isinstance(value, (int, float)):
        return KIND_NUMBER
    if isinstance(value, str):
        return KIND_STRING
    if isinstance(value, (list, tuple)):
        return KIND_ARRAY
    if isinstance(value, Mapping):
        return KIND_OBJECT
    return None


def is_primitive(value: Any) -> bool:
    return value_kind(value) in PRIMITIVE_KINDS


@dataclass(frozen=True)
class LeafNode:
    """Primitive default value; its runtime type is the leaf's type."""
    value: Union[str, int, float, bool]

    @property
    def kind(self) -> str:
        return value_kind(self.value)

    def child(self, segment: str) -> Optional['SchemaNode']:
        return None


@dataclass(frozen=True)
class ArrayNode:
    """Sequence-shaped container, children addressed by base-10 index."""
    items: Tuple['SchemaNode', ...]

    kind = KIND_ARRAY

    def child(self, segment: str) -> Optional['SchemaNode']:
        if not segment.isdigit():
            return None
        index = int(segment)
        return self.items[index] if index < len(self.items) else None

    def entries(self) -> Iterator[Tuple[str, 'SchemaNode']]:
        for index, item in enumerate(self.items):
            yield str(index), item


@dataclass(frozen=True)
class MapNode:
    """Mapping-shaped container; entry order is the default tree's insertion order."""
    fields: Tuple[Tuple[str, 'SchemaNode'], ...]

    kind = KIND_OBJECT

    def child(self, segment: str) -> Optional['SchemaNode']:
        for name, node in self.fields:
            if name == segment:
                return node
        return None

    def entries(self) -> Iterator[Tuple[str, 'SchemaNode']]:
        return iter(self.fields)


SchemaNode = Union[LeafNode, ArrayNode, MapNode]


def is_schema_node(obj: Any) -> bool:
    return isinstance(obj, (LeafNode, ArrayNode, MapNode))


def build_schema(tree: Any) -> SchemaNode:
    """Convert a raw default tree into its tagged representation.

    Raises:
        InvalidLeafTypeError: if a leaf is not a string, number or boolean.
    """
    if is_schema_node(tree):
        return tree
    kind = value_kind(tree)
    if kind == KIND_OBJECT:
        return MapNode(tuple((str(key), build_schema(value)) for key, value in tree.items()))
    if kind == KIND_ARRAY:
        return ArrayNode(tuple(build_schema(item) for item in tree))
    if kind in PRIMITIVE_KINDS:
        return LeafNode(tree)
    raise InvalidLeafTypeError(
        f"Default leaf must be a string, number or boolean, got {type(tree).__name__}: {tree!r}"
    )


def build_root_schema(tree: Any) -> Union[ArrayNode, MapNode]:
    """Like build_schema(), but the root itself must be a container."""
    schema = build_schema(tree)
    if isinstance(schema, LeafNode):
        raise InvalidLeafTypeError(
            f"Default config root must be a mapping or a sequence, got {type(schema.value).__name__}"
        )
    return schema
