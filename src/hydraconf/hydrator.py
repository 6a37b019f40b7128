"""
Hydration: rebuild a typed nested config from flat stored strings.

The default tree is the type and shape oracle. Every leaf path is read from
the store concurrently; stored text is coerced to the default leaf's type,
and missing records fall back to the default, which is written back (and
awaited) so the store holds every key once hydration returns.
"""
import asyncio
import logging
from typing import Any, List, Tuple, Union

from hydraconf.coercion import coerce_leaf, serialize_leaf
from hydraconf.errors import InvalidLeafTypeError
from hydraconf.navigator import deep_set
from hydraconf.paths import enumerate_leaves, join_path
from hydraconf.schema import ArrayNode, LeafNode, MapNode, build_root_schema, is_primitive
from hydraconf.store import ConfigStore, read_record, write_record_async

logger = logging.getLogger(__name__)


def _empty_containers(schema) -> List[Tuple[str, Union[ArrayNode, MapNode]]]:
    """Paths of containers with no leaves below them, which leaf assembly would never create."""
    found = []

    def walk(node, prefix: str) -> None:
        if isinstance(node, LeafNode):
            return
        children = list(node.entries())
        if not children and prefix:
            found.append((prefix, node))
        for segment, child in children:
            walk(child, join_path(prefix, segment))

    walk(schema, '')
    return found


async def hydrate(default_tree: Any, store: ConfigStore) -> Union[dict, list]:
    """Build the live config object for default_tree from store.

    Args:
        default_tree: Nested dicts/lists with string, number or boolean leaves
        store: Store holding one string record per leaf path

    Returns:
        Plain nested dict (or list) congruent with default_tree

    Raises:
        InvalidLeafTypeError: a default leaf or a coerced value is not a primitive.
        Any exception raised by store.read(); hydration has no partial success.
        Failed seed writes are only logged; the default is re-seeded next time.
    """
    schema = build_root_schema(default_tree)
    leaves = enumerate_leaves(schema)
    logger.debug(f"Hydrating {len(leaves)} leaf paths")

    raw_values = await asyncio.gather(*(read_record(store, path) for path, _ in leaves))

    live: Union[dict, list] = [] if isinstance(schema, ArrayNode) else {}
    for path, node in _empty_containers(schema):
        deep_set(live, path, [] if isinstance(node, ArrayNode) else {}, schema)

    seeds = []
    for (path, leaf), raw in zip(leaves, raw_values):
        if raw is None:
            value = leaf.value
            seeds.append((path, serialize_leaf(value)))
        else:
            value = coerce_leaf(raw, leaf.value)

        if not is_primitive(value):
            raise InvalidLeafTypeError(f"Hydrated value for {path!r} is not a primitive: {value!r}")
        deep_set(live, path, value, schema)

    # Seeding finishes before the live object is handed out
    results = await asyncio.gather(
        *(write_record_async(store, path, text) for path, text in seeds),
        return_exceptions=True,
    )
    for (path, _), result in zip(seeds, results):
        if isinstance(result, Exception):
            logger.warning(f"Failed to seed default for {path!r}: {result!r}")
    if seeds:
        logger.debug(f"Seeded store with defaults for {len(seeds)} missing records: {[p for p, _ in seeds]}")
    return live

