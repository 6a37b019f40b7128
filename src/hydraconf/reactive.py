"""
Reactive layer: live config nodes, the observable cell, and config sessions.

Lifecycle of a ConfigSession:
    UNINITIALIZED → HYDRATING → LIVE

During HYDRATING the live object is rebuilt from the store. Going LIVE builds
a node arena: one ConfigNode per nested container, keyed by its dot-path
prefix ('' for the root). Callers only ever see nodes, so every mutation goes
through the write contract:

- the member must already exist (the default tree is the permanent schema)
- the value's kind (string/number/boolean/object/array) must match the member's
- containers are merged entry by entry, leaves are replaced
- each changed leaf is handed to its path's debounced store writer

The root node is held in a ConfigRef, which notifies subscribers when its
value is replaced. In-place leaf writes never replace it.
"""
import asyncio
import copy
import logging
from collections.abc import Mapping
from enum import Enum, auto
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from hydraconf.coercion import serialize_leaf
from hydraconf.config import DebounceFactory, get_debounce_factory, get_default_write_interval_ms
from hydraconf.debounce import DebounceRegistry
from hydraconf.errors import PathNotFoundError, TypeMismatchError, UnknownMemberError
from hydraconf.hydrator import hydrate
from hydraconf.paths import join_path, split_path
from hydraconf.schema import KIND_ARRAY, KIND_OBJECT, value_kind
from hydraconf.store import ConfigStore, write_record

logger = logging.getLogger(__name__)


class SessionState(Enum):
    UNINITIALIZED = auto()
    HYDRATING = auto()
    LIVE = auto()


_TRANSITIONS = {
    SessionState.UNINITIALIZED: {SessionState.HYDRATING},
    SessionState.HYDRATING: {SessionState.LIVE, SessionState.UNINITIALIZED},
    SessionState.LIVE: set(),
}


def _resolve_member(container: Union[dict, list], prop: Any, path: str) -> Union[str, int]:
    """Turn a member name or index into the container's own key.

    Raises:
        UnknownMemberError: prop is not a member of container.
    """
    if isinstance(container, list):
        if isinstance(prop, int) and not isinstance(prop, bool):
            index = prop
        elif isinstance(prop, str) and prop.isdigit():
            index = int(prop)
        else:
            raise UnknownMemberError(f"Array at {path or '<root>'!r} has no member {prop!r}")
        if not 0 <= index < len(container):
            raise UnknownMemberError(f"Array at {path or '<root>'!r} has no index {index}")
        return index

    key = str(prop)
    if key not in container:
        raise UnknownMemberError(f"Object at {path or '<root>'!r} cannot have member {key!r}")
    return key


def _entries(value: Any):
    return enumerate(value) if value_kind(value) == KIND_ARRAY else value.items()


def _plain(value: Any) -> Any:
    """Detached plain-data copy of a value about to be written.

    ConfigNodes (e.g. another live subtree on the right-hand side of an
    assignment) are read as their current contents, so merging never reads
    from a container while it is being written.
    """
    if isinstance(value, ConfigNode):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {key: _plain(sub_value) for key, sub_value in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


class ConfigRef:
    """Observable cell holding one value.

    Subscribers are notified with (new, old) when the value is replaced.
    Mutations inside the held value are not replacements.
    """

    def __init__(self, value: Any):
        self._value = value
        self._callbacks: List[Callable[[Any, Any], None]] = []

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        old_value = self._value
        self._value = new_value
        if new_value is not old_value:
            self._notify(new_value, old_value)

    def subscribe(self, callback: Callable[[Any, Any], None]) -> None:
        """Subscribe to value replacement."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def unsubscribe(self, callback: Callable[[Any, Any], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def _notify(self, new_value: Any, old_value: Any) -> None:
        for callback in list(self._callbacks):
            try:
                callback(new_value, old_value)
            except Exception as e:
                logger.warning(f"Error in ConfigRef subscriber: {e}")

    def __repr__(self):
        return f"ConfigRef({self._value!r})"


class ConfigNode:
    """Live view of one nested container of a config session.

    Members are read with node[name] or node.name (map members only) and
    written the same way. Reading a nested container returns its node (always
    the same object); reading a leaf returns the value. Members whose names
    collide with node methods (get, set, keys, ...) need item syntax.
    """

    __slots__ = ('_session', '_path', '_target')

    def __init__(self, session: 'ConfigSession', path: str, target: Union[dict, list]):
        object.__setattr__(self, '_session', session)
        object.__setattr__(self, '_path', path)
        object.__setattr__(self, '_target', target)

    @property
    def path(self) -> str:
        """Absolute dot-path prefix of this container ('' at the root)."""
        return self._path

    @property
    def is_array(self) -> bool:
        return isinstance(self._target, list)

    # === Explicit get/set interface ===

    def get(self, path: str) -> Any:
        """Read the member at a dot path relative to this node."""
        head, rest = split_path(path)
        value = self[head]
        if not rest:
            return value
        if not isinstance(value, ConfigNode):
            raise PathNotFoundError(f"{join_path(self._path, head)!r} is a leaf, cannot resolve {rest!r}")
        return value.get(rest)

    def set(self, path: str, value: Any) -> None:
        """Write value at a dot path relative to this node."""
        head, rest = split_path(path)
        if not rest:
            self._session.write(self, head, value)
            return
        child = self[head]
        if not isinstance(child, ConfigNode):
            raise PathNotFoundError(f"{join_path(self._path, head)!r} is a leaf, cannot resolve {rest!r}")
        child.set(rest, value)

    # === Python container protocol ===

    def __getitem__(self, prop: Any) -> Any:
        try:
            key = _resolve_member(self._target, prop, self._path)
        except UnknownMemberError as e:
            raise PathNotFoundError(str(e)) from None
        return self._session.wrap(join_path(self._path, key), self._target[key])

    def __setitem__(self, prop: Any, value: Any) -> None:
        self._session.write(self, prop, value)

    def __delitem__(self, prop: Any) -> None:
        raise TypeError(f"Config members cannot be deleted ({prop!r})")

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_') or isinstance(self._target, list):
            raise AttributeError(name)
        if name not in self._target:
            raise UnknownMemberError(f"Object at {self._path or '<root>'!r} has no member {name!r}")
        return self[name]

    def __setattr__(self, name: str, value: Any) -> None:
        self._session.write(self, name, value)

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Config members cannot be deleted ({name!r})")

    def __contains__(self, prop: Any) -> bool:
        try:
            _resolve_member(self._target, prop, self._path)
        except UnknownMemberError:
            return False
        return True

    def __len__(self) -> int:
        return len(self._target)

    def __iter__(self) -> Iterator[Any]:
        if isinstance(self._target, list):
            return (self[index] for index in range(len(self._target)))
        return iter(list(self._target))

    def keys(self) -> List[Union[str, int]]:
        return list(range(len(self._target))) if self.is_array else list(self._target)

    def values(self) -> List[Any]:
        return [self[key] for key in self.keys()]

    def items(self) -> List[tuple]:
        return [(key, self[key]) for key in self.keys()]

    def to_dict(self) -> Union[dict, list]:
        """Detached deep copy of this subtree as plain dicts and lists."""
        return copy.deepcopy(self._target)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ConfigNode):
            return self._target == other._target
        if isinstance(other, (Mapping, list)):
            return self._target == other
        return NotImplemented

    __hash__ = None

    def __repr__(self):
        return f"ConfigNode({self._path!r}, {self._target!r})"


class ConfigSession:
    """One hydrated config bound to one store.

    Owns the live object, the node arena and the debounce registry. Build it
    with get_config(), or construct it and await start() to keep a handle on
    the session itself.
    """

    def __init__(
        self,
        default_config: Any,
        store: ConfigStore,
        write_interval_ms: Optional[float] = None,
        debounce_factory: Optional[DebounceFactory] = None,
    ):
        self.default_config = default_config
        self.store = store
        self.write_interval_ms = (
            write_interval_ms if write_interval_ms is not None else get_default_write_interval_ms()
        )
        self.state = SessionState.UNINITIALIZED
        self.registry = DebounceRegistry(
            self._persist,
            self.write_interval_ms,
            debounce_factory or get_debounce_factory(),
        )
        self.ref: Optional[ConfigRef] = None
        self._nodes: Dict[str, ConfigNode] = {}

    def _transition(self, new_state: SessionState) -> bool:
        if new_state not in _TRANSITIONS[self.state]:
            logger.warning(f"Invalid session transition: {self.state.name} -> {new_state.name}")
            return False
        logger.debug(f"Session transition: {self.state.name} -> {new_state.name}")
        self.state = new_state
        return True

    async def start(self) -> ConfigRef:
        """Hydrate from the store and go live. Returns the observable root."""
        if self.state is SessionState.LIVE:
            return self.ref
        if not self._transition(SessionState.HYDRATING):
            raise RuntimeError("Config session is already hydrating")

        try:
            live = await hydrate(self.default_config, self.store)
        except Exception:
            self._transition(SessionState.UNINITIALIZED)
            raise

        self.registry.loop = asyncio.get_running_loop()
        self._build_arena(live, '')
        self.ref = ConfigRef(self._nodes[''])
        self._transition(SessionState.LIVE)
        logger.info(f"Config session live: {len(self._nodes)} containers, write interval {self.write_interval_ms}ms")
        return self.ref

    def _build_arena(self, container: Union[dict, list], prefix: str) -> None:
        self._nodes[prefix] = ConfigNode(self, prefix, container)
        for key, value in _entries(container):
            if value_kind(value) in (KIND_ARRAY, KIND_OBJECT):
                self._build_arena(value, join_path(prefix, key))

    # === Node arena ===

    def node(self, path: str = '') -> ConfigNode:
        """Node for the container at path ('' is the root)."""
        try:
            return self._nodes[path]
        except KeyError:
            raise PathNotFoundError(f"No config container at {path!r}") from None

    def wrap(self, path: str, value: Any) -> Any:
        node = self._nodes.get(path)
        return node if node is not None else value

    def to_dict(self) -> Union[dict, list]:
        return self.node('').to_dict()

    # === Write contract ===

    def write(self, node: ConfigNode, prop: Any, value: Any) -> None:
        """Validate and apply one member write, then schedule persistence.

        Raises:
            UnknownMemberError: prop (or a key inside a merged value) is not in the schema.
            TypeMismatchError: a value's kind differs from the member it replaces.
        """
        target = node._target
        key = _resolve_member(target, prop, node.path)
        value = _plain(value)
        # Validate the whole value before touching the live object
        self._validate(join_path(node.path, key), target[key], value)
        self._apply(node, key, value)

    def _validate(self, path: str, current: Any, value: Any) -> None:
        current_kind = value_kind(current)
        new_kind = value_kind(value)
        if new_kind != current_kind:
            raise TypeMismatchError(
                f"'{path}' must be of type {current_kind}, got {new_kind or type(value).__name__}"
            )
        if current_kind in (KIND_ARRAY, KIND_OBJECT):
            for sub_key, sub_value in _entries(value):
                resolved = _resolve_member(current, sub_key, path)
                self._validate(join_path(path, resolved), current[resolved], sub_value)

    def _apply(self, node: ConfigNode, key: Union[str, int], value: Any) -> None:
        path = join_path(node.path, key)
        child = self._nodes.get(path)
        if child is not None:
            # Merge into the existing container so its node stays the same object
            for sub_key, sub_value in _entries(value):
                self._apply(child, _resolve_member(child._target, sub_key, path), sub_value)
            return

        node._target[key] = value
        logger.debug(f"Config write: {path} = {value!r}")
        self.registry.schedule(path, value)

    def _persist(self, path: str, value: Any) -> None:
        try:
            write_record(self.store, path, serialize_leaf(value))
        except Exception as e:
            logger.warning(f"Failed to persist {path!r}: {e}")
        else:
            logger.debug(f"Persisted {path}")


async def get_config(
    default_config: Any,
    store: ConfigStore,
    write_interval_ms: Optional[float] = None,
) -> ConfigRef:
    """Hydrate default_config from store and return the live, observable config.

    Args:
        default_config: Nested dicts/lists with string, number or boolean leaves.
                        Defines the schema; never mutated.
        store: Object with read(key) and write(key, value); either may be async.
        write_interval_ms: Debounce window per leaf path (default: package
                           setting, 100ms).

    Returns:
        ConfigRef whose value is the root ConfigNode.
    """
    session = ConfigSession(default_config, store, write_interval_ms)
    return await session.start()
