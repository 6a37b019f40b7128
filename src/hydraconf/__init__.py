"""
Store-backed nested configuration with typed hydration and debounced persistence.

A nested default config (dicts and lists with string, number or boolean
leaves) doubles as the schema. Every leaf is persisted as its own string
record under a dot-path key; hydration reads those records back, coerces them
to the defaults' types, and seeds any that are missing. The result is exposed
as a live, observable config whose writes are validated against the schema
and persisted per leaf with rate-limited store writes.

Quick Start:
    >>> from hydraconf import get_config, JsonFileStore
    >>>
    >>> DEFAULTS = {'ui': {'theme': 'dark', 'fontSize': 14}}
    >>> ref = await get_config(DEFAULTS, JsonFileStore('settings.json'))
    >>> config = ref.value
    >>> config.ui.fontSize = 16          # applied now, persisted after 100ms
    >>> config.ui.fontSize = 'big'       # raises TypeMismatchError
    >>> config.ui.colour = 'red'         # raises UnknownMemberError

Storage layout:
    {'ui': {'theme': 'dark', 'fontSize': 14}, 'recent': ['a', 'b']}
    →  'ui.theme' = 'dark'
       'ui.fontSize' = '14'
       'recent.0' = 'a'
       'recent.1' = 'b'

Modules:
    - paths: dot-path split/join and leaf enumeration
    - schema: tagged representation of the default tree
    - navigator: deep_get/deep_set over nested dicts and lists
    - coercion: stored string <-> typed leaf conversion
    - hydrator: rebuild the live object from a store
    - reactive: ConfigNode, ConfigRef, ConfigSession and get_config()
    - debounce: trailing-edge per-path write scheduling
    - store: store protocol and reference stores
    - config: package-wide defaults (write interval, debounce factory)
    - errors: error taxonomy
"""

# Errors
from hydraconf.errors import (
    HydraConfError,
    MalformedPathError,
    PathNotFoundError,
    ShapeMismatchError,
    UnknownMemberError,
    TypeMismatchError,
    InvalidLeafTypeError,
)

# Path codec and navigation
from hydraconf.paths import split_path, join_path, enumerate_leaf_paths
from hydraconf.navigator import deep_get, deep_set
from hydraconf.schema import LeafNode, ArrayNode, MapNode, build_schema

# Hydration
from hydraconf.coercion import coerce_leaf, serialize_leaf
from hydraconf.hydrator import hydrate

# Reactive layer
from hydraconf.reactive import (
    ConfigNode,
    ConfigRef,
    ConfigSession,
    SessionState,
    get_config,
)
from hydraconf.debounce import Debouncer, DebounceRegistry, debounce

# Stores
from hydraconf.store import ConfigStore, MemoryStore, AsyncMemoryStore, JsonFileStore

# Configuration
from hydraconf.config import (
    set_default_write_interval_ms,
    get_default_write_interval_ms,
    set_debounce_factory,
    get_debounce_factory,
)

__all__ = [
    # Errors
    'HydraConfError',
    'MalformedPathError',
    'PathNotFoundError',
    'ShapeMismatchError',
    'UnknownMemberError',
    'TypeMismatchError',
    'InvalidLeafTypeError',
    # Path codec and navigation
    'split_path',
    'join_path',
    'enumerate_leaf_paths',
    'deep_get',
    'deep_set',
    'LeafNode',
    'ArrayNode',
    'MapNode',
    'build_schema',
    # Hydration
    'coerce_leaf',
    'serialize_leaf',
    'hydrate',
    # Reactive layer
    'ConfigNode',
    'ConfigRef',
    'ConfigSession',
    'SessionState',
    'get_config',
    'Debouncer',
    'DebounceRegistry',
    'debounce',
    # Stores
    'ConfigStore',
    'MemoryStore',
    'AsyncMemoryStore',
    'JsonFileStore',
    # Configuration
    'set_default_write_interval_ms',
    'get_default_write_interval_ms',
    'set_debounce_factory',
    'get_debounce_factory',
]

__version__ = '1.0.0'
__description__ = 'Store-backed nested configuration with typed hydration and debounced persistence'
