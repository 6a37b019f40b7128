"""
Store contract and reference stores.

hydraconf only needs two operations from a store: read one string by key and
write one string by key. Either may be a coroutine function. Reads and the
seeding writes of hydration are awaited; later writes are fired and forgotten.
"""
import asyncio
import inspect
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Set, Tuple, Union, runtime_checkable

from hydraconf.coercion import serialize_leaf
from hydraconf.schema import is_primitive

logger = logging.getLogger(__name__)


@runtime_checkable
class ConfigStore(Protocol):
    """Flat key-value persistence for leaf records."""

    def read(self, key: str) -> Optional[str]:
        """Return the stored string for key, or None when absent."""

    def write(self, key: str, value: str) -> None:
        """Store value under key."""


# Strong references to in-flight background writes (the loop only keeps weak ones)
_background_writes: Set[asyncio.Future] = set()


def _on_background_write_done(future: asyncio.Future) -> None:
    _background_writes.discard(future)
    if future.cancelled():
        logger.warning("Background store write was cancelled before it completed")
        return
    error = future.exception()
    if error is not None:
        logger.warning(f"Background store write failed: {error!r}")


async def read_record(store: ConfigStore, key: str) -> Optional[str]:
    """Read one record, awaiting the result if the store is asynchronous."""
    result = store.read(key)
    if inspect.isawaitable(result):
        result = await result
    return result


async def write_record_async(store: ConfigStore, key: str, value: str) -> None:
    """Write one record and wait until the store has it."""
    result = store.write(key, value)
    if inspect.isawaitable(result):
        await result


def write_record(store: ConfigStore, key: str, value: str) -> None:
    """Write one record without waiting for it.

    A synchronous store completes (or raises) here. An asynchronous store's
    write is scheduled on the running loop and its failure only logged; with
    no loop running it is driven to completion here instead.
    """
    result = store.write(key, value)
    if not inspect.isawaitable(result):
        return
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(_await(result))
        return
    future = asyncio.ensure_future(result)
    _background_writes.add(future)
    future.add_done_callback(_on_background_write_done)


async def _await(awaitable):
    return await awaitable


class MemoryStore:
    """Dict-backed store. Keeps a write log for inspection."""

    def __init__(self, records: Optional[Dict[str, str]] = None):
        self.records: Dict[str, str] = dict(records or {})
        self.writes: List[Tuple[str, str]] = []

    def read(self, key: str) -> Optional[str]:
        return self.records.get(key)

    def write(self, key: str, value: str) -> None:
        self.records[key] = value
        self.writes.append((key, value))

    def writes_for(self, key: str) -> List[str]:
        """Values written to key, oldest first."""
        return [value for written_key, value in self.writes if written_key == key]


class AsyncMemoryStore(MemoryStore):
    """MemoryStore with coroutine read/write, standing in for remote stores."""

    async def read(self, key: str) -> Optional[str]:
        await asyncio.sleep(0)
        return super().read(key)

    async def write(self, key: str, value: str) -> None:
        await asyncio.sleep(0)
        super().write(key, value)


class JsonFileStore:
    """All records in one JSON object on disk.

    The file is loaded on first access and rewritten on every write. A missing
    file reads as an empty store.
    """

    def __init__(self, filepath: Union[str, Path]):
        self.filepath = Path(filepath)
        self._records: Optional[Dict[str, Any]] = None

    def _load(self) -> Dict[str, Any]:
        if self._records is None:
            if self.filepath.exists():
                with open(self.filepath, 'r') as f:
                    self._records = json.load(f)
                logger.debug(f"Loaded {len(self._records)} records from {self.filepath}")
            else:
                self._records = {}
        return self._records

    def read(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        if value is None or isinstance(value, str):
            return value
        if is_primitive(value):
            # Hand-edited JSON true/16 read as the text hydraconf itself writes
            return serialize_leaf(value)
        return json.dumps(value)

    def write(self, key: str, value: str) -> None:
        records = self._load()
        records[key] = value
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(self.filepath, 'w') as f:
            json.dump(records, f, indent=2)
        logger.debug(f"Wrote {key}={value!r} to {self.filepath}")
