"""Tests for the reference stores."""
import asyncio
import json

from hydraconf import AsyncMemoryStore, ConfigStore, JsonFileStore, MemoryStore, hydrate
from hydraconf.store import write_record, write_record_async


def test_stores_satisfy_protocol(tmp_path):
    assert isinstance(MemoryStore(), ConfigStore)
    assert isinstance(AsyncMemoryStore(), ConfigStore)
    assert isinstance(JsonFileStore(tmp_path / 'config.json'), ConfigStore)


def test_memory_store_write_log():
    store = MemoryStore({'a': '1'})
    store.write('a', '2')
    store.write('b', 'x')
    store.write('a', '3')

    assert store.read('a') == '3'
    assert store.read('missing') is None
    assert store.writes_for('a') == ['2', '3']


def test_write_record_schedules_async_writes():
    store = AsyncMemoryStore()

    async def run():
        write_record(store, 'k', 'v')
        assert 'k' not in store.records
        await asyncio.sleep(0.01)

    asyncio.run(run())
    assert store.records == {'k': 'v'}


def test_write_record_without_loop_completes_async_write():
    store = AsyncMemoryStore()
    write_record(store, 'k', 'v')

    assert store.records == {'k': 'v'}


def test_write_record_async_waits_for_store():
    store = AsyncMemoryStore()
    asyncio.run(write_record_async(store, 'k', 'v'))

    assert store.records == {'k': 'v'}


def test_failed_async_write_is_logged(caplog):
    class BrokenStore(AsyncMemoryStore):
        async def write(self, key, value):
            raise OSError('disk full')

    async def run():
        write_record(BrokenStore(), 'k', 'v')
        await asyncio.sleep(0.01)

    asyncio.run(run())
    assert 'disk full' in caplog.text


class TestJsonFileStore:
    """Test JsonFileStore."""

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / 'missing.json')
        assert store.read('anything') is None

    def test_write_creates_file(self, tmp_path):
        path = tmp_path / 'nested' / 'config.json'
        store = JsonFileStore(path)
        store.write('ui.theme', 'dark')
        store.write('ui.fontSize', '14')

        with open(path) as f:
            assert json.load(f) == {'ui.theme': 'dark', 'ui.fontSize': '14'}

    def test_reads_existing_file(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'ui.fontSize': 16}))

        store = JsonFileStore(path)
        assert store.read('ui.fontSize') == '16'

    def test_hand_edited_json_values(self, tmp_path):
        """JSON booleans and numbers read as the text hydraconf writes for them."""
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'debug': True, 'off': False, 'n': 16, 'ratio': 2.0, 'list': [1]}))

        store = JsonFileStore(path)
        assert store.read('debug') == 'true'
        assert store.read('off') == 'false'
        assert store.read('n') == '16'
        assert store.read('ratio') == '2'
        assert store.read('list') == '[1]'

    def test_hand_edited_boolean_hydrates(self, tmp_path):
        path = tmp_path / 'config.json'
        path.write_text(json.dumps({'debug': True, 'window.width': 1024}))

        live = asyncio.run(hydrate({'debug': False, 'window': {'width': 800}}, JsonFileStore(path)))
        assert live == {'debug': True, 'window': {'width': 1024}}
