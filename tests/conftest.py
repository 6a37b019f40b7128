"""Pytest configuration and shared fixtures."""
import pytest

import hydraconf.config as config_module
from hydraconf import MemoryStore


class ManualDebouncer:
    """Debouncer stand-in that only fires when the test says so."""

    def __init__(self, fn, window_ms):
        self.fn = fn
        self.window_ms = window_ms
        self.calls = []
        self.pending = False
        self._latest = None

    def __call__(self, arg):
        self.calls.append(arg)
        self._latest = arg
        self.pending = True

    def flush(self):
        if self.pending:
            self.pending = False
            self.fn(self._latest)


class ManualScheduler:
    """Debounce factory that records every debouncer it creates."""

    def __init__(self):
        self.debouncers = []

    def __call__(self, fn, window_ms, loop=None):
        debouncer = ManualDebouncer(fn, window_ms)
        self.debouncers.append(debouncer)
        return debouncer

    def flush_all(self):
        for debouncer in self.debouncers:
            debouncer.flush()


@pytest.fixture(autouse=True)
def reset_framework_config():
    """Restore package-wide defaults around each test."""
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def ui_defaults():
    """Default tree from the settings-panel scenario."""
    return {'ui': {'theme': 'dark', 'fontSize': 14}}


@pytest.fixture
def nested_defaults():
    """Default tree mixing maps, arrays and every leaf kind."""
    return {
        'name': 'app',
        'debug': False,
        'ratio': 0.5,
        'window': {'width': 800, 'height': 600, 'maximized': True},
        'recent': ['a.txt', 'b.txt'],
        'servers': [
            {'host': 'localhost', 'port': 8080},
            {'host': 'backup', 'port': 8081},
        ],
    }


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def manual_debounce():
    """Install a manually flushed debounce factory for new sessions."""
    scheduler = ManualScheduler()
    config_module.set_debounce_factory(scheduler)
    return scheduler
