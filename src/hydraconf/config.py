"""
Framework configuration: package-wide defaults for new config sessions.

Sessions read these values when they are created; changing them does not
affect sessions that are already live.
"""
import logging
from typing import Any, Callable, Optional

from hydraconf.debounce import debounce

logger = logging.getLogger(__name__)

DebounceFactory = Callable[..., Callable[[Any], None]]

DEFAULT_WRITE_INTERVAL_MS = 100

_default_write_interval_ms: float = DEFAULT_WRITE_INTERVAL_MS
_debounce_factory: Optional[DebounceFactory] = None


def set_default_write_interval_ms(interval_ms: float) -> None:
    """Set the debounce window used when get_config() is not given one."""
    global _default_write_interval_ms
    if interval_ms < 0:
        raise ValueError(f"Write interval must be non-negative, got {interval_ms}")
    _default_write_interval_ms = interval_ms
    logger.debug(f"Default write interval set to {interval_ms}ms")


def get_default_write_interval_ms() -> float:
    return _default_write_interval_ms


def set_debounce_factory(factory: Optional[DebounceFactory]) -> None:
    """Replace the debounce factory for new sessions (None restores the asyncio one).

    The factory is called as factory(fn, window_ms, loop=loop), where loop is
    the event loop the session hydrated on, and must return a callable taking
    the latest value.
    """
    global _debounce_factory
    _debounce_factory = factory


def get_debounce_factory() -> DebounceFactory:
    return _debounce_factory if _debounce_factory is not None else debounce


def reset_config() -> None:
    """Restore all defaults. For testing."""
    global _default_write_interval_ms, _debounce_factory
    _default_write_interval_ms = DEFAULT_WRITE_INTERVAL_MS
    _debounce_factory = None
