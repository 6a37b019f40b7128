"""
Trailing-edge write scheduling.

A Debouncer collapses every call made within one window into a single
execution that runs when the window closes, with the most recent argument.
The window opens on the first call and is not restarted by later calls, so a
continuous stream of writes still reaches the store once per window.

Windows are timed on an asyncio event loop. When no loop is running (the
session's loop has been closed, or the caller is plain synchronous code), a
call executes immediately instead.

DebounceRegistry keeps one Debouncer per dot path for the lifetime of a
config session.
"""
import asyncio
import functools
import logging
from typing import Any, Callable, Dict, Iterator, Optional

logger = logging.getLogger(__name__)

_UNSET = object()


class Debouncer:
    """Rate-limit one callable on an asyncio event loop.

    Args:
        fn: Called with the latest argument when a window closes
        window_ms: Window length in milliseconds
        loop: Loop to time windows on when called from outside any running
              loop (e.g. the loop that hydrated the session). A running loop
              in the calling thread always takes precedence.
    """

    def __init__(self, fn: Callable[[Any], Any], window_ms: float,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self._fn = fn
        self.window_ms = window_ms
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._latest: Any = _UNSET

    @property
    def pending(self) -> bool:
        """True while an execution is scheduled but has not run yet."""
        return self._handle is not None

    def _usable_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is not None:
            return running
        if self._loop is not None and self._loop.is_running():
            return self._loop
        return None

    def __call__(self, arg: Any) -> None:
        self._latest = arg
        loop = self._usable_loop()

        if loop is not self._loop and self._handle is not None:
            # Window was opened on a loop that is no longer the one in use
            self._handle.cancel()
            self._handle = None

        if loop is None:
            logger.debug("No running event loop, executing debounced call immediately")
            self._fire()
            return

        self._loop = loop
        if self._handle is None:
            self._handle = loop.call_later(self.window_ms / 1000.0, self._fire)

    def _fire(self) -> None:
        self._handle = None
        arg, self._latest = self._latest, _UNSET
        if arg is _UNSET:
            return
        self._fn(arg)


def debounce(fn: Callable[[Any], Any], window_ms: float,
             loop: Optional[asyncio.AbstractEventLoop] = None) -> Debouncer:
    """Default debounce factory: debounce(fn, window_ms, loop=None) -> debounced fn."""
    return Debouncer(fn, window_ms, loop)


class DebounceRegistry:
    """Lazily created debounced persistence functions, keyed by dot path.

    Only mutated from the single-threaded write path, so no locking. The
    factory is called as factory(fn, window_ms, loop=loop), where loop is the
    session's event loop once it has been bound.
    """

    def __init__(self, persist: Callable[[str, Any], None], window_ms: float,
                 factory: Callable[..., Callable[[Any], None]] = debounce,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self._persist = persist
        self.window_ms = window_ms
        self._factory = factory
        self.loop = loop
        self._debouncers: Dict[str, Callable[[Any], None]] = {}

    def get(self, path: str) -> Callable[[Any], None]:
        """Return the debounced persistence function for path, creating it on first use."""
        debouncer = self._debouncers.get(path)
        if debouncer is None:
            debouncer = self._factory(functools.partial(self._persist, path), self.window_ms, loop=self.loop)
            self._debouncers[path] = debouncer
            logger.debug(f"Created debounced writer for {path!r} (window={self.window_ms}ms)")
        return debouncer

    def schedule(self, path: str, value: Any) -> None:
        self.get(path)(value)

    def __contains__(self, path: str) -> bool:
        return path in self._debouncers

    def __len__(self) -> int:
        return len(self._debouncers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._debouncers)
