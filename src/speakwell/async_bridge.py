"""Event loop thread for the recording session core.

The session core is single-threaded asyncio code, but ``record`` receives
input on other threads (the stdin reader and the pynput hotkey listener).
Those threads hand coroutines to one loop running in a daemon thread, so
every recorder timer, teardown and transcription await happens on it.

Usage:
    bridge = get_async_bridge()
    future = bridge.submit(controller.toggle())
"""

import asyncio
import atexit
import threading
from concurrent.futures import Future
from typing import Any, Coroutine


class AsyncBridge:
    def __init__(self):
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._loop is not None and self._loop.is_running()

    def start(self) -> None:
        if self.is_running:
            return
        ready = threading.Event()
        self._thread = threading.Thread(
            target=self._serve, args=(ready,), name="SpeakWell-EventLoop", daemon=True
        )
        self._thread.start()
        if not ready.wait(timeout=5.0):
            raise RuntimeError("Event loop thread did not start")

    def _serve(self, ready: threading.Event) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        loop.call_soon(ready.set)
        try:
            loop.run_forever()
            # Whatever is left (a recorder timer, say) is cancelled, not leaked
            leftovers = asyncio.all_tasks(loop)
            for task in leftovers:
                task.cancel()
            loop.run_until_complete(asyncio.gather(*leftovers, return_exceptions=True))
        finally:
            self._loop = None
            loop.close()

    def stop(self) -> None:
        """Stop the loop and wait for its thread; repeated calls are harmless."""
        loop, thread = self._loop, self._thread
        if loop is not None:
            loop.call_soon_threadsafe(loop.stop)
        if thread is not None:
            thread.join(timeout=5.0)
        self._thread = None

    def submit(self, coro: Coroutine[Any, Any, Any]) -> Future:
        """Schedule ``coro`` on the loop from any thread.

        Raises:
            RuntimeError: If the loop is not running
        """
        if not self.is_running:
            coro.close()
            raise RuntimeError("AsyncBridge not started. Call start() first.")
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def run_sync(self, coro: Coroutine[Any, Any, Any], timeout: float | None = None) -> Any:
        """Submit ``coro`` and block until it returns."""
        return self.submit(coro).result(timeout=timeout)


_bridge: AsyncBridge | None = None
_bridge_lock = threading.Lock()


def get_async_bridge() -> AsyncBridge:
    """Return the process-wide bridge, starting it if needed."""
    global _bridge
    with _bridge_lock:
        if _bridge is None:
            _bridge = AsyncBridge()
            atexit.register(reset_async_bridge)
        _bridge.start()
        return _bridge


def reset_async_bridge() -> None:
    """Stop and forget the process-wide bridge."""
    global _bridge
    with _bridge_lock:
        if _bridge is not None:
            _bridge.stop()
            _bridge = None
