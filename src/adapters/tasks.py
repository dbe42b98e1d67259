"""
Detached task runners.

Work submitted here runs outside the caller's flow. Failures are logged
and kept for inspection, never raised back to the submitter.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class ThreadTaskRunner:
    """Runs each task on its own daemon thread."""

    def __init__(self) -> None:
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()
        self.failures: list[tuple[str, Exception]] = []

    def submit(self, name: str, fn: Callable[[], Any]) -> None:
        thread = threading.Thread(target=self._run, args=(name, fn), name=name, daemon=True)
        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            self._threads.append(thread)
        thread.start()

    def join(self, timeout: float | None = 5.0) -> None:
        """Wait for submitted tasks, e.g. on shutdown or in tests."""
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            thread.join(timeout=timeout)

    def _run(self, name: str, fn: Callable[[], Any]) -> None:
        try:
            fn()
        except Exception as e:
            logger.exception("Detached task %s failed", name)
            with self._lock:
                self.failures.append((name, e))


class InlineTaskRunner:
    """Runs tasks immediately on the calling thread."""

    def __init__(self) -> None:
        self.failures: list[tuple[str, Exception]] = []

    def submit(self, name: str, fn: Callable[[], Any]) -> None:
        try:
            fn()
        except Exception as e:
            logger.exception("Detached task %s failed", name)
            self.failures.append((name, e))
