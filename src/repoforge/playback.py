"""Cancelable playback of pre-computed simulation entries.

PlaybackLoop streams entries into an in-memory log on a worker thread, one per
tick. Starting a new run always stops the previous one and begins with a
fresh log; stopping joins the worker so no timer thread outlives the loop.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable

from repoforge.snapshot import SimulationLogEntry

logger = logging.getLogger(__name__)

DEFAULT_TICK_SECONDS = 0.4


class PlaybackLoop:
    def __init__(
        self,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        on_entry: Callable[[SimulationLogEntry], None] | None = None,
    ) -> None:
        if tick_seconds < 0:
            msg = f"tick_seconds must be non-negative, got {tick_seconds}"
            raise ValueError(msg)
        self.tick_seconds = tick_seconds
        self._on_entry = on_entry
        self._lock = threading.Lock()
        self._log: list[SimulationLogEntry] = []
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._generation = 0

    @property
    def log(self) -> list[SimulationLogEntry]:
        """Copy of the entries emitted so far in the current run."""
        with self._lock:
            return list(self._log)

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self, entries: Iterable[SimulationLogEntry]) -> None:
        """Replace any previous run with a fresh playback of *entries*."""
        self.stop()
        pending = list(entries)
        with self._lock:
            self._log = []
            self._generation += 1
            generation = self._generation
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(pending, self._stop_event, generation),
            name=f"repoforge-playback-{generation}",
            daemon=True,
        )
        self._thread.start()
        logger.debug("Playback %d started with %d entries", generation, len(pending))

    def stop(self) -> None:
        """Cancel the current run and join its worker."""
        thread = self._thread
        self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def wait(self, timeout: float | None = None) -> bool:
        """Join the current run. Returns True if it finished within *timeout*."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _run(self, entries: list[SimulationLogEntry], stop_event: threading.Event, generation: int) -> None:
        for entry in entries:
            # wait() returns True as soon as stop() sets the event
            if stop_event.wait(self.tick_seconds):
                logger.debug("Playback %d cancelled", generation)
                return
            with self._lock:
                if generation != self._generation:
                    return
                self._log.append(entry)
            if self._on_entry is not None:
                self._on_entry(entry)
        logger.debug("Playback %d finished", generation)

    def __enter__(self) -> PlaybackLoop:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
