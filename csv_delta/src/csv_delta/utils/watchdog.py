from __future__ import annotations

import os
import threading
from typing import Callable, Iterable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .error_handling import log_watchdog_error
from .logger import log


class _DebouncedHandler(FileSystemEventHandler):
    """Call ``callback`` once a burst of events on the watched files settles."""

    def __init__(
        self, callback: Callable[[], None], debounce_ms: int = 100, only: Iterable[str] | None = None
    ) -> None:
        self._callback = callback
        self._debounce = max(0, int(debounce_ms)) / 1000.0
        self._only = {os.path.abspath(p) for p in only} if only else None
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    def _schedule(self) -> None:
        def fire() -> None:
            try:
                self._callback()
            except (RuntimeError, OSError) as e:
                log_watchdog_error("callback", "running change callback", e)

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._debounce, fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _is_relevant(self, event: FileSystemEvent) -> bool:
        if self._only is None:
            return True
        paths = {getattr(event, "src_path", ""), getattr(event, "dest_path", "")}
        return any(os.path.abspath(p) in self._only for p in paths if p)

    # Watchdog hooks
    def on_any_event(self, event: FileSystemEvent):  # type: ignore[override]
        # Only react to events that likely change file contents or names.
        et = getattr(event, "event_type", "")
        if et not in ("modified", "created", "moved", "deleted"):
            return
        if not self._is_relevant(event):
            return
        log.debug(f"[WATCHDOG] Event: {et} on {getattr(event, 'src_path', '')}")
        self._schedule()


def start_observer(
    path: str,
    on_change: Callable[[], None],
    *,
    recursive: bool = False,
    debounce_ms: int = 100,
    only: Iterable[str] | None = None,
) -> tuple[object, Callable[[], None]]:
    """
    Start a filesystem observer and return (observer, stop_fn).

    ``only`` restricts callbacks to events on the given files inside ``path``.
    stop_fn() is idempotent and cancels any pending debounced callbacks.
    """
    abs_path = os.path.abspath(path)
    log.debug(f"[WATCHDOG] Watching path: {abs_path}")
    handler = _DebouncedHandler(on_change, debounce_ms=debounce_ms, only=only)
    observer = Observer()
    observer.schedule(handler, abs_path, recursive=recursive)
    observer.start()

    _stopped = False
    _lock = threading.Lock()

    def stop() -> None:
        nonlocal _stopped
        with _lock:
            if _stopped:
                return
            _stopped = True
        handler.cancel()
        try:
            observer.stop()
            observer.join(timeout=0.5)
        except (RuntimeError, OSError) as e:
            log_watchdog_error(abs_path, "stopping observer", e)

    return observer, stop


def watch_files(
    paths: Iterable[str], on_change: Callable[[], None], *, debounce_ms: int = 100
) -> Callable[[], None]:
    """Watch a set of files (by watching their directories); return one stop function."""
    files = [os.path.abspath(p) for p in paths]
    stops: list[Callable[[], None]] = []
    for folder in sorted({os.path.dirname(p) for p in files}):
        try:
            _observer, stop = start_observer(folder, on_change, debounce_ms=debounce_ms, only=files)
        except (OSError, RuntimeError) as e:
            log_watchdog_error(folder, "starting observer", e)
            continue
        stops.append(stop)

    def stop_all() -> None:
        for stop in stops:
            stop()

    return stop_all
