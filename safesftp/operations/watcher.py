"""
Turn file modifications into "document saved" events for terminal use
"""
import os
import queue
from typing import Callable

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from ..utils.logging import vlog


class SaveHandler(FileSystemEventHandler):
    """Queues the target path whenever that one file is written or replaced."""

    def __init__(self, target: str, events: "queue.Queue[str]"):
        super().__init__()
        self.target = os.path.abspath(target)
        self.events = events

    def _maybe_enqueue(self, path) -> None:
        if os.path.abspath(os.fsdecode(path)) == self.target:
            self.events.put(self.target)

    def on_modified(self, event):
        if not event.is_directory:
            self._maybe_enqueue(event.src_path)

    def on_created(self, event):
        if not event.is_directory:
            self._maybe_enqueue(event.src_path)

    def on_moved(self, event):
        # editors that save via write-to-temp + rename
        if not event.is_directory:
            self._maybe_enqueue(event.dest_path)


def watch_saves(path, on_save: Callable[[str], object],
                poll_interval: float,
                should_stop: Callable[[], bool] = lambda: False,
                observer_cls=Observer):
    """
    Watch the directory holding *path* and call on_save(path) on the calling
    thread each time the file is saved. Events arriving together are folded
    into one call. should_stop() is checked at least every *poll_interval*
    seconds; KeyboardInterrupt propagates to the caller.
    """
    target = os.path.abspath(str(path))
    events: "queue.Queue[str]" = queue.Queue()
    observer = observer_cls()
    observer.schedule(SaveHandler(target, events), os.path.dirname(target), recursive=False)
    observer.start()
    vlog(f"[watch] watching {target}")
    try:
        while not should_stop():
            try:
                saved = events.get(timeout=poll_interval)
            except queue.Empty:
                continue
            while True:
                try:
                    events.get_nowait()
                except queue.Empty:
                    break
            vlog(f"[watch] {os.path.basename(saved)} saved")
            on_save(saved)
    finally:
        observer.stop()
        observer.join()
