import asyncio
import threading
import time
from pathlib import Path

from watchdog.events import PatternMatchingEventHandler
from watchdog.observers import Observer


def read_when_ready(path: Path, attempts: int = 10, delay: float = 0.05):
    """Read a pasted export, retrying while the writer still holds the file.

    Returns None when the file disappeared in the meantime.
    """
    for _ in range(attempts):
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (PermissionError, UnicodeDecodeError):
            time.sleep(delay)
    # last attempt raises so the failure shows up in the logs
    return path.read_text(encoding="utf-8")


class FileWatcher:
    """Feeds new inbox files to an async callback running on ``loop``.

    Editors fire created and modified events for one save; a path already
    handed to the loop is not submitted again until that run finishes.
    """

    def __init__(self, inbox: str, glob: str, on_text_async, loop: asyncio.AbstractEventLoop):
        self.inbox = Path(inbox)
        self.inbox.mkdir(parents=True, exist_ok=True)
        self.loop = loop
        self.on_text_async = on_text_async
        self._in_flight = set()
        self._lock = threading.Lock()

        self.handler = PatternMatchingEventHandler(patterns=[glob], ignore_directories=True)
        self.handler.on_created = lambda e: self.submit(Path(e.src_path))
        self.handler.on_modified = lambda e: self.submit(Path(e.src_path))
        self.handler.on_moved = lambda e: self.submit(Path(e.dest_path))
        self.observer = Observer()

    def _release(self, key: str):
        with self._lock:
            self._in_flight.discard(key)

    def submit(self, path: Path):
        key = str(path)
        with self._lock:
            if key in self._in_flight or not path.exists():
                return
            self._in_flight.add(key)

        try:
            text = read_when_ready(path)
        except Exception:
            self._release(key)
            raise
        if not text or not text.strip():
            # still empty on create; the modified event brings the content
            self._release(key)
            return
        fut = asyncio.run_coroutine_threadsafe(self.on_text_async(text, key), self.loop)
        fut.add_done_callback(lambda _f: self._release(key))

    def start(self):
        self.observer.schedule(self.handler, str(self.inbox), recursive=False)
        self.observer.start()

    def stop(self):
        self.observer.stop()
        self.observer.join()
