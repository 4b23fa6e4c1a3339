import threading
from typing import Callable, Optional


class ImportJob:
    """Reads one import file on a daemon thread.

    The event loop polls ``done`` and hands ``content`` (or ``error``) back
    to the engine on its own thread, so the store is only touched there.
    """

    def __init__(self, path: str, reader: Callable[[str], str]):
        self.path = path
        self._reader = reader
        self.done = False
        self.content: Optional[str] = None
        self.error: Optional[Exception] = None
        self._thread: Optional[threading.Thread] = None

    def start(self):
        t = threading.Thread(target=self._load, daemon=True)
        self._thread = t
        t.start()
        return self

    def _load(self):
        try:
            self.content = self._reader(self.path)
        except Exception as exc:
            self.error = exc
        self.done = True

    def wait(self, timeout: Optional[float] = None) -> bool:
        if self._thread is not None:
            self._thread.join(timeout)
        return self.done
