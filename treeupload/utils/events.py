"""Progress events published while a directory is uploaded."""
from typing import Callable, Dict, List
import asyncio
import logging
logger = logging.getLogger(__name__)

# (directory, file_count) once the tree is scanned
SCAN_COMPLETE = "scan_complete"
# (file_path, UploadResult) per settled upload
FILE_COMPLETE = "file_complete"
FILE_FAIL = "file_fail"
# (uploaded_count) once every file has an identifier
BATCH_COMPLETE = "batch_complete"

UPLOAD_EVENTS = frozenset({SCAN_COMPLETE, FILE_COMPLETE, FILE_FAIL, BATCH_COMPLETE})


class EventEmitter:
    """
    Dispatches upload progress to sync or async listeners.

    Only the names in ``UPLOAD_EVENTS`` can be subscribed to or emitted, so a
    mistyped event name fails loudly instead of never firing. Listener errors
    are logged and never abort the upload that emitted the event.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {name: [] for name in UPLOAD_EVENTS}

    def _check(self, event_name: str) -> None:
        if event_name not in self._listeners:
            raise ValueError(
                f"Unknown upload event {event_name!r}, expected one of {sorted(UPLOAD_EVENTS)}"
            )

    def on(self, event_name: str, callback: Callable) -> Callable[[], None]:
        """Subscribe to an event; returns a function that unsubscribes again."""
        self._check(event_name)
        if callback not in self._listeners[event_name]:
            self._listeners[event_name].append(callback)
        return lambda: self.off(event_name, callback)

    def off(self, event_name: str, callback: Callable) -> None:
        self._check(event_name)
        if callback in self._listeners[event_name]:
            self._listeners[event_name].remove(callback)

    def listener_count(self, event_name: str) -> int:
        self._check(event_name)
        return len(self._listeners[event_name])

    async def emit(self, event_name: str, *args) -> None:
        """Call every listener of event_name in subscription order."""
        self._check(event_name)
        for callback in list(self._listeners[event_name]):
            try:
                if asyncio.iscoroutinefunction(callback):
                    await callback(*args)
                else:
                    callback(*args)
            except Exception as e:
                logger.error(f"Error in {event_name} listener {callback!r}: {e}")
