"""Activity log observer.

Subscribes to an EventBus and keeps a capped in-memory ring buffer of recent
user actions and store errors, queried by the web layer with a cursor:

  * Each event gets an auto-increment integer id so clients can ask only for
    newer events (since=<last_id_seen>).
  * A Lock guards the buffer; uvicorn may serve requests from worker threads.
  * MAX_ACTIVITY_EVENTS caps memory use.
"""
from __future__ import annotations
from collections import deque
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Deque, Dict, List, Optional

from .Event_Bus import ALL_EVENTS, EventBus, EventPayload
from mealadmin.utilities.constants import MAX_ACTIVITY_EVENTS

# keys owned by the log; payload values never replace them
_ENTRY_KEYS = ('id', 'type', 'ts')


class ActivityLog:
    def __init__(self, max_events: int = MAX_ACTIVITY_EVENTS):
        self.max_events = max_events
        self._lock = Lock()
        self._entries: Deque[Dict[str, Any]] = deque(maxlen=max_events)
        self._last_id = 0

    def attach(self, bus: EventBus) -> "ActivityLog":
        for name in ALL_EVENTS:
            bus.subscribe(name, self.record)
        return self

    def record(self, event_name: str, payload: EventPayload) -> None:
        details = {k: v for k, v in dict(payload or {}).items() if k not in _ENTRY_KEYS}
        with self._lock:
            self._last_id += 1
            self._entries.append({
                'id': self._last_id,
                'type': event_name,
                'ts': datetime.now(timezone.utc).isoformat(),
                **details,
            })

    def get_events(self, since: Optional[int] = None) -> Dict[str, Any]:
        """Entries with id greater than ``since`` (all when None) and the cursor for the next poll."""
        with self._lock:
            entries: List[Dict[str, Any]] = [e for e in self._entries if since is None or e['id'] > since]
            cursor = self._last_id if self._entries else (since or 0)
        return {'events': entries, 'next_cursor': cursor}


__all__ = ['ActivityLog']
