"""Event bus for console activity.

Services publish one event per user action or store failure; observers such
as ``ActivityLog`` subscribe with callables taking (event_name, payload).
Payload shapes are the TypedDicts below. The bus is passed into the services
that publish on it; there is no module-level instance.
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Dict, List, TypedDict, Union

logger = logging.getLogger(__name__)

# --- Event names ---
RESOURCE_CREATED = "resource.created"
RESOURCE_UPDATED = "resource.updated"
RESOURCE_DELETED = "resource.deleted"
RESOURCE_LISTED = "resource.listed"
RESOURCE_ERROR = "resource.error"

ALL_EVENTS = (RESOURCE_CREATED, RESOURCE_UPDATED, RESOURCE_DELETED, RESOURCE_LISTED, RESOURCE_ERROR)


# --- Payloads; ``resource`` is always the resource type key (``tax``, ``supplier``) ---
class RecordChanged(TypedDict):
    """resource.created / resource.updated"""
    resource: str
    display_id: str
    internal_id: str


class RecordDeleted(TypedDict):
    resource: str
    internal_id: str


class CollectionListed(TypedDict):
    resource: str
    count: int


class _OperationFailedBase(TypedDict):
    resource: str
    operation: str
    error: str


class OperationFailed(_OperationFailedBase, total=False):
    """resource.error; carries the record ids involved when known."""
    internal_id: str
    display_id: str


EventPayload = Union[RecordChanged, RecordDeleted, CollectionListed, OperationFailed]
Listener = Callable[[str, EventPayload], None]


class EventBus:
    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners[event_name]
        if listener not in listeners:
            listeners.append(listener)

    def unsubscribe(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_name, [])
        if listener in listeners:
            listeners.remove(listener)

    def publish(self, event_name: str, payload: EventPayload) -> None:
        for listener in tuple(self._listeners.get(event_name, ())):
            try:
                listener(event_name, payload)
            except Exception:
                # one failing observer must not undo the store write that published
                logger.exception(f"Listener {listener!r} failed on {event_name}")


__all__ = [
    'EventBus', 'ALL_EVENTS', 'EventPayload', 'Listener',
    'RecordChanged', 'RecordDeleted', 'CollectionListed', 'OperationFailed',
    'RESOURCE_CREATED', 'RESOURCE_UPDATED', 'RESOURCE_DELETED', 'RESOURCE_LISTED', 'RESOURCE_ERROR',
]
