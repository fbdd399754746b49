"""
Listener registry and broadcast bus for engine output.
"""
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple


logger = logging.getLogger(__name__)

GESTURE_CHANNEL = "gesture"
FRAME_CHANNEL = "frame"
STATUS_CHANNEL = "status"

CHANNELS = (GESTURE_CHANNEL, FRAME_CHANNEL, STATUS_CHANNEL)

_handle_ids = itertools.count(1)


@dataclass(frozen=True)
class ListenerHandle:
    """Returned by subscribe; pass it back to unsubscribe."""
    id: int
    channel: str = GESTURE_CHANNEL


def _deliver(callbacks: List[Tuple[ListenerHandle, Callable[[Any], None]]], payload: Any) -> None:
    # Snapshot so callbacks may unsubscribe while being notified
    for handle, callback in list(callbacks):
        try:
            callback(payload)
        except Exception:
            logger.exception("Listener %d raised while handling %r", handle.id, payload)


class ListenerRegistry:
    """Direct listeners of a single engine."""

    def __init__(self):
        self._callbacks: List[Tuple[ListenerHandle, Callable[[Any], None]]] = []

    def __len__(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: Callable[[Any], None]) -> ListenerHandle:
        handle = ListenerHandle(id=next(_handle_ids))
        self._callbacks.append((handle, callback))
        return handle

    def unsubscribe(self, handle: ListenerHandle) -> bool:
        before = len(self._callbacks)
        self._callbacks = [(h, cb) for h, cb in self._callbacks if h != handle]
        return len(self._callbacks) != before

    def notify(self, payload: Any) -> None:
        _deliver(self._callbacks, payload)


class EventBus:
    """
    Broadcast channel for listeners that do not hold a reference to the engine.

    Channels:
        - 'gesture': GestureEvent
        - 'frame': FrameTelemetry
        - 'status': StatusEvent
    """

    def __init__(self):
        self._channels: Dict[str, List[Tuple[ListenerHandle, Callable[[Any], None]]]] = {
            channel: [] for channel in CHANNELS
        }

    def subscribe(self, channel: str, callback: Callable[[Any], None]) -> ListenerHandle:
        if channel not in self._channels:
            raise ValueError(f"Unknown channel '{channel}', expected one of {CHANNELS}")
        handle = ListenerHandle(id=next(_handle_ids), channel=channel)
        self._channels[channel].append((handle, callback))
        return handle

    def unsubscribe(self, handle: ListenerHandle) -> bool:
        callbacks = self._channels.get(handle.channel, [])
        remaining = [(h, cb) for h, cb in callbacks if h != handle]
        self._channels[handle.channel] = remaining
        return len(remaining) != len(callbacks)

    def publish(self, channel: str, payload: Any) -> None:
        """Deliver to every subscriber of ``channel``; without subscribers the payload is dropped."""
        _deliver(self._channels.get(channel, []), payload)
