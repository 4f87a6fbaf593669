# backend/navigation/geolocation.py
"""
Live position tracking.

The device reports (latitude, longitude, accuracy); the routing core wants
(lon, lat). Position.coord does that swap so nothing downstream has to care.

Listeners subscribe through a PositionTracker and get back a Subscription
object; cancelling it (or leaving a `with` block) removes exactly that
listener. There is no process-wide listener list.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from .geometry import Coord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Position:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None

    @property
    def coord(self) -> Coord:
        """Position as (lon, lat) for the routing core."""
        return (self.longitude, self.latitude)

    @classmethod
    def from_dict(cls, data) -> "Position":
        """
        Build from a {"latitude", "longitude", "accuracy"} mapping.
        Raises ValueError on missing or out-of-range values.
        """
        try:
            lat = float(data["latitude"])
            lon = float(data["longitude"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid position payload: {e}") from None

        if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
            raise ValueError(f"Position out of range: lat={lat}, lon={lon}")

        accuracy = data.get("accuracy")
        return cls(lat, lon, float(accuracy) if accuracy is not None else None)

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude, "accuracy": self.accuracy}


PositionCallback = Callable[[Position], None]


class Subscription:
    """Handle returned by PositionTracker.subscribe."""

    def __init__(self, tracker: "PositionTracker", callback: PositionCallback):
        self._tracker = tracker
        self.callback = callback
        self.active = True

    def cancel(self):
        if self.active:
            self._tracker._remove(self)
            self.active = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cancel()


class PositionTracker:
    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: List[Subscription] = []
        self._current: Optional[Position] = None

    @property
    def current(self) -> Optional[Position]:
        with self._lock:
            return self._current

    def subscribe(self, callback: PositionCallback, replay: bool = False) -> Subscription:
        """
        Register callback for future updates. With replay=True the last known
        position (if any) is delivered immediately.
        """
        sub = Subscription(self, callback)
        with self._lock:
            self._subscriptions.append(sub)
            last = self._current
        if replay and last is not None:
            callback(last)
        return sub

    def _remove(self, sub: Subscription):
        with self._lock:
            try:
                self._subscriptions.remove(sub)
            except ValueError:
                pass

    def update(self, position: Position):
        """Store position and notify every active subscriber outside the lock."""
        with self._lock:
            self._current = position
            listeners = list(self._subscriptions)

        for sub in listeners:
            try:
                sub.callback(position)
            except Exception:
                # keep notifying the rest
                logger.exception("Position listener failed")

    def __len__(self):
        with self._lock:
            return len(self._subscriptions)
