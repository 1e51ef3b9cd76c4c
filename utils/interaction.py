"""
Interaction handling for the map canvas.

- Canvas (background) clicks become geographic coordinates: the readout is
  updated, a ripple is shown at the click point and the host's
  location-select callback is invoked. Without a callback the canvas is
  inert.
- Disaster marker clicks announce selection intent on a SelectionChannel.
  The map never changes the selection itself; the host decides.

The channel is injected so that selection can be scoped per view and
observed in tests. `default_channel` is available for hosts that want a
single process-wide channel.
"""
import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from .coordinates import CoordinateTransform, GeoCoordinate, DEFAULT_TRANSFORM
from .models import RenderedMarker, DISASTER

logger = logging.getLogger(__name__)

SELECT_DISASTER = 'selectDisaster'

READOUT_PLACEHOLDER = 'Click on map to see coordinates'

# Seconds a click ripple stays on the canvas
RIPPLE_DURATION = 1.0

# Fallback canvas size (px) when the click payload carries no bounds
DEFAULT_CANVAS_SIZE = (800, 384)


@dataclass(frozen=True)
class SelectionEvent:
    type: str
    payload: Any


Listener = Callable[[SelectionEvent], None]


class SelectionChannel:
    """
    Multi-listener, fire-and-forget notification channel.

    Listeners run in subscription order. A failing listener is logged and
    does not stop the others.
    """

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, event: SelectionEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Selection listener failed for {event.type} event")


default_channel = SelectionChannel()


# =============================================================================
# CLICK RIPPLES
# =============================================================================

@dataclass(frozen=True)
class Ripple:
    id: int
    x: float
    y: float


def _timer_scheduler(delay: float, callback: Callable[[], None]) -> None:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()


class RippleTracker:
    """
    Transient click feedback. Each ripple removes itself after `duration`.

    The scheduler is fire-and-forget: scheduler(delay, callback). Tests pass
    a fake scheduler to fire removals by hand.
    """

    def __init__(self, duration: float = RIPPLE_DURATION,
                 scheduler: Optional[Callable[[float, Callable[[], None]], None]] = None,
                 on_change: Optional[Callable[[Tuple[Ripple, ...]], None]] = None):
        self.duration = duration
        self.scheduler = scheduler or _timer_scheduler
        self.on_change = on_change
        self._ripples: Dict[int, Ripple] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def active(self) -> Tuple[Ripple, ...]:
        with self._lock:
            return tuple(self._ripples.values())

    def add(self, x: float, y: float) -> Ripple:
        ripple = Ripple(id=next(self._ids), x=x, y=y)
        with self._lock:
            self._ripples[ripple.id] = ripple
        self._notify()
        self.scheduler(self.duration, lambda: self.remove(ripple.id))
        return ripple

    def remove(self, ripple_id: int) -> None:
        with self._lock:
            removed = self._ripples.pop(ripple_id, None)
        if removed is not None:
            self._notify()

    def _notify(self):
        if self.on_change is None:
            return
        try:
            self.on_change(self.active)
        except Exception:
            logger.exception("Ripple change callback failed")


# =============================================================================
# BROADCASTER
# =============================================================================

def pointer_from_event(data: Optional[dict],
                       default_size: Tuple[float, float] = DEFAULT_CANVAS_SIZE
                       ) -> Optional[Tuple[float, float, float, float]]:
    """
    Extract (x, y, width, height) from a DOM click payload.

    Uses offsetX/offsetY relative to the clicked element, and the element's
    boundingRectangle for the size when present.

    Returns:
        Tuple of pixel values, or None if the payload has no position
    """
    if not data:
        return None

    x = data.get('offsetX')
    y = data.get('offsetY')
    if x is None or y is None:
        return None

    width, height = default_size
    rect = data.get('boundingRectangle') or {}
    if rect.get('width') and rect.get('height'):
        width, height = rect['width'], rect['height']

    return float(x), float(y), float(width), float(height)


class InteractionBroadcaster:
    """
    Turns canvas and marker clicks into callbacks and selection events.

    Exceptions from host callbacks are logged and never propagate back into
    the view.
    """

    def __init__(
        self,
        transform: CoordinateTransform = DEFAULT_TRANSFORM,
        channel: Optional[SelectionChannel] = None,
        on_location_select: Optional[Callable[[float, float], None]] = None,
        ripples: Optional[RippleTracker] = None,
    ):
        self.transform = transform
        self.channel = channel if channel is not None else default_channel
        self.on_location_select = on_location_select
        self.ripples = ripples if ripples is not None else RippleTracker()
        self.readout = READOUT_PLACEHOLDER
        self.last_coordinate: Optional[GeoCoordinate] = None

    def handle_canvas_click(self, x: float, y: float,
                            width: float, height: float) -> Optional[GeoCoordinate]:
        """
        Handle a click on the canvas background.

        Args:
            x, y: Click offset within the canvas, in pixels
            width, height: Canvas size, in pixels

        Returns:
            The computed coordinate, or None if there is no location
            callback or the canvas has no size
        """
        if self.on_location_select is None:
            return None

        try:
            coordinate = self.transform.pixel_to_geo(x, y, width, height)
        except ValueError as e:
            logger.warning(f"Ignoring canvas click: {e}")
            return None

        self.last_coordinate = coordinate
        self.readout = coordinate.format_readout()
        self.ripples.add(x, y)

        try:
            self.on_location_select(coordinate.latitude, coordinate.longitude)
        except Exception:
            logger.exception("Location select callback failed")

        return coordinate

    def handle_marker_click(self, rendered: RenderedMarker) -> bool:
        """
        Handle a click on a marker.

        Only disaster markers are selectable; they announce the record
        exactly as the host supplied it.

        Returns:
            True if a selection event was emitted
        """
        if rendered.kind != DISASTER:
            return False

        payload = rendered.source if rendered.source is not None else rendered.record
        logger.info(f"Disaster marker clicked: {rendered.id}")
        self.channel.emit(SelectionEvent(type=SELECT_DISASTER, payload=payload))
        return True
