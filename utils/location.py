"""
User location resolution.

The viewer's own position comes from an external sensing provider. A
provider exposes one method:

    request_position(on_success, on_error)

and calls exactly one of the callbacks, possibly later and from another
thread. Any failure (denied, unavailable, provider missing) resolves to the
fallback coordinate - nothing is surfaced to the caller.

There is no timeout: if a provider never calls back, the user location never
resolves and the user marker never appears.
"""
import os
import logging
import threading
from typing import Callable, Optional, Tuple

from .coordinates import GeoCoordinate, BASE_COORDINATE

logger = logging.getLogger(__name__)

USER_LOCATION_ENV = "DISASTER_MAP_USER_LOCATION"

SuccessCallback = Callable[[GeoCoordinate], None]
ErrorCallback = Callable[[Exception], None]


class LocationUnavailable(Exception):
    """The provider could not determine a position."""


def parse_coordinates(coord_str: str) -> Tuple[Optional[float], Optional[float]]:
    """Parse 'lat,lng' string into separate float values."""
    if not coord_str:
        return None, None

    try:
        parts = str(coord_str).split(',')
        if len(parts) == 2:
            return float(parts[0].strip()), float(parts[1].strip())
    except (ValueError, AttributeError):
        pass

    return None, None


class StaticLocationProvider:
    """Reports a fixed coordinate immediately."""

    def __init__(self, coordinate: GeoCoordinate):
        self.coordinate = GeoCoordinate(*coordinate)

    def request_position(self, on_success: SuccessCallback, on_error: ErrorCallback) -> None:
        on_success(self.coordinate)


class EnvironmentLocationProvider:
    """
    Reads the position from an environment variable ("lat,lng").

    Useful for kiosk deployments where the device location is known up front.
    """

    def __init__(self, var: str = USER_LOCATION_ENV):
        self.var = var

    def request_position(self, on_success: SuccessCallback, on_error: ErrorCallback) -> None:
        raw = os.environ.get(self.var, "")
        lat, lng = parse_coordinates(raw)
        if lat is None or lng is None:
            on_error(LocationUnavailable(f"{self.var} is not set to 'lat,lng' (got {raw!r})"))
            return
        on_success(GeoCoordinate(lat, lng))


class BackgroundLocationProvider:
    """
    Runs a blocking position lookup on a daemon thread.

    The lookup returns a GeoCoordinate (or a (lat, lng) pair) or raises.
    """

    def __init__(self, lookup: Callable[[], Tuple[float, float]], name: str = "user-location"):
        self.lookup = lookup
        self.name = name

    def request_position(self, on_success: SuccessCallback, on_error: ErrorCallback) -> threading.Thread:
        def run():
            try:
                lat, lng = self.lookup()
            except Exception as e:
                on_error(e)
                return
            on_success(GeoCoordinate(float(lat), float(lng)))

        thread = threading.Thread(target=run, name=self.name, daemon=True)
        thread.start()
        return thread


class UserLocationResolver:
    """
    One-shot resolution of the viewer's position with a fixed fallback.

    Settles at most once: the first success or failure wins and any later
    callback from the provider is ignored.
    """

    def __init__(self, provider=None, fallback: GeoCoordinate = BASE_COORDINATE):
        self.provider = provider
        self.fallback = fallback
        self.location: Optional[GeoCoordinate] = None
        self._settled = False
        self._lock = threading.Lock()

    @property
    def resolved(self) -> bool:
        return self._settled

    def resolve(self, on_resolved: SuccessCallback) -> None:
        """
        Request the position and report it through on_resolved.

        on_resolved receives either the provider's coordinate or the
        fallback; it may be called synchronously or later.
        """
        def settle(location: GeoCoordinate, source: str):
            with self._lock:
                if self._settled:
                    logger.debug(f"Ignoring late user location from {source}")
                    return
                self._settled = True
                self.location = location
            logger.info(f"User location resolved ({source}): {location.format_readout()}")
            try:
                on_resolved(location)
            except Exception:
                logger.exception("User location callback failed")

        def on_success(location: GeoCoordinate):
            settle(GeoCoordinate(*location), "provider")

        def on_error(error: Exception):
            logger.info(f"Geolocation error: {error}")
            settle(self.fallback, "fallback")

        if self.provider is None:
            settle(self.fallback, "fallback")
            return

        try:
            self.provider.request_position(on_success, on_error)
        except Exception as e:
            logger.warning(f"Location provider failed: {e}. Falling back to default location.")
            settle(self.fallback, "fallback")
