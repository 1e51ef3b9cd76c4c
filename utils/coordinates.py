"""
Coordinate utilities for the disaster map canvas.

Two independent coordinate concerns live here:
- CoordinateTransform: converts a click pixel on the synthetic canvas into an
  approximate (latitude, longitude) anchored on NYC.
- SyntheticGeocoder: gives each entity a jittered coordinate near the base.
  This is informational data only - markers are placed by the layout grid,
  never by these coordinates.
"""
import os
import logging
import numpy as np
from dataclasses import dataclass
from typing import NamedTuple, Optional, Dict

logger = logging.getLogger(__name__)


class GeoCoordinate(NamedTuple):
    """A (latitude, longitude) pair. Never validated."""
    latitude: float
    longitude: float

    def format_readout(self) -> str:
        """Format for the on-canvas coordinate readout."""
        return f"Lat: {self.latitude:.4f}, Lng: {self.longitude:.4f}"


# NYC reference point - the canvas centre maps here
BASE_COORDINATE = GeoCoordinate(40.7128, -74.0060)

# Degrees covered by the full canvas height / width
LAT_SPAN = 0.3
LNG_SPAN = 0.4

# Full jitter span per entity kind (coordinate = base +/- span / 2)
GEO_JITTER = {
    'disaster': 0.15,
    'resource': 0.12,
}

GEO_SEED_ENV = "DISASTER_MAP_GEO_SEED"


@dataclass(frozen=True)
class CoordinateTransform:
    """
    Fixed affine mapping from canvas pixels to geographic coordinates.

    The canvas centre maps to the base coordinate. Moving up increases
    latitude, moving right increases longitude. Points outside the canvas
    are not clamped and simply land outside the span.
    """
    base: GeoCoordinate = BASE_COORDINATE
    lat_span: float = LAT_SPAN
    lng_span: float = LNG_SPAN

    def pixel_to_geo(self, x: float, y: float, width: float, height: float) -> GeoCoordinate:
        """
        Convert a pixel position within the canvas into (lat, lng).

        Args:
            x: Horizontal offset from the canvas left edge, in pixels
            y: Vertical offset from the canvas top edge, in pixels
            width: Canvas width in pixels
            height: Canvas height in pixels

        Returns:
            GeoCoordinate for the clicked point

        Raises:
            ValueError: If the canvas has no area
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas must have a positive size, got {width}x{height}")

        lat = self.base.latitude + (0.5 - y / height) * self.lat_span
        lng = self.base.longitude + (x / width - 0.5) * self.lng_span
        return GeoCoordinate(lat, lng)


DEFAULT_TRANSFORM = CoordinateTransform()


def pixel_to_geo(x: float, y: float, width: float, height: float) -> GeoCoordinate:
    """Convert a canvas pixel to (lat, lng) using the default NYC transform."""
    return DEFAULT_TRANSFORM.pixel_to_geo(x, y, width, height)


class SyntheticGeocoder:
    """
    Assigns each entity a quasi-random coordinate near the base coordinate.

    Re-invoked on every marker rebuild, so the same record gets a new
    coordinate each cycle. Pass a seeded numpy Generator to make the
    sequence reproducible (tests, demos); the default generator is unseeded.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        base: GeoCoordinate = BASE_COORDINATE,
        jitter: Optional[Dict[str, float]] = None,
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.base = base
        self.jitter = dict(GEO_JITTER if jitter is None else jitter)

    @classmethod
    def from_env(cls) -> "SyntheticGeocoder":
        """Build a geocoder seeded from DISASTER_MAP_GEO_SEED when it is set."""
        raw_seed = os.environ.get(GEO_SEED_ENV, "").strip()
        if not raw_seed:
            return cls()

        try:
            seed = int(raw_seed)
        except ValueError:
            logger.warning(f"Ignoring non-integer {GEO_SEED_ENV}={raw_seed!r}")
            return cls()

        logger.info(f"Synthetic geocoder seeded with {seed}")
        return cls(rng=np.random.default_rng(seed))

    def assign(self, kind: str) -> GeoCoordinate:
        """
        Draw a jittered coordinate for an entity of the given kind.

        Args:
            kind: 'disaster' or 'resource'

        Returns:
            GeoCoordinate within +/- span/2 of the base on both axes
        """
        span = self.jitter.get(kind)
        if span is None:
            logger.warning(f"No jitter span for marker kind {kind!r}, using disaster span")
            span = self.jitter.get('disaster', GEO_JITTER['disaster'])

        lat = self.base.latitude + (self.rng.random() - 0.5) * span
        lng = self.base.longitude + (self.rng.random() - 0.5) * span
        return GeoCoordinate(float(lat), float(lng))
