"""
Data model for the disaster map.

Records (DisasterRecord, ResourceRecord) are supplied by the host and only
ever read here. Everything else - MapMarker, RenderedMarker, MarkerSet - is
derived and regenerated on every rebuild; marker identity survives only
through the `id` field.
"""
import logging
import pandas as pd
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple, Union

from .coordinates import GeoCoordinate
from .layout import LayoutPosition

logger = logging.getLogger(__name__)

# Marker kinds
DISASTER = 'disaster'
RESOURCE = 'resource'
USER = 'user'

USER_MARKER_ID = 'user-location'

# Placeholders for missing optional fields
UNKNOWN_LOCATION = 'Unknown location'
UNTITLED_DISASTER = 'Untitled disaster'
UNNAMED_RESOURCE = 'Unnamed resource'

MAP_STYLES = ('roadmap', 'satellite', 'terrain')
DEFAULT_MAP_STYLE = 'roadmap'


def _is_missing(value: Any) -> bool:
    """None, NaN and blank strings all count as missing."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ''
    return pd.api.types.is_scalar(value) and bool(pd.isna(value))


def _field(source: Any, name: str) -> Optional[Any]:
    """Read a field from a mapping or an attribute-bearing object."""
    if isinstance(source, dict):
        value = source.get(name)
    else:
        value = getattr(source, name, None)
    return None if _is_missing(value) else value


def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(frozen=True)
class DisasterRecord:
    id: str
    title: str
    description: Optional[str] = None
    location_name: Optional[str] = None

    @property
    def display_location(self) -> str:
        return self.location_name or UNKNOWN_LOCATION

    @classmethod
    def coerce(cls, source: Any) -> "DisasterRecord":
        """
        Build a DisasterRecord from a record, dict or attribute object.

        Missing fields degrade to placeholders; this never raises for
        malformed input.
        """
        if isinstance(source, cls):
            return source
        return cls(
            id=_text(_field(source, 'id')) or '',
            title=_text(_field(source, 'title')) or UNTITLED_DISASTER,
            description=_text(_field(source, 'description')),
            location_name=_text(_field(source, 'location_name')),
        )


@dataclass(frozen=True)
class ResourceRecord:
    id: str
    name: str
    type: Optional[str] = None
    availability_status: Optional[str] = None

    @classmethod
    def coerce(cls, source: Any) -> "ResourceRecord":
        """Build a ResourceRecord from a record, dict or attribute object."""
        if isinstance(source, cls):
            return source
        return cls(
            id=_text(_field(source, 'id')) or '',
            name=_text(_field(source, 'name')) or UNNAMED_RESOURCE,
            type=_text(_field(source, 'type')),
            availability_status=_text(_field(source, 'availability_status')),
        )


Record = Union[DisasterRecord, ResourceRecord]


def selected_id(selection: Any) -> Optional[str]:
    """
    Normalize the host's "selected disaster" into an id.

    Accepts a DisasterRecord, a dict with an 'id', a bare id or None.
    """
    if _is_missing(selection):
        return None
    if isinstance(selection, (str, int)):
        return str(selection)
    value = _field(selection, 'id')
    return None if value is None else str(value)


@dataclass(frozen=True)
class MapMarker:
    """Semantic marker data: one per input record per rebuild."""
    id: str
    coordinate: GeoCoordinate
    kind: str
    title: str
    description: Optional[str] = None

    @property
    def lat(self) -> float:
        return self.coordinate.latitude

    @property
    def lng(self) -> float:
        return self.coordinate.longitude


@dataclass(frozen=True)
class MarkerStyle:
    """Visual treatment of a single marker element."""
    background: str
    border: str
    z_index: int
    box_shadow: str
    scale: float = 1.0
    highlighted: bool = False
    animation: Optional[str] = None

    def with_hover(self, **changes) -> "MarkerStyle":
        return replace(self, **changes)


@dataclass(frozen=True)
class RenderedMarker:
    """A marker as drawn on the canvas in one rebuild cycle."""
    marker: MapMarker
    position: LayoutPosition
    style: MarkerStyle
    icon: str
    label: str
    sublabel: Optional[str] = None
    record: Optional[Record] = None
    # The host's own input object, untouched
    source: Any = None

    @property
    def id(self) -> str:
        return self.marker.id

    @property
    def kind(self) -> str:
        return self.marker.kind

    @property
    def key(self) -> str:
        # ids are only unique per kind
        return f"{self.marker.kind}-{self.marker.id}"


@dataclass(frozen=True)
class MarkerSet:
    """Full marker collection produced by one rebuild cycle."""
    markers: Tuple[RenderedMarker, ...] = ()
    cycle: int = 0

    def __len__(self) -> int:
        return len(self.markers)

    def __iter__(self):
        return iter(self.markers)

    def of_kind(self, kind: str) -> Tuple[RenderedMarker, ...]:
        return tuple(m for m in self.markers if m.kind == kind)

    @property
    def disasters(self) -> Tuple[RenderedMarker, ...]:
        return self.of_kind(DISASTER)

    @property
    def resources(self) -> Tuple[RenderedMarker, ...]:
        return self.of_kind(RESOURCE)

    @property
    def user(self) -> Optional[RenderedMarker]:
        users = self.of_kind(USER)
        return users[0] if users else None

    @property
    def highlighted(self) -> Tuple[RenderedMarker, ...]:
        return tuple(m for m in self.markers if m.style.highlighted)

    @property
    def map_markers(self) -> Tuple[MapMarker, ...]:
        return tuple(m.marker for m in self.markers)


@dataclass(frozen=True)
class ViewState:
    """Presentation-only state. The map style never affects coordinates."""
    style: str = DEFAULT_MAP_STYLE

    @classmethod
    def for_style(cls, style: Optional[str]) -> "ViewState":
        if style in MAP_STYLES:
            return cls(style=style)
        logger.warning(f"Unknown map style {style!r}, using {DEFAULT_MAP_STYLE}")
        return cls()


@dataclass(frozen=True)
class MarkerInputs:
    """
    Normalized inputs of one rebuild cycle. Compared by value.

    The host's original objects ride along in *_sources so selection
    events can hand back exactly what the host supplied; a change to a
    field the records do not carry still counts as new input.
    """
    disasters: Tuple[DisasterRecord, ...] = field(default_factory=tuple)
    resources: Tuple[ResourceRecord, ...] = field(default_factory=tuple)
    selected_id: Optional[str] = None
    user_location: Optional[GeoCoordinate] = None
    disaster_sources: Tuple[Any, ...] = field(default_factory=tuple)
    resource_sources: Tuple[Any, ...] = field(default_factory=tuple)
