"""
Marker synchronization: full rebuild of the rendered marker set.

Whenever the entity lists, the selection or the resolved user location
change, the whole marker collection is regenerated from the current inputs.
There is no incremental add/remove/update of marker data; the UI framework
is free to diff the resulting elements by key.

State machine:
    idle --(inputs changed)--> rebuilding --(done)--> idle
"""
import logging
from typing import Any, Iterable, List, Optional

from .coordinates import GeoCoordinate, SyntheticGeocoder
from .layout import MarkerLayoutEngine
from .highlight import marker_style
from .color_schemes import DISASTER_ICON, USER_ICON, get_resource_icon
from .models import (
    DisasterRecord,
    ResourceRecord,
    MapMarker,
    MarkerInputs,
    MarkerSet,
    RenderedMarker,
    DISASTER,
    RESOURCE,
    USER,
    USER_MARKER_ID,
    selected_id as normalize_selection,
)

logger = logging.getLogger(__name__)

IDLE = 'idle'
REBUILDING = 'rebuilding'


def build_inputs(
    disasters: Optional[Iterable[Any]],
    resources: Optional[Iterable[Any]],
    selected: Any = None,
    user_location: Optional[GeoCoordinate] = None,
) -> MarkerInputs:
    """Normalize raw host inputs into a comparable MarkerInputs value."""
    if user_location is not None and not isinstance(user_location, GeoCoordinate):
        user_location = GeoCoordinate(*user_location)

    disaster_sources = tuple(disasters or ())
    resource_sources = tuple(resources or ())

    return MarkerInputs(
        disasters=tuple(DisasterRecord.coerce(d) for d in disaster_sources),
        resources=tuple(ResourceRecord.coerce(r) for r in resource_sources),
        selected_id=normalize_selection(selected),
        user_location=user_location,
        disaster_sources=disaster_sources,
        resource_sources=resource_sources,
    )


class MarkerSynchronizer:
    """
    Rebuilds the marker set from scratch on every qualifying input change.

    After each rebuild:
        len(marker_set) == len(disasters) + len(resources) + (1 if user_location else 0)
    """

    def __init__(self, geocoder: Optional[SyntheticGeocoder] = None,
                 layout: Optional[MarkerLayoutEngine] = None):
        self.geocoder = geocoder if geocoder is not None else SyntheticGeocoder()
        self.layout = layout if layout is not None else MarkerLayoutEngine()
        self.state = IDLE
        self.rebuild_count = 0
        self.current = MarkerSet()
        self._last_inputs: Optional[MarkerInputs] = None
        self._pending: Optional[MarkerInputs] = None

    def sync(
        self,
        disasters: Optional[Iterable[Any]],
        resources: Optional[Iterable[Any]],
        selected: Any = None,
        user_location: Optional[GeoCoordinate] = None,
    ) -> MarkerSet:
        """
        Bring the marker set in line with the given inputs.

        Rebuilds only when the inputs differ (by value) from the last cycle.
        A sync arriving mid-rebuild is queued; the latest one wins. If a
        rebuild raises, the error propagates and the queue is discarded.
        """
        inputs = build_inputs(disasters, resources, selected, user_location)

        if self.state == REBUILDING:
            logger.debug("Rebuild in progress, queueing marker inputs")
            self._pending = inputs
            return self.current

        if inputs == self._last_inputs:
            return self.current

        try:
            self.rebuild(inputs)
            while self._pending is not None:
                pending, self._pending = self._pending, None
                if pending != self._last_inputs:
                    self.rebuild(pending)
        finally:
            # A failed rebuild drops whatever was queued behind it
            self._pending = None
        return self.current

    def rebuild(self, inputs: MarkerInputs) -> MarkerSet:
        """
        Unconditionally regenerate every marker from the inputs.

        Geo coordinates are drawn fresh from the geocoder each time, so they
        differ between rebuilds of the same inputs; layout positions and the
        marker count do not.
        """
        self.state = REBUILDING
        try:
            # Previous cycle's markers are discarded, never patched
            self.current = MarkerSet()
            markers: List[RenderedMarker] = []

            disaster_sources = inputs.disaster_sources or inputs.disasters
            for index, (disaster, source) in enumerate(zip(inputs.disasters, disaster_sources)):
                markers.append(self._disaster_marker(disaster, source, index, inputs.selected_id))

            resource_sources = inputs.resource_sources or inputs.resources
            for index, (resource, source) in enumerate(zip(inputs.resources, resource_sources)):
                markers.append(self._resource_marker(resource, source, index))

            if inputs.user_location is not None:
                markers.append(self._user_marker(inputs.user_location))

            self.rebuild_count += 1
            self.current = MarkerSet(markers=tuple(markers), cycle=self.rebuild_count)
            self._last_inputs = inputs
            logger.debug(
                f"Marker rebuild #{self.rebuild_count}: {len(inputs.disasters)} disasters, "
                f"{len(inputs.resources)} resources, "
                f"user={'yes' if inputs.user_location is not None else 'no'}"
            )
            return self.current
        finally:
            self.state = IDLE

    def _disaster_marker(self, disaster: DisasterRecord, source: Any, index: int,
                         selected: Optional[str]) -> RenderedMarker:
        marker = MapMarker(
            id=disaster.id,
            coordinate=self.geocoder.assign(DISASTER),
            kind=DISASTER,
            title=disaster.title,
            description=disaster.description,
        )
        return RenderedMarker(
            marker=marker,
            position=self.layout.position(DISASTER, index),
            style=marker_style(marker, selected),
            icon=DISASTER_ICON,
            label=disaster.title,
            sublabel=disaster.display_location,
            record=disaster,
            source=source,
        )

    def _resource_marker(self, resource: ResourceRecord, source: Any, index: int) -> RenderedMarker:
        marker = MapMarker(
            id=resource.id,
            coordinate=self.geocoder.assign(RESOURCE),
            kind=RESOURCE,
            title=resource.name,
            description=resource.type,
        )
        return RenderedMarker(
            marker=marker,
            position=self.layout.position(RESOURCE, index),
            style=marker_style(marker, status=resource.availability_status),
            icon=get_resource_icon(resource.type),
            label=resource.name,
            record=resource,
            source=source,
        )

    def _user_marker(self, location: GeoCoordinate) -> RenderedMarker:
        marker = MapMarker(
            id=USER_MARKER_ID,
            coordinate=location,
            kind=USER,
            title='Your Location',
        )
        return RenderedMarker(
            marker=marker,
            position=self.layout.position(USER),
            style=marker_style(marker),
            icon=USER_ICON,
            label='Your Location',
        )
