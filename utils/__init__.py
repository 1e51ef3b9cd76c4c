"""
Core utilities for the disaster map.

Modules:
- coordinates: pixel -> geo transform, synthetic geocoder
- layout: grid placement of markers
- models: records, markers, view state
- color_schemes / highlight: marker colours, glyphs, selection highlight
- marker_sync: full-rebuild marker synchronizer
- location: user location resolution with fallback
- interaction: click handling, ripples, selection channel
- styles: shared animation CSS, one owning view per session
- data_loader: sample feed, frame conversion, live stats
"""

from .coordinates import (
    GeoCoordinate,
    BASE_COORDINATE,
    CoordinateTransform,
    SyntheticGeocoder,
    pixel_to_geo,
)

from .layout import (
    LayoutPosition,
    GridSpec,
    MarkerLayoutEngine,
    layout_position,
)

from .models import (
    DisasterRecord,
    ResourceRecord,
    MapMarker,
    MarkerStyle,
    RenderedMarker,
    MarkerSet,
    ViewState,
    MAP_STYLES,
)

from .highlight import marker_style, hover_style

from .marker_sync import MarkerSynchronizer

from .location import (
    UserLocationResolver,
    StaticLocationProvider,
    EnvironmentLocationProvider,
    BackgroundLocationProvider,
    LocationUnavailable,
)

from .interaction import (
    InteractionBroadcaster,
    SelectionChannel,
    SelectionEvent,
    RippleTracker,
    SELECT_DISASTER,
    default_channel,
)

from .data_loader import (
    load_sample_feed,
    records_from_frame,
    markers_to_frame,
    calculate_map_stats,
)

__all__ = [
    # Coordinates
    'GeoCoordinate',
    'BASE_COORDINATE',
    'CoordinateTransform',
    'SyntheticGeocoder',
    'pixel_to_geo',
    # Layout
    'LayoutPosition',
    'GridSpec',
    'MarkerLayoutEngine',
    'layout_position',
    # Models
    'DisasterRecord',
    'ResourceRecord',
    'MapMarker',
    'MarkerStyle',
    'RenderedMarker',
    'MarkerSet',
    'ViewState',
    'MAP_STYLES',
    # Styling
    'marker_style',
    'hover_style',
    # Sync
    'MarkerSynchronizer',
    # Location
    'UserLocationResolver',
    'StaticLocationProvider',
    'EnvironmentLocationProvider',
    'BackgroundLocationProvider',
    'LocationUnavailable',
    # Interaction
    'InteractionBroadcaster',
    'SelectionChannel',
    'SelectionEvent',
    'RippleTracker',
    'SELECT_DISASTER',
    'default_channel',
    # Data
    'load_sample_feed',
    'records_from_frame',
    'markers_to_frame',
    'calculate_map_stats',
]
