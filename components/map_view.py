"""
Map view component (Solara) for the disaster dashboard.

Renders disaster and resource markers over a synthetic grid canvas. There is
no tile service behind it: clicks are converted to approximate NYC
coordinates with a fixed affine transform, and markers are laid out on a
fixed grid by their position in the input lists.

Inputs drive everything:
- disasters / resources: marker data (records or dicts)
- selected_disaster: highlighted marker (record, dict or id)
- on_location_select(lat, lng): called on background clicks
- selection_channel: receives "selectDisaster" events on marker clicks

Marker data is rebuilt in full whenever an input changes (MarkerSynchronizer);
each marker element is keyed by kind + id so Solara only patches what moved.
"""
import html
import logging
import solara
import reacton.ipyvuetify as rv
from typing import Callable, Optional, Sequence, Tuple

from utils.color_schemes import Z_INDEX, get_map_background
from utils.coordinates import SyntheticGeocoder
from utils.data_loader import calculate_map_stats
from utils.highlight import hover_style, marker_css
from utils.interaction import (
    DEFAULT_CANVAS_SIZE,
    READOUT_PLACEHOLDER,
    RIPPLE_DURATION,
    InteractionBroadcaster,
    Ripple,
    RippleTracker,
    SelectionChannel,
    pointer_from_event,
)
from utils.location import UserLocationResolver
from utils.marker_sync import MarkerSynchronizer
from utils.models import DEFAULT_MAP_STYLE, DISASTER, USER, RenderedMarker, ViewState
from utils.styles import GLOBAL_ANIMATION_CSS, claim_global_styles

from components.map_chrome import (
    GRID_OVERLAY_HTML,
    LiveStats,
    MapHeader,
    MapLegend,
    readout_html,
    title_card_html,
)

logger = logging.getLogger(__name__)


def marker_inner_html(rendered: RenderedMarker) -> str:
    """Label markup inside a marker pill."""
    if rendered.kind == USER:
        return rendered.icon

    label = html.escape(rendered.label)
    if rendered.kind == DISASTER:
        sublabel = html.escape(rendered.sublabel or '')
        return f"""
            <div style="display: flex; align-items: center; gap: 6px; justify-content: center;">
                <span style="font-size: 14px;">{rendered.icon}</span>
                <span style="font-weight: 700;">{label}</span>
            </div>
            <div style="font-size: 10px; opacity: 0.9; margin-top: 2px;">{sublabel}</div>
        """

    return f"""
        <div style="display: flex; align-items: center; gap: 4px; justify-content: center;">
            <span style="font-size: 10px;">{rendered.icon}</span>
            <span>{label}</span>
        </div>
    """


def session_scope():
    """Kernel id of the current session, or None outside a Solara server."""
    try:
        return solara.get_kernel_id()
    except RuntimeError:
        return None


def ripple_css(ripple: Ripple) -> str:
    return (
        f"position: absolute; left: {ripple.x}px; top: {ripple.y}px; "
        f"width: 20px; height: 20px; border: 2px solid #3b82f6; border-radius: 50%; "
        f"transform: translate(-50%, -50%); animation: ripple {RIPPLE_DURATION}s ease-out forwards; "
        f"pointer-events: none; z-index: {Z_INDEX['ripple']};"
    )


@solara.component
def MarkerElement(rendered: RenderedMarker, on_click: Callable[[RenderedMarker], bool]):
    """
    One marker pill. Hover emphasis is local state only.

    Clicks are bound with the 'stop' modifier so they never reach the
    canvas background handler.
    """
    hovered, set_hovered = solara.use_state(False)
    style = hover_style(rendered.style, rendered.kind) if hovered else rendered.style

    with rv.Html(
        tag="div",
        class_=f"map-marker {rendered.kind}-marker",
        style_=marker_css(rendered, style),
    ) as element:
        solara.HTML(unsafe_innerHTML=marker_inner_html(rendered))

    rv.use_event(element, "mouseenter", lambda *_: set_hovered(True))
    rv.use_event(element, "mouseleave", lambda *_: set_hovered(False))
    rv.use_event(element, "click.stop", lambda *_: on_click(rendered))
    return element


@solara.component
def MapView(
    disasters: Sequence,
    resources: Sequence,
    selected_disaster=None,
    on_location_select: Optional[Callable[[float, float], None]] = None,
    selection_channel: Optional[SelectionChannel] = None,
    location_provider=None,
    geocoder: Optional[SyntheticGeocoder] = None,
    canvas_size: Tuple[int, int] = DEFAULT_CANVAS_SIZE,
    height: str = "384px",
    ripple_scheduler: Optional[Callable[[float, Callable[[], None]], None]] = None,
):
    """Interactive disaster/resource map on a synthetic canvas.

    Args:
        disasters: Disaster records (DisasterRecord or dicts)
        resources: Resource records (ResourceRecord or dicts)
        selected_disaster: Currently selected disaster (record, dict or id)
        on_location_select: Called with (lat, lng) on background clicks
        selection_channel: Channel receiving selectDisaster events;
            the process-wide default channel when omitted
        location_provider: User location provider; fallback location when omitted
        geocoder: Synthetic geocoder (inject a seeded one for reproducible coordinates)
        canvas_size: Pixel size assumed when a click payload carries no bounds
        height: CSS height of the canvas
        ripple_scheduler: scheduler(delay, callback) expiring click ripples;
            a daemon timer when omitted
    """
    map_style = solara.use_reactive(DEFAULT_MAP_STYLE)
    user_location, set_user_location = solara.use_state(None)
    readout, set_readout = solara.use_state(READOUT_PLACEHOLDER)
    ripples, set_ripples = solara.use_state(())
    owns_styles, set_owns_styles = solara.use_state(False)

    # ==========================================================================
    # LONG-LIVED HELPERS - created once per mounted view
    # ==========================================================================
    synchronizer = solara.use_memo(
        lambda: MarkerSynchronizer(geocoder=geocoder),
        dependencies=[geocoder],
    )
    ripple_tracker = solara.use_memo(
        lambda: RippleTracker(scheduler=ripple_scheduler, on_change=set_ripples),
        dependencies=[],
    )
    broadcaster = solara.use_memo(
        lambda: InteractionBroadcaster(
            channel=selection_channel,
            on_location_select=on_location_select,
            ripples=ripple_tracker,
        ),
        dependencies=[selection_channel, on_location_select],
    )

    # Shared keyframes: one mounted view per session renders them at a time
    def claim_styles():
        return claim_global_styles(session_scope(), set_owns_styles)

    solara.use_effect(claim_styles, dependencies=[])

    # ==========================================================================
    # USER LOCATION - resolved once at mount, no timeout
    # ==========================================================================
    def resolve_user_location():
        UserLocationResolver(location_provider).resolve(set_user_location)

    solara.use_effect(resolve_user_location, dependencies=[])

    # ==========================================================================
    # MARKERS - full rebuild whenever inputs change, cached otherwise
    # ==========================================================================
    marker_set = synchronizer.sync(disasters, resources, selected_disaster, user_location)
    stats = calculate_map_stats(marker_set)
    view_state = ViewState.for_style(map_style.value)

    def on_canvas_click(widget, event, data):
        pointer = pointer_from_event(data, canvas_size)
        if pointer is None:
            logger.warning(f"Canvas click without pointer position: {data!r}")
            return
        if broadcaster.handle_canvas_click(*pointer) is not None:
            set_readout(broadcaster.readout)

    canvas_style = (
        f"width: 100%; height: {height}; position: relative; overflow: hidden; "
        f"background: {get_map_background(view_state.style)}; "
        f"box-shadow: inset 0 0 50px rgba(0,0,0,0.1); cursor: crosshair;"
    )

    with solara.Column(gap="0px", style={
        "background": "white",
        "border-radius": "8px",
        "border": "1px solid #e5e7eb",
        "box-shadow": "0 10px 15px rgba(0,0,0,0.1)",
        "overflow": "hidden",
    }) as main:
        if owns_styles:
            solara.HTML(unsafe_innerHTML=GLOBAL_ANIMATION_CSS)

        MapHeader(map_style)

        with solara.Div(style={"position": "relative"}):
            with rv.Html(tag="div", class_="map-canvas", style_=canvas_style) as canvas:
                solara.HTML(unsafe_innerHTML=GRID_OVERLAY_HTML)
                solara.HTML(unsafe_innerHTML=title_card_html(stats['disasters'], stats['resources']))
                solara.HTML(unsafe_innerHTML=readout_html(readout))

                for rendered in marker_set:
                    MarkerElement(rendered, broadcaster.handle_marker_click).key(rendered.key)

                for ripple in ripples:
                    solara.HTML(unsafe_innerHTML=f'<div style="{ripple_css(ripple)}"></div>').key(
                        f"ripple-{ripple.id}"
                    )

            rv.use_event(canvas, "click", on_canvas_click)

            MapLegend(stats['disasters'])
            LiveStats(stats)

    return main
