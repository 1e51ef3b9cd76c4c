"""
Selection highlighting and hover emphasis for map markers.

marker_style() is a pure function of (marker, selected id): only the
disaster whose id matches the selection gets the elevated treatment.
Resource and user markers ignore selection entirely.
"""
from typing import Optional

from .color_schemes import (
    DISASTER_COLORS,
    DISASTER_BORDERS,
    DISASTER_SHADOWS,
    RESOURCE_BORDER,
    RESOURCE_SHADOW,
    USER_MARKER_COLOR,
    USER_MARKER_BORDER,
    USER_MARKER_SHADOW,
    Z_INDEX,
    HOVER_SCALE,
    get_status_color,
)
from .models import MapMarker, MarkerStyle, RenderedMarker, DISASTER, RESOURCE


def disaster_style(selected: bool = False) -> MarkerStyle:
    variant = 'selected' if selected else 'default'
    return MarkerStyle(
        background=DISASTER_COLORS[variant],
        border=DISASTER_BORDERS[variant],
        z_index=Z_INDEX['disaster_selected'] if selected else Z_INDEX['disaster'],
        box_shadow=DISASTER_SHADOWS['default'],
        highlighted=selected,
    )


def resource_style(status: Optional[str] = None) -> MarkerStyle:
    return MarkerStyle(
        background=get_status_color(status),
        border=RESOURCE_BORDER,
        z_index=Z_INDEX['resource'],
        box_shadow=RESOURCE_SHADOW,
    )


def user_style() -> MarkerStyle:
    return MarkerStyle(
        background=USER_MARKER_COLOR,
        border=USER_MARKER_BORDER,
        z_index=Z_INDEX['user'],
        box_shadow=USER_MARKER_SHADOW,
        animation='userPulse 2s infinite',
    )


def marker_style(marker: MapMarker, selected_id: Optional[str] = None,
                 status: Optional[str] = None) -> MarkerStyle:
    """
    Compute the visual style of a marker.

    Args:
        marker: The semantic marker
        selected_id: Id of the externally selected disaster (or None)
        status: Availability status, only used for resource markers

    Returns:
        MarkerStyle for the marker's resting (non-hovered) state
    """
    if marker.kind == DISASTER:
        return disaster_style(selected=selected_id is not None and marker.id == selected_id)
    if marker.kind == RESOURCE:
        return resource_style(status)
    return user_style()


def hover_style(style: MarkerStyle, kind: str) -> MarkerStyle:
    """
    Emphasis applied while the pointer is over a marker.

    Purely presentational; leaving the marker restores the base style.
    """
    if kind == DISASTER:
        return style.with_hover(scale=HOVER_SCALE, box_shadow=DISASTER_SHADOWS['hover'])
    if kind == RESOURCE:
        return style.with_hover(scale=HOVER_SCALE, z_index=Z_INDEX['resource_hover'])
    # User marker keeps its pulse and is not emphasized
    return style


# Box geometry per marker kind
MARKER_BOX_CSS = {
    'disaster': (
        "padding: 10px 14px; border-radius: 25px; font-size: 13px; font-weight: 600; "
        "max-width: 180px; text-align: center; backdrop-filter: blur(10px);"
    ),
    'resource': (
        "padding: 8px 12px; border-radius: 18px; font-size: 11px; font-weight: 600; "
        "max-width: 140px; text-align: center;"
    ),
    'user': (
        "padding: 10px; border-radius: 50%; font-size: 16px; width: 40px; height: 40px; "
        "display: flex; align-items: center; justify-content: center;"
    ),
}


def marker_css(rendered: RenderedMarker, style: Optional[MarkerStyle] = None) -> str:
    """
    Inline CSS for a marker element.

    Args:
        rendered: The marker to draw (position comes from the layout grid)
        style: Style override, e.g. the hover style (defaults to rendered.style)
    """
    style = style or rendered.style
    css = (
        f"position: absolute; {rendered.position.to_css()} "
        f"transform: translate(-50%, -50%) scale({style.scale}); "
        f"background: {style.background}; color: white; cursor: pointer; "
        f"border: {style.border}; box-shadow: {style.box_shadow}; "
        f"z-index: {style.z_index}; transition: all 0.3s ease; "
        f"{MARKER_BOX_CSS.get(rendered.kind, '')}"
    )
    if style.animation:
        css += f" animation: {style.animation};"
    return css
