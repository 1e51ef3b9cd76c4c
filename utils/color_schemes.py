"""
Color schemes and glyphs for the disaster map.

Lookup tables are policy: unknown keys always fall back to a documented
default instead of raising.
"""

# =============================================================================
# DISASTER MARKERS
# =============================================================================
DISASTER_COLORS = {
    'default': '#ef4444',   # Red 500
    'selected': '#dc2626',  # Red 600 - darker fill for the selected disaster
}

DISASTER_BORDERS = {
    'default': '3px solid white',
    'selected': '3px solid #fca5a5',  # Red 300 ring
}

DISASTER_SHADOWS = {
    'default': '0 4px 12px rgba(239, 68, 68, 0.4)',
    'hover': '0 6px 20px rgba(239, 68, 68, 0.6)',
}

DISASTER_ICON = '🚨'

# =============================================================================
# RESOURCE MARKERS
# =============================================================================
RESOURCE_STATUS_COLORS = {
    'available': '#10b981',  # Green
    'limited': '#f59e0b',    # Amber
    'full': '#ef4444',       # Red
    'closed': '#6b7280',     # Gray
}

DEFAULT_RESOURCE_STATUS = 'available'

RESOURCE_TYPE_ICONS = {
    'shelter': '🏠',
    'medical': '🏥',
    'food': '🍽️',
    'emergency_services': '🚑',
    'transportation': '🚌',
}

DEFAULT_RESOURCE_ICON = '📍'

RESOURCE_BORDER = '2px solid white'
RESOURCE_SHADOW = '0 3px 8px rgba(16, 185, 129, 0.3)'

# =============================================================================
# USER LOCATION MARKER
# =============================================================================
USER_MARKER_COLOR = '#3b82f6'  # Blue 500
USER_MARKER_BORDER = '4px solid white'
USER_MARKER_SHADOW = '0 4px 12px rgba(59, 130, 246, 0.4)'
USER_ICON = '📍'

# =============================================================================
# STACKING ORDER
# =============================================================================
# Chrome sits above everything; ripples just below chrome
Z_INDEX = {
    'resource': 90,
    'disaster': 100,
    'user': 110,
    'resource_hover': 150,
    'disaster_selected': 200,
    'ripple': 999,
    'chrome': 1000,
}

HOVER_SCALE = 1.1

# =============================================================================
# CANVAS BACKGROUNDS (per map style - presentation only)
# =============================================================================
MAP_STYLE_BACKGROUNDS = {
    'roadmap': 'linear-gradient(135deg, #667eea 0%, #764ba2 100%)',
    'satellite': 'linear-gradient(135deg, #1f2937 0%, #065f46 100%)',
    'terrain': 'linear-gradient(135deg, #a3b18a 0%, #588157 100%)',
}

MAP_STYLE_LABELS = {
    'roadmap': 'Road',
    'satellite': 'Satellite',
    'terrain': 'Terrain',
}

# Legend swatches (label, color, shape)
LEGEND_ENTRIES = [
    ('Active Disasters', '#ef4444', 'square'),
    ('Available Resources', '#22c55e', 'square'),
    ('Limited Resources', '#eab308', 'square'),
    ('Your Location', USER_MARKER_COLOR, 'circle'),
]


def get_status_color(status: str) -> str:
    """Get hex color for a resource availability status (unknown -> available)."""
    return RESOURCE_STATUS_COLORS.get(status, RESOURCE_STATUS_COLORS[DEFAULT_RESOURCE_STATUS])


def get_resource_icon(resource_type: str) -> str:
    """Get glyph for a resource type (unknown -> generic pin)."""
    return RESOURCE_TYPE_ICONS.get(resource_type, DEFAULT_RESOURCE_ICON)


def get_map_background(map_style: str) -> str:
    """Get canvas background for a map style (unknown -> roadmap)."""
    return MAP_STYLE_BACKGROUNDS.get(map_style, MAP_STYLE_BACKGROUNDS['roadmap'])
