"""
Viewport chrome for the disaster map: header with style toggle, title card,
coordinate readout, legend and live stats.

Everything here is visual only. The map style picks the canvas background
and never feeds into any coordinate computation.
"""
import html
import solara

from utils.color_schemes import LEGEND_ENTRIES, MAP_STYLE_LABELS, Z_INDEX
from utils.models import MAP_STYLES


def btn_style(active: bool = False) -> dict:
    """Style toggle button - blue when active, grey otherwise."""
    return {
        "font-size": "12px",
        "padding": "4px 12px",
        "min-width": "0",
        "height": "28px",
        "border-radius": "6px",
        "text-transform": "none",
        "background": "#2563eb" if active else "#e5e7eb",
        "color": "white" if active else "#374151",
        "box-shadow": "0 2px 6px rgba(37, 99, 235, 0.3)" if active else "none",
    }


@solara.component
def MapHeader(map_style: solara.Reactive[str]):
    """Card header: title + Road / Satellite / Terrain toggle."""

    header_style = {
        "padding": "16px",
        "border-bottom": "1px solid #e5e7eb",
        "background": "linear-gradient(90deg, #eff6ff 0%, #eef2ff 100%)",
        "align-items": "center",
        "justify-content": "space-between",
    }

    with solara.Row(style=header_style):
        solara.HTML(unsafe_innerHTML="""
            <div style="display: flex; align-items: center; gap: 12px;">
                <div style="padding: 8px; background: #dbeafe; border-radius: 8px; font-size: 18px;">📌</div>
                <div>
                    <div style="font-weight: 700; color: #111827;">Interactive Map</div>
                    <div style="font-size: 13px; color: #4b5563;">Real-time disaster and resource tracking</div>
                </div>
            </div>
        """)

        with solara.Row(gap="6px", style={"align-items": "center"}):
            for style_name in MAP_STYLES:
                solara.Button(
                    label=MAP_STYLE_LABELS[style_name],
                    on_click=lambda s=style_name: map_style.set(s),
                    style=btn_style(map_style.value == style_name),
                )


def title_card_html(disaster_count: int, resource_count: int) -> str:
    """Title card drawn in the canvas' top-left corner."""
    return f"""
        <div style="position: absolute; top: 16px; left: 16px;
                    background: rgba(255,255,255,0.95); padding: 12px 16px;
                    border-radius: 8px; box-shadow: 0 4px 12px rgba(0,0,0,0.15);
                    z-index: {Z_INDEX['chrome']}; pointer-events: none;
                    border: 1px solid rgba(255,255,255,0.2);">
            <div style="font-weight: 700; color: #1f2937; font-size: 16px; margin-bottom: 4px;">
                🗺️ Interactive Map
            </div>
            <div style="font-size: 12px; color: #6b7280;">
                {disaster_count} disasters • {resource_count} resources
            </div>
        </div>
    """


def readout_html(text: str) -> str:
    """Coordinate readout in the canvas' bottom-left corner."""
    return f"""
        <div style="position: absolute; bottom: 16px; left: 16px;
                    background: rgba(0,0,0,0.8); color: white; padding: 8px 12px;
                    border-radius: 6px; font-size: 12px; font-family: monospace;
                    z-index: {Z_INDEX['chrome']}; pointer-events: none;">
            {html.escape(text)}
        </div>
    """


GRID_OVERLAY_HTML = """
    <div style="position: absolute; top: 0; left: 0; right: 0; bottom: 0;
                background-image:
                    linear-gradient(rgba(255,255,255,0.1) 1px, transparent 1px),
                    linear-gradient(90deg, rgba(255,255,255,0.1) 1px, transparent 1px);
                background-size: 50px 50px; pointer-events: none;"></div>
"""


@solara.component
def MapLegend(disaster_count: int):
    """Legend pinned to the bottom-right of the map."""

    rows = []
    for label, color, shape in LEGEND_ENTRIES:
        radius = "50%" if shape == 'circle' else "4px"
        text = f"{label} ({disaster_count})" if label == 'Active Disasters' else label
        rows.append(f"""
            <div style="display: flex; align-items: center; gap: 10px; margin-bottom: 6px;">
                <div style="width: 16px; height: 16px; background: {color};
                            border-radius: {radius}; box-shadow: 0 1px 2px rgba(0,0,0,0.1);"></div>
                <span style="color: #374151;">{text}</span>
            </div>
        """)

    solara.HTML(unsafe_innerHTML=f"""
        <div style="position: absolute; bottom: 16px; right: 16px; background: white;
                    padding: 16px; border-radius: 8px; box-shadow: 0 10px 25px rgba(0,0,0,0.15);
                    border: 1px solid #e5e7eb; font-size: 12px; max-width: 240px;
                    z-index: {Z_INDEX['chrome']};">
            <div style="font-weight: 700; color: #111827; margin-bottom: 10px;">⚡ Map Legend</div>
            {''.join(rows)}
            <div style="margin-top: 10px; padding-top: 10px; border-top: 1px solid #e5e7eb;
                        color: #6b7280; font-size: 11px;">
                Click anywhere to get coordinates
            </div>
        </div>
    """)


@solara.component
def LiveStats(stats: dict):
    """Live counters pinned to the top-right of the map."""

    solara.HTML(unsafe_innerHTML=f"""
        <div style="position: absolute; top: 16px; right: 16px; background: white;
                    padding: 12px; border-radius: 8px; box-shadow: 0 10px 25px rgba(0,0,0,0.15);
                    border: 1px solid #e5e7eb; font-size: 12px; min-width: 150px;
                    z-index: {Z_INDEX['chrome']};">
            <div style="font-weight: 700; color: #111827; margin-bottom: 8px;">Live Stats</div>
            <div style="display: flex; justify-content: space-between; color: #4b5563; margin-bottom: 4px;">
                <span>Disasters:</span>
                <span style="font-weight: 600; color: #dc2626;">{stats['disasters']}</span>
            </div>
            <div style="display: flex; justify-content: space-between; color: #4b5563; margin-bottom: 4px;">
                <span>Resources:</span>
                <span style="font-weight: 600; color: #16a34a;">{stats['resources']}</span>
            </div>
            <div style="display: flex; justify-content: space-between; color: #4b5563;">
                <span>Total Markers:</span>
                <span style="font-weight: 600; color: #2563eb;">{stats['total']}</span>
            </div>
        </div>
    """)
