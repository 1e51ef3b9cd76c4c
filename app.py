"""
Disaster Map Dashboard - demo host page
=======================================

Feeds the MapView component with the sample disaster/resource feed and plays
the host's part of the contract:
- listens for selectDisaster events and decides the selection
- records location picks from background clicks

Configuration (environment):
- DISASTER_MAP_DATA_DIR: directory with sample_disasters.csv / sample_resources.csv
- DISASTER_MAP_USER_LOCATION: "lat,lng" reported as the viewer's position
- DISASTER_MAP_GEO_SEED: seed for reproducible synthetic coordinates

Run with: solara run app.py
"""
import logging
import html
import solara

from components.map_view import MapView
from utils.coordinates import GeoCoordinate, SyntheticGeocoder
from utils.data_loader import load_sample_feed, records_from_frame
from utils.interaction import SELECT_DISASTER, SelectionChannel, SelectionEvent
from utils.location import EnvironmentLocationProvider
from utils.models import DISASTER, RESOURCE, DisasterRecord

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def load_feed():
    """Load the sample feed once per page and convert it to records."""
    disasters_df, resources_df = load_sample_feed()
    return records_from_frame(disasters_df, DISASTER), records_from_frame(resources_df, RESOURCE)


@solara.component
def SelectedDisasterPanel(disaster, on_clear):
    """Sidebar card for the selected disaster."""

    if disaster is None:
        solara.HTML(unsafe_innerHTML="""
            <div style="padding: 12px; color: #6b7280; font-size: 13px;">
                Click a disaster marker to select it.
            </div>
        """)
        return

    disaster = DisasterRecord.coerce(disaster)
    solara.HTML(unsafe_innerHTML=f"""
        <div style="padding: 12px; border-left: 3px solid #dc2626; background: #fef2f2; border-radius: 6px;">
            <div style="font-size: 10px; font-weight: 600; color: #9ca3af; text-transform: uppercase;">
                Selected Disaster
            </div>
            <div style="font-weight: 700; color: #111827; margin-top: 4px;">{html.escape(disaster.title)}</div>
            <div style="font-size: 12px; color: #6b7280;">{html.escape(disaster.display_location)}</div>
            <div style="font-size: 12px; color: #374151; margin-top: 6px;">
                {html.escape(disaster.description or '')}
            </div>
        </div>
    """)
    solara.Button(label="Clear selection", on_click=on_clear, text=True, small=True)


@solara.component
def Page():
    """Two-column layout: sidebar (selection, last pick) + map."""

    disasters, resources = solara.use_memo(load_feed, dependencies=[])

    selected = solara.use_reactive(None)
    last_pick = solara.use_reactive(None)

    channel = solara.use_memo(SelectionChannel, dependencies=[])
    geocoder = solara.use_memo(SyntheticGeocoder.from_env, dependencies=[])
    provider = solara.use_memo(EnvironmentLocationProvider, dependencies=[])

    # The map only announces intent; the host owns the selection
    def subscribe_to_selection():
        def on_selection(event: SelectionEvent):
            if event.type == SELECT_DISASTER and event.payload is not None:
                logger.info(f"Selecting disaster {DisasterRecord.coerce(event.payload).id}")
                selected.set(event.payload)

        return channel.subscribe(on_selection)

    solara.use_effect(subscribe_to_selection, dependencies=[channel])

    # Stable identity so the map keeps its click handler between renders
    def make_location_handler():
        def on_location_select(lat: float, lng: float):
            logger.info(f"Location picked: ({lat:.4f}, {lng:.4f})")
            last_pick.set(GeoCoordinate(lat, lng))
        return on_location_select

    on_location_select = solara.use_memo(make_location_handler, dependencies=[])

    solara.Title("Disaster Map Dashboard")

    with solara.Row(style={"padding": "16px", "gap": "16px", "align-items": "flex-start"}):
        with solara.Column(style={"width": "300px", "flex-shrink": "0"}, gap="12px"):
            solara.HTML(unsafe_innerHTML=f"""
                <div style="font-weight: 700; font-size: 18px; color: #111827;">🚨 Situational Awareness</div>
                <div style="font-size: 12px; color: #6b7280;">
                    {len(disasters)} disasters • {len(resources)} resources
                </div>
            """)
            SelectedDisasterPanel(selected.value, on_clear=lambda: selected.set(None))

            pick_text = last_pick.value.format_readout() if last_pick.value else "No location picked yet"
            solara.HTML(unsafe_innerHTML=f"""
                <div style="padding: 12px; background: #f8f9fa; border-radius: 6px; font-size: 12px;">
                    <div style="font-size: 10px; font-weight: 600; color: #9ca3af; text-transform: uppercase;">
                        Last Picked Location
                    </div>
                    <div style="font-family: monospace; margin-top: 4px;">{pick_text}</div>
                </div>
            """)

        with solara.Column(style={"flex": "1 1 auto", "min-width": "0"}):
            MapView(
                disasters,
                resources,
                selected_disaster=selected.value,
                on_location_select=on_location_select,
                selection_channel=channel,
                location_provider=provider,
                geocoder=geocoder,
            )
