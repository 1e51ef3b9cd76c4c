"""
Data loading and summary utilities for the disaster map.

The live data-fetching layer belongs to the host application. This module
covers what the map itself needs around it:
- Sample feed: disasters/resources from CSV for the demo page
- Frame -> record conversion (NaN-safe)
- Marker set -> DataFrame flattening and live stats for the chrome
"""
import os
import logging
import pandas as pd
from pathlib import Path
from typing import List, Optional, Tuple

from .models import (
    DisasterRecord,
    ResourceRecord,
    MarkerSet,
    DISASTER,
    RESOURCE,
    USER,
)
from .color_schemes import RESOURCE_STATUS_COLORS

# Configure logging
logger = logging.getLogger(__name__)

DATA_DIR_ENV = "DISASTER_MAP_DATA_DIR"

SAMPLE_FILES = {
    DISASTER: 'sample_disasters.csv',
    RESOURCE: 'sample_resources.csv',
}

RECORD_COLUMNS = {
    DISASTER: ['id', 'title', 'description', 'location_name'],
    RESOURCE: ['id', 'name', 'type', 'availability_status'],
}

MARKER_FRAME_COLUMNS = [
    'id', 'kind', 'title', 'latitude', 'longitude',
    'x_pct', 'y_pct', 'status', 'highlighted', 'z_index',
]


def get_data_dir() -> Path:
    """Sample feed directory: DISASTER_MAP_DATA_DIR or the repo's data/."""
    env_dir = os.environ.get(DATA_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return Path(__file__).parent.parent / 'data'


def _read_feed(path: Path, kind: str) -> pd.DataFrame:
    if not path.exists():
        logger.error(f"Sample {kind} file not found: {path}")
        return pd.DataFrame(columns=RECORD_COLUMNS[kind])

    # ids stay strings even when they look numeric
    df = pd.read_csv(path, dtype=str)

    # Add any missing columns expected by the records
    for col in RECORD_COLUMNS[kind]:
        if col not in df.columns:
            df[col] = None

    logger.info(f"Loaded {len(df)} {kind} records from {path.name}")
    return df


def load_sample_feed(data_dir: Optional[Path] = None) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Load the sample disaster and resource feed.

    Args:
        data_dir: Directory holding the CSV files (defaults to get_data_dir())

    Returns:
        (disasters_df, resources_df). A missing file yields an empty frame
        with the expected columns.
    """
    data_dir = Path(data_dir) if data_dir is not None else get_data_dir()
    disasters_df = _read_feed(data_dir / SAMPLE_FILES[DISASTER], DISASTER)
    resources_df = _read_feed(data_dir / SAMPLE_FILES[RESOURCE], RESOURCE)
    return disasters_df, resources_df


def records_from_frame(df: pd.DataFrame, kind: str) -> List:
    """
    Convert DataFrame rows into DisasterRecord/ResourceRecord values.

    NaN cells count as missing and degrade to the record placeholders.
    """
    if kind == DISASTER:
        record_type = DisasterRecord
    elif kind == RESOURCE:
        record_type = ResourceRecord
    else:
        raise ValueError(f"Unknown record kind: {kind!r}")

    if df is None or df.empty:
        return []

    return [record_type.coerce(row) for row in df.to_dict(orient='records')]


def markers_to_frame(marker_set: MarkerSet) -> pd.DataFrame:
    """Flatten a marker set into one row per rendered marker."""
    rows = []
    for rendered in marker_set:
        status = None
        if rendered.kind == RESOURCE and rendered.record is not None:
            status = rendered.record.availability_status

        rows.append({
            'id': rendered.id,
            'kind': rendered.kind,
            'title': rendered.marker.title,
            'latitude': rendered.marker.lat,
            'longitude': rendered.marker.lng,
            'x_pct': rendered.position.x,
            'y_pct': rendered.position.y,
            'status': status,
            'highlighted': rendered.style.highlighted,
            'z_index': rendered.style.z_index,
        })

    return pd.DataFrame(rows, columns=MARKER_FRAME_COLUMNS)


def calculate_map_stats(marker_set: MarkerSet) -> dict:
    """
    Live counters for the map chrome.

    Returns:
        Dict with disasters, resources, user, total and by_status
        (resource counts per known availability status; unknown statuses
        count as 'available', matching their marker colour)
    """
    df = markers_to_frame(marker_set)
    kind_counts = df['kind'].value_counts()

    resources_df = df[df['kind'] == RESOURCE]
    statuses = resources_df['status'].where(
        resources_df['status'].isin(list(RESOURCE_STATUS_COLORS)), 'available'
    )
    status_counts = statuses.value_counts()

    return {
        'disasters': int(kind_counts.get(DISASTER, 0)),
        'resources': int(kind_counts.get(RESOURCE, 0)),
        'user': int(kind_counts.get(USER, 0)),
        'total': len(df),
        'by_status': {status: int(status_counts.get(status, 0)) for status in RESOURCE_STATUS_COLORS},
    }
