"""
On-screen layout for map markers.

Marker placement is a pure function of (kind, index in its input list).
It does not look at the marker's geographic coordinate at all - the canvas
is a synthetic stand-in, so entities are spread over a fixed grid instead.
Positions are percentages of the canvas width/height.
"""
from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class LayoutPosition:
    """Marker anchor as percentages of the canvas (left, top)."""
    x: float
    y: float

    def to_css(self) -> str:
        return f"left: {self.x}%; top: {self.y}%;"


@dataclass(frozen=True)
class GridSpec:
    """Row-major grid: `columns` per row starting at (origin_x, origin_y)."""
    columns: int
    origin_x: float
    origin_y: float
    step_x: float
    step_y: float

    def position(self, index: int) -> LayoutPosition:
        row, col = divmod(index, self.columns)
        return LayoutPosition(
            x=self.origin_x + col * self.step_x,
            y=self.origin_y + row * self.step_y,
        )


# Disasters: 3 columns on the left/centre of the canvas
DISASTER_GRID = GridSpec(columns=3, origin_x=30, origin_y=25, step_x=25, step_y=20)

# Resources: 4 tighter columns, lower right
RESOURCE_GRID = GridSpec(columns=4, origin_x=60, origin_y=50, step_x=15, step_y=15)

# The viewer's own marker never moves
USER_POSITION = LayoutPosition(45, 45)


class MarkerLayoutEngine:
    """
    Deterministic grid placement per marker kind.

    No collision avoidance: long lists run past the bottom/right of the
    canvas and may overlap the viewport edges. That is accepted.
    """

    def __init__(self, grids: Optional[Dict[str, GridSpec]] = None,
                 user_position: LayoutPosition = USER_POSITION):
        self.grids = grids if grids is not None else {
            'disaster': DISASTER_GRID,
            'resource': RESOURCE_GRID,
        }
        self.user_position = user_position

    def position(self, kind: str, index: int = 0) -> LayoutPosition:
        """
        Layout position for the index-th entity of a kind.

        Args:
            kind: 'disaster', 'resource' or 'user'
            index: 0-based position of the entity in its input list
                   (ignored for the user marker)

        Returns:
            LayoutPosition in canvas percentages
        """
        if kind == 'user':
            return self.user_position

        if index < 0:
            raise ValueError(f"Marker index must be >= 0, got {index}")

        grid = self.grids.get(kind)
        if grid is None:
            raise ValueError(f"No layout grid for marker kind {kind!r}")

        return grid.position(index)


DEFAULT_LAYOUT = MarkerLayoutEngine()


def layout_position(kind: str, index: int = 0) -> LayoutPosition:
    """Layout position using the default grids."""
    return DEFAULT_LAYOUT.position(kind, index)
