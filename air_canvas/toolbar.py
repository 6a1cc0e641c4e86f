"""
Toolbar Module - Color Selection Regions
========================================
Fixed on-screen color boxes that are selected by pointing at them.
Coordinates are in mirrored camera-view pixels.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np


REGION_SIZE = 60


class ColorPalette:
    """Toolbar colors (BGR)."""

    RED = (0, 0, 255)
    BLUE = (255, 0, 0)
    GREEN = (0, 255, 0)
    YELLOW = (0, 255, 255)
    WHITE = (255, 255, 255)
    BLACK = (0, 0, 0)
    GRAY = (102, 102, 102)


@dataclass(frozen=True)
class ToolbarRegion:
    """
    A square toolbar box bound to a paint color.

    Attributes:
        name: Display name
        color: BGR color painted when selected
        x: Left edge in pixels
        y: Top edge in pixels
        size: Side length in pixels
        is_eraser: Whether selecting this box switches to eraser mode
    """
    name: str
    color: Tuple[int, int, int]
    x: int
    y: int
    size: int = REGION_SIZE
    is_eraser: bool = False

    def contains(self, point: Tuple[float, float]) -> bool:
        """Check whether a pixel point lies inside the box (edges inclusive)."""
        px, py = point
        return (self.x <= px <= self.x + self.size and
                self.y <= py <= self.y + self.size)


DEFAULT_TOOLBAR: Tuple[ToolbarRegion, ...] = (
    ToolbarRegion("Red", ColorPalette.RED, 20, 20),
    ToolbarRegion("Blue", ColorPalette.BLUE, 90, 20),
    ToolbarRegion("Green", ColorPalette.GREEN, 160, 20),
    ToolbarRegion("Yellow", ColorPalette.YELLOW, 230, 20),
    ToolbarRegion("Eraser", ColorPalette.WHITE, 300, 20, is_eraser=True),
)


def hit_test(
    regions: Sequence[ToolbarRegion],
    point: Optional[Tuple[float, float]]
) -> Optional[ToolbarRegion]:
    """
    Find the toolbar region under a point.

    Returns:
        The first region containing the point, or None
    """
    if point is None:
        return None
    for region in regions:
        if region.contains(point):
            return region
    return None


def draw_toolbar(
    frame: np.ndarray,
    regions: Sequence[ToolbarRegion],
    active_color: Optional[Tuple[int, int, int]] = None
) -> np.ndarray:
    """
    Draw the toolbar boxes onto the camera view.

    The box matching ``active_color`` gets a thick black outline.
    """
    for region in regions:
        top_left = (region.x, region.y)
        bottom_right = (region.x + region.size, region.y + region.size)
        cv2.rectangle(frame, top_left, bottom_right, region.color, -1)

        if region.color == active_color:
            cv2.rectangle(frame, top_left, bottom_right, ColorPalette.BLACK, 4)
        else:
            cv2.rectangle(frame, top_left, bottom_right, ColorPalette.GRAY, 2)

        if region.is_eraser:
            cv2.putText(
                frame, "ERASE",
                (region.x + 8, region.y + 35),
                cv2.FONT_HERSHEY_SIMPLEX, 0.4, ColorPalette.BLACK, 1
            )

    return frame
