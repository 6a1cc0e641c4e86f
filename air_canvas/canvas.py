"""
Canvas Module - Stroke Accumulation and Drawing Board
======================================================
Turns classified frames into drawing effects and paints them on a
white drawing board that can be cleared and exported as PNG.
"""

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from air_canvas.gesture_logic import ClassifiedFrame, GestureState
from air_canvas.toolbar import DEFAULT_TOOLBAR, ColorPalette, ToolbarRegion, hit_test


Point = Tuple[float, float]

DRAW_THICKNESS = 5
ERASER_THICKNESS = 20


@dataclass
class ActiveColor:
    """
    The currently selected paint color.

    Attributes:
        color: BGR color used for strokes
        is_eraser: Whether strokes erase to the background
        name: Name of the toolbar box that set it
    """
    color: Tuple[int, int, int] = ColorPalette.RED
    is_eraser: bool = False
    name: str = "Red"

    @classmethod
    def from_region(cls, region: ToolbarRegion) -> "ActiveColor":
        """Create the active color selected by a toolbar box."""
        return cls(color=region.color, is_eraser=region.is_eraser, name=region.name)


@dataclass(frozen=True)
class Segment:
    """A line segment to paint on the drawing board."""
    start: Point
    end: Point
    color: Tuple[int, int, int]
    thickness: int


@dataclass(frozen=True)
class FrameAction:
    """
    Effects produced by one frame.

    At most one of ``segment`` and ``selected`` is set.
    """
    segment: Optional[Segment] = None
    selected: Optional[ToolbarRegion] = None


NO_ACTION = FrameAction()


class StrokeAccumulator:
    """
    Builds freehand strokes from consecutive drawing frames.

    Keeps the last drawn point between frames. The point is only kept
    while frames stay in the drawing gesture; any other frame drops it so
    the next stroke does not connect across the gap.
    """

    def __init__(
        self,
        toolbar: Sequence[ToolbarRegion] = DEFAULT_TOOLBAR,
        active_color: Optional[ActiveColor] = None,
        draw_thickness: int = DRAW_THICKNESS,
        eraser_thickness: int = ERASER_THICKNESS,
        background_color: Tuple[int, int, int] = ColorPalette.WHITE
    ):
        """
        Args:
            toolbar: Color selection regions
            active_color: Initial paint color (red if not given)
            draw_thickness: Line width while painting
            eraser_thickness: Line width while erasing
            background_color: Color painted by the eraser
        """
        self.toolbar = tuple(toolbar)
        self.active_color = active_color or ActiveColor()
        self.draw_thickness = draw_thickness
        self.eraser_thickness = eraser_thickness
        self.background_color = background_color

        self.last_point: Optional[Point] = None

    def process(self, classified: ClassifiedFrame) -> FrameAction:
        """
        Apply one classified frame.

        Args:
            classified: Output of the gesture classifier

        Returns:
            FrameAction with the segment to draw or the region selected
        """
        if classified.state == GestureState.DRAWING and classified.fingertip is not None:
            return self._draw(classified.fingertip)

        self.last_point = None

        if classified.state == GestureState.SELECTING:
            return self._select(classified.fingertip)

        return NO_ACTION

    def _select(self, fingertip: Optional[Point]) -> FrameAction:
        region = hit_test(self.toolbar, fingertip)
        if region is None:
            return NO_ACTION
        self.active_color = ActiveColor.from_region(region)
        return FrameAction(selected=region)

    def _draw(self, fingertip: Point) -> FrameAction:
        segment = None
        if self.last_point is not None:
            if self.active_color.is_eraser:
                color, thickness = self.background_color, self.eraser_thickness
            else:
                color, thickness = self.active_color.color, self.draw_thickness
            segment = Segment(
                start=self.last_point,
                end=fingertip,
                color=color,
                thickness=thickness
            )
        self.last_point = fingertip
        return FrameAction(segment=segment)

    def reset(self):
        """Forget the last point so the next drawing frame starts a new stroke."""
        self.last_point = None


def _to_pixel(point: Point) -> Tuple[int, int]:
    return int(round(point[0])), int(round(point[1]))


class DrawingCanvas:
    """
    Drawing board backed by a BGR numpy image.

    Segments are drawn with round caps so consecutive segments join
    smoothly.
    """

    def __init__(
        self,
        width: int = 640,
        height: int = 480,
        background_color: Tuple[int, int, int] = ColorPalette.WHITE
    ):
        """
        Args:
            width: Canvas width in pixels
            height: Canvas height in pixels
            background_color: Board fill color (BGR)
        """
        self.width = width
        self.height = height
        self.background_color = background_color

        self._canvas = np.empty((height, width, 3), dtype=np.uint8)
        self.clear()

    def draw_segment(self, segment: Segment):
        """Paint one line segment."""
        p1 = _to_pixel(segment.start)
        p2 = _to_pixel(segment.end)
        radius = max(segment.thickness // 2, 1)

        cv2.line(self._canvas, p1, p2, segment.color, segment.thickness, cv2.LINE_AA)
        # Round caps and joins
        cv2.circle(self._canvas, p1, radius, segment.color, -1, cv2.LINE_AA)
        cv2.circle(self._canvas, p2, radius, segment.color, -1, cv2.LINE_AA)

    def clear(self):
        """Fill the whole board with the background color."""
        self._canvas[:] = self.background_color

    def get_image(self) -> np.ndarray:
        """
        Get the current drawing.

        Returns:
            Copy of the board as BGR numpy array
        """
        return self._canvas.copy()

    def has_content(self) -> bool:
        """Check if anything differs from the background."""
        return bool(np.any(self._canvas != np.array(self.background_color, dtype=np.uint8)))

    def save(self, directory: Union[str, Path] = "output") -> Path:
        """
        Export the drawing as ``air-canvas-<epoch ms>.png``.

        Args:
            directory: Output directory (created if missing)

        Returns:
            Path of the written file
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        filename = directory / f"air-canvas-{int(time.time() * 1000)}.png"
        if not cv2.imwrite(str(filename), self._canvas):
            raise IOError(f"Failed to write {filename}")

        print(f"[INFO] Saved drawing: {filename}")
        return filename
