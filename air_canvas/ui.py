"""
UI Module - Main Application Interface
======================================
Real-time air drawing: point at a color box to pick it, raise only the
index finger to paint. Combines all modules into one application loop.
"""

import argparse
import time
from pathlib import Path
from typing import Optional, Sequence

import cv2
import numpy as np
from dotenv import load_dotenv

from air_canvas.camera import Camera
from air_canvas.canvas import DrawingCanvas, FrameAction, StrokeAccumulator
from air_canvas.config import Settings
from air_canvas.gesture_logic import (
    ClassifiedFrame, GestureClassifier, GestureState, IDLE_FRAME, draw_gesture_ui
)
from air_canvas.hand_tracking import HandFrame, HandTracker, draw_landmarks, hand_frame_stream
from air_canvas.toolbar import DEFAULT_TOOLBAR, draw_toolbar


CAMERA_WINDOW = "Air Canvas - Camera"
DRAWING_WINDOW = "Air Canvas - Drawing"


class FpsCounter:
    """Counts processed frames and reports them once per second."""

    def __init__(self):
        self._count = 0
        self._window_start = time.time()
        self.fps = 0

    def tick(self, now: Optional[float] = None) -> int:
        """
        Register one processed frame.

        Returns:
            Frames counted during the last complete second
        """
        if now is None:
            now = time.time()
        self._count += 1
        if now - self._window_start >= 1.0:
            self.fps = self._count
            self._count = 0
            self._window_start = now
        return self.fps


class AirCanvasApp:
    """
    Main application class for air drawing.

    Every camera frame runs through the same path: hand tracking,
    gesture classification, stroke accumulation, then rendering.
    """

    # UI Colors (BGR)
    UI_BG_COLOR = (30, 30, 30)
    UI_TEXT_COLOR = (255, 255, 255)
    UI_SUCCESS_COLOR = (0, 255, 0)
    UI_MUTED_COLOR = (150, 150, 150)

    def __init__(
        self,
        settings: Optional[Settings] = None,
        camera: Optional[Camera] = None,
        tracker: Optional[HandTracker] = None
    ):
        """
        Args:
            settings: Runtime settings (defaults if not given)
            camera: Camera to use instead of one built from settings
            tracker: Hand tracker to use; created on first run if not given
        """
        self.settings = settings or Settings()
        width, height = self.settings.width, self.settings.height

        self.camera = camera or Camera(
            camera_id=self.settings.camera_id,
            width=width,
            height=height
        )
        self.hand_tracker = tracker

        self.toolbar = DEFAULT_TOOLBAR
        self.classifier = GestureClassifier(width, height)
        self.accumulator = StrokeAccumulator(toolbar=self.toolbar)
        self.canvas = DrawingCanvas(width, height)
        self.fps_counter = FpsCounter()

        self.last_classified: ClassifiedFrame = IDLE_FRAME

        self._running = False
        self._status = ""
        self._last_view: Optional[np.ndarray] = None

    # Per-frame core

    def process_hand(self, hand: Optional[HandFrame]) -> FrameAction:
        """
        Classify a hand frame and apply it to the drawing.

        Args:
            hand: Detected hand or None

        Returns:
            The effect produced by this frame
        """
        classified = self.classifier.classify(hand)
        self.last_classified = classified
        action = self.accumulator.process(classified)
        if action.segment is not None:
            self.canvas.draw_segment(action.segment)
        return action

    # Commands

    def clear_canvas(self):
        """Wipe the drawing and start a fresh stroke."""
        self.canvas.clear()
        self.accumulator.reset()
        self._status = "Canvas cleared"

    def save_canvas(self) -> Optional[Path]:
        """Export the drawing to the output directory."""
        try:
            path = self.canvas.save(self.settings.output_dir)
        except IOError as e:
            print(f"[ERROR] {e}")
            self._status = "Save failed"
            return None
        self._status = f"Saved {path.name}"
        return path

    def toggle_camera(self) -> bool:
        """
        Start or stop capture.

        Returns:
            True if the camera is running afterwards
        """
        if self.camera.is_running():
            self.camera.stop()
            self._status = "Camera stopped"
            return False

        if not self.camera.start():
            self._status = "Camera unavailable"
            return False
        self._status = ""
        return True

    def handle_key(self, key: int) -> bool:
        """
        Handle keyboard input.

        Returns:
            False if should quit, True otherwise
        """
        if key == ord('q') or key == 27:  # Q or Escape
            return False

        elif key in (ord('c'), ord('C')):
            self.clear_canvas()

        elif key in (ord('s'), ord('S')):
            self.save_canvas()

        elif key == ord(' '):
            self.toggle_camera()

        return True

    # Rendering

    def render_camera_view(
        self,
        frame: np.ndarray,
        hand: Optional[HandFrame],
        classified: ClassifiedFrame
    ) -> np.ndarray:
        """Build the mirrored camera view with toolbar and overlays."""
        view = cv2.flip(frame, 1)
        h, w = view.shape[:2]

        active = self.accumulator.active_color
        view = draw_toolbar(view, self.toolbar, active.color)

        if hand is not None and classified.state != GestureState.IDLE:
            view = draw_landmarks(view, hand)

        view = draw_gesture_ui(view, classified, self.classifier)

        hand_text = "Hand Detected" if classified.state != GestureState.IDLE else "No Hand"
        hand_color = self.UI_SUCCESS_COLOR if classified.state != GestureState.IDLE else self.UI_MUTED_COLOR
        cv2.putText(
            view, f"FPS: {self.fps_counter.fps}",
            (w - 150, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.6,
            self.UI_SUCCESS_COLOR, 2
        )
        cv2.putText(
            view, hand_text,
            (w - 150, 55), cv2.FONT_HERSHEY_SIMPLEX, 0.5,
            hand_color, 1
        )

        # Active color swatch
        cv2.rectangle(view, (w - 150, 65), (w - 130, 85), active.color, -1)
        cv2.rectangle(view, (w - 150, 65), (w - 130, 85), self.UI_TEXT_COLOR, 1)
        cv2.putText(
            view, "Eraser" if active.is_eraser else "Drawing",
            (w - 122, 81), cv2.FONT_HERSHEY_SIMPLEX, 0.5,
            self.UI_TEXT_COLOR, 1
        )

        if self._status:
            cv2.putText(
                view, self._status,
                (220, h - 22), cv2.FONT_HERSHEY_SIMPLEX, 0.5,
                self.UI_TEXT_COLOR, 1
            )

        return view

    def _render_stopped_view(self) -> np.ndarray:
        width, height = self.settings.width, self.settings.height
        if self._last_view is not None:
            view = (self._last_view * 0.3).astype(np.uint8)
        else:
            view = np.full((height, width, 3), self.UI_BG_COLOR, dtype=np.uint8)

        cv2.putText(
            view, "Camera stopped - press SPACE to start",
            (20, height // 2), cv2.FONT_HERSHEY_SIMPLEX, 0.7,
            self.UI_TEXT_COLOR, 2
        )
        if self._status and self._status != "Camera stopped":
            cv2.putText(
                view, self._status,
                (20, height // 2 + 30), cv2.FONT_HERSHEY_SIMPLEX, 0.5,
                self.UI_TEXT_COLOR, 1
            )
        return view

    # Main loop

    def _run_session(self):
        """Process frames until the camera stops or the user quits."""
        for frame, hand in hand_frame_stream(self.camera, self.hand_tracker):
            self.process_hand(hand)
            self.fps_counter.tick()

            view = self.render_camera_view(frame, hand, self.last_classified)
            self._last_view = view
            cv2.imshow(CAMERA_WINDOW, view)
            cv2.imshow(DRAWING_WINDOW, self.canvas.get_image())

            key = cv2.waitKey(1) & 0xFF
            if not self.handle_key(key):
                self._running = False
                return
            if key == ord(' '):
                return

        # Stream ended without a stop request: the device went away
        self._status = "Camera disconnected - press SPACE to retry"

    def run(self):
        """Run the main application loop."""
        print("\n" + "=" * 60)
        print("  Air Canvas - Draw in mid-air with your finger")
        print("=" * 60)
        print("\nGestures:")
        print("  Index finger up, others folded  -> Draw")
        print("  Any other pose                  -> Point at a color box to select")
        print("\nKeyboard:")
        print("  [C] Clear | [S] Save | [Space] Start/stop camera | [Q] Quit")
        print("\n" + "=" * 60)

        if self.hand_tracker is None:
            self.hand_tracker = HandTracker(
                max_hands=1,
                min_detection_confidence=self.settings.min_detection_confidence,
                min_tracking_confidence=self.settings.min_tracking_confidence,
                model_path=self.settings.model_path
            )

        if not self.camera.start():
            print("[ERROR] Failed to start camera!")
            self.hand_tracker.release()
            return

        self._running = True
        cv2.namedWindow(CAMERA_WINDOW, cv2.WINDOW_NORMAL)
        cv2.namedWindow(DRAWING_WINDOW, cv2.WINDOW_NORMAL)

        try:
            while self._running:
                if self.camera.is_running():
                    self._run_session()
                    continue

                # Stopped: no frames are classified until capture resumes
                cv2.imshow(CAMERA_WINDOW, self._render_stopped_view())
                cv2.imshow(DRAWING_WINDOW, self.canvas.get_image())
                key = cv2.waitKey(30) & 0xFF
                if not self.handle_key(key):
                    break

        finally:
            self._running = False
            self.camera.stop()
            self.hand_tracker.release()
            cv2.destroyAllWindows()
            print("\n[INFO] Application closed")


def parse_args(argv: Optional[Sequence[str]] = None) -> Settings:
    """Build settings from the environment and command line flags."""
    parser = argparse.ArgumentParser(description="Air Canvas - draw in mid-air with hand tracking")
    parser.add_argument('--camera', type=int, help='Camera device index')
    parser.add_argument('--width', type=int, help='Frame and canvas width')
    parser.add_argument('--height', type=int, help='Frame and canvas height')
    parser.add_argument('--output-dir', type=Path, help='Directory for saved drawings')

    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
        if args.camera is not None:
            settings.camera_id = args.camera
        if args.width is not None:
            settings.width = args.width
        if args.height is not None:
            settings.height = args.height
        if args.output_dir is not None:
            settings.output_dir = args.output_dir
        settings.validate()
    except ValueError as e:
        parser.error(str(e))

    return settings


def main(argv: Optional[Sequence[str]] = None):
    """Main entry point."""
    load_dotenv()
    settings = parse_args(argv)

    app = AirCanvasApp(settings)
    app.run()


if __name__ == "__main__":
    main()
