"""
Hand Tracking Module - MediaPipe Hand Landmark Detection
=========================================================
Detects hand landmarks using the MediaPipe Tasks API and exposes them as
HandFrame objects holding the 21 normalized landmarks of one hand.

Also provides the lazy frame stream that couples the camera to the tracker.
"""

import math
import time
import urllib.request
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python
from mediapipe.tasks.python import vision


MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)

NUM_LANDMARKS = 21


class HandLandmark(IntEnum):
    """
    MediaPipe hand landmark indices.
    Reference: https://mediapipe.dev/images/mobile/hand_landmarks.png
    """
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


@dataclass(frozen=True)
class Landmark:
    """A normalized landmark position (x, y in [0, 1], z is relative depth)."""
    x: float
    y: float
    z: float = 0.0

    def to_pixels(self, width: int, height: int, mirror: bool = True) -> Tuple[float, float]:
        """
        Convert to pixel coordinates.

        With ``mirror`` the x-axis is flipped to match a front-facing camera
        shown as a mirror image.
        """
        px = width - self.x * width if mirror else self.x * width
        return px, self.y * height


@dataclass
class HandFrame:
    """Landmarks of one detected hand, ordered by HandLandmark index."""
    landmarks: List[Landmark] = field(default_factory=list)

    def is_valid(self) -> bool:
        """Check for exactly 21 landmarks with finite x/y inside [0, 1]."""
        if len(self.landmarks) != NUM_LANDMARKS:
            return False
        for lm in self.landmarks:
            if not (math.isfinite(lm.x) and math.isfinite(lm.y)):
                return False
            if not (0.0 <= lm.x <= 1.0 and 0.0 <= lm.y <= 1.0):
                return False
        return True

    def get_landmark(self, landmark: HandLandmark) -> Landmark:
        """Get a specific landmark."""
        return self.landmarks[landmark]

    def get_fingertip(self, finger: str) -> Optional[Landmark]:
        """
        Get fingertip landmark by finger name.

        Args:
            finger: One of 'thumb', 'index', 'middle', 'ring', 'pinky'
        """
        finger_map = {
            'thumb': HandLandmark.THUMB_TIP,
            'index': HandLandmark.INDEX_TIP,
            'middle': HandLandmark.MIDDLE_TIP,
            'ring': HandLandmark.RING_TIP,
            'pinky': HandLandmark.PINKY_TIP
        }
        landmark = finger_map.get(finger.lower())
        if landmark is None or landmark >= len(self.landmarks):
            return None
        return self.landmarks[landmark]


def _download_model(model_path: Path) -> None:
    """Download the hand landmarker model if not present."""
    print("[INFO] Downloading hand landmarker model...")
    model_path.parent.mkdir(parents=True, exist_ok=True)
    urllib.request.urlretrieve(MODEL_URL, model_path)
    print(f"[INFO] Model downloaded to {model_path}")


def hand_frames_from_result(result) -> List[HandFrame]:
    """
    Convert a MediaPipe HandLandmarkerResult into HandFrame objects.

    Args:
        result: Object with a ``hand_landmarks`` list

    Returns:
        One HandFrame per detected hand, in detection order
    """
    hands = []
    for hand_landmarks in result.hand_landmarks or []:
        landmarks = [
            Landmark(x=lm.x, y=lm.y, z=getattr(lm, 'z', 0.0) or 0.0)
            for lm in hand_landmarks
        ]
        hands.append(HandFrame(landmarks=landmarks))
    return hands


class HandTracker:
    """
    Hand tracking using MediaPipe Hand Landmarker (Tasks API).

    Uses VIDEO running mode, which tracks between sequential frames.
    """

    def __init__(
        self,
        max_hands: int = 1,
        min_detection_confidence: float = 0.7,
        min_tracking_confidence: float = 0.5,
        model_path: Optional[Path] = None
    ):
        """
        Initialize the hand tracker.

        Args:
            max_hands: Maximum number of hands to detect
            min_detection_confidence: Minimum confidence for detection
            min_tracking_confidence: Minimum confidence for tracking
            model_path: Location of hand_landmarker.task (downloaded if missing)
        """
        self.max_hands = max_hands
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence

        if model_path is None:
            model_path = Path(__file__).parent / "models" / "hand_landmarker.task"
        self._model_path = Path(model_path)

        if not self._model_path.exists():
            _download_model(self._model_path)

        base_options = python.BaseOptions(model_asset_path=str(self._model_path))
        options = vision.HandLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.VIDEO,
            num_hands=max_hands,
            min_hand_detection_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
            min_hand_presence_confidence=min_detection_confidence
        )

        self.detector = vision.HandLandmarker.create_from_options(options)

        # VIDEO mode requires monotonically increasing timestamps
        self._last_timestamp_ms = -1
        self._start_time = time.time()

    def process(self, frame: np.ndarray) -> List[HandFrame]:
        """
        Detect hands in a frame.

        Args:
            frame: BGR image from camera (not mirrored)

        Returns:
            List of HandFrame objects for each detected hand
        """
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        timestamp_ms = int((time.time() - self._start_time) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms

        results = self.detector.detect_for_video(mp_image, timestamp_ms)
        return hand_frames_from_result(results)

    def release(self):
        """Release resources."""
        if self.detector:
            self.detector.close()
            self.detector = None


def draw_landmarks(
    frame: np.ndarray,
    hand: HandFrame,
    landmark_color: Tuple[int, int, int] = (0, 255, 0),
    fingertip_color: Tuple[int, int, int] = (255, 0, 255)
) -> np.ndarray:
    """
    Draw hand landmarks on a mirrored camera view.

    Args:
        frame: Mirrored BGR image to draw on
        hand: Hand to visualize
        landmark_color: BGR color for landmark dots
        fingertip_color: BGR color for the index fingertip marker

    Returns:
        Frame with landmarks drawn
    """
    h, w = frame.shape[:2]

    for lm in hand.landmarks:
        x, y = lm.to_pixels(w, h)
        cv2.circle(frame, (int(round(x)), int(round(y))), 3, landmark_color, -1)

    index_tip = hand.get_fingertip('index')
    if index_tip is not None:
        x, y = index_tip.to_pixels(w, h)
        cv2.circle(frame, (int(round(x)), int(round(y))), 8, fingertip_color, -1)

    return frame


def hand_frame_stream(camera, tracker) -> Iterator[Tuple[np.ndarray, Optional[HandFrame]]]:
    """
    Lazily pair each captured frame with its detected hand.

    Yields ``(frame, hand)`` where ``hand`` is the first detected hand or
    None. Runs for as long as the camera keeps producing frames.
    """
    for frame in camera.frame_generator():
        hands = tracker.process(frame)
        yield frame, (hands[0] if hands else None)
