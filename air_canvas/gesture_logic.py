"""
Gesture Logic Module - Gesture Classification
==============================================
Classifies each hand frame as drawing, selecting or idle and reports the
index fingertip position in canvas pixels.

A frame is a drawing gesture when only the index finger is extended:
    - index tip above the index MCP knuckle (smaller y)
    - middle, ring and pinky tips below their PIP joints (larger y)
The thumb is ignored. Any other hand pose is a selecting gesture.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, Tuple

import cv2
import numpy as np

from air_canvas.hand_tracking import HandFrame, HandLandmark


class GestureState(Enum):
    """Per-frame gesture classes."""
    IDLE = auto()           # No (usable) hand in frame
    SELECTING = auto()      # Any pose other than drawing - toolbar interaction
    DRAWING = auto()        # Index finger up, others folded


@dataclass(frozen=True)
class ClassifiedFrame:
    """
    Result of classifying one frame.

    Attributes:
        state: The detected gesture
        fingertip: Index fingertip in mirrored pixel coordinates, None when idle
    """
    state: GestureState
    fingertip: Optional[Tuple[float, float]] = None


IDLE_FRAME = ClassifiedFrame(GestureState.IDLE, None)


# (tip, reference joint) per finger; index compares against its MCP knuckle,
# the folded fingers against their PIP joints
FINGER_JOINTS = {
    'index': (HandLandmark.INDEX_TIP, HandLandmark.INDEX_MCP),
    'middle': (HandLandmark.MIDDLE_TIP, HandLandmark.MIDDLE_PIP),
    'ring': (HandLandmark.RING_TIP, HandLandmark.RING_PIP),
    'pinky': (HandLandmark.PINKY_TIP, HandLandmark.PINKY_PIP),
}


def finger_states(hand: HandFrame) -> Dict[str, Optional[bool]]:
    """
    Determine which fingers are extended.

    Only vertical positions are compared, so a sideways hand is not
    handled specially.

    Returns:
        Dict with finger names as keys; True when the tip is above its
        joint (extended), False when below (folded), None when level
    """
    states = {}
    for finger, (tip_lm, joint_lm) in FINGER_JOINTS.items():
        tip = hand.get_landmark(tip_lm).y
        joint = hand.get_landmark(joint_lm).y
        if tip < joint:
            states[finger] = True
        elif tip > joint:
            states[finger] = False
        else:
            states[finger] = None
    return states


def is_drawing_pose(hand: HandFrame) -> bool:
    """Index extended while middle, ring and pinky are folded."""
    states = finger_states(hand)
    return states['index'] is True and all(
        states[finger] is False for finger in ('middle', 'ring', 'pinky')
    )


class GestureClassifier:
    """
    Stateless per-frame gesture classifier.

    Converts the index fingertip to canvas pixels with the x-axis mirrored
    for a front-facing camera.
    """

    def __init__(self, width: int = 640, height: int = 480):
        """
        Args:
            width: Canvas width in pixels
            height: Canvas height in pixels
        """
        self.width = width
        self.height = height

    def classify(self, hand: Optional[HandFrame]) -> ClassifiedFrame:
        """
        Classify one frame.

        Args:
            hand: Landmarks of the detected hand, or None when no hand

        Returns:
            ClassifiedFrame; malformed input is reported as IDLE
        """
        if hand is None or not hand.is_valid():
            return IDLE_FRAME

        index_tip = hand.get_landmark(HandLandmark.INDEX_TIP)
        fingertip = index_tip.to_pixels(self.width, self.height, mirror=True)

        if is_drawing_pose(hand):
            return ClassifiedFrame(GestureState.DRAWING, fingertip)
        return ClassifiedFrame(GestureState.SELECTING, fingertip)

    def get_gesture_info(self, state: GestureState) -> dict:
        """Get display name and description for a gesture."""
        info = {
            GestureState.IDLE: {
                'name': 'No Hand',
                'description': 'No hand detected'
            },
            GestureState.SELECTING: {
                'name': 'Select',
                'description': 'Point at a color box to select it'
            },
            GestureState.DRAWING: {
                'name': 'Drawing',
                'description': 'Index finger up - draw on canvas'
            },
        }
        return info[state]


def draw_gesture_ui(
    frame: np.ndarray,
    classified: ClassifiedFrame,
    classifier: GestureClassifier
) -> np.ndarray:
    """
    Draw the gesture status box on the camera view.

    Args:
        frame: Mirrored camera view to draw on
        classified: Current classification
        classifier: Classifier used for gesture info

    Returns:
        Frame with gesture UI overlay
    """
    h, w = frame.shape[:2]
    info = classifier.get_gesture_info(classified.state)

    box_h = 40
    cv2.rectangle(frame, (10, h - box_h - 10), (200, h - 10), (0, 0, 0), -1)
    cv2.rectangle(frame, (10, h - box_h - 10), (200, h - 10), (255, 255, 255), 1)

    if classified.state == GestureState.DRAWING:
        color = (0, 255, 0)
    elif classified.state == GestureState.SELECTING:
        color = (0, 255, 255)
    else:
        color = (150, 150, 150)

    cv2.putText(
        frame, info['name'],
        (20, h - 22),
        cv2.FONT_HERSHEY_SIMPLEX, 0.7, color, 2
    )

    return frame
