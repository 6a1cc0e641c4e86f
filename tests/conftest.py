import pytest

from air_canvas.hand_tracking import HandFrame, HandLandmark, Landmark


# Finger joints as (mcp, pip, tip)
FINGERS = {
    'index': (HandLandmark.INDEX_MCP, HandLandmark.INDEX_PIP, HandLandmark.INDEX_TIP),
    'middle': (HandLandmark.MIDDLE_MCP, HandLandmark.MIDDLE_PIP, HandLandmark.MIDDLE_TIP),
    'ring': (HandLandmark.RING_MCP, HandLandmark.RING_PIP, HandLandmark.RING_TIP),
    'pinky': (HandLandmark.PINKY_MCP, HandLandmark.PINKY_PIP, HandLandmark.PINKY_TIP),
}

MCP_Y = 0.6
PIP_Y = 0.5
EXTENDED_TIP_Y = 0.3
FOLDED_TIP_Y = 0.7


def build_hand(index=True, middle=False, ring=False, pinky=False, index_tip=None):
    """
    Build a synthetic 21-landmark hand.

    Each flag says whether that finger is extended. ``index_tip`` overrides
    the normalized (x, y) of the index fingertip.
    """
    points = [Landmark(0.5, 0.8) for _ in range(21)]
    flags = {'index': index, 'middle': middle, 'ring': ring, 'pinky': pinky}

    for finger, (mcp, pip, tip) in FINGERS.items():
        points[mcp] = Landmark(0.5, MCP_Y)
        points[pip] = Landmark(0.5, PIP_Y)
        points[tip] = Landmark(0.5, EXTENDED_TIP_Y if flags[finger] else FOLDED_TIP_Y)

    if index_tip is not None:
        points[HandLandmark.INDEX_TIP] = Landmark(*index_tip)

    return HandFrame(landmarks=points)


@pytest.fixture
def make_hand():
    return build_hand
