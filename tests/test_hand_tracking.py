from types import SimpleNamespace

import numpy as np

from air_canvas.hand_tracking import (
    HandFrame, HandLandmark, Landmark, draw_landmarks, hand_frame_stream,
    hand_frames_from_result
)


def _mp_landmark(x, y, z=0.0):
    return SimpleNamespace(x=x, y=y, z=z)


def _mp_result(hands):
    return SimpleNamespace(hand_landmarks=hands)


def test_landmark_to_pixels_mirrored():
    assert Landmark(0.25, 0.5).to_pixels(640, 480) == (480.0, 240.0)
    assert Landmark(0.25, 0.5).to_pixels(640, 480, mirror=False) == (160.0, 240.0)


def test_hand_frame_validity(make_hand):
    assert make_hand().is_valid()
    assert not HandFrame(landmarks=[Landmark(0.5, 0.5)] * 20).is_valid()
    assert not HandFrame(landmarks=[Landmark(0.5, float('inf'))] * 21).is_valid()


def test_get_fingertip(make_hand):
    hand = make_hand(index_tip=(0.1, 0.2))
    assert hand.get_fingertip('index') == Landmark(0.1, 0.2)
    assert hand.get_fingertip('INDEX') == Landmark(0.1, 0.2)
    assert hand.get_fingertip('wrist') is None
    assert HandFrame().get_fingertip('index') is None


def test_hand_frames_from_result():
    points = [_mp_landmark(i / 40, i / 30, -0.01) for i in range(21)]
    result = _mp_result([points])

    hands = hand_frames_from_result(result)

    assert len(hands) == 1
    hand = hands[0]
    assert len(hand.landmarks) == 21
    assert hand.get_landmark(HandLandmark.INDEX_TIP) == Landmark(8 / 40, 8 / 30, -0.01)


def test_hand_frames_from_empty_result():
    assert hand_frames_from_result(_mp_result([])) == []
    assert hand_frames_from_result(_mp_result(None)) == []


def test_draw_landmarks_marks_mirrored_fingertip(make_hand):
    frame = np.zeros((480, 640, 3), dtype=np.uint8)
    draw_landmarks(frame, make_hand(index_tip=(0.25, 0.5)))
    assert tuple(frame[240, 480]) == (255, 0, 255)
    assert tuple(frame[240, 160]) == (0, 0, 0)


class FakeCamera:
    def __init__(self, frames):
        self.frames = frames

    def frame_generator(self):
        yield from self.frames


class FakeTracker:
    def __init__(self, results):
        self.results = list(results)
        self.seen = []

    def process(self, frame):
        self.seen.append(frame)
        return self.results.pop(0)


def test_hand_frame_stream_pairs_frames_with_first_hand(make_hand):
    frames = [np.full((2, 2, 3), i, dtype=np.uint8) for i in range(3)]
    first, second = make_hand(), make_hand(index=False)
    tracker = FakeTracker([[first, second], [], [second]])

    stream = list(hand_frame_stream(FakeCamera(frames), tracker))

    assert [hand for _, hand in stream] == [first, None, second]
    assert all(f is frame for (f, _), frame in zip(stream, frames))
    assert all(a is b for a, b in zip(tracker.seen, frames))
    assert len(tracker.seen) == 3


def test_hand_frame_stream_is_lazy(make_hand):
    tracker = FakeTracker([[make_hand()]])
    stream = hand_frame_stream(FakeCamera([np.zeros((2, 2, 3), dtype=np.uint8)]), tracker)
    assert tracker.seen == []
    next(stream)
    assert len(tracker.seen) == 1
