import threading

import cv2
import numpy as np
import pytest

from air_canvas.camera import Camera


WIDTH, HEIGHT = 4, 3


def _frame(value):
    return np.full((HEIGHT, WIDTH, 3), value, dtype=np.uint8)


class FakeCapture:
    """Plays back scripted frames, then reports failed reads."""

    def __init__(self, frames=(), opened=True):
        self.frames = list(frames)
        self.opened = opened
        self.released = False
        self.props = {}

    def isOpened(self):
        return self.opened

    def set(self, prop, value):
        self.props[prop] = value
        return True

    def read(self):
        if self.frames:
            return True, self.frames.pop(0)
        return False, None

    def release(self):
        self.released = True


@pytest.fixture
def install_capture(monkeypatch):
    created = []

    def install(capture):
        def factory(camera_id):
            created.append(capture)
            return capture
        monkeypatch.setattr(cv2, "VideoCapture", factory)
        return created

    return install


def _collect(camera, timeout=5.0):
    """Drain the generator on a thread so a hang fails the test instead of blocking."""
    frames = []
    worker = threading.Thread(target=lambda: frames.extend(camera.frame_generator()), daemon=True)
    worker.start()
    worker.join(timeout)
    assert not worker.is_alive(), "frame generator did not finish"
    return frames


def test_start_failure_returns_false(install_capture):
    capture = FakeCapture(opened=False)
    install_capture(capture)
    camera = Camera(width=WIDTH, height=HEIGHT)

    assert camera.start() is False
    assert not camera.is_running()
    assert capture.released
    assert camera.cap is None


def test_start_configures_device(install_capture):
    capture = FakeCapture(frames=[_frame(1)])
    install_capture(capture)
    camera = Camera(width=WIDTH, height=HEIGHT, max_failed_reads=3)

    assert camera.start()
    _collect(camera)
    camera.stop()

    assert capture.props[cv2.CAP_PROP_FRAME_WIDTH] == WIDTH
    assert capture.props[cv2.CAP_PROP_FRAME_HEIGHT] == HEIGHT
    assert capture.released


def test_device_loss_ends_stream(install_capture):
    install_capture(FakeCapture(frames=[_frame(7)]))
    camera = Camera(width=WIDTH, height=HEIGHT, max_failed_reads=3)
    camera.start()

    frames = _collect(camera)

    assert not camera.is_running()
    assert len(frames) == 1
    assert (frames[0] == 7).all()
    camera.stop()


def test_frames_are_never_repeated(install_capture):
    install_capture(FakeCapture(frames=[_frame(i) for i in range(1, 6)]))
    camera = Camera(width=WIDTH, height=HEIGHT, max_failed_reads=3)
    camera.start()

    values = [int(f[0, 0, 0]) for f in _collect(camera)]

    # Frames may be dropped while the consumer is busy, but never queued or repeated
    assert values == sorted(set(values))
    assert values[-1] == 5
    camera.stop()


def test_frames_are_resized_to_configured_size(install_capture):
    install_capture(FakeCapture(frames=[np.zeros((10, 20, 3), dtype=np.uint8)]))
    camera = Camera(width=WIDTH, height=HEIGHT, max_failed_reads=3)
    camera.start()

    frames = _collect(camera)

    assert frames[0].shape == (HEIGHT, WIDTH, 3)
    camera.stop()


def test_restart_after_device_loss_reopens(install_capture):
    first = FakeCapture(frames=[_frame(1)])
    install_capture(first)
    camera = Camera(width=WIDTH, height=HEIGHT, max_failed_reads=3)
    camera.start()
    _collect(camera)

    second = FakeCapture(frames=[_frame(2)])
    install_capture(second)
    assert camera.start()

    assert first.released
    frames = _collect(camera)
    assert [int(f[0, 0, 0]) for f in frames] == [2]
    camera.stop()


def test_generator_on_stopped_camera_is_empty():
    assert list(Camera().frame_generator()) == []


def test_stop_is_idempotent(install_capture):
    install_capture(FakeCapture())
    camera = Camera(width=WIDTH, height=HEIGHT)
    camera.stop()
    camera.start()
    camera.stop()
    camera.stop()
    assert not camera.is_running()
