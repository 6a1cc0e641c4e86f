"""
Camera Module - Webcam Stream Handler
======================================
Captures webcam frames on a background thread and always hands out the
most recent one. Frames that arrive while the consumer is busy are
overwritten, never queued.
"""

import threading
import time
from typing import Generator, Optional

import cv2
import numpy as np


class Camera:
    """
    Webcam stream handler with threading support for smooth frame capture.

    Attributes:
        camera_id: Index of the camera device (default 0)
        width: Frame width in pixels
        height: Frame height in pixels
        max_failed_reads: Consecutive failed reads before the device is
            considered lost and capture stops
    """

    # Delay between retries after a failed read
    RETRY_DELAY = 0.01

    def __init__(
        self,
        camera_id: int = 0,
        width: int = 640,
        height: int = 480,
        max_failed_reads: int = 200
    ):
        """
        Args:
            camera_id: Camera device index
            width: Desired frame width
            height: Desired frame height
            max_failed_reads: Failed reads in a row that end the capture
        """
        self.camera_id = camera_id
        self.width = width
        self.height = height
        self.max_failed_reads = max_failed_reads

        self.cap: Optional[cv2.VideoCapture] = None

        # Latest frame shared with the capture thread
        self._frame: Optional[np.ndarray] = None
        self._frame_id = 0
        self._frame_lock = threading.Lock()
        self._running = False
        self._thread: Optional[threading.Thread] = None

    def start(self) -> bool:
        """
        Start the camera capture.

        Returns:
            True if camera started successfully, False otherwise
        """
        if self._running:
            return True

        # Release a device left over from a lost capture
        if self.cap is not None:
            self.stop()

        self.cap = cv2.VideoCapture(self.camera_id)

        if not self.cap.isOpened():
            print(f"[ERROR] Failed to open camera {self.camera_id}")
            self.cap.release()
            self.cap = None
            return False

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        self.cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)

        print(f"[INFO] Camera started: {self.width}x{self.height}")

        self._running = True
        self._thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._thread.start()

        return True

    def _capture_loop(self):
        """Keep replacing the shared frame with the newest capture."""
        failed_reads = 0
        while self._running:
            ret, frame = self.cap.read()

            if ret:
                failed_reads = 0
                if frame.shape[:2] != (self.height, self.width):
                    frame = cv2.resize(frame, (self.width, self.height))
                with self._frame_lock:
                    self._frame = frame
                    self._frame_id += 1
            else:
                failed_reads += 1
                if failed_reads >= self.max_failed_reads:
                    print(f"[ERROR] Camera {self.camera_id} stopped delivering frames")
                    self._running = False
                    break
                time.sleep(self.RETRY_DELAY)

    def is_running(self) -> bool:
        return self._running

    def stop(self):
        """Stop the camera capture and release resources."""
        if not self._running and self.cap is None:
            return

        self._running = False

        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

        if self.cap is not None:
            self.cap.release()
            self.cap = None

        with self._frame_lock:
            self._frame = None

        print("[INFO] Camera stopped")

    def frame_generator(self) -> Generator[np.ndarray, None, None]:
        """
        Yield each newly captured frame while the camera runs.

        A frame is yielded once; if no new frame has arrived the generator
        waits instead of repeating the previous one. Ends once capture has
        stopped and the last captured frame has been handed out.
        """
        last_id = 0
        while True:
            running = self._running
            with self._frame_lock:
                frame_id = self._frame_id
                frame = self._frame.copy() if self._frame is not None else None

            if frame is not None and frame_id != last_id:
                last_id = frame_id
                yield frame
            elif not running:
                return
            else:
                time.sleep(0.001)
