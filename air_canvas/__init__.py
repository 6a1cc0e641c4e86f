# Air Canvas - Real-time Air Drawing with Hand Tracking
# Version: 1.0.0

"""
Core modules for the air drawing tool:
- camera: Webcam stream handler
- hand_tracking: MediaPipe hand landmark detection and frame stream
- gesture_logic: Per-frame draw / select gesture classification
- toolbar: Color selection boxes and hit-testing
- canvas: Stroke accumulation and drawing board
- config: Environment and command line settings
- ui: Main application interface
"""

__version__ = "1.0.0"
