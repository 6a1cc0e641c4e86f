"""
Configuration Module - Runtime Settings
========================================
Settings come from the environment (a ``.env`` file is loaded by the
entry point) and can be overridden from the command line.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


@dataclass
class Settings:
    """Application settings."""
    camera_id: int = 0
    width: int = 640
    height: int = 480
    output_dir: Path = Path("output")
    min_detection_confidence: float = 0.7
    min_tracking_confidence: float = 0.5
    model_path: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from ``AIR_CANVAS_*`` environment variables.

        Raises:
            ValueError: If a variable cannot be parsed or is out of range
        """
        env = os.environ if environ is None else environ

        model_path = env.get('AIR_CANVAS_MODEL_PATH')
        settings = cls(
            camera_id=_env_int(env, 'AIR_CANVAS_CAMERA', cls.camera_id),
            width=_env_int(env, 'AIR_CANVAS_WIDTH', cls.width),
            height=_env_int(env, 'AIR_CANVAS_HEIGHT', cls.height),
            output_dir=Path(env.get('AIR_CANVAS_OUTPUT_DIR') or cls.output_dir),
            min_detection_confidence=_env_float(
                env, 'AIR_CANVAS_MIN_DETECTION', cls.min_detection_confidence),
            min_tracking_confidence=_env_float(
                env, 'AIR_CANVAS_MIN_TRACKING', cls.min_tracking_confidence),
            model_path=Path(model_path) if model_path else None,
        )
        settings.validate()
        return settings

    def validate(self):
        """Check value ranges."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")
        if self.camera_id < 0:
            raise ValueError(f"Camera index must not be negative, got {self.camera_id}")
        for name in ('min_detection_confidence', 'min_tracking_confidence'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
