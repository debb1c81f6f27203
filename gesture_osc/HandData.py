from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np


# MediaPipe hand landmark order (index == position in this list)
HAND_LANDMARK_NAMES = [
    "wrist",
    "thumb_cmc",
    "thumb_mcp",
    "thumb_ip",
    "thumb_tip",
    "index_finger_mcp",
    "index_finger_pip",
    "index_finger_dip",
    "index_finger_tip",
    "middle_finger_mcp",
    "middle_finger_pip",
    "middle_finger_dip",
    "middle_finger_tip",
    "ring_finger_mcp",
    "ring_finger_pip",
    "ring_finger_dip",
    "ring_finger_tip",
    "pinky_mcp",
    "pinky_pip",
    "pinky_dip",
    "pinky_tip",
]


@dataclass(frozen=True)
class VideoHandle:
    """Reference to a local video file picked by the user."""

    path: str


@dataclass
class FrameBuffer:
    """
    One decoded frame.
    pixels: uint8 array (height, width, 4) in BGRA order.
    """

    index: int
    pixels: np.ndarray
    width: int
    height: int
    timestamp_ms: float = 0.0


@dataclass(frozen=True)
class LandmarkPoint:
    """Named landmark in normalized image coordinates (0..1)."""

    name: str
    x: float
    y: float


@dataclass
class HandDetection:
    """
    Landmarks of one detected hand in one frame.
    Only exists while its frame is being processed.
    """

    handedness: str = "Unknown"
    landmarks: Dict[str, LandmarkPoint] = field(default_factory=dict)

    def get(self, name: str) -> Optional[LandmarkPoint]:
        return self.landmarks.get(name)
