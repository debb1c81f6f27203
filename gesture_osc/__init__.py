"""
Video -> hand landmarks -> OSC.

Decodes a video with OpenCV, runs a hand detector (MediaPipe Hands by default)
on every frame and streams the chosen landmarks as /gesture x y over UDP.
"""

from .Errors import DecodeError, DetectionError, GesturePipelineError, OpenError, SendError
from .FrameSource import FrameSource
from .HandData import HAND_LANDMARK_NAMES, FrameBuffer, HandDetection, LandmarkPoint, VideoHandle
from .HandTracker import HandPoseDetector, MediaPipeHandTracker, detections_from_result
from .Network import OscStreamer, encode_point
from .VideoProcessor import RunStats, VideoProcessor
from .helpers import load_config, settings_from_config

__all__ = [
    "DecodeError",
    "DetectionError",
    "GesturePipelineError",
    "OpenError",
    "SendError",
    "FrameSource",
    "HAND_LANDMARK_NAMES",
    "FrameBuffer",
    "HandDetection",
    "LandmarkPoint",
    "VideoHandle",
    "HandPoseDetector",
    "MediaPipeHandTracker",
    "detections_from_result",
    "OscStreamer",
    "encode_point",
    "RunStats",
    "VideoProcessor",
    "load_config",
    "settings_from_config",
]
