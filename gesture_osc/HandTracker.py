from abc import ABC, abstractmethod

import cv2

from .Errors import DetectionError
from .HandData import HAND_LANDMARK_NAMES, HandDetection, LandmarkPoint
from .helpers import clamp01


class HandPoseDetector(ABC):
    """
    Detector interface consumed by the pipeline.

    detect() takes one BGRA FrameBuffer and returns the hands found in it, in
    the detector's order (possibly empty). It blocks until done and raises
    DetectionError when the frame cannot be processed.
    """

    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def detect(self, frame): ...

    def close(self) -> None:
        pass


def detections_from_result(result, names=None):
    """
    Convert a MediaPipe Hands result into a list of HandDetection.
    names: landmark names to keep (all 21 when None).
    """
    hands = []
    if not result or not getattr(result, "multi_hand_landmarks", None):
        return hands

    wanted = names if names is not None else HAND_LANDMARK_NAMES
    handedness_list = getattr(result, "multi_handedness", None) or []

    for i, lm in enumerate(result.multi_hand_landmarks):
        h = HandDetection()
        if i < len(handedness_list):
            h.handedness = handedness_list[i].classification[0].label

        points = lm.landmark
        for name in wanted:
            idx = HAND_LANDMARK_NAMES.index(name)
            if idx >= len(points):
                continue
            p = points[idx]
            h.landmarks[name] = LandmarkPoint(name=name, x=clamp01(float(p.x)), y=clamp01(float(p.y)))
        hands.append(h)

    return hands


class MediaPipeHandTracker(HandPoseDetector):
    def __init__(self, cfg=None, landmarks=None):
        """
        cfg: the "tracker" settings (max_num_hands, model_complexity, ...).
        landmarks: names to extract per hand (all when None).
        """
        try:
            import mediapipe as mp
        except ImportError as e:
            raise RuntimeError("MediaPipe is not installed: pip install mediapipe") from e

        tcfg = cfg or {}
        self.landmarks = list(landmarks) if landmarks is not None else None
        self.max_num_hands = int(tcfg.get("max_num_hands", 2))

        self.mp_hands = mp.solutions.hands.Hands(
            static_image_mode=tcfg.get("static_image_mode", False),
            model_complexity=tcfg.get("model_complexity", 1),
            min_detection_confidence=tcfg.get("min_detection_confidence", 0.5),
            min_tracking_confidence=tcfg.get("min_tracking_confidence", 0.5),
            max_num_hands=self.max_num_hands,
        )

    def name(self) -> str:
        return "mediapipe_hands"

    def detect(self, frame):
        try:
            # MediaPipe expects RGB in uint8
            rgb = cv2.cvtColor(frame.pixels, cv2.COLOR_BGRA2RGB)
            result = self.mp_hands.process(rgb)
            return detections_from_result(result, self.landmarks)
        except Exception as e:
            raise DetectionError(f"hand detection failed on frame {frame.index}: {e}") from e

    def close(self) -> None:
        if self.mp_hands is not None:
            self.mp_hands.close()
            self.mp_hands = None
