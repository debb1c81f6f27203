import threading

import cv2
import numpy as np
import pytest

from gesture_osc import FrameSource, HandDetection, LandmarkPoint, SendError, VideoHandle


def blank_frame(width=8, height=6, value=0):
    return np.full((height, width, 3), value, dtype=np.uint8)


def hand(x, y, handedness="Unknown", name="thumb_tip"):
    return HandDetection(handedness=handedness, landmarks={name: LandmarkPoint(name, x, y)})


class FakeCapture:
    """Stands in for cv2.VideoCapture; records every grab."""

    def __init__(self, frames, fail_at=None, raise_at=None, opened=True, width=None, height=None):
        self.frames = list(frames)
        self.fail_at = fail_at
        self.raise_at = raise_at
        self.opened = opened
        self.width = width if width is not None else (self.frames[0].shape[1] if self.frames else 8)
        self.height = height if height is not None else (self.frames[0].shape[0] if self.frames else 6)
        self.pos = -1
        self.grabs = 0
        self.released = False

    def isOpened(self):
        return self.opened

    def get(self, prop):
        if prop == cv2.CAP_PROP_FRAME_WIDTH:
            return float(self.width)
        if prop == cv2.CAP_PROP_FRAME_HEIGHT:
            return float(self.height)
        if prop == cv2.CAP_PROP_POS_MSEC:
            return float(max(self.pos, 0) * 40)
        return 0.0

    def grab(self):
        self.grabs += 1
        if self.raise_at is not None and self.pos + 1 == self.raise_at:
            raise cv2.error("decoder exploded")
        if self.pos + 1 >= len(self.frames):
            return False
        self.pos += 1
        return True

    def retrieve(self):
        if self.pos == self.fail_at:
            return False, None
        return True, self.frames[self.pos]

    def release(self):
        self.released = True


class ScriptedDetector:
    """Returns scripted hands per frame index; an exception in the script is raised."""

    def __init__(self, script):
        self.script = script
        self.calls = []

    def name(self):
        return "scripted"

    def detect(self, frame):
        self.calls.append(frame.index)
        out = self.script.get(frame.index, [])
        if isinstance(out, Exception):
            raise out
        return list(out)

    def close(self):
        pass


class CrashingDetector(ScriptedDetector):
    """Raises an error the pipeline does not know about."""

    def detect(self, frame):
        raise ValueError("detector bug")


class GatedDetector:
    """Blocks inside detect() until the gate opens."""

    def __init__(self):
        self.entered = threading.Event()
        self.gate = threading.Event()

    def name(self):
        return "gated"

    def detect(self, frame):
        self.entered.set()
        self.gate.wait(5)
        return []

    def close(self):
        pass


class RecordingStreamer:
    """Records every attempted send; fails every Nth call when fail_every > 0."""

    def __init__(self, fail_every=0):
        self.fail_every = fail_every
        self.attempts = []
        self.sent = []

    def send(self, point):
        self.attempts.append((point.x, point.y))
        if self.fail_every and len(self.attempts) % self.fail_every == 0:
            raise SendError("simulated transport failure")
        self.sent.append((point.x, point.y))


class FrameSourceFactory:
    """FrameSource factory serving FakeCaptures and counting opens."""

    def __init__(self, make_capture):
        self.make_capture = make_capture
        self.opens = 0
        self.captures = []

    def __call__(self, video):
        self.opens += 1

        def capture_factory(path):
            cap = self.make_capture()
            self.captures.append(cap)
            return cap

        return FrameSource(video, capture_factory=capture_factory)


@pytest.fixture
def video_file(tmp_path):
    path = tmp_path / "clip.mov"
    path.write_bytes(b"\x00")
    return VideoHandle(str(path))
