import os

import cv2

from .Errors import DecodeError, OpenError
from .HandData import FrameBuffer


def to_bgra(frame):
    """Convert whatever OpenCV decoded into a 4-channel BGRA frame."""
    if frame.ndim == 2:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGRA)
    channels = frame.shape[2]
    if channels == 4:
        return frame
    if channels == 3:
        return cv2.cvtColor(frame, cv2.COLOR_BGR2BGRA)
    if channels == 1:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2BGRA)
    raise ValueError(f"unsupported channel count: {channels}")


class FrameSource:
    """
    Lazily decodes a video file into BGRA FrameBuffers, in presentation order.

    Usage:
        for frame in FrameSource(video).open():
            ...

    open() raises OpenError straight away. The returned FrameStream grabs
    frame K+1 only once the caller asks for it, and can be consumed once: call
    open() again for another run. Stream URIs (rtsp://, http:// ...) are
    handed to OpenCV as-is.
    """

    def __init__(self, video, capture_factory=None):
        self.video = video
        self.capture_factory = capture_factory or cv2.VideoCapture

    def open(self):
        path = self.video.path
        if "://" not in path and not os.path.exists(path):
            raise OpenError(f"video not found: {path}")

        try:
            cap = self.capture_factory(path)
        except cv2.error as e:
            raise OpenError(f"cannot open video {path}: {e}") from e

        if not cap.isOpened():
            cap.release()
            raise OpenError(f"cannot open video {path}")

        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)
        if width <= 0 or height <= 0:
            cap.release()
            raise OpenError(f"no video track found in {path}")

        return FrameStream(cap, self._frames(cap))

    def _frames(self, cap):
        index = 0
        try:
            while True:
                try:
                    if not cap.grab():
                        # end of stream
                        return
                    timestamp_ms = float(cap.get(cv2.CAP_PROP_POS_MSEC) or 0.0)
                    ok, frame = cap.retrieve()
                    if not ok or frame is None:
                        raise DecodeError(f"failed to decode frame {index} of {self.video.path}")
                    pixels = to_bgra(frame)
                except (cv2.error, ValueError) as e:
                    raise DecodeError(f"failed to decode frame {index} of {self.video.path}: {e}") from e

                yield FrameBuffer(
                    index=index,
                    pixels=pixels,
                    width=int(pixels.shape[1]),
                    height=int(pixels.shape[0]),
                    timestamp_ms=timestamp_ms,
                )
                index += 1
        finally:
            cap.release()


class FrameStream:
    """
    Iterator returned by FrameSource.open().
    close() releases the capture, whether or not iteration ever started.
    """

    def __init__(self, cap, frames):
        self._cap = cap
        self._frames = frames

    def __iter__(self):
        return self

    def __next__(self):
        return next(self._frames)

    def close(self):
        self._frames.close()
        self._cap.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
