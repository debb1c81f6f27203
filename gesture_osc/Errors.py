class GesturePipelineError(Exception):
    """Base class for every error raised by the video -> OSC pipeline."""


class OpenError(GesturePipelineError):
    """The video cannot be read or has no video stream. Fatal to a run."""


class DecodeError(GesturePipelineError):
    """Decoding failed mid-stream. Frames yielded before it stay valid."""


class DetectionError(GesturePipelineError):
    """Hand detection failed for a single frame. The run skips that frame."""


class SendError(GesturePipelineError):
    """One OSC datagram could not be sent. Never retried."""
