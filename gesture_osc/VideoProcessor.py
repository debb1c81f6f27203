import threading
import time
from dataclasses import dataclass
from typing import Optional

from .Errors import DecodeError, DetectionError, OpenError, SendError
from .FrameSource import FrameSource
from .HandData import VideoHandle


@dataclass
class RunStats:
    """Outcome of one processing run."""

    video: Optional[str] = None
    frames: int = 0
    hands: int = 0
    points_sent: int = 0
    send_failures: int = 0
    detection_failures: int = 0
    seconds: float = 0.0
    cancelled: bool = False
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def points_attempted(self) -> int:
        return self.points_sent + self.send_failures

    @property
    def fps(self) -> float:
        return self.frames / self.seconds if self.seconds > 0 else 0.0


class VideoProcessor:
    """
    Runs frame -> detect -> stream over the selected video on a worker thread.

    At most one run is active at a time. process_video() is ignored while a
    run is active or when no video has been selected.
    """

    def __init__(
        self,
        detector,
        streamer,
        landmarks=("thumb_tip",),
        frame_source_factory=FrameSource,
        log_points=False,
        progress_every=0,
    ):
        self.detector = detector
        self.streamer = streamer
        self.landmarks = list(landmarks)
        self.frame_source_factory = frame_source_factory
        self.log_points = log_points
        self.progress_every = progress_every

        self.selected_video = None
        self.last_stats = None

        self._run_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._worker = None

    # --------------------------------------------------------
    # TRIGGERING SURFACE
    # --------------------------------------------------------
    def select_video(self, path):
        self.selected_video = path if isinstance(path, VideoHandle) else VideoHandle(str(path))
        return self.selected_video

    @property
    def is_processing(self):
        return self._run_lock.locked()

    @property
    def can_process(self):
        return self.selected_video is not None and not self.is_processing

    def process_video(self):
        video = self.selected_video
        if video is None:
            return
        if not self._run_lock.acquire(blocking=False):
            return

        self._stop_event.clear()
        self.last_stats = None
        try:
            self._worker = threading.Thread(
                target=self._run_guarded, args=(video,), name="video-processor", daemon=True
            )
            self._worker.start()
        except Exception:
            self._run_lock.release()
            raise

    def cancel(self):
        """Stop the active run at the next frame boundary."""
        self._stop_event.set()

    def join(self, timeout=None):
        """
        Wait for the current worker. Returns its RunStats, or None while the
        run is still going (timeout expired) or when nothing has run yet.
        """
        worker = self._worker
        if worker is not None:
            worker.join(timeout)
        return self.last_stats

    # --------------------------------------------------------
    # WORKER
    # --------------------------------------------------------
    def _run_guarded(self, video):
        stats = RunStats(video=video.path)
        start = time.time()
        try:
            self.last_stats = self._run(video, stats)
        except Exception as e:
            print(f"[PY] Run crashed: {e!r}")
            stats.error = e
            stats.seconds = time.time() - start
            self.last_stats = stats
            raise
        finally:
            self._run_lock.release()

    def _run(self, video, stats):
        start = time.time()
        print(f"[PY] Processing {video.path} with {self.detector.name()}")

        try:
            frames = self.frame_source_factory(video).open()
        except OpenError as e:
            print(f"[PY] ERROR opening video: {e}")
            stats.error = e
            stats.seconds = time.time() - start
            return stats

        try:
            for frame in frames:
                if self._stop_event.is_set():
                    stats.cancelled = True
                    print(f"[PY] Run cancelled at frame {frame.index}")
                    break
                self._process_frame(frame, stats)
                if self.progress_every and stats.frames % self.progress_every == 0:
                    print(f"[PY] {stats.frames} frames, {stats.points_sent} points sent")
        except DecodeError as e:
            print(f"[PY] ERROR processing video: {e}")
            stats.error = e
        finally:
            frames.close()

        stats.seconds = time.time() - start
        if stats.ok and not stats.cancelled:
            print(
                f"[PY] Finished processing video: {stats.frames} frames, "
                f"{stats.hands} hands, {stats.points_sent} sent, {stats.send_failures} failed"
            )
        return stats

    def _process_frame(self, frame, stats):
        stats.frames += 1
        try:
            hands = self.detector.detect(frame)
        except DetectionError as e:
            stats.detection_failures += 1
            print(f"[PY] Error processing frame {frame.index}: {e}")
            return

        for hand in hands:
            stats.hands += 1
            for name in self.landmarks:
                point = hand.get(name)
                if point is None:
                    continue
                try:
                    self.streamer.send(point)
                except SendError as e:
                    stats.send_failures += 1
                    print(f"[NET] Failed to send OSC message: {e}")
                    continue
                stats.points_sent += 1
                if self.log_points:
                    print(f"[PY] {name} detected at {point.x:.4f}, {point.y:.4f} (frame {frame.index})")
