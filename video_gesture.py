"""
Entry point: stream hand landmarks from a video file as OSC.

Usage examples:
    python video_gesture.py clip.mov                       # thumb tip -> 127.0.0.1:8732 /gesture
    python video_gesture.py clip.mov --port 9000 --log-points
    python video_gesture.py clip.mov --landmark thumb_tip --landmark index_finger_tip
"""

from __future__ import annotations

import argparse
import sys

from gesture_osc import (
    HAND_LANDMARK_NAMES,
    MediaPipeHandTracker,
    OscStreamer,
    VideoProcessor,
    load_config,
    settings_from_config,
)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Video hand-landmark OSC streamer")
    parser.add_argument("video", help="Path to the video file to process.")
    parser.add_argument("--config", default="config.json", help="JSON config file (default: config.json).")
    parser.add_argument("--host", help="OSC destination host (overrides osc.host).")
    parser.add_argument("--port", type=int, help="OSC destination port (overrides osc.port).")
    parser.add_argument("--address", help="OSC address pattern (overrides osc.address).")
    parser.add_argument("--max-hands", type=int, help="Upper bound on hands per frame.")
    parser.add_argument(
        "--landmark",
        action="append",
        choices=HAND_LANDMARK_NAMES,
        help="Landmark to stream; repeat for several (overrides landmarks).",
    )
    parser.add_argument("--log-points", action="store_true", help="Print every point sent.")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> dict:
    """Config file values with command-line overrides applied."""
    cfg = load_config(args.config)
    osc_cfg = dict(cfg.get("osc", {}))
    tcfg = dict(cfg.get("tracker", {}))
    debug_cfg = dict(cfg.get("debug", {}))

    if args.host:
        osc_cfg["host"] = args.host
    if args.port is not None:
        osc_cfg["port"] = args.port
    if args.address:
        osc_cfg["address"] = args.address
    if args.max_hands is not None:
        tcfg["max_num_hands"] = args.max_hands
    if args.log_points:
        debug_cfg["log_points"] = True

    cfg = dict(cfg, osc=osc_cfg, tracker=tcfg, debug=debug_cfg)
    if args.landmark:
        cfg["landmarks"] = args.landmark
    return cfg


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        settings = settings_from_config(build_config(args))
    except ValueError as e:
        print(f"[CFG] Invalid configuration: {e}")
        return 2

    tracker = MediaPipeHandTracker(settings["tracker"], landmarks=settings["landmarks"])
    streamer = OscStreamer(settings["host"], settings["port"], settings["address"])
    processor = VideoProcessor(
        tracker,
        streamer,
        landmarks=settings["landmarks"],
        log_points=settings["log_points"],
        progress_every=settings["progress_every"],
    )

    try:
        streamer.open()
        processor.select_video(args.video)
        processor.process_video()
        try:
            # poll so Ctrl+C reaches the main thread
            while processor.is_processing:
                processor.join(timeout=0.1)
        except KeyboardInterrupt:
            print("[PY] Interrupted, stopping after current frame...")
            processor.cancel()
        stats = processor.join()
    finally:
        streamer.close()
        tracker.close()

    if stats is None:
        return 1
    print(
        f"[PY] {stats.frames} frames in {stats.seconds:.1f}s ({stats.fps:.1f} FPS), "
        f"{stats.hands} hands, {stats.points_sent} points sent, "
        f"{stats.send_failures} send failures, {stats.detection_failures} detection failures"
    )
    return 0 if stats.ok else 1


if __name__ == "__main__":
    sys.exit(main())
