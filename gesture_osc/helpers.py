import json
import os

from .HandData import HAND_LANDMARK_NAMES


DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8732
DEFAULT_ADDRESS = "/gesture"
DEFAULT_LANDMARKS = ["thumb_tip"]


def clamp01(v):
    return max(0.0, min(1.0, v))


def load_config(path="config.json"):
    if not path or not os.path.exists(path):
        print(f"[CFG] config '{path}' not found, using defaults.")
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = json.load(f)
    except Exception as e:
        print("[CFG] Failed to load config:", e)
        return {}
    if not isinstance(cfg, dict):
        print(f"[CFG] config '{path}' is not a JSON object, using defaults.")
        return {}
    return cfg


def settings_from_config(cfg):
    """
    Flatten the config dict into the values the pipeline needs.
    Missing keys fall back to defaults; invalid values raise ValueError.
    """
    cfg = cfg or {}
    osc_cfg = cfg.get("osc", {})
    tcfg = cfg.get("tracker", {})
    debug_cfg = cfg.get("debug", {})

    port = int(osc_cfg.get("port", DEFAULT_PORT))
    if not 0 < port < 65536:
        raise ValueError(f"osc.port out of range: {port}")

    address = str(osc_cfg.get("address", DEFAULT_ADDRESS))
    if not address.startswith("/"):
        raise ValueError(f"osc.address must start with '/': {address!r}")

    max_hands = int(tcfg.get("max_num_hands", 2))
    if max_hands < 1:
        raise ValueError(f"tracker.max_num_hands must be >= 1: {max_hands}")

    landmarks = list(cfg.get("landmarks", DEFAULT_LANDMARKS))
    unknown = [name for name in landmarks if name not in HAND_LANDMARK_NAMES]
    if unknown:
        raise ValueError(f"unknown landmark names: {', '.join(unknown)}")
    if not landmarks:
        raise ValueError("at least one landmark must be streamed")

    return {
        "host": str(osc_cfg.get("host", DEFAULT_HOST)),
        "port": port,
        "address": address,
        "tracker": {
            "max_num_hands": max_hands,
            "model_complexity": int(tcfg.get("model_complexity", 1)),
            "min_detection_confidence": float(tcfg.get("min_detection_confidence", 0.5)),
            "min_tracking_confidence": float(tcfg.get("min_tracking_confidence", 0.5)),
            "static_image_mode": bool(tcfg.get("static_image_mode", False)),
        },
        "landmarks": landmarks,
        "log_points": bool(debug_cfg.get("log_points", False)),
        "progress_every": max(0, int(debug_cfg.get("progress_every", 0))),
    }
