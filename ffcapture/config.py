"""Responsibility: Centralize environment-driven runtime configuration constants."""

import os  # Read environment variables for runtime configuration.
from pathlib import Path  # Construct the default log file path.


def env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def env_str(name: str) -> str | None:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


# Logs are persistent, so they live under the XDG state dir rather than the
# runtime dir.
_state_dir = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))

LOG_PATH = Path(os.path.expanduser(os.environ.get("FFCAPTURE_LOG_PATH", str(_state_dir / "ffcapture.log"))))
LOG_LEVEL = os.environ.get("FFCAPTURE_LOG_LEVEL", "INFO").strip().upper()
LOG_STDERR_MAX = env_int("FFCAPTURE_LOG_STDERR_MAX", 300)

FFMPEG_PATH_OVERRIDE = env_str("FFCAPTURE_FFMPEG_PATH")
HWACCEL_ENABLED = env_bool("FFCAPTURE_HWACCEL", True)
WAYLAND_HELPER_TOOL = os.environ.get("FFCAPTURE_WAYLAND_HELPER", "wf-recorder").strip() or "wf-recorder"
VERSION_CHECK_TIMEOUT_SECONDS = env_float("FFCAPTURE_VERSION_CHECK_TIMEOUT", 10.0)

# Grace period between the interrupt request and the forced kill in
# Recorder.stop(). Fixed on purpose; not read from the environment.
STOP_TIMEOUT_SECONDS = 5.0
