"""Responsibility: Pick capture and audio backends from a snapshot of host environment signals."""

import os
import sys
from dataclasses import dataclass, field

from .config import HWACCEL_ENABLED, WAYLAND_HELPER_TOOL
from .models import (
    AUDIO_ALSA,
    AUDIO_DSHOW,
    AUDIO_JACK,
    AUDIO_PULSE,
    AUTO,
    CAPTURE_GDIGRAB,
    DISPLAY_WAYLAND,
    DISPLAY_X11,
    LINUX_AUDIO_BACKENDS,
    PLATFORM_LINUX,
    PLATFORM_MACOS,
    PLATFORM_WINDOWS,
    WINDOWS_AUDIO_BACKENDS,
    CaptureMethods,
    PlatformConfig,
    PlatformContext,
)
from .tooling import has_tool, path_exists

DEFAULT_X11_DISPLAY = ":0.0"
SOFTWARE_VIDEO_CODEC = "libx264"

HARDWARE_ENCODERS = {
    PLATFORM_WINDOWS: "h264_nvenc",
    PLATFORM_MACOS: "h264_videotoolbox",
    PLATFORM_LINUX: "h264_vaapi",
}

DEFAULT_AUDIO_DEVICES = {
    PLATFORM_MACOS: "0",
    PLATFORM_WINDOWS: "Stereo Mix",
    PLATFORM_LINUX: "default",
}

# Static hints, not a live enumeration.
KNOWN_AUDIO_DEVICES = {
    PLATFORM_MACOS: ("0", "1", "2"),
    PLATFORM_WINDOWS: ("Stereo Mix", "Microphone", "Line In"),
    PLATFORM_LINUX: ("default", "pulse", "alsa"),
}


def _current_uid() -> int | None:
    getuid = getattr(os, "getuid", None)
    if getuid is None:
        return None
    return getuid()


@dataclass(frozen=True)
class EnvironmentSnapshot:
    """Every host signal the detectors look at, captured once.

    Detectors never read ``os.environ`` themselves; tests build snapshots
    directly instead of patching the process environment.
    """

    platform: str
    env: dict[str, str] = field(default_factory=dict)
    pulse_runtime_dir_present: bool = False
    jack_shm_present: bool = False
    wayland_helper_available: bool = False
    hwaccel_enabled: bool = True

    @classmethod
    def capture(cls) -> "EnvironmentSnapshot":
        env = {
            name: os.environ[name]
            for name in (
                "WAYLAND_DISPLAY",
                "DISPLAY",
                "XDG_SESSION_TYPE",
                "PULSE_RUNTIME_PATH",
                "JACK_DEFAULT_SERVER",
                "XDG_RUNTIME_DIR",
            )
            if os.environ.get(name)
        }
        uid = _current_uid()
        runtime_dir = env.get("XDG_RUNTIME_DIR") or (f"/run/user/{uid}" if uid is not None else "")
        pulse_dir_present = bool(runtime_dir) and path_exists(os.path.join(runtime_dir, "pulse"))
        jack_present = uid is not None and path_exists(f"/dev/shm/jack-{uid}")
        return cls(
            platform=sys.platform,
            env=env,
            pulse_runtime_dir_present=pulse_dir_present,
            jack_shm_present=jack_present,
            wayland_helper_available=has_tool(WAYLAND_HELPER_TOOL),
            hwaccel_enabled=HWACCEL_ENABLED,
        )


def _resolve(environment: EnvironmentSnapshot | None) -> EnvironmentSnapshot:
    return environment if environment is not None else EnvironmentSnapshot.capture()


def detect_display_server(environment: EnvironmentSnapshot) -> str:
    env = environment.env
    if env.get("WAYLAND_DISPLAY") or env.get("XDG_SESSION_TYPE") == DISPLAY_WAYLAND:
        return DISPLAY_WAYLAND
    if env.get("DISPLAY") or env.get("XDG_SESSION_TYPE") == DISPLAY_X11:
        return DISPLAY_X11
    return DISPLAY_X11


def detect_linux_audio_backend(environment: EnvironmentSnapshot) -> str:
    env = environment.env
    if env.get("PULSE_RUNTIME_PATH") or environment.pulse_runtime_dir_present:
        return AUDIO_PULSE
    if env.get("JACK_DEFAULT_SERVER") or environment.jack_shm_present:
        return AUDIO_JACK
    return AUDIO_ALSA


def detect_windows_capture_method(environment: EnvironmentSnapshot) -> str:
    # gdigrab ships with every ffmpeg build; dshow needs a third-party filter.
    return CAPTURE_GDIGRAB


def detect_hardware_encoder(environment: EnvironmentSnapshot) -> str | None:
    if not environment.hwaccel_enabled:
        return None
    return HARDWARE_ENCODERS.get(environment.platform)


def _choose_audio_backend(platform: str, preferred: str, environment: EnvironmentSnapshot) -> str | None:
    if platform == PLATFORM_LINUX:
        if preferred in LINUX_AUDIO_BACKENDS:
            return preferred
        if preferred == AUTO:
            return detect_linux_audio_backend(environment)
        return AUDIO_PULSE
    if platform == PLATFORM_WINDOWS:
        if preferred in WINDOWS_AUDIO_BACKENDS:
            return preferred
        return AUDIO_DSHOW
    return None


def resolve_platform_context(
    platform_config: PlatformConfig | None = None,
    environment: EnvironmentSnapshot | None = None,
) -> PlatformContext:
    """Merge caller overrides with detection; an explicit choice always wins."""
    environment = _resolve(environment)
    config = platform_config or PlatformConfig()
    platform = environment.platform

    display_server = None
    capture_method = None
    if platform == PLATFORM_LINUX:
        display_server = config.display_server
        if display_server == AUTO:
            display_server = detect_display_server(environment)
    elif platform == PLATFORM_WINDOWS:
        capture_method = config.windows_capture_method
        if capture_method == AUTO:
            capture_method = detect_windows_capture_method(environment)

    return PlatformContext(
        platform=platform,
        display_server=display_server,
        windows_capture_method=capture_method,
        audio_backend=_choose_audio_backend(platform, config.preferred_audio_backend, environment),
        display=environment.env.get("DISPLAY") or DEFAULT_X11_DISPLAY,
        hardware_encoder=detect_hardware_encoder(environment),
        wayland_helper_available=environment.wayland_helper_available,
    )


def detect_capture_methods(environment: EnvironmentSnapshot | None = None) -> CaptureMethods:
    environment = _resolve(environment)
    platform = environment.platform
    if platform == PLATFORM_MACOS:
        return CaptureMethods(video=["avfoundation"], audio=["avfoundation"])
    if platform == PLATFORM_WINDOWS:
        return CaptureMethods(video=["gdigrab", "dshow"], audio=["dshow", "wasapi"])
    if platform == PLATFORM_LINUX:
        display_server = detect_display_server(environment)
        video = ["kmsgrab"] if display_server == DISPLAY_WAYLAND else ["x11grab"]
        return CaptureMethods(
            video=video,
            audio=[detect_linux_audio_backend(environment)],
            display_server=display_server,
        )
    return CaptureMethods(video=[], audio=[])


def get_default_audio_device(platform: str | None = None) -> str:
    return DEFAULT_AUDIO_DEVICES.get(platform or sys.platform, "default")


def get_available_audio_devices(platform: str | None = None) -> list[str]:
    return list(KNOWN_AUDIO_DEVICES.get(platform or sys.platform, ("default",)))
