"""Responsibility: Option, platform, and value types shared by the builder and the recorder."""

from dataclasses import dataclass, field

INPUT_SCREEN = "screen"
INPUT_AUDIO = "audio"
INPUT_BOTH = "both"
INPUT_MODES = (INPUT_SCREEN, INPUT_AUDIO, INPUT_BOTH)

PLATFORM_LINUX = "linux"
PLATFORM_MACOS = "darwin"
PLATFORM_WINDOWS = "win32"

AUTO = "auto"

DISPLAY_X11 = "x11"
DISPLAY_WAYLAND = "wayland"
DISPLAY_SERVERS = (DISPLAY_X11, DISPLAY_WAYLAND, AUTO)

CAPTURE_GDIGRAB = "gdigrab"
CAPTURE_DSHOW = "dshow"
WINDOWS_CAPTURE_METHODS = (CAPTURE_GDIGRAB, CAPTURE_DSHOW, AUTO)

AUDIO_PULSE = "pulse"
AUDIO_ALSA = "alsa"
AUDIO_JACK = "jack"
AUDIO_DSHOW = "dshow"
AUDIO_WASAPI = "wasapi"
LINUX_AUDIO_BACKENDS = (AUDIO_PULSE, AUDIO_ALSA, AUDIO_JACK)
WINDOWS_AUDIO_BACKENDS = (AUDIO_DSHOW, AUDIO_WASAPI)
AUDIO_BACKENDS = (AUTO, *LINUX_AUDIO_BACKENDS, *WINDOWS_AUDIO_BACKENDS)

# Ten encoder speed presets plus the two legacy simple levels.
ENCODING_SPEEDS = (
    "ultrafast",
    "superfast",
    "veryfast",
    "faster",
    "fast",
    "medium",
    "slow",
    "slower",
    "veryslow",
    "placebo",
)
QUALITY_LEVELS = (*ENCODING_SPEEDS, "low", "high")

VIDEO_QUALITY_PRESETS = ("lossless", "visually-lossless", "high", "medium", "low", "very-low")
AUDIO_QUALITY_PRESETS = ("lossless", "high", "medium", "low", "very-low")

DEFAULT_FPS = 30
MIN_FPS = 1
MAX_FPS = 60
MIN_CRF = 0
MAX_CRF = 51


@dataclass(frozen=True)
class PlatformConfig:
    display_server: str = AUTO
    windows_capture_method: str = AUTO
    preferred_audio_backend: str = AUTO


@dataclass(frozen=True)
class RecorderOptions:
    """Everything a caller can say about one recording.

    Construction does not validate; ``validate_recorder_options`` is the
    single gate and ``create_recorder`` runs it before a ``Recorder`` exists.

    Quality comes in three independent layers that the quality resolver
    ranks: ``crf`` / ``video_bitrate`` / ``audio_bitrate`` overrides first,
    then the ``video_quality`` / ``audio_quality`` presets, then the legacy
    ``quality`` level. ``encoding_speed`` overrides the speed preset only.
    """

    input: str
    output: str
    fps: int = DEFAULT_FPS
    screen_id: int = 0
    audio_device: str | None = None
    ffmpeg_path: str | None = None
    video_codec: str | None = None
    audio_codec: str | None = None
    quality: str | None = None
    video_quality: str | None = None
    audio_quality: str | None = None
    encoding_speed: str | None = None
    crf: int | None = None
    video_bitrate: str | None = None
    audio_bitrate: str | None = None
    platform_config: PlatformConfig = field(default_factory=PlatformConfig)

    @property
    def captures_video(self) -> bool:
        return self.input in {INPUT_SCREEN, INPUT_BOTH}

    @property
    def captures_audio(self) -> bool:
        return self.input in {INPUT_AUDIO, INPUT_BOTH}


@dataclass(frozen=True)
class PlatformContext:
    """Backends resolved for one argument build.

    Fields that do not apply to ``platform`` stay ``None``.
    """

    platform: str
    display_server: str | None = None
    windows_capture_method: str | None = None
    audio_backend: str | None = None
    display: str = ":0.0"
    hardware_encoder: str | None = None
    wayland_helper_available: bool = False


@dataclass(frozen=True)
class CaptureMethods:
    video: list[str]
    audio: list[str]
    display_server: str | None = None
