"""Responsibility: Public API exports for ffmpeg-backed screen and audio capture."""

from .args import build_ffmpeg_args
from .encoder import check_encoder_availability, resolve_encoder_path
from .errors import (
    CaptureError,
    EncoderExitError,
    EncoderNotFoundError,
    EncoderSpawnError,
    OptionsValidationError,
    RecordingInProgressError,
    StopTimeoutError,
    UnsupportedEnvironmentError,
)
from .models import CaptureMethods, PlatformConfig, PlatformContext, RecorderOptions
from .platform_detect import (
    EnvironmentSnapshot,
    detect_capture_methods,
    get_available_audio_devices,
    get_default_audio_device,
    resolve_platform_context,
)
from .quality import QualityPlan, RecommendedQuality, get_quality_presets, get_recommended_quality, resolve_quality_plan
from .recorder import Recorder, create_recorder
from .validation import validate_recorder_options

__all__ = [
    "CaptureError",
    "CaptureMethods",
    "EncoderExitError",
    "EncoderNotFoundError",
    "EncoderSpawnError",
    "EnvironmentSnapshot",
    "OptionsValidationError",
    "PlatformConfig",
    "PlatformContext",
    "QualityPlan",
    "RecommendedQuality",
    "Recorder",
    "RecorderOptions",
    "RecordingInProgressError",
    "StopTimeoutError",
    "UnsupportedEnvironmentError",
    "build_ffmpeg_args",
    "check_encoder_availability",
    "create_recorder",
    "detect_capture_methods",
    "get_available_audio_devices",
    "get_default_audio_device",
    "get_quality_presets",
    "get_recommended_quality",
    "resolve_encoder_path",
    "resolve_platform_context",
    "resolve_quality_plan",
    "validate_recorder_options",
]
