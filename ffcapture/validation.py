"""Responsibility: Boundary checks that every RecorderOptions passes before arguments are built."""

import os
from collections.abc import Mapping
from dataclasses import fields, replace
from typing import Any

from .errors import OptionsValidationError
from .models import (
    AUDIO_BACKENDS,
    AUDIO_QUALITY_PRESETS,
    DISPLAY_SERVERS,
    INPUT_MODES,
    MAX_CRF,
    MAX_FPS,
    MIN_CRF,
    MIN_FPS,
    QUALITY_LEVELS,
    VIDEO_QUALITY_PRESETS,
    WINDOWS_CAPTURE_METHODS,
    PlatformConfig,
    RecorderOptions,
)

_OPTION_FIELDS = frozenset(f.name for f in fields(RecorderOptions))
_PLATFORM_FIELDS = frozenset(f.name for f in fields(PlatformConfig))
_OPTIONAL_STRING_FIELDS = (
    "audio_device",
    "ffmpeg_path",
    "video_codec",
    "audio_codec",
    "video_bitrate",
    "audio_bitrate",
)


def coerce_options(options: RecorderOptions | Mapping[str, Any]) -> RecorderOptions:
    """Turn a plain mapping into RecorderOptions; pass instances through."""
    if isinstance(options, RecorderOptions):
        if options.platform_config is None:
            return replace(options, platform_config=PlatformConfig())
        return options
    if not isinstance(options, Mapping):
        raise OptionsValidationError("Options must be a RecorderOptions instance or a mapping")

    unknown = sorted(set(options) - _OPTION_FIELDS)
    if unknown:
        raise OptionsValidationError(f"Unknown option(s): {', '.join(unknown)}")

    payload = dict(options)
    raw_platform = payload.get("platform_config")
    if raw_platform is None:
        payload.pop("platform_config", None)
    elif isinstance(raw_platform, Mapping):
        unknown_platform = sorted(set(raw_platform) - _PLATFORM_FIELDS)
        if unknown_platform:
            raise OptionsValidationError(f"Unknown platform option(s): {', '.join(unknown_platform)}")
        payload["platform_config"] = PlatformConfig(**{k: v for k, v in raw_platform.items() if v is not None})
    elif not isinstance(raw_platform, PlatformConfig):
        raise OptionsValidationError("platform_config must be a PlatformConfig or a mapping")

    payload.setdefault("input", None)
    payload.setdefault("output", None)
    return RecorderOptions(**payload)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_choice(value: object, allowed: tuple[str, ...], label: str) -> None:
    if value is not None and value not in allowed:
        raise OptionsValidationError(f"{label} must be one of: {', '.join(allowed)}")


def validate_recorder_options(options: RecorderOptions | Mapping[str, Any]) -> RecorderOptions:
    """Raise OptionsValidationError for the first invalid field.

    Returns the (coerced) options so callers can validate and normalize in
    one step.
    """
    opts = coerce_options(options)

    output = opts.output
    if isinstance(output, os.PathLike):
        output = os.fspath(output)
    if not isinstance(output, str) or not output.strip():
        raise OptionsValidationError("Output path is required")

    if opts.input not in INPUT_MODES:
        raise OptionsValidationError(f"Input must be one of: {', '.join(INPUT_MODES)}")

    if not _is_int(opts.fps) or not MIN_FPS <= opts.fps <= MAX_FPS:
        raise OptionsValidationError(f"FPS must be between {MIN_FPS} and {MAX_FPS}")

    if not _is_int(opts.screen_id) or opts.screen_id < 0:
        raise OptionsValidationError("Screen ID must be non-negative")

    _check_choice(opts.quality, QUALITY_LEVELS, "Quality")
    _check_choice(opts.video_quality, VIDEO_QUALITY_PRESETS, "Video quality")
    _check_choice(opts.audio_quality, AUDIO_QUALITY_PRESETS, "Audio quality")
    _check_choice(opts.encoding_speed, QUALITY_LEVELS, "Encoding speed")

    if opts.crf is not None and (not _is_int(opts.crf) or not MIN_CRF <= opts.crf <= MAX_CRF):
        raise OptionsValidationError(f"CRF must be between {MIN_CRF} and {MAX_CRF}")

    platform_config = opts.platform_config
    if not isinstance(platform_config, PlatformConfig):
        raise OptionsValidationError("platform_config must be a PlatformConfig or a mapping")
    _check_choice(platform_config.display_server, DISPLAY_SERVERS, "Display server")
    _check_choice(platform_config.windows_capture_method, WINDOWS_CAPTURE_METHODS, "Windows capture method")
    _check_choice(platform_config.preferred_audio_backend, AUDIO_BACKENDS, "Preferred audio backend")

    for name in _OPTIONAL_STRING_FIELDS:
        value = getattr(opts, name)
        if value is None:
            continue
        if isinstance(value, os.PathLike) and name == "ffmpeg_path":
            continue
        if not isinstance(value, str) or not value.strip():
            raise OptionsValidationError(f"{name} must be a non-empty string when given")

    return opts
