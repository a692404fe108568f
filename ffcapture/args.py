"""Responsibility: Build ffmpeg command-line arguments for screen and audio capture.

Input groups are small pure functions looked up by platform (and by
backend inside a platform), so every cell can be tested on its own.
"""

import os
from collections.abc import Callable

from .errors import UnsupportedEnvironmentError
from .models import (
    AUDIO_ALSA,
    AUDIO_JACK,
    AUDIO_PULSE,
    AUDIO_WASAPI,
    CAPTURE_DSHOW,
    CAPTURE_GDIGRAB,
    DISPLAY_WAYLAND,
    DISPLAY_X11,
    INPUT_AUDIO,
    INPUT_BOTH,
    INPUT_SCREEN,
    PLATFORM_LINUX,
    PLATFORM_MACOS,
    PLATFORM_WINDOWS,
    PlatformContext,
    RecorderOptions,
)
from .platform_detect import SOFTWARE_VIDEO_CODEC
from .quality import QualityPlan

DSHOW_SCREEN_SOURCE = "video=screen-capture-recorder"
WAYLAND_HELPER_MESSAGE = (
    "Wayland capture requires wf-recorder. Please use an X11 session or install wf-recorder."
)

InputBuilder = Callable[[RecorderOptions, PlatformContext], list[str]]


def _macos_video(options: RecorderOptions, context: PlatformContext) -> list[str]:
    return ["-f", "avfoundation", "-i", f"{options.screen_id}:", "-r", str(options.fps)]


def _gdigrab_video(options: RecorderOptions, context: PlatformContext) -> list[str]:
    args = ["-f", "gdigrab", "-framerate", str(options.fps), "-i", "desktop"]
    if options.screen_id > 0:
        # Zero offsets only; gdigrab still grabs the whole virtual desktop.
        args += ["-offset_x", "0", "-offset_y", "0"]
    return args


def _dshow_video(options: RecorderOptions, context: PlatformContext) -> list[str]:
    return ["-f", "dshow", "-framerate", str(options.fps), "-i", DSHOW_SCREEN_SOURCE]


def _x11_video(options: RecorderOptions, context: PlatformContext) -> list[str]:
    source = context.display
    if options.screen_id > 0:
        source = f"{source}.{options.screen_id}"
    return ["-f", "x11grab", "-r", str(options.fps), "-i", source, "-show_region", "1"]


def _wayland_video(options: RecorderOptions, context: PlatformContext) -> list[str]:
    if not context.wayland_helper_available:
        raise UnsupportedEnvironmentError(WAYLAND_HELPER_MESSAGE)
    return ["-f", "kmsgrab", "-i", "-", "-r", str(options.fps)]


def _windows_video(options: RecorderOptions, context: PlatformContext) -> list[str]:
    builder = WINDOWS_VIDEO_BUILDERS.get(context.windows_capture_method, _gdigrab_video)
    return builder(options, context)


def _linux_video(options: RecorderOptions, context: PlatformContext) -> list[str]:
    builder = LINUX_VIDEO_BUILDERS.get(context.display_server, _x11_video)
    return builder(options, context)


def _macos_audio(options: RecorderOptions, context: PlatformContext) -> list[str]:
    return ["-f", "avfoundation", "-i", f":{options.audio_device or '0'}"]


def _windows_audio(options: RecorderOptions, context: PlatformContext) -> list[str]:
    if context.audio_backend == AUDIO_WASAPI:
        return ["-f", "wasapi", "-i", options.audio_device or "default"]
    return ["-f", "dshow", "-i", f"audio={options.audio_device or 'Stereo Mix'}"]


def _linux_audio(options: RecorderOptions, context: PlatformContext) -> list[str]:
    backend = context.audio_backend
    if backend not in {AUDIO_PULSE, AUDIO_ALSA, AUDIO_JACK}:
        backend = AUDIO_PULSE
    return ["-f", backend, "-i", options.audio_device or "default"]


def _macos_combined(options: RecorderOptions, context: PlatformContext) -> list[str]:
    return [
        "-f",
        "avfoundation",
        "-i",
        f"{options.screen_id}:{options.audio_device or '0'}",
        "-r",
        str(options.fps),
    ]


VIDEO_INPUT_BUILDERS: dict[str, InputBuilder] = {
    PLATFORM_MACOS: _macos_video,
    PLATFORM_WINDOWS: _windows_video,
    PLATFORM_LINUX: _linux_video,
}

WINDOWS_VIDEO_BUILDERS: dict[str, InputBuilder] = {
    CAPTURE_GDIGRAB: _gdigrab_video,
    CAPTURE_DSHOW: _dshow_video,
}

LINUX_VIDEO_BUILDERS: dict[str, InputBuilder] = {
    DISPLAY_X11: _x11_video,
    DISPLAY_WAYLAND: _wayland_video,
}

AUDIO_INPUT_BUILDERS: dict[str, InputBuilder] = {
    PLATFORM_MACOS: _macos_audio,
    PLATFORM_WINDOWS: _windows_audio,
    PLATFORM_LINUX: _linux_audio,
}

# Platforms where one input carries both streams. Everything else emits the
# video group and then the audio group.
COMBINED_INPUT_BUILDERS: dict[str, InputBuilder] = {
    PLATFORM_MACOS: _macos_combined,
}


def video_input_args(options: RecorderOptions, context: PlatformContext) -> list[str]:
    builder = VIDEO_INPUT_BUILDERS.get(context.platform)
    if builder is None:
        raise UnsupportedEnvironmentError(f"Unsupported platform for screen capture: {context.platform}")
    return builder(options, context)


def audio_input_args(options: RecorderOptions, context: PlatformContext) -> list[str]:
    builder = AUDIO_INPUT_BUILDERS.get(context.platform)
    if builder is None:
        raise UnsupportedEnvironmentError(f"Unsupported platform for audio capture: {context.platform}")
    return builder(options, context)


def combined_input_args(options: RecorderOptions, context: PlatformContext) -> list[str]:
    builder = COMBINED_INPUT_BUILDERS.get(context.platform)
    if builder is not None:
        return builder(options, context)
    return video_input_args(options, context) + audio_input_args(options, context)


def video_codec_args(options: RecorderOptions, context: PlatformContext, plan: QualityPlan) -> list[str]:
    codec = options.video_codec or context.hardware_encoder or SOFTWARE_VIDEO_CODEC
    return ["-c:v", codec, *plan.video_flags()]


def audio_codec_args(plan: QualityPlan) -> list[str]:
    return ["-c:a", plan.audio_codec, *plan.audio_flags()]


def build_ffmpeg_args(options: RecorderOptions, context: PlatformContext, plan: QualityPlan) -> list[str]:
    """Return the encoder argv (without the binary) for one recording.

    Order is fixed: ``-y``, the input section, the codec sections, then the
    output path. Raises UnsupportedEnvironmentError for platform or display
    stacks that have no capture path.
    """
    args = ["-y"]
    if options.input == INPUT_SCREEN:
        args += video_input_args(options, context)
        args += video_codec_args(options, context, plan)
    elif options.input == INPUT_AUDIO:
        args += audio_input_args(options, context)
        args += audio_codec_args(plan)
    elif options.input == INPUT_BOTH:
        args += combined_input_args(options, context)
        args += video_codec_args(options, context, plan)
        args += audio_codec_args(plan)
    else:
        raise UnsupportedEnvironmentError(f"Unsupported input mode: {options.input}")
    args.append(os.fspath(options.output))
    return args
