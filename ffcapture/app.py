"""Responsibility: Command-line entrypoint for recording, previewing arguments, and probing the host."""

import argparse
import asyncio
import json
import shlex
import signal
import sys
from dataclasses import asdict
from typing import Any

from .encoder import FALLBACK_COMMAND, check_encoder_availability, resolve_encoder_path
from .errors import CaptureError, EncoderNotFoundError, OptionsValidationError
from .logging_utils import LOGGER
from .models import (
    AUDIO_BACKENDS,
    AUDIO_QUALITY_PRESETS,
    DEFAULT_FPS,
    DISPLAY_SERVERS,
    INPUT_MODES,
    QUALITY_LEVELS,
    VIDEO_QUALITY_PRESETS,
    WINDOWS_CAPTURE_METHODS,
)
from .platform_detect import detect_capture_methods, get_available_audio_devices, get_default_audio_device
from .quality import USE_CASES, get_quality_presets, get_recommended_quality
from .recorder import Recorder, create_recorder

RC_OK = 0
RC_FAILED = 1
RC_INVALID = 2

_OPTION_FLAGS = (
    "input",
    "output",
    "fps",
    "screen_id",
    "audio_device",
    "ffmpeg_path",
    "video_codec",
    "audio_codec",
    "quality",
    "video_quality",
    "audio_quality",
    "encoding_speed",
    "crf",
    "video_bitrate",
    "audio_bitrate",
)


def _add_recorder_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("output", help="Output file path")
    parser.add_argument("--input", default="screen", choices=INPUT_MODES, help="What to capture")
    parser.add_argument("--fps", type=int, default=DEFAULT_FPS)
    parser.add_argument("--screen-id", type=int, default=0)
    parser.add_argument("--audio-device")
    parser.add_argument("--ffmpeg-path")
    parser.add_argument("--video-codec")
    parser.add_argument("--audio-codec")
    parser.add_argument("--quality", choices=QUALITY_LEVELS, help="Legacy quality level")
    parser.add_argument("--video-quality", choices=VIDEO_QUALITY_PRESETS)
    parser.add_argument("--audio-quality", choices=AUDIO_QUALITY_PRESETS)
    parser.add_argument("--encoding-speed", choices=QUALITY_LEVELS)
    parser.add_argument("--crf", type=int)
    parser.add_argument("--video-bitrate")
    parser.add_argument("--audio-bitrate")
    parser.add_argument("--display-server", default="auto", choices=DISPLAY_SERVERS)
    parser.add_argument("--windows-capture-method", default="auto", choices=WINDOWS_CAPTURE_METHODS)
    parser.add_argument("--audio-backend", default="auto", choices=AUDIO_BACKENDS)
    parser.add_argument("--use-case", choices=USE_CASES, help="Apply a recommended quality bundle")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI options for one subcommand."""
    parser = argparse.ArgumentParser(prog="ffcapture", description="Screen and audio capture through ffmpeg")
    sub = parser.add_subparsers(dest="command", required=True)

    record = sub.add_parser("record", help="Record until --duration elapses or SIGINT")
    _add_recorder_options(record)
    record.add_argument("--duration", type=float, default=0.0, help="Seconds to record; 0 waits for a signal")

    preview = sub.add_parser("args", help="Print the ffmpeg command without running it")
    _add_recorder_options(preview)

    sub.add_parser("detect", help="Print detected capture methods as JSON")
    sub.add_parser("devices", help="Print default and known audio devices as JSON")
    sub.add_parser("presets", help="Print quality presets as JSON")

    recommend = sub.add_parser("recommend", help="Print the recommended quality for a use case")
    recommend.add_argument("use_case")

    check = sub.add_parser("check", help="Exit 0 when ffmpeg answers -version")
    check.add_argument("--ffmpeg-path")

    return parser.parse_args(argv)


def options_from_args(args: argparse.Namespace) -> dict[str, Any]:
    options = {name: getattr(args, name) for name in _OPTION_FLAGS}
    options["platform_config"] = {
        "display_server": args.display_server,
        "windows_capture_method": args.windows_capture_method,
        "preferred_audio_backend": args.audio_backend,
    }
    if args.use_case:
        recommendation = get_recommended_quality(args.use_case)
        options["video_quality"] = recommendation.video_quality
        options["audio_quality"] = recommendation.audio_quality
        options["encoding_speed"] = recommendation.encoding_speed
    return options


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


async def _record(recorder: Recorder, duration: float) -> int:
    stop_requested = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_requested.set)
        except (NotImplementedError, RuntimeError):
            LOGGER.debug("Signal handlers unavailable for sig=%s", sig)

    await recorder.start()
    print(f"Recording pid={recorder.pid} output={recorder.options.output}", file=sys.stderr)

    waiters = {asyncio.create_task(stop_requested.wait()), asyncio.create_task(recorder.wait())}
    if duration > 0:
        waiters.add(asyncio.create_task(asyncio.sleep(duration)))
    try:
        await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in waiters:
            task.cancel()

    if not recorder.is_recording:
        rc = recorder.returncode
        print(f"ffmpeg exited early rc={rc}", file=sys.stderr)
        return RC_OK if rc == 0 else RC_FAILED

    await recorder.stop()
    return RC_OK


def run_record(args: argparse.Namespace) -> int:
    recorder = create_recorder(options_from_args(args))
    return asyncio.run(_record(recorder, args.duration))


def run_args(args: argparse.Namespace) -> int:
    recorder = create_recorder(options_from_args(args))
    try:
        command = resolve_encoder_path(recorder.options.ffmpeg_path)
    except EncoderNotFoundError:
        command = FALLBACK_COMMAND
    print(shlex.join([command, *recorder.build_args()]))
    return RC_OK


def run_check(args: argparse.Namespace) -> int:
    available = asyncio.run(check_encoder_availability(args.ffmpeg_path))
    print("ffmpeg available" if available else "ffmpeg not available")
    return RC_OK if available else RC_FAILED


def main(argv: list[str] | None = None) -> int:
    """Program entrypoint: dispatch one subcommand and map errors to exit codes."""
    args = parse_args(argv)

    try:
        if args.command == "record":
            return run_record(args)
        if args.command == "args":
            return run_args(args)
        if args.command == "check":
            return run_check(args)
        if args.command == "detect":
            _print_json(asdict(detect_capture_methods()))
        elif args.command == "devices":
            _print_json({"default": get_default_audio_device(), "available": get_available_audio_devices()})
        elif args.command == "presets":
            _print_json(get_quality_presets())
        elif args.command == "recommend":
            _print_json(get_recommended_quality(args.use_case).as_dict())
        return RC_OK
    except OptionsValidationError as exc:
        print(f"Invalid options: {exc}", file=sys.stderr)
        return RC_INVALID
    except CaptureError as exc:
        LOGGER.error("Command failed command=%s err=%s", args.command, exc)
        print(f"Error: {exc}", file=sys.stderr)
        return RC_FAILED
