"""Responsibility: Unit tests for per-platform input groups and full ffmpeg argument ordering."""

import itertools
import unittest

from ffcapture.args import (
    DSHOW_SCREEN_SOURCE,
    audio_input_args,
    build_ffmpeg_args,
    combined_input_args,
    video_input_args,
)
from ffcapture.errors import UnsupportedEnvironmentError
from ffcapture.models import PlatformConfig, PlatformContext, RecorderOptions
from ffcapture.platform_detect import EnvironmentSnapshot, resolve_platform_context
from ffcapture.quality import resolve_quality_plan
from ffcapture.recorder import create_recorder


def _opts(**fields) -> RecorderOptions:
    fields.setdefault("input", "screen")
    fields.setdefault("output", "x.mp4")
    return RecorderOptions(**fields)


def _ctx(platform: str, **fields) -> PlatformContext:
    return PlatformContext(platform=platform, **fields)


class VideoInputCellTests(unittest.TestCase):
    def test_macos(self) -> None:
        self.assertEqual(
            video_input_args(_opts(screen_id=1, fps=24), _ctx("darwin")),
            ["-f", "avfoundation", "-i", "1:", "-r", "24"],
        )

    def test_gdigrab_primary_screen(self) -> None:
        self.assertEqual(
            video_input_args(_opts(), _ctx("win32", windows_capture_method="gdigrab")),
            ["-f", "gdigrab", "-framerate", "30", "-i", "desktop"],
        )

    def test_gdigrab_secondary_screen_adds_zero_offsets(self) -> None:
        self.assertEqual(
            video_input_args(_opts(screen_id=2), _ctx("win32", windows_capture_method="gdigrab")),
            ["-f", "gdigrab", "-framerate", "30", "-i", "desktop", "-offset_x", "0", "-offset_y", "0"],
        )

    def test_dshow_source_has_no_embedded_quotes(self) -> None:
        args = video_input_args(_opts(), _ctx("win32", windows_capture_method="dshow"))
        self.assertEqual(args, ["-f", "dshow", "-framerate", "30", "-i", "video=screen-capture-recorder"])
        self.assertNotIn('"', DSHOW_SCREEN_SOURCE)

    def test_x11_display_and_screen_suffix(self) -> None:
        self.assertEqual(
            video_input_args(_opts(), _ctx("linux", display_server="x11", display=":1")),
            ["-f", "x11grab", "-r", "30", "-i", ":1", "-show_region", "1"],
        )
        self.assertEqual(
            video_input_args(_opts(screen_id=1), _ctx("linux", display_server="x11")),
            ["-f", "x11grab", "-r", "30", "-i", ":0.0.1", "-show_region", "1"],
        )

    def test_wayland_without_helper_is_unsupported(self) -> None:
        with self.assertRaisesRegex(UnsupportedEnvironmentError, "wf-recorder"):
            video_input_args(_opts(), _ctx("linux", display_server="wayland"))

    def test_wayland_with_helper_uses_kmsgrab(self) -> None:
        self.assertEqual(
            video_input_args(_opts(fps=15), _ctx("linux", display_server="wayland", wayland_helper_available=True)),
            ["-f", "kmsgrab", "-i", "-", "-r", "15"],
        )

    def test_unknown_platform(self) -> None:
        with self.assertRaisesRegex(UnsupportedEnvironmentError, "Unsupported platform for screen capture: freebsd"):
            video_input_args(_opts(), _ctx("freebsd"))


class AudioInputCellTests(unittest.TestCase):
    def test_macos(self) -> None:
        self.assertEqual(audio_input_args(_opts(), _ctx("darwin")), ["-f", "avfoundation", "-i", ":0"])
        self.assertEqual(audio_input_args(_opts(audio_device="2"), _ctx("darwin")), ["-f", "avfoundation", "-i", ":2"])

    def test_windows_dshow_and_wasapi(self) -> None:
        self.assertEqual(
            audio_input_args(_opts(), _ctx("win32", audio_backend="dshow")),
            ["-f", "dshow", "-i", "audio=Stereo Mix"],
        )
        self.assertEqual(
            audio_input_args(_opts(audio_device="Microphone"), _ctx("win32", audio_backend="dshow")),
            ["-f", "dshow", "-i", "audio=Microphone"],
        )
        self.assertEqual(
            audio_input_args(_opts(), _ctx("win32", audio_backend="wasapi")),
            ["-f", "wasapi", "-i", "default"],
        )

    def test_linux_backends(self) -> None:
        for backend in ("pulse", "alsa", "jack"):
            with self.subTest(backend=backend):
                self.assertEqual(
                    audio_input_args(_opts(), _ctx("linux", audio_backend=backend)),
                    ["-f", backend, "-i", "default"],
                )
        self.assertEqual(
            audio_input_args(_opts(audio_device="hw:1"), _ctx("linux", audio_backend="alsa")),
            ["-f", "alsa", "-i", "hw:1"],
        )

    def test_linux_unknown_backend_uses_pulse(self) -> None:
        self.assertEqual(audio_input_args(_opts(), _ctx("linux")), ["-f", "pulse", "-i", "default"])

    def test_unknown_platform(self) -> None:
        with self.assertRaisesRegex(UnsupportedEnvironmentError, "Unsupported platform for audio capture: haiku"):
            audio_input_args(_opts(), _ctx("haiku"))


class CombinedInputTests(unittest.TestCase):
    def test_macos_single_input(self) -> None:
        self.assertEqual(
            combined_input_args(_opts(input="both", screen_id=1, audio_device="3"), _ctx("darwin")),
            ["-f", "avfoundation", "-i", "1:3", "-r", "30"],
        )

    def test_linux_emits_video_then_audio(self) -> None:
        args = combined_input_args(_opts(input="both"), _ctx("linux", display_server="x11", audio_backend="pulse"))
        self.assertEqual(
            args,
            ["-f", "x11grab", "-r", "30", "-i", ":0.0", "-show_region", "1", "-f", "pulse", "-i", "default"],
        )


class BuildArgsTests(unittest.TestCase):
    def _build(self, options: RecorderOptions, snapshot: EnvironmentSnapshot) -> list[str]:
        context = resolve_platform_context(options.platform_config, snapshot)
        return build_ffmpeg_args(options, context, resolve_quality_plan(options))

    def test_screen_on_x11_end_to_end(self) -> None:
        recorder = create_recorder(
            {"input": "screen", "output": "x.mp4"},
            environment=EnvironmentSnapshot(platform="linux", env={"DISPLAY": ":1"}, hwaccel_enabled=False),
        )
        self.assertEqual(
            recorder.build_args(),
            ["-y", "-f", "x11grab", "-r", "30", "-i", ":1", "-show_region", "1",
             "-c:v", "libx264", "-preset", "medium", "-crf", "23", "x.mp4"],
        )

    def test_hardware_hint_used_when_enabled(self) -> None:
        args = self._build(_opts(), EnvironmentSnapshot(platform="linux", env={"DISPLAY": ":1"}))
        self.assertEqual(args[args.index("-c:v") + 1], "h264_vaapi")

    def test_explicit_codec_still_gets_quality_flags(self) -> None:
        args = self._build(_opts(video_codec="libx265", crf=30), EnvironmentSnapshot(platform="darwin"))
        self.assertEqual(args[-7:], ["-c:v", "libx265", "-preset", "medium", "-crf", "30", "x.mp4"])

    def test_lossless_video_has_crf_and_qp_zero(self) -> None:
        args = self._build(_opts(video_quality="lossless"), EnvironmentSnapshot(platform="linux"))
        self.assertEqual(args[-5:], ["-crf", "0", "-qp", "0", "x.mp4"])

    def test_lossless_video_with_explicit_codec_has_crf_and_qp_zero(self) -> None:
        for codec in ("libx264", "libx265", "h264_nvenc"):
            with self.subTest(codec=codec):
                args = self._build(_opts(video_codec=codec, video_quality="lossless"), EnvironmentSnapshot(platform="darwin"))
                self.assertEqual(args[-9:], ["-c:v", codec, "-preset", "medium", "-crf", "0", "-qp", "0", "x.mp4"])

    def test_audio_only_on_windows(self) -> None:
        args = self._build(
            _opts(input="audio", output="a.m4a", audio_quality="high"),
            EnvironmentSnapshot(platform="win32"),
        )
        self.assertEqual(
            args,
            ["-y", "-f", "dshow", "-i", "audio=Stereo Mix", "-c:a", "aac", "-b:a", "256k",
             "-aac_coder", "twoloop", "a.m4a"],
        )

    def test_both_on_macos_orders_video_codec_before_audio_codec(self) -> None:
        args = self._build(
            _opts(input="both", output="b.mov", audio_quality="lossless"),
            EnvironmentSnapshot(platform="darwin"),
        )
        self.assertEqual(
            args,
            ["-y", "-f", "avfoundation", "-i", "0:0", "-r", "30",
             "-c:v", "h264_videotoolbox", "-preset", "medium", "-crf", "23",
             "-c:a", "flac", "-compression_level", "8", "b.mov"],
        )

    def test_overwrite_first_and_output_last_everywhere(self) -> None:
        snapshots = {
            "darwin": EnvironmentSnapshot(platform="darwin"),
            "win32": EnvironmentSnapshot(platform="win32"),
            "linux": EnvironmentSnapshot(platform="linux", env={"DISPLAY": ":0"}),
        }
        windows_methods = ("gdigrab", "dshow")
        for (platform, snapshot), mode, method in itertools.product(
            snapshots.items(), ("screen", "audio", "both"), windows_methods
        ):
            options = _opts(
                input=mode,
                output="/tmp/out file.mkv",
                platform_config=PlatformConfig(windows_capture_method=method),
            )
            with self.subTest(platform=platform, mode=mode, method=method):
                args = self._build(options, snapshot)
                self.assertEqual(args[0], "-y")
                self.assertEqual(args[-1], "/tmp/out file.mkv")
                self.assertEqual(args.count("-y"), 1)


if __name__ == "__main__":
    unittest.main()
