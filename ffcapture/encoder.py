"""Responsibility: Locate the ffmpeg binary and check whether it answers."""

import asyncio
import os

import imageio_ffmpeg

from .config import FFMPEG_PATH_OVERRIDE, VERSION_CHECK_TIMEOUT_SECONDS
from .errors import EncoderNotFoundError
from .logging_utils import LOGGER

ENCODER_NOT_FOUND_MESSAGE = (
    "FFmpeg path not found. Please install imageio-ffmpeg, set FFCAPTURE_FFMPEG_PATH, or provide a custom path."
)
FALLBACK_COMMAND = "ffmpeg"


def bundled_ffmpeg_path() -> str | None:
    try:
        return imageio_ffmpeg.get_ffmpeg_exe()
    except RuntimeError as exc:
        LOGGER.debug("No bundled ffmpeg available err=%s", exc)
        return None


def resolve_encoder_path(custom_path: str | os.PathLike | None = None) -> str:
    """Explicit path, then FFCAPTURE_FFMPEG_PATH, then the imageio-ffmpeg binary."""
    if custom_path:
        return os.fspath(custom_path)
    if FFMPEG_PATH_OVERRIDE:
        return FFMPEG_PATH_OVERRIDE
    bundled = bundled_ffmpeg_path()
    if bundled:
        return bundled
    raise EncoderNotFoundError(ENCODER_NOT_FOUND_MESSAGE)


async def check_encoder_availability(
    custom_path: str | os.PathLike | None = None,
    timeout: float = VERSION_CHECK_TIMEOUT_SECONDS,
) -> bool:
    """Run ``<ffmpeg> -version``; True only on a clean zero exit. Never raises."""
    try:
        command = resolve_encoder_path(custom_path)
    except EncoderNotFoundError:
        command = FALLBACK_COMMAND

    try:
        proc = await asyncio.create_subprocess_exec(
            command,
            "-version",
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except OSError as exc:
        LOGGER.info("Encoder version check failed to spawn command=%s err=%s", command, exc)
        return False

    try:
        returncode = await asyncio.wait_for(proc.wait(), timeout=timeout)
    except asyncio.TimeoutError:
        LOGGER.warning("Encoder version check timed out command=%s timeout=%.1fs", command, timeout)
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()
        return False

    LOGGER.info("Encoder version check command=%s rc=%s", command, returncode)
    return returncode == 0
