"""Responsibility: Own one ffmpeg capture process from spawn to graceful (or forced) stop."""

from __future__ import annotations

import asyncio
import signal
import subprocess
import sys
from collections.abc import Callable, Mapping
from typing import Any

from .args import build_ffmpeg_args
from .config import LOG_STDERR_MAX, STOP_TIMEOUT_SECONDS
from .encoder import resolve_encoder_path
from .errors import (
    EncoderExitError,
    EncoderSpawnError,
    RecordingInProgressError,
    StopTimeoutError,
)
from .logging_utils import LOGGER
from .models import PLATFORM_WINDOWS, RecorderOptions
from .platform_detect import EnvironmentSnapshot, resolve_platform_context
from .quality import resolve_quality_plan
from .runtime.state_machine import (
    ACTION_CRASHED,
    ACTION_EXITED,
    ACTION_SPAWN_FAILED,
    ACTION_START,
    ACTION_STOP,
    ACTION_STOP_COMPLETE,
    ACTION_STOP_FAILED,
    RecorderState,
    RecorderStateMachine,
)
from .validation import validate_recorder_options

StderrListener = Callable[[str], None]

STDERR_CHUNK_SIZE = 4096
STDERR_DRAIN_GRACE_SECONDS = 1.0


def _clean_exit(returncode: int | None) -> bool:
    # Negative codes mean the process died from a signal and reported no code.
    return returncode is None or returncode <= 0


def _spawn_kwargs() -> dict[str, Any]:
    if sys.platform == PLATFORM_WINDOWS:
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {}


def _send_interrupt(proc: Any) -> None:
    if sys.platform == PLATFORM_WINDOWS:
        proc.send_signal(signal.CTRL_BREAK_EVENT)
    else:
        proc.send_signal(signal.SIGINT)


class Recorder:
    """A single capture session handle.

    ``start`` and ``stop`` are coroutines. The process object itself is never
    exposed; callers get read-only status (``state``, ``is_recording``,
    ``pid``, ``returncode``) and can subscribe to encoder stderr lines.
    """

    def __init__(
        self,
        options: RecorderOptions | Mapping[str, Any],
        environment: EnvironmentSnapshot | None = None,
    ) -> None:
        self._options = validate_recorder_options(options)
        self._environment = environment
        self._machine = RecorderStateMachine()
        self._listeners: list[StderrListener] = []
        self._returncode: int | None = None
        self._stderr_task: asyncio.Task | None = None
        self._exit_task: asyncio.Task | None = None
        self._reaper_task: asyncio.Task | None = None

    @property
    def options(self) -> RecorderOptions:
        return self._options

    @property
    def state(self) -> RecorderState:
        return self._machine.get_state()

    @property
    def is_recording(self) -> bool:
        return self._machine.is_running()

    @property
    def pid(self) -> int | None:
        proc = self._machine.get_handle()
        return proc.pid if proc is not None else None

    @property
    def returncode(self) -> int | None:
        return self._returncode

    def add_stderr_listener(self, listener: StderrListener) -> None:
        self._listeners.append(listener)

    def remove_stderr_listener(self, listener: StderrListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def build_args(self) -> list[str]:
        context = resolve_platform_context(self._options.platform_config, self._environment)
        plan = resolve_quality_plan(self._options)
        return build_ffmpeg_args(self._options, context, plan)

    async def start(self) -> None:
        result = self._machine.transition(ACTION_START)
        if not result.allowed:
            LOGGER.info("Recorder start rejected state=%s reason=%s", result.previous_state, result.reason)
            raise RecordingInProgressError("Recording is already in progress")

        try:
            args = self.build_args()
            command = resolve_encoder_path(self._options.ffmpeg_path)
        except Exception as exc:
            self._machine.transition(ACTION_SPAWN_FAILED)
            LOGGER.error("Recorder could not prepare encoder err=%s", exc)
            raise

        try:
            proc = await asyncio.create_subprocess_exec(
                command,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
                **_spawn_kwargs(),
            )
        except OSError as exc:
            self._machine.transition(ACTION_SPAWN_FAILED)
            LOGGER.error("Recorder spawn failed command=%s err=%s", command, exc)
            raise EncoderSpawnError(f"Failed to start FFmpeg: {exc}") from exc

        self._returncode = None
        self._machine.attach(proc)
        self._stderr_task = asyncio.create_task(self._drain_stderr(proc))
        self._exit_task = asyncio.create_task(self._watch_exit(proc))
        LOGGER.info("Recorder started pid=%s command=%s args=%s", proc.pid, command, args)

    async def stop(self) -> None:
        result = self._machine.transition(ACTION_STOP)
        if not result.changed:
            LOGGER.debug("Recorder stop ignored state=%s", result.previous_state)
            return

        proc = self._machine.get_handle()
        LOGGER.info("Recorder stopping pid=%s", proc.pid)
        try:
            _send_interrupt(proc)
        except ProcessLookupError:
            pass
        except OSError as exc:
            LOGGER.warning("Could not interrupt recorder pid=%s err=%s", proc.pid, exc)

        try:
            returncode = await asyncio.wait_for(proc.wait(), timeout=STOP_TIMEOUT_SECONDS)
        except asyncio.TimeoutError:
            LOGGER.warning(
                "Recorder still alive %.1fs after interrupt; killing pid=%s", STOP_TIMEOUT_SECONDS, proc.pid
            )
            try:
                proc.kill()
            except ProcessLookupError:
                pass
            self._machine.transition(ACTION_STOP_FAILED)
            self._reaper_task = asyncio.create_task(self._reap(proc))
            raise StopTimeoutError(STOP_TIMEOUT_SECONDS) from None

        self._returncode = returncode
        await self._finish_stderr()
        if _clean_exit(returncode):
            self._machine.detach(ACTION_STOP_COMPLETE, proc)
            LOGGER.info("Recorder stopped pid=%s rc=%s", proc.pid, returncode)
            return

        self._machine.detach(ACTION_STOP_FAILED, proc)
        LOGGER.warning("Recorder exited with error pid=%s rc=%s", proc.pid, returncode)
        raise EncoderExitError(returncode)

    async def wait(self) -> int | None:
        """Wait for the current process to exit and return its code."""
        task = self._exit_task
        if task is not None:
            await asyncio.shield(task)
        return self._returncode

    async def __aenter__(self) -> Recorder:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def _watch_exit(self, proc: Any) -> None:
        returncode = await proc.wait()
        self._returncode = returncode
        action = ACTION_EXITED if _clean_exit(returncode) else ACTION_CRASHED
        result = self._machine.detach(action, proc)
        if result.allowed:
            LOGGER.warning("Recorder exited without stop request pid=%s rc=%s", proc.pid, returncode)

    async def _reap(self, proc: Any) -> None:
        returncode = await proc.wait()
        self._returncode = returncode
        self._machine.release(proc)
        LOGGER.info("Recorder reaped after kill pid=%s rc=%s", proc.pid, returncode)

    async def _finish_stderr(self) -> None:
        task = self._stderr_task
        if task is None:
            return
        await asyncio.wait({task}, timeout=STDERR_DRAIN_GRACE_SECONDS)

    async def _drain_stderr(self, proc: Any) -> None:
        stream = proc.stderr
        if stream is None:
            return
        pending = b""
        while True:
            chunk = await stream.read(STDERR_CHUNK_SIZE)
            if not chunk:
                break
            # ffmpeg ends progress lines with a bare carriage return.
            pending += chunk.replace(b"\r", b"\n")
            *lines, pending = pending.split(b"\n")
            for line in lines:
                self._emit_stderr(line)
        self._emit_stderr(pending)

    def _emit_stderr(self, raw: bytes) -> None:
        text = raw.decode("utf-8", errors="replace").strip()
        if not text:
            return
        LOGGER.debug("ffmpeg: %s", text[:LOG_STDERR_MAX])
        for listener in list(self._listeners):
            try:
                listener(text)
            except Exception:
                LOGGER.exception("stderr listener failed")


def create_recorder(
    options: RecorderOptions | Mapping[str, Any],
    *,
    environment: EnvironmentSnapshot | None = None,
) -> Recorder:
    """Validate ``options`` and return an idle Recorder. Nothing is spawned."""
    return Recorder(options, environment=environment)
