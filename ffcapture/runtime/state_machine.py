from __future__ import annotations

from dataclasses import dataclass
from threading import Lock
from typing import Any

RecorderState = str

STATE_IDLE: RecorderState = "idle"
STATE_STARTING: RecorderState = "starting"
STATE_RUNNING: RecorderState = "running"
STATE_STOPPING: RecorderState = "stopping"
STATE_FAILED: RecorderState = "failed"

ACTION_START = "start"
ACTION_SPAWN_SUCCEEDED = "spawn-succeeded"
ACTION_SPAWN_FAILED = "spawn-failed"
ACTION_STOP = "stop"
ACTION_STOP_COMPLETE = "stop-complete"
ACTION_STOP_FAILED = "stop-failed"
ACTION_EXITED = "exited"
ACTION_CRASHED = "crashed"


@dataclass(frozen=True)
class TransitionResult:
    allowed: bool
    action: str
    previous_state: RecorderState
    next_state: RecorderState
    reason: str | None = None

    @property
    def changed(self) -> bool:
        return self.allowed and self.previous_state != self.next_state


class RecorderStateMachine:
    """Lifecycle state plus the single process handle it governs.

    The state and the handle change together under one lock, so a recorder
    can never hold a handle while idle or report running without one.
    """

    def __init__(self) -> None:
        self._state: RecorderState = STATE_IDLE
        self._handle: Any = None
        self._lock = Lock()

    def get_state(self) -> RecorderState:
        with self._lock:
            return self._state

    def get_handle(self) -> Any:
        with self._lock:
            return self._handle

    def is_running(self) -> bool:
        with self._lock:
            return self._state == STATE_RUNNING and self._handle is not None

    def transition(self, action: str) -> TransitionResult:
        with self._lock:
            return self._apply(action)

    def attach(self, handle: Any) -> TransitionResult:
        """Store ``handle`` and move Starting to Running in one step."""
        with self._lock:
            result = self._apply(ACTION_SPAWN_SUCCEEDED)
            if result.allowed:
                self._handle = handle
            return result

    def detach(self, action: str, handle: Any = None) -> TransitionResult:
        """Apply ``action`` and drop the handle if the transition is allowed.

        When ``handle`` is given the handle is only dropped if it is still the
        one stored, so a late watcher cannot clear a newer session.
        """
        with self._lock:
            if handle is not None and self._handle is not handle:
                return TransitionResult(False, action, self._state, self._state, "stale_handle")
            result = self._apply(action)
            if result.allowed:
                self._handle = None
            return result

    def release(self, handle: Any) -> bool:
        """Drop ``handle`` without a state change; used once a killed process is reaped."""
        with self._lock:
            if self._handle is not handle:
                return False
            self._handle = None
            return True

    def _apply(self, action: str) -> TransitionResult:
        previous = self._state
        if action == ACTION_START and self._handle is not None:
            allowed, next_state, reason = False, previous, "runtime_busy"
        else:
            allowed, next_state, reason = _resolve_transition(previous, action)
        if allowed:
            self._state = next_state
        else:
            next_state = previous
        return TransitionResult(
            allowed=allowed,
            action=action,
            previous_state=previous,
            next_state=next_state,
            reason=reason,
        )


def _resolve_transition(state: RecorderState, action: str) -> tuple[bool, RecorderState, str | None]:
    if action == ACTION_START:
        if state in {STATE_IDLE, STATE_FAILED}:
            return True, STATE_STARTING, None
        return False, state, "runtime_busy"

    if action in {ACTION_SPAWN_SUCCEEDED, ACTION_SPAWN_FAILED}:
        if state == STATE_STARTING:
            return True, STATE_RUNNING if action == ACTION_SPAWN_SUCCEEDED else STATE_FAILED, None
        return False, state, "invalid_transition"

    if action == ACTION_STOP:
        if state == STATE_RUNNING:
            return True, STATE_STOPPING, None
        if state in {STATE_IDLE, STATE_FAILED}:
            return True, state, None
        return False, state, "invalid_transition"

    if action in {ACTION_STOP_COMPLETE, ACTION_STOP_FAILED}:
        if state == STATE_STOPPING:
            return True, STATE_IDLE if action == ACTION_STOP_COMPLETE else STATE_FAILED, None
        return False, state, "invalid_transition"

    if action in {ACTION_EXITED, ACTION_CRASHED}:
        if state == STATE_RUNNING:
            return True, STATE_IDLE if action == ACTION_EXITED else STATE_FAILED, None
        return False, state, "invalid_transition"

    return False, state, "unknown_action"
