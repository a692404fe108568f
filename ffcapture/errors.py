"""Responsibility: Exception types raised by option validation, argument synthesis, and the recorder."""


class CaptureError(Exception):
    """Base class for every error this package raises on purpose."""


class OptionsValidationError(CaptureError, ValueError):
    """Caller-supplied options failed the boundary checks."""


class EncoderNotFoundError(CaptureError, RuntimeError):
    """No encoder binary path could be resolved."""


class EncoderSpawnError(CaptureError, RuntimeError):
    """The OS refused to launch the encoder process."""


class UnsupportedEnvironmentError(CaptureError, RuntimeError):
    """The host platform or display/audio stack cannot serve the requested capture."""


class RecordingInProgressError(CaptureError, RuntimeError):
    """start() was called while a recording is already live on the same recorder."""


class EncoderExitError(CaptureError, RuntimeError):
    """The encoder exited with a non-zero code while being stopped."""

    def __init__(self, returncode: int, message: str | None = None) -> None:
        self.returncode = returncode
        super().__init__(message or f"FFmpeg exited with code {returncode}")


class StopTimeoutError(CaptureError, RuntimeError):
    """The encoder ignored the interrupt request and had to be killed."""

    def __init__(self, timeout_seconds: float, message: str | None = None) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(message or "FFmpeg process did not terminate gracefully")
