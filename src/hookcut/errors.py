"""hookcut exception hierarchy.

All errors raised by hookcut derive from HookcutError so the job worker
can catch one type and persist the message. Configuration problems also
derive from ValueError, matching how manifest loaders report bad input.
"""


class HookcutError(Exception):
    """Base exception for all hookcut errors."""


# ── Configuration ─────────────────────────────────────────────────

class ConfigError(HookcutError, ValueError):
    """Edit configuration or settings file is malformed."""


class InvalidTrimError(HookcutError, ValueError):
    """A trim window resolves to a non-positive duration."""


# ── Compilation ───────────────────────────────────────────────────

class GraphAssemblyError(HookcutError):
    """Filter graph violates the single-producer/single-consumer rule.

    Never expected at runtime: it means a generator emitted a dangling
    or duplicate pad reference.
    """


# ── Engine ────────────────────────────────────────────────────────

class EngineError(HookcutError):
    """The media engine did not produce an output."""


class EngineStartError(EngineError):
    """The engine process could not be launched."""


class EngineTimeoutError(EngineError):
    """The engine exceeded its wall-clock budget and was killed."""

    def __init__(self, message: str, timeout: float | None = None):
        super().__init__(message)
        self.timeout = timeout


class EngineExecutionError(EngineError):
    """The engine exited non-zero."""

    def __init__(self, message: str, returncode: int | None = None, stderr: str | None = None):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


# ── Storage ───────────────────────────────────────────────────────

class DownloadError(HookcutError):
    """A source clip could not be fetched."""


class UploadError(HookcutError):
    """The rendered output could not be stored."""
