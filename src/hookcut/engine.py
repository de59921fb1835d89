"""Engine invocation: run ffmpeg on a compiled program.

One blocking subprocess per job. The wall-clock timeout is the only
cancellation: when it expires the process is killed outright. On a
non-zero exit the diagnostic stream is reduced to a short message for
the job record.

Before a program that needs an optional filter (drawtext for hook text)
is run, the engine's filter list is checked, so a build without that
filter fails with a clear message instead of a graph parse error.
"""

import functools
import logging
import subprocess
from dataclasses import dataclass

from .errors import EngineError, EngineExecutionError, EngineStartError, EngineTimeoutError

logger = logging.getLogger(__name__)

DIAGNOSTIC_KEYWORDS = ("error", "invalid", "failed", "no such", "not found", "cannot", "unable")
# ffmpeg repeats the whole offending option value on these lines.
ECHO_PREFIXES = ("failed to set value",)
DIAGNOSTIC_LINES = 3
MAX_LINE_LENGTH = 160
MAX_MESSAGE_LENGTH = 500


@dataclass(frozen=True)
class EngineResult:
    success: bool
    error: str | None = None
    timed_out: bool = False


def _shorten(text: str, limit: int) -> str:
    if len(text) > limit:
        return text[:limit - 3] + "..."
    return text


def extract_diagnostic(stderr: str, returncode: int | None) -> str:
    """Summarise ffmpeg's stderr into a bounded one-line message.

    Prefers the last few lines mentioning an error keyword, ranking
    lines that merely echo an option value last; otherwise the last few
    non-empty lines; otherwise the exit code alone. Each line is capped
    before joining so one long line cannot crowd out the others.
    """
    lines = [line.strip() for line in (stderr or "").splitlines() if line.strip()]
    flagged = [line for line in lines if any(k in line.lower() for k in DIAGNOSTIC_KEYWORDS)]
    specific = [line for line in flagged if not line.lower().startswith(ECHO_PREFIXES)]
    chosen = specific[-DIAGNOSTIC_LINES:] or flagged[-DIAGNOSTIC_LINES:] or lines[-DIAGNOSTIC_LINES:]
    message = "; ".join(_shorten(line, MAX_LINE_LENGTH) for line in chosen)
    return _shorten(message or f"ffmpeg exited with code {returncode}", MAX_MESSAGE_LENGTH)


@functools.lru_cache(maxsize=None)
def available_filters(ffmpeg_exe: str) -> frozenset[str]:
    """Names of the filters compiled into `ffmpeg_exe` (from `-filters`).

    Raises:
        EngineStartError: The executable could not be run.
    """
    try:
        result = subprocess.run(
            [ffmpeg_exe, "-hide_banner", "-filters"],
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise EngineStartError(f"ffmpeg failed to start: {exc}") from exc

    names = set()
    for line in result.stdout.splitlines():
        # " T.C drawtext          V->V       Draw text on top of video frames..."
        parts = line.split()
        if len(parts) >= 3 and "->" in parts[2]:
            names.add(parts[1])
    return frozenset(names)


def check_filters(ffmpeg_exe: str, required) -> None:
    """Raise EngineStartError if `ffmpeg_exe` lacks any `required` filter."""
    missing = sorted(set(required) - available_filters(ffmpeg_exe))
    if missing:
        raise EngineStartError(
            f"ffmpeg at {ffmpeg_exe} has no {', '.join(missing)} filter; "
            "text overlays need an ffmpeg built with libfreetype "
            "(set HOOKCUT_FFMPEG to one)"
        )


def run_engine(command: list[str], timeout: float) -> None:
    """Run the engine to completion.

    Args:
        command: Full argument vector, executable first.
        timeout: Wall-clock budget in seconds.

    Raises:
        EngineStartError: The process could not be launched.
        EngineTimeoutError: The budget expired; the process was killed.
        EngineExecutionError: Non-zero exit, with the summarised diagnostic.
    """
    logger.debug("Running: %s", subprocess.list2cmdline(command))
    try:
        proc = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        raise EngineStartError(f"ffmpeg failed to start: {exc}") from exc

    try:
        _, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        proc.kill()
        proc.communicate()
        raise EngineTimeoutError(
            f"ffmpeg timed out after {timeout:g}s and was killed", timeout=timeout,
        )

    if proc.returncode != 0:
        raise EngineExecutionError(
            extract_diagnostic(stderr, proc.returncode),
            returncode=proc.returncode,
            stderr=stderr,
        )


def invoke_engine(program, settings) -> EngineResult:
    """Run a CompiledProgram and report the outcome as a result, never raising."""
    logger.info("   🎬 Running ffmpeg (expected %.1fs of output)...", program.expected_duration)
    try:
        if program.required_filters:
            check_filters(settings.ffmpeg_exe, program.required_filters)
        run_engine(program.command(settings.ffmpeg_exe), settings.engine_timeout)
    except EngineError as exc:
        logger.error("   ❌ %s", exc)
        return EngineResult(
            success=False,
            error=str(exc),
            timed_out=isinstance(exc, EngineTimeoutError),
        )
    logger.info("   ✓ ffmpeg completed successfully")
    return EngineResult(success=True)
