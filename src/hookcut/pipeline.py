"""One job end to end: download, probe, compile, render, upload, clean up.

process_job never raises for job-level failures; every HookcutError is
returned as ProcessResult(success=False, error=...) so the worker can
persist the message verbatim.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from .compiler import CompileOptions, compile_program
from .edit_config import parse_edit_config
from .engine import invoke_engine
from .errors import HookcutError
from .jobs import JobStore, VideoJob
from .probe import probe_pair
from .storage import LocalBlobStore, download_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    success: bool
    output_url: str | None = None
    error: str | None = None


def job_paths(job: VideoJob, tmp_dir: Path) -> tuple[Path, Path, Path]:
    """Temp paths for (hook, demo, output) of one job."""
    return (
        tmp_dir / f"{job.id}-hook.mp4",
        tmp_dir / f"{job.id}-demo.mp4",
        tmp_dir / f"{job.id}-output.mp4",
    )


def cleanup(paths) -> None:
    """Remove temp files; failures are logged, never raised."""
    for path in paths:
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove %s: %s", path, exc)


def process_job(job: VideoJob, settings, store: JobStore, blobs: LocalBlobStore) -> ProcessResult:
    """Render one job and publish the output."""
    tmp_dir = Path(settings.tmp_dir)
    tmp_dir.mkdir(parents=True, exist_ok=True)
    hook_path, demo_path, output_path = job_paths(job, tmp_dir)

    try:
        config = parse_edit_config(job.edit_config)

        logger.info("   📥 Downloading source videos...")
        with ThreadPoolExecutor(max_workers=2) as pool:
            downloads = [
                pool.submit(download_file, job.hook_url, hook_path, settings.download_timeout),
                pool.submit(download_file, job.demo_url, demo_path, settings.download_timeout),
            ]
            for future in downloads:
                future.result()

        hook, demo = probe_pair(hook_path, demo_path)
        program = compile_program(
            config, str(hook_path), str(demo_path), str(output_path),
            hook, demo, text=job.hook_text,
            options=CompileOptions.from_settings(settings),
        )
        if job.hook_text:
            logger.info(
                '   📝 Text overlay: "%s" (0-%.1f seconds)',
                job.hook_text, program.timing.hook_duration,
            )

        result = invoke_engine(program, settings)
        if not result.success:
            return ProcessResult(success=False, error=result.error)

        if not output_path.exists():
            return ProcessResult(success=False, error="Output file was not created")

        storage_path = f"{job.user_id}/output/{job.id}.mp4"
        output_url = blobs.upload(output_path, storage_path)
        store.add_library_video(
            user_id=job.user_id,
            url=output_url,
            filename=f"hookcut-{job.id[:8]}.mp4",
            storage_path=storage_path,
        )
        return ProcessResult(success=True, output_url=output_url)
    except HookcutError as exc:
        return ProcessResult(success=False, error=str(exc))
    finally:
        cleanup([hook_path, demo_path, output_path])
