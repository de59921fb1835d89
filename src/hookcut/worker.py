"""Polling job worker.

Claims one pending job at a time, renders it, and records the outcome
on the job row. A single in-flight flag keeps at most one job running;
polls that land while a job is running are skipped.
"""

import logging
import signal
import threading

from .jobs import JobStore, VideoJob
from .pipeline import ProcessResult, process_job
from .storage import LocalBlobStore

logger = logging.getLogger(__name__)


class Worker:
    def __init__(self, settings, store: JobStore | None = None, blobs: LocalBlobStore | None = None,
                 processor=process_job):
        self.settings = settings
        self.store = store or JobStore(settings.db_path)
        self.blobs = blobs or LocalBlobStore(settings.storage_dir, settings.public_base_url)
        self.processor = processor
        self.processing = False
        self._stop = threading.Event()

    def poll_once(self) -> VideoJob | None:
        """Claim and process at most one job. Returns the claimed job, if any."""
        if self.processing:
            return None

        job = self.store.claim_next()
        if job is None:
            return None

        logger.info("\n📦 Found job: %s", job.id)
        self.processing = True
        try:
            logger.info("⚙️  Processing job %s...", job.id)
            result: ProcessResult = self.processor(job, self.settings, self.store, self.blobs)
            if result.success and result.output_url:
                self.store.mark_done(job.id, result.output_url)
                logger.info("✅ Job %s completed successfully", job.id)
                logger.info("   Output: %s", result.output_url)
            else:
                self.store.mark_error(job.id, result.error or "Unknown error")
                logger.error("❌ Job %s failed: %s", job.id, result.error)
        except Exception as exc:
            self.store.mark_error(job.id, str(exc) or type(exc).__name__)
            logger.exception("❌ Job %s failed with exception", job.id)
        finally:
            self.processing = False
        return self.store.get(job.id)

    def stop(self, *_args) -> None:
        logger.info("\n🛑 Stop requested, shutting down...")
        self._stop.set()

    def install_signal_handlers(self) -> None:
        signal.signal(signal.SIGTERM, self.stop)
        signal.signal(signal.SIGINT, self.stop)

    def run(self) -> None:
        """Poll until stop() is called."""
        logger.info("🚀 hookcut worker starting...")
        logger.info("📊 Poll interval: %.1fs", self.settings.poll_interval)
        logger.info("👀 Watching for pending jobs...")
        while not self._stop.is_set():
            try:
                self.poll_once()
            except Exception:
                logger.exception("❌ Unexpected error in poll loop")
                self.processing = False
            self._stop.wait(self.settings.poll_interval)
