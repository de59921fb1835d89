"""Tests for the SQLite job store."""

import json
import sqlite3

import pytest

from hookcut.jobs import STATUSES, JobStore


@pytest.fixture
def store(tmp_path):
    return JobStore(tmp_path / "db" / "jobs.sqlite3")


class TestEnqueue:
    """Test adding jobs."""

    def test_new_job_is_pending(self, store):
        job = store.enqueue("u1", "https://x/hook.mp4", "https://x/demo.mp4", hook_text="Wait")
        assert job.status == "pending"
        assert job.user_id == "u1"
        assert job.hook_text == "Wait"
        assert job.output_url is None

    def test_dict_config_stored_as_json(self, store):
        job = store.enqueue("u1", "h", "d", edit_config={"audio_source": "hook"})
        assert json.loads(job.edit_config) == {"audio_source": "hook"}

    def test_get_unknown(self, store):
        assert store.get("missing") is None


class TestClaimNext:
    """Test claiming the oldest pending job."""

    def test_oldest_first(self, store):
        first = store.enqueue("u1", "h1", "d1")
        second = store.enqueue("u1", "h2", "d2")

        claimed = store.claim_next()
        assert claimed.id == first.id
        assert claimed.status == "processing"
        assert store.claim_next().id == second.id
        assert store.claim_next() is None

    def test_empty_queue(self, store):
        assert store.claim_next() is None

    def test_finished_jobs_not_claimed(self, store):
        job = store.enqueue("u1", "h", "d")
        store.mark_error(job.id, "boom")
        assert store.claim_next() is None


class TestOutcomes:
    """Test recording job results."""

    def test_mark_done(self, store):
        job = store.enqueue("u1", "h", "d")
        store.mark_done(job.id, "https://cdn/x.mp4")
        done = store.get(job.id)
        assert done.status == "done"
        assert done.output_url == "https://cdn/x.mp4"

    def test_mark_error_keeps_message(self, store):
        job = store.enqueue("u1", "h", "d")
        store.mark_error(job.id, "Invalid argument; Conversion failed!")
        failed = store.get(job.id)
        assert failed.status == "error"
        assert failed.error_message == "Invalid argument; Conversion failed!"

    def test_library_videos_per_user(self, store):
        store.add_library_video("u1", "https://cdn/a.mp4", "hookcut-aaaa.mp4", "u1/output/a.mp4")
        store.add_library_video("u2", "https://cdn/b.mp4", "hookcut-bbbb.mp4", "u2/output/b.mp4")
        videos = store.list_videos("u1")
        assert len(videos) == 1
        assert videos[0]["filename"] == "hookcut-aaaa.mp4"
        assert videos[0]["type"] == "output"


class TestSchema:
    """Status column only accepts known job states."""

    def test_unknown_status_rejected(self, store):
        job = store.enqueue("u1", "h", "d")
        with pytest.raises(sqlite3.IntegrityError):
            store._update(job.id, status="bogus")
        assert store.get(job.id).status == "pending"

    @pytest.mark.parametrize("status", STATUSES)
    def test_known_statuses_accepted(self, store, status):
        job = store.enqueue("u1", "h", "d")
        store._update(job.id, status=status)
        assert store.get(job.id).status == status
