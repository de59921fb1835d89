"""CLIs for the job queue: enqueue a job, run the polling worker.

Usage:
    hookcut enqueue --user u1 --hook https://.../hook.mp4 \
        --demo https://.../demo.mp4 --text "Wait for it" --config edit.yaml

    hookcut worker --settings settings.yaml
    hookcut worker --once          # process at most one job, then exit
"""

import argparse

import yaml

from .edit_config import parse_edit_config
from .errors import ConfigError
from .jobs import JobStore
from .log import setup_logging
from .settings import load_settings
from .worker import Worker


def enqueue_main(args=None):
    parser = argparse.ArgumentParser(
        prog="hookcut enqueue",
        description="Add a pending render job to the job database.",
    )
    parser.add_argument("--user", required=True, help="Owner user id")
    parser.add_argument("--hook", required=True, help="Hook clip URL or path")
    parser.add_argument("--demo", required=True, help="Demo clip URL or path")
    parser.add_argument("--text", default=None, help="Overlay text for the hook")
    parser.add_argument("--config", default=None, help="Edit config YAML/JSON file")
    parser.add_argument("--settings", default=None, help="Settings YAML file")
    parsed = parser.parse_args(args)

    settings = load_settings(parsed.settings)

    edit_config = None
    if parsed.config:
        with open(parsed.config) as f:
            edit_config = yaml.safe_load(f)
        # Reject bad configs now rather than when the worker picks them up.
        try:
            parse_edit_config(edit_config)
        except ConfigError as exc:
            parser.error(f"Invalid edit config: {exc}")

    store = JobStore(settings.db_path)
    job = store.enqueue(
        parsed.user, parsed.hook, parsed.demo,
        hook_text=parsed.text, edit_config=edit_config,
    )
    print(f"Enqueued job {job.id} ({settings.db_path})")


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="hookcut worker",
        description="Poll the job database and render pending jobs.",
    )
    parser.add_argument("--settings", default=None, help="Settings YAML file")
    parser.add_argument(
        "--once", action="store_true",
        help="Process at most one pending job, then exit",
    )
    parsed = parser.parse_args(args)

    setup_logging()
    settings = load_settings(parsed.settings)
    worker = Worker(settings)

    if parsed.once:
        job = worker.poll_once()
        if job is None:
            print("No pending jobs.")
        else:
            print(f"Job {job.id}: {job.status}")
        return

    worker.install_signal_handlers()
    worker.run()


if __name__ == "__main__":
    main()
