"""Subcommand dispatcher for hookcut.

Usage:
    hookcut render  --hook hook.mp4 --demo demo.mp4 --output out.mp4 --config edit.yaml
    hookcut probe   clip.mp4 [clip2.mp4 ...]
    hookcut enqueue --user u1 --hook URL --demo URL --text "Wait for it"
    hookcut worker  [--settings settings.yaml] [--once]
"""

import argparse
import sys

COMMANDS = {
    "render": "Compile an edit config and render one video",
    "probe": "Print duration and audio presence of media files",
    "enqueue": "Add a pending job to the job database",
    "worker": "Poll the job database and render pending jobs",
}


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="hookcut",
        description="Config-driven hook + demo short-form video compositor.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    for name, help_text in COMMANDS.items():
        subparsers.add_parser(name, help=help_text, add_help=False)

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "render":
        from .render_cli import main as render_main
        render_main(remaining)
    elif parsed.command == "probe":
        from .probe_cli import main as probe_main
        probe_main(remaining)
    elif parsed.command == "enqueue":
        from .worker_cli import enqueue_main
        enqueue_main(remaining)
    elif parsed.command == "worker":
        from .worker_cli import main as worker_main
        worker_main(remaining)


if __name__ == "__main__":
    main()
