"""CLI for rendering one hook + demo video from an edit config.

Probes both clips, compiles the edit config into an ffmpeg filter
graph, and runs ffmpeg (or prints the command with --dry-run).

Usage:
    hookcut render --hook hook.mp4 --demo demo.mp4 \
        --config edit.yaml --text "Wait for it..." --output out.mp4

    # Inspect the compiled command without rendering
    hookcut render --hook hook.mp4 --demo demo.mp4 --output out.mp4 --dry-run
"""

import argparse
import subprocess
import sys
from pathlib import Path

from .compiler import CompileOptions, compile_program
from .edit_config import load_edit_config, parse_edit_config
from .engine import invoke_engine
from .errors import HookcutError
from .log import setup_logging
from .probe import probe_pair
from .settings import load_settings


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="hookcut render",
        description="Render a hook + demo short-form video from an edit config.",
    )
    parser.add_argument("--hook", required=True, help="Path to the hook (lead-in) clip")
    parser.add_argument("--demo", required=True, help="Path to the demo (main) clip")
    parser.add_argument("--output", required=True, help="Output mp4 path")
    parser.add_argument("--config", default=None, help="Edit config YAML/JSON file")
    parser.add_argument("--text", default=None, help="Overlay text drawn on the hook")
    parser.add_argument("--settings", default=None, help="Settings YAML file")
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print the compiled ffmpeg command instead of running it",
    )
    parsed = parser.parse_args(args)

    setup_logging()

    for path in (parsed.hook, parsed.demo):
        if not Path(path).exists():
            parser.error(f"Input not found: {path}")

    try:
        settings = load_settings(parsed.settings)
        config = load_edit_config(parsed.config) if parsed.config else parse_edit_config(None)

        hook, demo = probe_pair(parsed.hook, parsed.demo)
        print(f"Hook: {hook.duration:.2f}s ({'audio' if hook.has_audio else 'no audio'})  {parsed.hook}")
        print(f"Demo: {demo.duration:.2f}s ({'audio' if demo.has_audio else 'no audio'})  {parsed.demo}")

        program = compile_program(
            config, parsed.hook, parsed.demo, parsed.output, hook, demo,
            text=parsed.text, options=CompileOptions.from_settings(settings),
        )
    except HookcutError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Expected duration: ~{program.expected_duration:.1f}s")

    if parsed.dry_run:
        print(subprocess.list2cmdline(program.command(settings.ffmpeg_exe)))
        return

    Path(parsed.output).parent.mkdir(parents=True, exist_ok=True)
    print(f"Writing to: {parsed.output}")
    result = invoke_engine(program, settings)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        sys.exit(1)
    print(f"\nDone: {parsed.output}")


if __name__ == "__main__":
    main()
