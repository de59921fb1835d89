"""CLI for probing media files.

Usage:
    hookcut probe hook.mp4 demo.mp4
"""

import argparse

from .probe import probe_media


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="hookcut probe",
        description="Print duration and audio presence of media files.",
    )
    parser.add_argument("paths", nargs="+", help="Media files to probe")
    parsed = parser.parse_args(args)

    for path in parsed.paths:
        result = probe_media(path)
        audio = "audio" if result.has_audio else "no audio"
        print(f"{result.duration:8.2f}s  {audio:<8}  {path}")


if __name__ == "__main__":
    main()
