#!/usr/bin/env python3
"""Generate synthetic hook and demo clips for trying out hookcut.

Creates examples/sample-clips/hook.mp4 (landscape, 12s, with a tone)
and examples/sample-clips/demo.mp4 (portrait, 8s, silent). The
mismatched shapes exercise letterboxing; the silent demo exercises
generated silence under the "both" audio policy.

Usage:
    python examples/generate_sample_clips.py
    # Then render with the sample edit config:
    hookcut render --hook examples/sample-clips/hook.mp4 \
        --demo examples/sample-clips/demo.mp4 \
        --config examples/edit.yaml --text "Wait for it..." \
        --output examples/sample-renders/out.mp4
"""

import subprocess
from pathlib import Path

import imageio_ffmpeg

OUTPUT_DIR = Path(__file__).resolve().parent / "sample-clips"

# name, lavfi video source, duration, tone frequency (None = silent)
CLIPS = [
    ("hook", "testsrc2=s=1280x720:r=30", 12.0, 440),
    ("demo", "smptebars=s=720x1280:r=25", 8.0, None),
]


def _command(ffmpeg, source, duration, tone, out):
    cmd = [ffmpeg, "-y", "-f", "lavfi", "-i", f"{source}:d={duration}"]
    if tone is not None:
        cmd += ["-f", "lavfi", "-i", f"sine=frequency={tone}:duration={duration}"]
        cmd += ["-c:a", "aac", "-ac", "2", "-shortest"]
    else:
        cmd += ["-an"]
    cmd += ["-c:v", "libx264", "-pix_fmt", "yuv420p", str(out)]
    return cmd


def main():
    ffmpeg = imageio_ffmpeg.get_ffmpeg_exe()
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    for name, source, duration, tone in CLIPS:
        out = OUTPUT_DIR / f"{name}.mp4"
        if out.exists():
            print(f"  skip {name} (exists)")
            continue
        subprocess.run(_command(ffmpeg, source, duration, tone, out), check=True, capture_output=True)
        print(f"  wrote {name} ({duration}s, {'tone' if tone else 'silent'})")

    print(f"\nDone. {len(CLIPS)} clips in {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
