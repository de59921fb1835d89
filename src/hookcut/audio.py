"""Audio plan: select, synthesise and combine the output soundtrack.

Audio policies:
  - hook: hook audio, padded with trailing silence to hook+demo length.
  - demo: demo audio, delayed by the hook duration. Not padded: if the
    demo's audio is shorter than its video, the soundtrack ends early.
  - both: hook audio then demo audio, concatenated in video order.
  - none: no audio chains and no audio output.

A side required by the policy but lacking an audio stream is replaced
by generated stereo silence of that side's effective duration, so the
combine step always has a pad to reference.
"""

from dataclasses import dataclass

from .edit_config import AudioSource
from .filtergraph import OUTPUT_AUDIO, FilterGraph
from .timing import ResolvedTiming

SAMPLE_RATE = 44100
AUDIO_FORMAT = f"aformat=sample_fmts=fltp:sample_rates={SAMPLE_RATE}:channel_layouts=stereo"
SILENCE_SOURCE = f"anullsrc=channel_layout=stereo:sample_rate={SAMPLE_RATE}"

HOOK_INPUT = 0
DEMO_INPUT = 1


@dataclass(frozen=True)
class AudioPads:
    """Per-side audio pads; None where the policy does not use that side."""

    hook: str | None
    demo: str | None


def needs_hook(policy: AudioSource) -> bool:
    return policy in (AudioSource.HOOK, AudioSource.BOTH)


def needs_demo(policy: AudioSource) -> bool:
    return policy in (AudioSource.DEMO, AudioSource.BOTH)


def _add_side(graph: FilterGraph, index: int, has_audio: bool, start: float, duration: float) -> str:
    pad = graph.new_pad("a")
    if has_audio:
        graph.add(
            [graph.input_stream(index, "a")],
            [
                f"atrim=start={start:.3f}:duration={duration:.3f}",
                "asetpts=PTS-STARTPTS",
                AUDIO_FORMAT,
            ],
            [pad],
        )
    else:
        graph.add(
            [],
            [SILENCE_SOURCE, f"atrim=duration={duration:.3f}", AUDIO_FORMAT],
            [pad],
        )
    return pad


def add_audio_sources(
    graph: FilterGraph,
    policy: AudioSource,
    hook_has_audio: bool,
    demo_has_audio: bool,
    timing: ResolvedTiming,
) -> AudioPads | None:
    """Add the per-side audio chains, hook first. None when policy is none."""
    if policy is AudioSource.NONE:
        return None
    hook_pad = demo_pad = None
    if needs_hook(policy):
        hook_pad = _add_side(graph, HOOK_INPUT, hook_has_audio, timing.hook_start, timing.hook_duration)
    if needs_demo(policy):
        demo_pad = _add_side(graph, DEMO_INPUT, demo_has_audio, timing.demo_start, timing.demo_duration)
    return AudioPads(hook=hook_pad, demo=demo_pad)


def add_audio_combine(
    graph: FilterGraph,
    pads: AudioPads,
    policy: AudioSource,
    timing: ResolvedTiming,
) -> str:
    """Add the combine chain and return the output audio pad."""
    if policy is AudioSource.HOOK:
        total = timing.hook_duration + timing.demo_duration
        graph.add([pads.hook], [f"apad=whole_dur={total:.3f}"], [OUTPUT_AUDIO])
    elif policy is AudioSource.DEMO:
        delay_ms = round(timing.hook_duration * 1000)
        graph.add([pads.demo], [f"adelay={delay_ms}|{delay_ms}"], [OUTPUT_AUDIO])
    else:
        graph.add([pads.hook, pads.demo], ["concat=n=2:v=0:a=1"], [OUTPUT_AUDIO])
    return OUTPUT_AUDIO
