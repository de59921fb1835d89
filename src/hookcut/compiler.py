"""Edit-config compiler: one job's configuration to one engine program.

Combines the timing resolver and the effect, transition, overlay and
audio generators into a single filter graph and argument vector.

Chain order in the filter graph:
  1. hook video chain  (trim, normalise, effect, text)   -> [v0]
  2. demo video chain  (trim, normalise, effect)         -> [v1]
  3. audio chains, hook then demo                        -> [a0] [a1]
  4. video combine (xfade blend or concat)               -> [outv]
  5. audio combine, only when audio is included          -> [outa]

Compilation is pure: the same inputs always give the same program.
"""

from dataclasses import dataclass

from .audio import DEMO_INPUT, HOOK_INPUT, add_audio_combine, add_audio_sources
from .edit_config import EditConfig
from .effects import FRAME_H, FRAME_W, effect_filter
from .filtergraph import OUTPUT_AUDIO, OUTPUT_VIDEO, FilterGraph
from .overlays import text_overlay_filter
from .probe import ProbeResult
from .timing import CANONICAL_FPS, ResolvedTiming, resolve_timing
from .transitions import TransitionPlan, plan_transition


@dataclass(frozen=True)
class CompileOptions:
    """Encoder and font choices; see Settings for where they come from."""

    video_preset: str = "medium"
    video_crf: int = 23
    audio_bitrate: str = "128k"
    font_regular: str | None = None
    font_bold: str | None = None

    @classmethod
    def from_settings(cls, settings) -> "CompileOptions":
        return cls(
            video_preset=settings.video_preset,
            video_crf=settings.video_crf,
            audio_bitrate=settings.audio_bitrate,
            font_regular=settings.font_regular,
            font_bold=settings.font_bold,
        )


@dataclass(frozen=True)
class CompiledProgram:
    """Everything needed to run the engine for one job."""

    args: tuple[str, ...]
    filter_complex: str
    output_path: str
    has_audio: bool
    timing: ResolvedTiming
    transition: TransitionPlan | None
    expected_duration: float
    required_filters: tuple[str, ...] = ()

    def command(self, ffmpeg_exe: str) -> list[str]:
        return [ffmpeg_exe, *self.args]


def _normalize_filters(start: float, duration: float, trimmed: bool) -> list[str]:
    filters = []
    if trimmed:
        filters += [
            f"trim=start={start:.3f}:duration={duration:.3f}",
            "setpts=PTS-STARTPTS",
        ]
    filters += [
        f"scale={FRAME_W}:{FRAME_H}:force_original_aspect_ratio=decrease",
        f"pad={FRAME_W}:{FRAME_H}:(ow-iw)/2:(oh-ih)/2:black",
        "setsar=1",
        f"fps={CANONICAL_FPS}",
    ]
    return filters


def _add_video_chain(graph, index, start, duration, trimmed, effect, extra=""):
    filters = _normalize_filters(start, duration, trimmed)
    if effect:
        # zoompan does not carry the sample aspect ratio through.
        filters += [effect, "setsar=1"]
    if extra:
        filters.append(extra)
    pad = graph.new_pad("v")
    graph.add([graph.input_stream(index, "v")], filters, [pad])
    return pad


def compile_program(
    config: EditConfig,
    hook_path: str,
    demo_path: str,
    output_path: str,
    hook: ProbeResult,
    demo: ProbeResult,
    text: str | None = None,
    options: CompileOptions | None = None,
) -> CompiledProgram:
    """Compile an edit configuration into an engine argument vector.

    Args:
        config: Parsed edit configuration.
        hook_path / demo_path: Source clip paths (engine inputs 0 and 1).
        output_path: Output mp4 path.
        hook / demo: Probe results for the two clips.
        text: Optional overlay text drawn on the hook.
        options: Encoder/font options (defaults when None).

    Raises:
        InvalidTrimError: A trim resolves to a non-positive duration.
        GraphAssemblyError: Internal pad bookkeeping defect.
    """
    options = options or CompileOptions()
    timing = resolve_timing(config, hook.duration, demo.duration)
    graph = FilterGraph(input_count=2)

    hook_trimmed = config.hook_trim is not None and config.hook_trim.active
    demo_trimmed = config.demo_trim is not None and config.demo_trim.active

    overlay = text_overlay_filter(
        text, config.text_style, config.text_position, timing.hook_duration,
        font_regular=options.font_regular, font_bold=options.font_bold,
    )
    hook_pad = _add_video_chain(
        graph, HOOK_INPUT, timing.hook_start, timing.hook_duration, hook_trimmed,
        effect_filter(config.hook_effect, timing.hook_frames), overlay,
    )
    demo_pad = _add_video_chain(
        graph, DEMO_INPUT, timing.demo_start, timing.demo_duration, demo_trimmed,
        effect_filter(config.demo_effect, timing.demo_frames),
    )

    audio_pads = add_audio_sources(
        graph, config.audio_source, hook.has_audio, demo.has_audio, timing,
    )

    plan = plan_transition(config.transition, timing.hook_duration)
    if plan is not None:
        graph.add([hook_pad, demo_pad], [plan.to_filter()], [OUTPUT_VIDEO])
        expected = plan.output_duration(timing.demo_duration)
    else:
        graph.add([hook_pad, demo_pad], ["concat=n=2:v=1:a=0"], [OUTPUT_VIDEO])
        expected = timing.hook_duration + timing.demo_duration
    graph.map_output(OUTPUT_VIDEO)

    if audio_pads is not None:
        add_audio_combine(graph, audio_pads, config.audio_source, timing)
        graph.map_output(OUTPUT_AUDIO)

    filter_complex = graph.to_string()

    args = [
        "-y", "-hide_banner", "-nostdin",
        "-i", str(hook_path),
        "-i", str(demo_path),
        "-filter_complex", filter_complex,
    ]
    for pad in graph.mapped:
        args += ["-map", f"[{pad}]"]
    args += [
        "-c:v", "libx264",
        "-preset", options.video_preset,
        "-crf", str(options.video_crf),
        "-pix_fmt", "yuv420p",
        "-r", str(CANONICAL_FPS),
    ]
    if audio_pads is not None:
        args += ["-c:a", "aac", "-b:a", options.audio_bitrate, "-ar", "44100"]
    else:
        args += ["-an"]
    args += ["-movflags", "+faststart", str(output_path)]

    return CompiledProgram(
        args=tuple(args),
        filter_complex=filter_complex,
        output_path=str(output_path),
        has_audio=audio_pads is not None,
        timing=timing,
        transition=plan,
        expected_duration=expected,
        required_filters=("drawtext",) if overlay else (),
    )
