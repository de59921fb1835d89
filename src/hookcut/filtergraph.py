"""Filter graph builder with pad bookkeeping.

Pad names are allocated from per-prefix counters (v0, v1, a0, ...) and
every chain declares its input and output pads explicitly. Before the
graph is serialised it is checked so that each pad:

  - is produced by exactly one chain (or is an engine input stream),
  - is produced before any chain references it,
  - is consumed exactly once, by a later chain or an output map.

A violation raises GraphAssemblyError: it means a generator emitted a
dangling or duplicate reference, and is caught here rather than by the
engine at runtime.
"""

import re
from collections import Counter
from dataclasses import dataclass, field

from .errors import GraphAssemblyError

OUTPUT_VIDEO = "outv"
OUTPUT_AUDIO = "outa"

_INPUT_STREAM_RE = re.compile(r"^(\d+):([va])$")


@dataclass
class FilterChain:
    """One ';'-separated statement: [in]...filter,filter...[out]."""

    inputs: list[str]
    filters: list[str]
    outputs: list[str] = field(default_factory=list)

    def to_string(self) -> str:
        ins = "".join(f"[{p}]" for p in self.inputs)
        outs = "".join(f"[{p}]" for p in self.outputs)
        return f"{ins}{','.join(self.filters)}{outs}"


class FilterGraph:
    """Ordered collection of filter chains plus the final output maps."""

    def __init__(self, input_count: int):
        self.input_count = input_count
        self.chains: list[FilterChain] = []
        self.mapped: list[str] = []
        self._counters: Counter = Counter()

    def input_stream(self, index: int, media: str) -> str:
        """Label for an engine input stream, e.g. '0:v'."""
        if not 0 <= index < self.input_count:
            raise GraphAssemblyError(f"input #{index} does not exist ({self.input_count} inputs)")
        return f"{index}:{media}"

    def new_pad(self, prefix: str) -> str:
        """Allocate the next unused pad name for `prefix`."""
        name = f"{prefix}{self._counters[prefix]}"
        self._counters[prefix] += 1
        return name

    def add(self, inputs: list[str], filters: list[str], outputs: list[str]) -> FilterChain:
        filters = [f for f in filters if f]
        if not filters:
            raise GraphAssemblyError(f"empty filter chain {inputs} -> {outputs}")
        chain = FilterChain(list(inputs), filters, list(outputs))
        self.chains.append(chain)
        return chain

    def map_output(self, pad: str) -> None:
        self.mapped.append(pad)

    def validate(self) -> None:
        """Check single-producer/single-consumer and declaration order.

        Raises:
            GraphAssemblyError: On the first violation found.
        """
        produced = set()
        consumed: Counter = Counter()

        for i, chain in enumerate(self.chains):
            for pad in chain.inputs:
                if not _INPUT_STREAM_RE.match(pad) and pad not in produced:
                    raise GraphAssemblyError(
                        f"chain {i} references [{pad}] before it was declared"
                    )
                consumed[pad] += 1
                if consumed[pad] > 1:
                    raise GraphAssemblyError(f"pad [{pad}] is consumed more than once")
            for pad in chain.outputs:
                if pad in produced or _INPUT_STREAM_RE.match(pad):
                    raise GraphAssemblyError(f"pad [{pad}] is produced more than once")
                produced.add(pad)

        for pad in self.mapped:
            if pad not in produced:
                raise GraphAssemblyError(f"output map references undeclared pad [{pad}]")
            consumed[pad] += 1
            if consumed[pad] > 1:
                raise GraphAssemblyError(f"pad [{pad}] is consumed more than once")

        unused = sorted(pad for pad in produced if consumed[pad] == 0)
        if unused:
            raise GraphAssemblyError(f"declared pad(s) never used: {unused}")

    def to_string(self) -> str:
        """Validate and serialise as a -filter_complex value."""
        self.validate()
        return ";".join(chain.to_string() for chain in self.chains)
