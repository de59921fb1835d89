"""hookcut: config-driven hook + demo short-form video compositor.

Compiles a declarative edit configuration (trims, camera effects,
transition, text overlay, audio policy) and two probed clips into a
single ffmpeg filter graph, runs it, and drives a polling job worker
around that compiler.
"""
