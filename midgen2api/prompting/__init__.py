"""Prompting package.

Deterministic, pure helpers that normalize OpenAI-style inputs into upstream
generation parameters: size-to-aspect-ratio resolution and inline directive
parsing. No I/O or model invocation happens here.
"""
