"""Inline prompt directive extraction for chat-driven generation.

Chat clients cannot send image parameters, so users embed them in free text
(`"a cat --ar 16:9"`). This module strips the recognized directive and
reports the resulting aspect ratio.

Recognized directives:
    - `--ar 16:9`
    - `--ar 9:16`

Only these two literals are understood; this is not a general flag grammar.

Matching rules:
    - Directives are checked in the order above; the first one present wins.
    - Exactly one occurrence of the winning directive is removed.
    - The remainder is stripped only when a directive was removed. Prompts
      without a directive are returned byte-identical.
    - An empty remainder is passed through; the upstream service decides.
"""

from dataclasses import dataclass

from midgen2api.prompting.aspect_ratio import LANDSCAPE, PORTRAIT, SQUARE


# Checked in order; first match wins.
DIRECTIVES = (
    ("--ar 16:9", LANDSCAPE),
    ("--ar 9:16", PORTRAIT),
)


@dataclass(frozen=True)
class ParsedPrompt:
    """Prompt text with directives removed plus the resolved aspect ratio."""

    clean_prompt: str
    aspect_ratio: str


def parse_directives(raw_prompt: str) -> ParsedPrompt:
    """Extract an aspect-ratio directive from a chat prompt.

    Args:
        raw_prompt: Content of the latest user message.

    Returns:
        `ParsedPrompt` with the cleaned prompt and aspect-ratio token
        (`"1:1"` when no directive is present).
    """
    for directive, aspect_ratio in DIRECTIVES:
        if directive in raw_prompt:
            clean_prompt = raw_prompt.replace(directive, "", 1).strip()
            return ParsedPrompt(clean_prompt=clean_prompt, aspect_ratio=aspect_ratio)

    return ParsedPrompt(clean_prompt=raw_prompt, aspect_ratio=SQUARE)
