"""OpenAI `size` to upstream aspect-ratio token mapping.

The upstream service only understands a small set of aspect-ratio tokens, so
arbitrary OpenAI `WIDTHxHEIGHT` sizes are collapsed onto landscape, portrait,
or square.

Design constraints:
    - Total over all text inputs; never raises.
    - No I/O, no global state.
"""

SQUARE = "1:1"
LANDSCAPE = "16:9"
PORTRAIT = "9:16"

# Canonical OpenAI DALL-E 3 sizes.
KNOWN_SIZES = {
    "1024x1024": SQUARE,
    "1024x1792": PORTRAIT,
    "1792x1024": LANDSCAPE,
}


def _parse_size(size: str) -> tuple[int, int] | None:
    parts = size.split("x")
    if len(parts) != 2:
        return None
    # Plain ASCII digits only; int() would also accept "+5", "2_000" and padding.
    if not all(part.isascii() and part.isdigit() for part in parts):
        return None
    width, height = int(parts[0]), int(parts[1])
    if width <= 0 or height <= 0:
        return None
    return width, height


def resolve_aspect_ratio(size: str | None) -> str:
    """Map an OpenAI `size` string to an upstream aspect-ratio token.

    Args:
        size: Value of the request `size` field, possibly `None` or empty.

    Returns:
        One of `"1:1"`, `"16:9"`, `"9:16"`.

    Evaluation order:
        1. Absent/empty -> `"1:1"`.
        2. Exact canonical sizes from `KNOWN_SIZES`.
        3. `WxH` with two positive integers, classified by comparison.
        4. Anything unparseable -> `"1:1"`.
    """
    if not size:
        return SQUARE

    if size in KNOWN_SIZES:
        return KNOWN_SIZES[size]

    parsed = _parse_size(size)
    if parsed is None:
        return SQUARE

    width, height = parsed
    if width > height:
        return LANDSCAPE
    if height > width:
        return PORTRAIT
    return SQUARE
