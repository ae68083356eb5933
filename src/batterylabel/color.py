"""
ARGB color helpers.

Colors are plain integers in 0xAARRGGBB layout, the format the settings store
keeps them in. Values coming from a signed 32-bit source (e.g. -1 for opaque
white) are folded into the unsigned range by normalize_color().
"""

from typing import Tuple

COLOR_MASK = 0xFFFFFFFF

WHITE = 0xFFFFFFFF
BLACK = 0xFF000000


def normalize_color(color: int) -> int:
    """Fold any integer into the 32-bit unsigned ARGB range."""
    return int(color) & COLOR_MASK


def split_argb(color: int) -> Tuple[int, int, int, int]:
    """Split a color into (alpha, red, green, blue) channels."""
    color = normalize_color(color)
    return (
        (color >> 24) & 0xFF,
        (color >> 16) & 0xFF,
        (color >> 8) & 0xFF,
        color & 0xFF,
    )


def join_argb(alpha: int, red: int, green: int, blue: int) -> int:
    """Build a color from (alpha, red, green, blue) channels, clamping each to 0-255."""
    channels = [max(0, min(255, int(c))) for c in (alpha, red, green, blue)]
    return (channels[0] << 24) | (channels[1] << 16) | (channels[2] << 8) | channels[3]


def blend_color(from_color: int, to_color: int, ratio: float) -> int:
    """Interpolate between two colors.

    Each channel, alpha included, is interpolated linearly and rounded.

    Args:
        from_color: Color at ratio 0.
        to_color: Color at ratio 1.
        ratio: Position between the two colors, clamped to [0, 1].

    Returns:
        The blended ARGB color.
    """
    ratio = max(0.0, min(1.0, float(ratio)))
    inverse = 1.0 - ratio
    start = split_argb(from_color)
    end = split_argb(to_color)
    return join_argb(*(round(s * inverse + e * ratio) for s, e in zip(start, end)))


def to_rgba(color: int) -> Tuple[int, int, int, int]:
    """Convert an ARGB color into the (r, g, b, a) tuple Pillow draws with."""
    alpha, red, green, blue = split_argb(color)
    return (red, green, blue, alpha)


def parse_color(text: str) -> int:
    """Parse a color from config or command line text.

    Accepted forms: "0xAARRGGBB", "#AARRGGBB", "#RRGGBB" (opaque) and
    decimal integers (signed values allowed).

    Raises:
        ValueError: If the text is not a color.
    """
    value = text.strip()
    if value.startswith("#"):
        digits = value[1:]
        if len(digits) == 6:
            return normalize_color(0xFF000000 | int(digits, 16))
        if len(digits) == 8:
            return normalize_color(int(digits, 16))
        raise ValueError(f"Invalid color: {text!r}")
    return normalize_color(int(value, 0))


def format_color(color: int) -> str:
    """Format a color the way it is written to the settings file."""
    return f"0x{normalize_color(color):08x}"
