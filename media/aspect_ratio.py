"""Aspect ratio handling for Nano Banana.

The backends expose no width/height parameter. They size their output after
the last image in the request, so an aspect ratio is turned into pixel
dimensions here and later into a blank canvas of that size.
"""
import re
from dataclasses import dataclass
from typing import Dict, Optional

MAX_DIMENSION = 1024

_CUSTOM_RATIO = re.compile(r"^(\d+):(\d+)$")


@dataclass(frozen=True)
class AspectRatioConfig:
    """Target canvas size and its canonical name."""

    width: int
    height: int
    name: str


_SQUARE = AspectRatioConfig(1024, 1024, "square")
_LANDSCAPE = AspectRatioConfig(1024, 576, "landscape")
_PORTRAIT = AspectRatioConfig(576, 1024, "portrait")
_WIDESCREEN = AspectRatioConfig(1024, 640, "widescreen")
_ULTRAWIDE = AspectRatioConfig(1024, 439, "ultrawide")
_PANORAMIC = AspectRatioConfig(1024, 512, "panoramic")

ASPECT_RATIOS: Dict[str, AspectRatioConfig] = {
    "1:1": _SQUARE,
    "square": _SQUARE,
    "16:9": _LANDSCAPE,
    "landscape": _LANDSCAPE,
    "9:16": _PORTRAIT,
    "portrait": _PORTRAIT,
    "4:3": AspectRatioConfig(1024, 768, "4:3"),
    "3:4": AspectRatioConfig(768, 1024, "3:4"),
    "16:10": _WIDESCREEN,
    "widescreen": _WIDESCREEN,
    "21:9": _ULTRAWIDE,
    "ultrawide": _ULTRAWIDE,
    "2:1": _PANORAMIC,
    "panoramic": _PANORAMIC,
}

ASPECT_RATIO_DESCRIPTIONS: Dict[str, str] = {
    "square": "square format (1:1 aspect ratio)",
    "landscape": "landscape orientation (16:9 aspect ratio)",
    "portrait": "portrait orientation (9:16 aspect ratio)",
    "widescreen": "widescreen format (16:10 aspect ratio)",
    "ultrawide": "ultrawide format (21:9 aspect ratio)",
    "panoramic": "panoramic format (2:1 aspect ratio)",
}


def _scale_half_up(short: int, long: int) -> int:
    """``MAX_DIMENSION * short / long`` rounded half up, in integer arithmetic."""
    return (2 * MAX_DIMENSION * short + long) // (2 * long)


def parse_aspect_ratio(ratio: Optional[str]) -> Optional[AspectRatioConfig]:
    """
    Resolve an aspect ratio token to target dimensions.

    Named tokens and the common ratios come from ``ASPECT_RATIOS``
    (case-insensitive). Any other ``W:H`` token pins its larger side to 1024
    pixels. Anything else, including ratios with a zero side and ratios so
    extreme the short side rounds to zero pixels, means no aspect control
    and returns None.
    """
    if not ratio:
        return None

    normalized = ratio.strip().lower()
    if normalized in ASPECT_RATIOS:
        return ASPECT_RATIOS[normalized]

    match = _CUSTOM_RATIO.match(normalized)
    if not match:
        return None

    try:
        width_part = int(match.group(1))
        height_part = int(match.group(2))
    except ValueError:
        # Longer than the interpreter's int conversion limit
        return None

    if width_part == 0 or height_part == 0:
        return None

    long_side = max(width_part, height_part)
    short_side = _scale_half_up(min(width_part, height_part), long_side)
    if short_side == 0:
        return None

    if width_part >= height_part:
        return AspectRatioConfig(MAX_DIMENSION, short_side, normalized)
    return AspectRatioConfig(short_side, MAX_DIMENSION, normalized)


def describe_aspect_ratio(config: AspectRatioConfig) -> str:
    """Phrase used in prompts to name the target canvas."""
    return ASPECT_RATIO_DESCRIPTIONS.get(
        config.name, f"{config.width}x{config.height} aspect ratio"
    )
