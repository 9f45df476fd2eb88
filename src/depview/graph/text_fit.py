"""
Pixel-width text fitting.

Shortens a string so it renders within a width budget, marking the cut with
an ellipsis. Width is measured by a caller-supplied function so the same
algorithm serves any font or style.
"""

from enum import StrEnum
from typing import Callable

from ..config import ELLIPSIS, FALLBACK_TEXT_LENGTH

MeasureFn = Callable[[str], float]


class TruncateFrom(StrEnum):
    """Which end of the text gets cut."""
    END = "end"      # keep the head: "Player_Mat..."
    START = "start"  # keep the tail: ".../Materials/Player.mat"


def fit_text(
    text: str,
    max_width: float,
    measure: MeasureFn,
    direction: TruncateFrom = TruncateFrom.END,
    ellipsis: str = ELLIPSIS,
    fallback_length: int = FALLBACK_TEXT_LENGTH,
) -> str:
    """
    Fit `text` into `max_width` pixels.

    Text that already fits is returned unchanged. Otherwise the longest
    prefix (END) or suffix (START) that fits next to the ellipsis is found by
    binary search, which relies on `measure` never shrinking as text grows.

    Degenerate cases:
    - No room even for the ellipsis: the ellipsis alone.
    - Not a single character fits: ellipsis plus the last `fallback_length`
      characters, so the result is never empty.
    """
    if not text:
        return text

    if measure(text) <= max_width:
        return text

    target_width = max_width - measure(ellipsis)
    if target_width <= 0:
        return ellipsis

    best = _longest_fitting_length(text, target_width, measure, direction)

    if best == 0:
        return ellipsis + text[len(text) - min(fallback_length, len(text)):]

    if direction == TruncateFrom.START:
        return ellipsis + text[len(text) - best:]
    return text[:best] + ellipsis


def _longest_fitting_length(
    text: str,
    target_width: float,
    measure: MeasureFn,
    direction: TruncateFrom,
) -> int:
    left, right = 0, len(text)
    best = 0

    while left <= right:
        mid = (left + right) // 2
        candidate = text[len(text) - mid:] if direction == TruncateFrom.START else text[:mid]

        if measure(candidate) <= target_width:
            best = mid
            left = mid + 1
        else:
            right = mid - 1

    return best


def fixed_width_measure(char_width: float) -> MeasureFn:
    """Measure function for a monospaced font."""
    def measure(s: str) -> float:
        return len(s) * char_width
    return measure
