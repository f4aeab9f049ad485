"""Net-migration colouring.

The hue runs from 0 (red, strongly net outbound) to 120 (green, strongly net
inbound); a balanced region sits at 60. Cubing the in/out ratio pushes mildly
and strongly imbalanced regions further apart.

A region with no movement at all (0 in, 0 out) gets hue 0, the same colour as
a strongly net-outbound region. That ambiguity is kept on purpose until a
product decision says otherwise; see ``test_no_movement_reads_as_outbound``.
"""

from __future__ import annotations

HUE_MAX = 120.0
HUE_BALANCED = 60.0

SATURATION = 100
LIGHTNESS = 45


def hue(immigration: float, emigration: float) -> float:
    """Hue in [0, 120] for a pair of inbound/outbound counts.

    Zero emigration is treated as an outflow of one to avoid dividing by zero.
    """
    if immigration < 0 or emigration < 0:
        raise ValueError(f"Counts must be non-negative, got {immigration}/{emigration}")
    ratio = immigration / (1 if emigration == 0 else emigration)
    return min(HUE_MAX, HUE_BALANCED * ratio ** 3)


def hue_to_css(value: float) -> str:
    return f"hsl({value:.1f}, {SATURATION}%, {LIGHTNESS}%)"


def migration_color(immigration: float, emigration: float) -> str:
    """CSS colour string for a region's counts."""
    return hue_to_css(hue(immigration, emigration))
