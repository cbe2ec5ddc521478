"""Smooth selection between left- and right-biased reconstructions.

The advecting velocity chooses the upwind reconstruction through a weight
that varies smoothly with the velocity instead of switching on its sign:

    w = (1 + v / sqrt(v**2 + width**2)) / 2
    blend = w * left + (1 - w) * right

For ``v >> width`` the blend is the left-biased value, for ``v << -width``
the right-biased one, and at ``v = 0`` their average. ``width`` is a
velocity scale and must be positive and finite.
"""

import math

from numba import vectorize

from ..errors import ConfigurationError


@vectorize(["float64(float64, float64, float64, float64)"], cache=True)
def biased_blend(velocity, left, right, width):
    """Blend ``left`` and ``right`` according to the sign and size of ``velocity``."""
    weight = 0.5 * (1.0 + velocity / math.sqrt(velocity * velocity + width * width))
    return weight * left + (1.0 - weight) * right


def upwind_biased_product(velocity, left, right, width):
    """Advecting velocity times the blended reconstruction."""
    return velocity * biased_blend(velocity, left, right, width)


def check_blend_width(width) -> float:
    """Validate a blend width, returning it as a float."""
    width = float(width)
    if not (math.isfinite(width) and width > 0):
        raise ConfigurationError(f"Blend width must be positive and finite, got {width}")
    return width
