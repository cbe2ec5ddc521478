"""Staggered-grid operators: metrics, differences, averages, masked derivatives."""

from .metrics import spacing, area, volume, spacing_product, area_product
from .difference import DIFFERENCES
from .interpolation import AVERAGES
from .derivatives import (
    DERIVATIVES,
    conditional_derivative,
    derivative,
    partial_derivative,
)
from .vorticity import circulation, vertical_vorticity, horizontal_divergence, divergence

__all__ = [
    "spacing",
    "area",
    "volume",
    "spacing_product",
    "area_product",
    "DIFFERENCES",
    "AVERAGES",
    "DERIVATIVES",
    "conditional_derivative",
    "derivative",
    "partial_derivative",
    "circulation",
    "vertical_vorticity",
    "horizontal_divergence",
    "divergence",
]
