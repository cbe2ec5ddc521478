"""Metric operators: spacings, face areas and volumes at staggered locations.

All operators take the node index first and the grid next, ``op(i, j, k, grid)``.
The ``*_product`` factories build operators ``q(i, j, k, grid, f, *args)``
returning a metric times ``f(i, j, k, grid, *args)``, which is how fluxes such
as ``Δy * v`` are fed to difference operators.
"""

from ..grids.locations import Axis


def _along(axis, i, j, k):
    return (i, j, k)[axis]


def spacing(axis, loc, i, j, k, grid):
    """Grid spacing along ``axis`` at the node ``(i, j, k)`` located at ``loc``."""
    return grid.spacing(axis, loc.along(axis), _along(axis, i, j, k))


def area(axis, loc, i, j, k, grid):
    """Area of the face normal to ``axis`` through a node at ``loc``."""
    a, b = (ax for ax in Axis if ax != axis)
    return spacing(a, loc, i, j, k, grid) * spacing(b, loc, i, j, k, grid)


def volume(loc, i, j, k, grid):
    return (spacing(Axis.X, loc, i, j, k, grid)
            * spacing(Axis.Y, loc, i, j, k, grid)
            * spacing(Axis.Z, loc, i, j, k, grid))


def spacing_product(axis, loc):
    """Operator returning ``Δ_axis(loc) * f``."""

    def spacing_times(i, j, k, grid, f, *args):
        return spacing(axis, loc, i, j, k, grid) * f(i, j, k, grid, *args)

    spacing_times.__name__ = f"d{axis.name.lower()}_q_{loc.name}"
    return spacing_times


def area_product(axis, loc):
    """Operator returning ``A_axis(loc) * f``."""

    def area_times(i, j, k, grid, f, *args):
        return area(axis, loc, i, j, k, grid) * f(i, j, k, grid, *args)

    area_times.__name__ = f"A{axis.name.lower()}_q_{loc.name}"
    return area_times
