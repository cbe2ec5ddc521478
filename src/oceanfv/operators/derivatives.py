"""First derivatives at every staggered location, masked at immersed boundaries.

One operator is generated per (axis, location) pair and bound to a module
name ``dd<axis>_<location>``, e.g. ``ddx_fcc`` is the x-derivative evaluated at
fcc nodes. That is 3 axes x 8 locations = 24 operators, each callable in two
forms:

    ddx_fcc(i, j, k, grid, c)              # derivative of a field
    ddx_fcc(i, j, k, grid, fn, *args)      # derivative of fn(i, j, k, grid, *args)

The second form differentiates a quantity built on the fly, e.g. a flux
``Δy * v``.

On an ``ImmersedBoundaryGrid`` the result is exactly zero wherever either of
the two differenced nodes is inactive, whatever values are stored there; on a
plain grid the operators are ordinary finite differences divided by the
spacing at the result location. Only the two nodes along the differenced axis
are inspected; the location along the other axes passes through unchanged.
"""

from ..errors import ConfigurationError
from ..grids.locations import Axis, Location, LOCATIONS
from .difference import DIFFERENCES
from .metrics import spacing


def conditional_derivative(axis, loc, i, j, k, grid, deriv, *args):
    """Evaluate ``deriv(i, j, k, underlying_grid, *args)`` at ``loc``, masked by ``grid``.

    ``deriv`` must difference two nodes at ``loc.flip(axis)`` along ``axis``
    (e.g. a difference operator from ``operators.difference``).
    """
    return grid.conditional_derivative(axis, loc, i, j, k, deriv, *args)


def partial_derivative(axis, loc):
    """Unmasked derivative along ``axis`` with the result at ``loc``."""
    difference = DIFFERENCES[axis, loc.along(axis)]

    def partial(i, j, k, grid, f, *args):
        return difference(i, j, k, grid, f, *args) / spacing(axis, loc, i, j, k, grid)

    return partial


def _masked_derivative(axis, loc):
    partial = partial_derivative(axis, loc)

    def derivative(i, j, k, grid, f, *args):
        return grid.conditional_derivative(axis, loc, i, j, k, partial, f, *args)

    name = f"dd{axis.name.lower()}_{loc.name}"
    derivative.__name__ = derivative.__qualname__ = name
    derivative.__doc__ = f"{axis.name.lower()}-derivative at {loc.name} nodes, masked at immersed boundaries."
    return derivative


DERIVATIVES = {}

for _axis in Axis:
    for _loc in LOCATIONS:
        _operator = _masked_derivative(_axis, _loc)
        DERIVATIVES[_axis, _loc] = _operator
        globals()[_operator.__name__] = _operator

del _axis, _loc, _operator


def derivative(axis, loc):
    """Look up the masked derivative operator for ``axis`` at ``loc``.

    Accepts enum values or names (``"x"``, ``"fcc"``); raises
    ``ConfigurationError`` for anything else.
    """
    key = (Axis.parse(axis), Location.parse(loc))
    try:
        return DERIVATIVES[key]
    except KeyError:
        raise ConfigurationError(f"No derivative for axis={axis!r}, location={loc!r}") from None


__all__ = [
    "conditional_derivative",
    "partial_derivative",
    "derivative",
    "DERIVATIVES",
] + [op.__name__ for op in DERIVATIVES.values()]
