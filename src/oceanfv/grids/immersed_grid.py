"""Immersed solid geometry on a rectilinear grid.

Solid regions are represented by marking control volumes inactive instead of
conforming the mesh. The solid mask is evaluated once at cell centres; the
activity of every other location follows from which cells the node
straddles: a node is inactive when any of those cells is solid.

    ccc  cell (i, j, k)
    fcc  cells (i-1, j, k) and (i, j, k)
    ffc  the four cells (i-1 .. i, j-1 .. j, k)
    fff  the eight cells around the corner

Differences that would read across the fluid/solid interface are replaced
by zero (see ``ImmersedBoundaryGrid.conditional_derivative``).
"""

import logging

import numpy as np

from ..errors import ConfigurationError
from .fields import Field
from .halos import fill_halo_regions
from .locations import Axis, FACE, CENTER, LOCATIONS, ccc, shift_index
from .rectilinear_grid import Topology

log = logging.getLogger(__name__)


# Offset to the second node a difference reads, keyed by where the result lives
# along the differenced axis: Face i sits between centres i-1 and i, centre i
# between faces i and i+1.
NEIGHBOR_OFFSET = {FACE: -1, CENTER: +1}


class GridFittedBoundary:
    """Solid geometry given by a predicate ``solid(x, y, z) -> bool``.

    The predicate is evaluated at interior cell centres. It may be written
    for scalars (``x < 5 or y < 5``) or for arrays.
    """

    def __init__(self, predicate):
        if not callable(predicate):
            raise ConfigurationError("GridFittedBoundary needs a callable predicate")
        self.predicate = predicate

    def interior_mask(self, grid):
        x, y, z = np.broadcast_arrays(*grid.nodes(ccc))
        solid = np.vectorize(self.predicate, otypes=[bool])
        return solid(x, y, z)


class ImmersedBoundaryGrid:
    """An underlying grid plus a solid mask.

    Parameters
    ----------
    grid : RectilinearGrid
        Underlying grid providing sizes, coordinates and metrics.
    boundary : GridFittedBoundary, callable or array_like of bool
        Solid geometry: a boundary object, a predicate ``(x, y, z) -> bool``,
        or a boolean array with the interior cell shape.

    Attributes other than the masking capability are delegated to the
    underlying grid.
    """

    is_immersed = True

    def __init__(self, grid, boundary):
        if getattr(grid, "is_immersed", False):
            raise ConfigurationError("Cannot immerse a grid that already has a solid mask")
        self.underlying_grid = grid

        if isinstance(boundary, GridFittedBoundary):
            interior = boundary.interior_mask(grid)
        elif callable(boundary):
            boundary = GridFittedBoundary(boundary)
            interior = boundary.interior_mask(grid)
        else:
            interior = np.asarray(boundary, dtype=bool)
            expected = grid.interior_shape(ccc)
            if interior.shape != expected:
                raise ConfigurationError(
                    f"Solid mask has shape {interior.shape}, expected interior shape {expected}"
                )
        self.boundary = boundary

        mask = Field(ccc, grid, dtype=bool)
        mask.interior[...] = interior
        fill_halo_regions(mask)
        mask.data.setflags(write=False)
        self.solid_mask = mask.data

        self._inactive = {loc: self._straddled_cells(loc) for loc in LOCATIONS}
        for table in self._inactive.values():
            table.setflags(write=False)

        log.debug(
            f"Immersed boundary: {int(interior.sum())} of {interior.size} interior cells solid"
        )

    def _straddled_cells(self, loc):
        """Activity table for ``loc``: union of the solid flags of straddled cells."""
        table = self.solid_mask.copy()
        for axis in Axis:
            if loc.along(axis) is not FACE or self.underlying_grid.topology[axis] is Topology.FLAT:
                continue
            previous = np.zeros_like(table)
            dst = [slice(None)] * 3
            src = [slice(None)] * 3
            dst[axis] = slice(1, None)
            src[axis] = slice(None, -1)
            previous[tuple(dst)] = table[tuple(src)]
            table = table | previous
        return table

    def __getattr__(self, name):
        if name == "underlying_grid":
            raise AttributeError(name)
        return getattr(self.underlying_grid, name)

    def inactive_nodes(self, loc):
        """Read-only activity table for ``loc`` over all storage nodes."""
        return self._inactive[loc]

    def inactive(self, loc, i, j, k):
        """True where the node at ``loc`` touches a solid cell."""
        return self._inactive[loc][self.underlying_grid.storage_index(i, j, k)]

    def conditional_derivative(self, axis, loc, i, j, k, deriv, *args):
        """Evaluate ``deriv`` at ``loc``, or zero if it differences an inactive node.

        ``deriv`` differences two nodes at ``loc.flip(axis)`` along ``axis``:
        offsets {0, -1} when the result is on a face, {0, +1} when it is at a
        centre. It is evaluated on the underlying grid, so nested operators are
        not masked again.
        """
        operand = loc.flip(axis)
        offset = NEIGHBOR_OFFSET[loc.along(axis)]
        neighbor = shift_index(axis, offset, i, j, k)
        masked = self.inactive(operand, i, j, k) | self.inactive(operand, *neighbor)
        return np.where(masked, 0.0, deriv(i, j, k, self.underlying_grid, *args))

    def __repr__(self):
        return f"ImmersedBoundaryGrid({self.underlying_grid!r})"


def mask_immersed_field(field, value=0.0):
    """Overwrite every inactive node of ``field`` (halo included) with ``value``."""
    grid = field.grid
    if getattr(grid, "is_immersed", False):
        field.data[grid.inactive_nodes(field.loc)] = value
    return field
