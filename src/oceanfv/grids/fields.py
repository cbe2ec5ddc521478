"""Located fields on a staggered grid."""

from typing import NamedTuple, Optional

import numpy as np

from ..errors import ConfigurationError
from .locations import Location, ccc, fcc, cfc, ccf


class Field:
    """Array of values over every storage node of ``grid`` at a fixed location.

    Fields are indexed with logical indices, ``c[i, j, k]``, and are callable
    with the operator signature ``c(i, j, k, grid)``, so a field can be passed
    anywhere an operator expects a function of the node index.

    Parameters
    ----------
    loc : Location or str
        Staggered location, fixed for the lifetime of the field.
    grid : RectilinearGrid or ImmersedBoundaryGrid
        Grid providing the storage layout.
    data : ndarray, optional
        Storage array of shape ``grid.storage_shape``. Allocated as zeros
        when omitted.
    """

    def __init__(self, loc, grid, data=None, dtype=np.float64):
        self.loc = Location.parse(loc)
        self.grid = grid
        shape = grid.storage_shape
        if data is None:
            data = np.zeros(shape, dtype=dtype)
        else:
            data = np.asarray(data)
            if data.shape != shape:
                raise ConfigurationError(
                    f"Field data has shape {data.shape}, grid storage is {shape}"
                )
        self.data = data

    def __getitem__(self, index):
        i, j, k = index
        return self.data[self.grid.storage_index(i, j, k)]

    def __call__(self, i, j, k, grid=None, *args):
        return self.data[self.grid.storage_index(i, j, k)]

    @property
    def interior(self) -> np.ndarray:
        """Writable view of the interior nodes."""
        return self.data[self.grid.interior_slices(self.loc)]

    def set(self, value):
        """Set interior values from a scalar, an array or a function ``f(x, y, z)``."""
        interior = self.interior
        if callable(value):
            x, y, z = self.grid.nodes(self.loc)
            value = value(x, y, z)
        interior[...] = np.broadcast_to(value, interior.shape)
        return self

    def copy(self):
        return Field(self.loc, self.grid, data=self.data.copy())

    def __repr__(self):
        return f"Field({self.loc.name}, shape={self.data.shape})"


def CenterField(grid, **kwargs):
    return Field(ccc, grid, **kwargs)


def XFaceField(grid, **kwargs):
    return Field(fcc, grid, **kwargs)


def YFaceField(grid, **kwargs):
    return Field(cfc, grid, **kwargs)


def ZFaceField(grid, **kwargs):
    return Field(ccf, grid, **kwargs)


class VelocityFields(NamedTuple):
    """Velocity components on the C-grid: u at fcc, v at cfc, w at ccf."""

    u: Field
    v: Field
    w: Optional[Field] = None

