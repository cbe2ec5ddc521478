"""Pytest configuration and fixtures for operator and advection tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from oceanfv.grids import (  # noqa: E402
    Axis,
    Field,
    ImmersedBoundaryGrid,
    RectilinearGrid,
)


CONF_DIR = Path(__file__).parent.parent / "conf"


def storage_nodes(grid, loc):
    """Coordinates of every storage node (interior and halo) at ``loc``, broadcastable."""
    coords = []
    for axis in Axis:
        N, H = grid.size[axis], grid.halo[axis]
        idx = np.arange(-H, N + H) if H > 0 else np.arange(1)
        shape = [1, 1, 1]
        shape[axis] = idx.size
        coords.append(grid.node(axis, loc.along(axis), idx).reshape(shape))
    return tuple(coords)


def set_everywhere(field, f):
    """Fill every storage node of ``field`` from ``f(x, y, z)``, halo included."""
    x, y, z = storage_nodes(field.grid, field.loc)
    field.data[...] = np.broadcast_to(f(x, y, z), field.data.shape)
    return field


def box(x0, x1, y0, y1):
    """Predicate for a rectangular obstacle in the horizontal plane."""

    def solid(x, y, z):
        return (x0 <= x <= x1) and (y0 <= y <= y1)

    return solid


@pytest.fixture
def periodic_grid():
    """Doubly periodic 16x12 plane, flat in z."""
    return RectilinearGrid(
        size=(16, 12, 1),
        extent=(2.0, 1.5, 1.0),
        halo=(3, 3, 3),
        topology=("periodic", "periodic", "flat"),
    )


@pytest.fixture
def bounded_grid():
    """Three-dimensional box bounded in y and z, periodic in x."""
    return RectilinearGrid(
        size=(10, 8, 6),
        extent=(1.0, 0.8, 0.6),
        halo=(2, 2, 2),
        topology=("periodic", "bounded", "bounded"),
    )


@pytest.fixture
def immersed_grid(bounded_grid):
    """``bounded_grid`` with a solid block through part of the depth."""

    def solid(x, y, z):
        return (0.3 < x < 0.6) and (0.2 < y < 0.5) and z < 0.4

    return ImmersedBoundaryGrid(bounded_grid, solid)


@pytest.fixture
def rotation_grid():
    """Closed plane centred on the origin, wide halo for fifth-order stencils."""
    return RectilinearGrid(
        size=(12, 10, 1),
        extent=(1.2, 1.0, 1.0),
        origin=(-0.6, -0.5, 0.0),
        halo=(4, 4, 4),
        topology=("bounded", "bounded", "flat"),
    )


@pytest.fixture
def rng():
    return np.random.default_rng(2689)


def random_field(loc, grid, rng):
    field = Field(loc, grid)
    field.data[...] = rng.standard_normal(field.data.shape)
    return field
