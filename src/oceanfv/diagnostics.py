"""Integral diagnostics over the fluid part of a grid."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .advection.vector_invariant import vertical_vorticity_u, vertical_vorticity_v
from .grids.locations import ccc, fcc, cfc
from .kernels import compute_field
from .operators.metrics import volume
from .operators.vorticity import divergence, horizontal_divergence


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def fluid_mask(grid, loc) -> np.ndarray:
    """Boolean interior array, True on active nodes."""
    if not grid.is_immersed:
        return np.ones(grid.interior_shape(loc), dtype=bool)
    slices = grid.interior_slices(loc)
    return ~grid.inactive_nodes(loc)[slices]


def cell_volumes(grid, loc) -> np.ndarray:
    i, j, k = grid.interior_indices(loc)
    return np.broadcast_to(volume(loc, i, j, k, grid), grid.interior_shape(loc))


def volume_integral(field) -> float:
    """Sum of volume times value over the active interior nodes of ``field``."""
    grid = field.grid
    mask = fluid_mask(grid, field.loc)
    return float(np.sum((cell_volumes(grid, field.loc) * field.interior)[mask]))


# -----------------------------------------------------------------------------
# Continuity
# -----------------------------------------------------------------------------


def velocity_divergence(grid, U):
    """Divergence field at ccc (horizontal when ``U.w`` is None)."""
    if U.w is None:
        return compute_field(ccc, grid, horizontal_divergence, U.u, U.v)
    return compute_field(ccc, grid, divergence, U.u, U.v, U.w)


def mass_residual(grid, U) -> float:
    """Volume-weighted sum of the divergence over fluid cells."""
    return volume_integral(velocity_divergence(grid, U))


def max_divergence(grid, U) -> float:
    div = velocity_divergence(grid, U)
    values = div.interior[fluid_mask(grid, ccc)]
    return float(np.max(np.abs(values))) if values.size else 0.0


# -----------------------------------------------------------------------------
# Energetics
# -----------------------------------------------------------------------------


def kinetic_energy_production(grid, U, form="energy") -> float:
    """Σ V (u · vorticity_u + v · vorticity_v) over the interior.

    Zero to round-off for the energy form on a uniform periodic grid.
    """
    term_u = compute_field(fcc, grid, vertical_vorticity_u, U.u, U.v, form)
    term_v = compute_field(cfc, grid, vertical_vorticity_v, U.u, U.v, form)
    production_u = cell_volumes(grid, fcc) * U.u.interior * term_u.interior
    production_v = cell_volumes(grid, cfc) * U.v.interior * term_v.interior
    return float(np.sum(production_u[fluid_mask(grid, fcc)]) + np.sum(production_v[fluid_mask(grid, cfc)]))


def kinetic_energy(grid, U) -> float:
    total = 0.0
    for component, loc in ((U.u, fcc), (U.v, cfc)):
        values = 0.5 * cell_volumes(grid, loc) * component.interior ** 2
        total += float(np.sum(values[fluid_mask(grid, loc)]))
    return total


# -----------------------------------------------------------------------------
# Tracers
# -----------------------------------------------------------------------------


def tracer_statistics(c) -> dict:
    """Maximum, minimum and volume-weighted mean of a ccc tracer over fluid cells."""
    grid = c.grid
    mask = fluid_mask(grid, c.loc)
    values = c.interior[mask]
    volumes = cell_volumes(grid, c.loc)[mask]
    return {
        "max": float(np.max(values)),
        "min": float(np.min(values)),
        "mean": float(np.sum(volumes * values) / np.sum(volumes)),
    }


def summary_table(statistics: dict, label: str = "") -> pd.DataFrame:
    """One-row DataFrame from a statistics dictionary."""
    df = pd.DataFrame([statistics])
    if label:
        df.insert(0, "label", label)
    return df
