"""Discrete circulation, vorticity and divergence.

Both operators integrate fluxes around a control volume (Stokes and the
divergence theorem). The differences are masked, so no circulation is
accumulated around a cell that touches solid and no flux is integrated
across a solid face.
"""

from ..grids.locations import Axis, ccc, fcc, cfc, ccf, ffc
from .derivatives import conditional_derivative
from .difference import delta_x_face, delta_y_face, delta_x_center, delta_y_center, delta_z_center
from .metrics import area, area_product, spacing_product, volume

dx_q_fcc = spacing_product(Axis.X, fcc)
dx_q_cfc = spacing_product(Axis.X, cfc)
dy_q_fcc = spacing_product(Axis.Y, fcc)
dy_q_cfc = spacing_product(Axis.Y, cfc)

Ax_q_fcc = area_product(Axis.X, fcc)
Ay_q_cfc = area_product(Axis.Y, cfc)
Az_q_ccf = area_product(Axis.Z, ccf)


def circulation(i, j, k, grid, u, v):
    """Line integral of (u, v) around the vorticity cell at ffc."""
    return (conditional_derivative(Axis.X, ffc, i, j, k, grid, delta_x_face, dy_q_cfc, v)
            - conditional_derivative(Axis.Y, ffc, i, j, k, grid, delta_y_face, dx_q_fcc, u))


def vertical_vorticity(i, j, k, grid, u, v):
    """ζ₃ at ffc: circulation divided by the vorticity-cell area."""
    return circulation(i, j, k, grid, u, v) / area(Axis.Z, ffc, i, j, k, grid)


def horizontal_divergence(i, j, k, grid, u, v):
    """∂x u + ∂y v at ccc from face fluxes."""
    return (conditional_derivative(Axis.X, ccc, i, j, k, grid, delta_x_center, dy_q_fcc, u)
            + conditional_derivative(Axis.Y, ccc, i, j, k, grid, delta_y_center, dx_q_cfc, v)) / area(Axis.Z, ccc, i, j, k, grid)


def divergence(i, j, k, grid, u, v, w):
    """Volume-flux divergence of (u, v, w) at ccc."""
    return (conditional_derivative(Axis.X, ccc, i, j, k, grid, delta_x_center, Ax_q_fcc, u)
            + conditional_derivative(Axis.Y, ccc, i, j, k, grid, delta_y_center, Ay_q_cfc, v)
            + conditional_derivative(Axis.Z, ccc, i, j, k, grid, delta_z_center, Az_q_ccf, w)) / volume(ccc, i, j, k, grid)
