"""Flux-form advection of momentum and tracers.

The advection operator is the divergence of advective fluxes per unit
volume, ``(1/V) Σ δ(transport · reconstructed value)``. Fluxes through
faces that touch a solid cell are set to zero before differencing, so
the volume integral of an advected quantity is conserved exactly on an
immersed grid.
"""

import numpy as np

from ..grids.locations import Axis, ccc, fcc, cfc, ccf, ffc, fcf, cff
from ..operators.difference import (
    delta_x_face,
    delta_x_center,
    delta_y_face,
    delta_y_center,
    delta_z_center,
)
from ..operators.interpolation import (
    average_x_face,
    average_x_center,
    average_y_face,
    average_y_center,
)
from ..operators.metrics import area_product, volume
from .blend import upwind_biased_product

Ax_q_fcc = area_product(Axis.X, fcc)
Ay_q_cfc = area_product(Axis.Y, cfc)
Az_q_ccf = area_product(Axis.Z, ccf)


def advective_flux(axis, loc, i, j, k, grid, reconstruction, width, transport, psi, *args):
    """``transport`` times ``psi`` reconstructed at ``loc``; zero on inactive nodes."""
    if reconstruction.is_biased:
        left = reconstruction.left_biased(axis, loc, i, j, k, grid, psi, *args)
        right = reconstruction.right_biased(axis, loc, i, j, k, grid, psi, *args)
        flux = upwind_biased_product(transport, left, right, width)
    else:
        flux = transport * reconstruction.symmetric(axis, loc, i, j, k, grid, psi, *args)
    return np.where(grid.inactive(loc, i, j, k), 0.0, flux)


# ========================================================
# Momentum fluxes
# ========================================================


def _flux_uu(i, j, k, grid, reconstruction, width, U):
    transport = average_x_center(i, j, k, grid, Ax_q_fcc, U.u)
    return advective_flux(Axis.X, ccc, i, j, k, grid, reconstruction, width, transport, U.u)


def _flux_vu(i, j, k, grid, reconstruction, width, U):
    transport = average_x_face(i, j, k, grid, Ay_q_cfc, U.v)
    return advective_flux(Axis.Y, ffc, i, j, k, grid, reconstruction, width, transport, U.u)


def _flux_wu(i, j, k, grid, reconstruction, width, U):
    transport = average_x_face(i, j, k, grid, Az_q_ccf, U.w)
    return advective_flux(Axis.Z, fcf, i, j, k, grid, reconstruction, width, transport, U.u)


def _flux_uv(i, j, k, grid, reconstruction, width, U):
    transport = average_y_face(i, j, k, grid, Ax_q_fcc, U.u)
    return advective_flux(Axis.X, ffc, i, j, k, grid, reconstruction, width, transport, U.v)


def _flux_vv(i, j, k, grid, reconstruction, width, U):
    transport = average_y_center(i, j, k, grid, Ay_q_cfc, U.v)
    return advective_flux(Axis.Y, ccc, i, j, k, grid, reconstruction, width, transport, U.v)


def _flux_wv(i, j, k, grid, reconstruction, width, U):
    transport = average_y_face(i, j, k, grid, Az_q_ccf, U.w)
    return advective_flux(Axis.Z, cff, i, j, k, grid, reconstruction, width, transport, U.v)


def momentum_flux_divergence_u(i, j, k, grid, reconstruction, width, U):
    """∇·(U u) at fcc."""
    args = (reconstruction, width, U)
    total = (delta_x_face(i, j, k, grid, _flux_uu, *args)
             + delta_y_center(i, j, k, grid, _flux_vu, *args))
    if U.w is not None:
        total = total + delta_z_center(i, j, k, grid, _flux_wu, *args)
    return total / volume(fcc, i, j, k, grid)


def momentum_flux_divergence_v(i, j, k, grid, reconstruction, width, U):
    """∇·(U v) at cfc."""
    args = (reconstruction, width, U)
    total = (delta_x_center(i, j, k, grid, _flux_uv, *args)
             + delta_y_face(i, j, k, grid, _flux_vv, *args))
    if U.w is not None:
        total = total + delta_z_center(i, j, k, grid, _flux_wv, *args)
    return total / volume(cfc, i, j, k, grid)


# ========================================================
# Tracer fluxes
# ========================================================


def _tracer_flux_x(i, j, k, grid, reconstruction, width, U, c):
    transport = Ax_q_fcc(i, j, k, grid, U.u)
    return advective_flux(Axis.X, fcc, i, j, k, grid, reconstruction, width, transport, c)


def _tracer_flux_y(i, j, k, grid, reconstruction, width, U, c):
    transport = Ay_q_cfc(i, j, k, grid, U.v)
    return advective_flux(Axis.Y, cfc, i, j, k, grid, reconstruction, width, transport, c)


def _tracer_flux_z(i, j, k, grid, reconstruction, width, U, c):
    transport = Az_q_ccf(i, j, k, grid, U.w)
    return advective_flux(Axis.Z, ccf, i, j, k, grid, reconstruction, width, transport, c)


def tracer_flux_divergence(i, j, k, grid, reconstruction, width, U, c):
    """∇·(U c) at ccc."""
    args = (reconstruction, width, U, c)
    total = (delta_x_center(i, j, k, grid, _tracer_flux_x, *args)
             + delta_y_center(i, j, k, grid, _tracer_flux_y, *args))
    if U.w is not None:
        total = total + delta_z_center(i, j, k, grid, _tracer_flux_z, *args)
    return total / volume(ccc, i, j, k, grid)
