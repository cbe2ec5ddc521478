"""Vector-invariant form of momentum advection.

The advection operator is split as

    U·∇u = vorticity term + vertical advection + Bernoulli head

    u:  -ζ v̂   +   w ∂z u   +   ∂x K
    v:  +ζ û   +   w ∂z v   +   ∂y K

with ζ the vertical vorticity at ffc and K = (u² + v²) / 2 at ccc. The
functions return the operator itself; the momentum tendency is its negative.

Vorticity term variants:

- enstrophy (default): product of averages, ``-ℑy(ζ) ℑx(ℑy(Δx v)) / Δx``
- energy: average of products, ``-ℑy(ζ ℑx(Δx v)) / Δx``; its domain-summed
  kinetic-energy production vanishes on a uniform periodic grid
- biased: ζ reconstructed with left- and right-biased stencils along y (for u)
  or x (for v) and blended with the advecting velocity
"""

import numpy as np

from ..grids.locations import Axis, fcc, cfc, ccf, fcf, cff
from ..operators.derivatives import ddx_fcc, ddy_cfc, ddz_fcf, ddz_cff
from ..operators.interpolation import (
    average_x_face,
    average_x_center,
    average_y_face,
    average_y_center,
    average_z_center,
)
from ..operators.metrics import area, spacing, spacing_product, area_product
from ..operators.vorticity import vertical_vorticity
from .blend import upwind_biased_product

dx_q_cfc = spacing_product(Axis.X, cfc)
dy_q_fcc = spacing_product(Axis.Y, fcc)
Az_q_ccf = area_product(Axis.Z, ccf)

ENSTROPHY = "enstrophy"
ENERGY = "energy"


# ========================================================
# Advecting velocities and kinetic energy
# ========================================================


def _squared(i, j, k, grid, f):
    return f(i, j, k, grid) ** 2


def horizontal_kinetic_energy(i, j, k, grid, u, v):
    """K = (ℑx(u²) + ℑy(v²)) / 2 at ccc."""
    return 0.5 * (average_x_center(i, j, k, grid, _squared, u)
                  + average_y_center(i, j, k, grid, _squared, v))


def advecting_v(i, j, k, grid, v):
    """v̂ at fcc: the transport Δx v averaged onto the u node, per unit Δx."""
    transport = average_x_face(i, j, k, grid, average_y_center, dx_q_cfc, v)
    return transport / spacing(Axis.X, fcc, i, j, k, grid)


def advecting_u(i, j, k, grid, u):
    """û at cfc: the transport Δy u averaged onto the v node, per unit Δy."""
    transport = average_y_face(i, j, k, grid, average_x_center, dy_q_fcc, u)
    return transport / spacing(Axis.Y, cfc, i, j, k, grid)


# ========================================================
# Vorticity term
# ========================================================


def _vorticity_times_transport_x(i, j, k, grid, u, v):
    # at ffc: ζ ℑx(Δx v)
    return vertical_vorticity(i, j, k, grid, u, v) * average_x_face(i, j, k, grid, dx_q_cfc, v)


def _vorticity_times_transport_y(i, j, k, grid, u, v):
    # at ffc: ζ ℑy(Δy u)
    return vertical_vorticity(i, j, k, grid, u, v) * average_y_face(i, j, k, grid, dy_q_fcc, u)


def vertical_vorticity_u(i, j, k, grid, u, v, form=ENSTROPHY):
    """Vorticity term of the u equation at fcc, low order."""
    if form == ENERGY:
        flux = average_y_center(i, j, k, grid, _vorticity_times_transport_x, u, v)
        return -flux / spacing(Axis.X, fcc, i, j, k, grid)
    zeta = average_y_center(i, j, k, grid, vertical_vorticity, u, v)
    return -zeta * advecting_v(i, j, k, grid, v)


def vertical_vorticity_v(i, j, k, grid, u, v, form=ENSTROPHY):
    """Vorticity term of the v equation at cfc, low order."""
    if form == ENERGY:
        flux = average_x_center(i, j, k, grid, _vorticity_times_transport_y, u, v)
        return flux / spacing(Axis.Y, cfc, i, j, k, grid)
    zeta = average_x_center(i, j, k, grid, vertical_vorticity, u, v)
    return zeta * advecting_u(i, j, k, grid, u)


def _velocity_smoothness(u, v):
    # u and v averaged onto ffc, where ζ lives
    return ((average_y_face, (u,)), (average_x_face, (v,)))


def biased_vertical_vorticity_u(i, j, k, grid, reconstruction, u, v, width, velocity_stencil=False):
    """Vorticity term of the u equation at fcc with ζ reconstructed along y."""
    smoothness = _velocity_smoothness(u, v) if velocity_stencil else None
    v_hat = advecting_v(i, j, k, grid, v)
    zeta_left = reconstruction.left_biased(Axis.Y, fcc, i, j, k, grid, vertical_vorticity, u, v,
                                           smoothness=smoothness)
    zeta_right = reconstruction.right_biased(Axis.Y, fcc, i, j, k, grid, vertical_vorticity, u, v,
                                             smoothness=smoothness)
    return -upwind_biased_product(v_hat, zeta_left, zeta_right, width)


def biased_vertical_vorticity_v(i, j, k, grid, reconstruction, u, v, width, velocity_stencil=False):
    """Vorticity term of the v equation at cfc with ζ reconstructed along x."""
    smoothness = _velocity_smoothness(u, v) if velocity_stencil else None
    u_hat = advecting_u(i, j, k, grid, u)
    zeta_left = reconstruction.left_biased(Axis.X, cfc, i, j, k, grid, vertical_vorticity, u, v,
                                           smoothness=smoothness)
    zeta_right = reconstruction.right_biased(Axis.X, cfc, i, j, k, grid, vertical_vorticity, u, v,
                                             smoothness=smoothness)
    return upwind_biased_product(u_hat, zeta_left, zeta_right, width)


# ========================================================
# Vertical advection
# ========================================================


def _vertical_transport_u(i, j, k, grid, u, w):
    # at fcf: ℑx(Az w) ∂z u / Az
    transport = average_x_face(i, j, k, grid, Az_q_ccf, w)
    return transport * ddz_fcf(i, j, k, grid, u) / area(Axis.Z, fcf, i, j, k, grid)


def _vertical_transport_v(i, j, k, grid, v, w):
    # at cff: ℑy(Az w) ∂z v / Az
    transport = average_y_face(i, j, k, grid, Az_q_ccf, w)
    return transport * ddz_cff(i, j, k, grid, v) / area(Axis.Z, cff, i, j, k, grid)


def vertical_advection_u(i, j, k, grid, u, w):
    """w ∂z u at fcc; zero without a vertical velocity."""
    if w is None:
        return np.zeros(np.broadcast(i, j, k).shape)
    return average_z_center(i, j, k, grid, _vertical_transport_u, u, w)


def vertical_advection_v(i, j, k, grid, v, w):
    """w ∂z v at cfc; zero without a vertical velocity."""
    if w is None:
        return np.zeros(np.broadcast(i, j, k).shape)
    return average_z_center(i, j, k, grid, _vertical_transport_v, v, w)


# ========================================================
# Bernoulli head
# ========================================================


def bernoulli_head_u(i, j, k, grid, u, v):
    """∂x K at fcc, masked at immersed boundaries."""
    return ddx_fcc(i, j, k, grid, horizontal_kinetic_energy, u, v)


def bernoulli_head_v(i, j, k, grid, u, v):
    """∂y K at cfc, masked at immersed boundaries."""
    return ddy_cfc(i, j, k, grid, horizontal_kinetic_energy, u, v)
