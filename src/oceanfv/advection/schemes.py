"""Momentum advection schemes.

The scheme object is built once from configuration and carries every
choice the per-node evaluation needs, so dispatch happens by method
lookup rather than by inspecting options at each node.

Variants:

- ``NoAdvection``: advection switched off, identically zero
- ``VectorInvariant``: low-order vector-invariant form
- ``HighOrderVectorInvariant``: vector-invariant form with ζ reconstructed by
  upwind-biased or WENO stencils
- ``FluxForm``: divergence of advective momentum fluxes

All variants also advect tracers in flux form; the vector-invariant
variants use their own reconstruction (second-order centred for the
low-order form).
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

import numpy as np

from ..errors import ConfigurationError
from ..grids.locations import Axis
from ..grids.rectilinear_grid import Topology
from .blend import check_blend_width
from .flux_form import (
    momentum_flux_divergence_u,
    momentum_flux_divergence_v,
    tracer_flux_divergence,
)
from .reconstruction import Centered, Reconstruction, create_reconstruction
from .vector_invariant import (
    ENERGY,
    ENSTROPHY,
    bernoulli_head_u,
    bernoulli_head_v,
    biased_vertical_vorticity_u,
    biased_vertical_vorticity_v,
    vertical_advection_u,
    vertical_advection_v,
    vertical_vorticity_u,
    vertical_vorticity_v,
)

log = logging.getLogger(__name__)

DEFAULT_BLEND_WIDTH = 1e-6


class StencilKind(Enum):
    """Source of the smoothness indicators when ζ is reconstructed with WENO."""

    VELOCITY = "velocity"
    VORTICITY = "vorticity"

    @classmethod
    def parse(cls, value):
        if isinstance(value, StencilKind):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown stencil: {value!r}. Use 'velocity' or 'vorticity'."
            ) from None


def _reconstruction(value, order):
    if isinstance(value, Reconstruction):
        return value
    return create_reconstruction(value, order)


# ========================================================
# Base class
# ========================================================


class AdvectionScheme(ABC):
    """Momentum and tracer advection operator U·∇(·).

    Subclasses implement ``u_advection`` and ``v_advection``; both take
    ``(i, j, k, grid, U)`` with ``U`` a ``VelocityFields`` and return the
    advection operator at fcc and cfc respectively.
    """

    name = None
    tracer_reconstruction = Centered(2)
    blend_width = DEFAULT_BLEND_WIDTH

    @property
    def required_halo(self) -> int:
        """Halo needed along every non-flat axis."""
        return self.tracer_reconstruction.required_halo + 1

    def validate(self, grid):
        """Raise ``ConfigurationError`` if ``grid`` cannot host this scheme."""
        required = self.required_halo
        for axis in Axis:
            if grid.topology[axis] is Topology.FLAT:
                continue
            if grid.halo[axis] < required:
                raise ConfigurationError(
                    f"{self!r} needs a halo of {required} along {axis.name}, "
                    f"grid has {grid.halo[axis]}"
                )
        return self

    @abstractmethod
    def u_advection(self, i, j, k, grid, U):
        pass

    @abstractmethod
    def v_advection(self, i, j, k, grid, U):
        pass

    def tracer_advection(self, i, j, k, grid, U, c):
        """∇·(U c) at ccc."""
        return tracer_flux_divergence(i, j, k, grid, self.tracer_reconstruction, self.blend_width, U, c)

    def to_dict(self) -> dict:
        return {"advection": self.name}

    def __repr__(self):
        options = ", ".join(f"{key}={value}" for key, value in self.to_dict().items() if key != "advection")
        return f"{type(self).__name__}({options})"


# ========================================================
# Variants
# ========================================================


class NoAdvection(AdvectionScheme):
    """Advection switched off."""

    name = "none"

    @property
    def required_halo(self):
        return 1

    def u_advection(self, i, j, k, grid, U):
        return np.zeros(np.broadcast(i, j, k).shape)

    def v_advection(self, i, j, k, grid, U):
        return np.zeros(np.broadcast(i, j, k).shape)

    def tracer_advection(self, i, j, k, grid, U, c):
        return np.zeros(np.broadcast(i, j, k).shape)


class VectorInvariant(AdvectionScheme):
    """Low-order vector-invariant momentum advection.

    Parameters
    ----------
    vorticity_scheme : str
        "enstrophy" (product of averages) or "energy" (average of products).
        Only "energy" leaves the domain kinetic energy unchanged on periodic grids.
    """

    name = "vector_invariant"

    def __init__(self, vorticity_scheme: str = ENSTROPHY):
        vorticity_scheme = str(vorticity_scheme).lower()
        if vorticity_scheme not in (ENSTROPHY, ENERGY):
            raise ConfigurationError(
                f"Unknown vorticity scheme: {vorticity_scheme}. Use 'enstrophy' or 'energy'."
            )
        self.vorticity_scheme = vorticity_scheme

    def u_advection(self, i, j, k, grid, U):
        return (vertical_vorticity_u(i, j, k, grid, U.u, U.v, self.vorticity_scheme)
                + vertical_advection_u(i, j, k, grid, U.u, U.w)
                + bernoulli_head_u(i, j, k, grid, U.u, U.v))

    def v_advection(self, i, j, k, grid, U):
        return (vertical_vorticity_v(i, j, k, grid, U.u, U.v, self.vorticity_scheme)
                + vertical_advection_v(i, j, k, grid, U.v, U.w)
                + bernoulli_head_v(i, j, k, grid, U.u, U.v))

    def to_dict(self):
        return {"advection": self.name, "vorticity_scheme": self.vorticity_scheme}


class HighOrderVectorInvariant(AdvectionScheme):
    """Vector-invariant advection with an upwind-biased vorticity flux.

    Parameters
    ----------
    order : int
        Order of the ζ reconstruction (1, 3 or 5 for "upwind"; 3 or 5 for "weno")
    stencil : str
        "velocity" or "vorticity": source of the WENO smoothness indicators
    reconstruction : str or Reconstruction
        "upwind" or "weno"
    blend_width : float
        Velocity scale of the smooth upwind selection, must be positive
    """

    name = "high_order_vector_invariant"

    def __init__(self, order: int = 5, stencil: str = "vorticity",
                 reconstruction="weno", blend_width: float = DEFAULT_BLEND_WIDTH):
        self.reconstruction = _reconstruction(reconstruction, order)
        if not self.reconstruction.is_biased:
            raise ConfigurationError(
                f"High-order vector invariant needs a biased reconstruction, got {self.reconstruction!r}"
            )
        self.order = self.reconstruction.order
        self.stencil = StencilKind.parse(stencil)
        self.blend_width = check_blend_width(blend_width)
        self.tracer_reconstruction = self.reconstruction

    @property
    def velocity_stencil(self) -> bool:
        return self.stencil is StencilKind.VELOCITY

    def u_advection(self, i, j, k, grid, U):
        return (biased_vertical_vorticity_u(i, j, k, grid, self.reconstruction, U.u, U.v,
                                            self.blend_width, self.velocity_stencil)
                + vertical_advection_u(i, j, k, grid, U.u, U.w)
                + bernoulli_head_u(i, j, k, grid, U.u, U.v))

    def v_advection(self, i, j, k, grid, U):
        return (biased_vertical_vorticity_v(i, j, k, grid, self.reconstruction, U.u, U.v,
                                            self.blend_width, self.velocity_stencil)
                + vertical_advection_v(i, j, k, grid, U.v, U.w)
                + bernoulli_head_v(i, j, k, grid, U.u, U.v))

    def to_dict(self):
        return {
            "advection": self.name,
            "reconstruction": type(self.reconstruction).__name__,
            "order": self.order,
            "stencil": self.stencil.value,
            "blend_width": self.blend_width,
        }


class FluxForm(AdvectionScheme):
    """Flux-form momentum advection.

    Parameters
    ----------
    reconstruction : str or Reconstruction
        "centered", "upwind" or "weno"
    order : int
        Order of the reconstruction
    blend_width : float
        Velocity scale of the smooth upwind selection, must be positive
    """

    name = "flux_form"

    def __init__(self, reconstruction="upwind", order: int = 3,
                 blend_width: float = DEFAULT_BLEND_WIDTH):
        self.reconstruction = _reconstruction(reconstruction, order)
        self.order = self.reconstruction.order
        self.blend_width = check_blend_width(blend_width)
        self.tracer_reconstruction = self.reconstruction

    def u_advection(self, i, j, k, grid, U):
        return momentum_flux_divergence_u(i, j, k, grid, self.reconstruction, self.blend_width, U)

    def v_advection(self, i, j, k, grid, U):
        return momentum_flux_divergence_v(i, j, k, grid, self.reconstruction, self.blend_width, U)

    def to_dict(self):
        return {
            "advection": self.name,
            "reconstruction": type(self.reconstruction).__name__,
            "order": self.order,
            "blend_width": self.blend_width,
        }


# =============================================================================
# Factory Function
# =============================================================================


def create_advection_scheme(method: str = "vector_invariant", **kwargs) -> AdvectionScheme:
    """Create a momentum advection scheme from configuration.

    Parameters
    ----------
    method : str
        "none", "vector_invariant", "high_order_vector_invariant" (alias "weno")
        or "flux_form"
    **kwargs
        Options of the selected scheme

    Returns
    -------
    AdvectionScheme
    """
    method_lower = str(method).lower()

    if method_lower in ("none", "no_advection"):
        scheme = NoAdvection()
    elif method_lower == "vector_invariant":
        scheme = VectorInvariant(**kwargs)
    elif method_lower in ("high_order_vector_invariant", "weno"):
        scheme = HighOrderVectorInvariant(**kwargs)
    elif method_lower == "flux_form":
        scheme = FluxForm(**kwargs)
    else:
        raise ConfigurationError(
            f"Unknown advection scheme: {method}. "
            f"Use 'none', 'vector_invariant', 'high_order_vector_invariant', or 'flux_form'."
        )

    log.debug(f"Advection scheme: {scheme!r}")
    return scheme
