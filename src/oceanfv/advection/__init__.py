"""Reconstruction stencils and momentum/tracer advection schemes."""

from .reconstruction import (
    Reconstruction,
    Centered,
    UpwindBiased,
    WENO,
    symmetric_interpolate,
    left_biased_interpolate,
    right_biased_interpolate,
    create_reconstruction,
)
from .blend import biased_blend, upwind_biased_product
from .schemes import (
    AdvectionScheme,
    NoAdvection,
    VectorInvariant,
    HighOrderVectorInvariant,
    FluxForm,
    StencilKind,
    create_advection_scheme,
)
from .momentum import momentum_advection_u, momentum_advection_v, tracer_advection

__all__ = [
    # Reconstruction
    "Reconstruction",
    "Centered",
    "UpwindBiased",
    "WENO",
    "symmetric_interpolate",
    "left_biased_interpolate",
    "right_biased_interpolate",
    "create_reconstruction",
    # Blend
    "biased_blend",
    "upwind_biased_product",
    # Schemes
    "AdvectionScheme",
    "NoAdvection",
    "VectorInvariant",
    "HighOrderVectorInvariant",
    "FluxForm",
    "StencilKind",
    "create_advection_scheme",
    # Entry points
    "momentum_advection_u",
    "momentum_advection_v",
    "tracer_advection",
]
