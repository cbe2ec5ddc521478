"""Masked staggered-grid operators and momentum advection on immersed grids."""

from .errors import ConfigurationError
from .grids import (
    RectilinearGrid,
    ImmersedBoundaryGrid,
    GridFittedBoundary,
    Field,
    CenterField,
    XFaceField,
    YFaceField,
    ZFaceField,
    VelocityFields,
    fill_halo_regions,
)
from .operators import circulation, vertical_vorticity, horizontal_divergence, divergence, derivative
from .advection import (
    NoAdvection,
    VectorInvariant,
    HighOrderVectorInvariant,
    FluxForm,
    create_advection_scheme,
    momentum_advection_u,
    momentum_advection_v,
    tracer_advection,
)
from .kernels import compute_field

__all__ = [
    "ConfigurationError",
    "RectilinearGrid",
    "ImmersedBoundaryGrid",
    "GridFittedBoundary",
    "Field",
    "CenterField",
    "XFaceField",
    "YFaceField",
    "ZFaceField",
    "VelocityFields",
    "fill_halo_regions",
    "circulation",
    "vertical_vorticity",
    "horizontal_divergence",
    "divergence",
    "derivative",
    "NoAdvection",
    "VectorInvariant",
    "HighOrderVectorInvariant",
    "FluxForm",
    "create_advection_scheme",
    "momentum_advection_u",
    "momentum_advection_v",
    "tracer_advection",
    "compute_field",
]
