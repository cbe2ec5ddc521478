"""Staggered grids, immersed solid geometry and located fields."""

from .locations import (
    Axis,
    AxisLocation,
    Location,
    FACE,
    CENTER,
    LOCATIONS,
    ccc,
    fcc,
    cfc,
    ccf,
    ffc,
    fcf,
    cff,
    fff,
)
from .rectilinear_grid import RectilinearGrid, Topology
from .immersed_grid import ImmersedBoundaryGrid, GridFittedBoundary, mask_immersed_field
from .fields import (
    Field,
    CenterField,
    XFaceField,
    YFaceField,
    ZFaceField,
    VelocityFields,
)
from .halos import fill_halo_regions

__all__ = [
    # Locations
    "Axis",
    "AxisLocation",
    "Location",
    "FACE",
    "CENTER",
    "LOCATIONS",
    "ccc",
    "fcc",
    "cfc",
    "ccf",
    "ffc",
    "fcf",
    "cff",
    "fff",
    # Grids
    "RectilinearGrid",
    "Topology",
    "ImmersedBoundaryGrid",
    "GridFittedBoundary",
    "mask_immersed_field",
    # Fields
    "Field",
    "CenterField",
    "XFaceField",
    "YFaceField",
    "ZFaceField",
    "VelocityFields",
    "fill_halo_regions",
]
