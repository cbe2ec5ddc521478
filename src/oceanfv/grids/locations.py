"""Staggered-grid locations.

Every quantity on the C-grid lives at a fixed position relative to the
control volume, chosen independently along each axis:

- ``CENTER``: at the cell centre along that axis
- ``FACE``: on the cell face along that axis (face ``i`` is the left face of cell ``i``)

A ``Location`` is one choice per axis, giving eight canonical positions:

    ccc  tracers, pressure
    fcc  u velocity          cfc  v velocity          ccf  w velocity
    ffc  vertical vorticity  fcf  y-vorticity          cff  x-vorticity
    fff  cell corners
"""

from enum import Enum, IntEnum
from typing import NamedTuple

from ..errors import ConfigurationError


class Axis(IntEnum):
    """Coordinate axis; the value is the array dimension."""

    X = 0
    Y = 1
    Z = 2

    @classmethod
    def parse(cls, name):
        if isinstance(name, Axis):
            return name
        try:
            return cls[str(name).upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown axis: {name!r}") from None


class AxisLocation(Enum):
    """Placement along a single axis."""

    FACE = "f"
    CENTER = "c"

    def flip(self):
        return AxisLocation.CENTER if self is AxisLocation.FACE else AxisLocation.FACE


FACE = AxisLocation.FACE
CENTER = AxisLocation.CENTER


class Location(NamedTuple):
    """Position of a quantity along (x, y, z)."""

    x: AxisLocation
    y: AxisLocation
    z: AxisLocation

    @property
    def name(self) -> str:
        return "".join(a.value for a in self)

    def along(self, axis) -> AxisLocation:
        return self[int(axis)]

    def replace_along(self, axis, location: AxisLocation) -> "Location":
        parts = list(self)
        parts[int(axis)] = location
        return Location(*parts)

    def flip(self, axis) -> "Location":
        """Location of the operands a difference along ``axis`` reads."""
        return self.replace_along(axis, self.along(axis).flip())

    @classmethod
    def parse(cls, name) -> "Location":
        """Build a location from its short name, e.g. ``"fcc"``."""
        if isinstance(name, Location):
            return name
        text = str(name).lower()
        if len(text) != 3 or any(ch not in "fc" for ch in text):
            raise ConfigurationError(f"Unknown location: {name!r}")
        return cls(*(AxisLocation(ch) for ch in text))

    def __repr__(self) -> str:
        return f"Location({self.name})"


ccc = Location(CENTER, CENTER, CENTER)
fcc = Location(FACE, CENTER, CENTER)
cfc = Location(CENTER, FACE, CENTER)
ccf = Location(CENTER, CENTER, FACE)
ffc = Location(FACE, FACE, CENTER)
fcf = Location(FACE, CENTER, FACE)
cff = Location(CENTER, FACE, FACE)
fff = Location(FACE, FACE, FACE)

LOCATIONS = (ccc, fcc, cfc, ccf, ffc, fcf, cff, fff)


def shift_index(axis, offset, i, j, k):
    """Return ``(i, j, k)`` moved by ``offset`` along ``axis``."""
    if axis == Axis.X:
        return i + offset, j, k
    if axis == Axis.Y:
        return i, j + offset, k
    return i, j, k + offset
