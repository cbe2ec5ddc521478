"""Rectilinear staggered grid with halos.

Logical indexing
----------------
Operators address nodes with logical indices ``(i, j, k)``:

- cell centres of the interior run ``0 .. N-1``
- faces run ``0 .. N-1`` on periodic axes and ``0 .. N`` on bounded axes
- halo nodes are negative or ``>= N``

Storage arrays have ``N + 2H`` entries along every non-flat axis, for every
location; logical index ``i`` lives at storage index ``i + H``. Along a flat
axis the grid has a single node and every logical index maps onto it, so
differences along a flat axis vanish identically.

Indices may be Python ints or broadcastable integer arrays (see
``interior_indices``), so the same operator code evaluates a single node or a
whole block.
"""

import logging
from enum import Enum

import numpy as np

from ..errors import ConfigurationError
from .locations import Axis, AxisLocation, FACE, CENTER

log = logging.getLogger(__name__)


class Topology(Enum):
    """Per-axis domain topology."""

    PERIODIC = "periodic"
    BOUNDED = "bounded"
    FLAT = "flat"

    @classmethod
    def parse(cls, value):
        if isinstance(value, Topology):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(f"Unknown topology: {value!r}") from None


def _triple(value, name):
    values = tuple(value)
    if len(values) != 3:
        raise ConfigurationError(f"{name} must have three entries, got {value!r}")
    return values


class RectilinearGrid:
    """Structured grid with per-axis topology and precomputed metrics.

    Parameters
    ----------
    size : tuple of int
        Number of cells ``(Nx, Ny, Nz)``. Flat axes must have size 1.
    extent : tuple of float, optional
        Domain lengths ``(Lx, Ly, Lz)`` for uniformly spaced axes.
    halo : tuple of int
        Halo width per axis. Ignored (set to 0) along flat axes.
    topology : tuple of str or Topology
        ``"periodic"``, ``"bounded"`` or ``"flat"`` per axis.
    origin : tuple of float
        Position of the first interior face per axis.
    coordinates : tuple, optional
        Per-axis interior face positions (``N + 1`` increasing values) for
        stretched axes; ``None`` entries fall back to ``extent``.
    """

    is_immersed = False

    def __init__(
        self,
        size,
        extent=None,
        halo=(1, 1, 1),
        topology=("periodic", "periodic", "bounded"),
        origin=(0.0, 0.0, 0.0),
        coordinates=None,
    ):
        size = tuple(int(n) for n in _triple(size, "size"))
        topology = tuple(Topology.parse(t) for t in _triple(topology, "topology"))
        halo = tuple(int(h) for h in _triple(halo, "halo"))
        origin = tuple(float(o) for o in _triple(origin, "origin"))
        extent = _triple(extent, "extent") if extent is not None else (None, None, None)
        coordinates = _triple(coordinates, "coordinates") if coordinates is not None else (None, None, None)

        halo = tuple(0 if t is Topology.FLAT else h for h, t in zip(halo, topology))

        for axis in Axis:
            N, H, topo = size[axis], halo[axis], topology[axis]
            if N < 1:
                raise ConfigurationError(f"Grid size along {axis.name} must be positive, got {N}")
            if topo is Topology.FLAT and N != 1:
                raise ConfigurationError(f"Flat axis {axis.name} must have size 1, got {N}")
            if topo is not Topology.FLAT:
                if H < 1:
                    raise ConfigurationError(f"Halo along {axis.name} must be at least 1, got {H}")
                if H > N:
                    raise ConfigurationError(
                        f"Halo along {axis.name} ({H}) exceeds the number of cells ({N})"
                    )

        self.size = size
        self.halo = halo
        self.topology = topology
        self._flat = tuple(t is Topology.FLAT for t in topology)

        self._faces = []
        self._centers = []
        self._spacings = []
        extents = []
        for axis in Axis:
            faces = self._build_faces(axis, extent[axis], origin[axis], coordinates[axis])
            centers = 0.5 * (faces[1:] + faces[:-1])
            cell_widths = np.diff(faces)
            face_widths = np.empty_like(cell_widths)
            face_widths[1:] = np.diff(centers)
            face_widths[0] = cell_widths[0]
            self._faces.append(faces[:-1])
            self._centers.append(centers)
            self._spacings.append({FACE: face_widths, CENTER: cell_widths})
            H = self.halo[axis]
            extents.append(float(faces[H + self.size[axis]] - faces[H]))

        self.extent = tuple(extents)

        log.debug(f"Created {self!r}")

    def _build_faces(self, axis, length, origin, interior_faces):
        """Face positions for storage indices ``0 .. N + 2H`` (one past the last node)."""
        N, H, topo = self.size[axis], self.halo[axis], self.topology[axis]

        if interior_faces is not None:
            interior = np.asarray(interior_faces, dtype=np.float64)
            if interior.shape != (N + 1,):
                raise ConfigurationError(
                    f"Expected {N + 1} face coordinates along {axis.name}, got shape {interior.shape}"
                )
            if np.any(np.diff(interior) <= 0):
                raise ConfigurationError(f"Face coordinates along {axis.name} must be increasing")
        else:
            L = 1.0 if length is None and topo is Topology.FLAT else length
            if L is None or float(L) <= 0:
                raise ConfigurationError(f"Extent along {axis.name} must be positive, got {length!r}")
            interior = origin + float(L) * np.arange(N + 1) / N

        if H == 0:
            return interior

        m = np.arange(1, H + 1)
        if topo is Topology.PERIODIC:
            period = interior[-1] - interior[0]
            left = interior[N - m] - period
            right = interior[m] + period
        else:
            left = interior[0] - m * (interior[1] - interior[0])
            right = interior[-1] + m * (interior[-1] - interior[-2])

        return np.concatenate([left[::-1], interior, right])

    # ------------------------------------------------------------------
    # Sizes
    # ------------------------------------------------------------------

    @property
    def Nx(self):
        return self.size[0]

    @property
    def Ny(self):
        return self.size[1]

    @property
    def Nz(self):
        return self.size[2]

    @property
    def storage_shape(self):
        return tuple(N + 2 * H for N, H in zip(self.size, self.halo))

    @property
    def underlying_grid(self):
        return self

    # ------------------------------------------------------------------
    # Index mapping
    # ------------------------------------------------------------------

    def index(self, axis, idx):
        """Storage index of logical index ``idx`` along ``axis``."""
        if self._flat[axis]:
            return idx * 0
        return idx + self.halo[axis]

    def storage_index(self, i, j, k):
        return self.index(Axis.X, i), self.index(Axis.Y, j), self.index(Axis.Z, k)

    def node_range(self, axis, location: AxisLocation) -> range:
        """Logical indices of the interior nodes along one axis."""
        N, topo = self.size[axis], self.topology[axis]
        if topo is Topology.FLAT:
            return range(0, 1)
        if topo is Topology.BOUNDED and location is FACE:
            return range(0, N + 1)
        return range(0, N)

    def interior_shape(self, loc):
        return tuple(len(self.node_range(axis, loc.along(axis))) for axis in Axis)

    def interior_indices(self, loc):
        """Open-mesh logical indices of every interior node at ``loc``."""
        return np.ix_(*(np.arange(r.start, r.stop) for r in
                        (self.node_range(axis, loc.along(axis)) for axis in Axis)))

    def interior_slices(self, loc):
        """Storage slices covering the interior nodes at ``loc``."""
        slices = []
        for axis in Axis:
            r = self.node_range(axis, loc.along(axis))
            start = self.index(axis, r.start)
            slices.append(slice(start, start + len(r)))
        return tuple(slices)

    # ------------------------------------------------------------------
    # Coordinates and metrics
    # ------------------------------------------------------------------

    def node(self, axis, location: AxisLocation, idx):
        coords = self._faces[axis] if location is FACE else self._centers[axis]
        return coords[self.index(axis, idx)]

    def nodes(self, loc):
        """Coordinates ``(x, y, z)`` of the interior nodes at ``loc``, broadcastable."""
        i, j, k = self.interior_indices(loc)
        return (self.node(Axis.X, loc.x, i),
                self.node(Axis.Y, loc.y, j),
                self.node(Axis.Z, loc.z, k))

    def spacing(self, axis, location: AxisLocation, idx):
        """Grid spacing along ``axis`` at a node placed at ``location``."""
        return self._spacings[axis][location][self.index(axis, idx)]

    # ------------------------------------------------------------------
    # Masking capability (none on a plain grid)
    # ------------------------------------------------------------------

    def inactive(self, loc, i, j, k):
        return False

    def conditional_derivative(self, axis, loc, i, j, k, deriv, *args):
        """Evaluate ``deriv``; a grid without solid cells never masks."""
        return deriv(i, j, k, self, *args)

    def __repr__(self):
        topo = ", ".join(t.value for t in self.topology)
        extent = ", ".join(f"{L:.4g}" for L in self.extent)
        return f"RectilinearGrid(size={self.size}, extent=({extent}), halo={self.halo}, topology=({topo}))"
