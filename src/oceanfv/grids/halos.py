"""Single-process halo filling.

Periodic axes wrap. On bounded axes, centred quantities get a zero-gradient
halo, and quantities on faces normal to the wall are impenetrable: the
boundary faces are set to zero and the halo mirrors the interior with
opposite sign. Flat axes have no halo.

Exchange between ranks of a decomposed domain is outside this package.
"""

from .locations import Axis, FACE
from .rectilinear_grid import Topology


def _along(axis, index):
    slices = [slice(None)] * 3
    slices[axis] = index
    return tuple(slices)


def _fill_axis(data, grid, axis, location):
    N, H = grid.size[axis], grid.halo[axis]
    topology = grid.topology[axis]

    if topology is Topology.FLAT:
        return

    if topology is Topology.PERIODIC:
        data[_along(axis, slice(0, H))] = data[_along(axis, slice(N, N + H))]
        data[_along(axis, slice(N + H, N + 2 * H))] = data[_along(axis, slice(H, 2 * H))]
        return

    if location is FACE:
        data[_along(axis, H)] = 0
        data[_along(axis, N + H)] = 0
        for m in range(1, H + 1):
            data[_along(axis, H - m)] = -data[_along(axis, H + m)]
        for m in range(1, H):
            data[_along(axis, N + H + m)] = -data[_along(axis, N + H - m)]
        return

    data[_along(axis, slice(0, H))] = data[_along(axis, slice(H, H + 1))]
    data[_along(axis, slice(N + H, N + 2 * H))] = data[_along(axis, slice(N + H - 1, N + H))]


def fill_halo_regions(*fields):
    """Refresh the halo of every field in place. ``None`` entries are skipped."""
    for field in fields:
        if field is None:
            continue
        for axis in Axis:
            _fill_axis(field.data, field.grid, axis, field.loc.along(axis))
    return fields
