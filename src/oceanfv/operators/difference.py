"""Unmasked first differences between neighbouring staggered nodes.

``delta_x_face`` differences centre values onto face ``i`` (``c[i] - c[i-1]``);
``delta_x_center`` differences face values onto centre ``i`` (``u[i+1] - u[i]``).
The operand ``f`` is a Field or any function ``f(i, j, k, grid, *args)``.
"""

from ..grids.locations import Axis, FACE, CENTER


def delta_x_face(i, j, k, grid, f, *args):
    return f(i, j, k, grid, *args) - f(i - 1, j, k, grid, *args)


def delta_x_center(i, j, k, grid, f, *args):
    return f(i + 1, j, k, grid, *args) - f(i, j, k, grid, *args)


def delta_y_face(i, j, k, grid, f, *args):
    return f(i, j, k, grid, *args) - f(i, j - 1, k, grid, *args)


def delta_y_center(i, j, k, grid, f, *args):
    return f(i, j + 1, k, grid, *args) - f(i, j, k, grid, *args)


def delta_z_face(i, j, k, grid, f, *args):
    return f(i, j, k, grid, *args) - f(i, j, k - 1, grid, *args)


def delta_z_center(i, j, k, grid, f, *args):
    return f(i, j, k + 1, grid, *args) - f(i, j, k, grid, *args)


# Keyed by (axis, where the result lives along that axis)
DIFFERENCES = {
    (Axis.X, FACE): delta_x_face,
    (Axis.X, CENTER): delta_x_center,
    (Axis.Y, FACE): delta_y_face,
    (Axis.Y, CENTER): delta_y_center,
    (Axis.Z, FACE): delta_z_face,
    (Axis.Z, CENTER): delta_z_center,
}
