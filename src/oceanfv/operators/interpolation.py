"""Two-point averaging between neighbouring staggered nodes.

Same neighbour convention as the difference operators: averaging onto face
``i`` uses centres ``i-1`` and ``i``; averaging onto centre ``i`` uses faces
``i`` and ``i+1``.
"""

from ..grids.locations import Axis, FACE, CENTER


def average_x_face(i, j, k, grid, f, *args):
    return 0.5 * (f(i, j, k, grid, *args) + f(i - 1, j, k, grid, *args))


def average_x_center(i, j, k, grid, f, *args):
    return 0.5 * (f(i + 1, j, k, grid, *args) + f(i, j, k, grid, *args))


def average_y_face(i, j, k, grid, f, *args):
    return 0.5 * (f(i, j, k, grid, *args) + f(i, j - 1, k, grid, *args))


def average_y_center(i, j, k, grid, f, *args):
    return 0.5 * (f(i, j + 1, k, grid, *args) + f(i, j, k, grid, *args))


def average_z_face(i, j, k, grid, f, *args):
    return 0.5 * (f(i, j, k, grid, *args) + f(i, j, k - 1, grid, *args))


def average_z_center(i, j, k, grid, f, *args):
    return 0.5 * (f(i, j, k + 1, grid, *args) + f(i, j, k, grid, *args))


AVERAGES = {
    (Axis.X, FACE): average_x_face,
    (Axis.X, CENTER): average_x_center,
    (Axis.Y, FACE): average_y_face,
    (Axis.Y, CENTER): average_y_center,
    (Axis.Z, FACE): average_z_face,
    (Axis.Z, CENTER): average_z_center,
}
