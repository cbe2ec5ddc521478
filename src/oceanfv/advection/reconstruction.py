"""Reconstruction of a staggered quantity at a neighbouring location.

A reconstruction moves ``psi``, located at ``loc.flip(axis)``, onto ``loc``
along ``axis``. Face ``i`` sits between centres ``i-1`` and ``i``, centre ``i``
between faces ``i`` and ``i+1``; stencils are written for a face result and
shifted by one for a centre result.

Three families are provided:

- ``Centered(order)``: symmetric interpolation of order 2, 4 or 6
- ``UpwindBiased(order)``: linear left/right-biased stencils of order 1, 3, 5
- ``WENO(order)``: weighted essentially non-oscillatory, order 3 or 5

"Left-biased" reads one more point on the low-index side and is the upwind
reconstruction for a positive advecting velocity.

On an immersed grid the highest order whose stencil touches only active
nodes is selected per node, falling back to first order (or second order
for centred schemes), so values stored inside the solid never leak into
fluid reconstructions.
"""

from abc import ABC, abstractmethod

import numpy as np

from ..errors import ConfigurationError
from ..grids.locations import FACE, shift_index

LEFT = "left"
RIGHT = "right"
SYMMETRIC = "symmetric"


# ========================================================
# Stencil helpers
# ========================================================

# Interpolation to a face, offsets -m .. m-1, keyed by m = order // 2
_CENTERED_COEFFICIENTS = {
    1: (1 / 2, 1 / 2),
    2: (-1 / 12, 7 / 12, 7 / 12, -1 / 12),
    3: (1 / 60, -8 / 60, 37 / 60, 37 / 60, -8 / 60, 1 / 60),
}

# Left-biased interpolation to a face, offsets -r .. r-2, keyed by r = (order + 1) // 2.
# The right-biased stencil is the mirror image with the same coefficients.
_UPWIND_COEFFICIENTS = {
    1: (1.0,),
    2: (-1 / 6, 5 / 6, 2 / 6),
    3: (2 / 60, -13 / 60, 47 / 60, 27 / 60, -3 / 60),
}


def _offsets(bias, r):
    if bias == LEFT:
        return tuple(range(-r, r - 1))
    if bias == RIGHT:
        return tuple(range(r - 1, -r, -1))
    return tuple(range(-r, r))


def _stencil_nodes(axis, loc, offsets, i, j, k):
    shift = 0 if loc.along(axis) is FACE else 1
    return [shift_index(axis, offset + shift, i, j, k) for offset in offsets]


def _stencil_values(axis, loc, offsets, i, j, k, grid, psi, args):
    return [psi(*node, grid, *args) for node in _stencil_nodes(axis, loc, offsets, i, j, k)]


def _stencil_active(axis, loc, offsets, i, j, k, grid):
    source = loc.flip(axis)
    inactive = False
    for node in _stencil_nodes(axis, loc, offsets, i, j, k):
        inactive = inactive | grid.inactive(source, *node)
    return np.logical_not(inactive)


def _weighted_sum(coefficients, values):
    total = 0.0
    for c, value in zip(coefficients, values):
        total = total + c * value
    return total


# ========================================================
# Base class
# ========================================================


class Reconstruction(ABC):
    """Interpolation of a located quantity to a neighbouring location.

    Subclasses define ``order``, the stencil for each bias and the scheme
    used in its place next to solid nodes.
    """

    order = None
    is_biased = False

    @property
    def required_halo(self) -> int:
        """Halo width needed to reconstruct at every interior node."""
        return (self.order + 1) // 2

    @property
    def centered(self) -> "Reconstruction":
        """Scheme used for symmetric interpolation."""
        return Centered(self.order + 1)

    @abstractmethod
    def reduced(self):
        """Next lower-order scheme used where the stencil touches a solid node, or None."""

    @abstractmethod
    def stencil_offsets(self, bias):
        """Offsets, relative to a face result, of the points read for ``bias``."""

    @abstractmethod
    def _evaluate(self, bias, axis, loc, i, j, k, grid, psi, args, smoothness):
        """Reconstruction without any order reduction."""

    def interpolate(self, bias, axis, loc, i, j, k, grid, psi, *args, smoothness=None):
        """Reconstruct ``psi`` at ``loc`` along ``axis`` with the given bias.

        Parameters
        ----------
        bias : {"left", "right", "symmetric"}
        axis : Axis
        loc : Location
            Location of the result; ``psi`` lives at ``loc.flip(axis)``.
        grid : RectilinearGrid or ImmersedBoundaryGrid
        psi : callable
            Field or function ``psi(i, j, k, grid, *args)``.
        smoothness : sequence of (callable, tuple), optional
            Alternative sources for the WENO smoothness indicators, each
            located like ``psi``. Ignored by linear schemes.
        """
        if bias == SYMMETRIC and self.is_biased:
            return self.centered.interpolate(SYMMETRIC, axis, loc, i, j, k, grid, psi, *args)

        value = self._evaluate(bias, axis, loc, i, j, k, grid, psi, args, smoothness)
        fallback = self.reduced()
        if fallback is None or not grid.is_immersed:
            return value

        active = _stencil_active(axis, loc, self.stencil_offsets(bias), i, j, k, grid)
        lower = fallback.interpolate(bias, axis, loc, i, j, k, grid, psi, *args, smoothness=smoothness)
        return np.where(active, value, lower)

    def symmetric(self, axis, loc, i, j, k, grid, psi, *args):
        return self.interpolate(SYMMETRIC, axis, loc, i, j, k, grid, psi, *args)

    def left_biased(self, axis, loc, i, j, k, grid, psi, *args, smoothness=None):
        return self.interpolate(LEFT, axis, loc, i, j, k, grid, psi, *args, smoothness=smoothness)

    def right_biased(self, axis, loc, i, j, k, grid, psi, *args, smoothness=None):
        return self.interpolate(RIGHT, axis, loc, i, j, k, grid, psi, *args, smoothness=smoothness)

    def __repr__(self):
        return f"{type(self).__name__}(order={self.order})"

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self):
        return hash((type(self).__name__, self.order))


# ========================================================
# Concrete schemes
# ========================================================


class Centered(Reconstruction):
    """Symmetric interpolation of even order; biased calls are symmetric too."""

    def __init__(self, order: int = 2):
        if order not in (2, 4, 6):
            raise ConfigurationError(f"Centered reconstruction supports order 2, 4 or 6, got {order}")
        self.order = order

    @property
    def centered(self):
        return self

    def reduced(self):
        return Centered(self.order - 2) if self.order > 2 else None

    def stencil_offsets(self, bias):
        return _offsets(SYMMETRIC, self.order // 2)

    def _evaluate(self, bias, axis, loc, i, j, k, grid, psi, args, smoothness):
        values = _stencil_values(axis, loc, self.stencil_offsets(bias), i, j, k, grid, psi, args)
        return _weighted_sum(_CENTERED_COEFFICIENTS[self.order // 2], values)


class UpwindBiased(Reconstruction):
    """Linear upwind-biased reconstruction of odd order."""

    is_biased = True

    def __init__(self, order: int = 3):
        if order not in (1, 3, 5):
            raise ConfigurationError(f"Upwind-biased reconstruction supports order 1, 3 or 5, got {order}")
        self.order = order

    def reduced(self):
        return UpwindBiased(self.order - 2) if self.order > 1 else None

    def stencil_offsets(self, bias):
        return _offsets(bias, self.required_halo)

    def _evaluate(self, bias, axis, loc, i, j, k, grid, psi, args, smoothness):
        values = _stencil_values(axis, loc, self.stencil_offsets(bias), i, j, k, grid, psi, args)
        return _weighted_sum(_UPWIND_COEFFICIENTS[self.required_halo], values)


def _weno3_candidates(s):
    return [(-s[0] + 3 * s[1]) / 2, (s[1] + s[2]) / 2]


def _weno3_smoothness(s):
    return [(s[1] - s[0]) ** 2, (s[2] - s[1]) ** 2]


def _weno5_candidates(s):
    return [
        (2 * s[0] - 7 * s[1] + 11 * s[2]) / 6,
        (-s[1] + 5 * s[2] + 2 * s[3]) / 6,
        (2 * s[2] + 5 * s[3] - s[4]) / 6,
    ]


def _weno5_smoothness(s):
    return [
        13 / 12 * (s[0] - 2 * s[1] + s[2]) ** 2 + 1 / 4 * (s[0] - 4 * s[1] + 3 * s[2]) ** 2,
        13 / 12 * (s[1] - 2 * s[2] + s[3]) ** 2 + 1 / 4 * (s[1] - s[3]) ** 2,
        13 / 12 * (s[2] - 2 * s[3] + s[4]) ** 2 + 1 / 4 * (3 * s[2] - 4 * s[3] + s[4]) ** 2,
    ]


_WENO_TABLES = {
    3: (_weno3_candidates, _weno3_smoothness, (1 / 3, 2 / 3)),
    5: (_weno5_candidates, _weno5_smoothness, (1 / 10, 6 / 10, 3 / 10)),
}


class WENO(Reconstruction):
    """Jiang-Shu weighted essentially non-oscillatory reconstruction.

    Stencil values are ordered from the upwind side, so the same candidate
    and smoothness formulas serve both biases. With smooth data the weights
    approach the optimal ones and the result equals ``UpwindBiased(order)``.
    """

    is_biased = True

    def __init__(self, order: int = 5, epsilon: float = 1e-8):
        if order not in _WENO_TABLES:
            raise ConfigurationError(f"WENO reconstruction supports order 3 or 5, got {order}")
        if epsilon <= 0:
            raise ConfigurationError(f"WENO epsilon must be positive, got {epsilon}")
        self.order = order
        self.epsilon = float(epsilon)

    def reduced(self):
        return WENO(self.order - 2, self.epsilon) if self.order > 3 else UpwindBiased(1)

    def stencil_offsets(self, bias):
        return _offsets(bias, self.required_halo)

    def _evaluate(self, bias, axis, loc, i, j, k, grid, psi, args, smoothness):
        candidates, smoothness_of, optimal = _WENO_TABLES[self.order]
        offsets = self.stencil_offsets(bias)

        values = _stencil_values(axis, loc, offsets, i, j, k, grid, psi, args)
        if smoothness:
            betas = None
            for source, source_args in smoothness:
                s = _stencil_values(axis, loc, offsets, i, j, k, grid, source, source_args)
                beta = smoothness_of(s)
                betas = beta if betas is None else [a + b for a, b in zip(betas, beta)]
            betas = [b / len(smoothness) for b in betas]
        else:
            betas = smoothness_of(values)

        alphas = [d / (self.epsilon + beta) ** 2 for d, beta in zip(optimal, betas)]
        total = sum(alphas)
        return _weighted_sum([a / total for a in alphas], candidates(values))


# ========================================================
# Module-level entry points
# ========================================================


def symmetric_interpolate(loc, axis, i, j, k, grid, scheme, psi, *args):
    return scheme.symmetric(axis, loc, i, j, k, grid, psi, *args)


def left_biased_interpolate(loc, axis, i, j, k, grid, scheme, psi, *args, smoothness=None):
    return scheme.left_biased(axis, loc, i, j, k, grid, psi, *args, smoothness=smoothness)


def right_biased_interpolate(loc, axis, i, j, k, grid, scheme, psi, *args, smoothness=None):
    return scheme.right_biased(axis, loc, i, j, k, grid, psi, *args, smoothness=smoothness)


def create_reconstruction(method: str = "upwind", order: int = 3, **kwargs) -> Reconstruction:
    """Create a reconstruction scheme from configuration.

    Parameters
    ----------
    method : str
        "centered", "upwind" or "weno"
    order : int
        Formal order of accuracy

    Returns
    -------
    Reconstruction
    """
    method_lower = str(method).lower()

    if method_lower == "centered":
        return Centered(order=order)
    elif method_lower in ("upwind", "upwind_biased"):
        return UpwindBiased(order=order)
    elif method_lower == "weno":
        return WENO(order=order, **kwargs)
    else:
        raise ConfigurationError(
            f"Unknown reconstruction method: {method}. "
            f"Use 'centered', 'upwind', or 'weno'."
        )
