"""Advection entry points keyed by ``(i, j, k, grid, scheme, U)``.

``U`` is a ``VelocityFields`` (u at fcc, v at cfc, optional w at ccf). The
returned values are the advection operator U·∇u, U·∇v and ∇·(U c); a time
stepper subtracts them from the tendencies.
"""


def momentum_advection_u(i, j, k, grid, scheme, U):
    return scheme.u_advection(i, j, k, grid, U)


def momentum_advection_v(i, j, k, grid, scheme, U):
    return scheme.v_advection(i, j, k, grid, U)


def tracer_advection(i, j, k, grid, scheme, U, c):
    return scheme.tracer_advection(i, j, k, grid, U, c)
