"""Exceptions raised while configuring grids, operators and schemes."""


class ConfigurationError(ValueError):
    """Invalid grid, location or scheme configuration.

    Raised once at setup time, before any per-node evaluation. Operators
    themselves never raise.
    """
