"""
Exception types raised by the apparent-position pipeline.

Both types subclass the builtin that callers would otherwise catch, so
``except RuntimeError`` around a Kepler solve and ``except ValueError``
around an assembler call keep working.
"""


class KeplerConvergenceError(RuntimeError):
    """Newton or universal-variable iteration exceeded its iteration cap."""

    def __init__(self, regime: str, iterations: int, residual: float) -> None:
        self.regime = regime
        self.iterations = iterations
        self.residual = residual
        super().__init__(
            f"Convergence problems in {regime} Kepler solver: "
            f"{iterations} iterations, last residual {residual:.3e}"
        )


class EpochMismatchError(ValueError):
    """Ecliptic coordinate providers combined in one call declare different epochs."""

    def __init__(self, earth_epoch, body_epoch) -> None:
        self.earth_epoch = earth_epoch
        self.body_epoch = body_epoch
        super().__init__(
            f"Epoch mismatch: Earth provider is {earth_epoch.name}, "
            f"body provider is {body_epoch.name}"
        )
