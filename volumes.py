# volumes.py
"""
Saturated liquid / vapor specific volume as a linear function of pressure.

The approximation is only meaningful for 0.05 <= p <= 10 (bar). Both lines
meet at the upper bound, where liquid and vapor volumes are equal.
"""
import math
from dataclasses import dataclass, asdict

PRESSURE_MIN = 0.05
PRESSURE_MAX = 10.0

DENOMINATOR = 9950000


class PressureError(ValueError):
    """Pressure could not be turned into a volume result."""


class PressureParseError(PressureError):
    pass


class InvalidPressure(PressureError):
    pass


@dataclass(frozen=True)
class VolumeResult:
    specific_volume_liquid: float
    specific_volume_vapor: float

    def to_dict(self):
        return asdict(self)


def get_volumes(pressure):
    """
    Return the liquid and vapor specific volumes at `pressure`.
    Raises InvalidPressure outside [PRESSURE_MIN, PRESSURE_MAX] or for NaN/inf.
    """
    if not math.isfinite(pressure) or pressure > PRESSURE_MAX or pressure < PRESSURE_MIN:
        raise InvalidPressure(f"incorrect pressure: {pressure!r}")

    v_liquid = (2450 * pressure + 10325) / DENOMINATOR
    v_vapor = (299999825 - 29996500 * pressure) / DENOMINATOR

    return VolumeResult(
        specific_volume_liquid=v_liquid,
        specific_volume_vapor=v_vapor,
    )
