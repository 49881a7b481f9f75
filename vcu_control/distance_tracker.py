"""Distance, energy and efficiency accounting from current, voltage and speed samples."""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass

_UINT32_MASK = 0xFFFFFFFF
_MIN_POWER_FOR_EFFICIENCY = 0.01
_EFFICIENCY_WINDOW = 100


def _ratio(numerator: float, denominator: float) -> float:
    """Floating-point division that yields NaN or infinity instead of raising."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


def _to_uint16(value: float) -> int:
    if not math.isfinite(value):
        return 0
    return int(value) & 0xFFFF


class RollingAverage:
    """Mean of the most recent ``max_size`` values."""

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size
        self._buffer: deque[float] = deque()
        self._sum = 0.0

    def __len__(self) -> int:
        return len(self._buffer)

    def add(self, value: float) -> None:
        """Add a value, dropping the oldest once the window is full."""
        self._buffer.append(value)
        self._sum += value
        if len(self._buffer) > self.max_size:
            self._sum -= self._buffer.popleft()

    def average(self) -> float:
        """Mean of the values in the window, or zero when it is empty."""
        if not self._buffer:
            return 0.0
        return self._sum / len(self._buffer)


@dataclass
class EnergyData:
    """Scaled 16-bit summary of a distance tracker, as sent on the bus."""

    energy_wh: int
    eff_inst: int
    distance_m: int
    efficiency_kmkwh: int


@dataclass
class _Sample:
    new: float = 0.0
    old: float = 0.0

    def push(self, value: float) -> None:
        self.old = self.new
        self.new = value


class DistanceTracker:
    """Integrates distance, energy and charge between successive samples.

    Each update integrates the values that were current one sample earlier,
    so a reading only contributes once a later reading has arrived.
    """

    def __init__(self) -> None:
        self.capacity_ah = 0.0
        self.energy_wh = 0.0
        self.distance_m = 0.0
        self.efficiency_kmkwh = 0.0
        self.efficiency_instantaneous = 0.0
        self._power = _Sample()
        self._current = _Sample()
        self._velocity = _Sample()
        self._time = 0
        self._avg_efficiency = RollingAverage(_EFFICIENCY_WINDOW)

    def tick(self, newtime: int) -> None:
        """Move the reference time to ``newtime`` (ms) without integrating."""
        self._time = newtime

    def update(
        self, amps: float, volts: float, rpm: float, circumference: float, newtime: int
    ) -> None:
        """Integrate up to ``newtime`` and record a sample with speed from wheel RPM."""
        self._advance(amps, volts, rpm / 60 * circumference, newtime)

    def update_with_velocity(
        self, amps: float, volts: float, velocity: float, newtime: int
    ) -> None:
        """Integrate up to ``newtime`` and record a sample with speed in m/s."""
        self._advance(amps, volts, velocity, newtime)

    def _advance(self, amps: float, volts: float, velocity: float, newtime: int) -> None:
        elapsed_s = ((newtime - self._time) & _UINT32_MASK) / 1000
        self._time = newtime
        hours = elapsed_s / 3600

        self.distance_m += elapsed_s * self._velocity.old
        self.energy_wh += hours * self._power.old
        self.capacity_ah += hours * self._current.old

        self.efficiency_kmkwh = _ratio(self.distance_m, self.energy_wh)
        if self._power.old <= _MIN_POWER_FOR_EFFICIENCY:
            self.efficiency_instantaneous = 0.0
        else:
            self.efficiency_instantaneous = _ratio(
                elapsed_s * self._velocity.old, hours * self._power.old
            )
        self._avg_efficiency.add(self.efficiency_instantaneous)

        self._current.push(amps)
        self._power.push(amps * volts)
        self._velocity.push(velocity)

    def get_data(self) -> EnergyData:
        """Energy x10, averaged efficiency x1000, metres and efficiency x1000."""
        return EnergyData(
            energy_wh=_to_uint16(self.energy_wh * 10),
            eff_inst=_to_uint16(self._avg_efficiency.average() * 1000),
            distance_m=_to_uint16(self.distance_m),
            efficiency_kmkwh=_to_uint16(self.efficiency_kmkwh * 1000),
        )