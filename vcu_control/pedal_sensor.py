"""Pedal position sensor: range checking and travel ratio from an ADC reading."""

from __future__ import annotations

from dataclasses import dataclass, field

OUT_OF_RANGE = -1.0


@dataclass
class PedalSensor:
    """A pedal sensor with implausibility limits and a travel window.

    ``adc_reading`` is written by whoever samples the ADC; :meth:`run` then
    refreshes ``travel_ratio`` and ``voltage`` from it.
    """

    low_threshold: int
    high_threshold: int
    start_threshold: int
    end_threshold: int
    travel_ratio: float = 0.0
    scaling_factor: float = 1.0
    voltage: float = 0.0
    adc_reading: int = 0
    below_range: bool = field(default=False, init=False)
    above_range: bool = field(default=False, init=False)

    def update_out_of_range_flags(self) -> None:
        """Set the below/above range flags from the current reading."""
        self.below_range = self.adc_reading < self.low_threshold
        self.above_range = (
            not self.below_range and self.adc_reading > self.high_threshold
        )

    def calculate_travel(self) -> float:
        """Travel from 0.0 to 1.0 across the travel window, or -1.0 when out of range."""
        self.update_out_of_range_flags()
        if self.below_range or self.above_range:
            return OUT_OF_RANGE
        if self.adc_reading < self.start_threshold:
            return 0.0
        if self.adc_reading > self.end_threshold:
            return 1.0
        span = self.end_threshold - self.start_threshold
        if span == 0:
            return 0.0
        return (self.adc_reading - self.start_threshold) / span

    def calculate_voltage(self) -> float:
        """The reading converted to volts with the scaling factor."""
        return float(self.adc_reading) * self.scaling_factor

    def run(self) -> None:
        """Refresh travel ratio and voltage from the current reading."""
        self.travel_ratio = self.calculate_travel()
        self.voltage = self.calculate_voltage()