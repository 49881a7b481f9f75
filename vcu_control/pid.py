"""Discrete PID controller with output clamping, bang-bang zones and a fixed time step."""

from __future__ import annotations


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class PID:
    """PID controller driven by explicit timestamps in milliseconds.

    The output keeps its last value between steps. A new step is only
    computed once at least ``time_step`` ms have passed since the previous one.
    """

    def __init__(
        self, output_min: float, output_max: float, kp: float, ki: float, kd: float
    ) -> None:
        if output_min > output_max:
            raise ValueError(
                f"output_min ({output_min}) must not exceed output_max ({output_max})"
            )
        self.output_min = output_min
        self.output_max = output_max
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.output = 0.0
        self._time_step = 1000.0
        self._bang_on = 0.0
        self._bang_off = 0.0
        self._integral = 0.0
        self._previous_error = 0.0
        self._last_step: float | None = None

    @property
    def time_step(self) -> float:
        """Minimum interval between two computed steps, in ms."""
        return self._time_step

    def set_gains(self, kp: float, ki: float, kd: float) -> None:
        """Replace the proportional, integral and derivative gains."""
        self.kp = kp
        self.ki = ki
        self.kd = kd

    def set_bang_bang(self, on: float, off: float | None = None) -> None:
        """Drive the output to its limits when the error leaves ``[-off, on]``.

        A zero threshold disables that side; ``off`` defaults to ``on``.
        """
        self._bang_on = on
        self._bang_off = on if off is None else off

    def set_time_step(self, step: float) -> None:
        """Set the minimum interval between computed steps, in ms."""
        if step < 0:
            raise ValueError(f"time step must not be negative, got {step}")
        self._time_step = step

    def reset(self, now: float) -> None:
        """Clear the integral and error history, starting a new step at ``now``."""
        self._last_step = now
        self._integral = 0.0
        self._previous_error = 0.0

    def run(self, value: float, setpoint: float, now: float) -> float:
        """Advance the controller to ``now`` with a new measurement; return the output."""
        error = setpoint - value
        if self._bang_on and error > self._bang_on:
            self.output = self.output_max
            self._last_step = now
            return self.output
        if self._bang_off and -error > self._bang_off:
            self.output = self.output_min
            self._last_step = now
            return self.output

        if self._last_step is None:
            self.reset(now)
        dt = now - self._last_step
        if dt >= self._time_step:
            self._last_step = now
            self._integral += (error + self._previous_error) / 2 * dt / 1000.0
            if self.ki:
                low, high = sorted(
                    (self.output_min / self.ki, self.output_max / self.ki)
                )
                self._integral = _clamp(self._integral, low, high)
            derivative = (error - self._previous_error) / dt if dt else 0.0
            self._previous_error = error
            raw = self.kp * error + self.ki * self._integral + self.kd * derivative
            self.output = _clamp(raw, self.output_min, self.output_max)
        return self.output