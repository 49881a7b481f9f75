"""Shared vehicle data records: wheel speeds, inertial navigation data, lifetime totals."""

from __future__ import annotations

from dataclasses import dataclass

from .parameters import WHEEL_CIRCUMFERENCE

_MIN_AVG_RPM = 10


def _to_uint16(value: float) -> int:
    return int(value) & 0xFFFF


@dataclass
class WheelSpeeds:
    """Wheel speeds in RPM for the four corners of the car."""

    fl: float = 0.0
    fr: float = 0.0
    rl: float = 0.0
    rr: float = 0.0

    def _averages(self) -> tuple[float, float]:
        return (self.fl + self.fr) / 2, (self.rl + self.rr) / 2

    def calc_slip(self) -> float:
        """Slip ratio of rear over front axle, zero when either axle is nearly still."""
        front, rear = self._averages()
        if front <= _MIN_AVG_RPM or rear <= _MIN_AVG_RPM:
            return 0.0
        return rear / front - 1

    def diag_data(self) -> tuple[int, int, int]:
        """Front RPM x10, rear RPM x10 and slip x100, each truncated to 16 bits."""
        front, rear = self._averages()
        return (
            _to_uint16(front * 10),
            _to_uint16(rear * 10),
            _to_uint16(self.calc_slip() * 100),
        )


@dataclass
class VnData:
    """Attitude, rates, velocities and accelerations from the inertial navigation unit."""

    yaw: float = 0.0
    pitch: float = 0.0
    roll: float = 0.0
    w_x: float = 0.0
    w_y: float = 0.0
    w_z: float = 0.0
    velocity_north: float = 0.0
    velocity_east: float = 0.0
    velocity_down: float = 0.0
    velocity_magnitude: float = 0.0
    accel_x: float = 0.0
    accel_y: float = 0.0
    accel_z: float = 0.0
    last_update_time: int = 0

    def mock_ws_rpm(self) -> float:
        """Wheel RPM that the measured ground speed corresponds to."""
        return self.velocity_magnitude / WHEEL_CIRCUMFERENCE * 60


@dataclass
class TimeAndDistance:
    """Lifetime on-time in seconds and distance in metres."""

    vcu_lifetime_ontime: int = 0
    vcu_lifetime_distance: int = 0