"""Pedal box handling: filtering, travel, torque and regen requests, plausibility checks."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from .adc import AdcFilter
from .messages import PedalReadings
from .parameters import (
    ADC_ACCEL_1_CHANNEL,
    ADC_ACCEL_2_CHANNEL,
    ADC_BRAKE_1_CHANNEL,
    ADC_STEERING_CHANNEL,
    APPS_ALLOWABLE_TRAVEL_DEVIATION,
    BRAKE_ACTIVE,
    END_ACCELERATOR_PEDAL_1,
    END_ACCELERATOR_PEDAL_2,
    END_BRAKE_PEDAL,
    FILTERING_ALPHA_10HZ,
    FILTERING_ALPHA_1HZ,
    MAX_ACCELERATOR_PEDAL_1,
    MAX_ACCELERATOR_PEDAL_2,
    MAX_BRAKE_PEDAL,
    MIN_ACCELERATOR_PEDAL_1,
    MIN_ACCELERATOR_PEDAL_2,
    MIN_BRAKE_PEDAL,
    REGEN_NM,
    RPM_TIMEOUT,
    START_ACCELERATOR_PEDAL_1,
    START_ACCELERATOR_PEDAL_2,
    START_BRAKE_PEDAL,
    TORQUE_1,
    WHEELSPEED_TOOTH_COUNT,
)
from .pedal_sensor import PedalSensor

RPM_BUFFER_SIZE = 5
MAX_PLAUSIBLE_RPM = 6000
_TINY_TRAVEL = 0.1

APPS1_SCALE = 0.001220703125
APPS2_SCALE = 0.00080586080586081
BSE1_SCALE = 0.001220703125

# Accelerator positions used by the APPS / brake plausibility check (25 % and 5 % travel).
_APPS1_QUARTER = (END_ACCELERATOR_PEDAL_1 - START_ACCELERATOR_PEDAL_1) // 4 + START_ACCELERATOR_PEDAL_1
_APPS2_QUARTER = (END_ACCELERATOR_PEDAL_2 - START_ACCELERATOR_PEDAL_2) // 4 + START_ACCELERATOR_PEDAL_2
_APPS1_FIVE_PCT = (END_ACCELERATOR_PEDAL_1 - START_ACCELERATOR_PEDAL_1) // 20 + START_ACCELERATOR_PEDAL_1
_APPS2_FIVE_PCT = (END_ACCELERATOR_PEDAL_2 - START_ACCELERATOR_PEDAL_2) // 20 + START_ACCELERATOR_PEDAL_2


def _int16(value: float) -> int:
    return ((int(value) + 0x8000) & 0xFFFF) - 0x8000


def _half(total: int) -> int:
    """Integer halving that truncates toward zero."""
    return int(total / 2)


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        if numerator == 0:
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


@dataclass(frozen=True)
class PedalTravels:
    """Pedal travels in thousandths (-1000 when a sensor is out of range)."""

    apps1_travel: int
    apps2_travel: int
    bse1_travel: int


@dataclass(frozen=True)
class PedalVerification:
    """Outcome of the rules-required pedal plausibility checks."""

    accel_is_plausible: bool
    brake_is_plausible: bool
    accel_and_brake_plausible: bool
    implausibility_occurred: bool

    @property
    def ok(self) -> bool:
        """True when every check passes and no implausibility is latched."""
        return (
            self.accel_is_plausible
            and self.brake_is_plausible
            and self.accel_and_brake_plausible
            and not self.implausibility_occurred
        )


@dataclass
class WheelSpeedSensor:
    """Wheel speed from tooth period counts, averaged over the last few readings.

    ``timer_hz`` is the frequency of the timer the period counts are measured in.
    """

    timer_hz: float
    current_rpm: float = 0.0
    last_change_time: int = 0
    _buffer: list[float] = field(default_factory=lambda: [0.0] * RPM_BUFFER_SIZE, repr=False)
    _buffer_index: int = field(default=0, repr=False)
    _sum: int = field(default=0, repr=False)
    _count: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        if self.timer_hz <= 0:
            raise ValueError(f"timer frequency must be positive, got {self.timer_hz}")

    def update(self, now_ms: int, counts: Iterable[int]) -> None:
        """Take the period counts measured since the last call, at time ``now_ms``.

        Speed drops to zero when no count has arrived for longer than the timeout;
        every second count yields a new reading.
        """
        if now_ms - self.last_change_time > RPM_TIMEOUT:
            self.current_rpm = 0.0
        for count in counts:
            self._sum += int(count)
            self._count += 1
            self.last_change_time = now_ms
            if self._count > 1:
                self._take_reading()

    def _take_reading(self) -> None:
        mean_count = self._sum // self._count
        if mean_count > 0:
            rpm = self.timer_hz / mean_count * 60 / WHEELSPEED_TOOTH_COUNT
        else:
            rpm = math.inf
        if rpm > MAX_PLAUSIBLE_RPM:
            rpm = self.current_rpm
        self._buffer[self._buffer_index] = rpm
        self._buffer_index = (self._buffer_index + 1) % RPM_BUFFER_SIZE
        self.current_rpm = sum(self._buffer) / RPM_BUFFER_SIZE
        self._sum = 0
        self._count = 0


class PedalHandler:
    """Reads the pedal sensors and turns them into torque requests and fault flags."""

    def __init__(self, wheel_timer_hz: float) -> None:
        self.adc = AdcFilter()
        self.apps1 = PedalSensor(
            MIN_ACCELERATOR_PEDAL_1,
            MAX_ACCELERATOR_PEDAL_1,
            START_ACCELERATOR_PEDAL_1,
            END_ACCELERATOR_PEDAL_1,
            0.0,
            APPS1_SCALE,
            0.0,
        )
        self.apps2 = PedalSensor(
            MIN_ACCELERATOR_PEDAL_2,
            MAX_ACCELERATOR_PEDAL_2,
            START_ACCELERATOR_PEDAL_2,
            END_ACCELERATOR_PEDAL_2,
            0.0,
            APPS2_SCALE,
            0.0,
        )
        self.bse1 = PedalSensor(
            MIN_BRAKE_PEDAL,
            MAX_BRAKE_PEDAL,
            START_BRAKE_PEDAL,
            END_BRAKE_PEDAL,
            0.0,
            BSE1_SCALE,
            0.0,
        )
        self.steering_angle = 0
        self.pedal_readings = PedalReadings()
        self.brake_is_active = False
        self.front_left = WheelSpeedSensor(wheel_timer_hz)
        self.front_right = WheelSpeedSensor(wheel_timer_hz)
        self._implausibility_occurred = False
        self._smoothed_regen = 0

    @property
    def accel1(self) -> int:
        """Filtered reading of accelerator sensor 1."""
        return self.apps1.adc_reading

    @property
    def accel2(self) -> int:
        """Filtered reading of accelerator sensor 2."""
        return self.apps2.adc_reading

    @property
    def brake1(self) -> int:
        """Filtered reading of the brake sensor."""
        return self.bse1.adc_reading

    def read_pedal_values(self, raw_readings: Iterable[int]) -> bool:
        """Filter a fresh set of raw ADC samples; return whether the brake is active."""
        self.adc.update(raw_readings, FILTERING_ALPHA_10HZ)
        self.apps1.adc_reading = self.adc.reading(ADC_ACCEL_1_CHANNEL)
        self.apps2.adc_reading = self.adc.reading(ADC_ACCEL_2_CHANNEL)
        self.bse1.adc_reading = self.adc.reading(ADC_BRAKE_1_CHANNEL)
        self.steering_angle = self.adc.reading(ADC_STEERING_CHANNEL)
        self.pedal_readings = PedalReadings(
            accelerator_pedal_1=self.accel1,
            accelerator_pedal_2=self.accel2,
            brake_transducer_1=self.brake1,
            brake_transducer_2=self.steering_angle,
        )
        self.brake_is_active = self.brake1 >= BRAKE_ACTIVE
        return self.brake_is_active

    def run_pedals(self) -> None:
        """Refresh travel and voltage of every pedal sensor."""
        for sensor in (self.apps1, self.apps2, self.bse1):
            sensor.run()

    def apps_travel(self) -> float:
        """Mean travel ratio of the two accelerator sensors."""
        return (self.apps1.travel_ratio + self.apps2.travel_ratio) / 2

    def pedal_travels(self) -> PedalTravels:
        """Travel of each pedal sensor in thousandths."""
        return PedalTravels(
            _int16(self.apps1.travel_ratio * 1000),
            _int16(self.apps2.travel_ratio * 1000),
            _int16(self.bse1.travel_ratio * 1000),
        )

    def calculate_torque(self, max_torque: int) -> int:
        """Torque request from accelerator travel, between zero and ``max_torque``."""
        torque1 = min(int(self.apps1.travel_ratio * max_torque), max_torque)
        torque2 = min(int(self.apps2.travel_ratio * max_torque), max_torque)
        torque = _half(torque1 + torque2)
        return max(0, min(torque, max_torque))

    def calculate_regen(self) -> int:
        """Smoothed (negative) regen torque request from brake travel, in Nm x10."""
        regen_maximum = REGEN_NM * -10
        requested = _int16(self.bse1.travel_ratio * regen_maximum)
        self._smoothed_regen = _int16(
            FILTERING_ALPHA_1HZ * self._smoothed_regen
            + (1 - FILTERING_ALPHA_1HZ) * requested
        )
        return self._smoothed_regen

    def reset_regen(self) -> None:
        """Forget the smoothed regen request."""
        self._smoothed_regen = 0

    def verify_pedals(self) -> PedalVerification:
        """Run the sensor range, APPS agreement and APPS/brake plausibility checks.

        An implausibility stays latched until the accelerator returns below 5 % travel.
        """
        max_torque = TORQUE_1 * 10
        torque1 = int(self.apps1.travel_ratio * max_torque)
        torque2 = int(self.apps2.travel_ratio * max_torque)
        torque_diff = _ratio(float(abs(torque1 - torque2)), float(_half(torque1 + torque2)))
        apps_above_tiny_travel = (
            self.apps1.travel_ratio > _TINY_TRAVEL or self.apps2.travel_ratio > _TINY_TRAVEL
        )

        if not MIN_ACCELERATOR_PEDAL_1 <= self.accel1 <= MAX_ACCELERATOR_PEDAL_1:
            accel_ok = False
        elif not MIN_ACCELERATOR_PEDAL_2 <= self.accel2 <= MAX_ACCELERATOR_PEDAL_2:
            accel_ok = False
        elif torque_diff * 100 > APPS_ALLOWABLE_TRAVEL_DEVIATION and apps_above_tiny_travel:
            accel_ok = False
        else:
            accel_ok = True

        brake_ok = MIN_BRAKE_PEDAL <= self.brake1 <= MAX_BRAKE_PEDAL

        accel_pressed = self.accel1 > _APPS1_QUARTER or self.accel2 > _APPS2_QUARTER
        if accel_pressed and self.brake_is_active:
            accel_brake_ok = False
        else:
            accel_brake_ok = True
            if self.accel1 < _APPS1_FIVE_PCT and self.accel2 < _APPS2_FIVE_PCT:
                self._implausibility_occurred = False

        if not (accel_brake_ok and brake_ok and accel_ok):
            self._implausibility_occurred = True

        return PedalVerification(
            accel_is_plausible=accel_ok,
            brake_is_plausible=brake_ok,
            accel_and_brake_plausible=accel_brake_ok,
            implausibility_occurred=self._implausibility_occurred,
        )