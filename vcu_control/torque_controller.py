"""Traction control: torque strategies that limit the driver's request against wheel slip."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from .pid import PID
from .vehicle_data import WheelSpeeds

_MIN_AVG_RPM = 10


def _int16(value: float) -> int:
    return ((int(value) + 0x8000) & 0xFFFF) - 0x8000


def _axle_averages(wheel_speeds: WheelSpeeds) -> tuple[float, float]:
    front = (wheel_speeds.fl + wheel_speeds.fr) / 2
    rear = (wheel_speeds.rl + wheel_speeds.rr) / 2
    return front, rear


class TorqueControlType(IntEnum):
    """Available traction control strategies."""

    DRIVER_CONTROL = 0
    PID = 1
    SLIP_TIME = 2


NUM_TORQUE_CONTROLLERS = len(TorqueControlType)


@dataclass(frozen=True)
class TorqueDiagData:
    """Diagnostic snapshot of a torque controller."""

    elapsed_time: int
    output_torque: int
    control_type: TorqueControlType


class TorqueController:
    """Torque controller that passes the driver's request straight through."""

    control_type: ClassVar[TorqueControlType] = TorqueControlType.DRIVER_CONTROL

    def __init__(self) -> None:
        self._elapsed_time = 0
        self._driver_torque_request = 0
        self._tc_torque_request = 0
        self._output_torque = 0

    @property
    def torque_output(self) -> int:
        """The torque command recorded by the last calculation."""
        return self._output_torque

    @property
    def unclamped_torque(self) -> int:
        """The controller's torque request before clamping to the driver's request."""
        return self._tc_torque_request

    def init(self, sys_time: int) -> None:
        """Clear all recorded torque values."""
        self._driver_torque_request = 0
        self._tc_torque_request = 0
        self._output_torque = 0
        self._elapsed_time = 0

    def calculate_torque(
        self, elapsed_time: int, max_torque: int, wheel_speeds: WheelSpeeds
    ) -> int:
        """Torque to command for the driver's request ``max_torque``; here unchanged."""
        return int(max_torque)

    def diag_data(self) -> TorqueDiagData:
        """Elapsed time, output torque and controller type."""
        return TorqueDiagData(
            elapsed_time=self._elapsed_time,
            output_torque=_int16(self._output_torque),
            control_type=self.control_type,
        )

    def _finish(self, torque: float, max_torque: int) -> int:
        self._tc_torque_request = _int16(torque)
        torque = min(torque, max_torque)
        torque = max(torque, 0)
        self._output_torque = _int16(torque)
        return self._output_torque


class PidTorqueController(TorqueController):
    """Torque is reduced by a PID loop that holds rear-wheel slip below a target."""

    control_type: ClassVar[TorqueControlType] = TorqueControlType.PID

    TIRE_SLIP_THRESHOLD = 0.3
    TIRE_SLIP_HIGH = 0.5
    OUTPUT_MIN = -0.4
    OUTPUT_MAX = 0.0
    TIME_STEP_MS = 5

    def __init__(self, kp: float = 1.0, ki: float = 1.0, kd: float = 1.0) -> None:
        super().__init__()
        self.setpoint = self.TIRE_SLIP_HIGH
        self.slip = 0.0
        self._pid = PID(self.OUTPUT_MIN, self.OUTPUT_MAX, kp, ki, kd)
        self._pid.set_bang_bang(0)
        self._pid.set_time_step(self.TIME_STEP_MS)
        self.current_slip_pct = 0

    @property
    def target_slip_pct(self) -> int:
        """The slip setpoint in hundredths."""
        return _int16(self.setpoint * 100)

    @property
    def gains(self) -> tuple[float, float, float]:
        """The proportional, integral and derivative gains."""
        return self._pid.kp, self._pid.ki, self._pid.kd

    def set_gains(self, kp: float, ki: float, kd: float) -> None:
        """Set the slip PID gains."""
        self._pid.set_gains(kp, ki, kd)

    def calculate_torque(
        self, elapsed_time: int, max_torque: int, wheel_speeds: WheelSpeeds
    ) -> int:
        self._driver_torque_request = max_torque
        front, rear = _axle_averages(wheel_speeds)
        if front <= _MIN_AVG_RPM or rear <= _MIN_AVG_RPM:
            self.slip = 0.0
            self._pid.reset(elapsed_time)
        else:
            self.slip = wheel_speeds.calc_slip()
        output = self._pid.run(self.slip, self.setpoint, elapsed_time)
        torque = max_torque + output * max_torque
        self.current_slip_pct = _int16(self.slip * 100)
        return self._finish(torque, max_torque)


class SlipTimeTorqueController(TorqueController):
    """Torque is cut by a fixed retard while rear-wheel slip stays above a threshold."""

    control_type: ClassVar[TorqueControlType] = TorqueControlType.SLIP_TIME

    TIRE_SLIP_HIGH = 0.15
    # Torque retard (Nm) against slip x time (slip ratio x ms).
    SLIP_TIME_POINTS: ClassVar[tuple[float, ...]] = (100, 200, 300, 500, 750, 1000)
    TORQUE_RETARD_NM: ClassVar[tuple[float, ...]] = (20, 30, 40, 50, 80, 120)

    def __init__(self) -> None:
        super().__init__()
        self.slip_active = False
        self.slip_time = 0.0
        self.torque_retard = 0.0
        self._slip_start = 0
        self._slip_duration = 0

    def calculate_torque(
        self, elapsed_time: int, max_torque: int, wheel_speeds: WheelSpeeds
    ) -> int:
        self._driver_torque_request = max_torque
        front, rear = _axle_averages(wheel_speeds)
        if front <= _MIN_AVG_RPM or rear <= _MIN_AVG_RPM:
            slip = 0.0
        else:
            slip = rear / front - 1

        if slip > self.TIRE_SLIP_HIGH and not self.slip_active:
            self._slip_start = elapsed_time
            self.slip_active = True
        elif slip > self.TIRE_SLIP_HIGH:
            self._slip_duration = (elapsed_time - self._slip_start) & 0xFFFFFFFF
            self.slip_time = slip * self._slip_duration
        else:
            self.slip_active = False

        # The retard applied is always the table's final point.
        self.torque_retard = self.TORQUE_RETARD_NM[-1]

        if self.slip_active:
            torque = self._driver_torque_request - self.torque_retard * 10
        else:
            torque = max_torque
        return self._finish(torque, max_torque)