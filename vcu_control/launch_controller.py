"""Launch control: state handling and the torque strategies used while launching."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from .pid import PID
from .vehicle_data import WheelSpeeds

_MIN_AVG_RPM = 10
DEFAULT_MAX_DURATION_MS = 1200


def _int16(value: float) -> int:
    return ((int(value) + 0x8000) & 0xFFFF) - 0x8000


class LaunchState(IntEnum):
    """Phases of a launch."""

    IDLE = 0
    WAITING_TO_LAUNCH = 1
    LAUNCHING = 2
    FINISHED = 3


class LaunchControlType(IntEnum):
    """Available launch torque strategies."""

    DRIVER_CONTROL = 0
    LOOKUP = 1
    PID = 2
    LINEAR = 3


NUM_LAUNCH_CONTROLLERS = len(LaunchControlType)


@dataclass(frozen=True)
class LaunchDiagData:
    """Diagnostic snapshot of a launch controller."""

    elapsed_time: int
    output_torque: int
    state: LaunchState
    control_type: LaunchControlType


class LaunchController:
    """Launch controller that passes the driver's torque request straight through."""

    control_type: ClassVar[LaunchControlType] = LaunchControlType.DRIVER_CONTROL

    def __init__(self) -> None:
        self.max_duration_ms = DEFAULT_MAX_DURATION_MS
        self._state = LaunchState.IDLE
        self._start_time = 0
        self._current_time = 0
        self._elapsed_time = 0
        self._driver_torque_request = 0
        self._lc_torque_request = 0
        self._output_torque = 0

    @property
    def state(self) -> LaunchState:
        """The current launch phase."""
        return self._state

    @property
    def torque_output(self) -> int:
        """The torque command produced by the last run."""
        return self._output_torque

    def init(self, sys_time: int) -> None:
        """Clear all torque values and return to IDLE."""
        self._driver_torque_request = 0
        self._lc_torque_request = 0
        self._output_torque = 0
        self._elapsed_time = 0
        self.set_state(LaunchState.IDLE, sys_time)

    def set_state(self, next_state: LaunchState, sys_time: int) -> LaunchState:
        """Enter ``next_state``, restarting the phase clock unless already in it."""
        if self._state == next_state:
            return self._state
        self._state = LaunchState(next_state)
        self._start_time = sys_time
        return self._state

    def calculate_torque(
        self, elapsed_time: int, max_torque: int, wheel_speeds: WheelSpeeds
    ) -> int:
        """Ideal torque for this moment of the launch; here the full request."""
        return int(max_torque)

    def run(self, sys_time: int, torque_request: int, wheel_speeds: WheelSpeeds) -> None:
        """Compute the torque output for ``sys_time`` given the driver's request."""
        self._current_time = sys_time
        self._elapsed_time = (self._current_time - self._start_time) & 0xFFFFFFFF
        self._driver_torque_request = torque_request

        if self._state == LaunchState.LAUNCHING:
            if self._elapsed_time > self.max_duration_ms:
                self.set_state(LaunchState.FINISHED, sys_time)
            output = _int16(
                self.calculate_torque(
                    self._elapsed_time, self._driver_torque_request, wheel_speeds
                )
            )
            if output > self._driver_torque_request:
                output = self._driver_torque_request
            elif output < 0:
                output = 0
            self._output_torque = output
        elif self._state == LaunchState.FINISHED:
            self._output_torque = self._driver_torque_request
        else:
            self._output_torque = 0

    def diag_data(self) -> LaunchDiagData:
        """Elapsed time, output torque, state and controller type."""
        return LaunchDiagData(
            elapsed_time=self._elapsed_time,
            output_torque=_int16(self._output_torque),
            state=self._state,
            control_type=self.control_type,
        )


class LookupLaunchController(LaunchController):
    """Torque follows a fifth-order calibration curve of elapsed time."""

    control_type: ClassVar[LaunchControlType] = LaunchControlType.LOOKUP

    _CAL5 = -0.000000000000085
    _CAL4 = 0.000000000114956
    _CAL3 = 0.000000015913376
    _CAL2 = 0.000011808754927
    _CAL1 = 0.093415288604319
    _INTERCEPT = 10.361085973494500

    def calculate_torque(
        self, elapsed_time: int, max_torque: int, wheel_speeds: WheelSpeeds
    ) -> int:
        t = float(elapsed_time)
        torque_nm = (
            self._CAL5 * t**5
            + self._CAL4 * t**4
            + self._CAL3 * t**3
            + self._CAL2 * t**2
            + self._CAL1 * t
            + self._INTERCEPT
        )
        return int(torque_nm * 10)


class PidLaunchController(LaunchController):
    """Torque is reduced by a PID loop holding rear-wheel slip at a target."""

    control_type: ClassVar[LaunchControlType] = LaunchControlType.PID

    TIRE_SLIP_LOW = 0.05
    TIRE_SLIP_HIGH = 0.2
    OUTPUT_MIN = -1.0
    OUTPUT_MAX = 0.0

    def __init__(self, kp: float = 4.0, ki: float = 2.0, kd: float = 1.0) -> None:
        super().__init__()
        self.setpoint = self.TIRE_SLIP_HIGH
        self.slip = 0.0
        self._pid = PID(self.OUTPUT_MIN, self.OUTPUT_MAX, kp, ki, kd)
        self._pid.set_bang_bang(0)
        self._pid.set_time_step(1)

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
        front = (wheel_speeds.fl + wheel_speeds.fr) / 2
        rear = (wheel_speeds.rl + wheel_speeds.rr) / 2
        if front <= _MIN_AVG_RPM or rear <= _MIN_AVG_RPM:
            self.slip = 0.0
            self._pid.reset(elapsed_time)
        else:
            self.slip = rear / front - 1
        output = self._pid.run(self.slip, self.setpoint, elapsed_time)
        return int(max_torque + output * max_torque)


class LinearLaunchController(LaunchController):
    """Torque ramps linearly from a start torque to an end torque (Nm)."""

    control_type: ClassVar[LaunchControlType] = LaunchControlType.LINEAR

    def __init__(
        self, start_time: float, start_torque: float, end_time: float, end_torque: float
    ) -> None:
        super().__init__()
        self.update_ramp(start_time, start_torque, end_time, end_torque)
        self.max_duration_ms = int(end_time)

    def update_ramp(
        self, start_time: float, start_torque: float, end_time: float, end_torque: float
    ) -> None:
        """Replace the ramp; the launch duration is left unchanged."""
        if end_time == start_time:
            raise ValueError("ramp start and end times must differ")
        self.slope = (end_torque - start_torque) / (end_time - start_time)
        self.intercept = start_torque - self.slope * start_time

    def calculate_torque(
        self, elapsed_time: int, max_torque: int, wheel_speeds: WheelSpeeds
    ) -> int:
        torque_nm = self.slope * float(elapsed_time) + self.intercept
        return int(torque_nm * 10)