"""Vehicle control unit status message: shutdown, pedal and ECU state bits."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

_FORMAT = struct.Struct("<BBBBBH")
STATUS_SIZE = _FORMAT.size


class McuState(IntEnum):
    """States of the vehicle control state machine."""

    STARTUP = 0
    TRACTIVE_SYSTEM_NOT_ACTIVE = 1
    TRACTIVE_SYSTEM_ACTIVE = 2
    ENABLING_INVERTER = 3
    WAITING_READY_TO_DRIVE_SOUND = 4
    READY_TO_DRIVE = 5


class _Flag:
    """A single bit of one of the status bytes, exposed as a bool attribute."""

    def __init__(self, field: str, mask: int) -> None:
        self.field = field
        self.mask = mask

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return bool(getattr(obj, self.field) & self.mask)

    def __set__(self, obj, value: bool) -> None:
        current = getattr(obj, self.field)
        if value:
            current |= self.mask
        else:
            current &= ~self.mask & 0xFF
        setattr(obj, self.field, current)


@dataclass
class McuStatus:
    """Packed seven-byte status word broadcast by the vehicle control unit."""

    shutdown_states: int = 0xFF
    pedal_states: int = 0
    ecu_states: int = 0
    max_torque: int = 0
    torque_mode: int = 0
    distance_travelled: int = 0

    # Shutdown circuit monitoring
    imd_ok_high = _Flag("shutdown_states", 0x01)
    shutdown_b_above_threshold = _Flag("shutdown_states", 0x02)
    bms_ok_high = _Flag("shutdown_states", 0x04)
    shutdown_c_above_threshold = _Flag("shutdown_states", 0x08)
    bspd_ok_high = _Flag("shutdown_states", 0x10)
    shutdown_d_above_threshold = _Flag("shutdown_states", 0x20)
    software_ok_high = _Flag("shutdown_states", 0x40)
    shutdown_e_above_threshold = _Flag("shutdown_states", 0x80)

    # Pedal system monitoring
    accel_implausible = _Flag("pedal_states", 0x04)
    brake_implausible = _Flag("pedal_states", 0x08)
    brake_pedal_active = _Flag("pedal_states", 0x10)
    bspd_current_high = _Flag("pedal_states", 0x20)
    bspd_brake_high = _Flag("pedal_states", 0x40)
    accel_brake_implausible = _Flag("pedal_states", 0x80)

    # ECU state
    inverter_powered = _Flag("ecu_states", 0x08)
    energy_meter_present = _Flag("ecu_states", 0x10)
    activate_buzzer = _Flag("ecu_states", 0x20)
    software_is_ok = _Flag("ecu_states", 0x40)
    launch_ctrl_active = _Flag("ecu_states", 0x80)

    @property
    def state(self) -> McuState:
        """The state machine state held in the low three ECU bits."""
        return McuState(self.ecu_states & 0x07)

    @state.setter
    def state(self, value: McuState) -> None:
        self.ecu_states = (self.ecu_states & 0xF8) | McuState(value)

    @classmethod
    def from_bytes(cls, data: bytes) -> McuStatus:
        """Decode a status from the start of a CAN payload."""
        if len(data) < STATUS_SIZE:
            raise ValueError(f"status needs {STATUS_SIZE} bytes, got {len(data)}")
        return cls(*_FORMAT.unpack_from(bytes(data)))

    def to_bytes(self) -> bytes:
        """Encode the status in its packed little-endian wire layout."""
        try:
            return _FORMAT.pack(
                self.shutdown_states,
                self.pedal_states,
                self.ecu_states,
                self.max_torque,
                self.torque_mode,
                self.distance_travelled,
            )
        except struct.error as exc:
            raise ValueError(f"status field out of range: {exc}") from exc

    def toggle_max_torque(self, mode: int) -> None:
        """Advance the torque mode cyclically 1 -> 2 -> 3 -> 4 -> 1 from ``mode``."""
        next_mode = {1: 2, 2: 3, 3: 4, 4: 1}.get(mode)
        if next_mode is not None:
            self.torque_mode = next_mode

    def toggle_launch_ctrl_active(self) -> None:
        """Flip the launch-control-active bit."""
        self.ecu_states ^= 0x80