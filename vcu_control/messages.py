"""Eight-byte CAN payloads exchanged with the motor controller and the pedal box."""

from __future__ import annotations

import struct
from dataclasses import astuple, dataclass
from typing import ClassVar

MESSAGE_SIZE = 8


class _Bit:
    """One bit of an integer field, read and written as a bool attribute."""

    def __init__(self, field: str, mask: int, *, reserved: bool = False) -> None:
        self.field = field
        self.mask = mask
        self.reserved = reserved
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        return bool(getattr(obj, self.field) & self.mask)

    def __set__(self, obj, value: bool) -> None:
        current = getattr(obj, self.field)
        current = current | self.mask if value else current & ~self.mask
        setattr(obj, self.field, current)


def _decode(cls, data: bytes):
    """Build a message of type ``cls`` from the start of a CAN payload."""
    layout: struct.Struct = cls._format
    if len(data) < layout.size:
        raise ValueError(f"{cls.__name__} needs {layout.size} bytes, got {len(data)}")
    return cls(*layout.unpack_from(bytes(data)))


def _encode(message) -> bytes:
    """Pack a message in its little-endian wire layout."""
    try:
        return message._format.pack(*astuple(message))
    except struct.error as exc:
        raise ValueError(f"{type(message).__name__} field out of range: {exc}") from exc


@dataclass
class MCCommandMessage:
    """Torque / speed command sent to the motor controller."""

    _format: ClassVar[struct.Struct] = struct.Struct("<hh?Bh")

    torque_command: int = 0
    angular_velocity: int = 0
    direction: bool = False
    enable_flags: int = 0
    commanded_torque_limit: int = 0

    inverter_enable = _Bit("enable_flags", 0x01)
    discharge_enable = _Bit("enable_flags", 0x02)

    @classmethod
    def from_bytes(cls, data: bytes) -> MCCommandMessage:
        """Decode a command from the start of a CAN payload."""
        return _decode(cls, data)

    def to_bytes(self) -> bytes:
        """Encode the command in its packed wire layout."""
        return _encode(self)


@dataclass
class MCCurrentInformation:
    """Phase and DC bus currents reported by the motor controller."""

    _format: ClassVar[struct.Struct] = struct.Struct("<hhhh")

    phase_a_current: int = 0
    phase_b_current: int = 0
    phase_c_current: int = 0
    dc_bus_current: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> MCCurrentInformation:
        """Decode current information from the start of a CAN payload."""
        return _decode(cls, data)

    def to_bytes(self) -> bytes:
        """Encode the current information in its packed wire layout."""
        return _encode(self)


@dataclass
class MCFaultCodes:
    """POST and run-time fault words reported by the motor controller."""

    _format: ClassVar[struct.Struct] = struct.Struct("<HHHH")

    post_fault_lo: int = 0
    post_fault_hi: int = 0
    run_fault_lo: int = 0
    run_fault_hi: int = 0

    post_lo_hw_gate_desaturation_fault = _Bit("post_fault_lo", 0x0001)
    post_lo_hw_overcurrent_fault = _Bit("post_fault_lo", 0x0002)
    post_lo_accelerator_shorted = _Bit("post_fault_lo", 0x0004)
    post_lo_accelerator_open = _Bit("post_fault_lo", 0x0008)
    post_lo_current_sensor_low = _Bit("post_fault_lo", 0x0010)
    post_lo_current_sensor_high = _Bit("post_fault_lo", 0x0020)
    post_lo_module_temperature_low = _Bit("post_fault_lo", 0x0040)
    post_lo_module_temperature_high = _Bit("post_fault_lo", 0x0080)
    post_lo_ctrl_pcb_temperature_low = _Bit("post_fault_lo", 0x0100)
    post_lo_ctrl_pcb_temperature_high = _Bit("post_fault_lo", 0x0200)
    post_lo_gate_drive_pcb_temperature_low = _Bit("post_fault_lo", 0x0400)
    post_lo_gate_drive_pcb_temperature_high = _Bit("post_fault_lo", 0x0800)
    post_lo_5v_sense_voltage_low = _Bit("post_fault_lo", 0x1000)
    post_lo_5v_sense_voltage_high = _Bit("post_fault_lo", 0x2000)
    post_lo_12v_sense_voltage_low = _Bit("post_fault_lo", 0x4000)
    post_lo_12v_sense_voltage_high = _Bit("post_fault_lo", 0x8000)

    post_hi_25v_sense_voltage_low = _Bit("post_fault_hi", 0x0001)
    post_hi_25v_sense_voltage_high = _Bit("post_fault_hi", 0x0002)
    post_hi_15v_sense_voltage_low = _Bit("post_fault_hi", 0x0004)
    post_hi_15v_sense_voltage_high = _Bit("post_fault_hi", 0x0008)
    post_hi_dc_bus_voltage_high = _Bit("post_fault_hi", 0x0010)
    post_hi_dc_bus_voltage_low = _Bit("post_fault_hi", 0x0020)
    post_hi_precharge_timeout = _Bit("post_fault_hi", 0x0040)
    post_hi_precharge_voltage_failure = _Bit("post_fault_hi", 0x0080)
    post_hi_eeprom_checksum_invalid = _Bit("post_fault_hi", 0x0100)
    post_hi_eeprom_data_out_of_range = _Bit("post_fault_hi", 0x0200)
    post_hi_eeprom_update_required = _Bit("post_fault_hi", 0x0400)
    post_hi_reserved1 = _Bit("post_fault_hi", 0x0800, reserved=True)
    post_hi_reserved2 = _Bit("post_fault_hi", 0x1000, reserved=True)
    post_hi_reserved3 = _Bit("post_fault_hi", 0x2000, reserved=True)
    post_hi_brake_shorted = _Bit("post_fault_hi", 0x4000)
    post_hi_brake_open = _Bit("post_fault_hi", 0x8000)

    run_lo_motor_overspeed_fault = _Bit("run_fault_lo", 0x0001)
    run_lo_overcurrent_fault = _Bit("run_fault_lo", 0x0002)
    run_lo_overvoltage_fault = _Bit("run_fault_lo", 0x0004)
    run_lo_inverter_overtemperature_fault = _Bit("run_fault_lo", 0x0008)
    run_lo_accelerator_input_shorted_fault = _Bit("run_fault_lo", 0x0010)
    run_lo_accelerator_input_open_fault = _Bit("run_fault_lo", 0x0020)
    run_lo_direction_command_fault = _Bit("run_fault_lo", 0x0040)
    run_lo_inverter_response_timeout_fault = _Bit("run_fault_lo", 0x0080)
    run_lo_hardware_gatedesaturation_fault = _Bit("run_fault_lo", 0x0100)
    run_lo_hardware_overcurrent_fault = _Bit("run_fault_lo", 0x0200)
    run_lo_undervoltage_fault = _Bit("run_fault_lo", 0x0400)
    run_lo_can_command_message_lost_fault = _Bit("run_fault_lo", 0x0800)
    run_lo_motor_overtemperature_fault = _Bit("run_fault_lo", 0x1000)
    run_lo_reserved1 = _Bit("run_fault_lo", 0x2000, reserved=True)
    run_lo_reserved2 = _Bit("run_fault_lo", 0x4000, reserved=True)
    run_lo_reserved3 = _Bit("run_fault_lo", 0x8000, reserved=True)

    run_hi_brake_input_shorted_fault = _Bit("run_fault_hi", 0x0001)
    run_hi_brake_input_open_fault = _Bit("run_fault_hi", 0x0002)
    run_hi_module_a_overtemperature_fault = _Bit("run_fault_hi", 0x0004)
    run_hi_module_b_overtemperature_fault = _Bit("run_fault_hi", 0x0008)
    run_hi_module_c_overtemperature_fault = _Bit("run_fault_hi", 0x0010)
    run_hi_pcb_overtemperature_fault = _Bit("run_fault_hi", 0x0020)
    run_hi_gate_drive_board_1_overtemperature_fault = _Bit("run_fault_hi", 0x0040)
    run_hi_gate_drive_board_2_overtemperature_fault = _Bit("run_fault_hi", 0x0080)
    run_hi_gate_drive_board_3_overtemperature_fault = _Bit("run_fault_hi", 0x0100)
    run_hi_current_sensor_fault = _Bit("run_fault_hi", 0x0200)
    run_hi_reserved1 = _Bit("run_fault_hi", 0x0400, reserved=True)
    run_hi_reserved2 = _Bit("run_fault_hi", 0x0800, reserved=True)
    run_hi_reserved3 = _Bit("run_fault_hi", 0x1000, reserved=True)
    run_hi_reserved4 = _Bit("run_fault_hi", 0x2000, reserved=True)
    run_hi_resolver_not_connected = _Bit("run_fault_hi", 0x4000)
    run_hi_inverter_discharge_active = _Bit("run_fault_hi", 0x8000)

    @classmethod
    def from_bytes(cls, data: bytes) -> MCFaultCodes:
        """Decode fault words from the start of a CAN payload."""
        return _decode(cls, data)

    def to_bytes(self) -> bytes:
        """Encode the fault words in their packed wire layout."""
        return _encode(self)

    def active_faults(self) -> list[str]:
        """Names of the set fault flags, in wire order, reserved bits excluded."""
        return [
            bit.name
            for bit in vars(type(self)).values()
            if isinstance(bit, _Bit) and not bit.reserved and bit.__get__(self)
        ]


@dataclass
class MCInternalStates:
    """State machine, relay and enable status reported by the motor controller."""

    _format: ClassVar[struct.Struct] = struct.Struct("<HBBBBBB")

    vsm_state: int = 0
    inverter_state: int = 0
    relay_state: int = 0
    inverter_run_mode_discharge_state: int = 0
    inverter_command_mode: int = 0
    inverter_enable: int = 0
    direction_command: int = 0

    relay_active_1 = _Bit("relay_state", 0x01)
    relay_active_2 = _Bit("relay_state", 0x02)
    relay_active_3 = _Bit("relay_state", 0x04)
    relay_active_4 = _Bit("relay_state", 0x08)
    relay_active_5 = _Bit("relay_state", 0x10)
    relay_active_6 = _Bit("relay_state", 0x20)
    inverter_run_mode = _Bit("inverter_run_mode_discharge_state", 0x01)
    inverter_enable_state = _Bit("inverter_enable", 0x01)
    inverter_enable_lockout = _Bit("inverter_enable", 0x80)

    @classmethod
    def from_bytes(cls, data: bytes) -> MCInternalStates:
        """Decode internal states from the start of a CAN payload."""
        return _decode(cls, data)

    def to_bytes(self) -> bytes:
        """Encode the internal states in their packed wire layout."""
        return _encode(self)

    @property
    def inverter_active_discharge_state(self) -> int:
        """Active discharge state held in the top three bits of the run-mode byte."""
        return self.inverter_run_mode_discharge_state >> 5


@dataclass
class MCMotorPositionInformation:
    """Motor angle, speed and resolver data reported by the motor controller."""

    _format: ClassVar[struct.Struct] = struct.Struct("<hhhh")

    motor_angle: int = 0
    motor_speed: int = 0
    electrical_output_frequency: int = 0
    delta_resolver_filtered: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> MCMotorPositionInformation:
        """Decode motor position data from the start of a CAN payload."""
        return _decode(cls, data)

    def to_bytes(self) -> bytes:
        """Encode the motor position data in its packed wire layout."""
        return _encode(self)


@dataclass
class MCTemperatures1:
    """Power module and gate driver temperatures, in tenths of a degree."""

    _format: ClassVar[struct.Struct] = struct.Struct("<hhhh")

    module_a_temperature: int = 0
    module_b_temperature: int = 0
    module_c_temperature: int = 0
    gate_driver_board_temperature: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> MCTemperatures1:
        """Decode temperatures from the start of a CAN payload."""
        return _decode(cls, data)

    def to_bytes(self) -> bytes:
        """Encode the temperatures in their packed wire layout."""
        return _encode(self)


@dataclass
class MCTemperatures2:
    """Control board and RTD 1-3 temperatures, in tenths of a degree."""

    _format: ClassVar[struct.Struct] = struct.Struct("<hhhh")

    control_board_temperature: int = 0
    rtd_1_temperature: int = 0
    rtd_2_temperature: int = 0
    rtd_3_temperature: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> MCTemperatures2:
        """Decode temperatures from the start of a CAN payload."""
        return _decode(cls, data)

    def to_bytes(self) -> bytes:
        """Encode the temperatures in their packed wire layout."""
        return _encode(self)


@dataclass
class MCTemperatures3:
    """RTD 4-5 and motor temperatures, in tenths of a degree, and torque shudder."""

    _format: ClassVar[struct.Struct] = struct.Struct("<hhhh")

    rtd_4_temperature: int = 0
    rtd_5_temperature: int = 0
    motor_temperature: int = 0
    torque_shudder: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> MCTemperatures3:
        """Decode temperatures from the start of a CAN payload."""
        return _decode(cls, data)

    def to_bytes(self) -> bytes:
        """Encode the temperatures in their packed wire layout."""
        return _encode(self)


@dataclass
class MCVoltageInformation:
    """DC bus, output and phase voltages, in tenths of a volt."""

    _format: ClassVar[struct.Struct] = struct.Struct("<hhhh")

    dc_bus_voltage: int = 0
    output_voltage: int = 0
    phase_ab_voltage: int = 0
    phase_bc_voltage: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> MCVoltageInformation:
        """Decode voltages from the start of a CAN payload."""
        return _decode(cls, data)

    def to_bytes(self) -> bytes:
        """Encode the voltages in their packed wire layout."""
        return _encode(self)


@dataclass
class PedalReadings:
    """Raw pedal ADC readings; the second brake slot carries the steering angle."""

    _format: ClassVar[struct.Struct] = struct.Struct("<HHHH")

    accelerator_pedal_1: int = 0
    accelerator_pedal_2: int = 0
    brake_transducer_1: int = 0
    brake_transducer_2: int = 0

    @classmethod
    def from_bytes(cls, data: bytes) -> PedalReadings:
        """Decode pedal readings from the start of a CAN payload."""
        return _decode(cls, data)

    def to_bytes(self) -> bytes:
        """Encode the pedal readings in their packed wire layout."""
        return _encode(self)