# vcu_control

Control logic for the vehicle control unit of an electric race car. Every part
takes plain values (ADC samples, wheel speeds, timestamps in milliseconds, CAN
payload bytes) and returns plain values, so the logic runs and can be tested on
any machine. The package has no dependencies beyond the standard library.

## Modules

- `vcu_control.parameters`: calibration constants (pedal thresholds, filter
  alphas, torque modes in `TORQUE_MODE_LIST`, power limits), the `CanId` enum of
  CAN message identifiers, and board pin and ADC channel numbers.
- `vcu_control.mcu_status`: `McuState` and `McuStatus`, the packed seven-byte
  status word. Shutdown, pedal and ECU bits are bool attributes
  (`imd_ok_high`, `brake_pedal_active`, `launch_ctrl_active`, ...), `state` reads
  and writes the state machine state, `toggle_max_torque(mode)` cycles the torque
  mode 1 → 2 → 3 → 4 → 1, and `from_bytes` / `to_bytes` decode and encode it.
- `vcu_control.messages`: eight-byte payloads with `from_bytes` / `to_bytes`:
  - `MCCommandMessage`
  - `MCCurrentInformation`
  - `MCFaultCodes`, with one bool attribute per fault bit and `active_faults()`
    listing the names of set, non-reserved faults
  - `MCInternalStates`
  - `MCMotorPositionInformation`
  - `MCTemperatures1`, `MCTemperatures2`, `MCTemperatures3`
  - `MCVoltageInformation`
  - `PedalReadings`

  `from_bytes` raises `ValueError` for a payload that is too short, and `to_bytes`
  raises `ValueError` for a field that does not fit its wire type.
- `vcu_control.vehicle_data`: `WheelSpeeds` (`calc_slip()` and the scaled
  `diag_data()` triple), `VnData` (`mock_ws_rpm()`), `TimeAndDistance`.
- `vcu_control.distance_tracker`: `DistanceTracker` integrates distance, energy,
  amp-hours and efficiency between samples. It has two update methods:
  `update` takes speed as wheel RPM and `update_with_velocity` takes speed in m/s.
  `get_data()` returns the scaled 16-bit `EnergyData`. `RollingAverage` keeps the
  mean of the latest values.
- `vcu_control.pedal_sensor`: `PedalSensor` checks its reading against the range
  limits and computes the travel ratio, which is -1.0 when the reading is out of range.
- `vcu_control.dashboard`: `Dashboard` holds the button bits and a timer for each
  button.
  - `update(inputs)` takes a new button byte.
  - `get_button(n)` reads one button.
  - `button_held` and `button_released` report a button that has been pressed or
    released for long enough.
  - The clock is injectable.
- `vcu_control.pid`: `PID`, a timestamp-driven PID controller with output
  clamping, bang-bang thresholds and a minimum time step.
- `vcu_control.launch_controller`: `LaunchState`, `LaunchControlType`,
  `LaunchDiagData` and four controllers:
  - `LaunchController`: driver passthrough
  - `LookupLaunchController`: polynomial curve
  - `PidLaunchController`: slip PID
  - `LinearLaunchController`: linear ramp
- `vcu_control.launch_system`: `LaunchControlSystem` holds the enabled launch
  controllers, cycles through them with `toggle_controller` and names the active
  one with `describe_controller`.
- `vcu_control.torque_controller`: `TorqueControlType`, `TorqueDiagData` and
  three controllers: `TorqueController` (passthrough), `PidTorqueController` and
  `SlipTimeTorqueController`.
- `vcu_control.tc_system`: `TorqueControlSystem`, the same selection logic for
  traction controllers.
- `vcu_control.adc`: `channel_command` and `decode_sample` frame and decode
  MCP3204-family ADC transfers. `AdcFilter` exponentially smooths the four
  channel readings.
- `vcu_control.pedal_handler`: `PedalHandler` does the following:
  - filters raw ADC samples with `read_pedal_values`
  - refreshes the sensors with `run_pedals`
  - turns accelerator travel into a torque request with `calculate_torque`
  - turns brake travel into smoothed regen with `calculate_regen`
  - runs the plausibility checks with `verify_pedals`, which returns a
    `PedalVerification`

  Wheel speed comes from tooth period counts through `WheelSpeedSensor`.

## Example

```python
from vcu_control.launch_controller import LaunchControlType, LaunchState
from vcu_control.launch_system import LaunchControlSystem
from vcu_control.vehicle_data import WheelSpeeds

system = LaunchControlSystem()
system.active_type = LaunchControlType.LINEAR
controller = system.controller
controller.init(0)
controller.set_state(LaunchState.LAUNCHING, 0)
controller.run(100, 2400, WheelSpeeds())
print(system.describe_controller(), controller.torque_output)
# Controller type is launchControllerLinear 1500
```

```python
from vcu_control.mcu_status import McuState, McuStatus

status = McuStatus()
status.state = McuState.READY_TO_DRIVE
status.brake_pedal_active = True
payload = status.to_bytes()          # 7 bytes
assert McuStatus.from_bytes(payload) == status
```

## What it does not do

The package does not talk to hardware or to a CAN bus:

- It builds and parses payload bytes, but it does not send or receive frames.
- It has no top-level state machine that sequences precharge, inverter enabling
  and ready-to-drive.
- It has no inverter or accumulator handling beyond the message classes.
- It has no persistent storage for lifetime distance or on-time.
- It has no command-line program.

## Installing and testing

```
pip install .[test]
pytest
```