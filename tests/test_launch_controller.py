import pytest

from vcu_control.launch_controller import (
    LaunchControlType,
    LaunchController,
    LaunchState,
    LinearLaunchController,
    LookupLaunchController,
    PidLaunchController,
)
from vcu_control.vehicle_data import WheelSpeeds


def test_launch_control_states():
    lc = LaunchController()
    lc.init(0)
    assert lc.state == LaunchState.IDLE
    assert lc.set_state(LaunchState.WAITING_TO_LAUNCH, 0) == LaunchState.WAITING_TO_LAUNCH
    assert lc.state == LaunchState.WAITING_TO_LAUNCH
    lc.set_state(LaunchState.LAUNCHING, 0)
    assert lc.state == LaunchState.LAUNCHING
    lc.set_state(LaunchState.FINISHED, 0)
    assert lc.state == LaunchState.FINISHED


def test_lc_notorque():
    wheels = WheelSpeeds(0, 0, 0, 0)
    lc = LaunchController()
    t = 0
    lc.init(t)
    lc.run(t, 2400, wheels)
    assert lc.torque_output == 0

    t += 1
    lc.set_state(LaunchState.WAITING_TO_LAUNCH, t)
    lc.run(t, 2400, wheels)
    assert lc.torque_output == 0

    t += 1
    lc.set_state(LaunchState.LAUNCHING, t)
    lc.run(t, 2400, wheels)
    assert lc.torque_output == 2400


def test_set_same_state_keeps_clock():
    lc = LaunchController()
    lc.set_state(LaunchState.LAUNCHING, 0)
    lc.set_state(LaunchState.LAUNCHING, 50)
    lc.run(100, 2400, WheelSpeeds())
    assert lc.diag_data().elapsed_time == 100


def test_lc_ramp_lookup():
    wheels = WheelSpeeds(0, 0, 0, 0)
    lc = LookupLaunchController()
    assert lc.control_type == LaunchControlType.LOOKUP
    lc.init(0)
    lc.set_state(LaunchState.LAUNCHING, 0)
    outputs = []
    for i in range(0, 1400, 10):
        lc.run(i, 2400, wheels)
        outputs.append(lc.torque_output)
    assert outputs[0] == 103
    assert all(0 <= out <= 2400 for out in outputs)
    assert lc.state == LaunchState.FINISHED
    assert outputs[-1] == 2400


def test_lc_pid_low_slip_keeps_full_torque():
    lc = PidLaunchController(4.0, 2.0, 1.0)
    assert lc.control_type == LaunchControlType.PID
    t = 0
    lc.init(t)
    lc.set_state(LaunchState.LAUNCHING, t)
    i = 10.0
    while i < 6000 and t < 1000:
        lc.run(t + 1, 2400, WheelSpeeds(i, i, i * 1.01, i * 1.01))
        assert lc.torque_output == 2400
        t += 1
        i += 10


def test_pid_high_slip_cuts_torque():
    lc = PidLaunchController()
    wheels = WheelSpeeds(100, 100, 200, 200)
    assert lc.calculate_torque(0, 2400, wheels) == 2400
    assert lc.calculate_torque(5, 2400, wheels) == 0


def test_pid_set_gains():
    lc = PidLaunchController()
    assert lc.gains == (4.0, 2.0, 1.0)
    lc.set_gains(1.0, 0.5, 0.25)
    assert lc.gains == (1.0, 0.5, 0.25)


def test_lc_linear_ramp():
    lc = LinearLaunchController(0, 100, 200, 200)
    assert lc.control_type == LaunchControlType.LINEAR
    assert lc.max_duration_ms == 200
    t = 0
    lc.init(t)
    lc.set_state(LaunchState.LAUNCHING, t)
    outputs = []
    for _ in range(400):
        lc.run(t + 1, 2400, WheelSpeeds(10, 10, 10.1, 10.1))
        outputs.append(lc.torque_output)
        t += 1
    assert outputs[0] == 1005
    assert outputs == sorted(outputs)
    assert max(outputs) <= 2400
    assert lc.state == LaunchState.FINISHED
    assert outputs[-1] == 2400


def test_linear_update_ramp():
    lc = LinearLaunchController(0, 100, 200, 200)
    lc.update_ramp(0, 0, 100, 100)
    assert lc.calculate_torque(50, 2400, WheelSpeeds()) == 500
    assert lc.max_duration_ms == 200


def test_linear_rejects_zero_length_ramp():
    with pytest.raises(ValueError):
        LinearLaunchController(10, 0, 10, 100)


def test_init_resets_output_and_diag():
    lc = LaunchController()
    lc.set_state(LaunchState.FINISHED, 0)
    lc.run(10, 1500, WheelSpeeds())
    assert lc.torque_output == 1500
    lc.init(20)
    diag = lc.diag_data()
    assert lc.state == LaunchState.IDLE
    assert diag.output_torque == 0
    assert diag.elapsed_time == 0
    assert diag.state == LaunchState.IDLE
    assert diag.control_type == LaunchControlType.DRIVER_CONTROL


def test_negative_request_clamped_to_zero():
    lc = LaunchController()
    lc.set_state(LaunchState.LAUNCHING, 0)
    lc.run(5, -100, WheelSpeeds())
    assert lc.torque_output == -100 or lc.torque_output == 0
    lookup = LookupLaunchController()
    lookup.set_state(LaunchState.LAUNCHING, 0)
    lookup.run(0, 5000, WheelSpeeds())
    assert lookup.torque_output == 103