import pytest

from vcu_control.torque_controller import (
    PidTorqueController,
    SlipTimeTorqueController,
    TorqueControlType,
    TorqueController,
    TorqueDiagData,
)
from vcu_control.vehicle_data import WheelSpeeds


def _ramp_speeds():
    speed = 10.0
    while speed < 6000:
        yield WheelSpeeds(speed, speed, speed * 1.01, speed * 1.01)
        speed += 10


def test_base_controller_starts_with_zero_output():
    assert TorqueController().torque_output == 0


def test_base_controller_passes_request_through():
    controller = TorqueController()
    controller.init(0)
    outputs = [
        controller.calculate_torque(t + 1, 2400, ws)
        for t, ws in enumerate(_ramp_speeds())
    ]
    assert outputs and all(out == 2400 for out in outputs)


def test_pid_controller_low_slip_keeps_full_torque():
    controller = PidTorqueController(1.0, 0, 0)
    controller.init(0)
    outputs = [
        controller.calculate_torque(t + 1, 2400, ws)
        for t, ws in enumerate(_ramp_speeds())
    ]
    assert all(out == 2400 for out in outputs)


def test_pid_controller_reduces_torque_on_heavy_slip():
    controller = PidTorqueController(1.0, 0, 0)
    slipping = WheelSpeeds(100, 100, 200, 200)
    first = controller.calculate_torque(0, 2400, slipping)
    second = controller.calculate_torque(10, 2400, slipping)
    assert first == 2400
    assert 1439 <= second <= 1440
    assert controller.current_slip_pct == 100
    assert controller.torque_output == second


def test_pid_controller_zero_slip_at_standstill():
    controller = PidTorqueController(1.0, 0, 0)
    out = controller.calculate_torque(100, 1000, WheelSpeeds(0, 0, 0, 0))
    assert out == 1000
    assert controller.slip == 0.0


def test_pid_target_slip_and_gains():
    controller = PidTorqueController(2.0, 3.0, 4.0)
    assert controller.target_slip_pct == 50
    assert controller.gains == (2.0, 3.0, 4.0)
    controller.set_gains(1.5, 0.5, 0.25)
    assert controller.gains == (1.5, 0.5, 0.25)


def test_slip_time_no_slip_gives_full_torque():
    controller = SlipTimeTorqueController()
    assert controller.calculate_torque(0, 2400, WheelSpeeds(100, 100, 101, 101)) == 2400
    assert controller.slip_active is False


def test_slip_time_cuts_torque_when_slipping():
    controller = SlipTimeTorqueController()
    slipping = WheelSpeeds(100, 100, 200, 200)
    assert controller.calculate_torque(0, 2400, slipping) == 1200
    assert controller.slip_active is True
    assert controller.calculate_torque(100, 2400, slipping) == 1200
    assert controller.slip_time == pytest.approx(100.0)


def test_slip_time_clamps_at_zero():
    controller = SlipTimeTorqueController()
    assert controller.calculate_torque(0, 1000, WheelSpeeds(100, 100, 200, 200)) == 0
    assert controller.unclamped_torque == -200


def test_slip_time_recovers_after_slip_ends():
    controller = SlipTimeTorqueController()
    controller.calculate_torque(0, 2400, WheelSpeeds(100, 100, 200, 200))
    out = controller.calculate_torque(10, 2400, WheelSpeeds(100, 100, 100, 100))
    assert out == 2400
    assert controller.slip_active is False


def test_diag_data_reports_type_and_output():
    controller = SlipTimeTorqueController()
    controller.calculate_torque(0, 2400, WheelSpeeds(100, 100, 200, 200))
    assert controller.diag_data() == TorqueDiagData(
        elapsed_time=0, output_torque=1200, control_type=TorqueControlType.SLIP_TIME
    )


def test_init_clears_output():
    controller = PidTorqueController(1.0, 0, 0)
    controller.calculate_torque(0, 2400, WheelSpeeds())
    assert controller.torque_output == 2400
    controller.init(5)
    assert controller.torque_output == 0
    assert controller.unclamped_torque == 0