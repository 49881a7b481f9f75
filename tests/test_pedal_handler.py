import pytest

from vcu_control.parameters import (
    END_ACCELERATOR_PEDAL_1,
    END_ACCELERATOR_PEDAL_2,
    END_BRAKE_PEDAL,
    MIN_ACCELERATOR_PEDAL_1,
    REGEN_NM,
    START_ACCELERATOR_PEDAL_1,
    START_ACCELERATOR_PEDAL_2,
    START_BRAKE_PEDAL,
)
from vcu_control.pedal_handler import PedalHandler, PedalTravels, WheelSpeedSensor


@pytest.fixture
def handler():
    return PedalHandler(wheel_timer_hz=1_000_000)


def settle(handler, accel1, accel2, brake, steering=0, rounds=2000):
    raw = [accel2, accel1, brake, steering]
    for _ in range(rounds):
        active = handler.read_pedal_values(raw)
    handler.run_pedals()
    return active


def set_pedals(handler, accel1, accel2, brake):
    handler.apps1.adc_reading = accel1
    handler.apps2.adc_reading = accel2
    handler.bse1.adc_reading = brake
    handler.run_pedals()


def test_first_read_is_heavily_filtered(handler):
    assert handler.read_pedal_values([0, 0, 3000, 0]) is False
    assert 0 < handler.brake1 < 3000


def test_light_brake_is_not_active(handler):
    assert settle(handler, 1000, 500, 1000) is False


def test_torque_full_travel_is_max(handler):
    set_pedals(handler, END_ACCELERATOR_PEDAL_1, END_ACCELERATOR_PEDAL_2, START_BRAKE_PEDAL)
    assert handler.calculate_torque(1600) == 1600
    assert handler.apps_travel() == 1.0


def test_torque_at_rest_is_zero(handler):
    set_pedals(handler, START_ACCELERATOR_PEDAL_1, START_ACCELERATOR_PEDAL_2, START_BRAKE_PEDAL)
    assert handler.calculate_torque(1600) == 0


def test_torque_out_of_range_clamps_to_zero(handler):
    set_pedals(handler, MIN_ACCELERATOR_PEDAL_1 - 1, 0, START_BRAKE_PEDAL)
    assert handler.apps1.travel_ratio == -1.0
    assert handler.calculate_torque(1600) == 0


def test_torque_within_bounds_for_partial_travel(handler):
    set_pedals(handler, 2500, 1700, START_BRAKE_PEDAL)
    torque = handler.calculate_torque(1000)
    assert 0 < torque < 1000


def test_pedal_travels_scaled(handler):
    set_pedals(handler, END_ACCELERATOR_PEDAL_1, START_ACCELERATOR_PEDAL_2, END_BRAKE_PEDAL)
    assert handler.pedal_travels() == PedalTravels(1000, 0, 1000)


def test_regen_zero_without_brake(handler):
    set_pedals(handler, START_ACCELERATOR_PEDAL_1, START_ACCELERATOR_PEDAL_2, START_BRAKE_PEDAL)
    assert handler.calculate_regen() == 0


def test_regen_ramps_toward_limit(handler):
    set_pedals(handler, START_ACCELERATOR_PEDAL_1, START_ACCELERATOR_PEDAL_2, END_BRAKE_PEDAL)
    first = handler.calculate_regen()
    second = handler.calculate_regen()
    assert 0 > first > second >= REGEN_NM * -10
    for _ in range(200):
        last = handler.calculate_regen()
    assert REGEN_NM * -10 <= last < second


def test_reset_regen(handler):
    set_pedals(handler, START_ACCELERATOR_PEDAL_1, START_ACCELERATOR_PEDAL_2, END_BRAKE_PEDAL)
    handler.calculate_regen()
    handler.reset_regen()
    set_pedals(handler, START_ACCELERATOR_PEDAL_1, START_ACCELERATOR_PEDAL_2, START_BRAKE_PEDAL)
    assert handler.calculate_regen() == 0


def test_verify_rest_is_plausible(handler):
    set_pedals(handler, START_ACCELERATOR_PEDAL_1, START_ACCELERATOR_PEDAL_2, START_BRAKE_PEDAL)
    result = handler.verify_pedals()
    assert result.accel_is_plausible
    assert result.brake_is_plausible
    assert result.accel_and_brake_plausible
    assert not result.implausibility_occurred
    assert result.ok


def test_verify_accel_out_of_range(handler):
    set_pedals(handler, MIN_ACCELERATOR_PEDAL_1 - 1, START_ACCELERATOR_PEDAL_2, START_BRAKE_PEDAL)
    result = handler.verify_pedals()
    assert not result.accel_is_plausible
    assert result.implausibility_occurred
    assert not result.ok


def test_verify_brake_out_of_range(handler):
    set_pedals(handler, START_ACCELERATOR_PEDAL_1, START_ACCELERATOR_PEDAL_2, 0)
    result = handler.verify_pedals()
    assert not result.brake_is_plausible
    assert result.implausibility_occurred


def test_verify_apps_disagreement(handler):
    set_pedals(handler, END_ACCELERATOR_PEDAL_1, START_ACCELERATOR_PEDAL_2, START_BRAKE_PEDAL)
    result = handler.verify_pedals()
    assert not result.accel_is_plausible


def test_implausibility_latches_until_accel_released(handler):
    settle(handler, END_ACCELERATOR_PEDAL_1 + 10, END_ACCELERATOR_PEDAL_2 + 10, 3000)
    result = handler.verify_pedals()
    assert not result.accel_and_brake_plausible
    assert result.implausibility_occurred

    settle(handler, END_ACCELERATOR_PEDAL_1 + 10, END_ACCELERATOR_PEDAL_2 + 10, 1000)
    result = handler.verify_pedals()
    assert result.accel_is_plausible
    assert result.brake_is_plausible
    assert result.accel_and_brake_plausible
    assert result.implausibility_occurred

    settle(handler, 1000, 500, 1000)
    result = handler.verify_pedals()
    assert result.ok


def test_wheel_speed_needs_two_counts():
    sensor = WheelSpeedSensor(1000)
    sensor.update(0, [10])
    assert sensor.current_rpm == 0.0


def test_wheel_speed_rolling_average_fills():
    sensor = WheelSpeedSensor(1000)
    sensor.update(0, [10, 10])
    first = sensor.current_rpm
    for t in range(1, 5):
        sensor.update(t, [10, 10])
    steady = sensor.current_rpm
    assert first > 0
    assert steady == pytest.approx(first * 5)
    sensor.update(6, [10, 10])
    assert sensor.current_rpm == pytest.approx(steady)


def test_wheel_speed_longer_period_is_slower():
    fast = WheelSpeedSensor(1000)
    slow = WheelSpeedSensor(1000)
    for t in range(5):
        fast.update(t, [10, 10])
        slow.update(t, [20, 20])
    assert slow.current_rpm == pytest.approx(fast.current_rpm / 2)


def test_wheel_speed_rejects_implausible_rpm():
    sensor = WheelSpeedSensor(1_000_000_000)
    sensor.update(0, [1, 1])
    assert sensor.current_rpm == 0.0


def test_wheel_speed_times_out():
    sensor = WheelSpeedSensor(1000)
    sensor.update(0, [10, 10])
    assert sensor.current_rpm > 0
    sensor.update(500, [])
    assert sensor.current_rpm > 0
    sensor.update(1001, [])
    assert sensor.current_rpm == 0.0


def test_wheel_speed_rejects_bad_timer():
    with pytest.raises(ValueError):
        WheelSpeedSensor(0)


def test_handler_owns_wheel_sensors(handler):
    handler.front_left.update(0, [1000, 1000])
    assert handler.front_left.current_rpm > 0
    assert handler.front_right.current_rpm == 0.0