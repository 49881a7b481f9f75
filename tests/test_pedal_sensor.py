import pytest

from vcu_control.parameters import (
    END_ACCELERATOR_PEDAL_1,
    MAX_ACCELERATOR_PEDAL_1,
    MIN_ACCELERATOR_PEDAL_1,
    START_ACCELERATOR_PEDAL_1,
)
from vcu_control.pedal_sensor import OUT_OF_RANGE, PedalSensor


@pytest.fixture
def sensor():
    return PedalSensor(
        MIN_ACCELERATOR_PEDAL_1,
        MAX_ACCELERATOR_PEDAL_1,
        START_ACCELERATOR_PEDAL_1,
        END_ACCELERATOR_PEDAL_1,
        0.0,
        0.001220703125,
    )


def test_below_range(sensor):
    sensor.adc_reading = MIN_ACCELERATOR_PEDAL_1 - 1
    assert sensor.calculate_travel() == OUT_OF_RANGE == -1.0
    assert sensor.below_range
    assert not sensor.above_range


def test_above_range(sensor):
    sensor.adc_reading = MAX_ACCELERATOR_PEDAL_1 + 1
    assert sensor.calculate_travel() == OUT_OF_RANGE
    assert sensor.above_range
    assert not sensor.below_range


def test_flags_clear_when_back_in_range(sensor):
    sensor.adc_reading = MAX_ACCELERATOR_PEDAL_1 + 1
    sensor.update_out_of_range_flags()
    assert sensor.above_range
    sensor.adc_reading = START_ACCELERATOR_PEDAL_1
    sensor.update_out_of_range_flags()
    assert not sensor.above_range
    assert not sensor.below_range


def test_before_travel_window_is_zero(sensor):
    sensor.adc_reading = START_ACCELERATOR_PEDAL_1 - 1
    assert sensor.calculate_travel() == 0.0


def test_after_travel_window_is_one(sensor):
    sensor.adc_reading = END_ACCELERATOR_PEDAL_1 + 1
    assert sensor.calculate_travel() == 1.0


def test_window_edges(sensor):
    sensor.adc_reading = START_ACCELERATOR_PEDAL_1
    assert sensor.calculate_travel() == 0.0
    sensor.adc_reading = END_ACCELERATOR_PEDAL_1
    assert sensor.calculate_travel() == pytest.approx(1.0)


def test_midpoint(sensor):
    span = END_ACCELERATOR_PEDAL_1 - START_ACCELERATOR_PEDAL_1
    sensor.adc_reading = START_ACCELERATOR_PEDAL_1 + span // 2
    assert sensor.calculate_travel() == pytest.approx(0.5)


def test_travel_is_monotonic_inside_range(sensor):
    previous = -1.0
    for reading in range(MIN_ACCELERATOR_PEDAL_1, MAX_ACCELERATOR_PEDAL_1 + 1, 37):
        sensor.adc_reading = reading
        travel = sensor.calculate_travel()
        assert 0.0 <= travel <= 1.0
        assert travel >= previous
        previous = travel


def test_voltage(sensor):
    sensor.adc_reading = 4096
    assert sensor.calculate_voltage() == pytest.approx(5.0)


def test_run_updates_ratio_and_voltage(sensor):
    sensor.adc_reading = END_ACCELERATOR_PEDAL_1 + 10
    sensor.run()
    assert sensor.travel_ratio == 1.0
    assert sensor.voltage == pytest.approx(sensor.calculate_voltage())
    sensor.adc_reading = 0
    sensor.run()
    assert sensor.travel_ratio == OUT_OF_RANGE
    assert sensor.voltage == 0.0


def test_defaults():
    plain = PedalSensor(10, 100, 20, 80, 0.25)
    assert plain.travel_ratio == 0.25
    assert plain.scaling_factor == 1.0
    assert plain.voltage == 0.0
    assert not plain.below_range and not plain.above_range