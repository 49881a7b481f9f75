"""Vehicle constants: calibration values, CAN identifiers and board pin assignments."""

from __future__ import annotations

import math
from enum import IntEnum

PI = math.pi
DEBUG = False
USE_INVERTER = True

# Cruise / traction control PID defaults
SLIP = 1.1
SET_RPM = 1624
D_KP = 1.5
D_KI = 0.3
D_KD = 0.5
D_OUTPUT_MIN = 0.0
D_OUTPUT_MAX = 2000.0
BANGBANG_RANGE = 1000.0
PID_TIMESTEP = 100.0
PID_MODE = False
PID_TC_MODE = False
EXP_TORQUE_CURVE = False

LAUNCHCONTROL_RELEASE_DELAY = 1500
WHEELSPEED_TOOTH_COUNT = 18
WHEEL_CIRCUMFERENCE = 0.229 * PI * 2
FRONT_SPROCKET_TEETH = 10.0
REAR_SPROCKET_TEETH = 37.0
FINAL_DRIVE = FRONT_SPROCKET_TEETH / REAR_SPROCKET_TEETH
RPM_TIMEOUT = 1000

# Brake pedal ADC thresholds
MIN_BRAKE_PEDAL = 400
START_BRAKE_PEDAL = 887
BRAKE_ACTIVE = 2200
END_BRAKE_PEDAL = 3068
MAX_BRAKE_PEDAL = 3850

# Accelerator pedal ADC thresholds
MIN_ACCELERATOR_PEDAL_1 = 50
START_ACCELERATOR_PEDAL_1 = 1517
END_ACCELERATOR_PEDAL_1 = 3471
MAX_ACCELERATOR_PEDAL_1 = 4000

MIN_ACCELERATOR_PEDAL_2 = 80
START_ACCELERATOR_PEDAL_2 = 1029
END_ACCELERATOR_PEDAL_2 = 2290
MAX_ACCELERATOR_PEDAL_2 = 3000

APPS_ALLOWABLE_TRAVEL_DEVIATION = 150

REGEN_NM = 60
BSPD_OK_HIGH_THRESHOLD = 500

ACCUMULATOR_MAX_DISCHARGE_CURRENT = 280
ACCUMULATOR_MAX_CHARGE_CURRENT = 32
ACCUMULATOR_CELL_COUNT = 72
ACCUMULATOR_CELL_MINIMUM_VOLTAGE = 2.5
ACCUMULATOR_CELL_NOMINAL_VOLTAGE = 3.6
ACCUMULATOR_CELL_MAXIMUM_VOLTAGE = 4.2
BSPD_TRIP_POWER = 5000.0
# Current at which the BSPD current detection should read high (5 kW at nominal voltage)
BSPD_CURRENT_HIGH_THRESHOLD = BSPD_TRIP_POWER / (
    ACCUMULATOR_CELL_COUNT * ACCUMULATOR_CELL_NOMINAL_VOLTAGE
)
MIN_HV_VOLTAGE = 600
DISCHARGE_POWER_LIM = 80000
CHARGE_POWER_LIM = 9000

CUTOFF_10HZ = 10.0
FILTERING_ALPHA_10HZ = 2 * 3.14 * CUTOFF_10HZ / (1 + 2 * 3.14 * CUTOFF_10HZ)
CUTOFF_1HZ = 1.0
FILTERING_ALPHA_1HZ = 2 * 3.14 * CUTOFF_1HZ / (1 + 2 * 3.14 * CUTOFF_1HZ)

# Torque settings in Nm; max torque travels as an unsigned byte on the wire.
TORQUE_1 = 10
TORQUE_2 = 54
TORQUE_3 = 160
TORQUE_4 = 200
TORQUE_MODE_LIST = (TORQUE_1, TORQUE_2, TORQUE_3, TORQUE_4)


class CanId(IntEnum):
    """CAN message identifiers used on the vehicle buses."""

    MC_TEMPERATURES_1 = 0xA0
    MC_TEMPERATURES_2 = 0xA1
    MC_TEMPERATURES_3 = 0xA2
    MC_ANALOG_INPUTS_VOLTAGES = 0xA3
    MC_DIGITAL_INPUT_STATUS = 0xA4
    MC_MOTOR_POSITION_INFORMATION = 0xA5
    MC_CURRENT_INFORMATION = 0xA6
    MC_VOLTAGE_INFORMATION = 0xA7
    MC_FLUX_INFORMATION = 0xA8
    MC_INTERNAL_VOLTAGES = 0xA9
    MC_INTERNAL_STATES = 0xAA
    MC_FAULT_CODES = 0xAB
    MC_TORQUE_TIMER_INFORMATION = 0xAC
    MC_MODULATION_INDEX_FLUX_WEAKENING_OUTPUT_INFORMATION = 0xAD
    MC_FIRMWARE_INFORMATION = 0xAE
    MC_DIAGNOSTIC_DATA = 0xAF
    MC_COMMAND_MESSAGE = 0xC0
    MC_READ_WRITE_PARAMETER_COMMAND = 0xC1
    MC_READ_WRITE_PARAMETER_RESPONSE = 0xC2
    VCU_STATUS = 0xC3
    VCU_PEDAL_READINGS = 0xC4
    VCU_WS_READINGS = 0xC6
    VCU_PEDAL_THRESHOLD_SETTINGS = 0xC7
    VCU_FW_VERSION = 0xC8
    VCU_BOARD_ANALOG_READS_ONE = 0xC9
    VCU_BOARD_ANALOG_READS_TWO = 0xCA
    VCU_BASE_LAUNCH_CONTROLLER_INFO = 0xCB
    VCU_PEDAL_TRAVEL = 0xCC
    VCU_LAUNCH_CONTROL_COUNTDOWN = 0xCD
    DASH_BUTTONS = 0xEB
    DASH_FW_VERSION = 0xEC
    MC_CURRENT_LIMIT_COMMAND = 0x202
    BMS_SOC = 0x6B3
    VCU_DISTANCE_TRACKER_MOTOR = 0xCE
    VCU_DISTANCE_TRACKER_WHEELSPEED = 0xCF
    VCU_LIFETIME_DATA = 0xD0
    VCU_TRACTION_CONTROLLER_INFO = 0xD1
    VCU_DISTANCE_TRACKER_VN = 0xD2
    VCU_COULOMB_COUNT = 0xD3
    VCU_CALCULATED_SLIP = 0xD4
    VCU_POWER_LIM_UPDATE = 0xD5
    VCU_SPEED_LIM_UPDATE = 0xD6
    BMS_CURRENT_LIMIT_INFO = 0x6B1
    BMS_PACK_VOLTAGE_INFO = 0x6B2
    ACU_RELAY = 0x258
    ACU_MEASUREMENTS = 0x259
    PRECHARGE_STATUS = 0x69


NUM_TX_MAILBOXES = 32
NUM_RX_MAILBOXES = 32

# Board pins
WSFL = 28
WSFR = 29
SDCVSENSE = 39
SDCISENSE = 20
BSPDSENSE = 16
GLV_VSENSE = 41
GLV_ISENSE = 38
VSENSE_5V = 40
A9 = 27
A10 = 26
ANALOG_INIT_LIST = (SDCVSENSE, SDCISENSE, BSPDSENSE, GLV_VSENSE, GLV_ISENSE, VSENSE_5V, A9, A10)
BUZZER = 4
LOWSIDE1 = 5
LOWSIDE2 = 6

# External ADC channels
ADC_BRAKE_1_CHANNEL = 2
ADC_STEERING_CHANNEL = 3
ADC_ACCEL_1_CHANNEL = 1
ADC_ACCEL_2_CHANNEL = 0
CS_ADC = 10