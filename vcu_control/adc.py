"""External SPI ADC (MCP3204-family): command framing, sample decoding and smoothing."""

from __future__ import annotations

from typing import Iterable

DEFAULT_SPI_CS = 10
DEFAULT_SPI_SPEED = 1_000_000
NUM_ADC_CHANNELS = 4

_START_SINGLE_ENDED = 0b01100000
_MAX_CHANNEL = 7
_FULL_SCALE = 4095


def channel_command(channel: int) -> int:
    """The command byte that starts a single-ended conversion on ``channel``."""
    if not 0 <= channel <= _MAX_CHANNEL:
        raise ValueError(f"channel must be between 0 and {_MAX_CHANNEL}, got {channel}")
    return _START_SINGLE_ENDED | (channel << 2)


def decode_sample(first: int, second: int) -> int:
    """Combine the two bytes clocked out after a command into a 12-bit sample (0-4095)."""
    for value in (first, second):
        if not 0 <= value <= 0xFF:
            raise ValueError(f"ADC response bytes must fit in a byte, got {value}")
    return ((first << 4) | (second >> 4)) & 0xFFFF


class AdcFilter:
    """Exponentially smoothed readings of the ADC channels."""

    def __init__(self) -> None:
        self._readings = [0] * NUM_ADC_CHANNELS

    @property
    def readings(self) -> tuple[int, ...]:
        """The smoothed reading of every channel, in channel order."""
        return tuple(self._readings)

    def update(self, raw_readings: Iterable[int], alpha: float) -> None:
        """Blend fresh raw samples (one per channel) into the readings.

        Each reading becomes ``alpha * old + (1 - alpha) * raw``, truncated to 16 bits.
        """
        raw = list(raw_readings)
        if len(raw) != NUM_ADC_CHANNELS:
            raise ValueError(
                f"expected {NUM_ADC_CHANNELS} raw readings, got {len(raw)}"
            )
        self._readings = [
            int(alpha * old + (1 - alpha) * new) & 0xFFFF
            for old, new in zip(self._readings, raw)
        ]

    def reading(self, channel: int) -> int:
        """The smoothed reading of ``channel``, or zero for a channel that does not exist."""
        if not 0 <= channel < NUM_ADC_CHANNELS:
            return 0
        return self._readings[channel]