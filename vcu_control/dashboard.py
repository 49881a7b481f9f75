"""Dashboard button state with per-button timers since the last change."""

from __future__ import annotations

import time
from typing import Callable

NUM_BUTTONS = 6
LAUNCH_CONTROL_BUTTON = 5


def _monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


class Dashboard:
    """Dash button bits plus, for each button, the time since it last changed.

    ``clock`` returns the current time in milliseconds.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or _monotonic_ms
        self.buttons = 0
        self.new_dash_msg_received = False
        self.last_received_timestamp = 0.0
        now = self._clock()
        self._timer_starts = [now] * NUM_BUTTONS

    @staticmethod
    def _timer_index(button: int) -> int:
        if not 1 <= button <= NUM_BUTTONS:
            raise ValueError(f"button must be between 1 and {NUM_BUTTONS}, got {button}")
        return button - 1

    def get_button(self, button: int) -> bool:
        """Whether the button numbered as on the dash (1-6) is pressed."""
        if button < 1:
            raise ValueError(f"button numbers start at 1, got {button}")
        return bool(self.buttons & (1 << (button - 1)))

    @property
    def button1(self) -> bool:
        """Not connected."""
        return self.get_button(1)

    @property
    def button2(self) -> bool:
        """Green button."""
        return self.get_button(2)

    @property
    def button3(self) -> bool:
        """Blue button."""
        return self.get_button(3)

    @property
    def button4(self) -> bool:
        """Ready-to-drive button."""
        return self.get_button(4)

    @property
    def button5(self) -> bool:
        """Red button."""
        return self.get_button(5)

    @property
    def button6(self) -> bool:
        """Yellow button."""
        return self.get_button(6)

    def last_pressed_time(self, button: int) -> int:
        """Milliseconds since the button's timer was last reset."""
        return self._clock() - self._timer_starts[self._timer_index(button)]

    def set_button_last_pressed_time(self, setpoint: int, button: int) -> None:
        """Set the button's timer so that it currently reads ``setpoint`` ms."""
        self._timer_starts[self._timer_index(button)] = self._clock() - setpoint

    def _reset_all_button_timers(self) -> None:
        for button in range(1, NUM_BUTTONS + 1):
            self.set_button_last_pressed_time(0, button)

    def update(self, inputs: int) -> None:
        """Take a new button byte, restarting the timer of every button that changed."""
        self.last_received_timestamp = self._clock() / 1000
        changed = self.buttons ^ inputs
        for button in range(1, NUM_BUTTONS + 1):
            if changed & (1 << (button - 1)):
                self.set_button_last_pressed_time(0, button)
        self.buttons = inputs & 0xFF

    def button_held(self, button: int, duration_ms: int) -> bool:
        """True once the button has been pressed for ``duration_ms``; restarts its timer."""
        held = self.get_button(button) and self.last_pressed_time(button) >= duration_ms
        if held:
            self.set_button_last_pressed_time(0, button)
        return held

    def button_released(self, button: int, duration_ms: int) -> bool:
        """True once the button has been released for ``duration_ms``; restarts its timer."""
        released = (
            not self.get_button(button) and self.last_pressed_time(button) >= duration_ms
        )
        if released:
            self.set_button_last_pressed_time(0, button)
        return released