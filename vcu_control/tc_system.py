"""Selection among the enabled traction controllers."""

from __future__ import annotations

from typing import Iterable

from .torque_controller import (
    PidTorqueController,
    SlipTimeTorqueController,
    TorqueControlType,
    TorqueController,
)

_DESCRIPTIONS = {
    TorqueControlType.DRIVER_CONTROL: "Controller type is tc_Base",
    TorqueControlType.PID: "Controller type is tc_PID",
    TorqueControlType.SLIP_TIME: "Controller type is tc_SlipTime",
}


class TorqueControlSystem:
    """Holds one controller of each type and cycles through the enabled ones."""

    def __init__(
        self, enabled_types: Iterable[TorqueControlType] = tuple(TorqueControlType)
    ) -> None:
        self.active_type = TorqueControlType.DRIVER_CONTROL
        all_controllers: dict[TorqueControlType, TorqueController] = {
            TorqueControlType.DRIVER_CONTROL: TorqueController(),
            TorqueControlType.PID: PidTorqueController(1.0, 0, 0),
            TorqueControlType.SLIP_TIME: SlipTimeTorqueController(),
        }
        self._enabled = {
            TorqueControlType(kind): all_controllers[TorqueControlType(kind)]
            for kind in enabled_types
        }

    @property
    def enabled_types(self) -> list[TorqueControlType]:
        """The enabled controller types in ascending order."""
        return sorted(self._enabled)

    @property
    def controller(self) -> TorqueController | None:
        """The active controller, or None when its type is not enabled."""
        return self._enabled.get(self.active_type)

    def toggle_controller(self, systime: int) -> None:
        """Switch to the next enabled controller type and initialise it."""
        if not self._enabled:
            raise ValueError("no torque controllers are enabled")
        count = len(TorqueControlType)
        candidates = (
            TorqueControlType((self.active_type + step) % count)
            for step in range(1, count + 1)
        )
        self.active_type = next(kind for kind in candidates if kind in self._enabled)
        self._enabled[self.active_type].init(systime)

    def describe_controller(self) -> str | None:
        """A line naming the active controller's type, or None without one."""
        controller = self.controller
        if controller is None:
            return None
        return _DESCRIPTIONS[controller.control_type]