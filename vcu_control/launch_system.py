"""Selection among the enabled launch controllers."""

from __future__ import annotations

from typing import Iterable

from .launch_controller import (
    LaunchControlType,
    LaunchController,
    LinearLaunchController,
    LookupLaunchController,
    PidLaunchController,
)
from .parameters import TORQUE_4

_DESCRIPTIONS = {
    LaunchControlType.DRIVER_CONTROL: "Controller type is launchControllerBase",
    LaunchControlType.LOOKUP: "Controller type is launchControllerLookup",
    LaunchControlType.PID: "Controller type is launchControllerPID",
    LaunchControlType.LINEAR: "Controller type is launchControllerLinear",
}


class LaunchControlSystem:
    """Holds one controller of each type and cycles through the enabled ones."""

    def __init__(self, enabled_types: Iterable[LaunchControlType] = tuple(LaunchControlType)) -> None:
        self.active_type = LaunchControlType.DRIVER_CONTROL
        all_controllers: dict[LaunchControlType, LaunchController] = {
            LaunchControlType.DRIVER_CONTROL: LaunchController(),
            LaunchControlType.LOOKUP: LookupLaunchController(),
            LaunchControlType.PID: PidLaunchController(4.0, 2.0, 1.0),
            LaunchControlType.LINEAR: LinearLaunchController(0, 100, 200, TORQUE_4),
        }
        self._enabled = {
            LaunchControlType(kind): all_controllers[LaunchControlType(kind)]
            for kind in enabled_types
        }

    @property
    def enabled_types(self) -> list[LaunchControlType]:
        """The enabled controller types in ascending order."""
        return sorted(self._enabled)

    @property
    def controller(self) -> LaunchController | None:
        """The active controller, or None when its type is not enabled."""
        return self._enabled.get(self.active_type)

    def toggle_controller(self, systime: int) -> None:
        """Switch to the next enabled controller type and initialise it."""
        if not self._enabled:
            raise ValueError("no launch controllers are enabled")
        count = len(LaunchControlType)
        candidates = (
            LaunchControlType((self.active_type + step) % count)
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