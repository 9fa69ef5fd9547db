"""Background-run setting of the host process.

Some host editors suspend background work while unfocused. The beacon forces
this setting on for the duration of a compile cycle and restores it after.
"""

from typing import Protocol


class BackgroundRunFlag(Protocol):
    """A boolean host-process setting."""

    @property
    def value(self) -> bool: ...

    @value.setter
    def value(self, enabled: bool) -> None: ...


class InMemoryBackgroundRunFlag:
    """Background-run flag held in process memory.

    Used by the engine companion, where the flag models the engine's own
    run-in-background preference.
    """

    def __init__(self, initial: bool = False) -> None:
        self._value = initial
        self.history: list[bool] = []

    @property
    def value(self) -> bool:
        return self._value

    @value.setter
    def value(self, enabled: bool) -> None:
        self._value = enabled
        self.history.append(enabled)
