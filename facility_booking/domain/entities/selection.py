from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SlotSelection:
    slots: tuple[str, ...] = ()  # grid order, always a contiguous run when produced by the engine
    full_duration: bool = False  # "full day" mode; manual toggles are refused while set

    @property
    def is_empty(self) -> bool:
        return not self.slots

    @property
    def duration_type(self) -> str:
        return "full-day" if self.full_duration else "custom"

    def __contains__(self, label: object) -> bool:
        return label in self.slots

    def __len__(self) -> int:
        return len(self.slots)
