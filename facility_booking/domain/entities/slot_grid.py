from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from facility_booking.application.exceptions import InvalidSlotLabelError

MINUTES_PER_DAY = 24 * 60


def to_minutes(label: str) -> int:
    """Convert an 'HH:MM' label to whole minutes since local midnight."""
    hour, minute = label.strip().split(":")
    value = int(hour) * 60 + int(minute)
    if not 0 <= value < MINUTES_PER_DAY or not 0 <= int(minute) < 60:
        raise ValueError(f"Invalid time label: {label!r}")
    return value


def format_minutes(minutes: int) -> str:
    """Render minutes since midnight as zero-padded 'HH:MM', wrapping past midnight."""
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def parse_break(value: str) -> tuple[int, int]:
    """Parse an 'HH:MM-HH:MM' break window into a half-open minute range."""
    start, end = value.split("-")
    start_min, end_min = to_minutes(start), to_minutes(end)
    if end_min <= start_min:
        raise ValueError(f"Break must end after it starts: {value!r}")
    return start_min, end_min


@dataclass(frozen=True)
class SlotGrid:
    """Ordered, immutable catalogue of bookable slot starts.

    Adjacency is defined by position in ``labels``; two slots either side of a
    break are neighbours even though wall-clock time between them is larger.
    """

    labels: tuple[str, ...]
    step_minutes: int = 30
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.step_minutes <= 0:
            raise ValueError("step_minutes must be positive")
        minutes = [to_minutes(label) for label in self.labels]
        if any(b <= a for a, b in zip(minutes, minutes[1:])):
            raise ValueError("Slot labels must be strictly increasing")
        object.__setattr__(self, "labels", tuple(self.labels))
        object.__setattr__(self, "_index", {label: i for i, label in enumerate(self.labels)})

    @classmethod
    def build(
        cls,
        open_time: str,
        close_time: str,
        step_minutes: int = 30,
        breaks: Iterable[str] = (),
    ) -> "SlotGrid":
        """Generate slots from open to close, dropping any that start inside a break."""
        windows = [parse_break(b) for b in breaks]
        close = to_minutes(close_time)
        labels: list[str] = []
        current = to_minutes(open_time)
        while current + step_minutes <= close:
            if not any(start <= current < end for start, end in windows):
                labels.append(format_minutes(current))
            current += step_minutes
        return cls(labels=tuple(labels), step_minutes=step_minutes)

    def index(self, label: str) -> int:
        try:
            return self._index[label]
        except KeyError:
            raise InvalidSlotLabelError(label) from None

    def span(self, first: int, second: int) -> tuple[str, ...]:
        """Inclusive run of labels between two grid indices, in either order."""
        low, high = min(first, second), max(first, second)
        return self.labels[low : high + 1]

    def sort(self, labels: Iterable[str]) -> tuple[str, ...]:
        return tuple(sorted(set(labels), key=self.index))

    def is_contiguous(self, labels: Iterable[str]) -> bool:
        indices = sorted({self.index(label) for label in labels})
        return all(b - a == 1 for a, b in zip(indices, indices[1:]))

    def __contains__(self, label: object) -> bool:
        return label in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)
