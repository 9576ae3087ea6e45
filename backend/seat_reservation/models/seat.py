"""
Seat model and the fixed venue grid.

Key design decisions:
- Seats are addressed by a 0-based index into the flattened grid;
  row and column are derived from it and never stored separately
- The grid size is fixed when the map is created; only seat states change
- Writes validate every index before touching any state, so a rejected
  write leaves the map exactly as it was
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence


class SeatState(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"


@dataclass(frozen=True)
class Seat:
    index: int
    row: int
    col: int
    state: SeatState

    @property
    def is_available(self) -> bool:
        return self.state is SeatState.AVAILABLE


@dataclass(frozen=True)
class SeatLayout:
    rows: int = 11
    seats_per_row: int = 7

    def __post_init__(self):
        if self.rows <= 0 or self.seats_per_row <= 0:
            raise ValueError(
                f"Layout needs positive dimensions, got {self.rows}x{self.seats_per_row}"
            )

    @property
    def total(self) -> int:
        return self.rows * self.seats_per_row

    def position(self, index: int) -> tuple[int, int]:
        """Return (row, col) for a seat index."""
        if not 0 <= index < self.total:
            raise IndexError(f"Seat index {index} outside [0, {self.total})")
        return divmod(index, self.seats_per_row)

    def row_range(self, row: int) -> range:
        start = row * self.seats_per_row
        return range(start, start + self.seats_per_row)

    def seats(self, states: Sequence[SeatState]) -> list[Seat]:
        if len(states) != self.total:
            raise ValueError(f"Expected {self.total} seat states, got {len(states)}")
        return [
            Seat(index=i, row=i // self.seats_per_row, col=i % self.seats_per_row, state=state)
            for i, state in enumerate(states)
        ]


class SeatMap:
    """Mutable grid of seat states. Owned by a single backend."""

    def __init__(self, layout: SeatLayout):
        self.layout = layout
        self._states = [SeatState.AVAILABLE] * layout.total

    def __len__(self) -> int:
        return len(self._states)

    def snapshot(self) -> tuple[SeatState, ...]:
        return tuple(self._states)

    def mark_booked(self, indices: Iterable[int]) -> None:
        indices = list(indices)
        for index in indices:
            self.layout.position(index)
            if self._states[index] is not SeatState.AVAILABLE:
                raise ValueError(f"Seat {index} is already booked")
        if len(set(indices)) != len(indices):
            raise ValueError("Duplicate seat index in booking")

        for index in indices:
            self._states[index] = SeatState.BOOKED

    def clear(self) -> None:
        self._states = [SeatState.AVAILABLE] * self.layout.total

    def available_count(self) -> int:
        return sum(1 for state in self._states if state is SeatState.AVAILABLE)

    def __repr__(self) -> str:
        return (
            f"<SeatMap({self.layout.rows}x{self.layout.seats_per_row}, "
            f"available={self.available_count()}/{len(self)})>"
        )
