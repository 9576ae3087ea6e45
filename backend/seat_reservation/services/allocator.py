"""
Seat allocator: decides which seats satisfy a booking request.

ALLOCATION STRATEGY: Single Row First, Then Spill
=================================================

  1. Scan rows from the front (row 0 upward). The first row with at least
     `count` available seats wins, and the plan is its first `count`
     available seats in column order. Parties stay together whenever any
     row can hold them.
  2. If no row is big enough, walk the rows again in the same order and
     take available seats one by one until the request is covered.
  3. If the whole map cannot cover the request, fail. No partial plans.

The allocator is a pure function over a snapshot. It never writes, so a
failure here cannot leave the seat map half-booked. Making the decision
stick under concurrency is the reservation store's job.
"""

from typing import Sequence

from seat_reservation.core.exceptions import InvalidRequestError, InsufficientCapacityError
from seat_reservation.models.seat import SeatLayout, SeatState


def validate_count(count) -> int:
    # bool is an int subclass; True is not a seat count
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidRequestError(f"Seat count must be an integer, got {count!r}")
    if count <= 0:
        raise InvalidRequestError(f"Seat count must be positive, got {count}")
    return count


def _available_in_row(states: Sequence[SeatState], layout: SeatLayout, row: int) -> list[int]:
    return [i for i in layout.row_range(row) if states[i] is SeatState.AVAILABLE]


def plan_allocation(states: Sequence[SeatState], layout: SeatLayout, count: int) -> list[int]:
    """
    Choose seats for a request of `count` seats.

    Returns the 0-based seat indices in ascending (row, column) order.
    Raises InvalidRequestError for a bad count and InsufficientCapacityError
    when the map cannot hold the request.
    """
    count = validate_count(count)
    if len(states) != layout.total:
        raise ValueError(f"Snapshot has {len(states)} seats, layout has {layout.total}")

    rows = [_available_in_row(states, layout, row) for row in range(layout.rows)]

    # Pass 1: whole party in the lowest row that fits
    for available in rows:
        if len(available) >= count:
            return available[:count]

    # Pass 2: spill across rows in order
    plan: list[int] = []
    for available in rows:
        for index in available:
            plan.append(index)
            if len(plan) == count:
                return plan

    raise InsufficientCapacityError(requested=count, available=len(plan))
