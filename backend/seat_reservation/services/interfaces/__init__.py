"""
Service interfaces for dependency inversion.
Allows swapping storage implementations without changing booking logic.
"""

from .seat_backend import SeatBackend
from .memory_backend import InMemorySeatBackend

__all__ = ['SeatBackend', 'InMemorySeatBackend']
