"""
Slot allocation - claims weekly hours for a subject on the availability grid.

Allocation runs in two passes:
    1. Consecutive pass: for each preferred day, claim one unbroken block of
       up to max_hours_per_day slots, trying high-priority slots first.
    2. Scatter pass: if hours remain, claim any free single slot, walking the
       working days in calendar order.

Every claimed slot is reserved on the grid immediately, so the scatter pass
and later subjects see it as taken.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from ..models import TimeSlot, total_duration
from .availability_grid import AvailabilityGrid, AvailabilitySlot

logger = logging.getLogger(__name__)

DEFAULT_MAX_HOURS_PER_DAY = 3


@dataclass
class AllocationResult:
    """Slots claimed for one subject."""
    hours_requested: float
    slots: List[TimeSlot] = field(default_factory=list)

    @property
    def hours_allocated(self) -> float:
        return total_duration(self.slots)

    @property
    def is_empty(self) -> bool:
        return not self.slots

    @property
    def is_complete(self) -> bool:
        return self.hours_allocated >= self.hours_requested


def are_consecutive(slots: Sequence[AvailabilitySlot]) -> bool:
    """True if each slot ends exactly where the next one starts."""
    return all(previous.end_time == current.start_time for previous, current in zip(slots, slots[1:]))


class SlotAllocator:
    """Claims time slots on a grid for one teacher/room pair at a time."""

    def __init__(self, grid: AvailabilityGrid):
        self.grid = grid

    def resolve_days(self, preferred_days: Optional[Sequence[str]]) -> List[str]:
        """Preferred days restricted to working days, in preference order; all working days if none remain."""
        if not preferred_days:
            return list(self.grid.days)
        days = []
        for day in preferred_days:
            if day in self.grid.days and day not in days:
                days.append(day)
        return days or list(self.grid.days)

    def allocate(self, hours_per_week: float, teacher_id: int, room_id: int,
                 preferred_days: Optional[Sequence[str]] = None,
                 max_hours_per_day: Optional[float] = None) -> AllocationResult:
        """
        Claim slots for a subject.

        Args:
            hours_per_week: Hours the subject needs; one-hour slots are claimed until covered
            teacher_id: Teacher who must be free in every claimed slot
            room_id: Room that must be free in every claimed slot
            preferred_days: Days to try first for consecutive blocks
            max_hours_per_day: Longest consecutive block per day (default 3)

        Returns:
            AllocationResult with the claimed slots in claim order. It may hold fewer
            hours than requested (or none) when the grid is too full.
        """
        result = AllocationResult(hours_requested=hours_per_week)
        remaining = math.ceil(hours_per_week)
        block_length = max(1, int(max_hours_per_day or DEFAULT_MAX_HOURS_PER_DAY))

        for day in self.resolve_days(preferred_days):
            if remaining <= 0:
                break
            block = self.find_consecutive_slots(day, min(block_length, remaining), teacher_id, room_id)
            if block:
                result.slots.extend(self.grid.reserve(slot, teacher_id, room_id) for slot in block)
                remaining -= len(block)

        if remaining > 0:
            scattered = self.distribute_remaining_hours(remaining, teacher_id, room_id)
            result.slots.extend(scattered)
            remaining -= len(scattered)

        if remaining > 0:
            logger.info("Allocated %s of %s hours for teacher %s in room %s",
                        result.hours_allocated, hours_per_week, teacher_id, room_id)
        return result

    def find_consecutive_slots(self, day: str, hours_needed: int, teacher_id: int,
                               room_id: int) -> List[AvailabilitySlot]:
        """
        Find one block of hours_needed chained, free slots on a day.

        Candidates are ordered by descending priority (stable, so equal priorities keep
        chronological order) and each window of hours_needed neighbours in that order is
        tried in turn. The first window that is free and chains end-to-start wins.

        Returns:
            The slots of the block (not yet reserved), or an empty list
        """
        day_slots = self.grid.slots_for(day)
        if hours_needed <= 0 or len(day_slots) < hours_needed:
            return []

        order = np.argsort(-self.grid.priorities(day), kind='stable')
        ranked = [day_slots[index] for index in order]

        for start in range(len(ranked) - hours_needed + 1):
            window = ranked[start:start + hours_needed]
            if not all(self.grid.is_available(slot, teacher_id, room_id) for slot in window):
                continue
            if are_consecutive(window):
                return window
        return []

    def distribute_remaining_hours(self, hours_needed: int, teacher_id: int, room_id: int) -> List[TimeSlot]:
        """Claim any free single slots, day by day in calendar order, until hours_needed are covered."""
        claimed = []
        busy = self.grid.occupancy_mask(teacher_id, room_id)
        for d, day in enumerate(self.grid.days):
            day_slots = self.grid.slots_for(day)
            for s in np.flatnonzero(~busy[d]):
                if len(claimed) >= hours_needed:
                    return claimed
                claimed.append(self.grid.reserve(day_slots[s], teacher_id, room_id))
        return claimed
