"""
Availability grid - occupancy state for one scheduling run.

The grid holds one AvailabilitySlot per (working day, hourly interval) that
does not fall inside a break window. Slots record which teacher and room ids
are already booked. A grid is built at the start of a run and thrown away at
the end; it is never shared between runs.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

import numpy as np

from ..config import DEFAULT_CONFIG, SchedulingConfig
from ..models import TimeSlot, to_minutes


@dataclass
class AvailabilitySlot:
    """One bookable cell of the grid."""
    day: str
    start_time: str
    end_time: str
    priority: int = 0
    occupied_teachers: Set[int] = field(default_factory=set)
    occupied_rooms: Set[int] = field(default_factory=set)

    def is_free_for(self, teacher_id: int, room_id: int) -> bool:
        return teacher_id not in self.occupied_teachers and room_id not in self.occupied_rooms

    def to_time_slot(self) -> TimeSlot:
        return TimeSlot(self.day, self.start_time, self.end_time)


def is_break_time(start_time: str, end_time: str, config: SchedulingConfig = DEFAULT_CONFIG) -> bool:
    """True if the interval lies entirely inside one of the configured break windows."""
    start, end = to_minutes(start_time), to_minutes(end_time)
    for break_start, break_end in config.break_windows():
        if start >= to_minutes(break_start) and end <= to_minutes(break_end):
            return True
    return False


def calculate_time_priority(day: str, start_time: str, config: SchedulingConfig = DEFAULT_CONFIG) -> int:
    """Score a slot start: mornings and mid-week days rank higher, edges of the day lower."""
    weights = config.priority
    start = to_minutes(start_time)
    priority = weights.base

    if to_minutes(weights.morning_start) <= start <= to_minutes(weights.morning_end):
        priority += weights.morning_bonus

    if day in weights.midweek_days:
        priority += weights.midweek_bonus

    if start < to_minutes(weights.early_cutoff) or start > to_minutes(weights.late_cutoff):
        priority -= weights.edge_penalty

    return priority


class AvailabilityGrid:
    """Per-day, per-slot occupancy table."""

    def __init__(self, config: SchedulingConfig = DEFAULT_CONFIG):
        self.config = config
        self.days: List[str] = list(config.working_days)
        self._slots: Dict[str, List[AvailabilitySlot]] = {}

        points = config.time_slots
        for day in self.days:
            day_slots = []
            for start_time, end_time in zip(points, points[1:]):
                if is_break_time(start_time, end_time, config):
                    continue
                day_slots.append(AvailabilitySlot(
                    day=day,
                    start_time=start_time,
                    end_time=end_time,
                    priority=calculate_time_priority(day, start_time, config),
                ))
            self._slots[day] = day_slots

        self.num_days = len(self.days)
        self.num_slots = max((len(slots) for slots in self._slots.values()), default=0)

    def slots_for(self, day: str) -> List[AvailabilitySlot]:
        """Slots of one day in chronological order (empty for non-working days)."""
        return self._slots.get(day, [])

    def all_slots(self) -> List[AvailabilitySlot]:
        return [slot for day in self.days for slot in self._slots[day]]

    def find_slot(self, day: str, start_time: str) -> Optional[AvailabilitySlot]:
        for slot in self.slots_for(day):
            if slot.start_time == start_time:
                return slot
        return None

    def is_available(self, slot: AvailabilitySlot, teacher_id: int, room_id: int) -> bool:
        return slot.is_free_for(teacher_id, room_id)

    def reserve(self, slot: AvailabilitySlot, teacher_id: int, room_id: int) -> TimeSlot:
        """Mark a slot as taken by a teacher and a room and return the claimed time range."""
        slot.occupied_teachers.add(teacher_id)
        slot.occupied_rooms.add(room_id)
        return slot.to_time_slot()

    def priorities(self, day: str) -> np.ndarray:
        """Priority scores of one day's slots, in chronological order."""
        return np.array([slot.priority for slot in self.slots_for(day)], dtype=int)

    def occupancy_mask(self, teacher_id: int, room_id: int) -> np.ndarray:
        """
        Boolean matrix of shape (num_days, num_slots); True where the teacher or the room is busy.

        Days with fewer slots than num_slots are padded with True so padding is never free.
        """
        mask = np.ones((self.num_days, self.num_slots), dtype=bool)
        for d, day in enumerate(self.days):
            for s, slot in enumerate(self._slots[day]):
                mask[d][s] = not slot.is_free_for(teacher_id, room_id)
        return mask

    def booked_count(self) -> int:
        """Number of (slot, teacher) bookings made so far."""
        return sum(len(slot.occupied_teachers) for slot in self.all_slots())
