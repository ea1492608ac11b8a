"""Weekly timetable layout shared by the terminal and HTML viewers."""

from typing import Dict, List, Tuple

from ..algorithm.availability_grid import AvailabilityGrid
from ..config import DEFAULT_CONFIG, SchedulingConfig
from ..results import ScheduleResult


def build_timetable(result: ScheduleResult,
                    config: SchedulingConfig = DEFAULT_CONFIG) -> Dict[str, List[Tuple[str, str, List[str]]]]:
    """
    Lay a result out as day -> [(start, end, entries)] over the bookable grid slots.

    Each entry reads "CODE (Teacher, Room)". A grid slot lists every class whose
    time slot overlaps it, so double bookings show up as two entries.
    """
    grid = AvailabilityGrid(config)
    timetable = {}
    for day in grid.days:
        rows = []
        for cell in grid.slots_for(day):
            cell_slot = cell.to_time_slot()
            entries = [
                f"{record.class_code} ({record.teacher.get('name', record.teacher_id)}, "
                f"{record.room.get('name', record.room_id)})"
                for record in result.schedules
                for slot in record.time_slots
                if slot.conflicts(cell_slot)
            ]
            rows.append((cell.start_time, cell.end_time, entries))
        timetable[day] = rows
    return timetable
