"""
Conflict detection over finished schedules.

Works on generated ScheduleRecords and on schedules submitted from outside
(dicts in the external camelCase shape), so it doubles as a validator for
hand-made timetables.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple

from ..models import TimeSlot
from ..results import ConflictRecord, ScheduleRecord, as_records

logger = logging.getLogger(__name__)

RESOURCE_TYPES = ('teacher', 'room')


def detect_conflicts(schedules: Iterable) -> List[ConflictRecord]:
    """
    Find every teacher or room that two different classes book at overlapping times.

    Args:
        schedules: ScheduleRecords or dicts with 'classCode', 'teacher', 'room', 'schedule'

    Returns:
        One ConflictRecord per overlapping pair of slots per resource. Each record
        carries the class code seen first, then the class code seen second, and the
        day/time of the second slot.

    Raises:
        InvalidScheduleData: If an external schedule lacks ids or has malformed slots
    """
    records = as_records(schedules)
    conflicts = []
    for resource_type in RESOURCE_TYPES:
        conflicts.extend(_detect_for_resource(records, resource_type))

    if conflicts:
        logger.warning("Detected %s scheduling conflict(s) across %s classes", len(conflicts), len(records))
    return conflicts


def _detect_for_resource(records: List[ScheduleRecord], resource_type: str) -> List[ConflictRecord]:
    # (resource id, day) -> [(record index, record, slot)] in encounter order
    bookings: Dict[Tuple, List[Tuple[int, ScheduleRecord, TimeSlot]]] = defaultdict(list)
    conflicts = []

    for index, record in enumerate(records):
        resource = record.teacher if resource_type == 'teacher' else record.room
        resource_id = resource.get('id')
        for slot in record.time_slots:
            key = (resource_id, slot.day)
            for other_index, other_record, other_slot in bookings[key]:
                if other_index != index and slot.conflicts(other_slot):
                    conflicts.append(_build_conflict(resource_type, resource, other_record, record, slot))
            bookings[key].append((index, record, slot))

    return conflicts


def _build_conflict(resource_type: str, resource: Dict, first: ScheduleRecord,
                    second: ScheduleRecord, slot: TimeSlot) -> ConflictRecord:
    resource_name = resource.get('name') or f"#{resource.get('id')}"
    label = 'Teacher' if resource_type == 'teacher' else 'Room'
    message = (f"{label} {resource_name} has conflicting schedules on {slot.day} at {slot.start_time} "
               f"({first.class_code} and {second.class_code})")
    return ConflictRecord(
        conflict_type=f"{resource_type}_conflict",
        resource_id=resource.get('id'),
        resource_name=resource_name,
        day=slot.day,
        start_time=slot.start_time,
        end_time=slot.end_time,
        class_codes=(first.class_code, second.class_code),
        message=message,
    )
