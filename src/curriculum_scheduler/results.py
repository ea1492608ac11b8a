"""
Result structures returned by the scheduler.

ScheduleRecord mirrors the external (camelCase) schedule shape so records
built by the generator and schedules submitted from outside go through the
same conflict and rule checks.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

from .exceptions import InvalidScheduleData
from .models import TimeSlot, total_duration


class ScheduleStatus(Enum):
    REJECTED = 0            # Hard input errors, nothing was scheduled
    COMPLETE = 1            # Every subject fully scheduled without conflicts
    PARTIAL = 2             # Some subjects missing, short of hours, or conflicting
    FAILED = 3              # No subject could be scheduled


@dataclass
class ScheduleRecord:
    """One scheduled class with embedded subject/teacher/room summaries."""
    class_id: Any
    class_code: str
    subject: Dict[str, Any]
    teacher: Dict[str, Any]
    room: Dict[str, Any]
    time_slots: List[TimeSlot] = field(default_factory=list)
    max_students: int = 0

    @property
    def teacher_id(self):
        return self.teacher.get('id')

    @property
    def room_id(self):
        return self.room.get('id')

    @property
    def total_hours(self) -> float:
        return total_duration(self.time_slots)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'classId': self.class_id,
            'classCode': self.class_code,
            'subject': dict(self.subject),
            'teacher': dict(self.teacher),
            'room': dict(self.room),
            'schedule': [slot.to_dict() for slot in self.time_slots],
            'maxStudents': self.max_students,
            'totalHours': self.total_hours,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScheduleRecord':
        """
        Build a record from the external schedule shape.

        Raises:
            InvalidScheduleData: If teacher/room ids or time slots are missing or malformed
        """
        if not isinstance(data, dict):
            raise InvalidScheduleData(f"Schedule must be a mapping, got {type(data).__name__}")

        errors = []
        teacher = data.get('teacher') or {}
        room = data.get('room') or {}
        if 'teacherId' in data and 'id' not in teacher:
            teacher = {**teacher, 'id': data['teacherId']}
        if 'roomId' in data and 'id' not in room:
            room = {**room, 'id': data['roomId']}
        if teacher.get('id') is None:
            errors.append("Schedule is missing a teacher id")
        if room.get('id') is None:
            errors.append("Schedule is missing a room id")

        slots = []
        raw_slots = data.get('schedule', [])
        if not isinstance(raw_slots, list):
            errors.append("Schedule time slots must be a list")
            raw_slots = []
        for raw_slot in raw_slots:
            if not isinstance(raw_slot, dict):
                errors.append(f"Time slot must be a mapping, got {raw_slot!r}")
                continue
            slot = TimeSlot.from_dict(raw_slot)
            slot_errors = slot.validate()
            if slot_errors:
                errors.extend(f"{slot}: {error}" for error in slot_errors)
            else:
                slots.append(slot)

        if errors:
            raise InvalidScheduleData("; ".join(errors), errors)

        class_id = data.get('classId')
        return cls(
            class_id=class_id,
            class_code=data.get('classCode') or str(class_id),
            subject=dict(data.get('subject') or {}),
            teacher=dict(teacher),
            room=dict(room),
            time_slots=slots,
            max_students=data.get('maxStudents', 0),
        )


def as_records(schedules) -> List[ScheduleRecord]:
    """Accept ScheduleRecords or their dict shape."""
    records = []
    for schedule in schedules:
        if isinstance(schedule, ScheduleRecord):
            records.append(schedule)
        else:
            records.append(ScheduleRecord.from_dict(schedule))
    return records


@dataclass
class ConflictRecord:
    """A teacher or room booked by two classes at overlapping times."""
    conflict_type: str              # 'teacher_conflict' or 'room_conflict'
    resource_id: Any
    resource_name: str
    day: str
    start_time: str
    end_time: str
    class_codes: Tuple[str, str]
    message: str = ''

    @property
    def resource_type(self) -> str:
        return self.conflict_type.split('_')[0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.conflict_type,
            'message': self.message,
            'details': {
                'resourceId': self.resource_id,
                'day': self.day,
                'time': f"{self.start_time} - {self.end_time}",
                'conflicting_classes': list(self.class_codes),
            },
        }


@dataclass
class ScheduleResult:
    status: ScheduleStatus = ScheduleStatus.COMPLETE
    schedules: List[ScheduleRecord] = field(default_factory=list)
    conflicts: List[str] = field(default_factory=list)
    conflict_records: List[ConflictRecord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return sum(record.total_hours for record in self.schedules)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status.name.lower(),
            'schedules': [record.to_dict() for record in self.schedules],
            'conflicts': list(self.conflicts) + [record.to_dict() for record in self.conflict_records],
            'warnings': list(self.warnings),
        }
