"""
Entity models for the curriculum scheduler.

Entities reference each other by id only (teacher -> subject ids,
curriculum -> subject ids, class -> subject/teacher/room ids). Existence of
referenced ids is checked at the boundary by the repository and the request
validators, never by the entities themselves.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from .config import VALID_DAYS

TIME_FORMAT = re.compile(r'^([01]?[0-9]|2[0-3]):[0-5][0-9]$')
EMAIL_FORMAT = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')

BUSINESS_HOURS_START = '07:00'
BUSINESS_HOURS_END = '22:00'

VALID_TERMS = ['1st Semester', '2nd Semester', 'Summer', 'Trimester 1', 'Trimester 2', 'Trimester 3']
MAX_CLASS_SIZE = 200


def is_valid_time_format(value) -> bool:
    """Check a 24-hour HH:MM string."""
    return isinstance(value, str) and TIME_FORMAT.match(value) is not None


def is_valid_email(value) -> bool:
    return isinstance(value, str) and EMAIL_FORMAT.match(value) is not None


def to_minutes(value: str) -> int:
    """Convert 'HH:MM' to minutes after midnight."""
    if not is_valid_time_format(value):
        raise ValueError(f"Invalid time format: {value!r}. Use HH:MM")
    hours, minutes = value.split(':')
    return int(hours) * 60 + int(minutes)


@dataclass(frozen=True)
class TimeSlot:
    """A weekly time range on one day."""
    day: str
    start_time: str
    end_time: str

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end_time)

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @property
    def duration(self) -> float:
        """Duration in hours."""
        return self.duration_minutes / 60

    def validate(self) -> List[str]:
        errors = []

        if not self.day:
            errors.append("Day is required")
        elif self.day not in VALID_DAYS:
            errors.append(f"Invalid day. Valid days: {', '.join(VALID_DAYS)}")

        if not self.start_time:
            errors.append("Start time is required")
        elif not is_valid_time_format(self.start_time):
            errors.append("Invalid start time format. Use HH:MM (24-hour format)")

        if not self.end_time:
            errors.append("End time is required")
        elif not is_valid_time_format(self.end_time):
            errors.append("Invalid end time format. Use HH:MM (24-hour format)")

        if errors:
            return errors

        if self.start_minutes >= self.end_minutes:
            errors.append("End time must be after start time")
        elif self.duration > 4:
            errors.append("Duration cannot exceed 4 hours")
        elif self.duration < 0.5:
            errors.append("Duration must be at least 30 minutes")

        if not self.is_within_business_hours():
            errors.append(f"Time slot must fall within business hours ({BUSINESS_HOURS_START}-{BUSINESS_HOURS_END})")

        return errors

    def conflicts(self, other: 'TimeSlot') -> bool:
        """True if both slots are on the same day and their [start, end) ranges overlap."""
        if self.day != other.day:
            return False
        return not (self.end_minutes <= other.start_minutes or self.start_minutes >= other.end_minutes)

    def is_within_business_hours(self) -> bool:
        return (self.start_minutes >= to_minutes(BUSINESS_HOURS_START)
                and self.end_minutes <= to_minutes(BUSINESS_HOURS_END))

    def to_dict(self) -> Dict[str, str]:
        return {'day': self.day, 'startTime': self.start_time, 'endTime': self.end_time}

    @classmethod
    def from_dict(cls, data: Dict) -> 'TimeSlot':
        return cls(
            day=data.get('day', ''),
            start_time=data.get('startTime', data.get('start_time', '')),
            end_time=data.get('endTime', data.get('end_time', '')),
        )

    def __str__(self):
        return f"{self.day} {self.start_time}-{self.end_time}"


@dataclass
class Subject:
    id: int
    title: str
    units: float
    hours_per_week: float

    def validate(self) -> List[str]:
        errors = []
        if not str(self.title or '').strip():
            errors.append("Title is required")
        if not _is_number(self.units) or self.units <= 0:
            errors.append("Units must be a positive number")
        if not _is_number(self.hours_per_week) or self.hours_per_week <= 0:
            errors.append("Hours per week must be a positive number")
        elif self.hours_per_week > 40:
            errors.append("Hours per week cannot exceed 40")
        return errors

    def summary(self) -> Dict:
        return {'id': self.id, 'title': self.title, 'units': self.units, 'hoursPerWeek': self.hours_per_week}


@dataclass
class Teacher:
    id: int
    name: str
    email: str = ''
    subject_ids: Set[int] = field(default_factory=set)
    max_hours_per_week: float = 40

    def __post_init__(self):
        self.subject_ids = set(self.subject_ids)

    def validate(self) -> List[str]:
        errors = []
        if not str(self.name or '').strip():
            errors.append("Teacher name is required")
        if self.email and not is_valid_email(self.email):
            errors.append("Invalid email format")
        if not self.subject_ids:
            errors.append("Teacher must be able to teach at least one subject")
        if not _is_number(self.max_hours_per_week) or self.max_hours_per_week <= 0:
            errors.append("Max hours per week must be a positive number")
        elif self.max_hours_per_week > 60:
            errors.append("Max hours per week cannot exceed 60")
        return errors

    def can_teach(self, subject_id: int) -> bool:
        return subject_id in self.subject_ids

    def add_subject(self, subject_id: int):
        self.subject_ids.add(subject_id)

    def remove_subject(self, subject_id: int):
        self.subject_ids.discard(subject_id)

    def summary(self) -> Dict:
        return {'id': self.id, 'name': self.name, 'email': self.email}


@dataclass
class Room:
    id: int
    name: str
    capacity: int
    location: str = ''
    equipment: Set[str] = field(default_factory=set)

    def __post_init__(self):
        self.equipment = set(self.equipment)

    def validate(self) -> List[str]:
        errors = []
        if not str(self.name or '').strip():
            errors.append("Room name is required")
        if not _is_number(self.capacity) or self.capacity <= 0:
            errors.append("Capacity must be a positive number")
        elif self.capacity > 1000:
            errors.append("Capacity cannot exceed 1000")
        return errors

    def has_equipment(self, tag: str) -> bool:
        return tag in self.equipment

    def summary(self) -> Dict:
        return {'id': self.id, 'name': self.name, 'capacity': self.capacity, 'location': self.location}


@dataclass
class Curriculum:
    id: int
    name: str
    term: str
    year_level: int = 1
    subject_ids: List[int] = field(default_factory=list)
    total_units: float = 0
    description: str = ''

    def validate(self) -> List[str]:
        errors = []
        if not str(self.name or '').strip():
            errors.append("Curriculum name is required")
        if not str(self.term or '').strip():
            errors.append("Term is required")
        elif self.term not in VALID_TERMS:
            errors.append(f"Invalid term. Valid terms: {', '.join(VALID_TERMS)}")
        if not _is_number(self.year_level) or not 1 <= self.year_level <= 6:
            errors.append("Year level must be between 1 and 6")
        if not self.subject_ids:
            errors.append("Curriculum must have at least one subject")
        return errors

    def has_subject(self, subject_id: int) -> bool:
        return subject_id in self.subject_ids

    def add_subject(self, subject_id: int):
        if subject_id not in self.subject_ids:
            self.subject_ids.append(subject_id)

    def remove_subject(self, subject_id: int):
        self.subject_ids = [existing for existing in self.subject_ids if existing != subject_id]

    def calculate_total_units(self, subjects: Dict[int, Subject]) -> float:
        """Recompute total_units from a mapping of subject id to Subject."""
        self.total_units = sum(subjects[subject_id].units for subject_id in self.subject_ids if subject_id in subjects)
        return self.total_units

    def summary(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'term': self.term,
            'yearLevel': self.year_level,
            'subjectIds': list(self.subject_ids),
            'totalUnits': self.total_units,
        }


class ClassStatus(str, Enum):
    ACTIVE = 'active'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'


@dataclass
class ClassEntity:
    """A scheduled class: one subject taught by one teacher in one room at fixed weekly times."""
    id: int
    code: str
    subject_id: int
    teacher_id: int
    room_id: int
    max_students: int
    enrolled_student_ids: List[int] = field(default_factory=list)
    schedule: List[TimeSlot] = field(default_factory=list)
    term: str = ''
    year_level: int = 1
    status: str = ClassStatus.ACTIVE.value

    def validate(self) -> List[str]:
        errors = []
        if not str(self.code or '').strip():
            errors.append("Class code is required")
        if not self.subject_id:
            errors.append("Subject ID is required")
        if not self.teacher_id:
            errors.append("Teacher ID is required")
        if not self.room_id:
            errors.append("Room ID is required")
        if not _is_number(self.max_students) or self.max_students <= 0:
            errors.append("Max students must be a positive number")
        elif self.max_students > MAX_CLASS_SIZE:
            errors.append(f"Max students cannot exceed {MAX_CLASS_SIZE}")
        valid_statuses = [status.value for status in ClassStatus]
        if self.status not in valid_statuses:
            errors.append(f"Invalid status. Valid statuses: {', '.join(valid_statuses)}")
        return errors

    def add_student(self, student_id: int) -> bool:
        """Enroll a student; refuses duplicates and full classes."""
        if self.is_full() or self.has_student(student_id):
            return False
        self.enrolled_student_ids.append(student_id)
        return True

    def remove_student(self, student_id: int) -> bool:
        if not self.has_student(student_id):
            return False
        self.enrolled_student_ids.remove(student_id)
        return True

    def has_student(self, student_id: int) -> bool:
        return student_id in self.enrolled_student_ids

    def is_full(self) -> bool:
        return len(self.enrolled_student_ids) >= self.max_students

    def available_seats(self) -> int:
        return self.max_students - len(self.enrolled_student_ids)

    def add_schedule_slot(self, day: str, start_time: str, end_time: str):
        self.schedule.append(TimeSlot(day, start_time, end_time))

    def clear_schedule(self):
        self.schedule = []

    def total_hours(self) -> float:
        return sum(slot.duration for slot in self.schedule)


def generate_class_code(subject_title: str, section: str = 'A', year: Optional[int] = None) -> str:
    """Build a class code like 'CALCULUSI-A-2025' from a subject title."""
    year = year or date.today().year
    stem = re.sub(r'[^A-Za-z0-9]', '', subject_title).upper() or 'CLASS'
    return f"{stem}-{section.upper()}-{year}"


def section_letter(index: int) -> str:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA'."""
    letters = ''
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord('A') + remainder) + letters
    return letters


def total_duration(slots: Iterable[TimeSlot]) -> float:
    """Sum of slot durations in hours."""
    return sum(slot.duration for slot in slots)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
