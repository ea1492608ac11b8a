"""
Input validation for enrollment requests and class assignments.

Every validator returns a list of error messages; an empty list means the
input is acceptable. Validators never raise for bad input.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import DEFAULT_CONFIG, VALID_DAYS, SchedulingConfig
from ..models import TimeSlot
from .repository import ScheduleRepository


@dataclass
class SchedulingPreferences:
    """Optional hints attached to an enrollment request."""
    preferred_days: Optional[List[str]] = None
    preferred_teachers: List[int] = field(default_factory=list)
    preferred_rooms: List[int] = field(default_factory=list)
    max_hours_per_day: Optional[float] = None
    term: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        if self.preferred_days is not None:
            data['preferredDays'] = list(self.preferred_days)
        if self.preferred_teachers:
            data['preferredTeachers'] = list(self.preferred_teachers)
        if self.preferred_rooms:
            data['preferredRooms'] = list(self.preferred_rooms)
        if self.max_hours_per_day is not None:
            data['maxHoursPerDay'] = self.max_hours_per_day
        if self.term is not None:
            data['term'] = self.term
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'SchedulingPreferences':
        data = data or {}
        return cls(
            preferred_days=list(data['preferredDays']) if data.get('preferredDays') is not None else None,
            preferred_teachers=list(data.get('preferredTeachers') or []),
            preferred_rooms=list(data.get('preferredRooms') or []),
            max_hours_per_day=data.get('maxHoursPerDay'),
            term=data.get('term'),
        )


@dataclass
class EnrollmentRequest:
    curriculum_id: int
    student_count: int
    preferences: SchedulingPreferences = field(default_factory=SchedulingPreferences)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'curriculumId': self.curriculum_id,
            'studentCount': self.student_count,
            'preferences': self.preferences.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EnrollmentRequest':
        """Build a request from its external shape. Call validate_enrollment_request first."""
        return cls(
            curriculum_id=data['curriculumId'],
            student_count=data['studentCount'],
            preferences=SchedulingPreferences.from_dict(data.get('preferences')),
        )


def validate_enrollment_request(data: Dict[str, Any], repository: ScheduleRepository,
                                config: SchedulingConfig = DEFAULT_CONFIG) -> List[str]:
    """
    Check the shape and references of an enrollment request.

    Args:
        data: {'curriculumId', 'studentCount', 'preferences'?}
        repository: Used to check that referenced curriculum/teachers/rooms exist
        config: Provides the student count and hours-per-day limits

    Returns:
        List of error messages (empty if the request is valid)
    """
    if not isinstance(data, dict):
        return ["Enrollment request must be a mapping"]

    errors = []
    for required in ('curriculumId', 'studentCount'):
        if data.get(required) is None:
            errors.append(f"{required[0].upper()}{required[1:]} is required")

    curriculum_id = data.get('curriculumId')
    if curriculum_id is not None:
        if not _is_int(curriculum_id):
            errors.append("Invalid or missing curriculum ID")
        elif repository.get_curriculum(curriculum_id) is None:
            errors.append(f"Curriculum with ID {curriculum_id} does not exist")

    student_count = data.get('studentCount')
    if student_count is not None:
        if not _is_int(student_count) or student_count <= 0:
            errors.append("Student count must be a positive number")
        elif student_count > config.max_student_count:
            errors.append(f"Student count cannot exceed {config.max_student_count}")

    if data.get('preferences') is not None:
        errors.extend(validate_preferences(data['preferences'], repository, config))

    return errors


def validate_preferences(preferences: Any, repository: ScheduleRepository,
                         config: SchedulingConfig = DEFAULT_CONFIG) -> List[str]:
    if not isinstance(preferences, dict):
        return ["Preferences must be a mapping"]

    errors = []

    if preferences.get('preferredDays') is not None:
        days = preferences['preferredDays']
        if not isinstance(days, list):
            errors.append("Preferred days must be a list")
        else:
            errors.extend(f"Invalid day: {day}" for day in days if day not in VALID_DAYS)

    if preferences.get('preferredTeachers') is not None:
        teacher_ids = preferences['preferredTeachers']
        if not isinstance(teacher_ids, list):
            errors.append("Preferred teachers must be a list")
        else:
            for teacher_id in teacher_ids:
                if not _is_int(teacher_id) or repository.get_teacher(teacher_id) is None:
                    errors.append(f"Teacher with ID {teacher_id} does not exist")

    if preferences.get('preferredRooms') is not None:
        room_ids = preferences['preferredRooms']
        if not isinstance(room_ids, list):
            errors.append("Preferred rooms must be a list")
        else:
            for room_id in room_ids:
                if not _is_int(room_id) or repository.get_room(room_id) is None:
                    errors.append(f"Room with ID {room_id} does not exist")

    if preferences.get('maxHoursPerDay') is not None:
        max_hours = preferences['maxHoursPerDay']
        if not _is_number(max_hours) or max_hours < 1:
            errors.append("Max hours per day must be a number of at least 1")
        elif max_hours > config.max_hours_per_day_limit:
            errors.append(f"Max hours per day cannot exceed {config.max_hours_per_day_limit:g}")

    if preferences.get('term') is not None and not isinstance(preferences['term'], str):
        errors.append("Term must be a string")

    return errors


def validate_time_slot(data: Dict[str, Any]) -> List[str]:
    """Validate an external time slot mapping ({'day', 'startTime', 'endTime'})."""
    if not isinstance(data, dict):
        return ["Time slot must be a mapping"]
    errors = [f"Time slot must include {key}" for key in ('day', 'startTime', 'endTime') if not data.get(key)]
    if errors:
        return errors
    return TimeSlot.from_dict(data).validate()


def validate_class_assignment(data: Dict[str, Any], repository: ScheduleRepository) -> List[str]:
    """Check that a manual class assignment references valid, compatible entities."""
    errors = []
    for required in ('subjectId', 'teacherId', 'roomId', 'maxStudents'):
        if data.get(required) is None:
            errors.append(f"{required[0].upper()}{required[1:]} is required")

    subject_id = data.get('subjectId')
    teacher_id = data.get('teacherId')
    room_id = data.get('roomId')
    subject = repository.get_subject(subject_id) if subject_id is not None else None
    teacher = repository.get_teacher(teacher_id) if teacher_id is not None else None
    room = repository.get_room(room_id) if room_id is not None else None

    if subject_id is not None and subject is None:
        errors.append(f"Subject with ID {subject_id} does not exist")
    if teacher_id is not None and teacher is None:
        errors.append(f"Teacher with ID {teacher_id} does not exist")
    if room_id is not None and room is None:
        errors.append(f"Room with ID {room_id} does not exist")

    if subject is not None and teacher is not None and not teacher.can_teach(subject.id):
        errors.append("Teacher is not qualified to teach this subject")

    max_students = data.get('maxStudents')
    if room is not None and _is_number(max_students) and max_students > room.capacity:
        errors.append(f"Max students ({max_students}) exceeds room capacity ({room.capacity})")

    return errors


def validate_curriculum_integrity(curriculum_id: int, repository: ScheduleRepository,
                                  config: SchedulingConfig = DEFAULT_CONFIG) -> List[str]:
    """Check that a curriculum's subjects exist and its weekly load is reasonable."""
    curriculum = repository.get_curriculum(curriculum_id)
    if curriculum is None:
        return ["Curriculum not found"]

    errors = [
        f"Subject with ID {subject_id} in curriculum does not exist"
        for subject_id in curriculum.subject_ids
        if repository.get_subject(subject_id) is None
    ]

    total_hours = sum(
        subject.hours_per_week
        for subject in (repository.get_subject(subject_id) for subject_id in curriculum.subject_ids)
        if subject is not None
    )
    if total_hours > config.max_curriculum_hours:
        errors.append(f"Total weekly hours ({total_hours:g}) exceeds recommended maximum ({config.max_curriculum_hours:g} hours)")
    if total_hours < config.min_curriculum_hours:
        errors.append(f"Total weekly hours ({total_hours:g}) is below minimum requirement ({config.min_curriculum_hours:g} hours)")

    return errors


def validate_resource_availability(curriculum_id: int, student_count: int,
                                   repository: ScheduleRepository) -> List[str]:
    """Check that every subject has a qualified teacher and enough rooms fit the group."""
    curriculum = repository.get_curriculum(curriculum_id)
    if curriculum is None:
        return ["Curriculum not found"]

    errors = []
    for subject_id in curriculum.subject_ids:
        if not repository.find_teachers_by_subject(subject_id):
            subject = repository.get_subject(subject_id)
            subject_title = subject.title if subject else f"Subject ID {subject_id}"
            errors.append(f"No qualified teachers available for {subject_title}")

    available_rooms = repository.find_rooms_by_capacity(student_count)
    if not available_rooms:
        errors.append(f"No rooms available with sufficient capacity for {student_count} students")
    elif len(available_rooms) < len(curriculum.subject_ids):
        errors.append(
            f"Insufficient rooms for all subjects. Need {len(curriculum.subject_ids)} rooms, "
            f"but only {len(available_rooms)} available"
        )

    return errors


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
