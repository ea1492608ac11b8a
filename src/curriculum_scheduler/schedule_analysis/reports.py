"""
Read-only schedule reports over the classes stored in a repository.

Each report returns plain dicts in the external camelCase shape, or None
when the requested teacher/room/curriculum does not exist.
"""

from typing import Any, Dict, List, Optional

import pandas as pd

from ..config import DEFAULT_CONFIG, SchedulingConfig, VALID_DAYS
from ..data_parsing.repository import InMemoryRepository
from . import business_rules, conflict_detector, optimization_advisor

UNKNOWN = 'Unknown'


def _sorted_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Order slot rows by weekday, then start time."""
    if not rows:
        return []
    frame = pd.DataFrame(rows)
    frame['_day_order'] = frame['day'].map(VALID_DAYS.index)
    frame = frame.sort_values(['_day_order', 'startTime'], kind='stable').drop(columns='_day_order')
    return frame.to_dict('records')


def teacher_schedule(teacher_id: int, repository: InMemoryRepository,
                     config: SchedulingConfig = DEFAULT_CONFIG) -> Optional[Dict[str, Any]]:
    """
    Weekly timetable of one teacher.

    Returns:
        {'teacher', 'schedule': [slot rows], 'summary': {totalClasses, totalHours,
        averageHoursPerDay, utilizationRate}} or None if the teacher does not exist
    """
    teacher = repository.get_teacher(teacher_id)
    if teacher is None:
        return None

    classes = repository.find_classes_by_teacher(teacher_id)
    rows = []
    for cls in classes:
        subject = repository.get_subject(cls.subject_id)
        room = repository.get_room(cls.room_id)
        for slot in cls.schedule:
            rows.append({
                'classId': cls.id,
                'classCode': cls.code,
                'subject': subject.title if subject else UNKNOWN,
                'room': room.name if room else UNKNOWN,
                'day': slot.day,
                'startTime': slot.start_time,
                'endTime': slot.end_time,
                'duration': slot.duration,
            })

    total_hours = sum(row['duration'] for row in rows)
    return {
        'teacher': teacher.summary(),
        'schedule': _sorted_rows(rows),
        'summary': {
            'totalClasses': len(classes),
            'totalHours': round(total_hours, 2),
            'averageHoursPerDay': round(total_hours / len(config.working_days), 2),
            'utilizationRate': round(total_hours / teacher.max_hours_per_week * 100, 2),
        },
    }


def room_schedule(room_id: int, repository: InMemoryRepository,
                  config: SchedulingConfig = DEFAULT_CONFIG) -> Optional[Dict[str, Any]]:
    room = repository.get_room(room_id)
    if room is None:
        return None

    classes = repository.find_classes_by_room(room_id)
    rows = []
    for cls in classes:
        subject = repository.get_subject(cls.subject_id)
        teacher = repository.get_teacher(cls.teacher_id)
        for slot in cls.schedule:
            rows.append({
                'classId': cls.id,
                'classCode': cls.code,
                'subject': subject.title if subject else UNKNOWN,
                'teacher': teacher.name if teacher else UNKNOWN,
                'day': slot.day,
                'startTime': slot.start_time,
                'endTime': slot.end_time,
                'duration': slot.duration,
                'enrolledStudents': len(cls.enrolled_student_ids),
            })

    total_hours = sum(row['duration'] for row in rows)
    average_class_size = round(sum(row['enrolledStudents'] for row in rows) / len(rows), 1) if rows else 0
    return {
        'room': room.summary(),
        'schedule': _sorted_rows(rows),
        'summary': {
            'totalClasses': len(classes),
            'totalHours': round(total_hours, 2),
            'utilizationRate': round(total_hours / config.room_weekly_hours * 100, 2),
            'averageClassSize': average_class_size,
        },
    }


def curriculum_schedule(curriculum_id: int, repository: InMemoryRepository) -> Optional[Dict[str, Any]]:
    """Every stored class of a curriculum's subjects, with the double bookings among them."""
    curriculum = repository.get_curriculum(curriculum_id)
    if curriculum is None:
        return None

    schedules = []
    total_hours = 0.0
    for subject_id in curriculum.subject_ids:
        subject = repository.get_subject(subject_id)
        for cls in repository.find_classes_by_subject(subject_id):
            teacher = repository.get_teacher(cls.teacher_id)
            room = repository.get_room(cls.room_id)
            total_hours += cls.total_hours()
            schedules.append({
                'classId': cls.id,
                'classCode': cls.code,
                'subject': subject.summary() if subject else None,
                'teacher': teacher.summary() if teacher else {'id': cls.teacher_id},
                'room': room.summary() if room else {'id': cls.room_id},
                'schedule': [slot.to_dict() for slot in cls.schedule],
                'enrolledStudents': len(cls.enrolled_student_ids),
            })

    conflicts = [conflict.message for conflict in conflict_detector.detect_conflicts(schedules)]
    return {
        'curriculum': curriculum.summary(),
        'schedule': schedules,
        'summary': {
            'totalSubjects': len(curriculum.subject_ids),
            'totalClasses': len(schedules),
            'totalHours': round(total_hours, 2),
            'conflicts': len(conflicts),
        },
        'conflicts': conflicts,
    }


def validate_schedule(data: Dict[str, Any], config: SchedulingConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
    """
    Check externally supplied schedules for double bookings and business-rule violations.

    Args:
        data: {'schedules': [...], 'teacherSchedule'?: [...], 'consecutiveClasses'?: [...]}

    Raises:
        ValueError: If 'schedules' is missing or not a list
    """
    if not isinstance(data.get('schedules'), list):
        raise ValueError("Schedules array is required")

    conflicts = [conflict.message for conflict in conflict_detector.detect_conflicts(data['schedules'])]
    violations = business_rules.validate_business_rules(data, config)
    return {
        'valid': not conflicts and not violations,
        'conflicts': conflicts,
        'businessRuleViolations': violations,
        'totalIssues': len(conflicts) + len(violations),
    }


def optimization_suggestions(repository: InMemoryRepository,
                             config: SchedulingConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
    """Room utilization suggestions over every stored class."""
    suggestions = optimization_advisor.utilization_suggestions(
        repository.get_all_classes(), repository.get_room, config)
    return {'suggestions': suggestions, 'totalSuggestions': len(suggestions)}
