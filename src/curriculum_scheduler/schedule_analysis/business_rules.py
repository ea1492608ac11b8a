"""
Business rules that per-slot reservation cannot express.

    - A teacher may not hold more than N class slots on one day (default 6).
    - Back-to-back classes need a minimum break between them (default 15 minutes).

These checks run on demand against caller-supplied data; the schedule
generator does not apply them automatically.
"""

from typing import Any, Dict, List

import pandas as pd

from ..config import DEFAULT_CONFIG, SchedulingConfig
from ..exceptions import InvalidScheduleData
from ..models import TimeSlot, is_valid_time_format, to_minutes
from ..results import ScheduleRecord

SELF = "self"


def teacher_daily_load(schedules) -> pd.DataFrame:
    """
    Count slot occurrences per (teacher, day).

    Args:
        schedules: ScheduleRecords or their dict shape. Dicts without a teacher id
                   are counted under SELF (one teacher's own timetable).

    Returns:
        DataFrame with columns teacher_id, teacher_name, day, classes

    Raises:
        InvalidScheduleData: If a schedule or one of its slots is not a mapping with a day
    """
    rows = []
    for index, schedule in enumerate(schedules):
        if isinstance(schedule, ScheduleRecord):
            teacher, slots = schedule.teacher, schedule.time_slots
        elif isinstance(schedule, dict):
            teacher = dict(schedule.get('teacher') or {})
            if teacher.get('id') is None:
                teacher['id'] = schedule.get('teacherId')
            slots = [_slot_with_day(raw_slot, index) for raw_slot in schedule.get('schedule') or []]
        else:
            raise InvalidScheduleData(f"Teacher schedule {index} must be a mapping")
        teacher_id = teacher.get('id')
        for slot in slots:
            rows.append({
                'teacher_id': SELF if teacher_id is None else teacher_id,
                'teacher_name': teacher.get('name') or '',
                'day': slot.day,
            })

    if not rows:
        return pd.DataFrame(columns=['teacher_id', 'teacher_name', 'day', 'classes'])

    slots_df = pd.DataFrame(rows)
    return (slots_df.groupby(['teacher_id', 'day'], sort=False)
            .agg(teacher_name=('teacher_name', 'first'), classes=('teacher_name', 'size'))
            .reset_index())


def _slot_with_day(raw_slot, index: int) -> TimeSlot:
    if not isinstance(raw_slot, dict) or not raw_slot.get('day'):
        raise InvalidScheduleData(f"Teacher schedule {index} has a time slot without a day")
    return TimeSlot.from_dict(raw_slot)


def check_max_classes_per_day(schedules, config: SchedulingConfig = DEFAULT_CONFIG) -> List[str]:
    errors = []
    load = teacher_daily_load(schedules)
    overloaded = load[load['classes'] > config.max_classes_per_teacher_per_day]
    for row in overloaded.itertuples(index=False):
        who = row.teacher_name or ('Teacher' if row.teacher_id == SELF else f"Teacher {row.teacher_id}")
        errors.append(f"{who} exceeds maximum classes per day ({row.classes}) on {row.day}")
    return errors


def check_minimum_breaks(consecutive_classes: List[Dict[str, Any]],
                         config: SchedulingConfig = DEFAULT_CONFIG) -> List[str]:
    """
    Flag adjacent classes whose gap is shorter than the configured minimum break.

    Raises:
        InvalidScheduleData: If an entry is not a mapping with HH:MM startTime and endTime
    """
    problems = []
    for index, entry in enumerate(consecutive_classes):
        if not isinstance(entry, dict):
            problems.append(f"Consecutive class {index} must be a mapping")
            continue
        for key in ('startTime', 'endTime'):
            if not is_valid_time_format(entry.get(key)):
                problems.append(f"Consecutive class {index} has missing or invalid {key}")
    if problems:
        raise InvalidScheduleData("; ".join(problems), problems)

    errors = []
    for current, following in zip(consecutive_classes, consecutive_classes[1:]):
        gap = to_minutes(following['startTime']) - to_minutes(current['endTime'])
        if gap < config.min_break_minutes:
            errors.append(
                f"Insufficient break time between consecutive classes "
                f"({current['endTime']} to {following['startTime']}, {gap} minutes)"
            )
    return errors


def validate_business_rules(data: Dict[str, Any], config: SchedulingConfig = DEFAULT_CONFIG) -> List[str]:
    """
    Run all business-rule checks on caller-supplied data.

    Args:
        data: {'teacherSchedule': [schedules...], 'consecutiveClasses': [{'startTime', 'endTime'}, ...]}
              Both keys are optional.

    Returns:
        List of violation messages (empty if every rule holds)

    Raises:
        InvalidScheduleData: If data or one of its entries is malformed
    """
    if not isinstance(data, dict):
        raise InvalidScheduleData(f"Business rule data must be a mapping, got {type(data).__name__}")
    errors = []
    if data.get('teacherSchedule'):
        errors.extend(check_max_classes_per_day(data['teacherSchedule'], config))
    if data.get('consecutiveClasses'):
        errors.extend(check_minimum_breaks(data['consecutiveClasses'], config))
    return errors
