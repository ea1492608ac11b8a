"""
Scheduling configuration.

Holds the fixed weekly layout (working days, hourly timeline, break windows)
and the thresholds used by the validators and the optimization advisor.
Defaults can be overridden from environment variables via SchedulingConfig.from_env().
"""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

VALID_DAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']
WORKING_DAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday']
TIME_SLOTS = [
    '07:00', '08:00', '09:00', '10:00', '11:00', '12:00',
    '13:00', '14:00', '15:00', '16:00', '17:00', '18:00',
]
BREAK_TIMES = [
    '10:00-10:15',  # Morning break
    '12:00-13:00',  # Lunch break
    '15:00-15:15',  # Afternoon break
]


@dataclass
class PriorityWeights:
    """Scores used to rank grid slots (higher is better)."""
    base: int = 5
    morning_bonus: int = 3          # start within [morning_start, morning_end]
    midweek_bonus: int = 2          # Tuesday-Thursday
    edge_penalty: int = 2           # start before early_cutoff or after late_cutoff
    morning_start: str = '08:00'
    morning_end: str = '11:00'
    early_cutoff: str = '07:30'
    late_cutoff: str = '17:00'
    midweek_days: Tuple[str, ...] = ('Tuesday', 'Wednesday', 'Thursday')


@dataclass
class SchedulingConfig:
    """Weekly layout and rule thresholds for one scheduler instance."""
    working_days: List[str] = field(default_factory=lambda: list(WORKING_DAYS))
    time_slots: List[str] = field(default_factory=lambda: list(TIME_SLOTS))
    break_times: List[str] = field(default_factory=lambda: list(BREAK_TIMES))
    priority: PriorityWeights = field(default_factory=PriorityWeights)

    # Request limits
    max_student_count: int = 500
    default_max_hours_per_day: float = 3
    max_hours_per_day_limit: float = 8
    default_term: str = 'Current Term'
    class_size_margin: int = 10  # seats added on top of the requested student count

    # Business rules
    max_classes_per_teacher_per_day: int = 6
    min_break_minutes: int = 15

    # Optimization advisor
    room_weekly_hours: float = 45.0
    underutilized_threshold: float = 30.0
    overutilized_threshold: float = 90.0
    max_days_per_class: int = 4
    max_hours_per_class_day: float = 4

    # Curriculum integrity
    min_curriculum_hours: float = 12
    max_curriculum_hours: float = 40

    # Balanced matcher
    solver_time_limit_seconds: float = 5.0

    def __post_init__(self):
        if not self.working_days:
            raise ValueError("working_days list is empty")
        invalid_days = [day for day in self.working_days if day not in VALID_DAYS]
        if invalid_days:
            raise ValueError(f"Invalid working days: {invalid_days}")
        if len(self.time_slots) < 2:
            raise ValueError("time_slots needs at least two points to form a slot")
        if self.time_slots != sorted(self.time_slots):
            raise ValueError("time_slots must be in ascending order")
        for break_time in self.break_times:
            if break_time.count('-') != 1:
                raise ValueError(f"Break window must look like 'HH:MM-HH:MM', got {break_time!r}")

    def break_windows(self) -> List[Tuple[str, str]]:
        """Break windows as (start, end) pairs."""
        return [tuple(break_time.split('-')) for break_time in self.break_times]

    def describe(self) -> Dict[str, List[str]]:
        """Static description of the weekly layout."""
        return {
            'workingDays': list(self.working_days),
            'timeSlots': list(self.time_slots),
            'breakTimes': list(self.break_times),
        }

    @classmethod
    def from_env(cls, environ=None) -> 'SchedulingConfig':
        """
        Build a config with overrides from SCHEDULER_* environment variables.

        Supported variables:
            SCHEDULER_WORKING_DAYS: comma separated day names
            SCHEDULER_TIME_SLOTS: comma separated HH:MM points
            SCHEDULER_BREAK_TIMES: comma separated HH:MM-HH:MM windows
            SCHEDULER_MAX_STUDENT_COUNT, SCHEDULER_MAX_CLASSES_PER_DAY,
            SCHEDULER_MIN_BREAK_MINUTES, SCHEDULER_ROOM_WEEKLY_HOURS,
            SCHEDULER_SOLVER_TIME_LIMIT
        """
        environ = os.environ if environ is None else environ
        overrides = {}

        def split_list(value):
            return [item.strip() for item in value.split(',') if item.strip()]

        if environ.get('SCHEDULER_WORKING_DAYS'):
            overrides['working_days'] = split_list(environ['SCHEDULER_WORKING_DAYS'])
        if environ.get('SCHEDULER_TIME_SLOTS'):
            overrides['time_slots'] = split_list(environ['SCHEDULER_TIME_SLOTS'])
        if environ.get('SCHEDULER_BREAK_TIMES'):
            overrides['break_times'] = split_list(environ['SCHEDULER_BREAK_TIMES'])

        numeric_settings = {
            'SCHEDULER_MAX_STUDENT_COUNT': ('max_student_count', int),
            'SCHEDULER_MAX_CLASSES_PER_DAY': ('max_classes_per_teacher_per_day', int),
            'SCHEDULER_MIN_BREAK_MINUTES': ('min_break_minutes', int),
            'SCHEDULER_ROOM_WEEKLY_HOURS': ('room_weekly_hours', float),
            'SCHEDULER_SOLVER_TIME_LIMIT': ('solver_time_limit_seconds', float),
        }
        for variable, (attribute, cast) in numeric_settings.items():
            if environ.get(variable):
                try:
                    overrides[attribute] = cast(environ[variable])
                except ValueError:
                    raise ValueError(f"Invalid value for {variable}: {environ[variable]!r}")

        return cls(**overrides)


DEFAULT_CONFIG = SchedulingConfig()
