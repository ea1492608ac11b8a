"""
Curriculum Scheduler Package
An automated class scheduler for curriculum enrollment requests.
"""

__version__ = "1.0.0"

from .config import SchedulingConfig, DEFAULT_CONFIG
from .models import TimeSlot, Subject, Teacher, Room, Curriculum, ClassEntity
from .results import ScheduleStatus, ScheduleRecord, ConflictRecord, ScheduleResult
from .data_parsing.repository import ScheduleRepository, InMemoryRepository
from .data_parsing.validation import EnrollmentRequest, SchedulingPreferences
from .algorithm.resource_matcher import ResourceMatcher
from .algorithm.balanced_matcher import BalancedResourceMatcher
from .algorithm.schedule_generator import ScheduleGenerator

__all__ = [
    "SchedulingConfig",
    "DEFAULT_CONFIG",
    "TimeSlot",
    "Subject",
    "Teacher",
    "Room",
    "Curriculum",
    "ClassEntity",
    "ScheduleStatus",
    "ScheduleRecord",
    "ConflictRecord",
    "ScheduleResult",
    "ScheduleRepository",
    "InMemoryRepository",
    "EnrollmentRequest",
    "SchedulingPreferences",
    "ResourceMatcher",
    "BalancedResourceMatcher",
    "ScheduleGenerator",
]
