"""
Schedule generator - builds a weekly timetable for one enrollment request.

For each subject of the requested curriculum, in curriculum order:
    1. pick a teacher and a room (ResourceMatcher)
    2. claim weekly hours on a fresh AvailabilityGrid (SlotAllocator)
    3. store a new ClassEntity in the repository

The finished records are scanned for double bookings and analysed for
utilization and fragmentation before being returned as a ScheduleResult.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

from ..config import DEFAULT_CONFIG, SchedulingConfig
from ..data_parsing.repository import ScheduleRepository
from ..data_parsing.validation import (
    EnrollmentRequest,
    SchedulingPreferences,
    validate_curriculum_integrity,
    validate_enrollment_request,
    validate_resource_availability,
)
from ..models import (
    MAX_CLASS_SIZE,
    ClassEntity,
    Curriculum,
    Room,
    Subject,
    Teacher,
    generate_class_code,
    section_letter,
)
from ..results import ConflictRecord, ScheduleRecord, ScheduleResult, ScheduleStatus
from ..schedule_analysis import business_rules, conflict_detector, optimization_advisor
from .availability_grid import AvailabilityGrid
from .resource_matcher import ResourceMatcher
from .slot_allocator import SlotAllocator

logger = logging.getLogger(__name__)


class ScheduleGenerator:
    """Entry point of the scheduling core."""

    def __init__(self, repository: ScheduleRepository, config: SchedulingConfig = DEFAULT_CONFIG,
                 matcher: Optional[ResourceMatcher] = None):
        self.repository = repository
        self.config = config
        self.matcher = matcher or ResourceMatcher(repository)

    def generate_schedule(self, request: Union[EnrollmentRequest, Dict[str, Any]]) -> ScheduleResult:
        """
        Schedule every subject of a curriculum for one group of students.

        Args:
            request: EnrollmentRequest or its dict shape
                     {'curriculumId', 'studentCount', 'preferences'?}

        Returns:
            ScheduleResult. Invalid requests come back REJECTED with the validation
            errors in `conflicts`; per-subject failures are reported as conflicts
            while the remaining subjects are still scheduled.

        The availability grid starts empty on every call: classes stored by earlier
        runs are not reserved, so overlaps with them only show up when the stored
        and new schedules are passed to detect_conflicts together.
        """
        data = request.to_dict() if isinstance(request, EnrollmentRequest) else request
        errors = validate_enrollment_request(data, self.repository, self.config)
        if errors:
            logger.info("Rejected enrollment request: %s", "; ".join(errors))
            return ScheduleResult(status=ScheduleStatus.REJECTED, conflicts=errors)

        request = EnrollmentRequest.from_dict(data)
        preferences = request.preferences
        curriculum = self.repository.get_curriculum(request.curriculum_id)
        subjects = self._subjects_for(curriculum)

        result = ScheduleResult()
        result.warnings.extend(validate_resource_availability(curriculum.id, request.student_count, self.repository))
        result.warnings.extend(validate_curriculum_integrity(curriculum.id, self.repository, self.config))

        grid = AvailabilityGrid(self.config)
        allocator = SlotAllocator(grid)
        self.matcher.prepare(subjects, request.student_count, preferences)

        logger.info("Scheduling %s subjects of curriculum %s for %s students",
                    len(subjects), curriculum.name, request.student_count)

        incomplete = False
        for subject in subjects:
            record = self._schedule_subject(subject, curriculum, request.student_count, preferences,
                                            allocator, result)
            if record is None:
                incomplete = True
                continue
            result.schedules.append(record)
            if record.total_hours < subject.hours_per_week:
                incomplete = True
                result.warnings.append(
                    f"Only {record.total_hours:g} of {subject.hours_per_week:g} weekly hours "
                    f"could be allocated for subject: {subject.title}"
                )

        result.conflict_records = self.detect_conflicts(result.schedules)
        result.warnings.extend(optimization_advisor.fragmentation_warnings(result.schedules, self.config))
        result.warnings.extend(self._utilization_warnings(result.schedules))

        if not result.schedules:
            result.status = ScheduleStatus.FAILED
        elif incomplete or result.conflicts or result.conflict_records:
            result.status = ScheduleStatus.PARTIAL
        else:
            result.status = ScheduleStatus.COMPLETE

        logger.info("Schedule generation finished: %s (%s classes, %s conflicts, %s warnings)",
                    result.status.name, len(result.schedules),
                    len(result.conflicts) + len(result.conflict_records), len(result.warnings))
        return result

    def _schedule_subject(self, subject: Subject, curriculum: Curriculum, student_count: int,
                          preferences: SchedulingPreferences, allocator: SlotAllocator,
                          result: ScheduleResult) -> Optional[ScheduleRecord]:
        teacher = self.matcher.select_teacher(subject, preferences)
        if teacher is None:
            result.conflicts.append(f"No available teacher for subject: {subject.title}")
            return None

        room = self.matcher.select_room(student_count, preferences)
        if room is None:
            result.conflicts.append(
                f"No available room with capacity for {student_count} students for subject: {subject.title}"
            )
            return None

        allocation = allocator.allocate(
            subject.hours_per_week,
            teacher.id,
            room.id,
            preferred_days=preferences.preferred_days,
            max_hours_per_day=preferences.max_hours_per_day or self.config.default_max_hours_per_day,
        )
        if allocation.is_empty:
            result.conflicts.append(f"Cannot allocate sufficient time slots for subject: {subject.title}")
            return None

        class_entity = self._create_class(subject, teacher, room, curriculum, student_count, preferences)
        for slot in allocation.slots:
            class_entity.add_schedule_slot(slot.day, slot.start_time, slot.end_time)
        self.repository.add_class(class_entity)

        return ScheduleRecord(
            class_id=class_entity.id,
            class_code=class_entity.code,
            subject=subject.summary(),
            teacher=teacher.summary(),
            room=room.summary(),
            time_slots=list(class_entity.schedule),
            max_students=class_entity.max_students,
        )

    def _create_class(self, subject: Subject, teacher: Teacher, room: Room, curriculum: Curriculum,
                      student_count: int, preferences: SchedulingPreferences) -> ClassEntity:
        # Sections are lettered by how many classes the subject already has
        section = section_letter(len(self.repository.find_classes_by_subject(subject.id)))
        return ClassEntity(
            id=self.repository.next_id(),
            code=generate_class_code(subject.title, section, date.today().year),
            subject_id=subject.id,
            teacher_id=teacher.id,
            room_id=room.id,
            max_students=min(room.capacity, student_count + self.config.class_size_margin, MAX_CLASS_SIZE),
            term=preferences.term or curriculum.term or self.config.default_term,
            year_level=curriculum.year_level,
        )

    def _subjects_for(self, curriculum: Curriculum) -> List[Subject]:
        subjects = []
        for subject_id in curriculum.subject_ids:
            subject = self.repository.get_subject(subject_id)
            if subject is not None:
                subjects.append(subject)
        return subjects

    def _utilization_warnings(self, schedules: List[ScheduleRecord]) -> List[str]:
        # Usage counts every stored class of the rooms this run touched
        room_ids = list(dict.fromkeys(record.room_id for record in schedules))
        classes = [cls for room_id in room_ids for cls in self.repository.find_classes_by_room(room_id)]
        suggestions = optimization_advisor.utilization_suggestions(classes, self.repository.get_room, self.config)
        return [optimization_advisor.format_suggestion(suggestion) for suggestion in suggestions]

    def detect_conflicts(self, schedules) -> List[ConflictRecord]:
        """Teacher and room double bookings among generated or externally supplied schedules."""
        return conflict_detector.detect_conflicts(schedules)

    def validate_business_rules(self, data: Dict[str, Any]) -> List[str]:
        """Max classes per teacher per day and minimum breaks between consecutive classes."""
        return business_rules.validate_business_rules(data, self.config)

    def get_available_time_slots(self) -> Dict[str, List[str]]:
        return self.config.describe()
