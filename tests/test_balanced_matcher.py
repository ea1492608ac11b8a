import unittest

from curriculum_scheduler.algorithm.balanced_matcher import BalancedResourceMatcher
from curriculum_scheduler.algorithm.resource_matcher import ResourceMatcher
from curriculum_scheduler.algorithm.schedule_generator import ScheduleGenerator
from curriculum_scheduler.config import SchedulingConfig
from curriculum_scheduler.data_parsing.repository import InMemoryRepository
from curriculum_scheduler.data_parsing.validation import SchedulingPreferences
from curriculum_scheduler.models import ClassEntity, Curriculum, Room, Subject, Teacher, TimeSlot


def build_repository():
    # Ada can teach both subjects, Bob only the first one. Picking Ada for the
    # first subject (as the greedy matcher does) leaves Ada with both.
    repository = InMemoryRepository()
    repository.add_subject(Subject(1, "Algebra", 3, 4))
    repository.add_subject(Subject(2, "Geometry", 3, 4))
    repository.add_teacher(Teacher(10, "Ada", subject_ids={1, 2}, max_hours_per_week=20))
    repository.add_teacher(Teacher(11, "Bob", subject_ids={1}, max_hours_per_week=20))
    repository.add_room(Room(20, "Room 1", 30))
    repository.add_curriculum(Curriculum(30, "Maths", "1st Semester", 1, [1, 2]))
    return repository


class BalancedResourceMatcherTest(unittest.TestCase):

    def setUp(self):
        self.repository = build_repository()
        self.subjects = [self.repository.get_subject(1), self.repository.get_subject(2)]
        self.config = SchedulingConfig(solver_time_limit_seconds=2.0)

    def test_plan_spreads_load(self):
        matcher = BalancedResourceMatcher(self.repository, self.config)
        matcher.prepare(self.subjects, 25, SchedulingPreferences())
        self.assertEqual(matcher.plan, {1: 11, 2: 10})
        self.assertEqual(matcher.solver_status, "OPTIMAL")
        self.assertEqual(matcher.select_teacher(self.subjects[0], SchedulingPreferences()).name, "Bob")

    def test_greedy_matcher_doubles_up(self):
        generator = ScheduleGenerator(self.repository, matcher=ResourceMatcher(self.repository))
        result = generator.generate_schedule({'curriculumId': 30, 'studentCount': 25})
        self.assertEqual([record.teacher['name'] for record in result.schedules], ["Ada", "Ada"])

    def test_generator_with_balanced_matcher(self):
        generator = ScheduleGenerator(self.repository, self.config, BalancedResourceMatcher(self.repository, self.config))
        result = generator.generate_schedule({'curriculumId': 30, 'studentCount': 25})
        self.assertEqual([record.teacher['name'] for record in result.schedules], ["Bob", "Ada"])
        self.assertEqual(result.conflict_records, [])

    def test_preferred_teacher_breaks_ties(self):
        self.repository.add_teacher(Teacher(12, "Cy", subject_ids={1}, max_hours_per_week=20))
        matcher = BalancedResourceMatcher(self.repository, self.config)
        matcher.prepare(self.subjects, 25, SchedulingPreferences(preferred_teachers=[12]))
        self.assertEqual(matcher.plan, {1: 12, 2: 10})

    def test_existing_load_counts(self):
        # Bob already carries 16 hours, so Ada taking both subjects keeps the peak load lower
        self.repository.add_class(ClassEntity(
            id=self.repository.next_id(), code="OLD-A-2025", subject_id=1, teacher_id=11, room_id=20,
            max_students=20, schedule=[TimeSlot("Monday", "08:00", "12:00")] * 4,
        ))
        matcher = BalancedResourceMatcher(self.repository, self.config)
        matcher.prepare(self.subjects, 25, SchedulingPreferences())
        self.assertEqual(matcher.plan, {1: 10, 2: 10})

    def test_infeasible_falls_back_to_greedy(self):
        self.repository.update_teacher(10, Teacher(10, "Ada", subject_ids={1, 2}, max_hours_per_week=3))
        self.repository.update_teacher(11, Teacher(11, "Bob", subject_ids={1}, max_hours_per_week=3))
        matcher = BalancedResourceMatcher(self.repository, self.config)
        matcher.prepare(self.subjects, 25, SchedulingPreferences())
        self.assertEqual(matcher.plan, {})
        self.assertEqual(matcher.solver_status, "INFEASIBLE")
        self.assertEqual(matcher.select_teacher(self.subjects[1], SchedulingPreferences()).name, "Ada")

    def test_subject_without_teacher_is_skipped(self):
        self.repository.add_subject(Subject(3, "Latin", 2, 2))
        subjects = self.subjects + [self.repository.get_subject(3)]
        matcher = BalancedResourceMatcher(self.repository, self.config)
        matcher.prepare(subjects, 25, SchedulingPreferences())
        self.assertNotIn(3, matcher.plan)
        self.assertIsNone(matcher.select_teacher(subjects[2], SchedulingPreferences()))


if __name__ == "__main__":
    unittest.main()
