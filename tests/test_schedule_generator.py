import itertools
import math
import unittest
from datetime import date
from unittest.mock import patch

from curriculum_scheduler.algorithm.schedule_generator import ScheduleGenerator
from curriculum_scheduler.data_parsing.repository import InMemoryRepository
from curriculum_scheduler.data_parsing.validation import EnrollmentRequest, SchedulingPreferences
from curriculum_scheduler.models import Curriculum, Room, Subject, Teacher
from curriculum_scheduler.results import ScheduleStatus

from factories import build_repository, schedule_dict


class GenerateScheduleTest(unittest.TestCase):

    def setUp(self):
        self.repository = build_repository()
        self.generator = ScheduleGenerator(self.repository)

    def test_zero_load_teacher_gets_two_blocks(self):
        self.repository.add_curriculum(Curriculum(200, "Calculus only", "1st Semester", 2, [1]))
        result = self.generator.generate_schedule({'curriculumId': 200, 'studentCount': 25})

        self.assertEqual(result.status, ScheduleStatus.COMPLETE)
        self.assertEqual(len(result.schedules), 1)
        record = result.schedules[0]
        self.assertEqual(record.teacher['name'], "Ada")
        self.assertEqual(record.room['id'], 21)
        self.assertEqual(record.max_students, 30)
        self.assertEqual(record.class_code, f"CALCULUSI-A-{date.today().year}")
        self.assertEqual([str(slot) for slot in record.time_slots], [
            "Monday 08:00-09:00", "Monday 09:00-10:00", "Monday 10:00-11:00",
            "Tuesday 08:00-09:00", "Tuesday 09:00-10:00", "Tuesday 10:00-11:00",
        ])
        self.assertEqual(record.total_hours, 6)

        stored = self.repository.get_class(record.class_id)
        self.assertEqual(stored.teacher_id, 10)
        self.assertEqual(stored.term, "1st Semester")
        self.assertEqual(stored.year_level, 2)
        self.assertEqual(result.conflicts, [])
        self.assertIn("Room Lab A is underutilized (13.33%). "
                      "Consider consolidating classes or using this room for additional activities",
                      result.warnings)

    def test_student_count_over_limit_rejected(self):
        result = self.generator.generate_schedule({'curriculumId': 100, 'studentCount': 501})
        self.assertEqual(result.status, ScheduleStatus.REJECTED)
        self.assertEqual(result.schedules, [])
        self.assertEqual(result.conflicts, ["Student count cannot exceed 500"])
        self.assertEqual(len(self.repository.get_all_classes()), 1)
        self.assertEqual(result.to_dict()['status'], 'rejected')

    def test_missing_teacher_reported_others_scheduled(self):
        self.repository.add_subject(Subject(id=4, title="Astronomy", units=2, hours_per_week=3))
        self.repository.add_curriculum(Curriculum(200, "Mixed", "Summer", 1, [4, 1]))
        result = self.generator.generate_schedule({'curriculumId': 200, 'studentCount': 25})

        self.assertEqual(result.status, ScheduleStatus.PARTIAL)
        self.assertIn("No available teacher for subject: Astronomy", result.conflicts)
        self.assertIn("No qualified teachers available for Astronomy", result.warnings)
        self.assertEqual([record.subject['title'] for record in result.schedules], ["Calculus I"])
        self.assertEqual(result.schedules[0].total_hours, 6)

    def test_no_room_large_enough(self):
        result = self.generator.generate_schedule({'curriculumId': 100, 'studentCount': 45})
        self.assertEqual(result.status, ScheduleStatus.FAILED)
        self.assertIn("No available room with capacity for 45 students for subject: Calculus I", result.conflicts)

    def test_enrollment_request_object_and_preferences(self):
        request = EnrollmentRequest(100, 20, SchedulingPreferences(
            preferred_days=["Thursday", "Friday"], preferred_teachers=[11], preferred_rooms=[20],
            max_hours_per_day=2, term="2nd Semester"))
        result = self.generator.generate_schedule(request)

        self.assertEqual(result.status, ScheduleStatus.COMPLETE)
        for record in result.schedules:
            self.assertEqual(record.teacher['id'], 11)
            self.assertEqual(record.room['id'], 20)
        calculus = result.schedules[0]
        self.assertEqual([slot.day for slot in calculus.time_slots][:4], ["Thursday", "Thursday", "Friday", "Friday"])
        self.assertEqual(self.repository.get_class(calculus.class_id).term, "2nd Semester")

    def test_class_size_capped_for_large_rooms(self):
        self.repository.add_room(Room(22, "Arena", 400))
        self.repository.add_curriculum(Curriculum(200, "Calculus only", "1st Semester", 1, [1]))
        result = self.generator.generate_schedule({'curriculumId': 200, 'studentCount': 300})

        record = result.schedules[0]
        self.assertEqual(record.room['id'], 22)
        self.assertEqual(record.max_students, 200)
        self.assertEqual(self.repository.get_class(record.class_id).validate(), [])

    def test_second_section_gets_next_letter(self):
        self.generator.generate_schedule({'curriculumId': 100, 'studentCount': 25})
        result = self.generator.generate_schedule({'curriculumId': 100, 'studentCount': 25})
        self.assertTrue(result.schedules[0].class_code.startswith("CALCULUSI-B-"))

    def test_generated_schedule_properties(self):
        repository = InMemoryRepository()
        for subject_id, hours in zip(range(1, 9), [6, 5, 4, 4, 3, 3, 2, 1.5]):
            repository.add_subject(Subject(subject_id, f"Subject {subject_id}", 3, hours))
        repository.add_teacher(Teacher(20, "Ada", subject_ids={1, 2, 3, 4}))
        repository.add_teacher(Teacher(21, "Bob", subject_ids={3, 4, 5, 6}))
        repository.add_teacher(Teacher(22, "Cy", subject_ids={6, 7, 8, 1}))
        repository.add_room(Room(30, "Small", 20))
        repository.add_room(Room(31, "Medium", 35))
        repository.add_room(Room(32, "Large", 60))
        repository.add_curriculum(Curriculum(40, "Full load", "1st Semester", 1, list(range(1, 9))))

        result = ScheduleGenerator(repository).generate_schedule({'curriculumId': 40, 'studentCount': 30})

        self.assertEqual(result.status, ScheduleStatus.COMPLETE)
        self.assertEqual(len(result.schedules), 8)
        self.assertEqual(result.conflict_records, [])
        for record in result.schedules:
            self.assertGreaterEqual(record.room['capacity'], 30)
            # Whole hours are booked exactly; 1.5 hours rounds up to two one-hour slots
            self.assertEqual(record.total_hours, math.ceil(record.subject['hoursPerWeek']))
        for first, second in itertools.combinations(result.schedules, 2):
            shared = first.teacher_id == second.teacher_id or first.room_id == second.room_id
            if not shared:
                continue
            for a, b in itertools.product(first.time_slots, second.time_slots):
                self.assertFalse(a.conflicts(b), f"{first.class_code} {a} clashes with {second.class_code} {b}")

    def test_exhausted_grid(self):
        repository = InMemoryRepository()
        repository.add_subject(Subject(1, "Long", 3, 40))
        repository.add_subject(Subject(2, "Medium", 3, 20))
        repository.add_subject(Subject(3, "Short", 3, 5))
        repository.add_teacher(Teacher(10, "Solo", subject_ids={1, 2, 3}))
        repository.add_room(Room(20, "Only", 30))
        repository.add_curriculum(Curriculum(30, "Overloaded", "Summer", 1, [1, 2, 3]))

        result = ScheduleGenerator(repository).generate_schedule({'curriculumId': 30, 'studentCount': 10})

        self.assertEqual(result.status, ScheduleStatus.PARTIAL)
        self.assertEqual([record.total_hours for record in result.schedules], [40, 10])
        self.assertIn("Only 10 of 20 weekly hours could be allocated for subject: Medium", result.warnings)
        self.assertIn("Cannot allocate sufficient time slots for subject: Short", result.conflicts)
        self.assertIn("Total weekly hours (65) exceeds recommended maximum (40 hours)", result.warnings)


class GeneratorFacadeTest(unittest.TestCase):

    def setUp(self):
        self.generator = ScheduleGenerator(build_repository())

    def test_available_time_slots(self):
        slots = self.generator.get_available_time_slots()
        self.assertEqual(slots['workingDays'], ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"])
        self.assertEqual(slots['timeSlots'][0], "07:00")
        self.assertEqual(slots['timeSlots'][-1], "18:00")

    def test_detect_conflicts_on_external_schedules(self):
        schedules = [
            schedule_dict("A", 1, 10, [("Monday", "08:00", "09:00")]),
            schedule_dict("B", 1, 11, [("Monday", "08:00", "09:00")]),
        ]
        self.assertEqual(len(self.generator.detect_conflicts(schedules)), 1)

    def test_validate_business_rules_uses_config(self):
        with patch('curriculum_scheduler.schedule_analysis.business_rules.check_minimum_breaks',
                   return_value=["gap"]) as mock_check:
            data = {'consecutiveClasses': [{'startTime': '08:00', 'endTime': '09:00'}]}
            self.assertEqual(self.generator.validate_business_rules(data), ["gap"])
            mock_check.assert_called_once_with(data['consecutiveClasses'], self.generator.config)

    def test_result_to_dict_includes_conflict_records(self):
        repository = build_repository()
        generator = ScheduleGenerator(repository)
        result = generator.generate_schedule({'curriculumId': 100, 'studentCount': 25})
        result.conflict_records = generator.detect_conflicts([
            schedule_dict("A", 1, 10, [("Monday", "08:00", "09:00")]),
            schedule_dict("B", 1, 11, [("Monday", "08:00", "09:00")]),
        ])
        payload = result.to_dict()
        self.assertEqual(payload['conflicts'][-1]['type'], 'teacher_conflict')
        self.assertEqual(payload['schedules'][0]['classCode'], result.schedules[0].class_code)


if __name__ == "__main__":
    unittest.main()
