import unittest
from unittest.mock import Mock

import numpy as np

from curriculum_scheduler.algorithm.availability_grid import (
    AvailabilityGrid,
    calculate_time_priority,
    is_break_time,
)
from curriculum_scheduler.algorithm.resource_matcher import ResourceMatcher
from curriculum_scheduler.algorithm.slot_allocator import SlotAllocator, are_consecutive
from curriculum_scheduler.config import SchedulingConfig
from curriculum_scheduler.data_parsing.validation import SchedulingPreferences
from curriculum_scheduler.models import Room, Subject, Teacher, TimeSlot


class AvailabilityGridTest(unittest.TestCase):

    def setUp(self):
        self.grid = AvailabilityGrid()

    def test_layout_skips_lunch_only(self):
        starts = [slot.start_time for slot in self.grid.slots_for("Monday")]
        self.assertEqual(starts, ["07:00", "08:00", "09:00", "10:00", "11:00",
                                  "13:00", "14:00", "15:00", "16:00", "17:00"])
        self.assertEqual(self.grid.days, ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"])
        self.assertEqual(self.grid.slots_for("Saturday"), [])

    def test_break_detection(self):
        self.assertTrue(is_break_time("12:00", "13:00"))
        self.assertFalse(is_break_time("10:00", "11:00"))

    def test_priorities(self):
        self.assertEqual(calculate_time_priority("Monday", "07:00"), 3)
        self.assertEqual(calculate_time_priority("Monday", "11:00"), 8)
        self.assertEqual(calculate_time_priority("Tuesday", "08:00"), 10)
        self.assertEqual(calculate_time_priority("Thursday", "17:00"), 7)
        np.testing.assert_array_equal(self.grid.priorities("Wednesday"), [5, 10, 10, 10, 10, 7, 7, 7, 7, 7])

    def test_reserve_and_occupancy(self):
        slot = self.grid.find_slot("Tuesday", "09:00")
        claimed = self.grid.reserve(slot, teacher_id=1, room_id=2)
        self.assertEqual(claimed, TimeSlot("Tuesday", "09:00", "10:00"))
        self.assertFalse(self.grid.is_available(slot, 1, 99))
        self.assertFalse(self.grid.is_available(slot, 99, 2))
        self.assertTrue(self.grid.is_available(slot, 3, 4))

        mask = self.grid.occupancy_mask(1, 5)
        self.assertEqual(mask.shape, (5, 10))
        self.assertTrue(mask[1][2])
        self.assertEqual(int(mask.sum()), 1)
        self.assertEqual(self.grid.booked_count(), 1)

    def test_describe(self):
        self.assertEqual(SchedulingConfig().describe()['breakTimes'],
                         ['10:00-10:15', '12:00-13:00', '15:00-15:15'])


class SlotAllocatorTest(unittest.TestCase):

    def setUp(self):
        self.grid = AvailabilityGrid()
        self.allocator = SlotAllocator(self.grid)

    def test_two_consecutive_blocks_on_first_days(self):
        result = self.allocator.allocate(6, teacher_id=1, room_id=2)
        self.assertEqual([str(slot) for slot in result.slots], [
            "Monday 08:00-09:00", "Monday 09:00-10:00", "Monday 10:00-11:00",
            "Tuesday 08:00-09:00", "Tuesday 09:00-10:00", "Tuesday 10:00-11:00",
        ])
        self.assertTrue(result.is_complete)

    def test_fractional_hours_round_up(self):
        result = self.allocator.allocate(2.5, teacher_id=1, room_id=2)
        self.assertEqual(len(result.slots), 3)
        self.assertEqual(result.hours_allocated, 3)

    def test_preferred_day_then_scatter(self):
        result = self.allocator.allocate(4, 1, 2, preferred_days=["Wednesday"], max_hours_per_day=2)
        self.assertEqual([str(slot) for slot in result.slots], [
            "Wednesday 08:00-09:00", "Wednesday 09:00-10:00",
            "Monday 07:00-08:00", "Monday 08:00-09:00",
        ])

    def test_block_skips_busy_and_broken_windows(self):
        self.grid.reserve(self.grid.find_slot("Monday", "09:00"), teacher_id=1, room_id=50)
        block = self.allocator.find_consecutive_slots("Monday", 3, teacher_id=1, room_id=2)
        self.assertEqual([slot.start_time for slot in block], ["13:00", "14:00", "15:00"])

    def test_other_resources_are_not_blocked(self):
        self.allocator.allocate(3, teacher_id=1, room_id=2)
        result = self.allocator.allocate(3, teacher_id=3, room_id=4)
        self.assertEqual(result.slots[0], TimeSlot("Monday", "08:00", "09:00"))

    def test_full_grid_gives_partial_then_empty(self):
        first = self.allocator.allocate(40, 1, 2)
        self.assertEqual(first.hours_allocated, 40)
        second = self.allocator.allocate(20, 1, 2)
        self.assertEqual(second.hours_allocated, 10)
        self.assertFalse(second.is_complete)
        self.assertTrue(self.allocator.allocate(1, 1, 3).is_empty)

    def test_resolve_days(self):
        self.assertEqual(self.allocator.resolve_days(["Friday", "Monday", "Friday"]), ["Friday", "Monday"])
        self.assertEqual(self.allocator.resolve_days(["Saturday"]), self.grid.days)
        self.assertEqual(self.allocator.resolve_days(None), self.grid.days)

    def test_are_consecutive(self):
        monday = self.grid.slots_for("Monday")
        self.assertTrue(are_consecutive(monday[1:4]))
        self.assertFalse(are_consecutive([monday[4], monday[5]]))


class ResourceMatcherTest(unittest.TestCase):

    def setUp(self):
        self.repository = Mock()
        self.ada = Teacher(1, "Ada", subject_ids={7})
        self.bob = Teacher(2, "Bob", subject_ids={7})
        self.repository.find_teachers_by_subject.return_value = [self.ada, self.bob]
        self.repository.find_classes_by_teacher.side_effect = lambda teacher_id: ["c"] * {1: 2, 2: 0}[teacher_id]
        self.repository.find_rooms_by_capacity.return_value = [Room(10, "Hall", 80), Room(11, "Lab", 30),
                                                               Room(12, "Small", 30)]
        self.matcher = ResourceMatcher(self.repository)
        self.subject = Subject(7, "Biology", 3, 3)

    def test_least_loaded_teacher(self):
        self.assertIs(self.matcher.select_teacher(self.subject, SchedulingPreferences()), self.bob)

    def test_preferred_teacher_in_given_order(self):
        preferences = SchedulingPreferences(preferred_teachers=[99, 1, 2])
        self.assertIs(self.matcher.select_teacher(self.subject, preferences), self.ada)

    def test_no_qualified_teacher(self):
        self.repository.find_teachers_by_subject.return_value = []
        self.assertIsNone(self.matcher.select_teacher(self.subject, SchedulingPreferences()))

    def test_smallest_fitting_room(self):
        room = self.matcher.select_room(25, SchedulingPreferences())
        self.assertEqual(room.id, 11)
        self.repository.find_rooms_by_capacity.assert_called_with(25)

    def test_preferred_room_must_fit(self):
        self.repository.find_rooms_by_capacity.return_value = [Room(10, "Hall", 80), Room(11, "Lab", 30)]
        self.assertEqual(self.matcher.select_room(25, SchedulingPreferences(preferred_rooms=[10])).id, 10)
        # A repository returning a too-small room is never trusted
        self.repository.find_rooms_by_capacity.return_value = [Room(13, "Closet", 5)]
        self.assertIsNone(self.matcher.select_room(25, SchedulingPreferences(preferred_rooms=[13])))


if __name__ == "__main__":
    unittest.main()
