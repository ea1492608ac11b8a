import unittest

from curriculum_scheduler.config import DEFAULT_CONFIG, SchedulingConfig


class SchedulingConfigTest(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(DEFAULT_CONFIG.max_student_count, 500)
        self.assertEqual(DEFAULT_CONFIG.break_windows()[1], ('12:00', '13:00'))
        self.assertEqual(DEFAULT_CONFIG.describe()['breakTimes'], ['10:00-10:15', '12:00-13:00', '15:00-15:15'])

    def test_from_env_overrides(self):
        config = SchedulingConfig.from_env({
            'SCHEDULER_WORKING_DAYS': 'Monday, Wednesday',
            'SCHEDULER_MAX_CLASSES_PER_DAY': '4',
            'SCHEDULER_ROOM_WEEKLY_HOURS': '30.5',
        })
        self.assertEqual(config.working_days, ['Monday', 'Wednesday'])
        self.assertEqual(config.max_classes_per_teacher_per_day, 4)
        self.assertEqual(config.room_weekly_hours, 30.5)
        self.assertEqual(config.min_break_minutes, 15)

    def test_from_env_empty(self):
        self.assertEqual(SchedulingConfig.from_env({}), SchedulingConfig())

    def test_from_env_bad_number(self):
        with self.assertRaises(ValueError) as ctx:
            SchedulingConfig.from_env({'SCHEDULER_MAX_STUDENT_COUNT': 'lots'})
        self.assertIn("SCHEDULER_MAX_STUDENT_COUNT", str(ctx.exception))

    def test_invalid_layouts(self):
        with self.assertRaises(ValueError):
            SchedulingConfig(working_days=[])
        with self.assertRaises(ValueError):
            SchedulingConfig(working_days=['Funday'])
        with self.assertRaises(ValueError):
            SchedulingConfig(time_slots=['09:00', '08:00'])
        with self.assertRaises(ValueError):
            SchedulingConfig(break_times=['12:00'])


if __name__ == "__main__":
    unittest.main()
