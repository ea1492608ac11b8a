"""
Curriculum-wide teacher assignment using Google OR-Tools CP-SAT solver.

The greedy matcher picks teachers one subject at a time, so an early subject
can take the only teacher a later subject could use. BalancedResourceMatcher
plans every subject of the run at once:

    - every subject with a qualified teacher gets exactly one of them
    - no teacher goes over max_hours_per_week (existing classes + new subjects)
    - the heaviest teacher load is minimized
    - preferred teachers win ties
"""

import logging
from typing import Dict, List, Optional, Sequence

from ortools.sat.python import cp_model
from ortools.sat.python.cp_model import FEASIBLE, OPTIMAL

from ..config import DEFAULT_CONFIG, SchedulingConfig
from ..data_parsing.repository import ScheduleRepository
from ..data_parsing.validation import SchedulingPreferences
from ..models import Subject, Teacher
from .resource_matcher import ResourceMatcher

logger = logging.getLogger(__name__)

# Hours are scaled to integers for the solver (two decimal places)
HOUR_SCALE = 100


class BalancedResourceMatcher(ResourceMatcher):
    """Plans all teacher assignments of a run with one CP-SAT model; rooms stay greedy."""

    def __init__(self, repository: ScheduleRepository, config: SchedulingConfig = DEFAULT_CONFIG):
        super().__init__(repository)
        self.config = config
        self.plan: Dict[int, int] = {}
        self.solver_status: Optional[str] = None

    def prepare(self, subjects: Sequence[Subject], student_count: int, preferences: SchedulingPreferences):
        self.plan = {}
        candidates = {subject.id: self.repository.find_teachers_by_subject(subject.id) for subject in subjects}
        teachers = self._collect_teachers(candidates)
        if not teachers:
            return

        model = cp_model.CpModel()
        assign = {}
        for subject in subjects:
            for teacher in candidates[subject.id]:
                assign[(subject.id, teacher.id)] = model.new_bool_var(f"assign_s{subject.id}_t{teacher.id}")

        # Each subject with at least one qualified teacher gets exactly one
        for subject in subjects:
            if candidates[subject.id]:
                model.add(sum(assign[(subject.id, teacher.id)] for teacher in candidates[subject.id]) == 1)

        # Weekly load per teacher, capped by max_hours_per_week
        max_load = model.new_int_var(0, max(self._scaled(teacher.max_hours_per_week) for teacher in teachers),
                                     "max_load")
        for teacher in teachers:
            new_hours = [
                self._scaled(subject.hours_per_week) * assign[(subject.id, teacher.id)]
                for subject in subjects if (subject.id, teacher.id) in assign
            ]
            load = self._scaled(self._existing_hours(teacher)) + sum(new_hours)
            model.add(load <= self._scaled(teacher.max_hours_per_week))
            model.add(load <= max_load)

        preferred_ids = set(preferences.preferred_teachers or [])
        preference_bonus = sum(var for (subject_id, teacher_id), var in assign.items() if teacher_id in preferred_ids)

        # Load dominates; the bonus can never outweigh one scaled hour step
        model.minimize(max_load * (len(assign) + 1) - preference_bonus)

        solver = cp_model.CpSolver()
        solver.parameters.max_time_in_seconds = self.config.solver_time_limit_seconds
        status = solver.solve(model)
        self.solver_status = solver.status_name(status)
        logger.info("Balanced teacher assignment status: %s", self.solver_status)

        if status not in (FEASIBLE, OPTIMAL):
            logger.warning("No balanced teacher assignment within weekly limits, falling back to greedy selection")
            return

        for (subject_id, teacher_id), var in assign.items():
            if solver.value(var):
                self.plan[subject_id] = teacher_id

    def select_teacher(self, subject: Subject, preferences: SchedulingPreferences) -> Optional[Teacher]:
        planned_id = self.plan.get(subject.id)
        if planned_id is not None:
            teacher = self.repository.get_teacher(planned_id)
            if teacher is not None and teacher.can_teach(subject.id):
                return teacher
        return super().select_teacher(subject, preferences)

    def _existing_hours(self, teacher: Teacher) -> float:
        return sum(cls.total_hours() for cls in self.repository.find_classes_by_teacher(teacher.id))

    @staticmethod
    def _collect_teachers(candidates: Dict[int, List[Teacher]]) -> List[Teacher]:
        teachers = {}
        for qualified in candidates.values():
            for teacher in qualified:
                teachers.setdefault(teacher.id, teacher)
        return list(teachers.values())

    @staticmethod
    def _scaled(hours: float) -> int:
        return int(round(hours * HOUR_SCALE))
