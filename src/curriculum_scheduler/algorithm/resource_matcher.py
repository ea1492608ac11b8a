"""
Resource matching - picks one teacher and one room for a subject.

ResourceMatcher is both the strategy interface and the default greedy policy:
preferred resources first, then the least-loaded qualified teacher and the
smallest room that still seats the group. Subclasses can override any step
(see BalancedResourceMatcher).
"""

import logging
from typing import List, Optional, Sequence

from ..data_parsing.repository import ScheduleRepository
from ..data_parsing.validation import SchedulingPreferences
from ..models import Room, Subject, Teacher

logger = logging.getLogger(__name__)


class ResourceMatcher:
    """Greedy teacher/room selection."""

    def __init__(self, repository: ScheduleRepository):
        self.repository = repository

    def prepare(self, subjects: Sequence[Subject], student_count: int, preferences: SchedulingPreferences):
        """Hook called once per run before any subject is matched. The greedy policy needs no planning."""

    def select_teacher(self, subject: Subject, preferences: SchedulingPreferences) -> Optional[Teacher]:
        """
        Pick a qualified teacher for a subject.

        Returns:
            The first qualified teacher among the preferred ids (in the order given),
            otherwise the qualified teacher with the fewest classes, or None if nobody
            can teach the subject
        """
        qualified = self.repository.find_teachers_by_subject(subject.id)
        if not qualified:
            logger.info("No qualified teacher for subject %s (%s)", subject.id, subject.title)
            return None

        preferred = self._first_preferred(qualified, preferences.preferred_teachers)
        if preferred is not None:
            return preferred

        # Load balancing: fewest classes wins, ties keep repository order
        return min(qualified, key=lambda teacher: len(self.repository.find_classes_by_teacher(teacher.id)))

    def select_room(self, student_count: int, preferences: SchedulingPreferences) -> Optional[Room]:
        """
        Pick a room that seats the group.

        Returns:
            The first preferred room with enough capacity, otherwise the smallest room
            that fits, or None if no room is large enough
        """
        fitting = [room for room in self.repository.find_rooms_by_capacity(student_count)
                   if room.capacity >= student_count]
        if not fitting:
            logger.info("No room can seat %s students", student_count)
            return None

        preferred = self._first_preferred(fitting, preferences.preferred_rooms)
        if preferred is not None:
            return preferred

        return min(fitting, key=lambda room: room.capacity)

    @staticmethod
    def _first_preferred(candidates: List, preferred_ids: Sequence[int]):
        by_id = {candidate.id: candidate for candidate in candidates}
        for preferred_id in preferred_ids or []:
            if preferred_id in by_id:
                return by_id[preferred_id]
        return None
