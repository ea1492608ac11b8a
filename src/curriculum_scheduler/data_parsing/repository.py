"""
Repository - entity storage consumed by the scheduler.

ScheduleRepository is the query surface the scheduling core depends on.
InMemoryRepository implements it together with plain CRUD for every entity.
Writes that allocate ids or add classes are serialized with a lock so
concurrent scheduling runs can share one repository.
"""

import logging
import threading
from typing import Dict, List, Optional, Protocol

from ..models import ClassEntity, Curriculum, Room, Subject, Teacher

logger = logging.getLogger(__name__)


class ScheduleRepository(Protocol):
    """Lookups and writes used by the scheduler."""

    def get_curriculum(self, curriculum_id: int) -> Optional[Curriculum]: ...

    def get_subject(self, subject_id: int) -> Optional[Subject]: ...

    def get_teacher(self, teacher_id: int) -> Optional[Teacher]: ...

    def get_room(self, room_id: int) -> Optional[Room]: ...

    def find_teachers_by_subject(self, subject_id: int) -> List[Teacher]: ...

    def find_rooms_by_capacity(self, min_capacity: int) -> List[Room]: ...

    def find_classes_by_teacher(self, teacher_id: int) -> List[ClassEntity]: ...

    def find_classes_by_subject(self, subject_id: int) -> List[ClassEntity]: ...

    def find_classes_by_room(self, room_id: int) -> List[ClassEntity]: ...

    def next_id(self) -> int: ...

    def add_class(self, class_entity: ClassEntity) -> None: ...


class InMemoryRepository:
    """Dictionary-backed repository. Entities are kept in insertion order."""

    def __init__(self):
        self._lock = threading.Lock()
        self.reset()

    def reset(self):
        """Drop every entity and restart id allocation at 1."""
        with self._lock:
            self._subjects: Dict[int, Subject] = {}
            self._rooms: Dict[int, Room] = {}
            self._teachers: Dict[int, Teacher] = {}
            self._curricula: Dict[int, Curriculum] = {}
            self._classes: Dict[int, ClassEntity] = {}
            self._next_id = 1

    def next_id(self) -> int:
        with self._lock:
            allocated = self._next_id
            self._next_id += 1
            return allocated

    def _reserve_id(self, entity_id: int):
        # Keep generated ids clear of ids that were supplied explicitly
        with self._lock:
            if entity_id >= self._next_id:
                self._next_id = entity_id + 1

    # ======================== SUBJECTS ========================

    def add_subject(self, subject: Subject):
        self._reserve_id(subject.id)
        self._subjects[subject.id] = subject

    def get_subject(self, subject_id: int) -> Optional[Subject]:
        return self._subjects.get(subject_id)

    def get_all_subjects(self) -> List[Subject]:
        return list(self._subjects.values())

    def update_subject(self, subject_id: int, subject: Subject) -> bool:
        return self._update(self._subjects, subject_id, subject)

    def delete_subject(self, subject_id: int) -> bool:
        return self._subjects.pop(subject_id, None) is not None

    def find_subjects_by_ids(self, subject_ids) -> List[Subject]:
        return [self._subjects[subject_id] for subject_id in subject_ids if subject_id in self._subjects]

    # ======================== ROOMS ========================

    def add_room(self, room: Room):
        self._reserve_id(room.id)
        self._rooms[room.id] = room

    def get_room(self, room_id: int) -> Optional[Room]:
        return self._rooms.get(room_id)

    def get_all_rooms(self) -> List[Room]:
        return list(self._rooms.values())

    def update_room(self, room_id: int, room: Room) -> bool:
        return self._update(self._rooms, room_id, room)

    def delete_room(self, room_id: int) -> bool:
        return self._rooms.pop(room_id, None) is not None

    def find_rooms_by_capacity(self, min_capacity: int) -> List[Room]:
        return [room for room in self._rooms.values() if room.capacity >= min_capacity]

    def find_rooms_by_equipment(self, tag: str) -> List[Room]:
        return [room for room in self._rooms.values() if room.has_equipment(tag)]

    # ======================== TEACHERS ========================

    def add_teacher(self, teacher: Teacher):
        self._reserve_id(teacher.id)
        self._teachers[teacher.id] = teacher

    def get_teacher(self, teacher_id: int) -> Optional[Teacher]:
        return self._teachers.get(teacher_id)

    def get_all_teachers(self) -> List[Teacher]:
        return list(self._teachers.values())

    def update_teacher(self, teacher_id: int, teacher: Teacher) -> bool:
        return self._update(self._teachers, teacher_id, teacher)

    def delete_teacher(self, teacher_id: int) -> bool:
        return self._teachers.pop(teacher_id, None) is not None

    def find_teachers_by_subject(self, subject_id: int) -> List[Teacher]:
        return [teacher for teacher in self._teachers.values() if teacher.can_teach(subject_id)]

    # ======================== CURRICULA ========================

    def add_curriculum(self, curriculum: Curriculum):
        self._reserve_id(curriculum.id)
        curriculum.calculate_total_units(self._subjects)
        self._curricula[curriculum.id] = curriculum

    def get_curriculum(self, curriculum_id: int) -> Optional[Curriculum]:
        return self._curricula.get(curriculum_id)

    def get_all_curricula(self) -> List[Curriculum]:
        return list(self._curricula.values())

    def update_curriculum(self, curriculum_id: int, curriculum: Curriculum) -> bool:
        if curriculum_id in self._curricula:
            curriculum.calculate_total_units(self._subjects)
        return self._update(self._curricula, curriculum_id, curriculum)

    def delete_curriculum(self, curriculum_id: int) -> bool:
        return self._curricula.pop(curriculum_id, None) is not None

    def find_curricula_by_term(self, term: str) -> List[Curriculum]:
        return [curriculum for curriculum in self._curricula.values() if curriculum.term == term]

    def find_curricula_by_year_level(self, year_level: int) -> List[Curriculum]:
        return [curriculum for curriculum in self._curricula.values() if curriculum.year_level == year_level]

    # ======================== CLASSES ========================

    def add_class(self, class_entity: ClassEntity):
        self._reserve_id(class_entity.id)
        with self._lock:
            self._classes[class_entity.id] = class_entity
        logger.debug("Stored class %s (%s)", class_entity.id, class_entity.code)

    def get_class(self, class_id: int) -> Optional[ClassEntity]:
        return self._classes.get(class_id)

    def get_all_classes(self) -> List[ClassEntity]:
        with self._lock:
            return list(self._classes.values())

    def update_class(self, class_id: int, class_entity: ClassEntity) -> bool:
        with self._lock:
            return self._update(self._classes, class_id, class_entity)

    def delete_class(self, class_id: int) -> bool:
        with self._lock:
            return self._classes.pop(class_id, None) is not None

    def find_classes_by_subject(self, subject_id: int) -> List[ClassEntity]:
        return [cls for cls in self.get_all_classes() if cls.subject_id == subject_id]

    def find_classes_by_teacher(self, teacher_id: int) -> List[ClassEntity]:
        return [cls for cls in self.get_all_classes() if cls.teacher_id == teacher_id]

    def find_classes_by_room(self, room_id: int) -> List[ClassEntity]:
        return [cls for cls in self.get_all_classes() if cls.room_id == room_id]

    def find_classes_by_term(self, term: str) -> List[ClassEntity]:
        return [cls for cls in self.get_all_classes() if cls.term == term]

    # ======================== EXISTENCE CHECKS ========================

    def validate_subject_exists(self, subject_id) -> bool:
        return subject_id in self._subjects

    def validate_room_exists(self, room_id) -> bool:
        return room_id in self._rooms

    def validate_teacher_exists(self, teacher_id) -> bool:
        return teacher_id in self._teachers

    def validate_curriculum_exists(self, curriculum_id) -> bool:
        return curriculum_id in self._curricula

    def validate_class_exists(self, class_id) -> bool:
        return class_id in self._classes

    def get_stats(self) -> Dict[str, int]:
        return {
            'subjects': len(self._subjects),
            'rooms': len(self._rooms),
            'teachers': len(self._teachers),
            'curricula': len(self._curricula),
            'classes': len(self._classes),
        }

    @staticmethod
    def _update(store: Dict, entity_id: int, entity) -> bool:
        if entity_id not in store:
            return False
        store[entity_id] = entity
        return True
