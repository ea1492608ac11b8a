"""
Load scheduler entities from pandas DataFrames or a directory of CSV files.

Expected files and columns (optional columns in brackets):
    subjects.csv:  id, title, units, hours_per_week
    teachers.csv:  id, name, subject_ids, [email], [max_hours_per_week]
    rooms.csv:     id, name, capacity, [location], [equipment]
    curricula.csv: id, name, term, subject_ids, [year_level], [description]

List columns (subject_ids, equipment) hold values separated by ';'.
"""

import logging
import os
from typing import Dict, List, Optional

import pandas as pd

from ..models import Curriculum, Room, Subject, Teacher
from .repository import InMemoryRepository

logger = logging.getLogger(__name__)

LIST_SEPARATOR = ';'

REQUIRED_COLUMNS = {
    'subjects': ['id', 'title', 'units', 'hours_per_week'],
    'teachers': ['id', 'name', 'subject_ids'],
    'rooms': ['id', 'name', 'capacity'],
    'curricula': ['id', 'name', 'term', 'subject_ids'],
}

OPTIONAL_DEFAULTS = {
    'subjects': {},
    'teachers': {'email': '', 'max_hours_per_week': 40},
    'rooms': {'location': '', 'equipment': ''},
    'curricula': {'year_level': 1, 'description': ''},
}


def split_list(value) -> List[str]:
    """Split a ';'-separated cell into trimmed items; empty cells give []."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return []
    return [item.strip() for item in str(value).split(LIST_SEPARATOR) if item.strip()]


def split_ids(value) -> List[int]:
    return [int(float(item)) for item in split_list(value)]


def _prepare(frame: pd.DataFrame, kind: str) -> pd.DataFrame:
    missing = [column for column in REQUIRED_COLUMNS[kind] if column not in frame.columns]
    if missing:
        raise ValueError(f"{kind}.csv is missing required columns: {missing}")

    frame = frame.copy()
    for column, default in OPTIONAL_DEFAULTS[kind].items():
        if column not in frame.columns:
            frame[column] = default
        frame[column] = frame[column].fillna(default)
    return frame


def _build_subject(row) -> Subject:
    return Subject(id=int(row['id']), title=str(row['title']).strip(),
                   units=float(row['units']), hours_per_week=float(row['hours_per_week']))


def _build_teacher(row) -> Teacher:
    return Teacher(id=int(row['id']), name=str(row['name']).strip(), email=str(row['email']).strip(),
                   subject_ids=set(split_ids(row['subject_ids'])),
                   max_hours_per_week=float(row['max_hours_per_week']))


def _build_room(row) -> Room:
    return Room(id=int(row['id']), name=str(row['name']).strip(), capacity=int(row['capacity']),
                location=str(row['location']).strip(), equipment=set(split_list(row['equipment'])))


def _build_curriculum(row) -> Curriculum:
    return Curriculum(id=int(row['id']), name=str(row['name']).strip(), term=str(row['term']).strip(),
                      year_level=int(row['year_level']), subject_ids=split_ids(row['subject_ids']),
                      description=str(row['description']).strip())


BUILDERS = {
    'subjects': _build_subject,
    'teachers': _build_teacher,
    'rooms': _build_room,
    'curricula': _build_curriculum,
}


def _build_entities(frame: pd.DataFrame, kind: str, errors: List[str]) -> List:
    entities = []
    for index, row in _prepare(frame, kind).iterrows():
        # +2: header line and 1-based numbering, so messages match the CSV line
        where = f"{kind}.csv line {index + 2}"
        try:
            entity = BUILDERS[kind](row)
        except (TypeError, ValueError) as e:
            errors.append(f"{where}: {e}")
            continue
        problems = entity.validate()
        if problems:
            errors.append(f"{where}: {'; '.join(problems)}")
            continue
        entities.append(entity)
    return entities


def load_repository(subjects: pd.DataFrame, teachers: pd.DataFrame, rooms: pd.DataFrame,
                    curricula: pd.DataFrame,
                    repository: Optional[InMemoryRepository] = None) -> InMemoryRepository:
    """
    Build (or fill) a repository from entity DataFrames.

    Args:
        subjects, teachers, rooms, curricula: One DataFrame per entity type
        repository: Repository to fill; a new InMemoryRepository by default

    Returns:
        The filled repository

    Raises:
        ValueError: If a required column is missing, a row cannot be parsed or
                    validated, or a teacher/curriculum references an unknown subject
    """
    repository = repository if repository is not None else InMemoryRepository()
    errors: List[str] = []
    frames = {'subjects': subjects, 'teachers': teachers, 'rooms': rooms, 'curricula': curricula}
    entities: Dict[str, List] = {kind: _build_entities(frame, kind, errors) for kind, frame in frames.items()}

    subject_ids = {subject.id for subject in entities['subjects']}
    for kind in ('teachers', 'curricula'):
        for entity in entities[kind]:
            unknown = sorted(set(entity.subject_ids) - subject_ids)
            if unknown:
                errors.append(f"{kind}.csv id {entity.id}: unknown subject ids {unknown}")

    if errors:
        raise ValueError("Invalid scheduling data:\n  " + "\n  ".join(errors))

    for subject in entities['subjects']:
        repository.add_subject(subject)
    for teacher in entities['teachers']:
        repository.add_teacher(teacher)
    for room in entities['rooms']:
        repository.add_room(room)
    for curriculum in entities['curricula']:
        repository.add_curriculum(curriculum)

    logger.info("Loaded entities: %s", repository.get_stats())
    return repository


def load_repository_from_csv(directory: str, repository: Optional[InMemoryRepository] = None) -> InMemoryRepository:
    """Read subjects.csv, teachers.csv, rooms.csv and curricula.csv from a directory."""
    frames = {}
    for kind in ('subjects', 'teachers', 'rooms', 'curricula'):
        path = os.path.join(directory, f"{kind}.csv")
        if not os.path.exists(path):
            raise FileNotFoundError(f"Missing data file: {path}")
        frames[kind] = pd.read_csv(path)
    return load_repository(repository=repository, **frames)
