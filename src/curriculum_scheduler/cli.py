"""
Command line entry point.

    curriculum-scheduler --data ./data --curriculum 1 --students 30
    curriculum-scheduler --data ./data --curriculum 1 --students 30 \
        --days Monday Wednesday --max-hours-per-day 2 --html schedule.html --json schedule.json
"""

import argparse
import json
import logging
import sys

from .algorithm.balanced_matcher import BalancedResourceMatcher
from .algorithm.schedule_generator import ScheduleGenerator
from .config import SchedulingConfig
from .data_parsing.entity_loader import load_repository_from_csv
from .results import ScheduleStatus
from .solution_viewing.html_converter import create_html_schedule
from .solution_viewing.terminal_viewer import view_schedule


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Curriculum Scheduler - weekly class timetables for enrollment requests")
    # Input
    p.add_argument('--data', required=True, help='Directory with subjects.csv, teachers.csv, rooms.csv, curricula.csv')
    p.add_argument('--curriculum', type=int, required=True, help='Curriculum id to schedule')
    p.add_argument('--students', type=int, required=True, help='Number of students in the group')

    # Preferences
    p.add_argument('--days', nargs='+', help='Preferred days, in order of preference')
    p.add_argument('--teachers', nargs='+', type=int, help='Preferred teacher ids')
    p.add_argument('--rooms', nargs='+', type=int, help='Preferred room ids')
    p.add_argument('--max-hours-per-day', type=float, help='Longest consecutive block per day (1-8)')
    p.add_argument('--term', help='Term recorded on the created classes')

    # Algorithm
    p.add_argument('--matcher', choices=['greedy', 'balanced'], default='greedy',
                   help='greedy: subject by subject | balanced: CP-SAT plan over the whole curriculum')

    # Output
    p.add_argument('--simple', action='store_true', help='Print one block per class instead of a timetable')
    p.add_argument('--html', help='Write an HTML timetable to this file')
    p.add_argument('--json', help='Write the result as JSON to this file')
    p.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return p


def build_request(args) -> dict:
    preferences = {}
    if args.days:
        preferences['preferredDays'] = args.days
    if args.teachers:
        preferences['preferredTeachers'] = args.teachers
    if args.rooms:
        preferences['preferredRooms'] = args.rooms
    if args.max_hours_per_day is not None:
        preferences['maxHoursPerDay'] = args.max_hours_per_day
    if args.term:
        preferences['term'] = args.term
    return {'curriculumId': args.curriculum, 'studentCount': args.students, 'preferences': preferences}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = SchedulingConfig.from_env()
    repository = load_repository_from_csv(args.data)
    matcher = BalancedResourceMatcher(repository, config) if args.matcher == 'balanced' else None
    generator = ScheduleGenerator(repository, config, matcher)

    result = generator.generate_schedule(build_request(args))
    view_schedule(result, timetable=not args.simple, config=config)

    if args.html:
        filename = create_html_schedule(result, filename=args.html, config=config)
        print(f"HTML schedule created: {filename}")
    if args.json:
        with open(args.json, 'w', encoding='utf-8') as f:
            json.dump(result.to_dict(), f, indent=2)
        print(f"JSON schedule created: {args.json}")

    return 1 if result.status in (ScheduleStatus.REJECTED, ScheduleStatus.FAILED) else 0


if __name__ == "__main__":
    sys.exit(main())
