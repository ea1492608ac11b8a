from ..config import DEFAULT_CONFIG
from ..results import ScheduleResult
from .timetable import build_timetable


def print_schedule_terminal(result: ScheduleResult, config=DEFAULT_CONFIG):
    """Display a schedule as a per-day timetable."""

    def print_header():
        print("=" * 60)
        print(f"CLASS SCHEDULE ({result.status.name})")
        print("=" * 60)

    def print_day_header(day):
        print(f"\n--- {day.upper()} ---")

    def print_time_slot(start, end, entries):
        if entries:
            print(f"{start}-{end}: {'; '.join(entries)}")
        else:
            print(f"{start}-{end}: No classes")

    print_header()
    for day, rows in build_timetable(result, config).items():
        print_day_header(day)
        for start, end, entries in rows:
            print_time_slot(start, end, entries)


def print_simple_schedule(result: ScheduleResult):
    """Display one block per class."""
    print("\n" + "=" * 50)
    print("CLASS SCHEDULE")
    print("=" * 50)

    for record in result.schedules:
        print(f"\n{record.class_code}: {record.subject.get('title', '')}")
        print(f"  Teacher: {record.teacher.get('name', record.teacher_id)}")
        print(f"  Room: {record.room.get('name', record.room_id)} (max {record.max_students} students)")
        for slot in record.time_slots:
            print(f"  {slot}")
        print(f"  Total: {record.total_hours:g} hours/week")


def print_issues(result: ScheduleResult):
    conflicts = list(result.conflicts) + [conflict.message for conflict in result.conflict_records]
    if conflicts:
        print(f"\nConflicts ({len(conflicts)}):")
        for conflict in conflicts:
            print(f"  ! {conflict}")
    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  - {warning}")


def view_schedule(result: ScheduleResult, timetable=True, config=DEFAULT_CONFIG):
    """Main function to view a schedule result in the terminal."""
    if not result.schedules:
        print("No classes to display!")
    elif timetable:
        print_schedule_terminal(result, config)
    else:
        print_simple_schedule(result)
    print_issues(result)
