"""
Optimization advice for finished schedules.

Two advisory checks, neither of which blocks a result:
    - Room utilization: scheduled hours per room against an assumed weekly capacity
      (45 hours by default). Rooms below 30% or above 90% get a suggestion.
    - Fragmentation: a class spread over too many days, or packed too densely into one day.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

import pandas as pd

from ..config import DEFAULT_CONFIG, SchedulingConfig
from ..models import ClassEntity, Room
from ..results import as_records

logger = logging.getLogger(__name__)

UNDERUTILIZED = 'underutilized_room'
OVERUTILIZED = 'overutilized_room'

RECOMMENDATIONS = {
    UNDERUTILIZED: 'Consider consolidating classes or using this room for additional activities',
    OVERUTILIZED: 'Consider finding alternative rooms or rescheduling some classes',
}


def room_usage(classes: Iterable, config: SchedulingConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    """
    Total scheduled hours per room.

    Args:
        classes: ClassEntity objects, ScheduleRecords, or schedule dicts

    Returns:
        DataFrame indexed by room_id with columns hours, classes, utilization (percent)
    """
    rows = []
    for item in classes:
        if isinstance(item, ClassEntity):
            rows.append({'room_id': item.room_id, 'hours': item.total_hours()})
        else:
            record = as_records([item])[0]
            rows.append({'room_id': record.room_id, 'hours': record.total_hours})

    if not rows:
        return pd.DataFrame(columns=['hours', 'classes', 'utilization'], index=pd.Index([], name='room_id'))

    usage = (pd.DataFrame(rows)
             .groupby('room_id', sort=False)
             .agg(hours=('hours', 'sum'), classes=('hours', 'size')))
    usage['utilization'] = usage['hours'] / config.room_weekly_hours * 100
    return usage


def utilization_suggestions(classes: Iterable, get_room: Callable[[Any], Optional[Room]],
                            config: SchedulingConfig = DEFAULT_CONFIG) -> List[Dict[str, str]]:
    """
    Suggestions for rooms outside the healthy utilization band.

    Args:
        classes: Every class to count towards room usage
        get_room: Room lookup (typically repository.get_room); unknown rooms are skipped

    Returns:
        List of {'type', 'message', 'recommendation'} dicts, in first-seen room order
    """
    suggestions = []
    usage = room_usage(classes, config)
    for room_id, row in usage.iterrows():
        room = get_room(room_id)
        if room is None:
            continue

        rate = round(float(row['utilization']), 2)
        if rate < config.underutilized_threshold:
            kind, label = UNDERUTILIZED, 'underutilized'
        elif rate > config.overutilized_threshold:
            kind, label = OVERUTILIZED, 'overutilized'
        else:
            continue

        suggestions.append({
            'type': kind,
            'message': f"Room {room.name} is {label} ({rate:g}%)",
            'recommendation': RECOMMENDATIONS[kind],
        })
    return suggestions


def fragmentation_warnings(schedules: Iterable, config: SchedulingConfig = DEFAULT_CONFIG) -> List[str]:
    """Warn about classes spread across too many days or with too many hours on one day."""
    warnings = []
    for record in as_records(schedules):
        if not record.time_slots:
            continue
        daily = pd.Series([slot.duration for slot in record.time_slots],
                          index=[slot.day for slot in record.time_slots])
        daily_hours = daily.groupby(level=0, sort=False).sum()

        if len(daily_hours) > config.max_days_per_class:
            warnings.append(f"Class {record.class_code} is spread across too many days, consider consolidation")

        for day, hours in daily_hours.items():
            if hours > config.max_hours_per_class_day:
                warnings.append(f"Class {record.class_code} has {hours:g} hours on {day}, consider redistributing")
    return warnings


def format_suggestion(suggestion: Dict[str, str]) -> str:
    return f"{suggestion['message']}. {suggestion['recommendation']}"
