"""
LiftLog Progress Reports
Same-day workout merging and the monthly strength comparison.
"""
from datetime import date, timedelta
from typing import Iterable, Optional

from models import LoggedExercise, StrengthReportEntry, WorkoutLog


DEFAULT_UNIT = "lbs"


def merge_workouts_by_date(workouts: Iterable[WorkoutLog]) -> list[WorkoutLog]:
    """
    Fold workouts logged on the same day into one entry, newest first.
    Exercises are concatenated, difficulty takes the max, notes and
    transcripts are joined.
    """
    by_date: dict[date, WorkoutLog] = {}

    for w in workouts:
        existing = by_date.get(w.date)
        if existing is None:
            by_date[w.date] = w.model_copy(update={"exercises": list(w.exercises)})
            continue

        difficulties = [d for d in (existing.difficulty, w.difficulty) if d is not None]
        by_date[w.date] = existing.model_copy(update={
            "exercises": existing.exercises + list(w.exercises),
            "difficulty": max(difficulties) if difficulties else None,
            "user_notes": " | ".join(filter(None, [existing.user_notes, w.user_notes])) or None,
            "raw_transcript": "\n".join(filter(None, [existing.raw_transcript, w.raw_transcript])) or None,
        })

    return sorted(by_date.values(), key=lambda w: w.date, reverse=True)


def month_range(day: date) -> tuple[date, date]:
    """First and last calendar day of `day`'s month."""
    start = day.replace(day=1)
    next_month = (start + timedelta(days=32)).replace(day=1)
    return start, next_month - timedelta(days=1)


def previous_month_range(day: date) -> tuple[date, date]:
    start, _ = month_range(day)
    return month_range(start - timedelta(days=1))


def max_weight_by_exercise(
        workouts: Iterable[WorkoutLog],
        start: date,
        end: date,
) -> dict[str, LoggedExercise]:
    """Heaviest logged set per exercise name within [start, end]."""
    maxes: dict[str, LoggedExercise] = {}
    for w in workouts:
        if not (start <= w.date <= end):
            continue
        for ex in w.exercises:
            if not ex.weight or ex.weight <= 0:
                continue
            best = maxes.get(ex.name)
            if best is None or ex.weight > best.weight:
                maxes[ex.name] = ex
    return maxes


def strength_report(
        workouts: Iterable[WorkoutLog],
        today: Optional[date] = None,
) -> list[StrengthReportEntry]:
    """Compare this month's max weight per exercise against last month's."""
    workouts = list(workouts)
    today = today or date.today()

    current = max_weight_by_exercise(workouts, *month_range(today))
    previous = max_weight_by_exercise(workouts, *previous_month_range(today))

    entries = []
    for name in set(current) | set(previous):
        curr = current.get(name)
        prev = previous.get(name)
        current_w = curr.weight if curr else None
        previous_w = prev.weight if prev else None
        unit = (curr and curr.unit) or (prev and prev.unit) or DEFAULT_UNIT

        change = None
        if current_w is not None and previous_w is not None and previous_w > 0:
            change = (current_w - previous_w) / previous_w * 100

        if curr:
            detail = f"{curr.sets or 0}x{curr.reps or 0} @ {curr.weight:g}{unit}"
        else:
            detail = "No data this month"

        entries.append(StrengthReportEntry(
            name=name,
            current=current_w,
            previous=previous_w,
            unit=unit,
            change=change,
            detail=detail,
        ))

    return sorted(entries, key=lambda e: e.name.lower())
