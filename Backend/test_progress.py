from datetime import date

import pytest

from models import LoggedExercise, WorkoutLog
from progress import (
    max_weight_by_exercise,
    merge_workouts_by_date,
    month_range,
    previous_month_range,
    strength_report,
)


TODAY = date(2026, 10, 19)


def _lift(name: str, weight, sets=3, reps=5, unit="lbs") -> LoggedExercise:
    return LoggedExercise(name=name, sets=sets, reps=reps, weight=weight, unit=unit)


@pytest.mark.parametrize(
    ("day", "expected"),
    [
        (date(2026, 2, 10), (date(2026, 2, 1), date(2026, 2, 28))),
        (date(2024, 2, 29), (date(2024, 2, 1), date(2024, 2, 29))),
        (date(2026, 12, 31), (date(2026, 12, 1), date(2026, 12, 31))),
    ],
)
def test_month_range(day: date, expected: tuple[date, date]) -> None:
    assert month_range(day) == expected


def test_previous_month_range_crosses_year() -> None:
    assert previous_month_range(date(2026, 1, 15)) == (date(2025, 12, 1), date(2025, 12, 31))


def test_merge_workouts_by_date_folds_same_day_logs() -> None:
    morning = WorkoutLog(date=TODAY, difficulty=6, user_notes="knee ok", raw_transcript="squats",
                         exercises=[_lift("Squat", 225)])
    evening = WorkoutLog(date=TODAY, difficulty=8, user_notes=None, raw_transcript="curls",
                         exercises=[_lift("Bicep Curls", 30)])
    earlier = WorkoutLog(date=date(2026, 10, 17), exercises=[_lift("Bench Press", 185)])

    merged = merge_workouts_by_date([earlier, morning, evening])

    assert [w.date for w in merged] == [TODAY, date(2026, 10, 17)]
    today = merged[0]
    assert [ex.name for ex in today.exercises] == ["Squat", "Bicep Curls"]
    assert today.difficulty == 8
    assert today.user_notes == "knee ok"
    assert today.raw_transcript == "squats\ncurls"
    assert len(morning.exercises) == 1


def test_max_weight_ignores_unweighted_and_out_of_range() -> None:
    workouts = [
        WorkoutLog(date=date(2026, 10, 2), exercises=[_lift("Pull-ups", None), _lift("Squat", 200)]),
        WorkoutLog(date=date(2026, 10, 9), exercises=[_lift("Squat", 245, sets=2, reps=3)]),
        WorkoutLog(date=date(2026, 9, 30), exercises=[_lift("Squat", 300)]),
    ]
    maxes = max_weight_by_exercise(workouts, date(2026, 10, 1), date(2026, 10, 31))
    assert set(maxes) == {"Squat"}
    assert maxes["Squat"].weight == 245


def test_strength_report_compares_current_and_previous_month() -> None:
    workouts = [
        WorkoutLog(date=date(2026, 10, 5), exercises=[_lift("Bench Press", 225)]),
        WorkoutLog(date=date(2026, 9, 20), exercises=[_lift("Bench Press", 200)]),
        WorkoutLog(date=date(2026, 9, 21), exercises=[_lift("Deadlift", 140, unit="kg")]),
        WorkoutLog(date=date(2026, 10, 12), exercises=[_lift("Lateral Raises", 20, sets=4, reps=12)]),
        WorkoutLog(date=date(2026, 8, 1), exercises=[_lift("Squat", 315)]),
    ]

    report = strength_report(workouts, today=TODAY)

    assert [e.name for e in report] == ["Bench Press", "Deadlift", "Lateral Raises"]
    bench, deadlift, raises = report
    assert (bench.current, bench.previous) == (225, 200)
    assert bench.change == pytest.approx(12.5)
    assert bench.detail == "3x5 @ 225lbs"
    assert deadlift.current is None
    assert deadlift.unit == "kg"
    assert deadlift.change is None
    assert deadlift.detail == "No data this month"
    assert raises.previous is None
    assert raises.detail == "4x12 @ 20lbs"


def test_strength_report_empty() -> None:
    assert strength_report([], today=TODAY) == []
