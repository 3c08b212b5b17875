from datetime import date, timedelta

import pytest
from pydantic import ValidationError

from models import ACTIVATABLE_MUSCLES, ActivationEntry, LoggedExercise, MuscleType, WorkoutLog
from muscle_map import (
    EXERCISE_MAP,
    FALLBACK_RULES,
    calculate_muscle_volumes,
    calculate_weekly_volumes,
    exercises_from_workouts,
    get_activations,
    match_exercise,
    weekly_window,
)


DAY = date(2026, 10, 19)


def _log(name: str, sets, day: date = DAY) -> LoggedExercise:
    return LoggedExercise(name=name, sets=sets, date=day)


# ============================================================
# Resolver
# ============================================================

@pytest.mark.parametrize("name", sorted(EXERCISE_MAP))
def test_canonical_name_returns_its_own_entry(name: str) -> None:
    assert get_activations(name) is EXERCISE_MAP[name]


@pytest.mark.parametrize("name", sorted(EXERCISE_MAP))
def test_lowercased_canonical_name_resolves_to_itself(name: str) -> None:
    assert match_exercise(name.lower()) == name


def test_canonical_curl_is_not_shadowed_by_incline_rule() -> None:
    assert match_exercise("Incline Curls") == "Incline Curls"
    assert get_activations("Incline Curls")[0].muscle == "bicep-long-head"


def test_incline_dumbbell_variant_beats_generic_bench() -> None:
    assert match_exercise("Incline Dumbbell Press Variant") == "Incline Dumbbell Press"
    assert get_activations("Incline Dumbbell Press Variant") == EXERCISE_MAP["Incline Dumbbell Press"]
    assert get_activations("Incline Dumbbell Press Variant") != EXERCISE_MAP["Bench Press"]


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("incline bench", "Incline Bench Press"),
        ("Incline Barbell Press", "Incline Bench Press"),
        ("Decline Press", "Decline Bench Press"),
        ("decline bench press (smith)", "Decline Bench Press"),
        ("DB Bench Press", "Bench Press"),
        ("RDL", "Romanian Deadlift"),
        ("romanian deadlifts", "Romanian Deadlift"),
        ("Sumo Deadlift", "Deadlift"),
        ("Front Squat", "Squat"),
        ("Chin-ups", "Pull-ups"),
        ("weighted pull ups", "Pull-ups"),
        ("Lying Leg Curl", "Leg Curls"),
        ("EZ Bar Curl", "Bicep Curls"),
        ("Hammer curl", "Hammer Curls"),
        ("Bent Over Barbell Row", "Barbell Rows"),
        ("Cable Row", "Seated Rows"),
        ("OHP", "Overhead Press"),
        ("Seated Dumbbell Shoulder Press", "Overhead Press"),
        ("Rope Pushdown", "Tricep Pushdowns"),
        ("Tricep Overhead Extension", "Tricep Extensions"),
        ("Weighted Dips", "Dips"),
        ("Diamond Push Ups", "Push-ups"),
        ("Hanging Leg Raise", "Leg Raises"),
        ("Seated Calf Raise", "Calf Raises"),
        ("Dumbbell Shrugs", "Shrugs"),
        ("Leg Extension Machine", "Leg Extensions"),
        ("Leg Press Machine", "Leg Press"),
        ("Incline Leg Press", "Leg Press"),
        ("Reverse Pec Deck", "Reverse Flyes"),
        ("Reverse Cable Flyes", "Reverse Flyes"),
        ("Pec Deck", "Cable Flyes"),
        ("T-Bar Row", "Seated Rows"),
        ("Narrow Grip Push-ups", "Push-ups"),
        ("Narrow Grip Tricep Pushdown", "Tricep Pushdowns"),
    ],
)
def test_free_text_aliases_resolve_to_intended_canonical(name: str, expected: str) -> None:
    assert match_exercise(name) == expected


def test_row_rule_matches_whole_words_only() -> None:
    assert match_exercise("Medicine Ball Throw") is None
    assert get_activations("Medicine Ball Throw") == ()


def test_incline_leg_press_credits_legs_not_chest() -> None:
    muscles = {entry.muscle for entry in get_activations("Incline Leg Press")}
    assert "quadriceps" in muscles
    assert "upper-chest" not in muscles


@pytest.mark.parametrize("name", ["Sauna", "Running", "Yoga", "Stretching", ""])
def test_unknown_exercise_resolves_to_empty(name: str) -> None:
    assert match_exercise(name) is None
    assert get_activations(name) == ()


def test_fallback_rules_target_canonical_exercises() -> None:
    assert all(rule.exercise in EXERCISE_MAP for rule in FALLBACK_RULES)


def test_leg_curl_rule_precedes_generic_curl() -> None:
    order = [rule.description for rule in FALLBACK_RULES]
    assert order.index("leg curl") < order.index("curl")
    assert order.index("incline + dumbbell + press") < order.index("incline + press") < order.index("bench")


def test_table_never_credits_structural_regions() -> None:
    for entries in EXERCISE_MAP.values():
        muscles = [entry.muscle for entry in entries]
        assert len(muscles) == len(set(muscles))
        assert set(muscles) <= ACTIVATABLE_MUSCLES
        assert all(0 < entry.ratio <= 1 for entry in entries)


def test_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        EXERCISE_MAP["Sauna"] = ()  # type: ignore[index]


@pytest.mark.parametrize("ratio", [0, -0.5, 1.01])
def test_activation_entry_rejects_out_of_range_ratio(ratio: float) -> None:
    with pytest.raises(ValidationError):
        ActivationEntry(muscle=MuscleType.LATS, ratio=ratio)


@pytest.mark.parametrize("muscle", [MuscleType.HEAD, MuscleType.KNEES, MuscleType.LEFT_SOLEUS])
def test_activation_entry_rejects_structural_regions(muscle: MuscleType) -> None:
    with pytest.raises(ValidationError, match="structural region"):
        ActivationEntry(muscle=muscle, ratio=1.0)


# ============================================================
# Aggregator
# ============================================================

def test_volumes_accumulate_across_entries() -> None:
    volumes = calculate_muscle_volumes([_log("Bicep Curls", 3), _log("Bicep Curls", 3)], DAY, DAY)
    assert volumes == {
        "bicep-short-head": 6.0,
        "bicep-long-head": 4.8,
        "brachialis": 2.4,
        "forearm": 1.2,
    }


def test_volumes_are_rounded_after_every_addition() -> None:
    volumes = calculate_muscle_volumes([_log("Crunches", 1)] * 3, DAY, DAY)
    assert 0.3 + 0.3 + 0.3 != 0.9
    assert volumes["lower-abs"] == 0.9
    assert volumes["upper-abs"] == 3.0


def test_squat_and_romanian_deadlift_scenario() -> None:
    volumes = calculate_muscle_volumes([_log("Squat", 4), _log("Romanian Deadlift", 3)], DAY, DAY)
    assert volumes == {
        "quadriceps": 4.0,
        "gluteal": 5.2,
        "lower-back": 2.7,
        "upper-abs": 0.8,
        "lower-abs": 0.8,
        "hamstring": 3.0,
    }


def test_window_is_inclusive_and_excludes_outside_dates() -> None:
    start, end = DAY - timedelta(days=6), DAY
    exercises = [
        _log("Shrugs", 2, start - timedelta(days=1)),
        _log("Shrugs", 3, start),
        _log("Shrugs", 4, end),
        _log("Shrugs", 5, end + timedelta(days=1)),
        LoggedExercise(name="Shrugs", sets=7),
    ]
    assert calculate_muscle_volumes(exercises, start, end) == {"trapezius": 7.0}


def test_entry_before_window_contributes_nothing() -> None:
    volumes = calculate_muscle_volumes([_log("Leg Curls", 4, DAY - timedelta(days=1))], DAY, DAY)
    assert volumes == {}


def test_null_and_zero_sets_contribute_nothing() -> None:
    volumes = calculate_muscle_volumes(
        [_log("Leg Curls", None), _log("Leg Curls", 0), _log("Calf Raises", 2)], DAY, DAY
    )
    assert volumes == {"calves": 2.0}


def test_unknown_exercises_are_silently_ignored() -> None:
    assert calculate_muscle_volumes([_log("Sauna", 3), _log("Treadmill", 1)], DAY, DAY) == {}


def test_free_text_names_are_resolved_per_entry() -> None:
    volumes = calculate_muscle_volumes([_log("incline dumbbell press", 2)], DAY, DAY)
    assert volumes["upper-chest"] == 2.0
    assert volumes["front-delt"] == 1.2


def test_each_call_builds_a_fresh_map() -> None:
    exercises = [_log("Leg Press", 3)]
    first = calculate_muscle_volumes(exercises, DAY, DAY)
    first["quadriceps"] = 99.0
    assert calculate_muscle_volumes(exercises, DAY, DAY)["quadriceps"] == 3.0


# ============================================================
# Workout logs and windows
# ============================================================

def test_weekly_window_covers_seven_calendar_days() -> None:
    assert weekly_window(DAY, 7) == (date(2026, 10, 13), DAY)
    assert weekly_window(DAY, 1) == (DAY, DAY)


def test_exercises_from_workouts_stamps_missing_dates() -> None:
    own_date = DAY - timedelta(days=3)
    workout = WorkoutLog(
        date=DAY,
        exercises=[
            LoggedExercise(name="Squat", sets=4),
            LoggedExercise(name="Dips", sets=2, date=own_date),
        ],
    )
    flattened = exercises_from_workouts([workout])
    assert [ex.date for ex in flattened] == [DAY, own_date]
    assert workout.exercises[0].date is None


def test_weekly_volumes_use_the_default_window() -> None:
    workouts = [
        WorkoutLog(date=DAY, exercises=[LoggedExercise(name="Calf Raises", sets=3)]),
        WorkoutLog(date=DAY - timedelta(days=6), exercises=[LoggedExercise(name="Calf Raises", sets=2)]),
        WorkoutLog(date=DAY - timedelta(days=7), exercises=[LoggedExercise(name="Calf Raises", sets=10)]),
    ]
    assert calculate_weekly_volumes(workouts, today=DAY) == {"calves": 5.0}
