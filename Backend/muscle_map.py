"""
LiftLog Muscle Mapping Module
Maps free-text exercise names to muscles with activation ratios and
accumulates per-muscle training volume over a date window.
Pure logic - no I/O.
"""
import re
from dataclasses import dataclass
from datetime import date, timedelta
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from config import settings
from models import ActivationEntry, LoggedExercise, MuscleType, WorkoutLog


def _act(muscle: MuscleType, ratio: float) -> ActivationEntry:
    return ActivationEntry(muscle=muscle, ratio=ratio)


# ============================================================
# Exercise -> Muscle Activation Table
# 1.0 = direct work (primary mover)
# 0.5 = secondary mover
# 0.2 = stabilizer
# ============================================================

_EXERCISE_MAP: dict[str, tuple[ActivationEntry, ...]] = {
    # === CHEST ===
    "Bench Press": (
        _act(MuscleType.MID_CHEST, 1.0),
        _act(MuscleType.LOWER_CHEST, 0.6),
        _act(MuscleType.UPPER_CHEST, 0.4),
        _act(MuscleType.FRONT_DELT, 0.5),
        _act(MuscleType.TRICEP_LONG_HEAD, 0.2),
        _act(MuscleType.TRICEP_SHORT_HEAD, 0.3),
    ),
    "Incline Bench Press": (
        _act(MuscleType.UPPER_CHEST, 1.0),
        _act(MuscleType.MID_CHEST, 0.5),
        _act(MuscleType.FRONT_DELT, 0.7),
        _act(MuscleType.TRICEP_LONG_HEAD, 0.2),
        _act(MuscleType.TRICEP_SHORT_HEAD, 0.3),
    ),
    "Incline Dumbbell Press": (
        _act(MuscleType.UPPER_CHEST, 1.0),
        _act(MuscleType.MID_CHEST, 0.5),
        _act(MuscleType.FRONT_DELT, 0.6),
        _act(MuscleType.TRICEP_LONG_HEAD, 0.2),
        _act(MuscleType.TRICEP_SHORT_HEAD, 0.2),
    ),
    "Decline Bench Press": (
        _act(MuscleType.LOWER_CHEST, 1.0),
        _act(MuscleType.MID_CHEST, 0.6),
        _act(MuscleType.TRICEP_LONG_HEAD, 0.3),
        _act(MuscleType.TRICEP_SHORT_HEAD, 0.3),
    ),
    "Push-ups": (
        _act(MuscleType.MID_CHEST, 1.0),
        _act(MuscleType.LOWER_CHEST, 0.5),
        _act(MuscleType.UPPER_CHEST, 0.3),
        _act(MuscleType.FRONT_DELT, 0.4),
        _act(MuscleType.TRICEP_LONG_HEAD, 0.2),
        _act(MuscleType.TRICEP_SHORT_HEAD, 0.3),
    ),
    "Cable Flyes": (
        _act(MuscleType.MID_CHEST, 1.0),
        _act(MuscleType.UPPER_CHEST, 0.4),
        _act(MuscleType.LOWER_CHEST, 0.4),
    ),

    # === BACK ===
    "Pull-ups": (
        _act(MuscleType.LATS, 1.0),
        _act(MuscleType.UPPER_BACK, 0.6),
        _act(MuscleType.BICEP_LONG_HEAD, 0.4),
        _act(MuscleType.BICEP_SHORT_HEAD, 0.5),
        _act(MuscleType.BRACHIALIS, 0.3),
        _act(MuscleType.FOREARM, 0.3),
    ),
    "Lat Pulldown": (
        _act(MuscleType.LATS, 1.0),
        _act(MuscleType.UPPER_BACK, 0.4),
        _act(MuscleType.BICEP_LONG_HEAD, 0.3),
        _act(MuscleType.BICEP_SHORT_HEAD, 0.4),
        _act(MuscleType.BRACHIALIS, 0.3),
    ),
    "Seated Rows": (
        _act(MuscleType.UPPER_BACK, 1.0),
        _act(MuscleType.LATS, 0.7),
        _act(MuscleType.BICEP_LONG_HEAD, 0.3),
        _act(MuscleType.BICEP_SHORT_HEAD, 0.3),
        _act(MuscleType.REAR_DELT, 0.5),
    ),
    "Barbell Rows": (
        _act(MuscleType.UPPER_BACK, 1.0),
        _act(MuscleType.LATS, 0.8),
        _act(MuscleType.BICEP_LONG_HEAD, 0.3),
        _act(MuscleType.BICEP_SHORT_HEAD, 0.3),
        _act(MuscleType.REAR_DELT, 0.5),
        _act(MuscleType.LOWER_BACK, 0.3),
    ),

    # === LEGS ===
    "Squat": (
        _act(MuscleType.QUADRICEPS, 1.0),
        _act(MuscleType.GLUTEAL, 0.7),
        _act(MuscleType.LOWER_BACK, 0.3),
        _act(MuscleType.UPPER_ABS, 0.2),
        _act(MuscleType.LOWER_ABS, 0.2),
    ),
    "Deadlift": (
        _act(MuscleType.HAMSTRING, 0.8),
        _act(MuscleType.GLUTEAL, 1.0),
        _act(MuscleType.LOWER_BACK, 0.7),
        _act(MuscleType.TRAPEZIUS, 0.3),
        _act(MuscleType.FOREARM, 0.3),
    ),
    "Leg Press": (
        _act(MuscleType.QUADRICEPS, 1.0),
        _act(MuscleType.GLUTEAL, 0.6),
        _act(MuscleType.HAMSTRING, 0.3),
    ),
    "Romanian Deadlift": (
        _act(MuscleType.HAMSTRING, 1.0),
        _act(MuscleType.GLUTEAL, 0.8),
        _act(MuscleType.LOWER_BACK, 0.5),
    ),
    "Leg Extensions": (
        _act(MuscleType.QUADRICEPS, 1.0),
    ),
    "Leg Curls": (
        _act(MuscleType.HAMSTRING, 1.0),
    ),

    # === BICEPS ===
    "Bicep Curls": (
        _act(MuscleType.BICEP_LONG_HEAD, 0.8),
        _act(MuscleType.BICEP_SHORT_HEAD, 1.0),
        _act(MuscleType.BRACHIALIS, 0.4),
        _act(MuscleType.FOREARM, 0.2),
    ),
    "Hammer Curls": (
        _act(MuscleType.BRACHIALIS, 1.0),
        _act(MuscleType.BICEP_LONG_HEAD, 0.6),
        _act(MuscleType.BICEP_SHORT_HEAD, 0.4),
        _act(MuscleType.FOREARM, 0.4),
    ),
    "Preacher Curls": (
        _act(MuscleType.BICEP_SHORT_HEAD, 1.0),
        _act(MuscleType.BICEP_LONG_HEAD, 0.6),
        _act(MuscleType.BRACHIALIS, 0.5),
    ),
    "Incline Curls": (
        _act(MuscleType.BICEP_LONG_HEAD, 1.0),
        _act(MuscleType.BICEP_SHORT_HEAD, 0.5),
        _act(MuscleType.BRACHIALIS, 0.3),
    ),

    # === TRICEPS ===
    "Tricep Extensions": (
        _act(MuscleType.TRICEP_LONG_HEAD, 1.0),
        _act(MuscleType.TRICEP_SHORT_HEAD, 0.6),
    ),
    "Tricep Pushdowns": (
        _act(MuscleType.TRICEP_SHORT_HEAD, 1.0),
        _act(MuscleType.TRICEP_LONG_HEAD, 0.5),
    ),
    "Skull Crushers": (
        _act(MuscleType.TRICEP_LONG_HEAD, 1.0),
        _act(MuscleType.TRICEP_SHORT_HEAD, 0.7),
    ),
    "Dips": (
        _act(MuscleType.TRICEP_LONG_HEAD, 0.8),
        _act(MuscleType.TRICEP_SHORT_HEAD, 0.8),
        _act(MuscleType.LOWER_CHEST, 0.6),
        _act(MuscleType.MID_CHEST, 0.4),
        _act(MuscleType.FRONT_DELT, 0.3),
    ),

    # === SHOULDERS ===
    "Overhead Press": (
        _act(MuscleType.FRONT_DELT, 1.0),
        _act(MuscleType.SIDE_DELT, 0.5),
        _act(MuscleType.TRICEP_LONG_HEAD, 0.4),
        _act(MuscleType.TRICEP_SHORT_HEAD, 0.4),
        _act(MuscleType.UPPER_BACK, 0.2),
    ),
    "Lateral Raises": (
        _act(MuscleType.SIDE_DELT, 1.0),
        _act(MuscleType.FRONT_DELT, 0.2),
        _act(MuscleType.TRAPEZIUS, 0.3),
    ),
    "Front Raises": (
        _act(MuscleType.FRONT_DELT, 1.0),
        _act(MuscleType.SIDE_DELT, 0.2),
        _act(MuscleType.UPPER_CHEST, 0.2),
    ),
    "Face Pulls": (
        _act(MuscleType.REAR_DELT, 1.0),
        _act(MuscleType.TRAPEZIUS, 0.5),
        _act(MuscleType.UPPER_BACK, 0.3),
    ),
    "Reverse Flyes": (
        _act(MuscleType.REAR_DELT, 1.0),
        _act(MuscleType.UPPER_BACK, 0.4),
        _act(MuscleType.TRAPEZIUS, 0.3),
    ),

    # === ABS ===
    "Crunches": (
        _act(MuscleType.UPPER_ABS, 1.0),
        _act(MuscleType.LOWER_ABS, 0.3),
    ),
    "Leg Raises": (
        _act(MuscleType.LOWER_ABS, 1.0),
        _act(MuscleType.UPPER_ABS, 0.3),
    ),
    "Planks": (
        _act(MuscleType.UPPER_ABS, 0.7),
        _act(MuscleType.LOWER_ABS, 0.7),
        _act(MuscleType.OBLIQUES, 0.5),
    ),

    # === CALVES ===
    "Calf Raises": (
        _act(MuscleType.CALVES, 1.0),
    ),

    # === TRAPS ===
    "Shrugs": (
        _act(MuscleType.TRAPEZIUS, 1.0),
    ),
}


def _check_unique_muscles(table: Mapping[str, tuple[ActivationEntry, ...]]) -> None:
    for exercise, entries in table.items():
        muscles = [entry.muscle for entry in entries]
        if len(muscles) != len(set(muscles)):
            raise ValueError(f"Duplicate muscle in activation table entry: {exercise}")


_check_unique_muscles(_EXERCISE_MAP)

EXERCISE_MAP: Mapping[str, tuple[ActivationEntry, ...]] = MappingProxyType(_EXERCISE_MAP)


# ============================================================
# Fallback Rules
# Evaluated in order against the lowercased name; first match wins.
# Specific conjunctions must come before the generic terms they contain.
# ============================================================

@dataclass(frozen=True)
class MatchRule:
    """Maps names satisfying `predicate` to a canonical exercise."""
    description: str
    predicate: Callable[[str], bool]
    exercise: str

    def matches(self, lowered: str) -> bool:
        return self.predicate(lowered)


def contains_all(*terms: str) -> Callable[[str], bool]:
    return lambda name: all(term in name for term in terms)


def contains_any(*terms: str) -> Callable[[str], bool]:
    return lambda name: any(term in name for term in terms)


def contains_word(*words: str) -> Callable[[str], bool]:
    """Whole-word match, so "row" does not fire inside "narrow" or "throw"."""
    pattern = re.compile(r"\b(?:%s)\b" % "|".join(words))
    return lambda name: pattern.search(name) is not None


def _all(exercise: str, *terms: str) -> MatchRule:
    return MatchRule(" + ".join(terms), contains_all(*terms), exercise)


def _any(exercise: str, *terms: str) -> MatchRule:
    return MatchRule(" | ".join(terms), contains_any(*terms), exercise)


def _word(exercise: str, *words: str) -> MatchRule:
    return MatchRule(" | ".join(f"<{word}>" for word in words), contains_word(*words), exercise)


FALLBACK_RULES: tuple[MatchRule, ...] = (
    # Leg machines are often sold as "incline" presses
    _all("Leg Press", "leg press"),

    # Chest presses: incline/decline before bare bench
    _all("Incline Curls", "incline", "curl"),
    _all("Incline Dumbbell Press", "incline", "dumbbell", "press"),
    _all("Incline Bench Press", "incline", "bench"),
    _all("Incline Bench Press", "incline", "press"),
    _all("Decline Bench Press", "decline", "bench"),
    _all("Decline Bench Press", "decline", "press"),
    _all("Bench Press", "bench"),
    _any("Reverse Flyes", "reverse fl", "reverse cable fl", "reverse pec deck", "rear delt fl"),
    _any("Cable Flyes", "cable fl", "chest fl", "pec deck"),

    # Legs and hinges
    _all("Squat", "squat"),
    _all("Romanian Deadlift", "romanian", "deadlift"),
    _all("Romanian Deadlift", "rdl"),
    _all("Deadlift", "deadlift"),

    # Back
    _any("Pull-ups", "pull-up", "pull up", "pullup", "chin-up", "chin up", "chinup"),
    _all("Lat Pulldown", "lat pull"),

    # Arms: named curls before bare curl, leg curl before bicep curl
    _all("Hammer Curls", "hammer curl"),
    _all("Preacher Curls", "preacher curl"),
    _all("Leg Curls", "leg curl"),
    _all("Bicep Curls", "curl"),

    # Rows: barbell variants before the generic row
    _any("Barbell Rows", "barbell row", "bent over row", "bent-over row"),
    _word("Seated Rows", "rows?"),

    # Shoulders
    _all("Overhead Press", "overhead", "press"),
    _all("Overhead Press", "shoulder press"),
    _all("Overhead Press", "ohp"),
    _all("Overhead Press", "military"),
    _all("Lateral Raises", "lateral raise"),
    _all("Front Raises", "front raise"),
    _all("Face Pulls", "face pull"),

    # Triceps
    _all("Tricep Pushdowns", "tricep", "push"),
    _any("Tricep Pushdowns", "pushdown", "push down"),
    _all("Skull Crushers", "skull crush"),
    _all("Tricep Extensions", "tricep"),
    _all("Dips", "dip"),
    _any("Push-ups", "push-up", "push up", "pushup"),

    # Abs
    _all("Crunches", "crunch"),
    _all("Leg Raises", "leg raise"),
    _all("Planks", "plank"),

    # Calves, traps, leg extensions
    _any("Calf Raises", "calf", "calves"),
    _all("Shrugs", "shrug"),
    _all("Leg Extensions", "leg ext"),
)


def _check_rule_targets(rules: Iterable[MatchRule]) -> None:
    for rule in rules:
        if rule.exercise not in EXERCISE_MAP:
            raise ValueError(f"Fallback rule '{rule.description}' targets unknown exercise: {rule.exercise}")


_check_rule_targets(FALLBACK_RULES)


# ============================================================
# Resolution
# ============================================================

def normalize_exercise_name(name: str) -> str:
    """Normalize exercise name for rule matching."""
    return name.lower().strip()


def match_exercise(name: str) -> Optional[str]:
    """Return the canonical exercise a free-text name resolves to, if any."""
    if name in EXERCISE_MAP:
        return name

    lowered = normalize_exercise_name(name)
    for rule in FALLBACK_RULES:
        if rule.matches(lowered):
            return rule.exercise

    return None


def get_activations(name: str) -> tuple[ActivationEntry, ...]:
    """
    Get muscle activations for an exercise name.
    Canonical names always win over fallback rules. Unknown exercises
    (cardio, mobility work, ...) resolve to an empty tuple.
    """
    matched = match_exercise(name)
    if matched is None:
        return ()
    return EXERCISE_MAP[matched]


# ============================================================
# Volume Aggregation
# ============================================================

def weekly_window(today: Optional[date] = None, days: Optional[int] = None) -> tuple[date, date]:
    """Inclusive window of the last `days` calendar days ending on `today`."""
    today = today or date.today()
    days = days or settings.VOLUME_WINDOW_DAYS
    return today - timedelta(days=days - 1), today


def exercises_from_workouts(workouts: Iterable[WorkoutLog]) -> list[LoggedExercise]:
    """Flatten workout logs, stamping each exercise with its workout's date."""
    flattened = []
    for workout in workouts:
        for exercise in workout.exercises:
            if exercise.date is None:
                exercise = exercise.model_copy(update={"date": workout.date})
            flattened.append(exercise)
    return flattened


def calculate_muscle_volumes(
        exercises: Iterable[LoggedExercise],
        start: date,
        end: date,
) -> dict[str, float]:
    """
    Accumulate sets * ratio per muscle for entries dated within [start, end].
    The running total is rounded after every addition so that display
    thresholds (5, 12, ...) are not missed by float drift.
    Muscles without contributions are absent from the result.
    """
    volumes: dict[str, float] = {}

    for ex in exercises:
        if ex.date is None or not (start <= ex.date <= end):
            continue

        sets = ex.sets or 0
        for activation in get_activations(ex.name):
            volume = sets * activation.ratio
            if not volume:
                continue
            current = volumes.get(activation.muscle, 0.0)
            volumes[activation.muscle] = round(current + volume, settings.VOLUME_DECIMALS)

    return volumes


def calculate_weekly_volumes(
        workouts: Iterable[WorkoutLog],
        today: Optional[date] = None,
) -> dict[str, float]:
    """Muscle volumes for the default dashboard window."""
    start, end = weekly_window(today)
    return calculate_muscle_volumes(exercises_from_workouts(workouts), start, end)


# ============================================================
# Example Usage
# ============================================================
if __name__ == "__main__":
    # Test single exercise lookup
    for name in ["Bench Press", "incline db press", "Incline Dumbbell Press Variant", "Sauna"]:
        print(f"{name!r} -> {match_exercise(name)}")

    # Test volume calculation
    day = date.today()
    session = [
        LoggedExercise(name="Squat", sets=4, date=day),
        LoggedExercise(name="Romanian Deadlift", sets=3, date=day),
    ]
    print("\nMuscle volumes:", calculate_muscle_volumes(session, day, day))
