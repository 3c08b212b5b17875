"""
LiftLog Data Models
Muscle taxonomy and pydantic models for logged workouts, activations and API payloads.
"""
import datetime as dt
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from enum import Enum


# ============================================================
# Enums
# ============================================================

class MuscleType(str, Enum):
    """Every label a body map region may carry."""
    TRAPEZIUS = "trapezius"
    UPPER_BACK = "upper-back"
    LOWER_BACK = "lower-back"
    LATS = "lats"
    UPPER_CHEST = "upper-chest"
    MID_CHEST = "mid-chest"
    LOWER_CHEST = "lower-chest"
    FRONT_DELT = "front-delt"
    SIDE_DELT = "side-delt"
    REAR_DELT = "rear-delt"
    BICEP_LONG_HEAD = "bicep-long-head"
    BICEP_SHORT_HEAD = "bicep-short-head"
    BRACHIALIS = "brachialis"
    TRICEP_LONG_HEAD = "tricep-long-head"
    TRICEP_SHORT_HEAD = "tricep-short-head"
    FOREARM = "forearm"
    UPPER_ABS = "upper-abs"
    LOWER_ABS = "lower-abs"
    OBLIQUES = "obliques"
    QUADRICEPS = "quadriceps"
    HAMSTRING = "hamstring"
    GLUTEAL = "gluteal"
    ADDUCTOR = "adductor"
    ABDUCTORS = "abductors"
    CALVES = "calves"
    LEFT_SOLEUS = "left-soleus"
    RIGHT_SOLEUS = "right-soleus"

    # Structural
    HEAD = "head"
    KNEES = "knees"
    NECK = "neck"


class BodyView(str, Enum):
    ANTERIOR = "anterior"
    POSTERIOR = "posterior"


UNKNOWN_REGION = "unknown"

# Rendered but never colored by training volume
STRUCTURAL_PARTS = frozenset({
    MuscleType.HEAD.value,
    MuscleType.KNEES.value,
    MuscleType.NECK.value,
    MuscleType.LEFT_SOLEUS.value,
    MuscleType.RIGHT_SOLEUS.value,
})

ACTIVATABLE_MUSCLES = frozenset(m.value for m in MuscleType) - STRUCTURAL_PARTS


# ============================================================
# Activation
# ============================================================

class ActivationEntry(BaseModel):
    """How much one exercise counts towards one muscle."""
    muscle: MuscleType
    ratio: float = Field(..., gt=0, le=1, description="1.0 primary mover, ~0.5 secondary, ~0.2 stabilizer")

    @field_validator("muscle")
    @classmethod
    def muscle_must_be_activatable(cls, muscle):
        value = getattr(muscle, "value", muscle)
        if value not in ACTIVATABLE_MUSCLES:
            raise ValueError(f"{value} is a structural region and cannot receive activation")
        return muscle

    class Config:
        frozen = True
        use_enum_values = True


# ============================================================
# Logged Workouts (produced by the external extraction pipeline)
# ============================================================

class LoggedExercise(BaseModel):
    """One exercise line from a logged workout."""
    name: str = Field(..., min_length=1)
    sets: Optional[int] = None
    reps: Optional[int] = None
    weight: Optional[float] = None
    unit: Optional[str] = None
    date: Optional[dt.date] = None


class WorkoutLog(BaseModel):
    """A logged workout day."""
    date: dt.date
    difficulty: Optional[int] = None
    user_notes: Optional[str] = None
    raw_transcript: Optional[str] = None
    exercises: list[LoggedExercise] = Field(default_factory=list)


# ============================================================
# Body Map Artifact
# ============================================================

class BodyMapEntry(BaseModel):
    """One drawable shape of the body map."""
    muscle: MuscleType
    path: str

    class Config:
        use_enum_values = True


class BodyMapArtifact(BaseModel):
    """Published body map consumed by the heatmap renderer."""
    anterior: list[BodyMapEntry] = Field(default_factory=list)
    posterior: list[BodyMapEntry] = Field(default_factory=list)


# ============================================================
# API Request/Response Models
# ============================================================

class MuscleVolumeRequest(BaseModel):
    """Logged records plus an optional inclusive window."""
    workouts: list[WorkoutLog] = Field(default_factory=list)
    exercises: list[LoggedExercise] = Field(default_factory=list)
    start: Optional[dt.date] = None
    end: Optional[dt.date] = None


class MuscleVolumeResponse(BaseModel):
    start: dt.date
    end: dt.date
    volumes: dict[str, float]


class ResolvedExerciseResponse(BaseModel):
    name: str
    matched_exercise: Optional[str] = None
    activations: list[ActivationEntry] = Field(default_factory=list)


class StrengthReportRequest(BaseModel):
    workouts: list[WorkoutLog] = Field(default_factory=list)
    today: Optional[dt.date] = None


class StrengthReportEntry(BaseModel):
    """Max weight for one exercise, this month vs. last month."""
    name: str
    current: Optional[float] = None
    previous: Optional[float] = None
    unit: str = "lbs"
    change: Optional[float] = None  # percentage
    detail: str = ""
