"""
LiftLog FastAPI Backend
Serves muscle volumes, exercise resolution, strength reports and the body map.
"""
from contextlib import asynccontextmanager
from datetime import date, datetime
from pathlib import Path
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from models import (
    MuscleVolumeRequest, MuscleVolumeResponse,
    ResolvedExerciseResponse, StrengthReportRequest, StrengthReportEntry,
)
from muscle_map import (
    EXERCISE_MAP, calculate_muscle_volumes, exercises_from_workouts,
    match_exercise, weekly_window,
)
from body_data import load_body_map
from progress import strength_report


API_VERSION = "1.0.0"


# ============================================================
# App Lifecycle
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    print(f"Starting {settings.APP_NAME} API...")
    print(f"[API] Activation table: {len(EXERCISE_MAP)} canonical exercises")
    if not Path(settings.BODY_DATA_OUTPUT).exists():
        print(f"Warning: body map not generated yet ({settings.BODY_DATA_OUTPUT})")

    yield
    print("Shutting down...")


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Voice-logged workouts to a per-muscle volume heatmap",
    version=API_VERSION,
    lifespan=lifespan
)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# Exercises
# ============================================================

@app.get("/api/exercises")
async def api_list_exercises():
    """Canonical exercises and their activations."""
    return {
        "exercises": {
            name: [entry.model_dump() for entry in entries]
            for name, entries in EXERCISE_MAP.items()
        },
        "count": len(EXERCISE_MAP)
    }


@app.get("/api/exercises/resolve", response_model=ResolvedExerciseResponse)
async def api_resolve_exercise(name: str):
    """Resolve a free-text exercise name."""
    if not name.strip():
        raise HTTPException(422, "Exercise name is required")

    matched = match_exercise(name)
    return ResolvedExerciseResponse(
        name=name,
        matched_exercise=matched,
        activations=list(EXERCISE_MAP[matched]) if matched else [],
    )


# ============================================================
# Muscle Volume
# ============================================================

@app.post("/api/muscle-volumes", response_model=MuscleVolumeResponse)
async def api_muscle_volumes(request: MuscleVolumeRequest):
    """Per-muscle volume over [start, end], defaulting to the last week."""
    default_start, default_end = weekly_window(request.end or date.today())
    start = request.start or default_start
    end = request.end or default_end
    if start > end:
        raise HTTPException(422, "start must not be after end")

    exercises = exercises_from_workouts(request.workouts) + list(request.exercises)
    volumes = calculate_muscle_volumes(exercises, start, end)
    print(f"[API] Muscle volumes {start}..{end}: {len(exercises)} exercises, {len(volumes)} muscles")

    return MuscleVolumeResponse(start=start, end=end, volumes=volumes)


# ============================================================
# Strength Report
# ============================================================

@app.post("/api/strength-report", response_model=list[StrengthReportEntry])
async def api_strength_report(request: StrengthReportRequest):
    """Max weight per exercise, this month vs. last month."""
    return strength_report(request.workouts, request.today)


# ============================================================
# Body Map
# ============================================================

@app.get("/api/body-map")
async def api_body_map():
    """Published anterior/posterior body map."""
    path = Path(settings.BODY_DATA_OUTPUT)
    if not path.exists():
        raise HTTPException(404, "Body map has not been generated")
    return load_body_map(path).model_dump()


# ============================================================
# Health Check
# ============================================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": API_VERSION
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": f"{settings.APP_NAME} API",
        "version": API_VERSION,
        "docs": "/docs"
    }


# ============================================================
# Run Server
# ============================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
