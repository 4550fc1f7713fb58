"""Starter exercise catalog."""
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.enums import WorkoutType
from app.models.workout import Workout
from app.repositories.workout_repository import WorkoutRepository

logger = get_logger(__name__)

C, A, O = WorkoutType.COMPOUND.value, WorkoutType.ACCESSORY.value, WorkoutType.OTHER.value

# (name, category, type)
STARTER_CATALOG: list[tuple[str, str, str]] = [
    ("Barbell Bench Press", "Chest", C),
    ("Incline Dumbbell Press", "Chest", C),
    ("Weighted Dips", "Chest", C),
    ("Cable Fly", "Chest", A),
    ("Pec Deck", "Chest", A),
    ("Push-Up", "Chest", A),
    ("Close-Grip Bench Press", "Arms", C),
    ("Chin-Up", "Arms", C),
    ("Barbell Curl", "Arms", A),
    ("Hammer Curl", "Arms", A),
    ("Triceps Pushdown", "Arms", A),
    ("Overhead Triceps Extension", "Arms", A),
    ("Deadlift", "Back", C),
    ("Barbell Row", "Back", C),
    ("Pull-Up", "Back", C),
    ("Lat Pulldown", "Back", A),
    ("Seated Cable Row", "Back", A),
    ("Face Pull", "Back", A),
    ("Back Squat", "Legs", C),
    ("Romanian Deadlift", "Legs", C),
    ("Walking Lunge", "Legs", C),
    ("Leg Extension", "Legs", A),
    ("Lying Leg Curl", "Legs", A),
    ("Standing Calf Raise", "Legs", A),
    ("Overhead Press", "Shoulders", C),
    ("Push Press", "Shoulders", C),
    ("Lateral Raise", "Shoulders", A),
    ("Rear Delt Fly", "Shoulders", A),
    ("Front Raise", "Shoulders", A),
    ("Plank", "Core", O),
    ("Hanging Leg Raise", "Core", A),
    ("Ab Wheel Rollout", "Core", A),
    ("Pallof Press", "Core", A),
    ("Dead Bug", "Core", O),
    ("Side Plank", "Core", O),
    ("Cable Crunch", "Core", A),
    ("Running", "Cardio", O),
    ("Rowing Machine", "Cardio", O),
    ("Jump Rope", "Cardio", O),
    ("Assault Bike", "Cardio", O),
    ("Burpees", "Cardio", O),
    ("Stair Climber", "Cardio", O),
    ("Sled Push", "Cardio", O),
    ("Kettlebell Swing", "Full Body", C),
    ("Power Clean", "Full Body", C),
    ("Thruster", "Full Body", C),
    ("Farmer's Carry", "Full Body", C),
    ("Turkish Get-Up", "Full Body", A),
    ("Man Maker", "Full Body", C),
    ("Bear Crawl", "Full Body", O),
]


async def seed_workouts(session: AsyncSession) -> int:
    """Insert catalog rows whose names are not present yet; returns the number inserted."""
    workouts = WorkoutRepository(session)
    existing = await workouts.list_names()

    new_rows = [
        Workout(name=name, category=category, type=workout_type)
        for name, category, workout_type in STARTER_CATALOG
        if name not in existing
    ]
    workouts.add_all(new_rows)
    await session.commit()

    logger.info("catalog_seeded", inserted=len(new_rows), skipped=len(STARTER_CATALOG) - len(new_rows))
    return len(new_rows)
