"""Enumerations shared by models, schemas and services."""
from enum import Enum, IntEnum


class WorkoutType(str, Enum):
    COMPOUND = "Compound"
    ACCESSORY = "Accessory"
    OTHER = "Other"


class ProgramStatus(IntEnum):
    EXPIRED = 0
    ACTIVE = 1


class WeightUnit(str, Enum):
    KG = "kg"
    LB = "lb"


class ModificationType(str, Enum):
    UNCHANGED = "unchanged"
    INCREASED = "increased"
    REDUCED = "reduced"
    MIXED = "mixed"


class TrainingGoal(str, Enum):
    MUSCLE_GAIN = "muscle_gain"
    FAT_LOSS = "fat_loss"
    TONE_UP = "tone_up"
    IMPROVE_STRENGTH = "improve_strength"
    GENERAL_FITNESS = "general_fitness"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    CASUAL = "casual"
    CONSISTENT = "consistent"
    ADVANCED = "advanced"


class InjuryArea(str, Enum):
    NONE = "none"
    SHOULDERS = "shoulders"
    LOWER_BACK = "lower_back"
    KNEES = "knees"
    WRISTS = "wrists"
    ELBOWS = "elbows"
    NECK = "neck"
    ANKLES = "ankles"
    HIPS = "hips"
