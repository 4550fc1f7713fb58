"""Schemas for LLM plan personalization."""
from pydantic import BaseModel


class PersonalizedEntry(BaseModel):
    workout_id: int
    sets: int
    reps: int
    weight_value: float
    weight_unit: str


class PersonalizationResult(BaseModel):
    program_id: int
    personalized: dict[str, list[PersonalizedEntry]]


class PersonalizationReset(BaseModel):
    message: str
    program_id: int
    deleted: int
