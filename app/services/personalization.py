"""
PersonalizationService - Asks the LLM for per-exercise sets/reps/weight and stores them.

Responsible for:
- Building the prompt payload from the user profile and the active program
- Calling the chat-completion provider once (no retries)
- Parsing the reply strictly, with a single bracket-slice fallback
- Validating every item before anything is written (all-or-nothing)
- Expanding items across every day a workout appears and bulk inserting them
"""

import json
import math
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Any

import httpx
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.settings import get_settings
from app.config.weekly_plan import WEEKDAY_ORDER
from app.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    IntegrationError,
)
from app.core.logging import get_logger
from app.core.transactions import transactional
from app.llm import LLMConfig, LLMProvider, Message, PERSONALIZED_PRESCRIPTION_SCHEMA, get_llm_provider
from app.models.enums import WeightUnit
from app.models.program import ProgramMetadata
from app.models.user import UserProfile
from app.repositories.program_repository import ProgramRepository
from app.repositories.user_repository import UserRepository
from app.repositories.user_schedule_repository import UserScheduleRepository
from app.schemas.personalization import PersonalizationReset, PersonalizationResult, PersonalizedEntry
from app.services.base import BaseService

logger = get_logger(__name__)

ACCEPTED_WEIGHT_UNITS = frozenset(unit.value for unit in WeightUnit)

PERSONALIZATION_SYSTEM_PROMPT = """You are a strength and conditioning coach.
You receive a JSON object with:
  - profile: { age, height, weight, background, training_goal, training_experience, injury_caution_area }
  - workouts: array of { id, name }

Return ONLY a JSON array (no markdown, no explanation) with exactly one object per workout id:
  [{"id": 1, "sets": 3, "reps": 10, "weight_value": 40, "weight_unit": "kg"}, ...]

Rules:
  - Use only the properties id, sets, reps, weight_value and weight_unit.
  - sets, reps and weight_value are numbers; weight_unit is "kg" or "lb".
  - weight_value may be 0 only for bodyweight movements (push-ups, pull-ups, planks, running).
  - Squats, deadlifts, bench presses, overhead presses and rows always carry a weight above 0.
  - Respect the injury_caution_area by choosing conservative loads for affected movements."""


@dataclass(frozen=True)
class Prescription:
    workout_id: int
    sets: int
    reps: int
    weight_value: float
    weight_unit: str


def compute_age(birthday: date | None, today: date | None = None) -> int | None:
    if birthday is None:
        return None
    today = today or date.today()
    had_birthday = (today.month, today.day) >= (birthday.month, birthday.day)
    return today.year - birthday.year - (0 if had_birthday else 1)


def workout_days(schedule_rows: list) -> "OrderedDict[int, dict]":
    """Distinct workout ids of a program mapped to name and day list, in weekday order."""
    ordered = sorted(
        schedule_rows,
        key=lambda row: WEEKDAY_ORDER.index(row.day) if row.day in WEEKDAY_ORDER else len(WEEKDAY_ORDER),
    )
    workouts: "OrderedDict[int, dict]" = OrderedDict()
    for row in ordered:
        entry = workouts.setdefault(row.workout_id, {"name": row.name, "days": []})
        if row.day not in entry["days"]:
            entry["days"].append(row.day)
    return workouts


def build_prompt_payload(
    profile: UserProfile,
    workouts: "OrderedDict[int, dict]",
    today: date | None = None,
) -> dict:
    return {
        "profile": {
            "age": compute_age(profile.birthday, today),
            "height": profile.height,
            "weight": profile.weight,
            "background": profile.background,
            "training_goal": profile.training_goal,
            "training_experience": profile.training_experience,
            "injury_caution_area": profile.injury_caution_area,
        },
        "workouts": [
            {"id": workout_id, "name": info["name"]}
            for workout_id, info in workouts.items()
        ],
    }


def _invalid_reply(text: str) -> IntegrationError:
    details = {} if get_settings().is_production else {"raw": text}
    return IntegrationError(
        "Invalid JSON from language model",
        code="INT_LLM_INVALID_JSON",
        details=details,
    )


def parse_llm_reply(text: str) -> list:
    """Strict JSON parse, then one retry on the outermost [...] slice."""
    text = (text or "").strip()
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("["), text.rfind("]")
        if start == -1 or end <= start:
            raise _invalid_reply(text)
        try:
            parsed = json.loads(text[start:end + 1])
        except json.JSONDecodeError:
            raise _invalid_reply(text)
        logger.info("llm_reply_recovered_by_slice", length=len(text))

    if not isinstance(parsed, list):
        raise _invalid_reply(text)
    return parsed


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _reject(message: str, workout_id: Any, field: str | None = None) -> BusinessRuleError:
    details = {"workout_id": workout_id}
    if field:
        details["field"] = field
    return BusinessRuleError(message, code="BR_INVALID_PRESCRIPTION", details=details)


def validate_prescriptions(items: list) -> list[Prescription]:
    """Validate every item; the first violation rejects the whole reply."""
    prescriptions = []
    for item in items:
        if not isinstance(item, dict):
            raise _reject("Language model returned a non-object item", None)

        workout_id = item.get("id")
        if not isinstance(workout_id, int) or isinstance(workout_id, bool):
            raise _reject("Language model returned an item without a numeric id", workout_id, "id")

        for field in ("sets", "reps", "weight_value"):
            value = item.get(field)
            if not _is_number(value):
                raise _reject(f"Invalid {field} for workout {workout_id}", workout_id, field)
            if value < 0:
                raise _reject(f"Negative {field} for workout {workout_id}", workout_id, field)

        unit = item.get("weight_unit")
        if unit not in ACCEPTED_WEIGHT_UNITS:
            raise _reject(f"Invalid weight_unit for workout {workout_id}", workout_id, "weight_unit")

        prescriptions.append(
            Prescription(
                workout_id=workout_id,
                sets=int(round(item["sets"])),
                reps=int(round(item["reps"])),
                weight_value=float(item["weight_value"]),
                weight_unit=unit,
            )
        )
    return prescriptions


def expand_prescriptions(
    prescriptions: list[Prescription],
    workouts: "OrderedDict[int, dict]",
    user_id: int,
    program_id: int,
) -> list[dict]:
    """One row per (day, workout) the prescription applies to; unknown ids are dropped."""
    rows: list[dict] = []
    seen: set[tuple[str, int]] = set()
    for prescription in prescriptions:
        info = workouts.get(prescription.workout_id)
        if info is None:
            logger.warning("llm_unknown_workout_id", workout_id=prescription.workout_id)
            continue
        for day in info["days"]:
            key = (day, prescription.workout_id)
            if key in seen:
                continue
            seen.add(key)
            rows.append(
                {
                    "user_id": user_id,
                    "program_id": program_id,
                    "day": day,
                    "workout_id": prescription.workout_id,
                    "sets": prescription.sets,
                    "reps": prescription.reps,
                    "weight_value": prescription.weight_value,
                    "weight_unit": prescription.weight_unit,
                }
            )
    return rows


def group_by_day(rows: list[dict]) -> dict[str, list[PersonalizedEntry]]:
    grouped: dict[str, list[PersonalizedEntry]] = {}
    for day in WEEKDAY_ORDER:
        day_rows = [row for row in rows if row["day"] == day]
        if day_rows:
            grouped[day] = [
                PersonalizedEntry(
                    workout_id=row["workout_id"],
                    sets=row["sets"],
                    reps=row["reps"],
                    weight_value=row["weight_value"],
                    weight_unit=row["weight_unit"],
                )
                for row in day_rows
            ]
    return grouped


class PersonalizationService(BaseService):
    def __init__(self, session: AsyncSession, provider: LLMProvider | None = None):
        super().__init__(session)
        self._provider = provider
        self._programs = ProgramRepository(session)
        self._users = UserRepository(session)
        self._user_schedules = UserScheduleRepository(session)

    @property
    def provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = get_llm_provider()
        return self._provider

    async def _require_active_program(self) -> ProgramMetadata:
        program = await self._programs.get_active_program()
        if program is None:
            raise IntegrationError("No active program found", code="INT_NO_ACTIVE_PROGRAM")
        return program

    async def personalize_plan(self, user_id: int) -> PersonalizationResult:
        program = await self._require_active_program()

        profile = self._require(
            await self._users.get_profile(user_id),
            "UserProfile",
            "User profile not found",
            {"user_id": user_id},
        )

        if await self._user_schedules.exists_for(user_id, program.id):
            raise ConflictError(
                "Personalized plan already exists for this program; reset it first",
                code="CF_PLAN_ALREADY_PERSONALIZED",
                details={"program_id": program.id},
            )

        workouts = workout_days(await self._programs.list_schedule_rows(program.id))
        payload = build_prompt_payload(profile, workouts)

        reply = await self._ask_llm(payload)
        prescriptions = validate_prescriptions(parse_llm_reply(reply))

        rows = expand_prescriptions(prescriptions, workouts, user_id, program.id)
        if not rows:
            raise BusinessRuleError(
                "No valid data to save from language model reply",
                code="BR_NO_VALID_DATA",
                details={"program_id": program.id},
            )

        try:
            await self._persist(rows)
        except IntegrityError:
            raise ConflictError(
                "Personalized plan already exists for this program; reset it first",
                code="CF_PLAN_ALREADY_PERSONALIZED",
                details={"program_id": program.id},
            )

        logger.info(
            "plan_personalized",
            user_id=user_id,
            program_id=program.id,
            workouts=len(prescriptions),
            rows=len(rows),
        )
        return PersonalizationResult(program_id=program.id, personalized=group_by_day(rows))

    async def _ask_llm(self, payload: dict) -> str:
        settings = get_settings()
        messages = [
            Message(role="system", content=PERSONALIZATION_SYSTEM_PROMPT),
            Message(role="user", content=json.dumps(payload, default=str)),
        ]
        config = LLMConfig(
            temperature=0.0,
            max_tokens=settings.openai_max_tokens,
            json_schema=PERSONALIZED_PRESCRIPTION_SCHEMA,
        )
        try:
            response = await self.provider.chat(messages, config)
        except httpx.HTTPError as e:
            logger.error("llm_request_failed", error=str(e))
            raise IntegrationError(
                "Language model request failed",
                code="INT_LLM_UNAVAILABLE",
                details={} if settings.is_production else {"reason": str(e)},
            )
        except ValueError as e:
            # 200 with a body that is not JSON
            logger.error("llm_response_unreadable", error=str(e))
            raise IntegrationError(
                "Language model returned an unreadable response",
                code="INT_LLM_BAD_RESPONSE",
                details={} if settings.is_production else {"reason": str(e)},
            )
        return response.content

    @transactional
    async def _persist(self, rows: list[dict]) -> None:
        await self._user_schedules.bulk_insert(rows)

    async def reset_personalized_plan(self, user_id: int) -> PersonalizationReset:
        program = await self._require_active_program()
        deleted = await self._reset(user_id, program.id)
        logger.info("plan_personalization_reset", user_id=user_id, program_id=program.id, deleted=deleted)
        return PersonalizationReset(
            message="Personalized plan cleared",
            program_id=program.id,
            deleted=deleted,
        )

    @transactional
    async def _reset(self, user_id: int, program_id: int) -> int:
        return await self._user_schedules.delete_for(user_id, program_id)
