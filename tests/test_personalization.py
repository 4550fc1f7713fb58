"""Tests for LLM plan personalization: parsing, validation and persistence."""
import json
from collections import OrderedDict
from datetime import date
from types import SimpleNamespace

import httpx
import pytest

from app.core.exceptions import BusinessRuleError, ConflictError, IntegrationError, NotFoundError
from app.llm.openai_provider import OpenAIProvider
from app.repositories.user_schedule_repository import UserScheduleRepository
from app.services.personalization import (
    PersonalizationService,
    build_prompt_payload,
    compute_age,
    expand_prescriptions,
    parse_llm_reply,
    validate_prescriptions,
    workout_days,
)
from app.services.program_generator import ProgramGenerator


def item(workout_id=1, sets=3, reps=10, weight_value=20, weight_unit="kg"):
    return {
        "id": workout_id,
        "sets": sets,
        "reps": reps,
        "weight_value": weight_value,
        "weight_unit": weight_unit,
    }


class TestParseLLMReply:
    """Test strict parse with a single bracket-slice fallback."""

    def test_plain_array(self):
        assert parse_llm_reply('[{"id": 1}]') == [{"id": 1}]

    def test_array_wrapped_in_prose(self):
        text = 'Sure! Here is the plan:\n```json\n[{"id": 1, "sets": 3}]\n```'
        assert parse_llm_reply(text) == [{"id": 1, "sets": 3}]

    def test_no_brackets(self):
        with pytest.raises(IntegrationError) as exc_info:
            parse_llm_reply("I cannot help with that")

        assert exc_info.value.code == "INT_LLM_INVALID_JSON"
        assert exc_info.value.message == "Invalid JSON from language model"

    def test_raw_text_kept_outside_production(self):
        with pytest.raises(IntegrationError) as exc_info:
            parse_llm_reply("[not json]")

        assert exc_info.value.details["raw"] == "[not json]"

    def test_object_reply_rejected(self):
        with pytest.raises(IntegrationError):
            parse_llm_reply('{"id": 1, "sets": 3}')

    def test_empty_reply(self):
        with pytest.raises(IntegrationError):
            parse_llm_reply("")


class TestValidatePrescriptions:
    """Test all-or-nothing validation of reply items."""

    def test_valid_items(self):
        prescriptions = validate_prescriptions([item(1), item(2, weight_value=0, weight_unit="lb")])

        assert [p.workout_id for p in prescriptions] == [1, 2]
        assert prescriptions[1].weight_value == 0.0
        assert prescriptions[1].weight_unit == "lb"

    def test_string_number_rejected(self):
        with pytest.raises(BusinessRuleError) as exc_info:
            validate_prescriptions([item(1), item(7, sets="3")])

        assert exc_info.value.code == "BR_INVALID_PRESCRIPTION"
        assert exc_info.value.details == {"workout_id": 7, "field": "sets"}

    def test_boolean_rejected(self):
        with pytest.raises(BusinessRuleError) as exc_info:
            validate_prescriptions([item(4, reps=True)])

        assert exc_info.value.details["workout_id"] == 4

    def test_negative_rejected(self):
        with pytest.raises(BusinessRuleError):
            validate_prescriptions([item(4, weight_value=-5)])

    def test_unknown_unit_rejected(self):
        with pytest.raises(BusinessRuleError) as exc_info:
            validate_prescriptions([item(4, weight_unit="stone")])

        assert exc_info.value.details["field"] == "weight_unit"

    def test_missing_id_rejected(self):
        bad = item()
        del bad["id"]
        with pytest.raises(BusinessRuleError):
            validate_prescriptions([bad])

    def test_non_object_rejected(self):
        with pytest.raises(BusinessRuleError):
            validate_prescriptions([item(), 5])


class TestPromptPayload:
    def test_compute_age_before_birthday(self):
        assert compute_age(date(1990, 6, 15), today=date(2026, 6, 14)) == 35

    def test_compute_age_on_birthday(self):
        assert compute_age(date(1990, 6, 15), today=date(2026, 6, 15)) == 36

    def test_compute_age_unknown(self):
        assert compute_age(None) is None

    def test_workout_days_distinct_in_weekday_order(self):
        rows = [
            SimpleNamespace(day="Tuesday", workout_id=2, name="Row"),
            SimpleNamespace(day="Monday", workout_id=1, name="Bench"),
            SimpleNamespace(day="Monday", workout_id=2, name="Row"),
        ]

        workouts = workout_days(rows)

        assert list(workouts) == [1, 2]
        assert workouts[2]["days"] == ["Monday", "Tuesday"]

    def test_payload_shape(self):
        profile = SimpleNamespace(
            birthday=date(2000, 1, 1),
            height=170,
            weight=65,
            background=None,
            training_goal="fat_loss",
            training_experience="beginner",
            injury_caution_area="none",
        )
        workouts = OrderedDict([(5, {"name": "Squat", "days": ["Wednesday"]})])

        payload = build_prompt_payload(profile, workouts, today=date(2026, 1, 1))

        assert payload["profile"]["age"] == 26
        assert payload["workouts"] == [{"id": 5, "name": "Squat"}]


class TestExpandPrescriptions:
    def test_expands_across_days_and_drops_unknown(self):
        workouts = OrderedDict(
            [
                (1, {"name": "Bench", "days": ["Monday"]}),
                (2, {"name": "Curl", "days": ["Monday", "Tuesday"]}),
            ]
        )
        prescriptions = validate_prescriptions([item(1), item(2), item(2), item(99)])

        rows = expand_prescriptions(prescriptions, workouts, user_id=7, program_id=3)

        assert sorted((row["day"], row["workout_id"]) for row in rows) == [
            ("Monday", 1),
            ("Monday", 2),
            ("Tuesday", 2),
        ]
        assert all(row["user_id"] == 7 and row["program_id"] == 3 for row in rows)


class TestPersonalizationService:
    """Test the service against the store with a fake provider."""

    @pytest.mark.asyncio
    async def test_personalize_persists_every_scheduled_row(self, session, catalog, profile, fake_llm):
        program = await ProgramGenerator(session).ensure_active_program()

        result = await PersonalizationService(session, fake_llm).personalize_plan(profile.user_id)

        rows = await UserScheduleRepository(session).list_for(profile.user_id, program.program_id)
        assert result.program_id == program.program_id
        assert rows
        assert all((row.sets, row.reps, row.weight_value) == (3, 10, 20.0) for row in rows)
        assert sum(len(entries) for entries in result.personalized.values()) == len(rows)

    @pytest.mark.asyncio
    async def test_single_llm_call_with_profile(self, session, catalog, profile, fake_llm):
        await ProgramGenerator(session).ensure_active_program()

        await PersonalizationService(session, fake_llm).personalize_plan(profile.user_id)

        assert len(fake_llm.calls) == 1
        _, config = fake_llm.calls[0]
        assert config.temperature == 0.0
        assert config.max_tokens == 2000
        payload = fake_llm.last_payload
        assert payload["profile"]["training_goal"] == "muscle_gain"
        ids = [w["id"] for w in payload["workouts"]]
        assert len(ids) == len(set(ids))

    @pytest.mark.asyncio
    async def test_second_personalize_conflicts(self, session, catalog, profile, fake_llm):
        await ProgramGenerator(session).ensure_active_program()
        service = PersonalizationService(session, fake_llm)
        await service.personalize_plan(profile.user_id)

        with pytest.raises(ConflictError):
            await service.personalize_plan(profile.user_id)
        assert len(fake_llm.calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_item_persists_nothing(self, session, catalog, profile, fake_llm):
        program = await ProgramGenerator(session).ensure_active_program()

        def one_bad(workouts):
            items = [item(w["id"]) for w in workouts]
            items[-1]["sets"] = "three"
            return json.dumps(items)

        fake_llm.reply = one_bad

        with pytest.raises(BusinessRuleError):
            await PersonalizationService(session, fake_llm).personalize_plan(profile.user_id)

        assert not await UserScheduleRepository(session).exists_for(profile.user_id, program.program_id)

    @pytest.mark.asyncio
    async def test_only_unknown_ids_is_no_valid_data(self, session, catalog, profile, fake_llm):
        await ProgramGenerator(session).ensure_active_program()
        fake_llm.reply = json.dumps([item(99999)])

        with pytest.raises(BusinessRuleError) as exc_info:
            await PersonalizationService(session, fake_llm).personalize_plan(profile.user_id)

        assert exc_info.value.code == "BR_NO_VALID_DATA"

    @pytest.mark.asyncio
    async def test_garbage_reply(self, session, catalog, profile, fake_llm):
        await ProgramGenerator(session).ensure_active_program()
        fake_llm.reply = "no json here"

        with pytest.raises(IntegrationError):
            await PersonalizationService(session, fake_llm).personalize_plan(profile.user_id)

    @pytest.mark.asyncio
    async def test_provider_failure(self, session, catalog, profile, fake_llm):
        await ProgramGenerator(session).ensure_active_program()
        fake_llm.error = httpx.ConnectError("connection refused")

        with pytest.raises(IntegrationError) as exc_info:
            await PersonalizationService(session, fake_llm).personalize_plan(profile.user_id)

        assert exc_info.value.code == "INT_LLM_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_non_json_provider_body(self, session, catalog, profile):
        await ProgramGenerator(session).ensure_active_program()
        provider = OpenAIProvider(
            api_key="sk-test",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>gateway</html>")),
        )

        with pytest.raises(IntegrationError) as exc_info:
            await PersonalizationService(session, provider).personalize_plan(profile.user_id)
        await provider.close()

        assert exc_info.value.code == "INT_LLM_BAD_RESPONSE"

    @pytest.mark.asyncio
    async def test_no_active_program(self, session, profile, fake_llm):
        with pytest.raises(IntegrationError) as exc_info:
            await PersonalizationService(session, fake_llm).personalize_plan(profile.user_id)

        assert exc_info.value.message == "No active program found"

    @pytest.mark.asyncio
    async def test_missing_profile(self, session, catalog, user, fake_llm):
        await ProgramGenerator(session).ensure_active_program()

        with pytest.raises(NotFoundError):
            await PersonalizationService(session, fake_llm).personalize_plan(user.id)
        assert fake_llm.calls == []

    @pytest.mark.asyncio
    async def test_reset_then_personalize_again(self, session, catalog, profile, fake_llm):
        await ProgramGenerator(session).ensure_active_program()
        service = PersonalizationService(session, fake_llm)
        result = await service.personalize_plan(profile.user_id)
        expected = sum(len(entries) for entries in result.personalized.values())

        reset = await service.reset_personalized_plan(profile.user_id)
        assert reset.deleted == expected

        await service.personalize_plan(profile.user_id)
        assert len(fake_llm.calls) == 2
