"""LLM response schemas for structured output."""

PERSONALIZED_PRESCRIPTION_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "sets": {"type": "number"},
            "reps": {"type": "number"},
            "weight_value": {"type": "number"},
            "weight_unit": {"type": "string", "enum": ["kg", "lb"]},
        },
        "required": ["id", "sets", "reps", "weight_value", "weight_unit"],
        "additionalProperties": False,
    },
}
