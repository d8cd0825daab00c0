"""
Application DTOs - AI decision payload

Strict decoding of the AI backend's reply. Anything that does not decode
into :class:`AIDecisionPayload` is treated as an AI failure.
"""

import json
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ecopilot.domain.entities.optimization import OptimizationAction

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_WINDOW = re.compile(r"^\d{1,2}:\d{2}\s*-\s*\d{1,2}:\d{2}$")


class AIDecisionPayload(BaseModel):
    """Shape the model is instructed to return."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    action: OptimizationAction
    target_window: str = Field(alias="targetWindow")
    expected_savings_percent: Optional[float] = Field(
        default=None, alias="expectedSavingsPercent"
    )
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: Optional[str] = None

    @field_validator("target_window")
    @classmethod
    def _validate_window(cls, value: str) -> str:
        value = value.strip()
        if not _WINDOW.match(value):
            raise ValueError(f"target window must look like HH:MM-HH:MM, got {value!r}")
        return value


def extract_json_text(raw: str) -> str:
    """Strip a markdown code fence around the JSON reply, if any."""
    text = raw.strip()
    match = _FENCED_BLOCK.search(text)
    return match.group(1).strip() if match else text


def decode_ai_decision(raw: str) -> AIDecisionPayload:
    """
    Decode a raw model reply.

    Raises:
        ValueError: If the reply is not JSON or misses/invalidates a field
            (pydantic's ValidationError is a ValueError).
    """
    try:
        data = json.loads(extract_json_text(raw))
    except json.JSONDecodeError as exc:
        raise ValueError(f"AI reply is not valid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise ValueError("AI reply must be a JSON object")
    return AIDecisionPayload.model_validate(data)
