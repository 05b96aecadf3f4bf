"""Validation and normalization of structured answers returned by the AI model.

Model output is untrusted: it may be prose, carry invented enum values or
out-of-range numbers. Only a payload that is not a JSON object is fatal
(``MalformedResponse``); every individual field is otherwise defaulted or
clamped so callers always receive a fully-populated result.
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from steady.core.errors import MalformedResponse
from steady.db.enums import ResolutionCategory, Sentiment

VALID_SENTIMENTS = {sentiment.value for sentiment in Sentiment}
VALID_CATEGORIES = {category.value for category in ResolutionCategory}

PROGRESS_MIN = 0
PROGRESS_MAX = 100

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*(.*?)\s*```$", re.DOTALL)


class EnrichmentResult(BaseModel):
    sentiment: Sentiment
    progress_estimate: int = Field(..., ge=PROGRESS_MIN, le=PROGRESS_MAX)
    feedback: str = ""


class CategoryResult(BaseModel):
    category: Optional[ResolutionCategory] = None
    framing: str = ""


def parse_enrichment(raw_text: str) -> EnrichmentResult:
    data = _load_object(raw_text)
    sentiment = data.get("sentiment")
    return EnrichmentResult(
        sentiment=Sentiment(sentiment) if _is_one_of(sentiment, VALID_SENTIMENTS) else Sentiment.NEUTRAL,
        progress_estimate=_clamp_progress(data.get("progress_estimate")),
        feedback=_as_text(data.get("feedback")),
    )


def parse_category(raw_text: str) -> CategoryResult:
    data = _load_object(raw_text)
    category = data.get("category")
    return CategoryResult(
        category=ResolutionCategory(category) if _is_one_of(category, VALID_CATEGORIES) else None,
        framing=_as_text(data.get("framing")),
    )


def _load_object(raw_text: str) -> Dict[str, Any]:
    text = _strip_code_fence(raw_text or "")
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise MalformedResponse("AI response is not valid JSON", raw_text=raw_text) from exc
    if not isinstance(data, dict):
        raise MalformedResponse(
            f"Expected a JSON object from AI response, got {type(data).__name__}",
            raw_text=raw_text,
        )
    return data


def _is_one_of(value: Any, allowed: set) -> bool:
    return isinstance(value, str) and value in allowed


def _strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    return match.group(1) if match else stripped


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # ints beyond float range
            return math.inf if value > 0 else -math.inf
    elif isinstance(value, str):
        try:
            number = float(value.strip()) if value.strip() else 0.0
        except ValueError:
            return 0.0
    else:
        return 0.0
    return 0.0 if math.isnan(number) else number


def _clamp_progress(value: Any) -> int:
    number = _to_number(value)
    clamped = min(float(PROGRESS_MAX), max(float(PROGRESS_MIN), number))
    return int(round(clamped))


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)
