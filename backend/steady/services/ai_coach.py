"""AI-backed coaching helpers: category suggestion, log enrichment, weekly summary."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from steady.db.enums import ResolutionCategory
from steady.services.ai_client import TextGenerator
from steady.services.ai_normalizer import (
    CategoryResult,
    EnrichmentResult,
    parse_category,
    parse_enrichment,
)

RECENT_LOG_CONTEXT = 5


@dataclass(frozen=True)
class LogContext:
    note: str
    created_at: datetime


@dataclass(frozen=True)
class WeeklyLogEntry:
    resolution_title: str
    note: str
    sentiment: Optional[str]
    created_at: datetime


def suggest_category(generator: TextGenerator, *, title: str, description: Optional[str]) -> CategoryResult:
    """Ask the model for one of the six categories plus a framing sentence.

    Raises ``MalformedResponse`` or ``AIServiceError``; callers treat both as "no suggestion".
    """
    categories = ", ".join(category.value for category in ResolutionCategory)
    prompt = (
        "Suggest a category and motivational framing for this resolution. Respond with valid JSON only.\n\n"
        f"Resolution title: {title}\n"
        f"Description: {description or title}\n\n"
        f"Categories (choose exactly one): {categories}\n\n"
        "Respond with this exact JSON structure:\n"
        '{"category":"one of the above","framing":"one sentence about why this matters"}'
    )
    return parse_category(generator.generate(prompt, json_mode=True))


def enrich_progress_log(
    generator: TextGenerator,
    *,
    resolution_title: str,
    resolution_description: Optional[str],
    recent_logs: Sequence[LogContext],
    new_note: str,
) -> EnrichmentResult:
    """Score a new progress note; ``recent_logs`` is oldest-first and trimmed to the latest five."""
    context = "\n".join(
        f"- {log.note} ({log.created_at.date().isoformat()})" for log in list(recent_logs)[-RECENT_LOG_CONTEXT:]
    ) or "No previous logs."
    description_line = f"Description: {resolution_description}\n" if resolution_description else ""
    prompt = (
        "You are analyzing a progress update for a personal resolution. "
        "Respond with valid JSON only, no markdown and no explanation.\n\n"
        f"Resolution: {resolution_title}\n"
        f"{description_line}\n"
        f"Recent progress logs:\n{context}\n\n"
        f"New update: {new_note}\n\n"
        "Respond with this exact JSON structure:\n"
        '{"sentiment":"positive|neutral|negative","progress_estimate":0-100,'
        '"feedback":"1-2 sentences of specific encouraging coaching"}'
    )
    return parse_enrichment(generator.generate(prompt, json_mode=True))


def generate_weekly_summary(
    generator: TextGenerator,
    *,
    user_name: Optional[str],
    logs: List[WeeklyLogEntry],
) -> str:
    """Free-text recap of the week; empty string (and no model call) when there is nothing to summarize."""
    if not logs:
        return ""
    log_text = "\n".join(
        f"[{entry.resolution_title}] {entry.note} ({entry.sentiment or 'no sentiment'})" for entry in logs
    )
    prompt = (
        f"Write a brief weekly summary for {user_name or 'this person'}'s resolution progress. "
        "Be warm, specific, and end with one concrete suggestion.\n\n"
        f"This week's logs:\n{log_text}\n\n"
        "Write 2-3 short paragraphs. No bullet points. No markdown."
    )
    return (generator.generate(prompt) or "").strip()
