"""Generative text collaborator backed by the OpenAI SDK."""
from __future__ import annotations

import logging
from typing import Optional, Protocol

import openai

from steady.core.config import Settings, settings
from steady.core.errors import AIServiceError
from steady.observability.tracing import annotate, trace

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that turns a prompt into raw model text."""

    def generate(self, prompt: str, *, json_mode: bool = False) -> str:
        ...


class OpenAITextGenerator:
    """Chat-completions wrapper; the client is injected so tests never touch the network."""

    def __init__(self, client: "openai.OpenAI", model: str, system_prompt: Optional[str] = None):
        self._client = client
        self._model = model
        self._system_prompt = system_prompt or "You are a warm, concise coach for personal resolutions."

    def generate(self, prompt: str, *, json_mode: bool = False) -> str:
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        with trace(
            "ai.generate",
            metadata={"model": self._model, "json_mode": json_mode, "prompt_chars": len(prompt)},
        ) as span:
            try:
                completion = self._client.chat.completions.create(
                    model=self._model,
                    messages=[
                        {"role": "system", "content": self._system_prompt},
                        {"role": "user", "content": prompt},
                    ],
                    **kwargs,
                )
            except openai.OpenAIError as exc:
                raise AIServiceError(f"OpenAI request failed: {exc}") from exc
            content = completion.choices[0].message.content or ""
            annotate(span, llm_output_text=content[:500])
        return content


def build_text_generator(config: Settings = settings) -> Optional[TextGenerator]:
    """Return a generator for the configured provider, or None when AI is not configured."""
    if not config.openai_api_key:
        logger.warning("OPENAI_API_KEY missing; AI suggestions are disabled.")
        return None
    client = openai.OpenAI(api_key=config.openai_api_key, timeout=config.openai_timeout_seconds)
    return OpenAITextGenerator(client, config.openai_model)
