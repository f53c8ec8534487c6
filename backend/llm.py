"""
llm.py
------
Generation capability used by the recommender and the itinerary generator.

One method, swappable provider:

    client.generate(prompt, expect_json=False, system_instruction=None)
        -> str            (expect_json=False)
        -> dict | list    (expect_json=True)

Every failure (transport error, timeout, empty response, unparsable
JSON) is raised as errors.GenerationError; callers decide how to degrade.

Clients:
    GeminiClient   — google-genai SDK, used when GEMINI_API_KEY is set
    StubLLMClient  — no API calls; always fails so callers take their
                     fallback path (USE_STUB_LLM=true or no key)
"""

from __future__ import annotations

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional

from google import genai
from google.genai import types as genai_types

import config
from errors import GenerationError

logger = logging.getLogger(__name__)


def parse_json_response(raw: str) -> Any:
    """
    Parse model output as JSON, tolerating markdown fences and chatter
    around a single top-level object.
    """
    cleaned = re.sub(r"```(?:json)?", "", raw).strip().rstrip("`").strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        match = re.search(r"\{.*\}", cleaned, re.DOTALL)
        if match:
            try:
                return json.loads(match.group())
            except json.JSONDecodeError:
                pass
    raise GenerationError(f"Response is not valid JSON: {cleaned[:80]!r}")


class GenerationCapability(ABC):
    """Opaque text / JSON generation."""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        expect_json: bool = False,
        system_instruction: Optional[str] = None,
    ) -> Any:
        ...


# ── Stub LLM client (no API calls) ───────────────────────────────────────────
class StubLLMClient(GenerationCapability):
    """Used when USE_STUB_LLM=true or no API key is configured.

    Never produces content: recommendations degrade to the apology text
    and itineraries to the deterministic fallback.
    """

    def generate(self, prompt, expect_json=False, system_instruction=None):  # noqa: ARG002
        raise GenerationError("LLM running in stub mode (USE_STUB_LLM=true)")


# ── Gemini LLM client ────────────────────────────────────────────────────────────
class GeminiClient(GenerationCapability):

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
    ) -> None:
        timeout = timeout_seconds or config.LLM_TIMEOUT_SECONDS
        self._client = genai.Client(
            api_key=api_key or config.GEMINI_API_KEY,
            # SDK timeout is in milliseconds
            http_options=genai_types.HttpOptions(timeout=timeout * 1000),
        )
        self._model = model or config.LLM_MODEL_NAME

    def generate(self, prompt, expect_json=False, system_instruction=None):
        gen_config = genai_types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json" if expect_json else "text/plain",
            temperature=0.7,
        )
        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=prompt,
                config=gen_config,
            )
        except Exception as exc:
            raise GenerationError(f"Gemini request failed: {exc}") from exc

        if not response or not response.text:
            raise GenerationError("Empty Gemini response")

        text = response.text.strip()
        if expect_json:
            return parse_json_response(text)
        return text


def get_llm_client() -> GenerationCapability:
    """Pick the client according to config."""
    if config.USE_STUB_LLM:
        logger.info("[LLM] Running in stub mode (USE_STUB_LLM=true) — no API calls.")
        return StubLLMClient()
    return GeminiClient()
