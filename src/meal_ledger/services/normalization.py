"""Meal description normalization: transcription, structuring, sanitizing."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from meal_ledger.domain.items import (
    FoodItem,
    NormalizationResult,
    SanitizedItem,
)

DEFAULT_AUDIO_FILENAME = "audio.webm"
DEFAULT_AUDIO_CONTENT_TYPE = "audio/webm"

STRUCTURING_PROMPT = """\
You turn spoken or typed meal descriptions into compact JSON.

Reply with JSON only, no prose, using exactly this root shape:
{
  "items": [
    {
      "qty": string,   // quantity as described, e.g. "2 slices" or "100g"
      "n": string,     // name of the food
      "cal": number,   // calories for this item
      "p": number,     // protein in grams
      "c": number,     // carbohydrates in grams
      "f": number,     // fat in grams
      "fib": number    // fiber in grams (optional)
    }
  ]
}

Rules:
- The root object has a single key, "items", holding an array.
- Give per-item values only. Never add meal-level totals.
- Add micronutrients as extra keys on the item named <shorthand>_<unit>, \
lowercase shorthand of 1-4 letters and a unit of mg, mcg, iu, g, mgdL or \
mmolL. Examples: k_mg for potassium in mg, fe_mg for iron in mg.
- When a value cannot be inferred, leave the key out instead of guessing.
- If nothing can be parsed, return {"items": []}.
"""

_logger = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when a required service credential is absent."""


@dataclass(frozen=True)
class AudioPayload:
    """Raw audio received from a capture client."""

    content: bytes
    filename: str = DEFAULT_AUDIO_FILENAME
    content_type: str = DEFAULT_AUDIO_CONTENT_TYPE


class TranscriptionClient(Protocol):
    """Interface for speech-to-text."""

    async def transcribe(self, *, model: str, audio: AudioPayload) -> str:
        """Return the transcript of the audio, possibly empty."""


class StructuringClient(Protocol):
    """Interface for JSON-constrained chat completions."""

    async def complete_json(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str | None:
        """Return the raw completion text."""


@dataclass
class NormalizationService:
    """Service that turns a meal description into sanitized food items."""

    transcription_client: TranscriptionClient | None
    structuring_client: StructuringClient | None
    transcription_model: str = "whisper-1"
    model: str = "gpt-4o"
    temperature: float = 0.2

    async def normalize_audio(self, audio: AudioPayload) -> NormalizationResult:
        """Transcribe audio and structure the transcript."""
        transcription_client, structuring_client = self._require_clients()
        transcript = await transcription_client.transcribe(
            model=self.transcription_model, audio=audio
        )
        _logger.info(
            "Transcribed audio: bytes=%s chars=%s", len(audio.content), len(transcript)
        )
        return await self._structure(structuring_client, transcript or "")

    async def normalize_text(self, description: str) -> NormalizationResult:
        """Structure a typed meal description."""
        if not description.strip():
            return NormalizationResult.empty()
        _, structuring_client = self._require_clients()
        return await self._structure(structuring_client, description.strip())

    async def _structure(
        self, client: StructuringClient, transcript: str
    ) -> NormalizationResult:
        raw = await client.complete_json(
            model=self.model,
            temperature=self.temperature,
            system_prompt=STRUCTURING_PROMPT,
            user_prompt=build_user_prompt(transcript),
        )
        return NormalizationResult(items=sanitize_items(parse_structured_output(raw)))

    def _require_clients(self) -> tuple[TranscriptionClient, StructuringClient]:
        if self.transcription_client is None or self.structuring_client is None:
            raise ConfigurationError("OPENAI_API_KEY is not set")
        return self.transcription_client, self.structuring_client


def build_user_prompt(transcript: str) -> str:
    """Return the user message sent alongside the structuring prompt."""
    return f"Transcribed meal description:\n\n{transcript}"


def parse_structured_output(raw: str | None) -> list[object]:
    """Parse model output into a raw item list.

    Malformed output of any kind yields an empty list.
    """
    if not raw:
        return []
    try:
        parsed = json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        _logger.warning("Structuring output is not valid JSON; using empty items")
        return []
    if not isinstance(parsed, dict):
        _logger.warning("Structuring output root is not an object; using empty items")
        return []
    items = parsed.get("items")
    if not isinstance(items, list):
        _logger.warning("Structuring output has no items list; using empty items")
        return []
    return items


def sanitize_items(raw_items: list[object]) -> list[SanitizedItem]:
    """Sanitize every item, keeping the item count unchanged."""
    return [sanitize_item(item) for item in raw_items]


def sanitize_item(raw_item: object) -> SanitizedItem:
    """Keep only well-typed known fields and valid micronutrient fields."""
    return FoodItem.from_payload(raw_item).to_payload()


def _reject_constant(name: str) -> float:
    raise ValueError(f"Unsupported JSON constant: {name}")
