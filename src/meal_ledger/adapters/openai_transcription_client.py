"""OpenAI audio transcription client."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from meal_ledger.services.normalization import AudioPayload, TranscriptionClient


@dataclass
class OpenAITranscriptionClient(TranscriptionClient):
    """Speech-to-text backed by the OpenAI audio API."""

    client: AsyncOpenAI

    async def transcribe(self, *, model: str, audio: AudioPayload) -> str:
        """Transcribe audio bytes and return the text, possibly empty."""
        response = await self.client.audio.transcriptions.create(
            model=model,
            file=(audio.filename, audio.content, audio.content_type),
        )
        text = getattr(response, "text", None)
        return text if isinstance(text, str) else ""
