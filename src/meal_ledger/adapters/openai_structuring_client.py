"""OpenAI chat completions client for JSON structuring."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from meal_ledger.services.normalization import StructuringClient


@dataclass
class OpenAIStructuringClient(StructuringClient):
    """Structuring client backed by OpenAI chat completions in JSON mode."""

    client: AsyncOpenAI

    async def complete_json(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str | None:
        """Call chat completions constrained to a single JSON object."""
        completion = await self.client.chat.completions.create(
            model=model,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
        )
        if not completion.choices:
            return None
        return completion.choices[0].message.content
