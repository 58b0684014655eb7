"""HTTP transport of recordings to the normalization endpoint."""

import logging
from dataclasses import dataclass

import httpx

from meal_ledger.capture.recorder import AudioBlob

PROCESSING_FAILED_MESSAGE = "Unable to process your recording. Please try again."

_logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised when a recording could not be analyzed."""


@dataclass
class HttpxMealTransport:
    """Posts recordings to the meal ledger API with httpx."""

    base_url: str
    access_token: str
    api_key: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls, base_url: str, access_token: str, api_key: str
    ) -> "HttpxMealTransport":
        """Create a transport with a managed httpx session."""
        return cls(
            base_url=base_url,
            access_token=access_token,
            api_key=api_key,
            http_client=httpx.AsyncClient(timeout=60),
        )

    async def submit(self, blob: AudioBlob) -> list[dict[str, object]]:
        """Send one recording and return the analyzed items."""
        url = f"{self.base_url.rstrip('/')}/transcribe-and-analyze"
        try:
            response = await self.http_client.post(
                url,
                files={"file": (blob.filename, blob.content, blob.media_type)},
                headers={
                    "Authorization": f"Bearer {self.access_token}",
                    "apikey": self.api_key,
                },
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            _logger.warning("Recording upload failed: %s", exc)
            raise TransportError(PROCESSING_FAILED_MESSAGE) from exc
        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise TransportError(PROCESSING_FAILED_MESSAGE)
        return items

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
