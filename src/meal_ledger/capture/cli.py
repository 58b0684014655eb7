"""CLI entrypoint: record a meal description and print the analyzed items."""

import argparse
import asyncio
import json
import logging
import sys

from meal_ledger.app_logging import configure_logging
from meal_ledger.capture.recorder import (
    AudioCaptureConfig,
    CaptureError,
    StreamingMicrophoneRecorder,
)
from meal_ledger.capture.session import RecordingSession
from meal_ledger.capture.transport import HttpxMealTransport, TransportError
from meal_ledger.config import CaptureSettings

_logger = logging.getLogger("meal_ledger.capture")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Record a spoken meal description and analyze it."
    )
    parser.add_argument(
        "--duration", type=float, default=8.0, help="Recording duration in seconds"
    )
    parser.add_argument(
        "--url", type=str, default=None, help="Meal ledger API base URL"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging()
    settings = CaptureSettings()
    if not settings.access_token or not settings.api_key:
        _logger.error("MEAL_LEDGER_ACCESS_TOKEN and MEAL_LEDGER_API_KEY must be set")
        return 2

    recorder = StreamingMicrophoneRecorder(
        AudioCaptureConfig(
            sample_rate=settings.sample_rate, channels=settings.channels
        )
    )
    transport = HttpxMealTransport.create(
        base_url=args.url or settings.service_url,
        access_token=settings.access_token,
        api_key=settings.api_key,
    )
    session = RecordingSession(recorder, transport)
    return asyncio.run(record_and_submit(session, transport, args.duration))


async def record_and_submit(
    session: RecordingSession, transport: HttpxMealTransport, duration: float
) -> int:
    """Record for a fixed duration, submit, and print the items as JSON."""
    try:
        try:
            session.start()
        except CaptureError as exc:
            _logger.error("%s", exc)
            return 1

        _logger.info("Recording for %.1f seconds ...", duration)
        try:
            await asyncio.sleep(duration)
            items = await session.finish()
        except TransportError as exc:
            _logger.error("%s", exc)
            return 1
        finally:
            session.cancel()
    finally:
        await transport.close()

    print(json.dumps({"items": items}, indent=2))  # noqa: T201
    return 0


if __name__ == "__main__":
    sys.exit(main())
