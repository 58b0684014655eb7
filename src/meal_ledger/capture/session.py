"""Recording session: capture, release the device, submit."""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from meal_ledger.capture.recorder import AudioBlob


class RecordingState(str, Enum):
    """Lifecycle of a recording session."""

    IDLE = "idle"
    RECORDING = "recording"
    PROCESSING = "processing"


class Recorder(Protocol):
    """Interface for an audio input device."""

    def start(self) -> None:
        """Acquire the device and start buffering."""

    def stop(self) -> AudioBlob:
        """Release the device and return the recording."""

    def cancel(self) -> None:
        """Release the device and discard the recording."""


class MealTransport(Protocol):
    """Interface for sending recordings to the service."""

    async def submit(self, blob: AudioBlob) -> list[dict[str, object]]:
        """Return analyzed items for a recording."""


@dataclass
class RecordingSession:
    """Drives one recorder through record, stop and submit.

    The device is released on every exit path and the session always
    returns to IDLE, so the caller may retry after any failure.
    """

    recorder: Recorder
    transport: MealTransport
    state: RecordingState = RecordingState.IDLE

    def start(self) -> None:
        """Start recording; CaptureError leaves the session idle."""
        if self.state is not RecordingState.IDLE:
            raise RuntimeError(f"Cannot start while {self.state.value}")
        self.recorder.start()
        self.state = RecordingState.RECORDING

    async def finish(self) -> list[dict[str, object]]:
        """Stop recording and submit the audio for analysis."""
        if self.state is not RecordingState.RECORDING:
            raise RuntimeError(f"Cannot finish while {self.state.value}")
        self.state = RecordingState.PROCESSING
        try:
            blob = self.recorder.stop()
            return await self.transport.submit(blob)
        finally:
            self.state = RecordingState.IDLE

    def cancel(self) -> None:
        """Dismiss an in-progress recording without submitting it."""
        if self.state is RecordingState.RECORDING:
            try:
                self.recorder.cancel()
            finally:
                self.state = RecordingState.IDLE
