"""Microphone capture into a single WAV blob."""

import io
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
import soundfile as sf

WAV_MEDIA_TYPE = "audio/wav"
WAV_FILENAME = "audio.wav"
MICROPHONE_UNAVAILABLE_MESSAGE = (
    "Unable to access microphone. Please check your permissions."
)

_logger = logging.getLogger(__name__)


class CaptureError(RuntimeError):
    """Raised when the input device cannot be acquired."""


@dataclass
class AudioCaptureConfig:
    """Configuration options for microphone capture."""

    sample_rate: int = 16_000
    channels: int = 1
    dtype: str = "float32"


@dataclass(frozen=True)
class AudioBlob:
    """Finalized recording ready for transport."""

    content: bytes
    media_type: str = WAV_MEDIA_TYPE
    filename: str = WAV_FILENAME


def open_input_stream(**kwargs: object) -> object:
    """Open a PortAudio input stream on the default device."""
    import sounddevice as sd  # noqa: PLC0415

    return sd.InputStream(**kwargs)


class StreamingMicrophoneRecorder:
    """Captures audio until stop() is invoked, buffering samples incrementally."""

    def __init__(
        self,
        config: AudioCaptureConfig | None = None,
        stream_factory: Callable[..., object] | None = None,
    ) -> None:
        self.config = config or AudioCaptureConfig()
        self._stream_factory = stream_factory or open_input_stream
        self._stream = None
        self._buffer: list[np.ndarray] = []
        self._lock = threading.Lock()

    def start(self) -> None:
        """Acquire the input device and begin buffering audio."""
        if self._stream is not None:
            raise RuntimeError("Recorder already running")

        self._buffer = []
        stream = None
        try:
            stream = self._stream_factory(
                samplerate=self.config.sample_rate,
                channels=self.config.channels,
                dtype=self.config.dtype,
                callback=self._callback,
            )
            stream.start()
        except Exception as exc:
            _logger.warning("Failed to acquire input device: %s", exc)
            if stream is not None:
                stream.close()
            raise CaptureError(MICROPHONE_UNAVAILABLE_MESSAGE) from exc
        self._stream = stream

    def stop(self) -> AudioBlob:
        """Release the device and return the buffered audio as WAV."""
        if self._stream is None:
            raise RuntimeError("Recorder not running")
        self._release()
        with self._lock:
            chunks, self._buffer = self._buffer, []
        if chunks:
            audio = np.concatenate(chunks, axis=0)
        else:
            audio = np.empty((0, self.config.channels), dtype=self.config.dtype)
        return AudioBlob(content=encode_wav(audio, self.config.sample_rate))

    def cancel(self) -> None:
        """Release the device and discard anything buffered."""
        if self._stream is not None:
            self._release()
        with self._lock:
            self._buffer = []

    def is_running(self) -> bool:
        return self._stream is not None

    def _release(self) -> None:
        stream, self._stream = self._stream, None
        try:
            stream.stop()
        finally:
            stream.close()

    def _callback(self, indata: np.ndarray, frames: int, time, status) -> None:
        if status:
            _logger.warning("Input stream status: %s", status)
        with self._lock:
            self._buffer.append(indata.copy())


def encode_wav(audio: np.ndarray, sample_rate: int) -> bytes:
    """Encode samples as 16-bit PCM WAV bytes."""
    output = io.BytesIO()
    sf.write(output, audio, samplerate=sample_rate, format="WAV", subtype="PCM_16")
    return output.getvalue()
