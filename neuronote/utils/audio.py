"""
Audio helpers for speech playback

The speech endpoint returns raw 16-bit little-endian PCM as base64 with a
MIME type like ``audio/L16;codec=pcm;rate=24000``. Browsers can't play that
directly, so it is wrapped in a WAV container.
"""
import base64
import binascii
import io
import re
import wave

from neuronote.exceptions import MalformedResponseError
from neuronote.models.study_pack import SpeechAudio

DEFAULT_SAMPLE_RATE = 24000

_RATE_RE = re.compile(r"rate=(\d+)", re.IGNORECASE)


def parse_sample_rate(mime_type: str, default: int = DEFAULT_SAMPLE_RATE) -> int:
    """Read the ``rate=`` parameter from an audio MIME type"""
    match = _RATE_RE.search(mime_type or "")
    if not match:
        return default
    return int(match.group(1))


def decode_pcm(data: str) -> bytes:
    """Decode a base64 PCM payload"""
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedResponseError("The speech response contained invalid audio data.") from e


def pcm_to_wav(pcm: bytes, sample_rate: int, channels: int = 1, sample_width: int = 2) -> bytes:
    """
    Wrap raw PCM frames in a RIFF/WAVE container.

    Args:
        pcm: Little-endian PCM bytes
        sample_rate: Frames per second
        channels: 1 for mono
        sample_width: Bytes per sample (2 for 16-bit)

    Returns:
        Complete WAV file bytes
    """
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(sample_width)
        wav.setframerate(sample_rate)
        wav.writeframes(pcm)
    return buf.getvalue()


def speech_to_wav(audio: SpeechAudio) -> bytes:
    """Turn an inline speech payload into playable WAV bytes"""
    return pcm_to_wav(decode_pcm(audio.data), parse_sample_rate(audio.mime_type))
