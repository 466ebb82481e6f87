"""Simulated meeting transcription.

No audio is processed: the canned transcript returned depends only on the
decoded payload size.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
import re
from dataclasses import asdict, dataclass

from agentdesk.constants import (
    EXTENDED_TRANSCRIPT_MAX_KB,
    MAX_AUDIO_BYTES,
    MIN_AUDIO_BYTES,
    PARTIAL_TRANSCRIPT_MAX_KB,
    TRANSCRIBE_BASE_DELAY_MS,
    TRANSCRIBE_BYTES_PER_MS,
    TRANSCRIBE_MAX_DELAY_MS,
)

logger = logging.getLogger(__name__)

_BASE64_RE = re.compile(r"^[A-Za-z0-9+/]+(=|==)?$")

_INTRO = "Welcome to the meeting, today we will discuss"
_PARTIAL = f"{_INTRO}..."
_EXTENDED = (
    f"{_INTRO} the quarterly results and upcoming project milestones. "
    "The team has been working hard on..."
)
_COMPLETE = (
    f"{_INTRO} the quarterly results and upcoming project milestones. "
    "The team has been working hard on delivering key features and we need to "
    "review our progress. Let's start with the development update and then "
    "move to the marketing review."
)


class InvalidAudioError(ValueError):
    """Meeting audio payload failed validation."""


@dataclass
class TranscriptResponse:
    partial_transcript: str
    is_complete: bool

    def to_dict(self) -> dict:
        return asdict(self)


def decode_audio(audio_data: str) -> bytes:
    if not _BASE64_RE.fullmatch(audio_data):
        raise InvalidAudioError("Invalid base64 audio data")
    try:
        return base64.b64decode(audio_data, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidAudioError("Invalid base64 audio data") from None


def processing_delay_seconds(size: int) -> float:
    delay_ms = min(
        TRANSCRIBE_BASE_DELAY_MS + size / TRANSCRIBE_BYTES_PER_MS,
        TRANSCRIBE_MAX_DELAY_MS,
    )
    return delay_ms / 1000


async def transcribe_meeting(workspace_id: int, audio_data: str) -> TranscriptResponse:
    if not audio_data:
        raise InvalidAudioError("Audio data is required")
    if not workspace_id or workspace_id <= 0:
        raise InvalidAudioError("Valid workspace ID is required")

    audio = decode_audio(audio_data)
    if len(audio) < MIN_AUDIO_BYTES:
        raise InvalidAudioError("Audio data too small")
    if len(audio) > MAX_AUDIO_BYTES:
        raise InvalidAudioError("Audio data too large (max 50MB)")

    await asyncio.sleep(processing_delay_seconds(len(audio)))

    size_kb = len(audio) / 1024
    if size_kb < PARTIAL_TRANSCRIPT_MAX_KB:
        text, complete = _PARTIAL, False
    elif size_kb < EXTENDED_TRANSCRIPT_MAX_KB:
        text, complete = _EXTENDED, False
    else:
        text, complete = _COMPLETE, True

    logger.info(
        "Transcribed %d bytes for workspace %s (complete=%s)",
        len(audio),
        workspace_id,
        complete,
    )
    return TranscriptResponse(
        partial_transcript=f"[Workspace {workspace_id}] {text}",
        is_complete=complete,
    )
