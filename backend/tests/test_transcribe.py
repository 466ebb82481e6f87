"""Tests for the simulated meeting transcription."""

from __future__ import annotations

import asyncio
import base64

import pytest

from agentdesk.services.transcribe import (
    InvalidAudioError,
    decode_audio,
    processing_delay_seconds,
    transcribe_meeting,
)


def _audio(size: int) -> str:
    return base64.b64encode(b"\x01" * size).decode()


# ── 1. Validation ───────────────────────────────────────────────


@pytest.mark.parametrize(
    "workspace_id, audio_data, message",
    [
        (1, "", "Audio data is required"),
        (0, _audio(32), "Valid workspace ID is required"),
        (-5, _audio(32), "Valid workspace ID is required"),
        (1, "not base64!!", "Invalid base64 audio data"),
        (1, "QUJD\n", "Invalid base64 audio data"),
        (1, _audio(4), "Audio data too small"),
    ],
)
def test_transcribe_rejects_bad_input(workspace_id, audio_data, message):
    with pytest.raises(InvalidAudioError, match=message):
        asyncio.run(transcribe_meeting(workspace_id, audio_data))


def test_decode_audio_bad_padding():
    with pytest.raises(InvalidAudioError):
        decode_audio("QUJDR")


def test_processing_delay_is_capped():
    assert processing_delay_seconds(0) == pytest.approx(0.1)
    assert processing_delay_seconds(50 * 1024 * 1024) == pytest.approx(2.0)


# ── 2. Size buckets ─────────────────────────────────────────────


def test_small_audio_gives_short_partial():
    result = asyncio.run(transcribe_meeting(4, _audio(100)))
    assert result.partial_transcript == (
        "[Workspace 4] Welcome to the meeting, today we will discuss..."
    )
    assert result.is_complete is False


def test_medium_audio_gives_longer_partial():
    result = asyncio.run(transcribe_meeting(4, _audio(5 * 1024)))
    assert result.partial_transcript.startswith("[Workspace 4] Welcome to the meeting")
    assert "quarterly results" in result.partial_transcript
    assert result.partial_transcript.endswith("working hard on...")
    assert result.is_complete is False


def test_large_audio_gives_complete_transcript():
    result = asyncio.run(transcribe_meeting(9, _audio(20 * 1024)))
    assert result.partial_transcript.startswith("[Workspace 9] ")
    assert result.partial_transcript.endswith("move to the marketing review.")
    assert result.is_complete is True
    assert result.to_dict()["is_complete"] is True


@pytest.mark.parametrize(
    "size, fragment, complete",
    [
        (1023, "today we will discuss...", False),
        (1024, "working hard on...", False),
        (10 * 1024 - 1, "working hard on...", False),
        (10 * 1024, "move to the marketing review.", True),
    ],
)
def test_size_bucket_boundaries(size, fragment, complete):
    result = asyncio.run(transcribe_meeting(1, _audio(size)))
    assert result.partial_transcript.endswith(fragment)
    assert result.is_complete is complete


def test_oversized_audio_is_rejected(monkeypatch):
    monkeypatch.setattr("agentdesk.services.transcribe.MAX_AUDIO_BYTES", 64)

    asyncio.run(transcribe_meeting(1, _audio(64)))
    with pytest.raises(InvalidAudioError, match=r"Audio data too large \(max 50MB\)"):
        asyncio.run(transcribe_meeting(1, _audio(65)))
