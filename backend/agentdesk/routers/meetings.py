from __future__ import annotations

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from agentdesk.services.transcribe import InvalidAudioError, transcribe_meeting

router = APIRouter(prefix="/meetings", tags=["meetings"])


class TranscribeMeetingRequest(BaseModel):
    workspace_id: int
    audio_data: str


@router.post("/transcribe")
async def transcribe(body: TranscribeMeetingRequest):
    try:
        result = await transcribe_meeting(body.workspace_id, body.audio_data)
    except InvalidAudioError as e:
        raise HTTPException(400, str(e))
    return result.to_dict()
