"""Speech-to-text endpoint for voice answers."""
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from superfeynman.api.errors import raise_for_result
from superfeynman.application.transcription_app_service import TranscriptionAppService
from superfeynman.container import get_transcription_app_service

router = APIRouter(tags=["transcribe"])


@router.post("/transcribe")
def transcribe(
    audio: Optional[UploadFile] = File(None),
    svc: TranscriptionAppService = Depends(get_transcription_app_service),
):
    if audio is None:
        raise HTTPException(status_code=400, detail="Audio file is required")
    result = svc.transcribe_upload(audio.file, audio.filename, audio.content_type)
    if not result.is_success:
        raise_for_result(result)
    return {"text": result.value}
