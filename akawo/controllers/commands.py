"""Voice command endpoint.

For the stage order see `akawo.pipelines.voice.flow`.
POST `/process-audio` validates the upload, normalizes and transcribes it,
classifies the intent, updates or queries the ledger and answers with a
localized confirmation plus synthesized speech.
"""

import logging

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from akawo.controllers.dependencies import OwnerDep, PipelineDep
from akawo.domain.models import Language
from akawo.pipelines.voice import VoiceCommandError, read_audio_bytes
from akawo.views import CommandResponse, ErrorDetail

router = APIRouter(prefix="/api/v1/akawo", tags=["akawo"])

logger = logging.getLogger(__name__)

_AUDIO_FILE_UPLOAD = File(...)
_LANGUAGE_FORM = Form("en")

_ERROR_STATUS = {
    "input": status.HTTP_400_BAD_REQUEST,
    "backend": status.HTTP_502_BAD_GATEWAY,
}


@router.post("/process-audio", response_model=CommandResponse)
async def process_audio(
    owner_id: OwnerDep,
    pipeline: PipelineDep,
    audio: UploadFile = _AUDIO_FILE_UPLOAD,
    language: str = _LANGUAGE_FORM,
) -> CommandResponse:
    """Run one spoken command through the voice pipeline."""

    audio_bytes, content_type = await read_audio_bytes(audio)
    logger.info(
        "Received audio owner=%s file=%s size=%s type=%s language=%s",
        owner_id,
        audio.filename,
        len(audio_bytes),
        content_type,
        language,
    )

    try:
        result = await pipeline.submit(
            owner_id,
            Language.resolve(language),
            audio_bytes,
            content_type,
        )
    except VoiceCommandError as exc:
        detail = ErrorDetail(message=exc.message, audio_content=exc.audio_content)
        raise HTTPException(
            status_code=_ERROR_STATUS.get(exc.kind, status.HTTP_502_BAD_GATEWAY),
            detail=detail.model_dump(by_alias=True),
        ) from exc

    return CommandResponse.from_result(result)
