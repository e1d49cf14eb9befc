"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from akawo.pipelines.voice.orchestrator import VoiceCommandPipeline
from akawo.utils import AuthenticationError, decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_owner(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Resolve the owner id (``sub`` claim) from the bearer token."""

    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_access_token(credentials.credentials)
    except AuthenticationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from None
    return payload.sub


def get_voice_pipeline(request: Request) -> VoiceCommandPipeline:
    """Return the pipeline built at startup."""

    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Voice pipeline is not initialised",
        )
    return pipeline


OwnerDep = Annotated[str, Depends(get_current_owner)]
PipelineDep = Annotated[VoiceCommandPipeline, Depends(get_voice_pipeline)]


__all__ = ["OwnerDep", "PipelineDep", "bearer_scheme", "get_current_owner", "get_voice_pipeline"]
