"""Schema for `/process-audio` responses."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from akawo.domain.models import CommandKind, CommandResult, Intent

from .transactions import TransactionResponse


class CommandResponse(BaseModel):
    kind: CommandKind
    intent: Intent
    transcript: str
    confirmation_text: str = Field(..., alias="confirmationText")
    audio_content: Optional[str] = Field(default=None, alias="audioContent")
    transactions: List[TransactionResponse] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: CommandResult) -> "CommandResponse":
        return cls(
            kind=result.kind,
            intent=result.intent,
            transcript=result.transcript,
            confirmation_text=result.confirmation_text,
            audio_content=result.audio_content,
            transactions=[TransactionResponse.model_validate(tx) for tx in result.transactions],
        )
