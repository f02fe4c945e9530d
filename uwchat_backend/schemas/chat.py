from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Role = Literal["user", "assistant", "system"]


class CitationMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source_file_name: str | None = Field(default=None, alias="sourceFileName")
    ingested_at: str | None = Field(default=None, alias="ingestedAt")


class Citation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    chunk_id: str = Field(alias="chunkId")
    metadata: CitationMetadata = Field(default_factory=CitationMetadata)


class ChatMessage(BaseModel):
    role: Role
    content: str
    citations: list[Citation] | None = None


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage]
    query: str
    human_verification_token: str = Field(alias="humanVerificationToken")

    @model_validator(mode="after")
    def last_message_is_user(self):
        if not self.messages:
            raise ValueError("messages must not be empty")
        if self.messages[-1].role != "user":
            raise ValueError("the last message must have role 'user'")
        return self


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: ChatMessage
    rate_limit_remaining: int | None = Field(default=None, alias="rateLimitRemaining")
    error: str | None = None

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class RateLimitOut(BaseModel):
    success: bool
    remaining: int | None
    error: str | None = None
