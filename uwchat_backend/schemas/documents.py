from pydantic import BaseModel, ConfigDict, Field

class EmbedIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    file_name: str = Field(alias="fileName")

class EmbedOut(BaseModel):
    success: bool
    message: str | None = None
    error: str | None = None
