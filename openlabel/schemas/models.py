from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

class GenerationRequest(BaseModel):
    prompt: Optional[str] = None

    @field_validator("prompt")
    @classmethod
    def strip_prompt(cls, value: Optional[str]) -> Optional[str]:
        # Whitespace-only prompts count as missing
        if value is None:
            return None
        value = value.strip()
        return value or None

class LyricsResponse(BaseModel):
    success: bool = True
    lyrics: str

class CoverArtResponse(BaseModel):
    success: bool = True
    image_url: str = Field(..., alias="imageUrl")

    model_config = ConfigDict(populate_by_name=True)

class FeedbackResponse(BaseModel):
    success: bool = True
    feedback: str

class ErrorResponse(BaseModel):
    success: bool = False
    error: str
