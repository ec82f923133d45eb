"""Request and response schemas of the HTTP API."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docchat.data.models import Placeholder


class CamelModel(BaseModel):
    """Serializes fields as camelCase, accepts both spellings on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlaceholderStatus(CamelModel):
    name: str
    filled: bool

    @classmethod
    def from_placeholder(cls, placeholder: Placeholder) -> "PlaceholderStatus":
        return cls(name=placeholder.name, filled=placeholder.filled)


class UploadResponse(CamelModel):
    session_id: str
    placeholders: List[PlaceholderStatus]
    response: str = Field(..., description="First question for the user")
    suggestions: List[str] = Field(default_factory=list)
    total_placeholders: int
    should_show_generate_button: bool = False


class ChatRequest(CamelModel):
    session_id: Optional[str] = None
    message: str = Field(..., description="User answer or confirmation")


class ChatResponse(CamelModel):
    response: str
    placeholders: List[PlaceholderStatus]
    suggestions: List[str] = Field(default_factory=list)
    current_placeholder: Optional[str] = None
    filled_count: int
    total_placeholders: int
    all_filled: bool
    should_show_generate_button: bool


class GenerateRequest(CamelModel):
    session_id: Optional[str] = None


class HealthResponse(CamelModel):
    status: str
    version: str
    active_sessions: int
