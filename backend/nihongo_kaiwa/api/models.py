"""API request/response models."""
from typing import Optional, Literal, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field


class MessageIn(BaseModel):
    """A conversation message as sent by the front end."""
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    """Request model for one conversation turn."""
    model_config = ConfigDict(populate_by_name=True)

    messages: List[MessageIn] = Field(..., description="Full conversation so far, oldest first")
    model: Optional[str] = Field(None, description="OpenRouter model identifier")
    temperature: Optional[float] = Field(None, ge=0, le=2, description="Sampling temperature")
    max_tokens: Optional[int] = Field(None, gt=0, alias="maxTokens", description="Maximum tokens to generate")
    first_turn: Optional[bool] = Field(
        None,
        alias="firstTurn",
        description="Explicit first-turn flag; inferred from the message list when omitted",
    )


class ChatResponse(BaseModel):
    """Response model for a successful turn."""
    success: bool = True
    text: str
    usage: Optional[Dict[str, Any]] = None


class StatusResponse(BaseModel):
    """Response model for the connection probe."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    connected: bool
    api_key_set: bool = Field(..., serialization_alias="apiKeySet")


class ModelInfo(BaseModel):
    """A model listed by OpenRouter."""
    id: str
    name: str


class ModelsResponse(BaseModel):
    """Response model for the model catalog."""
    success: bool = True
    models: List[ModelInfo]


class FreeModelsResponse(BaseModel):
    """Response model for the built-in free model catalog."""
    success: bool = True
    models: List[str]
    default: str


class SetKeyRequest(BaseModel):
    """Request model for replacing the API key."""
    model_config = ConfigDict(populate_by_name=True)

    api_key: Optional[str] = Field(None, alias="apiKey")


class SetKeyResponse(BaseModel):
    """Response model for a key update."""
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Response model for errors."""
    success: bool = False
    error: str
    kind: Optional[str] = None
