"""OpenRouter relay data models."""
from dataclasses import dataclass
from typing import Optional, Dict, Any

ROLES = ("user", "assistant", "system")

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000


@dataclass(frozen=True)
class ConversationMessage:
    """Chat message model."""
    role: str  # "user", "assistant", "system"
    content: str

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Unknown message role: {self.role!r} (expected one of {', '.join(ROLES)})")

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call generation parameters."""
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    stream: bool = False

    def __post_init__(self):
        if not 0 <= self.temperature <= 2:
            raise ValueError(f"temperature must be between 0 and 2, got {self.temperature}")
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")


@dataclass
class ChatReply:
    """Assistant reply extracted from a completion payload."""
    text: str
    usage: Optional[Dict[str, Any]] = None  # Upstream usage block, verbatim


@dataclass
class ModelDescriptor:
    """Model as listed by the upstream catalog."""
    id: str
    name: str


@dataclass(frozen=True)
class Credentials:
    """Bearer token used for upstream calls."""
    api_key: str = ""

    @property
    def is_set(self) -> bool:
        return bool(self.api_key)

    def authorization(self) -> str:
        return f"Bearer {self.api_key}"

    def __repr__(self) -> str:
        return f"Credentials(api_key={'***' if self.api_key else ''!r})"
