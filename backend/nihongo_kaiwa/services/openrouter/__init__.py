"""OpenRouter chat relay."""
from nihongo_kaiwa.services.openrouter.client import OpenRouterService
from nihongo_kaiwa.services.openrouter.catalog import DEFAULT_MODEL, FreeModel, list_free_models
from nihongo_kaiwa.services.openrouter.conversation import is_first_turn, prepare_conversation
from nihongo_kaiwa.services.openrouter.errors import (
    OpenRouterError,
    UpstreamHTTPError,
    NoResponseError,
    LocalError,
    classify_error,
)
from nihongo_kaiwa.services.openrouter.models import (
    ChatReply,
    ConversationMessage,
    Credentials,
    GenerationOptions,
    ModelDescriptor,
)

__all__ = [
    "OpenRouterService",
    "DEFAULT_MODEL",
    "FreeModel",
    "list_free_models",
    "is_first_turn",
    "prepare_conversation",
    "OpenRouterError",
    "UpstreamHTTPError",
    "NoResponseError",
    "LocalError",
    "classify_error",
    "ChatReply",
    "ConversationMessage",
    "Credentials",
    "GenerationOptions",
    "ModelDescriptor",
]
