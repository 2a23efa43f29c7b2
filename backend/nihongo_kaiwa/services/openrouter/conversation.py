"""Persona injection for stateless conversations.

The relay keeps no server-side session, so whether the persona has already
been established is inferred from the shape of the message list the caller
resends on every turn.
"""
from typing import List, Optional, Sequence

from nihongo_kaiwa.services.openrouter.models import ConversationMessage


def is_first_turn(messages: Sequence[ConversationMessage]) -> bool:
    """Return True for an empty list or a list holding a single user message."""
    if not messages:
        return True
    return len(messages) == 1 and messages[0].role == "user"


def prepare_conversation(
    messages: Sequence[ConversationMessage],
    persona: ConversationMessage,
    first_turn: Optional[bool] = None,
) -> List[ConversationMessage]:
    """Build the message list to dispatch.

    Args:
        messages: Caller's conversation, oldest first
        persona: System message establishing the persona
        first_turn: Explicit conversation state from the caller; when None
            the list shape decides (see is_first_turn)

    Returns:
        A new list: persona followed by the original messages on a first
        turn, otherwise the original messages unchanged.
    """
    if first_turn is None:
        first_turn = is_first_turn(messages)
    if first_turn:
        return [persona, *messages]
    return list(messages)
