"""Service layer exports."""

from .conversation import Conversation
from .errors import ConversationError, ScriptParsingError
from .script_builder import build_conversation
from .talk_service import (
    ChoicePickedEvent,
    ChoicesReachedEvent,
    NextActionEvent,
    TalkEndedEvent,
    Talker,
    TalkNodeView,
    TalkResult,
    TalkService,
)

__all__ = [
    "Conversation",
    "ConversationError",
    "ScriptParsingError",
    "build_conversation",
    "ChoicePickedEvent",
    "ChoicesReachedEvent",
    "NextActionEvent",
    "TalkEndedEvent",
    "Talker",
    "TalkNodeView",
    "TalkResult",
    "TalkService",
]
