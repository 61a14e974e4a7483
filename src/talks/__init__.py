"""Branching dialogue graphs and cursor-based conversation traversal."""

from .services.conversation import Conversation
from .services.script_builder import build_conversation

__all__ = ["Conversation", "build_conversation"]
