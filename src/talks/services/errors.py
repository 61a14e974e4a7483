"""Service-layer exceptions for building and traversing conversations."""
from __future__ import annotations

from talks.core.types import ActionId, ActorId


class ScriptParsingError(Exception):
    """Raised when a raw script cannot be turned into a conversation graph."""


class EmptyScriptError(ScriptParsingError):
    """Raised when the script has no entries."""

    def __init__(self) -> None:
        super().__init__("the script is empty")


class EmptyChoicesError(ScriptParsingError):
    """Raised when a player action offers no choices."""

    def __init__(self, action_id: ActionId) -> None:
        super().__init__(f"player action {action_id} has no choices")
        self.action_id = action_id


class RepeatedIdError(ScriptParsingError):
    """Raised when two script entries share the same id."""

    def __init__(self, action_id: ActionId) -> None:
        super().__init__(f"multiple actions have the same id: {action_id}")
        self.action_id = action_id


class ActorNotFoundError(ScriptParsingError):
    """Raised when an actor line references an actor missing from the actor table."""

    def __init__(self, action_id: ActionId, actor_id: ActorId) -> None:
        super().__init__(f"action {action_id} references unknown actor '{actor_id}'")
        self.action_id = action_id
        self.actor_id = actor_id


class MultipleStartingActionError(ScriptParsingError):
    """Raised when more than one entry is flagged as the start."""

    def __init__(self, action_id: ActionId) -> None:
        super().__init__(f"multiple starting actions, found a second one at {action_id}")
        self.action_id = action_id


class NextActionNotFoundError(ScriptParsingError):
    """Raised when a `next` or choice target names a missing action."""

    def __init__(self, action_id: ActionId, next_id: ActionId) -> None:
        super().__init__(f"action {action_id} points to missing action {next_id}")
        self.action_id = action_id
        self.next_id = next_id


class NoStartingActionError(ScriptParsingError):
    """Raised when no entry is flagged as the start."""

    def __init__(self) -> None:
        super().__init__("no starting action found")


class ConversationError(Exception):
    """Raised when a traversal operation does not fit the current node."""


class InvalidDialogueError(ConversationError):
    """Raised when the cursor points outside the graph."""

    def __init__(self) -> None:
        super().__init__("the current dialogue node is not in the graph")


class ChoicesNotHandledError(ConversationError):
    """Raised when advancing from a node that requires a choice."""

    def __init__(self) -> None:
        super().__init__("the current node has choices, pick one instead of advancing")


class NoNextDialogueError(ConversationError):
    """Raised when advancing past a terminal line."""

    def __init__(self) -> None:
        super().__init__("no next dialogue after the current node")


class NoChoicesError(ConversationError):
    """Raised when asking a line node for choices."""

    def __init__(self) -> None:
        super().__init__("the current node has no choices")


class WrongJumpError(ConversationError):
    """Raised when jumping to an id that is not in the conversation."""

    def __init__(self, action_id: ActionId) -> None:
        super().__init__(f"cannot jump to unknown action {action_id}")
        self.action_id = action_id
