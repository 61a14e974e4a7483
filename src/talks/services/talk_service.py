"""Host-facing service that drives conversations and reports what happened."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from talks.core.types import ActionId
from talks.data.repositories import TalksRepository
from talks.domain.defs import ChoiceDef
from talks.domain.nodes import LineNode
from talks.services.conversation import Conversation
from talks.services.script_builder import build_conversation

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Talker:
    """Owns one conversation on behalf of a host entity."""

    talk_id: str
    conversation: Conversation
    activated: bool = False


@dataclass(slots=True)
class TalkNodeView:
    """Data returned to the presentation layer for rendering."""

    action_id: ActionId
    text: str | None
    actor_names: List[str]
    choices: List[str]


@dataclass(slots=True)
class TalkEvent:
    """Base class for talk events."""


@dataclass(slots=True)
class NextActionEvent(TalkEvent):
    action_id: ActionId


@dataclass(slots=True)
class ChoicePickedEvent(TalkEvent):
    action_id: ActionId


@dataclass(slots=True)
class ChoicesReachedEvent(TalkEvent):
    choices: List[ChoiceDef]


@dataclass(slots=True)
class TalkEndedEvent(TalkEvent):
    action_id: ActionId


@dataclass(slots=True)
class TalkResult:
    """Result returned after a talk transition."""

    events: List[TalkEvent] = field(default_factory=list)
    node_view: TalkNodeView | None = None


class TalkService:
    """Application service that builds talks and moves their cursors."""

    def __init__(self, talks_repo: TalksRepository) -> None:
        self._talks_repo = talks_repo

    def start_talk(self, talk_id: str) -> Talker:
        """Build the talk ``talk_id`` and return an activated talker on its start node."""
        conversation = build_conversation(self._talks_repo.get(talk_id))
        logger.debug("Started talk '%s' at action %s", talk_id, conversation.current_id)
        return Talker(talk_id=talk_id, conversation=conversation, activated=True)

    def get_current_view(self, talker: Talker) -> TalkNodeView:
        """Return the view model for the node under the cursor."""
        conversation = talker.conversation
        choices: List[str] = []
        if conversation.has_choices:
            choices = [choice.text for choice in conversation.choices()]
        return TalkNodeView(
            action_id=conversation.current_id,
            text=conversation.current_text,
            actor_names=[actor.name for actor in conversation.current_actors],
            choices=choices,
        )

    def next_line(self, talker: Talker) -> TalkResult:
        """Advance past the current line."""
        self._require_active(talker)
        conversation = talker.conversation
        conversation.advance()
        events: List[TalkEvent] = [NextActionEvent(action_id=conversation.current_id)]
        events.extend(self._arrival_events(conversation))
        return TalkResult(events=events, node_view=self.get_current_view(talker))

    def pick_choice(self, talker: Talker, choice_index: int) -> TalkResult:
        """Follow the selected choice of the current node."""
        self._require_active(talker)
        conversation = talker.conversation
        choices = conversation.choices()
        if not 0 <= choice_index < len(choices):
            raise IndexError(
                f"Choice index {choice_index} is invalid for action {conversation.current_id}."
            )
        selected = choices[choice_index]
        conversation.jump(selected.next)
        events: List[TalkEvent] = [ChoicePickedEvent(action_id=selected.next)]
        events.extend(self._arrival_events(conversation))
        return TalkResult(events=events, node_view=self.get_current_view(talker))

    def end_talk(self, talker: Talker) -> None:
        """Deactivate the talker and rewind its conversation."""
        talker.activated = False
        talker.conversation.reset()

    @staticmethod
    def _arrival_events(conversation: Conversation) -> List[TalkEvent]:
        node = conversation.current_node
        if not isinstance(node, LineNode):
            return [ChoicesReachedEvent(choices=conversation.choices())]
        if not conversation.successors(node.action_id):
            return [TalkEndedEvent(action_id=node.action_id)]
        return []

    @staticmethod
    def _require_active(talker: Talker) -> None:
        if not talker.activated:
            raise ValueError(f"Talk '{talker.talk_id}' is not active.")
