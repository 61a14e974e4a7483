"""Node variants stored in a built conversation graph."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from talks.core.types import ActionId
from talks.domain.defs import ActorDef, ChoiceDef


@dataclass(frozen=True, slots=True)
class LineNode:
    """A linear node: optional text spoken by optional actors."""

    action_id: ActionId
    text: str | None = None
    actors: Tuple[ActorDef, ...] | None = None


@dataclass(frozen=True, slots=True)
class ChoiceNode:
    """A branching node. Choices keep their authored order."""

    action_id: ActionId
    choices: Tuple[ChoiceDef, ...]


ConvoNode = Union[LineNode, ChoiceNode]

__all__ = ["ChoiceNode", "ConvoNode", "LineNode"]
