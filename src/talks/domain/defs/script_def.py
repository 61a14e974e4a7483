"""Raw script definitions, as authored, before graph construction."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union

from talks.core.types import ActionId, ActorId


@dataclass(frozen=True, slots=True)
class ActorDef:
    """A named speaker referenced from actor lines."""

    id: ActorId
    name: str
    asset: str = ""


@dataclass(frozen=True, slots=True)
class ChoiceDef:
    """Represents a selectable choice on a player action."""

    text: str
    next: ActionId


@dataclass(slots=True)
class ActorActionDef:
    """An actor saying something. Falls through to the next entry unless `next` is set."""

    id: ActionId
    text: str | None = None
    actors: List[ActorId] | None = None
    next: ActionId | None = None
    start: bool = False


@dataclass(slots=True)
class PlayerActionDef:
    """A set of choices presented to the player."""

    id: ActionId
    choices: List[ChoiceDef]
    start: bool = False

    @property
    def next(self) -> ActionId | None:
        return None


ActionDef = Union[ActorActionDef, PlayerActionDef]


@dataclass(slots=True)
class RawScript:
    """Ordered script entries plus the actor table they reference."""

    script: List[ActionDef] = field(default_factory=list)
    actors: Dict[ActorId, ActorDef] = field(default_factory=dict)
