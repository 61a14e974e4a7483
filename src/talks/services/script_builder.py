"""Builds a conversation graph out of a raw script."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Sequence, Tuple

import networkx as nx

from talks.core.types import ActionId, ActorId
from talks.domain.defs import ActionDef, ActorActionDef, ActorDef, PlayerActionDef, RawScript
from talks.domain.nodes import ChoiceNode, ConvoNode, LineNode
from talks.services.conversation import Conversation
from talks.services.errors import (
    ActorNotFoundError,
    EmptyChoicesError,
    EmptyScriptError,
    MultipleStartingActionError,
    NextActionNotFoundError,
    NoStartingActionError,
    RepeatedIdError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PendingNode:
    """A materialized node and the ids it still has to be wired to."""

    node_index: int
    next_action_id: ActionId | None
    choice_next_ids: Tuple[ActionId, ...]


def build_conversation(raw_script: RawScript) -> Conversation:
    """Validate ``raw_script`` and return a conversation positioned on its start node.

    Raises a ``ScriptParsingError`` subclass on the first structural problem;
    nothing is returned for a partially valid script.
    """
    script = raw_script.script
    if not script:
        raise EmptyScriptError()

    id_to_next = _build_id_to_next_map(script)

    graph = nx.MultiDiGraph()
    pending: Dict[ActionId, PendingNode] = {}
    start_index: int | None = None
    for action in script:
        node_index = graph.number_of_nodes()
        graph.add_node(node_index, node=_make_node(action, raw_script.actors))
        if action.start:
            if start_index is not None:
                raise MultipleStartingActionError(action.id)
            start_index = node_index
        pending[action.id] = PendingNode(
            node_index=node_index,
            next_action_id=id_to_next.get(action.id),
            choice_next_ids=_choice_next_ids(action),
        )

    _validate_nexts(pending)

    for pending_node in pending.values():
        if pending_node.next_action_id is not None:
            target = pending[pending_node.next_action_id]
            graph.add_edge(pending_node.node_index, target.node_index)
        for choice_next_id in pending_node.choice_next_ids:
            graph.add_edge(pending_node.node_index, pending[choice_next_id].node_index)

    if start_index is None:
        raise NoStartingActionError()

    logger.debug(
        "Built conversation with %d nodes and %d edges",
        graph.number_of_nodes(),
        graph.number_of_edges(),
    )
    id_to_index = {action_id: node.node_index for action_id, node in pending.items()}
    return Conversation(nx.freeze(graph), start_index, id_to_index)


def _build_id_to_next_map(script: Sequence[ActionDef]) -> Dict[ActionId, ActionId]:
    # Entries without an explicit next fall through to the entry below them.
    # The last entry has nowhere to fall through to.
    id_to_next: Dict[ActionId, ActionId] = {}
    seen: set[ActionId] = set()
    for index, action in enumerate(script):
        if action.id in seen:
            raise RepeatedIdError(action.id)
        seen.add(action.id)
        if action.next is not None:
            id_to_next[action.id] = action.next
        elif index + 1 < len(script):
            id_to_next[action.id] = script[index + 1].id
    return id_to_next


def _make_node(action: ActionDef, actors: Mapping[ActorId, ActorDef]) -> ConvoNode:
    if isinstance(action, ActorActionDef):
        return LineNode(
            action_id=action.id,
            text=action.text,
            actors=_extract_actors(action, actors),
        )
    if isinstance(action, PlayerActionDef):
        if not action.choices:
            raise EmptyChoicesError(action.id)
        return ChoiceNode(action_id=action.id, choices=tuple(action.choices))
    raise TypeError(f"Unsupported script entry: {type(action).__name__}")


def _extract_actors(
    action: ActorActionDef, actors: Mapping[ActorId, ActorDef]
) -> Tuple[ActorDef, ...] | None:
    if action.actors is None:
        return None
    resolved = []
    for actor_id in action.actors:
        try:
            resolved.append(actors[actor_id])
        except KeyError as exc:
            raise ActorNotFoundError(action.id, actor_id) from exc
    return tuple(resolved)


def _choice_next_ids(action: ActionDef) -> Tuple[ActionId, ...]:
    if isinstance(action, PlayerActionDef):
        return tuple(choice.next for choice in action.choices)
    return ()


def _validate_nexts(pending: Mapping[ActionId, PendingNode]) -> None:
    for action_id, pending_node in pending.items():
        next_id = pending_node.next_action_id
        if next_id is not None and next_id not in pending:
            raise NextActionNotFoundError(action_id, next_id)
        for choice_next_id in pending_node.choice_next_ids:
            if choice_next_id not in pending:
                raise NextActionNotFoundError(action_id, choice_next_id)
