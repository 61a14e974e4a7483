"""Cursor-based traversal over a built conversation graph."""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Tuple

import networkx as nx

from talks.core.types import ActionId
from talks.domain.defs import ActorDef, ChoiceDef
from talks.domain.nodes import ChoiceNode, ConvoNode, LineNode
from talks.services.errors import (
    ChoicesNotHandledError,
    InvalidDialogueError,
    NoChoicesError,
    NoNextDialogueError,
    WrongJumpError,
)

logger = logging.getLogger(__name__)

NodeIndex = int


class Conversation:
    """A validated dialogue graph plus a single mutable cursor.

    Instances are produced by ``build_conversation``. Line nodes are walked with
    ``advance``; choice nodes are inspected with ``choices`` and left with
    ``jump``. Any traversal error leaves the cursor where it was.
    """

    def __init__(
        self,
        graph: nx.MultiDiGraph,
        start: NodeIndex,
        id_to_index: Mapping[ActionId, NodeIndex],
    ) -> None:
        self._graph = graph
        self._start = start
        self._current = start
        self._id_to_index: Dict[ActionId, NodeIndex] = dict(id_to_index)

    @property
    def graph(self) -> nx.MultiDiGraph:
        """The frozen graph; mutating it raises ``networkx.NetworkXError``."""
        return self._graph

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    @property
    def current_index(self) -> NodeIndex:
        return self._current

    @property
    def current_id(self) -> ActionId:
        return self.current_node.action_id

    @property
    def start_id(self) -> ActionId:
        return self._node_at(self._start).action_id

    @property
    def current_node(self) -> ConvoNode:
        return self._node_at(self._current)

    @property
    def current_text(self) -> str | None:
        node = self.current_node
        if isinstance(node, LineNode):
            return node.text
        return None

    @property
    def current_actors(self) -> Tuple[ActorDef, ...]:
        node = self.current_node
        if isinstance(node, LineNode) and node.actors:
            return node.actors
        return ()

    @property
    def has_choices(self) -> bool:
        return isinstance(self.current_node, ChoiceNode)

    def advance(self) -> None:
        """Move the cursor to the successor of the current line node."""
        node = self.current_node
        if isinstance(node, ChoiceNode):
            raise ChoicesNotHandledError()
        out_edges = list(self._graph.out_edges(self._current))
        if not out_edges:
            raise NoNextDialogueError()
        _, target = out_edges[0]
        logger.debug("Advancing from action %s to node %s", node.action_id, target)
        self._current = target

    next_line = advance

    def choices(self) -> List[ChoiceDef]:
        """Return the choices of the current node in authored order."""
        node = self.current_node
        if isinstance(node, LineNode):
            raise NoChoicesError()
        return list(node.choices)

    def jump(self, action_id: ActionId) -> None:
        """Move the cursor straight to ``action_id``; no edge is required."""
        try:
            index = self._id_to_index[action_id]
        except KeyError as exc:
            raise WrongJumpError(action_id) from exc
        logger.debug("Jumping to action %s", action_id)
        self._current = index

    jump_to = jump

    def reset(self) -> None:
        """Put the cursor back on the start node."""
        self._current = self._start

    def node_for(self, action_id: ActionId) -> ConvoNode:
        """Return the node built for ``action_id``. Unknown ids raise KeyError."""
        return self._node_at(self._id_to_index[action_id])

    def successors(self, action_id: ActionId) -> List[ActionId]:
        """Return the target of every outgoing edge of ``action_id``, parallel edges included."""
        index = self._id_to_index[action_id]
        return [self._node_at(target).action_id for _, target in self._graph.out_edges(index)]

    def _node_at(self, index: NodeIndex) -> ConvoNode:
        if not self._graph.has_node(index):
            raise InvalidDialogueError()
        return self._graph.nodes[index]["node"]

    def __repr__(self) -> str:
        return (
            f"Conversation(nodes={self.node_count}, edges={self.edge_count}, "
            f"current={self._current})"
        )
