import networkx as nx
import pytest

from talks.domain.defs import ActorActionDef, ActorDef, ChoiceDef, PlayerActionDef, RawScript
from talks.domain.nodes import ChoiceNode, LineNode
from talks.services.errors import (
    ActorNotFoundError,
    EmptyChoicesError,
    EmptyScriptError,
    MultipleStartingActionError,
    NextActionNotFoundError,
    NoStartingActionError,
    RepeatedIdError,
    ScriptParsingError,
)
from talks.services.script_builder import build_conversation


def _actors(*actor_ids: str) -> dict[str, ActorDef]:
    return {
        actor_id: ActorDef(id=actor_id, name=actor_id.title(), asset=f"{actor_id}.png")
        for actor_id in actor_ids
    }


def _branching_script() -> RawScript:
    return RawScript(
        script=[
            PlayerActionDef(
                id=1,
                choices=[ChoiceDef(text="Choice 1", next=2), ChoiceDef(text="Choice 2", next=3)],
                start=True,
            ),
            ActorActionDef(id=2, text="Hello"),
            ActorActionDef(id=3),
        ]
    )


def test_empty_script_fails() -> None:
    with pytest.raises(EmptyScriptError):
        build_conversation(RawScript())


def test_actor_not_found_without_actor_table() -> None:
    raw = RawScript(script=[ActorActionDef(id=0, text="Hello", actors=["bob"], start=True)])

    with pytest.raises(ActorNotFoundError) as excinfo:
        build_conversation(raw)

    assert excinfo.value.action_id == 0
    assert excinfo.value.actor_id == "bob"


def test_actor_not_found_with_mismatched_actor() -> None:
    raw = RawScript(
        script=[ActorActionDef(id=0, actors=["alice"], start=True)],
        actors=_actors("bob"),
    )

    with pytest.raises(ActorNotFoundError) as excinfo:
        build_conversation(raw)

    assert (excinfo.value.action_id, excinfo.value.actor_id) == (0, "alice")


def test_no_start_fails() -> None:
    raw = RawScript(script=[ActorActionDef(id=0, actors=["alice"])], actors=_actors("alice"))

    with pytest.raises(NoStartingActionError):
        build_conversation(raw)


@pytest.mark.parametrize(
    "script",
    [
        [ActorActionDef(id=0, start=True), ActorActionDef(id=1, start=True)],
        [ActorActionDef(id=0, start=True), PlayerActionDef(id=3, choices=[ChoiceDef("Hi", 0)], start=True)],
        [
            PlayerActionDef(id=0, choices=[ChoiceDef("Hi", 1)], start=True),
            PlayerActionDef(id=1, choices=[ChoiceDef("Hi", 0)], start=True),
        ],
    ],
    ids=["actor_actor", "actor_player", "player_player"],
)
def test_multiple_start_fails(script) -> None:
    with pytest.raises(MultipleStartingActionError):
        build_conversation(RawScript(script=script))


@pytest.mark.parametrize(
    "script",
    [
        [
            ActorActionDef(id=1, text="Hello", next=1, start=True),
            ActorActionDef(id=1, text="Whatup", next=2),
        ],
        [
            ActorActionDef(id=1, text="Hello", next=1, start=True),
            PlayerActionDef(id=1, choices=[ChoiceDef("Hi", 1)]),
        ],
        [
            PlayerActionDef(id=1, choices=[ChoiceDef("Hi", 1)], start=True),
            PlayerActionDef(id=1, choices=[ChoiceDef("Hi", 1)]),
        ],
    ],
    ids=["actor_actor", "actor_player", "player_player"],
)
def test_repeated_id_fails(script) -> None:
    with pytest.raises(RepeatedIdError) as excinfo:
        build_conversation(RawScript(script=script))

    assert excinfo.value.action_id == 1


def test_repeated_id_is_reported_before_missing_actor() -> None:
    raw = RawScript(
        script=[
            ActorActionDef(id=4, actors=["ghost"], start=True),
            ActorActionDef(id=4),
        ]
    )

    with pytest.raises(RepeatedIdError):
        build_conversation(raw)


def test_next_not_found_on_actor_action() -> None:
    raw = RawScript(script=[ActorActionDef(id=0, next=2, start=True)])

    with pytest.raises(NextActionNotFoundError) as excinfo:
        build_conversation(raw)

    assert (excinfo.value.action_id, excinfo.value.next_id) == (0, 2)


def test_next_not_found_in_choice() -> None:
    raw = RawScript(
        script=[PlayerActionDef(id=0, choices=[ChoiceDef(text="Whatup", next=2)], start=True)]
    )

    with pytest.raises(NextActionNotFoundError) as excinfo:
        build_conversation(raw)

    assert (excinfo.value.action_id, excinfo.value.next_id) == (0, 2)


def test_next_not_found_in_choice_of_player_action_that_falls_through() -> None:
    raw = RawScript(
        script=[
            PlayerActionDef(id=0, choices=[ChoiceDef("Stay", 1), ChoiceDef("Leave", 7)], start=True),
            ActorActionDef(id=1),
        ]
    )

    with pytest.raises(NextActionNotFoundError) as excinfo:
        build_conversation(raw)

    assert (excinfo.value.action_id, excinfo.value.next_id) == (0, 7)


def test_errors_share_a_base_class() -> None:
    with pytest.raises(ScriptParsingError):
        build_conversation(RawScript())


def test_single_action() -> None:
    convo = build_conversation(RawScript(script=[ActorActionDef(id=0, start=True)]))

    assert convo.node_count == 1
    assert convo.edge_count == 0
    assert convo.current_index == 0
    assert convo.current_id == 0


def test_two_actor_actions() -> None:
    raw = RawScript(
        script=[ActorActionDef(id=1, next=2, start=True), ActorActionDef(id=2)]
    )

    convo = build_conversation(raw)

    assert convo.node_count == 2
    assert convo.edge_count == 1
    assert convo.successors(1) == [2]
    assert convo.successors(2) == []


def test_self_loop() -> None:
    convo = build_conversation(RawScript(script=[ActorActionDef(id=1, next=1, start=True)]))

    assert convo.node_count == 1
    assert convo.edge_count == 1
    assert convo.successors(1) == [1]
    assert convo.current_id == 1


def test_implicit_chaining_follows_authoring_order() -> None:
    raw = RawScript(
        script=[
            ActorActionDef(id=30, start=True),
            ActorActionDef(id=10),
            ActorActionDef(id=20),
        ]
    )

    convo = build_conversation(raw)

    assert convo.successors(30) == [10]
    assert convo.successors(10) == [20]
    assert convo.successors(20) == []


def test_forward_and_backward_references() -> None:
    raw = RawScript(
        script=[
            ActorActionDef(id=1, next=3, start=True),
            ActorActionDef(id=2, next=1),
            ActorActionDef(id=3, next=2),
        ]
    )

    convo = build_conversation(raw)

    assert convo.edge_count == 3
    assert convo.successors(1) == [3]
    assert convo.successors(3) == [2]
    assert convo.successors(2) == [1]


def test_start_can_be_anywhere() -> None:
    raw = RawScript(
        script=[ActorActionDef(id=1), ActorActionDef(id=2, start=True)]
    )

    convo = build_conversation(raw)

    assert convo.start_id == 2
    assert convo.current_id == 2
    assert convo.current_index == 1


def test_branching() -> None:
    convo = build_conversation(_branching_script())

    assert convo.node_count == 3
    # player falls through to 2, one edge per choice, and 2 falls through to 3
    assert convo.edge_count == 4
    assert convo.current_index == 0
    assert convo.current_id == 1


def test_choice_edges_match_choices_when_player_action_is_last() -> None:
    raw = RawScript(
        script=[
            ActorActionDef(id=1, start=True),
            ActorActionDef(id=2, next=3),
            PlayerActionDef(
                id=3,
                choices=[ChoiceDef("a", 2), ChoiceDef("b", 1), ChoiceDef("c", 3)],
            ),
        ]
    )

    convo = build_conversation(raw)

    assert convo.successors(3) == [2, 1, 3]
    assert [choice.next for choice in convo.node_for(3).choices] == [2, 1, 3]


def test_actors_are_resolved_into_nodes() -> None:
    raw = RawScript(
        script=[
            ActorActionDef(id=1, text="Hello", actors=["bob"], next=2, start=True),
            ActorActionDef(id=2, text="Whatup", actors=["alice", "bob"]),
        ],
        actors=_actors("bob", "alice"),
    )

    convo = build_conversation(raw)

    assert convo.node_count == 2
    assert convo.edge_count == 1
    first = convo.node_for(1)
    second = convo.node_for(2)
    assert isinstance(first, LineNode)
    assert [actor.name for actor in first.actors] == ["Bob"]
    assert [actor.asset for actor in second.actors] == ["alice.png", "bob.png"]


def test_node_variants() -> None:
    convo = build_conversation(_branching_script())

    assert isinstance(convo.node_for(1), ChoiceNode)
    assert isinstance(convo.node_for(2), LineNode)
    assert convo.node_for(2).actors is None


def test_player_action_without_choices_fails() -> None:
    raw = RawScript(
        script=[PlayerActionDef(id=1, choices=[], start=True), ActorActionDef(id=2)]
    )

    with pytest.raises(EmptyChoicesError) as excinfo:
        build_conversation(raw)

    assert excinfo.value.action_id == 1


def test_player_action_requires_choices_argument() -> None:
    with pytest.raises(TypeError):
        PlayerActionDef(id=1, start=True)


def test_branching_choices_then_jump() -> None:
    convo = build_conversation(_branching_script())

    choices = convo.choices()
    assert [(choice.text, choice.next) for choice in choices] == [("Choice 1", 2), ("Choice 2", 3)]

    convo.jump(3)

    assert convo.current_id == 3
    assert convo.current_index == 2


def test_built_graph_is_frozen() -> None:
    raw = RawScript(
        script=[
            ActorActionDef(id=1, start=True),
            ActorActionDef(id=2),
            ActorActionDef(id=3),
        ]
    )
    convo = build_conversation(raw)

    with pytest.raises(nx.NetworkXError):
        convo.graph.add_edge(0, 2)
    with pytest.raises(nx.NetworkXError):
        convo.graph.remove_edge(0, 1)

    convo.advance()
    assert convo.current_id == 2
    assert convo.edge_count == 2
