"""Domain definition exports."""

from .script_def import ActionDef, ActorActionDef, ActorDef, ChoiceDef, PlayerActionDef, RawScript

__all__ = [
    "ActionDef",
    "ActorActionDef",
    "ActorDef",
    "ChoiceDef",
    "PlayerActionDef",
    "RawScript",
]
