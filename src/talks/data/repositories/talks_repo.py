"""Repository for talk scripts."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from talks.data import paths
from talks.data.errors import DataValidationError
from talks.data.json_loader import load_json
from talks.domain.defs import ActionDef, ActorActionDef, ActorDef, ChoiceDef, PlayerActionDef, RawScript


class TalksRepository:
    """Loads talks from ``talks.json`` and checks their shape.

    Graph-level rules (unique action ids, a single start, resolvable ``next``
    targets) are left to ``build_conversation``.
    """

    TALKS_FILENAME = "talks.json"

    def __init__(self, base_path: Path | str | None = None) -> None:
        self._base_path = Path(base_path) if base_path is not None else None
        self._talks: Dict[str, RawScript] | None = None

    def get(self, talk_id: str) -> RawScript:
        """Return the raw script of ``talk_id``; unknown ids raise KeyError."""
        talks = self._ensure_loaded()
        try:
            return talks[talk_id]
        except KeyError as exc:
            raise KeyError(talk_id) from exc

    def all(self) -> list[RawScript]:
        """Return every talk, ordered by talk id."""
        talks = self._ensure_loaded()
        return [talks[key] for key in sorted(talks)]

    def ids(self) -> list[str]:
        """Return the known talk ids in sorted order."""
        return sorted(self._ensure_loaded())

    def _ensure_loaded(self) -> Dict[str, RawScript]:
        if self._talks is None:
            file_path = paths.get_definitions_path(self._base_path) / self.TALKS_FILENAME
            raw = load_json(file_path)
            if not isinstance(raw, dict):
                raise DataValidationError(f"Expected top-level object in {file_path}")
            self._talks = self._build(raw)
        return self._talks

    def _build(self, raw: dict[str, object]) -> Dict[str, RawScript]:
        talks: Dict[str, RawScript] = {}
        for talk_id, talk_payload in raw.items():
            talk_data = self._require_mapping(talk_payload, f"talk '{talk_id}'")
            actors = self._parse_actors(talk_data.get("actors"), talk_id)
            script = self._parse_script(talk_data.get("script"), talk_id)
            talks[talk_id] = RawScript(script=script, actors=actors)
        return talks

    def _parse_actors(self, raw_actors: object, talk_id: str) -> Dict[str, ActorDef]:
        if raw_actors is None:
            return {}
        actors: Dict[str, ActorDef] = {}
        for index, entry in enumerate(self._require_list(raw_actors, f"talk '{talk_id}' actors")):
            actor_ctx = f"talk '{talk_id}' actors[{index}]"
            actor_data = self._require_mapping(entry, actor_ctx)
            actor_id = self._require_str(actor_data.get("id"), f"{actor_ctx} id")
            if actor_id in actors:
                raise DataValidationError(f"talk '{talk_id}' has duplicate actor id '{actor_id}'.")
            actors[actor_id] = ActorDef(
                id=actor_id,
                name=self._require_str(actor_data.get("name"), f"{actor_ctx} name"),
                asset=self._require_str(actor_data.get("asset", ""), f"{actor_ctx} asset"),
            )
        return actors

    def _parse_script(self, raw_script: object, talk_id: str) -> List[ActionDef]:
        entries = self._require_list(raw_script, f"talk '{talk_id}' script")
        script: List[ActionDef] = []
        for index, entry in enumerate(entries):
            action_ctx = f"talk '{talk_id}' script[{index}]"
            action_data = self._require_mapping(entry, action_ctx)
            if "choices" in action_data:
                script.append(self._parse_player_action(action_data, action_ctx))
            else:
                script.append(self._parse_actor_action(action_data, action_ctx))
        return script

    def _parse_actor_action(self, data: dict[str, object], context: str) -> ActorActionDef:
        actors = None
        if data.get("actors") is not None:
            actors = [
                self._require_str(actor_id, f"{context} actors[{index}]")
                for index, actor_id in enumerate(self._require_list(data["actors"], f"{context} actors"))
            ]
        text = None
        if data.get("text") is not None:
            text = self._require_str(data["text"], f"{context} text")
        next_id = None
        if data.get("next") is not None:
            next_id = self._require_int(data["next"], f"{context} next")
        return ActorActionDef(
            id=self._require_int(data.get("id"), f"{context} id"),
            text=text,
            actors=actors,
            next=next_id,
            start=self._parse_start(data, context),
        )

    def _parse_player_action(self, data: dict[str, object], context: str) -> PlayerActionDef:
        if "next" in data:
            raise DataValidationError(f"{context} is a player action and cannot declare next.")
        raw_choices = self._require_list(data["choices"], f"{context} choices")
        if not raw_choices:
            raise DataValidationError(f"{context} choices must not be empty.")
        choices: List[ChoiceDef] = []
        for index, entry in enumerate(raw_choices):
            choice_ctx = f"{context} choices[{index}]"
            choice_data = self._require_mapping(entry, choice_ctx)
            choices.append(
                ChoiceDef(
                    text=self._require_str(choice_data.get("text"), f"{choice_ctx} text"),
                    next=self._require_int(choice_data.get("next"), f"{choice_ctx} next"),
                )
            )
        return PlayerActionDef(
            id=self._require_int(data.get("id"), f"{context} id"),
            choices=choices,
            start=self._parse_start(data, context),
        )

    @staticmethod
    def _parse_start(data: dict[str, object], context: str) -> bool:
        start = data.get("start", False)
        if not isinstance(start, bool):
            raise DataValidationError(f"{context} start must be a boolean.")
        return start

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object/dict.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataValidationError(f"{context} must be an integer.")
        return value
