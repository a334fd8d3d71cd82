# File: prepmatch_app/modules/matching/interface.py
"""
Matching Interface
==================
Public API for other modules (and the HTTP routes) to run matching games.
All cross-module matching operations must go through this interface.
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from prepmatch_app.core.error_handlers import ValidationError
from prepmatch_app.core.logging_config import get_logger

from .catalogs import get_preset, list_presets as all_presets
from .engine.matching_engine import MatchingEngine
from .engine.scheduler import Clock
from .exceptions import InvalidDatasetError
from .logics.catalog_loader import load_catalog
from .logics.dataset import filter_fields
from .payloads import CreateGamePayload, FilterPayload, SelectPayload
from .schemas import GameConfig, MatchResult
from .services.game_registry import game_registry

logger = get_logger('prepmatch.matching')


def _validate(model, data: Optional[Mapping[str, Any]]):
    try:
        return model.model_validate(data or {})
    except PydanticValidationError as exc:
        raise ValidationError(
            'Invalid request payload',
            errors=exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc


def _result_dict(result: Optional[MatchResult]) -> Optional[Dict[str, Any]]:
    if result is None:
        return None
    return {
        'ids': list(result.ids),
        'correct': result.correct,
        'attempt': result.attempt,
        'completed': result.completed,
    }


class MatchingInterface:
    """Public interface for matching module operations."""

    @staticmethod
    def build_engine(data: Mapping[str, Any], clock: Optional[Clock] = None) -> MatchingEngine:
        """
        Build (but do not register) an engine from a create-game payload.

        Raises:
            ValidationError: malformed payload or unknown preset.
            InvalidDatasetError: the catalog fails validation.
            InvalidGameConfigError: a game setting is out of range.
        """
        payload = _validate(CreateGamePayload, data)
        overrides = payload.config_overrides()

        if payload.preset and not (payload.entities or payload.matchingPairs or payload.tripleMatches):
            preset = get_preset(payload.preset)
            if preset is None:
                raise ValidationError(f"Unknown preset {payload.preset!r}")
            catalog = preset.entities
            config = preset.build_config(**overrides)
        else:
            catalog, column_count = load_catalog(payload.model_dump())
            if not catalog:
                raise InvalidDatasetError('Catalog is empty')
            config = GameConfig.for_columns(payload.columns or column_count, **overrides)

        return MatchingEngine(catalog, config, predicate=payload.filters, clock=clock)

    @staticmethod
    def create_game(data: Mapping[str, Any], clock: Optional[Clock] = None) -> Dict[str, Any]:
        engine = MatchingInterface.build_engine(data, clock=clock)
        game_registry.add(engine)
        return engine.snapshot()

    @staticmethod
    def get_snapshot(game_id: str) -> Dict[str, Any]:
        with game_registry.checkout(game_id) as engine:
            return engine.snapshot()

    @staticmethod
    def select(game_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        payload = _validate(SelectPayload, data)
        with game_registry.checkout(game_id) as engine:
            result = engine.select(payload.column, payload.entity_id)
            return {'result': _result_dict(result), 'game': engine.snapshot()}

    @staticmethod
    def reset_game(game_id: str) -> Dict[str, Any]:
        with game_registry.checkout(game_id) as engine:
            engine.reset()
            return engine.snapshot()

    @staticmethod
    def set_filter(game_id: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        payload = _validate(FilterPayload, data)
        with game_registry.checkout(game_id) as engine:
            engine.set_filter(payload.filters)
            return engine.snapshot()

    @staticmethod
    def delete_game(game_id: str) -> None:
        game_registry.remove(game_id)
        logger.info("Game %s deleted", game_id)

    @staticmethod
    def tick_games() -> int:
        """Scheduled job: apply elapsed timers of games nobody is polling."""
        return game_registry.tick_all()

    @staticmethod
    def prune_idle_games() -> List[str]:
        """Scheduled job: forget games nobody touched for a while."""
        return game_registry.prune_idle()

    @staticmethod
    def list_presets() -> List[Dict[str, Any]]:
        presets = []
        for preset in all_presets():
            presets.append({
                'key': preset.key,
                'title': preset.title,
                'theme': preset.theme,
                'columns': preset.column_count,
                'column_labels': list(preset.column_labels),
                'filter_fields': filter_fields(preset.entities),
                'size': len(preset.entities),
            })
        return presets
