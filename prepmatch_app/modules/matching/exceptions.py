"""Exceptions raised by the matching module."""

from typing import Any, Dict, List, Optional

from prepmatch_app.core.error_handlers import NotFoundError, PrepMatchError


class MatchingError(PrepMatchError):
    """Base exception for the matching module."""

    def __init__(self, message: str, code: str = 'MATCHING_ERROR', status_code: int = 400,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code=code, status_code=status_code, details=details)


class InvalidDatasetError(MatchingError):
    """The catalog cannot back a session (duplicate ids, missing column values)."""

    def __init__(self, message: str = 'Invalid dataset', duplicate_ids: List[Any] = None,
                 missing_values: List[Dict[str, Any]] = None, errors: Any = None):
        details = {}
        if duplicate_ids:
            details['duplicate_ids'] = list(duplicate_ids)
        if missing_values:
            details['missing_values'] = list(missing_values)
        if errors:
            details['errors'] = errors
        self.duplicate_ids = list(duplicate_ids or [])
        self.missing_values = list(missing_values or [])
        super().__init__(message, code='INVALID_DATASET', status_code=422, details=details)


class InvalidGameConfigError(MatchingError):
    """A ``GameConfig`` value is out of range."""

    def __init__(self, message: str = 'Invalid game configuration', field: str = None):
        self.field = field
        super().__init__(message, code='INVALID_GAME_CONFIG', status_code=400,
                         details={'field': field} if field else None)


class InvalidColumnError(MatchingError):
    """A selection referenced a column the game does not have."""

    def __init__(self, column: Any, column_count: int):
        self.column = column
        self.column_count = column_count
        super().__init__(
            f"Column {column!r} is outside 0..{column_count - 1}",
            code='INVALID_COLUMN',
            status_code=400,
            details={'column': column, 'column_count': column_count},
        )


class GameNotFoundError(NotFoundError):
    """No running game with this id (never created, deleted or pruned)."""

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(message=f"Game {game_id} not found", resource='game')


class GameLimitReachedError(MatchingError):
    """The in-memory game registry is full."""

    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(
            f"Too many running games (limit {limit})",
            code='GAME_LIMIT_REACHED',
            status_code=429,
            details={'limit': limit},
        )
