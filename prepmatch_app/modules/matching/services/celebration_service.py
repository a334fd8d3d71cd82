# File: prepmatch_app/modules/matching/services/celebration_service.py
"""Default celebration collaborator: publishes blinker signals."""

from typing import Any, Optional

from prepmatch_app.core.signals import game_completed, match_celebrated
from ..schemas import SessionStats


class CelebrationService:
    """
    Fire-and-forget confetti triggers.

    The engine never waits on or reads anything back from these calls;
    whatever listens to the signals (a push channel, a log) decides how to
    celebrate.
    """

    def __init__(self, game_id: Optional[str] = None):
        self.game_id = game_id

    def celebrate_match(self, theme: str, entity_id: Any) -> None:
        match_celebrated.send(self.game_id, game_id=self.game_id, theme=theme, entity_id=entity_id)

    def celebrate_completion(self, theme: str, stats: SessionStats) -> None:
        game_completed.send(
            self.game_id,
            game_id=self.game_id,
            theme=theme,
            attempts=stats.attempts,
            correct=stats.correct,
            accuracy=stats.accuracy,
        )
