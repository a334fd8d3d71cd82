from prepmatch_app.core.logging_config import get_logger
from prepmatch_app.core.signals import game_completed, session_reset

logger = get_logger('prepmatch.matching.events')


def on_game_completed(sender, **kwargs):
    """Event listener: record a finished game."""
    logger.info(
        "Game %s completed (theme=%s): %s/%s correct, accuracy %s%%",
        kwargs.get('game_id'), kwargs.get('theme'),
        kwargs.get('correct'), kwargs.get('attempts'), kwargs.get('accuracy'),
    )


def on_session_reset(sender, **kwargs):
    logger.debug(
        "Game %s reset (%s), generation %s",
        kwargs.get('game_id'), kwargs.get('reason'), kwargs.get('generation'),
    )


def register_events():
    """Connect signals."""
    game_completed.connect(on_game_completed)
    session_reset.connect(on_session_reset)
