from flask import Blueprint

blueprint = Blueprint('matching', __name__)

# Module Metadata
module_metadata = {
    'name': 'Matching Games',
    'icon': 'puzzle-piece',
    'category': 'Learning',
    'url_prefix': '/matching',
    'enabled': True
}


def setup_module(app):
    from .events import register_events
    from .services.game_registry import game_registry
    from .routes import api  # noqa: F401

    game_registry.configure(
        idle_timeout_minutes=app.config.get('MATCHING_IDLE_TIMEOUT_MINUTES'),
        max_games=app.config.get('MATCHING_MAX_GAMES'),
    )
    register_events()
