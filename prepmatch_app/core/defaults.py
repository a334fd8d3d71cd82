"""
Centralized Default Configuration for PrepMatch games.

This file is the "Source of Truth" for the timing and presentation
defaults of the matching games. ``GameConfig`` falls back to these values
when a game does not override them.
"""

DEFAULT_GAME_CONFIGS = {
    # --- Transient feedback (milliseconds) ---
    'INCORRECT_DELAY_MS_PAIR': 1500,       # 2-column games
    'INCORRECT_DELAY_MS_TRIPLE': 3000,     # 3-column games and wider
    'FEEDBACK_DELAY_MS': 2000,
    'RECENT_MATCH_MS': 1000,
    'COMPLETION_DELAY_MS': 500,

    # --- Presentation ---
    'DEFAULT_THEME': 'general',
    'DEFAULT_SHUFFLE': 'seeded',
}

# Celebration themes understood by the front-end confetti presets.
CELEBRATION_THEMES = (
    'general', 'sports', 'holidays', 'art', 'ages', 'royal', 'justice',
    'religious', 'international', 'military', 'legislative', 'political',
    'uk', 'cultural', 'parliament',
)