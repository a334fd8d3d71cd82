# File: prepmatch_app/modules/matching/config.py

from prepmatch_app.core.defaults import DEFAULT_GAME_CONFIGS


class MatchingModuleDefaultConfig:
    MATCHING_INCORRECT_DELAY_MS_PAIR = DEFAULT_GAME_CONFIGS['INCORRECT_DELAY_MS_PAIR']
    MATCHING_INCORRECT_DELAY_MS_TRIPLE = DEFAULT_GAME_CONFIGS['INCORRECT_DELAY_MS_TRIPLE']
    MATCHING_FEEDBACK_DELAY_MS = DEFAULT_GAME_CONFIGS['FEEDBACK_DELAY_MS']
    MATCHING_RECENT_MATCH_MS = DEFAULT_GAME_CONFIGS['RECENT_MATCH_MS']
    MATCHING_COMPLETION_DELAY_MS = DEFAULT_GAME_CONFIGS['COMPLETION_DELAY_MS']
    MATCHING_DEFAULT_THEME = DEFAULT_GAME_CONFIGS['DEFAULT_THEME']
    MATCHING_DEFAULT_SHUFFLE = DEFAULT_GAME_CONFIGS['DEFAULT_SHUFFLE']

    # Seed derivation per column: column k uses seed * multiplier + offset.
    MATCHING_SEED_DERIVATIONS = (
        (1000, 0),
        (7309, 1234),
        (4567, 7890),
        (3141, 5678),
    )

    # Larger seeds lose precision in the per-column derivation.
    MATCHING_MAX_SEED = 1e6

    # Selector value that places no constraint on a field.
    MATCHING_FILTER_ALL = 'all'
