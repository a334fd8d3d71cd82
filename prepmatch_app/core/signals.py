"""
Central Signal Registry for Event-Driven Architecture.

Uses blinker (Flask's signal backend) to decouple the matching engine
from whoever reacts to it: confetti in the presentation layer, logging,
progress tracking.

Usage:
    # Publisher (sender)
    from prepmatch_app.core.signals import match_celebrated
    match_celebrated.send(game_id, theme='royal', entity_id='8')

    # Subscriber (receiver) - in module's events.py
    @match_celebrated.connect
    def on_match_celebrated(sender, **kwargs):
        ...
"""
from blinker import Namespace

matching_signals = Namespace()

# Signal: Fired for every verified tuple (correct or not)
# Payload: game_id, correct (bool), ids (tuple), attempts (int)
match_attempted = matching_signals.signal('match_attempted')

# Signal: Fired on each correct match (per-match celebration)
# Payload: game_id, theme, entity_id
match_celebrated = matching_signals.signal('match_celebrated')

# Signal: Fired once when every entity of the active set is matched
# Payload: game_id, theme, attempts, correct, accuracy
game_completed = matching_signals.signal('game_completed')

# Signal: Fired when a session is thrown away and rebuilt
# Payload: game_id, reason ('reset' | 'filter' | 'catalog'), generation
session_reset = matching_signals.signal('session_reset')
