# File: matching/routes/api.py
# Matching Game JSON API

from flask import current_app, jsonify, request

from prepmatch_app.core.error_handlers import success_response

from .. import blueprint
from ..interface import MatchingInterface


@blueprint.route('/api/presets')
def matching_api_presets():
    """List the built-in preset catalogs."""
    return jsonify(success_response(MatchingInterface.list_presets()))


@blueprint.route('/api/games', methods=['POST'])
def matching_api_create_game():
    """Start a new game from a preset or an inline catalog."""
    data = request.get_json(silent=True) or {}
    game = MatchingInterface.create_game(data)
    current_app.logger.info(
        "Matching game %s created (%s columns, %s entities)",
        game['game_id'], len(game['columns']), game['active_count'],
    )
    return jsonify({'success': True, 'game_id': game['game_id'], 'game': game}), 201


@blueprint.route('/api/games/<game_id>')
def matching_api_get_game(game_id):
    """Current state of a game (elapsed timers applied)."""
    return jsonify({'success': True, 'game': MatchingInterface.get_snapshot(game_id)})


@blueprint.route('/api/games/<game_id>/select', methods=['POST'])
def matching_api_select(game_id):
    """Toggle one selection; verifies the tuple once every column holds one."""
    data = request.get_json(silent=True) or {}
    outcome = MatchingInterface.select(game_id, data)
    return jsonify({'success': True, **outcome})


@blueprint.route('/api/games/<game_id>/reset', methods=['POST'])
def matching_api_reset(game_id):
    return jsonify({'success': True, 'game': MatchingInterface.reset_game(game_id)})


@blueprint.route('/api/games/<game_id>/filter', methods=['POST'])
def matching_api_filter(game_id):
    """Change the category/region/... selectors; restarts the game."""
    data = request.get_json(silent=True) or {}
    return jsonify({'success': True, 'game': MatchingInterface.set_filter(game_id, data)})


@blueprint.route('/api/games/<game_id>', methods=['DELETE'])
def matching_api_delete(game_id):
    MatchingInterface.delete_game(game_id)
    return jsonify(success_response(message='Game deleted'))
