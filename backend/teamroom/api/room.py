from flask import Blueprint, jsonify, request, current_app
from werkzeug.exceptions import HTTPException
from teamroom.exceptions import TeamRoomException


room = Blueprint('room', __name__)


def _room_manager():
    return current_app.extensions['room_manager']


def _game_log():
    return current_app.extensions['game_log']


def _logs_payload(limit: int) -> dict:
    game_log = _game_log()
    return {
        'logs': game_log.recent(limit),
        'totalGames': game_log.total(),
    }


@room.errorhandler(TeamRoomException)
def handle_room_error(exc):
    current_app.logger.info(f"[room-error] {type(exc).__name__}: {exc}")
    return jsonify({'error': str(exc)}), exc.status_code


@room.errorhandler(Exception)
def handle_unexpected_error(exc):
    if isinstance(exc, HTTPException):
        return exc
    current_app.logger.exception('[room-error] unexpected failure')
    return jsonify({'error': 'Internal server error'}), 500


@room.route('/room', methods=['GET'])
def get_room_state():
    payload = _room_manager().snapshot()
    payload['totalGames'] = _game_log().total()
    return jsonify(payload)


@room.route('/room', methods=['POST'])
def room_action():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    action = data.get('action')

    if action == 'join':
        result = _room_manager().join(data.get('playerName'))
        if result.queued:
            return jsonify({
                'player': result.player,
                'roomState': result.room_state,
                'waitingPosition': result.waiting_position,
            }), 202
        return jsonify({
            'player': result.player,
            'roomState': result.room_state,
        })

    if action == 'leave':
        state = _room_manager().leave(data.get('playerId'))
        return jsonify({'success': True, 'roomState': state})

    if action == 'getLogs':
        return jsonify(_logs_payload(int(current_app.config.get('RECENT_LOGS_LIMIT', 10))))

    return jsonify({'error': f'Unknown action: {action}'}), 400


@room.route('/room/logs', methods=['GET'])
def get_logs():
    default_limit = int(current_app.config.get('RECENT_LOGS_LIMIT', 10))
    limit = request.args.get('limit', default_limit, type=int)
    cap = int(current_app.config.get('GAME_LOG_CAP', 100))
    if limit < 0:
        return jsonify({'error': 'limit must be a non-negative integer'}), 400
    return jsonify(_logs_payload(min(limit, cap)))
