from flask import Blueprint, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Team room server', 'status': 'ok'})


@main.route('/health')
def health():
    return jsonify({'status': 'healthy'})
