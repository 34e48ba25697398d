from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_socketio import SocketIO
import random
import click
from config import Config

db = SQLAlchemy()
allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def build_room_manager(flask_app, game_log, scheduler=None):
    """Create the process-wide RoomManager from app config."""
    from teamroom.services.room import ResetScheduler, RoomManager

    cfg = flask_app.config
    if scheduler is None:
        scheduler = ResetScheduler(
            start_task=socketio.start_background_task,
            sleep=socketio.sleep,
            heartbeat=int(cfg.get('TIMER_HEARTBEAT_SEC', 0)),
        )
    seed = cfg.get('RANDOM_SEED')
    return RoomManager(
        capacity=int(cfg.get('ROOM_CAPACITY', 10)),
        traitor_count=int(cfg.get('TRAITOR_COUNT', 4)),
        reset_delay=float(cfg.get('RESET_DELAY_SEC', 30)),
        rng=random.Random(seed) if seed is not None else random.Random(),
        scheduler=scheduler,
        game_log=game_log,
        queue_during_game=bool(cfg.get('QUEUE_DURING_GAME', False)),
        # Continue numbering across restarts
        first_game_number=game_log.last_game_number() + 1,
    )


def create_app(config_class=Config, scheduler=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # The archive is the only persisted table; create it on boot
    from teamroom import models  # noqa: F401
    with flask_app.app_context():
        db.create_all()

    from teamroom.services.room.archive import GameLogStore
    game_log = GameLogStore(flask_app, cap=int(flask_app.config.get('GAME_LOG_CAP', 100)))
    room_manager = build_room_manager(flask_app, game_log, scheduler=scheduler)
    flask_app.extensions['game_log'] = game_log
    flask_app.extensions['room_manager'] = room_manager

    # Import and register blueprints here
    from teamroom.main import main
    flask_app.register_blueprint(main)

    from teamroom.api.room import room
    flask_app.register_blueprint(room, url_prefix='/api')

    # Register Socket.IO event handlers and push every room change to watchers
    from teamroom.socketio_events import broadcast_room_state, register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))
    room_manager.add_listener(broadcast_room_state)

    @click.command('logs-reset')
    def logs_reset_command():
        """Drops and recreates the game log archive."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Game log archive has been reset!')

    @click.command('logs-show')
    @click.option('--limit', default=10, show_default=True, help='Number of recent games to print.')
    def logs_show_command(limit):
        """Prints the most recent archived games (traitors marked with *)."""
        for entry in game_log.recent(limit):
            traitors = set(entry['traitors'])
            print(f"Game #{entry['gameNumber']} ({entry['id']})")
            for team in ('team1', 'team2'):
                names = [p['name'] + ('*' if p['id'] in traitors else '') for p in entry['teams'][team]]
                print(f"  {team}: {', '.join(names)}")
        print(f"Archived games: {game_log.total()}")

    flask_app.cli.add_command(logs_reset_command)
    flask_app.cli.add_command(logs_show_command)

    return flask_app
