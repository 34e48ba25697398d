import os


def _env_flag(name, default='0'):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///game_logs.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Room rules
    ROOM_CAPACITY = int(os.environ.get('ROOM_CAPACITY', '10'))
    TRAITOR_COUNT = int(os.environ.get('TRAITOR_COUNT', '4'))
    # Seconds a started game stays on screen before the room resets
    RESET_DELAY_SEC = float(os.environ.get('RESET_DELAY_SEC', '30'))
    # Queue joins that arrive mid-game instead of rejecting them
    QUEUE_DURING_GAME = _env_flag('QUEUE_DURING_GAME')
    # Game log archive
    GAME_LOG_CAP = int(os.environ.get('GAME_LOG_CAP', '100'))
    RECENT_LOGS_LIMIT = int(os.environ.get('RECENT_LOGS_LIMIT', '10'))
    # Optional: pin the shuffle RNG (ints only). Unset means OS entropy.
    RANDOM_SEED = int(os.environ['RANDOM_SEED']) if os.environ.get('RANDOM_SEED') else None
    # Optional: heartbeat interval for reset timer logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
