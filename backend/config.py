import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Board and player defaults
    BOARD_SIZE = int(os.environ.get('BOARD_SIZE', '20'))
    MAX_NAME_LEN = int(os.environ.get('MAX_NAME_LEN', '12'))
    STARTING_HEALTH = int(os.environ.get('STARTING_HEALTH', '3'))
    STARTING_POINTS = int(os.environ.get('STARTING_POINTS', '1'))
    # Minimum players needed to start a session
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '2'))
    # Daily tick (seconds). The first tick always lands on the next local midnight.
    TICK_INTERVAL_SEC = int(os.environ.get('TICK_INTERVAL_SEC', '86400'))
    # Longest single wait handed to the timer; longer delays are chained.
    TIMER_MAX_DELAY_SEC = float(os.environ.get('TIMER_MAX_DELAY_SEC', '2147483.647'))
    # Optional: heartbeat interval for timer worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
    # Chat command prefix understood by the /command route
    COMMAND_PREFIX = os.environ.get('COMMAND_PREFIX', '!game')
