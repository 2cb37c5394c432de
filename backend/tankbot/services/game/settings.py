from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class GameSettings:
    board_size: int = 20
    max_name_len: int = 12
    starting_health: int = 3
    starting_points: int = 1
    min_players: int = 2
    tick_interval_sec: float = 24 * 60 * 60
    timer_max_delay_sec: float = 2147483.647
    timer_heartbeat_sec: float = 0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'GameSettings':
        """Build settings from a Flask config (or any mapping), falling back to defaults."""
        defaults = cls()
        return cls(
            board_size=int(config.get('BOARD_SIZE', defaults.board_size)),
            max_name_len=int(config.get('MAX_NAME_LEN', defaults.max_name_len)),
            starting_health=int(config.get('STARTING_HEALTH', defaults.starting_health)),
            starting_points=int(config.get('STARTING_POINTS', defaults.starting_points)),
            min_players=int(config.get('MIN_PLAYERS', defaults.min_players)),
            tick_interval_sec=float(config.get('TICK_INTERVAL_SEC', defaults.tick_interval_sec)),
            timer_max_delay_sec=float(config.get('TIMER_MAX_DELAY_SEC', defaults.timer_max_delay_sec)),
            timer_heartbeat_sec=float(config.get('TIMER_HEARTBEAT_SEC', defaults.timer_heartbeat_sec)),
        )
