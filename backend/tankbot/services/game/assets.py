"""Presentation attributes handed out on join: colours, avatars and spawn tiles.

Each helper draws from the explicitly computed set of unused candidates, so
a draw either succeeds on the first try or reports that the pool is empty.
"""
import random
from typing import Iterable, Optional

from tankbot.models import Avatar, Tile

# The first RESERVED_COLORS entries are board/background colours and are never handed to players.
PALETTE = [
    '#000000', '#595652', '#36393e', '#e97878', '#e61717',
    '#a01818', '#fbc636', '#ff8e0f', '#c56800', '#ebf828',
    '#0088ff', '#1457c5', '#6dbbff', '#1ddbb9', '#1106c5',
    '#98e993', '#25bd1c', '#0a7c04', '#05997e', '#8f63e9',
    '#6a32df', '#eb95f0', '#d03ae9', '#b63690', '#750505',
    '#8a0a64', '#754209', '#a7a045', '#075703', '#b49ae9',
]
RESERVED_COLORS = 3

# 5 columns x 6 rows of sprites on the asset sheet, 10px apart.
AVATARS = [Avatar(x, y) for y in range(28, 88, 10) for x in range(1, 51, 10)]


def player_colors() -> list:
    return PALETTE[RESERVED_COLORS:]


def lobby_capacity() -> int:
    """Maximum number of players a lobby can hold."""
    return min(len(PALETTE) - RESERVED_COLORS, len(AVATARS))


def _pick(rng: random.Random, candidates: list):
    if not candidates:
        return None
    return rng.choice(candidates)


def pick_avatar(rng: random.Random, used: Iterable[Avatar]) -> Optional[Avatar]:
    taken = set(used)
    return _pick(rng, [a for a in AVATARS if a not in taken])


def pick_color(rng: random.Random, used: Iterable[str]) -> Optional[str]:
    taken = set(used)
    return _pick(rng, [c for c in player_colors() if c not in taken])


def pick_empty_tile(rng: random.Random, board_size: int, occupied: Iterable[Tile]) -> Optional[Tile]:
    taken = set(occupied)
    free = [Tile(x, y) for y in range(board_size) for x in range(board_size) if Tile(x, y) not in taken]
    return _pick(rng, free)
