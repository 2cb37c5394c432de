"""Action point costs.

Movement is paid per step along the grid (Manhattan distance). Attacks and
point transfers reach diagonally, so their range is the Chebyshev distance;
callers multiply it by the number of repetitions.
"""
from enum import Enum

from tankbot.models import Tile


class ActionKind(str, Enum):
    MOVE = 'move'
    ATTACK = 'attack'
    TRANSFER = 'transfer'


def manhattan(origin: Tile, target: Tile) -> int:
    return abs(origin.x - target.x) + abs(origin.y - target.y)


def chebyshev(origin: Tile, target: Tile) -> int:
    return max(abs(origin.x - target.x), abs(origin.y - target.y))


def evaluate_cost(kind: ActionKind, origin: Tile, target: Tile) -> int:
    """Return the base point cost of performing ``kind`` from ``origin`` at ``target``."""
    if kind == ActionKind.MOVE:
        return manhattan(origin, target)
    if kind in (ActionKind.ATTACK, ActionKind.TRANSFER):
        return chebyshev(origin, target)
    raise ValueError(f'unknown action kind: {kind!r}')
