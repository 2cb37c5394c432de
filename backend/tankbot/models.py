from dataclasses import dataclass, field
from typing import NamedTuple


class Tile(NamedTuple):
    x: int
    y: int

    @property
    def label(self) -> str:
        """Chat-facing label, column letter then 1-indexed row (``Tile(2, 13)`` -> ``c14``)."""
        return f"{chr(ord('a') + self.x)}{self.y + 1}"


class Avatar(NamedTuple):
    """Top-left corner of a 9x9 sprite on the game asset sheet."""
    x: int
    y: int


@dataclass
class Player:
    id: str
    name: str
    avatar: Avatar
    color: str
    position: Tile
    health: int
    points: int
    can_vote: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'avatar': list(self.avatar),
            'color': self.color,
            'position': list(self.position),
            'tile': self.position.label,
            'health': self.health,
            'points': self.points,
        }


@dataclass
class JuryMember:
    id: str
    name: str
    avatar: Avatar
    color: str
    can_vote: bool = True

    @classmethod
    def from_player(cls, player: Player) -> 'JuryMember':
        return cls(id=player.id, name=player.name, avatar=player.avatar, color=player.color, can_vote=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'avatar': list(self.avatar),
            'color': self.color,
            'can_vote': self.can_vote,
        }


@dataclass
class JuryVote:
    target_id: str
    votes: int = 0


@dataclass
class AttackResult:
    target: Player
    won: bool = False
    winner: Player | None = None

    def to_dict(self):
        return {
            'target': self.target.to_dict(),
            'won': self.won,
            'winner': self.winner.to_dict() if self.winner else None,
        }


@dataclass
class TickReport:
    players_credited: int = 0
    jurors_restored: int = 0
    bonuses: dict[str, int] = field(default_factory=dict)

    def to_dict(self):
        return {
            'players_credited': self.players_credited,
            'jurors_restored': self.jurors_restored,
            'bonuses': dict(self.bonuses),
        }
