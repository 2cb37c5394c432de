"""Typed errors raised by the game core.

Every error is caused by a player or operator request that is illegal in
the current session state. The message is meant to be shown to the player
as-is; ``kind`` is the stable identifier the API reports alongside it.
"""


class GameError(Exception):
    default_message = 'that action is not possible right now'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_dict(self):
        return {'error': self.message, 'kind': self.kind}


# ---- Session lifecycle ----

class SessionNotInitialized(GameError):
    default_message = 'there is no game in this channel'


class SessionAlreadyInitialized(GameError):
    default_message = 'a game already exists in this channel'


class SessionInProgress(GameError):
    default_message = 'the game is in progress'


class SessionNotInProgress(GameError):
    default_message = "the game hasn't started yet"


class NotEnoughPlayers(GameError):
    default_message = 'at least 2 players are needed to start'


# ---- Lobby ----

class LobbyFull(GameError):
    default_message = 'the game is full'


class NameTooLong(GameError):
    default_message = 'that name is too long'


class NameInvalidCharacters(GameError):
    default_message = 'that name uses illegal symbols'


class AlreadyJoined(GameError):
    default_message = 'you already joined'


class NotAParticipant(GameError):
    default_message = "you aren't in the game"


# ---- Board actions ----

class MalformedTileLabel(GameError):
    default_message = "that's not a valid tile"


class TileOutOfBounds(GameError):
    default_message = 'that tile is out of bounds'


class TileOccupied(GameError):
    default_message = 'that tile is occupied'


class TargetTileEmpty(GameError):
    default_message = 'there is no player on that tile'


class SelfTarget(GameError):
    default_message = "you can't target yourself"


class InvalidRepeatCount(GameError):
    default_message = 'that is not a valid number of times'


class InsufficientPoints(GameError):
    default_message = "you don't have enough points"


# ---- Jury ----

class NotAJuryMember(GameError):
    default_message = "you aren't in the jury"


class AlreadyVoted(GameError):
    default_message = 'you already voted. You can vote again tomorrow'


class UnknownVoteTarget(GameError):
    default_message = "that player couldn't be found"
