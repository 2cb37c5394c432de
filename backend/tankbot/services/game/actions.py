"""Player actions: join, leave, move, attack, transfer and vote.

Each action checks the session state first, validates its inputs, and only
then touches the registry. Costs are debited together with the effect, so a
rejected action leaves the session exactly as it was.
"""
import logging
import re

from tankbot.models import AttackResult, Player, Tile
from . import assets
from .costs import ActionKind, evaluate_cost
from .errors import (
    AlreadyJoined,
    AlreadyVoted,
    InsufficientPoints,
    InvalidRepeatCount,
    LobbyFull,
    NameInvalidCharacters,
    NameTooLong,
    NotAJuryMember,
    NotAParticipant,
    SelfTarget,
    TargetTileEmpty,
    TileOccupied,
    UnknownVoteTarget,
)
from .session import GameSession
from .tiles import parse_mention, parse_repeat_count, parse_tile

logger = logging.getLogger(__name__)

NAME_RE = re.compile(r'[A-Za-z0-9_-]+')


def join(session: GameSession, participant_id: str, name: str) -> Player:
    with session.lock:
        session.require_lobby()
        if len(session.players) >= assets.lobby_capacity():
            raise LobbyFull()
        name = name or ''
        if len(name) > session.settings.max_name_len:
            raise NameTooLong()
        if not NAME_RE.fullmatch(name):
            raise NameInvalidCharacters()
        if session.find_player(participant_id) is not None:
            raise AlreadyJoined()

        avatar = assets.pick_avatar(session.rng, (p.avatar for p in session.players))
        color = assets.pick_color(session.rng, (p.color for p in session.players))
        tile = assets.pick_empty_tile(session.rng, session.settings.board_size, (p.position for p in session.players))
        if avatar is None or color is None or tile is None:
            # Capacity is derived from the same pools, so this only happens on a corrupted registry
            raise RuntimeError(f'no free avatar/color/tile for a lobby of {len(session.players)} players')

        player = Player(
            id=participant_id,
            name=name.lower(),
            avatar=avatar,
            color=color,
            position=tile,
            health=session.settings.starting_health,
            points=session.settings.starting_points,
        )
        session.players.append(player)
        logger.info(f"[join] channel={session.channel_id} player={participant_id} name={player.name} tile={tile.label}")
        return player


def leave(session: GameSession, participant_id: str) -> Player:
    with session.lock:
        session.require_lobby()
        player = session.find_player(participant_id)
        if player is None:
            raise NotAParticipant("you're not even in it to begin with")
        session.players.remove(player)
        logger.info(f"[leave] channel={session.channel_id} player={participant_id}")
        return player


def move(session: GameSession, participant_id: str, tile_label: str) -> None:
    with session.lock:
        session.require_in_progress()
        dest = parse_tile(tile_label, session.settings.board_size)
        player = _require_player(session, participant_id)
        occupant = session.find_player_at(dest)
        if occupant is not None and occupant is not player:
            raise TileOccupied()
        cost = evaluate_cost(ActionKind.MOVE, player.position, dest)
        if cost > player.points:
            raise InsufficientPoints()
        player.points -= cost
        player.position = dest
        logger.info(f"[move] channel={session.channel_id} player={participant_id} to={dest.label} cost={cost}")


def attack(session: GameSession, participant_id: str, tile_label: str, repeat_count=None) -> AttackResult:
    with session.lock:
        session.require_in_progress()
        shots = parse_repeat_count(repeat_count)
        player, target, cost = _aim(session, participant_id, tile_label, shots, ActionKind.ATTACK)
        if cost > player.points:
            raise InsufficientPoints()
        if shots > target.health:
            raise InvalidRepeatCount(f'that player only has {target.health} health left')

        player.points -= cost
        target.health -= shots
        logger.info(
            f"[attack] channel={session.channel_id} player={participant_id} target={target.id} shots={shots} cost={cost} health={target.health}"
        )
        if target.health == 0:
            session.eliminate(target)
            logger.info(f"[eliminated] channel={session.channel_id} player={target.id} remaining={len(session.players)}")
            if len(session.players) == 1:
                winner = session.players[0]
                session.declare_winner(winner)
                return AttackResult(target=target, won=True, winner=winner)
        return AttackResult(target=target)


def transfer(session: GameSession, participant_id: str, tile_label: str, repeat_count=None) -> None:
    with session.lock:
        session.require_in_progress()
        amount = parse_repeat_count(repeat_count)
        player, target, cost = _aim(session, participant_id, tile_label, amount, ActionKind.TRANSFER)
        if cost > player.points:
            raise InsufficientPoints()
        player.points -= cost
        target.points += amount
        logger.info(
            f"[pass] channel={session.channel_id} player={participant_id} target={target.id} amount={amount} cost={cost}"
        )


def vote(session: GameSession, participant_id: str, target: str) -> None:
    with session.lock:
        session.require_in_progress()
        juror = session.find_juror(participant_id)
        if juror is None:
            raise NotAJuryMember()
        if not juror.can_vote:
            raise AlreadyVoted()
        mentioned = parse_mention(target)
        if mentioned is not None:
            player = session.find_player(mentioned)
        else:
            player = session.find_player_by_name(target)
        if player is None:
            raise UnknownVoteTarget()
        entry = session.record_vote(player.id)
        juror.can_vote = False
        logger.info(f"[vote] channel={session.channel_id} juror={participant_id} target={player.id} votes={entry.votes}")


def _require_player(session: GameSession, participant_id: str) -> Player:
    player = session.find_player(participant_id)
    if player is None:
        raise NotAParticipant()
    return player


def _aim(session: GameSession, participant_id: str, tile_label: str, times: int, kind: ActionKind):
    """Shared checks for actions aimed at another player's tile; returns (player, target, cost)."""
    dest: Tile = parse_tile(tile_label, session.settings.board_size)
    player = _require_player(session, participant_id)
    target = session.find_player_at(dest)
    if target is None:
        raise TargetTileEmpty()
    if target is player:
        raise SelfTarget()
    if times < 1:
        raise InvalidRepeatCount()
    return player, target, evaluate_cost(kind, player.position, dest) * times
