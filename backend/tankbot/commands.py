"""Chat command layer: turns ``!game <verb> [args]`` messages into game actions.

``handle_message`` is what a chat transport calls with the raw message text.
It parses the verb, runs the matching action against the channel's session
and returns the reply the bot should post.
"""
from typing import List, NamedTuple, Optional, Tuple

from tankbot.manager import SessionManager
from tankbot.services.game import actions
from tankbot.services.game.errors import (
    GameError,
    SessionAlreadyInitialized,
    SessionNotInitialized,
    SessionNotInProgress,
)
from tankbot.services.game.session import GameSession

VERB_ALIASES = {
    'shoot': 'attack',
    'transfer': 'pass',
    'scores': 'score',
    'scoreboard': 'score',
}

USAGE = {
    'create': 'create',
    'reset': 'reset',
    'destroy': 'destroy',
    'start': 'start',
    'join': 'join <name>',
    'leave': 'leave',
    'move': 'move <tile>',
    'attack': 'shoot <tile> [times]',
    'pass': 'pass <tile> [times]',
    'vote': 'vote <name|@mention>',
    'score': 'score',
    'help': 'help',
}

# Verbs that need at least this many arguments
MIN_ARGS = {'join': 1, 'move': 1, 'attack': 1, 'pass': 1, 'vote': 1}


class CommandReply(NamedTuple):
    text: str
    changed: bool = False
    error: Optional[str] = None


def parse_command(content: str, prefix: str = '!game') -> Optional[Tuple[str, List[str]]]:
    """Split a chat message into (verb, args); None if it isn't addressed to the game."""
    text = (content or '').strip()
    if not text.lower().startswith(prefix.lower()):
        return None
    rest = text[len(prefix):]
    if rest and not rest[0].isspace():
        return None
    parts = rest.split()
    if not parts:
        return 'help', []
    verb = parts[0].lower()
    return VERB_ALIASES.get(verb, verb), parts[1:]


def help_text(prefix: str = '!game') -> str:
    lines = ['Available commands:']
    lines.extend(f'  {prefix} {usage}' for usage in USAGE.values())
    return '\n'.join(lines)


def format_scoreboard(session: GameSession) -> str:
    with session.lock:
        if not session.in_progress:
            raise SessionNotInProgress('There is no scoreboard to show!')
        lines = ['players']
        for p in session.players:
            lines.append(f'  {p.name:<12} {p.position.label:>3}  hp {p.health}  ap {p.points}')
        lines.append('jury')
        for j in session.jury:
            lines.append(f"  {j.name:<12} {'can vote' if j.can_vote else 'voted'}")
        return '\n'.join(lines)


def dispatch(session: GameSession, participant_id: str, verb: str, args: List[str]) -> CommandReply:
    """Run one verb against ``session``; raises GameError for rejected actions."""
    if verb == 'create':
        if not session.create():
            raise SessionAlreadyInitialized()
        return CommandReply('A new game has been created. Join with `join <name>`.', changed=True)
    if verb == 'reset':
        session.reset()
        return CommandReply('The game has been reset.', changed=True)
    if verb == 'destroy':
        if not session.destroy():
            raise SessionNotInitialized()
        return CommandReply('The game has been destroyed.', changed=True)
    if verb == 'start':
        with session.lock:
            session.check_can_start()
            session.start()
        return CommandReply('The game has started! Good luck.', changed=True)
    if verb == 'join':
        player = actions.join(session, participant_id, args[0])
        return CommandReply(f'{player.name} joined the game at {player.position.label}.', changed=True)
    if verb == 'leave':
        player = actions.leave(session, participant_id)
        return CommandReply(f'{player.name} left the game.', changed=True)
    if verb == 'move':
        actions.move(session, participant_id, args[0])
        return CommandReply(f'You moved to {args[0].lower()}.', changed=True)
    if verb == 'attack':
        result = actions.attack(session, participant_id, args[0], args[1] if len(args) > 1 else None)
        if result.won:
            text = f'{result.target.name} has been eliminated. {result.winner.name} won the game!'
        elif result.target.health == 0:
            text = f'{result.target.name} has been eliminated and joins the jury.'
        else:
            text = f'{result.target.name} was hit and has {result.target.health} health left.'
        return CommandReply(text, changed=True)
    if verb == 'pass':
        amount = args[1] if len(args) > 1 else None
        actions.transfer(session, participant_id, args[0], amount)
        return CommandReply(f'You passed points to {args[0].lower()}.', changed=True)
    if verb == 'vote':
        actions.vote(session, participant_id, ' '.join(args))
        return CommandReply('Your vote has been counted.', changed=True)
    if verb == 'score':
        return CommandReply(format_scoreboard(session))
    raise ValueError(f'unhandled verb: {verb}')


def handle_message(manager: SessionManager, channel_id: str, participant_id: str, content: str,
                   prefix: str = '!game') -> Optional[CommandReply]:
    """Entry point for chat transports. Returns None for messages not addressed to the game."""
    parsed = parse_command(content, prefix)
    if parsed is None:
        return None
    verb, args = parsed
    if verb not in USAGE or verb == 'help':
        return CommandReply(help_text(prefix))
    if len(args) < MIN_ARGS.get(verb, 0):
        return CommandReply(f'Usage: {prefix} {USAGE[verb]}')

    session = manager.get(channel_id) if verb not in ('create', 'reset') else manager.get_or_create(channel_id)
    try:
        if session is None:
            raise SessionNotInitialized()
        return dispatch(session, participant_id, verb, args)
    except GameError as exc:
        return CommandReply(exc.message, error=exc.kind)
