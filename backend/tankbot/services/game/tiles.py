"""Chat grammars the game understands: tile labels, mentions and repeat counts."""
import re

from tankbot.models import Tile
from .errors import InvalidRepeatCount, MalformedTileLabel, TileOutOfBounds

TILE_RE = re.compile(r'[A-Za-z][0-9]{1,2}')
MENTION_RE = re.compile(r'<@!([0-9]{18})>')
INTEGER_RE = re.compile(r'[+-]?([0-9]+)')
MAX_REPEAT_DIGITS = 9


def parse_tile(label: str, board_size: int) -> Tile:
    """Decode a label such as ``c14`` into ``Tile(2, 13)``.

    Raises MalformedTileLabel when the label does not follow the grammar and
    TileOutOfBounds when it decodes to a tile outside the board.
    """
    if not isinstance(label, str) or not TILE_RE.fullmatch(label.strip()):
        raise MalformedTileLabel()
    label = label.strip().lower()
    tile = Tile(ord(label[0]) - ord('a'), int(label[1:]) - 1)
    if not (0 <= tile.x < board_size and 0 <= tile.y < board_size):
        raise TileOutOfBounds()
    return tile


def format_tile(tile: Tile) -> str:
    return tile.label


def parse_mention(text: str) -> str | None:
    """Return the participant id inside ``<@!123...>``, or None for anything else."""
    match = MENTION_RE.fullmatch((text or '').strip())
    return match.group(1) if match else None


def parse_repeat_count(value) -> int:
    # Anything that isn't an integer (missing, empty, "abc", "1.5") counts as a single repetition
    if isinstance(value, bool) or value is None:
        return 1
    if isinstance(value, int):
        if abs(value) >= 10 ** MAX_REPEAT_DIGITS:
            raise InvalidRepeatCount()
        return value
    if not isinstance(value, str):
        return 1
    match = INTEGER_RE.fullmatch(value.strip())
    if match is None:
        return 1
    if len(match.group(1).lstrip('0')) > MAX_REPEAT_DIGITS:
        raise InvalidRepeatCount()
    return int(match.group(0))
