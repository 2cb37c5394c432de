import random

import pytest

from tankbot.models import Avatar, Tile
from tankbot.services.game import assets
from tankbot.services.game.costs import ActionKind, chebyshev, evaluate_cost, manhattan
from tankbot.services.game.errors import InvalidRepeatCount, MalformedTileLabel, TileOutOfBounds
from tankbot.services.game.tiles import format_tile, parse_mention, parse_repeat_count, parse_tile


def test_move_cost_is_manhattan():
    assert evaluate_cost(ActionKind.MOVE, Tile(0, 0), Tile(3, 4)) == 7
    assert manhattan(Tile(5, 5), Tile(2, 9)) == 7


def test_attack_and_transfer_cost_is_chebyshev():
    assert evaluate_cost(ActionKind.ATTACK, Tile(0, 0), Tile(3, 4)) == 4
    assert evaluate_cost(ActionKind.TRANSFER, Tile(4, 4), Tile(5, 5)) == 1
    assert chebyshev(Tile(1, 1), Tile(1, 1)) == 0


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        evaluate_cost('teleport', Tile(0, 0), Tile(1, 1))


def test_parse_tile_examples():
    assert parse_tile('c14', 20) == Tile(2, 13)
    assert parse_tile('A1', 20) == Tile(0, 0)
    assert parse_tile('t20', 20) == Tile(19, 19)


def test_tile_label_round_trip():
    for x in range(20):
        for y in range(20):
            label = format_tile(Tile(x, y))
            assert parse_tile(label, 20) == Tile(x, y)
            assert parse_tile(label.upper(), 20).label == label


@pytest.mark.parametrize('label', ['', 'c', '14', 'cc14', 'c123', 'c-1', '?4', None, '\u212a5', 'ſ4'])
def test_malformed_tile_labels(label):
    with pytest.raises(MalformedTileLabel):
        parse_tile(label, 20)


@pytest.mark.parametrize('label', ['u1', 'z9', 'a21', 'a0', 'b99'])
def test_out_of_bounds_tiles(label):
    with pytest.raises(TileOutOfBounds):
        parse_tile(label, 20)


def test_parse_mention():
    assert parse_mention('<@!123456789012345678>') == '123456789012345678'
    assert parse_mention('<@123456789012345678>') is None
    assert parse_mention('<@!1234>') is None
    assert parse_mention('bob') is None


def test_parse_repeat_count():
    assert parse_repeat_count(None) == 1
    assert parse_repeat_count('') == 1
    assert parse_repeat_count('lots') == 1
    assert parse_repeat_count('1.5') == 1
    assert parse_repeat_count('3') == 3
    assert parse_repeat_count(2) == 2
    assert parse_repeat_count('-2') == -2


def test_repeat_count_rejects_oversized_numbers():
    assert parse_repeat_count('123456789') == 123456789
    assert parse_repeat_count(' 007 ') == 7
    with pytest.raises(InvalidRepeatCount):
        parse_repeat_count('9' * 5000)
    with pytest.raises(InvalidRepeatCount):
        parse_repeat_count('-' + '9' * 10)
    with pytest.raises(InvalidRepeatCount):
        parse_repeat_count(10 ** 12)


def test_lobby_capacity_is_smallest_pool():
    assert len(assets.AVATARS) == 30
    assert len(assets.player_colors()) == 27
    assert assets.lobby_capacity() == 27
    assert assets.AVATARS[0] == Avatar(1, 28)
    assert assets.AVATARS[-1] == Avatar(41, 78)


def test_pickers_only_return_unused_items():
    rng = random.Random(7)
    used_colors = assets.player_colors()[:-1]
    assert assets.pick_color(rng, used_colors) == assets.player_colors()[-1]
    assert assets.pick_color(rng, assets.player_colors()) is None
    assert assets.pick_avatar(rng, assets.AVATARS) is None
    for color in assets.PALETTE[:assets.RESERVED_COLORS]:
        assert color not in assets.player_colors()


def test_pick_empty_tile_avoids_occupied():
    rng = random.Random(3)
    occupied = [Tile(x, y) for x in range(2) for y in range(2) if (x, y) != (1, 1)]
    assert assets.pick_empty_tile(rng, 2, occupied) == Tile(1, 1)
    assert assets.pick_empty_tile(rng, 2, occupied + [Tile(1, 1)]) is None
