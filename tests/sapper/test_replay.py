import numpy as np
import pytest

from sapper import codec
from sapper.exceptions import SnapshotError, UnknownGame
from sapper.ledger import FLAG, OPEN, MoveLedger, outcome_of
from sapper.replay import Replay, load_game, narrate
from sapper.storage.base import StoredMove


def save(storage, game, player='alice'):
    return storage.create_game(
        player, game.rows, game.cols, game.mine_count,
        codec.encode(game.board_snapshot()),
        codec.encode(game.visibility_snapshot()),
        game.is_over(), game.is_won(), game.opened_count,
    )


def play(storage, game_id, game, moves):
    ledger = MoveLedger(storage)
    for action, row, col in moves:
        if action == FLAG:
            assert game.flag_cell(row, col)
        else:
            assert game.open_cell(row, col)
        ledger.append(game_id, row, col, action, outcome_of(game, action, row, col))

    storage.update_game(game_id,
                        codec.encode(game.board_snapshot()),
                        codec.encode(game.visibility_snapshot()),
                        game.is_over(), game.is_won(), game.opened_count)


def test_replay_narrates_five_moves(storage, wall_game):
    game_id = save(storage, wall_game)
    play(storage, game_id, wall_game, [
        (FLAG, 8, 8),
        (OPEN, 0, 0),
        (FLAG, 2, 4),
        (FLAG, 2, 4),
        (OPEN, 3, 4),
    ])

    replay = Replay.load(storage, game_id)

    assert [m.move_number for m in replay.moves] == [1, 2, 3, 4, 5]
    assert replay.narration() == [
        'Move 1: Flag 9 9 - flag placed',
        'Move 2: Open 1 1 - cell opened',
        'Move 3: Flag 3 5 - flag placed',
        'Move 4: Flag 3 5 - flag removed',
        'Move 5: Open 4 5 - hit a mine',
    ]
    assert replay.game.is_over()
    assert replay.record.player_name == 'alice'


def test_replay_holds_final_state(storage, wall_game):
    game_id = save(storage, wall_game)
    play(storage, game_id, wall_game, [(FLAG, 8, 8), (OPEN, 0, 0)])

    record, game = load_game(storage, game_id)

    assert record.id == game_id
    assert game.board == wall_game.board
    assert np.array_equal(game.visibility, wall_game.visibility)
    assert game.opened_count == 36
    assert not game.is_finished()


def test_narration_keeps_gaps():
    moves = [
        StoredMove(1, 1, 0, 0, OPEN, 'safe'),
        StoredMove(1, 3, 4, 2, FLAG, 'flagged'),
        StoredMove(1, 10, 8, 8, OPEN, 'win'),
    ]
    assert narrate(moves) == [
        'Move 1: Open 1 1 - cell opened',
        'Move 3: Flag 5 3 - flag placed',
        'Move 10: Open 9 9 - cleared the board',
    ]


def test_replay_without_moves(storage, wall_game):
    game_id = save(storage, wall_game)
    replay = Replay.load(storage, game_id)
    assert replay.moves == []
    assert replay.narration() == []


def test_unknown_game(storage):
    with pytest.raises(UnknownGame):
        load_game(storage, 404)
    with pytest.raises(UnknownGame):
        Replay.load(storage, 404)


def test_corrupt_snapshot(storage):
    game_id = storage.create_game('alice', 9, 9, 10, 'garbage', 'garbage', False, False, 0)
    with pytest.raises(SnapshotError):
        load_game(storage, game_id)
