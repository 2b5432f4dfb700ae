"""Rule invariants checked over random playouts."""

from __future__ import annotations

from hypothesis import given, settings, strategies as st

from morris import GameState, Phase, Side
from morris.board import ADJACENCY, is_adjacent
from morris.game import (
    all_valid_moves,
    can_move,
    check_winner,
    is_valid_placement,
    legal_placements,
    move_piece,
    place_piece,
)


def occupied(state: GameState, side: Side) -> int:
    return sum(1 for cell in state.board if cell is side)


@settings(max_examples=200)
@given(st.data())
def test_random_playout_invariants(data):
    state = GameState()
    seen_movement = False

    for _ in range(30):
        if state.phase is Phase.GAME_OVER:
            break
        mover = state.current_player

        if state.phase is Phase.PLACEMENT:
            for node in range(9):
                expected = state.board[node] is None and state.pieces_placed[mover] < 3
                assert is_valid_placement(state, node) == expected
            options = legal_placements(state, mover)
            choice = data.draw(st.sampled_from(options))
            after = place_piece(state, choice.node)

            assert after.pieces_placed[mover] == state.pieces_placed[mover] + 1
            assert after.pieces_placed[mover.opponent] == state.pieces_placed[mover.opponent]
            if after.phase is Phase.MOVEMENT:
                assert after.pieces_placed.red == after.pieces_placed.blue == 3
        else:
            seen_movement = True
            moves = all_valid_moves(state, mover)
            assert bool(moves) == can_move(state, mover)
            if not moves:
                break
            choice = data.draw(st.sampled_from(moves))
            after = move_piece(state, choice.origin, choice.target)

            assert occupied(after, Side.RED) == occupied(state, Side.RED)
            assert occupied(after, Side.BLUE) == occupied(state, Side.BLUE)
            assert after.phase is not Phase.PLACEMENT

        assert sum(1 for cell in after.board if cell is not None) == (
            after.pieces_placed.red + after.pieces_placed.blue
        )
        if seen_movement:
            assert after.phase is not Phase.PLACEMENT

        winner = check_winner(after.board)
        if winner is None:
            assert after.current_player is mover.opponent
            assert after.phase is not Phase.GAME_OVER
        else:
            assert after.winner is winner is mover
            assert after.phase is Phase.GAME_OVER
        state = after


@settings(max_examples=100)
@given(st.lists(st.sampled_from([None, Side.RED, Side.BLUE]), min_size=9, max_size=9), st.sampled_from(list(Side)))
def test_all_valid_moves_matches_definition(cells, side):
    state = GameState(board=tuple(cells), phase=Phase.MOVEMENT)
    expected = {
        (origin, target)
        for origin in range(9)
        for target in range(9)
        if cells[origin] is side and cells[target] is None and is_adjacent(origin, target)
    }
    moves = all_valid_moves(state, side)
    assert {(m.origin, m.target) for m in moves} == expected
    assert len(moves) == len(expected)
    assert can_move(state, side) == bool(expected)
    assert all(m.target in ADJACENCY[m.origin] for m in moves)
