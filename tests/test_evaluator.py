from __future__ import annotations

from hypothesis import given, strategies as st

from morris import Evaluator, Side
from morris.board import WINNING_LINES
from morris.game import check_winner

R, B, _ = Side.RED, Side.BLUE, None

boards = st.lists(st.sampled_from([None, Side.RED, Side.BLUE]), min_size=9, max_size=9).map(tuple)


def test_empty_board_is_neutral():
    assert Evaluator.evaluate((_,) * 9, Side.RED) == 0


def test_center_counts_four_open_lines():
    board = (_, _, _, _, R, _, _, _, _)
    assert Evaluator.evaluate(board, Side.RED) == 8
    assert Evaluator.evaluate(board, Side.BLUE) == -8


def test_corner_counts_three_open_lines():
    assert Evaluator.evaluate((R, _, _, _, _, _, _, _, _), Side.RED) == 6


def test_two_in_a_row_is_a_threat():
    # Row 0-1-2 is one move from winning; 0-3-6, 0-4-8 and 1-4-7 hold one piece.
    assert Evaluator.evaluate((R, R, _, _, _, _, _, _, _), Side.RED) == 16


def test_blocked_line_scores_nothing():
    # 0-1-2 is mixed; Red keeps 0-3-6 and 0-4-8, Blue keeps 1-4-7.
    assert Evaluator.evaluate((R, B, _, _, _, _, _, _, _), Side.RED) == 2


@given(boards)
def test_evaluation_is_antisymmetric(board):
    assert Evaluator.evaluate(board, Side.RED) == -Evaluator.evaluate(board, Side.BLUE)


@given(boards)
def test_check_winner_matches_line_scan(board):
    owners = {board[a] for a, b, c in WINNING_LINES if board[a] is not None and board[a] == board[b] == board[c]}
    winner = check_winner(board)
    if owners:
        assert winner in owners
    else:
        assert winner is None
