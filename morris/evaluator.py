from __future__ import annotations

from typing import Dict, Tuple

from .board import WINNING_LINES, Board, Side


class Evaluator:
    """Static evaluation of a board from one side's point of view.

    Only open lines count: a line holding pieces of both sides is blocked and
    scores nothing.
    """

    # (own pieces, opponent pieces) -> score
    LINE_SCORES: Dict[Tuple[int, int], int] = {
        (2, 0): 10,
        (0, 2): -10,
        (1, 0): 2,
        (0, 1): -2,
    }

    @classmethod
    def evaluate(cls, board: Board, side: Side) -> int:
        opponent = side.opponent
        score = 0
        for line in WINNING_LINES:
            own = sum(1 for node in line if board[node] is side)
            theirs = sum(1 for node in line if board[node] is opponent)
            score += cls.LINE_SCORES.get((own, theirs), 0)
        return score
