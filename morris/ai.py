from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .board import Phase, Side
from .evaluator import Evaluator
from .game import (
    GameState,
    Move,
    all_valid_moves,
    check_winner,
    legal_placements,
    placed,
    relocated,
)

LOG = logging.getLogger(__name__)

SEARCH_DEPTH = 6
WIN_SCORE = 100
STUCK_SCORE = 50
INF = 10**9


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: int
    nodes: int
    scored_moves: Optional[List[Tuple[Move, int]]] = None


class AIPlayer:
    """Depth-limited minimax with alpha-beta pruning.

    The AI always plays the side to move in the state it is handed. Plies are
    counted across both phases; the opponent's first reply is ply 1.
    """

    depth = SEARCH_DEPTH

    def choose_move(self, state: GameState) -> Optional[Move]:
        """Best move for ``state.current_player``, or ``None`` if it has none."""

        result = self.search(state)
        return result.best_move

    def search(self, state: GameState) -> SearchResult:
        ai_side = state.current_player
        if state.phase is Phase.GAME_OVER:
            return SearchResult(best_move=None, score=0, nodes=0, scored_moves=[])

        result = self._alphabeta_root(state, ai_side)
        LOG.debug(
            "%s search visited %d nodes; best %s scored %d",
            ai_side.value,
            result.nodes,
            result.best_move,
            result.score,
        )
        return result

    def _alphabeta_root(self, state: GameState, ai_side: Side) -> SearchResult:
        best_score = -INF
        best_move: Optional[Move] = None
        nodes = 0
        scored_moves: List[Tuple[Move, int]] = []

        for move, child in self._successors(state, ai_side):
            score, sub_nodes = self._alphabeta(child, 1, -INF, INF, False, ai_side)
            nodes += sub_nodes + 1
            scored_moves.append((move, score))
            # Strict comparison keeps the first candidate on ties.
            if best_move is None or score > best_score:
                best_score = score
                best_move = move

        if best_move is None:
            best_score = -STUCK_SCORE if state.phase is Phase.MOVEMENT else Evaluator.evaluate(state.board, ai_side)

        return SearchResult(best_move=best_move, score=best_score, nodes=nodes, scored_moves=scored_moves)

    def _alphabeta(
        self,
        state: GameState,
        depth: int,
        alpha: int,
        beta: int,
        maximizing: bool,
        ai_side: Side,
    ) -> Tuple[int, int]:
        winner = check_winner(state.board)
        if winner is ai_side:
            return WIN_SCORE - depth, 1
        if winner is not None:
            return depth - WIN_SCORE, 1

        if depth >= self.depth:
            return Evaluator.evaluate(state.board, ai_side), 1

        mover = ai_side if maximizing else ai_side.opponent
        children = self._successors(state, mover)
        if not children:
            if state.phase is Phase.MOVEMENT:
                # Stuck side: treated as a loss for whoever cannot move.
                return (-STUCK_SCORE if maximizing else STUCK_SCORE), 1
            return Evaluator.evaluate(state.board, ai_side), 1

        nodes = 0
        if maximizing:
            value = -INF
            for _, child in children:
                score, child_nodes = self._alphabeta(child, depth + 1, alpha, beta, False, ai_side)
                nodes += child_nodes + 1
                value = max(value, score)
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
            return value, nodes
        else:
            value = INF
            for _, child in children:
                score, child_nodes = self._alphabeta(child, depth + 1, alpha, beta, True, ai_side)
                nodes += child_nodes + 1
                value = min(value, score)
                beta = min(beta, value)
                if beta <= alpha:
                    break
            return value, nodes

    @staticmethod
    def _successors(state: GameState, mover: Side) -> List[Tuple[Move, GameState]]:
        if state.phase is Phase.PLACEMENT:
            return [(move, placed(state, move.node, mover)) for move in legal_placements(state, mover)]
        if state.phase is Phase.MOVEMENT:
            return [
                (move, relocated(state, move.origin, move.target, mover))
                for move in all_valid_moves(state, mover)
            ]
        return []


def choose_move(state: GameState) -> Optional[Move]:
    return AIPlayer().choose_move(state)


__all__ = ["AIPlayer", "SearchResult", "SEARCH_DEPTH", "choose_move"]
