"""Three Men's Morris rules engine and search AI.

Modules:
- board: Side/phase enumerations, adjacency graph and winning lines
- game: Immutable game state, rule transitions, undo by replay, and the session wrapper
- evaluator: Line-threat heuristic for non-terminal positions
- ai: Minimax with alpha-beta pruning to a fixed depth
"""

from .board import GameMode, Phase, PlayerType, Side
from .game import Game, GameState, IllegalMoveError, Placement, Relocation
from .ai import AIPlayer
from .evaluator import Evaluator

__all__ = [
    "AIPlayer",
    "Evaluator",
    "Game",
    "GameMode",
    "GameState",
    "IllegalMoveError",
    "Phase",
    "Placement",
    "PlayerType",
    "Relocation",
    "Side",
]
