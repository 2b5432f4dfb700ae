from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from .board import (
    ADJACENCY,
    EMPTY_BOARD,
    NODE_COUNT,
    PIECES_PER_SIDE,
    WINNING_LINES,
    Board,
    GameMode,
    PerSide,
    Phase,
    PlayerType,
    Side,
    is_adjacent,
    is_node,
)

LOG = logging.getLogger(__name__)


class IllegalMoveError(ValueError):
    """Raised when a transition is requested that the rules do not allow."""


@dataclass(frozen=True)
class Placement:
    node: int

    def to_dict(self) -> Dict[str, object]:
        return {"type": "place", "node": self.node}


@dataclass(frozen=True)
class Relocation:
    origin: int
    target: int

    def to_dict(self) -> Dict[str, object]:
        return {"type": "move", "from": self.origin, "to": self.target}


Move = Union[Placement, Relocation]


@dataclass(frozen=True)
class HistoryEntry:
    side: Side
    move: Move

    def to_dict(self) -> Dict[str, object]:
        data = self.move.to_dict()
        data["player"] = self.side.value
        return data


def _human_pair() -> PerSide[PlayerType]:
    return PerSide(PlayerType.HUMAN, PlayerType.HUMAN)


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a game. Transitions always build a new instance."""

    board: Board = EMPTY_BOARD
    current_player: Side = Side.RED
    phase: Phase = Phase.PLACEMENT
    pieces_placed: PerSide[int] = field(default_factory=lambda: PerSide(0, 0))
    selected_node: Optional[int] = None
    winner: Optional[Side] = None
    mode: GameMode = GameMode.TWO_PLAYER
    player_types: PerSide[PlayerType] = field(default_factory=_human_pair)
    move_history: Tuple[HistoryEntry, ...] = ()

    def __post_init__(self) -> None:
        if len(self.board) != NODE_COUNT:
            raise ValueError(f"Board must have {NODE_COUNT} cells, got {len(self.board)}")
        # Accept any sequence for convenience but always store a tuple.
        if not isinstance(self.board, tuple):
            object.__setattr__(self, "board", tuple(self.board))
        if not isinstance(self.move_history, tuple):
            object.__setattr__(self, "move_history", tuple(self.move_history))


def new_game(mode: GameMode = GameMode.TWO_PLAYER, ai_starts: bool = False) -> GameState:
    """Fresh state for a new match. Red always opens; in VS_AI mode the AI
    takes Red when ``ai_starts`` is set, otherwise Blue."""

    if mode is GameMode.VS_AI:
        if ai_starts:
            player_types = PerSide(PlayerType.AI, PlayerType.HUMAN)
        else:
            player_types = PerSide(PlayerType.HUMAN, PlayerType.AI)
    else:
        player_types = _human_pair()
    return GameState(mode=mode, player_types=player_types)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def is_valid_placement(state: GameState, node: int) -> bool:
    return (
        is_node(node)
        and state.phase is Phase.PLACEMENT
        and state.board[node] is None
        and state.pieces_placed[state.current_player] < PIECES_PER_SIDE
    )


def is_valid_move(state: GameState, origin: int, target: int) -> bool:
    return (
        is_node(origin)
        and is_node(target)
        and state.board[origin] is state.current_player
        and state.board[target] is None
        and is_adjacent(origin, target)
    )


def check_winner(board: Board) -> Optional[Side]:
    for a, b, c in WINNING_LINES:
        if board[a] is not None and board[a] is board[b] is board[c]:
            return board[a]
    return None


def valid_moves_from(state: GameState, node: int) -> FrozenSet[int]:
    if not is_node(node) or state.board[node] is not state.current_player:
        return frozenset()
    return frozenset(adj for adj in ADJACENCY[node] if state.board[adj] is None)


def all_valid_moves(state: GameState, side: Side) -> List[Relocation]:
    # Board-index order, then neighbour order. The search relies on it for ties.
    moves: List[Relocation] = []
    for origin, occupant in enumerate(state.board):
        if occupant is not side:
            continue
        for target in ADJACENCY[origin]:
            if state.board[target] is None:
                moves.append(Relocation(origin, target))
    return moves


def can_move(state: GameState, side: Side) -> bool:
    return bool(all_valid_moves(state, side))


def legal_placements(state: GameState, side: Side) -> List[Placement]:
    if state.pieces_placed[side] >= PIECES_PER_SIDE:
        return []
    return [Placement(node) for node, occupant in enumerate(state.board) if occupant is None]


# ---------------------------------------------------------------------------
# Transition effects shared by the engine and the search
# ---------------------------------------------------------------------------


def placed(state: GameState, node: int, side: Side) -> GameState:
    """Board and counter effects of ``side`` placing on ``node``.

    Switches to the movement phase once both sides have placed every piece and
    hands the turn to the opponent. No history, no winner check.
    """

    board = list(state.board)
    board[node] = side
    counts = state.pieces_placed.with_value(side, state.pieces_placed[side] + 1)
    phase = state.phase
    if counts.red == PIECES_PER_SIDE and counts.blue == PIECES_PER_SIDE:
        phase = Phase.MOVEMENT
    return replace(
        state,
        board=tuple(board),
        pieces_placed=counts,
        phase=phase,
        current_player=side.opponent,
    )


def relocated(state: GameState, origin: int, target: int, side: Side) -> GameState:
    """Board effects of ``side`` sliding a piece from ``origin`` to ``target``."""

    board = list(state.board)
    board[origin] = None
    board[target] = side
    return replace(state, board=tuple(board), selected_node=None, current_player=side.opponent)


def _finish(state: GameState, mover: Side, entry: HistoryEntry) -> GameState:
    state = replace(state, move_history=state.move_history + (entry,))
    winner = check_winner(state.board)
    if winner is not None:
        # The turn is not handed over once the game is decided.
        return replace(state, winner=winner, phase=Phase.GAME_OVER, current_player=mover)
    return state


# ---------------------------------------------------------------------------
# Engine transitions
# ---------------------------------------------------------------------------


def place_piece(state: GameState, node: int) -> GameState:
    if not is_valid_placement(state, node):
        raise IllegalMoveError(f"Illegal placement: {node}")
    mover = state.current_player
    after = placed(state, node, mover)
    return _finish(after, mover, HistoryEntry(mover, Placement(node)))


def move_piece(state: GameState, origin: int, target: int) -> GameState:
    if state.phase is not Phase.MOVEMENT or not is_valid_move(state, origin, target):
        raise IllegalMoveError(f"Illegal move: {origin}->{target}")
    mover = state.current_player
    after = relocated(state, origin, target, mover)
    return _finish(after, mover, HistoryEntry(mover, Relocation(origin, target)))


def apply_move(state: GameState, move: Move) -> GameState:
    if isinstance(move, Placement):
        return place_piece(state, move.node)
    return move_piece(state, move.origin, move.target)


def select_node(state: GameState, node: int) -> GameState:
    """Pick up one of the mover's own pieces, or drop the current selection."""

    if state.phase is Phase.MOVEMENT and is_node(node) and state.board[node] is state.current_player:
        return replace(state, selected_node=node)
    return replace(state, selected_node=None)


def replay(
    history: Iterable[HistoryEntry],
    mode: GameMode = GameMode.TWO_PLAYER,
    player_types: Optional[PerSide[PlayerType]] = None,
) -> GameState:
    """Rebuild a state by applying ``history`` to a fresh game."""

    state = GameState(mode=mode, player_types=player_types or _human_pair())
    for entry in history:
        if entry.side is not state.current_player:
            raise IllegalMoveError(f"History out of turn at {entry.to_dict()}")
        state = apply_move(state, entry.move)
    return state


def undo(state: GameState, steps: int = 1) -> GameState:
    if steps < 1:
        raise ValueError("steps must be positive")
    if steps > len(state.move_history):
        raise IllegalMoveError("Nothing to undo")
    return replay(state.move_history[:-steps], state.mode, state.player_types)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class Game:
    """Holds the current state of one match and gates human input.

    The wrapped :class:`GameState` is immutable; every accepted action swaps
    in the successor state.
    """

    def __init__(self, mode: GameMode = GameMode.TWO_PLAYER, ai_starts: bool = False) -> None:
        self.state = new_game(mode, ai_starts)

    def reset(self, mode: GameMode = GameMode.TWO_PLAYER, ai_starts: bool = False) -> None:
        self.state = new_game(mode, ai_starts)
        LOG.info("New %s game (ai_starts=%s)", mode.value, ai_starts)

    def is_game_over(self) -> bool:
        return self.state.phase is Phase.GAME_OVER

    def ai_to_move(self) -> bool:
        return not self.is_game_over() and self.state.player_types[self.state.current_player] is PlayerType.AI

    def is_blocked(self) -> bool:
        state = self.state
        return state.phase is Phase.MOVEMENT and not can_move(state, state.current_player)

    def _guard_human(self, phase: Phase) -> None:
        if self.is_game_over():
            raise IllegalMoveError("Game is over")
        if self.ai_to_move():
            raise IllegalMoveError("Not your turn")
        if self.state.phase is not phase:
            raise IllegalMoveError(f"Not allowed during {self.state.phase.value} phase")

    def place(self, node: int) -> None:
        self._guard_human(Phase.PLACEMENT)
        self.state = place_piece(self.state, node)

    def select(self, node: int) -> FrozenSet[int]:
        self._guard_human(Phase.MOVEMENT)
        self.state = select_node(self.state, node)
        if self.state.selected_node is None:
            return frozenset()
        return valid_moves_from(self.state, self.state.selected_node)

    def move(self, origin: int, target: int) -> None:
        self._guard_human(Phase.MOVEMENT)
        self.state = move_piece(self.state, origin, target)

    def apply(self, move: Move) -> None:
        if self.is_game_over():
            raise IllegalMoveError("Game is over")
        self.state = apply_move(self.state, move)

    def undo(self, steps: int = 1) -> None:
        self.state = undo(self.state, steps)

    def legal_moves(self) -> List[Move]:
        state = self.state
        if state.phase is Phase.PLACEMENT:
            return list(legal_placements(state, state.current_player))
        if state.phase is Phase.MOVEMENT:
            return list(all_valid_moves(state, state.current_player))
        return []

    def snapshot(self) -> Dict[str, object]:
        state = self.state
        targets: List[int] = []
        if state.selected_node is not None:
            targets = sorted(valid_moves_from(state, state.selected_node))

        return {
            "board": [cell.value if cell is not None else None for cell in state.board],
            "turn": state.current_player.value,
            "phase": state.phase.value,
            "pieces_placed": state.pieces_placed.to_dict(),
            "selected_node": state.selected_node,
            "valid_targets": targets,
            "legal_moves": [move.to_dict() for move in self.legal_moves()],
            "game_over": self.is_game_over(),
            "winner": state.winner.value if state.winner is not None else None,
            "blocked": self.is_blocked(),
            "mode": state.mode.value,
            "player_types": {side: kind.value for side, kind in state.player_types.to_dict().items()},
            "history": [entry.to_dict() for entry in state.move_history],
        }
