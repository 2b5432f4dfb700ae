"""Static board topology and the closed enumerations of the game."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class Side(str, Enum):
    RED = "red"
    BLUE = "blue"

    @property
    def opponent(self) -> "Side":
        return Side.BLUE if self is Side.RED else Side.RED


class Phase(str, Enum):
    PLACEMENT = "placement"
    MOVEMENT = "movement"
    GAME_OVER = "game_over"


class PlayerType(str, Enum):
    HUMAN = "human"
    AI = "ai"


class GameMode(str, Enum):
    TWO_PLAYER = "two_player"
    VS_AI = "vs_ai"


NODE_COUNT = 9
PIECES_PER_SIDE = 3

Cell = Optional[Side]
Board = Tuple[Cell, ...]

EMPTY_BOARD: Board = (None,) * NODE_COUNT

# Neighbour order matters: move enumeration follows it.
# fmt: off
ADJACENCY: Dict[int, Tuple[int, ...]] = {
    0: (1, 3, 4),
    1: (0, 2, 4),
    2: (1, 4, 5),
    3: (0, 4, 6),
    4: (0, 1, 2, 3, 5, 6, 7, 8),
    5: (2, 4, 8),
    6: (3, 4, 7),
    7: (4, 6, 8),
    8: (4, 5, 7),
}

WINNING_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)
# fmt: on


def is_node(node: object) -> bool:
    return isinstance(node, int) and not isinstance(node, bool) and 0 <= node < NODE_COUNT


def is_adjacent(origin: int, target: int) -> bool:
    return target in ADJACENCY.get(origin, ())


@dataclass(frozen=True)
class PerSide(Generic[T]):
    """A pair of values keyed by :class:`Side`."""

    red: T
    blue: T

    def __getitem__(self, side: Side) -> T:
        return self.red if side is Side.RED else self.blue

    def with_value(self, side: Side, value: T) -> "PerSide[T]":
        if side is Side.RED:
            return replace(self, red=value)
        return replace(self, blue=value)

    def to_dict(self) -> Dict[str, T]:
        return {Side.RED.value: self.red, Side.BLUE.value: self.blue}
