"""The 2048 sliding-tile puzzle."""

from __future__ import annotations

import enum
import random

SIZE = 4
WINNING_TILE = 2048


class Move(enum.IntEnum):
    """A move direction, valued by the clockwise turns that bring it to 'left'."""

    LEFT = 0
    DOWN = 1
    RIGHT = 2
    UP = 3


class Game2048:
    """A 4x4 board of tiles with score and win/loss state."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.board: list[list[int]] = [[0] * SIZE for _ in range(SIZE)]
        self.score = 0
        self.won = False
        self.game_over = False
        self.reset()

    def reset(self) -> None:
        """Start a new game with two random tiles."""
        self.board = [[0] * SIZE for _ in range(SIZE)]
        self.score = 0
        self.won = False
        self.game_over = False
        self.add_random_tile()
        self.add_random_tile()

    def add_random_tile(self) -> tuple[int, int] | None:
        """Put a 2 (90%) or 4 (10%) on a random empty cell; return where."""
        empty = [(r, c) for r, row in enumerate(self.board) for c, value in enumerate(row) if value == 0]
        if not empty:
            return None
        r, c = empty[self.rng.randrange(len(empty))]
        self.board[r][c] = 2 if self.rng.randrange(10) < 9 else 4
        return r, c

    def slide_left(self) -> bool:
        """Slide and merge every row to the left; report whether tiles moved."""
        moved = False
        for row in self.board:
            target = 0
            last_value = 0
            for c, value in enumerate(row):
                if value == 0:
                    continue
                row[c] = 0
                if last_value == value:
                    row[target - 1] = value * 2
                    self.score += value * 2
                    if value * 2 >= WINNING_TILE:
                        self.won = True
                    last_value = 0
                    moved = True
                else:
                    last_value = value
                    if row[target] != value:
                        moved = True
                    row[target] = value
                    target += 1
        return moved

    def rotate_clockwise(self) -> None:
        self.board = [list(row) for row in zip(*reversed(self.board))]

    def apply_move(self, turns_to_left: int) -> bool:
        """Rotate, slide left, and rotate back."""
        for _ in range(turns_to_left):
            self.rotate_clockwise()
        moved = self.slide_left()
        for _ in range((4 - turns_to_left) % 4):
            self.rotate_clockwise()
        return moved

    def has_moves(self) -> bool:
        for r, row in enumerate(self.board):
            for c, value in enumerate(row):
                if value == 0:
                    return True
                if r + 1 < SIZE and value == self.board[r + 1][c]:
                    return True
                if c + 1 < SIZE and value == row[c + 1]:
                    return True
        return False

    def move(self, direction: Move) -> bool:
        """Play one move; ignored once the game is won or lost."""
        if self.game_over or self.won:
            return False
        moved = self.apply_move(Move(direction).value)
        if moved:
            self.add_random_tile()
            self.game_over = not self.has_moves()
        return moved