"""Falling-block puzzle: board, pieces, 7-bag randomizer, gravity and scoring."""

from __future__ import annotations

import random
from collections.abc import Sequence

COLS = 10
ROWS = 20

INITIAL_DROP_MS = 1500
MIN_DROP_MS = 400
DROP_MS_STEP = 150
LINES_PER_LEVEL = 10

# Points for clearing 1, 2, 3 and 4 lines at once, multiplied by the level.
LINE_POINTS = (100, 300, 500, 800)

# Rotation attempts: in place, then left/right/up, then two left/right.
WALL_KICKS = ((0, 0), (-1, 0), (1, 0), (0, -1), (-2, 0), (2, 0))

Shape = tuple[tuple[int, ...], ...]

# Pieces 1-7: I, O, T, S, Z, J, L, each as a square bounding box.
PIECES: tuple[Shape, ...] = (
    ((0, 0, 0, 0), (1, 1, 1, 1), (0, 0, 0, 0), (0, 0, 0, 0)),
    ((1, 1), (1, 1)),
    ((0, 1, 0), (1, 1, 1), (0, 0, 0)),
    ((0, 1, 1), (1, 1, 0), (0, 0, 0)),
    ((1, 1, 0), (0, 1, 1), (0, 0, 0)),
    ((1, 0, 0), (1, 1, 1), (0, 0, 0)),
    ((0, 0, 1), (1, 1, 1), (0, 0, 0)),
)
PIECE_COUNT = len(PIECES)


def rotate_cw(shape: Sequence[Sequence[int]]) -> Shape:
    """Rotate a square shape a quarter turn clockwise."""
    return tuple(tuple(row) for row in zip(*reversed(shape)))


def rotate_ccw(shape: Sequence[Sequence[int]]) -> Shape:
    """Rotate a square shape a quarter turn counter-clockwise."""
    return tuple(tuple(row) for row in reversed(list(zip(*shape))))


class Tetris:
    """Game state of one round, driven by button actions and a millisecond clock."""

    def __init__(self, rng: random.Random | None = None, now: int = 0) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.board: list[list[int]] = []
        self.score = 0
        self.level = 1
        self.lines = 0
        self.game_over = False
        self.paused = False
        self.drop_ms = INITIAL_DROP_MS
        self.last_tick = now
        self.needs_full_refresh = True
        self.shape: Shape = ()
        self.piece_type = 0
        self.piece_x = 0
        self.piece_y = 0
        self.next_type = 0
        self.held_type = 0
        self.can_hold = True
        self._bag: list[int] = []
        self.reset(now)

    @property
    def active(self) -> bool:
        return not self.paused and not self.game_over

    def reset(self, now: int) -> None:
        """Start a fresh game with an empty board and a new bag."""
        self.board = [[0] * COLS for _ in range(ROWS)]
        self.score = 0
        self.level = 1
        self.lines = 0
        self.game_over = False
        self.paused = False
        self.drop_ms = INITIAL_DROP_MS
        self.held_type = 0
        self._bag = []
        self.needs_full_refresh = True
        self.next_type = self.next_from_bag()
        self.spawn_piece(self.next_from_bag())
        self.last_tick = now

    def fits(self, shape: Sequence[Sequence[int]], px: int, py: int) -> bool:
        """Whether the shape placed at (px, py) stays in bounds and off locked cells."""
        for r, row in enumerate(shape):
            for c, cell in enumerate(row):
                if not cell:
                    continue
                bx = px + c
                by = py + r
                if bx < 0 or bx >= COLS or by >= ROWS:
                    return False
                if by >= 0 and self.board[by][bx]:
                    return False
        return True

    def lock_piece(self) -> None:
        """Copy the current piece into the board."""
        for r, row in enumerate(self.shape):
            for c, cell in enumerate(row):
                if not cell:
                    continue
                bx = self.piece_x + c
                by = self.piece_y + r
                if 0 <= by < ROWS and 0 <= bx < COLS:
                    self.board[by][bx] = self.piece_type

    def clear_full_lines(self) -> int:
        """Remove full rows, shifting the rest down; return how many went."""
        kept = [row for row in self.board if not all(row)]
        cleared = ROWS - len(kept)
        self.board = [[0] * COLS for _ in range(cleared)] + kept
        return cleared

    def next_from_bag(self) -> int:
        """Draw the next piece type from a shuffled bag of all seven."""
        if not self._bag:
            bag = list(range(1, PIECE_COUNT + 1))
            self.rng.shuffle(bag)
            self._bag = bag
        return self._bag.pop(0)

    def spawn_piece(self, piece_type: int) -> None:
        """Place a new piece at the top; end the game if it does not fit."""
        if not 1 <= piece_type <= PIECE_COUNT:
            raise ValueError(f"piece type must be 1..{PIECE_COUNT}, got {piece_type}")
        self.piece_type = piece_type
        self.shape = PIECES[piece_type - 1]
        self.piece_x = (COLS - len(self.shape)) // 2
        self.piece_y = 0
        self.can_hold = True
        if not self.fits(self.shape, self.piece_x, self.piece_y):
            self.game_over = True
            self.needs_full_refresh = True

    def ghost_y(self) -> int:
        """Row where the current piece would land."""
        gy = self.piece_y
        while self.fits(self.shape, self.piece_x, gy + 1):
            gy += 1
        return gy

    def try_rotate(self, clockwise: bool) -> bool:
        """Rotate the current piece, trying wall kicks; report success."""
        rotated = rotate_cw(self.shape) if clockwise else rotate_ccw(self.shape)
        for dx, dy in WALL_KICKS:
            if self.fits(rotated, self.piece_x + dx, self.piece_y + dy):
                self.shape = rotated
                self.piece_x += dx
                self.piece_y += dy
                return True
        return False

    def _settle(self) -> int:
        self.lock_piece()
        cleared = self.clear_full_lines()
        if cleared:
            self.lines += cleared
            self.score += LINE_POINTS[min(cleared, 4) - 1] * self.level
            self.level = self.lines // LINES_PER_LEVEL + 1
            self.drop_ms = max(MIN_DROP_MS, INITIAL_DROP_MS - (self.level - 1) * DROP_MS_STEP)
        self.spawn_piece(self.next_type)
        self.next_type = self.next_from_bag()
        return cleared

    def hard_drop(self, now: int) -> None:
        """Drop the piece to its landing row at once, scoring two per row."""
        if not self.active:
            return
        gy = self.ghost_y()
        self.score += (gy - self.piece_y) * 2
        self.piece_y = gy
        self._settle()
        self.last_tick = now

    def hold_piece(self) -> bool:
        """Swap the current piece with the held one; report whether it happened."""
        if not self.active or not self.can_hold:
            return False
        self.can_hold = False
        previous = self.held_type
        self.held_type = self.piece_type
        if previous == 0:
            self.spawn_piece(self.next_type)
            self.next_type = self.next_from_bag()
        else:
            self.spawn_piece(previous)
        return True

    def _shift(self, dx: int) -> bool:
        if not self.active or not self.fits(self.shape, self.piece_x + dx, self.piece_y):
            return False
        self.piece_x += dx
        return True

    def move_left(self) -> bool:
        return self._shift(-1)

    def move_right(self) -> bool:
        return self._shift(1)

    def tick(self, now: int) -> bool:
        """Apply gravity if the drop interval has passed; report whether it did."""
        if not self.active or now - self.last_tick < self.drop_ms:
            return False
        self.last_tick = now
        if self.fits(self.shape, self.piece_x, self.piece_y + 1):
            self.piece_y += 1
        else:
            self._settle()
        return True

    def toggle_pause(self, now: int) -> bool:
        """Pause or resume; ignored once the game is over."""
        if self.game_over:
            return False
        self.paused = not self.paused
        if not self.paused:
            self.last_tick = now
        self.needs_full_refresh = True
        return True

    def prevent_auto_sleep(self) -> bool:
        return self.active