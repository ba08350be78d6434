"""Screen layout and cell contents for the dungeon view, status bar, messages and hints."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .state import GameState
from .types import (
    MAP_HEIGHT,
    MAP_WIDTH,
    MONSTER_DEFS,
    Item,
    Monster,
    Player,
    Tile,
    fog_is_explored,
    item_glyph,
    tile_glyph,
)

CELL_W = 14
CELL_H = 20

STATUS_Y = 2
STATUS_H = 26
VIEWPORT_Y = STATUS_H + 2
MESSAGE_H = 38
HINTS_H = 34

DEFAULT_SCREEN_WIDTH = 480
DEFAULT_SCREEN_HEIGHT = 800

_HINTS = ((8, "Menu"), (120, "Action"), (260, "Left"), (390, "Right"))


@dataclass(frozen=True)
class Cell:
    """One drawn grid cell: where it goes on screen and what it shows."""

    screen_x: int
    screen_y: int
    map_x: int
    map_y: int
    glyph: str
    visible: bool
    explored: bool

    @property
    def remembered(self) -> bool:
        """Explored but out of sight: drawn over a grey background."""
        return self.explored and not self.visible


class GameRenderer:
    """Lays out the game screen and works out what each part displays."""

    def __init__(self, screen_width: int = DEFAULT_SCREEN_WIDTH, screen_height: int = DEFAULT_SCREEN_HEIGHT) -> None:
        if screen_width <= 0 or screen_height <= 0:
            raise ValueError("screen dimensions must be positive")
        self.screen_w = screen_width
        self.screen_h = screen_height

        self.viewport_end_y = screen_height - MESSAGE_H - HINTS_H
        self.viewport_h = self.viewport_end_y - VIEWPORT_Y
        self.viewport_w = screen_width
        if self.viewport_h < CELL_H or self.viewport_w < CELL_W:
            raise ValueError("screen is too small for the dungeon view")

        self.view_cols = self.viewport_w // CELL_W
        self.view_rows = self.viewport_h // CELL_H
        self.grid_offset_x = (self.viewport_w - self.view_cols * CELL_W) // 2

        self.message_y = self.viewport_end_y
        self.hints_y = screen_height - HINTS_H

    @property
    def separator_ys(self) -> tuple[int, int, int]:
        """Rows of the horizontal separator lines."""
        return STATUS_H, self.viewport_end_y, self.hints_y

    def view_origin(self, player_x: int, player_y: int) -> tuple[int, int]:
        """Top-left map cell of the view, centred on the player and clamped to the map."""
        view_x = player_x - self.view_cols // 2
        view_y = player_y - self.view_rows // 2
        view_x = max(0, min(view_x, MAP_WIDTH - self.view_cols))
        view_y = max(0, min(view_y, MAP_HEIGHT - self.view_rows))
        return view_x, view_y

    def cells(
        self,
        state: GameState,
        tiles: Sequence[Tile],
        fog: bytes | bytearray,
        monsters: Iterable[Monster],
        items: Iterable[Item],
        visible: Sequence[bool],
    ) -> list[Cell]:
        """The cells of the view that are seen or remembered, row by row."""
        player = state.player
        monsters = list(monsters)
        items = list(items)
        view_x, view_y = self.view_origin(player.x, player.y)
        result: list[Cell] = []

        for row in range(self.view_rows):
            map_y = view_y + row
            if not 0 <= map_y < MAP_HEIGHT:
                continue
            screen_y = VIEWPORT_Y + row * CELL_H
            for col in range(self.view_cols):
                map_x = view_x + col
                if not 0 <= map_x < MAP_WIDTH:
                    continue
                index = map_y * MAP_WIDTH + map_x
                explored = fog_is_explored(fog, map_x, map_y)
                is_visible = bool(visible[index])
                if not explored and not is_visible:
                    continue

                base = tile_glyph(tiles[index])
                glyph = base
                if is_visible:
                    if (map_x, map_y) == (player.x, player.y):
                        glyph = "@"
                    else:
                        glyph = self._occupant_glyph(map_x, map_y, base, monsters, items)

                result.append(
                    Cell(
                        screen_x=self.grid_offset_x + col * CELL_W,
                        screen_y=screen_y,
                        map_x=map_x,
                        map_y=map_y,
                        glyph=glyph,
                        visible=is_visible,
                        explored=explored,
                    )
                )
        return result

    @staticmethod
    def _occupant_glyph(x: int, y: int, base: str, monsters: list[Monster], items: list[Item]) -> str:
        glyph = next(
            (MONSTER_DEFS[m.type].glyph for m in monsters if m.x == x and m.y == y and m.hp > 0),
            base,
        )
        if glyph == base:
            glyph = next((item_glyph(i.type) for i in items if i.x == x and i.y == y), glyph)
        return glyph

    def status_texts(self, player: Player) -> tuple[str, str, str, str]:
        """Hit points, mana, dungeon level and character level, as shown in the status bar."""
        return (
            f"HP:{player.hp}/{player.max_hp}",
            f"MP:{player.mp}/{player.max_mp}",
            f"Dl:{player.dungeon_depth}",
            f"Cl:{player.char_level}",
        )

    def message_lines(self, state: GameState) -> list[tuple[int, str]]:
        """The two newest messages with their screen rows, older one on top."""
        lines: list[tuple[int, str]] = []
        older = state.get_message(1)
        newest = state.get_message(0)
        if older:
            lines.append((self.message_y + 1, older))
        if newest:
            lines.append((self.message_y + 19, newest))
        return lines

    def hint_labels(self) -> list[tuple[int, int, str]]:
        """Labels of the four front buttons as (x, y, text)."""
        return [(x, self.hints_y + 6, label) for x, label in _HINTS]