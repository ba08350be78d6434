import pytest

from inkgames.renderer import CELL_H, CELL_W, HINTS_H, MESSAGE_H, STATUS_H, VIEWPORT_Y, Cell, GameRenderer
from inkgames.state import GameState
from inkgames.types import (
    MAP_HEIGHT,
    MAP_SIZE,
    MAP_WIDTH,
    MONSTER_DEFS,
    Item,
    ItemType,
    Monster,
    Player,
    Tile,
    fog_set_explored,
    new_fog,
    tile_glyph,
)


@pytest.fixture
def renderer():
    return GameRenderer()


@pytest.fixture
def state(tmp_path):
    game = GameState(tmp_path)
    game.new_game(1)
    game.player.x = 40
    game.player.y = 25
    return game


def floor_tiles():
    return [Tile.FLOOR] * MAP_SIZE


def all_visible():
    return [True] * MAP_SIZE


def cell_at(cells, x, y):
    return next(c for c in cells if (c.map_x, c.map_y) == (x, y))


def test_layout_regions_stack(renderer):
    assert renderer.hints_y == renderer.screen_h - HINTS_H
    assert renderer.message_y == renderer.hints_y - MESSAGE_H
    assert renderer.view_cols * CELL_W <= renderer.screen_w
    assert VIEWPORT_Y + renderer.view_rows * CELL_H <= renderer.viewport_end_y
    assert renderer.separator_ys[0] == STATUS_H


def test_grid_is_centred(renderer):
    leftover = renderer.screen_w - renderer.view_cols * CELL_W
    assert renderer.grid_offset_x * 2 in (leftover, leftover - 1)


def test_bad_screen_size_rejected():
    with pytest.raises(ValueError):
        GameRenderer(0, 800)
    with pytest.raises(ValueError):
        GameRenderer(480, 50)


def test_view_origin_clamped_at_corners(renderer):
    assert renderer.view_origin(0, 0) == (0, 0)
    vx, vy = renderer.view_origin(MAP_WIDTH - 1, MAP_HEIGHT - 1)
    assert vx + renderer.view_cols == MAP_WIDTH
    assert vy + renderer.view_rows == MAP_HEIGHT


def test_view_origin_centres_player(renderer):
    vx, vy = renderer.view_origin(40, 25)
    assert 40 - vx == renderer.view_cols // 2
    assert 25 - vy == renderer.view_rows // 2


def test_unseen_map_draws_nothing(renderer, state):
    cells = renderer.cells(state, floor_tiles(), new_fog(), [], [], [False] * MAP_SIZE)
    assert cells == []


def test_visible_view_fills_grid_with_player(renderer, state):
    cells = renderer.cells(state, floor_tiles(), new_fog(), [], [], all_visible())
    assert len(cells) == renderer.view_cols * renderer.view_rows
    assert cell_at(cells, 40, 25).glyph == "@"
    assert sum(c.glyph == "@" for c in cells) == 1
    first = cells[0]
    assert (first.screen_x, first.screen_y) == (renderer.grid_offset_x, VIEWPORT_Y)


def test_monsters_and_items_shown_when_visible(renderer, state):
    monsters = [Monster(x=41, y=25, type=0, hp=3), Monster(x=42, y=25, type=1, hp=0)]
    items = [Item(x=43, y=25, type=ItemType.GOLD), Item(x=41, y=25, type=ItemType.WEAPON)]
    cells = renderer.cells(state, floor_tiles(), new_fog(), monsters, items, all_visible())
    assert cell_at(cells, 41, 25).glyph == MONSTER_DEFS[0].glyph
    assert cell_at(cells, 42, 25).glyph == tile_glyph(Tile.FLOOR)
    assert cell_at(cells, 43, 25).glyph == "$"


def test_remembered_cells_hide_occupants(renderer, state):
    fog = new_fog()
    fog_set_explored(fog, 41, 25)
    monsters = [Monster(x=41, y=25, type=0, hp=3)]
    cells = renderer.cells(state, floor_tiles(), fog, monsters, [], [False] * MAP_SIZE)
    assert len(cells) == 1
    cell = cells[0]
    assert isinstance(cell, Cell)
    assert cell.glyph == tile_glyph(Tile.FLOOR)
    assert cell.remembered
    assert not cell.visible


def test_status_texts(renderer):
    player = Player(hp=7, max_hp=30, mp=2, max_mp=9, dungeon_depth=4, char_level=3)
    assert renderer.status_texts(player) == ("HP:7/30", "MP:2/9", "Dl:4", "Cl:3")


def test_message_lines_newest_at_bottom(renderer, state):
    state.add_message("The door creaks.")
    lines = renderer.message_lines(state)
    assert [text for _, text in lines] == ["You enter the Deep Mines...", "The door creaks."]
    assert lines[0][0] < lines[1][0]
    assert all(renderer.message_y <= y < renderer.hints_y for y, _ in lines)


def test_message_lines_single_message(renderer, state):
    lines = renderer.message_lines(state)
    assert [text for _, text in lines] == ["You enter the Deep Mines..."]


def test_hint_labels(renderer):
    hints = renderer.hint_labels()
    assert [text for _, _, text in hints] == ["Menu", "Action", "Left", "Right"]
    xs = [x for x, _, _ in hints]
    assert xs == sorted(xs)
    assert all(y > renderer.hints_y for _, y, _ in hints)