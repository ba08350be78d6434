# inkgames

Game logic for small e-paper devices. It needs only the standard library.

- **Deep Mines** is the core of a roguelike. It provides a deterministic
  dungeon generator, player state with a message log and a save file,
  per-level save files, and a layout helper that works out what each screen
  cell shows.
- **Tetris** has a 10×20 board, a 7-bag randomizer, wall kicks, a hold slot,
  hard drop, gravity and level-based speed.
- **2048** is the 4×4 sliding-tile puzzle.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Core types (`inkgames.types`)

- Map constants: `MAP_WIDTH` (80), `MAP_HEIGHT` (50), `MAP_SIZE`, `FOG_SIZE`,
  `MAX_MONSTERS`, `MAX_ITEMS_PER_LEVEL`, `MAX_INVENTORY`, `MAX_MESSAGES` and
  `MAX_DEPTH` (26).
- Enums: `Tile`, `MonsterState`, `ItemType`, `ItemFlag` and `Direction`.
- Records: `Player`, `Monster` and `Item`. Each is a dataclass with
  `to_bytes()` and `from_bytes(data)` for its fixed-size little-endian
  record, and a `SIZE` class attribute. A value that does not fit its field
  raises `SaveFormatError`, and so does data of the wrong length.
- Definition tables: `MONSTER_DEFS` (tuples of `MonsterDef`, with the boss at
  `BOSS_MONSTER_TYPE`) and `ITEM_DEFS` (tuples of `ItemDef`, with the quest
  ring at `RING_OF_POWER_DEF`).
- `Rng` is a 32-bit xorshift generator with `next()`, `next_range(maximum)`
  and `next_range_inclusive(minimum, maximum)`. A seed of 0 becomes 1.
- Helpers: `tile_glyph`, `item_glyph`, `new_fog`, `fog_is_explored`,
  `fog_set_explored`, `xp_for_level` and `level_seed`.

## Dungeon generation (`inkgames.dungeon`)

`generate(game_seed, depth)` returns a `DungeonLevel`. The same seed and
depth always give the same level.

```python
from inkgames.dungeon import generate

level = generate(12345, 1)
x, y = level.stairs_down
print(level.tile_at(x, y))        # Tile.STAIRS_DOWN
print(len(level.monsters), len(level.items))
```

A level is built in these steps:

1. Rooms are made by binary space partitioning.
2. Rooms are joined with L-shaped corridors.
3. Doors are placed on some narrow corridor cells.
4. Rubble is scattered.
5. Up and down stairs are placed.
6. Monsters are chosen from those allowed at the depth.
7. Items are placed. Gold counts and enchantments depend on the depth.

On depth `MAX_DEPTH` the hostile boss is added near the down stairs.
`tile_at` raises `IndexError` outside the map. `generate` raises
`ValueError` for a depth outside 0..255.

## Game state (`inkgames.state`)

```python
from inkgames.state import GameState

state = GameState(save_dir="saves")
state.new_game(seed=42)
state.add_message("You hear a distant rumble.")
print(state.get_message(0))   # newest message; "" if there is none
state.save_to_file()          # writes saves/save.bin
state.load_from_file()        # True if a save file was read
```

`GameState` holds the `player`, the `inventory` and a message log that keeps
the last `MAX_MESSAGES` messages. The log is available as `messages`, oldest
first, and as `message_count`. `has_save_file()` and `delete_save_file()`
manage the save file. Without `save_dir`, files go to
`~/.crosspoint/game`. A save file with a newer version, or a truncated one,
raises `SaveFormatError`.

## Level saves (`inkgames.save`)

`LevelStore(save_dir)` keeps one file per depth, named `level_NN.bin`. Each
file holds that level's fog-of-war bitmap, its monsters and its items.

```python
from inkgames.save import LevelStore
from inkgames.types import new_fog

store = LevelStore("saves")
store.save_level(1, new_fog(), level.monsters, level.items)
saved = store.load_level(1)   # a SavedLevel, or None if never saved
```

The store also offers `level_path`, `has_level`, `delete_level` and
`delete_all`. `delete_all` removes `save.bin` together with every level
file.

## Screen layout (`inkgames.renderer`)

`GameRenderer(screen_width=480, screen_height=800)` draws nothing itself. It
works out:

- the grid size of the view and the rows of the separators (`separator_ys`)
- `view_origin(player_x, player_y)`: the top-left map cell of the view,
  centred on the player and clamped to the map
- `cells(state, tiles, fog, monsters, items, visible)`: each seen or
  remembered `Cell`, with its screen position and glyph; `Cell.remembered`
  marks cells that are explored but out of sight
- `status_texts(player)`, `message_lines(state)` and `hint_labels()`

## Tetris (`inkgames.tetris`)

```python
from inkgames.tetris import Tetris

game = Tetris(now=0)
game.move_left()
game.try_rotate(clockwise=True)
game.hold_piece()
game.hard_drop(now=100)
game.tick(now=1600)        # one gravity step once drop_ms has passed
game.toggle_pause(now=2000)
```

Scoring works as follows:

- A hard drop earns 2 points per row fallen.
- Clearing 1 to 4 lines at once earns 100, 300, 500 or 800 points, times the
  current level.
- The level rises every 10 lines.
- The drop interval starts at 1500 ms and shrinks by 150 ms per level, to no
  less than 400 ms.

The game ends when a new piece does not fit, and `game_over` is then set.
The module also exports `rotate_cw` and `rotate_ccw` for square shapes.

## 2048 (`inkgames.game2048`)

```python
from inkgames.game2048 import Game2048, Move

game = Game2048()
game.move(Move.LEFT)       # True if any tile moved
print(game.board, game.score, game.won, game.game_over)
```

Each move that changes the board adds a 2 (90%) or a 4 (10%). The game is won
when a tile reaches 2048. After it is won or lost, `move` is ignored until
`reset()` is called.

## What this package does not do

This package holds game logic only:

- It has no command, no display output and no button handling. Your own
  program must draw what `GameRenderer` lays out and call the game methods
  in response to input.
- The dungeon side covers generation, state, saving and layout. It has no
  player movement, combat, monster behaviour or field-of-view calculation.
  The `visible` map passed to `GameRenderer.cells` has to come from the
  caller.