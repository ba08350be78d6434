"""Seeded dungeon level generation: BSP rooms, corridors, doors, stairs, monsters and items."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .types import (
    BOSS_MONSTER_TYPE,
    ITEM_DEF_COUNT,
    ITEM_DEFS,
    MAP_HEIGHT,
    MAP_SIZE,
    MAP_WIDTH,
    MAX_DEPTH,
    MAX_ITEMS_PER_LEVEL,
    MAX_MONSTERS,
    MONSTER_DEFS,
    Item,
    ItemType,
    Monster,
    MonsterState,
    Rng,
    Tile,
    level_seed,
)

log = logging.getLogger(__name__)

MAX_BSP_NODES = 63
MAX_SPLIT_DEPTH = 5
MIN_PARTITION_SIZE = 8
MIN_ROOM_SIZE = 3
ROOM_PADDING = 1
MAX_ROOM_WIDTH = 12
MAX_ROOM_HEIGHT = 8
FLOOR_SEARCH_ATTEMPTS = 200
BOSS_SEARCH_ATTEMPTS = 50

_WALKABLE = frozenset({Tile.FLOOR, Tile.DOOR_CLOSED, Tile.DOOR_OPEN, Tile.STAIRS_UP, Tile.STAIRS_DOWN})

Point = tuple[int, int]


@dataclass
class DungeonLevel:
    """One generated level: the tile grid, stairs, monsters and items."""

    depth: int
    tiles: list[Tile]
    stairs_up: Point
    stairs_down: Point
    monsters: list[Monster] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)

    def tile_at(self, x: int, y: int) -> Tile:
        if not _in_bounds(x, y):
            raise IndexError(f"({x}, {y}) is outside the map")
        return self.tiles[y * MAP_WIDTH + x]


@dataclass
class _BspNode:
    x: int
    y: int
    w: int
    h: int
    room_x: int = 0
    room_y: int = 0
    room_w: int = 0
    room_h: int = 0
    left: int = -1
    right: int = -1

    @property
    def is_leaf(self) -> bool:
        return self.left == -1 and self.right == -1


class _BspTree:
    def __init__(self) -> None:
        self.nodes: list[_BspNode] = []

    def add_node(self, x: int, y: int, w: int, h: int) -> int:
        if len(self.nodes) >= MAX_BSP_NODES:
            return -1
        self.nodes.append(_BspNode(x, y, w, h))
        return len(self.nodes) - 1


def _in_bounds(x: int, y: int) -> bool:
    return 0 <= x < MAP_WIDTH and 0 <= y < MAP_HEIGHT


def _set(tiles: list[Tile], x: int, y: int, tile: Tile) -> None:
    tiles[y * MAP_WIDTH + x] = tile


def _get(tiles: list[Tile], x: int, y: int) -> Tile:
    return tiles[y * MAP_WIDTH + x]


def _is_floor(tiles: list[Tile], x: int, y: int) -> bool:
    return _in_bounds(x, y) and _get(tiles, x, y) in _WALKABLE


def _split(tree: _BspTree, index: int, rng: Rng, depth: int) -> None:
    node = tree.nodes[index]
    if depth >= MAX_SPLIT_DEPTH:
        return
    if node.w < MIN_PARTITION_SIZE * 2 and node.h < MIN_PARTITION_SIZE * 2:
        return
    if len(tree.nodes) >= MAX_BSP_NODES - 2:
        return

    if node.w < MIN_PARTITION_SIZE * 2:
        split_h = True
    elif node.h < MIN_PARTITION_SIZE * 2:
        split_h = False
    else:
        split_h = rng.next() % 2 == 0

    if split_h:
        max_split = node.h - MIN_PARTITION_SIZE
        if MIN_PARTITION_SIZE >= max_split:
            return
        split = rng.next_range_inclusive(MIN_PARTITION_SIZE, max_split)
        node.left = tree.add_node(node.x, node.y, node.w, split)
        node.right = tree.add_node(node.x, node.y + split, node.w, node.h - split)
    else:
        max_split = node.w - MIN_PARTITION_SIZE
        if MIN_PARTITION_SIZE >= max_split:
            return
        split = rng.next_range_inclusive(MIN_PARTITION_SIZE, max_split)
        node.left = tree.add_node(node.x, node.y, split, node.h)
        node.right = tree.add_node(node.x + split, node.y, node.w - split, node.h)

    if node.left >= 0:
        _split(tree, node.left, rng, depth + 1)
    if node.right >= 0:
        _split(tree, node.right, rng, depth + 1)


def _place_rooms(tree: _BspTree, index: int, rng: Rng, tiles: list[Tile]) -> None:
    node = tree.nodes[index]
    if node.is_leaf:
        max_w = max(node.w - ROOM_PADDING * 2, MIN_ROOM_SIZE)
        max_h = max(node.h - ROOM_PADDING * 2, MIN_ROOM_SIZE)
        room_w = rng.next_range_inclusive(MIN_ROOM_SIZE, min(max_w, MAX_ROOM_WIDTH))
        room_h = rng.next_range_inclusive(MIN_ROOM_SIZE, min(max_h, MAX_ROOM_HEIGHT))

        max_room_x = max(node.w - room_w - ROOM_PADDING, ROOM_PADDING)
        max_room_y = max(node.h - room_h - ROOM_PADDING, ROOM_PADDING)
        room_x = node.x + rng.next_range_inclusive(ROOM_PADDING, max_room_x)
        room_y = node.y + rng.next_range_inclusive(ROOM_PADDING, max_room_y)

        # Keep a one-tile wall border around the map.
        room_x = max(1, min(room_x, MAP_WIDTH - room_w - 1))
        room_y = max(1, min(room_y, MAP_HEIGHT - room_h - 1))
        room_w = min(room_w, MAP_WIDTH - room_x - 1)
        room_h = min(room_h, MAP_HEIGHT - room_y - 1)

        node.room_x, node.room_y, node.room_w, node.room_h = room_x, room_y, room_w, room_h
        for ry in range(room_y, room_y + room_h):
            for rx in range(room_x, room_x + room_w):
                _set(tiles, rx, ry, Tile.FLOOR)
        return

    if node.left >= 0:
        _place_rooms(tree, node.left, rng, tiles)
    if node.right >= 0:
        _place_rooms(tree, node.right, rng, tiles)


def _room_center(tree: _BspTree, index: int) -> Point:
    node = tree.nodes[index]
    if node.is_leaf:
        return node.room_x + node.room_w // 2, node.room_y + node.room_h // 2
    return _room_center(tree, node.left if node.left >= 0 else node.right)


def _carve_h(tiles: list[Tile], x1: int, x2: int, y: int) -> None:
    for x in range(min(x1, x2), max(x1, x2) + 1):
        if _in_bounds(x, y):
            _set(tiles, x, y, Tile.FLOOR)


def _carve_v(tiles: list[Tile], x: int, y1: int, y2: int) -> None:
    for y in range(min(y1, y2), max(y1, y2) + 1):
        if _in_bounds(x, y):
            _set(tiles, x, y, Tile.FLOOR)


def _connect_rooms(tree: _BspTree, index: int, rng: Rng, tiles: list[Tile]) -> None:
    node = tree.nodes[index]
    if node.left == -1 or node.right == -1:
        return
    _connect_rooms(tree, node.left, rng, tiles)
    _connect_rooms(tree, node.right, rng, tiles)

    cx1, cy1 = _room_center(tree, node.left)
    cx2, cy2 = _room_center(tree, node.right)
    if rng.next() % 2 == 0:
        _carve_h(tiles, cx1, cx2, cy1)
        _carve_v(tiles, cx2, cy1, cy2)
    else:
        _carve_v(tiles, cx1, cy1, cy2)
        _carve_h(tiles, cx1, cx2, cy2)


def _place_doors(tiles: list[Tile], rng: Rng) -> None:
    for y in range(1, MAP_HEIGHT - 1):
        for x in range(1, MAP_WIDTH - 1):
            if _get(tiles, x, y) != Tile.FLOOR:
                continue
            north = _is_floor(tiles, x, y - 1)
            south = _is_floor(tiles, x, y + 1)
            east = _is_floor(tiles, x + 1, y)
            west = _is_floor(tiles, x - 1, y)
            narrow_h = east and west and not north and not south
            narrow_v = north and south and not east and not west
            if (narrow_h or narrow_v) and rng.next_range(4) == 0:
                door = Tile.DOOR_CLOSED if rng.next_range(3) == 0 else Tile.DOOR_OPEN
                _set(tiles, x, y, door)


def _place_rubble(tiles: list[Tile], rng: Rng, depth: int) -> None:
    for _ in range(3 + depth):
        x = rng.next_range_inclusive(1, MAP_WIDTH - 2)
        y = rng.next_range_inclusive(1, MAP_HEIGHT - 2)
        if _get(tiles, x, y) == Tile.FLOOR:
            _set(tiles, x, y, Tile.RUBBLE)


def _find_random_floor(tiles: list[Tile], rng: Rng, attempts: int = FLOOR_SEARCH_ATTEMPTS) -> Point | None:
    for _ in range(attempts):
        x = rng.next_range_inclusive(1, MAP_WIDTH - 2)
        y = rng.next_range_inclusive(1, MAP_HEIGHT - 2)
        if _get(tiles, x, y) == Tile.FLOOR:
            return x, y
    return None


def _place_monsters(tiles: list[Tile], rng: Rng, depth: int) -> list[Monster]:
    eligible = [index for index, definition in enumerate(MONSTER_DEFS) if definition.min_depth <= depth]
    if not eligible:
        return []

    monsters: list[Monster] = []
    for _ in range(min(3 + depth * 2, MAX_MONSTERS)):
        if len(monsters) >= MAX_MONSTERS:
            break
        spot = _find_random_floor(tiles, rng)
        if spot is None:
            continue
        if any((m.x, m.y) == spot for m in monsters):
            continue
        type_index = eligible[rng.next_range(len(eligible))]
        definition = MONSTER_DEFS[type_index]
        hp = definition.base_hp + rng.next_range(definition.base_hp // 2 + 1)
        state = MonsterState.WANDERING if rng.next_range(3) == 0 else MonsterState.ASLEEP
        monsters.append(Monster(x=spot[0], y=spot[1], type=type_index, hp=hp, state=state))
    return monsters


def _place_items(tiles: list[Tile], rng: Rng, depth: int) -> list[Item]:
    items: list[Item] = []
    for _ in range(min(2 + depth, MAX_ITEMS_PER_LEVEL)):
        if len(items) >= MAX_ITEMS_PER_LEVEL:
            break
        spot = _find_random_floor(tiles, rng)
        if spot is None:
            continue
        definition = ITEM_DEFS[rng.next_range(ITEM_DEF_COUNT)]
        if definition.type == ItemType.GOLD:
            count = rng.next_range_inclusive(1, 10 + depth * 5) & 0xFF
        else:
            count = 1
        item = Item(x=spot[0], y=spot[1], type=int(definition.type), subtype=definition.subtype, count=count)
        if definition.type in (ItemType.WEAPON, ItemType.ARMOR) and rng.next_range(4) == 0:
            item.enchantment = rng.next_range_inclusive(1, 3)
        items.append(item)
    return items


def _place_boss(tiles: list[Tile], rng: Rng, near: Point) -> Monster:
    boss_x, boss_y = near
    for _ in range(BOSS_SEARCH_ATTEMPTS):
        spot = _find_random_floor(tiles, rng)
        if spot is None:
            continue
        dx = spot[0] - near[0]
        dy = spot[1] - near[1]
        if dx * dx + dy * dy < 100:
            boss_x, boss_y = spot
            break
    return Monster(
        x=boss_x,
        y=boss_y,
        type=BOSS_MONSTER_TYPE,
        hp=MONSTER_DEFS[BOSS_MONSTER_TYPE].base_hp,
        state=MonsterState.HOSTILE,
    )


def generate(game_seed: int, depth: int) -> DungeonLevel:
    """Build a level; the same seed and depth always give the same level."""
    if not 0 <= depth <= 0xFF:
        raise ValueError(f"depth must be 0..255, got {depth}")
    rng = Rng(level_seed(game_seed, depth))
    tiles = [Tile.WALL] * MAP_SIZE

    tree = _BspTree()
    root = tree.add_node(0, 0, MAP_WIDTH, MAP_HEIGHT)
    _split(tree, root, rng, 0)
    _place_rooms(tree, root, rng, tiles)
    _connect_rooms(tree, root, rng, tiles)
    _place_doors(tiles, rng)
    _place_rubble(tiles, rng, depth)

    root_node = tree.nodes[root]
    stairs_up = _room_center(tree, root_node.left if root_node.left >= 0 else root)
    _set(tiles, *stairs_up, Tile.STAIRS_UP)

    stairs_down = _room_center(tree, root_node.right if root_node.right >= 0 else root)
    if stairs_down == stairs_up:
        stairs_down = _find_random_floor(tiles, rng) or stairs_down
    _set(tiles, *stairs_down, Tile.STAIRS_DOWN)

    monsters = _place_monsters(tiles, rng, depth)
    items = _place_items(tiles, rng, depth)

    if depth == MAX_DEPTH and len(monsters) < MAX_MONSTERS:
        monsters.append(_place_boss(tiles, rng, stairs_down))

    log.debug(
        "generated level %d (%d nodes, %d monsters, %d items)", depth, len(tree.nodes), len(monsters), len(items)
    )
    return DungeonLevel(
        depth=depth,
        tiles=tiles,
        stairs_up=stairs_up,
        stairs_down=stairs_down,
        monsters=monsters,
        items=items,
    )