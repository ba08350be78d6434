"""Core dungeon types: map constants, enums, records, definition tables and helpers."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import ClassVar

MAP_WIDTH = 80
MAP_HEIGHT = 50
MAP_SIZE = MAP_WIDTH * MAP_HEIGHT
FOG_SIZE = (MAP_SIZE + 7) // 8
MAX_MONSTERS = 30
MAX_ITEMS_PER_LEVEL = 40
MAX_INVENTORY = 20
MAX_MESSAGES = 10
MAX_DEPTH = 26

_U32 = 0xFFFFFFFF


class Tile(enum.IntEnum):
    WALL = 0
    FLOOR = 1
    DOOR_CLOSED = 2
    DOOR_OPEN = 3
    STAIRS_UP = 4
    STAIRS_DOWN = 5
    RUBBLE = 6
    WATER = 7


class MonsterState(enum.IntEnum):
    ASLEEP = 0
    WANDERING = 1
    HOSTILE = 2


class ItemType(enum.IntEnum):
    WEAPON = 0
    ARMOR = 1
    SHIELD = 2
    POTION = 3
    SCROLL = 4
    FOOD = 5
    GOLD = 6
    RING = 7
    AMULET = 8


class ItemFlag(enum.IntFlag):
    NONE = 0
    IDENTIFIED = 1 << 0
    CURSED = 1 << 1
    EQUIPPED = 1 << 2


class Direction(enum.IntEnum):
    NORTH = 0
    SOUTH = 1
    EAST = 2
    WEST = 3


class SaveFormatError(ValueError):
    """Raised when saved game data cannot be encoded or decoded."""


def _pack(layout: struct.Struct, name: str, *values: int) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise SaveFormatError(f"cannot encode {name}: {exc}") from exc


def _unpack(layout: struct.Struct, name: str, data: bytes) -> tuple:
    if len(data) != layout.size:
        raise SaveFormatError(f"{name} record needs {layout.size} bytes, got {len(data)}")
    return layout.unpack(data)


# Little-endian layouts matching the naturally aligned in-memory records.
_PLAYER_LAYOUT = struct.Struct("<hhHHHHHHHHH2xIHBxIH2x")
_MONSTER_LAYOUT = struct.Struct("<hhBxHBx")
_ITEM_LAYOUT = struct.Struct("<hhBBBBBx")


@dataclass
class Player:
    x: int = 0
    y: int = 0
    hp: int = 20
    max_hp: int = 20
    mp: int = 5
    max_mp: int = 5
    strength: int = 10
    dexterity: int = 10
    constitution: int = 10
    intelligence: int = 10
    char_level: int = 1
    experience: int = 0
    gold: int = 0
    dungeon_depth: int = 1
    game_seed: int = 0
    turn_count: int = 0

    SIZE: ClassVar[int] = _PLAYER_LAYOUT.size

    def to_bytes(self) -> bytes:
        """Encode the player as a fixed-size binary record."""
        return _pack(
            _PLAYER_LAYOUT,
            "player",
            self.x,
            self.y,
            self.hp,
            self.max_hp,
            self.mp,
            self.max_mp,
            self.strength,
            self.dexterity,
            self.constitution,
            self.intelligence,
            self.char_level,
            self.experience,
            self.gold,
            self.dungeon_depth,
            self.game_seed,
            self.turn_count,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> Player:
        """Decode a player from a record produced by to_bytes."""
        return cls(*_unpack(_PLAYER_LAYOUT, "player", bytes(data)))


@dataclass
class Monster:
    x: int = 0
    y: int = 0
    type: int = 0
    hp: int = 0
    state: int = MonsterState.ASLEEP

    SIZE: ClassVar[int] = _MONSTER_LAYOUT.size

    def to_bytes(self) -> bytes:
        """Encode the monster as a fixed-size binary record."""
        return _pack(_MONSTER_LAYOUT, "monster", self.x, self.y, self.type, self.hp, int(self.state))

    @classmethod
    def from_bytes(cls, data: bytes) -> Monster:
        """Decode a monster from a record produced by to_bytes."""
        return cls(*_unpack(_MONSTER_LAYOUT, "monster", bytes(data)))


@dataclass
class Item:
    x: int = -1
    y: int = -1
    type: int = 0
    subtype: int = 0
    count: int = 1
    enchantment: int = 0
    flags: int = 0

    SIZE: ClassVar[int] = _ITEM_LAYOUT.size

    def to_bytes(self) -> bytes:
        """Encode the item as a fixed-size binary record."""
        return _pack(
            _ITEM_LAYOUT,
            "item",
            self.x,
            self.y,
            self.type,
            self.subtype,
            self.count,
            self.enchantment,
            int(self.flags),
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> Item:
        """Decode an item from a record produced by to_bytes."""
        return cls(*_unpack(_ITEM_LAYOUT, "item", bytes(data)))


@dataclass(frozen=True)
class MonsterDef:
    name: str
    glyph: str
    min_depth: int
    base_hp: int
    attack: int
    defense: int
    exp_value: int


@dataclass(frozen=True)
class ItemDef:
    name: str
    glyph: str
    type: int
    subtype: int
    value: int
    attack: int
    defense: int


MONSTER_DEFS: tuple[MonsterDef, ...] = (
    MonsterDef("Giant Rat", "r", 1, 4, 2, 0, 5),
    MonsterDef("Bat", "b", 1, 3, 1, 0, 3),
    MonsterDef("Kobold", "k", 1, 6, 3, 1, 8),
    MonsterDef("Grid Bug", "x", 1, 2, 1, 0, 2),
    MonsterDef("Goblin", "g", 2, 8, 4, 2, 12),
    MonsterDef("Orc", "o", 3, 12, 6, 3, 20),
    MonsterDef("Warg", "w", 3, 10, 7, 2, 18),
    MonsterDef("Large Spider", "S", 4, 14, 5, 2, 22),
    MonsterDef("Skeleton", "s", 4, 10, 5, 4, 15),
    MonsterDef("Uruk-hai", "U", 5, 18, 8, 5, 30),
    MonsterDef("Cave Troll", "T", 6, 30, 10, 6, 50),
    MonsterDef("Wight", "W", 7, 20, 9, 5, 40),
    MonsterDef("Shade", "G", 8, 16, 11, 3, 45),
    MonsterDef("Oliphaunt", "O", 9, 50, 12, 8, 80),
    MonsterDef("Olog-hai", "P", 10, 40, 14, 9, 70),
    MonsterDef("Fire Drake", "d", 12, 35, 13, 7, 90),
    MonsterDef("Nazgul", "N", 15, 60, 18, 12, 150),
    MonsterDef("Young Dragon", "D", 18, 80, 20, 14, 200),
    MonsterDef("Balrog", "B", 22, 120, 25, 16, 500),
    MonsterDef("Ancient Dragon", "D", 25, 150, 30, 20, 1000),
    # The boss always waits on the deepest level.
    MonsterDef("The Necromancer", "p", 26, 250, 35, 22, 5000),
)
MONSTER_DEF_COUNT = len(MONSTER_DEFS)
BOSS_MONSTER_TYPE = MONSTER_DEF_COUNT - 1

ITEM_DEFS: tuple[ItemDef, ...] = (
    ItemDef("Dagger", "/", ItemType.WEAPON, 0, 5, 2, 0),
    ItemDef("Short Sword", "/", ItemType.WEAPON, 1, 15, 4, 0),
    ItemDef("Long Sword", "/", ItemType.WEAPON, 2, 30, 6, 0),
    ItemDef("Battle Axe", "/", ItemType.WEAPON, 3, 50, 8, 0),
    ItemDef("Mithril Blade", "/", ItemType.WEAPON, 4, 200, 12, 0),
    ItemDef("Leather Armor", "[", ItemType.ARMOR, 0, 10, 0, 2),
    ItemDef("Chain Mail", "[", ItemType.ARMOR, 1, 30, 0, 4),
    ItemDef("Plate Mail", "[", ItemType.ARMOR, 2, 60, 0, 6),
    ItemDef("Mithril Coat", "[", ItemType.ARMOR, 3, 300, 0, 10),
    ItemDef("Wooden Shield", ")", ItemType.SHIELD, 0, 8, 0, 1),
    ItemDef("Iron Shield", ")", ItemType.SHIELD, 1, 25, 0, 3),
    ItemDef("Potion of Healing", "!", ItemType.POTION, 0, 20, 0, 0),
    ItemDef("Potion of Mana", "!", ItemType.POTION, 1, 25, 0, 0),
    ItemDef("Potion of Strength", "!", ItemType.POTION, 2, 50, 0, 0),
    ItemDef("Scroll of Identify", "?", ItemType.SCROLL, 0, 15, 0, 0),
    ItemDef("Scroll of Teleport", "?", ItemType.SCROLL, 1, 30, 0, 0),
    ItemDef("Scroll of Mapping", "?", ItemType.SCROLL, 2, 40, 0, 0),
    ItemDef("Rations", "%", ItemType.FOOD, 0, 5, 0, 0),
    ItemDef("Lembas Bread", "%", ItemType.FOOD, 1, 30, 0, 0),
    ItemDef("Gold Coins", "$", ItemType.GOLD, 0, 1, 0, 0),
    # Quest item dropped by the boss.
    ItemDef("Ring of Power", "=", ItemType.RING, 0, 999, 0, 0),
)
ITEM_DEF_COUNT = len(ITEM_DEFS)
RING_OF_POWER_DEF = ITEM_DEF_COUNT - 1

_TILE_GLYPHS = {
    Tile.WALL: "#",
    Tile.FLOOR: ".",
    Tile.DOOR_CLOSED: "+",
    Tile.DOOR_OPEN: "'",
    Tile.STAIRS_UP: "<",
    Tile.STAIRS_DOWN: ">",
    Tile.RUBBLE: ":",
    Tile.WATER: "~",
}

_ITEM_GLYPHS = {
    ItemType.WEAPON: "/",
    ItemType.ARMOR: "[",
    ItemType.SHIELD: ")",
    ItemType.POTION: "!",
    ItemType.SCROLL: "?",
    ItemType.FOOD: "%",
    ItemType.GOLD: "$",
    ItemType.RING: "=",
    ItemType.AMULET: '"',
}


def tile_glyph(tile: int) -> str:
    """Return the map character for a tile, '?' for an unknown tile."""
    return _TILE_GLYPHS.get(tile, "?")


def item_glyph(item_type: int) -> str:
    """Return the map character for an item type, '*' for an unknown type."""
    return _ITEM_GLYPHS.get(item_type, "*")


def new_fog() -> bytearray:
    """Return an all-unexplored fog-of-war bitmap."""
    return bytearray(FOG_SIZE)


def fog_is_explored(fog: bytes | bytearray, x: int, y: int) -> bool:
    index = y * MAP_WIDTH + x
    return bool((fog[index // 8] >> (index % 8)) & 1)


def fog_set_explored(fog: bytearray, x: int, y: int) -> None:
    index = y * MAP_WIDTH + x
    fog[index // 8] |= 1 << (index % 8)


class Rng:
    """Deterministic 32-bit xorshift generator."""

    __slots__ = ("state",)

    def __init__(self, seed: int) -> None:
        seed &= _U32
        self.state = seed or 1

    def next(self) -> int:
        s = self.state
        s ^= (s << 13) & _U32
        s ^= s >> 17
        s ^= (s << 5) & _U32
        self.state = s
        return s

    def next_range(self, maximum: int) -> int:
        """Return a value in [0, maximum)."""
        if maximum <= 0:
            raise ValueError("maximum must be positive")
        return self.next() % maximum

    def next_range_inclusive(self, minimum: int, maximum: int) -> int:
        """Return a value in [minimum, maximum]."""
        if maximum < minimum:
            raise ValueError("maximum must not be below minimum")
        return minimum + self.next() % (maximum - minimum + 1)


def xp_for_level(level: int) -> int:
    """Cumulative experience needed to reach a character level."""
    return sum(10 * i * i for i in range(2, level + 1)) & _U32


def level_seed(game_seed: int, depth: int) -> int:
    """Derive the seed of one dungeon level from the game seed."""
    return (game_seed ^ ((depth * 2654435761) & _U32)) & _U32