"""Per-level saves: fog of war, surviving monsters and remaining items."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from .state import DEFAULT_SAVE_DIR, SAVE_FILE_NAME
from .types import (
    FOG_SIZE,
    MAX_DEPTH,
    MAX_ITEMS_PER_LEVEL,
    MAX_MONSTERS,
    Item,
    Monster,
    SaveFormatError,
)

log = logging.getLogger(__name__)

LEVEL_FILE_VERSION = 1


@dataclass
class SavedLevel:
    """The stored state of one visited level."""

    depth: int
    fog: bytearray
    monsters: list[Monster] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise SaveFormatError("level file is truncated")
    return data


def _read_byte(stream: BinaryIO) -> int:
    return _read_exact(stream, 1)[0]


def _check_depth(depth: int) -> None:
    if not 0 <= depth <= 0xFF:
        raise ValueError(f"depth must be 0..255, got {depth}")


class LevelStore:
    """Reads and writes level files in a save directory."""

    def __init__(self, save_dir: str | Path | None = None) -> None:
        self.save_dir = Path(save_dir) if save_dir is not None else DEFAULT_SAVE_DIR

    def level_path(self, depth: int) -> Path:
        _check_depth(depth)
        return self.save_dir / f"level_{depth:02d}.bin"

    def save_level(self, depth: int, fog: bytes | bytearray, monsters: list[Monster], items: list[Item]) -> None:
        """Write the state of one level, creating the save directory."""
        path = self.level_path(depth)
        if len(fog) != FOG_SIZE:
            raise SaveFormatError(f"fog bitmap must be {FOG_SIZE} bytes, got {len(fog)}")
        if len(monsters) > MAX_MONSTERS:
            raise SaveFormatError(f"a level holds at most {MAX_MONSTERS} monsters")
        if len(items) > MAX_ITEMS_PER_LEVEL:
            raise SaveFormatError(f"a level holds at most {MAX_ITEMS_PER_LEVEL} items")

        payload = bytearray([LEVEL_FILE_VERSION, depth])
        payload += fog
        payload.append(len(monsters))
        for monster in monsters:
            payload += monster.to_bytes()
        payload.append(len(items))
        for item in items:
            payload += item.to_bytes()

        self.save_dir.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
        log.debug("level %d saved (%d monsters, %d items)", depth, len(monsters), len(items))

    def load_level(self, depth: int) -> SavedLevel | None:
        """Read a level's state, or None if that level was never saved."""
        path = self.level_path(depth)
        try:
            stream = path.open("rb")
        except FileNotFoundError:
            return None
        with stream:
            version = _read_byte(stream)
            if version > LEVEL_FILE_VERSION:
                raise SaveFormatError(f"unknown level version {version}")
            saved_depth = _read_byte(stream)
            fog = bytearray(_read_exact(stream, FOG_SIZE))
            monster_count = _read_byte(stream)
            monsters = [Monster.from_bytes(_read_exact(stream, Monster.SIZE)) for _ in range(monster_count)]
            item_count = _read_byte(stream)
            items = [Item.from_bytes(_read_exact(stream, Item.SIZE)) for _ in range(item_count)]
        log.debug("level %d loaded (%d monsters, %d items)", depth, len(monsters), len(items))
        return SavedLevel(
            depth=saved_depth,
            fog=fog,
            monsters=monsters[:MAX_MONSTERS],
            items=items[:MAX_ITEMS_PER_LEVEL],
        )

    def has_level(self, depth: int) -> bool:
        return self.level_path(depth).exists()

    def delete_level(self, depth: int) -> None:
        self.level_path(depth).unlink(missing_ok=True)

    def delete_all(self) -> None:
        """Remove the game save and every level file."""
        (self.save_dir / SAVE_FILE_NAME).unlink(missing_ok=True)
        for depth in range(1, MAX_DEPTH + 1):
            self.delete_level(depth)
        log.debug("all save data deleted")