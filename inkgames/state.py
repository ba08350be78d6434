"""Player state, inventory and message log, with saving to disk."""

from __future__ import annotations

import struct
from collections import deque
from pathlib import Path
from typing import BinaryIO

from .types import MAX_INVENTORY, MAX_MESSAGES, Item, Player, SaveFormatError

SAVE_FILE_VERSION = 1
SAVE_FILE_NAME = "save.bin"
DEFAULT_SAVE_DIR = Path.home() / ".crosspoint" / "game"

_STRING_LENGTH = struct.Struct("<I")


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise SaveFormatError("save file is truncated")
    return data


def _read_byte(stream: BinaryIO) -> int:
    return _read_exact(stream, 1)[0]


def _read_string(stream: BinaryIO) -> str:
    (length,) = _STRING_LENGTH.unpack(_read_exact(stream, _STRING_LENGTH.size))
    return _read_exact(stream, length).decode("utf-8", errors="replace")


def _write_string(stream: BinaryIO, text: str) -> None:
    encoded = text.encode("utf-8")
    stream.write(_STRING_LENGTH.pack(len(encoded)))
    stream.write(encoded)


class GameState:
    """The running game: player, inventory and recent messages."""

    def __init__(self, save_dir: str | Path | None = None) -> None:
        self.save_dir = Path(save_dir) if save_dir is not None else DEFAULT_SAVE_DIR
        self.player = Player()
        self.inventory: list[Item] = []
        self._messages: deque[str] = deque(maxlen=MAX_MESSAGES)
        self._head = 0

    @property
    def save_path(self) -> Path:
        return self.save_dir / SAVE_FILE_NAME

    @property
    def messages(self) -> list[str]:
        """Messages in the log, oldest first."""
        return list(self._messages)

    @property
    def message_count(self) -> int:
        return len(self._messages)

    def new_game(self, seed: int) -> None:
        """Reset to the defaults of a fresh game."""
        self.player = Player(game_seed=seed)
        self.inventory = []
        self._messages.clear()
        self._head = 0
        self.add_message("You enter the Deep Mines...")

    def add_message(self, msg: str) -> None:
        """Append a message, dropping the oldest once the log is full."""
        if len(self._messages) == MAX_MESSAGES:
            self._head = (self._head + 1) % MAX_MESSAGES
        self._messages.append(msg)

    def get_message(self, recency_index: int) -> str:
        """Return the Nth most recent message (0 is newest), or '' if absent."""
        if recency_index < 0 or recency_index >= len(self._messages):
            return ""
        return self._messages[-1 - recency_index]

    def save_to_file(self) -> None:
        """Write the game to the save file, creating its directory."""
        if len(self.inventory) > MAX_INVENTORY:
            raise SaveFormatError(f"inventory holds more than {MAX_INVENTORY} items")
        self.save_dir.mkdir(parents=True, exist_ok=True)
        with self.save_path.open("wb") as stream:
            stream.write(bytes([SAVE_FILE_VERSION]))
            stream.write(self.player.to_bytes())
            stream.write(bytes([len(self.inventory)]))
            for item in self.inventory:
                stream.write(item.to_bytes())
            stream.write(bytes([len(self._messages), self._head]))
            for message in self._messages:
                _write_string(stream, message)

    def load_from_file(self) -> bool:
        """Load the saved game; return False when there is no save file."""
        try:
            stream = self.save_path.open("rb")
        except FileNotFoundError:
            return False
        with stream:
            version = _read_byte(stream)
            if version > SAVE_FILE_VERSION:
                raise SaveFormatError(f"unknown save version {version}")
            player = Player.from_bytes(_read_exact(stream, Player.SIZE))
            inventory_count = min(_read_byte(stream), MAX_INVENTORY)
            inventory = [Item.from_bytes(_read_exact(stream, Item.SIZE)) for _ in range(inventory_count)]
            message_count = _read_byte(stream)
            head = _read_byte(stream)
            message_count = min(message_count, MAX_MESSAGES)
            messages = [_read_string(stream) for _ in range(message_count)]
        self.player = player
        self.inventory = inventory
        self._messages = deque(messages, maxlen=MAX_MESSAGES)
        self._head = head % MAX_MESSAGES
        return True

    def has_save_file(self) -> bool:
        return self.save_path.exists()

    def delete_save_file(self) -> None:
        self.save_path.unlink(missing_ok=True)