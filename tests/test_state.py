import pytest

from inkgames.state import GameState
from inkgames.types import MAX_MESSAGES, Item, ItemType, SaveFormatError


@pytest.fixture
def state(tmp_path):
    game = GameState(save_dir=tmp_path / "game")
    game.new_game(42)
    return game


def test_new_game_defaults(state):
    assert state.player.game_seed == 42
    assert state.player.hp == state.player.max_hp
    assert state.player.dungeon_depth == 1
    assert state.inventory == []
    assert state.get_message(0) == "You enter the Deep Mines..."
    assert state.message_count == 1


def test_get_message_out_of_range_is_empty(state):
    assert state.get_message(1) == ""
    assert state.get_message(-1) == ""


def test_message_log_keeps_most_recent(state):
    for i in range(MAX_MESSAGES + 2):
        state.add_message(f"msg {i}")
    assert state.message_count == MAX_MESSAGES
    assert state.get_message(0) == f"msg {MAX_MESSAGES + 1}"
    assert state.get_message(MAX_MESSAGES - 1) == "msg 2"
    assert state.messages[0] == "msg 2"


def test_new_game_clears_previous_state(state):
    state.add_message("extra")
    state.inventory.append(Item(type=ItemType.FOOD))
    state.player.gold = 50
    state.new_game(7)
    assert state.message_count == 1
    assert state.inventory == []
    assert state.player.gold == 0


def test_save_and_load_round_trip(state, tmp_path):
    state.player.gold = 77
    state.player.x = 12
    state.inventory.append(Item(x=1, y=2, type=ItemType.WEAPON, enchantment=2))
    for i in range(MAX_MESSAGES + 3):
        state.add_message(f"line {i}")
    state.save_to_file()
    assert state.has_save_file()

    other = GameState(save_dir=tmp_path / "game")
    assert other.load_from_file() is True
    assert other.player == state.player
    assert other.inventory == state.inventory
    assert other.messages == state.messages
    other.add_message("after")
    assert other.get_message(1) == state.get_message(0)


def test_save_file_starts_with_version(state):
    state.save_to_file()
    assert state.save_path.read_bytes()[0] == 1


def test_load_missing_file_returns_false(tmp_path):
    assert GameState(save_dir=tmp_path / "none").load_from_file() is False


def test_load_rejects_newer_version(state):
    state.save_to_file()
    data = bytearray(state.save_path.read_bytes())
    data[0] = 2
    state.save_path.write_bytes(bytes(data))
    with pytest.raises(SaveFormatError):
        state.load_from_file()


def test_load_rejects_truncated_file(state):
    state.save_to_file()
    state.save_path.write_bytes(state.save_path.read_bytes()[:10])
    with pytest.raises(SaveFormatError):
        state.load_from_file()


def test_delete_save_file(state):
    state.save_to_file()
    state.delete_save_file()
    assert state.has_save_file() is False
    state.delete_save_file()
    assert not state.save_path.exists()