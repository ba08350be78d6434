import pytest

from inkgames.types import (
    BOSS_MONSTER_TYPE,
    FOG_SIZE,
    ITEM_DEFS,
    MAP_HEIGHT,
    MAP_WIDTH,
    MONSTER_DEFS,
    RING_OF_POWER_DEF,
    Item,
    ItemType,
    Monster,
    MonsterState,
    Player,
    Rng,
    SaveFormatError,
    Tile,
    fog_is_explored,
    fog_set_explored,
    item_glyph,
    level_seed,
    new_fog,
    tile_glyph,
    xp_for_level,
)


def test_rng_zero_seed_behaves_like_one():
    a, b = Rng(0), Rng(1)
    assert [a.next() for _ in range(5)] == [b.next() for _ in range(5)]


def test_rng_first_value_from_seed_one():
    assert Rng(1).next() == 270369


def test_rng_is_deterministic():
    a, b = Rng(12345), Rng(12345)
    assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]


def test_rng_ranges_stay_in_bounds():
    rng = Rng(99)
    values = [rng.next_range(7) for _ in range(500)]
    assert all(0 <= v < 7 for v in values)
    inclusive = [rng.next_range_inclusive(3, 5) for _ in range(500)]
    assert set(inclusive) == {3, 4, 5}


def test_rng_rejects_bad_ranges():
    rng = Rng(5)
    with pytest.raises(ValueError):
        rng.next_range(0)
    with pytest.raises(ValueError):
        rng.next_range_inclusive(4, 2)


def test_glyphs():
    assert tile_glyph(Tile.WALL) == "#"
    assert tile_glyph(Tile.STAIRS_DOWN) == ">"
    assert tile_glyph(99) == "?"
    assert item_glyph(ItemType.GOLD) == "$"
    assert item_glyph(99) == "*"


def test_fog_round_trip():
    fog = new_fog()
    assert len(fog) == FOG_SIZE
    assert not fog_is_explored(fog, 10, 20)
    fog_set_explored(fog, 10, 20)
    fog_set_explored(fog, MAP_WIDTH - 1, MAP_HEIGHT - 1)
    assert fog_is_explored(fog, 10, 20)
    assert fog_is_explored(fog, MAP_WIDTH - 1, MAP_HEIGHT - 1)
    assert not fog_is_explored(fog, 11, 20)
    assert sum(bin(b).count("1") for b in fog) == 2


def test_xp_for_level_grows():
    assert xp_for_level(0) == 0
    assert xp_for_level(1) == 0
    values = [xp_for_level(n) for n in range(1, 15)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


def test_level_seed():
    assert level_seed(1234, 0) == 1234
    assert level_seed(0, 1) == 2654435761
    assert 0 <= level_seed(0xFFFFFFFF, 255) <= 0xFFFFFFFF


def test_player_round_trip():
    player = Player(x=-3, y=7, hp=15, gold=99, dungeon_depth=4, game_seed=0xDEADBEEF, turn_count=500)
    data = player.to_bytes()
    assert len(data) == Player.SIZE
    assert Player.from_bytes(data) == player


def test_monster_and_item_round_trip():
    monster = Monster(x=5, y=6, type=BOSS_MONSTER_TYPE, hp=250, state=MonsterState.HOSTILE)
    assert Monster.from_bytes(monster.to_bytes()) == monster
    item = Item(x=1, y=2, type=ItemType.GOLD, count=12, enchantment=2, flags=3)
    assert Item.from_bytes(item.to_bytes()) == item


def test_item_defaults_are_off_map():
    item = Item.from_bytes(Item().to_bytes())
    assert (item.x, item.y, item.count) == (-1, -1, 1)


def test_bad_record_length_raises():
    with pytest.raises(SaveFormatError):
        Player.from_bytes(b"\x00" * 3)
    with pytest.raises(SaveFormatError):
        Monster.from_bytes(b"")


def test_out_of_range_field_raises():
    with pytest.raises(SaveFormatError):
        Monster(hp=-1).to_bytes()


def test_definition_tables():
    assert MONSTER_DEFS[BOSS_MONSTER_TYPE].name == "The Necromancer"
    assert ITEM_DEFS[RING_OF_POWER_DEF].name == "Ring of Power"
    assert all(d.glyph == item_glyph(d.type) for d in ITEM_DEFS)