import pytest

from gooddog.controls import Button
from gooddog.entities import CurveType, Direction, ItemType
from gooddog.geometry import Camera, Vec2
from gooddog.level import (
    MAX_OBJECTS,
    Level,
    LevelFormatError,
    LevelLimitError,
    load_level,
    parse_level,
)


def _full_level():
    level = Level()
    level.add_floor(Vec2(0.5, 1.0), Vec2(10.0, 1.0))
    level.add_curve(Vec2(3.0, 4.0), CurveType.SW)
    level.add_elevator(Vec2(1.0, 2.0), Vec2(3.0, 4.0), Vec2(5.0, 6.0), Vec2(7.0, 8.0), 0.25, Button.E)
    level.add_danger_block(Vec2(1.0, 1.0), Vec2(2.0, 2.0), Vec2(64.0, 32.0), Button.MOUSE)
    level.add_reverser(Vec2(9.0, 9.0), Vec2(9.0, 20.0), Direction.UP, Button.Z)
    level.add_camera_zone(Vec2(100.0, 100.0), Vec2(50.0, 60.0),
                          Camera(offset=Vec2(1.5, 2.5), target=Vec2(3.5, 4.5), zoom=0.75))
    level.add_prompt(Vec2(12.0, 13.0), Button.A)
    level.add_item(Vec2(14.0, 15.0), ItemType.BALL)
    level.add_checkpoint(Vec2(16.0, 17.0), 2.5, True)
    return level


def _content(level):
    return (level.floors, level.curves, level.elevators, level.danger_blocks, level.reversers,
            level.camera_zones, level.prompts, level.items, level.checkpoints)


def test_floor_record_format():
    level = Level()
    level.add_floor(Vec2(0.0, 0.0), Vec2(10.0, 0.0))
    assert level.dumps() == "1\n0.000000 0.000000 10.000000 0.000000\n"


def test_checkpoint_record_format():
    level = Level()
    level.add_checkpoint(Vec2(1.0, 2.0), 0.0, True)
    assert level.dumps() == "9\n1.000000 2.000000 0.000000 1\n"


def test_round_trip_all_kinds():
    level = _full_level()
    loaded = parse_level(level.dumps())
    assert _content(loaded) == _content(level)


def test_records_grouped_by_type_order():
    level = Level()
    level.add_checkpoint(Vec2(1.0, 1.0), 0.0, False)
    level.add_floor(Vec2(0.0, 0.0), Vec2(1.0, 1.0))
    type_lines = level.dumps().splitlines()[::2]
    assert type_lines == ["1", "9"]


def test_add_beyond_limit_raises():
    level = Level()
    for index in range(MAX_OBJECTS):
        level.add_prompt(Vec2(float(index), 0.0), Button.A)
    with pytest.raises(LevelLimitError):
        level.add_prompt(Vec2(0.0, 0.0), Button.B)
    assert len(level.prompts) == MAX_OBJECTS


def test_unknown_types_are_skipped():
    level = parse_level("0\n42\n1\n1.0 2.0 3.0 4.0\n")
    assert level.floors[0].start == Vec2(1.0, 2.0)
    assert level.floors[0].end == Vec2(3.0, 4.0)
    assert len(level.floors) == 1


def test_checkpoint_flag_only_one_means_flipped():
    level = parse_level("9\n1 2 3 2\n9\n1 2 3 1\n")
    assert [c.dog_flipped for c in level.checkpoints] == [False, True]


def test_camera_zone_rotation_is_zero():
    text = "6\n1 2 3 4 5 6 7 8 0.5\n"
    zone = parse_level(text).camera_zones[0]
    assert zone.params.rotation == 0.0
    assert zone.params.zoom == 0.5
    assert zone.params.offset == Vec2(5.0, 6.0)
    assert zone.params.target == Vec2(7.0, 8.0)


def test_truncated_record_raises():
    with pytest.raises(LevelFormatError):
        parse_level("3\n1 2 3 4\n")


def test_bad_number_raises():
    with pytest.raises(LevelFormatError):
        parse_level("1\n1 two 3 4\n")


def test_bad_button_raises():
    with pytest.raises(LevelFormatError):
        parse_level("7\n1 2 999\n")


def test_empty_text_gives_empty_level():
    level = parse_level("")
    assert all(len(collection) == 0 for collection in _content(level))


def test_reset_progress():
    level = _full_level()
    level.reversers[0].enabled = 0.0
    level.items[0].enabled = False
    level.reset_progress()
    assert level.reversers[0].enabled == 1.0
    assert level.items[0].enabled is True


def test_save_and_load(tmp_path):
    level = _full_level()
    path = tmp_path / "level.txt"
    level.save(path)
    assert _content(load_level(path)) == _content(level)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_level(tmp_path / "missing.txt")


def test_added_camera_zone_is_a_copy():
    level = Level()
    camera = Camera(zoom=2.0)
    level.add_camera_zone(Vec2(0.0, 0.0), Vec2(10.0, 10.0), camera)
    camera.zoom = 1.0
    assert level.camera_zones[0].params.zoom == 2.0