import pytest

from gooddog.controls import Button, InputState, Key
from gooddog.entities import Checkpoint, CurveType, Direction, ItemType
from gooddog.gameplay import GameState, Play, SoundEvent
from gooddog.geometry import Vec2
from gooddog.level import Level

DT = 1.0 / 30.0
NO_INPUT = InputState()


def going(level=None):
    play = Play(level or Level())
    play.state = GameState.GOING
    play.dog_flipped = False
    play.drain_events()
    return play


def test_initial_state():
    level = Level()
    play = Play(level)
    assert play.state is GameState.CUTSCENE
    assert play.pos == level.dog_starting_pos
    assert play.dog_flipped is True
    assert play.drain_events() == []


def test_cutscene_runs_into_going():
    play = Play(Level())
    events = []
    for _ in range(300):
        play.update(DT, NO_INPUT)
        events += play.drain_events()
        if play.state is GameState.GOING:
            break
    assert play.state is GameState.GOING
    assert events == [SoundEvent.THROW, SoundEvent.WOOF, SoundEvent.MUSIC_PLAY]
    assert play.dog_flipped is False
    assert play.frame == 2


def test_lose():
    play = going()
    play.lose()
    assert play.state is GameState.LOSE
    assert play.falling_speed == -900.0
    assert SoundEvent.LOSE in play.drain_events()


def test_falls_without_floor():
    play = going()
    start = play.pos
    play.update(DT, NO_INPUT)
    assert play.falling_speed > 0.0
    assert play.pos.y > start.y
    assert play.pos.x > start.x


def test_stands_on_floor():
    level = Level()
    start = level.dog_starting_pos
    level.add_floor(Vec2(-1000.0, start.y + 100.0), Vec2(3000.0, start.y + 100.0))
    play = going(level)
    play.update(DT, NO_INPUT)
    assert play.falling_speed == 0.0
    assert play.pos.y == pytest.approx(start.y)
    assert play.pos.x > start.x


def test_danger_block_kills():
    level = Level()
    level.add_danger_block(level.dog_starting_pos, level.dog_starting_pos, Vec2(50.0, 50.0), Button.NONE)
    play = going(level)
    play.update(DT, NO_INPUT)
    assert play.state is GameState.LOSE


def test_reverser_flips_once():
    level = Level()
    reverser = level.add_reverser(level.dog_starting_pos, level.dog_starting_pos, Direction.LEFT, Button.NONE)
    play = going(level)
    play.update(DT, NO_INPUT)
    assert play.dog_flipped is True
    assert reverser.enabled < 1.0
    assert SoundEvent.REVERSE in play.drain_events()


def test_disabled_reverser_kills():
    level = Level()
    reverser = level.add_reverser(level.dog_starting_pos, level.dog_starting_pos, Direction.LEFT, Button.NONE)
    reverser.enabled = 0.0
    play = going(level)
    play.update(DT, NO_INPUT)
    assert play.state is GameState.LOSE


def test_ball_pickup():
    level = Level()
    item = level.add_item(level.dog_starting_pos, ItemType.BALL)
    play = going(level)
    play.update(DT, NO_INPUT)
    assert item.enabled is False
    assert play.has_ball is True
    assert play.dog_flipped is True
    assert play.lightning_flash_time > 0.0
    events = play.drain_events()
    assert SoundEvent.THUNDER in events and SoundEvent.REVERSE in events


def test_hat_pickup():
    level = Level()
    level.add_item(level.dog_starting_pos, ItemType.HAT)
    play = going(level)
    play.update(DT, NO_INPUT)
    assert play.has_hat is True
    assert play.has_ball is False


def test_checkpoint_records_music_time():
    level = Level()
    cp = level.add_checkpoint(level.dog_starting_pos, 0.0, True)
    play = going(level)
    play.music_time = 12.5
    play.update(DT, NO_INPUT)
    assert cp.music_start_time == play.music_time
    assert play.last_checkpoint.music_start_time == play.music_time
    assert play.last_checkpoint.dog_flipped is True


def test_restart_from_checkpoint():
    level = Level()
    reverser = level.add_reverser(Vec2(), Vec2(), Direction.UP, Button.A)
    reverser.enabled = 0.0
    play = going(level)
    play.last_checkpoint = Checkpoint(Vec2(10.0, 20.0), 7.0, True)
    play.lose()
    play.drain_events()
    play.update(DT, InputState(pressed={Key.C}))
    assert play.state is GameState.GOING
    assert play.pos == Vec2(10.0, 20.0)
    assert play.dog_flipped is True
    assert play.music_time == 7.0
    assert reverser.enabled == 1.0
    events = play.drain_events()
    assert events.index(SoundEvent.MUSIC_SEEK) < events.index(SoundEvent.MUSIC_PLAY)


def test_restart_with_r():
    level = Level()
    play = going(level)
    play.has_hat = True
    play.lose()
    play.update(DT, InputState(pressed={Key.R}))
    assert play.state is GameState.CUTSCENE
    assert play.pos == level.dog_starting_pos
    assert play.has_hat is False
    assert play.last_checkpoint.pos == level.dog_starting_pos
    assert SoundEvent.MUSIC_STOP in play.drain_events()


def test_button_sounds():
    play = going()
    play.update(DT, InputState(pressed={Key.A}, released={Key.B}))
    events = play.drain_events()
    assert SoundEvent.BUTTON_PRESS in events
    assert SoundEvent.BUTTON_RELEASE in events


def test_cancel_makes_no_sound():
    play = going()
    play.update(DT, InputState(pressed={Key.BACKSPACE}))
    assert SoundEvent.BUTTON_PRESS not in play.drain_events()


def test_editor_state_freezes_dog():
    play = going()
    play.state = GameState.EDITOR
    before = play.pos
    play.update(DT, InputState(pressed={Key.A}))
    assert play.pos == before
    assert play.drain_events() == []


def test_camera_zone_switches_camera():
    level = Level()
    params = level.camera.__class__(zoom=2.0)
    level.add_camera_zone(level.dog_starting_pos, Vec2(500.0, 500.0), params)
    play = going(level)
    play.update(DT, NO_INPUT)
    assert level.camera.zoom == 2.0


def test_curve_starts_rotation():
    level = Level()
    start = level.dog_starting_pos
    level.add_curve(start - Vec2(-96.0, -64.0), CurveType.SE)
    play = going(level)
    play.update(DT, NO_INPUT)
    assert play.rot_target.angular_speed == -240.0
    assert play.rot_target.target_angle == -90.0


def test_win_after_teleport():
    play = going()
    play.has_ball = True
    play.teleported = True
    play.pos = Vec2(600.0, 540.0)
    play.update(DT, NO_INPUT)
    assert play.state is GameState.WIN
    events = play.drain_events()
    assert SoundEvent.WIN in events and SoundEvent.HIHAT_PLAY in events


def test_teleport_when_ball_timer_runs_out():
    play = going()
    play.has_ball = True
    play.ball_timer = 2.79
    play.update(DT, NO_INPUT)
    assert play.teleported is True
    assert play.pos == Vec2(1400.0, 540.0)
    assert play.dog_flipped is True


def test_lightning_flash_phases():
    play = Play(Level())
    play.lightning_flash_time = 0.05
    assert play.lightning_flash() is True
    play.lightning_flash_time = 0.0
    assert play.lightning_flash() is False


def test_dt_is_capped():
    play = going()
    start = play.pos
    play.update(10.0, NO_INPUT)
    assert play.pos.x - start.x == pytest.approx(290.0 * 0.03333333)