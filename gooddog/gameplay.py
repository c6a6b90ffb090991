"""The running game: the dog's walk, falls, pickups, wins and losses."""

from __future__ import annotations

import math
from dataclasses import replace
from enum import Enum, auto
from typing import List

from .controls import Button, InputState, Key, button_from_pressed, button_from_released
from .entities import DogRotationTarget, ItemType
from .geometry import Camera, Vec2
from .level import Level

DOG_WOBBLE_RATE = 0.2
WALL_WOBBLE_RATE = 0.75
HOP_TIMER = 0.833333333333
MAX_DT = 0.03333333
DOG_SPEED = 290.0
LIGHTNING_TIME = 0.233333333333
TELEPORT_POS = Vec2(1400.0, 540.0)
WIN_X = 690.0
BALL_FLOOR_Y = 532.0


class GameState(Enum):
    CUTSCENE = auto()
    GOING = auto()
    WIN = auto()
    LOSE = auto()
    EDITOR = auto()


class SoundEvent(Enum):
    """Something the audio side should play, stop or seek."""

    THROW = auto()
    WOOF = auto()
    BUTTON_PRESS = auto()
    BUTTON_RELEASE = auto()
    REVERSE = auto()
    LOSE = auto()
    WIN = auto()
    THUNDER = auto()
    MUSIC_PLAY = auto()
    MUSIC_PAUSE = auto()
    MUSIC_STOP = auto()
    MUSIC_SEEK = auto()
    HIHAT_PLAY = auto()


class Play:
    """One play session over a level, advanced a frame at a time."""

    def __init__(self, level: Level) -> None:
        self.level = level
        self.state = GameState.CUTSCENE
        self.music_time = 0.0
        self._events: List[SoundEvent] = []

        self.pos = level.dog_starting_pos
        self.dog_angle = 0.0
        self.dog_flipped = True
        self.dog_up = Vec2(0.0, -1.0)
        self.dog_right = Vec2(1.0, 0.0)
        self.has_sunglasses = False
        self.has_hat = False
        self.has_ball = False
        self.teleported = False
        self.ball_timer = 0.0

        self.hop_timer = -HOP_TIMER / 2.0
        self.frame = 0
        self.hop_offset = 0.0
        self.falling_speed = 0.0
        self.rot_target = DogRotationTarget()
        self.last_checkpoint = self._start_checkpoint()

        self.cutscene_timer = 0.0
        self.guy_frame = 0
        self.draw_fetch_text = False
        self.ball_pos = Vec2(-1.0, 0.0)
        self.played_throw_sound = False
        self.played_woof_sound = False
        self.ball_y_speed = 0.0

        self.lightning_flash_time = 0.0

    def _start_checkpoint(self):
        from .entities import Checkpoint

        return Checkpoint(self.level.dog_starting_pos, 0.0, False)

    def _emit(self, event: SoundEvent) -> None:
        self._events.append(event)

    def drain_events(self) -> List[SoundEvent]:
        """Return the sound events queued since the last call and forget them."""
        events, self._events = self._events, []
        return events

    def _reset_dog(self) -> None:
        self.dog_angle = 0.0
        self.hop_timer = -HOP_TIMER / 2.0
        self.frame = 0
        self.hop_offset = 0.0
        self.falling_speed = 0.0
        self.rot_target = DogRotationTarget()
        self.has_sunglasses = False
        self.has_hat = False
        self.has_ball = False
        self.level.reset_progress()

    def restart(self) -> None:
        """Start over from the opening cutscene."""
        self.last_checkpoint = self._start_checkpoint()
        self.state = GameState.CUTSCENE
        self.cutscene_timer = 0.0
        self.pos = self.level.dog_starting_pos
        self.dog_flipped = True
        self._reset_dog()
        self.music_time = 0.0
        self._emit(SoundEvent.MUSIC_STOP)

    def restart_from_checkpoint(self) -> None:
        """Resume walking from the last checkpoint reached."""
        checkpoint = self.last_checkpoint
        self.state = GameState.GOING
        self.pos = checkpoint.pos
        self.dog_flipped = checkpoint.dog_flipped
        self.music_time = checkpoint.music_start_time
        self._emit(SoundEvent.MUSIC_SEEK)
        self._emit(SoundEvent.MUSIC_PLAY)
        self._reset_dog()

    def lose(self) -> None:
        """The dog was hit: it bounces up and falls off screen."""
        self.falling_speed = -900.0
        self.state = GameState.LOSE
        self._emit(SoundEvent.LOSE)
        self._emit(SoundEvent.MUSIC_STOP)

    def lightning_flash(self) -> bool:
        """Whether the screen is in a dark phase of a lightning flash."""
        return int(self.lightning_flash_time * 30) % 2 != 0

    def update(self, dt: float, inputs: InputState) -> None:
        """Advance the game by ``dt`` seconds, capped at a thirtieth of a second."""
        dt = min(dt, MAX_DT)
        if self.lightning_flash_time > 0.0:
            self.lightning_flash_time -= dt
        if self.state == GameState.EDITOR:
            return

        level = self.level
        for block in level.danger_blocks:
            block.update(dt, WALL_WOBBLE_RATE, level.camera, inputs)
        for floor in level.floors:
            floor.update(dt, WALL_WOBBLE_RATE)
        for elevator in level.elevators:
            elevator.update(dt, WALL_WOBBLE_RATE, level.camera, inputs)
        for reverser in level.reversers:
            reverser.update(dt, WALL_WOBBLE_RATE, level.camera, inputs)

        hitbox_corner = self.pos - Vec2(48.0, 48.0)

        if self.state != GameState.LOSE:
            for zone in level.camera_zones:
                if zone.contains_point(self.pos):
                    p = zone.params
                    level.camera = Camera(p.offset, p.target, p.rotation, p.zoom)

        if button_from_pressed(inputs) not in (Button.CANCEL, Button.NONE):
            self._emit(SoundEvent.BUTTON_PRESS)
        if button_from_released(inputs) not in (Button.CANCEL, Button.NONE):
            self._emit(SoundEvent.BUTTON_RELEASE)

        if self.state == GameState.CUTSCENE:
            self._update_cutscene(dt)
        elif self.state == GameState.GOING:
            self._update_going(dt, hitbox_corner)
        elif self.state == GameState.WIN:
            self._update_win(dt)
        elif self.state == GameState.LOSE:
            self._update_lose(dt, inputs)

    def _update_cutscene(self, dt: float) -> None:
        self.cutscene_timer += dt
        t = self.cutscene_timer
        if t < 1.0:
            return
        if t < 2.0:
            self.guy_frame = 1
        elif t < 3.7:
            x = max(self.ball_pos.x, 0.0) + dt
            self.ball_pos = Vec2(x, self.ball_pos.y)
            self.guy_frame = 2
            if not self.played_throw_sound:
                self.played_throw_sound = True
                self._emit(SoundEvent.THROW)
            self.dog_flipped = False
        elif t < 5.7:
            self.ball_pos = Vec2(-1.0, self.ball_pos.y)
            self.draw_fetch_text = True
            self.guy_frame = 0
            if not self.played_woof_sound:
                self.played_woof_sound = True
                self._emit(SoundEvent.WOOF)
        else:
            self.played_throw_sound = False
            self.played_woof_sound = False
            self.draw_fetch_text = False
            self._emit(SoundEvent.MUSIC_PLAY)
            self.frame = 2
            self.state = GameState.GOING

    def _walk(self, dt: float) -> None:
        target = self.rot_target
        if target.angular_speed != 0.0:
            self.dog_angle += target.angular_speed * dt
            if ((target.angular_speed > 0 and self.dog_angle >= target.target_angle)
                    or (target.angular_speed < 0 and self.dog_angle <= target.target_angle)):
                self.dog_angle = target.target_angle % 360.0
                self.rot_target = DogRotationTarget()
        rad = math.radians(self.dog_angle)
        self.dog_up = Vec2(math.sin(rad), -math.cos(rad))
        self.dog_right = Vec2(math.cos(rad), math.sin(rad)) * (-1.0 if self.dog_flipped else 1.0)
        self.pos = self.pos + self.dog_right * (DOG_SPEED * dt)

        self.hop_offset += (-120.0 if self.frame == 2 else 120.0) * dt
        self.hop_offset = min(0.0, max(-30.0, self.hop_offset))

        self.hop_timer += dt
        self.frame = 1 if math.remainder(self.hop_timer, HOP_TIMER) >= 0.0 else 2

    def _stand_or_fall(self, dt: float) -> None:
        min_dist = math.inf
        min_pos = Vec2()
        segments = [(e.current_start(), e.current_end()) for e in self.level.elevators]
        segments += [(f.start, f.end) for f in self.level.floors]
        for start, end in segments:
            center = start.lerp(end, 0.5)
            along = (self.pos - center).dot(self.dog_right)
            length = (end - start).dot(self.dog_right)
            if length == 0.0 or abs(along) >= abs(length) / 2.0 + 64.0:
                continue
            closest = start.lerp(end, along / length + 0.5)
            dist = (self.pos - closest).dot(self.dog_up)
            if 60.0 < dist < 140.0 and dist < min_dist:
                min_dist = dist
                min_pos = closest + self.dog_up * 100.0

        if self.rot_target.angular_speed == 0.0:
            if min_dist > 100.0:
                self.falling_speed += 1000.0 * dt
                self.pos = self.pos + self.dog_up * (-self.falling_speed * dt)
            else:
                self.pos = min_pos
                self.falling_speed = 0.0

    def _update_going(self, dt: float, corner: Vec2) -> None:
        level = self.level
        self.music_time += dt
        self._walk(dt)

        for curve in level.curves:
            target = curve.rotation_target(self.pos, self.dog_up, self.dog_right)
            if target.angular_speed != 0.0:
                self.rot_target = target

        self._stand_or_fall(dt)

        def hits(center: Vec2, width: float, height: float) -> bool:
            return (corner.y < center.y + height / 2.0 and corner.y + 96.0 > center.y - height / 2.0
                    and corner.x < center.x + width / 2.0 and corner.x + 96.0 > center.x - width / 2.0)

        for reverser in level.reversers:
            if hits(reverser.current_pos(), 60.0, 220.0):
                if reverser.enabled == 1.0:
                    self.dog_flipped = not self.dog_flipped
                    reverser.enabled -= dt
                    self._emit(SoundEvent.REVERSE)
                elif reverser.enabled == 0.0:
                    self.lose()
                break

        for item in level.items:
            if item.enabled and hits(item.pos, 32.0, 512.0):
                item.enabled = False
                self._emit(SoundEvent.THUNDER)
                self.lightning_flash_time = LIGHTNING_TIME
                if item.item_type == ItemType.BALL:
                    self.dog_flipped = not self.dog_flipped
                    self._emit(SoundEvent.REVERSE)
                    self.has_ball = True
                elif item.item_type == ItemType.SUNGLASSES:
                    self.has_sunglasses = True
                elif item.item_type == ItemType.HAT:
                    self.has_hat = True

        for block in level.danger_blocks:
            if hits(block.current_pos(), block.dimensions.x, block.dimensions.y):
                self.lose()
                break

        for checkpoint in level.checkpoints:
            if hits(checkpoint.pos, 192.0, 192.0):
                if checkpoint.music_start_time == 0.0:
                    checkpoint.music_start_time = self.music_time
                self.last_checkpoint = replace(checkpoint)

        if self.has_ball:
            self.ball_timer += dt
            if self.ball_timer > 2.78 and not self.teleported:
                self.dog_flipped = True
                self.pos = TELEPORT_POS
                self.teleported = True
            if self.teleported and self.pos.x <= WIN_X:
                self.ball_y_speed = 0.0
                self.frame = 0
                self.state = GameState.WIN
                self.ball_pos = self.pos - Vec2(120.0, 32.0)
                self._emit(SoundEvent.WIN)
                self._emit(SoundEvent.HIHAT_PLAY)

    def _update_win(self, dt: float) -> None:
        self.hop_offset = 0.0
        if self.ball_pos.y < BALL_FLOOR_Y:
            self.ball_y_speed += 600.0 * dt
            self.ball_pos = Vec2(self.ball_pos.x - 400.0 * dt, self.ball_pos.y + self.ball_y_speed * dt)
        else:
            self.ball_pos = Vec2(self.ball_pos.x, BALL_FLOOR_Y)

    def _update_lose(self, dt: float, inputs: InputState) -> None:
        self.frame = 2
        self.falling_speed += 3000.0 * dt
        self.pos = self.pos + self.dog_up * (-self.falling_speed * dt)
        if inputs.is_pressed(Key.C):
            self.restart_from_checkpoint()
        if inputs.is_pressed(Key.R):
            self.restart()