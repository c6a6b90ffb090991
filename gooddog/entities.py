"""The objects a level is built from and their per-frame behaviour."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Sequence, Tuple

from .controls import Button, InputState, Key
from .geometry import Camera, Vec2
from .render import BLACK, WHITE
from .wobbly import WobblyLine, WobblyRectangle, WobblyTexture, draw_button_text, draw_paint_line

DANGER_BLOCK_TRAVEL_TIME = 0.2
REVERSER_TRAVEL_TIME = 0.3
_LINE_OFFSET = 12.0


class CurveType(IntEnum):
    NE = 0
    SE = 1
    SW = 2
    NW = 3


class Direction(IntEnum):
    LEFT = 0
    RIGHT = 1
    UP = 2
    DOWN = 3


class ItemType(IntEnum):
    SUNGLASSES = 0
    HAT = 1
    BALL = 2


class AssetType(IntEnum):
    NONE = 0
    FLOOR = 1
    CURVE = 2
    ELEVATOR = 3
    DANGER_BLOCK = 4
    REVERSER = 5
    CAMERA_ZONE = 6
    PROMPT = 7
    ITEM = 8
    CHECKPOINT = 9


@dataclass(frozen=True)
class DogRotationTarget:
    """Angle the dog turns towards and how fast; zero speed means no turn."""

    target_angle: float = 0.0
    angular_speed: float = 0.0


def is_mouse_over_rectangle(cursor: Vec2, pos: Vec2, size: Vec2) -> bool:
    """Whether ``cursor`` lies strictly inside a rectangle centred on ``pos``."""
    return (
        pos.x - size.x / 2.0 < cursor.x < pos.x + size.x / 2.0
        and pos.y - size.y / 2.0 < cursor.y < pos.y + size.y / 2.0
    )


def is_mouse_over_line(cursor: Vec2, start: Vec2, end: Vec2) -> bool:
    """Whether ``cursor`` is within 24 units of a line, allowing 64 past its ends."""
    center = start.lerp(end, 0.5)
    right = (end - start).normalized()
    up = Vec2(right.y, -right.x)
    along = (cursor - center).dot(right)
    length = (end - start).dot(right)
    if length == 0.0 or abs(along) >= abs(length) / 2.0 + 64.0:
        return False
    closest = start.lerp(end, along / length + 0.5)
    return abs((cursor - closest).dot(up)) < 24.0


def _drive(button: Button, held: bool, travel: float, limit: float, dt: float,
           inputs: InputState, camera: Camera, hit: Callable[[Vec2], bool]) -> Tuple[bool, float]:
    """Advance a button-driven movement; returns the new held flag and travel time."""
    if button != Button.MOUSE:
        travel += dt if inputs.is_down(button) else -dt
    else:
        if held:
            if not inputs.is_down(Key.MOUSE_LEFT):
                held = False
        elif inputs.is_pressed(Key.MOUSE_LEFT) and hit(camera.screen_to_world(inputs.mouse_position)):
            held = True
        travel += dt if held else -dt
    return held, min(max(travel, 0.0), limit)


def _draw_rail(renderer, line1: WobblyLine, line2: WobblyLine, line_tex, paint_tex,
               start: Vec2, end: Vec2, lightning: bool) -> None:
    draw_paint_line(renderer, paint_tex, start, end, lightning)
    direction = Vec2(start.y - end.y, end.x - start.x).normalized()
    pos_offset = direction * _LINE_OFFSET
    neg_offset = direction * -_LINE_OFFSET
    line1.draw(renderer, line_tex, start + neg_offset, end + neg_offset)
    line2.draw(renderer, line_tex, start + pos_offset, end + pos_offset)


@dataclass
class Floor:
    """A static walkable line."""

    start: Vec2 = field(default_factory=Vec2)
    end: Vec2 = field(default_factory=Vec2)
    line1: WobblyLine = field(default_factory=WobblyLine, repr=False, compare=False)
    line2: WobblyLine = field(default_factory=WobblyLine, repr=False, compare=False)

    def update(self, dt: float, wobble_rate: float) -> None:
        self.line1.update(dt, wobble_rate)
        self.line2.update(dt, wobble_rate)

    def draw(self, renderer, line_tex, paint_tex, lightning: bool) -> None:
        _draw_rail(renderer, self.line1, self.line2, line_tex, paint_tex, self.start, self.end, lightning)


@dataclass
class Elevator:
    """A floor that slides to a second position while its button is held."""

    start: Vec2 = field(default_factory=Vec2)
    end: Vec2 = field(default_factory=Vec2)
    new_start: Vec2 = field(default_factory=Vec2)
    new_end: Vec2 = field(default_factory=Vec2)
    travel_time: float = 0.0
    button: Button = Button.NONE
    current_travel_time: float = 0.0
    held: bool = False
    line1: WobblyLine = field(default_factory=WobblyLine, repr=False, compare=False)
    line2: WobblyLine = field(default_factory=WobblyLine, repr=False, compare=False)

    def _progress(self) -> float:
        return self.current_travel_time / self.travel_time if self.travel_time else 0.0

    def current_start(self) -> Vec2:
        return self.start.lerp(self.new_start, self._progress())

    def current_end(self) -> Vec2:
        return self.end.lerp(self.new_end, self._progress())

    def update(self, dt: float, wobble_rate: float, camera: Camera, inputs: InputState) -> None:
        self.line1.update(dt, wobble_rate)
        self.line2.update(dt, wobble_rate)
        self.held, self.current_travel_time = _drive(
            self.button, self.held, self.current_travel_time, self.travel_time, dt, inputs, camera,
            lambda point: is_mouse_over_line(point, self.current_start(), self.current_end()),
        )

    def draw(self, renderer, line_tex, paint_tex, lightning: bool) -> None:
        _draw_rail(renderer, self.line1, self.line2, line_tex, paint_tex,
                   self.current_start(), self.current_end(), lightning)


@dataclass
class DangerBlock:
    """A deadly box that moves between two positions while its button is held."""

    pos1: Vec2 = field(default_factory=Vec2)
    pos2: Vec2 = field(default_factory=Vec2)
    dimensions: Vec2 = field(default_factory=Vec2)
    button: Button = Button.NONE
    current_travel_time: float = 0.0
    held: bool = False
    wobbly_rectangle: WobblyRectangle = field(default_factory=WobblyRectangle, repr=False, compare=False)

    def current_pos(self) -> Vec2:
        return self.pos1.lerp(self.pos2, self.current_travel_time / DANGER_BLOCK_TRAVEL_TIME)

    def update(self, dt: float, wobble_rate: float, camera: Camera, inputs: InputState) -> None:
        self.wobbly_rectangle.update(dt, wobble_rate)
        self.held, self.current_travel_time = _drive(
            self.button, self.held, self.current_travel_time, DANGER_BLOCK_TRAVEL_TIME, dt, inputs, camera,
            lambda point: is_mouse_over_rectangle(point, self.current_pos(), self.dimensions),
        )

    def draw(self, renderer, line_tex, paint_tex, font, cursor_tex, lightning: bool) -> None:
        pos = self.current_pos()
        half = self.dimensions / 2.0
        self.wobbly_rectangle.draw(renderer, line_tex, paint_tex, pos - half, pos + half, lightning)
        if self.button not in (Button.NONE, Button.CANCEL):
            draw_button_text(renderer, font, cursor_tex, pos, self.button, lightning)


@dataclass
class Reverser:
    """A gate that turns the dog around once, then becomes deadly."""

    pos1: Vec2 = field(default_factory=Vec2)
    pos2: Vec2 = field(default_factory=Vec2)
    direction: Direction = Direction.LEFT
    button: Button = Button.NONE
    held: bool = False
    enabled: float = 1.0
    current_travel_time: float = 0.0
    tex_front: WobblyTexture = field(default_factory=WobblyTexture, repr=False, compare=False)
    tex_back: WobblyTexture = field(default_factory=WobblyTexture, repr=False, compare=False)

    def current_pos(self) -> Vec2:
        return self.pos1.lerp(self.pos2, self.current_travel_time / REVERSER_TRAVEL_TIME)

    def dimensions(self) -> Vec2:
        if self.direction in (Direction.LEFT, Direction.RIGHT):
            return Vec2(60.0, 220.0)
        return Vec2(220.0, 60.0)

    def update(self, dt: float, wobble_rate: float, camera: Camera, inputs: InputState) -> None:
        self.tex_front.update(dt, wobble_rate)
        self.tex_back.update(dt, wobble_rate)
        if self.enabled < 1.0:
            self.enabled = max(0.0, self.enabled - dt * 3.0)
        self.held, self.current_travel_time = _drive(
            self.button, self.held, self.current_travel_time, REVERSER_TRAVEL_TIME, dt, inputs, camera,
            lambda point: is_mouse_over_rectangle(point, self.current_pos(), self.dimensions()),
        )

    def draw(self, renderer, tex_back_enabled, tex_back_disabled, tex_outline, tex_arrows, lightning: bool) -> None:
        pos = self.current_pos()
        scale = Vec2(0.75, 0.75)
        angle = 90.0 if self.direction in (Direction.UP, Direction.DOWN) else 0.0
        flipped = self.direction in (Direction.LEFT, Direction.UP)
        if self.enabled < 1.0:
            self.tex_back.draw(renderer, tex_back_disabled, pos, scale, angle, flipped, False, 1.0, lightning)
        if self.enabled > 0.0:
            self.tex_back.draw(renderer, tex_back_enabled, pos, scale, angle, flipped, False, self.enabled, lightning)
            self.tex_front.draw(renderer, tex_arrows, pos, scale, angle, flipped, False, self.enabled)
        self.tex_front.draw(renderer, tex_outline, pos, scale, angle, flipped, True, 1.0)


_CURVE_SOURCES = {
    CurveType.NE: (128.0, 0.0, 128.0, 128.0),
    CurveType.SE: (128.0, 128.0, 128.0, 128.0),
    CurveType.SW: (0.0, 128.0, 128.0, 128.0),
    CurveType.NW: (0.0, 0.0, 128.0, 128.0),
}

# Per curve: hit offset, required (right axis, value), required (up axis, value), rotation.
_CURVE_TURNS = {
    CurveType.SE: (
        (Vec2(-16.0, 128.0), ("x", 1.0), ("y", 1.0), DogRotationTarget(90.0, -90.0)),
        (Vec2(-96.0, -64.0), ("x", 1.0), ("y", -1.0), DogRotationTarget(-90.0, -240.0)),
        (Vec2(-64.0, -96.0), ("y", 1.0), ("x", -1.0), DogRotationTarget(360.0, 240.0)),
        (Vec2(128.0, -16.0), ("y", 1.0), ("x", 1.0), DogRotationTarget(180.0, 80.0)),
    ),
    CurveType.SW: (
        (Vec2(-16.0, 128.0), ("x", -1.0), ("y", 1.0), DogRotationTarget(270.0, 90.0)),
        (Vec2(64.0, -64.0), ("x", -1.0), ("y", -1.0), DogRotationTarget(90.0, 240.0)),
        (Vec2(32.0, -96.0), ("y", 1.0), ("x", 1.0), DogRotationTarget(0.0, -240.0)),
        (Vec2(-160.0, -16.0), ("y", 1.0), ("x", -1.0), DogRotationTarget(180.0, -90.0)),
    ),
    CurveType.NE: (
        (Vec2(-16.0, -160.0), ("x", 1.0), ("y", -1.0), DogRotationTarget(90.0, 90.0)),
        (Vec2(-96.0, 32.0), ("x", 1.0), ("y", 1.0), DogRotationTarget(270.0, 240.0)),
        (Vec2(-64.0, 64.0), ("y", -1.0), ("x", -1.0), DogRotationTarget(180.0, -240.0)),
        (Vec2(128.0, -16.0), ("y", -1.0), ("x", 1.0), DogRotationTarget(0.0, -90.0)),
    ),
    CurveType.NW: (
        (Vec2(-16.0, -160.0), ("x", -1.0), ("y", -1.0), DogRotationTarget(-90.0, -90.0)),
        (Vec2(64.0, 32.0), ("x", -1.0), ("y", 1.0), DogRotationTarget(90.0, -240.0)),
        (Vec2(32.0, 64.0), ("y", -1.0), ("x", 1.0), DogRotationTarget(180.0, 240.0)),
        (Vec2(-160.0, -16.0), ("y", -1.0), ("x", -1.0), DogRotationTarget(360.0, 90.0)),
    ),
}


@dataclass
class Curve:
    """A quarter-pipe that rotates the dog onto the next wall."""

    pos: Vec2 = field(default_factory=Vec2)
    curve_type: CurveType = CurveType.NE

    def hit_curve(self, dog_pos: Vec2, offset: Vec2) -> bool:
        """Whether the dog is within 48 units of the curve's offset trigger point."""
        amount = 48.0
        point = self.pos + offset
        return (
            point.x - amount < dog_pos.x < point.x + amount
            and point.y - amount < dog_pos.y < point.y + amount
        )

    def rotation_target(self, point: Vec2, up: Vec2, right: Vec2) -> DogRotationTarget:
        """The turn to start when the dog at ``point`` enters this curve, if any."""
        for offset, (right_axis, right_value), (up_axis, up_value), target in _CURVE_TURNS[self.curve_type]:
            if (self.hit_curve(point, offset)
                    and getattr(right, right_axis) == right_value
                    and getattr(up, up_axis) == up_value):
                return target
        return DogRotationTarget()

    def draw(self, renderer, line_tex, paint_tex, lightning: bool) -> None:
        src = _CURVE_SOURCES[self.curve_type]
        dst = (self.pos.x, self.pos.y, 128.0, 128.0)
        origin = Vec2(64.0, 64.0)
        color = BLACK if lightning else WHITE
        renderer.draw_texture_pro(paint_tex, src, dst, origin, 0.0, color)
        renderer.draw_texture_pro(line_tex, src, dst, origin, 0.0, color)


@dataclass
class CameraZone:
    """A region that switches the camera to fixed settings while the dog is in it."""

    pos: Vec2 = field(default_factory=Vec2)
    size: Vec2 = field(default_factory=Vec2)
    params: Camera = field(default_factory=Camera)

    def contains_point(self, point: Vec2) -> bool:
        return is_mouse_over_rectangle(point, self.pos, self.size)


@dataclass
class Prompt:
    """A floating label showing which button to use."""

    pos: Vec2 = field(default_factory=Vec2)
    button: Button = Button.NONE

    def draw(self, renderer, font, cursor_tex, lightning: bool) -> None:
        draw_button_text(renderer, font, cursor_tex, self.pos, self.button, lightning)


@dataclass
class Item:
    """A collectable the dog picks up by walking through it."""

    pos: Vec2 = field(default_factory=Vec2)
    item_type: ItemType = ItemType.SUNGLASSES
    enabled: bool = True

    def draw(self, renderer, item_textures: Sequence) -> None:
        if not self.enabled:
            return
        texture = item_textures[int(self.item_type)]
        width, height = texture.get_width(), texture.get_height()
        corner = self.pos - Vec2(48.0, 48.0)
        renderer.draw_texture_pro(texture, (0.0, 0.0, width, height),
                                  (corner.x, corner.y, width * 0.75, height * 0.75), Vec2(), 0.0, WHITE)


@dataclass
class Checkpoint:
    """A place to restart from, with the music time and facing to restore."""

    pos: Vec2 = field(default_factory=Vec2)
    music_start_time: float = 0.0
    dog_flipped: bool = False