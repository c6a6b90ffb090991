"""Hand-drawn looking sprites, lines and boxes that wobble over time."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .geometry import Vec2
from .render import (
    BLACK,
    BLUE,
    GREEN,
    MAGENTA,
    ORANGE,
    PURPLE,
    RED,
    SKYBLUE,
    WHITE,
    YELLOW,
    Color,
    brighten,
)

_RNG = random.Random()

_LABEL_COLORS = (
    YELLOW, ORANGE, RED, GREEN, SKYBLUE, BLUE, PURPLE, WHITE, MAGENTA,
    RED, ORANGE, YELLOW, GREEN, SKYBLUE, BLUE, PURPLE, WHITE, MAGENTA,
    RED, ORANGE, YELLOW, GREEN, SKYBLUE, BLUE, PURPLE, WHITE,
)

_MOUSE_BUTTON = 3
_FIRST_LETTER = ord("A")
_TEXT_SHADOW_OFFSETS = (Vec2(3.0, 3.0), Vec2(-3.0, 3.0), Vec2(3.0, -3.0), Vec2(-3.0, -3.0))


def _int32(value: int) -> int:
    return ((value + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def pcg_hash(value: int) -> int:
    """PCG-style integer hash with signed 32-bit wrap-around."""
    state = _int32(value * 747796405 + 2891336453)
    shift = ((state >> 28) + 4) & 31
    word = _int32(((state >> shift) ^ state) * 277803737)
    return (word >> 22) ^ word


def hash_float(seed: int) -> float:
    """Deterministic pseudo-random float in [-1, 1] for a seed."""
    return pcg_hash(seed) / float(0xFFFFFFFF) * 2.0


def _random_state(rng: random.Random) -> int:
    return rng.randint(0, 9999)


@dataclass
class WobblyTexture:
    """Jitters a sprite's position, scale and angle at a fixed rate."""

    wobble_time: float = 0.0
    wobble_state: int = 0
    rng: random.Random = field(default=_RNG, repr=False, compare=False)

    def update(self, dt: float, wobble_rate: float) -> None:
        self.wobble_time -= dt
        if self.wobble_time <= 0.0:
            self.wobble_time = wobble_rate
            self.wobble_state = _random_state(self.rng)

    def draw(self, renderer, texture, pos: Vec2, scale: Vec2, angle: float, h_flipped: bool = False,
             stable_wobble: bool = False, alpha: float = 1.0, lightning: bool = False) -> None:
        state = self.wobble_state
        off_x = hash_float(state) * 10.0 - 5.0
        off_y = hash_float(state + 1) * 10.0 - 5.0
        if stable_wobble:
            scale_x = scale_y = 1.0
            extra_angle = 0.0
        else:
            scale_x = hash_float(state + 2) * 0.1 + 0.95
            scale_y = hash_float(state + 3) * 0.1 + 0.95
            extra_angle = hash_float(state + 4) * 2.0 - 1.0

        width, height = texture.get_width(), texture.get_height()
        frame = Vec2(width * scale_x * scale.x, height * scale_y * scale.y)
        src = (0.0, 0.0, (-1.0 if h_flipped else 1.0) * width, float(height))
        dst = (pos.x + off_x * scale.x, pos.y + off_y * scale.y, frame.x, frame.y)
        value = 0 if lightning else 255
        color = (value, value, value, int(alpha * 255))
        renderer.draw_texture_pro(texture, src, dst, frame / 2.0, angle + extra_angle, color)


def _line_segments(start: Vec2, end: Vec2, step: float):
    """Split a line into pieces of ``step`` length; the last piece ends at ``end``."""
    total = start.distance(end)
    count = int(total / step) + 1
    seg_start = start
    for index in range(count):
        last = index == count - 1
        seg_end = end if last else start.lerp(end, step * (index + 1) / total)
        yield index, last, total, seg_start, seg_end
        seg_start = seg_end


def _angle(start: Vec2, end: Vec2) -> float:
    return math.degrees(math.atan2(end.y - start.y, end.x - start.x))


@dataclass
class WobblyLine:
    """A line drawn from 128-pixel texture strips that change every tick."""

    wobble_time: float = 0.0
    wobble_state: Optional[int] = None
    rng: random.Random = field(default=_RNG, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.wobble_state is None:
            self.wobble_state = _random_state(self.rng)

    def update(self, dt: float, wobble_rate: float) -> None:
        self.wobble_time -= dt
        if self.wobble_time <= 0.0:
            self.wobble_state = _random_state(self.rng)
            self.wobble_time = wobble_rate

    def draw(self, renderer, line_tex, start: Vec2, end: Vec2) -> None:
        for index, _last, _total, s, e in _line_segments(start, end, 128.0):
            wobble = hash_float(self.wobble_state + index)
            size = s.distance(e)
            src = (wobble * 384.0, 0.0, 128.0, 32.0)
            dst = ((s.x + e.x) / 2.0, (s.y + e.y) / 2.0, size, 32.0)
            renderer.draw_texture_pro(line_tex, src, dst, Vec2(size / 2.0, 16.0), _angle(s, e) + wobble, WHITE)


def draw_paint_line(renderer, paint_tex, start: Vec2, end: Vec2, lightning: bool) -> None:
    """Fill a line with 24-pixel-wide paint strokes."""
    color = BLACK if lightning else WHITE
    total = start.distance(end)
    if total < 256.0:
        src = (0.0, hash_float(int(start.x)) * 232.0, total, 24.0)
        dst = ((start.x + end.x) / 2.0, (start.y + end.y) / 2.0, total, 24.0)
        renderer.draw_texture_pro(paint_tex, src, dst, Vec2(total / 2.0, 12.0), _angle(start, end), color)
        return
    for index, last, total, s, e in _line_segments(start, end, 256.0):
        if last:
            s = start.lerp(end, 1.0 - 256.0 / total)
        src = (0.0, hash_float(index) * 232.0, 256.0, 24.0)
        dst = ((s.x + e.x) / 2.0, (s.y + e.y) / 2.0, 256.0, 24.0)
        renderer.draw_texture_pro(paint_tex, src, dst, Vec2(128.0, 12.0), _angle(s, e), color)


@dataclass
class WobblyRectangle:
    """A painted box outlined by four wobbly lines."""

    top: WobblyLine = field(default_factory=WobblyLine)
    bottom: WobblyLine = field(default_factory=WobblyLine)
    left: WobblyLine = field(default_factory=WobblyLine)
    right: WobblyLine = field(default_factory=WobblyLine)

    def update(self, dt: float, wobble_rate: float) -> None:
        for line in (self.top, self.bottom, self.left, self.right):
            line.update(dt, wobble_rate)

    def draw(self, renderer, line_tex, paint_tex, top_left: Vec2, bot_right: Vec2, lightning: bool) -> None:
        size_x = bot_right.x - top_left.x
        size_y = bot_right.y - top_left.y
        fills_x = int(size_x / 256.0) + 1
        fills_y = int(size_y / 256.0) + 1
        src_w = size_x if fills_x == 1 else 256.0
        src_h = size_y if fills_y == 1 else 256.0
        src = ((256.0 - src_w) / 2.0, (256.0 - src_h) / 2.0, src_w, src_h)
        color = BLACK if lightning else WHITE
        for x in range(fills_x):
            dst_x = bot_right.x - src_w if x == fills_x - 1 else x * 256.0 + top_left.x
            for y in range(fills_y):
                dst_y = bot_right.y - src_h if y == fills_y - 1 else y * 256.0 + top_left.y
                renderer.draw_texture_pro(paint_tex, src, (dst_x, dst_y, src_w, src_h), Vec2(), 0.0, color)

        self.top.draw(renderer, line_tex, top_left, Vec2(bot_right.x, top_left.y))
        self.bottom.draw(renderer, line_tex, Vec2(top_left.x, bot_right.y), bot_right)
        self.left.draw(renderer, line_tex, top_left, Vec2(top_left.x, bot_right.y))
        self.right.draw(renderer, line_tex, Vec2(bot_right.x, top_left.y), bot_right)


def button_label(button: int) -> Tuple[str, Color]:
    """Letter and color shown for a letter-key button."""
    index = int(button) - _FIRST_LETTER
    if not 0 <= index < len(_LABEL_COLORS):
        raise ValueError(f"button {int(button)} has no letter label")
    return chr(_FIRST_LETTER + index), _LABEL_COLORS[index]


def _draw_outlined(renderer, font, text: str, position: Vec2, color: Color) -> None:
    corner = position - renderer.measure_text(font, text) * 0.5
    for offset in _TEXT_SHADOW_OFFSETS:
        renderer.draw_text(font, text, corner + offset, BLACK)
    renderer.draw_text(font, text, corner, color)


def draw_button_text(renderer, font, cursor_tex, position: Vec2, button: int, lightning: bool) -> None:
    """Show which input drives an object: a cursor, a letter, or a question mark."""
    button = int(button)
    if button == _MOUSE_BUTTON:
        corner = position - Vec2(40.0, 40.0)
        renderer.draw_texture(cursor_tex, int(corner.x), int(corner.y), BLACK if lightning else WHITE)
    elif button < _FIRST_LETTER:
        _draw_outlined(renderer, font, "?", position, MAGENTA)
    else:
        text, color = button_label(button)
        _draw_outlined(renderer, font, text, position, BLACK if lightning else brighten(color, 0.5))