"""The in-game level editor: placing, snapping and removing level objects."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .controls import Button, InputState, Key, button_from_pressed
from .entities import (
    AssetType,
    Curve,
    CurveType,
    DangerBlock,
    Direction,
    Elevator,
    Floor,
    Item,
    ItemType,
    Reverser,
    is_mouse_over_line,
    is_mouse_over_rectangle,
)
from .geometry import Camera, Vec2
from .level import MAX_OBJECTS, Level
from .render import BLUE, GREEN, SKYBLUE, WHITE, YELLOW
from .wobbly import draw_button_text

GRID = 4.0
ELEVATOR_TRAVEL_TIME = 0.4
MIN_ZOOM = 0.125
MAX_ZOOM = 3.0
ZOOM_STEP = 0.125

_SELECT_KEYS = (
    (Key.KP_0, Key.ZERO, AssetType.NONE),
    (Key.KP_1, Key.ONE, AssetType.FLOOR),
    (Key.KP_2, Key.TWO, AssetType.CURVE),
    (Key.KP_3, Key.THREE, AssetType.ELEVATOR),
    (Key.KP_4, Key.FOUR, AssetType.DANGER_BLOCK),
    (Key.KP_5, Key.FIVE, AssetType.REVERSER),
    (Key.KP_6, Key.SIX, AssetType.CAMERA_ZONE),
    (Key.KP_7, Key.SEVEN, AssetType.PROMPT),
    (Key.KP_8, Key.EIGHT, AssetType.ITEM),
    (Key.KP_9, Key.NINE, AssetType.CHECKPOINT),
)

_CURVE_CHOICES = (CurveType.SE, CurveType.NE, CurveType.NW, CurveType.SW)
_DIRECTION_CHOICES = (Direction.LEFT, Direction.UP, Direction.RIGHT, Direction.DOWN)
_ITEM_CHOICES = (ItemType.SUNGLASSES, ItemType.HAT, ItemType.BALL)

_LIMIT_LABELS = (
    ("Floors", "floors"),
    ("Curves", "curves"),
    ("Elevators", "elevators"),
    ("Danger blocks", "danger_blocks"),
    ("Reversers", "reversers"),
    ("Camera zones", "camera_zones"),
    ("Prompts", "prompts"),
    ("Items", "items"),
    ("Checkpoints", "checkpoints"),
)

_CHECKPOINT_SIZE = Vec2(192.0, 192.0)


def _snap_to_grid(point: Vec2) -> Vec2:
    return Vec2(int(point.x / GRID) * GRID, int(point.y / GRID) * GRID)


def _clamp_zoom(zoom: float) -> float:
    return min(MAX_ZOOM, max(MIN_ZOOM, zoom))


@dataclass
class Editor:
    """Editing state: what is being placed, how far along, and the points chosen so far."""

    placing_pos: Vec2 = field(default_factory=Vec2)
    placing_asset: AssetType = AssetType.NONE
    placing_step: int = 0
    v1: Vec2 = field(default_factory=Vec2)
    v2: Vec2 = field(default_factory=Vec2)
    v3: Vec2 = field(default_factory=Vec2)
    v4: Vec2 = field(default_factory=Vec2)
    v5: int = 0
    button: Button = Button.NONE
    show_limits: bool = False
    save_path: Optional[Union[str, Path]] = None

    def select(self, asset: AssetType) -> None:
        """Start placing a new kind of object from its first step."""
        self.placing_asset = AssetType(asset)
        self.placing_step = 0

    def snap_to(self, other: Vec2) -> None:
        """Line the placing point up with ``other`` along its dominant axis."""
        diff = self.placing_pos - other
        if abs(diff.x) > abs(diff.y):
            self.placing_pos = replace(self.placing_pos, y=other.y)
        else:
            self.placing_pos = replace(self.placing_pos, x=other.x)

    def remove_at(self, level: Level, point: Vec2) -> bool:
        """Remove the first object under ``point``; the last one of its kind takes its place."""
        checks: List[Tuple[list, Callable[[object], bool]]] = [
            (level.floors, lambda f: is_mouse_over_line(point, f.start, f.end)),
            (level.curves, lambda c: is_mouse_over_rectangle(point, c.pos, Vec2(128.0, 128.0))),
            (level.elevators, lambda e: is_mouse_over_line(point, e.start, e.end)),
            (level.danger_blocks, lambda b: is_mouse_over_rectangle(point, b.pos1, b.dimensions)),
            (level.reversers, lambda r: is_mouse_over_rectangle(point, r.pos1, r.dimensions())),
            (level.prompts, lambda p: is_mouse_over_rectangle(point, p.pos, Vec2(64.0, 64.0))),
            (level.items, lambda i: is_mouse_over_rectangle(point, i.pos, Vec2(128.0, 128.0))),
            (level.checkpoints, lambda c: is_mouse_over_rectangle(point, c.pos, _CHECKPOINT_SIZE)),
            (level.camera_zones, lambda z: z.contains_point(point)),
        ]
        for collection, hit in checks:
            index = next((i for i, obj in enumerate(collection) if hit(obj)), None)
            if index is not None:
                collection[index] = collection[-1]
                collection.pop()
                return True
        return False

    def update(self, level: Level, camera: Camera, inputs: InputState) -> None:
        """Handle one frame of editor input, changing ``camera`` and ``level`` in place."""
        if inputs.is_down(Key.LEFT_CONTROL) and inputs.is_pressed(Key.S) and self.save_path is not None:
            level.save(self.save_path)

        if inputs.is_pressed(Key.F7):
            self.show_limits = not self.show_limits

        if inputs.wheel:
            world = camera.screen_to_world(inputs.mouse_position)
            camera.offset = inputs.mouse_position
            camera.target = world
            camera.zoom = _clamp_zoom(camera.zoom + inputs.wheel * ZOOM_STEP)

        if inputs.is_down(Key.MOUSE_MIDDLE):
            camera.target = camera.target + inputs.mouse_delta * (-1.0 / camera.zoom)

        self.placing_pos = _snap_to_grid(camera.screen_to_world(inputs.mouse_position))

        for keypad, digit, asset in _SELECT_KEYS:
            if inputs.is_pressed(keypad) or inputs.is_pressed(digit):
                self.select(asset)
                if asset == AssetType.CHECKPOINT:
                    self.v5 = 0

        if inputs.is_pressed(Key.MOUSE_RIGHT):
            self._right_click(level)

        if self.placing_asset != AssetType.NONE:
            self._place(level, camera, inputs)

    def _right_click(self, level: Level) -> None:
        asset = self.placing_asset
        if (asset == AssetType.CURVE or asset == AssetType.ITEM
                or (asset == AssetType.REVERSER and self.placing_step == 0)):
            self.v5 += 1
            if (asset == AssetType.ITEM and self.v5 > 2) or self.v5 > 3:
                self.v5 = 0
        else:
            self.remove_at(level, self.placing_pos)

    def _finish(self) -> None:
        self.placing_step = 0

    def _place(self, level: Level, camera: Camera, inputs: InputState) -> None:
        clicked = inputs.is_pressed(Key.MOUSE_LEFT)
        shift = inputs.is_down(Key.LEFT_SHIFT)
        step = self.placing_step
        asset = self.placing_asset

        if asset == AssetType.FLOOR:
            if step == 0 and clicked:
                self.v1 = self.placing_pos
                self.placing_step += 1
            elif step == 1:
                if shift:
                    self.snap_to(self.v1)
                if clicked:
                    self._finish()
                    level.add_floor(self.v1, self.placing_pos)

        elif asset == AssetType.CURVE:
            if clicked:
                self._finish()
                level.add_curve(self.placing_pos, _CURVE_CHOICES[self.v5])

        elif asset == AssetType.ELEVATOR:
            if step == 0 and clicked:
                self.v1 = self.placing_pos
                self.placing_step += 1
            elif step == 1:
                if shift:
                    self.snap_to(self.v1)
                if clicked:
                    self.v2 = self.placing_pos
                    self.placing_step += 1
            elif step == 2:
                if shift:
                    self.snap_to(self.v1)
                if clicked:
                    self.v3 = self.placing_pos
                    self.placing_step += 1
            elif step == 3:
                if shift:
                    self.snap_to(self.v2)
                    if inputs.is_down(Key.LEFT_CONTROL):
                        self.snap_to(self.v3)
                if clicked:
                    self.v4 = self.placing_pos
                    self.placing_step += 1
            elif step == 4:
                button = button_from_pressed(inputs)
                if button != Button.NONE:
                    self._finish()
                    level.add_elevator(self.v1, self.v2, self.v3, self.v4, ELEVATOR_TRAVEL_TIME, button)

        elif asset == AssetType.DANGER_BLOCK:
            if step == 0 and clicked:
                self.v1 = self.placing_pos
                self.placing_step += 1
            elif step == 1:
                if clicked:
                    self.v2 = self.placing_pos
                    self.placing_step += 1
            elif step == 2:
                if shift:
                    self.snap_to((self.v2 + self.v1) * 0.5)
                if clicked:
                    self.v3 = self.placing_pos
                    self.placing_step += 1
            elif step == 3:
                button = button_from_pressed(inputs)
                if button != Button.NONE:
                    self._finish()
                    center = (self.v2 + self.v1) * 0.5
                    level.add_danger_block(center, self.v3, self.v2 - self.v1, button)

        elif asset == AssetType.REVERSER:
            if step == 0 and clicked:
                self.v1 = self.placing_pos
                self.placing_step += 1
            elif step == 1:
                if shift:
                    self.snap_to(self.v1)
                if clicked:
                    self.v2 = self.placing_pos
                    self.placing_step += 1
            elif step == 2:
                button = button_from_pressed(inputs)
                if button != Button.NONE:
                    self._finish()
                    level.add_reverser(self.v1, self.v2, _DIRECTION_CHOICES[self.v5], button)

        elif asset == AssetType.CAMERA_ZONE:
            if step == 0 and clicked:
                self.v1 = self.placing_pos
                self.placing_step += 1
            elif step == 1 and clicked:
                self.v2 = self.placing_pos
                self.placing_step += 1
            elif step == 2 and clicked:
                self._finish()
                level.add_camera_zone((self.v1 + self.v2) * 0.5, self.v2 - self.v1, camera)

        elif asset == AssetType.PROMPT:
            if step == 0 and clicked:
                self.v1 = self.placing_pos
                self.placing_step += 1
            elif step == 1:
                button = button_from_pressed(inputs)
                if button not in (Button.NONE, Button.CANCEL):
                    self._finish()
                    level.add_prompt(self.v1, button)

        elif asset == AssetType.ITEM:
            if clicked:
                self._finish()
                level.add_item(self.placing_pos, _ITEM_CHOICES[self.v5])

        elif asset == AssetType.CHECKPOINT:
            if step == 0 and clicked:
                self.v1 = self.placing_pos
                self.placing_step += 1
            elif step == 1 and clicked:
                self._finish()
                level.add_checkpoint(self.v1, 0.0, self.placing_pos.x < self.v1.x)

    def draw(self, renderer, assets, level: Level, camera: Camera) -> None:
        """Draw zone and checkpoint outlines, the object being placed, and the limits overlay."""
        thickness = 2.0 / camera.zoom
        renderer.begin_camera(camera)
        for zone in level.camera_zones:
            corner = zone.pos - zone.size / 2.0
            renderer.draw_rectangle_lines((corner.x, corner.y, zone.size.x, zone.size.y), thickness, SKYBLUE)
        for checkpoint in level.checkpoints:
            corner = checkpoint.pos - _CHECKPOINT_SIZE / 2.0
            renderer.draw_rectangle_lines((corner.x, corner.y, 192.0, 192.0), thickness, GREEN)
        self._draw_preview(renderer, assets, thickness)
        renderer.end_camera()

        if self.show_limits:
            for row, (label, name) in enumerate(_LIMIT_LABELS):
                text = f"{label}: {len(getattr(level, name))}/{MAX_OBJECTS}"
                renderer.draw_text(assets.small_font, text, Vec2(10.0, 10.0 + 30.0 * row), YELLOW)

    def _marker(self, renderer, half: int, color) -> None:
        renderer.draw_rectangle(int(self.placing_pos.x) - half, int(self.placing_pos.y) - half,
                                half * 2, half * 2, color)

    def _draw_preview(self, renderer, assets, thickness: float) -> None:
        asset = self.placing_asset
        step = self.placing_step
        pos = self.placing_pos

        if asset == AssetType.FLOOR:
            if step == 0:
                self._marker(renderer, 12, BLUE)
            else:
                Floor(self.v1, pos).draw(renderer, assets.line, assets.paint_blue, False)

        elif asset == AssetType.CURVE:
            Curve(pos, _CURVE_CHOICES[self.v5]).draw(renderer, assets.curve_outline, assets.curve_solid, False)

        elif asset == AssetType.ELEVATOR:
            if step == 0:
                self._marker(renderer, 12, GREEN)
                return
            end = pos if step == 1 else self.v2
            Elevator(self.v1, end, Vec2(), Vec2(), 0.5, Button.NONE).draw(
                renderer, assets.line, assets.paint_light_green, False)
            if step == 2:
                renderer.draw_line(self.v1, pos, GREEN)
            elif step == 3:
                renderer.draw_line(self.v1, self.v3, GREEN)
                renderer.draw_line(self.v2, pos, GREEN)
            elif step > 3:
                renderer.draw_line(self.v1, self.v3, GREEN)
                renderer.draw_line(self.v2, self.v4, GREEN)
                draw_button_text(renderer, assets.font, assets.cursor, (self.v1 + self.v2) * 0.5,
                                 Button.QMARK, False)

        elif asset == AssetType.DANGER_BLOCK:
            if step == 0:
                self._marker(renderer, 12, WHITE)
                return
            bot_right = pos if step == 1 else self.v2
            center = (self.v1 + bot_right) * 0.5
            size = bot_right - self.v1
            label = Button.QMARK if step == 3 else Button.NONE
            DangerBlock(center, Vec2(), size, label).draw(
                renderer, assets.line, assets.paint_gray, assets.font, assets.cursor, False)
            if step > 1:
                renderer.draw_line(center, pos if step == 2 else self.v3, WHITE)

        elif asset == AssetType.REVERSER:
            anchor = pos if step == 0 else self.v1
            Reverser(anchor, Vec2(), _DIRECTION_CHOICES[self.v5], Button.NONE).draw(
                renderer, assets.reverser_back_enabled, assets.reverser_back_disabled,
                assets.reverser_outline, assets.reverser_arrows, False)
            if step == 1:
                renderer.draw_line(self.v1, pos, GREEN)
            elif step == 2:
                renderer.draw_line(self.v1, self.v2, GREEN)
                draw_button_text(renderer, assets.font, assets.cursor, self.v1, Button.QMARK, False)

        elif asset == AssetType.CAMERA_ZONE:
            if step == 0:
                self._marker(renderer, 12, SKYBLUE)
            else:
                size = (pos if step == 1 else self.v2) - self.v1
                renderer.draw_rectangle_lines((self.v1.x, self.v1.y, size.x, size.y), thickness, SKYBLUE)

        elif asset == AssetType.PROMPT:
            if step == 0:
                self._marker(renderer, 32, WHITE)
            else:
                draw_button_text(renderer, assets.font, assets.cursor, self.v1, Button.QMARK, False)

        elif asset == AssetType.ITEM:
            Item(pos, _ITEM_CHOICES[self.v5]).draw(renderer, assets.items)

        elif asset == AssetType.CHECKPOINT:
            anchor = pos if step == 0 else self.v1
            corner = anchor - _CHECKPOINT_SIZE / 2.0
            renderer.draw_rectangle_lines((corner.x, corner.y, 192.0, 192.0), thickness, GREEN)
            if step == 1:
                reach = 256.0 if pos.x > self.v1.x else -256.0
                renderer.draw_line(self.v1, Vec2(self.v1.x + reach, self.v1.y), GREEN, thickness)