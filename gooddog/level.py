"""A level: every object placed in the world, plus its plain-text file format."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Tuple, Union

from .controls import Button
from .entities import (
    AssetType,
    CameraZone,
    Checkpoint,
    Curve,
    CurveType,
    DangerBlock,
    Direction,
    Elevator,
    Floor,
    Item,
    ItemType,
    Prompt,
    Reverser,
)
from .geometry import Camera, Vec2

MAX_OBJECTS = 1024
"""How many objects of each kind a level can hold."""


class LevelLimitError(Exception):
    """Raised when a level already holds the maximum number of some object."""


class LevelFormatError(ValueError):
    """Raised when level text cannot be read."""


def _default_start() -> Vec2:
    return Vec2(600.0, 550.0)


@dataclass
class Level:
    """Every object in a level, in the order they were added."""

    floors: List[Floor] = field(default_factory=list)
    curves: List[Curve] = field(default_factory=list)
    elevators: List[Elevator] = field(default_factory=list)
    danger_blocks: List[DangerBlock] = field(default_factory=list)
    reversers: List[Reverser] = field(default_factory=list)
    camera_zones: List[CameraZone] = field(default_factory=list)
    prompts: List[Prompt] = field(default_factory=list)
    items: List[Item] = field(default_factory=list)
    checkpoints: List[Checkpoint] = field(default_factory=list)
    camera: Camera = field(default_factory=Camera)
    dog_starting_pos: Vec2 = field(default_factory=_default_start)

    @staticmethod
    def _append(collection: list, obj, kind: str):
        if len(collection) >= MAX_OBJECTS:
            raise LevelLimitError(f"{kind} limit of {MAX_OBJECTS} hit")
        collection.append(obj)
        return obj

    def add_floor(self, start: Vec2, end: Vec2) -> Floor:
        return self._append(self.floors, Floor(start, end), "floor")

    def add_curve(self, pos: Vec2, curve_type: CurveType) -> Curve:
        return self._append(self.curves, Curve(pos, CurveType(curve_type)), "curve")

    def add_elevator(self, start: Vec2, end: Vec2, new_start: Vec2, new_end: Vec2,
                     travel_time: float, button: Button) -> Elevator:
        elevator = Elevator(start, end, new_start, new_end, travel_time, Button(button))
        return self._append(self.elevators, elevator, "elevator")

    def add_danger_block(self, pos1: Vec2, pos2: Vec2, size: Vec2, button: Button) -> DangerBlock:
        return self._append(self.danger_blocks, DangerBlock(pos1, pos2, size, Button(button)), "danger block")

    def add_reverser(self, pos1: Vec2, pos2: Vec2, direction: Direction, button: Button) -> Reverser:
        reverser = Reverser(pos1, pos2, Direction(direction), Button(button))
        return self._append(self.reversers, reverser, "reverser")

    def add_camera_zone(self, pos: Vec2, size: Vec2, params: Camera) -> CameraZone:
        params = Camera(params.offset, params.target, params.rotation, params.zoom)
        return self._append(self.camera_zones, CameraZone(pos, size, params), "camera zone")

    def add_prompt(self, pos: Vec2, button: Button) -> Prompt:
        return self._append(self.prompts, Prompt(pos, Button(button)), "prompt")

    def add_item(self, pos: Vec2, item_type: ItemType) -> Item:
        return self._append(self.items, Item(pos, ItemType(item_type)), "item")

    def add_checkpoint(self, pos: Vec2, music_start_time: float, dog_flipped: bool) -> Checkpoint:
        checkpoint = Checkpoint(pos, music_start_time, bool(dog_flipped))
        return self._append(self.checkpoints, checkpoint, "checkpoint")

    def reset_progress(self) -> None:
        """Re-arm every reverser and put every item back."""
        for reverser in self.reversers:
            reverser.enabled = 1.0
        for item in self.items:
            item.enabled = True

    def _records(self) -> Iterator[Tuple[AssetType, Tuple[Union[float, int], ...]]]:
        for f in self.floors:
            yield AssetType.FLOOR, (f.start.x, f.start.y, f.end.x, f.end.y)
        for c in self.curves:
            yield AssetType.CURVE, (c.pos.x, c.pos.y, int(c.curve_type))
        for e in self.elevators:
            yield AssetType.ELEVATOR, (e.start.x, e.start.y, e.end.x, e.end.y, e.new_start.x, e.new_start.y,
                                       e.new_end.x, e.new_end.y, e.travel_time, int(e.button))
        for b in self.danger_blocks:
            yield AssetType.DANGER_BLOCK, (b.pos1.x, b.pos1.y, b.pos2.x, b.pos2.y,
                                           b.dimensions.x, b.dimensions.y, int(b.button))
        for r in self.reversers:
            yield AssetType.REVERSER, (r.pos1.x, r.pos1.y, r.pos2.x, r.pos2.y, int(r.direction), int(r.button))
        for z in self.camera_zones:
            p = z.params
            yield AssetType.CAMERA_ZONE, (z.pos.x, z.pos.y, z.size.x, z.size.y, p.offset.x, p.offset.y,
                                          p.target.x, p.target.y, p.zoom)
        for p in self.prompts:
            yield AssetType.PROMPT, (p.pos.x, p.pos.y, int(p.button))
        for i in self.items:
            yield AssetType.ITEM, (i.pos.x, i.pos.y, int(i.item_type))
        for c in self.checkpoints:
            yield AssetType.CHECKPOINT, (c.pos.x, c.pos.y, c.music_start_time, 1 if c.dog_flipped else 0)

    def dumps(self) -> str:
        """The level as text: a type line, then a line of that object's fields."""
        lines = []
        for asset, values in self._records():
            lines.append(str(int(asset)))
            lines.append(" ".join(str(v) if isinstance(v, int) else f"{v:f}" for v in values))
        return "".join(line + "\n" for line in lines)

    def save(self, path) -> None:
        Path(path).write_text(self.dumps(), encoding="utf-8")


# Field kinds per asset: "f" for float, "i" for int.
_LAYOUTS: Dict[AssetType, str] = {
    AssetType.FLOOR: "ffff",
    AssetType.CURVE: "ffi",
    AssetType.ELEVATOR: "fffffffffi",
    AssetType.DANGER_BLOCK: "ffffffi",
    AssetType.REVERSER: "ffffii",
    AssetType.CAMERA_ZONE: "fffffffff",
    AssetType.PROMPT: "ffi",
    AssetType.ITEM: "ffi",
    AssetType.CHECKPOINT: "fffi",
}


def _build(level: Level, asset: AssetType, v: list) -> None:
    adders: Dict[AssetType, Callable[[], object]] = {
        AssetType.FLOOR: lambda: level.add_floor(Vec2(v[0], v[1]), Vec2(v[2], v[3])),
        AssetType.CURVE: lambda: level.add_curve(Vec2(v[0], v[1]), CurveType(v[2])),
        AssetType.ELEVATOR: lambda: level.add_elevator(
            Vec2(v[0], v[1]), Vec2(v[2], v[3]), Vec2(v[4], v[5]), Vec2(v[6], v[7]), v[8], Button(v[9])),
        AssetType.DANGER_BLOCK: lambda: level.add_danger_block(
            Vec2(v[0], v[1]), Vec2(v[2], v[3]), Vec2(v[4], v[5]), Button(v[6])),
        AssetType.REVERSER: lambda: level.add_reverser(
            Vec2(v[0], v[1]), Vec2(v[2], v[3]), Direction(v[4]), Button(v[5])),
        AssetType.CAMERA_ZONE: lambda: level.add_camera_zone(
            Vec2(v[0], v[1]), Vec2(v[2], v[3]),
            Camera(offset=Vec2(v[4], v[5]), target=Vec2(v[6], v[7]), rotation=0.0, zoom=v[8])),
        AssetType.PROMPT: lambda: level.add_prompt(Vec2(v[0], v[1]), Button(v[2])),
        AssetType.ITEM: lambda: level.add_item(Vec2(v[0], v[1]), ItemType(v[2])),
        AssetType.CHECKPOINT: lambda: level.add_checkpoint(Vec2(v[0], v[1]), v[2], v[3] == 1),
    }
    adders[asset]()


def _convert(token: str, kind: str):
    try:
        return int(token) if kind == "i" else float(token)
    except ValueError:
        raise LevelFormatError(f"bad {'integer' if kind == 'i' else 'number'}: {token!r}") from None


def parse_level(text: str) -> Level:
    """Build a level from text written by :meth:`Level.dumps`.

    Records of an unknown type carry no fields and are skipped.
    """
    level = Level()
    tokens = iter(text.split())
    for type_token in tokens:
        type_value = _convert(type_token, "i")
        try:
            asset = AssetType(type_value)
        except ValueError:
            continue
        layout = _LAYOUTS.get(asset)
        if layout is None:
            continue
        values = []
        for kind in layout:
            token = next(tokens, None)
            if token is None:
                raise LevelFormatError(f"record of type {type_value} is cut short")
            values.append(_convert(token, kind))
        try:
            _build(level, asset, values)
        except ValueError as exc:
            raise LevelFormatError(f"bad value in record of type {type_value}: {exc}") from None
    return level


def load_level(path) -> Level:
    """Read a level file."""
    return parse_level(Path(path).read_text(encoding="utf-8"))