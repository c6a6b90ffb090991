"""Keyboard and mouse input as seen by one frame of the game."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import FrozenSet

from .geometry import Vec2


class Button(IntEnum):
    """The input that drives a level object; letters share their key codes."""

    NONE = 0
    CANCEL = 1
    QMARK = 2
    MOUSE = 3
    A = 65
    B = 66
    C = 67
    D = 68
    E = 69
    F = 70
    G = 71
    H = 72
    I = 73  # noqa: E741
    J = 74
    K = 75
    L = 76
    M = 77
    N = 78
    O = 79  # noqa: E741
    P = 80
    Q = 81
    R = 82
    S = 83
    T = 84
    U = 85
    V = 86
    W = 87
    X = 88
    Y = 89
    Z = 90


class Key(IntEnum):
    """Keys and mouse buttons the game reads."""

    MOUSE_LEFT = -1
    MOUSE_RIGHT = -2
    MOUSE_MIDDLE = -3
    ZERO = 48
    ONE = 49
    TWO = 50
    THREE = 51
    FOUR = 52
    FIVE = 53
    SIX = 54
    SEVEN = 55
    EIGHT = 56
    NINE = 57
    A = 65
    B = 66
    C = 67
    D = 68
    E = 69
    F = 70
    G = 71
    H = 72
    I = 73  # noqa: E741
    J = 74
    K = 75
    L = 76
    M = 77
    N = 78
    O = 79  # noqa: E741
    P = 80
    Q = 81
    R = 82
    S = 83
    T = 84
    U = 85
    V = 86
    W = 87
    X = 88
    Y = 89
    Z = 90
    BACKSPACE = 259
    F5 = 294
    F6 = 295
    F7 = 296
    F11 = 300
    KP_0 = 320
    KP_1 = 321
    KP_2 = 322
    KP_3 = 323
    KP_4 = 324
    KP_5 = 325
    KP_6 = 326
    KP_7 = 327
    KP_8 = 328
    KP_9 = 329
    LEFT_SHIFT = 340
    LEFT_CONTROL = 341


_LETTER_KEYS = tuple(key for key in Key if Key.A <= key <= Key.Z)


@dataclass(frozen=True)
class InputState:
    """Keys held, newly pressed and newly released during a frame, plus the mouse."""

    down: FrozenSet[int] = field(default_factory=frozenset)
    pressed: FrozenSet[int] = field(default_factory=frozenset)
    released: FrozenSet[int] = field(default_factory=frozenset)
    mouse_position: Vec2 = field(default_factory=Vec2)
    mouse_delta: Vec2 = field(default_factory=Vec2)
    wheel: float = 0.0

    def __post_init__(self) -> None:
        for name in ("down", "pressed", "released"):
            object.__setattr__(self, name, frozenset(getattr(self, name)))

    def is_down(self, key: int) -> bool:
        return key in self.down

    def is_pressed(self, key: int) -> bool:
        return key in self.pressed

    def is_released(self, key: int) -> bool:
        return key in self.released


def _first_button(check) -> Button:
    if check(Key.BACKSPACE):
        return Button.CANCEL
    for key in _LETTER_KEYS:
        if check(key):
            return Button(int(key))
    if check(Key.MOUSE_LEFT):
        return Button.MOUSE
    return Button.NONE


def button_from_pressed(inputs: InputState) -> Button:
    """The button pressed this frame, by priority: cancel, letters A-Z, mouse."""
    return _first_button(inputs.is_pressed)


def button_from_released(inputs: InputState) -> Button:
    """The button released this frame, by the same priority as pressing."""
    return _first_button(inputs.is_released)