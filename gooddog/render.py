"""Drawing onto a pygame surface with an optional 2D camera."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import pygame

from .geometry import Camera, Vec2

Color = Tuple[int, int, int, int]

WHITE: Color = (255, 255, 255, 255)
BLACK: Color = (0, 0, 0, 255)
YELLOW: Color = (253, 249, 0, 255)
ORANGE: Color = (255, 161, 0, 255)
RED: Color = (230, 41, 55, 255)
GREEN: Color = (0, 228, 48, 255)
SKYBLUE: Color = (102, 191, 255, 255)
BLUE: Color = (0, 121, 241, 255)
PURPLE: Color = (200, 122, 255, 255)
MAGENTA: Color = (255, 0, 255, 255)
DARKPURPLE: Color = (112, 31, 126, 255)


def brighten(color: Color, factor: float) -> Color:
    """Move a color towards white (factor > 0) or black (factor < 0)."""
    factor = max(-1.0, min(1.0, factor))
    r, g, b, a = color
    if factor < 0.0:
        scale = 1.0 + factor
        channels = (c * scale for c in (r, g, b))
    else:
        channels = ((255 - c) * factor + c for c in (r, g, b))
    nr, ng, nb = (int(c) for c in channels)
    return (nr, ng, nb, a)


def _sample(texture: pygame.Surface, x: float, y: float, width: float, height: float) -> pygame.Surface:
    """Cut a region out of a texture, repeating the texture outside its bounds."""
    out_w, out_h = max(1, round(width)), max(1, round(height))
    tex_w, tex_h = texture.get_size()
    out = pygame.Surface((out_w, out_h), pygame.SRCALPHA)
    start_x = math.floor(x) % tex_w
    start_y = math.floor(y) % tex_h
    for by in range(-start_y, out_h, tex_h):
        for bx in range(-start_x, out_w, tex_w):
            out.blit(texture, (bx, by), special_flags=pygame.BLEND_RGBA_MAX)
    return out


class Renderer:
    """Draws textures, shapes and text onto a surface."""

    def __init__(self, surface: pygame.Surface) -> None:
        self.surface = surface
        self._camera: Optional[Camera] = None

    def _to_screen(self, point: Vec2) -> Vec2:
        return self._camera.world_to_screen(point) if self._camera else point

    @property
    def _zoom(self) -> float:
        return self._camera.zoom if self._camera else 1.0

    @property
    def _rotation(self) -> float:
        return self._camera.rotation if self._camera else 0.0

    def clear(self, color: Color) -> None:
        self.surface.fill(color)

    def begin_camera(self, camera: Camera) -> None:
        self._camera = camera

    def end_camera(self) -> None:
        self._camera = None

    def draw_texture_pro(self, texture, src: Sequence[float], dst: Sequence[float], origin, angle: float, color: Color) -> None:
        """Draw part of a texture into a rotated destination rectangle.

        A negative source width or height flips the image; ``origin`` is the
        rotation pivot relative to the destination rectangle.
        """
        sx, sy, sw, sh = src
        dx, dy, dw, dh = dst
        if not (sw and sh and dw and dh):
            return
        image = _sample(texture, sx, sy, abs(sw), abs(sh))
        if sw < 0 or sh < 0:
            image = pygame.transform.flip(image, sw < 0, sh < 0)

        zoom = self._zoom
        pivot = self._to_screen(Vec2(dx, dy))
        width, height = abs(dw) * zoom, abs(dh) * zoom
        ox, oy = origin
        ox, oy = ox * zoom, oy * zoom
        rotation = angle + self._rotation

        image = pygame.transform.scale(image, (max(1, round(width)), max(1, round(height))))
        if tuple(color) != WHITE:
            image.fill(color, special_flags=pygame.BLEND_RGBA_MULT)
        if rotation % 360.0:
            image = pygame.transform.rotate(image, -rotation)

        rad = math.radians(rotation)
        vx, vy = width / 2.0 - ox, height / 2.0 - oy
        cx = pivot.x + vx * math.cos(rad) - vy * math.sin(rad)
        cy = pivot.y + vx * math.sin(rad) + vy * math.cos(rad)
        self.surface.blit(image, image.get_rect(center=(round(cx), round(cy))))

    def draw_texture(self, texture, x: float, y: float, color: Color) -> None:
        width, height = texture.get_size()
        self.draw_texture_pro(texture, (0, 0, width, height), (x, y, width, height), Vec2(), 0.0, color)

    def measure_text(self, font: pygame.font.Font, text: str) -> Vec2:
        lines = text.split("\n")
        width = max(font.size(line)[0] for line in lines)
        return Vec2(float(width), float(font.get_height() * len(lines)))

    def draw_text(self, font: pygame.font.Font, text: str, pos: Vec2, color: Color) -> None:
        origin = self._to_screen(pos)
        zoom = self._zoom
        line_height = font.get_height() * zoom
        for index, line in enumerate(text.split("\n")):
            if not line:
                continue
            image = font.render(line, True, color[:3])
            if len(color) > 3 and color[3] != 255:
                image.set_alpha(color[3])
            if zoom != 1.0:
                w, h = image.get_size()
                image = pygame.transform.scale(image, (max(1, round(w * zoom)), max(1, round(h * zoom))))
            self.surface.blit(image, (round(origin.x), round(origin.y + index * line_height)))

    def _corners(self, x: float, y: float, width: float, height: float):
        return [
            tuple(self._to_screen(p))
            for p in (Vec2(x, y), Vec2(x + width, y), Vec2(x + width, y + height), Vec2(x, y + height))
        ]

    def draw_rectangle(self, x: float, y: float, width: float, height: float, color: Color) -> None:
        pygame.draw.polygon(self.surface, color, self._corners(x, y, width, height))

    def draw_rectangle_lines(self, rect: Sequence[float], thickness: float, color: Color) -> None:
        x, y, width, height = rect
        line_width = max(1, round(thickness * self._zoom))
        pygame.draw.polygon(self.surface, color, self._corners(x, y, width, height), line_width)

    def draw_line(self, start: Vec2, end: Vec2, color: Color, thickness: float = 1.0) -> None:
        line_width = max(1, round(thickness * self._zoom))
        pygame.draw.line(self.surface, color, tuple(self._to_screen(start)), tuple(self._to_screen(end)), line_width)