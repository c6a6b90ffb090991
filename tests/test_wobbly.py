import random

import pygame
import pytest

from gooddog.geometry import Vec2
from gooddog.render import BLACK, MAGENTA, WHITE, YELLOW, brighten
from gooddog.wobbly import (
    WobblyLine,
    WobblyRectangle,
    WobblyTexture,
    button_label,
    draw_button_text,
    draw_paint_line,
    hash_float,
    pcg_hash,
)


class RecordingRenderer:
    def __init__(self):
        self.pro = []
        self.textures = []
        self.texts = []

    def draw_texture_pro(self, texture, src, dst, origin, angle, color):
        self.pro.append((texture, src, dst, origin, angle, color))

    def draw_texture(self, texture, x, y, color):
        self.textures.append((texture, x, y, color))

    def measure_text(self, font, text):
        return Vec2(40.0, 80.0)

    def draw_text(self, font, text, pos, color):
        self.texts.append((text, pos, color))


@pytest.fixture
def line_tex():
    return pygame.Surface((512, 32))


@pytest.fixture
def paint_tex():
    return pygame.Surface((256, 256))


def test_pcg_hash_is_deterministic_int32():
    for seed in range(-50, 50):
        value = pcg_hash(seed)
        assert value == pcg_hash(seed)
        assert -(2**31) <= value < 2**31


def test_pcg_hash_spreads_neighbours():
    values = {pcg_hash(seed) for seed in range(1000)}
    assert len(values) > 990


def test_hash_float_range():
    values = [hash_float(seed) for seed in range(2000)]
    assert all(-1.0 <= v <= 1.0 for v in values)
    assert min(values) < 0.0 < max(values)


def test_texture_update_rerolls_after_rate():
    tex = WobblyTexture(rng=random.Random(3))
    tex.update(0.1, 0.5)
    assert tex.wobble_time == 0.5
    assert 0 <= tex.wobble_state <= 9999
    state = tex.wobble_state
    tex.update(0.1, 0.5)
    assert tex.wobble_time == pytest.approx(0.4)
    assert tex.wobble_state == state


def test_line_starts_with_random_state():
    line = WobblyLine(rng=random.Random(1))
    assert 0 <= line.wobble_state <= 9999
    line.update(1.0, 0.25)
    assert line.wobble_time == 0.25


def test_texture_draw_stable_and_flipped():
    renderer = RecordingRenderer()
    texture = pygame.Surface((100, 50))
    WobblyTexture(wobble_state=7).draw(renderer, texture, Vec2(0, 0), Vec2(0.5, 0.5), 10.0, h_flipped=True,
                                        stable_wobble=True, alpha=1.0, lightning=True)
    (_, src, dst, origin, angle, color), = renderer.pro
    assert src[2] == -100
    assert dst[2] == 100 * 0.5 and dst[3] == 50 * 0.5
    assert origin == Vec2(dst[2] / 2, dst[3] / 2)
    assert angle == 10.0
    assert color == (0, 0, 0, 255)


def test_texture_draw_offset_is_small_and_alpha_used():
    renderer = RecordingRenderer()
    texture = pygame.Surface((64, 64))
    WobblyTexture(wobble_state=123).draw(renderer, texture, Vec2(200, 300), Vec2(1, 1), 0.0, alpha=0.5)
    (_, src, dst, _, angle, color), = renderer.pro
    assert abs(dst[0] - 200) <= 5 and abs(dst[1] - 300) <= 5
    assert 0.95 * 64 - 1e-6 <= dst[2] <= 1.05 * 64 + 1e-6
    assert abs(angle) <= 1.0
    assert color[3] == int(0.5 * 255)
    assert src[2] > 0


@pytest.mark.parametrize("length", [50.0, 128.0, 300.0, 1000.0])
def test_wobbly_line_segments_cover_line(line_tex, length):
    renderer = RecordingRenderer()
    start, end = Vec2(10.0, 20.0), Vec2(10.0 + length, 20.0)
    WobblyLine(wobble_state=5).draw(renderer, line_tex, start, end)
    assert len(renderer.pro) == int(length / 128) + 1
    assert sum(call[2][2] for call in renderer.pro) == pytest.approx(length)
    last_dst = renderer.pro[-1][2]
    assert last_dst[0] + last_dst[2] / 2 == pytest.approx(end.x)


def test_short_paint_line_is_one_stroke(paint_tex):
    renderer = RecordingRenderer()
    draw_paint_line(renderer, paint_tex, Vec2(0, 0), Vec2(0, 100), False)
    (_, src, dst, origin, angle, color), = renderer.pro
    assert src[2] == 100 and dst[2] == 100
    assert angle == pytest.approx(90.0)
    assert color == WHITE


def test_long_paint_line_ends_at_end(paint_tex):
    renderer = RecordingRenderer()
    start, end = Vec2(0, 0), Vec2(700, 0)
    draw_paint_line(renderer, paint_tex, start, end, True)
    assert len(renderer.pro) == int(700 / 256) + 1
    assert all(call[2][2] == 256.0 for call in renderer.pro)
    assert all(call[5] == BLACK for call in renderer.pro)
    last_dst = renderer.pro[-1][2]
    assert last_dst[0] + 128 == pytest.approx(end.x)


def test_rectangle_fills_stay_inside(line_tex, paint_tex):
    renderer = RecordingRenderer()
    top_left, bot_right = Vec2(0, 0), Vec2(600, 100)
    WobblyRectangle().draw(renderer, line_tex, paint_tex, top_left, bot_right, False)
    fills = [call for call in renderer.pro if call[0] is paint_tex]
    lines = [call for call in renderer.pro if call[0] is line_tex]
    assert len(fills) == (int(600 / 256) + 1) * (int(100 / 256) + 1)
    assert max(d[0] + d[2] for _, _, d, *_ in fills) == pytest.approx(bot_right.x)
    assert min(d[0] for _, _, d, *_ in fills) == pytest.approx(top_left.x)
    assert len(lines) >= 4


def test_rectangle_update_updates_all_sides():
    rect = WobblyRectangle()
    rect.update(1.0, 0.75)
    assert [side.wobble_time for side in (rect.top, rect.bottom, rect.left, rect.right)] == [0.75] * 4


def test_button_label_letters():
    assert button_label(65) == ("A", YELLOW)
    assert button_label(90) == ("Z", WHITE)


@pytest.mark.parametrize("button", [0, 3, 64, 91])
def test_button_label_rejects_non_letters(button):
    with pytest.raises(ValueError):
        button_label(button)


def test_draw_button_text_mouse_draws_cursor():
    renderer = RecordingRenderer()
    cursor = pygame.Surface((80, 80))
    draw_button_text(renderer, None, cursor, Vec2(100, 100), 3, False)
    assert renderer.textures == [(cursor, 60, 60, WHITE)]
    assert renderer.texts == []


def test_draw_button_text_question_mark():
    renderer = RecordingRenderer()
    draw_button_text(renderer, None, None, Vec2(100, 100), 2, False)
    assert [t[0] for t in renderer.texts] == ["?"] * 5
    assert [t[2] for t in renderer.texts[:4]] == [BLACK] * 4
    assert renderer.texts[-1][2] == MAGENTA


def test_draw_button_text_letter_is_brightened():
    renderer = RecordingRenderer()
    draw_button_text(renderer, None, None, Vec2(100, 100), 65, False)
    assert renderer.texts[-1][0] == "A"
    assert renderer.texts[-1][2] == brighten(YELLOW, 0.5)
    centre = renderer.texts[-1][1] + Vec2(40.0, 80.0) * 0.5
    assert centre == Vec2(100, 100)


def test_draw_button_text_letter_in_lightning_is_black():
    renderer = RecordingRenderer()
    draw_button_text(renderer, None, None, Vec2(0, 0), 70, True)
    assert all(t[2] == BLACK for t in renderer.texts)