"""The game window: asset loading, the frame loop, drawing and sound playback."""

from __future__ import annotations

import argparse
import random
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pygame

from .controls import InputState, Key
from .editor import Editor
from .gameplay import DOG_WOBBLE_RATE, MAX_DT, WALL_WOBBLE_RATE, GameState, Play, SoundEvent
from .geometry import Vec2
from .level import Level, load_level
from .render import BLACK, WHITE, Renderer
from .wobbly import WobblyTexture

WINDOW_SIZE = (1280, 720)
WINDOW_TITLE = "Good Dog"
MUSIC_VOLUME = 0.8

DARKPURPLE = (112, 31, 126, 255)
LIGHTNING_SKY = (130, 90, 255, 255)

FETCH_TEXT = "Fetch!"
LOSE_TEXT = "Bad dog :("
LOSE_DETAILS = "'R' to restart from beginning\n'C' to restart from checkpoint"
WIN_TEXT = "Good dog :)"
WIN_DETAILS = "'F5' to use level editor\nCheck editor.txt for instructions"

GUY_POS = Vec2(332.0, 488.0)
DOG_SCALE = Vec2(0.75, 0.75)
GUY_SCALE = Vec2(1.0, 1.0)

_TEXTURE_FILES = {
    "dog_outline": ("dog_outline.png", "dog_hop1_outline.png", "dog_hop2_outline.png"),
    "dog_lose": "dog_lose_outline.png",
    "dog_back": ("dog_back.png", "dog_hop1_back.png", "dog_hop2_back.png"),
    "items": ("sunglasses.png", "hat.png", "ball.png"),
    "guy_outline": ("guy_neutral_outline.png", "guy_prethrow_outline.png", "guy_throw_outline.png"),
    "guy_back": ("guy_neutral_fill.png", "guy_prethrow_fill.png", "guy_throw_fill.png"),
    "line": "line.png",
    "paint_blue": "paint_blue.png",
    "paint_gray": "paint_gray.png",
    "paint_light_green": "paint_lightgreen.png",
    "paint_light_blue": "paint_lightblue.png",
    "reverser_back_enabled": "reverser_enabled.png",
    "reverser_back_disabled": "reverser_disabled.png",
    "reverser_outline": "reverser_outline.png",
    "reverser_arrows": "reverser_arrows.png",
    "curve_solid": "curve_solid.png",
    "curve_outline": "curve_outline.png",
    "lightning": "lightning.png",
    "cursor": "cursor.png",
    "bg": "bg.png",
    "icon": "dog_icon.png",
}

_SOUND_FILES = {
    "throw": "throw.wav",
    "woof": "woof.wav",
    "reverse": "reverse.wav",
    "lose": "lose.wav",
    "win": "cheer.wav",
    "thunder": "thunder.wav",
    "hihat": "music_hihat.wav",
}
_BUTTON_SOUND_FILES = tuple(f"button{n}.wav" for n in range(1, 8))
_FONT_FILE = "GamjaFlower-Regular.ttf"
_MUSIC_FILE = "music.wav"


@dataclass
class Assets:
    """Every texture, font and sound the game draws or plays."""

    dog_outline: Sequence
    dog_lose: object
    dog_back: Sequence
    items: Sequence
    guy_outline: Sequence
    guy_back: Sequence
    line: object
    paint_blue: object
    paint_gray: object
    paint_light_green: object
    paint_light_blue: object
    reverser_back_enabled: object
    reverser_back_disabled: object
    reverser_outline: object
    reverser_arrows: object
    curve_solid: object
    curve_outline: object
    lightning: object
    cursor: object
    bg: object
    font: object
    details_font: object
    small_font: object
    icon: object = None
    sounds: Dict[str, object] = field(default_factory=dict)
    button_sounds: List[object] = field(default_factory=list)
    music_path: Optional[Path] = None


def _require(path: Path) -> Path:
    if not path.is_file():
        raise FileNotFoundError(f"missing resource: {path}")
    return path


def load_assets(resource_dir) -> Assets:
    """Load the game's resources from ``resource_dir``.

    Sounds are loaded only when the mixer is running.
    """
    root = Path(resource_dir)
    with_sound = pygame.mixer.get_init() is not None
    needed = [_FONT_FILE, _MUSIC_FILE]
    for entry in _TEXTURE_FILES.values():
        needed.extend((entry,) if isinstance(entry, str) else entry)
    if with_sound:
        needed.extend(_SOUND_FILES.values())
        needed.extend(_BUTTON_SOUND_FILES)
    for name in needed:
        _require(root / name)

    def image(name: str):
        return pygame.image.load(str(root / name))

    textures = {
        key: image(entry) if isinstance(entry, str) else [image(name) for name in entry]
        for key, entry in _TEXTURE_FILES.items()
    }

    pygame.font.init()
    font_path = str(root / _FONT_FILE)
    fonts = {
        "font": pygame.font.Font(font_path, 80),
        "details_font": pygame.font.Font(font_path, 40),
        "small_font": pygame.font.Font(font_path, 20),
    }

    sounds: Dict[str, object] = {}
    button_sounds: List[object] = []
    if with_sound:
        sounds = {key: pygame.mixer.Sound(str(root / name)) for key, name in _SOUND_FILES.items()}
        sounds["hihat"].set_volume(MUSIC_VOLUME)
        button_sounds = [pygame.mixer.Sound(str(root / name)) for name in _BUTTON_SOUND_FILES]

    return Assets(**textures, **fonts, sounds=sounds, button_sounds=button_sounds,
                  music_path=root / _MUSIC_FILE)


class App:
    """Ties the play session, the editor and the window-level keys together."""

    def __init__(self, level: Level, assets: Optional[Assets] = None, level_path=None) -> None:
        self.level = level
        self.assets = assets
        self.play = Play(level)
        self.editor = Editor(save_path=level_path)
        self.prev_state = self.play.state
        self.prev_camera = replace(level.camera)
        self.fullscreen = False
        self.dog_outline = WobblyTexture()
        self.dog_back = WobblyTexture()
        self.guy_outline = WobblyTexture()
        self.guy_back = WobblyTexture()

    def handle_frame(self, dt: float, inputs: InputState) -> List[SoundEvent]:
        """Advance one frame and return the sound events it produced, in order."""
        dt = min(dt, MAX_DT)
        events: List[SoundEvent] = []
        play = self.play

        if inputs.is_pressed(Key.F5):
            if play.state == GameState.EDITOR:
                play.state = self.prev_state
                self.level.camera = replace(self.prev_camera)
                if play.state == GameState.GOING:
                    events.append(SoundEvent.MUSIC_PLAY)
            else:
                self.prev_camera = replace(self.level.camera)
                self.prev_state = play.state
                play.state = GameState.EDITOR
                events.append(SoundEvent.MUSIC_PAUSE)

        if inputs.is_pressed(Key.F6):
            play.restart()

        if inputs.is_pressed(Key.F11):
            self.fullscreen = not self.fullscreen

        play.update(dt, inputs)
        if play.state == GameState.EDITOR:
            self.editor.update(self.level, self.level.camera, inputs)
        events.extend(play.drain_events())

        self.dog_back.update(dt, DOG_WOBBLE_RATE)
        self.dog_outline.update(dt, DOG_WOBBLE_RATE)
        self.guy_back.update(dt, WALL_WOBBLE_RATE)
        self.guy_outline.update(dt, WALL_WOBBLE_RATE)
        return events

    def draw(self, renderer) -> None:
        """Draw the whole frame."""
        assets = self.assets
        if assets is None:
            raise RuntimeError("cannot draw without assets")
        play = self.play
        level = self.level
        lightning = play.lightning_flash()

        if lightning:
            renderer.clear(LIGHTNING_SKY)
        else:
            renderer.clear(DARKPURPLE)
            renderer.draw_texture(assets.bg, 0, 0, WHITE)

        renderer.begin_camera(level.camera)
        for prompt in level.prompts:
            prompt.draw(renderer, assets.font, assets.cursor, lightning)
        for block in level.danger_blocks:
            block.draw(renderer, assets.line, assets.paint_gray, assets.font, assets.cursor, lightning)
        for curve in level.curves:
            curve.draw(renderer, assets.curve_outline, assets.curve_solid, lightning)
        for floor in level.floors:
            floor.draw(renderer, assets.line, assets.paint_blue, lightning)
        for elevator in level.elevators:
            elevator.draw(renderer, assets.line, assets.paint_light_green, lightning)
        for reverser in level.reversers:
            reverser.draw(renderer, assets.reverser_back_enabled, assets.reverser_back_disabled,
                          assets.reverser_outline, assets.reverser_arrows, lightning)

        self._draw_dog(renderer, assets)

        guy = play.guy_frame
        self.guy_back.draw(renderer, assets.guy_back[guy], GUY_POS, GUY_SCALE, 0.0, False, False, 1.0, False)
        self.guy_outline.draw(renderer, assets.guy_outline[guy], GUY_POS, GUY_SCALE, 0.0, False, True, 1.0, False)

        if play.ball_pos.x >= 0.0 and play.state == GameState.CUTSCENE:
            renderer.draw_texture(assets.items[2], 450 + int(play.ball_pos.x * 900), 340, WHITE)
        elif play.state == GameState.WIN:
            renderer.draw_texture(assets.items[2], int(play.ball_pos.x), int(play.ball_pos.y), WHITE)

        self._draw_accessories(renderer, assets)

        for item in level.items:
            item.draw(renderer, assets.items)
        renderer.end_camera()

        if play.state == GameState.EDITOR:
            self.editor.draw(renderer, assets, level, level.camera)

        if play.lightning_flash_time > 0.2:
            renderer.draw_texture(assets.lightning, 200, 0, WHITE)

        if play.draw_fetch_text:
            _draw_title(renderer, assets.font, FETCH_TEXT)

        if play.state == GameState.LOSE:
            _draw_title(renderer, assets.font, LOSE_TEXT)
            _draw_details(renderer, assets.details_font, LOSE_DETAILS)
        elif play.state == GameState.WIN:
            _draw_title(renderer, assets.font, WIN_TEXT)
            _draw_details(renderer, assets.details_font, WIN_DETAILS)

    def _draw_dog(self, renderer, assets: Assets) -> None:
        play = self.play
        offset_pos = play.pos + play.dog_up * (-play.hop_offset)
        draw_pos = offset_pos + play.dog_right * (-12.0 if play.dog_flipped else 12.0)
        outline = assets.dog_lose if play.state == GameState.LOSE else assets.dog_outline[play.frame]
        self.dog_back.draw(renderer, assets.dog_back[play.frame], draw_pos, DOG_SCALE, play.dog_angle,
                           play.dog_flipped, False, 1.0, False)
        self.dog_outline.draw(renderer, outline, draw_pos, DOG_SCALE, play.dog_angle,
                              play.dog_flipped, True, 1.0, False)

    def _draw_accessories(self, renderer, assets: Assets) -> None:
        play = self.play
        bob = 32.0 if play.frame == 0 else (29.0 if play.frame == 2 else 0.0)
        worn = []
        if play.has_sunglasses:
            worn.append((assets.items[0], 26.0, 48.0, 28.0))
        if play.has_hat:
            worn.append((assets.items[1], 24.0, 46.0, 90.0))
        for texture, flipped_x, forward_x, height in worn:
            along = play.dog_right * (flipped_x if play.dog_flipped else forward_x)
            above = play.dog_up * (height - play.hop_offset + bob)
            self.dog_outline.draw(renderer, texture, play.pos + along + above, DOG_SCALE, play.dog_angle,
                                  play.dog_flipped, True, 1.0, False)

    def run(self) -> None:
        """Open the window and play until it is closed."""
        if self.assets is None:
            raise RuntimeError("cannot run without assets")
        pygame.init()
        screen = pygame.display.set_mode(WINDOW_SIZE)
        pygame.display.set_caption(WINDOW_TITLE)
        if self.assets.icon is not None:
            pygame.display.set_icon(self.assets.icon)
        renderer = Renderer(screen)
        audio = _Audio(self.assets)
        clock = pygame.time.Clock()
        held: set = set()
        fullscreen = self.fullscreen
        pygame.mouse.get_rel()

        try:
            while True:
                inputs = _collect_inputs(held)
                if inputs is None:
                    break
                dt = clock.tick(60) / 1000.0
                for event in self.handle_frame(dt, inputs):
                    audio.handle(event, self.play)
                if self.fullscreen != fullscreen:
                    fullscreen = self.fullscreen
                    pygame.display.toggle_fullscreen()
                self.draw(renderer)
                pygame.display.flip()
        finally:
            audio.stop()
            pygame.quit()


def _draw_title(renderer, font, text: str) -> None:
    width, _ = renderer.measure_text(font, text)
    renderer.draw_text(font, text, Vec2(640.0 - width / 2.0, 320.0), BLACK)
    renderer.draw_text(font, text, Vec2(643.0 - width / 2.0, 323.0), WHITE)


def _draw_details(renderer, font, text: str) -> None:
    lines = text.split("\n")
    sizes = [tuple(renderer.measure_text(font, line)) for line in lines]
    block = Vec2(max(w for w, _ in sizes), sum(h for _, h in sizes))
    corner = Vec2(640.0, 470.0) - block * 0.5
    y = corner.y
    for line, (_, height) in zip(lines, sizes):
        renderer.draw_text(font, line, Vec2(corner.x, y), BLACK)
        renderer.draw_text(font, line, Vec2(corner.x + 2.0, y + 2.0), WHITE)
        y += height


_KEYMAP: Dict[int, Key] = {
    **{pygame.K_a + offset: Key(Key.A + offset) for offset in range(26)},
    **{pygame.K_0 + offset: Key(Key.ZERO + offset) for offset in range(10)},
    pygame.K_KP0: Key.KP_0,
    pygame.K_KP1: Key.KP_1,
    pygame.K_KP2: Key.KP_2,
    pygame.K_KP3: Key.KP_3,
    pygame.K_KP4: Key.KP_4,
    pygame.K_KP5: Key.KP_5,
    pygame.K_KP6: Key.KP_6,
    pygame.K_KP7: Key.KP_7,
    pygame.K_KP8: Key.KP_8,
    pygame.K_KP9: Key.KP_9,
    pygame.K_BACKSPACE: Key.BACKSPACE,
    pygame.K_F5: Key.F5,
    pygame.K_F6: Key.F6,
    pygame.K_F7: Key.F7,
    pygame.K_F11: Key.F11,
    pygame.K_LSHIFT: Key.LEFT_SHIFT,
    pygame.K_LCTRL: Key.LEFT_CONTROL,
}

_MOUSEMAP = {1: Key.MOUSE_LEFT, 2: Key.MOUSE_MIDDLE, 3: Key.MOUSE_RIGHT}


def _collect_inputs(held: set) -> Optional[InputState]:
    """Read this frame's window events; ``None`` means the window should close."""
    pressed, released = set(), set()
    wheel = 0.0
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return None
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return None
            key = _KEYMAP.get(event.key)
        elif event.type == pygame.KEYUP:
            key = _KEYMAP.get(event.key)
        elif event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP):
            key = _MOUSEMAP.get(event.button)
        elif event.type == pygame.MOUSEWHEEL:
            wheel += event.y
            continue
        else:
            continue
        if key is None:
            continue
        if event.type in (pygame.KEYDOWN, pygame.MOUSEBUTTONDOWN):
            pressed.add(key)
            held.add(key)
        else:
            released.add(key)
            held.discard(key)
    mouse = Vec2(*pygame.mouse.get_pos())
    delta = Vec2(*pygame.mouse.get_rel())
    return InputState(down=held, pressed=pressed, released=released,
                      mouse_position=mouse, mouse_delta=delta, wheel=wheel)


class _Audio:
    """Plays the sound events produced by a frame."""

    def __init__(self, assets: Assets) -> None:
        self.enabled = pygame.mixer.get_init() is not None
        self.sounds = assets.sounds
        self.button_sounds = assets.button_sounds
        self.music_path = assets.music_path
        self._paused = False

    _ONE_SHOTS = {
        SoundEvent.THROW: "throw",
        SoundEvent.WOOF: "woof",
        SoundEvent.REVERSE: "reverse",
        SoundEvent.LOSE: "lose",
        SoundEvent.WIN: "win",
        SoundEvent.THUNDER: "thunder",
    }

    def handle(self, event: SoundEvent, play: Play) -> None:
        if not self.enabled:
            return
        if event in self._ONE_SHOTS:
            sound = self.sounds.get(self._ONE_SHOTS[event])
            if sound is not None:
                sound.play()
        elif event in (SoundEvent.BUTTON_PRESS, SoundEvent.BUTTON_RELEASE):
            if self.button_sounds:
                random.choice(self.button_sounds).play()
        elif event == SoundEvent.HIHAT_PLAY:
            hihat = self.sounds.get("hihat")
            if hihat is not None:
                hihat.play(loops=-1)
        elif event == SoundEvent.MUSIC_PAUSE:
            pygame.mixer.music.pause()
            self._paused = True
        elif event in (SoundEvent.MUSIC_STOP, SoundEvent.MUSIC_SEEK):
            pygame.mixer.music.stop()
            self._paused = False
        elif event == SoundEvent.MUSIC_PLAY:
            self._play_music(play.music_time)

    def _play_music(self, start: float) -> None:
        if self._paused:
            pygame.mixer.music.unpause()
            self._paused = False
            return
        if self.music_path is None:
            return
        pygame.mixer.music.load(str(self.music_path))
        pygame.mixer.music.set_volume(MUSIC_VOLUME)
        try:
            pygame.mixer.music.play(start=start)
        except pygame.error:
            pygame.mixer.music.play()

    def stop(self) -> None:
        if self.enabled:
            pygame.mixer.stop()
            pygame.mixer.music.stop()


def main(argv=None) -> int:
    """Start the game."""
    parser = argparse.ArgumentParser(prog="gooddog", description="A rhythm platformer about a good dog.")
    parser.add_argument("--resources", default="resources", help="directory holding the game's resources")
    parser.add_argument("--level", default=None, help="level file to play and edit")
    args = parser.parse_args(argv)

    resources = Path(args.resources)
    level_path = Path(args.level) if args.level else resources / "level.txt"
    try:
        level = load_level(level_path)
    except FileNotFoundError:
        print(f"Couldn't find {level_path.name}!", file=sys.stderr)
        level = Level()

    pygame.init()
    try:
        pygame.mixer.init()
    except pygame.error:
        pass
    try:
        assets = load_assets(resources)
    except FileNotFoundError as exc:
        print(exc, file=sys.stderr)
        pygame.quit()
        return 1
    App(level, assets, level_path).run()
    return 0