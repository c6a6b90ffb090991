# gooddog

A small rhythm platformer. A dog runs through a hand-drawn level on its own,
and you keep it alive by holding keys (or the left mouse button) that move
elevators, slide danger blocks and shift reversers, the gates that turn the
dog around once and are deadly afterwards. Pick up the sunglasses, the hat
and finally the ball to win.

## Installing

```
pip install .
```

This pulls in `pygame`, which opens the window and plays the sound.

## Playing

```
gooddog
```

Options:

- `--resources DIR` – directory holding the images, sounds and font
  (default: `resources`).
- `--level FILE` – level file to play and to save from the editor
  (default: `level.txt` inside the resource directory).

If the level file is missing, the game prints a message and starts with an
empty level. If a resource file is missing, it prints which one and exits
with status 1. Sounds are only loaded when the audio mixer can be started;
otherwise the game runs silently.

While playing:

- Hold the letter shown on an elevator, danger block or reverser to move
  it. Pieces marked with the cursor icon move while you keep the left mouse
  button held after clicking on them.
- After losing, press `R` to restart from the beginning or `C` to restart
  from the last checkpoint reached.
- `F6` restarts at any time, `F11` toggles fullscreen, `Escape` or closing
  the window quits.

## Level editor

Press `F5` to switch between the game and the editor.

- `0`–`9` (top row or keypad) choose what to place: nothing, floor, curve,
  elevator, danger block, reverser, camera zone, prompt, item, checkpoint.
- Left click places points. Elevators, danger blocks and reversers then wait
  for the key (or left click) that will drive them; prompts wait for the key
  they show.
- Right click cycles the kind of curve or item, or the direction of a
  reverser before its first point is placed; otherwise it removes the piece
  under the cursor.
- Hold `Left Shift` to snap the point being placed onto a straight line;
  `Left Ctrl` + `S` saves the level to the level file.
- Mouse wheel zooms, the middle mouse button pans, `F7` shows how many of
  each piece are in use.

Points snap to a 4-unit grid. A level holds at most 1024 pieces of each kind
(`gooddog.level.MAX_OBJECTS`); adding more raises `LevelLimitError`.

## Level files

Levels are plain text: each piece is a line with its type number followed
by a line of its values. They can be read and written from your own code:

```python
from gooddog.level import load_level, parse_level

level = load_level("resources/level.txt")
level.add_floor(...)          # add_curve, add_elevator, add_item, ...
level.save("copy.txt")

same = parse_level(level.dumps())
```

Records with an unknown type number are skipped. `LevelFormatError` is
raised when a value is not a number or a record is cut short.

## Modules

- `gooddog.geometry` – `Vec2` and the 2D `Camera`.
- `gooddog.controls` – `Button`, `Key` and the per-frame `InputState`.
- `gooddog.entities` – floors, curves, elevators, danger blocks, reversers,
  camera zones, prompts, items and checkpoints.
- `gooddog.level` – `Level` and the file format.
- `gooddog.gameplay` – `Play`, which advances the game a frame at a time and
  queues `SoundEvent`s; it can be driven without a window.
- `gooddog.editor` – the level `Editor`.
- `gooddog.render`, `gooddog.wobbly` – drawing onto a pygame surface.
- `gooddog.app` – asset loading, the window loop and `main`.

## What is not included

The package contains no game resources. You must supply a resource
directory with the images, sounds, the `GamjaFlower-Regular.ttf` font,
`music.wav` and a level file. There is no `editor.txt` with instructions;
this README is the editor's documentation. Resuming music from a checkpoint
depends on pygame being able to seek in the music file; where it cannot,
the music starts from the beginning.