# eternalmaze

A small first-person maze explorer. It reads a `.cub` scene file that names
four wall textures (XPM images), a floor and a ceiling colour, and a grid map,
then renders the maze with textured ray casting and a minimap overlay in a
1280×720 pygame window.

## Installation

```
pip install .
```

## Running

```
eternalmaze path/to/scene.cub
```

The argument must be a single path ending in `.cub` whose file name is more
than just the extension. Otherwise a usage message
(`Usage: eternalmaze map.cub`) is written to standard error and the program
exits with status 1.

Any problem with the scene itself (a missing, unreadable or empty file, a bad
line, an invalid map, a texture that cannot be loaded) is reported on standard
error with the prefix `ETERNAL MAZE:` and the program exits with status 1.

### Controls

| Key         | Action                  |
|-------------|-------------------------|
| W / S       | move forward / backward |
| A / D       | strafe left / right     |
| Left arrow  | turn left               |
| Right arrow | turn right              |
| Esc         | quit                    |

Held keys repeat. Closing the window also quits. Movement is checked one axis
at a time, so the player slides along walls.

## Scene files

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm

F 220,100,0
C 225,30,0

111111
100101
1010N1
111111
```

* `NO`, `SO`, `WE`, `EA` (each followed by a space) give the texture for each
  wall face.
* `F` and `C` give the floor and ceiling colours as `R,G,B`, each 0–255.
* The map starts at the first line whose first non-blank character is `0` or
  `1`; every line after it belongs to the map. It may contain `0` (floor),
  `1` (wall), spaces, and exactly one of `N`, `S`, `E`, `W` marking the start
  position and facing. Rows are padded with spaces to the longest row. The
  area reachable from the start must be closed by walls.
* Empty lines before the map are ignored; any other line is an error.

Exactly four texture lines and two colour lines must appear before the map.

### Textures

Textures are XPM files: a header of width, height, colour count and
characters per pixel, colour lines using the `c` key with `#RRGGBB` values or
X11 colour names (`None` is transparent), and pixel rows. C-style comments
outside quoted strings are ignored. Texture heights should be powers of two,
since the vertical texture coordinate wraps with a bit mask.

## Using the library

The modules can be used on their own:

* `eternalmaze.config` — `load_config(path)` checks the path and parses the
  scene file into a `MazeConfig` (with `env: Environment` and
  `maze_map: MazeMap`); `parse_config(text)` does the same from a string.
  Invalid input raises `ConfigError`.
* `eternalmaze.xpm` — `read_xpm(path)` loads an XPM file into an `XpmImage`
  (`width`, `height`, `pixels`, `pixel(x, y)`); `parse_xpm(lines)` parses
  already extracted XPM strings. Failures raise `XpmError`.
* `eternalmaze.colors` — `color_by_name(name)` looks up an X11 colour name,
  case-insensitively, returning `0xRRGGBB`, `-1` for `"none"`, or `None`.
* `eternalmaze.movement` — `move_forward`, `move_backward`, `move_left`,
  `move_right`, `rotate_left`, `rotate_right`, and
  `apply_action(grid, player, action)` for an `Action`.
* `eternalmaze.raycast` — renders into a `FrameBuffer` of 32-bit pixels:
  `cast_ray(grid, player, camera_x)` returns a `Hit`, and
  `render_frame(frame, config, textures)` draws floor, ceiling, textured
  walls and the minimap.
* `eternalmaze.app` — `load_textures(env)`, `action_for_key(key)` and the
  `Game` class (`handle_key`, `render`, `run`); `main(argv)` is the command.

```python
from eternalmaze.config import load_config
from eternalmaze.raycast import FrameBuffer, cast_ray

config = load_config("scene.cub")
hit = cast_ray(config.maze_map.grid, config.maze_map.player, 0.0)
print(hit.distance, hit.side)
```

## What it does not do

There is no mouse look, no sprites, doors or other objects, no sound, and no
texture format other than XPM. The window size is fixed.

## Tests

```
pip install .[test]
pytest
```