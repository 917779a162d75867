"""Reading and validating ``.cub`` scene descriptions.

A scene file holds four wall texture lines (``NO``, ``SO``, ``WE``,
``EA``), a floor and a ceiling colour (``F`` and ``C``) and, last, the
map. The map is made of ``0`` (floor), ``1`` (wall), spaces (void) and
one of ``N``, ``S``, ``E``, ``W`` marking the player's start and facing.
The map must be closed: no floor reachable from the player may touch the
void or the edge of the map.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike

WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720

INT_MAX = 2**31 - 1

_SPACES = " \t\n\v\f\r"
_TEXTURE_IDS = {"NO": "north", "SO": "south", "WE": "west", "EA": "east"}
_TEXTURE_PREFIXES = tuple(f"{key} " for key in _TEXTURE_IDS)
_MAP_CHARS = frozenset("01 NSEW")

# direction (x, y) and camera plane (x, y) for each spawn letter
_SPAWN_VECTORS = {
    "N": ((0.0, -1.0), (0.66, 0.0)),
    "S": ((0.0, 1.0), (-0.66, 0.0)),
    "E": ((1.0, 0.0), (0.0, 0.66)),
    "W": ((-1.0, 0.0), (0.0, -0.66)),
}

USAGE = "Usage: eternalmaze map.cub"


class ConfigError(ValueError):
    """Raised when a scene file is missing, unreadable or invalid."""


@dataclass
class Player:
    """Player position, viewing direction and camera plane."""

    pos_x: float = 0.0
    pos_y: float = 0.0
    dir_x: float = 0.0
    dir_y: float = 0.0
    plane_x: float = 0.0
    plane_y: float = 0.0


@dataclass
class Environment:
    """Texture paths and floor/ceiling colours; -1 means unset."""

    north: str | None = None
    south: str | None = None
    west: str | None = None
    east: str | None = None
    floor: int = -1
    ceiling: int = -1


@dataclass
class MazeMap:
    """The map grid, padded to a rectangle, and the player on it."""

    grid: list[str] = field(default_factory=list)
    width: int = 0
    height: int = 0
    player: Player = field(default_factory=Player)


@dataclass
class MazeConfig:
    """A fully parsed and validated scene."""

    env: Environment
    maze_map: MazeMap


def atoi(text: str | None) -> int:
    """Parse a leading decimal integer, returning -1 on overflow.

    Leading whitespace and one sign are accepted; parsing stops at the
    first non-digit. A missing text gives -1. Any negative number that
    has at least one digit is reported as overflow and gives -1 too.
    """
    if text is None:
        return -1
    rest = text.lstrip(_SPACES)
    sign = 1
    if rest[:1] in ("-", "+"):
        if rest[0] == "-":
            sign = -1
        rest = rest[1:]
    result = 0
    for char in rest:
        if not "0" <= char <= "9":
            break
        result = result * 10 + ord(char) - ord("0")
        if sign < 0 or result > INT_MAX:
            return -1
    return result * sign


def split_fields(text: str, separators: str) -> list[str]:
    """Split text on any of the separator characters, dropping empty fields."""
    fields: list[str] = []
    current: list[str] = []
    for char in text:
        if char in separators:
            if current:
                fields.append("".join(current))
                current = []
        else:
            current.append(char)
    if current:
        fields.append("".join(current))
    return fields


def is_valid_path(path: str) -> bool:
    """Whether path names a ``.cub`` file with a non-empty base name."""
    if len(path) <= 4:
        return False
    slash = path.rfind("/")
    if slash != -1 and len(path) - slash <= 5:
        return False
    return path.endswith(".cub")


def check_arguments(argv: list[str]) -> str:
    """Return the scene path from the command-line arguments.

    ``argv`` excludes the program name and must hold exactly one valid
    ``.cub`` path.
    """
    if len(argv) != 1 or not is_valid_path(argv[0]):
        raise ConfigError(USAGE)
    return argv[0]


def read_config_text(path: str | PathLike[str]) -> str:
    """Read the whole scene file; an empty file is an error."""
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise ConfigError("Error\nFile can not be opened") from exc
    if not data:
        raise ConfigError("Error\nConfig file is empty")
    return data.decode("utf-8", errors="surrogateescape")


def parse_texture_line(env: Environment, line: str) -> None:
    """Store the texture path given by a ``NO``/``SO``/``WE``/``EA`` line."""
    parts = split_fields(line, " ")
    if len(parts) < 2:
        raise ConfigError("Invalid texture line")
    attribute = _TEXTURE_IDS.get(parts[0])
    if attribute is None:
        raise ConfigError("Unknown texture identifier")
    setattr(env, attribute, parts[1])


def parse_color_line(env: Environment, line: str) -> None:
    """Store the colour given by an ``F`` or ``C`` line as 0xRRGGBB."""
    parts = split_fields(line, " ")
    if len(parts) < 2:
        raise ConfigError("Invalid color line")
    components = split_fields(parts[1], ",")
    if len(components) < 3:
        raise ConfigError("Invalid RGB format")
    red, green, blue = (atoi(value) for value in components[:3])
    if not all(0 <= value <= 255 for value in (red, green, blue)):
        raise ConfigError("Invalid RGB color: must be 0-255")
    color = (red << 16) | (green << 8) | blue
    if parts[0][0] == "F":
        env.floor = color
    elif parts[0][0] == "C":
        env.ceiling = color


def is_map_line(line: str) -> bool:
    """Whether the first non-blank character of line is ``0`` or ``1``."""
    return line.lstrip(_SPACES)[:1] in ("0", "1")


def parse_player(grid: list[str]) -> tuple[Player, list[str]]:
    """Find the single spawn point.

    Returns the player standing in the middle of that cell and a copy of
    the grid with the spawn letter replaced by floor.
    """
    player: Player | None = None
    rows = list(grid)
    for y, row in enumerate(rows):
        for x, cell in enumerate(row):
            if cell not in _SPAWN_VECTORS:
                continue
            if player is not None:
                raise ConfigError("Multiple player spawn points")
            (dir_x, dir_y), (plane_x, plane_y) = _SPAWN_VECTORS[cell]
            player = Player(x + 0.5, y + 0.5, dir_x, dir_y, plane_x, plane_y)
            row = row[:x] + "0" + row[x + 1:]
        rows[y] = row
    if player is None:
        raise ConfigError("No player spawn found in map")
    return player, rows


def normalize_grid(grid: list[str]) -> list[str]:
    """Pad every row with spaces to the length of the longest row."""
    width = max((len(row) for row in grid), default=0)
    return [row.ljust(width) for row in grid]


def check_map_chars(grid: list[str]) -> None:
    """Reject any character that may not appear in a map."""
    if any(cell not in _MAP_CHARS for row in grid for cell in row):
        raise ConfigError("Invalid character in map")


def check_map_closed(grid: list[str], x: int, y: int) -> frozenset[tuple[int, int]]:
    """Flood-fill from (x, y) and require walls all around.

    Returns the (x, y) cells reached that are not walls. Reaching the
    void or leaving the grid is an error.
    """
    rows = [list(row) for row in grid]
    reached: set[tuple[int, int]] = set()
    pending = [(x, y)]
    while pending:
        cx, cy = pending.pop()
        if cy < 0 or cx < 0 or cy >= len(rows) or cx >= len(rows[cy]) or rows[cy][cx] == " ":
            raise ConfigError("Map is not closed")
        if rows[cy][cx] == "1":
            continue
        rows[cy][cx] = "1"
        reached.add((cx, cy))
        pending.extend(((cx, cy + 1), (cx, cy - 1), (cx + 1, cy), (cx - 1, cy)))
    return frozenset(reached)


def extract_map(lines: list[str]) -> MazeMap:
    """Build and validate the map from all remaining lines of the file."""
    player, grid = parse_player(list(lines))
    grid = normalize_grid(grid)
    check_map_chars(grid)
    check_map_closed(grid, int(player.pos_x), int(player.pos_y))
    width = max((len(row) for row in grid), default=0)
    return MazeMap(grid=grid, width=width, height=len(grid), player=player)


def parse_config(text: str) -> MazeConfig:
    """Parse the contents of a scene file."""
    env = Environment()
    maze_map: MazeMap | None = None
    textures = colors = 0
    lines = split_fields(text, "\n")
    for index, line in enumerate(lines):
        if not line:
            continue
        if line.startswith(_TEXTURE_PREFIXES):
            parse_texture_line(env, line)
            textures += 1
        elif line[0] in ("F", "C"):
            parse_color_line(env, line)
            colors += 1
        elif is_map_line(line):
            maze_map = extract_map(lines[index:])
            break
        else:
            raise ConfigError("Invalid line in .cub file")
    if textures != 4 or colors != 2 or maze_map is None:
        raise ConfigError("Missing or invalid line in .cub file")
    return MazeConfig(env=env, maze_map=maze_map)


def load_config(path: str | PathLike[str]) -> MazeConfig:
    """Validate the path, then read and parse the scene file."""
    if not is_valid_path(str(path)):
        raise ConfigError(USAGE)
    return parse_config(read_config_text(path))