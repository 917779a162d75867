"""The game window: loading a scene, handling keys and drawing frames."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from .config import (  # noqa: E402
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
    ConfigError,
    Environment,
    MazeConfig,
    check_arguments,
    parse_config,
    read_config_text,
)
from .movement import Action, apply_action  # noqa: E402
from .raycast import FrameBuffer, render_frame  # noqa: E402
from .xpm import XpmError, XpmImage, read_xpm  # noqa: E402

TITLE = "ETERNAL MAZE"
FRAMES_PER_SECOND = 60

# Right arrow turns by the positive angle and left arrow by the negative
# one, which on a y-down screen turns the view the way the arrow points.
_KEY_ACTIONS = {
    pygame.K_ESCAPE: Action.QUIT,
    pygame.K_w: Action.FORWARD,
    pygame.K_s: Action.BACKWARD,
    pygame.K_a: Action.LEFT,
    pygame.K_d: Action.RIGHT,
    pygame.K_RIGHT: Action.ROTATE_LEFT,
    pygame.K_LEFT: Action.ROTATE_RIGHT,
}


def load_textures(env: Environment) -> list[XpmImage]:
    """Load the north, south, west and east wall textures, in that order."""
    textures: list[XpmImage] = []
    for path in (env.north, env.south, env.west, env.east):
        if path is None:
            raise XpmError("Error\nFailed to load XPM texture")
        try:
            textures.append(read_xpm(path))
        except XpmError as exc:
            raise XpmError("Error\nFailed to load XPM texture") from exc
    return textures


def action_for_key(key: int) -> Action | None:
    """The action bound to a pygame key code, or None if it has none."""
    return _KEY_ACTIONS.get(key)


class Game:
    """A running scene: its configuration, textures and frame buffer."""

    def __init__(
        self,
        config: MazeConfig,
        textures: Sequence[XpmImage],
        width: int = WINDOW_WIDTH,
        height: int = WINDOW_HEIGHT,
    ) -> None:
        if len(textures) != 4:
            raise ValueError("exactly four wall textures are needed")
        self.config = config
        self.textures = list(textures)
        self.frame = FrameBuffer(width, height)
        self.running = True

    def handle_key(self, key: int) -> Action | None:
        """React to a key press and return the action it triggered."""
        action = action_for_key(key)
        if action is Action.QUIT:
            self.running = False
        elif action is not None:
            maze_map = self.config.maze_map
            apply_action(maze_map.grid, maze_map.player, action)
        return action

    def render(self) -> FrameBuffer:
        """Draw the current view into the frame buffer and return it."""
        return render_frame(self.frame, self.config, self.textures)

    def run(self) -> int:
        """Open the window and run the event loop until the player quits."""
        size = (self.frame.width, self.frame.height)
        pygame.init()
        try:
            screen = pygame.display.set_mode(size)
            pygame.display.set_caption(TITLE)
            pygame.key.set_repeat(200, 30)
            clock = pygame.time.Clock()
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN:
                        self.handle_key(event.key)
                if not self.running:
                    break
                frame = self.render()
                surface = pygame.image.frombuffer(frame.to_bytes(), size, "BGRA")
                screen.blit(surface.convert(), (0, 0))
                pygame.display.flip()
                clock.tick(FRAMES_PER_SECOND)
        finally:
            pygame.quit()
        return 0


def main(argv: list[str] | None = None) -> int:
    """Run the game on the scene file named on the command line."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        path = check_arguments(argv)
    except ConfigError as exc:
        sys.stderr.write(str(exc))
        return 1
    try:
        config = parse_config(read_config_text(path))
        textures = load_textures(config.env)
    except (ConfigError, XpmError) as exc:
        sys.stderr.write(f"{TITLE}: {exc}\n")
        return 1
    return Game(config, textures).run()