"""The tile game: sprites, rendering, input handling and the command entry point."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from .display import Display, DisplayError, Window
from .events import EventMask, EventType
from .gamemap import COLLECTIBLE, EXIT, PLAYER, WALL, GameMap, MapError, read_map
from .image import Image
from .xpm import XpmError, xpm_file_to_image

TILE_SIZE = 64
TITLE = "so_long"
DEFAULT_MAP = "maps/map.ber"
DEFAULT_ASSETS = "assets"

KEY_ESCAPE = 65307
KEY_LEFT = 65361
KEY_UP = 65362
KEY_RIGHT = 65363
KEY_DOWN = 65364

_KEY_MESSAGES = {
    KEY_UP: "Move up",
    KEY_LEFT: "Move left",
    KEY_DOWN: "Move down",
    KEY_RIGHT: "Move right",
}


class AssetError(Exception):
    """Raised when a sprite cannot be loaded."""


@dataclass(frozen=True)
class Assets:
    """The sprites drawn for each kind of tile."""

    wall: Image
    floor: Image
    player: Image
    collectible: Image
    exit: Image


def load_assets(directory: Union[str, Path]) -> Assets:
    """Load ``<name>.xpm`` for every sprite from ``directory``."""
    base = Path(directory)
    sprites: dict[str, Image] = {}
    for spec in fields(Assets):
        path = base / f"{spec.name}.xpm"
        try:
            sprites[spec.name] = xpm_file_to_image(path)
        except XpmError:
            raise AssetError(f"Could not load sprite from {path}") from None
    return Assets(**sprites)


def render_map(window: Window, assets: Assets, rows: Sequence[str]) -> None:
    """Draw floor under every tile, then the tile's own sprite on top."""
    overlays = {
        WALL: assets.wall,
        PLAYER: assets.player,
        COLLECTIBLE: assets.collectible,
        EXIT: assets.exit,
    }
    for y, row in enumerate(rows):
        for x, tile in enumerate(row):
            left, top = x * TILE_SIZE, y * TILE_SIZE
            window.put_image(assets.floor, left, top)
            sprite = overlays.get(tile)
            if sprite is not None:
                window.put_image(sprite, left, top)


def key_message(keycode: int) -> Optional[str]:
    """Return the message printed for an arrow key, or None for other keys."""
    return _KEY_MESSAGES.get(keycode)


class Game:
    """One game session: a map shown in its own window on a display."""

    def __init__(self, game_map: GameMap, assets: Assets, display: Display) -> None:
        self.map = game_map
        self.assets = assets
        self.display = display
        self.window = display.new_window(
            game_map.cols * TILE_SIZE, game_map.height * TILE_SIZE, TITLE
        )

    def on_keypress(self, keycode: int, param: Any = None) -> int:
        """Stop on Escape; report arrow keys."""
        if keycode == KEY_ESCAPE:
            self.display.loop_end()
            return 0
        message = key_message(keycode)
        if message is not None:
            print(message)
        return 0

    def on_close(self, param: Any = None) -> int:
        """Close the window and the display, ending the game."""
        self.display.close()
        self.display.loop_end()
        return 0

    def setup_hooks(self) -> None:
        """Bind key presses and window close requests to the game."""
        self.window.hook(EventType.KEY_PRESS, EventMask.KEY_PRESS, self.on_keypress, self)
        self.window.hook(EventType.DESTROY_NOTIFY, 0, self.on_close, self)

    def run(self) -> None:
        """Draw the map and handle events until the game ends."""
        self.setup_hooks()
        render_map(self.window, self.assets, self.map.rows)
        try:
            self.display.loop()
        finally:
            self.display.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the game on a map file; returns the exit status."""
    parser = argparse.ArgumentParser(prog=TITLE, description="Walk a tile map.")
    parser.add_argument("map", nargs="?", default=DEFAULT_MAP, help="map file")
    parser.add_argument("--assets", default=DEFAULT_ASSETS, help="sprite directory")
    args = parser.parse_args(argv)

    try:
        game_map = read_map(args.map)
    except MapError as exc:
        print(f"Error\n{exc}")
        return 1
    if not game_map.is_valid():
        return 1
    try:
        assets = load_assets(args.assets)
    except AssetError as exc:
        print(f"Error: {exc}")
        return 1
    try:
        display = Display()
    except DisplayError:
        return 1
    with display:
        Game(game_map, assets, display).run()
    return 0