# solong

A small tile-map game. A map is a rectangular grid of walls, floor,
collectibles, one player and an exit. Before the game window opens the map
is checked: every row must be the same length, there must be a player, and
every collectible and exit must be reachable from the player's square
without crossing walls.

Drawing goes through a small windowing layer on top of pygame, which also
reads XPM sprites from files and from in-memory line lists.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Running

```
solong [MAP] [--assets DIR]
```

`MAP` defaults to `maps/map.ber` and `DIR` to `assets`. The asset directory
must hold `wall.xpm`, `floor.xpm`, `player.xpm`, `collectible.xpm` and
`exit.xpm`. Each tile is drawn 64 pixels square, with the floor sprite under
every tile.

The command exits with status 1 when the map cannot be read (printing
`Error` and the reason), when the map fails the reachability check, when a
sprite cannot be loaded, or when no display can be opened.

While the window is open:

- the arrow keys print `Move up`, `Move left`, `Move down` or `Move right`;
- Escape ends the game;
- closing the window ends the game.

### Map format

One row per line; lines of at most one character (such as empty lines) are
skipped.

| Character | Meaning     |
|-----------|-------------|
| `1`       | wall        |
| `P`       | player      |
| `C`       | collectible |
| `E`       | exit        |
| other     | floor       |

```
1111111
1P0C0E1
1111111
```

### What the game does not do

The arrow keys only report the direction; the player is not moved, nothing
is collected, no moves are counted and there is no winning condition. The
map check does not require the map to be enclosed by walls or limit the
number of players or exits.

## Using the library

Maps (`solong.gamemap`):

```python
from solong.gamemap import read_map, find_player, validate_map, MapError

game_map = read_map("maps/map.ber")      # raises MapError on a bad file
print(game_map.cols, game_map.height)
x, y = game_map.player()                 # or find_player(game_map.rows)
print(validate_map(game_map.rows, x, y)) # same as game_map.is_valid()
```

XPM images (`solong.xpm`, `solong.image`):

```python
from solong.xpm import xpm_file_to_image, xpm_to_image

image = xpm_file_to_image("assets/wall.xpm")   # raises XpmError on failure
print(image.width, image.height, hex(image.get_pixel(0, 0)))

dot = xpm_to_image(['1 1 1 1', 'a c red', 'a'])
print(hex(dot.get_pixel(0, 0)))                # 0xff0000
```

Pixels whose colour is `None` are stored as `0xff000000`.

Colours (`solong.colors`):

```python
from solong.colors import lookup_color

print(hex(lookup_color("light", "blue")))   # 0xadd8e6
print(lookup_color("none"))                 # -1
```

Windows and events (`solong.display`, `solong.events`): a `Display` holds
windows with their own pixels and hooks. With `Display(headless=True)` the
screen is never touched; events are queued with `Display.post` and the loop
returns once the queue is empty and no loop hook is set.

```python
from solong.display import Display
from solong.events import Event, EventType

with Display(headless=True) as display:
    window = display.new_window(100, 100, "demo")
    window.key_hook(lambda keysym, param: print("key", hex(keysym)))
    display.post(window, Event(EventType.KEY_RELEASE, keysym=0xFF1B))
    display.loop()
```