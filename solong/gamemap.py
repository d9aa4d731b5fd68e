"""Reading and validating tile maps: walls, floor, player, collectibles and exit."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, MutableSequence, Optional, Sequence, Union

WALL = "1"
PLAYER = "P"
COLLECTIBLE = "C"
EXIT = "E"
_VISITED = "V"


class MapError(Exception):
    """Raised when a map file cannot be read or is not a usable map."""


def _lines(text: str) -> Iterator[str]:
    """Yield the lines of ``text`` split on newlines only, newline kept."""
    start = 0
    while start < len(text):
        end = text.find("\n", start)
        if end == -1:
            yield text[start:]
            return
        yield text[start:end + 1]
        start = end + 1


@dataclass(frozen=True)
class GameMap:
    """A rectangular grid of tiles, one string per row."""

    rows: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rows", tuple(self.rows))

    @property
    def cols(self) -> int:
        """Number of tiles in a row."""
        return len(self.rows[0]) if self.rows else 0

    @property
    def height(self) -> int:
        """Number of rows."""
        return len(self.rows)

    def player(self) -> tuple[int, int]:
        """Return the (x, y) of the first player tile."""
        position = find_player(self.rows)
        if position is None:
            raise MapError("Map has no player.")
        return position

    def is_valid(self) -> bool:
        """Tell whether a player exists and reaches every collectible and the exit."""
        position = find_player(self.rows)
        if position is None:
            return False
        return validate_map(self.rows, *position)


def read_map(path: Union[str, Path]) -> GameMap:
    """Read a map file; lines of at most one character are skipped."""
    try:
        text = Path(path).read_bytes().decode("latin-1")
    except OSError:
        raise MapError(f"Unable to open file: {path}") from None
    rows: list[str] = []
    cols = 0
    for line in _lines(text):
        if len(line) <= 1:
            continue
        row = line[:-1] if line.endswith("\n") else line
        if not rows:
            cols = len(row)
        elif len(row) != cols:
            raise MapError("Map is not rectangular.")
        rows.append(row)
    if not rows:
        raise MapError("Map is empty or invalid.")
    return GameMap(tuple(rows))


def find_player(rows: Sequence[str]) -> Optional[tuple[int, int]]:
    """Return the (x, y) of the first player tile in reading order, or None."""
    for y, row in enumerate(rows):
        x = row.find(PLAYER)
        if x != -1:
            return x, y
    return None


def _open(grid: Sequence[Sequence[str]], x: int, y: int) -> bool:
    if x < 0 or y < 0 or y >= len(grid) or x >= len(grid[y]):
        return False
    return grid[y][x] not in (WALL, _VISITED)


def flood_fill(grid: Sequence[MutableSequence[str]], x: int, y: int) -> bool:
    """Mark every tile reachable from (x, y) without crossing walls.

    Reached tiles are overwritten in ``grid``. Returns False when the start
    tile is outside the grid, a wall or already marked.
    """
    if not _open(grid, x, y):
        return False
    stack = [(x, y)]
    while stack:
        cx, cy = stack.pop()
        if not _open(grid, cx, cy):
            continue
        grid[cy][cx] = _VISITED
        stack.extend(((cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)))
    return True


def validate_map(rows: Sequence[str], x: int, y: int) -> bool:
    """Tell whether every collectible and exit can be reached from (x, y)."""
    grid = [list(row) for row in rows]
    if not flood_fill(grid, x, y):
        return False
    return not any(tile in (COLLECTIBLE, EXIT) for row in grid for tile in row)