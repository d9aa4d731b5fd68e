"""In-memory pixel images in the 32 bits per pixel ZPixmap layout."""

from __future__ import annotations

from dataclasses import dataclass, field

BITS_PER_PIXEL = 32
_BYTES_PER_PIXEL = BITS_PER_PIXEL // 8
_PIXEL_MASK = (1 << BITS_PER_PIXEL) - 1


@dataclass
class Image:
    """A width x height image held as raw bytes.

    Each pixel takes four bytes; ``endian`` is 0 for little-endian pixel
    values and 1 for big-endian ones. Rows are ``size_line`` bytes apart.
    """

    width: int
    height: int
    endian: int = 0
    bits_per_pixel: int = field(default=BITS_PER_PIXEL, init=False)
    size_line: int = field(init=False)
    data: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"image size must be positive, got {self.width}x{self.height}"
            )
        if self.endian not in (0, 1):
            raise ValueError(f"endian must be 0 or 1, got {self.endian!r}")
        self.size_line = self.width * _BYTES_PER_PIXEL
        self.data = bytearray(self.size_line * self.height)

    @property
    def _byteorder(self) -> str:
        return "big" if self.endian else "little"

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} image"
            )
        return y * self.size_line + x * _BYTES_PER_PIXEL

    def set_pixel(self, x: int, y: int, color: int) -> None:
        """Store ``color`` (truncated to 32 bits) at column x, row y."""
        offset = self._offset(x, y)
        self.data[offset:offset + _BYTES_PER_PIXEL] = (color & _PIXEL_MASK).to_bytes(
            _BYTES_PER_PIXEL, self._byteorder
        )

    def get_pixel(self, x: int, y: int) -> int:
        """Return the unsigned 32-bit value stored at column x, row y."""
        offset = self._offset(x, y)
        return int.from_bytes(
            self.data[offset:offset + _BYTES_PER_PIXEL], self._byteorder
        )