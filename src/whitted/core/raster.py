"""Output raster: a top-down, row-major buffer of packed 32-bit pixels.

Each pixel is ``0x00RRGGBB`` stored little-endian. Rows are ``pitch`` bytes
apart, and ``pitch`` may exceed ``width * 4`` so the raster can mirror a
display surface with padded rows. Float colors are converted per channel by
clamping to [0, 1] and truncating ``c * 255`` (no rounding, no dithering).

Example:
    >>> from whitted.core.raster import Raster
    >>> raster = Raster(4, 2, pitch=32)
    >>> raster.write_pixel(1, 0, (1.0, 0.5, 0.0))
    >>> hex(raster.read_pixel(1, 0))
    '0xff7f00'
"""

import numpy as np
import numpy.typing as npt


def _channel_to_byte(c: float) -> int:
    # NaN compares false both ways and ends up as 0
    if not c > 0.0:
        return 0
    if c >= 1.0:
        return 255
    return int(c * 255.0)


def pack_color(color) -> int:
    """Pack an (R, G, B) float color into ``red << 16 | green << 8 | blue``."""
    red = _channel_to_byte(color[0])
    green = _channel_to_byte(color[1])
    blue = _channel_to_byte(color[2])
    return red << 16 | green << 8 | blue


def unpack_color(value: int) -> tuple[int, int, int]:
    """Split a packed pixel into its 8-bit (R, G, B) channels."""
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


class Raster:
    """Pixel buffer with an explicit row pitch.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pitch: Bytes per row (at least ``width * 4``, a multiple of 4).
        memory: The raw bytes, ``height * pitch`` long.
    """

    def __init__(self, width: int, height: int, pitch: int | None = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Raster size must be positive, got {width}x{height}")
        if pitch is None:
            pitch = width * 4
        if pitch < width * 4:
            raise ValueError(f"Pitch {pitch} is smaller than width * 4 ({width * 4})")
        if pitch % 4 != 0:
            raise ValueError(f"Pitch must be a multiple of 4, got {pitch}")

        self.width = width
        self.height = height
        self.pitch = pitch
        self.memory: npt.NDArray[np.uint8] = np.zeros(height * pitch, dtype=np.uint8)
        # Word view over the same memory, including row padding
        self._words = self.memory.view("<u4").reshape(height, pitch // 4)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} raster")

    def write_pixel(self, x: int, y: int, color) -> None:
        """Store a float color at ``(x, y)``."""
        self._check_bounds(x, y)
        self._words[y, x] = pack_color(color)

    def read_pixel(self, x: int, y: int) -> int:
        """Packed ``0x00RRGGBB`` value at ``(x, y)``."""
        self._check_bounds(x, y)
        return int(self._words[y, x])

    def clear(self) -> None:
        self.memory.fill(0)

    def pixels(self) -> npt.NDArray[np.uint32]:
        """Packed pixels as a ``(height, width)`` array, without row padding."""
        return self._words[:, : self.width]

    def __repr__(self) -> str:
        return f"Raster(width={self.width}, height={self.height}, pitch={self.pitch})"
