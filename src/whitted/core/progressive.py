"""Incremental renderer that produces one pixel per step.

The renderer keeps a cursor over the image and each step resolves exactly
one pixel (supersampled when configured), writes it into a Raster and moves
the cursor left to right, then top to bottom. Once the cursor passes the
last row the frame is complete and further steps do nothing until
``reset()``. A host event loop can call ``advance`` once per tick and redraw
in between, so rendering never blocks it for a whole frame.

The ProgressiveRenderer also supports:
- Batched advancing (several pixels per call)
- Running to completion with a progress callback
- A generator interface yielding progress after each batch

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.progressive import ProgressiveRenderer
    >>> from whitted.core.raster import Raster
    >>> from whitted.scene.showcase import create_showcase_scene
    >>>
    >>> manager, camera = create_showcase_scene()
    >>> renderer = ProgressiveRenderer(manager.build(), camera, 64, 48)
    >>> raster = Raster(64, 48)
    >>> while not renderer.is_complete:
    ...     renderer.advance(raster, steps=64)  # one row per tick
"""

import logging
from collections.abc import Callable, Generator

from whitted.camera.pinhole import PinholeCamera
from whitted.core.integrator import WhittedIntegrator
from whitted.core.raster import Raster

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (pixels_done, total_pixels)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """Owns the render cursor and the integrator for one scene and camera.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        supersample: Sub-samples per pixel axis (``n`` gives ``n * n`` rays).
    """

    def __init__(
        self,
        scene,
        camera: PinholeCamera,
        width: int,
        height: int,
        *,
        supersample: int = 1,
    ) -> None:
        """Initialize the progressive renderer.

        Args:
            scene: The Scene to render.
            camera: Camera producing the primary rays.
            width: Image width in pixels.
            height: Image height in pixels.
            supersample: Sub-samples per pixel axis (at least 1).

        Raises:
            ValueError: If the size is not positive, ``supersample`` is less
                than 1, or the camera is invalid.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        if supersample < 1:
            raise ValueError(f"supersample must be at least 1, got {supersample}")
        self._width = width
        self._height = height
        self._supersample = supersample
        self._integrator = WhittedIntegrator(scene)
        self._integrator.set_camera(camera)
        self._x = 0
        self._y = 0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def supersample(self) -> int:
        return self._supersample

    @property
    def integrator(self) -> WhittedIntegrator:
        return self._integrator

    @property
    def cursor(self) -> tuple[int, int]:
        """Position ``(x, y)`` of the next pixel to render."""
        return self._x, self._y

    @property
    def total_pixels(self) -> int:
        return self._width * self._height

    @property
    def pixels_done(self) -> int:
        """Number of pixels rendered in the current frame."""
        return min(self._y * self._width + self._x, self.total_pixels)

    @property
    def is_complete(self) -> bool:
        """Whether the cursor has passed the last row."""
        return self._y >= self._height

    @property
    def progress(self) -> float:
        """Fraction of the frame rendered, in [0, 1]."""
        return self.pixels_done / self.total_pixels

    def reset(self) -> None:
        """Move the cursor back to the first pixel to start a new frame.

        The raster is left untouched; pixels are overwritten as the new
        frame progresses.
        """
        self._x = 0
        self._y = 0

    def resolve_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Color of pixel ``(x, y)`` without moving the cursor."""
        return self._integrator.render_pixel(
            x, y, self._width, self._height, self._supersample
        )

    def _check_raster(self, raster: Raster) -> None:
        if raster.size != (self._width, self._height):
            raise ValueError(
                f"Raster size {raster.width}x{raster.height} does not match "
                f"renderer size {self._width}x{self._height}"
            )

    def advance_one_step(self, raster: Raster) -> bool:
        """Render the pixel under the cursor and move the cursor on.

        Args:
            raster: Destination raster, matching the renderer's size.

        Returns:
            True if a pixel was written, False if the frame was already
            complete.

        Raises:
            ValueError: If the raster size differs from the renderer's.
        """
        self._check_raster(raster)
        if self.is_complete:
            return False
        if self._x == 0 and self._y == 0:
            logger.debug("Starting frame %dx%d", self._width, self._height)

        raster.write_pixel(self._x, self._y, self.resolve_pixel(self._x, self._y))

        self._x += 1
        if self._x >= self._width:
            self._x = 0
            self._y += 1
            if self._y >= self._height:
                logger.info("Frame %dx%d complete", self._width, self._height)
        return True

    def advance(self, raster: Raster, steps: int = 1) -> int:
        """Advance up to ``steps`` pixels.

        Returns:
            The number of pixels written (less than ``steps`` only when the
            frame completes).
        """
        self._check_raster(raster)
        written = 0
        while written < steps and self.advance_one_step(raster):
            written += 1
        return written

    def render(
        self,
        raster: Raster,
        batch_size: int = 1,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render the rest of the frame, with an optional progress callback.

        Args:
            raster: Destination raster.
            batch_size: Pixels to render between callbacks.
            callback: Optional callback function called after each batch.
                Receives (pixels_done, total_pixels).

        Example:
            >>> def progress(done, total):
            ...     print(f"Progress: {done}/{total} pixels")
            >>> renderer.render(raster, batch_size=640, callback=progress)
        """
        for done, total in self.render_progressive(raster, batch_size):
            if callback is not None:
                callback(done, total)

    def render_progressive(
        self,
        raster: Raster,
        batch_size: int = 1,
    ) -> Generator[tuple[int, int], None, None]:
        """Render the rest of the frame, yielding progress after each batch.

        This is a generator-based alternative to render() with callbacks,
        useful for integration with event loops or cancellation checks.

        Args:
            raster: Destination raster.
            batch_size: Pixels to render before each yield.

        Yields:
            Tuple of (pixels_done, total_pixels).
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self._check_raster(raster)
        while not self.is_complete:
            self.advance(raster, batch_size)
            yield (self.pixels_done, self.total_pixels)

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"supersample={self.supersample}, cursor={self.cursor})"
        )
