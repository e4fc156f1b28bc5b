"""Image export utilities for rendered rasters.

This module converts a Raster of packed ``0x00RRGGBB`` pixels into RGB
arrays and saves them to files.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from whitted.preview.export import save_png
    >>> renderer.render(raster)
    >>> save_png(raster, "output.png")
"""

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from whitted.core.raster import Raster


def raster_to_rgb(raster: Raster) -> npt.NDArray[np.uint8]:
    """Unpack a raster into an 8-bit RGB array.

    Args:
        raster: The raster to convert.

    Returns:
        Array of shape (height, width, 3) with dtype uint8. Row padding is
        dropped.
    """
    pixels = raster.pixels()
    rgb = np.empty((raster.height, raster.width, 3), dtype=np.uint8)
    rgb[..., 0] = (pixels >> 16) & 0xFF
    rgb[..., 1] = (pixels >> 8) & 0xFF
    rgb[..., 2] = pixels & 0xFF
    return rgb


def save_png(raster: Raster, filepath: str) -> None:
    """Save a raster as an 8-bit RGB PNG.

    Args:
        raster: The raster to save.
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(raster_to_rgb(raster))
    pil_image.save(filepath)


def save_png_from_array(image: npt.NDArray[np.uint8], filepath: str) -> None:
    """Save an (H, W, 3) uint8 array as a PNG.

    Raises:
        ValueError: If the array does not have shape (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected image of shape (H, W, 3), got {image.shape}")
    PILImage.fromarray(image.astype(np.uint8)).save(filepath)


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
