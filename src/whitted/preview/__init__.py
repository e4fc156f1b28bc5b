"""Preview module for exporting rendered rasters.

Components:
    export: Raster to RGB conversion, PNG output and image comparison
"""

from .export import compute_rmse, raster_to_rgb, save_png, save_png_from_array

__all__ = ["compute_rmse", "raster_to_rgb", "save_png", "save_png_from_array"]
