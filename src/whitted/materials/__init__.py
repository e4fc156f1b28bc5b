"""Materials module.

Components:
    material: Material parameters and the Taichi-side MaterialTable
    checkerboard: Two-tone checkerboard material selection
"""

from .checkerboard import checker_tile, select_checker_material
from .material import MAX_MATERIALS, Material, MaterialInfo, MaterialTable

__all__ = [
    "MAX_MATERIALS",
    "Material",
    "MaterialInfo",
    "MaterialTable",
    "checker_tile",
    "select_checker_material",
]
