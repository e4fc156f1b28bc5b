"""Whitted-style recursive ray tracer built on Taichi.

This package renders scenes of spheres, planes, checkerboards, indented
spheres and tori lit by point lights, with:
- Phong shading and hard shadows (refractive objects cast none)
- Mirror reflection and Fresnel-weighted refraction up to a fixed depth
- Incremental, pixel-at-a-time rendering into a packed 32-bit raster
- Optional per-pixel supersampling

Subpackages:
    core: Vector algebra, shading, the recursive integrator and the raster
    geometry: Shape primitives and intersection algorithms
    materials: Material model and the checkerboard pattern
    scene: Scene building, storage and the showcase scene
    camera: Pinhole camera ray generation
    preview: Image export utilities
"""

__version__ = "0.1.0"
