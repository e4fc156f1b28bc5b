"""Phong shading with hard shadows from point lights.

For every light the unit vector ``L`` from the light toward the surface is
formed and the Lambert term ``lightness = -dot(L, N)`` is evaluated. A light
contributes only when ``lightness > 0`` (the surface faces it) and nothing
opaque blocks it:

    diffuse  = diffuseness  * lightness * light_color * base_color
    specular = specularness * max(dot(reflect(L, N), -D), 0)^shininess * light_color

where ``D`` is the unit incoming ray direction. The specular term uses the
reflected light direction (Phong, not Blinn-Phong) and is not tinted by the
surface color. Each light's contribution is added to the running color with
per-channel clamping to [0, 1]. There is no ambient term and no distance
falloff.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import add_clamped, normalize, reflect

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.data_oriented
class Shader:
    """Evaluates direct lighting for surfaces of a Scene."""

    def __init__(self, scene) -> None:
        self.scene = scene

    @ti.func
    def shade(
        self,
        material_id: ti.i32,
        point: vec3,
        normal: vec3,
        direction: vec3,
        base_color: vec3,
    ) -> vec3:
        """Direct lighting at ``point``.

        Args:
            material_id: Material supplying the diffuse/specular weights.
            point: The surface point being shaded.
            normal: Unit surface normal at ``point``.
            direction: Direction of the ray that hit ``point``.
            base_color: Diffuse color, already blended with any mirror color.

        Returns:
            The clamped sum of all unoccluded light contributions.
        """
        mat = self.scene.materials.get(material_id)
        view = -normalize(direction)
        result = vec3(0.0, 0.0, 0.0)
        for light in range(self.scene.num_lights):
            light_color = self.scene.light_colors[light]
            light_dir = normalize(point - self.scene.light_positions[light])
            lightness = -tm.dot(light_dir, normal)
            if lightness > 0.0 and self.scene.is_occluded(point, light) == 0:
                diffuse = mat.diffuseness * lightness * light_color * base_color
                cos_r = ti.max(tm.dot(reflect(light_dir, normal), view), 0.0)
                specular = mat.specularness * ti.pow(cos_r, mat.shininess) * light_color
                result = add_clamped(result, diffuse + specular)
        return result

    @ti.kernel
    def _shade_kernel(
        self,
        material_id: ti.i32,
        px: ti.f32,
        py: ti.f32,
        pz: ti.f32,
        nx: ti.f32,
        ny: ti.f32,
        nz: ti.f32,
        dx: ti.f32,
        dy: ti.f32,
        dz: ti.f32,
    ) -> vec3:
        result = vec3(0.0)
        # Single outer iteration keeps the light loop serial
        for _ in range(1):
            base = self.scene.materials.get(material_id).color
            result = self.shade(
                material_id,
                vec3(px, py, pz),
                normalize(vec3(nx, ny, nz)),
                vec3(dx, dy, dz),
                base,
            )
        return result

    def shade_surface(self, material_id: int, point, normal, direction) -> tuple[float, float, float]:
        """Host-side shading of a surface point using the material's own color."""
        if not 0 <= material_id < len(self.scene.materials):
            raise ValueError(f"Invalid material_id: {material_id}")
        color = self._shade_kernel(material_id, *point, *normal, *direction)
        return (float(color[0]), float(color[1]), float(color[2]))
