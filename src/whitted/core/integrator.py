"""Whitted-style recursive ray tracing integrator.

For each ray the integrator finds the nearest hit, resolves the material at
the hit point and then:

1. Refractive surfaces spawn a transmitted ray (Snell's law) and a reflected
   ray, blended by the Fresnel transmittance. When the ray starts inside the
   object the normal is flipped and the reciprocal refraction ratio is used.
   Under total internal reflection only the reflected ray contributes.
2. Mirror surfaces (``mirror > 0``) spawn a reflected ray. Its color is
   blended into the base color by the mirror weight, and the blend is then
   shaded as the diffuse color.
3. Everything else is shaded directly with its own color.

Rays that miss return the background (black). Rays deeper than ``MAX_DEPTH``
return white. Secondary rays start ``RAY_EPSILON`` along their direction from
the hit point.

Taichi functions cannot recurse, so the recursion is evaluated on an explicit
frame stack. A frame holds a ray and the state needed to finish it once its
children have returned, and advances through the stages below. Children are
always finished before their parent resumes, so the result matches the
recursive definition exactly. One root-to-leaf chain needs ``MAX_DEPTH + 2``
frames, which is the stack capacity.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.integrator import WhittedIntegrator
    >>> from whitted.scene.showcase import create_showcase_scene
    >>> manager, camera = create_showcase_scene()
    >>> integrator = WhittedIntegrator(manager.build())
    >>> integrator.set_camera(camera)
    >>> color = integrator.render_pixel(320, 240, 640, 480)
"""

import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import PinholeCamera, primary_ray_direction
from whitted.core.ray import (
    fresnel_transmittance,
    lerp_color,
    normalize,
    offset_origin,
    reflect,
    refract,
    sanitize_color,
)
from whitted.core.shading import Shader

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Rays at a depth greater than this return DEPTH_LIMIT_LEVEL
MAX_DEPTH = 20

# Frames on one root-to-leaf chain: depths 0 through MAX_DEPTH + 1
STACK_SIZE = MAX_DEPTH + 2

# Grey levels of the miss color and the depth-limit color
BACKGROUND_LEVEL = 0.0
DEPTH_LIMIT_LEVEL = 1.0

# Frame stages
STAGE_ENTER = 0
STAGE_AFTER_MIRROR = 1
STAGE_AFTER_TRANSMISSION = 2
STAGE_AFTER_REFLECTION = 3
STAGE_SHADE = 4


@ti.data_oriented
class WhittedIntegrator:
    """Resolves ray colors against a Scene.

    Args:
        scene: The scene to render. It is only read.
    """

    def __init__(self, scene) -> None:
        self.scene = scene
        self.shader = Shader(scene)

        # Frame stack, one slot per recursion depth
        self.frame_origin = ti.Vector.field(3, dtype=ti.f32, shape=STACK_SIZE)
        self.frame_direction = ti.Vector.field(3, dtype=ti.f32, shape=STACK_SIZE)
        self.frame_depth = ti.field(dtype=ti.i32, shape=STACK_SIZE)
        self.frame_stage = ti.field(dtype=ti.i32, shape=STACK_SIZE)
        self.frame_material = ti.field(dtype=ti.i32, shape=STACK_SIZE)
        self.frame_point = ti.Vector.field(3, dtype=ti.f32, shape=STACK_SIZE)
        self.frame_normal = ti.Vector.field(3, dtype=ti.f32, shape=STACK_SIZE)
        self.frame_base = ti.Vector.field(3, dtype=ti.f32, shape=STACK_SIZE)
        # Mirror weight, or Fresnel transmittance for refractive frames
        self.frame_weight = ti.field(dtype=ti.f32, shape=STACK_SIZE)
        self.frame_transmitted = ti.Vector.field(3, dtype=ti.f32, shape=STACK_SIZE)
        self.frame_reflect_dir = ti.Vector.field(3, dtype=ti.f32, shape=STACK_SIZE)

        # Camera state
        self.camera_position = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())
        self.fov_scale = ti.field(dtype=ti.f32, shape=())
        self.set_camera(PinholeCamera())

    def set_camera(self, camera: PinholeCamera) -> None:
        """Use ``camera`` for subsequent ``render_pixel`` calls.

        Raises:
            ValueError: If the camera configuration is invalid.
        """
        camera.validate()
        self.camera = camera
        self.camera_position[None] = camera.position
        self.camera_forward[None] = camera.forward
        self.fov_scale[None] = camera.fov_scale

    # =========================================================================
    # Frame Stack
    # =========================================================================

    @ti.func
    def _push(self, top: ti.i32, origin: vec3, direction: vec3, depth: ti.i32) -> ti.i32:
        """Write a new frame at index ``top`` and return the new stack size."""
        self.frame_origin[top] = origin
        self.frame_direction[top] = direction
        self.frame_depth[top] = depth
        self.frame_stage[top] = STAGE_ENTER
        return top + 1

    @ti.func
    def _enter(self, f: ti.i32, top: ti.i32):
        """First visit of frame ``f``.

        Returns:
            ``(top, color, done)``: the new stack size, and the frame's final
            color when ``done`` is 1.
        """
        origin = self.frame_origin[f]
        direction = self.frame_direction[f]
        depth = self.frame_depth[f]
        color = vec3(0.0, 0.0, 0.0)
        done = 0
        new_top = top

        if depth > MAX_DEPTH:
            color = vec3(DEPTH_LIMIT_LEVEL)
            done = 1
        else:
            rec = self.scene.nearest_hit(origin, direction)
            if rec.hit == 0:
                color = vec3(BACKGROUND_LEVEL)
                done = 1
            else:
                point = origin + rec.t * direction
                normal = rec.normal
                material_id = self.scene.material_at(rec.object_index, point)
                mat = self.scene.materials.get(material_id)
                unit_dir = normalize(direction)

                self.frame_point[f] = point
                self.frame_normal[f] = normal
                self.frame_material[f] = material_id

                if mat.refractive == 1:
                    eta = mat.refraction_ratio
                    if self.scene.contains(rec.object_index, origin) == 1:
                        normal = -normal
                        eta = 1.0 / eta
                    reflected = reflect(unit_dir, normal)
                    transmitted, cos_t, valid = refract(unit_dir, normal, eta)
                    self.frame_reflect_dir[f] = reflected
                    if valid == 1:
                        cos_i = -tm.dot(unit_dir, normal)
                        self.frame_weight[f] = fresnel_transmittance(cos_i, cos_t, eta)
                        self.frame_stage[f] = STAGE_AFTER_TRANSMISSION
                        new_top = self._push(
                            top, offset_origin(point, transmitted), transmitted, depth + 1
                        )
                    else:
                        # Total internal reflection: reflection only
                        self.frame_weight[f] = 0.0
                        self.frame_transmitted[f] = vec3(0.0, 0.0, 0.0)
                        self.frame_stage[f] = STAGE_AFTER_REFLECTION
                        new_top = self._push(
                            top, offset_origin(point, reflected), reflected, depth + 1
                        )
                elif mat.mirror > 0.0:
                    reflected = reflect(unit_dir, normal)
                    self.frame_weight[f] = mat.mirror
                    self.frame_stage[f] = STAGE_AFTER_MIRROR
                    new_top = self._push(
                        top, offset_origin(point, reflected), reflected, depth + 1
                    )
                else:
                    self.frame_base[f] = mat.color
                    self.frame_stage[f] = STAGE_SHADE
        return new_top, color, done

    @ti.func
    def resolve(self, origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
        """Color seen along a ray that is ``depth`` bounces from the camera.

        ``depth`` must be non-negative, since the frame stack only holds one
        chain from depth 0 to the depth limit.
        """
        top = self._push(0, origin, direction, depth)
        # Color returned by the most recently finished frame
        ret = vec3(0.0, 0.0, 0.0)
        while top > 0:
            f = top - 1
            stage = self.frame_stage[f]
            done = 0
            color = vec3(0.0, 0.0, 0.0)
            if stage == STAGE_ENTER:
                top, color, done = self._enter(f, top)
            elif stage == STAGE_AFTER_TRANSMISSION:
                self.frame_transmitted[f] = ret
                self.frame_stage[f] = STAGE_AFTER_REFLECTION
                reflected = self.frame_reflect_dir[f]
                top = self._push(
                    top,
                    offset_origin(self.frame_point[f], reflected),
                    reflected,
                    self.frame_depth[f] + 1,
                )
            elif stage == STAGE_AFTER_REFLECTION:
                color = lerp_color(ret, self.frame_transmitted[f], self.frame_weight[f])
                done = 1
            elif stage == STAGE_AFTER_MIRROR:
                mat = self.scene.materials.get(self.frame_material[f])
                self.frame_base[f] = lerp_color(mat.color, ret, self.frame_weight[f])
                self.frame_stage[f] = STAGE_SHADE
            else:
                color = self.shader.shade(
                    self.frame_material[f],
                    self.frame_point[f],
                    self.frame_normal[f],
                    self.frame_direction[f],
                    self.frame_base[f],
                )
                done = 1
            if done == 1:
                ret = color
                top -= 1
        return ret

    # =========================================================================
    # Kernels
    # =========================================================================

    @ti.kernel
    def _resolve_kernel(
        self,
        ox: ti.f32,
        oy: ti.f32,
        oz: ti.f32,
        dx: ti.f32,
        dy: ti.f32,
        dz: ti.f32,
        depth: ti.i32,
    ) -> vec3:
        return self.resolve(vec3(ox, oy, oz), vec3(dx, dy, dz), depth)

    @ti.kernel
    def _render_pixel_kernel(
        self, x: ti.f32, y: ti.f32, width: ti.i32, height: ti.i32, samples: ti.i32
    ) -> vec3:
        """Average of a ``samples x samples`` grid of rays through one pixel."""
        total = vec3(0.0, 0.0, 0.0)
        inv = 1.0 / ti.cast(samples, ti.f32)
        # The frame stack is shared, so samples must run one at a time
        ti.loop_config(serialize=True)
        for k in range(samples * samples):
            i = k // samples
            j = k % samples
            px = x + (ti.cast(j, ti.f32) + 0.5) * inv - 0.5
            py = y + (ti.cast(i, ti.f32) + 0.5) * inv - 0.5
            direction = primary_ray_direction(
                self.camera_forward[None], self.fov_scale[None], px, py, width, height
            )
            total += self.resolve(self.camera_position[None], direction, 0)
        return sanitize_color(total * inv * inv)

    # =========================================================================
    # Public API
    # =========================================================================

    def resolve_color(self, origin, direction, depth: int = 0) -> tuple[float, float, float]:
        """Color seen along the ray ``origin + t * direction``.

        Args:
            origin: Ray origin (x, y, z).
            direction: Ray direction; need not be normalized.
            depth: Recursion depth of this ray. Rays deeper than MAX_DEPTH
                resolve to white without being traced.

        Returns:
            Tuple of (R, G, B) color values.

        Raises:
            ValueError: If ``depth`` is negative.
        """
        if depth < 0:
            raise ValueError(f"depth must be non-negative, got {depth}")
        color = self._resolve_kernel(*origin, *direction, depth)
        return (float(color[0]), float(color[1]), float(color[2]))

    def render_pixel(
        self, x: int, y: int, width: int, height: int, samples: int = 1
    ) -> tuple[float, float, float]:
        """Color of pixel ``(x, y)`` of a ``width x height`` image.

        With ``samples > 1`` the pixel is supersampled on an evenly spaced
        ``samples x samples`` grid and averaged. NaN or infinite channels are
        replaced by 0 and the result is clamped to [0, 1].

        Raises:
            ValueError: If ``samples`` is less than 1 or the image size is not
                positive.
        """
        if samples < 1:
            raise ValueError(f"samples must be at least 1, got {samples}")
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        color = self._render_pixel_kernel(float(x), float(y), width, height, samples)
        return (float(color[0]), float(color[1]), float(color[2]))
