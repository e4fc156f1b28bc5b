"""Unit tests for the ray module.

Tests cover:
- Ray dataclass, ray_at and offset_origin
- Vector utility functions (normalize, reflect, refract)
- Fresnel transmittance
- Color helpers (add_clamped, lerp_color, sanitize_color)
"""

import math

import pytest
import taichi as ti


class TestRayBasics:
    """Tests for Ray dataclass and basic operations."""

    def test_ray_at_positive_t(self):
        """Test ray_at computes correct point along ray."""
        from whitted.core.ray import Ray, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = Ray(origin=vec3(1.0, 2.0, 3.0), direction=vec3(1.0, 0.0, 0.0))
            result[None] = ray_at(ray, 5.0)

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(6.0)
        assert r[1] == pytest.approx(2.0)
        assert r[2] == pytest.approx(3.0)

    def test_offset_origin_moves_along_direction(self):
        """Secondary rays start RAY_EPSILON along their direction."""
        from whitted.core.ray import RAY_EPSILON, offset_origin, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = offset_origin(vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, 1.0))

        test_kernel()
        assert result[None][2] == pytest.approx(1.0 + RAY_EPSILON, abs=1e-7)


class TestVectorUtilities:
    """Tests for vector helpers."""

    def test_normalize_unit_length(self):
        from whitted.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(3.0, 4.0, 0.0))

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(0.6, abs=1e-6)
        assert r[1] == pytest.approx(0.8, abs=1e-6)
        assert r[2] == pytest.approx(0.0, abs=1e-6)

    def test_normalize_zero_vector_is_zero(self):
        """Zero-length input must not produce NaN."""
        from whitted.core.ray import normalize, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = normalize(vec3(0.0, 0.0, 0.0))

        test_kernel()
        r = result[None]
        for k in range(3):
            assert not math.isnan(r[k])
            assert r[k] == 0.0

    def test_reflect_about_normal(self):
        from whitted.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(1.0)
        assert r[1] == pytest.approx(1.0)
        assert r[2] == pytest.approx(0.0)

    def test_refract_normal_incidence_passes_straight(self):
        from whitted.core.ray import refract, vec3

        direction = ti.field(dtype=ti.math.vec3, shape=())
        valid = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            d, _, ok = refract(vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, -1.0), 1.0 / 1.5)
            direction[None] = d
            valid[None] = ok

        test_kernel()
        assert valid[None] == 1
        d = direction[None]
        assert d[0] == pytest.approx(0.0, abs=1e-6)
        assert d[1] == pytest.approx(0.0, abs=1e-6)
        assert d[2] == pytest.approx(1.0, abs=1e-6)

    def test_refract_bends_toward_normal_entering_denser_medium(self):
        """Snell's law: sin_t = eta * sin_i."""
        from whitted.core.ray import refract, vec3

        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            incident = vec3(ti.sin(0.5), 0.0, ti.cos(0.5))
            d, _, _ = refract(incident, vec3(0.0, 0.0, -1.0), 1.0 / 1.5)
            direction[None] = d

        test_kernel()
        d = direction[None]
        assert d[0] == pytest.approx(math.sin(0.5) / 1.5, abs=1e-5)
        assert d[0] ** 2 + d[1] ** 2 + d[2] ** 2 == pytest.approx(1.0, abs=1e-5)

    def test_refract_total_internal_reflection(self):
        """Leaving glass at a steep angle has no transmitted direction."""
        from whitted.core.ray import refract, vec3

        valid = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            incident = vec3(ti.sin(1.2), 0.0, ti.cos(1.2))
            _, _, ok = refract(incident, vec3(0.0, 0.0, -1.0), 1.5)
            valid[None] = ok

        test_kernel()
        assert valid[None] == 0


class TestFresnel:
    """Tests for the Fresnel transmittance."""

    def test_normal_incidence_glass(self):
        """At normal incidence R = ((n1 - n2) / (n1 + n2))^2 = 0.04 for glass."""
        from whitted.core.ray import fresnel_transmittance

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = fresnel_transmittance(1.0, 1.0, 1.0 / 1.5)

        test_kernel()
        assert result[None] == pytest.approx(0.96, abs=1e-4)

    def test_matched_media_transmit_everything(self):
        from whitted.core.ray import fresnel_transmittance

        result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = fresnel_transmittance(0.7, 0.7, 1.0)

        test_kernel()
        assert result[None] == pytest.approx(1.0, abs=1e-6)

    def test_grazing_incidence_reflects_more(self):
        from whitted.core.ray import fresnel_transmittance, refract, vec3

        normal_t = ti.field(dtype=ti.f32, shape=())
        grazing_t = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            eta = 1.0 / 1.5
            n = vec3(0.0, 0.0, -1.0)
            normal_t[None] = fresnel_transmittance(1.0, 1.0, eta)
            d = vec3(ti.sin(1.4), 0.0, ti.cos(1.4))
            _, cos_t, _ = refract(d, n, eta)
            grazing_t[None] = fresnel_transmittance(ti.cos(1.4), cos_t, eta)

        test_kernel()
        assert 0.0 <= grazing_t[None] < normal_t[None]


class TestColorUtilities:
    """Tests for color helpers."""

    def test_add_clamped_saturates(self):
        from whitted.core.ray import add_clamped, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = add_clamped(vec3(0.8, 0.2, 0.0), vec3(0.5, 0.2, -0.5))

        test_kernel()
        r = result[None]
        assert r[0] == pytest.approx(1.0)
        assert r[1] == pytest.approx(0.4)
        assert r[2] == pytest.approx(0.0)

    def test_lerp_color_endpoints(self):
        from whitted.core.ray import lerp_color, vec3

        result = ti.field(dtype=ti.math.vec3, shape=3)

        @ti.kernel
        def test_kernel():
            a = vec3(1.0, 0.0, 0.0)
            b = vec3(0.0, 0.0, 1.0)
            result[0] = lerp_color(a, b, 0.0)
            result[1] = lerp_color(a, b, 1.0)
            result[2] = lerp_color(a, b, 0.25)

        test_kernel()
        assert result[0][0] == pytest.approx(1.0)
        assert result[1][2] == pytest.approx(1.0)
        assert result[2][0] == pytest.approx(0.75)
        assert result[2][2] == pytest.approx(0.25)

    def test_sanitize_color_replaces_nan(self):
        from whitted.core.ray import sanitize_color, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(bad: ti.f32):
            result[None] = sanitize_color(vec3(bad, 2.0, 0.5))

        test_kernel(float("nan"))
        r = result[None]
        assert r[0] == 0.0
        assert r[1] == pytest.approx(1.0)
        assert r[2] == pytest.approx(0.5)
