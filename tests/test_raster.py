"""Tests for the output raster and pixel packing."""

import math

import numpy as np
import pytest

from whitted.core.raster import Raster, pack_color, unpack_color


class TestPackColor:
    def test_channel_layout(self):
        assert pack_color((1.0, 0.0, 0.0)) == 0xFF0000
        assert pack_color((0.0, 1.0, 0.0)) == 0x00FF00
        assert pack_color((0.0, 0.0, 1.0)) == 0x0000FF

    def test_truncates_instead_of_rounding(self):
        # 0.5 * 255 = 127.5 -> 127
        assert pack_color((0.5, 0.5, 0.5)) == 0x7F7F7F
        assert pack_color((0.999, 0.0, 0.0)) == 254 << 16

    def test_out_of_range_is_clamped(self):
        assert pack_color((2.0, -1.0, 1.0)) == 0xFF00FF

    def test_nan_maps_to_zero(self):
        assert pack_color((math.nan, 1.0, math.nan)) == 0x00FF00

    def test_unpack(self):
        assert unpack_color(0xFF7F00) == (255, 127, 0)
        assert unpack_color(pack_color((0.2, 0.4, 1.0))) == (51, 102, 255)


class TestRaster:
    def test_default_pitch(self):
        raster = Raster(8, 4)
        assert raster.pitch == 32
        assert raster.memory.size == 128
        assert raster.size == (8, 4)

    def test_write_and_read(self):
        raster = Raster(4, 2, pitch=32)
        raster.write_pixel(1, 0, (1.0, 0.5, 0.0))
        assert hex(raster.read_pixel(1, 0)) == "0xff7f00"

    def test_little_endian_bytes_at_pitch_offset(self):
        raster = Raster(4, 2, pitch=32)
        raster.write_pixel(3, 1, (1.0, 0.5, 0.2))
        offset = 1 * 32 + 3 * 4
        assert list(raster.memory[offset : offset + 4]) == [51, 127, 255, 0]

    def test_row_padding_untouched(self):
        raster = Raster(4, 2, pitch=32)
        for y in range(2):
            for x in range(4):
                raster.write_pixel(x, y, (1.0, 1.0, 1.0))
        padded = raster.memory.reshape(2, 32)[:, 16:]
        assert np.all(padded == 0)
        assert np.all(raster.pixels() == 0xFFFFFF)
        assert raster.pixels().shape == (2, 4)

    def test_clear(self):
        raster = Raster(2, 2)
        raster.write_pixel(0, 0, (1.0, 1.0, 1.0))
        raster.clear()
        assert raster.read_pixel(0, 0) == 0

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (4, 0), (0, 2)])
    def test_out_of_bounds(self, x, y):
        raster = Raster(4, 2)
        with pytest.raises(IndexError):
            raster.write_pixel(x, y, (0.0, 0.0, 0.0))
        with pytest.raises(IndexError):
            raster.read_pixel(x, y)

    @pytest.mark.parametrize(
        "width,height,pitch",
        [(0, 4, None), (4, -1, None), (4, 4, 12), (4, 4, 18)],
    )
    def test_invalid_geometry(self, width, height, pitch):
        with pytest.raises(ValueError):
            Raster(width, height, pitch=pitch)

    def test_repr(self):
        assert repr(Raster(4, 2, pitch=32)) == "Raster(width=4, height=2, pitch=32)"
