"""Tests for render.hillshade module."""

import math
from unittest.mock import patch

import numpy as np
import pytest

from elevation.decoder import decode_terrarium_to_elevation_m
from render.hillshade import (
    alpha_array,
    blend_colors,
    elevation_alpha,
    light_luminance,
    render_hillshade,
    shade,
)
from shared.constants import BlendMode

# sqrt(cos(pi/4) * 0.8 + 0.2) * 255 = 223.13
FLAT_LUMINANCE = 223
FLAT_RGB = (223, 222, 223)


class TestLightLuminance:
    """Tests for light_luminance function."""

    def test_flat_terrain(self):
        """Slope 0 leaves only the cos(zenith) term."""
        assert light_luminance(0.0, 0.0, 315.0, 45.0) == FLAT_LUMINANCE
        assert light_luminance(0.0, 1.3, 225.0, 45.0) == FLAT_LUMINANCE

    def test_shadowed_face_clamped_to_ambient(self):
        """Negative illumination is zeroed: sqrt(0.2) * 255 = 114.03."""
        azimuth_term = (315.0 - 90) * math.pi / 180
        aspect = -math.pi / 2 - azimuth_term
        assert light_luminance(math.pi / 2, aspect, 315.0, 45.0) == 114

    def test_range(self):
        rng = np.random.default_rng(1)
        for slope, aspect in rng.uniform((0, -math.pi), (math.pi / 2, math.pi), (200, 2)):
            value = light_luminance(slope, aspect, 225.0, 45.0)
            assert 114 <= value <= 255

    def test_lit_face_brighter_than_flat(self):
        azimuth_term = (315.0 - 90) * math.pi / 180
        aspect = math.pi / 2 - azimuth_term  # cos term == 1
        assert light_luminance(0.3, aspect, 315.0, 45.0) > FLAT_LUMINANCE


class TestBlendColors:
    """Tests for blend_colors function."""

    def test_wrap(self):
        """Default blend wraps modulo 256."""
        assert blend_colors((200, 100, 0), (100, 200, 50)) == (44, 44, 50)

    def test_saturate(self):
        result = blend_colors((200, 100, 0), (100, 200, 50), BlendMode.SATURATE)
        assert result == (255, 255, 50)

    def test_no_overflow_same_for_both(self):
        c1, c2 = (223, 111, 0), (0, 111, 223)
        assert blend_colors(c1, c2) == blend_colors(c1, c2, BlendMode.SATURATE)


class TestElevationAlpha:
    """Alpha ramp between 20 m and 120 m."""

    @pytest.mark.parametrize('h', [-32768.0, -5.0, 0.0, 19.9, 20.0])
    def test_transparent_at_low_elevation(self, h):
        assert elevation_alpha(h) == 0

    @pytest.mark.parametrize('h', [120.0, 121.0, 5000.0, 32767.0])
    def test_opaque_at_high_elevation(self, h):
        assert elevation_alpha(h) == 255

    def test_linear_between(self):
        assert elevation_alpha(70.0) == 127  # 127.5 truncated
        assert elevation_alpha(21.0) == 2  # 2.55 truncated

    def test_monotonic(self):
        values = [elevation_alpha(h) for h in np.arange(-10.0, 140.0, 0.5)]
        assert values == sorted(values)

    def test_array_matches_scalar(self):
        heights = np.arange(-10.0, 140.0, 0.25)
        expected = [elevation_alpha(h) for h in heights]
        assert alpha_array(heights).tolist() == expected


class TestShade:
    """Tests for the per-pixel shade."""

    def test_flat_sea_level(self, flat_sea_level_tile):
        assert shade(flat_sea_level_tile, 0, 0) == (*FLAT_RGB, 0)
        assert shade(flat_sea_level_tile, 511, 511) == (*FLAT_RGB, 0)

    def test_flat_high_ground_is_opaque(self, make_tile):
        tile = make_tile(300)
        assert shade(tile, 10, 20) == (*FLAT_RGB, 255)

    def test_alpha_uses_centre_elevation(self, make_tile):
        elevation = np.zeros((516, 516), dtype=np.int64)
        elevation[7, 9] = 70
        tile = make_tile(elevation)
        assert shade(tile, 5, 7)[3] == 127
        assert shade(tile, 5, 8)[3] == 0


class TestRenderHillshade:
    """Tests for the whole-tile renderer."""

    def test_flat_tile_uniform(self, flat_sea_level_tile):
        out = render_hillshade(flat_sea_level_tile)
        assert out.shape == (512, 512, 4)
        assert out.dtype == np.uint8
        assert np.all(out[:, :, :3] == FLAT_RGB)
        assert np.all(out[:, :, 3] == 0)

    def test_writes_into_given_buffer(self, flat_sea_level_tile):
        buf = np.zeros((512, 512, 4), dtype=np.uint8)
        out = render_hillshade(flat_sea_level_tile, out=buf)
        assert out is buf
        assert buf[100, 100].tolist() == [*FLAT_RGB, 0]

    def test_rgb_only_source(self, make_tile):
        tile = make_tile(150, channels=3)
        out = render_hillshade(tile)
        assert np.all(out == [*FLAT_RGB, 255])

    def test_matches_per_pixel_shade(self, rough_tile):
        """Vectorised and per-pixel paths agree (last-ulp trig may shift by 1)."""
        out = render_hillshade(rough_tile)
        for row, col in [(0, 0), (0, 511), (511, 0), (511, 511), (123, 456), (300, 3)]:
            expected = shade(rough_tile, row, col)
            diff = np.abs(out[row, col].astype(int) - np.array(expected))
            assert diff.max() <= 1
            assert out[row, col, 3] == expected[3]

    def test_alpha_channel(self, rough_tile):
        out = render_hillshade(rough_tile)
        dem = decode_terrarium_to_elevation_m(rough_tile)
        assert np.array_equal(out[:, :, 3], alpha_array(dem[2:514, 2:514]))

    def test_blend_modes_coincide_for_fixed_lights(self, rough_tile):
        wrap = render_hillshade(rough_tile, blend=BlendMode.WRAP)
        sat = render_hillshade(rough_tile, blend=BlendMode.SATURATE)
        assert np.array_equal(wrap, sat)

    def test_deterministic(self, rough_tile):
        a = render_hillshade(rough_tile)
        b = render_hillshade(rough_tile.copy())
        assert a.tobytes() == b.tobytes()

    def test_oversized_source_decodes_top_left_window(self, rough_tile, make_tile):
        big = make_tile(900, size=700)
        big[:516, :516] = rough_tile
        with patch(
            'render.hillshade.decode_terrarium_to_elevation_m',
            wraps=decode_terrarium_to_elevation_m,
        ) as decode:
            out = render_hillshade(big)
        assert decode.call_args.args[0].shape[:2] == (516, 516)
        assert np.array_equal(out, render_hillshade(rough_tile))

    def test_blue_fraction_changes_alpha(self, make_tile):
        tile = make_tile(20)
        tile[:, :, 2] = 255  # +0.996 m only with fractional blue
        assert np.all(render_hillshade(tile)[:, :, 3] == 0)
        assert np.all(render_hillshade(tile, blue_fraction=True)[:, :, 3] == 2)
