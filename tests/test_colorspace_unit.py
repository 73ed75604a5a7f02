"""
Unit tests for sRGB/Lab conversions and color distances.
"""

import math
import random

import numpy as np
import pytest

from paintmatch.errors import InvalidColorFormat, InvalidInputError
from paintmatch.services.colors.colorspace import (
    delta_e_cie76, hex_to_lab, hex_to_rgb, lab_to_rgb, lab_to_srgb,
    normalize_hex, rgb_distance, rgb_to_hex, rgb_to_lab, srgb_to_lab
)


class TestHexParsing:
    """Test hex <-> RGB conversion"""

    def test_hex_to_rgb_basic(self):
        assert hex_to_rgb("#FF0000") == (255, 0, 0)
        assert hex_to_rgb("#00ff00") == (0, 255, 0)
        assert hex_to_rgb("0000FF") == (0, 0, 255)
        assert hex_to_rgb("#1f4E79") == (31, 78, 121)

    @pytest.mark.parametrize("bad", ["", "#FFF", "#GGGGGG", "#12345", "#1234567", "red", None, 123])
    def test_hex_to_rgb_invalid(self, bad):
        with pytest.raises(InvalidColorFormat):
            hex_to_rgb(bad)

    def test_invalid_color_format_is_invalid_input(self):
        with pytest.raises(InvalidInputError):
            hex_to_rgb("#XYZXYZ")

    def test_rgb_to_hex_uppercase(self):
        assert rgb_to_hex((255, 99, 71)) == "#FF6347"
        assert rgb_to_hex(np.array([10, 42, 67], dtype=np.uint8)) == "#0A2A43"

    def test_rgb_to_hex_out_of_range(self):
        with pytest.raises(ValueError):
            rgb_to_hex((256, 0, 0))

    def test_normalize_hex(self):
        assert normalize_hex("ff6347") == "#FF6347"


class TestLabConversion:
    """Test sRGB -> Lab with the D65 reference white"""

    def test_black_is_origin(self):
        L, a, b = rgb_to_lab((0, 0, 0))
        assert L == pytest.approx(0.0, abs=1e-9)
        assert a == pytest.approx(0.0, abs=1e-9)
        assert b == pytest.approx(0.0, abs=1e-9)

    def test_white_is_near_l100(self):
        L, a, b = rgb_to_lab((255, 255, 255))
        assert L == pytest.approx(100.0, abs=0.01)
        assert a == pytest.approx(0.0, abs=0.05)
        assert b == pytest.approx(0.0, abs=0.05)

    def test_pure_red(self):
        L, a, b = rgb_to_lab((255, 0, 0))
        assert L == pytest.approx(53.24, abs=0.05)
        assert a == pytest.approx(80.09, abs=0.1)
        assert b == pytest.approx(67.20, abs=0.1)

    def test_hex_to_lab_matches_rgb(self):
        assert hex_to_lab("#FF0000") == rgb_to_lab((255, 0, 0))

    def test_vectorized_matches_scalar(self):
        rgb = np.array([[[12, 200, 33], [250, 250, 1]]], dtype=np.uint8)
        lab = srgb_to_lab(rgb)
        assert lab.shape == (1, 2, 3)
        np.testing.assert_allclose(lab[0, 0], rgb_to_lab((12, 200, 33)))
        np.testing.assert_allclose(lab[0, 1], rgb_to_lab((250, 250, 1)))


class TestRoundTrip:
    """Lab -> sRGB reproduces the input within one step per channel"""

    def test_round_trip_grid(self):
        levels = np.arange(0, 256, 15, dtype=np.uint8)
        grid = np.stack(np.meshgrid(levels, levels, levels, indexing="ij"), axis=-1).reshape(-1, 3)
        back = lab_to_srgb(srgb_to_lab(grid)).astype(int)
        assert np.abs(back - grid.astype(int)).max() <= 1

    def test_round_trip_random_samples(self):
        rng = random.Random(7)
        for _ in range(200):
            rgb = (rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255))
            back = lab_to_rgb(rgb_to_lab(rgb))
            assert all(abs(x - y) <= 1 for x, y in zip(rgb, back)), (rgb, back)


class TestDistances:
    """Test distance metrics"""

    def test_delta_e_identity_and_symmetry(self):
        red = hex_to_lab("#FF0000")
        tomato = hex_to_lab("#FF6347")
        assert delta_e_cie76(red, red) == 0.0
        assert delta_e_cie76(red, tomato) == delta_e_cie76(tomato, red)
        assert delta_e_cie76(red, tomato) > 0

    def test_rgb_distance(self):
        assert rgb_distance((10, 10, 10), (12, 12, 12)) == pytest.approx(math.sqrt(12))
        assert rgb_distance((0, 0, 0), (3, 4, 0)) == 5.0
        assert rgb_distance(np.array([200, 0, 0], dtype=np.uint8), (0, 0, 0)) == 200.0
