"""
Tests for the command-line tools' building blocks: image saving,
colourising chunk responses, surface resolution and the seam probe.
"""

import numpy as np
import pytest
from PIL import Image

from bake_region import colorize, resolve_surface, save_chunk_image
from seam_probe import probe_seam
from universe_generator import color_maps
from universe_generator.universe import UniverseManager


@pytest.fixture
def luts():
    return {'biome': color_maps.create_biome_color_lut(), 'moisture': color_maps.create_moisture_lut()}


class TestSaveChunkImage:
    """Test tiered PNG compression."""

    def test_uniform(self, tmp_path):
        """A single-colour chunk is stored as a 1x1 image."""
        colors = np.full((8, 8, 3), 120, dtype=np.uint8)
        assert save_chunk_image(colors, str(tmp_path), "u") == 'uniform'
        assert Image.open(tmp_path / "u.png").size == (1, 1)

    def test_palettized(self, tmp_path):
        """Few colours use a palette."""
        colors = np.zeros((8, 8, 3), dtype=np.uint8)
        colors[:4] = (255, 0, 0)
        assert save_chunk_image(colors, str(tmp_path), "p") == 'palettized'
        assert Image.open(tmp_path / "p.png").mode == 'P'

    def test_full(self, tmp_path):
        """Many colours fall back to plain RGB."""
        colors = np.random.default_rng(0).integers(0, 256, (32, 32, 3), dtype=np.uint8)
        assert save_chunk_image(colors, str(tmp_path), "f") == 'full'
        assert np.array_equal(np.array(Image.open(tmp_path / "f.png")), colors)


class TestColorize:
    """Test chunk response -> image conversion."""

    @pytest.mark.parametrize("mode", ["biome", "elevation", "moisture"])
    def test_drops_shared_border(self, chunk_generator, luts, mode):
        """Images are chunk_size wide; the shared edge belongs to the neighbour."""
        response = chunk_generator.generate_chunk(0, 0, 30, 42, chunk_size=8)
        image = colorize(mode, response, luts)
        assert image.shape == (8, 8, 3)
        assert image.dtype == np.uint8

    def test_unknown_mode(self, chunk_generator, luts):
        """Unsupported view modes are rejected."""
        response = chunk_generator.generate_chunk(0, 0, 30, 42, chunk_size=4)
        with pytest.raises(ValueError):
            colorize("temperature", response, luts)


class TestResolveSurface:
    """Test choosing the rule and seed to bake."""

    def test_plain_parameters(self, logger):
        """Without a planet reference the configured rule and seed are used."""
        assert resolve_surface({'rule': 110, 'seed': 9}, logger) == (110, 9)

    def test_planet_reference(self, logger):
        """A planet reference bakes that planet's rule and terrain seed."""
        rule, seed = resolve_surface({'seed': 42, 'planet': {'galaxy': 0, 'x': 10, 'y': 15, 'index': 0}}, logger)
        planet = UniverseManager(42).get_system(10, 15).planets[0]
        assert (rule, seed) == (planet.rule, planet.terrain_seed)

    def test_missing_planet(self, logger):
        """An index past the last planet is reported."""
        with pytest.raises(ValueError):
            resolve_surface({'planet': {'x': 0, 'y': 0, 'index': 50}}, logger)


class TestSeamProbe:
    """Test the seam probe."""

    def test_probe_passes(self, logger, chunk_generator):
        """Neighbouring chunks agree on both seams."""
        assert probe_seam(logger, chunk_generator, -1, 2, 30, 42, 8)
