# universe_generator/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module contains the color mapping constants and functions for converting
raw generated data (biome ids, elevation, moisture) into RGB color arrays.

It is a pure, stateless utility with no rendering dependencies, so both the
baking tool and downstream consumers can use it.
================================================================================
"""
import numpy as np

from .biomes import BIOME_BY_ID

# Magenta flags a biome id that is not in the table.
COLOR_UNKNOWN_BIOME = (255, 0, 255)

COLOR_MAP_MOISTURE = {
    "dry": (210, 180, 140),
    "wet": (70, 130, 180)
}


def create_biome_color_lut() -> np.ndarray:
    """Creates a LUT where the index is the Biome ID and the value is the RGB color."""
    return np.array([biome['color'] for biome in BIOME_BY_ID], dtype=np.uint8)


def create_moisture_lut() -> np.ndarray:
    """Creates a 256-entry color LUT for the moisture map."""
    t = np.linspace(0.0, 1.0, 256)[..., np.newaxis]
    colors = (1 - t) * np.array(COLOR_MAP_MOISTURE["dry"]) + t * np.array(COLOR_MAP_MOISTURE["wet"])
    return colors.astype(np.uint8)


def get_biome_color(biome_id: int) -> tuple:
    """RGB colour for a biome id; magenta for unknown ids."""
    if 0 <= biome_id < len(BIOME_BY_ID):
        return BIOME_BY_ID[biome_id]['color']
    return COLOR_UNKNOWN_BIOME


def get_terrain_color_array(biome_map: np.ndarray, biome_lut: np.ndarray) -> np.ndarray:
    """
    Converts a (height, width) biome id map into a (height, width, 3) RGB
    array using a pre-computed lookup table.
    """
    return biome_lut[biome_map]


def get_elevation_color_array(elevation_values: np.ndarray) -> np.ndarray:
    """Converts normalized elevation data [0, 1] into a grayscale RGB color array."""
    gray_values = (np.clip(elevation_values, 0.0, 1.0) * 255).astype(np.uint8)
    return np.stack([gray_values] * 3, axis=-1)


def get_moisture_color_array(moisture_values: np.ndarray, moisture_lut: np.ndarray) -> np.ndarray:
    """Converts normalized moisture data [0, 1] into an RGB color array using a LUT."""
    indices = (np.clip(moisture_values, 0.0, 1.0) * 255).astype(np.uint8)
    return moisture_lut[indices]
