# universe_generator/heightmap.py

"""
================================================================================
DENSITY FIELD & HEIGHTMAP GENERATION
================================================================================
Converts binary automaton grids into smooth terrain heightmaps.

The pipeline:
1. Run the rule several times from seed-derived start cells -> density field.
2. Blur the density field at several radii and blend -> smooth heightmap.
3. Optionally overlay fractal micro-detail and/or terracing.

Data Contract:
---------------
- Inputs: rule (0-255), grid dimensions, integer seed, smoothing parameters.
- Outputs: (height, width) float64 arrays with values in [0, 1].
- Side Effects: None.
- Invariants:
    - Smoothing wraps around both axes, so heightmaps tile seamlessly.
    - Identical inputs always produce identical heightmaps.
================================================================================
"""

import numpy as np
from scipy import ndimage

from . import config as DEFAULTS
from . import noise
from .automaton import check_dimension, check_rule, run_automaton
from .errors import InvalidDimensionError
from .hashing import UINT32_MASK, hash_seed


def generate_density_field(rule: int, width: int, height: int, seed: int, num_runs: int = DEFAULTS.DEFAULT_NUM_RUNS) -> np.ndarray:
    """
    Overlays `num_runs` automaton runs into a density field.

    Each run starts from a single live interior cell whose position is a
    multiplicative hash of (seed, run index), and runs for `height - 1`
    generations so the grid is exactly `height` rows tall. Each value is the fraction of runs that
    had a live cell at that position.
    """
    rule = check_rule(rule)
    width = check_dimension('width', width, DEFAULTS.MIN_AUTOMATON_WIDTH)
    height = check_dimension('height', height)
    num_runs = check_dimension('num_runs', num_runs)

    density = np.zeros((height, width))
    for run in range(num_runs):
        mixed = (seed * DEFAULTS.DENSITY_SEED_MULTIPLIER + run * DEFAULTS.DENSITY_RUN_MULTIPLIER) & UINT32_MASK
        # Edge cells are pinned dead, so starts land on the interior.
        start_pos = 1 + mixed % (width - 2)
        density += run_automaton(rule, width, height - 1, [start_pos])

    return density / num_runs


# --- Toroidal blurs ---
# Both blurs pad with wrapped copies and crop, so radii larger than the grid
# still tile correctly.

def _box_blur(field: np.ndarray, radius: int) -> np.ndarray:
    """Full (2r+1)^2 average. Cheapest for small radii."""
    if radius == 0:
        return field.copy()
    diameter = radius * 2 + 1
    padded = np.pad(field, radius, mode='wrap')
    kernel = np.full((diameter, diameter), 1.0 / (diameter * diameter))
    blurred = ndimage.convolve(padded, kernel, mode='constant')
    return blurred[radius:-radius, radius:-radius]


def _separable_blur(field: np.ndarray, radius: int) -> np.ndarray:
    """Horizontal then vertical 1-D averages. O(n*r) instead of O(n*r^2)."""
    if radius == 0:
        return field.copy()
    size = radius * 2 + 1
    padded = np.pad(field, ((0, 0), (radius, radius)), mode='wrap')
    horizontal = ndimage.uniform_filter1d(padded, size=size, axis=1)[:, radius:-radius]
    padded = np.pad(horizontal, ((radius, radius), (0, 0)), mode='wrap')
    return ndimage.uniform_filter1d(padded, size=size, axis=0)[radius:-radius, :]


def _normalize(values: np.ndarray) -> np.ndarray:
    """Min-max normalise to [0, 1]. A constant field is returned unchanged."""
    lo = values.min()
    hi = values.max()
    if hi - lo <= DEFAULTS.DEGENERATE_RANGE_EPSILON:
        return values
    return (values - lo) / (hi - lo)


def multi_octave_smooth(field: np.ndarray, scales=DEFAULTS.SMOOTHING_SCALES, weights=DEFAULTS.SMOOTHING_WEIGHTS) -> np.ndarray:
    """
    Blurs the same field at several radii and blends the results.

    Large radii give continent-scale shapes, small radii keep hills and
    valleys. The weighted sum is divided by the total weight (so a constant
    field stays constant) and then min-max normalised to [0, 1].

    Args:
        field (np.ndarray): 2D input, typically a density field.
        scales (sequence of int): Blur radii, one per octave.
        weights (sequence of float): Blend weight per octave.

    Returns:
        np.ndarray: Smoothed field with the same shape as `field`.
    """
    field = np.asarray(field, dtype=np.float64)
    if field.ndim != 2 or field.size == 0:
        raise ValueError(f"multi_octave_smooth expects a non-empty 2D field, got shape {field.shape}")
    if len(scales) != len(weights) or len(scales) == 0:
        raise ValueError(f"scales and weights must be non-empty and equal length, got {len(scales)} and {len(weights)}")
    weight_sum = float(sum(weights))
    if weight_sum <= 0:
        raise ValueError(f"weights must sum to a positive value, got {weight_sum}")

    result = np.zeros_like(field)
    for radius, weight in zip(scales, weights):
        radius = check_dimension('radius', radius, 0)
        if radius > DEFAULTS.BOX_BLUR_MAX_RADIUS:
            smoothed = _separable_blur(field, radius)
        else:
            smoothed = _box_blur(field, radius)
        result += smoothed * weight

    return _normalize(result / weight_sum)


def apply_micro_detail(
    heightmap: np.ndarray,
    seed: int,
    rule: int,
    amount: float = DEFAULTS.MICRO_DETAIL_AMOUNT,
    octaves: int = DEFAULTS.MICRO_DETAIL_OCTAVES,
    scale: float = DEFAULTS.MICRO_DETAIL_SCALE,
) -> np.ndarray:
    """
    Overlays two layers of fractal value noise (medium ridges and fine
    bumps) onto a heightmap. The blend strength falls off quadratically
    towards 0 and 1 so coastlines and peaks stay clean.
    """
    height, width = heightmap.shape
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    nx = xs * scale
    ny = ys * scale

    medium = noise.value_fbm(
        nx, ny, hash_seed(seed, 'micro', rule), octaves,
        DEFAULTS.MICRO_DETAIL_LACUNARITY, DEFAULTS.MICRO_DETAIL_PERSISTENCE
    )
    fine = noise.value_fbm(
        nx * DEFAULTS.MICRO_FINE_FREQUENCY, ny * DEFAULTS.MICRO_FINE_FREQUENCY,
        hash_seed(seed, 'micro_fine', rule), DEFAULTS.MICRO_FINE_OCTAVES,
        DEFAULTS.MICRO_FINE_LACUNARITY, DEFAULTS.MICRO_FINE_PERSISTENCE
    )

    elevation_blend = 1.0 - np.power(2.0 * heightmap - 1.0, 2)
    detail = (medium * DEFAULTS.MICRO_MEDIUM_WEIGHT + fine * DEFAULTS.MICRO_FINE_WEIGHT) * amount * elevation_blend
    return np.clip(heightmap + detail, 0.0, 1.0)


def generate_heightmap(
    rule: int,
    width: int,
    height: int,
    seed: int,
    num_runs: int = DEFAULTS.DEFAULT_NUM_RUNS,
    scales=DEFAULTS.SMOOTHING_SCALES,
    weights=DEFAULTS.SMOOTHING_WEIGHTS,
    micro_detail_amount: float = DEFAULTS.MICRO_DETAIL_AMOUNT,
    micro_detail_octaves: int = DEFAULTS.MICRO_DETAIL_OCTAVES,
    micro_detail_scale: float = DEFAULTS.MICRO_DETAIL_SCALE,
) -> np.ndarray:
    """
    Generates a terrain heightmap from an automaton rule. This is the main
    entry point: rule + seed in, a (height, width) array in [0, 1] out.
    Set `micro_detail_amount` to 0 to skip the noise overlay.
    """
    density = generate_density_field(rule, width, height, seed, num_runs)
    heightmap = multi_octave_smooth(density, scales, weights)

    if micro_detail_amount > 0:
        heightmap = apply_micro_detail(
            heightmap, seed, rule,
            amount=micro_detail_amount,
            octaves=micro_detail_octaves,
            scale=micro_detail_scale,
        )

    return np.clip(heightmap, 0.0, 1.0)


def terrace(heightmap: np.ndarray, levels: int = DEFAULTS.DEFAULT_TERRACE_LEVELS, sharpness: float = DEFAULTS.DEFAULT_TERRACE_SHARPNESS) -> np.ndarray:
    """
    Blends a heightmap with a quantised copy of itself, creating stair-step
    plateaus. sharpness 0 returns the input, 1 returns hard steps.
    """
    levels = check_dimension('levels', levels)
    sharpness = min(1.0, max(0.0, float(sharpness)))
    # Round half up, so 0.5 steps behave the same on every platform.
    terraced = np.floor(heightmap * levels + 0.5) / levels
    return heightmap * (1.0 - sharpness) + terraced * sharpness


def heightmap_stats(heightmap: np.ndarray) -> dict:
    """Min, max, mean and population standard deviation, for biome calibration."""
    values = np.asarray(heightmap, dtype=np.float64)
    if values.size == 0:
        raise InvalidDimensionError('heightmap.size', 0)
    return {
        'min': float(values.min()),
        'max': float(values.max()),
        'mean': float(values.mean()),
        'stddev': float(values.std()),
    }
