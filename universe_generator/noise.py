# universe_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides coherent 2D noise evaluated as a pure function of
(seed, x, y). There is no permutation table and no per-call state: every
lattice corner is hashed directly, so any two callers sampling the same global
coordinate get the same value. This is what makes chunk borders seamless.

Data Contract:
---------------
- Inputs:
    - seed: integer seed (wrapped into uint32 by the lattice hash).
    - x, y: NumPy arrays of coordinates (same shape).
    - octaves, persistence, lacunarity: Standard fractal parameters.
- Outputs:
    - gradient fBm: values in [0, 1].
    - value fBm: values roughly in [-0.5, 0.5].
- Side Effects: None.
- Invariants: The shape of the output array matches the shape of input x and y.
================================================================================
"""

import numpy as np
from numba import njit

from .hashing import lattice_hash

TWO_PI = 2.0 * np.pi
INV_TWO_POW_32 = 1.0 / 4294967296.0

# Perlin output with unit gradients lies within about +/-0.7.
GRADIENT_NOISE_GAIN = 0.7

# Per-octave coordinate offsets for the value-noise layers.
VALUE_OCTAVE_OFFSET_X = 17.3
VALUE_OCTAVE_OFFSET_Y = 31.7


@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)


@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)


@njit
def _smoothstep(t):
    "3t^2 - 2t^3"
    return t * t * (3 - 2 * t)


@njit
def _gradient(seed, ix, iy, x, y):
    """Dot product between the hashed corner gradient and the offset vector."""
    h = lattice_hash(seed, ix, iy)
    angle = (h & 0xFF) / 255.0 * TWO_PI
    return np.cos(angle) * x + np.sin(angle) * y


@njit
def gradient_noise(x, y, seed):
    """Single-octave Perlin-style gradient noise, remapped to [0, 1]."""
    fx0 = np.floor(x)
    fy0 = np.floor(y)
    ix = np.int64(fx0)
    iy = np.int64(fy0)
    xf = x - fx0
    yf = y - fy0

    u = _fade(xf)
    v = _fade(yf)

    g00 = _gradient(seed, ix, iy, xf, yf)
    g10 = _gradient(seed, ix + 1, iy, xf - 1, yf)
    g01 = _gradient(seed, ix, iy + 1, xf, yf - 1)
    g11 = _gradient(seed, ix + 1, iy + 1, xf - 1, yf - 1)

    x1 = _lerp(g00, g10, u)
    x2 = _lerp(g01, g11, u)
    value = _lerp(x1, x2, v) * GRADIENT_NOISE_GAIN + 0.5
    return min(1.0, max(0.0, value))


@njit
def gradient_fbm(x, y, seed, octaves=5, persistence=0.5, lacunarity=2.0, octave_seed_step=31337):
    """
    Fractal gradient noise over 2D coordinate arrays.
    Each octave hashes its own lattice (seed + i * octave_seed_step) and the
    sum is divided by the total amplitude so the result stays in [0, 1].
    """
    rows, cols = x.shape
    total_noise = np.zeros((rows, cols))

    for i in range(rows):
        for j in range(cols):
            noise_val = 0.0
            amplitude = 1.0
            frequency = 1.0
            total_amplitude = 0.0

            for octave in range(octaves):
                noise_val += gradient_noise(
                    x[i, j] * frequency,
                    y[i, j] * frequency,
                    seed + octave * octave_seed_step
                ) * amplitude
                total_amplitude += amplitude
                amplitude *= persistence
                frequency *= lacunarity

            total_noise[i, j] = noise_val / total_amplitude

    return total_noise


@njit
def value_noise(x, y, seed):
    """Smoothly interpolated lattice values in [0, 1)."""
    fx0 = np.floor(x)
    fy0 = np.floor(y)
    ix = np.int64(fx0)
    iy = np.int64(fy0)
    u = _smoothstep(x - fx0)
    v = _smoothstep(y - fy0)

    n00 = lattice_hash(seed, ix, iy) * INV_TWO_POW_32
    n10 = lattice_hash(seed, ix + 1, iy) * INV_TWO_POW_32
    n01 = lattice_hash(seed, ix, iy + 1) * INV_TWO_POW_32
    n11 = lattice_hash(seed, ix + 1, iy + 1) * INV_TWO_POW_32

    return _lerp(_lerp(n00, n10, u), _lerp(n01, n11, u), v)


@njit
def value_fbm(x, y, seed, octaves=4, lacunarity=2.13, persistence=0.45):
    """
    Zero-centred fractal value noise, roughly in [-0.5, 0.5].
    Used for heightmap micro-detail where a softer texture than gradient
    noise is wanted.
    """
    rows, cols = x.shape
    total_noise = np.zeros((rows, cols))

    for i in range(rows):
        for j in range(cols):
            noise_val = 0.0
            amplitude = 0.5
            frequency = 1.0

            for octave in range(octaves):
                sample = value_noise(
                    x[i, j] * frequency + octave * VALUE_OCTAVE_OFFSET_X,
                    y[i, j] * frequency + octave * VALUE_OCTAVE_OFFSET_Y,
                    seed
                )
                noise_val += amplitude * (sample - 0.5)
                frequency *= lacunarity
                amplitude *= persistence

            total_noise[i, j] = noise_val

    return total_noise


@njit
def automaton_texture(gx, gy, rule, seed, scale, bit_weight=0.4, frequency=3.0, seed_offset=777):
    """
    A rule-specific texture over integer global coordinates.

    The low bits of the hashes of the left, centre and right neighbours form a
    synthetic 3-cell neighbourhood which is run through `rule`. The resulting
    bit is softened by blending with a higher-frequency gradient noise layer.
    """
    rows, cols = gx.shape
    texture = np.zeros((rows, cols))

    for i in range(rows):
        for j in range(cols):
            x = gx[i, j]
            y = gy[i, j]
            left = lattice_hash(seed, x - 1, y) & 1
            center = lattice_hash(seed, x, y) & 1
            right = lattice_hash(seed, x + 1, y) & 1
            pattern = (left << 2) | (center << 1) | right
            bit = (rule >> pattern) & 1

            smooth = gradient_noise(x * scale * frequency, y * scale * frequency, seed + seed_offset)
            texture[i, j] = bit * bit_weight + smooth * (1.0 - bit_weight)

    return texture
