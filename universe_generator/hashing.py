# universe_generator/hashing.py

"""
================================================================================
DETERMINISTIC HASHING & SEEDED RANDOMNESS
================================================================================
This module is the root of every random-looking decision in the package. It
turns an ordered sequence of primitive values into a 32-bit seed and expands
seeds into reproducible pseudo-random streams.

Pinned algorithm (changing it changes every generated universe):
    1. Each part is rendered to a canonical string (see `_canonical`).
    2. FNV-1a, 32-bit, over the code points of every part. A unit separator
       (0x1F) is folded in between consecutive parts.
    3. MurmurHash3 `fmix32` finaliser for full avalanche.

Data Contract:
---------------
- Inputs: ints, floats, bools, strings (and their numpy equivalents).
- Outputs: unsigned 32-bit integers, floats in [0, 1), integers in a range.
- Side Effects: None.
- Invariants: Same ordered inputs give the same output in every process.
================================================================================
"""

import numpy as np
from numba import njit

from . import config as DEFAULTS

UINT32_MASK = 0xFFFFFFFF
TWO_POW_32 = 4294967296.0

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
PART_SEPARATOR = 0x1F

FMIX_C1 = 0x85EBCA6B
FMIX_C2 = 0xC2B2AE35

MULBERRY_INCREMENT = 0x6D2B79F5


# --- Pure-Python primitives (arbitrary precision, masked to 32 bits) ---

def _fmix32(h: int) -> int:
    h ^= h >> 16
    h = (h * FMIX_C1) & UINT32_MASK
    h ^= h >> 13
    h = (h * FMIX_C2) & UINT32_MASK
    h ^= h >> 16
    return h


def _canonical(part) -> str:
    """Renders one hash input as a stable string."""
    if isinstance(part, (bool, np.bool_)):
        return "true" if part else "false"
    if isinstance(part, (int, np.integer)):
        return str(int(part))
    if isinstance(part, (float, np.floating)):
        value = float(part)
        # 3.0 and 3 must hash identically.
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(part, str):
        return part
    raise TypeError(f"Cannot hash value of type {type(part).__name__}: {part!r}")


def hash_seed(*parts) -> int:
    """
    Hashes an ordered sequence of primitive values to an unsigned 32-bit int.

    Usage:
        hash_seed('galaxy', 0, 'system', 42)      -> always the same uint32
        hash_seed('galaxy', 0, 'system', 42, 3)   -> a different uint32
    """
    h = FNV_OFFSET_BASIS
    for index, part in enumerate(parts):
        if index:
            h ^= PART_SEPARATOR
            h = (h * FNV_PRIME) & UINT32_MASK
        for char in _canonical(part):
            h ^= ord(char)
            h = (h * FNV_PRIME) & UINT32_MASK
    return _fmix32(h)


def hash_range(lo: int, hi: int, *parts) -> int:
    """Hashes `parts` onto an integer in [lo, hi] (inclusive)."""
    if hi < lo:
        raise ValueError(f"hash_range requires lo <= hi, got [{lo}, {hi}]")
    return lo + hash_seed(*parts) % (hi - lo + 1)


def hash_float(*parts) -> float:
    """Hashes `parts` onto a float in [0, 1)."""
    return hash_seed(*parts) / TWO_POW_32


def hash_rule(*parts) -> int:
    """Derives an automaton rule (0-255) from `parts`."""
    return hash_seed(*parts) & 0xFF


class SeededRandom:
    """
    A mulberry32 stream. Same seed, same sequence, always.

    The object is callable (`rng()` returns the next float in [0, 1)) and
    iterable, so it can feed both imperative code and `itertools`.
    """

    def __init__(self, seed: int):
        self.seed = seed & UINT32_MASK
        self._state = self.seed

    def __call__(self) -> float:
        return self.random()

    def __iter__(self):
        return self

    def __next__(self) -> float:
        return self.random()

    def random(self) -> float:
        self._state = (self._state + MULBERRY_INCREMENT) & UINT32_MASK
        s = self._state
        t = ((s ^ (s >> 15)) * (1 | s)) & UINT32_MASK
        t = ((t + (((t ^ (t >> 7)) * (61 | t)) & UINT32_MASK)) & UINT32_MASK) ^ t
        return ((t ^ (t >> 14)) & UINT32_MASK) / TWO_POW_32

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.random()

    def randint(self, a: int, b: int) -> int:
        """Integer in [a, b] inclusive."""
        return a + int(self.random() * (b - a + 1))


def seeded_random(*parts) -> SeededRandom:
    """Returns a reproducible random stream seeded from `hash_seed(*parts)`."""
    return SeededRandom(hash_seed(*parts))


# --- Jitted integer lattice hash (used inside noise loops) ---

@njit
def _imul32(a, b):
    """32-bit wrapping multiply without overflowing int64."""
    low = a * (b & 0xFFFF)
    high = ((a * (b >> 16)) & 0xFFFF) << 16
    return (low + high) & 0xFFFFFFFF


@njit
def _fmix32_jit(h):
    h ^= h >> 16
    h = _imul32(h, FMIX_C1)
    h ^= h >> 13
    h = _imul32(h, FMIX_C2)
    h ^= h >> 16
    return h


@njit
def _fnv_word(h, word):
    w = word & 0xFFFFFFFF
    for k in range(4):
        h ^= (w >> (8 * k)) & 0xFF
        h = _imul32(h, FNV_PRIME)
    return h


@njit
def lattice_hash(seed, ix, iy):
    """
    Hashes an integer lattice point. Negative coordinates wrap into uint32 so
    the lattice is continuous across the origin.
    """
    h = FNV_OFFSET_BASIS
    h = _fnv_word(h, seed)
    h = _fnv_word(h, ix)
    h = _fnv_word(h, iy)
    return _fmix32_jit(h)


# --- Seed chain ---

def generate_seed_chain(galaxy_id: int, system_x: int, system_y: int, planet_index: int = None) -> dict:
    """
    Derives the full hierarchy of seeds for a location in the universe:
    galaxy -> star system -> (optionally) planet and its per-layer seeds.
    """
    ns = DEFAULTS.SEED_NAMESPACE
    chain = {
        'galaxy': hash_seed(ns, 'galaxy', galaxy_id),
        'system': hash_seed(ns, 'galaxy', galaxy_id, 'system', system_x, system_y),
    }
    chain['star_type'] = hash_range(0, 5, chain['system'], 'star')
    chain['planet_count'] = hash_range(2, 6, chain['system'], 'planetcount')

    if planet_index is not None:
        planet = hash_seed(chain['system'], 'planet', planet_index)
        chain['planet'] = planet
        chain['planet_rule'] = hash_rule(planet, 'rule')
        for layer in ('terrain', 'biome', 'flora', 'creature', 'resource', 'rock', 'frequency'):
            chain[f'{layer}_seed'] = hash_seed(planet, layer)

    return chain
