# universe_generator/generator.py

"""
================================================================================
CHUNKED WORLD GENERATOR
================================================================================
This module contains the ChunkGenerator class, responsible for producing the
elevation, moisture and biome data of one chunk of a planet surface.

Every sample is a pure function of (seed, global x, global y), where
global = chunk coordinate * chunk size + local offset. Chunks are never seeded
individually, so neighbouring chunks agree exactly on their shared border and
can be generated in any order, in any process.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Parameters which can override the internal defaults.
    - logger: A configured Python logging object for runtime messages.
- Inputs (per chunk): chunk_x, chunk_y, chunk_size, rule, seed,
  optional moisture_rule.
- Outputs (per chunk): a self-describing dict with flat row-major arrays of
  (chunk_size + 1)^2 samples.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same arguments and configuration, the output is
  deterministic.
================================================================================
"""

import logging
import time

import numpy as np

from . import config as DEFAULTS
from . import noise
from .automaton import check_dimension, check_rule, classify_rule
from .biomes import classify_biome_map
from .hashing import hash_seed

REQUIRED_REQUEST_KEYS = ('chunk_x', 'chunk_y', 'chunk_size', 'rule', 'seed')


def _check_coordinate(name: str, value) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"'{name}' must be an integer chunk coordinate, got {value!r}")
    return int(value)


class ChunkGenerator:
    """
    Generates seamless chunk data from globally-coherent noise.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, config: dict, logger: logging.Logger):
        """
        Initializes the chunk generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
        """
        self.logger = logger
        self.user_config = config

        # --- Consolidate Configuration ---
        self.settings = {
            'chunk_size': self.user_config.get('chunk_size', DEFAULTS.DEFAULT_CHUNK_SIZE),
            'noise_octaves': self.user_config.get('noise_octaves', DEFAULTS.CHUNK_NOISE_OCTAVES),
            'noise_persistence': self.user_config.get('noise_persistence', DEFAULTS.CHUNK_NOISE_PERSISTENCE),
            'noise_lacunarity': self.user_config.get('noise_lacunarity', DEFAULTS.CHUNK_NOISE_LACUNARITY),
            'octave_seed_step': self.user_config.get('octave_seed_step', DEFAULTS.CHUNK_OCTAVE_SEED_STEP),
            'feature_scale_by_class': self.user_config.get('feature_scale_by_class', DEFAULTS.FEATURE_SCALE_BY_CLASS),
            'moisture_scale_factor': self.user_config.get('moisture_scale_factor', DEFAULTS.MOISTURE_SCALE_FACTOR),
            'moisture_rule_offset': self.user_config.get('moisture_rule_offset', DEFAULTS.MOISTURE_RULE_OFFSET),
            'automaton_texture_weight': self.user_config.get('automaton_texture_weight', DEFAULTS.AUTOMATON_TEXTURE_WEIGHT),
            'automaton_texture_bit_weight': self.user_config.get('automaton_texture_bit_weight', DEFAULTS.AUTOMATON_TEXTURE_BIT_WEIGHT),
            'automaton_texture_frequency': self.user_config.get('automaton_texture_frequency', DEFAULTS.AUTOMATON_TEXTURE_FREQUENCY),
            'automaton_texture_seed_offset': self.user_config.get('automaton_texture_seed_offset', DEFAULTS.AUTOMATON_TEXTURE_SEED_OFFSET),
        }
        self.settings['chunk_size'] = check_dimension('chunk_size', self.settings['chunk_size'])

        # JSON configs arrive with string keys.
        self.settings['feature_scale_by_class'] = {
            int(rule_class): float(scale)
            for rule_class, scale in self.settings['feature_scale_by_class'].items()
        }

        self.logger.debug(f"ChunkGenerator initialized with default chunk size {self.settings['chunk_size']}.")

    # --- Seeds & Scales ---

    def get_feature_scale(self, rule: int) -> float:
        """Noise frequency for a rule; more complex rules give busier terrain."""
        rule_class = classify_rule(rule)['class']
        return self.settings['feature_scale_by_class'][rule_class]

    def get_moisture_rule(self, rule: int, moisture_rule: int = None) -> int:
        if moisture_rule is None:
            return (rule + self.settings['moisture_rule_offset']) & 0xFF
        return check_rule(moisture_rule)

    def get_field_seeds(self, rule: int, seed: int, moisture_rule: int = None) -> tuple[int, int]:
        """Elevation and moisture seeds, both derived from the one root seed."""
        elev_seed = hash_seed(seed, 'elev', rule)
        moist_seed = hash_seed(seed, 'moist', self.get_moisture_rule(rule, moisture_rule))
        return elev_seed, moist_seed

    # --- Coordinates ---

    def get_coordinate_grid(self, chunk_x: int, chunk_y: int, chunk_size: int) -> tuple[np.ndarray, np.ndarray]:
        """
        Global integer coordinates for a chunk, (chunk_size + 1) samples per
        edge. The last column of chunk N is the first column of chunk N + 1.
        """
        local = np.arange(chunk_size + 1, dtype=np.int64)
        gx = chunk_x * chunk_size + local
        gy = chunk_y * chunk_size + local
        return np.meshgrid(gx, gy)

    # --- Field Sampling ---

    def sample_elevation(self, gx: np.ndarray, gy: np.ndarray, rule: int, seed: int) -> np.ndarray:
        """
        Elevation at arbitrary global coordinates: fractal gradient noise with
        a small rule-specific automaton texture blended in.
        """
        rule = check_rule(rule)
        gx = np.asarray(gx, dtype=np.int64)
        gy = np.asarray(gy, dtype=np.int64)
        scale = self.get_feature_scale(rule)
        elev_seed, _ = self.get_field_seeds(rule, seed)

        fbm = noise.gradient_fbm(
            gx * scale, gy * scale, elev_seed,
            self.settings['noise_octaves'],
            self.settings['noise_persistence'],
            self.settings['noise_lacunarity'],
            self.settings['octave_seed_step'],
        )
        texture = noise.automaton_texture(
            gx, gy, rule, hash_seed(seed), scale,
            self.settings['automaton_texture_bit_weight'],
            self.settings['automaton_texture_frequency'],
            self.settings['automaton_texture_seed_offset'],
        )

        weight = self.settings['automaton_texture_weight']
        return np.clip(fbm * (1.0 - weight) + texture * weight, 0.0, 1.0)

    def sample_moisture(self, gx: np.ndarray, gy: np.ndarray, rule: int, seed: int, moisture_rule: int = None) -> np.ndarray:
        """Moisture at arbitrary global coordinates; broader features than elevation."""
        rule = check_rule(rule)
        gx = np.asarray(gx, dtype=np.int64)
        gy = np.asarray(gy, dtype=np.int64)
        scale = self.get_feature_scale(rule) * self.settings['moisture_scale_factor']
        _, moist_seed = self.get_field_seeds(rule, seed, moisture_rule)

        moisture = noise.gradient_fbm(
            gx * scale, gy * scale, moist_seed,
            self.settings['noise_octaves'],
            self.settings['noise_persistence'],
            self.settings['noise_lacunarity'],
            self.settings['octave_seed_step'],
        )
        return np.clip(moisture, 0.0, 1.0)

    # --- Chunks ---

    def generate_chunk(self, chunk_x: int, chunk_y: int, rule: int, seed: int, chunk_size: int = None, moisture_rule: int = None) -> dict:
        """
        Generates one chunk.

        Returns:
            dict: {chunk_x, chunk_y, edge_length, elevation, moisture,
            biome_ids, generation_time_ms}. The three arrays are flat,
            row-major, of length edge_length ** 2.
        """
        start_time = time.perf_counter()

        chunk_x = _check_coordinate('chunk_x', chunk_x)
        chunk_y = _check_coordinate('chunk_y', chunk_y)
        rule = check_rule(rule)
        if chunk_size is None:
            chunk_size = self.settings['chunk_size']
        chunk_size = check_dimension('chunk_size', chunk_size)
        if moisture_rule is not None:
            moisture_rule = check_rule(moisture_rule)

        gx, gy = self.get_coordinate_grid(chunk_x, chunk_y, chunk_size)
        elevation = self.sample_elevation(gx, gy, rule, seed)
        moisture = self.sample_moisture(gx, gy, rule, seed, moisture_rule)
        biome_ids = classify_biome_map(elevation, moisture)

        elapsed_ms = (time.perf_counter() - start_time) * 1000.0
        self.logger.debug(f"Chunk ({chunk_x}, {chunk_y}) rule {rule} generated in {elapsed_ms:.1f} ms.")

        return {
            'chunk_x': chunk_x,
            'chunk_y': chunk_y,
            'edge_length': chunk_size + 1,
            'elevation': elevation.astype(np.float32).ravel(),
            'moisture': moisture.astype(np.float32).ravel(),
            'biome_ids': biome_ids.ravel(),
            'generation_time_ms': elapsed_ms,
        }

    def generate_from_request(self, request: dict) -> dict:
        """Generates a chunk from a request dict (see REQUIRED_REQUEST_KEYS)."""
        missing = [key for key in REQUIRED_REQUEST_KEYS if key not in request]
        if missing:
            raise KeyError(f"Chunk request is missing keys: {missing}")
        return self.generate_chunk(
            request['chunk_x'],
            request['chunk_y'],
            request['rule'],
            request['seed'],
            chunk_size=request['chunk_size'],
            moisture_rule=request.get('moisture_rule'),
        )
