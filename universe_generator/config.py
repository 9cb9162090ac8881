# universe_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the universe
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC SIMULATION.
Instead, pass a configuration dictionary to the ChunkGenerator or
UniverseManager instance.
================================================================================
"""

# --- Seeds ---
DEFAULT_UNIVERSE_SEED = 42
DEFAULT_GALAXY_ID = 0
# Namespace prefix mixed into every top-level seed chain hash.
SEED_NAMESPACE = "tgo"

# --- Automaton Engine ---
RULE_MIN = 0
RULE_MAX = 255
MIN_AUTOMATON_WIDTH = 3
# The classifier always observes the same window so its labels are stable.
CLASSIFIER_WIDTH = 101
CLASSIFIER_GENERATIONS = 100
CLASSIFIER_WINDOW = 20

# --- Density Field ---
DEFAULT_NUM_RUNS = 8
# Multiplicative hash constants for per-run start positions (Knuth / golden ratio).
DENSITY_SEED_MULTIPLIER = 2654435761
DENSITY_RUN_MULTIPLIER = 340573321

# --- Multi-Octave Smoothing ---
SMOOTHING_SCALES = (1, 2, 4, 8, 16, 32)
SMOOTHING_WEIGHTS = (0.05, 0.10, 0.15, 0.20, 0.25, 0.25)
# Radii at or below this use a full 2-D box kernel, larger ones a separable pass.
BOX_BLUR_MAX_RADIUS = 4
# A normalisation range at or below this is treated as a constant field.
DEGENERATE_RANGE_EPSILON = 1e-12

# --- Micro-Detail (value-noise fBm overlay) ---
MICRO_DETAIL_AMOUNT = 0.08
MICRO_DETAIL_OCTAVES = 4
MICRO_DETAIL_SCALE = 0.15
MICRO_DETAIL_LACUNARITY = 2.13
MICRO_DETAIL_PERSISTENCE = 0.45
MICRO_FINE_FREQUENCY = 3.7
MICRO_FINE_OCTAVES = 3
MICRO_FINE_LACUNARITY = 2.3
MICRO_FINE_PERSISTENCE = 0.4
MICRO_MEDIUM_WEIGHT = 0.7
MICRO_FINE_WEIGHT = 0.3

# --- Terracing ---
DEFAULT_TERRACE_LEVELS = 8
DEFAULT_TERRACE_SHARPNESS = 0.5

# --- Chunked World Generator ---
DEFAULT_CHUNK_SIZE = 32
CHUNK_NOISE_OCTAVES = 5
CHUNK_NOISE_PERSISTENCE = 0.5
CHUNK_NOISE_LACUNARITY = 2.0
# Each octave samples an independent gradient lattice.
CHUNK_OCTAVE_SEED_STEP = 31337
# Feature scale (cycles per cell) chosen by the rule's complexity class.
# Lower = larger, smoother landforms.
FEATURE_SCALE_BY_CLASS = {
    1: 0.006,
    2: 0.008,
    3: 0.010,
    4: 0.012,
}
MOISTURE_SCALE_FACTOR = 0.7
# Offset used to derive a moisture rule when the request does not name one.
MOISTURE_RULE_OFFSET = 73
# How much the rule-specific automaton texture contributes to elevation.
AUTOMATON_TEXTURE_WEIGHT = 0.08
AUTOMATON_TEXTURE_BIT_WEIGHT = 0.4
AUTOMATON_TEXTURE_FREQUENCY = 3.0
AUTOMATON_TEXTURE_SEED_OFFSET = 777

# --- Universe Manager ---
DEFAULT_SYSTEM_CACHE_CAPACITY = 20
# Fraction of galaxy coordinates that hold a star.
STAR_PROBABILITY = 0.3
DEFAULT_NEARBY_RADIUS = 5
MIN_PLANETS = 2
MAX_PLANETS = 8

# --- Orbital Layout ---
ORBIT_INNER_RADIUS = 3.0
ORBIT_SPAN = 25.0
ORBIT_SPEED_CONSTANT = 0.3
GAS_GIANT_MIN_ORBIT = 10.0
GAS_GIANT_MAX_ORBIT = 22.0
GAS_GIANT_CHANCE = 0.3
GAS_GIANT_SIZE_FACTOR = 2.5
RING_CHANCE_GAS_GIANT = 0.4
RING_CHANCE_ROCKY = 0.08
MAX_MOONS_GAS_GIANT = 4
MAX_MOONS_ROCKY = 2

# --- Rendering & Tooling ---
DEFAULT_BAKE_VIEW_MODES = ("biome", "elevation", "moisture")
