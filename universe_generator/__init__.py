# universe_generator/__init__.py

# This file makes the 'universe_generator' directory a Python package.
# It also defines the public API of the package.

from .automaton import apply_rule, classify_rule, run_automaton
from .biomes import BIOMES, classify_biome, classify_biome_map, generate_biome_map
from .errors import InvalidDimensionError, InvalidRuleError, UniverseGeneratorError
from .generator import ChunkGenerator
from .hashing import SeededRandom, hash_float, hash_range, hash_seed, seeded_random
from .heightmap import generate_heightmap, multi_octave_smooth, terrace
from .names import generate_planet_name, generate_star_name, generate_system_label
from .universe import (
    GhostPlanet,
    StarSystem,
    SystemCache,
    UniverseManager,
    generate_ghost_planet,
    generate_star_system,
)
from .worker import ChunkWorkerPool, handle_message

__all__ = [
    "apply_rule", "classify_rule", "run_automaton",
    "BIOMES", "classify_biome", "classify_biome_map", "generate_biome_map",
    "InvalidDimensionError", "InvalidRuleError", "UniverseGeneratorError",
    "ChunkGenerator",
    "SeededRandom", "hash_float", "hash_range", "hash_seed", "seeded_random",
    "generate_heightmap", "multi_octave_smooth", "terrace",
    "generate_planet_name", "generate_star_name", "generate_system_label",
    "GhostPlanet", "StarSystem", "SystemCache", "UniverseManager",
    "generate_ghost_planet", "generate_star_system",
    "ChunkWorkerPool", "handle_message",
]
