# bake_region.py

"""
================================================================================
OFFLINE REGION BAKER SCRIPT
================================================================================
This script is a command-line tool for rendering a rectangular region of a
planet surface to chunk images ("baking"). Chunks are generated in parallel
by a ChunkWorkerPool and arrive in completion order; each response carries
its own chunk coordinates, so the order does not matter.

For every view mode the baker writes one PNG per unique chunk (identical
chunks are stored once, keyed by content hash), a stitched overview image and
a manifest.json mapping chunk coordinates to files.

Usage:
    python bake_region.py --config path/to/your/config.json

Config layout (every key optional):
    {
      "universe_generation_parameters": {
        "seed": 42, "rule": 30, "moisture_rule": null, "chunk_size": 32,
        "planet": {"galaxy": 0, "x": 10, "y": 15, "index": 0}
      },
      "bake_parameters": {
        "origin_chunk_x": 0, "origin_chunk_y": 0,
        "width_chunks": 8, "height_chunks": 8,
        "view_modes": ["biome", "elevation", "moisture"],
        "output_dir": "baked_regions", "processes": null
      }
    }
When "planet" is given, its rule and terrain seed replace "rule" and "seed".
================================================================================
"""
import os
import sys
import json
import logging
import logging.config
import argparse
import time
import hashlib
import collections

import numpy as np
from PIL import Image
from tqdm import tqdm

# Add project root to Python path to allow importing from universe_generator
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from universe_generator import color_maps
from universe_generator import config as DEFAULTS
from universe_generator.universe import UniverseManager
from universe_generator.worker import ChunkWorkerPool, make_chunk_request

LOGGING_CONFIG_PATH = os.path.join(os.path.abspath(os.path.dirname(__file__)), "logging_config.json")


# --- Shared CLI Helpers ---
def configure_logging(name: str) -> logging.Logger:
    """Configures logging from logging_config.json, falling back to basicConfig."""
    try:
        with open(LOGGING_CONFIG_PATH, 'r') as f:
            logging.config.dictConfig(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError, ValueError) as e:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(levelname)s - %(message)s',
            stream=sys.stdout
        )
        logging.getLogger(name).warning(f"Logging config unavailable ({e}); using basic logging.")
    return logging.getLogger(name)


def load_config(config_path: str, logger: logging.Logger):
    """Loads a JSON config file. Returns None (after logging) on failure."""
    if config_path is None:
        logger.info("No configuration file given; using internal defaults.")
        return {}
    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r') as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return None


def resolve_surface(gen_params: dict, logger: logging.Logger) -> tuple:
    """Returns (rule, seed) for the surface to bake."""
    planet_ref = gen_params.get('planet')
    if planet_ref is None:
        return gen_params.get('rule', 30), gen_params.get('seed', DEFAULTS.DEFAULT_UNIVERSE_SEED)

    universe = UniverseManager(gen_params.get('seed', DEFAULTS.DEFAULT_UNIVERSE_SEED), logger=logger)
    universe.enter_system(planet_ref['x'], planet_ref['y'], planet_ref.get('galaxy', DEFAULTS.DEFAULT_GALAXY_ID))
    planet = universe.approach_planet(planet_ref.get('index', 0))
    if planet is None:
        raise ValueError(f"System has no planet at index {planet_ref.get('index', 0)}")
    logger.info(f"Baking planet {planet.name} ({planet.archetype['name']}, rule {planet.rule}, {planet.rule_label}).")
    return planet.rule, planet.terrain_seed


# --- Helper for Uniform Chunk Compression ---
def save_chunk_image(color_array: np.ndarray, directory: str, file_hash: str) -> str:
    """
    Saves a (height, width, 3) chunk image using a tiered, lossless
    compression strategy with Pillow.
    """
    os.makedirs(directory, exist_ok=True)
    file_path = os.path.join(directory, f"{file_hash}.png")

    # Tier 1: Check for perfectly uniform color.
    if (color_array == color_array[0, 0]).all():
        img = Image.new('RGB', (1, 1), tuple(int(c) for c in color_array[0, 0]))
        img.save(file_path, 'PNG')
        return 'uniform'

    img = Image.fromarray(color_array)

    # Tier 2: Low color count -> palettized.
    colors = img.getcolors(256)
    if colors:
        img = img.quantize(colors=256)
        img.save(file_path, 'PNG')
        return 'palettized'

    # Tier 3: Fallback for high-color chunks.
    img.save(file_path, 'PNG')
    return 'full'


def colorize(mode: str, response: dict, luts: dict) -> np.ndarray:
    """Converts one chunk response into a (chunk_size, chunk_size, 3) image."""
    edge = response['edge_length']
    # The last row and column belong to the next chunk; drop them so tiles abut.
    if mode == "biome":
        data = response['biome_ids'].reshape(edge, edge)[:-1, :-1]
        return color_maps.get_terrain_color_array(data, luts['biome'])
    if mode == "moisture":
        data = response['moisture'].reshape(edge, edge)[:-1, :-1]
        return color_maps.get_moisture_color_array(data, luts['moisture'])
    if mode == "elevation":
        data = response['elevation'].reshape(edge, edge)[:-1, :-1]
        return color_maps.get_elevation_color_array(data)
    raise ValueError(f"Unknown view mode: {mode!r}")


# --- Main Baking Function ---
def bake_region(config_path: str):
    """
    Loads a configuration, generates every chunk of the region, and saves
    them as PNG images to a structured output directory.
    """
    # 1. --- Setup Logging ---
    logger = configure_logging("Baker")

    # 2. --- Load Configuration ---
    config = load_config(config_path, logger)
    if config is None:
        return

    gen_params = config.get('universe_generation_parameters', {})
    bake_params = config.get('bake_parameters', {})

    try:
        rule, seed = resolve_surface(gen_params, logger)
    except (KeyError, ValueError) as e:
        logger.critical(f"Invalid planet reference in config: {e}")
        return
    moisture_rule = gen_params.get('moisture_rule')
    chunk_size = gen_params.get('chunk_size', DEFAULTS.DEFAULT_CHUNK_SIZE)

    origin_x = bake_params.get('origin_chunk_x', 0)
    origin_y = bake_params.get('origin_chunk_y', 0)
    width_chunks = bake_params.get('width_chunks', 8)
    height_chunks = bake_params.get('height_chunks', 8)
    view_modes = list(bake_params.get('view_modes', DEFAULTS.DEFAULT_BAKE_VIEW_MODES))
    total_chunks = width_chunks * height_chunks

    # 3. --- Prepare Output Directories ---
    base_output_dir = os.path.join(bake_params.get('output_dir', "baked_regions"), f"seed_{seed}_rule_{rule}")
    chunk_dirs = {mode: os.path.join(base_output_dir, mode, "chunks") for mode in view_modes}

    # 4. --- Pre-compute Color LUTs ---
    logger.info("Pre-computing color lookup tables...")
    luts = {'biome': color_maps.create_biome_color_lut(), 'moisture': color_maps.create_moisture_lut()}

    # 5. --- Main Baking Loop (Parallelized) ---
    logger.info(f"Starting parallel bake of a {width_chunks}x{height_chunks} region ({total_chunks} chunks) at ({origin_x}, {origin_y})...")

    manifest = {mode: np.empty((height_chunks, width_chunks), dtype=object) for mode in view_modes}
    overviews = {mode: np.zeros((height_chunks * chunk_size, width_chunks * chunk_size, 3), dtype=np.uint8) for mode in view_modes}
    saved_hashes = {mode: set() for mode in view_modes}
    compression_stats = {mode: collections.Counter() for mode in view_modes}

    requests = [
        make_chunk_request(origin_x + dx, origin_y + dy, chunk_size, rule, seed, moisture_rule)
        for dy in range(height_chunks) for dx in range(width_chunks)
    ]

    start_time = time.perf_counter()
    with ChunkWorkerPool(gen_params, logger, processes=bake_params.get('processes')) as pool:
        for response in tqdm(pool.generate(requests), total=total_chunks, desc="Baking Chunks"):
            dx = response['chunk_x'] - origin_x
            dy = response['chunk_y'] - origin_y

            for mode in view_modes:
                color_array = colorize(mode, response, luts)
                overviews[mode][dy * chunk_size:(dy + 1) * chunk_size, dx * chunk_size:(dx + 1) * chunk_size] = color_array

                file_hash = hashlib.md5(color_array.tobytes()).hexdigest()
                manifest[mode][dy, dx] = file_hash
                if file_hash not in saved_hashes[mode]:
                    saved_hashes[mode].add(file_hash)
                    compression_stats[mode][save_chunk_image(color_array, chunk_dirs[mode], file_hash)] += 1

    # --- Finalization ---
    for mode in view_modes:
        os.makedirs(os.path.join(base_output_dir, mode), exist_ok=True)
        Image.fromarray(overviews[mode]).save(os.path.join(base_output_dir, mode, "overview.png"), 'PNG')

    final_manifest = {
        'seed': seed,
        'rule': rule,
        'moisture_rule': moisture_rule,
        'chunk_size': chunk_size,
        'origin_chunk': [origin_x, origin_y],
        'region_dimensions_chunks': [width_chunks, height_chunks],
        'chunk_map': {mode: manifest[mode].tolist() for mode in view_modes},
    }
    manifest_path = os.path.join(base_output_dir, "manifest.json")
    with open(manifest_path, 'w') as f:
        json.dump(final_manifest, f, indent=2)

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    logger.info("--- Deduplication & Compression Stats ---")
    for mode in view_modes:
        stats = compression_stats[mode]
        logger.info(
            f"  - {mode.capitalize()}: {total_chunks} total -> {len(saved_hashes[mode])} unique chunks saved "
            f"({stats['uniform']} uniform, {stats['palettized']} palettized, {stats['full']} full)"
        )
    logger.info(f"Baked region and manifest.json saved to: {base_output_dir}")


# --- Command-Line Interface ---
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Offline Region Baker for the Universe Generator.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to the JSON configuration file for the region to be baked."
    )
    args = parser.parse_args()

    bake_region(args.config)
