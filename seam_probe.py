# seam_probe.py

"""
================================================================================
SEAM PROBE
================================================================================
Verifies that neighbouring chunks agree exactly on their shared borders.

For each probed chunk the probe generates its right and bottom neighbours,
deliberately in reverse order, and compares the shared column / row of
elevation, moisture and biome ids. Any mismatch means some part of the
pipeline depends on per-chunk state instead of global coordinates.

Usage:
    python seam_probe.py [--config path/to/config.json] [--chunks 4]
================================================================================
"""
import argparse
import logging
import sys

import numpy as np

from bake_region import configure_logging, load_config, resolve_surface
from universe_generator import config as DEFAULTS
from universe_generator.generator import ChunkGenerator

FIELDS = ('elevation', 'moisture', 'biome_ids')


def _grid(response: dict, field: str) -> np.ndarray:
    edge = response['edge_length']
    return response[field].reshape(edge, edge)


def probe_seam(logger: logging.Logger, generator: ChunkGenerator, cx: int, cy: int, rule: int, seed: int, chunk_size: int) -> bool:
    """Probes the right and bottom seams of chunk (cx, cy)."""
    logger.info(f"--- Probing chunk ({cx}, {cy}) ---")

    # Neighbours first, so generation order cannot hide a dependency.
    below = generator.generate_chunk(cx, cy + 1, rule, seed, chunk_size=chunk_size)
    right = generator.generate_chunk(cx + 1, cy, rule, seed, chunk_size=chunk_size)
    center = generator.generate_chunk(cx, cy, rule, seed, chunk_size=chunk_size)

    chunk_passed = True
    for field in FIELDS:
        right_ok = np.array_equal(_grid(center, field)[:, -1], _grid(right, field)[:, 0])
        below_ok = np.array_equal(_grid(center, field)[-1, :], _grid(below, field)[0, :])
        for seam, ok in (("right", right_ok), ("bottom", below_ok)):
            logger.info(f"  - {field:<10} {seam:<6} seam -> {'PASS' if ok else 'FAIL'}")
            chunk_passed = chunk_passed and ok

    return chunk_passed


def run_full_probe(config_path: str = None, num_chunks: int = 4) -> bool:
    logger = configure_logging("SeamProbe")

    config = load_config(config_path, logger)
    if config is None:
        return False
    gen_params = config.get('universe_generation_parameters', {})
    rule, seed = resolve_surface(gen_params, logger)
    chunk_size = gen_params.get('chunk_size', DEFAULTS.DEFAULT_CHUNK_SIZE)

    generator = ChunkGenerator(config=gen_params, logger=logger)

    # Include negative coordinates: the lattice must be continuous across 0.
    chunks_to_probe = [(i - num_chunks // 2, (i * 7) % num_chunks - num_chunks // 2) for i in range(num_chunks)]

    all_probes_passed = True
    for cx, cy in chunks_to_probe:
        if not probe_seam(logger, generator, cx, cy, rule, seed, chunk_size):
            all_probes_passed = False

    logger.info("--- Full Probe Complete ---")
    if all_probes_passed:
        logger.info("SUCCESS: All probed seams agree exactly.")
    else:
        logger.error("FAILURE: Mismatch detected on one or more seams.")
    return all_probes_passed


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Chunk seam agreement probe.")
    parser.add_argument("--config", type=str, default=None, help="Path to a JSON configuration file.")
    parser.add_argument("--chunks", type=int, default=4, help="Number of chunks to probe.")
    args = parser.parse_args()

    sys.exit(0 if run_full_probe(args.config, args.chunks) else 1)
