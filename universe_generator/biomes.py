# universe_generator/biomes.py

"""
================================================================================
BIOME CLASSIFICATION
================================================================================
Biomes are a pure function of (elevation, moisture), both normalised to
[0, 1]. The decision logic is an ordered threshold table: the first row whose
bounds all hold wins. Scalar and array classification share the same table.

  Moisture ->   DRY          MEDIUM       WET
  ----------------------------------------------
  HIGH  elev    Snow Peak    Snow Peak    Ice
  MED-HI        Mountain     Mountain     Dense Forest
  MEDIUM        Desert       Grassland    Forest / Dense Forest
  MED-LO        Savanna      Savanna      Swamp
  LOW           Beach        Beach        Beach
  WATER         Ocean / Deep Ocean
================================================================================
"""

import numpy as np

from .automaton import check_dimension, check_rule
from .hashing import hash_rule, hash_seed
from .heightmap import generate_heightmap

# --- Biome Definitions ---
# id, display name, RGB colour, traversable, hazard level.
BIOMES = {
    'DEEP_OCEAN':   {'id': 0,  'name': 'Deep Ocean',   'color': (15, 30, 80),    'traversable': False, 'hazard': 0.0},
    'OCEAN':        {'id': 1,  'name': 'Ocean',        'color': (25, 55, 120),   'traversable': False, 'hazard': 0.0},
    'BEACH':        {'id': 2,  'name': 'Beach',        'color': (194, 178, 128), 'traversable': True,  'hazard': 0.0},
    'DESERT':       {'id': 3,  'name': 'Desert',       'color': (210, 180, 100), 'traversable': True,  'hazard': 0.4},
    'SAVANNA':      {'id': 4,  'name': 'Savanna',      'color': (160, 170, 60),  'traversable': True,  'hazard': 0.1},
    'GRASSLAND':    {'id': 5,  'name': 'Grassland',    'color': (80, 160, 50),   'traversable': True,  'hazard': 0.0},
    'FOREST':       {'id': 6,  'name': 'Forest',       'color': (30, 110, 40),   'traversable': True,  'hazard': 0.1},
    'DENSE_FOREST': {'id': 7,  'name': 'Dense Forest', 'color': (15, 75, 25),    'traversable': True,  'hazard': 0.2},
    'SWAMP':        {'id': 8,  'name': 'Swamp',        'color': (50, 80, 40),    'traversable': True,  'hazard': 0.3},
    'MOUNTAIN':     {'id': 9,  'name': 'Mountain',     'color': (130, 120, 110), 'traversable': True,  'hazard': 0.2},
    'SNOW_PEAK':    {'id': 10, 'name': 'Snow Peak',    'color': (230, 235, 240), 'traversable': True,  'hazard': 0.5},
    'ICE':          {'id': 11, 'name': 'Ice',          'color': (200, 220, 240), 'traversable': True,  'hazard': 0.6},
}

BIOME_BY_ID = sorted(BIOMES.values(), key=lambda biome: biome['id'])
BIOME_KEYS_BY_ID = {biome['id']: key for key, biome in BIOMES.items()}

# --- Threshold Table ---
# Evaluated top to bottom. All bounds are strict; None means unbounded.
# (biome key, elevation_above, elevation_below, moisture_above, moisture_below)
BIOME_RULES = (
    ('DEEP_OCEAN',   None, 0.20, None, None),
    ('OCEAN',        None, 0.30, None, None),
    ('BEACH',        None, 0.33, None, None),
    ('ICE',          0.85, None, 0.50, None),
    ('SNOW_PEAK',    0.85, None, None, None),
    ('DENSE_FOREST', 0.70, None, 0.70, None),
    ('MOUNTAIN',     0.70, None, None, None),
    ('DESERT',       0.50, None, None, 0.25),
    ('GRASSLAND',    0.50, None, None, 0.50),
    ('FOREST',       0.50, None, None, 0.75),
    ('DENSE_FOREST', 0.50, None, None, None),
    ('SAVANNA',      None, None, None, 0.60),
    ('SWAMP',        None, None, None, None),
)


def _matches(value, above, below) -> bool:
    return (above is None or value > above) and (below is None or value < below)


def classify_biome(elevation: float, moisture: float) -> int:
    """Returns the biome id for a single (elevation, moisture) sample."""
    for key, e_above, e_below, m_above, m_below in BIOME_RULES:
        if _matches(elevation, e_above, e_below) and _matches(moisture, m_above, m_below):
            return BIOMES[key]['id']
    # The last row is unbounded, so this is unreachable.
    return BIOMES['SWAMP']['id']


def _mask(values: np.ndarray, above, below) -> np.ndarray:
    mask = np.ones(values.shape, dtype=bool)
    if above is not None:
        mask &= values > above
    if below is not None:
        mask &= values < below
    return mask


def classify_biome_map(elevation: np.ndarray, moisture: np.ndarray) -> np.ndarray:
    """Vectorised `classify_biome`; returns a uint8 array of biome ids."""
    elevation = np.asarray(elevation)
    moisture = np.asarray(moisture)
    if elevation.shape != moisture.shape:
        raise ValueError(f"elevation and moisture shapes differ: {elevation.shape} vs {moisture.shape}")

    conditions = [
        _mask(elevation, e_above, e_below) & _mask(moisture, m_above, m_below)
        for _, e_above, e_below, m_above, m_below in BIOME_RULES
    ]
    choices = [BIOMES[key]['id'] for key, *_ in BIOME_RULES]
    return np.select(conditions, choices, default=BIOMES['SWAMP']['id']).astype(np.uint8)


def generate_biome_map(planet_seed: int, width: int, height: int, elevation_rule: int = None, moisture_rule: int = None) -> dict:
    """
    Builds a planet-wide biome map from two independent automaton heightmaps:
    one rule drives elevation, a different rule drives moisture. Both rules
    default to values derived from the planet seed.
    """
    width = check_dimension('width', width)
    height = check_dimension('height', height)
    if elevation_rule is None:
        elevation_rule = hash_rule(planet_seed, 'elevation')
    if moisture_rule is None:
        moisture_rule = hash_rule(planet_seed, 'moisture')
    elevation_rule = check_rule(elevation_rule)
    moisture_rule = check_rule(moisture_rule)

    elevation = generate_heightmap(elevation_rule, width, height, hash_seed(planet_seed, 'elev_seed'))
    moisture = generate_heightmap(moisture_rule, width, height, hash_seed(planet_seed, 'moist_seed'))

    return {
        'biome_ids': classify_biome_map(elevation, moisture),
        'elevation': elevation,
        'moisture': moisture,
        'elevation_rule': elevation_rule,
        'moisture_rule': moisture_rule,
    }


def biome_distribution(biome_ids: np.ndarray) -> list:
    """Per-biome counts and percentages, most common first."""
    ids, counts = np.unique(np.asarray(biome_ids), return_counts=True)
    total = int(counts.sum())
    distribution = [
        {
            'biome': BIOME_KEYS_BY_ID[int(biome_id)],
            'count': int(count),
            'percentage': 100.0 * int(count) / total,
        }
        for biome_id, count in zip(ids, counts)
    ]
    distribution.sort(key=lambda entry: (-entry['count'], BIOMES[entry['biome']]['id']))
    return distribution
