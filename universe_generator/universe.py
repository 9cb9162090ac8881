# universe_generator/universe.py

"""
================================================================================
SEED CHAIN & UNIVERSE MANAGER
================================================================================
One universe seed cascades into galaxies, star systems and planets. Nothing is
stored: a system at galaxy coordinates (x, y) is recomputed from its seed
whenever it is needed, and the small cache below only saves the work.

  universe seed -> galaxy seed
  (galaxy seed, galaxy id, x, y) -> system seed -> star type, planet count
  (system seed, orbital index) -> planet seed -> rule, terrain seed

Planets are produced as "ghost" descriptors: seed, orbit, archetype and a few
visual hints, but no geometry. A consumer builds a surface only when it needs
one (see ChunkGenerator).

Data Contract:
---------------
- Inputs: integer seeds and coordinates.
- Outputs: StarSystem and GhostPlanet descriptors (immutable).
- Side Effects: UniverseManager mutates only its own cache and location.
- Invariants: Every descriptor is a pure function of its inputs; the cache
  never changes a result, only how fast it is returned.
================================================================================
"""

import logging
import math
from dataclasses import dataclass

from . import config as DEFAULTS
from .automaton import CLASS_CHAOTIC, CLASS_COMPLEX, check_dimension, classify_rule
from .errors import InvalidDimensionError
from .hashing import hash_float, hash_range, hash_rule, hash_seed, seeded_random
from .names import generate_planet_name, generate_system_label

# --- Star Types ---
STAR_TYPES = (
    {'id': 0, 'name': 'Red Dwarf',    'color': (255, 120, 80),  'temperature': 3000,  'size': 0.5, 'luminosity': 0.04},
    {'id': 1, 'name': 'Orange Dwarf', 'color': (255, 180, 100), 'temperature': 4500,  'size': 0.7, 'luminosity': 0.2},
    {'id': 2, 'name': 'Yellow Star',  'color': (255, 240, 200), 'temperature': 5800,  'size': 1.0, 'luminosity': 1.0},
    {'id': 3, 'name': 'White Star',   'color': (220, 230, 255), 'temperature': 8000,  'size': 1.5, 'luminosity': 5.0},
    {'id': 4, 'name': 'Blue Giant',   'color': (150, 180, 255), 'temperature': 15000, 'size': 3.0, 'luminosity': 25.0},
    {'id': 5, 'name': 'Red Giant',    'color': (255, 100, 60),  'temperature': 3500,  'size': 5.0, 'luminosity': 40.0},
)

# --- Planet Archetypes ---
PLANET_ARCHETYPES = {
    'BARREN':    {'id': 0, 'name': 'Barren',    'has_atmosphere': False, 'has_ocean': False, 'hazard_base': 0.6},
    'DESERT':    {'id': 1, 'name': 'Desert',    'has_atmosphere': True,  'has_ocean': False, 'hazard_base': 0.4},
    'OCEANIC':   {'id': 2, 'name': 'Oceanic',   'has_atmosphere': True,  'has_ocean': True,  'hazard_base': 0.1},
    'TEMPERATE': {'id': 3, 'name': 'Temperate', 'has_atmosphere': True,  'has_ocean': True,  'hazard_base': 0.0},
    'FROZEN':    {'id': 4, 'name': 'Frozen',    'has_atmosphere': True,  'has_ocean': False, 'hazard_base': 0.5},
    'VOLCANIC':  {'id': 5, 'name': 'Volcanic',  'has_atmosphere': True,  'has_ocean': False, 'hazard_base': 0.8},
    'EXOTIC':    {'id': 6, 'name': 'Exotic',    'has_atmosphere': True,  'has_ocean': True,  'hazard_base': 0.3},
    'LUSH':      {'id': 7, 'name': 'Lush',      'has_atmosphere': True,  'has_ocean': True,  'hazard_base': 0.0},
}

# --- Archetype Zones ---
# (normalised orbit upper bound, {rule class or None: weighted picks}).
# A pick list is ((roll upper bound, archetype), ...); the last bound is None.
# None as a rule class is the fallback for classes without their own list.
ARCHETYPE_ZONES = (
    (0.2, {  # Inner: hot and bare
        None: ((0.4, 'VOLCANIC'), (0.7, 'BARREN'), (None, 'DESERT')),
    }),
    (0.5, {  # Habitable
        CLASS_CHAOTIC: ((0.3, 'LUSH'), (0.6, 'TEMPERATE'), (0.8, 'OCEANIC'), (None, 'EXOTIC')),
        CLASS_COMPLEX: ((0.4, 'EXOTIC'), (0.7, 'TEMPERATE'), (None, 'LUSH')),
        None: ((0.3, 'DESERT'), (0.6, 'TEMPERATE'), (None, 'BARREN')),
    }),
    (0.8, {  # Outer
        None: ((0.3, 'FROZEN'), (0.5, 'OCEANIC'), (0.7, 'BARREN'), (None, 'TEMPERATE')),
    }),
    (None, {  # Far
        None: ((0.5, 'FROZEN'), (0.8, 'BARREN'), (None, 'EXOTIC')),
    }),
)

# --- Atmosphere Colours ---
# Per archetype id: ((base, jitter), ...) for r, g, b. Channels with jitter
# draw one random value each, in channel order.
ATMOSPHERE_COLORS = {
    0: ((0.2, 0.0), (0.2, 0.0), (0.25, 0.0)),
    1: ((0.8, 0.1), (0.5, 0.2), (0.2, 0.0)),
    2: ((0.2, 0.0), (0.5, 0.2), (0.9, 0.0)),
    3: ((0.3, 0.0), (0.6, 0.2), (0.9, 0.0)),
    4: ((0.5, 0.0), (0.7, 0.0), (0.9, 0.1)),
    5: ((0.9, 0.0), (0.3, 0.2), (0.1, 0.0)),
    6: ((0.4, 0.4), (0.2, 0.3), (0.8, 0.0)),
    7: ((0.3, 0.0), (0.7, 0.2), (0.5, 0.3)),
}

ORBIT_TILT_RANGE = 0.15
AXIAL_TILT_RANGE = 0.5


def determine_archetype(rule_class: int, normalized_orbit: float, roll: float) -> dict:
    """Picks an archetype from the orbit zone and the rule's complexity class."""
    for orbit_below, picks_by_class in ARCHETYPE_ZONES:
        if orbit_below is None or normalized_orbit < orbit_below:
            picks = picks_by_class.get(rule_class, picks_by_class[None])
            for roll_below, key in picks:
                if roll_below is None or roll < roll_below:
                    return PLANET_ARCHETYPES[key]
    # The last zone and the last pick are unbounded.
    raise AssertionError("ARCHETYPE_ZONES must end with an unbounded zone")


def generate_atmosphere_color(archetype: dict, rng) -> tuple:
    return tuple(
        base + rng() * jitter if jitter else base
        for base, jitter in ATMOSPHERE_COLORS[archetype['id']]
    )


@dataclass(frozen=True)
class GhostPlanet:
    """A planet as data only: enough to place, name and later build it."""
    index: int
    name: str
    seed: int
    rule: int
    terrain_seed: int
    rule_class: int
    rule_label: str
    archetype: dict
    is_gas_giant: bool
    orbit_radius: float
    orbit_speed: float
    orbit_phase: float
    orbit_tilt: float
    axial_tilt: float
    size: float
    has_rings: bool
    moon_count: int
    atmos_color: tuple

    def as_dict(self) -> dict:
        return {
            'index': self.index,
            'name': self.name,
            'seed': self.seed,
            'rule': self.rule,
            'rule_class': self.rule_class,
            'rule_label': self.rule_label,
            'terrain_seed': self.terrain_seed,
            'orbit_radius': self.orbit_radius,
            'orbit_speed': self.orbit_speed,
            'orbit_phase': self.orbit_phase,
            'orbit_tilt': self.orbit_tilt,
            'axial_tilt': self.axial_tilt,
            'size': self.size,
            'archetype': self.archetype['name'],
            'is_gas_giant': self.is_gas_giant,
            'has_rings': self.has_rings,
            'moon_count': self.moon_count,
            'atmos_color': list(self.atmos_color),
        }


@dataclass(frozen=True)
class StarSystem:
    seed: int
    galaxy_id: int
    x: int
    y: int
    star_name: str
    star_type: dict
    catalog: str
    planets: tuple

    @property
    def planet_count(self) -> int:
        return len(self.planets)

    @property
    def coordinates(self) -> dict:
        return {'galaxy': self.galaxy_id, 'x': self.x, 'y': self.y}

    def as_dict(self) -> dict:
        return {
            'seed': self.seed,
            'coordinates': self.coordinates,
            'star': {'name': self.star_name, 'type': self.star_type, 'catalog': self.catalog},
            'planets': [planet.as_dict() for planet in self.planets],
            'planet_count': self.planet_count,
        }


def generate_ghost_planet(system_seed: int, index: int, count: int) -> GhostPlanet:
    """
    Derives the planet at orbital position `index` (0 = innermost) of a
    system with `count` planets.

    The property stream is consumed in a fixed order: size, gas giant roll
    (only for mid orbits), archetype roll, atmosphere jitter, orbit phase,
    orbit tilt, axial tilt, rings, moons. Reordering changes every planet.
    """
    count = check_dimension('count', count)
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < count:
        raise InvalidDimensionError('index', index, 0)

    planet_seed = hash_seed(system_seed, 'planet', index)
    rule = hash_rule(planet_seed, 'rule')
    terrain_seed = hash_seed(planet_seed, 'terrain')
    rng = seeded_random(planet_seed, 'properties')

    normalized_orbit = (index + 1) / (count + 1)
    orbit_radius = DEFAULTS.ORBIT_INNER_RADIUS + normalized_orbit * DEFAULTS.ORBIT_SPAN

    size = 0.4 + rng() * 1.2
    is_gas_giant = (
        DEFAULTS.GAS_GIANT_MIN_ORBIT < orbit_radius < DEFAULTS.GAS_GIANT_MAX_ORBIT
        and rng() < DEFAULTS.GAS_GIANT_CHANCE
    )
    if is_gas_giant:
        size *= DEFAULTS.GAS_GIANT_SIZE_FACTOR

    classification = classify_rule(rule)
    archetype = determine_archetype(classification['class'], normalized_orbit, rng())
    atmos_color = generate_atmosphere_color(archetype, rng)

    orbit_speed = DEFAULTS.ORBIT_SPEED_CONSTANT / math.sqrt(orbit_radius)
    orbit_phase = rng() * math.pi * 2
    orbit_tilt = (rng() - 0.5) * ORBIT_TILT_RANGE
    axial_tilt = (rng() - 0.5) * AXIAL_TILT_RANGE

    ring_chance = DEFAULTS.RING_CHANCE_GAS_GIANT if is_gas_giant else DEFAULTS.RING_CHANCE_ROCKY
    has_rings = rng() < ring_chance
    max_moons = DEFAULTS.MAX_MOONS_GAS_GIANT if is_gas_giant else DEFAULTS.MAX_MOONS_ROCKY
    moon_count = int(rng() * (max_moons + 1))

    return GhostPlanet(
        index=index,
        name=generate_planet_name(planet_seed),
        seed=planet_seed,
        rule=rule,
        terrain_seed=terrain_seed,
        rule_class=classification['class'],
        rule_label=classification['label'],
        archetype=archetype,
        is_gas_giant=is_gas_giant,
        orbit_radius=orbit_radius,
        orbit_speed=orbit_speed,
        orbit_phase=orbit_phase,
        orbit_tilt=orbit_tilt,
        axial_tilt=axial_tilt,
        size=size,
        has_rings=has_rings,
        moon_count=moon_count,
        atmos_color=atmos_color,
    )


def get_galaxy_seed(universe_seed: int) -> int:
    return hash_seed(DEFAULTS.SEED_NAMESPACE, 'universe', universe_seed)


DEFAULT_GALAXY_SEED = get_galaxy_seed(DEFAULTS.DEFAULT_UNIVERSE_SEED)


def get_system_seed(galaxy_id: int, x: int, y: int, galaxy_seed: int = DEFAULT_GALAXY_SEED) -> int:
    return hash_seed(galaxy_seed, 'galaxy', galaxy_id, 'system', x, y)


def star_exists(galaxy_id: int, x: int, y: int, galaxy_seed: int = DEFAULT_GALAXY_SEED) -> bool:
    """True for roughly STAR_PROBABILITY of all galaxy coordinates."""
    return hash_float(galaxy_seed, 'starExists', galaxy_id, x, y) < DEFAULTS.STAR_PROBABILITY


def generate_star_system(galaxy_id: int, x: int, y: int, galaxy_seed: int = DEFAULT_GALAXY_SEED) -> StarSystem:
    """
    Derives the star and its ordered ghost planets at galaxy coordinates (x, y).
    `galaxy_seed` selects the universe; it defaults to that of the default
    universe seed.
    """
    system_seed = get_system_seed(galaxy_id, x, y, galaxy_seed)
    rng = seeded_random(system_seed, 'system_props')

    star_type = STAR_TYPES[hash_range(0, len(STAR_TYPES) - 1, system_seed, 'star')]
    label = generate_system_label(system_seed)

    # Two draws bias the count towards 4-5. Round half up.
    raw_count = math.floor(3 + rng() * 3 + rng() * 2 + 0.5)
    planet_count = min(DEFAULTS.MAX_PLANETS, max(DEFAULTS.MIN_PLANETS, raw_count))

    planets = tuple(generate_ghost_planet(system_seed, i, planet_count) for i in range(planet_count))

    return StarSystem(
        seed=system_seed,
        galaxy_id=galaxy_id,
        x=x,
        y=y,
        star_name=label['name'],
        star_type=star_type,
        catalog=label['catalog'],
        planets=planets,
    )


class SystemCache:
    """
    A bounded map from coordinate key to StarSystem. When full, the oldest
    insertion is evicted first. Every value is a pure function of its key, so
    a miss only costs time.
    """
    def __init__(self, capacity: int = DEFAULTS.DEFAULT_SYSTEM_CACHE_CAPACITY):
        self.capacity = check_dimension('capacity', capacity)
        self._entries = {}

    @staticmethod
    def make_key(universe_seed: int, galaxy_id: int, x: int, y: int) -> str:
        return f"{universe_seed}:{galaxy_id}:{x}:{y}"

    def get(self, key: str):
        return self._entries.get(key)

    def put(self, key: str, system: StarSystem):
        if key not in self._entries and len(self._entries) >= self.capacity:
            # dicts preserve insertion order, so the first key is the oldest.
            del self._entries[next(iter(self._entries))]
        self._entries[key] = system

    def evict(self, key: str):
        self._entries.pop(key, None)

    def clear(self):
        self._entries.clear()

    def keys(self) -> list:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key) -> bool:
        return key in self._entries


class UniverseManager:
    """
    Orchestrates generation and tracks where the viewer currently is.

    Usage:
        universe = UniverseManager(42)
        system = universe.enter_system(10, 15)
        planet = universe.approach_planet(0)   # a GhostPlanet
    """
    def __init__(self, universe_seed: int = DEFAULTS.DEFAULT_UNIVERSE_SEED, cache: SystemCache = None,
                 cache_capacity: int = DEFAULTS.DEFAULT_SYSTEM_CACHE_CAPACITY, logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.universe_seed = universe_seed
        self.galaxy_seed = get_galaxy_seed(universe_seed)
        self.cache = cache if cache is not None else SystemCache(cache_capacity)

        # --- Current location ---
        self.current_galaxy = DEFAULTS.DEFAULT_GALAXY_ID
        self.current_system = None
        self.current_planet = None

        self.logger.debug(f"UniverseManager initialized with seed {universe_seed} (cache capacity {self.cache.capacity}).")

    def get_system(self, x: int, y: int, galaxy_id: int = DEFAULTS.DEFAULT_GALAXY_ID) -> StarSystem:
        """Returns the system at (x, y), generating and caching it on a miss."""
        key = SystemCache.make_key(self.universe_seed, galaxy_id, x, y)
        system = self.cache.get(key)
        if system is None:
            system = generate_star_system(galaxy_id, x, y, self.galaxy_seed)
            self.cache.put(key, system)
            self.logger.debug(f"Generated system {key}: {system.star_name} with {system.planet_count} planets.")
        return system

    def enter_system(self, x: int, y: int, galaxy_id: int = DEFAULTS.DEFAULT_GALAXY_ID) -> StarSystem:
        self.current_galaxy = galaxy_id
        self.current_system = self.get_system(x, y, galaxy_id)
        self.current_planet = None
        self.logger.info(f"Entered system {self.current_system.star_name} ({self.current_system.catalog}).")
        return self.current_system

    def approach_planet(self, planet_index: int):
        """Selects a planet of the current system. None when there is no such planet."""
        if self.current_system is None:
            return None
        if not 0 <= planet_index < self.current_system.planet_count:
            return None
        self.current_planet = self.current_system.planets[planet_index]
        return self.current_planet

    def has_star(self, x: int, y: int, galaxy_id: int = DEFAULTS.DEFAULT_GALAXY_ID) -> bool:
        return star_exists(galaxy_id, x, y, self.galaxy_seed)

    def get_nearby_systems(self, center_x: int, center_y: int, radius: int = DEFAULTS.DEFAULT_NEARBY_RADIUS,
                           galaxy_id: int = DEFAULTS.DEFAULT_GALAXY_ID) -> list:
        """
        Star systems within `radius` of a galaxy coordinate, nearest first
        (ties broken by x, then y). Each entry is {x, y, distance, system}.
        """
        radius = check_dimension('radius', radius, 0)
        nearby = []
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                x = center_x + dx
                y = center_y + dy
                if not self.has_star(x, y, galaxy_id):
                    continue
                distance = math.sqrt(dx * dx + dy * dy)
                if distance > radius:
                    continue
                nearby.append({'x': x, 'y': y, 'distance': distance, 'system': self.get_system(x, y, galaxy_id)})

        nearby.sort(key=lambda entry: (entry['distance'], entry['x'], entry['y']))
        return nearby

    def get_state(self) -> dict:
        """A plain-data snapshot of the current location, for saving."""
        return {
            'universe_seed': self.universe_seed,
            'current_galaxy': self.current_galaxy,
            'current_system': self.current_system.coordinates if self.current_system is not None else None,
            'current_planet': self.current_planet.index if self.current_planet is not None else None,
        }
