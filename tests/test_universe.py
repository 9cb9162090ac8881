"""
Tests for star systems, ghost planets, the system cache and the universe
manager.
"""

import dataclasses
import math

import pytest

from universe_generator.automaton import CLASS_CHAOTIC, CLASS_COMPLEX, CLASS_PERIODIC, CLASS_UNIFORM
from universe_generator.errors import InvalidDimensionError
from universe_generator.hashing import hash_float, hash_seed
from universe_generator.universe import (
    ATMOSPHERE_COLORS,
    PLANET_ARCHETYPES,
    STAR_TYPES,
    GhostPlanet,
    StarSystem,
    SystemCache,
    UniverseManager,
    determine_archetype,
    generate_ghost_planet,
    generate_star_system,
    get_galaxy_seed,
    get_system_seed,
    star_exists,
)


class TestGhostPlanet:
    """Test ghost planet derivation."""

    def test_repeatable(self):
        """The same system seed and index give the same planet."""
        a = generate_ghost_planet(12345, 0, 5)
        b = generate_ghost_planet(12345, 0, 5)
        assert a.name == b.name
        assert a.rule == b.rule
        assert a.size == b.size
        assert a.orbit_radius == b.orbit_radius
        assert a == b

    def test_seed_chain(self):
        """Planet, rule and terrain seeds follow the documented cascade."""
        planet = generate_ghost_planet(12345, 2, 5)
        assert planet.seed == hash_seed(12345, 'planet', 2)
        assert planet.rule == hash_seed(planet.seed, 'rule') & 0xFF
        assert planet.terrain_seed == hash_seed(planet.seed, 'terrain')

    def test_orbits_increase_with_index(self):
        """Inner planets orbit closer to the star."""
        radii = [generate_ghost_planet(999, i, 6).orbit_radius for i in range(6)]
        assert radii == sorted(radii)
        assert radii[0] == pytest.approx(3 + 1 / 7 * 25)

    def test_orbit_speed_is_keplerian(self):
        """Speed falls with the square root of the radius."""
        planet = generate_ghost_planet(4, 1, 3)
        assert planet.orbit_speed == pytest.approx(0.3 / math.sqrt(planet.orbit_radius))

    def test_property_ranges(self):
        """Sizes, moons, tilts and colours stay in their documented ranges."""
        for system_seed in range(30):
            for index in range(4):
                planet = generate_ghost_planet(system_seed, index, 4)
                max_size = 1.6 * (2.5 if planet.is_gas_giant else 1.0)
                assert 0.4 <= planet.size < max_size
                assert 0 <= planet.moon_count <= (4 if planet.is_gas_giant else 2)
                assert 0.0 <= planet.orbit_phase < 2 * math.pi
                assert abs(planet.orbit_tilt) <= 0.075
                assert abs(planet.axial_tilt) <= 0.25
                assert all(0.0 <= c <= 1.0 for c in planet.atmos_color)
                assert planet.rule_class in (1, 2, 3, 4)

    def test_gas_giants_only_in_middle_orbits(self):
        """Gas giants appear only between radius 10 and 22."""
        for system_seed in range(50):
            for index in range(8):
                planet = generate_ghost_planet(system_seed, index, 8)
                if planet.is_gas_giant:
                    assert 10 < planet.orbit_radius < 22

    def test_immutable(self):
        """Ghost planets cannot be modified after derivation."""
        planet = generate_ghost_planet(1, 0, 2)
        with pytest.raises(dataclasses.FrozenInstanceError):
            planet.size = 10.0

    def test_as_dict(self):
        """The descriptor dictionary carries the downstream fields."""
        descriptor = generate_ghost_planet(12345, 0, 5).as_dict()
        for key in ('name', 'seed', 'rule', 'rule_class', 'terrain_seed', 'orbit_radius', 'orbit_speed',
                    'orbit_phase', 'orbit_tilt', 'size', 'archetype', 'has_rings', 'moon_count', 'atmos_color'):
            assert key in descriptor
        assert descriptor['archetype'] in {a['name'] for a in PLANET_ARCHETYPES.values()}

    @pytest.mark.parametrize("index, count", [(-1, 3), (3, 3), (0, 0), (1.5, 3)])
    def test_invalid_index_or_count(self, index, count):
        """Indices outside [0, count) and empty systems are rejected."""
        with pytest.raises(InvalidDimensionError):
            generate_ghost_planet(1, index, count)


class TestArchetypes:
    """Test the archetype zone table."""

    @pytest.mark.parametrize("rule_class, orbit, roll, expected", [
        (CLASS_UNIFORM, 0.1, 0.2, 'VOLCANIC'),
        (CLASS_UNIFORM, 0.1, 0.5, 'BARREN'),
        (CLASS_UNIFORM, 0.1, 0.9, 'DESERT'),
        (CLASS_CHAOTIC, 0.3, 0.1, 'LUSH'),
        (CLASS_CHAOTIC, 0.3, 0.7, 'OCEANIC'),
        (CLASS_CHAOTIC, 0.3, 0.9, 'EXOTIC'),
        (CLASS_COMPLEX, 0.3, 0.1, 'EXOTIC'),
        (CLASS_COMPLEX, 0.3, 0.8, 'LUSH'),
        (CLASS_PERIODIC, 0.3, 0.1, 'DESERT'),
        (CLASS_PERIODIC, 0.3, 0.9, 'BARREN'),
        (CLASS_UNIFORM, 0.6, 0.4, 'OCEANIC'),
        (CLASS_UNIFORM, 0.6, 0.9, 'TEMPERATE'),
        (CLASS_UNIFORM, 0.9, 0.1, 'FROZEN'),
        (CLASS_UNIFORM, 0.9, 0.95, 'EXOTIC'),
    ])
    def test_zone_table(self, rule_class, orbit, roll, expected):
        """Orbit zone, rule class and roll select the archetype."""
        assert determine_archetype(rule_class, orbit, roll) is PLANET_ARCHETYPES[expected]

    def test_zone_bounds_are_exclusive(self):
        """Orbit 0.2 belongs to the habitable zone."""
        assert determine_archetype(CLASS_CHAOTIC, 0.2, 0.1) is PLANET_ARCHETYPES['LUSH']

    def test_every_archetype_has_colour(self):
        """The atmosphere table covers every archetype id."""
        assert set(ATMOSPHERE_COLORS) == {a['id'] for a in PLANET_ARCHETYPES.values()}


class TestStarSystem:
    """Test star system derivation."""

    def test_repeatable(self):
        """The same coordinates give an equal system."""
        assert generate_star_system(0, 10, 15).as_dict() == generate_star_system(0, 10, 15).as_dict()

    def test_seed_and_star(self):
        """The system seed comes from the galaxy seed and the coordinates."""
        system = generate_star_system(0, 3, -4)
        assert system.seed == hash_seed(get_galaxy_seed(42), 'galaxy', 0, 'system', 3, -4)
        assert system.seed == get_system_seed(0, 3, -4)
        assert system.star_type in STAR_TYPES
        assert system.coordinates == {'galaxy': 0, 'x': 3, 'y': -4}

    def test_planet_count_bounds(self):
        """Every system has between 2 and 8 planets, in orbital order."""
        for x in range(40):
            system = generate_star_system(1, x, 2 * x)
            assert 2 <= system.planet_count <= 8
            assert [p.index for p in system.planets] == list(range(system.planet_count))

    def test_catalog_format(self):
        """The catalogue id encodes the system seed."""
        system = generate_star_system(0, 1, 1)
        digits = f"{system.seed:08X}"
        assert system.catalog == f"TGO-{digits[:4]}-{digits[4:]}"


class TestSystemCache:
    """Test the bounded FIFO cache."""

    def test_fifo_eviction(self):
        """The oldest entry leaves first when the cache is full."""
        cache = SystemCache(capacity=2)
        cache.put('a', 1)
        cache.put('b', 2)
        cache.put('c', 3)
        assert 'a' not in cache
        assert cache.keys() == ['b', 'c']
        assert len(cache) == 2

    def test_overwrite_keeps_position(self):
        """Re-putting an existing key does not evict anything."""
        cache = SystemCache(capacity=2)
        cache.put('a', 1)
        cache.put('b', 2)
        cache.put('a', 10)
        assert cache.get('a') == 10
        assert len(cache) == 2

    def test_evict_and_clear(self):
        """Evicting a missing key is a no-op; clear empties the cache."""
        cache = SystemCache(capacity=3)
        cache.put('a', 1)
        cache.evict('missing')
        assert len(cache) == 1
        cache.evict('a')
        assert cache.get('a') is None
        cache.put('b', 2)
        cache.clear()
        assert len(cache) == 0

    def test_invalid_capacity(self):
        """A cache needs room for at least one entry."""
        with pytest.raises(InvalidDimensionError):
            SystemCache(capacity=0)

    def test_key_format(self):
        """Keys are universe:galaxy:x:y."""
        assert SystemCache.make_key(42, 0, -3, 7) == "42:0:-3:7"


class TestUniverseManager:
    """Test navigation, caching and nearby queries."""

    def setup_method(self):
        """Create a fresh universe for every test."""
        self.universe = UniverseManager(universe_seed=42)

    def test_galaxy_seed(self):
        """The galaxy seed derives from the universe seed."""
        assert self.universe.galaxy_seed == hash_seed('tgo', 'universe', 42)

    def test_get_system_is_cached(self):
        """A second request returns the cached instance."""
        first = self.universe.get_system(10, 15)
        assert self.universe.get_system(10, 15) is first
        assert "42:0:10:15" in self.universe.cache

    def test_cache_is_bounded(self):
        """The cache never exceeds its capacity."""
        universe = UniverseManager(cache_capacity=3)
        for x in range(10):
            universe.get_system(x, 0)
        assert len(universe.cache) == 3

    def test_results_independent_of_cache(self):
        """A cold cache and a warm cache give equal systems."""
        small = UniverseManager(cache_capacity=1)
        for x in range(5):
            small.get_system(x, x)
        assert small.get_system(0, 0).as_dict() == self.universe.get_system(0, 0).as_dict()

    def test_universe_seed_changes_systems(self):
        """Different universe seeds give different systems at the same coordinates."""
        a = UniverseManager(universe_seed=1).get_system(10, 15)
        b = UniverseManager(universe_seed=999).get_system(10, 15)
        assert a.seed != b.seed
        assert a.seed == get_system_seed(0, 10, 15, get_galaxy_seed(1))

    def test_universe_seed_changes_star_map(self):
        """Star placement depends on the universe seed."""
        a = UniverseManager(universe_seed=1)
        b = UniverseManager(universe_seed=999)
        coords = [(x, y) for x in range(-10, 11) for y in range(-10, 11)]
        assert [a.has_star(x, y) for x, y in coords] != [b.has_star(x, y) for x, y in coords]
        assert all(a.has_star(x, y) == star_exists(0, x, y, a.galaxy_seed) for x, y in coords)

    def test_shared_cache_keeps_universes_apart(self):
        """Managers with different seeds sharing a cache still get their own systems."""
        cache = SystemCache(capacity=5)
        a = UniverseManager(universe_seed=1, cache=cache)
        b = UniverseManager(universe_seed=999, cache=cache)
        assert a.get_system(10, 15) is not b.get_system(10, 15)
        assert len(cache) == 2

    def test_injected_cache(self):
        """Managers can share an explicitly passed cache."""
        cache = SystemCache(capacity=5)
        a = UniverseManager(cache=cache)
        b = UniverseManager(cache=cache)
        assert a.get_system(1, 2) is b.get_system(1, 2)

    def test_enter_and_approach(self):
        """Entering a system resets the planet; approaching selects one."""
        system = self.universe.enter_system(10, 15)
        assert isinstance(system, StarSystem)
        assert self.universe.current_planet is None
        planet = self.universe.approach_planet(0)
        assert isinstance(planet, GhostPlanet)
        assert planet is system.planets[0]

    def test_approach_invalid(self):
        """No system or a bad index yields None."""
        assert self.universe.approach_planet(0) is None
        system = self.universe.enter_system(1, 1)
        assert self.universe.approach_planet(-1) is None
        assert self.universe.approach_planet(system.planet_count) is None

    def test_get_state(self):
        """State records the seed, galaxy, system and planet index."""
        assert self.universe.get_state() == {
            'universe_seed': 42, 'current_galaxy': 0, 'current_system': None, 'current_planet': None,
        }
        self.universe.enter_system(4, 5, galaxy_id=2)
        self.universe.approach_planet(1)
        assert self.universe.get_state() == {
            'universe_seed': 42, 'current_galaxy': 2,
            'current_system': {'galaxy': 2, 'x': 4, 'y': 5}, 'current_planet': 1,
        }

    def test_nearby_systems(self):
        """Nearby systems are within the radius, have stars and are sorted."""
        nearby = self.universe.get_nearby_systems(0, 0, radius=5)
        assert nearby
        distances = [entry['distance'] for entry in nearby]
        assert distances == sorted(distances)
        for entry in nearby:
            assert entry['distance'] <= 5
            assert hash_float(self.universe.galaxy_seed, 'starExists', 0, entry['x'], entry['y']) < 0.3
            assert entry['system'].coordinates == {'galaxy': 0, 'x': entry['x'], 'y': entry['y']}

    def test_nearby_density(self):
        """Roughly 30% of coordinates hold a star."""
        universe = UniverseManager(cache_capacity=2000)
        nearby = universe.get_nearby_systems(0, 0, radius=15)
        in_circle = sum(1 for dx in range(-15, 16) for dy in range(-15, 16) if dx * dx + dy * dy <= 225)
        assert 0.2 < len(nearby) / in_circle < 0.4

    def test_nearby_ties_sorted_by_coordinate(self):
        """Equal distances are ordered by x, then y."""
        nearby = self.universe.get_nearby_systems(3, -2, radius=4)
        keys = [(entry['distance'], entry['x'], entry['y']) for entry in nearby]
        assert keys == sorted(keys)

    def test_nearby_radius_zero(self):
        """Radius 0 inspects only the centre."""
        nearby = self.universe.get_nearby_systems(0, 0, radius=0)
        assert len(nearby) == (1 if self.universe.has_star(0, 0) else 0)
