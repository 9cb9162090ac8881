# universe_generator/names.py

"""
================================================================================
PROCEDURAL NAMES
================================================================================
Deterministic names for stars, planets, species and flora. Each entity type
draws from its own syllable pools so the names have distinct phonetic
character. Same seed, same name, always.
================================================================================
"""

from .hashing import UINT32_MASK, seeded_random

# --- Syllable Pools ---
STAR_PREFIXES = (
    'Al', 'Bel', 'Cas', 'Den', 'El', 'Far', 'Gal', 'Hel',
    'Ix', 'Jor', 'Kel', 'Lyr', 'Mir', 'Nor', 'Or', 'Pol',
    'Qua', 'Rig', 'Sir', 'Tar', 'Ul', 'Veg', 'Wol', 'Xen',
    'Yor', 'Zel', 'Ath', 'Bor', 'Cep', 'Dra',
)

STAR_SUFFIXES = (
    'us', 'a', 'ion', 'is', 'ar', 'en', 'ix', 'or',
    'um', 'ei', 'os', 'an', 'es', 'ia', 'on', 'ur',
)

STAR_DESIGNATIONS = (
    'Prime', 'Major', 'Minor', 'Alpha', 'Beta', 'Gamma',
    'I', 'II', 'III', 'IV', 'V', 'VI', 'VII', 'VIII',
)

PLANET_PREFIXES = (
    'Keth', 'Zil', 'Mor', 'Pha', 'Ven', 'Tyr', 'Ash', 'Bol',
    'Cra', 'Dun', 'Esk', 'Fol', 'Grim', 'Hex', 'Ith', 'Jax',
    'Kro', 'Lum', 'Mex', 'Nyx', 'Oph', 'Pyr', 'Rho', 'Syl',
    'Tho', 'Uma', 'Vox', 'Wyr', 'Xal', 'Yth', 'Zor', 'Aku',
)

# A quarter of the entries are empty: many planets have no middle syllable.
PLANET_MIDDLES = (
    '', '', '', '',
    'vo', 'ra', 'li', 'ta', 'no', 'ke', 'si', 'ma',
    'phi', 'ro', 'ga', 'ne',
)

PLANET_SUFFIXES = (
    'ran', 'tos', 'phis', 'nar', 'vex', 'ium', 'ora', 'yx',
    'thos', 'mir', 'kel', 'don', 'phe', 'zan', 'ark', 'esh',
)

SPECIES_PREFIXES = (
    'Glo', 'Ska', 'Fli', 'Bro', 'Cri', 'Dwe', 'Gna', 'Hov',
    'Jit', 'Kna', 'Lur', 'Maw', 'Nib', 'Plu', 'Qui', 'Rut',
    'Sli', 'Tro', 'Vib', 'Whi', 'Zap', 'Buz', 'Cho', 'Dri',
)

SPECIES_SUFFIXES = (
    'moth', 'pod', 'fin', 'wing', 'claw', 'maw', 'horn', 'tail',
    'shell', 'fang', 'eye', 'leg', 'tusk', 'gill', 'bark', 'thorn',
)

FLORA_PREFIXES = (
    'Wis', 'Fer', 'Bri', 'Coa', 'Dew', 'Elm', 'Fen', 'Glo',
    'Haz', 'Ivy', 'Jas', 'Kin', 'Lil', 'Mos', 'Net', 'Oak',
    'Pin', 'Ros', 'Sag', 'Thi', 'Umb', 'Vin', 'Wil', 'Yew',
)

FLORA_SUFFIXES = (
    'bloom', 'leaf', 'root', 'vine', 'bush', 'wort', 'fern', 'reed',
    'moss', 'cap', 'stalk', 'bud', 'frond', 'bulb', 'stem', 'spike',
)

STAR_DESIGNATION_CHANCE = 0.6
PLANET_HYPHEN_CHANCE = 0.3
CATALOG_PREFIX = 'TGO'


def _pick(rng, pool):
    return pool[int(rng() * len(pool))]


def generate_star_name(seed: int) -> str:
    """'Prefix+suffix', sometimes followed by a designation ('Belar Prime')."""
    rng = seeded_random('star', seed)
    prefix = _pick(rng, STAR_PREFIXES)
    suffix = _pick(rng, STAR_SUFFIXES)

    if rng() < STAR_DESIGNATION_CHANCE:
        return f"{prefix}{suffix} {_pick(rng, STAR_DESIGNATIONS)}"
    return f"{prefix}{suffix}"


def generate_planet_name(seed: int) -> str:
    """'Prefix+[middle]+suffix', sometimes hyphenated ('Zilphi-Thos')."""
    rng = seeded_random('planet', seed)
    prefix = _pick(rng, PLANET_PREFIXES)
    middle = _pick(rng, PLANET_MIDDLES)
    suffix = _pick(rng, PLANET_SUFFIXES)

    if rng() < PLANET_HYPHEN_CHANCE:
        return f"{prefix}{middle}-{suffix.capitalize()}"
    return f"{prefix}{middle}{suffix}"


def generate_species_name(seed: int) -> str:
    rng = seeded_random('species', seed)
    return f"{_pick(rng, SPECIES_PREFIXES)}{_pick(rng, SPECIES_SUFFIXES)}"


def generate_flora_name(seed: int) -> str:
    rng = seeded_random('flora', seed)
    return f"{_pick(rng, FLORA_PREFIXES)}{_pick(rng, FLORA_SUFFIXES)}"


def generate_system_label(seed: int) -> dict:
    """
    Star name plus a catalogue id built from the seed's 8 hex digits,
    e.g. {'name': 'Vegos III', 'catalog': 'TGO-1A2B-3C4D'}.
    """
    digits = f"{seed & UINT32_MASK:08X}"
    return {
        'name': generate_star_name(seed),
        'catalog': f"{CATALOG_PREFIX}-{digits[:4]}-{digits[4:]}",
    }
