# universe_generator/automaton.py

"""
================================================================================
ELEMENTARY CELLULAR AUTOMATON ENGINE
================================================================================
This module runs Wolfram elementary (1-D, 3-cell neighbourhood) automata and
provides an empirical complexity classifier for the 256 rules.

Data Contract:
---------------
- Inputs:
    - rule: integer in [0, 255]; bit `p` is the output for neighbourhood `p`.
    - width: row length (>= 3). generations: number of steps (>= 0).
- Outputs:
    - A (generations + 1, width) uint8 grid; row 0 is the initial condition.
- Side Effects: None. `classify_rule` memoises its 256 possible results.
- Invariants:
    - Boundary cells (index 0 and width - 1) are 0 in every row.
    - Identical arguments always produce identical grids.
================================================================================
"""

import functools

import numpy as np
from numba import njit

from . import config as DEFAULTS
from .errors import InvalidDimensionError, InvalidRuleError

# --- Complexity Classes ---
CLASS_UNIFORM = 1
CLASS_PERIODIC = 2
CLASS_CHAOTIC = 3
CLASS_COMPLEX = 4

RULE_CLASS_LABELS = {
    CLASS_UNIFORM: "Uniform",
    CLASS_PERIODIC: "Periodic",
    CLASS_CHAOTIC: "Chaotic",
    CLASS_COMPLEX: "Complex",
}


def check_rule(rule) -> int:
    """Returns `rule` as a plain int, or raises InvalidRuleError."""
    if isinstance(rule, (bool, np.bool_)) or not isinstance(rule, (int, np.integer)):
        raise InvalidRuleError(rule)
    rule = int(rule)
    if not DEFAULTS.RULE_MIN <= rule <= DEFAULTS.RULE_MAX:
        raise InvalidRuleError(rule)
    return rule


def check_dimension(name: str, value, minimum: int = 1) -> int:
    """Returns `value` as a plain int, or raises InvalidDimensionError."""
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise InvalidDimensionError(name, value, minimum)
    value = int(value)
    if value < minimum:
        raise InvalidDimensionError(name, value, minimum)
    return value


def apply_rule(rule: int, left: int, center: int, right: int) -> int:
    """
    Applies `rule` to one neighbourhood.

    The three cells form a 3-bit pattern (left is the high bit); the output is
    that bit of the rule number. Rule 30 = 0b00011110, so pattern 0b100 -> 1.
    """
    rule = check_rule(rule)
    pattern = (left << 2) | (center << 1) | right
    return (rule >> pattern) & 1


@njit
def _evolve(rule, first_row, generations):
    """Steps `first_row` forward; boundaries are never written so they stay 0."""
    width = first_row.shape[0]
    grid = np.zeros((generations + 1, width), dtype=np.uint8)
    for i in range(1, width - 1):
        grid[0, i] = first_row[i]

    for g in range(generations):
        for i in range(1, width - 1):
            left = np.int64(grid[g, i - 1])
            center = np.int64(grid[g, i])
            right = np.int64(grid[g, i + 1])
            pattern = (left << 2) | (center << 1) | right
            grid[g + 1, i] = (rule >> pattern) & 1

    return grid


def run_automaton(rule: int, width: int, generations: int, initial_cells=None) -> np.ndarray:
    """
    Runs an elementary automaton and returns every generation.

    Args:
        rule (int): The rule number (0-255).
        width (int): Cells per row, at least 3.
        generations (int): Steps to run. The grid has `generations + 1` rows.
        initial_cells (iterable of int, optional): Live positions in row 0.
            Positions outside the row are ignored. Defaults to a single live
            cell at `width // 2`.

    Returns:
        np.ndarray: uint8 grid of shape (generations + 1, width).
    """
    rule = check_rule(rule)
    width = check_dimension('width', width, DEFAULTS.MIN_AUTOMATON_WIDTH)
    generations = check_dimension('generations', generations, 0)

    first_row = np.zeros(width, dtype=np.uint8)
    if initial_cells is not None and len(initial_cells) > 0:
        for pos in initial_cells:
            if 0 <= pos < width:
                first_row[pos] = 1
    else:
        first_row[width // 2] = 1

    return _evolve(rule, first_row, generations)


def run_automaton_dual(rule: int, width: int, generations: int) -> np.ndarray:
    """Runs from two live cells, at the centre and the quarter point."""
    width = check_dimension('width', width, DEFAULTS.MIN_AUTOMATON_WIDTH)
    return run_automaton(rule, width, generations, [width // 2, width // 4])


@functools.lru_cache(maxsize=DEFAULTS.RULE_MAX + 1)
def _measure_rule(rule: int) -> tuple:
    width = DEFAULTS.CLASSIFIER_WIDTH
    window = DEFAULTS.CLASSIFIER_WINDOW
    grid = run_automaton(rule, width, DEFAULTS.CLASSIFIER_GENERATIONS)

    density = float(grid[-1].sum()) / width
    distinct = len({row.tobytes() for row in grid[-window:]})
    avg_change = float(np.mean(grid[1:] != grid[:-1]))

    return density, distinct, avg_change


def classify_rule(rule: int) -> dict:
    """
    Heuristically places a rule in one of Wolfram's four classes.

    This is an empirical approximation, not a proof of class membership. The
    rule is run for a fixed window from a single live cell and three measures
    are taken: final-row density, the number of distinct rows among the last
    20 generations, and the mean fraction of cells changing per step. They are
    checked in this order:

        density 0 or 1                          -> Uniform  (1)
        distinct rows <= 4                      -> Periodic (2)
        change > 0.3 and distinct >= 18         -> Chaotic  (3)
        distinct > 10 and 0.1 < change <= 0.3   -> Complex  (4)
        change <= 0.1                           -> Periodic (2)
        otherwise                               -> Chaotic  (3)

    Returns:
        dict: {class, label, entropy, density, avg_change}; `entropy` is the
        distinct-row fraction of the window, in [0, 1].
    """
    rule = check_rule(rule)
    density, distinct, avg_change = _measure_rule(rule)

    if density == 0.0 or density == 1.0:
        rule_class = CLASS_UNIFORM
    elif distinct <= 4:
        rule_class = CLASS_PERIODIC
    elif avg_change > 0.3 and distinct >= 18:
        rule_class = CLASS_CHAOTIC
    elif distinct > 10 and 0.1 < avg_change <= 0.3:
        rule_class = CLASS_COMPLEX
    elif avg_change <= 0.1:
        rule_class = CLASS_PERIODIC
    else:
        rule_class = CLASS_CHAOTIC

    return {
        'class': rule_class,
        'label': RULE_CLASS_LABELS[rule_class],
        'entropy': distinct / DEFAULTS.CLASSIFIER_WINDOW,
        'density': density,
        'avg_change': avg_change,
    }


def rule_table(rule: int) -> list:
    """The eight neighbourhood -> output entries, from pattern 7 down to 0."""
    rule = check_rule(rule)
    table = []
    for pattern in range(7, -1, -1):
        table.append({
            'pattern': pattern,
            'left': (pattern >> 2) & 1,
            'center': (pattern >> 1) & 1,
            'right': pattern & 1,
            'output': (rule >> pattern) & 1,
        })
    return table


def rule_to_binary(rule: int) -> str:
    """8-bit binary string, e.g. '00011110' for rule 30."""
    return format(check_rule(rule), '08b')
