"""
Tests for the elementary cellular automaton engine and rule classifier.
"""

import numpy as np
import pytest

from universe_generator.automaton import (
    CLASS_CHAOTIC,
    CLASS_COMPLEX,
    CLASS_PERIODIC,
    CLASS_UNIFORM,
    RULE_CLASS_LABELS,
    apply_rule,
    classify_rule,
    rule_table,
    rule_to_binary,
    run_automaton,
    run_automaton_dual,
)
from universe_generator.errors import InvalidDimensionError, InvalidRuleError


class TestApplyRule:
    """Test single-neighbourhood rule application."""

    def test_rule_30_truth_table(self):
        """Rule 30 = 00011110: patterns 1-4 live, the rest die."""
        outputs = [apply_rule(30, (p >> 2) & 1, (p >> 1) & 1, p & 1) for p in range(8)]
        assert outputs == [0, 1, 1, 1, 1, 0, 0, 0]

    def test_rule_90_is_xor(self):
        """Rule 90 outputs left XOR right."""
        for left in (0, 1):
            for center in (0, 1):
                for right in (0, 1):
                    assert apply_rule(90, left, center, right) == left ^ right

    @pytest.mark.parametrize("rule", [-1, 256, 3.5, True, "30"])
    def test_invalid_rules_rejected(self, rule):
        """Rules outside [0, 255] or of the wrong type raise."""
        with pytest.raises(InvalidRuleError):
            apply_rule(rule, 0, 1, 0)

    def test_invalid_rule_is_value_error(self):
        """Callers can catch the builtin ValueError."""
        with pytest.raises(ValueError):
            apply_rule(300, 0, 0, 0)


class TestRunAutomaton:
    """Test grid evolution."""

    def test_shape_and_dtype(self):
        """The grid holds the initial row plus one row per generation."""
        grid = run_automaton(30, 11, 5)
        assert grid.shape == (6, 11)
        assert grid.dtype == np.uint8

    def test_default_single_centre_cell(self):
        """Without initial cells, only the centre cell is alive."""
        grid = run_automaton(30, 11, 0)
        assert grid[0].tolist() == [0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0]

    def test_rule_30_first_step(self):
        """One live cell grows into three under rule 30."""
        grid = run_automaton(30, 11, 1)
        assert np.flatnonzero(grid[1]).tolist() == [4, 5, 6]

    def test_rule_90_first_step(self):
        """Rule 90 splits one live cell into two."""
        grid = run_automaton(90, 11, 1)
        assert np.flatnonzero(grid[1]).tolist() == [4, 6]

    def test_rule_0_dies(self):
        """Rule 0 leaves every generation after the first dead."""
        grid = run_automaton(0, 21, 10, [3, 5, 7, 9])
        assert grid[1:].sum() == 0

    @pytest.mark.parametrize("width, generations", [(3, 1), (3, 5), (4, 1), (4, 6)])
    def test_rule_0_dies_on_narrow_rows(self, width, generations):
        """Even the narrowest rows are dead after one generation of rule 0."""
        grid = run_automaton(0, width, generations, list(range(width)))
        assert grid[1:].sum() == 0

    def test_boundaries_always_dead(self):
        """Boundary cells are 0 in every row, including the initial row."""
        grid = run_automaton(255, 15, 12, [0, 7, 14])
        assert grid[:, 0].sum() == 0
        assert grid[:, -1].sum() == 0
        # Rule 255 fills every interior cell.
        assert grid[1, 1:-1].all()

    @pytest.mark.parametrize("rule", range(256))
    def test_boundaries_dead_for_every_rule(self, rule):
        """No rule can bring a boundary cell to life, even when seeded there."""
        grid = run_automaton(rule, 9, 6, [0, 4, 8])
        assert grid[:, 0].sum() == 0
        assert grid[:, -1].sum() == 0

    def test_out_of_range_initial_cells_ignored(self):
        """Positions outside the row are dropped silently."""
        grid = run_automaton(30, 10, 3, [-1, 10, 100])
        assert grid.sum() == 0

    def test_deterministic(self):
        """Two runs with identical inputs agree exactly."""
        assert np.array_equal(run_automaton(110, 64, 40, [5, 20]), run_automaton(110, 64, 40, [5, 20]))

    def test_width_below_three_rejected(self):
        """A row needs at least one interior cell."""
        with pytest.raises(InvalidDimensionError):
            run_automaton(30, 2, 5)

    def test_negative_generations_rejected(self):
        """generations must be >= 0."""
        with pytest.raises(InvalidDimensionError):
            run_automaton(30, 10, -1)

    def test_zero_generations(self):
        """Zero generations returns only the initial row."""
        assert run_automaton(30, 10, 0).shape == (1, 10)

    def test_dual_seeds_two_cells(self):
        """The dual start places cells at the centre and the quarter point."""
        grid = run_automaton_dual(30, 20, 0)
        assert np.flatnonzero(grid[0]).tolist() == [5, 10]


class TestClassifyRule:
    """Test the heuristic Wolfram classifier."""

    def test_rule_0_uniform(self):
        """Rule 0 dies out and is Uniform."""
        result = classify_rule(0)
        assert result['class'] == CLASS_UNIFORM
        assert result['label'] == "Uniform"
        assert result['density'] == 0.0

    def test_identity_rule_periodic(self):
        """Rule 204 copies the centre cell forever: one distinct row."""
        result = classify_rule(204)
        assert result['class'] == CLASS_PERIODIC
        assert result['avg_change'] == 0.0
        assert result['entropy'] == pytest.approx(1 / 20)

    def test_rule_30_chaotic(self):
        """Rule 30 is the textbook chaotic rule."""
        result = classify_rule(30)
        assert result['class'] == CLASS_CHAOTIC
        assert result['label'] == "Chaotic"

    def test_rule_110_complex_or_chaotic(self):
        """Rule 110 lands in one of the two rich classes."""
        assert classify_rule(110)['class'] in (CLASS_CHAOTIC, CLASS_COMPLEX)

    def test_result_fields(self):
        """Every rule gets a valid class, label and bounded measures."""
        for rule in (30, 90, 110, 184):
            result = classify_rule(rule)
            assert result['class'] in RULE_CLASS_LABELS
            assert result['label'] == RULE_CLASS_LABELS[result['class']]
            assert 0.0 <= result['entropy'] <= 1.0
            assert 0.0 <= result['density'] <= 1.0
            assert 0.0 <= result['avg_change'] <= 1.0

    def test_stable_across_calls(self):
        """Repeated classification gives identical results."""
        assert classify_rule(110) == classify_rule(110)

    def test_invalid_rule(self):
        """The classifier validates its input."""
        with pytest.raises(InvalidRuleError):
            classify_rule(-5)


class TestRuleHelpers:
    """Test rule introspection helpers."""

    def test_rule_to_binary(self):
        """Rule 30 is 00011110."""
        assert rule_to_binary(30) == "00011110"
        assert rule_to_binary(0) == "00000000"

    def test_rule_table_order(self):
        """The table lists patterns 7 down to 0 with the matching rule bit."""
        table = rule_table(30)
        assert [entry['pattern'] for entry in table] == list(range(7, -1, -1))
        assert [entry['output'] for entry in table] == [0, 0, 0, 1, 1, 1, 1, 0]
        assert table[0]['left'] == 1 and table[0]['center'] == 1 and table[0]['right'] == 1
