import math

import pytest

from milp_optimizer.parser.bounds import BoundsBuilder


def test_defaults_are_unbounded_continuous():
    builder = BoundsBuilder()
    builder.mark_free("x")
    fact = builder.build()["x"]
    assert fact.is_free
    assert fact.lower == -math.inf
    assert fact.upper == math.inf
    assert fact.kind == "continuous"


def test_bounds_merge_field_by_field():
    builder = BoundsBuilder()
    builder.set_lower("y", 0.0)
    builder.set_upper("y", 5.0)
    builder.mark_integer("y")
    fact = builder.build()["y"]
    assert (fact.lower, fact.upper, fact.kind) == (0.0, 5.0, "integer")


def test_fix_sets_both_sides():
    builder = BoundsBuilder()
    builder.set_upper("z", 9.0)
    builder.fix("z", 2.5)
    fact = builder.build()["z"]
    assert (fact.lower, fact.upper) == (2.5, 2.5)


def test_binary_after_bounds_overwrites_range():
    builder = BoundsBuilder()
    builder.set_lower("a", -3.0)
    builder.set_upper("a", 7.0)
    builder.mark_binary("a")
    fact = builder.build()["a"]
    assert (fact.lower, fact.upper, fact.kind) == (0.0, 1.0, "binary")


def test_bounds_after_binary_overwrite_defaults():
    builder = BoundsBuilder()
    builder.mark_binary("a")
    builder.set_upper("a", 0.0)
    fact = builder.build()["a"]
    assert (fact.lower, fact.upper, fact.kind) == (0.0, 0.0, "binary")


def test_integer_keeps_earlier_range_and_free_flag():
    builder = BoundsBuilder()
    builder.mark_free("n")
    builder.set_upper("n", 4.0)
    builder.mark_integer("n")
    fact = builder.build()["n"]
    assert fact.is_free
    assert fact.upper == 4.0
    assert fact.kind == "integer"


def test_built_facts_are_frozen_snapshots():
    builder = BoundsBuilder()
    builder.set_lower("x", 1.0)
    first = builder.build()
    with pytest.raises(Exception):
        first["x"].lower = 99.0
    builder.set_upper("x", 4.0)
    assert first["x"].upper == math.inf
    assert builder.build()["x"].upper == 4.0
    assert "x" in builder
    assert "y" not in builder
