import logging
import math
from pathlib import Path

import pytest

from milp_optimizer.errors import (
    DuplicateObjectiveSense,
    FileUnavailable,
    InvalidBoundFormat,
    InvalidConstraintFormat,
    InvalidNumber,
    MisplacedLine,
    NoTermsFound,
)
from milp_optimizer.parser import parse_file, parse_lines, parse_text
from milp_optimizer.parser.model_file import Section, _ModelBuilder
from milp_optimizer.schemas import LinearExpression, Term

HEADER = "Max\n3x+2y\nx+2y<=10\n"


def example_path(name: str) -> Path:
    return Path(__file__).parent.parent.joinpath("examples", name)


def test_minimal_model():
    model = parse_text("Max\n3x+2y\nx+2y<=10\n")

    assert model.sense == "max"
    assert [(t.coefficient, t.variable) for t in model.objective.terms] == [(3.0, "x"), (2.0, "y")]
    assert model.objective.op == ""
    assert model.objective.rhs == 0.0
    assert len(model.constraints) == 1
    cons = model.constraints[0]
    assert cons.op == "<="
    assert cons.rhs == 10.0
    assert cons.line == 3
    assert [(t.coefficient, t.variable) for t in cons.terms] == [(1.0, "x"), (2.0, "y")]
    assert model.bounds == {}


def test_comments_blank_lines_and_line_numbers():
    text = "// header comment\n\nMin\n   \n  x + y  \n// between\nx >= 1\n\ny = 2\n"
    model = parse_text(text)
    assert model.sense == "min"
    assert model.objective.line == 5
    assert [c.line for c in model.constraints] == [7, 9]
    assert [c.op for c in model.constraints] == [">=", "="]


def test_crlf_lines():
    model = parse_text("Min\r\nx + y\r\nx - y >= 2\r\n")
    assert model.sense == "min"
    assert model.constraints[0].rhs == 2.0


def test_duplicate_sense_reports_second_line():
    with pytest.raises(DuplicateObjectiveSense) as info:
        parse_text("Max\n3x+2y\nx<=4\n\nMax\n")
    assert info.value.line == 5


def test_duplicate_sense_before_objective():
    with pytest.raises(DuplicateObjectiveSense) as info:
        parse_text("Min\nMax\nx\n")
    assert info.value.line == 2


def test_bounds_section():
    model = parse_text(HEADER + "Bounds:\nx free\ny>=0\ny<=5\n")
    x, y = model.bounds["x"], model.bounds["y"]
    assert x.is_free
    assert (x.lower, x.upper) == (-math.inf, math.inf)
    assert not y.is_free
    assert (y.lower, y.upper) == (0.0, 5.0)


def test_bounds_equality_and_negative_values():
    model = parse_text(HEADER + "Bounds:\nx = 2.5\ny >= -4\n")
    assert (model.bounds["x"].lower, model.bounds["x"].upper) == (2.5, 2.5)
    assert model.bounds["y"].lower == -4.0


def test_binary_overrides_prior_bounds():
    model = parse_text(HEADER + "Bounds:\na >= 3\nb <= 9\nBinary:\na,b\n")
    for name in ("a", "b"):
        fact = model.bounds[name]
        assert fact.kind == "binary"
        assert (fact.lower, fact.upper) == (0.0, 1.0)


def test_integer_keeps_prior_bounds():
    model = parse_text(HEADER + "Bounds:\nx <= 7\nInteger:\nx, y\n")
    assert model.bounds["x"].kind == "integer"
    assert model.bounds["x"].upper == 7.0
    assert model.bounds["y"].kind == "integer"
    assert model.bounds["y"].lower == -math.inf


def test_sections_can_repeat_and_interleave():
    text = HEADER + "Integer:\nx\nBounds:\nx >= 1\nBinary:\ny\nBounds:\ny <= 0\n"
    model = parse_text(text)
    assert (model.bounds["x"].kind, model.bounds["x"].lower) == ("integer", 1.0)
    assert (model.bounds["y"].kind, model.bounds["y"].upper) == ("binary", 0.0)


def test_empty_names_in_type_lists_are_ignored():
    model = parse_text(HEADER + "Integer:\nx,,y,\n")
    assert set(model.bounds) == {"x", "y"}


def test_variables_only_in_expressions_have_no_bounds_entry():
    model = parse_text(HEADER + "Bounds:\nz >= 1\n")
    assert set(model.bounds) == {"z"}
    assert model.variable_names() == ["x", "y", "z"]


def test_duplicate_terms_are_kept():
    model = parse_text("Max\nx + x\nx + x <= 3\n")
    assert len(model.objective.terms) == 2
    assert len(model.constraints[0].terms) == 2


def test_constraint_after_section_header_is_a_bound_error():
    with pytest.raises(InvalidBoundFormat) as info:
        parse_text(HEADER + "Bounds:\nx + y <= 3\n")
    assert info.value.line == 5


def test_invalid_bound_operator():
    with pytest.raises(InvalidBoundFormat) as info:
        parse_text(HEADER + "Bounds:\nx >< 5\n")
    assert info.value.line == 5
    assert "Line 5" in str(info.value)


@pytest.mark.parametrize("line", ["free", "2x free", "x free y"])
def test_malformed_free_lines(line):
    with pytest.raises(InvalidBoundFormat):
        parse_text(HEADER + "Bounds:\n" + line + "\n")


def test_variable_named_like_keyword():
    model = parse_text(HEADER + "Bounds:\nfreedom >= 2\n")
    assert model.bounds["freedom"].lower == 2.0
    assert not model.bounds["freedom"].is_free


def test_non_numeric_bound():
    with pytest.raises(InvalidNumber) as info:
        parse_text(HEADER + "Bounds:\nx <= lots\n")
    assert info.value.line == 5


def test_underscore_digits_are_not_numbers():
    with pytest.raises(InvalidNumber) as info:
        parse_text(HEADER + "Bounds:\nx <= 1_000\n")
    assert info.value.line == 5

    with pytest.raises(InvalidNumber) as info:
        parse_text(HEADER + "x + y <= 1_0\n")
    assert info.value.line == 4


def test_bad_constraint_line():
    with pytest.raises(InvalidConstraintFormat) as info:
        parse_text("Max\nx\nx + y\n")
    assert info.value.line == 3


def test_objective_without_terms():
    with pytest.raises(NoTermsFound) as info:
        parse_text("Min\n42\n")
    assert info.value.line == 2


def test_missing_sense_reads_first_line_as_objective(caplog):
    with caplog.at_level(logging.WARNING, logger="milp_optimizer.parser.model_file"):
        model = parse_text("x + 2y <= 10\nx <= 4\n")
    assert model.sense is None
    assert [t.variable for t in model.objective.terms] == ["x", "y"]
    assert len(model.constraints) == 1
    assert "sense is unset" in caplog.text


def test_sense_after_objective_is_rejected():
    with pytest.raises(DuplicateObjectiveSense) as info:
        parse_text("x + y\nx <= 3\nBounds:\nx >= 1\nMax\n")
    assert info.value.line == 5

    with pytest.raises(DuplicateObjectiveSense) as info:
        parse_text("x + y\nMin\n")
    assert info.value.line == 2


def test_parse_lines_accepts_any_iterable():
    model = parse_lines(iter(["Min", "x", "x >= 1"]))
    assert model.constraints[0].line == 3


def test_parsing_is_deterministic():
    first = parse_file(example_path("production.lp"))
    second = parse_file(example_path("production.lp"))
    assert first == second
    assert [t.variable for t in first.objective.terms] == [t.variable for t in second.objective.terms]
    assert first.bounds == second.bounds


def test_parse_example_file_with_crlf():
    model = parse_file(example_path("production.lp"))
    assert model.sense == "max"
    assert len(model.constraints) == 3
    assert model.bounds["z"].is_free
    assert model.bounds["x"].upper == 3.0
    assert model.bounds["y"].kind == "integer"
    assert model.is_mip


def test_model_is_frozen():
    model = parse_text(HEADER)
    with pytest.raises(Exception):
        model.sense = "min"


def test_bound_facts_are_frozen():
    model = parse_text(HEADER + "Bounds:\nx <= 3\n")
    with pytest.raises(Exception):
        model.bounds["x"].lower = 0.0
    assert model.bounds["x"].lower == -math.inf


def test_line_in_no_section_is_misplaced():
    builder = _ModelBuilder()
    builder.objective = LinearExpression(terms=[Term(coefficient=1.0, variable="x")], line=1)
    assert builder.section is Section.NONE
    with pytest.raises(MisplacedLine) as info:
        builder.feed("x <= 3", 2)
    assert info.value.line == 2


def test_missing_file(tmp_path):
    missing = tmp_path / "nope.lp"
    with pytest.raises(FileUnavailable) as info:
        parse_file(missing)
    assert str(missing) in str(info.value)
    assert isinstance(info.value.__cause__, OSError)
