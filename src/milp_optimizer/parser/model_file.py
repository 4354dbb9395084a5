"""Line-oriented reader for the model file format.

    Max | Min
    <objective expression>
    <constraint> (<=|>=|=) <number>
    ...
    Bounds:
    <var> (>=|<=|=) <number>  |  <var> free
    Integer:
    <var>, <var>, ...
    Binary:
    <var>, <var>, ...

Lines starting with ``//`` and blank lines are ignored. Section headers are
case-sensitive and must stand on their own line.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

from ..errors import (
    DuplicateObjectiveSense,
    FileUnavailable,
    InvalidBoundFormat,
    MisplacedLine,
)
from ..schemas import LinearExpression, LPModel, Sense
from .bounds import BoundsBuilder
from .constraint import parse_constraint, parse_number
from .expression import parse_expression
from .text import is_blank, split, trim

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "//"
_SENSES = {"Max": "max", "Min": "min"}
_SECTION_HEADERS = {
    "Bounds:": "BOUNDS",
    "Integer:": "INTEGERS",
    "Binary:": "BINARIES",
}
_FREE = re.compile(r"([A-Za-z_]\w*)\s+free", re.ASCII)
_BOUND = re.compile(r"([A-Za-z_]\w*)\s*(>=|<=|=)\s*(.+)", re.ASCII)


class Section(Enum):
    NONE = "none"
    CONSTRAINTS = "constraints"
    BOUNDS = "bounds"
    INTEGERS = "integers"
    BINARIES = "binaries"


class _ModelBuilder:
    def __init__(self) -> None:
        self.section = Section.NONE
        self.sense: Optional[Sense] = None
        self.objective: Optional[LinearExpression] = None
        self.constraints: List[LinearExpression] = []
        self.bounds = BoundsBuilder()

    def feed(self, raw: str, line_no: int) -> None:
        line = trim(raw)
        if is_blank(line) or line.startswith(COMMENT_PREFIX):
            return

        if line in _SENSES:
            if self.sense is not None or self.objective is not None:
                raise DuplicateObjectiveSense(line_no)
            self.sense = _SENSES[line]  # type: ignore[assignment]
            return

        if self.objective is None:
            if self.sense is None:
                logger.warning(
                    f"Line {line_no}: objective read before any Max/Min line; sense is unset"
                )
            self.objective = LinearExpression(terms=parse_expression(line, line_no), line=line_no)
            self.section = Section.CONSTRAINTS
            return

        header = _SECTION_HEADERS.get(line)
        if header is not None:
            self.section = Section[header]
            logger.debug(f"Line {line_no}: entering {self.section.value} section")
            return

        if self.section is Section.CONSTRAINTS:
            self.constraints.append(parse_constraint(line, line_no))
        elif self.section is Section.BOUNDS:
            self._read_bound(line, line_no)
        elif self.section in (Section.INTEGERS, Section.BINARIES):
            self._read_kinds(line)
        else:
            # Section.NONE holds only until the objective line is read.
            raise MisplacedLine(line_no)

    def _read_bound(self, line: str, line_no: int) -> None:
        free = _FREE.fullmatch(line)
        if free:
            self.bounds.mark_free(free.group(1))
            return

        match = _BOUND.fullmatch(line)
        if not match:
            raise InvalidBoundFormat(line_no)
        name, op, value_text = match.groups()
        value = parse_number(value_text, line_no)
        if op == ">=":
            self.bounds.set_lower(name, value)
        elif op == "<=":
            self.bounds.set_upper(name, value)
        else:
            self.bounds.fix(name, value)

    def _read_kinds(self, line: str) -> None:
        for name in split(line, ","):
            if not name:
                continue
            if self.section is Section.BINARIES:
                self.bounds.mark_binary(name)
            else:
                self.bounds.mark_integer(name)

    def build(self) -> LPModel:
        objective = self.objective if self.objective is not None else LinearExpression()
        return LPModel(
            sense=self.sense,
            objective=objective,
            constraints=list(self.constraints),
            bounds=self.bounds.build(),
        )


def parse_lines(lines: Iterable[str]) -> LPModel:
    """Build an LPModel from an iterable of raw lines (line numbers start at 1)."""
    builder = _ModelBuilder()
    for line_no, raw in enumerate(lines, start=1):
        builder.feed(raw, line_no)
    model = builder.build()
    logger.info(
        f"Parsed model: sense={model.sense}, {len(model.constraints)} constraints, "
        f"{len(model.bounds)} declared variables"
    )
    return model


def parse_text(text: str) -> LPModel:
    return parse_lines(text.split("\n"))


def parse_file(path: str | Path) -> LPModel:
    try:
        with open(path, "r", encoding="utf-8") as fh:
            lines = fh.readlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise FileUnavailable(str(path)) from exc
    logger.debug(f"Read {len(lines)} lines from {path}")
    return parse_lines(lines)
