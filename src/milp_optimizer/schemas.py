from __future__ import annotations

import math
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Sense = Literal["min", "max"]
VarKind = Literal["continuous", "integer", "binary"]
SolveStatus = Literal["optimal", "infeasible", "unbounded", "iteration_limit"]
HighsMethod = Literal["highs", "highs-ds", "highs-ipm"]


class Term(BaseModel):
    model_config = ConfigDict(frozen=True)

    coefficient: float
    variable: str


class LinearExpression(BaseModel):
    """Objective (``op == ""``) or constraint row as read from the model file."""

    model_config = ConfigDict(frozen=True)

    terms: List[Term] = Field(default_factory=list)
    rhs: float = 0.0
    op: Literal["<=", ">=", "=", ""] = ""
    line: int = 0


class BoundFact(BaseModel):
    model_config = ConfigDict(frozen=True)

    lower: float = -math.inf
    upper: float = math.inf
    is_free: bool = False
    kind: VarKind = "continuous"


class LPModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    sense: Optional[Sense] = None
    objective: LinearExpression = Field(default_factory=LinearExpression)
    constraints: List[LinearExpression] = Field(default_factory=list)
    bounds: Dict[str, BoundFact] = Field(default_factory=dict)

    def variable_names(self) -> List[str]:
        seen: Dict[str, None] = {}
        for term in self.objective.terms:
            seen.setdefault(term.variable, None)
        for cons in self.constraints:
            for term in cons.terms:
                seen.setdefault(term.variable, None)
        for name in self.bounds:
            seen.setdefault(name, None)
        return list(seen)

    def variable_index(self) -> Dict[str, int]:
        return {name: idx for idx, name in enumerate(self.variable_names())}

    @property
    def is_mip(self) -> bool:
        return any(fact.kind != "continuous" for fact in self.bounds.values())


class SolveOptions(BaseModel):
    max_iters: int = 10_000
    tol: float = 1e-9
    method: HighsMethod = "highs"
    return_duals: bool = True
    max_nodes: Optional[int] = None


class LPSolution(BaseModel):
    status: SolveStatus
    objective_value: Optional[float]
    x: Dict[str, float] | None
    duals: Dict[str, float] | None
    iterations: int
    message: str = ""


class MIPSolution(BaseModel):
    status: SolveStatus
    objective_value: Optional[float]
    x: Dict[str, float] | None
    iterations: int
    nodes: int = 0
    message: str = ""
