"""Mixed-integer linear problem accumulated row by row and solved with HiGHS.

Variables and constraints are added incrementally while walking a constraint
tree; ``solve()`` assembles the sparse constraint matrix once and hands it to
``scipy.optimize.milp``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp
from scipy.sparse import lil_matrix

from mealplanner.optimizer.models import ObjectiveDirection

logger = logging.getLogger(__name__)

# scipy.optimize.milp status codes
_MILP_OPTIMAL = 0
_MILP_INFEASIBLE = 2
_MILP_UNBOUNDED = 3


class ComparisonOp(Enum):
    """Relation between a constraint row and its right-hand side."""

    EQ = "=="
    GE = ">="
    LE = "<="


class SolveStatus(Enum):
    """Outcome of a solve."""

    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    ERROR = "error"


@dataclass
class ProblemSolution:
    """Raw solver outcome; ``x`` is only set when the status is optimal."""

    status: SolveStatus
    message: str
    x: Optional[np.ndarray] = None
    objective_value: Optional[float] = None
    elapsed_seconds: float = 0.0

    def var_value(self, var: int) -> float:
        if self.x is None:
            raise ValueError(f"No values available for a {self.status.value} solve")
        return float(self.x[var])


@dataclass
class _Row:
    terms: dict[int, float]
    op: ComparisonOp
    rhs: float
    name: str


def _holds_at_zero(row: _Row) -> bool:
    if row.op == ComparisonOp.EQ:
        return row.rhs == 0.0
    if row.op == ComparisonOp.GE:
        return row.rhs <= 0.0
    return row.rhs >= 0.0


@dataclass
class LinearProblem:
    """A linear objective over continuous and integer variables.

    Attributes:
        direction: Whether the objective is minimized or maximized
        presolve: Enable HiGHS presolve
        time_limit: Optional wall-clock limit in seconds
    """

    direction: ObjectiveDirection = ObjectiveDirection.MINIMIZE
    presolve: bool = True
    time_limit: Optional[float] = None
    _objective: list[float] = field(default_factory=list, repr=False)
    _lower: list[float] = field(default_factory=list, repr=False)
    _upper: list[float] = field(default_factory=list, repr=False)
    _integrality: list[int] = field(default_factory=list, repr=False)
    _rows: list[_Row] = field(default_factory=list, repr=False)

    @property
    def n_vars(self) -> int:
        return len(self._objective)

    @property
    def n_constraints(self) -> int:
        return len(self._rows)

    @property
    def constraint_info(self) -> list[tuple[str, float]]:
        """(name, right-hand side) for every row, in insertion order."""
        return [(row.name, row.rhs) for row in self._rows]

    def add_var(self, objective: float, bounds: tuple[float, float]) -> int:
        """Add a continuous variable and return its index."""
        return self._add(objective, bounds, integer=False)

    def add_integer_var(self, objective: float, bounds: tuple[float, float]) -> int:
        """Add an integer variable and return its index."""
        return self._add(objective, bounds, integer=True)

    def _add(self, objective: float, bounds: tuple[float, float], integer: bool) -> int:
        low, high = bounds
        if low > high:
            raise ValueError(f"Variable lower bound {low} exceeds upper bound {high}")
        self._objective.append(float(objective))
        self._lower.append(float(low))
        self._upper.append(float(high))
        self._integrality.append(1 if integer else 0)
        return self.n_vars - 1

    def add_constraint(
        self,
        terms: Iterable[tuple[int, float]],
        op: ComparisonOp,
        rhs: float,
        name: str = "",
    ) -> None:
        """Add ``sum(coef * var) <op> rhs``; repeated variables are summed."""
        row: dict[int, float] = {}
        for var, coef in terms:
            if not 0 <= var < self.n_vars:
                raise IndexError(f"Unknown variable {var}")
            row[var] = row.get(var, 0.0) + float(coef)
        self._rows.append(_Row(row, op, float(rhs), name or f"row_{len(self._rows)}"))

    def _constraint_matrix(self) -> Optional[LinearConstraint]:
        if not self._rows:
            return None

        A = lil_matrix((len(self._rows), self.n_vars))
        row_lb = np.full(len(self._rows), -np.inf)
        row_ub = np.full(len(self._rows), np.inf)

        for i, row in enumerate(self._rows):
            for var, coef in row.terms.items():
                A[i, var] = coef
            if row.op in (ComparisonOp.EQ, ComparisonOp.GE):
                row_lb[i] = row.rhs
            if row.op in (ComparisonOp.EQ, ComparisonOp.LE):
                row_ub[i] = row.rhs

        return LinearConstraint(A.tocsc(), row_lb, row_ub)

    def _run(self, costs: np.ndarray):
        options: dict = {"presolve": self.presolve}
        if self.time_limit is not None:
            options["time_limit"] = self.time_limit

        constraints = self._constraint_matrix()
        return milp(
            c=costs,
            constraints=constraints,
            integrality=np.array(self._integrality),
            bounds=Bounds(np.array(self._lower), np.array(self._upper)),
            options=options,
        )

    def solve(self) -> ProblemSolution:
        """Solve the problem once.

        HiGHS sometimes only reports "unbounded or infeasible"; in that case
        the same constraints are re-solved with a zero objective to tell the
        two apart.
        """
        start_time = time.time()

        if self.n_vars == 0:
            return self._solve_empty()

        # milp only minimizes
        sign = -1.0 if self.direction == ObjectiveDirection.MAXIMIZE else 1.0
        costs = sign * np.array(self._objective)

        logger.debug(
            "Solving %s problem: %d variables (%d integer), %d constraints",
            self.direction.value,
            self.n_vars,
            sum(self._integrality),
            self.n_constraints,
        )
        result = self._run(costs)

        if result.status == _MILP_OPTIMAL:
            status = SolveStatus.OPTIMAL
        elif result.status == _MILP_INFEASIBLE:
            status = SolveStatus.INFEASIBLE
        elif result.status == _MILP_UNBOUNDED:
            status = SolveStatus.UNBOUNDED
        elif "unbounded" in str(result.message).lower():
            status = self._check_feasibility()
        else:
            status = SolveStatus.ERROR

        elapsed = time.time() - start_time
        if status != SolveStatus.OPTIMAL:
            return ProblemSolution(
                status=status,
                message=str(result.message),
                elapsed_seconds=elapsed,
            )

        return ProblemSolution(
            status=status,
            message=str(result.message),
            x=np.asarray(result.x),
            objective_value=sign * float(result.fun),
            elapsed_seconds=elapsed,
        )

    def _solve_empty(self) -> ProblemSolution:
        """Without variables every row reads ``0 <op> rhs``."""
        violated = [row.name for row in self._rows if not _holds_at_zero(row)]
        if violated:
            logger.debug("Empty problem violates rows: %s", ", ".join(violated))
            return ProblemSolution(
                status=SolveStatus.INFEASIBLE,
                message=f"Empty problem violates {len(violated)} constraint(s)",
            )
        return ProblemSolution(
            status=SolveStatus.OPTIMAL,
            message="Empty problem",
            x=np.array([]),
            objective_value=0.0,
        )

    def _check_feasibility(self) -> SolveStatus:
        result = self._run(np.zeros(self.n_vars))
        if result.status == _MILP_OPTIMAL:
            return SolveStatus.UNBOUNDED
        if result.status == _MILP_INFEASIBLE:
            return SolveStatus.INFEASIBLE
        return SolveStatus.ERROR
