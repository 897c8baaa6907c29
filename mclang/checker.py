# mclang/checker.py

"""
Well-formedness checker for measurement-calculus programs.

A program is well formed when:
    (D0) no command depends on an outcome not yet measured,
    (D1) no command acts on a qubit already measured,
    (D2) no command acts on a qubit that was never prepared (inputs are
         declared through their preparation),
    (D3) a qubit is an output iff it is never measured,
    (D4) the prepared qubits are exactly 0 .. n-1, each prepared once.

D3 is a definition rather than a check; it is reported through
``CheckResult.output_qubits``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Set, Tuple

from .errors import WellFormednessViolation
from .types import (
    COMMAND_TYPES,
    INPUT_PREPARATION_TYPES,
    Command,
    InitNonInput,
    Measure,
    Program,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Violation:
    rule: str
    command: Optional[Command]
    message: str
    qubits: Tuple[int, ...] = ()

    def __str__(self) -> str:
        if self.command is None:
            return f"Error: {self.message}."
        return f"Error: {self.command} : {self.message}."


@dataclass(frozen=True)
class CheckResult:
    qubit_count: Optional[int]
    violations: Tuple[Violation, ...] = ()
    input_qubits: FrozenSet[int] = frozenset()
    output_qubits: FrozenSet[int] = frozenset()

    @property
    def ok(self) -> bool:
        return not self.violations

    def unwrap(self) -> int:
        """Return the qubit count or raise ``WellFormednessViolation``."""
        if not self.ok:
            raise WellFormednessViolation(self.violations)
        return self.qubit_count


def _scan_preparations(preparations) -> Tuple[Set[int], Set[int], List[Violation]]:
    prepared: Set[int] = set()
    inputs: Set[int] = set()
    violations: List[Violation] = []
    for prep in preparations:
        if isinstance(prep, INPUT_PREPARATION_TYPES):
            is_input = True
        elif isinstance(prep, InitNonInput):
            is_input = False
        else:
            raise TypeError(f"Unsupported preparation {prep!r}.")
        for q in prep.targets:
            if q in prepared:
                violations.append(Violation(
                    "D4", None, f"Invalid Program : qubit {q} is prepared more than once ({prep})", (q,)
                ))
                continue
            prepared.add(q)
            if is_input:
                inputs.add(q)
    return prepared, inputs, violations


def _check_command(cmd: Command, prepared: Set[int], measured: Set[int]) -> List[Violation]:
    if not isinstance(cmd, COMMAND_TYPES):
        raise TypeError(f"Unsupported command {cmd!r}.")
    found: List[Violation] = []
    for q in dict.fromkeys(cmd.targets):
        if q not in prepared:
            found.append(Violation("D2", cmd, f"Invalid use of unprepared, non-input qubit {q}", (q,)))
        if q in measured:
            found.append(Violation("D1", cmd, f"Invalid use of already measured qubit {q}", (q,)))
    for q in dict.fromkeys(cmd.dependencies):
        if q not in measured:
            found.append(Violation("D0", cmd, f"Command depends on the outcome of unmeasured qubit {q}", (q,)))
    return found


def _check_contiguous(prepared: Set[int]) -> List[Violation]:
    count = len(prepared)
    missing = [k for k in range(count) if k not in prepared]
    if not missing:
        return []
    extra = sorted(q for q in prepared if q >= count)
    message = (
        f"Invalid Program : expected qubits to be integers 0 through {count - 1}; "
        f"missing {', '.join(map(str, missing))}"
    )
    if extra:
        message += f"; unexpected {', '.join(map(str, extra))}"
    return [Violation("D4", None, message, tuple(missing))]


def check(program: Program) -> CheckResult:
    """Check ``program`` against D0-D4.

    All violations found in a single pass are collected. On success the
    result carries the qubit count; on failure ``qubit_count`` is ``None``.
    """
    prepared, inputs, violations = _scan_preparations(program.preparations)
    measured: Set[int] = set()
    for cmd in program.commands:
        violations.extend(_check_command(cmd, prepared, measured))
        if isinstance(cmd, Measure):
            measured.add(cmd.qubit)
    violations.extend(_check_contiguous(prepared))

    outputs = frozenset(prepared - measured)
    if violations:
        for v in violations:
            logger.warning("%s", v)
        return CheckResult(None, tuple(violations), frozenset(inputs), outputs)
    return CheckResult(len(prepared), (), frozenset(inputs), outputs)


def well_formed(program: Program) -> int:
    """Return the qubit count of ``program``, raising on any violation."""
    return check(program).unwrap()


def get_output_qubits(program: Program) -> FrozenSet[int]:
    """Qubits that are prepared and never measured (D3)."""
    return check(program).output_qubits


def count_qubits(program: Program) -> int:
    """Number of distinct qubit identifiers prepared by ``program``."""
    qubits: Set[int] = set()
    for prep in program.preparations:
        qubits.update(prep.targets)
    return len(qubits)
