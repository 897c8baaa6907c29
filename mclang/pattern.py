# mclang/pattern.py

"""
Pattern directives and their lowering into elementary programs.

A gate template is a short sequence of directives:

    PrepList([n, n + 1])      allocate fresh ancillas (non-input, |+>)
    CZ(a, b)                  entangle two qubits
    J(alpha, q_in, q_out)     measurement-based rotation:
                              E(q_in, q_out); M(q_in, -alpha); X(q_out, [q_in])

``parse_pattern`` lowers the directives into a ``Program`` and, by
default, rejects templates whose lowering is not well formed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from .checker import check
from .errors import TemplateCompilationError
from .types import (
    COMMAND_TYPES,
    PREPARATION_TYPES,
    Command,
    Entangle,
    InitNonInput,
    Measure,
    Preparation,
    Program,
    XCorrect,
    _as_qubit,
    _as_qubits,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Prep:
    """Pass an explicit preparation through (typically an input qubit)."""
    preparation: Preparation

    def __post_init__(self):
        if not isinstance(self.preparation, PREPARATION_TYPES):
            raise TypeError(f"Prep expects a preparation, got {self.preparation!r}.")


@dataclass(frozen=True)
class PrepList:
    qubits: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "qubits", _as_qubits(self.qubits))


@dataclass(frozen=True)
class Cmd:
    """Pass an elementary command through unchanged."""
    command: Command

    def __post_init__(self):
        if not isinstance(self.command, COMMAND_TYPES):
            raise TypeError(f"Cmd expects a command, got {self.command!r}.")


@dataclass(frozen=True)
class CZ:
    left: int
    right: int

    def __post_init__(self):
        object.__setattr__(self, "left", _as_qubit(self.left, "left"))
        object.__setattr__(self, "right", _as_qubit(self.right, "right"))


@dataclass(frozen=True)
class J:
    angle: float
    qubit_in: int
    qubit_out: int

    def __post_init__(self):
        object.__setattr__(self, "angle", float(self.angle))
        object.__setattr__(self, "qubit_in", _as_qubit(self.qubit_in, "qubit_in"))
        object.__setattr__(self, "qubit_out", _as_qubit(self.qubit_out, "qubit_out"))


def H(qubit_in: int, qubit_out: int) -> J:
    """Hadamard gadget, ``J(0)``."""
    return J(0.0, qubit_in, qubit_out)


Directive = Union[Prep, PrepList, Cmd, CZ, J]
DIRECTIVE_TYPES = (Prep, PrepList, Cmd, CZ, J)


def _lower(directive, preps: List[Preparation], cmds: List[Command]) -> None:
    if isinstance(directive, Prep):
        preps.append(directive.preparation)
    elif isinstance(directive, PrepList):
        preps.append(InitNonInput(directive.qubits))
    elif isinstance(directive, Cmd):
        cmds.append(directive.command)
    elif isinstance(directive, CZ):
        cmds.append(_entangle(directive, directive.left, directive.right))
    elif isinstance(directive, J):
        cmds.append(_entangle(directive, directive.qubit_in, directive.qubit_out))
        cmds.append(Measure(directive.qubit_in, -directive.angle))
        cmds.append(XCorrect(directive.qubit_out, (directive.qubit_in,)))
    else:
        raise TemplateCompilationError(f"Undefined pattern directive {directive!r}.")


def _entangle(directive, left: int, right: int) -> Entangle:
    try:
        return Entangle(left, right)
    except ValueError as e:
        raise TemplateCompilationError(f"{directive!r}: {e}") from e


def parse_pattern(pattern: Sequence[Directive], validate: bool = True) -> Program:
    """Lower a directive sequence into an elementary program.

    Args:
        pattern: The directives, in execution order.
        validate: Check the lowered program against D0-D4. Disable only for
            fragments that will be concatenated with other programs.

    Returns:
        Program: The lowered ``(preparations, commands)`` pair.

    Raises:
        TemplateCompilationError: If a directive is undefined or the
            lowered program is not well formed.
    """
    preps: List[Preparation] = []
    cmds: List[Command] = []
    for directive in pattern:
        _lower(directive, preps, cmds)
    program = Program(tuple(preps), tuple(cmds))

    if validate:
        result = check(program)
        if not result.ok:
            details = "; ".join(str(v) for v in result.violations)
            raise TemplateCompilationError(f"Pattern lowers to an ill-formed program: {details}")
    logger.debug("Lowered %d directives into %d preparations and %d commands",
                 len(pattern), len(preps), len(cmds))
    return program


def compile_pattern(template, *args, validate: bool = True, **kwargs) -> Program:
    """Compile a directive sequence or a ``PatternKernel`` into a program."""
    from .kernel import PatternKernel

    if isinstance(template, PatternKernel):
        return template.compile(*args, validate=validate, **kwargs)
    if args or kwargs:
        raise TypeError("Arguments are only accepted when compiling a PatternKernel.")
    return parse_pattern(list(template), validate=validate)
