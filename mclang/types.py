# mclang/types.py

"""
Program model for the measurement calculus.

A program is a pair of preparations (the initial single-qubit state of each
qubit) and commands (entanglement, measurement and classically controlled
corrections). All variants are immutable so that a checked program can be
shared read-only by the compiler and the simulator.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from typing import Iterable, Tuple

Qubit = int


def _as_qubit(value, name: str = "qubit") -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}.")
    if value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value}.")
    return int(value)


def _as_qubits(values: Iterable, name: str = "qubits") -> Tuple[int, ...]:
    if isinstance(values, numbers.Integral):
        raise TypeError(f"{name} must be a sequence of qubit indices, got {values!r}.")
    return tuple(_as_qubit(v, name) for v in values)


def _join(qubits: Iterable[int]) -> str:
    return ", ".join(str(q) for q in qubits)


# ==============================================================================
#  Preparations
# ==============================================================================

class Preparation:
    """Base class of the closed set of preparation variants."""

    __slots__ = ()

    @property
    def targets(self) -> Tuple[int, ...]:
        raise NotImplementedError


@dataclass(frozen=True)
class _SingleQubitPreparation(Preparation):
    qubit: int

    def __post_init__(self):
        object.__setattr__(self, "qubit", _as_qubit(self.qubit))

    @property
    def targets(self) -> Tuple[int, ...]:
        return (self.qubit,)


@dataclass(frozen=True)
class Init(Preparation):
    """Input qubit prepared at ``angle`` on the equatorial plane."""

    qubit: int
    angle: float

    def __post_init__(self):
        object.__setattr__(self, "qubit", _as_qubit(self.qubit))
        object.__setattr__(self, "angle", float(self.angle))

    @property
    def targets(self) -> Tuple[int, ...]:
        return (self.qubit,)

    def __str__(self) -> str:
        return f"Init[{self.qubit}, {self.angle:.5f}]"


@dataclass(frozen=True)
class Init0(_SingleQubitPreparation):
    def __str__(self) -> str:
        return f"Init0[{self.qubit}]"


@dataclass(frozen=True)
class Init1(_SingleQubitPreparation):
    def __str__(self) -> str:
        return f"Init1[{self.qubit}]"


@dataclass(frozen=True)
class InitPlus(_SingleQubitPreparation):
    def __str__(self) -> str:
        return f"Init+[{self.qubit}]"


@dataclass(frozen=True)
class InitMinus(_SingleQubitPreparation):
    def __str__(self) -> str:
        return f"Init-[{self.qubit}]"


@dataclass(frozen=True)
class InitNonInput(Preparation):
    """Batch of ancillary (non-input) qubits, each prepared in ``|+>``."""

    qubits: Tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "qubits", _as_qubits(self.qubits))

    @property
    def targets(self) -> Tuple[int, ...]:
        return self.qubits

    def __str__(self) -> str:
        return f"InitNonInput[{_join(self.qubits)}]"


PREPARATION_TYPES = (Init, Init0, Init1, InitPlus, InitMinus, InitNonInput)
INPUT_PREPARATION_TYPES = (Init, Init0, Init1, InitPlus, InitMinus)


# ==============================================================================
#  Commands
# ==============================================================================

class Command:
    """Base class of the closed set of command variants."""

    __slots__ = ()

    @property
    def targets(self) -> Tuple[int, ...]:
        """Qubits the command acts on."""
        raise NotImplementedError

    @property
    def dependencies(self) -> Tuple[int, ...]:
        """Qubits whose measurement outcomes the command reads."""
        raise NotImplementedError


@dataclass(frozen=True)
class Entangle(Command):
    left: int
    right: int

    def __post_init__(self):
        object.__setattr__(self, "left", _as_qubit(self.left, "left"))
        object.__setattr__(self, "right", _as_qubit(self.right, "right"))
        if self.left == self.right:
            raise ValueError("Left and right qubits cannot be the same.")

    @property
    def targets(self) -> Tuple[int, ...]:
        return (self.left, self.right)

    @property
    def dependencies(self) -> Tuple[int, ...]:
        return ()

    def __str__(self) -> str:
        return f"E[{self.left}, {self.right}]"


@dataclass(frozen=True)
class Measure(Command):
    """Measure ``qubit`` in the XY-plane at ``angle``.

    The angle is sign-flipped by the parity of ``s_domain`` and shifted by
    pi times the parity of ``t_domain``.
    """

    qubit: int
    angle: float
    s_domain: Tuple[int, ...] = ()
    t_domain: Tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "qubit", _as_qubit(self.qubit))
        object.__setattr__(self, "angle", float(self.angle))
        object.__setattr__(self, "s_domain", _as_qubits(self.s_domain, "s_domain"))
        object.__setattr__(self, "t_domain", _as_qubits(self.t_domain, "t_domain"))

    @property
    def targets(self) -> Tuple[int, ...]:
        return (self.qubit,)

    @property
    def dependencies(self) -> Tuple[int, ...]:
        return self.s_domain + self.t_domain

    def __str__(self) -> str:
        return (
            f"M[{self.qubit}, {self.angle:.5f}, "
            f"[{_join(self.s_domain)}], [{_join(self.t_domain)}]]"
        )


@dataclass(frozen=True)
class _Correction(Command):
    qubit: int
    signals: Tuple[int, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "qubit", _as_qubit(self.qubit))
        object.__setattr__(self, "signals", _as_qubits(self.signals, "signals"))

    @property
    def targets(self) -> Tuple[int, ...]:
        return (self.qubit,)

    @property
    def dependencies(self) -> Tuple[int, ...]:
        return self.signals


@dataclass(frozen=True)
class XCorrect(_Correction):
    def __str__(self) -> str:
        return f"X[{self.qubit}, [{_join(self.signals)}]]"


@dataclass(frozen=True)
class ZCorrect(_Correction):
    def __str__(self) -> str:
        return f"Z[{self.qubit}, [{_join(self.signals)}]]"


COMMAND_TYPES = (Entangle, Measure, XCorrect, ZCorrect)
CORRECTION_TYPES = (XCorrect, ZCorrect)


# ==============================================================================
#  Program
# ==============================================================================

@dataclass(frozen=True)
class Program:
    """An ordered ``(preparations, commands)`` pair."""

    preparations: Tuple[Preparation, ...] = ()
    commands: Tuple[Command, ...] = ()

    def __post_init__(self):
        preps = tuple(self.preparations)
        cmds = tuple(self.commands)
        for p in preps:
            if not isinstance(p, PREPARATION_TYPES):
                raise TypeError(f"Unsupported preparation {p!r}.")
        for c in cmds:
            if not isinstance(c, COMMAND_TYPES):
                raise TypeError(f"Unsupported command {c!r}.")
        object.__setattr__(self, "preparations", preps)
        object.__setattr__(self, "commands", cmds)

    def __add__(self, other: "Program") -> "Program":
        if not isinstance(other, Program):
            return NotImplemented
        return Program(
            self.preparations + other.preparations,
            self.commands + other.commands,
        )

    def __iter__(self):
        return iter((self.preparations, self.commands))

    def __str__(self) -> str:
        return "\n".join(str(x) for x in self.preparations + self.commands)
