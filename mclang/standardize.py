# mclang/standardize.py

"""
Pattern standardization.

Rewrites a well-formed program into the canonical order

    entanglements ; measurements ; corrections

using the commutation rules of the measurement calculus (listed in
execution order):

    X_i^s ; E_ij      ->  E_ij ; X_i^s ; Z_j^s
    Z_i^s ; E_ij      ->  E_ij ; Z_i^s
    X_i^r ; M_i[s,t]  ->  M_i[s + r, t]
    Z_i^r ; M_i[s,t]  ->  M_i[s, t + r]

Commands on disjoint qubits commute. Signal sets are combined modulo 2.
Measurements keep their relative order, so outcome labels and their
probabilities are unchanged.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Tuple

from .checker import well_formed
from .types import (
    CORRECTION_TYPES,
    Command,
    Entangle,
    Measure,
    Program,
    XCorrect,
    ZCorrect,
)

logger = logging.getLogger(__name__)


def merge_signals(*domains: Iterable[int]) -> Tuple[int, ...]:
    """Combine signal sets by parity; a qubit named an even number of times drops out."""
    parity: Dict[int, int] = {}
    for domain in domains:
        for q in domain:
            parity[q] = parity.get(q, 0) ^ 1
    return tuple(q for q, bit in parity.items() if bit)


def _commute_entangle(ent: Entangle, rest: List[Command]) -> List[Command]:
    """Move ``ent`` in front of ``rest``, emitting the Z corrections it induces."""
    out: List[Command] = []
    for cmd in rest:
        out.append(cmd)
        if isinstance(cmd, XCorrect) and cmd.qubit in ent.targets:
            other = ent.right if cmd.qubit == ent.left else ent.left
            out.append(ZCorrect(other, cmd.signals))
    return out


def _pull_entanglements(commands: Iterable[Command]) -> Tuple[List[Entangle], List[Command]]:
    entangles: List[Entangle] = []
    rest: List[Command] = []
    for cmd in commands:
        if isinstance(cmd, Entangle):
            rest = _commute_entangle(cmd, rest)
            entangles.append(cmd)
        elif isinstance(cmd, (Measure,) + CORRECTION_TYPES):
            rest.append(cmd)
        else:
            raise TypeError(f"Unsupported command {cmd!r}.")
    return entangles, rest


def _push_corrections(commands: Iterable[Command]) -> Tuple[List[Measure], List[Command]]:
    measures: List[Measure] = []
    pending: List[Command] = []
    for cmd in commands:
        if isinstance(cmd, Measure):
            s_domain, t_domain = cmd.s_domain, cmd.t_domain
            kept: List[Command] = []
            for c in pending:
                if c.qubit != cmd.qubit:
                    kept.append(c)
                elif isinstance(c, XCorrect):
                    s_domain = merge_signals(s_domain, c.signals)
                else:
                    t_domain = merge_signals(t_domain, c.signals)
            pending = kept
            measures.append(Measure(cmd.qubit, cmd.angle, s_domain, t_domain))
        elif isinstance(cmd, CORRECTION_TYPES):
            pending.append(cmd)
        else:
            raise TypeError(f"Unexpected command {cmd!r} after entanglements were pulled out.")
    return measures, pending


def standardize(program: Program) -> Program:
    """Return the standard form of ``program``.

    Raises:
        WellFormednessViolation: If ``program`` does not pass the checker.
    """
    well_formed(program)
    entangles, rest = _pull_entanglements(program.commands)
    measures, corrections = _push_corrections(rest)
    commands = tuple(entangles) + tuple(measures) + tuple(corrections)
    logger.debug(
        "Standardized %d commands into %d entanglements, %d measurements, %d corrections",
        len(program.commands), len(entangles), len(measures), len(corrections),
    )
    return Program(program.preparations, commands)


_RANK = {Entangle: 0, Measure: 1, XCorrect: 2, ZCorrect: 2}


def is_standard(program: Program) -> bool:
    """True if every entanglement precedes every measurement, which precedes every correction."""
    last = 0
    for cmd in program.commands:
        rank = _RANK[type(cmd)]
        if rank < last:
            return False
        last = rank
    return True
