# mclang/simulator.py

"""
Execution of checked measurement-calculus programs.

Two modes are supported:

    Shots(k)   draw k independent runs, each sampling every measurement
               outcome from the Born rule with an injectable random source.
    Exact()    enumerate every measurement branch and return the full
               probability distribution over outcome tuples.

Outcome tuples list the measured qubits in ascending qubit order.
"""

from __future__ import annotations

import logging
import numbers
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .backends import (
    COMPUTATIONAL_BASIS,
    effective_angle,
    equatorial_basis,
    get_backend,
    preparation_vectors,
    signal_parity,
    tensor_product,
)
from .checker import check
from .config import Settings, get_settings
from .errors import NumericConsistencyError, PreconditionViolation
from .standardize import standardize as standardize_program
from .types import Entangle, Measure, Program, XCorrect, ZCorrect

logger = logging.getLogger(__name__)

# Branches lighter than this are dropped during exact enumeration.
_PRUNE_THRESHOLD = 1e-15


@dataclass(frozen=True)
class Shots:
    count: int

    def __post_init__(self):
        if isinstance(self.count, bool) or not isinstance(self.count, numbers.Integral) or self.count <= 0:
            raise ValueError("Number of shots must be a positive integer.")
        object.__setattr__(self, "count", int(self.count))


@dataclass(frozen=True)
class Exact:
    pass


EXACT = Exact()

Mode = Union[Shots, Exact]
Outcome = Tuple[int, ...]


@dataclass
class ShotsResult:
    qubits: Tuple[int, ...]
    outcomes: List[Outcome] = field(default_factory=list)

    def counts(self) -> Dict[Outcome, int]:
        return dict(Counter(self.outcomes))

    def frequencies(self) -> Dict[Outcome, float]:
        total = len(self.outcomes)
        return {k: v / total for k, v in self.counts().items()}


@dataclass
class Distribution:
    qubits: Tuple[int, ...]
    probabilities: Dict[Outcome, float] = field(default_factory=dict)

    def probability(self, outcome: Sequence[int]) -> float:
        return self.probabilities.get(tuple(outcome), 0.0)

    def marginal(self, qubits: Sequence[int]) -> Dict[Outcome, float]:
        """Distribution over a subset of the recorded qubits, in the given order."""
        positions = []
        for q in qubits:
            if q not in self.qubits:
                raise ValueError(f"Qubit {q} is not part of this distribution {self.qubits}.")
            positions.append(self.qubits.index(q))
        result: Dict[Outcome, float] = {}
        for outcome, p in self.probabilities.items():
            key = tuple(outcome[i] for i in positions)
            result[key] = result.get(key, 0.0) + p
        return result

    def total(self) -> float:
        return float(sum(self.probabilities.values()))


@dataclass
class _Branch:
    weight: float
    backend: object
    outcomes: Dict[int, int]


class Simulator:
    """Runs one well-formed program in shot or exact mode.

    The program is checked on construction; a rejected program raises
    ``PreconditionViolation`` before any state is allocated.
    """

    def __init__(self, program: Program, backend: str = "state_vector",
                 settings: Optional[Settings] = None, readout_outputs: bool = False,
                 standardize: bool = False):
        self.settings = settings if settings is not None else get_settings()
        result = check(program)
        if not result.ok:
            raise PreconditionViolation(
                f"Cannot simulate a program that is not well formed ({len(result.violations)} violation(s)).",
                result.violations,
            )
        if result.qubit_count > self.settings.max_qubits:
            raise PreconditionViolation(
                f"Program uses {result.qubit_count} qubits; the simulator is limited to "
                f"{self.settings.max_qubits} (MCLANG_MAX_QUBITS)."
            )
        self.program = standardize_program(program) if standardize else program
        self.backend_name = backend
        self.num_qubits = result.qubit_count
        self.readout_outputs = readout_outputs
        self.output_qubits = tuple(sorted(result.output_qubits))
        measured = {c.qubit for c in self.program.commands if isinstance(c, Measure)}
        if readout_outputs:
            measured.update(self.output_qubits)
        self.qubits = tuple(sorted(measured))

    def _initial_backend(self):
        vectors = preparation_vectors(self.program.preparations, self.num_qubits)
        return get_backend(
            self.backend_name,
            self.num_qubits,
            state=tensor_product(vectors),
            epsilon=self.settings.epsilon,
        )

    @staticmethod
    def _apply(backend, cmd, outcomes: Dict[int, int]) -> None:
        if isinstance(cmd, Entangle):
            backend.entangle(cmd.left, cmd.right)
        elif isinstance(cmd, XCorrect):
            if signal_parity(cmd.signals, outcomes):
                backend.apply_x(cmd.qubit)
        elif isinstance(cmd, ZCorrect):
            if signal_parity(cmd.signals, outcomes):
                backend.apply_z(cmd.qubit)
        else:
            raise TypeError(f"Unsupported command {cmd!r}.")

    @staticmethod
    def _basis(cmd: Measure, outcomes: Dict[int, int]) -> np.ndarray:
        s = signal_parity(cmd.s_domain, outcomes)
        t = signal_parity(cmd.t_domain, outcomes)
        return equatorial_basis(effective_angle(cmd.angle, s, t))

    def _readouts(self):
        if not self.readout_outputs:
            return []
        return [(q, COMPUTATIONAL_BASIS) for q in self.output_qubits]

    def _key(self, outcomes: Dict[int, int]) -> Outcome:
        return tuple(outcomes[q] for q in self.qubits)

    # ------------------------------------------------------------------
    # Shot mode
    # ------------------------------------------------------------------

    def _run_shot(self, initial, rng: np.random.Generator) -> Outcome:
        backend = initial.copy()
        outcomes: Dict[int, int] = {}

        def measure(qubit, basis):
            p0, p1 = backend.probabilities(qubit, basis)
            outcome = 0 if rng.random() < p0 / (p0 + p1) else 1
            backend.collapse(qubit, basis, outcome)
            outcomes[qubit] = outcome

        for cmd in self.program.commands:
            if isinstance(cmd, Measure):
                measure(cmd.qubit, self._basis(cmd, outcomes))
            else:
                self._apply(backend, cmd, outcomes)
        for qubit, basis in self._readouts():
            measure(qubit, basis)
        return self._key(outcomes)

    def sample(self, shots: int, rng=None) -> ShotsResult:
        """Run ``shots`` independent randomized executions.

        Args:
            shots: Number of runs.
            rng: ``numpy.random.Generator``, integer seed, or ``None`` to use
                the configured seed (``MCLANG_SEED``) or fresh OS entropy.
        """
        mode = Shots(shots)
        if rng is None:
            rng = self.settings.seed
        generator = np.random.default_rng(rng)
        logger.info("Sampling %d shot(s) of a %d-qubit program (%d commands)",
                    mode.count, self.num_qubits, len(self.program.commands))
        initial = self._initial_backend()
        return ShotsResult(self.qubits, [self._run_shot(initial, generator) for _ in range(mode.count)])

    # ------------------------------------------------------------------
    # Exact mode
    # ------------------------------------------------------------------

    def _split(self, branches: List[_Branch], qubit: int, basis_for) -> List[_Branch]:
        children: List[_Branch] = []
        for branch in branches:
            basis = basis_for(branch.outcomes)
            probs = branch.backend.probabilities(qubit, basis)
            live = [k for k in (0, 1) if branch.weight * probs[k] > _PRUNE_THRESHOLD]
            for i, outcome in enumerate(live):
                backend = branch.backend if i == len(live) - 1 else branch.backend.copy()
                p = backend.collapse(qubit, basis, outcome)
                outcomes = dict(branch.outcomes)
                outcomes[qubit] = outcome
                children.append(_Branch(branch.weight * p, backend, outcomes))
        logger.debug("Measured qubit %d: %d branch(es) -> %d", qubit, len(branches), len(children))
        return children

    def exact(self) -> Distribution:
        """Enumerate every measurement branch and return the outcome distribution.

        Raises:
            NumericConsistencyError: If the distribution does not sum to 1.
        """
        logger.info("Computing exact distribution of a %d-qubit program (%d commands)",
                    self.num_qubits, len(self.program.commands))
        branches = [_Branch(1.0, self._initial_backend(), {})]
        for cmd in self.program.commands:
            if isinstance(cmd, Measure):
                branches = self._split(branches, cmd.qubit, lambda o, cmd=cmd: self._basis(cmd, o))
            else:
                for branch in branches:
                    self._apply(branch.backend, cmd, branch.outcomes)
        for qubit, basis in self._readouts():
            branches = self._split(branches, qubit, lambda o, basis=basis: basis)

        probabilities: Dict[Outcome, float] = {}
        for branch in branches:
            key = self._key(branch.outcomes)
            probabilities[key] = probabilities.get(key, 0.0) + branch.weight
        distribution = Distribution(self.qubits, probabilities)
        total = distribution.total()
        if abs(total - 1.0) > self.settings.epsilon:
            raise NumericConsistencyError(
                f"Exact distribution sums to {total!r}; expected 1 within {self.settings.epsilon}."
            )
        return distribution

    def run(self, mode: Mode = EXACT, rng=None) -> Union[ShotsResult, Distribution]:
        if isinstance(mode, Shots):
            return self.sample(mode.count, rng=rng)
        if isinstance(mode, Exact):
            return self.exact()
        raise PreconditionViolation(f"Unsupported evaluation mode {mode!r}; use Shots(k) or Exact().")


def evaluate(program: Program, mode: Mode = EXACT, rng=None, backend: str = "state_vector",
             settings: Optional[Settings] = None, readout_outputs: bool = False,
             standardize: bool = False) -> Union[ShotsResult, Distribution]:
    """Check and execute ``program``.

    Args:
        program: The program to run.
        mode: ``Shots(k)`` for sampled runs or ``Exact()`` / ``EXACT`` for
            the full outcome distribution.
        rng: Random source for shot mode (generator or seed).
        backend: Simulation backend name.
        settings: Overrides the environment-derived settings.
        readout_outputs: Also measure the output qubits in the computational
            basis once all commands have run.
        standardize: Standardize the program before running it.

    Returns:
        ShotsResult or Distribution, depending on ``mode``.

    Raises:
        PreconditionViolation: If the program is not well formed, is too
            large, or ``mode`` is not a supported mode.
    """
    if not isinstance(mode, (Shots, Exact)):
        raise PreconditionViolation(f"Unsupported evaluation mode {mode!r}; use Shots(k) or Exact().")
    sim = Simulator(program, backend=backend, settings=settings,
                    readout_outputs=readout_outputs, standardize=standardize)
    return sim.run(mode, rng=rng)
