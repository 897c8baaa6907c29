from __future__ import annotations

import math
from functools import reduce
from typing import Iterable, List, Mapping, Optional, Sequence

import numpy as np

from .config import DEFAULT_EPSILON
from .errors import NumericConsistencyError
from .types import (
    Init,
    Init0,
    Init1,
    InitMinus,
    InitNonInput,
    InitPlus,
    Preparation,
)

R2O2 = 1.0 / math.sqrt(2.0)

ZERO_STATE = np.array([1.0, 0.0], dtype=np.complex128)
ONE_STATE = np.array([0.0, 1.0], dtype=np.complex128)
PLUS_STATE = np.array([R2O2, R2O2], dtype=np.complex128)
MINUS_STATE = np.array([R2O2, -R2O2], dtype=np.complex128)

# Rows are the basis kets for outcome 0 and outcome 1.
COMPUTATIONAL_BASIS = np.eye(2, dtype=np.complex128)


def angle_state(angle: float) -> np.ndarray:
    """``|+_angle> = (|0> + e^{i angle}|1>) / sqrt(2)``."""
    return np.array([R2O2, R2O2 * np.exp(1j * angle)], dtype=np.complex128)


def equatorial_basis(angle: float) -> np.ndarray:
    """Measurement basis ``{|+_angle>, |-_angle>}`` as rows."""
    phase = np.exp(1j * angle)
    return np.array([[R2O2, R2O2 * phase], [R2O2, -R2O2 * phase]], dtype=np.complex128)


def signal_parity(signals: Iterable[int], outcomes: Mapping[int, int]) -> int:
    """XOR of the recorded outcomes of ``signals``."""
    parity = 0
    for q in signals:
        parity ^= outcomes[q]
    return parity


def effective_angle(angle: float, s: int, t: int) -> float:
    """Measurement angle after signal shifting: ``(-1)^s * angle + t * pi``."""
    return (-angle if s else angle) + (math.pi if t else 0.0)


def preparation_vectors(preparations: Sequence[Preparation], num_qubits: int) -> List[np.ndarray]:
    """Per-qubit initial vectors, indexed by qubit."""
    states: List[Optional[np.ndarray]] = [None] * num_qubits

    def put(qubit: int, vector: np.ndarray) -> None:
        if not 0 <= qubit < num_qubits:
            raise ValueError(f"Qubit {qubit} is out of range for {num_qubits} qubits.")
        states[qubit] = vector

    for p in preparations:
        if isinstance(p, Init):
            put(p.qubit, angle_state(p.angle))
        elif isinstance(p, Init0):
            put(p.qubit, ZERO_STATE)
        elif isinstance(p, Init1):
            put(p.qubit, ONE_STATE)
        elif isinstance(p, InitPlus):
            put(p.qubit, PLUS_STATE)
        elif isinstance(p, InitMinus):
            put(p.qubit, MINUS_STATE)
        elif isinstance(p, InitNonInput):
            # Non-input qubits are all initialized to |+>
            for q in p.qubits:
                put(q, PLUS_STATE)
        else:
            raise TypeError(f"Unsupported preparation {p!r}.")

    missing = [q for q, v in enumerate(states) if v is None]
    if missing:
        raise ValueError(f"Qubits {missing} have no preparation.")
    return states


def tensor_product(vectors: Sequence[np.ndarray]) -> np.ndarray:
    """Kronecker product in the given order; qubit 0 is the most significant factor."""
    return reduce(np.kron, vectors, np.ones(1, dtype=np.complex128))


class _BaseBackend:
    """Abstract base class for a simulation backend."""

    def __init__(self, num_qubits: int):
        self.num_qubits = num_qubits

    def entangle(self, left: int, right: int):
        raise NotImplementedError

    def apply_x(self, qubit: int):
        raise NotImplementedError

    def apply_z(self, qubit: int):
        raise NotImplementedError

    def probabilities(self, qubit: int, basis: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def collapse(self, qubit: int, basis: np.ndarray, outcome: int) -> float:
        raise NotImplementedError

    def copy(self) -> "_BaseBackend":
        raise NotImplementedError

    def get_state(self):
        raise NotImplementedError


class StateVectorBackend(_BaseBackend):
    """Dense state vector over ``num_qubits`` qubits, held as an ``(2,)*n`` tensor."""

    def __init__(self, num_qubits: int, state: Optional[np.ndarray] = None,
                 epsilon: float = DEFAULT_EPSILON):
        super().__init__(num_qubits)
        self.epsilon = epsilon
        if state is None:
            state = tensor_product([ZERO_STATE] * num_qubits)
        state = np.asarray(state, dtype=np.complex128)
        if state.size != 1 << num_qubits:
            raise ValueError(
                f"State has {state.size} amplitudes; expected {1 << num_qubits} for {num_qubits} qubits."
            )
        self._state = state.reshape((2,) * num_qubits).copy()

    def _validate_qubit_index(self, *indices):
        for index in indices:
            if not 0 <= index < self.num_qubits:
                raise ValueError(f"Qubit {index} is out of range for {self.num_qubits} qubits.")

    def _axis(self, qubit: int, value: int):
        self._validate_qubit_index(qubit)
        idx = [slice(None)] * self.num_qubits
        idx[qubit] = value
        return tuple(idx)

    def entangle(self, left: int, right: int):
        """Controlled-Z: negate the amplitudes where both qubits are 1."""
        if left == right:
            raise ValueError("Left and right qubits cannot be the same.")
        self._validate_qubit_index(left, right)
        idx = [slice(None)] * self.num_qubits
        idx[left] = 1
        idx[right] = 1
        self._state[tuple(idx)] *= -1

    def apply_x(self, qubit: int):
        self._validate_qubit_index(qubit)
        self._state = np.ascontiguousarray(np.flip(self._state, axis=qubit))

    def apply_z(self, qubit: int):
        self._state[self._axis(qubit, 1)] *= -1

    def _components(self, qubit: int, basis: np.ndarray) -> List[np.ndarray]:
        a0 = self._state[self._axis(qubit, 0)]
        a1 = self._state[self._axis(qubit, 1)]
        return [np.conj(b[0]) * a0 + np.conj(b[1]) * a1 for b in basis]

    def probabilities(self, qubit: int, basis: np.ndarray) -> np.ndarray:
        """Born-rule probabilities of both outcomes of measuring ``qubit`` in ``basis``.

        Raises:
            NumericConsistencyError: If the two probabilities do not sum to 1.
        """
        probs = np.array([np.vdot(c, c).real for c in self._components(qubit, basis)])
        total = float(probs.sum())
        if abs(total - 1.0) > self.epsilon:
            raise NumericConsistencyError(
                f"Outcome probabilities for qubit {qubit} sum to {total!r}; expected 1 "
                f"within {self.epsilon}."
            )
        return probs

    def collapse(self, qubit: int, basis: np.ndarray, outcome: int) -> float:
        """Project ``qubit`` onto basis vector ``outcome`` and renormalise.

        Returns the probability of the outcome before collapse.
        """
        if outcome not in (0, 1):
            raise ValueError(f"Outcome must be 0 or 1, got {outcome!r}.")
        component = self._components(qubit, basis)[outcome]
        prob = float(np.vdot(component, component).real)
        if prob <= 0.0:
            raise NumericConsistencyError(
                f"Cannot collapse qubit {qubit} onto outcome {outcome} with probability {prob!r}."
            )
        component = component / math.sqrt(prob)
        ket = basis[outcome]
        collapsed = np.empty_like(self._state)
        collapsed[self._axis(qubit, 0)] = ket[0] * component
        collapsed[self._axis(qubit, 1)] = ket[1] * component

        norm = float(np.vdot(collapsed, collapsed).real)
        if abs(norm - 1.0) > self.epsilon:
            raise NumericConsistencyError(
                f"State norm after measuring qubit {qubit} is {norm!r}; expected 1 within {self.epsilon}."
            )
        self._state = collapsed / math.sqrt(norm)
        return prob

    def copy(self) -> "StateVectorBackend":
        clone = StateVectorBackend.__new__(StateVectorBackend)
        clone.num_qubits = self.num_qubits
        clone.epsilon = self.epsilon
        clone._state = self._state.copy()
        return clone

    def get_state(self) -> np.ndarray:
        return self._state.reshape(-1).copy()


def get_backend(backend_name: str, num_qubits: int, **kwargs) -> _BaseBackend:
    """Factory function to instantiate a simulation backend."""

    supported = {"state_vector": StateVectorBackend}
    if backend_name not in supported:
        raise ValueError(f"Unsupported backend '{backend_name}'. Supported backends are: {list(supported.keys())}")
    return supported[backend_name](num_qubits, **kwargs)
