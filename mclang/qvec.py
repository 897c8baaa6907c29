# Defines the qubit register abstractions used inside a pattern kernel.

from .pattern import Prep, PrepList
from .types import Init, Init0, Init1, InitMinus, InitPlus

_NAMED_STATES = {
    "0": Init0,
    "1": Init1,
    "+": InitPlus,
    "-": InitMinus,
}


def make_preparation(qubit, state):
    """Build the input preparation for ``state`` ("0", "1", "+", "-" or an angle)."""
    if isinstance(state, str):
        if state not in _NAMED_STATES:
            raise ValueError(
                f"Unknown input state '{state}'. Use one of {list(_NAMED_STATES)} or an angle."
            )
        return _NAMED_STATES[state](qubit)
    return Init(qubit, state)


class qvec:
    """
    A register of input qubits.

    Inside a pattern kernel the register takes the next free qubit indices
    and declares each of them with an input preparation.
    """
    _current_kernel_context = None

    def __init__(self, size: int, state="+"):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("qvec size must be a positive integer.")
        if isinstance(state, str) and state not in _NAMED_STATES:
            raise ValueError(
                f"Unknown input state '{state}'. Use one of {list(_NAMED_STATES)} or an angle."
            )
        self.size = size
        self.state = state
        self.qubits = list(range(size))

        # Register this qvec with the kernel context if one is active
        if qvec._current_kernel_context:
            qvec._current_kernel_context.register_qvec(self)

    def directives(self):
        return [Prep(make_preparation(q, self.state)) for q in self.qubits]

    def __getitem__(self, key):
        return self.qubits[key]

    def __len__(self):
        return self.size

    def __iter__(self):
        return iter(self.qubits)


class ancillas(qvec):
    """A register of fresh non-input qubits, prepared together in ``|+>``."""

    def __init__(self, size: int):
        super().__init__(size, state="+")

    def directives(self):
        return [PrepList(self.qubits)]
