from __future__ import annotations

import logging
from typing import List, Optional

from .pattern import DIRECTIVE_TYPES, Directive, Prep, PrepList, parse_pattern
from .qvec import qvec
from .types import Program

logger = logging.getLogger(__name__)


class _PatternBuildContext:
    _active: Optional["_PatternBuildContext"] = None

    def __init__(self) -> None:
        self.directives: List[Directive] = []
        self.qvecs: List[qvec] = []
        self._next_qubit_index = 0

    def register_qvec(self, reg: qvec) -> None:
        reg.qubits = list(range(self._next_qubit_index, self._next_qubit_index + reg.size))
        self._next_qubit_index += reg.size
        self.qvecs.append(reg)
        self.directives.extend(reg.directives())

    def reserve(self, qubits) -> None:
        """Keep later registers clear of explicitly prepared qubit ids."""
        if qubits:
            self._next_qubit_index = max(self._next_qubit_index, max(qubits) + 1)

    @classmethod
    def add_directive(cls, directive: Directive) -> None:
        if cls._active is None:
            raise RuntimeError("No active pattern context. Directive called outside @mclang.pattern.")
        if not isinstance(directive, DIRECTIVE_TYPES):
            raise TypeError(f"Unsupported pattern directive {directive!r}.")
        if isinstance(directive, PrepList):
            cls._active.reserve(directive.qubits)
        elif isinstance(directive, Prep):
            cls._active.reserve(directive.preparation.targets)
        cls._active.directives.append(directive)


class PatternKernel:
    def __init__(self, func):
        self._func = func
        self.name = func.__name__
        self.num_qubits = 0

    def build(self, *args, **kwargs) -> _PatternBuildContext:
        ctx = _PatternBuildContext()
        _PatternBuildContext._active = ctx
        qvec._current_kernel_context = ctx
        try:
            self._func(*args, **kwargs)
        finally:
            qvec._current_kernel_context = None
            _PatternBuildContext._active = None
        self.num_qubits = ctx._next_qubit_index
        return ctx

    def directives(self, *args, **kwargs) -> List[Directive]:
        return list(self.build(*args, **kwargs).directives)

    def compile(self, *args, validate: bool = True, **kwargs) -> Program:
        """Record the kernel body and lower it into an elementary program."""
        ctx = self.build(*args, **kwargs)
        logger.debug("Compiling pattern '%s' (%d directives)", self.name, len(ctx.directives))
        return parse_pattern(ctx.directives, validate=validate)

    def evaluate(self, *args, mode=None, rng=None, settings=None,
                 readout_outputs: bool = False, standardize: bool = False, **kwargs):
        from .simulator import EXACT, evaluate

        program = self.compile(*args, **kwargs)
        return evaluate(
            program,
            EXACT if mode is None else mode,
            rng=rng,
            settings=settings,
            readout_outputs=readout_outputs,
            standardize=standardize,
        )


def pattern(func):
    return PatternKernel(func)
