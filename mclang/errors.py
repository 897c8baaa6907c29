# mclang/errors.py

"""
Exception classes raised by the checker, the pattern compiler and the
simulation engine.
"""

from typing import Sequence


class MclangError(Exception):
    """Base class for all mclang errors."""
    pass


class WellFormednessViolation(MclangError):
    """Raised when a program breaks one of the D0-D4 conditions."""

    def __init__(self, violations: Sequence, message: str = "Program is not well formed"):
        self.violations = tuple(violations)
        details = "; ".join(str(v) for v in self.violations)
        super().__init__(f"{message}: {details}" if details else message)


class TemplateCompilationError(MclangError):
    """Raised when a gate template lowers to an invalid program or hits an
    unsupported directive. Indicates a defect in the template itself."""
    pass


class NumericConsistencyError(MclangError):
    """Raised when probability mass drifts away from 1 during simulation."""
    pass


class PreconditionViolation(MclangError):
    """Raised when the simulator is handed a program it must not run."""

    def __init__(self, message: str, violations: Sequence = ()):
        self.violations = tuple(violations)
        super().__init__(message)
