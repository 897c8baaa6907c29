# mclang Main Entry Point
# This file makes the `mclang` directory a Python package and exposes the public API.

"""
mclang

A measurement-calculus language for measurement-based quantum computing:
program model, well-formedness checker, pattern compiler and state-vector
simulator.
"""

# Public API Imports
from .types import (
    Init,
    Init0,
    Init1,
    InitPlus,
    InitMinus,
    InitNonInput,
    Entangle,
    Measure,
    XCorrect,
    ZCorrect,
    Program,
)
from .errors import (
    MclangError,
    WellFormednessViolation,
    TemplateCompilationError,
    NumericConsistencyError,
    PreconditionViolation,
)
from .config import Settings, get_settings
from .checker import CheckResult, Violation, check, well_formed, get_output_qubits, count_qubits
from .pattern import Prep, PrepList, Cmd, CZ, J, H, parse_pattern, compile_pattern
from .standardize import standardize, is_standard
from .simulator import Shots, Exact, EXACT, ShotsResult, Distribution, Simulator, evaluate
from .kernel import pattern, PatternKernel
from .qvec import qvec, ancillas
from .gates import (
    cz,
    j,
    h,
    prep_list,
    entangle,
    measure,
    x_correct,
    z_correct,
)
from .algorithms import g2, g2_angles, g2_directives
