# Gate templates built from pattern directives.

import math
import numbers

from .errors import TemplateCompilationError
from .pattern import CZ, J, Prep, PrepList, parse_pattern
from .types import InitPlus

# (a, b) -> (alpha, beta) for the two J rotations of the g2 gadget.
_G2_ANGLES = {
    (0, 0): (math.pi, math.pi),
    (0, 1): (math.pi, 0.0),
    (1, 0): (0.0, math.pi),
    (1, 1): (0.0, 0.0),
}


def g2_angles(a, b):
    """Rotation angles of the g2 gadget for the boolean pair ``(a, b)``."""
    if not all(isinstance(v, numbers.Integral) for v in (a, b)) or (int(a), int(b)) not in _G2_ANGLES:
        raise TemplateCompilationError(
            f"g2 is only defined for bits in {{0, 1}}; got ({a!r}, {b!r})."
        )
    return _G2_ANGLES[(int(a), int(b))]


def g2_directives(q1, q2, next_qubit, bits, prepare_operands=True):
    """
    Directive sequence of the two-qubit g2 gadget of Grover's diffusion step.

    Two fresh ancillas ``next_qubit`` and ``next_qubit + 1`` are entangled,
    rotated onto the operands ``q1`` and ``q2`` through J gadgets at the
    angles selected by ``bits``, and the operands are finally entangled.
    """
    alpha, beta = g2_angles(*bits)
    n = next_qubit
    directives = []
    if prepare_operands:
        directives += [Prep(InitPlus(q1)), Prep(InitPlus(q2))]
    directives += [
        PrepList([n, n + 1]),
        CZ(n, n + 1),
        J(alpha, n, q1),
        J(beta, n + 1, q2),
        CZ(q1, q2),
    ]
    return directives


def g2(q1, q2, next_qubit, bits, prepare_operands=True):
    """Lower the g2 gadget into a program.

    With ``prepare_operands=False`` the result is an unvalidated fragment
    whose operands must be prepared by the program it is concatenated with.
    """
    return parse_pattern(
        g2_directives(q1, q2, next_qubit, bits, prepare_operands),
        validate=prepare_operands,
    )
