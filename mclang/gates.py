# Defines the directives available in the mclang pattern model.
# While a pattern kernel is being recorded these functions do not execute
# anything; they register themselves and their arguments in the kernel's context.

from .kernel import _PatternBuildContext
from .pattern import CZ, Cmd, J, PrepList
from .types import Entangle, Measure, XCorrect, ZCorrect


# Gadgets
def cz(left, right):
    _PatternBuildContext.add_directive(CZ(left, right))

def j(angle, qubit_in, qubit_out):
    _PatternBuildContext.add_directive(J(angle, qubit_in, qubit_out))

def h(qubit_in, qubit_out):
    _PatternBuildContext.add_directive(J(0.0, qubit_in, qubit_out))

def prep_list(qubits):
    _PatternBuildContext.add_directive(PrepList(qubits))

# Elementary commands
def entangle(left, right):
    _PatternBuildContext.add_directive(Cmd(Entangle(left, right)))

def measure(qubit, angle, s_domain=(), t_domain=()):
    _PatternBuildContext.add_directive(Cmd(Measure(qubit, angle, s_domain, t_domain)))

def x_correct(qubit, signals):
    _PatternBuildContext.add_directive(Cmd(XCorrect(qubit, signals)))

def z_correct(qubit, signals):
    _PatternBuildContext.add_directive(Cmd(ZCorrect(qubit, signals)))
