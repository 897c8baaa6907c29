# Unit tests for the mclang program model.
import unittest
import sys
import os

# Add the parent directory to the path to allow importing 'mclang'
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import mclang
from mclang import Entangle, Init, InitNonInput, InitPlus, Measure, Program, XCorrect, ZCorrect


class TestProgramModel(unittest.TestCase):

    def test_entangle_rejects_same_qubit(self):
        with self.assertRaises(ValueError) as cm:
            Entangle(1, 1)
        self.assertEqual(str(cm.exception), "Left and right qubits cannot be the same.")

    def test_qubits_must_be_non_negative_integers(self):
        with self.assertRaises(ValueError):
            Measure(-1, 0.0)
        with self.assertRaises(ValueError):
            XCorrect(1.5, [0])
        with self.assertRaises(ValueError):
            InitPlus(True)
        with self.assertRaises(ValueError):
            ZCorrect(2, [0, -3])

    def test_signal_sets_are_tuples(self):
        m = Measure(2, 0.5, [0], [1])
        self.assertEqual(m.s_domain, (0,))
        self.assertEqual(m.t_domain, (1,))
        self.assertEqual(m.dependencies, (0, 1))
        self.assertEqual(m.targets, (2,))
        self.assertEqual(XCorrect(3, [1, 2]).dependencies, (1, 2))

    def test_non_input_batch_targets(self):
        self.assertEqual(InitNonInput([3, 4]).targets, (3, 4))
        with self.assertRaises(TypeError):
            InitNonInput(3)

    def test_program_accepts_lists_and_concatenates(self):
        left = Program([InitPlus(0)], [])
        right = Program([InitNonInput([1])], [Entangle(0, 1)])
        self.assertIsInstance(left.preparations, tuple)

        combined = left + right
        self.assertEqual(combined.preparations, (InitPlus(0), InitNonInput((1,))))
        self.assertEqual(combined.commands, (Entangle(0, 1),))

        preps, cmds = combined
        self.assertEqual(len(preps), 2)
        self.assertEqual(len(cmds), 1)

    def test_program_rejects_foreign_entries(self):
        with self.assertRaises(TypeError):
            Program(["Init+[0]"], [])
        with self.assertRaises(TypeError):
            Program([InitPlus(0)], [InitPlus(0)])

    def test_diagnostic_strings(self):
        self.assertEqual(str(Entangle(0, 1)), "E[0, 1]")
        self.assertEqual(str(Measure(1, 0.0, [0])), "M[1, 0.00000, [0], []]")
        self.assertEqual(str(XCorrect(2, [1])), "X[2, [1]]")
        self.assertEqual(str(InitPlus(0)), "Init+[0]")
        self.assertEqual(str(Init(0, 0.5)), "Init[0, 0.50000]")

    def test_empty_program(self):
        program = mclang.Program()
        self.assertEqual(program.preparations, ())
        self.assertEqual(program.commands, ())


if __name__ == '__main__':
    unittest.main()
