# Unit tests for exact and sampled evaluation.
import math
import unittest
import sys
import os

import numpy as np

# Add the parent directory to the path to allow importing 'mclang'
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import mclang
from mclang import (
    EXACT,
    Distribution,
    Entangle,
    Exact,
    Init0,
    InitNonInput,
    InitPlus,
    Measure,
    PreconditionViolation,
    Program,
    Settings,
    Shots,
    ShotsResult,
    Simulator,
    XCorrect,
    evaluate,
)


def hadamard_gadget(first=InitPlus(0)):
    return Program(
        [first, InitNonInput([1])],
        [Entangle(0, 1), Measure(0, 0.0), XCorrect(1, [0])],
    )


class TestExactMode(unittest.TestCase):

    def test_measured_qubits_only(self):
        dist = evaluate(hadamard_gadget(), EXACT)
        self.assertIsInstance(dist, Distribution)
        self.assertEqual(dist.qubits, (0,))
        self.assertAlmostEqual(dist.probability((0,)), 0.5)
        self.assertAlmostEqual(dist.probability((1,)), 0.5)

    def test_readout_of_outputs(self):
        # H|+> = |0> whatever the first outcome was
        dist = evaluate(hadamard_gadget(), Exact(), readout_outputs=True)
        self.assertEqual(dist.qubits, (0, 1))
        self.assertEqual(set(dist.probabilities), {(0, 0), (1, 0)})
        self.assertAlmostEqual(dist.probability((0, 0)), 0.5)
        self.assertAlmostEqual(dist.probability((1, 0)), 0.5)
        self.assertEqual(dist.probability((1, 1)), 0.0)

        dist = evaluate(hadamard_gadget(Init0(0)), readout_outputs=True)
        marginal = dist.marginal((1,))
        self.assertAlmostEqual(marginal[(0,)], 0.5)
        self.assertAlmostEqual(marginal[(1,)], 0.5)

    def test_signal_dependent_angle(self):
        # M(1) at 0.4 is flipped to -0.4 by the s-signal when qubit 0 reads 1
        program = Program(
            [Init0(0), mclang.Init(1, -0.4)],
            [Measure(0, 0.0), Measure(1, 0.4, [0])],
        )
        dist = evaluate(program)
        self.assertAlmostEqual(dist.probability((1, 0)), 0.5)
        self.assertAlmostEqual(dist.probability((1, 1)), 0.0)
        p = math.cos(0.4) ** 2
        self.assertAlmostEqual(dist.probability((0, 0)), 0.5 * p)
        self.assertAlmostEqual(dist.probability((0, 1)), 0.5 * (1 - p))

    def test_t_signal_shifts_by_pi(self):
        program = Program(
            [Init0(0), InitPlus(1)],
            [Measure(0, 0.0), Measure(1, 0.0, [], [0])],
        )
        dist = evaluate(program)
        self.assertAlmostEqual(dist.probability((0, 0)), 0.5)
        self.assertAlmostEqual(dist.probability((1, 1)), 0.5)

    def test_distribution_sums_to_one(self):
        program = mclang.g2(0, 1, 2, (0, 1)) + Program(
            [InitNonInput([4])], [Entangle(1, 4), Measure(1, 0.7), XCorrect(4, [1])]
        )
        dist = evaluate(program, readout_outputs=True)
        self.assertAlmostEqual(dist.total(), 1.0, delta=1e-9)
        self.assertAlmostEqual(sum(dist.marginal((0, 4)).values()), 1.0, delta=1e-9)

    def test_empty_program(self):
        dist = evaluate(Program())
        self.assertEqual(dist.qubits, ())
        self.assertEqual(dist.probabilities, {(): 1.0})

    def test_marginal_rejects_unknown_qubit(self):
        dist = evaluate(hadamard_gadget())
        with self.assertRaises(ValueError):
            dist.marginal((1,))


class TestShotMode(unittest.TestCase):

    def test_shot_count_and_keys(self):
        result = evaluate(hadamard_gadget(), Shots(50), rng=3, readout_outputs=True)
        self.assertIsInstance(result, ShotsResult)
        self.assertEqual(len(result.outcomes), 50)
        self.assertEqual(result.qubits, (0, 1))
        self.assertTrue(all(outcome[1] == 0 for outcome in result.outcomes))
        self.assertEqual(sum(result.counts().values()), 50)

    def test_seeded_runs_are_reproducible(self):
        program = mclang.g2(0, 1, 2, (1, 0))
        first = evaluate(program, Shots(40), rng=11)
        second = evaluate(program, Shots(40), rng=np.random.default_rng(11))
        self.assertEqual(first.outcomes, second.outcomes)

        settings = Settings(seed=5)
        third = evaluate(program, Shots(40), settings=settings)
        fourth = evaluate(program, Shots(40), settings=settings)
        self.assertEqual(third.outcomes, fourth.outcomes)

    def test_frequencies_converge_to_exact(self):
        program = Program(
            [Init0(0), mclang.Init(1, -0.4)],
            [Measure(0, 0.0), Measure(1, 0.4, [0])],
        )
        exact = evaluate(program)
        sampled = evaluate(program, Shots(4000), rng=1234).frequencies()
        for outcome, p in exact.probabilities.items():
            self.assertAlmostEqual(sampled.get(outcome, 0.0), p, delta=0.04)

    def test_invalid_shot_count(self):
        with self.assertRaises(ValueError):
            Shots(0)
        with self.assertRaises(ValueError):
            Shots(2.5)

    def test_numpy_shot_count(self):
        mode = Shots(np.int64(3))
        self.assertEqual(mode.count, 3)
        self.assertIsInstance(mode.count, int)
        result = evaluate(hadamard_gadget(), mode, rng=0)
        self.assertEqual(len(result.outcomes), 3)


class TestPreconditions(unittest.TestCase):

    def test_rejected_program(self):
        bad = Program([InitPlus(0)], [Measure(1, 0.0)])
        with self.assertRaises(PreconditionViolation) as cm:
            evaluate(bad, EXACT)
        self.assertEqual([v.rule for v in cm.exception.violations], ["D2"])
        with self.assertRaises(PreconditionViolation):
            evaluate(bad, Shots(1))

    def test_qubit_limit(self):
        with self.assertRaises(PreconditionViolation) as cm:
            evaluate(hadamard_gadget(), settings=Settings(max_qubits=1))
        self.assertIn("MCLANG_MAX_QUBITS", str(cm.exception))

    def test_unknown_mode(self):
        with self.assertRaises(PreconditionViolation):
            evaluate(hadamard_gadget(), "exact")
        with self.assertRaises(PreconditionViolation):
            Simulator(hadamard_gadget()).run({"shots": 3})

    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            evaluate(hadamard_gadget(), backend="tensor_network")


if __name__ == '__main__':
    unittest.main()
