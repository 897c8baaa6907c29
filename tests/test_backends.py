# Unit tests for the state-vector backend primitives.
import math
import unittest
import sys
import os

import numpy as np

# Add the parent directory to the path to allow importing 'mclang'
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from mclang import Init, Init1, InitNonInput, InitPlus, NumericConsistencyError
from mclang.backends import (
    COMPUTATIONAL_BASIS,
    PLUS_STATE,
    StateVectorBackend,
    effective_angle,
    equatorial_basis,
    get_backend,
    preparation_vectors,
    signal_parity,
    tensor_product,
)


def random_state(num_qubits, seed=7):
    rng = np.random.default_rng(seed)
    size = 1 << num_qubits
    vec = rng.normal(size=size) + 1j * rng.normal(size=size)
    return vec / np.linalg.norm(vec)


class TestBackendHelpers(unittest.TestCase):

    def test_signal_parity(self):
        self.assertEqual(signal_parity([1, 2], {1: 1, 2: 1}), 0)
        self.assertEqual(signal_parity([1, 2], {1: 1, 2: 0}), 1)
        self.assertEqual(signal_parity([], {}), 0)

    def test_effective_angle(self):
        self.assertAlmostEqual(effective_angle(0.3, 0, 0), 0.3)
        self.assertAlmostEqual(effective_angle(0.3, 1, 0), -0.3)
        self.assertAlmostEqual(effective_angle(0.3, 0, 1), 0.3 + math.pi)
        self.assertAlmostEqual(effective_angle(0.3, 1, 1), math.pi - 0.3)

    def test_equatorial_basis_is_orthonormal(self):
        basis = equatorial_basis(0.9)
        np.testing.assert_allclose(basis.conj() @ basis.T, np.eye(2), atol=1e-12)

    def test_preparation_vectors(self):
        preps = [Init1(0), InitNonInput([2, 3]), Init(1, math.pi)]
        vectors = preparation_vectors(preps, 4)
        np.testing.assert_allclose(vectors[0], [0, 1])
        np.testing.assert_allclose(vectors[1], [1 / math.sqrt(2), -1 / math.sqrt(2)], atol=1e-12)
        np.testing.assert_allclose(vectors[2], PLUS_STATE)
        np.testing.assert_allclose(vectors[3], PLUS_STATE)
        with self.assertRaises(ValueError):
            preparation_vectors([InitPlus(0)], 2)

    def test_tensor_product_order(self):
        state = tensor_product([np.array([0, 1]), np.array([1, 0])])
        np.testing.assert_allclose(state, [0, 0, 1, 0])
        np.testing.assert_allclose(tensor_product([]), [1])

    def test_get_backend_validation(self):
        self.assertIsInstance(get_backend("state_vector", 2), StateVectorBackend)
        with self.assertRaises(ValueError) as cm:
            get_backend("density_matrix", 2)
        self.assertIn("Unsupported backend 'density_matrix'", str(cm.exception))
        self.assertIn("['state_vector']", str(cm.exception))


class TestStateVectorBackend(unittest.TestCase):

    def test_default_state_is_all_zero(self):
        backend = StateVectorBackend(2)
        np.testing.assert_allclose(backend.get_state(), [1, 0, 0, 0])

    def test_state_size_checked(self):
        with self.assertRaises(ValueError):
            StateVectorBackend(2, state=np.ones(3))

    def test_entangle_is_self_inverse(self):
        state = random_state(3)
        backend = StateVectorBackend(3, state=state)
        backend.entangle(0, 2)
        self.assertFalse(np.allclose(backend.get_state(), state))
        backend.entangle(0, 2)
        np.testing.assert_allclose(backend.get_state(), state, atol=1e-12)

    def test_entangle_phases(self):
        backend = StateVectorBackend(2, state=np.full(4, 0.5))
        backend.entangle(1, 0)
        np.testing.assert_allclose(backend.get_state(), [0.5, 0.5, 0.5, -0.5])
        with self.assertRaises(ValueError):
            backend.entangle(1, 1)
        with self.assertRaises(ValueError):
            backend.entangle(0, 2)

    def test_pauli_corrections(self):
        backend = StateVectorBackend(2)
        backend.apply_x(0)
        np.testing.assert_allclose(backend.get_state(), [0, 0, 1, 0])
        backend.apply_z(0)
        np.testing.assert_allclose(backend.get_state(), [0, 0, -1, 0])
        backend.apply_z(1)
        np.testing.assert_allclose(backend.get_state(), [0, 0, -1, 0])

    def test_probabilities_and_collapse(self):
        backend = StateVectorBackend(1, state=PLUS_STATE)
        np.testing.assert_allclose(backend.probabilities(0, COMPUTATIONAL_BASIS), [0.5, 0.5])
        np.testing.assert_allclose(backend.probabilities(0, equatorial_basis(0.0)), [1.0, 0.0], atol=1e-12)

        prob = backend.collapse(0, COMPUTATIONAL_BASIS, 1)
        self.assertAlmostEqual(prob, 0.5)
        np.testing.assert_allclose(backend.get_state(), [0, 1])

    def test_collapse_keeps_other_qubits(self):
        minus = np.array([1, -1]) / math.sqrt(2)
        backend = StateVectorBackend(2, state=tensor_product([PLUS_STATE, minus]))
        backend.collapse(0, equatorial_basis(0.0), 0)
        np.testing.assert_allclose(backend.get_state(), tensor_product([PLUS_STATE, minus]), atol=1e-12)

    def test_collapse_onto_impossible_outcome(self):
        backend = StateVectorBackend(1)
        with self.assertRaises(NumericConsistencyError):
            backend.collapse(0, COMPUTATIONAL_BASIS, 1)
        with self.assertRaises(ValueError):
            backend.collapse(0, COMPUTATIONAL_BASIS, 2)

    def test_unnormalised_state_is_detected(self):
        backend = StateVectorBackend(1, state=np.array([1.0, 1.0]))
        with self.assertRaises(NumericConsistencyError):
            backend.probabilities(0, COMPUTATIONAL_BASIS)

    def test_copy_is_independent(self):
        backend = StateVectorBackend(1, state=PLUS_STATE)
        clone = backend.copy()
        clone.apply_z(0)
        np.testing.assert_allclose(backend.get_state(), PLUS_STATE)
        np.testing.assert_allclose(clone.get_state(), [PLUS_STATE[0], -PLUS_STATE[1]])


if __name__ == '__main__':
    unittest.main()
