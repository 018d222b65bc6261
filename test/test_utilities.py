import numpy as np
import pytest

from qirk.ir.utilities import (
    QirkError,
    InitError,
    RemappingError,
    SubstitutionError,
    bit_reversal_permutation,
    check_mapping_total,
    embed_unitary,
    remap_index,
    remap_indices,
)

X = np.array([[0, 1], [1, 0]], dtype=complex)
I2 = np.eye(2, dtype=complex)
CNOT = np.array(
    [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]], dtype=complex
)


def test_error_hierarchy():
    assert issubclass(InitError, ValueError)
    assert issubclass(RemappingError, KeyError)
    for error in (InitError, RemappingError, SubstitutionError):
        assert issubclass(error, QirkError)


def test_remap_indices_keeps_order():
    assert remap_indices((2, 0, 1), {0: 5, 1: 6, 2: 7}) == (7, 5, 6)
    assert remap_index(3, {3: 0}) == 0


def test_remap_indices_missing():
    with pytest.raises(RemappingError) as excinfo:
        remap_indices((0, 1, 2), {2: 0})
    assert excinfo.value.qubit == 0
    assert "Qubit 0" in str(excinfo.value)


def test_check_mapping_total_reports_smallest_missing():
    check_mapping_total({0, 1}, {0: 1, 1: 0, 7: 7})
    with pytest.raises(RemappingError) as excinfo:
        check_mapping_total({4, 1, 3}, {3: 0})
    assert excinfo.value.qubit == 1


def test_substitution_error_location():
    error = SubstitutionError("theta", location="circuits[0]")
    assert error.symbol == "theta"
    assert error.location == "circuits[0]"
    assert str(error) == "Symbol 'theta' could not be resolved (in circuits[0])"


@pytest.mark.parametrize(
    "num_qubits, expected",
    [
        (0, [0]),
        (1, [0, 1]),
        (2, [0, 2, 1, 3]),
        (3, [0, 4, 2, 6, 1, 5, 3, 7]),
    ],
)
def test_bit_reversal_permutation(num_qubits, expected):
    assert list(bit_reversal_permutation(num_qubits)) == expected


@pytest.mark.parametrize(
    "positions, expected",
    [
        ([0], np.kron(X, np.eye(4))),
        ([1], np.kron(np.kron(I2, X), I2)),
        ([2], np.kron(np.eye(4), X)),
    ],
)
def test_embed_single_qubit(positions, expected):
    np.testing.assert_allclose(embed_unitary(X, positions, 3), expected)


def test_embed_reversed_cnot():
    # control on the less significant qubit
    expected = np.array(
        [[1, 0, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0], [0, 1, 0, 0]], dtype=complex
    )
    np.testing.assert_allclose(embed_unitary(CNOT, [1, 0], 2), expected)


def test_embed_non_adjacent_cnot():
    full = embed_unitary(CNOT, [0, 2], 3)
    # |100> -> |101>, |110> -> |111>, lower half untouched
    for source, target in [(0, 0), (1, 1), (2, 2), (3, 3), (4, 5), (5, 4), (6, 7), (7, 6)]:
        column = np.zeros(8)
        column[target] = 1.0
        np.testing.assert_allclose(full[:, source], column)


@pytest.mark.parametrize(
    "matrix, positions, num_qubits",
    [
        (X, [0, 1], 2),
        (CNOT, [0, 0], 2),
        (X, [3], 2),
    ],
    ids=["wrong-shape", "repeated-position", "out-of-range"],
)
def test_embed_invalid(matrix, positions, num_qubits):
    with pytest.raises(ValueError):
        embed_unitary(matrix, positions, num_qubits)
