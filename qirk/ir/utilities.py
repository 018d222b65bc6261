from typing import Iterable, Mapping, Sequence, Tuple, Optional
import numpy as np

from ..util.log import get_logger
logger = get_logger(__name__)


class QirkError(Exception):
    """Base class of every error raised by an IR transformation."""


class InitError(QirkError, ValueError):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)


class RemappingError(QirkError, KeyError):
    """A qubit mapping does not cover every qubit an operation involves."""

    def __init__(self, qubit: int, message: Optional[str] = None):
        self.qubit = qubit
        if message is None:
            message = f"Qubit {qubit} is not part of the qubit mapping"
        super().__init__(message)

    def __str__(self):
        # KeyError would otherwise wrap the message in quotes
        return self.args[0]


class SubstitutionError(QirkError):
    """A symbolic parameter references a name the resolver cannot provide."""

    def __init__(self, symbol: str, message: Optional[str] = None, location: Optional[str] = None):
        self.symbol = symbol
        self.location = location
        if message is None:
            message = f"Symbol '{symbol}' could not be resolved"
        if location is not None:
            message = f"{message} (in {location})"
        super().__init__(message)


class DecompositionError(QirkError):
    """The qubit count of an operation lies outside the domain of its decomposition."""


class MatrixEvaluationError(QirkError):
    """No numeric unitary matrix can be built for an operation."""


def remap_index(index: int, mapping: Mapping[int, int]) -> int:
    try:
        return mapping[index]
    except KeyError:
        raise RemappingError(index) from None


def remap_indices(indices: Iterable[int], mapping: Mapping[int, int]) -> Tuple[int, ...]:
    """Apply a qubit mapping to an ordered collection of qubit indices.

    The mapping has to be total over ``indices``; the first index (in the
    given order) missing from it raises a ``RemappingError``. Order is kept.
    """
    return tuple(remap_index(index, mapping) for index in indices)


def check_mapping_total(involved: Iterable[int], mapping: Mapping[int, int]) -> None:
    """Raise ``RemappingError`` for the smallest involved qubit absent from ``mapping``."""
    missing = sorted(q for q in involved if q not in mapping)
    if missing:
        logger.debug(f"Mapping {dict(mapping)} misses qubits {missing}")
        raise RemappingError(missing[0])


def bit_reversal_permutation(num_qubits: int) -> np.ndarray:
    """Index array r with r[j] = integer of the bit-reversed ``num_qubits``-bit string of j."""
    if num_qubits == 0:
        return np.zeros(1, dtype=int)
    return np.array(
        [int(format(j, f"0{num_qubits}b")[::-1], 2) for j in range(2 ** num_qubits)],
        dtype=int,
    )


def embed_unitary(matrix: np.ndarray, positions: Sequence[int], num_qubits: int) -> np.ndarray:
    """Lift a k-qubit matrix acting on ``positions`` into the full ``num_qubits`` space.

    Position 0 is the most significant tensor factor, both for ``positions``
    inside ``matrix`` and for the returned ``2**num_qubits`` square matrix.
    """
    positions = list(positions)
    k = len(positions)
    if matrix.shape != (2 ** k, 2 ** k):
        raise ValueError(f"Expected a {2 ** k}x{2 ** k} matrix for {k} qubits, got {matrix.shape}")
    if len(set(positions)) != k or any(not 0 <= p < num_qubits for p in positions):
        raise ValueError(f"Invalid qubit positions {positions} for {num_qubits} qubits")

    rest = [p for p in range(num_qubits) if p not in positions]
    full = np.kron(matrix, np.eye(2 ** len(rest), dtype=complex))
    # axes of `full` are ordered positions + rest, move them back to 0..n-1
    order = positions + rest
    inverse = list(np.argsort(order))
    tensor = full.reshape([2] * (2 * num_qubits))
    tensor = tensor.transpose(inverse + [num_qubits + i for i in inverse])
    return tensor.reshape(2 ** num_qubits, 2 ** num_qubits)
