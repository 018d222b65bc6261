"""
Pass entry points over single operations and whole circuits.

These are thin functional wrappers around the methods on ``Operation`` and
``Circuit``, convenient for pipelines that map a pass over many values.
"""
from typing import Mapping, Union

import numpy as np

from .operation import Operation, GateOperation, MultiQubitGate, InvolvedQubits
from .quantum import Circuit
from .utilities import DecompositionError, MatrixEvaluationError
from ..util.log import get_logger
logger = get_logger(__name__)

Transformable = Union[Operation, Circuit]


def substitute_parameters(value: Transformable, resolver) -> Transformable:
    return value.substitute_parameters(resolver)


def remap_qubits(value: Transformable, mapping: Mapping[int, int]) -> Transformable:
    return value.remap_qubits(mapping)


def involved_qubits(value: Transformable) -> InvolvedQubits:
    return value.involved_qubits()


def unitary_matrix(value: Transformable) -> np.ndarray:
    """Unitary of a gate or of a circuit made of gates.

    Raises:
        MatrixEvaluationError: ``value`` is (or contains) a non-gate operation.
    """
    if isinstance(value, Circuit):
        return value.unitary_matrix()
    if not isinstance(value, GateOperation):
        raise MatrixEvaluationError(f"{value.hqslang} has no unitary matrix")
    return value.unitary_matrix()


def decompose(operation: Operation) -> Circuit:
    """Elementary-gate circuit of a multi-qubit gate."""
    if not isinstance(operation, MultiQubitGate):
        raise DecompositionError(f"{operation.hqslang} has no decomposition")
    return operation.circuit()


def decompose_circuit(circuit: Circuit) -> Circuit:
    """Replace every multi-qubit gate by its decomposition, keep the rest in place."""
    result = Circuit()
    for op in circuit:
        if isinstance(op, MultiQubitGate):
            result += op.circuit()
        else:
            result.add(op)
    logger.debug(f"Decomposed circuit of {len(circuit)} into {len(result)} operations")
    return result
