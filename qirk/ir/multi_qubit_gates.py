"""
Multi-qubit gates and their decompositions.

Every gate here acts on an ordered tuple ``qubits``; the first entry is the
most significant factor of ``unitary_matrix()``. ``circuit()`` rewrites the
gate into single- and two-qubit gates from ``quantum_gates`` without adding
qubits. Parameters are copied into the emitted gates as they are, so
symbolic gates decompose into symbolic circuits.

MultiQubitCNOT uses an ancilla-free recursion. For n >= 4 qubits the target
is conjugated by Hadamards around a fully controlled phase,

    C^{n-1}X = H(t) · C^{n-1}P(π) · H(t)

and, with ``a`` the remaining controls, ``x`` the last control and ``t`` the
target (gates listed in circuit order),

    C^{m}P(φ)[a, x, t] = CP(φ/2)(x, t), C^{m-1}X(a -> x), CP(-φ/2)(x, t),
                         C^{m-1}X(a -> x), C^{m-1}P(φ/2)[a, t]

which is exact (phase φ/2 · t · (x - (x ⊕ a) + a) = φ · a · x · t).
"""
from typing import List, Sequence, Tuple

import numpy as np
from attrs import frozen, field

from .dtypes import SymbolicFloat
from .operation import (
    Operation,
    MultiQubitGate,
    qubits_field,
    parameter_field,
    parameters_field,
)
from .quantum_gates import (
    CNOT,
    ControlledPhaseShift,
    Hadamard,
    PauliX,
    PhaseShiftState1,
    RotateZ,
    SWAP,
    TGate,
)
from .utilities import bit_reversal_permutation


def _cnot_ladder(qubits: Sequence[int]) -> List[Operation]:
    return [CNOT(qubits[i], qubits[i + 1]) for i in range(len(qubits) - 1)]


@frozen
class MultiQubitMS(MultiQubitGate):
    """Mølmer-Sørensen gate exp(-i θ/2 X⊗X⊗...⊗X) on all ``qubits``."""
    qubits: Tuple[int, ...] = qubits_field()
    theta: SymbolicFloat = parameter_field()

    def _unitary_matrix(self):
        dim = 2 ** len(self.qubits)
        c, s = np.cos(self.theta / 2), np.sin(self.theta / 2)
        # X^{⊗n} sends |j⟩ to |dim-1-j⟩, i.e. the anti-diagonal
        return c * np.eye(dim, dtype=complex) - 1j * s * np.fliplr(np.eye(dim, dtype=complex))

    def _decompose(self):
        ladder = _cnot_ladder(self.qubits)
        basis_change = [Hadamard(q) for q in self.qubits]
        return (
            basis_change
            + ladder
            + [RotateZ(self.qubits[-1], self.theta)]
            + ladder[::-1]
            + basis_change
        )


@frozen
class MultiQubitZZ(MultiQubitGate):
    """Ising interaction exp(-i θ/2 Z⊗Z⊗...⊗Z) on all ``qubits``."""
    qubits: Tuple[int, ...] = qubits_field()
    theta: SymbolicFloat = parameter_field()

    def _unitary_matrix(self):
        dim = 2 ** len(self.qubits)
        parity = np.array([bin(j).count("1") % 2 for j in range(dim)])
        signs = 1 - 2 * parity
        return np.diag(np.exp(-0.5j * self.theta * signs)).astype(complex)

    def _decompose(self):
        ladder = _cnot_ladder(self.qubits)
        return ladder + [RotateZ(self.qubits[-1], self.theta)] + ladder[::-1]


def _toffoli(c0: int, c1: int, t: int) -> List[Operation]:
    return [
        Hadamard(t),
        CNOT(c1, t),
        PhaseShiftState1(t, -np.pi / 4),
        CNOT(c0, t),
        TGate(t),
        CNOT(c1, t),
        PhaseShiftState1(t, -np.pi / 4),
        CNOT(c0, t),
        TGate(c1),
        TGate(t),
        Hadamard(t),
        CNOT(c0, c1),
        TGate(c0),
        PhaseShiftState1(c1, -np.pi / 4),
        CNOT(c0, c1),
    ]


def multi_controlled_x(qubits: Sequence[int]) -> List[Operation]:
    """X on ``qubits[-1]`` controlled by all other ``qubits``.

    No ancillas are used, at the price of size: each extra control roughly
    triples the gate count (15, 39, 119, 359 gates for 3 to 6 qubits).
    """
    qubits = tuple(qubits)
    if len(qubits) == 1:
        return [PauliX(qubits[0])]
    if len(qubits) == 2:
        return [CNOT(qubits[0], qubits[1])]
    if len(qubits) == 3:
        return _toffoli(*qubits)
    target = qubits[-1]
    return [Hadamard(target)] + multi_controlled_phase(qubits, np.pi) + [Hadamard(target)]


def multi_controlled_phase(qubits: Sequence[int], phase: float) -> List[Operation]:
    """Phase e^{i·phase} on the state where all ``qubits`` are |1⟩."""
    qubits = tuple(qubits)
    if len(qubits) == 1:
        return [PhaseShiftState1(qubits[0], phase)]
    if len(qubits) == 2:
        return [ControlledPhaseShift(qubits[0], qubits[1], phase)]
    rest, last_control, target = qubits[:-2], qubits[-2], qubits[-1]
    flip = multi_controlled_x(rest + (last_control,))
    return (
        [ControlledPhaseShift(last_control, target, phase / 2)]
        + flip
        + [ControlledPhaseShift(last_control, target, -phase / 2)]
        + flip
        + multi_controlled_phase(rest + (target,), phase / 2)
    )


@frozen
class MultiQubitCNOT(MultiQubitGate):
    """X on the last qubit, controlled by every other qubit."""
    qubits: Tuple[int, ...] = qubits_field()

    def _unitary_matrix(self):
        dim = 2 ** len(self.qubits)
        matrix = np.eye(dim, dtype=complex)
        matrix[[dim - 2, dim - 1]] = matrix[[dim - 1, dim - 2]]
        return matrix

    def _decompose(self):
        return multi_controlled_x(self.qubits)


@frozen
class QFT(MultiQubitGate):
    """Quantum Fourier transform on ``qubits`` (first qubit most significant).

    Without ``swaps`` the output register is left bit-reversed; ``inverse``
    builds the adjoint.
    """
    qubits: Tuple[int, ...] = qubits_field()
    swaps: bool = field(converter=bool)
    inverse: bool = field(converter=bool)

    def _unitary_matrix(self):
        n = len(self.qubits)
        dim = 2 ** n
        k = np.arange(dim)
        dft = np.exp(2j * np.pi * np.outer(k, k) / dim) / np.sqrt(dim)
        if self.inverse:
            dft = dft.conj()
        if self.swaps:
            return dft
        reversal = bit_reversal_permutation(n)
        return dft[:, reversal] if self.inverse else dft[reversal, :]

    def _decompose(self):
        qubits = self.qubits
        n = len(qubits)
        operations: List[Operation] = []
        for i, target in enumerate(qubits):
            operations.append(Hadamard(target))
            for j in range(i + 1, n):
                operations.append(ControlledPhaseShift(qubits[j], target, np.pi / 2 ** (j - i)))
        swap_gates = [SWAP(qubits[i], qubits[n - 1 - i]) for i in range(n // 2)]

        if not self.inverse:
            return operations + swap_gates if self.swaps else operations

        adjoint = [
            ControlledPhaseShift(op.control, op.target, -op.theta)
            if isinstance(op, ControlledPhaseShift) else op
            for op in reversed(operations)
        ]
        return swap_gates + adjoint if self.swaps else adjoint


@frozen
class CallDefinedGate(Operation):
    """Call of a gate defined elsewhere by name, with free parameters.

    Only the call is modelled: its parameters substitute and its qubits remap,
    but it has neither a matrix nor a decomposition here.
    """
    _tag_path = ("Operation", "MultiQubitGateOperation")

    gate_name: str = field(converter=str)
    qubits: Tuple[int, ...] = qubits_field()
    free_parameters: Tuple[SymbolicFloat, ...] = parameters_field(factory=tuple)
