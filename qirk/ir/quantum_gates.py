
import numpy as np
from attrs import frozen

from .dtypes import SymbolicFloat
from .operation import (
    SingleQubitGate,
    RotationGate,
    TwoQubitGate,
    qubit_field,
    parameter_field,
)


# ---------------------------------------------------------------------------
#  Single-qubit gates
# ---------------------------------------------------------------------------

@frozen
class RotateX(RotationGate):
    """Rotation around the x-axis, exp(-i θ/2 X)."""
    qubit: int = qubit_field()
    theta: SymbolicFloat = parameter_field()

    def _unitary_matrix(self):
        c, s = np.cos(self.theta / 2), np.sin(self.theta / 2)
        return np.array([[c, -1j * s], [-1j * s, c]], dtype=complex)


@frozen
class RotateY(RotationGate):
    """Rotation around the y-axis, exp(-i θ/2 Y)."""
    qubit: int = qubit_field()
    theta: SymbolicFloat = parameter_field()

    def _unitary_matrix(self):
        c, s = np.cos(self.theta / 2), np.sin(self.theta / 2)
        return np.array([[c, -s], [s, c]], dtype=complex)


@frozen
class RotateZ(RotationGate):
    """Rotation around the z-axis, exp(-i θ/2 Z)."""
    qubit: int = qubit_field()
    theta: SymbolicFloat = parameter_field()

    def _unitary_matrix(self):
        return np.array(
            [[np.exp(-0.5j * self.theta), 0.0], [0.0, np.exp(0.5j * self.theta)]],
            dtype=complex,
        )


@frozen
class PhaseShiftState1(SingleQubitGate):
    """Phase e^{iθ} on |1⟩, identity on |0⟩."""
    qubit: int = qubit_field()
    theta: SymbolicFloat = parameter_field()

    def _unitary_matrix(self):
        return np.array([[1.0, 0.0], [0.0, np.exp(1j * self.theta)]], dtype=complex)


@frozen
class Hadamard(SingleQubitGate):
    qubit: int = qubit_field()

    def _unitary_matrix(self):
        return 1 / np.sqrt(2) * np.array([[1.0, 1.0], [1.0, -1.0]], dtype=complex)


@frozen
class PauliX(SingleQubitGate):
    qubit: int = qubit_field()

    def _unitary_matrix(self):
        return np.array([[0.0, 1.0], [1.0, 0.0]], dtype=complex)


@frozen
class PauliY(SingleQubitGate):
    qubit: int = qubit_field()

    def _unitary_matrix(self):
        return np.array([[0.0, -1.0j], [1.0j, 0.0]], dtype=complex)


@frozen
class PauliZ(SingleQubitGate):
    qubit: int = qubit_field()

    def _unitary_matrix(self):
        return np.array([[1.0, 0.0], [0.0, -1.0]], dtype=complex)


@frozen
class SGate(SingleQubitGate):
    qubit: int = qubit_field()

    def _unitary_matrix(self):
        return np.array([[1.0, 0.0], [0.0, 1.0j]], dtype=complex)


@frozen
class TGate(SingleQubitGate):
    qubit: int = qubit_field()

    def _unitary_matrix(self):
        return np.array([[1.0, 0.0], [0.0, np.exp(1j * np.pi / 4)]], dtype=complex)


@frozen
class SqrtPauliX(SingleQubitGate):
    """Square root of X as the rotation RotateX(π/2)."""
    qubit: int = qubit_field()

    def _unitary_matrix(self):
        c = np.cos(np.pi / 4)
        return np.array([[c, -1j * c], [-1j * c, c]], dtype=complex)


@frozen
class InvSqrtPauliX(SingleQubitGate):
    qubit: int = qubit_field()

    def _unitary_matrix(self):
        c = np.cos(np.pi / 4)
        return np.array([[c, 1j * c], [1j * c, c]], dtype=complex)


# ---------------------------------------------------------------------------
#  Two-qubit gates (control is the most significant factor)
# ---------------------------------------------------------------------------

@frozen
class CNOT(TwoQubitGate):
    control: int = qubit_field()
    target: int = qubit_field()

    def _unitary_matrix(self):
        return np.array(
            [
                [1.0, 0.0, 0.0, 0.0],
                [0.0, 1.0, 0.0, 0.0],
                [0.0, 0.0, 0.0, 1.0],
                [0.0, 0.0, 1.0, 0.0],
            ],
            dtype=complex,
        )


@frozen
class ControlledPauliZ(TwoQubitGate):
    control: int = qubit_field()
    target: int = qubit_field()

    def _unitary_matrix(self):
        return np.diag([1.0, 1.0, 1.0, -1.0]).astype(complex)


@frozen
class ControlledPhaseShift(TwoQubitGate):
    """Phase e^{iθ} on |11⟩ (diag = [1,1,1,e^{iθ}])."""
    control: int = qubit_field()
    target: int = qubit_field()
    theta: SymbolicFloat = parameter_field()

    def _unitary_matrix(self):
        return np.diag([1.0, 1.0, 1.0, np.exp(1j * self.theta)]).astype(complex)


@frozen
class SWAP(TwoQubitGate):
    control: int = qubit_field()
    target: int = qubit_field()

    def _unitary_matrix(self):
        return np.array(
            [
                [1.0, 0.0, 0.0, 0.0],
                [0.0, 0.0, 1.0, 0.0],
                [0.0, 1.0, 0.0, 0.0],
                [0.0, 0.0, 0.0, 1.0],
            ],
            dtype=complex,
        )
