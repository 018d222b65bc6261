import json

import pytest

from qirk.ir.serialization import OPERATIONS, operation_from_dict
from qirk.ir.quantum import Circuit
from qirk.ir.register import ClassicalRegister
from qirk.ir.quantum_gates import (
    RotateX,
    RotateY,
    RotateZ,
    PhaseShiftState1,
    Hadamard,
    PauliX,
    PauliY,
    PauliZ,
    SGate,
    TGate,
    SqrtPauliX,
    InvSqrtPauliX,
    CNOT,
    ControlledPauliZ,
    ControlledPhaseShift,
    SWAP,
)
from qirk.ir.multi_qubit_gates import MultiQubitMS, MultiQubitZZ, MultiQubitCNOT, QFT, CallDefinedGate
from qirk.ir.pragmas import (
    PragmaGlobalPhase,
    PragmaSetNumberOfMeasurements,
    PragmaRepeatedMeasurement,
    PragmaActiveReset,
    MeasureQubit,
    DefinitionBit,
    DefinitionFloat,
)


ALL_VARIANTS = [
    RotateX(0, "theta"),
    RotateY(1, 0.5),
    RotateZ(2, "2*theta + phi"),
    PhaseShiftState1(0, -0.25),
    Hadamard(0),
    PauliX(1),
    PauliY(2),
    PauliZ(3),
    SGate(0),
    TGate(0),
    SqrtPauliX(1),
    InvSqrtPauliX(1),
    CNOT(0, 1),
    ControlledPauliZ(1, 2),
    ControlledPhaseShift(2, 0, "phi"),
    SWAP(3, 1),
    MultiQubitMS([0, 1, 2], 1.0),
    MultiQubitZZ([2, 0], "theta"),
    MultiQubitCNOT([0, 1, 2, 3]),
    QFT([0, 1, 2], True, False),
    CallDefinedGate("custom", [1, 0], ["theta", 0.5]),
    PragmaGlobalPhase("phi"),
    PragmaSetNumberOfMeasurements(100, "ro"),
    PragmaRepeatedMeasurement("ro", 10, {0: 1, 1: 0}),
    PragmaRepeatedMeasurement("ro", 10),
    PragmaActiveReset(2),
    MeasureQubit(0, "ro", 1),
    DefinitionBit("ro", 2, True),
    DefinitionFloat("out", 1, False),
]


def test_registry_is_complete():
    assert {type(op).__name__ for op in ALL_VARIANTS} == set(OPERATIONS)


@pytest.mark.parametrize("op", ALL_VARIANTS, ids=lambda op: op.hqslang)
def test_json_round_trip(op):
    blob = json.loads(json.dumps(op.to_dict()))
    assert blob["hqslang"] == op.hqslang
    restored = operation_from_dict(blob)
    assert restored == op
    assert type(restored) is type(op)


def test_record_layout():
    assert MultiQubitZZ([2, 0], "theta").to_dict() == {"hqslang": "MultiQubitZZ", "qubits": [2, 0], "theta": "theta"}
    assert QFT([0, 1], True, False).to_dict() == {"hqslang": "QFT", "qubits": [0, 1], "swaps": True, "inverse": False}
    assert PragmaRepeatedMeasurement("ro", 10, {0: 1}).to_dict() == {
        "hqslang": "PragmaRepeatedMeasurement",
        "readout": "ro",
        "number_measurements": 10,
        "qubit_mapping": {0: 1},
    }


def test_from_dict_on_wrong_class():
    with pytest.raises(ValueError):
        RotateX.from_dict(RotateY(0, 1.0).to_dict())


@pytest.mark.parametrize("blob", [{"hqslang": "Toffoli", "qubits": [0, 1, 2]}, {"qubit": 0}])
def test_unknown_records(blob):
    with pytest.raises(ValueError):
        operation_from_dict(blob)


def test_circuit_round_trip():
    circuit = Circuit(ALL_VARIANTS)
    blob = json.loads(json.dumps(circuit.to_dict()))
    assert list(blob) == ["operations"]
    assert Circuit.from_dict(blob) == circuit


def test_register_round_trip():
    register = ClassicalRegister(
        constant_circuit=Circuit([RotateX(0, "theta2")]),
        circuits=[Circuit([RotateZ(0, "theta"), MeasureQubit(0, "ro", 0)]), Circuit()],
    )
    blob = json.loads(json.dumps(register.to_dict()))
    assert ClassicalRegister.from_dict(blob) == register

    empty = ClassicalRegister()
    assert empty.to_dict() == {"constant_circuit": None, "circuits": []}
    assert ClassicalRegister.from_dict(empty.to_dict()) == empty


def test_record_with_code_is_rejected_without_running_it(tmp_path):
    marker = tmp_path / "marker"
    blob = {
        "hqslang": "RotateZ",
        "qubit": 0,
        "theta": f"__import__('pathlib').Path({str(marker)!r}).touch() or theta",
    }
    with pytest.raises(ValueError):
        operation_from_dict(blob)
    assert not marker.exists()


@pytest.mark.parametrize("theta", ["2*gamma", "E", "gamma + beta"])
def test_sympy_names_round_trip_as_symbols(theta):
    op = RotateZ(0, theta)
    restored = operation_from_dict(json.loads(json.dumps(op.to_dict())))
    assert restored == op
    assert restored.is_parametrized()
